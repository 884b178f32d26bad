from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QueryRequest(_CamelModel):
    question: str | None = None
    context: str | None = None


class QueryResponse(_CamelModel):
    success: bool
    answer: str | None = None
    error: str | None = None
    session_id: str | None = None

    @classmethod
    def ok(cls, answer: str, session_id: str) -> "QueryResponse":
        return cls(success=True, answer=answer, session_id=session_id)

    @classmethod
    def failure(cls, error: str) -> "QueryResponse":
        return cls(success=False, error=error)


class UploadResponse(_CamelModel):
    success: bool
    message: str
    session_id: str | None = None
    resume_length: int | None = None
    summary: str | None = None

    @classmethod
    def ok(cls, session_id: str, message: str, resume_length: int, summary: str) -> "UploadResponse":
        return cls(
            success=True,
            message=message,
            session_id=session_id,
            resume_length=resume_length,
            summary=summary,
        )

    @classmethod
    def failure(cls, message: str) -> "UploadResponse":
        return cls(success=False, message=message)


class SuggestionsResponse(BaseModel):
    interview: list[str]
    analysis: list[str]
    matching: list[str]


class HealthResponse(_CamelModel):
    status: str
    service: str
    version: str
    active_sessions: int


class SessionClearedResponse(BaseModel):
    message: str
