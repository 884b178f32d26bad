from __future__ import annotations

import hashlib
import json
import logging
import time

from resume_ai.ai.prompt import build_answer_prompt, build_summary_prompt
from resume_ai.ai.types import AIClient, GenerationResult
from resume_ai.sessions.store import SessionStore

logger = logging.getLogger(__name__)

UPLOAD_FALLBACK_MESSAGE = "Resume uploaded successfully. Ready to answer your questions!"
NO_SESSION_MESSAGE = "Please upload your resume first before asking questions."
ANSWER_ERROR_MESSAGE = "I encountered an error processing your question. Please try again."


def _short_hash(value: str | None) -> str:
    normalized = (value or "").strip()
    if not normalized:
        return ""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:12]


class ResumeService:
    def __init__(self, store: SessionStore, llm: AIClient):
        self._store = store
        self._llm = llm

    async def store_resume(self, session_id: str, resume_text: str) -> GenerationResult:
        self._store.put(session_id, resume_text)
        logger.info(
            json.dumps(
                {
                    "event": "resume_stored",
                    "session_hash": _short_hash(session_id),
                    "resume_len": len(resume_text),
                }
            )
        )

        try:
            return await self._llm.generate(build_summary_prompt(resume_text))
        except Exception:
            logger.exception(
                json.dumps({"event": "resume_summary_failed", "session_hash": _short_hash(session_id)})
            )
            return GenerationResult(text=UPLOAD_FALLBACK_MESSAGE, outcome="recovered")

    async def answer_question(
        self,
        session_id: str,
        question: str,
        context: str | None = None,
    ) -> GenerationResult:
        resume_text = self._store.get(session_id)
        if resume_text is None:
            return GenerationResult(text=NO_SESSION_MESSAGE, outcome="no_session")

        started_at = time.perf_counter()
        prompt = build_answer_prompt(question, resume_text, context)
        try:
            result = await self._llm.generate(prompt)
        except Exception:
            logger.exception(
                json.dumps(
                    {
                        "event": "resume_query_failed",
                        "session_hash": _short_hash(session_id),
                        "duration_ms": int((time.perf_counter() - started_at) * 1000),
                    }
                )
            )
            return GenerationResult(text=ANSWER_ERROR_MESSAGE, outcome="recovered")

        logger.info(
            json.dumps(
                {
                    "event": "resume_query",
                    "session_hash": _short_hash(session_id),
                    "question_hash": _short_hash(question),
                    "question_len": len(question),
                    "has_context": bool(context),
                    "outcome": result.outcome,
                    "duration_ms": int((time.perf_counter() - started_at) * 1000),
                }
            )
        )
        return result

    def has_resume(self, session_id: str) -> bool:
        return self._store.has(session_id)

    def clear_session(self, session_id: str) -> None:
        self._store.remove(session_id)
        logger.info(json.dumps({"event": "session_cleared", "session_hash": _short_hash(session_id)}))

    def session_count(self) -> int:
        return len(self._store)

    def purge_expired(self, max_age_seconds: float) -> int:
        return self._store.purge_expired(max_age_seconds)
