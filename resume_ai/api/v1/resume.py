import json
import logging
import uuid

from fastapi import APIRouter, Body, Depends, File, Header, Request, UploadFile, status
from fastapi.responses import JSONResponse

from resume_ai.api.deps import get_resume_service
from resume_ai.core.config import settings
from resume_ai.core.rate_limit import rate_limit
from resume_ai.parsing.parse import extract_resume_text, is_supported_resume_file
from resume_ai.schemas.resume import (
    QueryRequest,
    QueryResponse,
    SessionClearedResponse,
    SuggestionsResponse,
    UploadResponse,
)
from resume_ai.services.resume_service import ANSWER_ERROR_MESSAGE, ResumeService

logger = logging.getLogger(__name__)

router = APIRouter()

SUGGESTIONS = SuggestionsResponse(
    interview=[
        "How should I answer 'Tell me about yourself'?",
        "What are my key strengths for a senior Java role?",
        "Help me prepare for 'Why should we hire you?'",
        "What's my biggest achievement to highlight?",
    ],
    analysis=[
        "What are my strongest technical skills?",
        "How many years of Java experience do I have?",
        "What domains have I worked in?",
        "Summarize my leadership experience",
    ],
    matching=[
        "Rate my fit for a Senior Backend Engineer role",
        "What skills am I missing for cloud-native development?",
        "Compare my experience to a typical Principal Engineer",
        "What certifications would strengthen my profile?",
    ],
)


def _upload_json(status_code: int, body: UploadResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True, exclude_none=True))


def _query_json(status_code: int, body: QueryResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True, exclude_none=True))


async def _read_limited(file: UploadFile, max_bytes: int) -> bytes | None:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/upload", response_model=UploadResponse, response_model_exclude_none=True)
@rate_limit()
async def upload_resume(
    request: Request,
    file: UploadFile = File(...),
    service: ResumeService = Depends(get_resume_service),
):
    _ = request
    filename = file.filename or ""
    logger.info(json.dumps({"event": "resume_upload_received", "filename": filename}))

    if not is_supported_resume_file(filename):
        return _upload_json(
            status.HTTP_400_BAD_REQUEST,
            UploadResponse.failure("Invalid file. Please upload a PDF or DOCX file."),
        )

    try:
        content = await _read_limited(file, settings.max_upload_bytes)
        if content is None:
            return _upload_json(
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                UploadResponse.failure(
                    f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB."
                ),
            )
        if not content:
            return _upload_json(
                status.HTTP_400_BAD_REQUEST,
                UploadResponse.failure("Invalid file. Please upload a PDF or DOCX file."),
            )

        try:
            parsed = extract_resume_text(filename=filename, content=content)
        except ValueError as exc:
            logger.warning("resume_extraction_failed filename=%s: %s", filename, exc)
            parsed = None

        if parsed is None or parsed.is_empty:
            return _upload_json(
                status.HTTP_400_BAD_REQUEST,
                UploadResponse.failure(
                    "Could not extract text from the file. Please ensure it's a valid resume."
                ),
            )

        session_id = str(uuid.uuid4())
        summary = await service.store_resume(session_id, parsed.text)
        logger.info(
            json.dumps(
                {
                    "event": "resume_uploaded",
                    "source_type": parsed.source_type,
                    "resume_len": len(parsed.text),
                    "summary_outcome": summary.outcome,
                }
            )
        )
        return _upload_json(
            status.HTTP_200_OK,
            UploadResponse.ok(
                session_id=session_id,
                message="Resume uploaded successfully!",
                resume_length=len(parsed.text),
                summary=summary.text,
            ),
        )
    except Exception:
        logger.exception(json.dumps({"event": "resume_upload_error", "filename": filename}))
        return _upload_json(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            UploadResponse.failure("Error processing resume. Please try again."),
        )


@router.post("/query", response_model=QueryResponse, response_model_exclude_none=True)
@rate_limit()
async def query_resume(
    request: Request,
    payload: QueryRequest | None = Body(default=None),
    x_session_id: str | None = Header(default=None, alias="X-Session-ID"),
    service: ResumeService = Depends(get_resume_service),
):
    _ = request
    question = ((payload.question if payload else None) or "").strip()
    if not question:
        return _query_json(status.HTTP_400_BAD_REQUEST, QueryResponse.failure("Question cannot be empty"))

    session_id = x_session_id or ""
    if not session_id:
        return _query_json(
            status.HTTP_400_BAD_REQUEST,
            QueryResponse.failure("Session ID required. Please upload your resume first."),
        )

    try:
        if not service.has_resume(session_id):
            return _query_json(
                status.HTTP_400_BAD_REQUEST,
                QueryResponse.failure("No resume found for this session. Please upload your resume first."),
            )

        result = await service.answer_question(session_id, question, payload.context if payload else None)
        return _query_json(status.HTTP_200_OK, QueryResponse.ok(result.text, session_id))
    except Exception:
        logger.exception(json.dumps({"event": "resume_query_error"}))
        # Still 200 so the client always has a JSON body to render.
        return _query_json(status.HTTP_200_OK, QueryResponse.failure(ANSWER_ERROR_MESSAGE))


@router.get("/suggestions", response_model=SuggestionsResponse)
async def get_suggestions():
    return SUGGESTIONS


@router.delete("/session/{session_id}", response_model=SessionClearedResponse)
async def clear_session(session_id: str, service: ResumeService = Depends(get_resume_service)):
    service.clear_session(session_id)
    return SessionClearedResponse(message="Session cleared successfully")
