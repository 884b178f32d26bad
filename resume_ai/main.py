import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from resume_ai.ai.factory import get_ai_client
from resume_ai.api.v1.health import router as health_router
from resume_ai.api.v1.resume import router as resume_router
from resume_ai.core.rate_limit import limiter
from resume_ai.core.config import settings
from resume_ai.core.lifespan import lifespan
from resume_ai.services.resume_service import ResumeService
from resume_ai.sessions.store import SessionStore

logging.basicConfig(level=settings.log_level, format="%(message)s")
# httpx logs full request URLs at INFO, and the Gemini key travels in the query string.
logging.getLogger("httpx").setLevel(logging.WARNING)
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="Resume AI API", version=settings.app_version, lifespan=lifespan)
app.state.resume_service = ResumeService(
    store=SessionStore(shards=settings.session_store_shards),
    llm=get_ai_client(),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_origin_regex=(settings.cors_allow_origin_regex or "").strip() or None,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/api/resume", tags=["Health"])
app.include_router(resume_router, prefix="/api/resume", tags=["Resume"])
