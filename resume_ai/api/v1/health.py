from fastapi import APIRouter, Depends

from resume_ai.api.deps import get_resume_service
from resume_ai.core.config import settings
from resume_ai.schemas.resume import HealthResponse
from resume_ai.services.resume_service import ResumeService

router = APIRouter()

@router.get("/health", response_model=HealthResponse, summary="Health Check", description="Check the health status of the application.")
async def health_check(service: ResumeService = Depends(get_resume_service)):
    return HealthResponse(
        status="UP",
        service=settings.app_name,
        version=settings.app_version,
        active_sessions=service.session_count(),
    )
