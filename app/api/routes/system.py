import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logger import logger
from app.interview_templates import EXPERIENCE_LEVELS, INTERVIEW_TYPES, SUPPORTED_LANGUAGES
from app.schemas.interview import InterviewStats
from app.services import llm_service, sarvam_service
from app.services.storage import storage

router = APIRouter(prefix="/api", tags=["system"])

@router.get("/health")
async def health():
    try:
        sarvam_ok, openai_ok = await asyncio.gather(
            sarvam_service.validate_connection(),
            llm_service.validate_connection(),
        )
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}", exc_info=True)
        return JSONResponse(status_code=500, content={"status": "unhealthy", "error": "Health check failed"})

    return {
        "status": "healthy",
        "services": {
            # Vapi has no cheap probe; a configured key is as far as we check
            "vapi": bool(settings.VAPI_API_KEY) or not settings.VAPI_LIVE_CALLS,
            "sarvam": sarvam_ok,
            "openai": openai_ok,
        },
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

@router.get("/stats", response_model=InterviewStats)
async def get_stats():
    try:
        return storage.get_stats()
    except Exception as e:
        logger.error(f"Error computing stats: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get statistics")

@router.get("/languages")
async def get_languages():
    return {"languages": SUPPORTED_LANGUAGES}

@router.get("/interview-options")
async def get_interview_options():
    return {
        "interviewTypes": list(INTERVIEW_TYPES),
        "experienceLevels": list(EXPERIENCE_LEVELS),
    }
