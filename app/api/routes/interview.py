from typing import List, Literal, Optional

from fastapi import APIRouter, File, HTTPException, UploadFile

from app.core.logger import logger
from app.schemas.interview import Interview, InterviewSession
from app.schemas.requests import InterviewCreate, RespondRequest
from app.services import interview_service
from app.services.storage import storage

router = APIRouter(prefix="/api/interviews", tags=["interviews"])

Status = Literal["pending", "active", "completed", "cancelled"]


@router.post("", response_model=Interview)
async def create_interview(req: InterviewCreate):
    return storage.create_interview(req)


@router.get("", response_model=List[Interview])
async def list_interviews(status: Optional[Status] = None):
    if status:
        return storage.list_interviews_by_status(status)
    return storage.list_interviews()


@router.get("/{interview_id}", response_model=Interview)
async def get_interview(interview_id: int):
    interview = storage.get_interview(interview_id)
    if not interview:
        raise HTTPException(status_code=404, detail="Interview not found")
    return interview


@router.get("/{interview_id}/session", response_model=InterviewSession)
async def get_session(interview_id: int):
    session = storage.get_session_by_interview_id(interview_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.post("/{interview_id}/start")
async def start_interview(interview_id: int):
    try:
        return await interview_service.start_interview(interview_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error starting interview {interview_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to start interview")


@router.post("/{interview_id}/respond")
async def respond(interview_id: int, req: RespondRequest):
    try:
        return await interview_service.submit_response(interview_id, req.answer)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error processing response for interview {interview_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to process response")


@router.post("/{interview_id}/respond/audio")
async def respond_audio(interview_id: int, file: UploadFile = File(...)):
    audio = await file.read()
    try:
        return await interview_service.submit_audio_response(
            interview_id,
            audio,
            filename=file.filename or "audio.wav",
            content_type=file.content_type or "audio/wav",
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error processing audio response for interview {interview_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to process response")


@router.post("/{interview_id}/end")
async def end_interview(interview_id: int):
    try:
        return await interview_service.end_interview(interview_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error ending interview {interview_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to end interview")


@router.post("/{interview_id}/cancel", response_model=Interview)
async def cancel_interview(interview_id: int):
    return await interview_service.cancel_interview(interview_id)
