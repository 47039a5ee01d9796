import httpx
from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from app.core.errors import VendorError
from app.core.logger import logger
from app.interview_templates import DEFAULT_LANGUAGE, LANGUAGE_CODES
from app.schemas.requests import DetectLanguageRequest, TranslateRequest, TTSRequest
from app.services import llm_service, sarvam_service

router = APIRouter(prefix="/api/speech", tags=["speech"])

@router.post("/tts")
async def generate_tts(req: TTSRequest):
    try:
        audio_b64 = await sarvam_service.text_to_speech(req.text, req.language)
        return {"audio": audio_b64, "language": req.language, "format": "wav"}
    except Exception as e:
        logger.error(f"TTS Error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to synthesize speech")

@router.post("/stt")
async def transcribe(
    file: UploadFile = File(...),
    language: str = Form(DEFAULT_LANGUAGE)
):
    if language not in LANGUAGE_CODES:
        raise HTTPException(status_code=400, detail=f"Unsupported language: {language}")

    audio = await file.read()
    if not audio:
        raise HTTPException(status_code=400, detail="Empty audio upload")

    try:
        return await sarvam_service.speech_to_text(
            audio, language, file.filename or "audio.wav", file.content_type or "audio/wav"
        )
    except Exception as e:
        logger.error(f"STT Error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to transcribe audio")

@router.post("/translate")
async def translate(req: TranslateRequest):
    if req.source_language == req.target_language:
        return {"translatedText": req.text, "provider": "none"}
    try:
        translated = await sarvam_service.translate_text(req.text, req.source_language, req.target_language)
        return {"translatedText": translated, "provider": "sarvam"}
    except (VendorError, httpx.HTTPError) as e:
        if req.target_language != "en-IN":
            logger.error(f"Translate Error: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to translate text")
        logger.warning(f"Sarvam translation failed, falling back to OpenAI: {e}")

    translated = await llm_service.translate_to_english(req.text, req.source_language)
    return {"translatedText": translated, "provider": "openai"}

@router.post("/detect-language")
async def detect_language(req: DetectLanguageRequest):
    return {"languageCode": await sarvam_service.detect_language(req.text)}
