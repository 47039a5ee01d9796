import httpx

from app.core.config import settings
from app.core.errors import VendorError
from app.core.logger import logger
from app.interview_templates import DEFAULT_LANGUAGE, speaker_for


def _client(timeout=None):
    return httpx.AsyncClient(timeout=timeout or settings.HTTP_TIMEOUT)


def _headers(json_body=True):
    headers = {"api-subscription-key": settings.SARVAM_API_KEY or ""}
    if json_body:
        headers["Content-Type"] = "application/json"
    return headers


def _check(response, what):
    if response.status_code != 200:
        logger.error(f"Sarvam {what} error {response.status_code}: {response.text[:500]}")
        raise VendorError("Sarvam", response.status_code, response.text)
    try:
        data = response.json()
    except ValueError:
        logger.error(f"Sarvam {what} returned non-JSON body: {response.text[:200]}")
        raise VendorError("Sarvam", 502, f"{what} response was not JSON")
    if not isinstance(data, dict):
        raise VendorError("Sarvam", 502, f"{what} response was not a JSON object")
    return data


async def text_to_speech(text, language):
    """Returns base64-encoded WAV audio."""
    async with _client() as client:
        response = await client.post(
            f"{settings.SARVAM_BASE_URL}/text-to-speech",
            headers=_headers(),
            json={
                "inputs": [text],
                "target_language_code": language,
                "speaker": speaker_for(language),
                "model": settings.SARVAM_TTS_MODEL,
            }
        )
    data = _check(response, "TTS")
    audios = data.get("audios") or []
    if not audios:
        raise VendorError("Sarvam", 502, "TTS response contained no audio")
    return audios[0]


async def speech_to_text(audio_bytes, language, filename="audio.wav", content_type="audio/wav"):
    async with _client(timeout=90.0) as client:
        response = await client.post(
            f"{settings.SARVAM_BASE_URL}/speech-to-text",
            headers=_headers(json_body=False),
            files={"file": (filename, audio_bytes, content_type)},
            data={"model": settings.SARVAM_STT_MODEL, "language_code": language},
        )
    data = _check(response, "STT")
    return {
        "transcript": (data.get("transcript") or "").strip(),
        "language_code": data.get("language_code") or language,
        "confidence": data.get("confidence"),
    }


async def translate_text(text, source_language, target_language):
    async with _client() as client:
        response = await client.post(
            f"{settings.SARVAM_BASE_URL}/translate",
            headers=_headers(),
            json={
                "input": text,
                "source_language_code": source_language,
                "target_language_code": target_language,
                "model": settings.SARVAM_TRANSLATE_MODEL,
            }
        )
    translated = _check(response, "Translate").get("translated_text")
    if not translated:
        raise VendorError("Sarvam", 502, "Translate response contained no text")
    return translated


async def detect_language(text):
    """Language code of `text`, falling back to Hindi when detection fails."""
    try:
        async with _client() as client:
            response = await client.post(
                f"{settings.SARVAM_BASE_URL}/text-lid",
                headers=_headers(),
                json={"input": text}
            )
        data = _check(response, "language detection")
        return data.get("language_code") or DEFAULT_LANGUAGE
    except (VendorError, httpx.HTTPError, ValueError, KeyError, IndexError) as e:
        logger.warning(f"Language detection failed, defaulting to {DEFAULT_LANGUAGE}: {e}")
        return DEFAULT_LANGUAGE


async def validate_connection():
    if not settings.SARVAM_API_KEY:
        return False
    try:
        await text_to_speech("Test", DEFAULT_LANGUAGE)
        return True
    except (VendorError, httpx.HTTPError, ValueError, KeyError, IndexError) as e:
        logger.warning(f"Sarvam connection validation failed: {e}")
        return False
