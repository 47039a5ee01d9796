import os
from dotenv import load_dotenv
from app.core.logger import logger

# Load .env
# Look next to the package (app), then the repository root, then the CWD
current_file = os.path.abspath(__file__)
core_dir = os.path.dirname(current_file)
app_dir = os.path.dirname(core_dir)
root_dir = os.path.dirname(app_dir)

_env_paths = [
    os.path.join(app_dir, '.env'),
    os.path.join(root_dir, '.env'),
    '.env',
]
loaded = False
for path in _env_paths:
    if os.path.exists(path):
        load_dotenv(path)
        logger.info(f"✅ Loaded .env from: {path}")
        loaded = True
        break

if not loaded:
    logger.warning("⚠️ No .env file found, relying on process environment")


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    APP_NAME = "Bank Sales Interview API"

    # --- OpenAI (question generation, scoring, final evaluation) ---
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")

    # --- Sarvam (speech + translation for Indian languages) ---
    SARVAM_API_KEY = os.getenv("SARVAM_API_KEY")
    SARVAM_BASE_URL = os.getenv("SARVAM_BASE_URL", "https://api.sarvam.ai")
    SARVAM_TTS_MODEL = "bulbul:v2"
    SARVAM_STT_MODEL = "saarika:v2.5"
    SARVAM_TRANSLATE_MODEL = "mayura:v1"

    # --- Vapi (voice calls) ---
    VAPI_API_KEY = os.getenv("VAPI_API_KEY")
    VAPI_BASE_URL = os.getenv("VAPI_BASE_URL", "https://api.vapi.ai")
    # Off by default: assistants and calls are simulated locally
    VAPI_LIVE_CALLS = _env_bool("VAPI_LIVE_CALLS")

    # --- Interview flow ---
    MAX_QUESTIONS = int(os.getenv("MAX_QUESTIONS", "10"))
    DEFAULT_INTERVIEW_SECONDS = int(os.getenv("DEFAULT_INTERVIEW_SECONDS", "300"))
    QUESTION_LEAD_MS = int(os.getenv("QUESTION_LEAD_MS", "30000"))

    HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "60"))

    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8000"))

settings = Settings()

for _name in ("OPENAI_API_KEY", "SARVAM_API_KEY", "VAPI_API_KEY"):
    if not getattr(settings, _name):
        logger.warning(f"{_name} is not set")
