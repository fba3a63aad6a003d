import os

from dotenv import load_dotenv

# Load .env from the working directory so local development settings are picked up
load_dotenv(override=False)


def _env_bool(name, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    MONGO_URI = os.environ.get("MONGO_URI", "mongodb://localhost:27017/?directConnection=true")
    MONGO_DB_NAME = os.environ.get("MONGO_DB_NAME", "task_tracker")
    MONGO_TIMEOUT_MS = int(os.environ.get("MONGO_TIMEOUT_MS", "2000"))

    # OpenAI-compatible endpoint used for enhancement and transcription.
    # The key is only checked when the client is first needed.
    AI_API_KEY = os.environ.get("AI_API_KEY") or os.environ.get("OPENAI_API_KEY")
    AI_BASE_URL = os.environ.get("AI_BASE_URL", "https://api.z.ai/api/paas/v4")
    AI_CHAT_MODEL = os.environ.get("AI_CHAT_MODEL", "glm-4.5-flash")
    AI_TRANSCRIBE_MODEL = os.environ.get("AI_TRANSCRIBE_MODEL", "glm-asr")
    AI_DISABLE_THINKING = _env_bool("AI_DISABLE_THINKING", True)
    AI_CONNECT_TIMEOUT = _env_float("AI_CONNECT_TIMEOUT", 5.0)
    AI_READ_TIMEOUT = _env_float("AI_READ_TIMEOUT", 60.0)

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    ENV = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"
    JSON_SORT_KEYS = False
