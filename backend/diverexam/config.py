from dotenv import load_dotenv
import os

load_dotenv()

_DEFAULT_BANK_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "content", "question_banks.json")


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


class Settings:
    API_BASE_URL: str = os.getenv("EXAM_API_BASE_URL", "http://localhost:5000")
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("EXAM_HTTP_TIMEOUT_SECONDS", "10"))
    # the one exam whose questions live behind the HTTP question endpoint
    REMOTE_EXAM_SLUG: str = os.getenv("REMOTE_EXAM_SLUG", "client-representative")
    QUESTION_BANK_PATH: str = os.getenv("QUESTION_BANK_PATH", _DEFAULT_BANK_PATH)
    TICK_SECONDS: float = float(os.getenv("EXAM_TICK_SECONDS", "1.0"))
    # submitted sessions stay readable this long, then the registry drops them
    SESSION_RETENTION_SECONDS: float = float(os.getenv("SESSION_RETENTION_SECONDS", "900"))
    VOICE_INPUT_ENABLED: bool = _as_bool(os.getenv("VOICE_INPUT_ENABLED"))
    DEFAULT_USER_ID: str = os.getenv("EXAM_USER_ID", "current-user")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000",
        ).split(",")
        if o.strip()
    ]


settings = Settings()
