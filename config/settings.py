import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from config/.env
BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    if not v:
        return default
    return v in {"1", "true", "yes", "y", "on"}


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    """
    Runtime settings, read from the environment when instantiated.

    POLL_MAX_ATTEMPTS * POLL_INTERVAL is the longest a caller waits on a
    job that never finishes (30 * 2s by default).
    """

    def __init__(self) -> None:
        self.EVERART_API_KEY: Optional[str] = os.getenv("EVERART_API_KEY") or None
        self.EVERART_API_URL: str = os.getenv("EVERART_API_URL", "https://api.everart.ai")
        self.EVERART_MODEL_ID: str = os.getenv("EVERART_MODEL_ID", "266497667515949056")

        self.REQUEST_TIMEOUT: float = _env_float("REQUEST_TIMEOUT", 30.0)  # seconds, per outbound call

        self.POLL_INTERVAL: float = max(0.0, _env_float("POLL_INTERVAL", 2.0))  # seconds
        self.POLL_MAX_ATTEMPTS: int = max(1, _env_int("POLL_MAX_ATTEMPTS", 30))
        self.STOP_ON_REMOTE_FAILURE: bool = _env_bool("STOP_ON_REMOTE_FAILURE", default=False)

        self.CORS_ALLOW_ORIGINS: List[str] = _env_list("CORS_ALLOW_ORIGINS", ["*"])
        self.LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").upper()


settings = Settings()
