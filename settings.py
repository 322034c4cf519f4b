# settings.py
"""
Viewer settings.
"""

import os
from dataclasses import dataclass

# Load .env file
from dotenv import load_dotenv
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Viewer configuration."""

    # Cut backend
    backend_url: str = os.getenv("CUT_BACKEND_URL", "http://localhost:3000")
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "10"))

    # Viewer server
    viewer_host: str = os.getenv("VIEWER_HOST", "127.0.0.1")
    viewer_port: int = int(os.getenv("VIEWER_PORT", "5000"))

    # Seconds a request thread waits on the UI loop
    call_timeout: float = float(os.getenv("CALL_TIMEOUT", "30"))

    # Hover previews: drop responses that arrive after their hover ended
    stale_preview_guard: bool = _flag("STALE_PREVIEW_GUARD", "false")

    # Rendering
    initial_scale: float = float(os.getenv("INITIAL_SCALE", "0.4"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
