"""Application settings loaded from environment variables via .env file."""

from pathlib import Path
import json
from typing import Annotated

from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings, NoDecode

REPO_ROOT = Path(__file__).resolve().parents[2]
BACKEND_DIR = Path(__file__).resolve().parents[1]


def _parse_origin_list(raw: str) -> list[str]:
    """Parse a JSON list or a comma separated string of origins."""
    value = raw.strip()
    if not value:
        return []
    if value.startswith("["):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, list):
            return [str(item).strip() for item in parsed if str(item).strip()]
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    app_name: str = "Showcase API"

    # CORS
    cors_origins: Annotated[list[str], NoDecode] = ["https://prodbybitmap.com"]

    # Logging
    log_level: str = "INFO"

    # Backend
    backend_host: str = "0.0.0.0"
    backend_port: int = 3030
    backend_reload: bool = False

    # Notification socket
    ws_path: str = "/ws"
    # Seconds a new connection may wait before sending its registration frame.
    ws_handshake_timeout_seconds: float = 10.0
    # Upper bound on a single delivery write; a peer that does not drain its
    # buffer within this window gets a failed delivery instead of a stall.
    ws_send_timeout_seconds: float = 5.0
    # Largest inbound frame uvicorn will accept.
    ws_max_message_bytes: int = 65536

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, value):
        if isinstance(value, str):
            return _parse_origin_list(value)
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        return str(value).strip().upper()

    model_config = ConfigDict(
        env_file=(str(REPO_ROOT / ".env"), str(BACKEND_DIR / ".env")),
        extra="ignore",
    )


settings = Settings()
