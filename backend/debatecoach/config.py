# debatecoach/config.py
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def _split_origins(raw: str) -> List[str]:
    if raw.strip() == "*":
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    """Runtime configuration, read from the environment (and a local .env)."""

    openai_api_key: Optional[str] = None
    chat_model: str = "gpt-4o-mini"
    transcribe_model: str = "whisper-1"
    host: str = "0.0.0.0"
    port: int = 3000
    tmp_dir: str = os.path.join(PACKAGE_DIR, "tmp")
    public_dir: str = os.path.join(PACKAGE_DIR, "public")
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    max_body_bytes: int = 2 * 1024 * 1024
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        defaults = cls()
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            chat_model=os.getenv("CHAT_MODEL", defaults.chat_model),
            transcribe_model=os.getenv("TRANSCRIBE_MODEL", defaults.transcribe_model),
            host=os.getenv("HOST", defaults.host),
            port=int(os.getenv("PORT", defaults.port)),
            tmp_dir=os.getenv("TMP_DIR", defaults.tmp_dir),
            public_dir=os.getenv("PUBLIC_DIR", defaults.public_dir),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")),
            max_body_bytes=int(os.getenv("MAX_BODY_BYTES", defaults.max_body_bytes)),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
