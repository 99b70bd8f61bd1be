from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_MODEL = "gemini-2.5-flash"


@dataclass(frozen=True)
class Settings:
    db_path: Path
    api_key: str
    model_name: str
    log_level: str

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            db_path=Path(os.environ.get("PAWPAL_DB_PATH", "pawpal.db")),
            api_key=os.environ.get("GOOGLE_API_KEY") or os.environ.get("API_KEY", ""),
            model_name=os.environ.get("PAWPAL_GEMINI_MODEL", DEFAULT_MODEL),
            log_level=os.environ.get("PAWPAL_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
