"""
Runtime configuration for the Ayewam entry points.

Settings come from environment variables, optionally loaded from a .env file.
"""

import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .data.catalog import SEED_FILE

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    """Resolved runtime settings."""
    data_dir: str = "data"
    seed_file: Path = SEED_FILE
    log_level: str = "INFO"
    log_file: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 5000


def load_settings() -> Settings:
    """Load settings from the environment (and .env, if present)."""
    load_dotenv()

    log_file = os.environ.get("AYEWAM_LOG_FILE") or None
    seed_file = os.environ.get("AYEWAM_SEED_FILE")

    return Settings(
        data_dir=os.environ.get("AYEWAM_DATA_DIR", "data"),
        seed_file=Path(seed_file) if seed_file else SEED_FILE,
        log_level=os.environ.get("AYEWAM_LOG_LEVEL", "INFO").upper(),
        log_file=log_file,
        host=os.environ.get("AYEWAM_HOST", "0.0.0.0"),
        port=int(os.environ.get("AYEWAM_PORT", "5000")),
    )


def setup_logging(settings: Settings):
    """Configure root logging: console, plus a rotating file when configured."""
    handlers = [logging.StreamHandler()]
    if settings.log_file:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                settings.log_file,
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5,
            )
        )

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )
