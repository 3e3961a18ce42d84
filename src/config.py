"""Runtime settings, read from the environment (and a .env file if present)."""

from dataclasses import dataclass
import os
from pathlib import Path

from dotenv import load_dotenv


@dataclass
class Settings:
    database: Path
    language: str
    log_level: str


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        database=Path(os.getenv("GEDGRAPH_DATABASE", "genealogy.db")),
        language=os.getenv("GEDGRAPH_LANGUAGE", "en"),
        log_level=os.getenv("GEDGRAPH_LOG_LEVEL", "INFO").upper(),
    )
