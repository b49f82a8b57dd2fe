import logging
import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables from .env
load_dotenv()

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173"


class Settings(BaseModel):
    cors_origins: List[str]
    log_level: str = "INFO"
    seed_demo: bool = False


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_settings() -> Settings:
    origins = os.environ.get("QUIZ_ADMIN_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return Settings(
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        log_level=os.environ.get("QUIZ_ADMIN_LOG_LEVEL", "INFO").upper(),
        seed_demo=_truthy(os.environ.get("QUIZ_ADMIN_SEED_DEMO", "")),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
