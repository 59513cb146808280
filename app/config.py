import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv  # type: ignore
from pydantic import BaseModel, ConfigDict  # type: ignore

load_dotenv()

DEFAULT_GROQ_MODEL = "llama-3.1-8b-instant"
DEFAULT_TEMPERATURE = 0.2


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    groq_api_key: Optional[str] = None
    groq_model: str = DEFAULT_GROQ_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """
    Build settings from the environment (.env already loaded).
    Raw strings go through pydantic, so a bad value fails here with a ValidationError.
    """
    env = {
        "groq_api_key": os.getenv("GROQ_API_KEY") or None,
        "groq_model": os.getenv("GROQ_MODEL"),
        "temperature": os.getenv("DIAGNOSE_TEMPERATURE"),
        "log_level": os.getenv("LOG_LEVEL"),
    }
    return Settings.model_validate({k: v for k, v in env.items() if v})
