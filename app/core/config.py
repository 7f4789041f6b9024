# app/core/config.py
import pathlib
import logging
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

logger = logging.getLogger("app.core.config")  # Logger for this module

BASE_DIR = pathlib.Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    PROJECT_NAME: str = "Baccalaureat Backend"
    API_V1_STR: str = "/api/v1"
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'baccalaureat.db'}"
    LOG_DIR: pathlib.Path = BASE_DIR / "logs"

    # --- Validation pipeline ---
    # A VALID/INVALID verdict at or above this confidence stops the pipeline
    CONFIDENCE_THRESHOLD: float = 0.7
    CACHE_HIT_CONFIDENCE: float = 0.90
    RESOLVER_FALLBACK_CONFIDENCE: float = 0.5

    # Remote semantic service: "webhook" (n8n style), "gemini" or "none"
    SEMANTIC_BACKEND: Literal["webhook", "gemini", "none"] = "webhook"
    SEMANTIC_WEBHOOK_URL: str = "https://gronki.app.n8n.cloud/webhook/chat"
    SEMANTIC_TIMEOUT_SECONDS: float = 8.0
    SEMANTIC_CONFIDENCE_THRESHOLD: float = 0.7
    # Please set your Gemini API Key in the .env file if SEMANTIC_BACKEND=gemini
    GEMINI_API_KEY: str = "YOUR_GEMINI_API_KEY_HERE"
    GEMINI_MODEL: str = "gemini-1.5-flash-latest"

    DICTIONARY_API_URL: str = "https://api.dictionaryapi.dev/api/v2"
    DICTIONARY_LANGUAGE: str = "en"
    DICTIONARY_TIMEOUT_SECONDS: float = 8.0
    DICTIONARY_VALIDATION_ENABLED: bool = True

    # --- Game rules ---
    DEFAULT_NUMBER_OF_ROUNDS: int = 5
    DEFAULT_ROUND_DURATION_SECONDS: int = 60
    DEFAULT_CATEGORY_COUNT: int = 6
    EXCLUDED_LETTERS: str = "WXYZ"  # Too hard to play
    TIMER_TICK_SECONDS: float = 1.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

@lru_cache()
def get_settings():
    settings_instance = Settings()
    logger.info(f"Semantic backend: {settings_instance.SEMANTIC_BACKEND}, database: {settings_instance.DATABASE_URL}")
    return settings_instance

settings = get_settings()
