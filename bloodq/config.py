from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from bloodq.constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    MAX_IMAGES_PER_DAY,
    SETTINGS_STORE_PATH,
    USAGE_STORE_PATH,
)


@dataclass(frozen=True)
class Config:
    gemini_api_key: Optional[str]
    log_level: str
    host: str
    port: int
    settings_path: str
    usage_path: str
    max_images_per_day: int

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        gemini_api_key = os.getenv("GOOGLE_GEMINI_API_KEY") or None
        log_level = os.getenv("LOG_LEVEL", "INFO")
        host = os.getenv("BLOODQ_HOST", DEFAULT_HOST)
        raw_port = os.getenv("BLOODQ_PORT", DEFAULT_PORT)
        settings_path = os.getenv("BLOODQ_SETTINGS_PATH", SETTINGS_STORE_PATH)
        usage_path = os.getenv("BLOODQ_USAGE_PATH", USAGE_STORE_PATH)
        raw_limit = os.getenv("BLOODQ_MAX_IMAGES_PER_DAY", str(MAX_IMAGES_PER_DAY))

        return cls._validate(
            gemini_api_key=gemini_api_key,
            log_level=log_level,
            host=host,
            raw_port=raw_port,
            settings_path=settings_path,
            usage_path=usage_path,
            raw_limit=raw_limit,
        )

    @staticmethod
    def _validate(
        gemini_api_key: Optional[str],
        log_level: str,
        host: str,
        raw_port: str,
        settings_path: str,
        usage_path: str,
        raw_limit: str,
    ) -> "Config":
        match raw_port.strip():
            case p if p.isdigit() and int(p) > 0:
                port = int(p)
            case _:
                raise ValueError("BLOODQ_PORT must be a positive integer")

        match raw_limit.strip():
            case n if n.isdigit():
                limit = int(n)
            case _:
                raise ValueError("BLOODQ_MAX_IMAGES_PER_DAY must be a non-negative integer")

        return Config(
            gemini_api_key=gemini_api_key,
            log_level=log_level,
            host=host,
            port=port,
            settings_path=settings_path,
            usage_path=usage_path,
            max_images_per_day=limit,
        )
