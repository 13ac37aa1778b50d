"""
Application settings for the Candidate Evaluation API
"""
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

from candidate_eval.utils.exceptions import ConfigurationError

load_dotenv()


class Settings(BaseSettings):
    # App
    app_name: str = "Candidate Evaluation API"
    version: str = "1.0.0"

    # Anthropic Messages API
    anthropic_api_key: Optional[str] = None
    anthropic_api_url: str = "https://api.anthropic.com/v1/messages"
    anthropic_version: str = "2023-06-01"
    anthropic_model: str = "claude-sonnet-4-20250514"
    anthropic_timeout_seconds: float = 120.0
    max_retries: int = 3
    retry_backoff_seconds: float = 10.0

    # Vercel Blob storage
    blob_read_write_token: Optional[str] = None
    blob_api_url: str = "https://blob.vercel-storage.com"
    blob_api_version: str = "7"
    blob_timeout_seconds: float = 30.0

    # Prompt budgets
    max_text_length: int = 3000
    max_transcript_length: int = 5000
    max_summary_transcript_length: int = 15000
    max_video_frames: int = 20
    max_video_frames_with_pdf: int = 5

    # Output token budgets
    text_max_tokens: int = 1024
    multimodal_max_tokens: int = 2048
    job_summary_max_tokens: int = 256
    transcript_summary_max_tokens: int = 1024

    # 10MB, applies to endpoints that accept base64 payloads
    max_body_bytes: int = 10 * 1024 * 1024

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def require_anthropic_key(settings: Settings) -> str:
    if not settings.anthropic_api_key:
        raise ConfigurationError("API key not configured", config_key="ANTHROPIC_API_KEY")
    return settings.anthropic_api_key


def require_blob_token(settings: Settings) -> str:
    if not settings.blob_read_write_token:
        raise ConfigurationError("BLOB_NOT_CONFIGURED", config_key="BLOB_READ_WRITE_TOKEN")
    return settings.blob_read_write_token
