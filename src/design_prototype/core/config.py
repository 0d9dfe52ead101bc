"""Configuration Management."""

import os
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="PROTO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Server
    host: str = Field(default="127.0.0.1", description="HTTP bind address")
    port: int = Field(default=8000, gt=0, description="HTTP port")

    # Model
    gemini_api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY", ""), description="Gemini API key"
    )
    gemini_model: str = Field(default="gemini-2.0-flash-exp", description="Gemini model name")
    gemini_temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="Model temperature")
    gemini_max_tokens: int = Field(default=4000, gt=0, description="Max output tokens")

    # Generation
    generation_timeout: float = Field(default=120.0, gt=0, description="Caller-side timeout (seconds)")
    breaker_fail_max: int = Field(default=5, gt=0, description="Failures before the breaker opens")
    breaker_reset_timeout: int = Field(default=30, gt=0, description="Seconds before a half-open retry")
    repair_json: bool = Field(default=False, description="Run json_repair on the brace region")
    prompt_guidelines: str = Field(default="", description="Extra display/style guidance for prompts")

    # Canvas
    canvas_width: float = Field(default=1200, gt=0, description="Target canvas width")
    canvas_height: float = Field(default=800, gt=0, description="Target canvas height")
    default_node_width: float = Field(default=150, gt=0, description="Width of a dropped component")
    default_node_height: float = Field(default=50, gt=0, description="Height of a dropped component")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Validation
    max_message_length: int = Field(default=10_000, gt=0, description="Max text input length")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
