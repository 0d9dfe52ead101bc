"""
Model configuration with strong typing.
Centralized settings for the Gemini generation client.
"""

import os

from pydantic import BaseModel, ConfigDict, Field


class GeminiConfig(BaseModel):
    """Type-safe Gemini API configuration."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    # Model selection
    model_name: str = Field(default="gemini-2.0-flash-exp")
    api_key: str | None = Field(default=None)

    # Generation parameters
    temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4000, ge=1, le=8192)
    top_p: float = Field(default=0.95, ge=0.0, le=1.0)
    top_k: int = Field(default=40, ge=1, le=100)

    # Ask the API for a JSON response body
    json_mode: bool = Field(default=False)

    # Circuit breaker
    breaker_fail_max: int = Field(default=5, ge=1)
    breaker_reset_timeout: int = Field(default=30, ge=1)

    def __init__(self, **data):
        """Initialize config with API key from environment if not provided."""
        if not data.get("api_key"):
            data["api_key"] = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        super().__init__(**data)
