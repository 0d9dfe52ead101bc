"""Input and output validation with strong typing."""

from pydantic import BaseModel, Field, field_validator, ConfigDict


class ValidationError(Exception):
    """Validation failed."""

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(
        strict=True, validate_assignment=True, extra="forbid", frozen=True  # Immutable by default
    )


class TextGenerationRequest(RequestValidator):
    """
    Validated free-text generation request.

    The length limit is a setting (max_message_length) and is enforced by the
    session before this model is built.
    """

    message: str = Field(min_length=1)

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        """Ensure message is non-empty after stripping."""
        if not v.strip():
            raise ValueError("Description cannot be empty")
        return v
