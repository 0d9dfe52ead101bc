"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .validate import ValidationError, TextGenerationRequest
from .logging_config import configure_logging, get_logger, LogContext
from .json import extract_json, safe_json_dumps, ParseError


def create_container(settings: Settings | None = None, *modules):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings, *modules)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Validation
    "ValidationError",
    "TextGenerationRequest",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "extract_json",
    "safe_json_dumps",
    "ParseError",
    # DI
    "create_container",
]
