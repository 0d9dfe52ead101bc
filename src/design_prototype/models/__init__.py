"""
Models package - generation client for the Gemini API.
"""

from .config import GeminiConfig
from .loader import (
    GeminiModel,
    GenerationError,
    ModelLoader,
    ModelLoadError,
    TextGenerator,
)

__all__ = [
    "GeminiConfig",
    "GeminiModel",
    "GenerationError",
    "ModelLoader",
    "ModelLoadError",
    "TextGenerator",
]
