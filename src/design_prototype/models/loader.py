"""Generation Client - the only boundary to the external text service."""

import asyncio
from typing import Any, Optional, Protocol, runtime_checkable

import google.generativeai as genai
import pybreaker

from design_prototype.core import get_logger
from .config import GeminiConfig


logger = get_logger(__name__)

# Finish reasons that still carry usable text
SUCCESS_FINISH_REASONS = frozenset({"STOP", "MAX_TOKENS", "FINISH_REASON_UNSPECIFIED"})


class GenerationError(Exception):
    """The remote call failed, returned no text, or reported a non-success status."""
    pass


class ModelLoadError(Exception):
    """Model client construction failed."""
    pass


@runtime_checkable
class TextGenerator(Protocol):
    """Anything that turns a prompt into raw text."""

    model_name: str

    async def ainvoke(self, prompt: str) -> str:
        ...


class BreakerListener(pybreaker.CircuitBreakerListener):
    """Logs circuit breaker state changes."""

    def state_change(self, cb, old_state, new_state):
        logger.warning(
            "breaker_state_change",
            breaker=cb.name,
            from_state=getattr(old_state, "name", str(old_state)),
            to_state=getattr(new_state, "name", str(new_state)),
        )


def _enum_name(value: Any) -> str | None:
    if value is None:
        return None
    return getattr(value, "name", None) or str(value)


class GeminiModel:
    """Gemini API wrapper with circuit breaker protection."""

    def __init__(self, config: GeminiConfig):
        self.config = config
        self.model_name = config.model_name
        genai.configure(api_key=config.api_key)

        generation_config = genai.GenerationConfig(
            temperature=config.temperature,
            max_output_tokens=config.max_tokens,
            top_p=config.top_p,
            top_k=config.top_k,
            response_mime_type="application/json" if config.json_mode else None,
        )

        self.model = genai.GenerativeModel(
            model_name=config.model_name,
            generation_config=generation_config,
        )

        self._breaker = pybreaker.CircuitBreaker(
            fail_max=config.breaker_fail_max,
            reset_timeout=config.breaker_reset_timeout,
            name="generation-api",
            listeners=[BreakerListener()],
        )

        logger.info("model_loaded", model=config.model_name)

    def invoke(self, prompt: str) -> str:
        """
        Non-streaming generation.

        Raises:
            GenerationError: On transport failure, open breaker, blocked prompt,
                non-success finish reason, or empty text
        """
        try:
            response = self._breaker.call(self.model.generate_content, prompt)
        except pybreaker.CircuitBreakerError as e:
            logger.error("invoke_rejected", error="circuit breaker open")
            raise GenerationError("Generation service unavailable, try again shortly") from e
        except Exception as e:
            logger.error("invoke_error", error=str(e))
            raise GenerationError(str(e) or type(e).__name__) from e

        return self._response_text(response)

    async def ainvoke(self, prompt: str) -> str:
        """Async generation (runs sync API in thread pool)."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.invoke, prompt)

    @staticmethod
    def _response_text(response: Any) -> str:
        """Pull text out of a response, rejecting blocked or failed candidates."""
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = getattr(feedback, "block_reason", None)
        if block_reason:
            raise GenerationError(f"Prompt was blocked: {_enum_name(block_reason)}")

        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            raise GenerationError("No response candidates received")

        finish_reason = _enum_name(getattr(candidates[0], "finish_reason", None))
        if finish_reason and finish_reason not in SUCCESS_FINISH_REASONS:
            raise GenerationError(f"Generation stopped: {finish_reason}")
        if finish_reason == "MAX_TOKENS":
            logger.warning("output_truncated")

        try:
            text = response.text
        except ValueError as e:
            raise GenerationError("No response text received") from e

        if not text or not text.strip():
            raise GenerationError("No response text received")
        return text


class ModelLoader:
    """Model lifecycle manager."""

    _instance: Optional[GeminiModel] = None

    @classmethod
    def load(cls, config: GeminiConfig) -> GeminiModel:
        """Load model with config."""
        logger.info("loading", model=config.model_name)
        try:
            model = GeminiModel(config)
            cls._instance = model
            return model
        except Exception as e:
            logger.error("load_failed", error=str(e))
            raise ModelLoadError(f"Failed to load {config.model_name}") from e

    @classmethod
    def unload(cls) -> None:
        """Unload model."""
        if cls._instance:
            logger.info("unloading")
            cls._instance = None
