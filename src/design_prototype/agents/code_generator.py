"""Code Generator - prompt, round trip and extraction for one generation."""

import asyncio
import time
from collections.abc import Iterable

from design_prototype.core import get_logger, LogContext, ParseError, ValidationError
from design_prototype.core.id import new_generation_id
from design_prototype.models.loader import GenerationError, TextGenerator
from design_prototype.monitoring import metrics_collector
from .extractor import extract_artifacts
from .models import Component, GeneratedArtifacts, Mode, WireframeData
from .prompts import PromptBuilder


logger = get_logger(__name__)


class CodeGenerator:
    """Generates html/css/javascript from a description or a wireframe."""

    def __init__(
        self,
        llm: TextGenerator,
        prompt_builder: PromptBuilder | None = None,
        timeout: float = 120.0,
        repair_json: bool = False,
    ) -> None:
        self.llm = llm
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.timeout = timeout
        self.repair_json = repair_json

        logger.info("initialized", model=getattr(llm, "model_name", "unknown"), timeout=timeout)

    async def generate(
        self, mode: Mode | str, payload: str | Iterable[Component] | WireframeData
    ) -> GeneratedArtifacts:
        """
        Run one generation.

        The prompt is built before the first await, so later edits to the
        caller's state cannot leak into this request.

        Raises:
            GenerationError: Remote failure or timeout
            ParseError: No JSON object in the response
            ValidationError: JSON object without any artifact
        """
        mode = Mode(mode)
        prompt = self.prompt_builder.build(mode, payload)
        model = getattr(self.llm, "model_name", "unknown")
        start_time = time.time()

        with LogContext(generation_id=new_generation_id()):
            logger.info("generation_started", mode=mode.value, prompt_chars=len(prompt))

            try:
                raw = await self._invoke(prompt)
            except GenerationError as e:
                metrics_collector.record_llm_call(model, "error", len(prompt))
                metrics_collector.record_generation(mode.value, "generation_error", time.time() - start_time)
                logger.error("generation_failed", error=str(e))
                raise
            metrics_collector.record_llm_call(model, "success", len(prompt))

            try:
                artifacts = extract_artifacts(raw, repair=self.repair_json)
            except ParseError:
                metrics_collector.record_extraction_failure("parse")
                metrics_collector.record_generation(mode.value, "parse_error", time.time() - start_time)
                raise
            except ValidationError:
                metrics_collector.record_extraction_failure("validation")
                metrics_collector.record_generation(mode.value, "validation_error", time.time() - start_time)
                raise

            duration = time.time() - start_time
            metrics_collector.record_generation(mode.value, "success", duration)
            logger.info(
                "generation_complete",
                duration_ms=round(duration * 1000),
                html_chars=len(artifacts.html),
                css_chars=len(artifacts.css),
                javascript_chars=len(artifacts.javascript),
            )
            return artifacts

    async def _invoke(self, prompt: str) -> str:
        try:
            raw = await asyncio.wait_for(self.llm.ainvoke(prompt), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise GenerationError(f"Generation timed out after {self.timeout:g}s") from e
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(str(e) or type(e).__name__) from e

        if not raw or not raw.strip():
            raise GenerationError("No response text received")
        return raw
