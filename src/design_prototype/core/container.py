"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from design_prototype.agents.code_generator import CodeGenerator
from design_prototype.agents.models import CanvasSize
from design_prototype.agents.prompts import PromptBuilder
from design_prototype.handlers.session import Session
from design_prototype.models.config import GeminiConfig
from design_prototype.models.loader import ModelLoader, TextGenerator
from .config import Settings, get_settings


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings

    @singleton
    @provider
    def provide_gemini_config(self, settings: Settings) -> GeminiConfig:
        return GeminiConfig(
            model_name=settings.gemini_model,
            api_key=settings.gemini_api_key or None,
            temperature=settings.gemini_temperature,
            max_tokens=settings.gemini_max_tokens,
            breaker_fail_max=settings.breaker_fail_max,
            breaker_reset_timeout=settings.breaker_reset_timeout,
        )

    @singleton
    @provider
    def provide_text_generator(self, config: GeminiConfig) -> TextGenerator:
        """Provide the Gemini client for code generation."""
        return ModelLoader.load(config)

    @singleton
    @provider
    def provide_prompt_builder(self, settings: Settings) -> PromptBuilder:
        return PromptBuilder(
            guidelines=settings.prompt_guidelines,
            canvas=CanvasSize(width=settings.canvas_width, height=settings.canvas_height),
        )

    @singleton
    @provider
    def provide_code_generator(
        self, llm: TextGenerator, prompt_builder: PromptBuilder, settings: Settings
    ) -> CodeGenerator:
        return CodeGenerator(
            llm=llm,
            prompt_builder=prompt_builder,
            timeout=settings.generation_timeout,
            repair_json=settings.repair_json,
        )

    @singleton
    @provider
    def provide_session(self, generator: CodeGenerator, settings: Settings) -> Session:
        return Session(generator=generator, settings=settings)


def create_container(settings: Settings | None = None, *modules: Module) -> Injector:
    """
    Create configured injector.

    Extra modules are applied after the core module, so they can override
    bindings (tests bind a fake TextGenerator this way).
    """
    return Injector([CoreModule(settings), *modules])
