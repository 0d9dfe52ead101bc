"""Pytest configuration and fixtures."""

import asyncio
import os

import pytest
from fastapi.testclient import TestClient
from injector import Module, provider, singleton

from design_prototype.agents.code_generator import CodeGenerator
from design_prototype.agents.models import Component, ComponentKind, Position, Size
from design_prototype.agents.prompts import PromptBuilder
from design_prototype.core import create_container, get_settings
from design_prototype.core.config import Settings
from design_prototype.handlers import Session
from design_prototype.models.loader import TextGenerator


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ['PROTO_LOG_LEVEL'] = 'DEBUG'
    os.environ['PROTO_GENERATION_TIMEOUT'] = '5'
    os.environ['GEMINI_API_KEY'] = 'test-api-key'  # Mock API key


# ============================================================================
# Fake Generation Clients
# ============================================================================

VALID_RESPONSE = '{"html":"<button>Hi</button>","css":"button{color:red}","javascript":""}'


class FakeGenerator:
    """Returns canned responses and records every prompt."""

    model_name = "fake-model"

    def __init__(self, responses=None, error: Exception | None = None):
        self.responses = list(responses or [VALID_RESPONSE])
        self.error = error
        self.prompts: list[str] = []

    async def ainvoke(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


class GatedGenerator(FakeGenerator):
    """Suspends inside the call until released, to hold a generation in flight."""

    def __init__(self, responses=None, error: Exception | None = None):
        super().__init__(responses, error)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def ainvoke(self, prompt: str) -> str:
        self.prompts.append(prompt)
        self.started.set()
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.responses[0]


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return get_settings()


@pytest.fixture
def fake_llm():
    return FakeGenerator()


@pytest.fixture
def code_generator(fake_llm, settings):
    """Code generator with mocked LLM."""
    return CodeGenerator(llm=fake_llm, prompt_builder=PromptBuilder(), timeout=settings.generation_timeout)


@pytest.fixture
def session(code_generator, settings):
    """Fresh session around the mocked generator."""
    return Session(generator=code_generator, settings=settings)


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def sample_components():
    """A small wireframe: header, input and a submit button."""
    return [
        Component(
            id="comp_header",
            kind=ComponentKind.HEADER,
            position=Position(x=40, y=20),
            size=Size(width=400, height=60),
            text="Sign in",
            properties={"level": 1},
        ),
        Component(
            id="comp_email",
            kind=ComponentKind.INPUT,
            position=Position(x=40, y=100),
            size=Size(width=300, height=40),
            properties={"placeholder": "Email"},
        ),
        Component(
            id="comp_submit",
            kind=ComponentKind.BUTTON,
            position=Position(x=40, y=160),
            size=Size(width=120, height=40),
            text="Go",
        ),
    ]


# ============================================================================
# HTTP Fixtures
# ============================================================================

class FakeGeneratorModule(Module):
    """Overrides the Gemini client with a fake."""

    def __init__(self, llm: FakeGenerator) -> None:
        self.llm = llm

    @singleton
    @provider
    def provide_text_generator(self) -> TextGenerator:
        return self.llm


@pytest.fixture
def container(fake_llm, settings: Settings):
    return create_container(settings, FakeGeneratorModule(fake_llm))


@pytest.fixture
def client(container):
    """HTTP client over an app wired with the fake generator."""
    from design_prototype.main import create_app

    with TestClient(create_app(container)) as test_client:
        yield test_client
