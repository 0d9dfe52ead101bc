"""Code generator tests with a fake generation client."""

import asyncio

import pytest

from design_prototype.agents.code_generator import CodeGenerator
from design_prototype.agents.models import Mode
from design_prototype.agents.prompts import PromptBuilder
from design_prototype.core import ParseError, ValidationError
from design_prototype.models.loader import GenerationError
from design_prototype.monitoring import metrics_collector

from conftest import FakeGenerator


def _count(status: str, mode: str = "text") -> float:
    return metrics_collector.generation_requests_total.labels(mode=mode, status=status)._value.get()


class SlowGenerator(FakeGenerator):
    async def ainvoke(self, prompt: str) -> str:
        self.prompts.append(prompt)
        await asyncio.sleep(10)
        return self.responses[0]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_generate_text(code_generator, fake_llm):
    artifacts = await code_generator.generate(Mode.TEXT, "A red button that says Hi")

    assert artifacts.html == "<button>Hi</button>"
    assert artifacts.css == "button{color:red}"
    assert artifacts.javascript == ""
    assert '"A red button that says Hi"' in fake_llm.prompts[0]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_generate_wireframe(code_generator, fake_llm, sample_components):
    await code_generator.generate("wireframe", sample_components)

    assert "comp_submit" in fake_llm.prompts[0]
    assert "=== WIREFRAME DATA ===" in fake_llm.prompts[0]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_success_recorded():
    generator = CodeGenerator(llm=FakeGenerator(), prompt_builder=PromptBuilder())
    before = _count("success")

    await generator.generate(Mode.TEXT, "a page")
    assert _count("success") == before + 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_remote_error_wrapped():
    generator = CodeGenerator(llm=FakeGenerator(error=RuntimeError("quota exceeded")))
    before = _count("generation_error")

    with pytest.raises(GenerationError, match="quota exceeded"):
        await generator.generate(Mode.TEXT, "a page")
    assert _count("generation_error") == before + 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_generation_error_passes_through():
    error = GenerationError("Prompt was blocked: SAFETY")
    generator = CodeGenerator(llm=FakeGenerator(error=error))

    with pytest.raises(GenerationError) as exc_info:
        await generator.generate(Mode.TEXT, "a page")
    assert exc_info.value is error


@pytest.mark.asyncio
@pytest.mark.unit
async def test_timeout():
    generator = CodeGenerator(llm=SlowGenerator(), timeout=0.05)

    with pytest.raises(GenerationError, match="timed out"):
        await generator.generate(Mode.TEXT, "a page")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_empty_response():
    generator = CodeGenerator(llm=FakeGenerator(responses=["   "]))

    with pytest.raises(GenerationError, match="No response text"):
        await generator.generate(Mode.TEXT, "a page")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_parse_error():
    generator = CodeGenerator(llm=FakeGenerator(responses=["I cannot do that."]))
    before = _count("parse_error")

    with pytest.raises(ParseError):
        await generator.generate(Mode.TEXT, "a page")
    assert _count("parse_error") == before + 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_validation_error():
    generator = CodeGenerator(llm=FakeGenerator(responses=['{"page": "<p>"}']))

    with pytest.raises(ValidationError):
        await generator.generate(Mode.TEXT, "a page")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_repair_enabled():
    generator = CodeGenerator(
        llm=FakeGenerator(responses=['{"html": "<p>ok</p>", "css": "",}']), repair_json=True
    )
    artifacts = await generator.generate(Mode.TEXT, "a page")
    assert artifacts.html == "<p>ok</p>"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_wrong_payload_type_fails_before_call(sample_components):
    llm = FakeGenerator()
    generator = CodeGenerator(llm=llm)

    with pytest.raises(TypeError):
        await generator.generate(Mode.TEXT, sample_components)
    assert llm.prompts == []
