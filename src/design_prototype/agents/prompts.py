"""
Prompt Builder
Pure (mode, payload) -> instruction string construction.
"""

from collections.abc import Iterable

from design_prototype.core import safe_json_dumps
from .models import CanvasSize, Component, Mode, WireframeData
from .prompt import get_text_prompt, get_wireframe_prompt


class PromptBuilder:
    """Builds generation prompts. Holds only immutable configuration."""

    def __init__(self, guidelines: str = "", canvas: CanvasSize | None = None) -> None:
        self.guidelines = guidelines
        self.canvas = canvas or CanvasSize()

    def build(self, mode: Mode | str, payload: str | Iterable[Component] | WireframeData) -> str:
        """
        Build the prompt for one generation.

        Args:
            mode: Text or wireframe mode
            payload: Description (text mode) or components/wireframe (wireframe mode)

        Returns:
            Complete prompt
        """
        return build_prompt(mode, payload, canvas=self.canvas, guidelines=self.guidelines)


def build_prompt(
    mode: Mode | str,
    payload: str | Iterable[Component] | WireframeData,
    canvas: CanvasSize | None = None,
    guidelines: str = "",
) -> str:
    """
    Build a generation prompt.

    Deterministic for equal inputs; the wireframe snapshot keeps component
    order and a fixed key order.

    Raises:
        TypeError: If the payload does not match the mode
    """
    mode = Mode(mode)

    if mode is Mode.TEXT:
        if not isinstance(payload, str):
            raise TypeError("Text mode expects a description string")
        return get_text_prompt(payload, guidelines)

    if isinstance(payload, str):
        raise TypeError("Wireframe mode expects components")

    if isinstance(payload, WireframeData):
        wireframe = payload
    else:
        wireframe = WireframeData(components=tuple(payload), canvas=canvas or CanvasSize())

    return get_wireframe_prompt(safe_json_dumps(wireframe.snapshot()), guidelines)
