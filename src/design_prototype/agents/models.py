"""Wireframe and artifact data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ComponentKind(str, Enum):
    """Closed set of wireframe component kinds."""

    HEADER = "header"
    BUTTON = "button"
    INPUT = "input"
    TEXT = "text"
    IMAGE = "image"
    CARD = "card"


class Mode(str, Enum):
    """Input mode of a generation."""

    TEXT = "text"
    WIREFRAME = "wireframe"


class CodeTab(str, Enum):
    """Artifact names, in display order."""

    HTML = "html"
    CSS = "css"
    JAVASCRIPT = "javascript"


class Position(BaseModel):
    """Canvas-relative position."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(default=0.0, ge=0.0)
    y: float = Field(default=0.0, ge=0.0)


class Size(BaseModel):
    """Component size on the canvas."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(gt=0.0)
    height: float = Field(gt=0.0)


class Component(BaseModel):
    """
    Canonical description of one UI element.

    ``properties`` is an open key/value store. Keys in use:
        placeholder: hint text for inputs
        src, alt: image source and description
        variant: visual style of buttons and headers
        level: header level (1-6)
        rules: free-text layout rule the generator should follow
    Unknown keys are carried through untouched.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    kind: ComponentKind
    position: Position = Field(default_factory=Position)
    size: Size
    properties: dict[str, Any] = Field(default_factory=dict)
    text: str | None = None

    def snapshot(self) -> dict[str, Any]:
        """Serializable view sent to the generator."""
        data: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "position": {"x": self.position.x, "y": self.position.y},
            "size": {"width": self.size.width, "height": self.size.height},
            "text": self.text or "",
        }
        if self.properties:
            data["properties"] = dict(self.properties)
        return data


class CanvasSize(BaseModel):
    """Target canvas dimensions."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(default=1200, gt=0.0)
    height: float = Field(default=800, gt=0.0)


class WireframeData(BaseModel):
    """A component collection plus the canvas it is laid out on."""

    model_config = ConfigDict(frozen=True)

    components: tuple[Component, ...] = ()
    canvas: CanvasSize = Field(default_factory=CanvasSize)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "WireframeData":
        seen: set[str] = set()
        for component in self.components:
            if component.id in seen:
                raise ValueError(f"Duplicate component id: {component.id}")
            seen.add(component.id)
        return self

    def snapshot(self) -> dict[str, Any]:
        return {
            "components": [c.snapshot() for c in self.components],
            "canvas": {"width": self.canvas.width, "height": self.canvas.height},
        }


HTML_PLACEHOLDER = "<!-- Your generated HTML will appear here -->"
CSS_PLACEHOLDER = "/* Your generated CSS will appear here */"
JAVASCRIPT_PLACEHOLDER = "// Your generated JavaScript will appear here"


class GeneratedArtifacts(BaseModel):
    """The html/css/javascript triple produced by one generation."""

    model_config = ConfigDict(frozen=True)

    html: str = ""
    css: str = ""
    javascript: str = ""

    @classmethod
    def placeholders(cls) -> "GeneratedArtifacts":
        """Artifacts marking "not yet generated"."""
        return cls(html=HTML_PLACEHOLDER, css=CSS_PLACEHOLDER, javascript=JAVASCRIPT_PLACEHOLDER)

    @property
    def is_placeholder(self) -> bool:
        return self.html.strip() == HTML_PLACEHOLDER

    def get(self, tab: CodeTab) -> str:
        return getattr(self, CodeTab(tab).value)

    def replace(self, tab: CodeTab, text: str) -> "GeneratedArtifacts":
        """Return a copy with one artifact replaced."""
        return self.model_copy(update={CodeTab(tab).value: text})
