"""Wireframe model, prompt construction and code generation."""

from .models import (
    CanvasSize,
    CodeTab,
    Component,
    ComponentKind,
    GeneratedArtifacts,
    Mode,
    Position,
    Size,
    WireframeData,
)
from .graph import Graph, GraphEdge, GraphNode, NodeNotFoundError, to_components, to_graph
from .prompts import PromptBuilder, build_prompt
from .extractor import extract_artifacts
from .code_generator import CodeGenerator

__all__ = [
    "CanvasSize",
    "CodeTab",
    "Component",
    "ComponentKind",
    "GeneratedArtifacts",
    "Mode",
    "Position",
    "Size",
    "WireframeData",
    "Graph",
    "GraphEdge",
    "GraphNode",
    "NodeNotFoundError",
    "to_components",
    "to_graph",
    "PromptBuilder",
    "build_prompt",
    "extract_artifacts",
    "CodeGenerator",
]
