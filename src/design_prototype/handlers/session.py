"""
Session State
Owns mode, input, graph, artifacts and selection; routes edits and generations.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from design_prototype.agents import graph as graph_ops
from design_prototype.agents.code_generator import CodeGenerator
from design_prototype.agents.graph import Graph, GraphEdge, GraphNode
from design_prototype.agents.models import (
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
from design_prototype.core import (
    ParseError,
    Settings,
    TextGenerationRequest,
    ValidationError,
    get_logger,
    get_settings,
)
from design_prototype.models.loader import GenerationError
from design_prototype.preview import assemble_document, preview_document
from .surfaces import CodeEditSurface, GraphEditSurface, LogNotifier, Notifier


logger = get_logger(__name__)

RETRY_HINT = "Please try again."


class GenerationInProgressError(Exception):
    """A generation was requested while another one is in flight."""
    pass


class GenerationStatus(str, Enum):
    """Generation lifecycle."""

    IDLE = "idle"
    GENERATING = "generating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SessionState(BaseModel):
    """Immutable snapshot of one editing session."""

    model_config = ConfigDict(frozen=True)

    mode: Mode = Mode.TEXT
    text_input: str = ""
    graph: Graph = Field(default_factory=Graph)
    artifacts: GeneratedArtifacts = Field(default_factory=GeneratedArtifacts.placeholders)
    status: GenerationStatus = GenerationStatus.IDLE
    selected_id: str | None = None
    active_tab: CodeTab = CodeTab.HTML
    last_error: str | None = None

    @property
    def loading(self) -> bool:
        return self.status is GenerationStatus.GENERATING


class Session:
    """
    Explicitly owned state container for one user.

    Every mutation goes through a method here. Edits are allowed in every
    generation state; only a second concurrent generation is rejected.
    """

    def __init__(
        self,
        generator: CodeGenerator,
        settings: Settings | None = None,
        notifier: Notifier | None = None,
        code_surface: CodeEditSurface | None = None,
    ) -> None:
        self.generator = generator
        self.settings = settings or get_settings()
        self.notifier = notifier or LogNotifier()
        self.code_surface = code_surface
        self._state = SessionState()

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def components(self) -> list[Component]:
        return graph_ops.to_components(self._state.graph.nodes)

    @property
    def canvas(self) -> CanvasSize:
        return CanvasSize(width=self.settings.canvas_width, height=self.settings.canvas_height)

    def wireframe(self) -> WireframeData:
        return WireframeData(components=tuple(self.components), canvas=self.canvas)

    @property
    def assembled_document(self) -> str:
        return assemble_document(self._state.artifacts)

    @property
    def preview_document(self) -> str:
        return preview_document(self._state.artifacts)

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready view of the session."""
        data = self._state.model_dump(mode="json")
        data["loading"] = self._state.loading
        data["components"] = [c.model_dump(mode="json") for c in self.components]
        return data

    def _update(self, **changes: Any) -> None:
        self._state = self._state.model_copy(update=changes)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def set_mode(self, mode: Mode | str) -> None:
        self._update(mode=Mode(mode))

    def set_text(self, text: str) -> None:
        self._update(text_input=text)

    def set_active_tab(self, tab: CodeTab | str) -> None:
        self._update(active_tab=CodeTab(tab))

    def edit_artifact(self, tab: CodeTab | str, text: str) -> None:
        """Hand edit of one artifact (code editor change event)."""
        self._update(artifacts=self._state.artifacts.replace(CodeTab(tab), text))

    # ------------------------------------------------------------------
    # Graph
    # ------------------------------------------------------------------

    def add_component(
        self,
        kind: ComponentKind | str,
        x: float,
        y: float,
        text: str | None = None,
        properties: dict[str, Any] | None = None,
        size: Size | None = None,
    ) -> Component:
        """Drop a new component on the canvas."""
        size = size or Size(
            width=self.settings.default_node_width, height=self.settings.default_node_height
        )
        graph, node = graph_ops.add_node(
            self._state.graph, kind, (x, y), size=size, text=text, properties=properties
        )
        self._update(graph=graph)
        logger.debug("component_added", id=node.id, kind=node.type.value)
        return graph_ops.node_to_component(node)

    def move_component(self, component_id: str, dx: float, dy: float) -> Component:
        graph = graph_ops.move_node(self._state.graph, component_id, dx, dy)
        self._update(graph=graph)
        return graph_ops.node_to_component(graph.node(component_id))

    def update_component(
        self,
        component_id: str,
        text: str | None = None,
        size: Size | None = None,
        position: Position | None = None,
        properties: dict[str, Any] | None = None,
    ) -> Component:
        graph = graph_ops.update_node(
            self._state.graph, component_id,
            text=text, size=size, position=position, properties=properties,
        )
        self._update(graph=graph)
        return graph_ops.node_to_component(graph.node(component_id))

    def delete_component(self, component_id: str) -> None:
        graph = graph_ops.delete_node(self._state.graph, component_id)
        selected_id = None if self._state.selected_id == component_id else self._state.selected_id
        self._update(graph=graph, selected_id=selected_id)
        logger.debug("component_deleted", id=component_id)

    def select_component(self, component_id: str) -> None:
        self._update(
            graph=graph_ops.select_node(self._state.graph, component_id),
            selected_id=component_id,
        )

    def clear_selection(self) -> None:
        self._update(graph=graph_ops.clear_selection(self._state.graph), selected_id=None)

    def connect(self, source: str, target: str) -> GraphEdge:
        graph, edge = graph_ops.connect(self._state.graph, source, target)
        self._update(graph=graph)
        return edge

    def disconnect(self, edge_id: str) -> None:
        self._update(graph=graph_ops.disconnect(self._state.graph, edge_id))

    def sync_graph(self, surface: GraphEditSurface) -> None:
        """
        Replace the graph with the nodes and edges a graph editor reports.

        Edges to unknown nodes are dropped. If the editor reports several
        selected nodes, only the first stays selected.
        """
        nodes: tuple[GraphNode, ...] = tuple(surface.nodes)
        # Rejects duplicate ids before the state changes
        WireframeData(components=tuple(graph_ops.to_components(nodes)))

        node_ids = {node.id for node in nodes}
        graph = Graph(
            nodes=nodes,
            edges=tuple(
                edge for edge in surface.edges
                if edge.source in node_ids and edge.target in node_ids
            ),
        )
        selected_id = graph.selected_id
        graph = graph_ops.select_node(graph, selected_id) if selected_id else graph
        self._update(graph=graph, selected_id=selected_id)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _request_payload(self, mode: Mode, payload: Any) -> str | WireframeData:
        if mode is Mode.TEXT:
            text = self._state.text_input if payload is None else payload
            if not isinstance(text, str):
                raise ValidationError("Text mode expects a description")
            if len(text) > self.settings.max_message_length:
                raise ValidationError(
                    f"Description exceeds {self.settings.max_message_length} characters"
                )
            try:
                return TextGenerationRequest(message=text).message
            except PydanticValidationError as e:
                raise ValidationError("Describe the page you want before generating") from e

        if payload is None:
            wireframe = self.wireframe()
        elif isinstance(payload, WireframeData):
            wireframe = payload
        elif isinstance(payload, str):
            raise ValidationError("Wireframe mode expects components")
        else:
            wireframe = WireframeData(components=tuple(payload), canvas=self.canvas)

        if not wireframe.components:
            raise ValidationError("Add at least one component to the wireframe before generating")
        return wireframe

    async def generate(self, mode: Mode | str | None = None, payload: Any = None) -> GeneratedArtifacts:
        """
        Generate artifacts from the current (or given) input.

        Args:
            mode: Defaults to the session mode
            payload: Description or components; defaults to the session input

        Returns:
            The new artifacts, which also replace the session artifacts

        Raises:
            GenerationInProgressError: A generation is already in flight
            GenerationError, ParseError, ValidationError: This attempt failed;
                prior artifacts are kept
        """
        if self._state.status is GenerationStatus.GENERATING:
            logger.warning("generation_rejected", reason="in_flight")
            raise GenerationInProgressError("A generation is already in progress")

        mode = Mode(mode) if mode is not None else self._state.mode
        try:
            request = self._request_payload(mode, payload)
        except ValidationError as e:
            self._update(last_error=str(e))
            self.notifier.error(str(e))
            raise

        self._update(status=GenerationStatus.GENERATING, last_error=None)
        self.notifier.loading("Generating code...")

        try:
            artifacts = await self.generator.generate(mode, request)
        except GenerationError as e:
            self._fail(str(e))
            raise
        except (ParseError, ValidationError) as e:
            self._fail(f"{e}. {RETRY_HINT}")
            raise
        else:
            self._update(status=GenerationStatus.SUCCEEDED, artifacts=artifacts)
            if self.code_surface is not None:
                for tab in CodeTab:
                    self.code_surface.set_text(tab, artifacts.get(tab))
            self.notifier.success("Code generated successfully!")
            return artifacts
        finally:
            self._update(status=GenerationStatus.IDLE)

    def _fail(self, message: str) -> None:
        self._update(status=GenerationStatus.FAILED, last_error=message)
        self.notifier.error(f"Error: {message}")
