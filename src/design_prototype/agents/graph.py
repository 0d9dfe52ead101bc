"""
Graph Adapter
Maps a component collection to the editable node/edge graph and back.

The graph is the editing surface; components are always derived from it.
Every mutation returns a new Graph and leaves the input untouched.
"""

from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field

from design_prototype.core.id import new_component_id, new_edge_id
from .models import Component, ComponentKind, Position, Size


DEFAULT_NODE_SIZE = Size(width=150, height=50)


class NodeNotFoundError(KeyError):
    """No node with the given id exists in the graph."""


class NodeData(BaseModel):
    """Editable payload carried by a node."""

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)


class GraphNode(BaseModel):
    """Denormalized copy of a component for interactive editing."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: ComponentKind
    position: Position | None = None
    width: float | None = None
    height: float | None = None
    data: NodeData = Field(default_factory=NodeData)
    selected: bool = False


class GraphEdge(BaseModel):
    """Visual connector between two nodes. Has no effect on generation."""

    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str


class Graph(BaseModel):
    """Immutable node/edge graph state."""

    model_config = ConfigDict(frozen=True)

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()

    @property
    def selected_id(self) -> str | None:
        for node in self.nodes:
            if node.selected:
                return node.id
        return None

    def node(self, node_id: str) -> GraphNode:
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise NodeNotFoundError(node_id)

    def __contains__(self, node_id: object) -> bool:
        return any(node.id == node_id for node in self.nodes)


# ============================================================================
# Conversion
# ============================================================================


def component_to_node(component: Component) -> GraphNode:
    return GraphNode(
        id=component.id,
        type=component.kind,
        position=component.position,
        width=component.size.width,
        height=component.size.height,
        data=NodeData(text=component.text, properties=dict(component.properties)),
    )


def node_to_component(node: GraphNode) -> Component:
    """Derive a component, falling back to defaults for missing geometry."""
    return Component(
        id=node.id,
        kind=node.type,
        position=node.position or Position(),
        size=Size(
            width=node.width or DEFAULT_NODE_SIZE.width,
            height=node.height or DEFAULT_NODE_SIZE.height,
        ),
        properties=dict(node.data.properties or {}),
        text=node.data.text,
    )


def to_graph(components: Iterable[Component]) -> Graph:
    """Build a graph (no edges, nothing selected) from components."""
    return Graph(nodes=tuple(component_to_node(c) for c in components))


def to_components(nodes: Iterable[GraphNode]) -> list[Component]:
    """Derive the component collection from graph nodes."""
    return [node_to_component(node) for node in nodes]


# ============================================================================
# Mutations
# ============================================================================


def _replace_node(graph: Graph, node_id: str, **updates: Any) -> Graph:
    if node_id not in graph:
        raise NodeNotFoundError(node_id)
    nodes = tuple(
        node.model_copy(update=updates) if node.id == node_id else node
        for node in graph.nodes
    )
    return graph.model_copy(update={"nodes": nodes})


def add_node(
    graph: Graph,
    kind: ComponentKind | str,
    drop_point: Position | tuple[float, float],
    size: Size | None = None,
    text: str | None = None,
    properties: dict[str, Any] | None = None,
    node_id: str | None = None,
) -> tuple[Graph, GraphNode]:
    """
    Add a node at a drop point.

    Negative drop coordinates are clamped to the canvas origin.

    Returns:
        (new graph, the added node)
    """
    if isinstance(drop_point, tuple):
        x, y = drop_point
    else:
        x, y = drop_point.x, drop_point.y

    node_id = node_id or new_component_id()
    if node_id in graph:
        raise ValueError(f"Duplicate component id: {node_id}")

    size = size or DEFAULT_NODE_SIZE
    node = GraphNode(
        id=node_id,
        type=ComponentKind(kind),
        position=Position(x=max(0.0, x), y=max(0.0, y)),
        width=size.width,
        height=size.height,
        data=NodeData(text=text, properties=dict(properties or {})),
    )
    return graph.model_copy(update={"nodes": graph.nodes + (node,)}), node


def move_node(graph: Graph, node_id: str, dx: float, dy: float) -> Graph:
    """Move a node by a delta, never past the canvas origin."""
    current = graph.node(node_id).position or Position()
    position = Position(x=max(0.0, current.x + dx), y=max(0.0, current.y + dy))
    return _replace_node(graph, node_id, position=position)


def update_node(
    graph: Graph,
    node_id: str,
    text: str | None = None,
    size: Size | None = None,
    position: Position | None = None,
    properties: dict[str, Any] | None = None,
) -> Graph:
    """Apply property-panel edits. Arguments left as None are unchanged."""
    node = graph.node(node_id)
    updates: dict[str, Any] = {}

    if text is not None or properties is not None:
        updates["data"] = NodeData(
            text=text if text is not None else node.data.text,
            properties=dict(properties) if properties is not None else dict(node.data.properties),
        )
    if size is not None:
        updates["width"] = size.width
        updates["height"] = size.height
    if position is not None:
        updates["position"] = position

    if not updates:
        return graph
    return _replace_node(graph, node_id, **updates)


def delete_node(graph: Graph, node_id: str) -> Graph:
    """Remove a node and every edge touching it."""
    if node_id not in graph:
        raise NodeNotFoundError(node_id)
    return Graph(
        nodes=tuple(node for node in graph.nodes if node.id != node_id),
        edges=tuple(
            edge for edge in graph.edges
            if edge.source != node_id and edge.target != node_id
        ),
    )


def select_node(graph: Graph, node_id: str) -> Graph:
    """Select exactly one node."""
    if node_id not in graph:
        raise NodeNotFoundError(node_id)
    nodes = tuple(
        node.model_copy(update={"selected": node.id == node_id})
        for node in graph.nodes
    )
    return graph.model_copy(update={"nodes": nodes})


def clear_selection(graph: Graph) -> Graph:
    nodes = tuple(
        node.model_copy(update={"selected": False}) if node.selected else node
        for node in graph.nodes
    )
    return graph.model_copy(update={"nodes": nodes})


def connect(graph: Graph, source: str, target: str) -> tuple[Graph, GraphEdge]:
    """
    Connect two nodes.

    An existing source->target edge is returned instead of adding a duplicate.
    """
    for node_id in (source, target):
        if node_id not in graph:
            raise NodeNotFoundError(node_id)

    for edge in graph.edges:
        if edge.source == source and edge.target == target:
            return graph, edge

    edge = GraphEdge(id=new_edge_id(), source=source, target=target)
    return graph.model_copy(update={"edges": graph.edges + (edge,)}), edge


def disconnect(graph: Graph, edge_id: str) -> Graph:
    """Remove an edge. Unknown edge ids are ignored."""
    return graph.model_copy(
        update={"edges": tuple(edge for edge in graph.edges if edge.id != edge_id)}
    )
