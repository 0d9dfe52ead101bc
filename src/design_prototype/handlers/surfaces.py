"""Contracts of the collaborators a session talks to."""

from typing import Protocol, Sequence, runtime_checkable

from design_prototype.agents.graph import GraphEdge, GraphNode
from design_prototype.agents.models import CodeTab
from design_prototype.core import get_logger


logger = get_logger(__name__)


@runtime_checkable
class CodeEditSurface(Protocol):
    """Editor holding one text buffer per artifact. Change events go to Session.edit_artifact."""

    def get_text(self, tab: CodeTab) -> str:
        ...

    def set_text(self, tab: CodeTab, text: str) -> None:
        ...


@runtime_checkable
class GraphEditSurface(Protocol):
    """Visual node editor. Events go to the Session graph operations or Session.sync_graph."""

    @property
    def nodes(self) -> Sequence[GraphNode]:
        ...

    @property
    def edges(self) -> Sequence[GraphEdge]:
        ...


@runtime_checkable
class Notifier(Protocol):
    """Fire-and-forget user notifications."""

    def loading(self, message: str) -> None:
        ...

    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class LogNotifier:
    """Notifier that writes to the structured log."""

    def loading(self, message: str) -> None:
        logger.info("notify_loading", message=message)

    def success(self, message: str) -> None:
        logger.info("notify_success", message=message)

    def error(self, message: str) -> None:
        logger.warning("notify_error", message=message)
