"""Session orchestration and collaborator contracts."""

from .session import GenerationInProgressError, GenerationStatus, Session, SessionState
from .surfaces import CodeEditSurface, GraphEditSurface, LogNotifier, Notifier

__all__ = [
    "GenerationInProgressError",
    "GenerationStatus",
    "Session",
    "SessionState",
    "CodeEditSurface",
    "GraphEditSurface",
    "LogNotifier",
    "Notifier",
]
