"""Preview document assembly."""

from .document import PLACEHOLDER_PAGE, assemble_document, preview_document

__all__ = ["PLACEHOLDER_PAGE", "assemble_document", "preview_document"]
