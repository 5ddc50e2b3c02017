"""
Canonical checklist document schemas.

The models defined here are the single format-independent representation
that every codec decodes into and encodes from.
"""

from .common.enums import (
    ChecklistFormat,
    GroupCategory,
    ItemKind,
    ScratchpadTarget,
    FrequencyBand,
    CompletionAction,
)
from .documents.checklist import (
    ChecklistItem,
    Checklist,
    ChecklistGroup,
    DocumentMetadata,
    ChecklistDocument,
)

__all__ = [
    "ChecklistFormat",
    "GroupCategory",
    "ItemKind",
    "ScratchpadTarget",
    "FrequencyBand",
    "CompletionAction",
    "ChecklistItem",
    "Checklist",
    "ChecklistGroup",
    "DocumentMetadata",
    "ChecklistDocument",
]
