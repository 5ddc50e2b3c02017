"""Canonical checklist document models."""

from .checklist import (
    ChecklistItem,
    Checklist,
    ChecklistGroup,
    DocumentMetadata,
    ChecklistDocument,
)

__all__ = [
    "ChecklistItem",
    "Checklist",
    "ChecklistGroup",
    "DocumentMetadata",
    "ChecklistDocument",
]
