"""Common enumerations shared by the schemas and the codecs."""

from .enums import (
    ChecklistFormat,
    GroupCategory,
    ItemKind,
    ScratchpadTarget,
    FrequencyBand,
    CompletionAction,
)

__all__ = [
    "ChecklistFormat",
    "GroupCategory",
    "ItemKind",
    "ScratchpadTarget",
    "FrequencyBand",
    "CompletionAction",
]
