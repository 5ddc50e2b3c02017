"""
Canonical checklist document models.

These Pydantic v2 models are the target of every decoder and the source of
every encoder. Field types are enforced on construction and assignment;
structural invariants that span fields (indent range, kind parameters) are
reported by ``checklist_engine.formats.validation`` instead of being rejected
here, so that a decoded document can be inspected before it is refused.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from checklist_engine.schemas.common.enums import (
    ChecklistFormat,
    CompletionAction,
    FrequencyBand,
    GroupCategory,
    ItemKind,
    ScratchpadTarget,
)


class CanonicalModel(BaseModel):
    """Base class for the canonical document models.

    Fields serialize with camelCase aliases (the native JSON form) and can be
    populated by either name.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )


class ChecklistItem(CanonicalModel):
    """A single checklist line."""

    kind: ItemKind = Field(ItemKind.PLAIN_TEXT, description="Kind of the item")
    text: str = Field("", description="Challenge or note text")
    response: str = Field("", description="Expected response for challenge/response items")
    indent: int = Field(0, description="Indent depth, 0-3")
    centered: bool = Field(False, description="Whether the item is rendered centered")
    scratchpad: Optional[ScratchpadTarget] = Field(None, description="Target of OPEN_SCRATCHPAD items")
    band: Optional[FrequencyBand] = Field(None, description="Band of FREQUENCY_PROMPT items")
    completion_action: Optional[CompletionAction] = Field(
        None, description="Action performed when the item is completed"
    )


class Checklist(CanonicalModel):
    """A named, ordered list of items."""

    title: str = ""
    note: Optional[str] = None
    items: List[ChecklistItem] = Field(default_factory=list)


class ChecklistGroup(CanonicalModel):
    """A thematic bucket of checklists keyed by (category, title)."""

    category: GroupCategory = GroupCategory.NORMAL
    title: str = ""
    checklists: List[Checklist] = Field(default_factory=list)

    @property
    def key(self) -> tuple:
        """Canonical group key used by the mapping tables."""
        return (self.category, self.title)


class DocumentMetadata(CanonicalModel):
    """File-level aircraft and copyright information."""

    aircraft_registration: str = ""
    make_model: str = ""
    manufacturer: str = ""
    copyright: str = ""


class ChecklistDocument(CanonicalModel):
    """Root of a checklist document."""

    title: str = ""
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    groups: List[ChecklistGroup] = Field(default_factory=list)
    source_format: Optional[ChecklistFormat] = Field(
        None, description="Format the document was decoded from, if any"
    )

    def content_equals(self, other: "ChecklistDocument") -> bool:
        """Compare two documents ignoring their provenance."""
        exclude = {"source_format"}
        return self.model_dump(exclude=exclude) == other.model_dump(exclude=exclude)

    def iter_items(self):
        """Yield ``(path, item)`` for every item in document order."""
        for g, group in enumerate(self.groups):
            for c, checklist in enumerate(group.checklists):
                for i, item in enumerate(checklist.items):
                    yield f"groups[{g}].checklists[{c}].items[{i}]", item
