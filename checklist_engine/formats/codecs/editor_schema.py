"""
Pydantic schema of the checklist files written by the efis-editor web app.

These files are read on import only. Groups and checklists carry a ``title``,
items a ``prompt`` and ``expectation`` with ``ITEM_*`` type names, and groups a
``CATEGORY_*`` category. Fields the engine has no use for are ignored.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ITEM_FIELDS = frozenset({"prompt", "expectation", "type"})
METADATA_FIELDS = frozenset({"name", "aircraftInfo", "makeAndModel", "copyrightInfo"})
CATEGORY_PREFIX = "CATEGORY_"


class EditorModel(BaseModel):
    """Base class for efis-editor schema models (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class EditorItem(EditorModel):
    # Files omit the type of challenge/response items
    type: str = "ITEM_CHALLENGE_RESPONSE"
    prompt: str = ""
    expectation: str = ""
    indent: int = 0
    centered: bool = False


class EditorChecklist(EditorModel):
    title: str = ""
    items: List[EditorItem] = Field(default_factory=list)


class EditorGroup(EditorModel):
    title: str = ""
    category: Optional[str] = Field(None, description="CATEGORY_* name, normal when absent")
    checklists: List[EditorChecklist] = Field(default_factory=list)


class EditorMetadata(EditorModel):
    name: str = ""
    aircraft_info: str = ""
    make_and_model: str = ""
    copyright_info: str = ""


class EditorFile(EditorModel):
    """Root of an efis-editor checklist file."""

    groups: List[EditorGroup] = Field(default_factory=list)
    metadata: EditorMetadata = Field(default_factory=EditorMetadata)


def is_editor_file(raw) -> bool:
    """
    Tell an efis-editor file from the native serialization.

    The native form forbids every field checked here, so any one of them is
    enough.
    """
    if not isinstance(raw, dict):
        return False
    metadata = raw.get("metadata")
    if isinstance(metadata, dict) and METADATA_FIELDS & metadata.keys():
        return True
    groups = raw.get("groups")
    if not isinstance(groups, list):
        return False
    for group in groups:
        if not isinstance(group, dict):
            continue
        category = group.get("category")
        if isinstance(category, str) and category.startswith(CATEGORY_PREFIX):
            return True
        for checklist in group.get("checklists") or []:
            if not isinstance(checklist, dict):
                continue
            for item in checklist.get("items") or []:
                if isinstance(item, dict) and ITEM_FIELDS & item.keys():
                    return True
    return False
