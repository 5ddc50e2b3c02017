"""
Pydantic schema of the checklist binder container.

The container is a JSON envelope holding exactly one object with flat lists of
checklists and checklist items; checklists reference their items by uuid.
These models exist only while a container is being decoded or encoded.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DATA_MODEL_VERSION = 1
PACKAGE_TYPE_VERSION = 1
CONTAINER_TYPE = "checklistBinder"


class ContainerModel(BaseModel):
    """Base class for container schema models (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ContainerItem(ContainerModel):
    """A checklist item as stored in the container."""

    uuid: str
    item_type: int
    title: str = ""
    action: str = ""
    checked: bool = False
    completion_action: Optional[int] = Field(None, description="Completion action code, if any")
    indent: Optional[int] = Field(None, description="Indent depth when not zero")
    centered: Optional[bool] = Field(None, description="Present and true for centered items")


class ContainerChecklist(ContainerModel):
    """A checklist as stored in the container."""

    uuid: str
    name: str = ""
    type: int
    subtype: int
    completion_item: int
    checklist_items: List[str] = Field(default_factory=list)
    note: Optional[str] = None
    group_index: Optional[int] = Field(None, description="Position of the canonical group holding this checklist")


class ContainerGroup(ContainerModel):
    """A group without checklists, which no checklist entry can carry."""

    group_index: int
    type: int
    subtype: int


class ContainerBinder(ContainerModel):
    """Ordered view over the checklists of an object."""

    uuid: str
    sort_order: int = 0
    name: str = ""
    checklists: List[str] = Field(default_factory=list)


class ContainerObjects(ContainerModel):
    """The single object of a binder container."""

    checklists: List[ContainerChecklist] = Field(default_factory=list)
    checklist_items: List[ContainerItem] = Field(default_factory=list)
    binders: List[ContainerBinder] = Field(default_factory=list)
    empty_groups: Optional[List[ContainerGroup]] = None
    version: int = 0


class ContainerEnvelope(ContainerModel):
    """Top level of a binder container."""

    data_model_version: int
    package_type_version: int
    name: str = ""
    type: str
    objects: List[ContainerObjects]
