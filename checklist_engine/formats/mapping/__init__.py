"""Static translation tables between canonical taxonomies and container codes."""

from .tables import (
    ContainerType,
    ContainerSubtype,
    ContainerItemType,
    ContainerAction,
    MappingTables,
    build_tables,
    DEFAULT_TABLES,
)

__all__ = [
    "ContainerType",
    "ContainerSubtype",
    "ContainerItemType",
    "ContainerAction",
    "MappingTables",
    "build_tables",
    "DEFAULT_TABLES",
]
