"""
Common type definitions for the checklist engine.

This module provides the TypedDict shapes of the engine configuration so that
the loader, the codec context and the tests agree on one structure.
"""

from typing import Dict, List, TypedDict


class BinaryCodecConfig(TypedDict, total=False):
    """Configuration for the binary checklist codec."""
    text_encoding: str


class ContainerCodecConfig(TypedDict, total=False):
    """Configuration for the checklist binder container codec."""
    archive: bool
    indent: int
    content_filename: str


class MarkupCodecConfig(TypedDict, total=False):
    """Configuration for the generic XML codec."""
    root_tag: str
    attribute_prefix: str
    text_key: str
    always_array: List[str]


class NativeCodecConfig(TypedDict, total=False):
    """Configuration for the native JSON codec."""
    indent: int


class EngineConfig(TypedDict, total=False):
    """Complete configuration for the conversion engine."""
    version: int
    file_type_map: Dict[str, List[str]]
    binary: BinaryCodecConfig
    container: ContainerCodecConfig
    markup: MarkupCodecConfig
    native: NativeCodecConfig
