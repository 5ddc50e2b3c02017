"""
Central type definitions for the checklist engine.

This module provides the typed configuration structures shared by the
configuration loader and the codecs.
"""

from .common import (
    BinaryCodecConfig,
    ContainerCodecConfig,
    MarkupCodecConfig,
    NativeCodecConfig,
    EngineConfig,
)

__all__ = [
    "BinaryCodecConfig",
    "ContainerCodecConfig",
    "MarkupCodecConfig",
    "NativeCodecConfig",
    "EngineConfig",
]
