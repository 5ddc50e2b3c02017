"""
Format codecs for the checklist engine.

This module provides format-specific codecs and registers each of them with
the codec registry on import.
"""

from .base import BaseCodec
from .registry import (
    register_codec,
    get_codec_class,
    get_codec_for_format,
    get_supported_formats,
    clear_registry,
)

from .binary_codec import BinaryCodec
from .container_codec import ContainerCodec
from .markup_codec import MarkupCodec
from .native_codec import NativeCodec

_BUILTIN_CODECS = (BinaryCodec, ContainerCodec, MarkupCodec, NativeCodec)


def register_builtin_codecs() -> None:
    """Register the codecs shipped with the engine."""
    for codec_class in _BUILTIN_CODECS:
        register_codec(codec_class.format_type, codec_class)


register_builtin_codecs()

__all__ = [
    'BaseCodec',
    'BinaryCodec',
    'ContainerCodec',
    'MarkupCodec',
    'NativeCodec',
    'register_codec',
    'register_builtin_codecs',
    'get_codec_class',
    'get_codec_for_format',
    'get_supported_formats',
    'clear_registry',
]
