"""
Registry for checklist format codecs.

This module provides functionality to register and retrieve format-specific codecs.
"""

from typing import Dict, List, Optional, Type, TypeVar, Union

from checklist_engine.formats.codecs.base import BaseCodec
from checklist_engine.formats.context import CodecContext
from checklist_engine.formats.errors import UnsupportedFormat
from checklist_engine.schemas.common.enums import ChecklistFormat

# Type variable for concrete codec classes that extend BaseCodec
T = TypeVar('T', bound=BaseCodec)

# Registry of format codecs
_CODEC_REGISTRY: Dict[ChecklistFormat, Type[BaseCodec]] = {}


def _resolve_format(format_type: Union[ChecklistFormat, str]) -> ChecklistFormat:
    if isinstance(format_type, ChecklistFormat):
        return format_type
    try:
        return ChecklistFormat(str(format_type).lower())
    except ValueError:
        raise UnsupportedFormat(format_type) from None


def clear_registry() -> None:
    """
    Clear all registered codecs from the registry.

    This is primarily useful for testing purposes.
    """
    _CODEC_REGISTRY.clear()


def register_codec(format_type: Union[ChecklistFormat, str], codec_class: Type[T]) -> None:
    """
    Register a codec for a specific format.

    Args:
        format_type: Checklist format identifier
        codec_class: Codec class to register

    Raises:
        ValueError: If codec_class is None
        UnsupportedFormat: If format_type is not a known format id
    """
    if codec_class is None:
        raise ValueError("Codec class cannot be None")
    _CODEC_REGISTRY[_resolve_format(format_type)] = codec_class


def get_codec_class(format_type: Union[ChecklistFormat, str]) -> Type[BaseCodec]:
    """
    Get the codec class for a specific format.

    Args:
        format_type: Checklist format identifier

    Returns:
        Codec class for the specified format

    Raises:
        UnsupportedFormat: If no codec is registered for the format
    """
    resolved = _resolve_format(format_type)
    if resolved not in _CODEC_REGISTRY:
        raise UnsupportedFormat(format_type)
    return _CODEC_REGISTRY[resolved]


def get_codec_for_format(format_type: Union[ChecklistFormat, str],
                         context: Optional[CodecContext] = None) -> BaseCodec:
    """
    Get an instance of the codec for a specific format.

    Args:
        format_type: Checklist format identifier
        context: Codec context, defaults to the shared default context

    Returns:
        Codec instance for the specified format
    """
    codec_class = get_codec_class(format_type)
    return codec_class(context)


def get_supported_formats() -> List[ChecklistFormat]:
    """
    Get a list of all supported checklist formats.

    Returns:
        List of format identifiers
    """
    return list(_CODEC_REGISTRY.keys())
