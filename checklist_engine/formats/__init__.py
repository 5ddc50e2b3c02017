"""
Checklist format conversion.

This package converts checklist files between a canonical document model and
the supported external formats:

- binary-proprietary: line-oriented binary format with a CRC32 trailer
- structured-json: checklist binder container (JSON, optionally tar.gz)
- generic-xml: generic XML markup of the canonical model
- native-json: the engine's own JSON serialization
"""

from checklist_engine.formats.core import convert, decode, encode
from checklist_engine.formats.context import CodecContext, build_context, get_default_context
from checklist_engine.formats.errors import (
    ConversionError,
    DecodeError,
    EncodeError,
    InvalidDecodedDocument,
    InvalidDocument,
    InvalidDocumentToEncode,
    UnsupportedFormat,
)
from checklist_engine.formats.utils.format_detector import detect_format
from checklist_engine.formats.validation import ValidationResult, Violation, validate_document

__all__ = [
    'decode',
    'encode',
    'convert',
    'detect_format',
    'validate_document',
    'ValidationResult',
    'Violation',
    'CodecContext',
    'build_context',
    'get_default_context',
    'ConversionError',
    'DecodeError',
    'EncodeError',
    'InvalidDocument',
    'InvalidDecodedDocument',
    'InvalidDocumentToEncode',
    'UnsupportedFormat',
]
