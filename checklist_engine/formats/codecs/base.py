"""
Base codec interface for checklist formats.

Every format-specific codec extends ``BaseCodec`` and implements the two
format hooks, ``_decode`` and ``_encode``. The public ``decode`` and ``encode``
methods wrap those hooks with the checks shared by all formats:

1. Decoded documents are validated before they are returned
2. Documents are validated before any bytes are produced
3. Decoded documents record the format they came from

Codecs hold no mutable state beyond the read-only ``CodecContext`` they are
built with, so one instance can serve any number of conversions.

Example:
    class PlainTextCodec(BaseCodec):
        format_type = ChecklistFormat.NATIVE_JSON

        def _decode(self, content):
            ...

        def _encode(self, document):
            ...

    from checklist_engine.formats.codecs.registry import register_codec
    register_codec(PlainTextCodec.format_type, PlainTextCodec)
"""

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, Optional, Type

from checklist_engine.formats.context import CodecContext, get_default_context
from checklist_engine.formats.errors import (
    InvalidDecodedDocument,
    InvalidDocument,
    InvalidDocumentToEncode,
)
from checklist_engine.formats.validation import validate_document
from checklist_engine.schemas.common.enums import ChecklistFormat
from checklist_engine.schemas.documents.checklist import ChecklistDocument

logger = logging.getLogger(__name__)


class BaseCodec(ABC):
    """
    Base interface for all checklist format codecs.

    Subclasses set ``format_type`` and implement ``_decode`` and ``_encode``.
    """

    format_type: ClassVar[ChecklistFormat]
    stamps_provenance: ClassVar[bool] = True

    def __init__(self, context: Optional[CodecContext] = None):
        """
        Initialize the codec.

        Args:
            context: Shared codec context, defaults to the one built from the
                default configuration
        """
        self.context = context if context is not None else get_default_context()

    def decode(self, content: bytes) -> ChecklistDocument:
        """
        Decode raw bytes into a validated canonical document.

        Args:
            content: Raw file content

        Returns:
            Canonical document tagged with this codec's format

        Raises:
            DecodeError: If the content cannot be decoded
            InvalidDecodedDocument: If the decoded document violates an invariant
        """
        if not isinstance(content, (bytes, bytearray, memoryview)):
            raise TypeError(f"Expected bytes, got {type(content).__name__}")
        document = self._decode(bytes(content))
        if self.stamps_provenance:
            document.source_format = self.format_type
        self._require_valid(document, InvalidDecodedDocument)
        logger.debug(f"Decoded {len(document.groups)} group(s) from {self.format_type.value}")
        return document

    def encode(self, document: ChecklistDocument) -> bytes:
        """
        Encode a canonical document into this codec's format.

        Args:
            document: Document to encode

        Returns:
            Encoded bytes

        Raises:
            InvalidDocumentToEncode: If the document violates an invariant
            EncodeError: If the document cannot be represented in this format
        """
        self._require_valid(document, InvalidDocumentToEncode)
        content = self._encode(document)
        logger.debug(f"Encoded {len(content)} byte(s) as {self.format_type.value}")
        return content

    @staticmethod
    def _require_valid(document: ChecklistDocument, error_class: Type[InvalidDocument]) -> None:
        result = validate_document(document)
        if not result:
            raise error_class(result.violations)

    @abstractmethod
    def _decode(self, content: bytes) -> ChecklistDocument:
        """Format-specific decoding."""
        pass

    @abstractmethod
    def _encode(self, document: ChecklistDocument) -> bytes:
        """Format-specific encoding."""
        pass
