"""
Core conversion functions.

This module is the entry point for turning checklist bytes into canonical
documents and back. It only selects the codec for a format id and invokes it;
every codec error propagates to the caller unchanged.

Key Functions:
-------------
- decode: Decode bytes of a given format into a ChecklistDocument
- encode: Encode a ChecklistDocument into bytes of a given format
- convert: Decode from one format and encode into another

Usage Examples:
--------------
```python
from checklist_engine.formats import decode, encode

document = decode(content, "structured-json")
document.groups[0].title = "Preflight"
data = encode(document, "native-json")
```
"""

import logging
from typing import Optional, Union

from checklist_engine.formats.codecs import get_codec_for_format
from checklist_engine.formats.context import CodecContext
from checklist_engine.schemas.common.enums import ChecklistFormat
from checklist_engine.schemas.documents.checklist import ChecklistDocument

logger = logging.getLogger(__name__)

FormatId = Union[ChecklistFormat, str]


def decode(content: bytes, format_id: FormatId, context: Optional[CodecContext] = None) -> ChecklistDocument:
    """
    Decode checklist bytes into a canonical document.

    Args:
        content: Raw file content
        format_id: Format of the content
        context: Codec context, defaults to the shared default context

    Returns:
        Validated canonical document

    Raises:
        UnsupportedFormat: If no codec is registered for format_id
        DecodeError: If the content cannot be decoded
        InvalidDecodedDocument: If the decoded document violates an invariant
    """
    codec = get_codec_for_format(format_id, context)
    logger.debug(f"Decoding {len(content)} byte(s) with {type(codec).__name__}")
    return codec.decode(content)


def encode(document: ChecklistDocument, format_id: FormatId, context: Optional[CodecContext] = None) -> bytes:
    """
    Encode a canonical document into checklist bytes.

    Args:
        document: Document to encode
        format_id: Target format
        context: Codec context, defaults to the shared default context

    Returns:
        Encoded bytes

    Raises:
        UnsupportedFormat: If no codec is registered for format_id
        InvalidDocumentToEncode: If the document violates an invariant
        EncodeError: If the document cannot be represented in the format
    """
    codec = get_codec_for_format(format_id, context)
    logger.debug(f"Encoding document {document.title!r} with {type(codec).__name__}")
    return codec.encode(document)


def convert(content: bytes, source_format: FormatId, target_format: FormatId,
            context: Optional[CodecContext] = None) -> bytes:
    """
    Convert checklist bytes from one format to another.

    Both codecs are resolved before anything is decoded, so an unsupported
    target fails without doing any work.
    """
    source = get_codec_for_format(source_format, context)
    target = get_codec_for_format(target_format, context)
    document = source.decode(content)
    return target.encode(document)
