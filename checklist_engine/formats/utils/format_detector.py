"""
Format detection utilities for checklist files.

Formats are detected from the file extension using the configured
``file_type_map``. Extensions shared by several formats (``.json``) and
extension-less input are resolved by looking at the content.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from checklist_engine.config import get_config
from checklist_engine.formats.errors import UnsupportedFormat
from checklist_engine.schemas.common.enums import ChecklistFormat

logger = logging.getLogger(__name__)

BINARY_MAGIC = b"\xf0\xf0\xf0\xf0\x00\x01"
GZIP_MAGIC = b"\x1f\x8b"
UTF8_BOM = b"\xef\xbb\xbf"
CONTAINER_MARKERS = (b'"dataModelVersion"', b'"checklistBinder"')

# Extensions that never decide the format without looking at the content
AMBIGUOUS_EXTENSIONS = {".json"}

# Cache for file type mappings
_extension_to_format_map: Optional[Dict[str, ChecklistFormat]] = None


def get_extension_to_format_map(file_type_map: Optional[Dict[str, List[str]]] = None) -> Dict[str, ChecklistFormat]:
    """
    Get a mapping from file extensions to format ids.

    Args:
        file_type_map: Format id -> extensions mapping; the configured mapping
            is used (and cached) when omitted

    Returns:
        Dictionary mapping lower-case extensions to format ids
    """
    global _extension_to_format_map

    if file_type_map is None and _extension_to_format_map is not None:
        return _extension_to_format_map

    source = file_type_map if file_type_map is not None else get_config()["file_type_map"]
    extension_map: Dict[str, ChecklistFormat] = {}
    for format_id, extensions in source.items():
        try:
            format_type = ChecklistFormat(format_id)
        except ValueError:
            raise UnsupportedFormat(format_id) from None
        for ext in extensions:
            ext = ext.lower()
            extension_map[ext if ext.startswith(".") else f".{ext}"] = format_type

    if file_type_map is None:
        logger.debug(f"Loaded {len(extension_map)} file extension mappings from configuration")
        _extension_to_format_map = extension_map
    return extension_map


def detect_format_from_content(content: bytes) -> Optional[ChecklistFormat]:
    """
    Detect a checklist format from the leading bytes of the content.

    Args:
        content: Raw file content

    Returns:
        Detected format, or None if the content is not recognized
    """
    if content.startswith(BINARY_MAGIC):
        return ChecklistFormat.BINARY_PROPRIETARY
    if content.startswith(GZIP_MAGIC):
        return ChecklistFormat.STRUCTURED_JSON

    head = content[len(UTF8_BOM):] if content.startswith(UTF8_BOM) else content
    head = head.lstrip()
    if head.startswith(b"<"):
        return ChecklistFormat.GENERIC_XML
    if head.startswith(b"{"):
        if any(marker in head for marker in CONTAINER_MARKERS):
            return ChecklistFormat.STRUCTURED_JSON
        return ChecklistFormat.NATIVE_JSON
    return None


def detect_format(file_name: Optional[Union[str, Path]] = None, content: Optional[bytes] = None,
                  file_type_map: Optional[Dict[str, List[str]]] = None) -> ChecklistFormat:
    """
    Detect the format of a checklist file from its name and content.

    Args:
        file_name: File name or path, if known
        content: Raw file content, if available
        file_type_map: Format id -> extensions mapping overriding the
            configured one

    Returns:
        Detected format id

    Raises:
        UnsupportedFormat: If neither the extension nor the content identify
            a supported format
    """
    ext = Path(file_name).suffix.lower() if file_name else ""
    extension_map = get_extension_to_format_map(file_type_map)

    if ext in extension_map and ext not in AMBIGUOUS_EXTENSIONS:
        logger.debug(f"Found format {extension_map[ext].value} for extension {ext}")
        return extension_map[ext]

    if content is not None:
        detected = detect_format_from_content(content)
        if detected is not None:
            logger.debug(f"Detected format {detected.value} from content")
            return detected

    if ext in extension_map:
        return extension_map[ext]

    raise UnsupportedFormat(ext or file_name)
