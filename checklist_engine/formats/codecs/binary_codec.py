"""
Codec for the line-oriented binary checklist format.

Layout::

    F0 F0 F0 F0 00 01 <default group> <default checklist> CRLF
    five metadata lines (title, make/model, registration, manufacturer, copyright)
    <0<group title>                  group start
    (0<checklist title>              checklist start
    <code><indent><text>             item line
    )                                checklist end
    >                                group end
    END
    <crc32(payload) ^ 0xFFFFFFFF as little-endian uint32>

Every line ends with CRLF and text uses a single-byte encoding (latin-1 by
default). Item codes and indent bytes are listed in ``ITEM_CODES`` and
``CENTERED_INDENT``.
"""

import logging
import struct
import zlib
from typing import List, Optional, Tuple

from checklist_engine.formats.codecs.base import BaseCodec
from checklist_engine.formats.errors import (
    ChecksumMismatch,
    MalformedLine,
    UnrepresentableCharacter,
    UnsupportedFeature,
)
from checklist_engine.formats.validation import MAX_INDENT
from checklist_engine.schemas.common.enums import ChecklistFormat, GroupCategory, ItemKind
from checklist_engine.schemas.documents.checklist import (
    Checklist,
    ChecklistDocument,
    ChecklistGroup,
    ChecklistItem,
    DocumentMetadata,
)

logger = logging.getLogger(__name__)

MAGIC = b"\xf0\xf0\xf0\xf0\x00\x01"
CRLF = b"\r\n"
GROUP_START = b"<0"
CHECKLIST_START = b"(0"
GROUP_END = b">"
CHECKLIST_END = b")"
FILE_END = b"END"
EMPTY_FIELD = " "
RESPONSE_SEPARATOR = "~"
CENTERED_INDENT = ord("c")

_TRAILER = struct.Struct("<I")

# Item code byte -> (kind, carries a response)
ITEM_CODES = {
    ord("c"): (ItemKind.PLAIN_TEXT, False),
    ord("r"): (ItemKind.PLAIN_TEXT, True),
    ord("n"): (ItemKind.NOTE, False),
    ord("p"): (ItemKind.NOTE, False),
    ord("t"): (ItemKind.TITLE, False),
    ord("w"): (ItemKind.WARNING, False),
    ord("a"): (ItemKind.CAUTION, False),
}

KIND_CODES = {
    ItemKind.NOTE: ord("n"),
    ItemKind.TITLE: ord("t"),
    ItemKind.WARNING: ord("w"),
    ItemKind.CAUTION: ord("a"),
}

METADATA_FIELDS = ("make_model", "aircraft_registration", "manufacturer", "copyright")


def checksum(payload: bytes) -> int:
    """Trailer value stored after the payload."""
    return (zlib.crc32(payload) & 0xFFFFFFFF) ^ 0xFFFFFFFF


class _LineReader:
    """Cursor over the payload, splitting on CRLF."""

    def __init__(self, payload: bytes, encoding: str):
        self.payload = payload
        self.encoding = encoding
        self.offset = 0

    def at_end(self) -> bool:
        return self.offset >= len(self.payload)

    def read_bytes(self, count: int) -> bytes:
        chunk = self.payload[self.offset:self.offset + count]
        if len(chunk) != count:
            raise MalformedLine(self.offset, reason="truncated file")
        self.offset += count
        return chunk

    def peek_raw_line(self) -> bytes:
        end = self.payload.find(CRLF, self.offset)
        if end < 0:
            raise MalformedLine(self.offset, reason="line is not terminated by CRLF")
        return self.payload[self.offset:end]

    def read_raw_line(self) -> bytes:
        line = self.peek_raw_line()
        self.offset += len(line) + len(CRLF)
        return line

    def read_text(self) -> str:
        start = self.offset
        raw = self.read_raw_line()
        try:
            return raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise MalformedLine(start + e.start, raw[e.start], reason="byte is not valid text") from None

    def consume_line(self, expected: bytes) -> bool:
        if self.peek_raw_line() == expected:
            self.offset += len(expected) + len(CRLF)
            return True
        return False

    def expect_prefix(self, prefix: bytes) -> None:
        chunk = self.payload[self.offset:self.offset + len(prefix)]
        if chunk != prefix:
            byte = self.payload[self.offset] if self.offset < len(self.payload) else None
            raise MalformedLine(self.offset, byte)
        self.offset += len(prefix)


class BinaryCodec(BaseCodec):
    """Codec for the binary checklist format."""

    format_type = ChecklistFormat.BINARY_PROPRIETARY

    # Decoding

    def _decode(self, content: bytes) -> ChecklistDocument:
        if len(content) < len(MAGIC) + 2 + _TRAILER.size:
            raise MalformedLine(0, reason="truncated file")

        payload, trailer = content[:-_TRAILER.size], content[-_TRAILER.size:]
        (stored,) = _TRAILER.unpack(trailer)
        computed = checksum(payload)
        if stored != computed:
            raise ChecksumMismatch(stored, computed)

        reader = _LineReader(payload, self.context.text_encoding)
        reader.expect_prefix(MAGIC)
        reader.read_bytes(2)  # default group and checklist indices
        if not reader.consume_line(b""):
            raise MalformedLine(reader.offset, payload[reader.offset], reason="unexpected header ending")

        title = self._read_field(reader)
        metadata = DocumentMetadata(**{name: self._read_field(reader) for name in METADATA_FIELDS})

        groups: List[ChecklistGroup] = []
        while not reader.consume_line(FILE_END):
            groups.append(self._read_group(reader))

        if not reader.at_end():
            raise MalformedLine(reader.offset, payload[reader.offset], reason="data after END")

        return ChecklistDocument(title=title, metadata=metadata, groups=groups)

    @staticmethod
    def _read_field(reader: _LineReader) -> str:
        value = reader.read_text()
        return "" if value == EMPTY_FIELD else value

    def _read_group(self, reader: _LineReader) -> ChecklistGroup:
        reader.expect_prefix(GROUP_START)
        group = ChecklistGroup(category=GroupCategory.NORMAL, title=reader.read_text())
        while not reader.consume_line(GROUP_END):
            group.checklists.append(self._read_checklist(reader))
        return group

    def _read_checklist(self, reader: _LineReader) -> Checklist:
        reader.expect_prefix(CHECKLIST_START)
        checklist = Checklist(title=reader.read_text())
        while not reader.consume_line(CHECKLIST_END):
            item = self._read_item(reader)
            if item is not None:
                checklist.items.append(item)
        return checklist

    def _read_item(self, reader: _LineReader) -> Optional[ChecklistItem]:
        # Blank lines are spacers
        if reader.consume_line(b""):
            return None

        start = reader.offset
        code, indent_byte = reader.read_bytes(2)
        if code not in ITEM_CODES:
            raise MalformedLine(start, code, reason="unknown item code")
        kind, has_response = ITEM_CODES[code]

        indent, centered = self._decode_indent(start + 1, indent_byte)
        text = reader.read_text()
        response = ""
        if has_response:
            text, _, response = text.partition(RESPONSE_SEPARATOR)

        return ChecklistItem(kind=kind, text=text, response=response, indent=indent, centered=centered)

    @staticmethod
    def _decode_indent(offset: int, indent_byte: int) -> Tuple[int, bool]:
        if indent_byte == CENTERED_INDENT:
            return 0, True
        if not ord("0") <= indent_byte <= ord("9"):
            raise MalformedLine(offset, indent_byte, reason="invalid indent")
        return min(indent_byte - ord("0"), MAX_INDENT), False

    # Encoding

    def _encode(self, document: ChecklistDocument) -> bytes:
        out = bytearray(MAGIC)
        out += b"\x00\x00"
        out += CRLF

        self._write_field(out, document.title, "title")
        for name in METADATA_FIELDS:
            self._write_field(out, getattr(document.metadata, name), f"metadata.{name}")

        for g, group in enumerate(document.groups):
            group_path = f"groups[{g}]"
            if group.category != GroupCategory.NORMAL:
                raise UnsupportedFeature("group category", group.category.value, f"{group_path}.category")
            out += GROUP_START
            self._write_line(out, group.title, f"{group_path}.title")

            for c, checklist in enumerate(group.checklists):
                checklist_path = f"{group_path}.checklists[{c}]"
                if checklist.note is not None:
                    raise UnsupportedFeature("checklist note", checklist.note, f"{checklist_path}.note")
                out += CHECKLIST_START
                self._write_line(out, checklist.title, f"{checklist_path}.title")
                for i, item in enumerate(checklist.items):
                    self._write_item(out, item, f"{checklist_path}.items[{i}]")
                out += CHECKLIST_END + CRLF

            out += GROUP_END + CRLF

        out += FILE_END + CRLF
        payload = bytes(out)
        return payload + _TRAILER.pack(checksum(payload))

    def _write_item(self, out: bytearray, item: ChecklistItem, path: str) -> None:
        if item.completion_action is not None:
            raise UnsupportedFeature("completion action", item.completion_action.value, f"{path}.completion_action")
        if item.centered and item.indent:
            raise UnsupportedFeature("indent on a centered item", item.indent, f"{path}.indent")

        if item.kind == ItemKind.PLAIN_TEXT:
            code = ord("r") if item.response else ord("c")
        elif item.kind in KIND_CODES:
            code = KIND_CODES[item.kind]
        else:
            raise UnsupportedFeature("item kind", item.kind.value, f"{path}.kind")

        indent_byte = CENTERED_INDENT if item.centered else ord("0") + item.indent
        out.append(code)
        out.append(indent_byte)

        if code == ord("r"):
            separator = item.text.find(RESPONSE_SEPARATOR)
            if separator >= 0:
                raise UnrepresentableCharacter(RESPONSE_SEPARATOR, separator, f"{path}.text")
            text = self._encode_text(item.text, f"{path}.text")
            response = self._encode_text(item.response, f"{path}.response")
            out += text + RESPONSE_SEPARATOR.encode(self.context.text_encoding) + response + CRLF
        else:
            out += self._encode_text(item.text, f"{path}.text") + CRLF

    def _write_field(self, out: bytearray, value: str, path: str) -> None:
        # A lone space is how an empty field is written
        if value == EMPTY_FIELD:
            raise UnsupportedFeature("single-space value", value, path)
        self._write_line(out, value or EMPTY_FIELD, path)

    def _write_line(self, out: bytearray, value: str, path: str) -> None:
        out += self._encode_text(value, path) + CRLF

    def _encode_text(self, value: str, path: str) -> bytes:
        for position, char in enumerate(value):
            if char in "\r\n":
                raise UnrepresentableCharacter(char, position, path)
        try:
            return value.encode(self.context.text_encoding)
        except UnicodeEncodeError as e:
            raise UnrepresentableCharacter(value[e.start], e.start, path) from None
