"""
Unit tests for the binary checklist codec.

These tests cover:
- Round trips of representable documents
- Byte layout of encoded files
- Checksum enforcement and line-level decode errors
- Features and characters the format cannot carry
"""

import struct
import zlib

import pytest

from checklist_engine.formats.codecs.binary_codec import BinaryCodec, checksum
from checklist_engine.formats.context import CodecContext
from checklist_engine.formats.errors import (
    ChecksumMismatch,
    MalformedLine,
    UnrepresentableCharacter,
    UnsupportedFeature,
)
from checklist_engine.schemas.common.enums import (
    ChecklistFormat,
    CompletionAction,
    FrequencyBand,
    GroupCategory,
    ItemKind,
)
from checklist_engine.schemas.documents.checklist import (
    Checklist,
    ChecklistDocument,
    ChecklistGroup,
    ChecklistItem,
)

HEADER = b"\xf0\xf0\xf0\xf0\x00\x01\x00\x00\r\n"


def _with_trailer(payload: bytes) -> bytes:
    return payload + struct.pack("<I", (zlib.crc32(payload) & 0xFFFFFFFF) ^ 0xFFFFFFFF)


def _file(*lines: bytes) -> bytes:
    metadata = b" \r\n" * 5
    return _with_trailer(HEADER + metadata + b"".join(line + b"\r\n" for line in lines))


def _single_item_document(**item_fields):
    return ChecklistDocument(groups=[ChecklistGroup(
        title="G",
        checklists=[Checklist(title="C", items=[ChecklistItem(**item_fields)])],
    )])


class TestBinaryRoundTrip:
    """Round trips of documents inside the format's feature set."""

    def setup_method(self):
        """Create a codec with the default context."""
        self.codec = BinaryCodec(CodecContext())

    def test_round_trip(self, binary_document):
        """Decoding an encoded document gives the same content."""
        decoded = self.codec.decode(self.codec.encode(binary_document))

        assert decoded.content_equals(binary_document)
        assert decoded.source_format == ChecklistFormat.BINARY_PROPRIETARY

    def test_encoding_is_deterministic(self, binary_document):
        """Identical documents give identical bytes."""
        assert self.codec.encode(binary_document) == self.codec.encode(binary_document.model_copy(deep=True))

    def test_empty_document(self):
        """A document without groups survives a round trip."""
        decoded = self.codec.decode(self.codec.encode(ChecklistDocument()))

        assert decoded.content_equals(ChecklistDocument())

    def test_latin1_text(self):
        """Characters of the single-byte encoding are carried through."""
        document = _single_item_document(text="Température", response="Vérifiée ±2°")

        decoded = self.codec.decode(self.codec.encode(document))

        assert decoded.content_equals(document)


class TestBinaryLayout:
    """Tests for the byte layout of encoded files."""

    def setup_method(self):
        """Create a codec with the default context."""
        self.codec = BinaryCodec(CodecContext())

    def test_layout(self):
        """Header, metadata, control lines and trailer appear in order."""
        document = ChecklistDocument(title="Book", groups=[ChecklistGroup(
            title="Normal",
            checklists=[Checklist(title="Start", items=[
                ChecklistItem(text="Brakes", response="SET"),
                ChecklistItem(kind=ItemKind.NOTE, text="Hold", indent=1),
                ChecklistItem(kind=ItemKind.TITLE, text="Centered", centered=True),
            ])],
        )])

        data = self.codec.encode(document)

        expected_payload = (
            HEADER
            + b"Book\r\n \r\n \r\n \r\n \r\n"
            + b"<0Normal\r\n"
            + b"(0Start\r\n"
            + b"r0Brakes~SET\r\n"
            + b"n1Hold\r\n"
            + b"tcCentered\r\n"
            + b")\r\n"
            + b">\r\n"
            + b"END\r\n"
        )
        assert data[:-4] == expected_payload
        assert struct.unpack("<I", data[-4:])[0] == checksum(expected_payload)

    def test_checksum_value(self):
        """The trailer is the inverted CRC32 of the payload."""
        assert checksum(b"") == 0xFFFFFFFF
        assert checksum(b"123456789") == 0xCBF43926 ^ 0xFFFFFFFF

    def test_plain_item_without_response(self):
        """Plain items with no response use the challenge-only code."""
        data = self.codec.encode(_single_item_document(text="Lights"))

        assert b"c0Lights\r\n" in data


class TestBinaryDecodeErrors:
    """Tests for decode failures."""

    def setup_method(self):
        """Create a codec with the default context."""
        self.codec = BinaryCodec(CodecContext())

    def test_flipped_payload_byte(self, binary_document):
        """Flipping any payload byte is caught by the checksum."""
        data = bytearray(self.codec.encode(binary_document))
        for offset in (0, 7, len(data) // 2, len(data) - 5):
            corrupted = bytearray(data)
            corrupted[offset] ^= 0x01
            with pytest.raises(ChecksumMismatch):
                self.codec.decode(bytes(corrupted))

    def test_flipped_trailer_byte(self, binary_document):
        """A damaged trailer is a checksum mismatch too."""
        data = bytearray(self.codec.encode(binary_document))
        data[-1] ^= 0x80

        with pytest.raises(ChecksumMismatch) as exc_info:
            self.codec.decode(bytes(data))

        assert exc_info.value.expected != exc_info.value.actual

    def test_checksum_checked_before_parsing(self):
        """A bad header with a bad checksum reports the checksum."""
        with pytest.raises(ChecksumMismatch):
            self.codec.decode(b"garbage data that is not a checklist" + b"\x00\x00\x00\x00")

    def test_truncated_file(self):
        """Files shorter than header and trailer are malformed."""
        with pytest.raises(MalformedLine):
            self.codec.decode(b"\xf0\xf0")

    def test_bad_magic(self):
        """A valid checksum over a foreign header is a malformed line at offset 0."""
        with pytest.raises(MalformedLine) as exc_info:
            self.codec.decode(_with_trailer(b"NOTACHECKLIST\r\n"))

        assert exc_info.value.offset == 0

    def test_unknown_item_code(self):
        """Unknown control bytes are reported with their offset."""
        data = _file(b"<0G", b"(0C", b"x0Mystery", b")", b">", b"END")

        with pytest.raises(MalformedLine) as exc_info:
            self.codec.decode(data)

        assert exc_info.value.byte == ord("x")
        assert data[exc_info.value.offset] == ord("x")

    def test_invalid_indent_byte(self):
        """Indent bytes must be digits or the centered marker."""
        data = _file(b"<0G", b"(0C", b"c*Text", b")", b">", b"END")

        with pytest.raises(MalformedLine) as exc_info:
            self.codec.decode(data)

        assert exc_info.value.byte == ord("*")

    def test_item_outside_checklist(self):
        """Item lines directly inside a group are out of place."""
        with pytest.raises(MalformedLine):
            self.codec.decode(_file(b"<0G", b"c0Text", b">", b"END"))

    def test_missing_end(self):
        """A file that stops before END is malformed."""
        with pytest.raises(MalformedLine):
            self.codec.decode(_file(b"<0G", b">"))

    def test_data_after_end(self):
        """Nothing may follow END before the trailer."""
        with pytest.raises(MalformedLine):
            self.codec.decode(_file(b"END", b"extra"))


class TestBinaryDecodeRules:
    """Tests for decode conventions."""

    def setup_method(self):
        """Create a codec with the default context."""
        self.codec = BinaryCodec(CodecContext())

    def test_spacer_lines_are_skipped(self):
        """Empty lines inside a checklist produce no items."""
        document = self.codec.decode(_file(b"<0G", b"(0C", b"c0One", b"", b"c0Two", b")", b">", b"END"))

        assert [item.text for item in document.groups[0].checklists[0].items] == ["One", "Two"]

    def test_plaintext_code_decodes_as_note(self):
        """The 'p' code is a note."""
        document = self.codec.decode(_file(b"<0G", b"(0C", b"p0Plain", b")", b">", b"END"))

        item = document.groups[0].checklists[0].items[0]
        assert item.kind == ItemKind.NOTE
        assert item.text == "Plain"

    def test_high_indent_clamps(self):
        """Indent digits above 3 clamp to 3."""
        document = self.codec.decode(_file(b"<0G", b"(0C", b"c7Deep", b")", b">", b"END"))

        assert document.groups[0].checklists[0].items[0].indent == 3

    def test_response_keeps_later_separators(self):
        """Only the first separator splits challenge from response."""
        document = self.codec.decode(_file(b"<0G", b"(0C", b"r0Flaps~10~20", b")", b">", b"END"))

        item = document.groups[0].checklists[0].items[0]
        assert (item.text, item.response) == ("Flaps", "10~20")

    def test_groups_decode_as_normal(self):
        """The format has no category, so every group is normal."""
        document = self.codec.decode(_file(b"<0Emergency", b">", b"END"))

        assert document.groups[0].category == GroupCategory.NORMAL
        assert document.groups[0].title == "Emergency"

    def test_blank_metadata(self):
        """Single-space metadata lines decode as empty strings."""
        document = self.codec.decode(_file(b"END"))

        assert document.title == ""
        assert document.metadata.make_model == ""


class TestBinaryEncodeErrors:
    """Tests for encode failures."""

    def setup_method(self):
        """Create a codec with the default context."""
        self.codec = BinaryCodec(CodecContext())

    def test_character_outside_encoding(self):
        """Characters outside latin-1 are rejected with their position and path."""
        with pytest.raises(UnrepresentableCharacter) as exc_info:
            self.codec.encode(_single_item_document(text="Check ✓"))

        error = exc_info.value
        assert error.character == "✓"
        assert error.position == 6
        assert error.path == "groups[0].checklists[0].items[0].text"

    @pytest.mark.parametrize("text", ["two\nlines", "carriage\rreturn"])
    def test_line_breaks_rejected(self, text):
        """Line breaks would split the record."""
        with pytest.raises(UnrepresentableCharacter):
            self.codec.encode(_single_item_document(text=text))

    def test_separator_in_challenge(self):
        """The response separator cannot appear in a challenge with a response."""
        with pytest.raises(UnrepresentableCharacter) as exc_info:
            self.codec.encode(_single_item_document(text="A~B", response="C"))

        assert exc_info.value.character == "~"
        assert exc_info.value.position == 1

    def test_separator_allowed_without_response(self):
        """Challenge-only items may contain the separator."""
        document = _single_item_document(text="A~B")

        assert self.codec.decode(self.codec.encode(document)).content_equals(document)

    def test_metadata_path(self):
        """Metadata errors name their field."""
        document = ChecklistDocument()
        document.metadata.copyright = "© 2024 ❤"

        with pytest.raises(UnrepresentableCharacter) as exc_info:
            self.codec.encode(document)

        assert exc_info.value.path == "metadata.copyright"

    @pytest.mark.parametrize("category", [GroupCategory.ABNORMAL, GroupCategory.EMERGENCY])
    def test_non_normal_category(self, category):
        """Only normal groups can be written."""
        document = ChecklistDocument(groups=[ChecklistGroup(category=category, title="X")])

        with pytest.raises(UnsupportedFeature) as exc_info:
            self.codec.encode(document)

        assert exc_info.value.path == "groups[0].category"

    def test_checklist_note(self):
        """Checklist notes have no representation."""
        document = ChecklistDocument(groups=[ChecklistGroup(checklists=[Checklist(note="n")])])

        with pytest.raises(UnsupportedFeature):
            self.codec.encode(document)

    @pytest.mark.parametrize("fields", [
        {"kind": ItemKind.LOCAL_ALTIMETER},
        {"kind": ItemKind.OPEN_NEAREST},
        {"kind": ItemKind.FREQUENCY_PROMPT, "band": FrequencyBand.TOWER_CTAF},
        {"completion_action": CompletionAction.OPEN_MAP},
        {"centered": True, "indent": 2},
    ])
    def test_unsupported_item_features(self, fields):
        """Live-data kinds, completion actions and indented centering are refused."""
        with pytest.raises(UnsupportedFeature):
            self.codec.encode(_single_item_document(text="x", **fields))

    @pytest.mark.parametrize("field, path", [
        ("title", "title"),
        ("make_model", "metadata.make_model"),
        ("copyright", "metadata.copyright"),
    ])
    def test_single_space_field(self, field, path):
        """A field holding one space would read back empty, so it is refused."""
        document = ChecklistDocument()
        if field == "title":
            document.title = " "
        else:
            setattr(document.metadata, field, " ")

        with pytest.raises(UnsupportedFeature) as exc_info:
            self.codec.encode(document)

        assert exc_info.value.path == path

    def test_spaces_in_titles_survive(self):
        """Longer blank values and single-space group titles round-trip."""
        document = ChecklistDocument(title="  ", groups=[ChecklistGroup(title=" ")])

        assert self.codec.decode(self.codec.encode(document)).content_equals(document)
