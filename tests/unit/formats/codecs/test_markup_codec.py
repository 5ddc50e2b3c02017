"""
Unit tests for the generic XML markup codec.
"""

from dataclasses import replace

import pytest

from checklist_engine.formats.codecs.markup_codec import MarkupCodec
from checklist_engine.formats.context import CodecContext
from checklist_engine.formats.errors import (
    InvalidDocument,
    MalformedMarkup,
    SchemaMismatch,
    UnrepresentableCharacter,
)
from checklist_engine.formats.utils.markup_dialect import MarkupConfig
from checklist_engine.schemas.common.enums import ChecklistFormat, GroupCategory, ItemKind
from checklist_engine.schemas.documents.checklist import (
    Checklist,
    ChecklistDocument,
    ChecklistGroup,
    ChecklistItem,
)


class TestMarkupRoundTrip:
    """Round trips through the markup codec."""

    def setup_method(self):
        """Create a codec with the default context."""
        self.codec = MarkupCodec(CodecContext())

    def test_round_trip(self, full_document):
        """Every canonical feature survives a round trip."""
        decoded = self.codec.decode(self.codec.encode(full_document))

        assert decoded.content_equals(full_document)
        assert decoded.source_format == ChecklistFormat.GENERIC_XML

    def test_whitespace_and_empty_note(self):
        """Surrounding whitespace and empty notes are preserved."""
        document = ChecklistDocument(groups=[ChecklistGroup(checklists=[
            Checklist(title="  padded ", note="", items=[ChecklistItem(text="  two\nlines  ")]),
        ])])

        decoded = self.codec.decode(self.codec.encode(document))

        assert decoded.content_equals(document)

    def test_custom_root_tag(self, full_document):
        """The configured root tag is used in both directions."""
        codec = MarkupCodec(replace(CodecContext(), markup=MarkupConfig(root_tag="binder")))

        data = codec.encode(full_document)

        assert b"<binder" in data
        assert codec.decode(data).content_equals(full_document)

    def test_encoded_shape(self):
        """Titles and scalars are attributes; free text is in child elements."""
        document = ChecklistDocument(title="Book", groups=[ChecklistGroup(
            category=GroupCategory.ABNORMAL,
            title="Abnormal",
            checklists=[Checklist(title="Fire", items=[ChecklistItem(text="Fuel", response="OFF")])],
        )])

        data = self.codec.encode(document)

        assert data.startswith(b"<?xml")
        assert b'<checklistDocument title="Book">' in data
        assert b'<group category="abnormal" title="Abnormal">' in data
        assert b'kind="plain_text"' in data
        assert b"<text>Fuel</text>" in data
        assert b"<response>OFF</response>" in data


class TestMarkupDecode:
    """Tests for markup decoding."""

    def setup_method(self):
        """Create a codec with the default context."""
        self.codec = MarkupCodec(CodecContext())

    def test_single_children_decode_as_lists(self):
        """One group, one checklist and one item still decode as sequences."""
        content = (
            b'<checklistDocument title="T">'
            b'<group category="emergency" title="Emergency">'
            b'<checklist title="Fire"><item kind="warning"><text>Evacuate</text></item></checklist>'
            b"</group></checklistDocument>"
        )

        document = self.codec.decode(content)

        assert len(document.groups) == 1
        assert len(document.groups[0].checklists) == 1
        item = document.groups[0].checklists[0].items[0]
        assert item.kind == ItemKind.WARNING
        assert item.text == "Evacuate"

    def test_missing_optional_parts(self):
        """Metadata, groups and item text may be omitted."""
        document = self.codec.decode(b"<checklistDocument><group><checklist><item/></checklist></group>"
                                     b"</checklistDocument>")

        assert document.metadata.make_model == ""
        assert document.groups[0].checklists[0].items[0].text == ""

    def test_malformed_markup(self):
        """Syntax errors are reported before any mapping happens."""
        with pytest.raises(MalformedMarkup) as exc_info:
            self.codec.decode(b'<checklistDocument title="T">\n<group>\n</checklistDocument>')

        assert exc_info.value.line == 3

    def test_wrong_root(self):
        """A different root element is a schema mismatch."""
        with pytest.raises(SchemaMismatch):
            self.codec.decode(b"<binder/>")

    def test_unknown_kind(self):
        """Values outside the canonical enumerations are schema mismatches."""
        content = (b'<checklistDocument><group><checklist><item kind="gauge"/></checklist></group>'
                   b"</checklistDocument>")

        with pytest.raises(SchemaMismatch) as exc_info:
            self.codec.decode(content)

        assert exc_info.value.details

    def test_unknown_element(self):
        """Unexpected elements are refused, not dropped."""
        content = b"<checklistDocument><colour>red</colour></checklistDocument>"

        with pytest.raises(SchemaMismatch):
            self.codec.decode(content)

    def test_stray_text(self):
        """Text directly inside structural elements is refused."""
        content = b'<checklistDocument title="T">loose text<group/></checklistDocument>'

        with pytest.raises(SchemaMismatch):
            self.codec.decode(content)

    def test_decoded_document_is_validated(self):
        """Structurally valid markup with invariant violations is refused."""
        content = (b'<checklistDocument><group><checklist><item kind="open_scratchpad"/>'
                   b"</checklist></group></checklistDocument>")

        with pytest.raises(InvalidDocument):
            self.codec.decode(content)


class TestMarkupEncode:
    """Tests for markup encoding."""

    def test_illegal_character(self):
        """Control characters cannot be written."""
        document = ChecklistDocument(groups=[ChecklistGroup(checklists=[
            Checklist(items=[ChecklistItem(text="bell\x07")]),
        ])])

        with pytest.raises(UnrepresentableCharacter) as exc_info:
            MarkupCodec(CodecContext()).encode(document)

        assert exc_info.value.character == "\x07"
        assert exc_info.value.position == 4
