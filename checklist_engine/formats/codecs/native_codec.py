"""
Codec for the engine's own JSON serialization of the canonical model.

Decoding also accepts checklist files exported by the efis-editor web app
(see ``editor_schema``); those are detected by their field names and are
never written.
"""

import json
import logging

from pydantic import ValidationError

from checklist_engine.formats.codecs.base import BaseCodec
from checklist_engine.formats.codecs.editor_schema import (
    CATEGORY_PREFIX,
    EditorFile,
    EditorGroup,
    EditorItem,
    is_editor_file,
)
from checklist_engine.formats.errors import MalformedJson, SchemaMismatch
from checklist_engine.schemas.common.enums import ChecklistFormat, GroupCategory, ItemKind
from checklist_engine.schemas.documents.checklist import (
    Checklist,
    ChecklistDocument,
    ChecklistGroup,
    ChecklistItem,
    DocumentMetadata,
)

logger = logging.getLogger(__name__)

EDITOR_ITEM_KINDS = {
    "ITEM_CHALLENGE_RESPONSE": ItemKind.PLAIN_TEXT,
    "ITEM_CHALLENGE": ItemKind.PLAIN_TEXT,
    "ITEM_TITLE": ItemKind.TITLE,
    "ITEM_PLAINTEXT": ItemKind.NOTE,
    "ITEM_NOTE": ItemKind.NOTE,
    "ITEM_WARNING": ItemKind.WARNING,
    "ITEM_CAUTION": ItemKind.CAUTION,
    "ITEM_SPACE": ItemKind.NOTE,
}

MAX_EDITOR_INDENT = 3


def _schema_mismatch(error: ValidationError, what: str) -> SchemaMismatch:
    details = [
        {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]}
        for e in error.errors()
    ]
    return SchemaMismatch(f"{error.error_count()} invalid value(s) in {what}", details=details)


class NativeCodec(BaseCodec):
    """Lossless JSON codec; provenance is serialized along with the content."""

    format_type = ChecklistFormat.NATIVE_JSON

    # Keep the recorded provenance instead of stamping this format
    stamps_provenance = False

    def _decode(self, content: bytes) -> ChecklistDocument:
        try:
            raw = json.loads(content.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise MalformedJson(f"invalid UTF-8 at byte {e.start}") from None
        except json.JSONDecodeError as e:
            raise MalformedJson(e.msg, line=e.lineno, column=e.colno) from None

        if is_editor_file(raw):
            logger.debug("Content is an efis-editor checklist file")
            return self._decode_editor(raw)

        try:
            return ChecklistDocument.model_validate(raw)
        except ValidationError as e:
            raise _schema_mismatch(e, "document") from None

    def _decode_editor(self, raw: dict) -> ChecklistDocument:
        try:
            editor_file = EditorFile.model_validate(raw)
        except ValidationError as e:
            raise _schema_mismatch(e, "efis-editor file") from None

        groups = [
            ChecklistGroup(
                category=self._editor_category(group, g),
                title=group.title,
                checklists=[
                    Checklist(
                        title=checklist.title,
                        items=[
                            self._editor_item(item, f"groups[{g}].checklists[{c}].items[{i}]")
                            for i, item in enumerate(checklist.items)
                        ],
                    )
                    for c, checklist in enumerate(group.checklists)
                ],
            )
            for g, group in enumerate(editor_file.groups)
        ]
        metadata = editor_file.metadata
        return ChecklistDocument(
            title=metadata.name,
            metadata=DocumentMetadata(
                aircraft_registration=metadata.aircraft_info,
                make_model=metadata.make_and_model,
                copyright=metadata.copyright_info,
            ),
            groups=groups,
            source_format=self.format_type,
        )

    @staticmethod
    def _editor_category(group: EditorGroup, index: int) -> GroupCategory:
        name = group.category or ""
        if name.startswith(CATEGORY_PREFIX):
            name = name[len(CATEGORY_PREFIX):]
        name = name.lower()
        # The editor's default category has no canonical counterpart
        if name in ("", "unknown"):
            return GroupCategory.NORMAL
        try:
            return GroupCategory(name)
        except ValueError:
            raise SchemaMismatch(
                f"unknown group category {group.category!r}",
                details=[{"loc": ["groups", index, "category"], "value": group.category}],
            ) from None

    @staticmethod
    def _editor_item(item: EditorItem, path: str) -> ChecklistItem:
        kind = EDITOR_ITEM_KINDS.get(item.type)
        if kind is None:
            raise SchemaMismatch(f"unknown item type {item.type!r} at {path}",
                                 details=[{"path": path, "value": item.type}])
        return ChecklistItem(
            kind=kind,
            text=item.prompt,
            response=item.expectation,
            indent=min(item.indent, MAX_EDITOR_INDENT),
            centered=item.centered,
        )

    def _encode(self, document: ChecklistDocument) -> bytes:
        data = document.model_dump(mode="json", by_alias=True)
        return json.dumps(data, indent=self.context.native_indent, ensure_ascii=False).encode("utf-8")
