"""
Codec for the structured checklist binder container (JSON, optionally tar.gz).

Decoding is all-or-nothing: the envelope is checked first, then every
checklist's (type, subtype) pair and every item code is mapped through the
shared tables, and any unmapped value fails the whole decode.

Item conventions:

- plain text and live-data items carry the text in ``title`` and the response
  in ``action``
- a title is a note item with a ``title`` and an empty ``action``
- notes, warnings and cautions are note items with an empty ``title`` and the
  text in ``action``, warnings and cautions behind their prefixes; an action
  holding several lines decodes to one note-family item per line

Checklists record the index of their canonical group in ``groupIndex`` and
groups without checklists are listed in ``emptyGroups``, so group boundaries
survive a round trip. Containers without these fields group consecutive
checklists that share a key.
"""

import gzip
import io
import json
import logging
import re
import tarfile
import uuid
from typing import Dict, List, Tuple

from pydantic import ValidationError

from checklist_engine.formats.codecs.base import BaseCodec
from checklist_engine.formats.codecs.container_schema import (
    CONTAINER_TYPE,
    DATA_MODEL_VERSION,
    PACKAGE_TYPE_VERSION,
    ContainerBinder,
    ContainerChecklist,
    ContainerEnvelope,
    ContainerGroup,
    ContainerItem,
    ContainerObjects,
)
from checklist_engine.formats.errors import (
    MalformedJson,
    SchemaMismatch,
    UnrepresentableCharacter,
    UnsupportedContainerVersion,
)
from checklist_engine.formats.mapping.tables import CanonicalGroupKey
from checklist_engine.schemas.common.enums import (
    ChecklistFormat,
    CompletionAction,
    ItemKind,
)
from checklist_engine.schemas.documents.checklist import (
    Checklist,
    ChecklistDocument,
    ChecklistGroup,
    ChecklistItem,
)

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"

NOTE_PREFIX = "NOTE: "
NOTE_PREFIXES = (
    ("WARNING: ", ItemKind.WARNING),
    ("CAUTION: ", ItemKind.CAUTION),
    (NOTE_PREFIX, ItemKind.NOTE),
)
KIND_PREFIXES = {kind: prefix for prefix, kind in NOTE_PREFIXES if kind != ItemKind.NOTE}

# Several notes merged under one title are written one per line
NOTE_LINE_BREAK = re.compile(r"\r?\n")

# Namespace for positional uuids; identical documents get identical ids
UUID_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "checklist-engine/binder")


def positional_uuid(*parts: object) -> str:
    return str(uuid.uuid5(UUID_NAMESPACE, "/".join(str(p) for p in parts)))


class ContainerCodec(BaseCodec):
    """Codec for checklist binder containers."""

    format_type = ChecklistFormat.STRUCTURED_JSON

    # Decoding

    def _decode(self, content: bytes) -> ChecklistDocument:
        if content.startswith(GZIP_MAGIC):
            content = self._unpack_archive(content)

        try:
            raw = json.loads(content.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise MalformedJson(f"invalid UTF-8 at byte {e.start}") from None
        except json.JSONDecodeError as e:
            raise MalformedJson(e.msg, line=e.lineno, column=e.colno) from None

        envelope = self._parse_envelope(raw)
        objects = envelope.objects[0]
        items_by_uuid = {item.uuid: item for item in objects.checklist_items}
        tables = self.context.tables

        decoded: List[Tuple[CanonicalGroupKey, Checklist]] = []
        for index, entry in enumerate(objects.checklists):
            key = tables.group_for_codes(entry.type, entry.subtype)
            tables.action_for_code(entry.completion_item, axis="completionItem")

            checklist = Checklist(title=entry.name, note=entry.note)
            for item_uuid in entry.checklist_items:
                if item_uuid not in items_by_uuid:
                    raise SchemaMismatch(
                        f"checklist {index} references unknown item {item_uuid!r}",
                        details=[{"loc": ["objects", 0, "checklists", index], "uuid": item_uuid}],
                    )
                checklist.items.extend(self._decode_item(items_by_uuid[item_uuid]))
            decoded.append((key, checklist))

        if objects.empty_groups is not None or any(c.group_index is not None for c in objects.checklists):
            groups = self._groups_by_index(objects, decoded)
        else:
            groups = self._groups_by_adjacency(decoded)

        logger.debug(f"Container held {len(objects.checklists)} checklist(s), {len(items_by_uuid)} item(s)")
        return ChecklistDocument(title=envelope.name, groups=groups)

    @staticmethod
    def _groups_by_adjacency(decoded: List[Tuple[CanonicalGroupKey, Checklist]]) -> List[ChecklistGroup]:
        """Consecutive checklists with the same canonical key form one group."""
        groups: List[ChecklistGroup] = []
        for (category, title), checklist in decoded:
            if groups and groups[-1].key == (category, title):
                groups[-1].checklists.append(checklist)
            else:
                groups.append(ChecklistGroup(category=category, title=title, checklists=[checklist]))
        return groups

    def _groups_by_index(self, objects: ContainerObjects,
                         decoded: List[Tuple[CanonicalGroupKey, Checklist]]) -> List[ChecklistGroup]:
        """Rebuild groups from the recorded group indices, empty groups included."""
        groups: Dict[int, ChecklistGroup] = {}
        for index, (entry, (key, checklist)) in enumerate(zip(objects.checklists, decoded)):
            if entry.group_index is None:
                raise SchemaMismatch(
                    f"checklist {index} has no groupIndex while others do",
                    details=[{"loc": ["objects", 0, "checklists", index, "groupIndex"]}],
                )
            group = groups.get(entry.group_index)
            if group is None:
                category, title = key
                group = groups[entry.group_index] = ChecklistGroup(category=category, title=title)
            elif group.key != key:
                raise SchemaMismatch(
                    f"checklist {index} does not match the key of group {entry.group_index}",
                    details=[{"loc": ["objects", 0, "checklists", index], "groupIndex": entry.group_index}],
                )
            group.checklists.append(checklist)

        for index, empty in enumerate(objects.empty_groups or []):
            if empty.group_index in groups:
                raise SchemaMismatch(
                    f"empty group {index} reuses groupIndex {empty.group_index}",
                    details=[{"loc": ["objects", 0, "emptyGroups", index], "groupIndex": empty.group_index}],
                )
            category, title = self.context.tables.group_for_codes(empty.type, empty.subtype)
            groups[empty.group_index] = ChecklistGroup(category=category, title=title)

        return [groups[index] for index in sorted(groups)]

    def _unpack_archive(self, content: bytes) -> bytes:
        name = self.context.content_filename
        try:
            with tarfile.open(fileobj=io.BytesIO(content), mode="r:gz") as archive:
                try:
                    member = archive.getmember(name)
                except KeyError:
                    raise SchemaMismatch(f"archive does not contain {name}") from None
                handle = archive.extractfile(member)
                if handle is None:
                    raise SchemaMismatch(f"archive member {name} is not a regular file")
                return handle.read()
        except (tarfile.TarError, OSError, EOFError) as e:
            raise SchemaMismatch(f"archive could not be read: {e}") from None

    @staticmethod
    def _parse_envelope(raw: object) -> ContainerEnvelope:
        if not isinstance(raw, dict):
            raise SchemaMismatch(f"container must be a JSON object, got {type(raw).__name__}")

        expected = (
            ("dataModelVersion", DATA_MODEL_VERSION),
            ("packageTypeVersion", PACKAGE_TYPE_VERSION),
            ("type", CONTAINER_TYPE),
        )
        for field, value in expected:
            found = raw.get(field)
            # JSON true must not pass for version 1
            if type(found) is not type(value) or found != value:
                raise UnsupportedContainerVersion(field, found)
        objects = raw.get("objects")
        if not isinstance(objects, list) or len(objects) != 1:
            shown = len(objects) if isinstance(objects, list) else objects
            raise UnsupportedContainerVersion("objects", shown)

        try:
            return ContainerEnvelope.model_validate(raw)
        except ValidationError as e:
            details = [
                {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
                for error in e.errors()
            ]
            raise SchemaMismatch(f"{e.error_count()} invalid field(s) in container", details=details) from None

    def _decode_item(self, entry: ContainerItem) -> List[ChecklistItem]:
        tables = self.context.tables
        kind, parameter = tables.kind_for_code(entry.item_type)
        completion_action = None
        if entry.completion_action is not None:
            completion_action = tables.action_for_code(entry.completion_action)
        layout = {"indent": entry.indent or 0, "centered": bool(entry.centered)}

        if kind != ItemKind.NOTE:
            return [ChecklistItem(
                kind=kind,
                text=entry.title,
                response=entry.action,
                scratchpad=parameter if kind == ItemKind.OPEN_SCRATCHPAD else None,
                band=parameter if kind == ItemKind.FREQUENCY_PROMPT else None,
                completion_action=completion_action,
                **layout,
            )]

        if entry.title and not entry.action:
            return [ChecklistItem(kind=ItemKind.TITLE, text=entry.title, completion_action=completion_action, **layout)]

        notes = []
        for line in NOTE_LINE_BREAK.split(entry.action):
            note_kind, text = split_note_prefix(line)
            notes.append(ChecklistItem(kind=note_kind, text=text, **layout))
        notes[-1].completion_action = completion_action
        if entry.title:
            return [ChecklistItem(kind=ItemKind.TITLE, text=entry.title, **layout)] + notes
        return notes

    # Encoding

    def _encode(self, document: ChecklistDocument) -> bytes:
        tables = self.context.tables
        checklists: List[ContainerChecklist] = []
        items: List[ContainerItem] = []
        empty_groups: List[ContainerGroup] = []

        for g, group in enumerate(document.groups):
            type_code, subtype_code = tables.codes_for_group(group.category, group.title)
            if not group.checklists:
                empty_groups.append(ContainerGroup(group_index=g, type=int(type_code), subtype=int(subtype_code)))
            for c, checklist in enumerate(group.checklists):
                item_uuids = []
                for i, item in enumerate(checklist.items):
                    path = f"groups[{g}].checklists[{c}].items[{i}]"
                    entry = self._encode_item(item, positional_uuid("item", len(items)), path)
                    items.append(entry)
                    item_uuids.append(entry.uuid)
                checklists.append(ContainerChecklist(
                    uuid=positional_uuid("checklist", len(checklists)),
                    name=checklist.title,
                    type=int(type_code),
                    subtype=int(subtype_code),
                    completion_item=int(tables.code_for_action(CompletionAction.ADVANCE_TO_NEXT_CHECKLIST)),
                    checklist_items=item_uuids,
                    note=checklist.note,
                    group_index=g,
                ))

        envelope = ContainerEnvelope(
            data_model_version=DATA_MODEL_VERSION,
            package_type_version=PACKAGE_TYPE_VERSION,
            name=document.title,
            type=CONTAINER_TYPE,
            objects=[ContainerObjects(
                checklists=checklists,
                checklist_items=items,
                binders=[ContainerBinder(
                    uuid=positional_uuid("binder", 0),
                    name=document.title,
                    checklists=[c.uuid for c in checklists],
                )],
                empty_groups=empty_groups or None,
            )],
        )
        text = json.dumps(
            envelope.model_dump(by_alias=True, exclude_none=True),
            indent=self.context.container_indent,
            ensure_ascii=False,
        )
        content = text.encode("utf-8")
        if self.context.container_archive:
            return self._pack_archive(content)
        return content

    def _encode_item(self, item: ChecklistItem, item_uuid: str, path: str) -> ContainerItem:
        tables = self.context.tables
        parameter = item.scratchpad if item.kind == ItemKind.OPEN_SCRATCHPAD else item.band
        title, action = item.text, item.response
        if item.kind == ItemKind.TITLE:
            action = ""
        elif item.kind in (ItemKind.NOTE, ItemKind.WARNING, ItemKind.CAUTION):
            line_break = item.text.find("\n")
            if line_break >= 0:
                raise UnrepresentableCharacter("\n", line_break, f"{path}.text")
            title, action = "", add_note_prefix(item.kind, item.text)

        completion_action = None
        if item.completion_action is not None:
            completion_action = int(tables.code_for_action(item.completion_action))

        return ContainerItem(
            uuid=item_uuid,
            item_type=int(tables.code_for_kind(item.kind, parameter)),
            title=title,
            action=action,
            completion_action=completion_action,
            indent=item.indent or None,
            centered=True if item.centered else None,
        )

    def _pack_archive(self, content: bytes) -> bytes:
        buffer = io.BytesIO()
        with gzip.GzipFile(fileobj=buffer, mode="wb", mtime=0) as compressed:
            with tarfile.open(fileobj=compressed, mode="w", format=tarfile.USTAR_FORMAT) as archive:
                info = tarfile.TarInfo(self.context.content_filename)
                info.size = len(content)
                info.mtime = 0
                info.mode = 0o644
                archive.addfile(info, io.BytesIO(content))
        return buffer.getvalue()


def split_note_prefix(action: str) -> Tuple[ItemKind, str]:
    """Split a note action into its note-family kind and text."""
    for prefix, kind in NOTE_PREFIXES:
        if action.startswith(prefix):
            return kind, action[len(prefix):]
    return ItemKind.NOTE, action


def add_note_prefix(kind: ItemKind, text: str) -> str:
    """Inverse of ``split_note_prefix``."""
    if kind in KIND_PREFIXES:
        return KIND_PREFIXES[kind] + text
    if any(text.startswith(prefix) for prefix, _ in NOTE_PREFIXES):
        return NOTE_PREFIX + text
    return text
