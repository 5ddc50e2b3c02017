"""
Codec for the generic XML checklist markup.

Document shape (with the default configuration)::

    <checklistDocument title="...">
      <metadata aircraftRegistration="" makeModel="" manufacturer="" copyright=""/>
      <group category="normal" title="...">
        <checklist title="...">
          <note>...</note>
          <item kind="plain_text" indent="0" centered="false">
            <text>...</text>
            <response>...</response>
          </item>
        </checklist>
      </group>
    </checklistDocument>

Scalars and titles are attributes; free text lives in child elements so that
whitespace survives a round trip. Parsing and building go through the same
``MarkupDialect``.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from checklist_engine.formats.codecs.base import BaseCodec
from checklist_engine.formats.errors import SchemaMismatch
from checklist_engine.formats.utils.markup_dialect import MarkupDialect, MarkupTree, as_list
from checklist_engine.schemas.common.enums import ChecklistFormat
from checklist_engine.schemas.documents.checklist import (
    Checklist,
    ChecklistDocument,
    ChecklistGroup,
    ChecklistItem,
)

logger = logging.getLogger(__name__)


class MarkupCodec(BaseCodec):
    """Codec for generic XML checklist documents."""

    format_type = ChecklistFormat.GENERIC_XML

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.dialect = MarkupDialect(self.context.markup)

    # Decoding

    def _decode(self, content: bytes) -> ChecklistDocument:
        tree = self.dialect.parse(content)
        root_tag = self.context.markup.root_tag
        if root_tag not in tree:
            (found,) = tree.keys()
            raise SchemaMismatch(f"expected root element <{root_tag}>, found <{found}>")
        logger.debug(f"Parsed markup document with root <{root_tag}>")

        fields = self._fields(tree[root_tag], root_tag)
        if "metadata" in fields:
            fields["metadata"] = self._fields(fields["metadata"], f"{root_tag}.metadata")
        fields["groups"] = [
            self._group_fields(group, f"{root_tag}.group[{g}]")
            for g, group in enumerate(as_list(fields.pop("group", None)))
        ]

        try:
            return ChecklistDocument.model_validate(fields)
        except ValidationError as e:
            details = [
                {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
                for error in e.errors()
            ]
            raise SchemaMismatch(f"{e.error_count()} invalid value(s) in markup", details=details) from None

    def _group_fields(self, node: Any, path: str) -> Dict[str, Any]:
        fields = self._fields(node, path)
        fields["checklists"] = [
            self._checklist_fields(checklist, f"{path}.checklist[{c}]")
            for c, checklist in enumerate(as_list(fields.pop("checklist", None)))
        ]
        return fields

    def _checklist_fields(self, node: Any, path: str) -> Dict[str, Any]:
        fields = self._fields(node, path)
        fields["items"] = [
            self._fields(item, f"{path}.item[{i}]")
            for i, item in enumerate(as_list(fields.pop("item", None)))
        ]
        return fields

    def _fields(self, node: Any, path: str) -> Dict[str, Any]:
        """Flatten an element node into model fields keyed by alias."""
        config = self.context.markup
        if isinstance(node, str):
            if node.strip():
                raise SchemaMismatch(f"{path} cannot hold text content")
            return {}
        if not isinstance(node, dict):
            raise SchemaMismatch(f"{path} must be a single element")

        fields: Dict[str, Any] = {}
        for key, value in node.items():
            if key == config.text_key:
                raise SchemaMismatch(f"{path} cannot hold text content")
            if key.startswith(config.attribute_prefix):
                key = key[len(config.attribute_prefix):]
            fields[key] = value
        return fields

    # Encoding

    def _encode(self, document: ChecklistDocument) -> bytes:
        root: MarkupTree = self._attributes({"title": document.title})
        root["metadata"] = self._attributes(document.metadata.model_dump(by_alias=True))
        root["group"] = [self._group_node(group) for group in document.groups]
        return self.dialect.build({self.context.markup.root_tag: root})

    def _group_node(self, group: ChecklistGroup) -> MarkupTree:
        node = self._attributes({"category": group.category.value, "title": group.title})
        node["checklist"] = [self._checklist_node(checklist) for checklist in group.checklists]
        return node

    def _checklist_node(self, checklist: Checklist) -> MarkupTree:
        node = self._attributes({"title": checklist.title})
        if checklist.note is not None:
            node["note"] = checklist.note
        node["item"] = [self._item_node(item) for item in checklist.items]
        return node

    def _item_node(self, item: ChecklistItem) -> MarkupTree:
        scalars = item.model_dump(mode="json", by_alias=True, exclude={"text", "response"}, exclude_none=True)
        node = self._attributes(scalars)
        node["text"] = item.text
        if item.response:
            node["response"] = item.response
        return node

    def _attributes(self, values: Dict[str, Any]) -> MarkupTree:
        prefix = self.context.markup.attribute_prefix
        return {f"{prefix}{name}": value for name, value in values.items()}

