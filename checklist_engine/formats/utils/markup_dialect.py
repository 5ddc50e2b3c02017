"""
Generic XML parser/builder pair driven by one shared configuration.

The dialect converts between XML bytes and an ordered tree of plain Python
values:

- element attributes become keys carrying the attribute prefix (``@name``)
- child elements become keys named after their tag
- element text becomes the text key (``#text``), or the bare value for
  elements with neither attributes nor children
- tags the configuration marks as always-array parse as lists even when a
  single child is present

Both directions read the same frozen ``MarkupConfig`` held by a single
``MarkupDialect`` instance, so a document built by a dialect always parses back
into the same tree shape.
"""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union

from checklist_engine.formats.errors import MalformedMarkup, UnrepresentableCharacter

# Characters XML 1.0 cannot carry, plus CR which parsers normalize away
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b-\x1f\ud800-\udfff\ufffe\uffff]")

MarkupTree = Dict[str, Any]

# Sequence tags of the checklist document, always parsed as lists
DOCUMENT_ARRAY_TAGS: FrozenSet[str] = frozenset({"group", "checklist", "item"})


@dataclass(frozen=True)
class MarkupConfig:
    """Settings shared by the markup parser and builder."""

    root_tag: str = "checklistDocument"
    attribute_prefix: str = "@"
    text_key: str = "#text"
    always_array: FrozenSet[str] = DOCUMENT_ARRAY_TAGS

    def is_array(self, tag: str) -> bool:
        """Whether elements with this tag always parse as a sequence."""
        return tag in self.always_array

    def attribute_key(self, name: str) -> str:
        return f"{self.attribute_prefix}{name}"


class MarkupDialect:
    """Parser/builder pair bound to a single ``MarkupConfig``."""

    def __init__(self, config: MarkupConfig):
        if not config.attribute_prefix:
            raise ValueError("attribute_prefix cannot be empty")
        if config.text_key.startswith(config.attribute_prefix):
            raise ValueError("text_key cannot start with the attribute prefix")
        self.config = config

    # Parsing

    def validate_syntax(self, content: bytes) -> ET.Element:
        """
        Run the syntax validation pass.

        Args:
            content: Raw XML bytes

        Returns:
            Root element of the parsed document

        Raises:
            MalformedMarkup: If the content is not well-formed XML
        """
        try:
            return ET.fromstring(content)
        except ET.ParseError as e:
            line, column = getattr(e, "position", (None, None))
            raise MalformedMarkup(str(e), line=line, column=column) from None

    def parse(self, content: bytes) -> MarkupTree:
        """
        Parse XML bytes into ``{root_tag: tree}``.

        Raises:
            MalformedMarkup: If the content is not well-formed XML
        """
        root = self.validate_syntax(content)
        return {root.tag: self._element_to_value(root)}

    def _element_to_value(self, element: ET.Element) -> Any:
        children = list(element)
        text = element.text or ""
        if not element.attrib and not children:
            return text

        node: MarkupTree = {}
        for name, value in element.attrib.items():
            node[self.config.attribute_key(name)] = value
        if text.strip():
            node[self.config.text_key] = text
        for child in children:
            value = self._element_to_value(child)
            if self.config.is_array(child.tag):
                node.setdefault(child.tag, []).append(value)
            elif child.tag in node:
                existing = node[child.tag]
                if not isinstance(existing, list):
                    node[child.tag] = existing = [existing]
                existing.append(value)
            else:
                node[child.tag] = value
        return node

    # Building

    def build(self, tree: MarkupTree) -> bytes:
        """
        Serialize ``{root_tag: tree}`` into UTF-8 XML bytes.

        Raises:
            UnrepresentableCharacter: If a text or attribute value holds a
                character XML 1.0 cannot carry
            ValueError: If the tree does not have exactly one root
        """
        if len(tree) != 1:
            raise ValueError("Markup tree must have exactly one root element")
        (tag, value), = tree.items()
        elements = self._value_to_elements(tag, value, tag)
        if len(elements) != 1:
            raise ValueError("Markup root cannot be a sequence")
        root = elements[0]
        ET.indent(root)
        return ET.tostring(root, encoding="utf-8", xml_declaration=True)

    def _value_to_elements(self, tag: str, value: Any, path: str) -> List[ET.Element]:
        if isinstance(value, list):
            elements: List[ET.Element] = []
            for index, entry in enumerate(value):
                elements.extend(self._value_to_elements(tag, entry, f"{path}[{index}]"))
            return elements

        element = ET.Element(tag)
        if isinstance(value, dict):
            for key, child in value.items():
                if key == self.config.text_key:
                    element.text = self._checked(child, f"{path}.{key}")
                elif key.startswith(self.config.attribute_prefix):
                    name = key[len(self.config.attribute_prefix):]
                    element.set(name, self._checked(child, f"{path}.{key}"))
                else:
                    element.extend(self._value_to_elements(key, child, f"{path}.{key}"))
        elif value is not None:
            element.text = self._checked(value, path)
        return [element]

    @staticmethod
    def _checked(value: Any, path: str) -> str:
        text = value if isinstance(value, str) else _scalar_to_text(value)
        match = _INVALID_XML_CHARS.search(text)
        if match:
            raise UnrepresentableCharacter(match.group(), match.start(), path)
        return text


def _scalar_to_text(value: Union[bool, int, float, str]) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def as_list(value: Optional[Any]) -> List[Any]:
    """Normalize an optional tree value into a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def config_from_settings(root_tag: str, attribute_prefix: str, text_key: str,
                         always_array: Iterable[str]) -> MarkupConfig:
    """Build a ``MarkupConfig``; the document's own sequence tags are always included."""
    return MarkupConfig(
        root_tag=root_tag,
        attribute_prefix=attribute_prefix,
        text_key=text_key,
        always_array=frozenset(always_array) | DOCUMENT_ARRAY_TAGS,
    )
