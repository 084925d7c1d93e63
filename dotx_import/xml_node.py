# Copyright (C) 2025 the contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""Generic XML node: lossless in-memory form of XML the model does not type.

convert_to_xml_node() builds nodes from parsed shapes; XmlNode.to_serializable()
and XmlNode.to_xml_string() go the other way. Example:

    <w:someKey someAttr="1"><w:child childAttr="2"/></w:someKey>

serializes to

    {"w:someKey": [{"_attr": {"someAttr": "1"}},
                   {"w:child": [{"_attr": {"childAttr": "2"}}]}]}
"""

from __future__ import annotations

from typing import Any, Iterator

from lxml import etree

from dotx_import.errors import (
    MissingElementError,
    MultipleRootElementsError,
    XmlSyntaxError,
)
from dotx_import.xml_parsing import (
    ATTRIBUTE_MARKER,
    PARSED_TYPES,
    XML_NAMESPACE,
    Parsed,
    ParsedElement,
    ParsedEmpty,
    ParsedSequence,
    ParsedText,
    lift_parsed_object,
    parse_xml_object,
)


class XmlNode:
    """Untyped element: a name, optional attributes, and ordered children.

    Children are XmlNode instances or text fragments (str).
    """

    def __init__(
        self,
        name: str,
        attributes: dict[str, str] | None = None,
        children: list[XmlNode | str] | None = None,
    ) -> None:
        if not name:
            raise ValueError("XmlNode name must be a non-empty string")
        self.name = name
        self.attributes = dict(attributes) if attributes else None
        self.children: list[XmlNode | str] = list(children) if children else []

    def __repr__(self) -> str:
        return (
            f"XmlNode({self.name!r}, attributes={self.attributes!r}, "
            f"children={len(self.children)})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, XmlNode):
            return NotImplemented
        return (
            self.name == other.name
            and self.attributes == other.attributes
            and self.children == other.children
        )

    __hash__ = None  # type: ignore[assignment]

    # ── Tree access ──────────────────────────────────────────────────────────

    def push(self, child: XmlNode | str) -> None:
        self.children.append(child)

    @property
    def text(self) -> str:
        """Concatenated direct text children."""
        return "".join(c for c in self.children if isinstance(c, str))

    def elements(self) -> list[XmlNode]:
        return [c for c in self.children if isinstance(c, XmlNode)]

    def find(self, name: str) -> XmlNode | None:
        for child in self.children:
            if isinstance(child, XmlNode) and child.name == name:
                return child
        return None

    def findall(self, name: str) -> list[XmlNode]:
        return [c for c in self.elements() if c.name == name]

    def iter(self, name: str | None = None) -> Iterator[XmlNode]:
        """Depth-first walk over this node and its descendants."""
        if name is None or self.name == name:
            yield self
        for child in self.elements():
            yield from child.iter(name)

    def get(self, attribute: str, default: str | None = None) -> str | None:
        if self.attributes is None:
            return default
        return self.attributes.get(attribute, default)

    # ── Construction ─────────────────────────────────────────────────────────

    @classmethod
    def from_xml_string(cls, xml: str | bytes, part_name: str | None = None) -> XmlNode:
        """Parse a whole XML part into a single XmlNode tree."""
        return _single_root(parse_xml_object(xml, part_name), part_name)

    @classmethod
    def from_parsed_object(cls, document: Any, part_name: str | None = None) -> XmlNode:
        """Build a tree from a parser-style document object ({root: value})."""
        return _single_root(lift_parsed_object(document), part_name)

    # ── Emission ─────────────────────────────────────────────────────────────

    def to_serializable(self) -> dict[str, Any]:
        """Return the object shape expected by the XML serializer.

        Attributes become a leading ``{"_attr": {...}}`` entry of the child
        list; a node with no attributes and no children maps to ``{}``.
        """
        children = [
            c.to_serializable() if isinstance(c, XmlNode) else c
            for c in self.children
        ]
        if self.attributes:
            return {self.name: [{ATTRIBUTE_MARKER: dict(self.attributes)}, *children]}
        if not children:
            return {self.name: {}}
        return {self.name: children}

    def to_element(
        self,
        parent: etree._Element | None = None,
        scope: dict[str | None, str] | None = None,
    ) -> etree._Element:
        """Build an lxml element, resolving prefixes from xmlns attributes."""
        scope = dict(scope or {})
        declared: dict[str | None, str] = {}
        plain: list[tuple[str, str]] = []
        for key, value in (self.attributes or {}).items():
            if key == "xmlns":
                if value:
                    declared[None] = value
                else:
                    scope.pop(None, None)
            elif key.startswith("xmlns:"):
                declared[key[len("xmlns:"):]] = value
            else:
                plain.append((key, value))
        scope.update(declared)

        tag = _clark_name(self.name, scope, use_default=True)
        if parent is None:
            element = etree.Element(tag, nsmap=declared)
        else:
            element = etree.SubElement(parent, tag, nsmap=declared)
        for key, value in plain:
            element.set(_clark_name(key, scope, use_default=False), value)

        last: etree._Element | None = None
        for child in self.children:
            if isinstance(child, XmlNode):
                last = child.to_element(element, scope)
            elif last is None:
                element.text = (element.text or "") + child
            else:
                last.tail = (last.tail or "") + child
        return element

    def to_xml_string(self, xml_declaration: bool = False) -> str:
        element = self.to_element()
        if xml_declaration:
            return etree.tostring(
                element, xml_declaration=True, encoding="UTF-8", standalone=True
            ).decode("utf-8")
        return etree.tostring(element, encoding="unicode")


def _clark_name(name: str, scope: dict[str | None, str], use_default: bool) -> str:
    if ":" in name:
        prefix, local = name.split(":", 1)
        if prefix == "xml":
            return f"{{{XML_NAMESPACE}}}{local}"
        uri = scope.get(prefix)
        if uri is None:
            raise XmlSyntaxError(f"Undeclared namespace prefix '{prefix}' in '{name}'")
        return f"{{{uri}}}{local}"
    if use_default and scope.get(None):
        return f"{{{scope[None]}}}{name}"
    return name


# ── Conversion ─────────────────────────────────────────────────────────────────

def convert_to_xml_node(element_name: str, parsed: Parsed | Any) -> XmlNode | list[XmlNode]:
    """Convert a parsed value into XmlNode(s) named *element_name*.

    A sequence converts to a flat list of nodes, one per repeated sibling:

        ParsedSequence((ParsedText("val 1"), ParsedText("val 2")))

    under "w:t" gives [XmlNode("w:t", ["val 1"]), XmlNode("w:t", ["val 2"])].
    Any other shape converts to a single node.
    """
    if not isinstance(parsed, PARSED_TYPES):
        parsed = lift_parsed_object(parsed)

    if isinstance(parsed, ParsedSequence):
        nodes: list[XmlNode] = []
        for item in parsed.items:
            converted = convert_to_xml_node(element_name, item)
            if isinstance(converted, list):
                nodes.extend(converted)
            else:
                nodes.append(converted)
        return nodes

    if isinstance(parsed, ParsedElement):
        node = XmlNode(element_name, parsed.attributes)
        for name, value in parsed.children:
            if name is None:
                if isinstance(value, ParsedText) and value.value:
                    node.push(value.value)
                continue
            converted = convert_to_xml_node(name, value)
            if isinstance(converted, list):
                for child in converted:
                    node.push(child)
            else:
                node.push(converted)
        return node

    if isinstance(parsed, ParsedText):
        node = XmlNode(element_name)
        if parsed.value:
            node.push(parsed.value)
        return node

    if isinstance(parsed, ParsedEmpty):
        return XmlNode(element_name)

    raise TypeError(f"Unsupported parsed value: {type(parsed).__name__}")


def _single_root(document: Parsed, part_name: str | None) -> XmlNode:
    """Convert a document-level value that must hold exactly one element."""
    if not isinstance(document, ParsedElement):
        raise MissingElementError("Document has no root element", part=part_name)

    roots = [(name, value) for name, value in document.children if name is not None]
    if not roots:
        raise MissingElementError("Document has no root element", part=part_name)
    if len(roots) > 1:
        raise MultipleRootElementsError(
            "Invalid conversion, input must be one element "
            f"(found {', '.join(name for name, _ in roots)})",
            part=part_name,
        )

    name, value = roots[0]
    converted = convert_to_xml_node(name, value)
    if isinstance(converted, list):
        if not converted:
            raise MissingElementError(f"Empty <{name}> sequence", part=part_name)
        if len(converted) > 1:
            raise MultipleRootElementsError(
                "Invalid conversion, input must be one element "
                f"(found {len(converted)} <{name}> elements)",
                part=part_name,
            )
        return converted[0]
    return converted
