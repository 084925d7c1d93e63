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

"""Schema-less XML parsing: lxml parts into a shape-tagged object graph.

The tree converter never inspects lxml elements directly. It consumes one of
four shapes produced here:

    ParsedSequence  -- consecutive siblings sharing a name
    ParsedElement   -- attributes plus ordered (name, value) child entries
    ParsedText      -- an element holding only text
    ParsedEmpty     -- an element with neither attributes nor content

Names are kept exactly as written in the source (``w:p``, ``xml:space``)
and namespace declarations are kept as ``xmlns`` attributes, so a converted
tree can be written back out without a schema.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from lxml import etree

from dotx_import.errors import XmlSyntaxError

# OOXML namespaces shared across all XML modules
NAMESPACES = {
    "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "rel": "http://schemas.openxmlformats.org/package/2006/relationships",
}

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Reserved key holding an element's attributes in parser-style object graphs
ATTRIBUTE_MARKER = "_attr"

# Keys that hold text content in parser-style object graphs
_TEXT_KEYS = ("", "#text")

SECURE_PARSER = etree.XMLParser(
    resolve_entities=False,
    no_network=True,
    remove_comments=True,
    remove_pis=True,
    huge_tree=False,
)


# ── Shapes ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ParsedText:
    value: str


@dataclass(frozen=True)
class ParsedEmpty:
    pass


@dataclass(frozen=True)
class ParsedElement:
    """An element with attributes and/or child entries.

    A child entry whose name is None is a text fragment (its value is
    always a ParsedText).
    """
    attributes: dict[str, str] | None
    children: tuple[tuple[str | None, Parsed], ...] = ()


@dataclass(frozen=True)
class ParsedSequence:
    items: tuple[Parsed, ...]


Parsed = Union[ParsedSequence, ParsedElement, ParsedText, ParsedEmpty]

PARSED_TYPES = (ParsedSequence, ParsedElement, ParsedText, ParsedEmpty)


# ── lxml → shapes ──────────────────────────────────────────────────────────────

def parse_xml_root(xml: str | bytes, part_name: str | None = None) -> etree._Element:
    """Parse XML text or bytes with the hardened parser.

    Raises XmlSyntaxError naming *part_name* if the input is not well-formed.
    """
    data = xml.encode("utf-8") if isinstance(xml, str) else xml
    try:
        return etree.fromstring(data, SECURE_PARSER)
    except etree.XMLSyntaxError as exc:
        raise XmlSyntaxError(f"Malformed XML: {exc}", part=part_name) from exc


def local_name(tag: str) -> str:
    """Strip the Clark-notation namespace from *tag*."""
    return tag.rsplit("}", 1)[-1]


def _qualified_name(element: etree._Element, clark: str) -> str:
    """Convert Clark notation {uri}local to prefix:local as written in source."""
    if not clark.startswith("{"):
        return clark
    uri, local = clark[1:].split("}", 1)
    if uri == XML_NAMESPACE:
        return f"xml:{local}"
    if clark == element.tag and element.prefix:
        return f"{element.prefix}:{local}"
    if clark == element.tag:
        return local
    # Attributes never take the default namespace, so pick a real prefix
    for prefix, ns in element.nsmap.items():
        if ns == uri and prefix is not None:
            return f"{prefix}:{local}"
    return local


def _attributes_of(element: etree._Element) -> dict[str, str] | None:
    """New namespace declarations first, then the element's own attributes."""
    parent = element.getparent()
    inherited = parent.nsmap if parent is not None else {}
    attributes: dict[str, str] = {}
    for prefix, uri in element.nsmap.items():
        if inherited.get(prefix) == uri:
            continue
        attributes["xmlns" if prefix is None else f"xmlns:{prefix}"] = uri
    for key, value in element.attrib.items():
        attributes[_qualified_name(element, key)] = value
    return attributes or None


def _element_to_parsed(element: etree._Element) -> Parsed:
    attributes = _attributes_of(element)
    child_elements = [child for child in element if isinstance(child.tag, str)]

    if not child_elements:
        text = element.text or ""
        if attributes is None:
            return ParsedText(text) if text else ParsedEmpty()
        entries = ((None, ParsedText(text)),) if text else ()
        return ParsedElement(attributes, entries)

    # Consecutive same-name siblings share one entry; interleaving is kept.
    grouped: list[tuple[str | None, list[Parsed]]] = []
    if element.text and element.text.strip():
        grouped.append((None, [ParsedText(element.text)]))
    for child in element:
        if isinstance(child.tag, str):
            name = _qualified_name(child, child.tag)
            value = _element_to_parsed(child)
            if grouped and grouped[-1][0] == name:
                grouped[-1][1].append(value)
            else:
                grouped.append((name, [value]))
        if child.tail and child.tail.strip():
            grouped.append((None, [ParsedText(child.tail)]))

    entries = tuple(
        (name, values[0] if len(values) == 1 else ParsedSequence(tuple(values)))
        for name, values in grouped
    )
    return ParsedElement(attributes, entries)


def parse_xml_object(xml: str | bytes, part_name: str | None = None) -> ParsedElement:
    """Parse an XML part into a document-level ParsedElement.

    The result mirrors what a schema-less parser returns for a document:
    a keyed structure whose single entry is the root element.
    """
    root = parse_xml_root(xml, part_name)
    return ParsedElement(
        attributes=None,
        children=((_qualified_name(root, root.tag), _element_to_parsed(root)),),
    )


# ── plain object graphs → shapes ───────────────────────────────────────────────

def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def lift_parsed_object(value: Any) -> Parsed:
    """Tag a parser-style object graph (dicts, lists, scalars) with its shape.

    Dicts may carry attributes under ATTRIBUTE_MARKER and text under an
    empty or ``#text`` key; lists are repeated siblings.
    """
    if isinstance(value, PARSED_TYPES):
        return value
    if isinstance(value, (list, tuple)):
        return ParsedSequence(tuple(lift_parsed_object(item) for item in value))
    if isinstance(value, dict):
        raw_attributes = value.get(ATTRIBUTE_MARKER)
        attributes = (
            {str(k): _scalar_text(v) for k, v in raw_attributes.items()}
            if raw_attributes else None
        )
        entries: list[tuple[str | None, Parsed]] = []
        for key, child in value.items():
            if key == ATTRIBUTE_MARKER:
                continue
            if key in _TEXT_KEYS:
                entries.append((None, ParsedText(_scalar_text(child))))
            else:
                entries.append((key, lift_parsed_object(child)))
        return ParsedElement(attributes, tuple(entries))
    if value is None or value == "":
        return ParsedEmpty()
    return ParsedText(_scalar_text(value))
