"""Styles imported from word/styles.xml.

The styles part is kept as generic XML: the <w:styles> attributes plus one
imported node per child element (<w:docDefaults>, <w:style>, ...).
"""

from __future__ import annotations

from dotx_import.errors import MissingElementError
from dotx_import.package import STYLES_XML_PATH
from dotx_import.xml_node import XmlNode

STYLES_ROOT = "w:styles"


class Styles:
    def __init__(self, root_attributes: dict[str, str] | None, nodes: list[XmlNode]) -> None:
        self.root_attributes = dict(root_attributes) if root_attributes else None
        self.nodes = list(nodes)

    def style_ids(self) -> list[str]:
        return [
            node.get("w:styleId")
            for node in self.nodes
            if node.name == "w:style" and node.get("w:styleId") is not None
        ]

    def find_style(self, style_id: str) -> XmlNode | None:
        for node in self.nodes:
            if node.name == "w:style" and node.get("w:styleId") == style_id:
                return node
        return None

    def to_xml_node(self) -> XmlNode:
        return XmlNode(STYLES_ROOT, self.root_attributes, list(self.nodes))


class ExternalStylesFactory:
    def new_instance(self, xml: str | bytes, part_name: str = STYLES_XML_PATH) -> Styles:
        """Import a styles part. Raises MissingElementError if the root is not <w:styles>."""
        root = XmlNode.from_xml_string(xml, part_name)
        if root.name != STYLES_ROOT:
            raise MissingElementError(
                f"Expected <{STYLES_ROOT}> root element, found <{root.name}>",
                part=part_name,
            )
        return Styles(root.attributes, root.elements())
