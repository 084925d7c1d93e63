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

"""Header/footer references and title-page flag from word/document.xml.

Only the first <w:sectPr> directly under <w:body> is read. Section breaks
carried in paragraph properties (<w:pPr><w:sectPr>) are ignored, so a
multi-section document yields the references of that one block.
"""

from __future__ import annotations

from lxml import etree

from dotx_import.errors import InvalidReferenceTypeError, MissingElementError
from dotx_import.models import DocumentReference, DocumentReferences, ReferenceType
from dotx_import.package import DOCUMENT_XML_PATH
from dotx_import.relationships import parse_relationship_id
from dotx_import.xml_parsing import NAMESPACES, parse_xml_root

W_NS = NAMESPACES["w"]
R_NS = NAMESPACES["r"]


def _section_properties(document_xml: str | bytes, part_name: str) -> etree._Element:
    root = parse_xml_root(document_xml, part_name)
    if root.tag != f"{{{W_NS}}}document":
        raise MissingElementError("No <w:document> root element found", part=part_name)
    body = root.find("w:body", NAMESPACES)
    if body is None:
        raise MissingElementError("No <w:body> element found in document.xml", part=part_name)
    # First block wins when a body (invalidly) holds several
    sect_pr = body.find("w:sectPr", NAMESPACES)
    if sect_pr is None:
        raise MissingElementError("No <w:sectPr> element found in <w:body>", part=part_name)
    return sect_pr


def _references(sect_pr: etree._Element, tag: str, part_name: str) -> list[DocumentReference]:
    references: list[DocumentReference] = []
    for ref_el in sect_pr.findall(tag, NAMESPACES):
        raw_type = ref_el.get(f"{{{W_NS}}}type", ReferenceType.DEFAULT.value)
        try:
            reference_type = ReferenceType(raw_type)
        except ValueError:
            valid = ", ".join(f"'{t.value}'" for t in ReferenceType)
            raise InvalidReferenceTypeError(
                f"Invalid <{tag}> type '{raw_type}'. Must be one of: {valid}",
                part=part_name,
            ) from None
        references.append(DocumentReference(
            relationship_id=parse_relationship_id(ref_el.get(f"{{{R_NS}}}id"), part=part_name),
            reference_type=reference_type,
        ))
    return references


def extract_references(
    document_xml: str | bytes, part_name: str = DOCUMENT_XML_PATH
) -> DocumentReferences:
    """Return header and footer references in source order."""
    sect_pr = _section_properties(document_xml, part_name)
    return DocumentReferences(
        headers=_references(sect_pr, "w:headerReference", part_name),
        footers=_references(sect_pr, "w:footerReference", part_name),
    )


def title_page_defined(document_xml: str | bytes, part_name: str = DOCUMENT_XML_PATH) -> bool:
    """True when <w:titlePg> is present, whatever its value."""
    sect_pr = _section_properties(document_xml, part_name)
    return sect_pr.find("w:titlePg", NAMESPACES) is not None
