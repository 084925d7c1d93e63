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

"""Template import: from .dotx bytes to an editable DocumentTemplate.

Pipeline: open container → styles → section references → document
relationships → one header/footer part per reference (headers first) →
that part's own image and hyperlink relationships.

The import is all-or-nothing: any TemplateImportError propagates and no
partial template is returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from anyio import to_thread

from dotx_import.document_refs import extract_references, title_page_defined
from dotx_import.errors import MissingElementError, MissingRelationshipTargetError
from dotx_import.logger import get_logger
from dotx_import.models import (
    DocumentReference,
    HeaderFooterSummary,
    HyperlinkSummary,
    ReferenceType,
    RelationshipKind,
    TemplateSummary,
)
from dotx_import.package import (
    DOCUMENT_RELS_PATH,
    DOCUMENT_XML_PATH,
    STYLES_XML_PATH,
    TemplatePackage,
    part_relationships_path,
    resolve_target,
)
from dotx_import.relationships import RelationshipIndex
from dotx_import.styles import ExternalStylesFactory, Styles
from dotx_import.wrappers import (
    EXTERNAL_TARGET_MODE,
    FooterWrapper,
    HeaderFooterWrapper,
    HeaderWrapper,
    Media,
    RelationshipIdAllocator,
)
from dotx_import.xml_node import XmlNode

LOGGER = get_logger(__name__)


@dataclass
class TemplateHeader:
    placement: ReferenceType
    header: HeaderWrapper


@dataclass
class TemplateFooter:
    placement: ReferenceType
    footer: FooterWrapper


@dataclass
class DocumentTemplate:
    """Result of a template import.

    next_relationship_id is one past the last ID handed to a header or
    footer; callers continue allocating from there.
    """
    headers: list[TemplateHeader]
    footers: list[TemplateFooter]
    styles: Styles
    title_page_defined: bool
    next_relationship_id: int
    media: Media = field(default_factory=Media)

    def summary(self) -> TemplateSummary:
        return TemplateSummary(
            headers=[_part_summary(h.placement, h.header) for h in self.headers],
            footers=[_part_summary(f.placement, f.footer) for f in self.footers],
            style_ids=self.styles.style_ids(),
            title_page_defined=self.title_page_defined,
            next_relationship_id=self.next_relationship_id,
            media_count=len(self.media),
        )


def _part_summary(placement: ReferenceType, wrapper: HeaderFooterWrapper) -> HeaderFooterSummary:
    return HeaderFooterSummary(
        placement=placement,
        reference_id=wrapper.reference_id,
        root_element=wrapper.root.name,
        image_relationship_ids=[r.relationship_id for r in wrapper.images],
        hyperlinks=[
            HyperlinkSummary(
                relationship_id=r.relationship_id,
                target=r.target,
                target_mode=r.target_mode or EXTERNAL_TARGET_MODE,
            )
            for r in wrapper.hyperlinks
        ],
    )


class TemplateImporter:
    def __init__(self, styles_factory: ExternalStylesFactory | None = None) -> None:
        self._styles_factory = styles_factory or ExternalStylesFactory()

    def import_template(self, data: bytes) -> DocumentTemplate:
        package = TemplatePackage.open(data)

        styles = self._styles_factory.new_instance(package.read_part(STYLES_XML_PATH))

        document_xml = package.read_part(DOCUMENT_XML_PATH)
        references = extract_references(document_xml)
        title_page = title_page_defined(document_xml)

        relationships = RelationshipIndex.from_xml(
            package.read_part(DOCUMENT_RELS_PATH), DOCUMENT_RELS_PATH
        )

        media = Media()
        allocator = RelationshipIdAllocator()

        headers = [
            TemplateHeader(
                placement=ref.reference_type,
                header=self._import_part(package, relationships, ref, HeaderWrapper, media, allocator),
            )
            for ref in references.headers
        ]
        footers = [
            TemplateFooter(
                placement=ref.reference_type,
                footer=self._import_part(package, relationships, ref, FooterWrapper, media, allocator),
            )
            for ref in references.footers
        ]

        LOGGER.info(
            "Imported template: %d header(s), %d footer(s), %d image(s)",
            len(headers), len(footers), len(media),
        )
        return DocumentTemplate(
            headers=headers,
            footers=footers,
            styles=styles,
            title_page_defined=title_page,
            next_relationship_id=allocator.next_id,
            media=media,
        )

    def _import_part(
        self,
        package: TemplatePackage,
        relationships: RelationshipIndex,
        reference: DocumentReference,
        wrapper_cls: type[HeaderFooterWrapper],
        media: Media,
        allocator: RelationshipIdAllocator,
    ) -> HeaderFooterWrapper:
        """Load the part behind *reference* and wrap it with a fresh ID."""
        entry = relationships.find(reference.relationship_id)
        if entry is None:
            raise MissingRelationshipTargetError(
                f"Can not find target file for {wrapper_cls.kind.value} reference",
                part=relationships.part_name,
                relationship_id=reference.relationship_id,
            )

        part_name = resolve_target(DOCUMENT_XML_PATH, entry.target)
        root = XmlNode.from_xml_string(package.read_part(part_name), part_name)
        if root.name != wrapper_cls.root_name:
            raise MissingElementError(
                f"Expected <{wrapper_cls.root_name}> root element, found <{root.name}>",
                part=part_name,
                relationship_id=reference.relationship_id,
            )

        wrapper = wrapper_cls(media, allocator.allocate(), root)
        LOGGER.debug(
            "Imported %s rId%d as reference %d",
            part_name, reference.relationship_id, wrapper.reference_id,
        )
        self._add_part_relationships(package, part_name, wrapper)
        return wrapper

    def _add_part_relationships(
        self, package: TemplatePackage, part_name: str, wrapper: HeaderFooterWrapper
    ) -> None:
        """Register the part's own images and hyperlinks on *wrapper*."""
        rels_path = part_relationships_path(part_name)
        if not package.has_part(rels_path):
            LOGGER.debug("No relationships part for %s", part_name)
            return

        index = RelationshipIndex.from_xml(package.read_part(rels_path), rels_path)

        for entry in index.of_kind(RelationshipKind.IMAGE):
            if entry.target_mode == EXTERNAL_TARGET_MODE:
                LOGGER.warning(
                    "Skipping linked image rId%d in %s: %s",
                    entry.id, part_name, entry.target,
                )
                continue
            image_path = resolve_target(part_name, entry.target)
            wrapper.add_image_relationship(package.read_part(image_path), entry.id, image_path)

        for entry in index.of_kind(RelationshipKind.HYPERLINK):
            wrapper.add_hyperlink_relationship(entry.target, entry.id, EXTERNAL_TARGET_MODE)


def import_template(data: bytes) -> DocumentTemplate:
    """Import a .dotx/.docx template from raw bytes."""
    return TemplateImporter().import_template(data)


async def import_template_async(data: bytes) -> DocumentTemplate:
    """Run import_template on a worker thread.

    Wrap the call in ``anyio.fail_after()`` to bound its duration.
    """
    return await to_thread.run_sync(import_template, data)
