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

"""Pydantic models for relationships, section references and tool outputs."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


# ── Enums ──────────────────────────────────────────────────────────────────────

class RelationshipKind(str, Enum):
    HEADER = "header"
    FOOTER = "footer"
    IMAGE = "image"
    HYPERLINK = "hyperlink"
    UNKNOWN = "unknown"


class ReferenceType(str, Enum):
    """Which pages a header or footer applies to (``w:type``)."""
    DEFAULT = "default"
    FIRST = "first"
    EVEN = "even"


# ── Relationship index ─────────────────────────────────────────────────────────

class RelationshipEntry(BaseModel):
    """One ``<Relationship>`` of a .rels part.

    id: numeric part of the ``rIdN`` identifier.
    target: path relative to the word/ directory, or an external URI.
    """
    model_config = {"frozen": True}

    id: int
    target: str
    kind: RelationshipKind
    target_mode: str | None = None


class PartRelationship(BaseModel):
    """A relationship registered on an imported header or footer part."""
    model_config = {"frozen": True}

    relationship_id: int
    kind: RelationshipKind
    target: str
    target_mode: str | None = None


# ── Section references ─────────────────────────────────────────────────────────

class DocumentReference(BaseModel):
    model_config = {"frozen": True}

    relationship_id: int
    reference_type: ReferenceType


class DocumentReferences(BaseModel):
    headers: list[DocumentReference] = []
    footers: list[DocumentReference] = []


# ── inspect_template ───────────────────────────────────────────────────────────

class HyperlinkSummary(BaseModel):
    relationship_id: int
    target: str
    target_mode: str


class HeaderFooterSummary(BaseModel):
    """One imported header or footer part.

    reference_id: the freshly assigned ID, not the one found in the source.
    """
    placement: ReferenceType
    reference_id: int
    root_element: str
    image_relationship_ids: list[int]
    hyperlinks: list[HyperlinkSummary]


class TemplateSummary(BaseModel):
    headers: list[HeaderFooterSummary]
    footers: list[HeaderFooterSummary]
    style_ids: list[str]
    title_page_defined: bool
    next_relationship_id: int
    media_count: int
