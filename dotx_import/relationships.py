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

"""Relationship index: parse .rels parts into numeric, typed entries.

Public functions:
    parse_relationship_id -- "rId7" -> 7, MalformedRelationshipId otherwise
    relationship_kind     -- map a Type URI through the scheme table
    parse_relationships   -- all known-kind entries of a .rels part
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from dotx_import.errors import MalformedRelationshipId, MissingElementError
from dotx_import.models import RelationshipEntry, RelationshipKind
from dotx_import.xml_parsing import local_name, parse_xml_root

RELATIONSHIP_SCHEME = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

SCHEME_TO_KIND: dict[str, RelationshipKind] = {
    f"{RELATIONSHIP_SCHEME}/header": RelationshipKind.HEADER,
    f"{RELATIONSHIP_SCHEME}/footer": RelationshipKind.FOOTER,
    f"{RELATIONSHIP_SCHEME}/image": RelationshipKind.IMAGE,
    f"{RELATIONSHIP_SCHEME}/hyperlink": RelationshipKind.HYPERLINK,
}

_RELATIONSHIP_ID_RE = re.compile(r"rId([0-9]+)")


def parse_relationship_id(value: str | None, part: str | None = None) -> int:
    """Return the numeric part of an ``rIdN`` identifier."""
    match = _RELATIONSHIP_ID_RE.fullmatch(value or "")
    if match is None:
        raise MalformedRelationshipId(value or "", part=part)
    return int(match.group(1))


def relationship_kind(type_uri: str | None) -> RelationshipKind:
    return SCHEME_TO_KIND.get(type_uri or "", RelationshipKind.UNKNOWN)


def parse_relationships(xml: str | bytes, part_name: str | None = None) -> list[RelationshipEntry]:
    """Parse a .rels part and return its entries of known kind, in order.

    Every entry's Id must be well-formed, including entries of unknown kind,
    which are then dropped from the result.
    """
    root = parse_xml_root(xml, part_name)
    if local_name(root.tag) != "Relationships":
        raise MissingElementError(
            f"Expected <Relationships> root element, found <{local_name(root.tag)}>",
            part=part_name,
        )

    entries: list[RelationshipEntry] = []
    for rel_el in root:
        if not isinstance(rel_el.tag, str) or local_name(rel_el.tag) != "Relationship":
            continue
        entry = RelationshipEntry(
            id=parse_relationship_id(rel_el.get("Id"), part=part_name),
            target=rel_el.get("Target", ""),
            kind=relationship_kind(rel_el.get("Type")),
            target_mode=rel_el.get("TargetMode"),
        )
        if entry.kind != RelationshipKind.UNKNOWN:
            entries.append(entry)
    return entries


class RelationshipIndex:
    """Lookup over the parsed entries of one .rels part."""

    def __init__(self, entries: Iterable[RelationshipEntry], part_name: str | None = None) -> None:
        self.part_name = part_name
        self._entries = list(entries)

    @classmethod
    def from_xml(cls, xml: str | bytes, part_name: str | None = None) -> RelationshipIndex:
        return cls(parse_relationships(xml, part_name), part_name)

    def __iter__(self) -> Iterator[RelationshipEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def find(self, relationship_id: int) -> RelationshipEntry | None:
        """Return the first entry with *relationship_id*, if any."""
        for entry in self._entries:
            if entry.id == relationship_id:
                return entry
        return None

    def of_kind(self, kind: RelationshipKind) -> list[RelationshipEntry]:
        return [entry for entry in self._entries if entry.kind == kind]
