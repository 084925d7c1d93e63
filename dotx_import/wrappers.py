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

"""Header/footer containers, media store and relationship ID allocation."""

from __future__ import annotations

import hashlib
import posixpath
import threading
from dataclasses import dataclass
from typing import Iterator

from dotx_import.models import PartRelationship, RelationshipKind
from dotx_import.xml_node import XmlNode

EXTERNAL_TARGET_MODE = "External"
_DEFAULT_IMAGE_EXTENSION = ".png"


@dataclass(frozen=True)
class MediaItem:
    key: str
    file_name: str
    data: bytes


class Media:
    """Content-addressed image store; identical bytes are stored once.

    Safe for concurrent add_image() calls.
    """

    def __init__(self) -> None:
        self._items: dict[str, MediaItem] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[MediaItem]:
        with self._lock:
            return iter(list(self._items.values()))

    def get(self, key: str) -> MediaItem | None:
        return self._items.get(key)

    def add_image(self, data: bytes, source_name: str | None = None) -> MediaItem:
        key = hashlib.sha256(data).hexdigest()
        with self._lock:
            item = self._items.get(key)
            if item is None:
                extension = posixpath.splitext(source_name or "")[1] or _DEFAULT_IMAGE_EXTENSION
                item = MediaItem(key=key, file_name=f"{key[:16]}{extension.lower()}", data=data)
                self._items[key] = item
            return item


class RelationshipIdAllocator:
    """Thread-safe fetch-and-increment counter for fresh relationship IDs."""

    def __init__(self, start: int = 1) -> None:
        self._next = start
        self._lock = threading.Lock()

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next

    def allocate(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value


class HeaderFooterWrapper:
    """An imported header or footer part and the relationships it owns.

    reference_id is freshly allocated during import. Image and hyperlink
    relationships keep their source IDs, which the drawing and hyperlink
    elements inside *root* already point at.
    """

    root_name: str = ""
    kind: RelationshipKind = RelationshipKind.UNKNOWN

    def __init__(self, media: Media, reference_id: int, root: XmlNode) -> None:
        self.media = media
        self.reference_id = reference_id
        self.root = root
        self.relationships: list[PartRelationship] = []

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(reference_id={self.reference_id}, "
            f"relationships={len(self.relationships)})"
        )

    def add_image_relationship(
        self, data: bytes, relationship_id: int, source_name: str | None = None
    ) -> MediaItem:
        item = self.media.add_image(data, source_name)
        self.relationships.append(PartRelationship(
            relationship_id=relationship_id,
            kind=RelationshipKind.IMAGE,
            target=f"media/{item.file_name}",
        ))
        return item

    def add_hyperlink_relationship(
        self, target: str, relationship_id: int, target_mode: str = EXTERNAL_TARGET_MODE
    ) -> None:
        self.relationships.append(PartRelationship(
            relationship_id=relationship_id,
            kind=RelationshipKind.HYPERLINK,
            target=target,
            target_mode=target_mode,
        ))

    def relationship(self, relationship_id: int) -> PartRelationship | None:
        for rel in self.relationships:
            if rel.relationship_id == relationship_id:
                return rel
        return None

    @property
    def images(self) -> list[PartRelationship]:
        return [r for r in self.relationships if r.kind == RelationshipKind.IMAGE]

    @property
    def hyperlinks(self) -> list[PartRelationship]:
        return [r for r in self.relationships if r.kind == RelationshipKind.HYPERLINK]


class HeaderWrapper(HeaderFooterWrapper):
    root_name = "w:hdr"
    kind = RelationshipKind.HEADER


class FooterWrapper(HeaderFooterWrapper):
    root_name = "w:ftr"
    kind = RelationshipKind.FOOTER
