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

"""Template container: the parts of a .dotx/.docx ZIP archive.

All parts are read into memory when the archive is opened; nothing holds
the ZIP open afterwards.
"""

from __future__ import annotations

import posixpath
import zipfile
import zlib
from io import BytesIO
from typing import Iterator, Mapping

from dotx_import.errors import ContainerUnreadableError, MissingPartError
from dotx_import.logger import get_logger

LOGGER = get_logger(__name__)

DOCUMENT_XML_PATH = "word/document.xml"
STYLES_XML_PATH = "word/styles.xml"
DOCUMENT_RELS_PATH = "word/_rels/document.xml.rels"


def resolve_target(source_part: str, target: str) -> str:
    """Resolve a relationship target against the part that declares it.

    ``resolve_target("word/document.xml", "header1.xml")`` is
    ``"word/header1.xml"``; absolute targets start at the package root.
    """
    if target.startswith("/"):
        return posixpath.normpath(target.lstrip("/"))
    base_dir = posixpath.dirname(source_part)
    return posixpath.normpath(posixpath.join(base_dir, target))


def part_relationships_path(part_name: str) -> str:
    """Return the .rels part scoped to *part_name*.

    ``word/header1.xml`` → ``word/_rels/header1.xml.rels``
    """
    folder, base = posixpath.split(part_name)
    return posixpath.join(folder, "_rels", f"{base}.rels")


class TemplatePackage:
    """Read-only view of the parts inside a template archive."""

    def __init__(self, parts: Mapping[str, bytes]) -> None:
        self._parts = dict(parts)

    @classmethod
    def open(cls, data: bytes) -> TemplatePackage:
        """Unpack *data* as a ZIP archive.

        Raises ContainerUnreadableError if the bytes are not a readable archive.
        """
        try:
            with zipfile.ZipFile(BytesIO(data)) as zf:
                parts = {
                    info.filename: zf.read(info)
                    for info in zf.infolist()
                    if not info.is_dir()
                }
        except (
            zipfile.BadZipFile,
            zipfile.LargeZipFile,
            zlib.error,
            EOFError,
            NotImplementedError,  # unsupported compression method
            RuntimeError,  # encrypted member
        ) as exc:
            raise ContainerUnreadableError(
                f"Template container is not a readable ZIP archive: {exc}"
            ) from exc

        LOGGER.debug("Loaded %d parts from template container", len(parts))
        return cls(parts)

    def __contains__(self, part_name: object) -> bool:
        return part_name in self._parts

    def __iter__(self) -> Iterator[str]:
        return iter(self._parts)

    def has_part(self, part_name: str) -> bool:
        return part_name in self._parts

    def read_part(self, part_name: str) -> bytes:
        try:
            return self._parts[part_name]
        except KeyError:
            raise MissingPartError(
                "Required part missing from template container", part=part_name
            ) from None
