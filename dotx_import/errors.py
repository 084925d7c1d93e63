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

"""Error taxonomy for template import.

Every failure is a ``TemplateImportError`` (a ``ValueError``) carrying an
``ImportErrorKind`` plus the part path and relationship ID when known, so a
caller can report which part of a malformed template is at fault.
"""

from __future__ import annotations

from enum import Enum


class ImportErrorKind(str, Enum):
    FORMAT = "format"
    REFERENCE = "reference"
    CONTAINER = "container"


class TemplateImportError(ValueError):
    kind: ImportErrorKind = ImportErrorKind.FORMAT

    def __init__(
        self,
        message: str,
        *,
        part: str | None = None,
        relationship_id: int | str | None = None,
    ) -> None:
        self.part = part
        self.relationship_id = relationship_id
        context = []
        if part is not None:
            context.append(f"part '{part}'")
        if relationship_id is not None:
            context.append(f"relationship '{relationship_id}'")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


# ── Format errors ──────────────────────────────────────────────────────────────

class MalformedRelationshipId(TemplateImportError):
    """Relationship ID text does not match ``rId<digits>``."""

    def __init__(self, value: str, *, part: str | None = None) -> None:
        self.value = value
        super().__init__(
            f"Invalid relationship identifier {value!r}: expected 'rId' "
            f"followed by digits",
            part=part,
            relationship_id=value,
        )


class MultipleRootElementsError(TemplateImportError):
    pass


class MissingElementError(TemplateImportError):
    pass


class InvalidReferenceTypeError(TemplateImportError):
    pass


class XmlSyntaxError(TemplateImportError):
    pass


# ── Reference errors ───────────────────────────────────────────────────────────

class MissingRelationshipTargetError(TemplateImportError):
    kind = ImportErrorKind.REFERENCE


# ── Container errors ───────────────────────────────────────────────────────────

class ContainerUnreadableError(TemplateImportError):
    kind = ImportErrorKind.CONTAINER


class MissingPartError(TemplateImportError):
    kind = ImportErrorKind.CONTAINER
