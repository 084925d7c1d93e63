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

"""Shared fixtures: in-memory template containers."""

import pytest

from tests.template_factory import default_parts, sample_template


@pytest.fixture
def template_bytes() -> bytes:
    """Two headers (rId8 default, rId9 first), one footer (rId10), title page."""
    return sample_template()


@pytest.fixture
def template_parts() -> dict:
    """Mutable copy of the default parts, for building broken variants."""
    return default_parts()


@pytest.fixture
def template_file(tmp_path, template_bytes: bytes):
    path = tmp_path / "letterhead.dotx"
    path.write_bytes(template_bytes)
    return path
