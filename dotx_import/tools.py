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

"""MCP tools for inspecting templates and exporting their header/footer XML.

Both tools are read-only. Each function is decorated with @mcp.tool() to
register it on the shared FastMCP instance.
"""

from __future__ import annotations

from dotx_import.errors import TemplateImportError
from dotx_import.importer import DocumentTemplate, import_template
from dotx_import.mcp_app import mcp
from dotx_import.tool_errors import describe_import_error, resolve_template_for_tool


def _import_for_tool(tool_name: str, file_bytes_b64: str, file_path: str) -> DocumentTemplate:
    raw = resolve_template_for_tool(tool_name, file_bytes_b64 or None, file_path or None)
    try:
        return import_template(raw)
    except TemplateImportError as exc:
        raise describe_import_error(tool_name, exc) from exc


@mcp.tool()
def inspect_template(
    file_bytes_b64: str = "",
    file_path: str = "",
) -> dict:
    """Import a Word template and summarise what it carries.

    Returns each header and footer with its placement (default/first/even),
    the relationship ID freshly assigned to it, and the images and external
    hyperlinks it references; plus the style IDs, whether a distinct first
    page is defined, and the next free relationship ID.

    file_path: path to the .dotx/.docx on disk (preferred for interactive use).
    file_bytes_b64: base64-encoded file bytes (for programmatic use).
    """
    template = _import_for_tool("inspect_template", file_bytes_b64, file_path)
    return template.summary().model_dump(mode="json")


@mcp.tool()
def export_header_footer_xml(
    file_bytes_b64: str = "",
    file_path: str = "",
) -> dict:
    """Return the re-emitted XML of every imported header and footer.

    Keys are ``header-<id>`` / ``footer-<id>`` using the freshly assigned
    relationship IDs. The XML is produced from the imported tree, so it shows
    exactly what would be written back out.

    file_path: path to the .dotx/.docx on disk (preferred for interactive use).
    file_bytes_b64: base64-encoded file bytes (for programmatic use).
    """
    template = _import_for_tool("export_header_footer_xml", file_bytes_b64, file_path)
    parts: dict[str, str] = {}
    for h in template.headers:
        parts[f"header-{h.header.reference_id}"] = h.header.root.to_xml_string()
    for f in template.footers:
        parts[f"footer-{f.footer.reference_id}"] = f.footer.root.to_xml_string()
    return {"parts": parts}
