"""Tool-facing error wrappers with usage examples.

When an agent passes bad inputs, the error names the problem and shows a
mini usage example so the call can be corrected in one retry. Import
failures name the offending part and relationship ID.
"""

from __future__ import annotations

from dotx_import.errors import TemplateImportError
from dotx_import.validators import resolve_template_input

# ── Usage examples per tool ──────────────────────────────────────────────────

USAGE: dict[str, str] = {
    "inspect_template": 'inspect_template(file_path="letterhead.dotx")',
    "export_header_footer_xml": 'export_header_footer_xml(file_path="letterhead.dotx")',
}


def resolve_template_for_tool(
    tool_name: str,
    file_bytes_b64: str | None,
    file_path: str | None,
) -> bytes:
    """Wrap resolve_template_input with tool-specific context on failure."""
    try:
        return resolve_template_input(file_bytes_b64, file_path)
    except ValueError as exc:
        example = USAGE.get(tool_name, tool_name)
        raise ValueError(
            f"{tool_name} error: {exc}\n"
            f"  Example: {example}"
        ) from exc


def describe_import_error(tool_name: str, exc: TemplateImportError) -> ValueError:
    """Build the ValueError a tool raises when the template cannot be imported."""
    return ValueError(
        f"{tool_name} error: template could not be imported "
        f"({exc.kind.value} error): {exc}"
    )
