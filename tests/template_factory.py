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

"""Build .dotx containers in memory so tests need no binary fixtures."""

from __future__ import annotations

import struct
import zipfile
from io import BytesIO

W = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PKG_RELS = "http://schemas.openxmlformats.org/package/2006/relationships"
WP = "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing"
A = "http://schemas.openxmlformats.org/drawingml/2006/main"
PIC = "http://schemas.openxmlformats.org/drawingml/2006/picture"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 17

CONTENT_TYPES_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Default Extension="png" ContentType="image/png"/>'
    "</Types>"
)

STYLES_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    f'<w:styles xmlns:w="{W}">'
    "<w:docDefaults><w:rPrDefault><w:rPr>"
    '<w:rFonts w:ascii="Calibri" w:hAnsi="Calibri"/><w:sz w:val="22"/>'
    "</w:rPr></w:rPrDefault></w:docDefaults>"
    '<w:style w:type="paragraph" w:default="1" w:styleId="Normal">'
    '<w:name w:val="Normal"/></w:style>'
    '<w:style w:type="paragraph" w:styleId="Header">'
    '<w:name w:val="header"/><w:basedOn w:val="Normal"/></w:style>'
    "</w:styles>"
)


def relationship(r_id: str, kind: str, target: str, target_mode: str | None = None) -> str:
    """One <Relationship>; *kind* is a suffix of the officeDocument scheme or a full URI."""
    type_uri = kind if "://" in kind else f"{R}/{kind}"
    mode = f' TargetMode="{target_mode}"' if target_mode else ""
    return f'<Relationship Id="{r_id}" Type="{type_uri}" Target="{target}"{mode}/>'


def rels_xml(*relationships: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<Relationships xmlns="{PKG_RELS}">{"".join(relationships)}</Relationships>'
    )


def header_reference(r_id: str, ref_type: str | None = "default") -> str:
    type_attr = f' w:type="{ref_type}"' if ref_type else ""
    return f'<w:headerReference{type_attr} r:id="{r_id}"/>'


def footer_reference(r_id: str, ref_type: str | None = "default") -> str:
    type_attr = f' w:type="{ref_type}"' if ref_type else ""
    return f'<w:footerReference{type_attr} r:id="{r_id}"/>'


def document_xml(*section_children: str, body: str = "") -> str:
    """A main part whose final <w:sectPr> holds *section_children*."""
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W}" xmlns:r="{R}">'
        "<w:body>"
        f"{body or '<w:p><w:r><w:t>Body text</w:t></w:r></w:p>'}"
        f"<w:sectPr>{''.join(section_children)}"
        '<w:pgSz w:w="11906" w:h="16838"/>'
        "</w:sectPr>"
        "</w:body></w:document>"
    )


def _part_xml(root: str, inner: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:{root} xmlns:w="{W}" xmlns:r="{R}" xmlns:wp="{WP}" '
        f'xmlns:a="{A}" xmlns:pic="{PIC}">{inner}</w:{root}>'
    )


def paragraph(text: str) -> str:
    return f'<w:p><w:pPr><w:pStyle w:val="Header"/></w:pPr><w:r><w:t>{text}</w:t></w:r></w:p>'


def drawing(embed_id: str) -> str:
    return (
        "<w:r><w:drawing><wp:inline>"
        '<wp:extent cx="914400" cy="914400"/>'
        f'<a:graphic><a:graphicData uri="{PIC}"><pic:pic>'
        f'<pic:blipFill><a:blip r:embed="{embed_id}"/></pic:blipFill>'
        "</pic:pic></a:graphicData></a:graphic>"
        "</wp:inline></w:drawing></w:r>"
    )


def hyperlink(r_id: str, text: str) -> str:
    return f'<w:hyperlink r:id="{r_id}"><w:r><w:t>{text}</w:t></w:r></w:hyperlink>'


def header_xml(*inner: str) -> str:
    return _part_xml("hdr", "".join(inner))


def footer_xml(*inner: str) -> str:
    return _part_xml("ftr", "".join(inner))


def build_template(
    parts: dict[str, str | bytes], compression: int = zipfile.ZIP_DEFLATED
) -> bytes:
    output = BytesIO()
    with zipfile.ZipFile(output, "w", compression) as zf:
        for name, content in parts.items():
            zf.writestr(name, content)
    return output.getvalue()


_LOCAL_HEADER = b"PK\x03\x04"
_CENTRAL_HEADER = b"PK\x01\x02"


def patch_zip_headers(
    data: bytes, *, compression: int | None = None, flag_bits: int | None = None
) -> bytes:
    """Overwrite the method and/or flag fields of every local and central header.

    Only safe on ZIP_STORED archives whose payloads cannot contain a header
    signature.
    """
    patched = bytearray(data)
    # (signature, offset of flag bits, offset of compression method)
    for signature, flags_at, method_at in ((_LOCAL_HEADER, 6, 8), (_CENTRAL_HEADER, 8, 10)):
        start = patched.find(signature)
        while start != -1:
            if flag_bits is not None:
                struct.pack_into("<H", patched, start + flags_at, flag_bits)
            if compression is not None:
                struct.pack_into("<H", patched, start + method_at, compression)
            start = patched.find(signature, start + 4)
    return bytes(patched)


def default_parts() -> dict[str, str | bytes]:
    """Two headers (default, first) and one footer, with a distinct title page.

    The first header carries an image and an external hyperlink through its
    own .rels part; the second header and the footer have no .rels part.
    Source relationship IDs are deliberately high (rId8..rId10).
    """
    return {
        "[Content_Types].xml": CONTENT_TYPES_XML,
        "word/styles.xml": STYLES_XML,
        "word/document.xml": document_xml(
            header_reference("rId8", "default"),
            header_reference("rId9", "first"),
            footer_reference("rId10", "default"),
            "<w:titlePg/>",
        ),
        "word/_rels/document.xml.rels": rels_xml(
            relationship("rId1", f"{R}/styles", "styles.xml"),
            relationship("rId8", "header", "header1.xml"),
            relationship("rId9", "header", "header2.xml"),
            relationship("rId10", "footer", "footer1.xml"),
        ),
        "word/header1.xml": header_xml(
            paragraph("Acme Corporation"),
            f"<w:p>{drawing('rId1')}{hyperlink('rId2', 'acme.example')}</w:p>",
        ),
        "word/_rels/header1.xml.rels": rels_xml(
            relationship("rId1", "image", "media/image1.png"),
            relationship("rId2", "hyperlink", "https://acme.example/", "External"),
        ),
        "word/header2.xml": header_xml(paragraph("Cover page")),
        "word/footer1.xml": footer_xml(paragraph("Confidential")),
        "word/media/image1.png": PNG_BYTES,
    }


def sample_template() -> bytes:
    return build_template(default_parts())
