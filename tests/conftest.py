import io
import zipfile
from types import SimpleNamespace

import pytest

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{opf_path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""


def build_opf(title, items, spine):
    manifest = "\n".join(
        f'    <item id="{item_id}" href="{href}" media-type="application/xhtml+xml"/>' for item_id, href in items
    )
    itemrefs = "\n".join(f'    <itemref idref="{item_id}"/>' for item_id in spine)
    title_tag = f"<dc:title>{title}</dc:title>" if title else ""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">{title_tag}</metadata>
  <manifest>
{manifest}
  </manifest>
  <spine>
{itemrefs}
  </spine>
</package>
"""


def chapter(body):
    return (
        '<?xml version="1.0" encoding="UTF-8"?><!DOCTYPE html>'
        "<html><head><title>ignored</title><style>p { margin: 0 }</style></head>"
        f"<body>{body}</body></html>"
    )


def zip_bytes(files):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def two_chapter_epub():
    return zip_bytes(
        {
            "mimetype": "application/epub+zip",
            "META-INF/container.xml": CONTAINER_XML.format(opf_path="OEBPS/content.opf"),
            "OEBPS/content.opf": build_opf(
                "Two Chapters",
                [("c1", "ch1.xhtml"), ("c2", "ch2.xhtml")],
                ["c1", "c2"],
            ),
            "OEBPS/ch1.xhtml": chapter("<h1>One</h1><p>First chapter text.</p>"),
            "OEBPS/ch2.xhtml": chapter("<p>Second chapter text.</p>"),
        }
    )


@pytest.fixture
def epub_kit():
    """Builders for hand-made EPUB archives."""
    return SimpleNamespace(
        container=lambda opf_path: CONTAINER_XML.format(opf_path=opf_path),
        opf=build_opf,
        chapter=chapter,
        zip=zip_bytes,
    )
