from __future__ import annotations

import io
import logging
import posixpath
import re
import zipfile
import zlib
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import unquote

from . import markup, soup
from .errors import InvalidFormatError, NoContentError, NotFoundError

logger = logging.getLogger(__name__)

MIN_FALLBACK_CHARS = 50
CONTAINER_PATH = "META-INF/container.xml"

_FULL_PATH_PATTERNS = [
    re.compile(r'full-path="([^"]+)"', re.IGNORECASE),
    re.compile(r"full-path='([^']+)'", re.IGNORECASE),
    re.compile(r'rootfile[^>]+full-path="([^"]+)"', re.IGNORECASE),
    re.compile(r"rootfile[^>]+full-path='([^']+)'", re.IGNORECASE),
]
_TITLE_PATTERNS = [
    re.compile(r"<dc:title[^>]*>([^<]+)</dc:title>", re.IGNORECASE),
    re.compile(r"<dc:title[^>]*><!\[CDATA\[([^\]]+)\]\]></dc:title>", re.IGNORECASE),
    re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE),
]
_ITEMREF_RE = re.compile(r"<itemref\b[^>]*?\bidref=[\"']([^\"']+)[\"'][^>]*>", re.IGNORECASE)
_ITEM_RE = re.compile(r"<item\s+([^>]+)>", re.IGNORECASE)
_ITEM_ID_RE = re.compile(r"\bid=[\"']([^\"']+)[\"']", re.IGNORECASE)
_ITEM_HREF_RE = re.compile(r"\bhref=[\"']([^\"']+)[\"']", re.IGNORECASE)
_CONTENT_FILE_RE = re.compile(r"\.(?:x?html?|htm)$", re.IGNORECASE)


class ZipIndex:
    """
    Read-only view over the archive's file entries with the lookups EPUB
    resolution needs (exact, case-insensitive, suffix).
    """

    def __init__(self, archive: zipfile.ZipFile):
        self.archive = archive
        self.names: List[str] = [info.filename for info in archive.infolist() if not info.is_dir()]
        self._by_lower: Dict[str, str] = {}
        for name in self.names:
            self._by_lower.setdefault(name.lower(), name)

    def resolve(self, path: str) -> Optional[str]:
        if path in self.names:
            return path
        return self._by_lower.get(path.lower())

    def find_suffix(self, suffix: str) -> Optional[str]:
        suffix = suffix.lower()
        for name in self.names:
            if name.lower().endswith(suffix):
                return name
        return None

    def first_opf(self) -> Optional[str]:
        for name in self.names:
            if name.lower().endswith(".opf"):
                return name
        return None

    def read_text(self, name: str) -> str:
        return self.archive.read(name).decode("utf-8-sig", errors="replace")


class EpubExtractor:
    """
    Pulls the reading-order text out of an EPUB archive.

    Every lookup has a fallback: container.xml is matched case-insensitively
    and then by suffix, a missing root-file path falls back to any OPF in the
    archive, and when the spine yields nothing all content documents are
    scanned in name order.
    """

    def __init__(self, chapter_text: Callable[[str], str] = soup.chapter_to_text):
        self.chapter_text = chapter_text

    def extract(self, data: bytes, filename: str = "book.epub") -> Tuple[str, str]:
        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, ValueError) as exc:
            raise InvalidFormatError("Invalid EPUB: file is not a zip archive") from exc

        with archive:
            index = ZipIndex(archive)
            logger.debug("EPUB %s: %d entries", filename, len(index.names))
            try:
                opf_name = self._locate_opf(index)
                return self._parse_with_opf(index, opf_name, filename)
            except (zipfile.BadZipFile, zlib.error) as exc:
                raise InvalidFormatError("Invalid EPUB: archive is corrupt") from exc

    def _read_required(self, index: ZipIndex, name: str) -> str:
        try:
            return index.read_text(name)
        except (RuntimeError, NotImplementedError) as exc:
            # zipfile raises these for encrypted entries and unknown compression.
            raise InvalidFormatError(f"Invalid EPUB: cannot read {name}") from exc

    def _locate_opf(self, index: ZipIndex) -> str:
        container_name = index.resolve(CONTAINER_PATH) or index.find_suffix("container.xml")
        if container_name is None:
            logger.debug("No container.xml found, looking for an OPF directly")
            opf_name = index.first_opf()
            if opf_name is None:
                raise InvalidFormatError("Invalid EPUB: missing container.xml and no OPF file found")
            return opf_name

        container = self._read_required(index, container_name)
        opf_path = markup.first_match(container, _FULL_PATH_PATTERNS)
        opf_name = index.resolve(opf_path) if opf_path else None
        if opf_name is None:
            logger.debug("Root file %r from %s not in archive, looking for an OPF directly", opf_path, container_name)
            opf_name = index.first_opf()
        if opf_name is None:
            raise InvalidFormatError("Invalid EPUB: cannot find OPF file")
        return opf_name

    def _parse_with_opf(self, index: ZipIndex, opf_name: str, filename: str) -> Tuple[str, str]:
        opf = self._read_required(index, opf_name)
        opf_dir = opf_name[: opf_name.rfind("/") + 1]

        raw_title = markup.first_match(opf, _TITLE_PATTERNS)
        title = markup.decode_entities(raw_title).strip() if raw_title else ""
        title = title or re.sub(r"\.epub$", "", filename, flags=re.IGNORECASE)
        manifest = parse_manifest(opf)
        spine = parse_spine(opf)
        logger.debug("OPF %s: %d manifest items, %d spine items", opf_name, len(manifest), len(spine))

        parts: List[str] = []
        resolved = 0
        for item_id in spine:
            href = manifest.get(item_id)
            if href is None:
                logger.debug("Spine item not in manifest: %s", item_id)
                continue
            name = self._resolve_href(index, opf_dir, href)
            if name is None:
                logger.debug("Could not find content file: %s", href)
                continue
            resolved += 1
            text = self._read_chapter(index, name)
            if text and text.strip():
                parts.append(text)

        if not parts:
            logger.debug("Spine produced no text, scanning all content documents")
            parts = self._scan_content_files(index)

        content = "\n\n".join(parts)
        if not content.strip():
            if spine and not resolved:
                raise NotFoundError(f"Invalid EPUB: none of the {len(spine)} spine entries exist in the archive")
            raise NoContentError("Could not extract any readable content from EPUB")
        return title, content

    def _resolve_href(self, index: ZipIndex, opf_dir: str, href: str) -> Optional[str]:
        for candidate in candidate_paths(opf_dir, href):
            name = index.resolve(candidate)
            if name is not None:
                return name
        return None

    def _read_chapter(self, index: ZipIndex, name: str) -> Optional[str]:
        try:
            return self.chapter_text(index.read_text(name))
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError, OSError) as exc:
            logger.debug("Error reading content file %s: %s", name, exc)
            return None

    def _scan_content_files(self, index: ZipIndex) -> List[str]:
        names = sorted(
            name
            for name in index.names
            if _CONTENT_FILE_RE.search(name) and "toc" not in name and "nav" not in name
        )
        parts = []
        for name in names:
            text = self._read_chapter(index, name)
            # Short fragments are covers, nav stubs and the like.
            if text and text.strip() and len(text) > MIN_FALLBACK_CHARS:
                parts.append(text)
        return parts


def parse_manifest(opf: str) -> Dict[str, str]:
    manifest: Dict[str, str] = {}
    for match in _ITEM_RE.finditer(opf):
        attrs = match.group(1)
        item_id = _ITEM_ID_RE.search(attrs)
        href = _ITEM_HREF_RE.search(attrs)
        if item_id and href:
            manifest[item_id.group(1)] = unquote(href.group(1))
    return manifest


def parse_spine(opf: str) -> List[str]:
    spine: List[str] = []
    seen = set()
    for match in _ITEMREF_RE.finditer(opf):
        idref = match.group(1)
        if idref not in seen:
            seen.add(idref)
            spine.append(idref)
    return spine


def candidate_paths(opf_dir: str, href: str) -> List[str]:
    bare = href[2:] if href.startswith("./") else href
    candidates = [
        opf_dir + bare,
        bare,
        opf_dir + href,
        href,
        posixpath.normpath(posixpath.join(opf_dir, bare)),
        bare.lstrip("/"),
    ]
    unique: List[str] = []
    for candidate in candidates:
        if candidate and candidate not in unique:
            unique.append(candidate)
    return unique
