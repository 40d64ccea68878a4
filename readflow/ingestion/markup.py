"""
Regex-based markup scanning.

Best-effort structural extraction without a parser: headings and paragraphs
become blank-line separated blocks, list items become bulleted lines and
anything else is flattened to text. Callers go through a ``MarkupNormalizer``
rather than these helpers so the scanner can be swapped out. The OPF lookups
in ``epub`` reuse ``decode_entities`` and ``first_match``.
"""

from __future__ import annotations

import html
import re
from typing import Optional

BULLET = "•"

NON_CONTENT_TAGS = ("script", "style", "noscript", "nav", "header", "footer", "aside")
MAIN_REGION_TAGS = ("article", "main", "body")

_COMMENT_RE = re.compile(r"<!--[\s\S]*?-->")
_XML_DECL_RE = re.compile(r"<\?xml[^>]*\?>", re.IGNORECASE)
_DOCTYPE_RE = re.compile(r"<!DOCTYPE[^>]*>", re.IGNORECASE)
_TITLE_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)

_HEADING_RE = re.compile(r"<(h[1-6])\b[^>]*>([\s\S]*?)</\1>", re.IGNORECASE)
_PARAGRAPH_RE = re.compile(r"<p\b[^>]*>([\s\S]*?)</p>", re.IGNORECASE)
_OPEN_PARAGRAPH_RE = re.compile(r"<p\b[^>]*>", re.IGNORECASE)
_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_LIST_ITEM_RE = re.compile(r"<li\b[^>]*>([\s\S]*?)</li>", re.IGNORECASE)
_LIST_RE = re.compile(r"</?(?:ul|ol)\b[^>]*>", re.IGNORECASE)
_SECTIONING_RE = re.compile(r"</?(?:div|section|article)\b[^>]*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")

_SPACES_RE = re.compile(r"[\t ]+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def _element_re(tag: str) -> re.Pattern:
    return re.compile(rf"<{tag}\b[^>]*>[\s\S]*?</{tag}>", re.IGNORECASE)


_NON_CONTENT_RES = [_element_re(tag) for tag in NON_CONTENT_TAGS]
_HEAD_RE = _element_re("head")
_REGION_RES = [
    (tag, re.compile(rf"<{tag}\b[^>]*>([\s\S]*?)</{tag}>", re.IGNORECASE)) for tag in MAIN_REGION_TAGS
]


def decode_entities(text: str) -> str:
    # Named (HTML5 table), decimal and hex references; nbsp reads as a plain space.
    return html.unescape(text).replace("\xa0", " ")


def tidy_whitespace(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _SPACES_RE.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = _BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def extract_title(markup: str) -> str:
    match = _TITLE_RE.search(markup)
    if not match:
        return ""
    return decode_entities(match.group(1)).strip()


def strip_non_content(markup: str) -> str:
    for pattern in _NON_CONTENT_RES:
        markup = pattern.sub("", markup)
    return _COMMENT_RE.sub("", markup)


def select_main_region(markup: str) -> str:
    """Inner markup of the first article, else main, else body, else everything."""
    for _tag, pattern in _REGION_RES:
        match = pattern.search(markup)
        if match:
            return match.group(1)
    return markup


def _flatten(markup: str) -> str:
    return tidy_whitespace(decode_entities(_TAG_RE.sub(" ", markup)))


def page_to_text(markup: str) -> str:
    """Readable text of a full web page."""
    region = select_main_region(strip_non_content(markup))
    region = _HEADING_RE.sub(r"\n\n\2\n\n", region)
    region = _PARAGRAPH_RE.sub(r"\n\n\1\n\n", region)
    region = _OPEN_PARAGRAPH_RE.sub("\n\n", region)
    region = _BREAK_RE.sub("\n", region)
    region = _LIST_ITEM_RE.sub(rf"\n{BULLET} \1", region)
    region = _LIST_RE.sub("\n", region)
    return _flatten(region)


def chapter_to_text(markup: str) -> str:
    """Readable text of one EPUB content document."""
    text = _XML_DECL_RE.sub("", markup)
    text = _DOCTYPE_RE.sub("", text)
    text = _HEAD_RE.sub("", text)
    text = _element_re("script").sub("", text)
    text = _element_re("style").sub("", text)
    text = _COMMENT_RE.sub("", text)
    text = _HEADING_RE.sub(r"\n\n\2\n\n", text)
    text = _PARAGRAPH_RE.sub(r"\n\n\1", text)
    text = _OPEN_PARAGRAPH_RE.sub("\n\n", text)
    text = _BREAK_RE.sub("\n", text)
    text = _LIST_ITEM_RE.sub(rf"\n{BULLET} \1", text)
    text = _SECTIONING_RE.sub("\n", text)
    return _flatten(text)


def first_match(markup: str, patterns) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(markup)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None
