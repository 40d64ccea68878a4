"""
BeautifulSoup-based markup scanning.

Same block rules as the regex scanner in ``markup``, applied to a parsed
tree: block tags get their blank lines inserted as text nodes before the
tree is flattened, so inline tags never split a word.
"""

from __future__ import annotations

import warnings

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, ProcessingInstruction, XMLParsedAsHTMLWarning

from .markup import BULLET, MAIN_REGION_TAGS, NON_CONTENT_TAGS, tidy_whitespace

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
SECTIONING_TAGS = ["div", "section", "article"]


def soup_from_markup(source: str) -> BeautifulSoup:
    # EPUB chapters are XHTML; the lenient HTML parser reads them fine.
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
        return BeautifulSoup(source, "html.parser")


def _drop(root, names) -> None:
    for tag in root.find_all(list(names)):
        tag.extract()


_MARKUP_NODES = (Comment, Declaration, Doctype, ProcessingInstruction)


def _drop_markup_nodes(root) -> None:
    for node in root.find_all(string=lambda text: isinstance(text, _MARKUP_NODES)):
        node.extract()


def _surround(tag, before: str, after: str = "") -> None:
    tag.insert_before(before)
    if after:
        tag.insert_after(after)


def _flatten(root) -> str:
    return tidy_whitespace(root.get_text().replace("\xa0", " "))


def page_title(soup: BeautifulSoup) -> str:
    tag = soup.find("title")
    if tag is None:
        return ""
    return tag.get_text().replace("\xa0", " ").strip()


def select_main_region(soup: BeautifulSoup):
    for name in MAIN_REGION_TAGS:
        region = soup.find(name)
        if region is not None:
            return region
    return soup


def page_to_text(soup: BeautifulSoup) -> str:
    """Readable text of a full web page. Mutates ``soup``."""
    _drop(soup, NON_CONTENT_TAGS)
    _drop_markup_nodes(soup)
    region = select_main_region(soup)
    for tag in region.find_all(HEADING_TAGS):
        _surround(tag, "\n\n", "\n\n")
    for tag in region.find_all("p"):
        _surround(tag, "\n\n", "\n\n")
    for tag in region.find_all("br"):
        tag.replace_with("\n")
    for tag in region.find_all("li"):
        _surround(tag, f"\n{BULLET} ")
    for tag in region.find_all(["ul", "ol"]):
        _surround(tag, "\n", "\n")
    return _flatten(region)


def chapter_to_text(source: str) -> str:
    """Readable text of one EPUB content document."""
    soup = soup_from_markup(source)
    _drop(soup, ["head", "script", "style"])
    _drop_markup_nodes(soup)
    for tag in soup.find_all(HEADING_TAGS):
        _surround(tag, "\n\n", "\n\n")
    # A paragraph opens a blank line but does not close one.
    for tag in soup.find_all("p"):
        _surround(tag, "\n\n")
    for tag in soup.find_all("br"):
        tag.replace_with("\n")
    for tag in soup.find_all("li"):
        _surround(tag, f"\n{BULLET} ")
    for tag in soup.find_all(SECTIONING_TAGS):
        _surround(tag, "\n", "\n")
    return _flatten(soup)
