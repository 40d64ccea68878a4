from __future__ import annotations

import logging
import re

from . import markup, soup
from .epub import EpubExtractor
from .errors import BlockedError
from .models import IngestKind, NormalizedDocument

logger = logging.getLogger(__name__)

# Substrings served by bot-defence interstitials instead of the real page.
BOT_CHALLENGE_FINGERPRINTS = (
    "Just a moment...",
    "cf-browser-verification",
    "_cf_chl_opt",
    "Attention Required! | Cloudflare",
)

BOT_CHALLENGE_MESSAGE = (
    "This website uses bot protection and cannot be accessed automatically. "
    "Please copy and paste the text directly instead."
)


def looks_like_bot_challenge(body: str) -> bool:
    return any(fingerprint in body for fingerprint in BOT_CHALLENGE_FINGERPRINTS)


class MarkupNormalizer:
    """
    Abstract normalizer. Implementations turn markup into plain text that
    keeps paragraph and list structure, and must be stateless and reusable.
    """

    def normalize_html(self, source: str) -> NormalizedDocument:
        raise NotImplementedError

    def chapter_text(self, source: str) -> str:
        """
        Text of one EPUB content document (no page chrome to remove, head
        dropped).
        """
        raise NotImplementedError

    def normalize_epub(self, archive: bytes, filename: str = "book.epub") -> NormalizedDocument:
        title, content = EpubExtractor(self.chapter_text).extract(archive, filename)
        return NormalizedDocument(title=title, content=content, source=IngestKind.EPUB_FILE)


class RegexMarkupNormalizer(MarkupNormalizer):
    """
    Regex-driven normalizer. Tolerates broken markup at the cost of full
    DOM fidelity: the first article/main/body region wins and any tag it
    does not know is flattened to whitespace.
    """

    def normalize_html(self, source: str) -> NormalizedDocument:
        if looks_like_bot_challenge(source):
            raise BlockedError(BOT_CHALLENGE_MESSAGE)
        title = markup.extract_title(source)
        content = markup.page_to_text(source)
        logger.debug("Normalized page %r: %d chars", title, len(content))
        return NormalizedDocument(title=title, content=content, source=IngestKind.URL)

    def chapter_text(self, source: str) -> str:
        return markup.chapter_to_text(source)


class SoupMarkupNormalizer(MarkupNormalizer):
    """
    Tree-based normalizer on BeautifulSoup with the stdlib HTML parser.
    Inline tags are merged into their surrounding words instead of being
    flattened to whitespace. This is the pipeline default.
    """

    def normalize_html(self, source: str) -> NormalizedDocument:
        if looks_like_bot_challenge(source):
            raise BlockedError(BOT_CHALLENGE_MESSAGE)
        tree = soup.soup_from_markup(source)
        title = soup.page_title(tree)
        content = soup.page_to_text(tree)
        logger.debug("Normalized page %r: %d chars", title, len(content))
        return NormalizedDocument(title=title, content=content, source=IngestKind.URL)

    def chapter_text(self, source: str) -> str:
        return soup.chapter_to_text(source)


def strip_extension(filename: str, *extensions: str) -> str:
    if not extensions:
        return filename
    pattern = r"\.(?:" + "|".join(re.escape(ext) for ext in extensions) + r")$"
    return re.sub(pattern, "", filename, flags=re.IGNORECASE)
