from __future__ import annotations

import logging
import time
import uuid
from typing import Optional, Union

from ..config import IngestionConfig
from ..reading.tokenizer import ProgressCallback, tokenize
from .engine import MarkupNormalizer, SoupMarkupNormalizer, strip_extension
from .errors import InvalidFormatError, NoContentError
from .fetch import PageFetcher
from .models import IngestKind, NormalizedDocument, ReadingContent, SourceDocument, SourceKind

logger = logging.getLogger(__name__)

PASTED_TITLE = "Pasted Text"
WEB_TITLE = "Web Article"

_FILE_KINDS = {
    "epub": IngestKind.EPUB_FILE,
    "txt": IngestKind.TXT_FILE,
    "md": IngestKind.MD_FILE,
}


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class IngestionPipeline:
    """
    Turns a raw source (pasted text, a text/markdown/EPUB file or a URL) into
    a normalized document, then into a tokenized reading session.

    Ingestion is all or nothing: any failure raises an ``IngestionError`` and
    no partial document is returned.
    """

    def __init__(
        self,
        normalizer: Optional[MarkupNormalizer] = None,
        fetcher: Optional[PageFetcher] = None,
        config: Optional[IngestionConfig] = None,
    ):
        self.config = config or IngestionConfig()
        self.normalizer = normalizer or SoupMarkupNormalizer()
        self.fetcher = fetcher or PageFetcher(
            timeout=self.config.request_timeout,
            max_bytes=self.config.max_download_bytes,
        )

    async def ingest(
        self,
        kind: Union[IngestKind, str],
        payload: Union[bytes, str],
        *,
        filename: Optional[str] = None,
    ) -> NormalizedDocument:
        kind = IngestKind(kind)
        start = time.monotonic()
        if kind is IngestKind.PASTE:
            document = self._from_paste(payload)
        elif kind in (IngestKind.TXT_FILE, IngestKind.MD_FILE):
            document = self._from_text_file(kind, payload, filename)
        elif kind is IngestKind.EPUB_FILE:
            document = self._from_epub(payload, filename)
        else:
            document = await self._from_url(payload)
        logger.info(
            "Ingested %s %r: %d chars in %d ms", kind.value, document.title, len(document.content), _elapsed_ms(start)
        )
        return document

    async def ingest_file(self, filename: str, data: bytes) -> NormalizedDocument:
        extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        kind = _FILE_KINDS.get(extension)
        if kind is None:
            raise InvalidFormatError("Unsupported file format. Please use EPUB, TXT, or MD files.")
        return await self.ingest(kind, data, filename=filename)

    async def prepare(
        self,
        document: NormalizedDocument,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ReadingContent:
        start = time.monotonic()
        tokens = await tokenize(
            document.content,
            on_progress,
            chunk_size=self.config.chunk_size,
            large_threshold=self.config.large_threshold,
            filter_chunk_size=self.config.filter_chunk_size,
        )
        logger.info("Tokenized %r into %d words in %d ms", document.title, len(tokens), _elapsed_ms(start))
        # Large texts keep only their words.
        keep_content = len(document.content) < self.config.store_content_limit
        return ReadingContent(
            id=uuid.uuid4().hex,
            title=document.title,
            source=document.source,
            tokens=tokens,
            content=document.content if keep_content else None,
            url=document.url,
        )

    def _from_paste(self, payload: Union[bytes, str]) -> NormalizedDocument:
        text = SourceDocument(SourceKind.TEXT, payload).as_text()
        if not text.strip():
            raise NoContentError("Please paste some text first")
        return NormalizedDocument(title=PASTED_TITLE, content=text, source=IngestKind.PASTE)

    def _from_text_file(
        self, kind: IngestKind, payload: Union[bytes, str], filename: Optional[str]
    ) -> NormalizedDocument:
        source = SourceDocument(SourceKind.TEXT, payload, filename=filename)
        text = source.as_text()
        if not text.strip():
            raise NoContentError("The file is empty")
        default_name = "document.md" if kind is IngestKind.MD_FILE else "document.txt"
        title = strip_extension(filename or default_name, "txt", "md")
        return NormalizedDocument(title=title, content=text, source=kind)

    def _from_epub(self, payload: Union[bytes, str], filename: Optional[str]) -> NormalizedDocument:
        source = SourceDocument(SourceKind.EPUB, payload, filename=filename or "book.epub")
        start = time.monotonic()
        document = self.normalizer.normalize_epub(source.as_bytes(), source.filename)
        logger.info("Extracted EPUB %s in %d ms", source.filename, _elapsed_ms(start))
        if not document.title.strip():
            document.title = strip_extension(source.filename, "epub")
        return document

    async def _from_url(self, payload: Union[bytes, str]) -> NormalizedDocument:
        raw_url = SourceDocument(SourceKind.TEXT, payload).as_text()
        page = await self.fetcher.fetch(raw_url)

        start = time.monotonic()
        document = self.normalizer.normalize_html(page.body)
        logger.info("Normalized %s in %d ms", page.url, _elapsed_ms(start))
        if not document.content.strip():
            raise NoContentError("No readable content found at this URL")
        if not document.title.strip():
            logger.debug("No title found for %s, using default", page.url)
            document.title = WEB_TITLE
        document.url = page.url
        return document
