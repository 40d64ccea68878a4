"""
Ingestion subsystem exports.
"""

from .engine import MarkupNormalizer, RegexMarkupNormalizer, SoupMarkupNormalizer, looks_like_bot_challenge
from .epub import EpubExtractor
from .errors import (
    BlockedError,
    ErrorKind,
    IngestionError,
    InvalidFormatError,
    NetworkError,
    NoContentError,
    NotFoundError,
    RateLimitedError,
)
from .fetch import FetchedPage, PageFetcher, validate_url
from .models import IngestKind, NormalizedDocument, ReadingContent, SourceDocument, SourceKind
from .pipeline import IngestionPipeline

__all__ = [
    "BlockedError",
    "EpubExtractor",
    "ErrorKind",
    "FetchedPage",
    "IngestKind",
    "IngestionError",
    "IngestionPipeline",
    "InvalidFormatError",
    "MarkupNormalizer",
    "NetworkError",
    "NoContentError",
    "NormalizedDocument",
    "NotFoundError",
    "PageFetcher",
    "RateLimitedError",
    "ReadingContent",
    "RegexMarkupNormalizer",
    "SoupMarkupNormalizer",
    "SourceDocument",
    "SourceKind",
    "looks_like_bot_challenge",
    "validate_url",
]
