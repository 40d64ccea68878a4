from __future__ import annotations

import asyncio
import logging
import re
from typing import Awaitable, Callable, List, Optional

from .models import TokenStream

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 100_000
DEFAULT_LARGE_THRESHOLD = 500_000
DEFAULT_FILTER_CHUNK_SIZE = 50_000

_WHITESPACE_RE = re.compile(r"\s+")

ProgressCallback = Callable[[int], None]


async def _yield_control() -> None:
    await asyncio.sleep(0)


def split_words(text: str) -> List[str]:
    """Whitespace-separated words of ``text`` in one pass, empties dropped."""
    return text.split()


async def tokenize(
    text: str,
    on_progress: Optional[ProgressCallback] = None,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    large_threshold: int = DEFAULT_LARGE_THRESHOLD,
    filter_chunk_size: int = DEFAULT_FILTER_CHUNK_SIZE,
    yield_control: Callable[[], Awaitable[None]] = _yield_control,
) -> TokenStream:
    """
    Split ``text`` into words without holding the event loop for more than
    one chunk at a time.

    Progress is reported in percent between chunks and always ends with 100.
    The result does not depend on the chunk sizes.
    """
    chunk_size = max(1, chunk_size)
    filter_chunk_size = max(1, filter_chunk_size)
    if len(text) > large_threshold:
        words = await _tokenize_large(text, on_progress, filter_chunk_size, yield_control)
    else:
        words = await _tokenize_windows(text, on_progress, chunk_size, yield_control)
    if on_progress:
        on_progress(100)
    logger.debug("Tokenized %d chars into %d words", len(text), len(words))
    return TokenStream(tuple(words))


async def _tokenize_windows(
    text: str,
    on_progress: Optional[ProgressCallback],
    chunk_size: int,
    yield_control: Callable[[], Awaitable[None]],
) -> List[str]:
    words: List[str] = []
    total = len(text)
    start = 0
    while start < total:
        end = min(start + chunk_size, total)
        # Extend to the next whitespace so no word straddles two windows.
        while end < total and not text[end].isspace():
            end += 1
        words.extend(text[start:end].split())

        start = end
        while start < total and text[start].isspace():
            start += 1

        if start < total:
            if on_progress:
                on_progress(round(start / total * 100))
            await yield_control()
    return words


async def _tokenize_large(
    text: str,
    on_progress: Optional[ProgressCallback],
    filter_chunk_size: int,
    yield_control: Callable[[], Awaitable[None]],
) -> List[str]:
    # One bulk split is far cheaper than walking the characters of a huge text.
    pieces = _WHITESPACE_RE.split(text)
    total = len(pieces)
    words: List[str] = []
    for i in range(0, total, filter_chunk_size):
        for piece in pieces[i:i + filter_chunk_size]:
            if piece:
                words.append(piece)
        if i + filter_chunk_size < total:
            if on_progress:
                on_progress(round((i + filter_chunk_size) / total * 100))
            await yield_control()
    return words
