from __future__ import annotations

import math
import re
from typing import List, Optional, Sequence

from .models import VisibleWindow

DEFAULT_WORDS_PER_CHUNK = 200
_PARAGRAPH_BREAK_RE = re.compile(r"\n\n+")


def _finite(value: float) -> float:
    value = float(value)
    return value if math.isfinite(value) else 0.0


def compute_window(
    scroll_offset: float,
    viewport_height: float,
    estimated_item_height: float,
    buffer_count: int,
    paragraph_count: int,
    max_render: int,
    enabled: bool = True,
) -> VisibleWindow:
    """
    Range of paragraphs worth rendering for the current scroll offset.
    Negative or non-finite inputs count as zero; a non-positive item height
    as 1.
    """
    paragraph_count = max(0, int(paragraph_count))
    if not enabled:
        return VisibleWindow(start=0, end=paragraph_count)

    scroll_offset = max(0.0, _finite(scroll_offset))
    viewport_height = max(0.0, _finite(viewport_height))
    item_height = _finite(estimated_item_height)
    if item_height <= 0:
        item_height = 1.0
    buffer_count = max(0, int(buffer_count))
    max_render = max(0, int(max_render))

    start = max(0, math.floor(scroll_offset / item_height) - buffer_count)
    start = min(start, paragraph_count)
    count = min(math.ceil(viewport_height / item_height) + 2 * buffer_count, max_render)
    end = min(paragraph_count, start + count)
    return VisibleWindow(start=start, end=end)


def build_paragraphs(
    content: Optional[str],
    words: Sequence[str],
    words_per_chunk: int = DEFAULT_WORDS_PER_CHUNK,
) -> List[str]:
    """
    Paragraphs for the scroll view: the content's blank-line blocks when the
    content was kept, otherwise fixed-size word chunks.
    """
    if content:
        return [block for block in _PARAGRAPH_BREAK_RE.split(content) if block.strip()]
    size = max(50, min(500, int(words_per_chunk)))
    return [" ".join(words[i:i + size]) for i in range(0, len(words), size)]
