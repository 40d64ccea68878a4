"""
Bionic-reading transform.

Maps one word (plus its position in the stream) to the spans a renderer
needs: which letters to emphasise and what stays plain. Everything here is a
pure function of its arguments, so the batch renderer and the per-word
playback path always agree.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Tuple

from .models import CENTER_MARKER, RenderToken, TransformOptions

# Function words left plain when ``skip_common_words`` is on.
COMMON_WORDS = frozenset(
    [
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
        "be", "have", "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "must", "shall", "can", "need", "it", "its",
        "this", "that", "these", "those", "i", "you", "he", "she", "we", "they",
        "me", "him", "her", "us", "them", "my", "your", "his", "our", "their",
    ]
)

_WHITESPACE_SPLIT_RE = re.compile(r"(\s+)")


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def highlight_count(length: int, fixation_strength: int) -> int:
    """
    Number of letters to emphasise in a core of ``length`` letters.

    Short cores use ``min(strength, ceil(n/2))``; longer ones
    ``ceil(n * (strength/10 + 0.2))`` capped at ``ceil(n * 0.6)``. The jump
    between lengths 3 and 4 is part of the formula.
    """
    if length <= 1:
        return 1
    if length <= 3:
        return min(fixation_strength, _ceil_div(length, 2))
    scaled = _ceil_div(length * (fixation_strength + 2), 10)
    return min(scaled, _ceil_div(length * 6, 10))


def center_range(length: int, fixation_strength: int) -> Tuple[int, int]:
    if length <= 2:
        return 0, length
    count = highlight_count(length, fixation_strength)
    start = max(0, length // 2 - count // 2)
    end = min(length, start + count)
    return start, end


def letters_only(word: str) -> str:
    return "".join(ch for ch in word if ch.isalpha())


def split_core(word: str) -> Tuple[str, str, str]:
    """Split into (leading non-letters, first..last letter, trailing non-letters)."""
    first = next((i for i, ch in enumerate(word) if ch.isalpha()), None)
    if first is None:
        return word, "", ""
    last = max(i for i, ch in enumerate(word) if ch.isalpha())
    return word[:first], word[first:last + 1], word[last + 1:]


def is_skipped(word: str, index: int, options: TransformOptions) -> bool:
    clean = letters_only(word)
    if not clean:
        return True
    if options.skip_common_words and clean.lower() in COMMON_WORDS:
        return True
    return options.rhythm_stride > 1 and index % options.rhythm_stride != 0


def _skipped(word: str) -> RenderToken:
    return RenderToken(original=word, highlighted="", rest=word, is_skipped=True, highlight_index=-1)


def compute_render_token(word: str, index: int, options: TransformOptions) -> RenderToken:
    if is_skipped(word, index, options):
        return _skipped(word)

    prefix, core, suffix = split_core(word)
    if options.style.center_anchored:
        start, end = center_range(len(core), options.fixation_strength)
        return RenderToken(
            original=word,
            highlighted=core[start:end],
            rest=prefix + core[:start] + CENTER_MARKER + core[end:] + suffix,
            has_center_marker=True,
            highlight_index=start,
        )

    count = highlight_count(len(core), options.fixation_strength)
    return RenderToken(
        original=word,
        highlighted=prefix + core[:count],
        rest=core[count:] + suffix,
        highlight_index=0,
    )


def render_words(words: Iterable[str], options: TransformOptions, start_index: int = 0) -> List[RenderToken]:
    return [compute_render_token(word, start_index + offset, options) for offset, word in enumerate(words)]


def render_text(text: str, options: TransformOptions) -> List[RenderToken]:
    """
    Render running text, keeping whitespace runs as plain skipped tokens.
    Word indexes count words only, so rhythm strides line up with the
    tokenizer's indexes.
    """
    tokens: List[RenderToken] = []
    word_index = 0
    for segment in _WHITESPACE_SPLIT_RE.split(text):
        if not segment:
            continue
        if segment.isspace():
            tokens.append(_skipped(segment))
            continue
        tokens.append(compute_render_token(segment, word_index, options))
        word_index += 1
    return tokens
