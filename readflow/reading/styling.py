"""
Caller-side reading aids expressed as data.

The transform engine only decides spans; the helpers here decide visual
treatment. Per-character coloring is returned as ordered
``(character, color or None)`` pairs so any rendering surface can consume it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .models import HighlightStyle, TransformOptions

ColorRun = Tuple[str, Optional[str]]

DEFAULT_MIRROR_PALETTE: Dict[str, str] = {
    "b": "#3B82F6",
    "d": "#EF4444",
    "p": "#22C55E",
    "q": "#F97316",
}
DEFAULT_ALTERNATING_COLORS: Tuple[str, str] = ("#3B82F6", "#EF4444")

_VOWELS = "aeiouy"

HOMOPHONES: Dict[str, str] = {
    "there": "location",
    "their": "possession",
    "they're": "they are",
    "your": "possession",
    "you're": "you are",
    "its": "possession",
    "it's": "it is",
    "to": "direction",
    "too": "also/excessive",
    "two": "number 2",
    "then": "time/sequence",
    "than": "comparison",
    "affect": "verb: influence",
    "effect": "noun: result",
    "accept": "receive",
    "except": "exclude",
    "weather": "climate",
    "whether": "if",
    "principal": "main/school head",
    "principle": "rule/belief",
    "stationary": "not moving",
    "stationery": "paper/pens",
    "complement": "complete",
    "compliment": "praise",
    "pair": "two items",
    "pear": "fruit",
    "pare": "trim/peel",
    "break": "shatter",
    "brake": "stop",
    "bare": "naked/empty",
    "bear": "animal/carry",
    "hear": "listen",
    "here": "location",
    "know": "understand",
    "no": "negative",
    "new": "recent",
    "knew": "past of know",
    "write": "compose",
    "right": "correct/direction",
    "by": "near",
    "buy": "purchase",
    "bye": "farewell",
}


@dataclass(frozen=True)
class HighlightTreatment:
    font_weight: int
    use_accent_color: bool
    rest_opacity: float


def highlight_treatment(options: TransformOptions) -> HighlightTreatment:
    style = options.style
    if style in (HighlightStyle.COLOR_START, HighlightStyle.COLOR_CENTER):
        return HighlightTreatment(font_weight=400, use_accent_color=True, rest_opacity=1.0)
    if style is HighlightStyle.OPACITY:
        return HighlightTreatment(font_weight=600, use_accent_color=False, rest_opacity=options.opacity)
    return HighlightTreatment(font_weight=700, use_accent_color=False, rest_opacity=1.0)


def char_color_runs(text: str, palette: Mapping[str, str] = DEFAULT_MIRROR_PALETTE) -> List[ColorRun]:
    """Color the mirror-image letters (b/d/p/q by default), case-insensitively."""
    return [(ch, palette.get(ch.lower())) for ch in text]


def approximate_syllables(word: str) -> List[str]:
    """
    Rough vowel-boundary syllable split. A new syllable starts at a
    consonant that follows a vowel and precedes another vowel. Short or
    single-syllable words come back whole.
    """
    letters = [(i, ch.lower()) for i, ch in enumerate(word) if "a" <= ch.lower() <= "z"]
    if len(letters) <= 3:
        return [word]

    cuts: List[int] = []
    for pos in range(1, len(letters) - 1):
        prev_vowel = letters[pos - 1][1] in _VOWELS
        here_vowel = letters[pos][1] in _VOWELS
        next_vowel = letters[pos + 1][1] in _VOWELS
        if prev_vowel and not here_vowel and next_vowel:
            cuts.append(letters[pos][0])

    if not cuts:
        return [word]
    pieces = []
    start = 0
    for cut in cuts:
        pieces.append(word[start:cut])
        start = cut
    pieces.append(word[start:])
    return [piece for piece in pieces if piece]


def syllable_color_runs(
    word: str, colors: Sequence[str] = DEFAULT_ALTERNATING_COLORS
) -> List[Tuple[str, Optional[str]]]:
    syllables = approximate_syllables(word)
    if len(syllables) <= 1:
        return [(word, None)]
    return [(syllable, colors[i % len(colors)]) for i, syllable in enumerate(syllables)]


def homophone_hint(word: str) -> Optional[str]:
    clean = "".join(ch for ch in word.lower() if "a" <= ch <= "z" or ch == "'")
    return HOMOPHONES.get(clean)


def split_into_lines(text: str, chars_per_line: int) -> List[str]:
    lines: List[str] = []
    current = ""
    for word in text.split(" "):
        if current and len(current) + len(word) + 1 > chars_per_line:
            lines.append(current.strip())
            current = word
        else:
            current = f"{current} {word}" if current else word
    if current:
        lines.append(current.strip())
    return lines


def beeline_gradient(line_index: int, colors: Sequence[str] = DEFAULT_ALTERNATING_COLORS) -> Tuple[str, str]:
    """Start/end colors of a line; direction flips every line so the eye carries over."""
    first, second = colors[0], colors[1]
    if line_index % 2 == 0:
        return first, second
    return second, first
