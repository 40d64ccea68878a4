from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Sequence, Tuple

CENTER_MARKER = "|CENTER|"


class HighlightStyle(str, Enum):
    BOLD_START = "bold-start"
    BOLD_CENTER = "bold-center"
    COLOR_START = "color-start"
    COLOR_CENTER = "color-center"
    OPACITY = "opacity"

    @property
    def center_anchored(self) -> bool:
        return self in (HighlightStyle.BOLD_CENTER, HighlightStyle.COLOR_CENTER)


def _clamp(value, low, high):
    return max(low, min(high, value))


@dataclass(frozen=True)
class TransformOptions:
    """
    Reading-aid options for one render pass. Out-of-range values are clamped
    instead of rejected so stale or hand-edited settings still render.
    """

    style: HighlightStyle = HighlightStyle.BOLD_START
    fixation_strength: int = 3
    rhythm_stride: int = 1
    skip_common_words: bool = False
    opacity: float = 0.5

    def __post_init__(self):
        object.__setattr__(self, "style", HighlightStyle(self.style))
        object.__setattr__(self, "fixation_strength", _clamp(int(self.fixation_strength), 1, 5))
        object.__setattr__(self, "rhythm_stride", _clamp(int(self.rhythm_stride), 1, 3))
        object.__setattr__(self, "opacity", _clamp(float(self.opacity), 0.3, 0.7))


@dataclass(frozen=True)
class RenderToken:
    original: str
    highlighted: str
    rest: str
    has_center_marker: bool = False
    is_skipped: bool = False
    highlight_index: int = 0

    def split_rest(self) -> Tuple[str, str]:
        """
        Return the (before, after) halves around the highlighted centre. For
        start-anchored tokens there is no before part.
        """
        if not self.has_center_marker:
            return "", self.rest
        before, _, after = self.rest.partition(CENTER_MARKER)
        return before, after


@dataclass(frozen=True)
class TokenStream:
    words: Tuple[str, ...] = ()

    @classmethod
    def from_words(cls, words: Sequence[str]) -> "TokenStream":
        return cls(tuple(w for w in words if w))

    def __len__(self) -> int:
        return len(self.words)

    def __iter__(self) -> Iterator[str]:
        return iter(self.words)

    def __getitem__(self, index):
        return self.words[index]

    def word_at(self, index: int) -> str:
        if 0 <= index < len(self.words):
            return self.words[index]
        return ""

    def words_in_range(self, start: int, count: int) -> List[str]:
        start = max(0, start)
        return list(self.words[start:start + max(0, count)])

    def text(self) -> str:
        return " ".join(self.words)
