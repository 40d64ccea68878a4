"""
Reading subsystem exports.
"""

from .models import CENTER_MARKER, HighlightStyle, RenderToken, TokenStream, TransformOptions
from .styling import (
    HighlightTreatment,
    approximate_syllables,
    beeline_gradient,
    char_color_runs,
    highlight_treatment,
    homophone_hint,
    split_into_lines,
    syllable_color_runs,
)
from .tokenizer import split_words, tokenize
from .transform import compute_render_token, highlight_count, render_text, render_words

__all__ = [
    "CENTER_MARKER",
    "HighlightStyle",
    "HighlightTreatment",
    "RenderToken",
    "TokenStream",
    "TransformOptions",
    "approximate_syllables",
    "beeline_gradient",
    "char_color_runs",
    "compute_render_token",
    "highlight_count",
    "highlight_treatment",
    "homophone_hint",
    "render_text",
    "render_words",
    "split_into_lines",
    "split_words",
    "syllable_color_runs",
    "tokenize",
]
