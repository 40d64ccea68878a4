from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from readflow.config import ReaderConfig
from readflow.playback import compute_window
from readflow.reading import HighlightStyle, TransformOptions, highlight_treatment, render_words

from api.dependencies import get_config

router = APIRouter(prefix="/reading", tags=["reading"])


class RenderOptions(BaseModel):
    style: HighlightStyle = HighlightStyle.BOLD_START
    fixation_strength: int = 3
    rhythm_stride: int = 1
    skip_common_words: bool = False
    opacity: float = 0.5


class RenderRequest(BaseModel):
    words: List[str]
    start_index: int = 0
    options: RenderOptions = Field(default_factory=RenderOptions)


@router.post("/render")
def render(req: RenderRequest):
    # Out-of-range values are clamped by TransformOptions, never rejected.
    options = TransformOptions(
        style=req.options.style,
        fixation_strength=req.options.fixation_strength,
        rhythm_stride=req.options.rhythm_stride,
        skip_common_words=req.options.skip_common_words,
        opacity=req.options.opacity,
    )
    treatment = highlight_treatment(options)
    tokens = []
    for token in render_words(req.words, options, start_index=max(0, req.start_index)):
        before, after = token.split_rest()
        tokens.append(
            {
                "original": token.original,
                "highlighted": token.highlighted,
                "rest": token.rest,
                "before": before,
                "after": after,
                "has_center_marker": token.has_center_marker,
                "is_skipped": token.is_skipped,
                "highlight_index": token.highlight_index,
            }
        )
    return {
        "options": {
            "style": options.style.value,
            "fixation_strength": options.fixation_strength,
            "rhythm_stride": options.rhythm_stride,
            "skip_common_words": options.skip_common_words,
            "opacity": options.opacity,
        },
        "treatment": {
            "font_weight": treatment.font_weight,
            "use_accent_color": treatment.use_accent_color,
            "rest_opacity": treatment.rest_opacity,
        },
        "tokens": tokens,
    }


@router.get("/window")
def window(
    paragraph_count: int,
    scroll_offset: float = 0.0,
    viewport_height: float = 0.0,
    estimated_item_height: Optional[float] = None,
    buffer_count: Optional[int] = None,
    max_render: Optional[int] = None,
    enabled: Optional[bool] = None,
    config: ReaderConfig = Depends(get_config),
):
    viewport = config.viewport
    result = compute_window(
        scroll_offset=scroll_offset,
        viewport_height=viewport_height,
        estimated_item_height=(
            estimated_item_height if estimated_item_height is not None else viewport.paragraph_height_estimate
        ),
        buffer_count=buffer_count if buffer_count is not None else viewport.virtual_buffer_size,
        paragraph_count=paragraph_count,
        max_render=max_render if max_render is not None else viewport.max_render_paragraphs,
        enabled=enabled if enabled is not None else viewport.enable_virtualization,
    )
    return {"start": result.start, "end": result.end}
