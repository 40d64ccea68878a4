from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional


def _clamp(value, low, high):
    return max(low, min(high, value))


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class IngestionConfig:
    request_timeout: float = 20.0
    max_download_bytes: int = 20 * 1024 * 1024
    store_content_limit: int = 50_000
    chunk_size: int = 100_000
    large_threshold: int = 500_000
    filter_chunk_size: int = 50_000

    def __post_init__(self):
        self.chunk_size = _clamp(self.chunk_size, 25_000, 200_000)


@dataclass
class PlaybackConfig:
    wpm: int = 300
    words_per_group: int = 3
    skip_step: int = 10
    scroll_speed: float = 50.0
    scroll_epsilon: float = 10.0
    speech_enabled: bool = False
    speech_rate: float = 1.0
    speech_pitch: float = 1.0
    voice_id: str = ""

    def __post_init__(self):
        self.wpm = _clamp(self.wpm, 100, 1000)
        self.words_per_group = _clamp(self.words_per_group, 1, 7)
        self.scroll_speed = _clamp(self.scroll_speed, 10.0, 200.0)
        self.speech_rate = _clamp(self.speech_rate, 0.5, 2.0)
        self.speech_pitch = _clamp(self.speech_pitch, 0.5, 2.0)


@dataclass
class ViewportConfig:
    enable_virtualization: bool = True
    virtual_buffer_size: int = 5
    paragraph_height_estimate: int = 150
    max_render_paragraphs: int = 30
    words_per_chunk: int = 200

    def __post_init__(self):
        self.virtual_buffer_size = _clamp(self.virtual_buffer_size, 2, 10)
        self.paragraph_height_estimate = _clamp(self.paragraph_height_estimate, 80, 300)
        self.max_render_paragraphs = _clamp(self.max_render_paragraphs, 10, 100)
        self.words_per_chunk = _clamp(self.words_per_chunk, 50, 500)


@dataclass
class ReaderConfig:
    ingestion: IngestionConfig = field(default_factory=IngestionConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ReaderConfig":
        """
        Build a config from ``READFLOW_*`` variables. Unset or unparsable
        values keep their defaults; numeric values are clamped to their
        supported ranges.
        """
        env = os.environ if env is None else env
        ingestion = IngestionConfig(
            request_timeout=_env_float(env, "READFLOW_REQUEST_TIMEOUT", 20.0),
            max_download_bytes=_env_int(env, "READFLOW_MAX_DOWNLOAD_BYTES", 20 * 1024 * 1024),
            store_content_limit=_env_int(env, "READFLOW_STORE_CONTENT_LIMIT", 50_000),
            chunk_size=_env_int(env, "READFLOW_CHUNK_SIZE", 100_000),
            large_threshold=_env_int(env, "READFLOW_LARGE_THRESHOLD", 500_000),
            filter_chunk_size=_env_int(env, "READFLOW_FILTER_CHUNK_SIZE", 50_000),
        )
        playback = PlaybackConfig(
            wpm=_env_int(env, "READFLOW_WPM", 300),
            words_per_group=_env_int(env, "READFLOW_WORDS_PER_GROUP", 3),
            skip_step=_env_int(env, "READFLOW_SKIP_STEP", 10),
            scroll_speed=_env_float(env, "READFLOW_SCROLL_SPEED", 50.0),
            scroll_epsilon=_env_float(env, "READFLOW_SCROLL_EPSILON", 10.0),
            speech_enabled=_env_bool(env, "READFLOW_SPEECH_ENABLED", False),
            speech_rate=_env_float(env, "READFLOW_SPEECH_RATE", 1.0),
            speech_pitch=_env_float(env, "READFLOW_SPEECH_PITCH", 1.0),
            voice_id=env.get("READFLOW_VOICE_ID", ""),
        )
        viewport = ViewportConfig(
            enable_virtualization=_env_bool(env, "READFLOW_ENABLE_VIRTUALIZATION", True),
            virtual_buffer_size=_env_int(env, "READFLOW_VIRTUAL_BUFFER_SIZE", 5),
            paragraph_height_estimate=_env_int(env, "READFLOW_PARAGRAPH_HEIGHT_ESTIMATE", 150),
            max_render_paragraphs=_env_int(env, "READFLOW_MAX_RENDER_PARAGRAPHS", 30),
            words_per_chunk=_env_int(env, "READFLOW_WORDS_PER_CHUNK", 200),
        )
        return cls(
            ingestion=ingestion,
            playback=playback,
            viewport=viewport,
            log_level=env.get("READFLOW_LOG_LEVEL", "INFO").upper(),
        )
