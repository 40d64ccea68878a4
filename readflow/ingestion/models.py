from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from ..reading.models import TokenStream


class SourceKind(str, Enum):
    HTML = "html"
    EPUB = "epub"
    TEXT = "text"


class IngestKind(str, Enum):
    PASTE = "paste"
    TXT_FILE = "txt_file"
    MD_FILE = "md_file"
    EPUB_FILE = "epub_file"
    URL = "url"


@dataclass(frozen=True)
class SourceDocument:
    kind: SourceKind
    payload: Union[bytes, str]
    filename: Optional[str] = None

    def as_text(self) -> str:
        if isinstance(self.payload, str):
            return self.payload
        return self.payload.decode("utf-8-sig", errors="replace")

    def as_bytes(self) -> bytes:
        if isinstance(self.payload, bytes):
            return self.payload
        return self.payload.encode("utf-8")


@dataclass
class NormalizedDocument:
    title: str
    content: str
    source: IngestKind = IngestKind.PASTE
    url: Optional[str] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ReadingContent:
    id: str
    title: str
    source: IngestKind
    tokens: TokenStream
    content: Optional[str] = None
    url: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def word_count(self) -> int:
        return len(self.tokens)
