from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from .engine import BOT_CHALLENGE_MESSAGE, looks_like_bot_challenge
from .errors import BlockedError, InvalidFormatError, NetworkError, RateLimitedError

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


@dataclass
class FetchedPage:
    url: str
    status_code: int
    body: str
    content_type: str


def validate_url(raw: str) -> httpx.URL:
    raw = (raw or "").strip()
    if not raw:
        raise InvalidFormatError("URL is required")
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise InvalidFormatError("Invalid URL format") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidFormatError("Invalid URL format")
    return url


def get_http_error_message(status_code: int) -> str:
    """Return a reader-facing message for a failed HTTP status."""
    messages = {
        401: "This page requires authentication",
        403: "This website blocks automated requests. Please copy and paste the text directly instead.",
        404: "Page not found - check the URL",
        408: "Request timed out - the website took too long to respond",
        410: "This page no longer exists",
        429: "Too many requests. Please wait a moment and try again.",
        451: "Content unavailable for legal reasons",
        500: "The target website is having internal issues - try again later",
        502: "The target website's server is not responding - try again later",
        503: "The target website is temporarily unavailable - try again later",
        504: "The target website took too long to respond - try again later",
    }
    if status_code in messages:
        return messages[status_code]
    if 400 <= status_code < 500:
        return f"Website returned client error (HTTP {status_code})"
    if 500 <= status_code < 600:
        return f"Website returned server error (HTTP {status_code})"
    return f"URL returned unexpected status: HTTP {status_code}"


class PageFetcher:
    """
    Single-shot page download with browser-like headers. There is no retry:
    the caller decides whether a failed fetch is worth repeating.
    """

    def __init__(
        self,
        timeout: float = 20.0,
        max_bytes: int = 20 * 1024 * 1024,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=BROWSER_HEADERS,
            follow_redirects=True,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def fetch(self, raw_url: str) -> FetchedPage:
        url = validate_url(raw_url)
        start = time.monotonic()
        async with self._client() as client:
            try:
                async with client.stream("GET", url) as response:
                    self._raise_for_status(response)
                    body = await self._read_body(response)
                    encoding = response.encoding or "utf-8"
                    final_url = str(response.url)
                    status_code = response.status_code
                    content_type = response.headers.get("content-type", "text/html")
            except httpx.RequestError as exc:
                logger.info("Fetch of %s failed: %s", url, exc)
                raise NetworkError("Unable to reach URL - check it's correct and accessible") from exc

        text = body.decode(encoding, errors="replace")
        if looks_like_bot_challenge(text):
            logger.info("Bot challenge served for %s", final_url)
            raise BlockedError(BOT_CHALLENGE_MESSAGE)
        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info("Fetched %s (%d bytes) in %d ms", final_url, len(body), duration_ms)
        return FetchedPage(url=final_url, status_code=status_code, body=text, content_type=content_type)

    def _raise_for_status(self, response: httpx.Response) -> None:
        code = response.status_code
        if 200 <= code < 300:
            return
        logger.info("Fetch of %s returned HTTP %d", response.url, code)
        message = get_http_error_message(code)
        if code == 403:
            raise BlockedError(message)
        if code == 429:
            raise RateLimitedError(message)
        raise NetworkError(message, status_code=code)

    async def _read_body(self, response: httpx.Response) -> bytes:
        chunks = []
        downloaded = 0
        async for chunk in response.aiter_bytes():
            downloaded += len(chunk)
            if downloaded > self.max_bytes:
                raise NetworkError(
                    f"Page too large: more than {self.max_bytes} bytes", status_code=response.status_code
                )
            chunks.append(chunk)
        return b"".join(chunks)
