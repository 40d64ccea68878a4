import asyncio

import httpx
import pytest

from readflow.ingestion import (
    BlockedError,
    InvalidFormatError,
    NetworkError,
    PageFetcher,
    RateLimitedError,
    validate_url,
)
from readflow.ingestion.fetch import get_http_error_message


def make_fetcher(handler, **kwargs):
    return PageFetcher(transport=httpx.MockTransport(handler), **kwargs)


def fetch(fetcher, url="https://example.com/article"):
    return asyncio.run(fetcher.fetch(url))


def html_response(body, status_code=200):
    return httpx.Response(status_code, text=body, headers={"content-type": "text/html; charset=utf-8"})


def test_fetch_sends_browser_headers():
    seen = {}

    def handler(request):
        seen.update(request.headers)
        return html_response("<html><body><p>ok</p></body></html>")

    page = fetch(make_fetcher(handler))
    assert page.status_code == 200
    assert "<p>ok</p>" in page.body
    assert "Mozilla/5.0" in seen["user-agent"]
    assert seen["accept-language"].startswith("en-US")
    assert seen["cache-control"] == "no-cache"


def test_fetch_follows_redirects_and_records_final_url():
    def handler(request):
        if request.url.path == "/old":
            return httpx.Response(301, headers={"location": "https://example.com/new"})
        return html_response("<p>moved</p>")

    page = fetch(make_fetcher(handler), "https://example.com/old")
    assert page.url == "https://example.com/new"


@pytest.mark.parametrize(
    "status_code, error",
    [
        (403, BlockedError),
        (429, RateLimitedError),
        (404, NetworkError),
        (500, NetworkError),
    ],
)
def test_status_mapping(status_code, error):
    fetcher = make_fetcher(lambda request: html_response("nope", status_code=status_code))
    with pytest.raises(error) as excinfo:
        fetch(fetcher)
    assert excinfo.value.message == get_http_error_message(status_code)


def test_network_error_keeps_status_code():
    fetcher = make_fetcher(lambda request: html_response("down", status_code=503))
    with pytest.raises(NetworkError) as excinfo:
        fetch(fetcher)
    assert excinfo.value.status_code == 503


def test_challenge_page_on_200_is_blocked():
    body = "<html><head><title>Just a moment...</title></head><body>Checking your browser</body></html>"
    with pytest.raises(BlockedError):
        fetch(make_fetcher(lambda request: html_response(body)))


def test_transport_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError) as excinfo:
        fetch(make_fetcher(handler))
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_oversized_body_is_network_error():
    fetcher = make_fetcher(lambda request: html_response("x" * 500), max_bytes=100)
    with pytest.raises(NetworkError):
        fetch(fetcher)


@pytest.mark.parametrize("raw", ["", "   ", "not a url", "ftp://example.com/file", "https://"])
def test_invalid_urls(raw):
    with pytest.raises(InvalidFormatError):
        validate_url(raw)


def test_valid_url_is_trimmed():
    assert str(validate_url("  https://example.com/a  ")) == "https://example.com/a"


def test_error_messages():
    assert "bot" not in get_http_error_message(404)
    assert get_http_error_message(418) == "Website returned client error (HTTP 418)"
    assert get_http_error_message(599) == "Website returned server error (HTTP 599)"
    assert get_http_error_message(302) == "URL returned unexpected status: HTTP 302"
