import httpx
import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_config, get_pipeline
from readflow.config import IngestionConfig, ReaderConfig
from readflow.ingestion import IngestionPipeline, PageFetcher


def page_handler(request):
    if request.url.path == "/blocked":
        return httpx.Response(403, text="no bots")
    if request.url.path == "/busy":
        return httpx.Response(429, text="slow down")
    if request.url.path == "/broken":
        return httpx.Response(500, text="oops")
    return httpx.Response(
        200,
        text="<html><head><title>An Article</title></head><body><p>Words from the web.</p></body></html>",
    )


@pytest.fixture
def client():
    app = create_app()
    pipeline = IngestionPipeline(
        fetcher=PageFetcher(transport=httpx.MockTransport(page_handler)),
        config=IngestionConfig(),
    )
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_config] = lambda: ReaderConfig()
    return TestClient(app)


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_paste(client):
    resp = client.post("/documents/paste", json={"text": "Read  these\nfour words"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Pasted Text"
    assert body["source"] == "paste"
    assert body["word_count"] == 4
    assert body["words"] == ["Read", "these", "four", "words"]
    assert body["content"] == "Read  these\nfour words"
    assert "url" not in body
    assert body["id"]


def test_blank_paste_is_422(client):
    resp = client.post("/documents/paste", json={"text": "   "})
    assert resp.status_code == 422
    assert resp.json()["detail"]["kind"] == "no_content"


def test_url(client):
    resp = client.post("/documents/url", json={"url": "https://example.com/story"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "An Article"
    assert body["source"] == "url"
    assert body["url"] == "https://example.com/story"
    assert body["words"] == ["Words", "from", "the", "web."]


@pytest.mark.parametrize(
    "path, status_code, kind",
    [
        ("/blocked", 403, "blocked"),
        ("/busy", 429, "rate_limited"),
        ("/broken", 502, "network_error"),
    ],
)
def test_url_failures(client, path, status_code, kind):
    resp = client.post("/documents/url", json={"url": f"https://example.com{path}"})
    assert resp.status_code == status_code
    assert resp.json()["detail"]["kind"] == kind


def test_invalid_url_is_400(client):
    resp = client.post("/documents/url", json={"url": "not a url"})
    assert resp.status_code == 400
    assert resp.json()["detail"]["kind"] == "invalid_format"


def test_upload_text_file(client):
    resp = client.post("/documents/upload", files={"file": ("chapter-one.md", b"# Hello\n\nworld", "text/markdown")})
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "chapter-one"
    assert body["source"] == "md_file"
    assert body["word_count"] == 3


def test_upload_epub(client, two_chapter_epub):
    resp = client.post(
        "/documents/upload", files={"file": ("two.epub", two_chapter_epub, "application/epub+zip")}
    )
    assert resp.status_code == 200
    assert resp.json()["title"] == "Two Chapters"


def test_upload_rejects_unknown_format(client):
    resp = client.post("/documents/upload", files={"file": ("scan.pdf", b"%PDF-1.4", "application/pdf")})
    assert resp.status_code == 400


def test_upload_rejects_empty_file(client):
    resp = client.post("/documents/upload", files={"file": ("empty.txt", b"", "text/plain")})
    assert resp.status_code == 400


def test_render_defaults(client):
    resp = client.post("/reading/render", json={"words": ["jumping", "the"]})
    assert resp.status_code == 200
    body = resp.json()
    assert body["treatment"]["font_weight"] == 700
    first = body["tokens"][0]
    assert (first["highlighted"], first["rest"]) == ("jump", "ing")
    assert first["before"] == ""
    assert first["after"] == "ing"


def test_render_center_with_clamped_options(client):
    resp = client.post(
        "/reading/render",
        json={
            "words": ["reading", "is", "fun"],
            "start_index": 1,
            "options": {"style": "bold-center", "rhythm_stride": 2, "fixation_strength": 99},
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["options"]["fixation_strength"] == 5
    tokens = body["tokens"]
    assert [t["is_skipped"] for t in tokens] == [True, False, True]
    assert tokens[1]["has_center_marker"]
    assert tokens[1]["highlighted"] == "is"


def test_render_rejects_unknown_style(client):
    resp = client.post("/reading/render", json={"words": ["x"], "options": {"style": "sparkle"}})
    assert resp.status_code == 422


def test_window_uses_configured_defaults(client):
    resp = client.get("/reading/window", params={"paragraph_count": 100, "scroll_offset": 1500, "viewport_height": 600})
    assert resp.status_code == 200
    assert resp.json() == {"start": 5, "end": 19}


def test_window_disabled(client):
    resp = client.get("/reading/window", params={"paragraph_count": 250, "enabled": "false"})
    assert resp.json() == {"start": 0, "end": 250}
