"""Tests for HTML reduction, fetchers and the content bundle."""

import asyncio

import httpx
import pytest

from vibe_check.core.content import acquire_content
from vibe_check.core.fetchers import (
    EMPTY_CONTENT_NOTE,
    MAX_FETCH_BYTES,
    USER_AGENT,
    fetch_social_content,
    fetch_website_content,
)
from vibe_check.core.parsers import html_to_text
from vibe_check.models.schema import ContentBundle

from conftest import PAGE_HTML, html_transport


def test_html_to_text_drops_scripts_styles_and_tags():
    text = html_to_text(PAGE_HTML)

    assert "window.track" not in text
    assert "color: red" not in text
    assert "<" not in text
    assert text.startswith("Example Ship faster with Example")
    assert "  " not in text


def test_html_to_text_truncates_to_5000_chars():
    html = "<p>" + "word " * 3000 + "</p>"

    assert len(html_to_text(html)) == 5000


@pytest.mark.asyncio
async def test_fetch_website_sends_user_agent_and_returns_text():
    seen = []
    async with httpx.AsyncClient(transport=html_transport(seen=seen)) as client:
        text = await fetch_website_content(client, "https://example.com")

    assert "Ship faster with Example" in text
    assert seen[0].headers["user-agent"] == USER_AGENT


@pytest.mark.asyncio
async def test_fetch_website_non_success_returns_note():
    async with httpx.AsyncClient(transport=html_transport(status_code=404)) as client:
        text = await fetch_website_content(client, "https://example.com")

    assert text.startswith("[Note: Could not directly fetch https://example.com.")


@pytest.mark.asyncio
async def test_fetch_website_network_error_returns_note():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        text = await fetch_website_content(client, "https://unreachable.example")

    assert "[Note:" in text
    assert "https://unreachable.example" in text


@pytest.mark.asyncio
async def test_fetch_website_empty_page_returns_placeholder():
    async with httpx.AsyncClient(transport=html_transport(html="<html><script>x()</script></html>")) as client:
        text = await fetch_website_content(client, "https://example.com")

    assert text == EMPTY_CONTENT_NOTE


CHUNK = b"<p>" + b"word " * 13000 + b"</p>"


@pytest.mark.asyncio
async def test_fetch_website_stops_reading_huge_pages():
    sent = []

    async def body():
        for _ in range(200):
            sent.append(len(CHUNK))
            yield CHUNK

    def handler(request):
        return httpx.Response(200, content=body(), headers={"content-type": "text/html"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        text = await fetch_website_content(client, "https://example.com")

    assert len(text) == 5000
    assert text.startswith("word word")
    assert sum(sent) < MAX_FETCH_BYTES + len(CHUNK)
    assert len(sent) < 200


@pytest.mark.asyncio
async def test_fetch_website_slow_body_hits_overall_deadline():
    async def body():
        # each read arrives well inside a per-read timeout, but the page never ends
        while True:
            yield b"<p>still loading</p>"
            await asyncio.sleep(0.02)

    def handler(request):
        return httpx.Response(200, content=body(), headers={"content-type": "text/html"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        text = await fetch_website_content(client, "https://slow.example", timeout=0.2)

    assert text.startswith("[Note: Could not directly fetch https://slow.example.")


@pytest.mark.asyncio
async def test_fetch_website_decodes_declared_charset():
    html = "<p>Caf\u00e9 cr\u00e8me</p>".encode("latin-1")

    def handler(request):
        return httpx.Response(200, content=html, headers={"content-type": "text/html; charset=latin-1"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        text = await fetch_website_content(client, "https://example.com")

    assert text == "Caf\u00e9 cr\u00e8me"


@pytest.mark.asyncio
async def test_social_content_names_handle_and_platform():
    text = await fetch_social_content("brand", "instagram")

    assert "@brand" in text
    assert "instagram" in text
    assert "https://instagram.com/brand" in text
    assert "[Note:" not in text


def test_bundle_limited_when_note_present_or_text_short():
    long_text = "x" * 250

    assert not ContentBundle.from_texts(long_text, "[Social media content]").is_limited
    assert ContentBundle.from_texts("x" * 199, "social").is_limited
    assert ContentBundle.from_texts("[Note: Could not fetch]" + long_text, "social").is_limited
    assert ContentBundle.from_texts(long_text, "[Note: unavailable]").is_limited


@pytest.mark.asyncio
async def test_acquire_content_full_page_is_not_limited():
    async with httpx.AsyncClient(transport=html_transport()) as client:
        bundle = await acquire_content(client, "https://example.com", "brand", "twitter")

    assert not bundle.is_limited
    assert "Ship faster" in bundle.website_text
    assert "@brand on twitter" in bundle.social_text


@pytest.mark.asyncio
async def test_acquire_content_failed_fetch_is_limited():
    async with httpx.AsyncClient(transport=html_transport(status_code=503)) as client:
        bundle = await acquire_content(client, "https://example.com", "brand", "twitter")

    assert bundle.is_limited
    assert bundle.website_text.startswith("[Note:")
