import httpx
import asyncio
import logging

from vibe_check.core.parsers import html_to_text
from vibe_check.core.report import get_profile_url

log = logging.getLogger("vibe-check")

USER_AGENT = "Mozilla/5.0 (compatible; BrandAuditor/1.0)"
EMPTY_CONTENT_NOTE = "Unable to extract content from this website."
DEFAULT_FETCH_TIMEOUT = 10.0
# only the first 5000 chars of text survive, so the page itself is capped too
MAX_FETCH_BYTES = 1024 * 1024


def default_headers():
    return {"User-Agent": USER_AGENT}


def fetch_failed_note(url: str) -> str:
    return (
        f"[Note: Could not directly fetch {url}. Please analyze based on general knowledge "
        "of this brand if available, or provide a general analysis framework.]"
    )


async def read_capped(response: httpx.Response, max_bytes: int = MAX_FETCH_BYTES) -> bytes:
    """Read a streamed body, stopping once max_bytes have arrived."""
    chunks = []
    received = 0
    async for chunk in response.aiter_bytes():
        chunks.append(chunk)
        received += len(chunk)
        if received >= max_bytes:
            log.info("Stopped reading %s after %d bytes", response.url, received)
            break
    return b"".join(chunks)[:max_bytes]


def decode_body(body: bytes, encoding) -> str:
    try:
        return body.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        # unknown charset in the content-type header
        return body.decode("utf-8", errors="replace")


async def fetch_website_content(client: httpx.AsyncClient, url: str,
                                timeout: float = DEFAULT_FETCH_TIMEOUT,
                                max_bytes: int = MAX_FETCH_BYTES) -> str:
    """Fetch a page and reduce it to text. Failures come back as a note, never raised.

    ``timeout`` bounds the whole fetch (connect, redirects and body), not each read.
    """
    try:
        async with asyncio.timeout(timeout):
            async with client.stream("GET", url, headers=default_headers(), follow_redirects=True) as r:
                if not r.is_success:
                    log.warning("Website fetch for %s returned %s", url, r.status_code)
                    return fetch_failed_note(url)
                body = await read_capped(r, max_bytes)
                encoding = r.encoding
    except TimeoutError:
        log.warning("Website fetch for %s exceeded %.1fs", url, timeout)
        return fetch_failed_note(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        log.warning("Website fetch failed for %s: %s", url, e)
        return fetch_failed_note(url)

    text = html_to_text(decode_body(body, encoding))
    log.info("Fetched %s (%d chars of text)", url, len(text))
    return text or EMPTY_CONTENT_NOTE


async def fetch_social_content(handle: str, platform: str) -> str:
    # No platform API integration yet; untagged, so it alone does not mark the bundle limited.
    return (
        f"[Social media content for @{handle} on {platform} ({get_profile_url(handle, platform)}). "
        f"Recent posts and bio are not retrieved through the {platform} API in this deployment.]"
    )
