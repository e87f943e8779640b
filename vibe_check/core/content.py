import asyncio
import logging

import httpx

from vibe_check.core.fetchers import DEFAULT_FETCH_TIMEOUT, fetch_social_content, fetch_website_content
from vibe_check.models.schema import ContentBundle

log = logging.getLogger("vibe-check")


async def acquire_content(client: httpx.AsyncClient, website_url: str, handle: str, platform: str,
                          fetch_timeout: float = DEFAULT_FETCH_TIMEOUT) -> ContentBundle:
    """Fetch website and social text concurrently; both always yield a string."""
    website_text, social_text = await asyncio.gather(
        fetch_website_content(client, website_url, timeout=fetch_timeout),
        fetch_social_content(handle, platform),
    )
    bundle = ContentBundle.from_texts(website_text, social_text)
    if bundle.is_limited:
        log.info("Limited content for %s / @%s", website_url, handle)
    return bundle
