from bs4 import BeautifulSoup
import re

from vibe_check.models.schema import MAX_WEBSITE_TEXT

_WHITESPACE_RE = re.compile(r"\s+")


def html_to_text(html: str, limit: int = MAX_WEBSITE_TEXT) -> str:
    """Reduce a page to a bounded run of visible text."""
    soup = BeautifulSoup(html or "", "lxml")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    text = soup.get_text(" ")
    return _WHITESPACE_RE.sub(" ", text).strip()[:limit]
