import re
import datetime
from typing import Any

from pydantic import HttpUrl, TypeAdapter, ValidationError

RESERVED_HANDLES = {"admin", "support", "help", "twitter", "instagram", "null", "undefined"}
SOCIAL_PLATFORMS = ("twitter", "instagram")

TWITTER_HANDLE_RE = re.compile(r"^[A-Za-z0-9_]{1,15}$")
INSTAGRAM_HANDLE_RE = re.compile(r"^[A-Za-z0-9_.]{1,30}$")

URL_REQUIRED = "Website URL is required"
URL_INVALID = "Please enter a valid website URL (e.g., https://example.com)"
URL_NO_DOMAIN = "URL must have a valid domain name"
HANDLE_REQUIRED = "Social media handle is required"
HANDLE_INVALID = "Handle must be 1-30 characters and contain only letters, numbers, underscores, and periods"
HANDLE_RESERVED = "This handle is reserved and cannot be used"
PLATFORM_INVALID = "Please select Twitter/X or Instagram"

_http_url = TypeAdapter(HttpUrl)


def normalize_website_url(value: Any) -> str:
    if not isinstance(value, str) or len(value) < 1:
        raise ValueError(URL_REQUIRED)
    url = value.strip()
    if not url.startswith("http://") and not url.startswith("https://"):
        url = f"https://{url}"
    try:
        parsed = _http_url.validate_python(url)
    except ValidationError:
        raise ValueError(URL_INVALID) from None
    if not parsed.host or "." not in parsed.host:
        raise ValueError(URL_NO_DOMAIN)
    return url


def normalize_social_handle(value: Any) -> str:
    if not isinstance(value, str) or len(value) < 1:
        raise ValueError(HANDLE_REQUIRED)
    handle = value.strip()
    if handle.startswith("@"):
        handle = handle[1:]
    if not (TWITTER_HANDLE_RE.fullmatch(handle) or INSTAGRAM_HANDLE_RE.fullmatch(handle)):
        raise ValueError(HANDLE_INVALID)
    if handle.lower() in RESERVED_HANDLES:
        raise ValueError(HANDLE_RESERVED)
    return handle


def check_social_platform(value: Any) -> str:
    if value not in SOCIAL_PLATFORMS:
        raise ValueError(PLATFORM_INVALID)
    return value


def to_iso(dt: datetime.datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
