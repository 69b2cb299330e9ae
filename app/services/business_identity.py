"""
Derive a display name for a business from its website URL
"""
import re
from urllib.parse import urlparse

FALLBACK_BUSINESS_NAME = "the company"

# One trailing TLD from this list is dropped
COMMON_TLDS = ("com", "org", "net", "io", "co", "ai", "app")

_TLD_RE = re.compile(r"\.(" + "|".join(COMMON_TLDS) + r")$")


def extract_business_name(url: str) -> str:
    """
    "https://www.acme-widgets.com" -> "Acme Widgets"

    Depends on the hostname only, never on page content.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return FALLBACK_BUSINESS_NAME

    if not hostname:
        return FALLBACK_BUSINESS_NAME

    name = re.sub(r"^www\.", "", hostname)
    name = _TLD_RE.sub("", name)

    return " ".join(
        word[:1].upper() + word[1:]
        for word in re.split(r"[.-]", name)
    )


def normalize_url(url: str) -> str:
    """Prefix https:// to a bare domain such as "example.com"."""
    normalized = (url or "").strip()
    if not re.match(r"^https?://", normalized, re.IGNORECASE):
        normalized = f"https://{normalized}"
    return normalized
