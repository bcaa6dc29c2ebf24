"""URL helpers shared by the answer-style providers."""

import re
from urllib.parse import urlparse

URL_CHAR = r"[^\s<>()\[\]{}\"'`]"

# Parenthesized path segments are kept only when balanced, as in Wikipedia URLs
URL_PATTERN = re.compile(rf"https?://(?:{URL_CHAR}|\({URL_CHAR}*\))+")

# Characters that commonly trail a URL in prose or markdown but are not part of it
TRAILING_PUNCTUATION = ".,;:!?'\""


def host_label(url: str) -> str:
    """Derive a human label from a bare URL.

    Returns the host component with a leading ``www.`` stripped, or an empty
    string when the URL has no host.
    """
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    if host.startswith("www."):
        host = host[4:]
    return host


def extract_urls(text: str, limit: int | None = None) -> list[str]:
    """Scan free text for URLs.

    URLs are returned in order of first appearance, deduplicated by exact
    string match and capped at ``limit`` when given.
    """
    urls: list[str] = []
    seen: set[str] = set()
    for match in URL_PATTERN.finditer(text or ""):
        url = match.group(0).rstrip(TRAILING_PUNCTUATION)
        if not url or url in seen:
            continue
        seen.add(url)
        urls.append(url)
        if limit is not None and len(urls) >= limit:
            break
    return urls


def truncate(text: str | None, limit: int) -> str:
    """Return the first ``limit`` characters of text, or an empty string."""
    if not text:
        return ""
    return text[:limit]
