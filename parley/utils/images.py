"""Helpers for turning image URLs into the shapes vendors accept."""

from __future__ import annotations

import base64
import mimetypes
import re
from functools import lru_cache
from urllib.parse import urlparse

import httpx

_DATA_URL_RE = re.compile(r"^data:(?P<media_type>[\w/+.-]+);base64,(?P<data>.+)$", re.DOTALL)


def is_valid_url(url: str) -> bool:
    if _DATA_URL_RE.match(url):
        return True
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def parse_data_url(url: str) -> tuple[str, str] | None:
    """Return ``(media_type, base64_data)`` for a ``data:`` URL, else None."""
    match = _DATA_URL_RE.match(url)
    if match is None:
        return None
    return match.group("media_type"), match.group("data")


@lru_cache(maxsize=32)
def fetch_base64(url: str) -> tuple[str, str]:
    """Download an image and return ``(media_type, base64_data)``."""
    inline = parse_data_url(url)
    if inline is not None:
        return inline

    resp = httpx.get(url, follow_redirects=True, timeout=30)
    resp.raise_for_status()
    media_type = resp.headers.get("content-type", "").split(";")[0].strip()
    if not media_type:
        media_type = mimetypes.guess_type(urlparse(url).path)[0] or "image/jpeg"
    return media_type, base64.b64encode(resp.content).decode("ascii")
