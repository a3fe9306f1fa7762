from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote, unquote, urlsplit, urlunsplit

from core.constants import DEFAULT_SHARE_BASE_URL, SHARE_FRAGMENT_PREFIX
from core.io import from_data_url, to_data_url

logger = logging.getLogger(__name__)

_FRAGMENT_KEY = SHARE_FRAGMENT_PREFIX.lstrip("#")


def build_share_link(png_bytes: bytes, base_url: str = DEFAULT_SHARE_BASE_URL) -> str:
    """Embed the whole PNG in the URL fragment; the link needs no server to resolve."""
    parts = urlsplit(base_url)
    base = urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, ""))
    return f"{base}#{_FRAGMENT_KEY}{quote(to_data_url(png_bytes), safe='')}"


def parse_share_link(url: str) -> Optional[bytes]:
    """PNG bytes embedded in a share link, or None if the link carries none."""
    fragment = urlsplit(url or "").fragment
    if not fragment.startswith(_FRAGMENT_KEY):
        return None
    try:
        return from_data_url(unquote(fragment[len(_FRAGMENT_KEY):]))
    except ValueError as e:
        logger.debug("Ignoring malformed share link: %s", e)
        return None
