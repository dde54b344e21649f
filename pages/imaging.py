"""Conversion between stored image keys and the URLs handed to clients.

The database only ever holds relative object keys (``uploads/<kind>/<file>``).
Clients receive proxy URLs served by ``/api/images/<key>``. Older rows may
still carry absolute URLs from previous hosts, ports or the bucket CDN, and
some widget and portfolio rows carry inline ``data:`` URIs.
"""

import logging
import re
from typing import Optional
from urllib.parse import urlsplit

from django.conf import settings

logger = logging.getLogger(__name__)

UPLOADS_PREFIX = "uploads/"
PROXY_SEGMENT = "/api/images/"

_PROXY_TAIL = re.compile(r"(?:^|/)api/images/([^?#]+)")
_UPLOADS_TAIL = re.compile(r"/(uploads/[^?#]+)")


def proxy_base_url() -> str:
    base = (getattr(settings, "API_BASE_URL", "") or "").rstrip("/")
    if base.endswith("/api"):
        base = base[: -len("/api")]
    return base


def _is_absolute(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def _extract_key(value: str) -> str:
    match = _PROXY_TAIL.search(value)
    if match:
        return match.group(1)
    if _is_absolute(value):
        path = urlsplit(value).path
        match = _UPLOADS_TAIL.search(path)
        if match:
            return match.group(1)
        return path.lstrip("/")
    return value.split("?", 1)[0]


def to_storage_key(value: Optional[str], allow_data_uri: bool = True) -> Optional[str]:
    """Normalize any image reference to a relative ``uploads/...`` key.

    Empty values pass through. ``data:`` URIs pass through when
    ``allow_data_uri`` is true and become ``None`` otherwise. Anything that
    does not resolve to an ``uploads/`` key is logged and dropped.
    """
    if not value:
        return value
    if value.startswith("data:"):
        return value if allow_data_uri else None
    if value.startswith(UPLOADS_PREFIX):
        return value
    if value.startswith("/" + UPLOADS_PREFIX):
        return value[1:]

    key = _extract_key(value).lstrip("/")
    if not key.startswith(UPLOADS_PREFIX):
        logger.warning("Could not extract an uploads/ key from image reference %r", value)
        return None
    return key


def to_proxy_url(value: Optional[str]) -> Optional[str]:
    """Render a stored reference as ``<api origin>/api/images/<key>``."""
    if not value:
        return None
    if value.startswith("data:"):
        return value

    key = to_storage_key(value)
    if key is None:
        # Non-uploads relative paths are still proxied as-is
        key = _extract_key(value).lstrip("/")
        if not key:
            return None
    return f"{proxy_base_url()}{PROXY_SEGMENT}{key}"
