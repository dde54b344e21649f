"""Per-user theme configuration stored as JSON documents in media storage."""

import copy
import json
import logging

from django.conf import settings
from django.core.cache import cache

from .exceptions import StorageObjectNotFound, StorageUnavailable
from .storage_backends import read_object, write_object

logger = logging.getLogger(__name__)

THEME_PREFIX = "config/themes"
MISSING_CACHE_PREFIX = "theme-config:missing:"

_NAV_LINKS = [
    {"label": "หน้าแรก", "href": "/#hero"},
    {"label": "เกี่ยวกับฉัน", "href": "/#about"},
    {"label": "ทักษะ", "href": "/#skills"},
    {"label": "ผลงาน", "href": "/#portfolio"},
    {"label": "ติดต่อ", "href": "/#contact"},
]

DEFAULT_THEME_CONFIG = {
    "palette": {
        "primary": "#2563eb",
        "secondary": "#1d4ed8",
        "accent": "#f97316",
        "text": "#111827",
        "textMuted": "#6b7280",
        "textOnPrimary": "#ffffff",
        "surface": "#ffffff",
        "background": "#f8fafc",
    },
    "header": {
        "logoText": "PORTFOLIO.PRO",
        "background": "#ffffff",
        "text": "#0f172a",
        "links": _NAV_LINKS,
        "cta": {
            "label": "จ้างงานเลย",
            "href": "/contact",
            "background": "#2563eb",
            "color": "#ffffff",
        },
    },
    "footer": {
        "logoText": "PORTFOLIO.PRO",
        "description": "ช่วยคุณนำเสนอโปรไฟล์และผลงานอย่างมืออาชีพ",
        "background": "#0f172a",
        "text": "#ffffff",
        "links": [
            {"label": "งานทั้งหมด", "href": "/#portfolio"},
            {"label": "ประสบการณ์", "href": "/#experience"},
            {"label": "ติดต่อ", "href": "/#contact"},
        ],
        "social": [
            {"label": "GitHub", "href": "https://github.com"},
            {"label": "LinkedIn", "href": "https://www.linkedin.com"},
        ],
        "contactEmail": "hello@portfolio.pro",
        "contactLocation": "Bangkok, Thailand",
        "copyright": "All rights reserved.",
    },
    "components": {
        "buttons": {"shape": "pill", "elevation": "soft"},
        "cards": {"borderRadius": 24, "showShadow": True, "overlayOpacity": 0.35},
    },
    "background": {
        "type": "gradient",
        "value": "linear-gradient(135deg, #e0f2fe 0%, #f5f3ff 50%, #fefce8 100%)",
        "overlay": "rgba(255, 255, 255, 0.85)",
    },
    "metadata": {"username": "default", "updatedAt": "2024-01-01T00:00:00.000Z"},
}

# Lists that an override replaces instead of merging into
WHOLESALE_KEYS = {"header": ("links", "cta"), "footer": ("links", "social")}


def normalize_username(username):
    if not username:
        return None
    return username.strip().lower() or None


def _section(override, name):
    value = override.get(name)
    return value if isinstance(value, dict) else {}


def merge_theme_config(base, override=None, username=None):
    merged = copy.deepcopy(base)
    override = override if isinstance(override, dict) else {}

    for key, value in override.items():
        if key not in merged or not isinstance(merged[key], dict):
            merged[key] = copy.deepcopy(value)

    for name in ("palette", "header", "footer", "background"):
        section = _section(override, name)
        merged[name].update(copy.deepcopy(section))
        for wholesale in WHOLESALE_KEYS.get(name, ()):
            if section.get(wholesale) is None:
                merged[name][wholesale] = copy.deepcopy(base[name][wholesale])

    components = _section(override, "components")
    for part in ("buttons", "cards"):
        merged["components"][part].update(copy.deepcopy(_section(components, part)))
    for key, value in components.items():
        if key not in ("buttons", "cards"):
            merged["components"][key] = copy.deepcopy(value)

    metadata = _section(override, "metadata")
    merged["metadata"].update(copy.deepcopy(metadata))
    merged["metadata"]["username"] = (
        username or metadata.get("username") or base.get("metadata", {}).get("username") or "default"
    )
    return merged


def theme_key(username):
    return f"{THEME_PREFIX}/{username}.json"


def _missing_cache_key(username):
    return f"{MISSING_CACHE_PREFIX}{username}"


def get_theme_config(username=None):
    normalized = normalize_username(username)
    if not normalized:
        return merge_theme_config(DEFAULT_THEME_CONFIG)

    if cache.get(_missing_cache_key(normalized)):
        return merge_theme_config(DEFAULT_THEME_CONFIG, None, normalized)

    try:
        body, _ = read_object(theme_key(normalized))
        override = json.loads(body.decode("utf-8"))
    except StorageObjectNotFound:
        cache.set(_missing_cache_key(normalized), True, getattr(settings, "THEME_MISSING_TTL", 300))
        return merge_theme_config(DEFAULT_THEME_CONFIG, None, normalized)
    except (StorageUnavailable, ValueError) as exc:
        logger.warning('Falling back to default theme for "%s": %s', normalized, exc)
        return merge_theme_config(DEFAULT_THEME_CONFIG, None, normalized)

    return merge_theme_config(DEFAULT_THEME_CONFIG, override, normalized)


def save_theme_config(username, override):
    normalized = normalize_username(username)
    if not normalized:
        raise ValueError("username is required")
    payload = json.dumps(override, ensure_ascii=False).encode("utf-8")
    write_object(theme_key(normalized), payload, "application/json")
    cache.delete(_missing_cache_key(normalized))
    logger.info("Saved theme config for %s", normalized)
    return merge_theme_config(DEFAULT_THEME_CONFIG, override, normalized)
