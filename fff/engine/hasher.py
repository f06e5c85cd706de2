"""Content-addressed, filesystem-safe names for saved responses."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

import xxhash

MAX_SLUG_LENGTH = 100
BODY_SUFFIX = ".body"
HEADERS_SUFFIX = ".headers"

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")
_DASH_RUNS = re.compile(r"-{2,}")
_RESERVED = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{i}" for i in range(1, 10)}
    | {f"LPT{i}" for i in range(1, 10)}
)


def url_slug(url: str) -> str:
    """Readable name component built from the URL's host and path."""

    parts = urlsplit(url)
    host = parts.netloc.rpartition("@")[2]
    slug = _DASH_RUNS.sub("-", _UNSAFE.sub("-", f"{host}{parts.path}"))
    slug = slug[:MAX_SLUG_LENGTH].strip("-.")
    if not slug:
        return "unknown"
    if slug.split(".", 1)[0].upper() in _RESERVED:
        slug = f"_{slug}"
    return slug


def content_digest(url: str, body: bytes) -> str:
    """Fixed-width hex digest over the URL and the response body."""

    digest = xxhash.xxh3_64()
    digest.update(url.encode("utf-8"))
    digest.update(b"\0")
    digest.update(body)
    return digest.hexdigest()


def _stem(url: str, body: bytes) -> str:
    return f"{url_slug(url)}-{content_digest(url, body)}"


def filename_for(url: str, body: bytes) -> str:
    return _stem(url, body) + BODY_SUFFIX


def headers_filename_for(url: str, body: bytes) -> str:
    return _stem(url, body) + HEADERS_SUFFIX


__all__ = [
    "BODY_SUFFIX",
    "HEADERS_SUFFIX",
    "content_digest",
    "filename_for",
    "headers_filename_for",
    "url_slug",
]
