"""Pydantic models describing a single fetch run."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator, model_validator

HTTP_METHODS = frozenset(
    {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"}
)
PROXY_SCHEMES = frozenset({"http", "https", "socks5", "socks5h"})


def parse_header(raw: str) -> tuple[str, str]:
    """Split a ``Name: value`` header line into a trimmed pair."""

    name, sep, value = raw.partition(":")
    name = name.strip()
    if not sep or not name:
        raise ValueError(f"Header must look like 'Name: value': {raw!r}")
    if any(ch.isspace() for ch in name):
        raise ValueError(f"Header name cannot contain whitespace: {name!r}")
    if not raw.isascii():
        raise ValueError(f"Header must be ASCII: {raw!r}")
    return name, value.strip()


class FetchConfig(BaseModel):
    """Options recognised by the dispatcher, fetcher and filter engine."""

    body: str | None = None
    delay_ms: int = 100
    headers: list[str] = Field(default_factory=list)
    ignore_html: bool = False
    ignore_empty: bool = False
    keep_alive: bool = False
    method: str = "GET"
    match_string: str | None = None
    output_dir: Path = Field(default=Path("out"))
    save_status: list[int] = Field(default_factory=list)
    save_all: bool = False
    proxy_url: str | None = None
    concurrency: int = 40
    timeout: float = 10.0
    verify_tls: bool = False

    @field_validator("method", mode="before")
    @classmethod
    def _normalise_method(cls, value: Any) -> str:
        method = str(value or "").strip().upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unknown HTTP method: {value!r}")
        return method

    @field_validator("headers")
    @classmethod
    def _validate_headers(cls, value: list[str]) -> list[str]:
        for raw in value:
            parse_header(raw)
        return value

    @field_validator("save_status")
    @classmethod
    def _validate_status(cls, value: list[int]) -> list[int]:
        for status in value:
            if not 100 <= status <= 599:
                raise ValueError(f"save_status entries must be HTTP status codes: {status}")
        return value

    @field_validator("match_string")
    @classmethod
    def _validate_match(cls, value: str | None) -> str | None:
        if value is not None and value == "":
            raise ValueError("match_string cannot be empty")
        return value

    @field_validator("proxy_url")
    @classmethod
    def _validate_proxy(cls, value: str | None) -> str | None:
        if value is None:
            return None
        parts = urlsplit(value)
        if parts.scheme.lower() not in PROXY_SCHEMES or not parts.hostname:
            raise ValueError(f"Unsupported proxy URL: {value!r}")
        return value

    @field_validator("output_dir", mode="before")
    @classmethod
    def _coerce_output_dir(cls, value: Any) -> Path:
        return Path(value).expanduser()

    @model_validator(mode="after")
    def _validate_limits(self) -> "FetchConfig":
        if self.delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        if self.concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        # A request body implies POST unless another method was asked for.
        if self.body is not None and self.method == "GET":
            self.method = "POST"
        return self

    @property
    def delay(self) -> float:
        return self.delay_ms / 1000.0

    @property
    def header_pairs(self) -> tuple[tuple[str, str], ...]:
        return tuple(parse_header(raw) for raw in self.headers)

    @property
    def body_bytes(self) -> bytes | None:
        return self.body.encode("utf-8") if self.body is not None else None


__all__ = ["FetchConfig", "HTTP_METHODS", "PROXY_SCHEMES", "parse_header"]
