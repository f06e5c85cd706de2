"""Single-attempt HTTP fetching built on a shared httpx client."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Union

import httpx
import structlog

from ..config import FetchConfig
from ..errors import ConfigurationError, MalformedURLError

Headers = tuple[tuple[str, str], ...]


@dataclass(frozen=True, slots=True)
class RequestSpec:
    """Immutable description of the request issued for one URL."""

    url: str
    method: str = "GET"
    headers: Headers = ()
    body: bytes | None = None

    @classmethod
    def for_url(
        cls,
        url: str,
        *,
        method: str = "GET",
        headers: Headers = (),
        body: bytes | None = None,
    ) -> "RequestSpec":
        """Validate ``url`` and build a spec; raise ``MalformedURLError`` otherwise."""

        try:
            parsed = httpx.URL(url)
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise MalformedURLError(f"Invalid URL: {url}") from exc
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise MalformedURLError(f"Invalid URL: {url}")
        return cls(url=url, method=method, headers=tuple(headers), body=body)

    @classmethod
    def from_config(cls, url: str, config: FetchConfig) -> "RequestSpec":
        return cls.for_url(
            url,
            method=config.method,
            headers=config.header_pairs,
            body=config.body_bytes,
        )


@dataclass(frozen=True, slots=True)
class FetchSuccess:
    """A response that arrived in full, whatever its status code."""

    url: str
    status: int
    headers: Headers
    body: bytes = field(repr=False)
    elapsed: float
    final_url: str = ""
    http_version: str = "HTTP/1.1"

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None


@dataclass(frozen=True, slots=True)
class TransportFailure:
    """DNS, connect, TLS, timeout or protocol failure for one URL."""

    url: str
    reason: str
    elapsed: float = 0.0


FetchOutcome = Union[FetchSuccess, TransportFailure]


class Fetcher:
    """Issue exactly one request per spec and report a structured outcome."""

    def __init__(
        self,
        *,
        keep_alive: bool = False,
        proxy: str | None = None,
        timeout: float = 10.0,
        verify: bool = False,
        follow_redirects: bool = True,
        max_connections: int | None = None,
        transport: httpx.BaseTransport | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.keep_alive = keep_alive
        self.proxy = proxy
        self.logger = logger or structlog.get_logger("fff.fetcher")
        # Without keep-alive no idle connection survives its response.
        limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_connections if keep_alive else 0,
        )
        client_kwargs: dict[str, Any] = {
            "follow_redirects": follow_redirects,
            "timeout": httpx.Timeout(timeout),
            "verify": verify,
            "limits": limits,
        }
        if proxy:
            client_kwargs["proxy"] = proxy
        if transport is not None:
            client_kwargs["transport"] = transport
        try:
            self._client = httpx.Client(**client_kwargs)
        except (ValueError, ImportError, httpx.InvalidURL) as exc:
            raise ConfigurationError(f"Failed to create HTTP client: {exc}") from exc

    @classmethod
    def from_config(cls, config: FetchConfig, **kwargs: Any) -> "Fetcher":
        return cls(
            keep_alive=config.keep_alive,
            proxy=config.proxy_url,
            timeout=config.timeout,
            verify=config.verify_tls,
            max_connections=config.concurrency,
            **kwargs,
        )

    def fetch(self, spec: RequestSpec) -> FetchOutcome:
        started = time.perf_counter()
        try:
            response = self._client.request(
                spec.method,
                spec.url,
                headers=list(spec.headers),
                content=spec.body,
            )
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
            elapsed = time.perf_counter() - started
            reason = str(exc) or type(exc).__name__
            self.logger.warning(
                "transport_error",
                url=spec.url,
                error_type=type(exc).__name__,
                reason=reason,
            )
            return TransportFailure(url=spec.url, reason=reason, elapsed=elapsed)
        elapsed = time.perf_counter() - started
        return FetchSuccess(
            url=spec.url,
            status=response.status_code,
            headers=tuple(response.headers.multi_items()),
            body=response.content,
            elapsed=elapsed,
            final_url=str(response.url),
            http_version=response.http_version,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()


__all__ = [
    "FetchOutcome",
    "FetchSuccess",
    "Fetcher",
    "Headers",
    "RequestSpec",
    "TransportFailure",
]
