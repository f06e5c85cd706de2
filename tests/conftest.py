"""Pytest fixtures shared across the fff test-suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from fff.config import FetchConfig
from fff.engine import Fetcher


@pytest.fixture
def sample_config(tmp_path: Path) -> Callable[..., FetchConfig]:
    def _builder(**overrides: Any) -> FetchConfig:
        base: dict[str, Any] = {
            "output_dir": tmp_path / "out",
            "delay_ms": 0,
            "concurrency": 4,
        }
        base.update(overrides)
        return FetchConfig(**base)

    return _builder


@pytest.fixture
def routes() -> dict[str, Any]:
    """URL → response (or exception) table served by ``mock_fetcher``."""

    return {}


@pytest.fixture
def mock_fetcher(routes: dict[str, Any]) -> Callable[..., Fetcher]:
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        target = routes.get(url, routes.get(url.rstrip("/")))
        if target is None:
            raise httpx.ConnectError("Name or service not known", request=request)
        if isinstance(target, Exception):
            raise target
        # Fresh response per request so a route can be served more than once.
        return httpx.Response(target.status_code, headers=target.headers, content=target.content)

    def _builder(**kwargs: Any) -> Fetcher:
        return Fetcher(transport=httpx.MockTransport(handler), **kwargs)

    return _builder
