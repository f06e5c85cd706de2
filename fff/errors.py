"""Exception types shared across the fetch pipeline."""

from __future__ import annotations


class FffError(Exception):
    """Base class for errors raised by fff."""


class ConfigurationError(FffError, ValueError):
    """Invalid or contradictory options; fatal before any fetch starts."""


class MalformedURLError(FffError, ValueError):
    """An input line that cannot be used as a request target."""


class OutputDirectoryError(FffError, OSError):
    """The output directory cannot be created or written to."""


__all__ = [
    "ConfigurationError",
    "FffError",
    "MalformedURLError",
    "OutputDirectoryError",
]
