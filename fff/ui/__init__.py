"""User-facing output helpers."""

from .status import StatusReporter, status_style

__all__ = ["StatusReporter", "status_style"]
