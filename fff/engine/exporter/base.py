"""Exporter Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class FileRecord:
    """A response selected for saving; written once and never mutated."""

    path: Path
    url: str
    body: bytes = field(repr=False)
    headers_text: str | None = field(default=None, repr=False)


class BaseExporter(ABC):
    """Uniform exporter contract used by the dispatcher."""

    @abstractmethod
    def prepare(self) -> None:
        """Make the destination ready; failures here are fatal to the run."""

    @abstractmethod
    def record_for(self, url: str, body: bytes, headers_text: str | None = None) -> FileRecord:
        """Build the record that ``export`` would write for this response."""

    @abstractmethod
    def export(self, record: FileRecord) -> bool:
        """Persist a single record; return ``False`` if it was already stored."""

    def close(self) -> None:
        """Release underlying resources."""


__all__ = ["BaseExporter", "FileRecord"]
