"""Response exporters."""

from .base import BaseExporter, FileRecord
from .file_exporter import FileExporter, render_headers

__all__ = ["BaseExporter", "FileExporter", "FileRecord", "render_headers"]
