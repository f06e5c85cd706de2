"""Engine components orchestrating fetch → filter → hash → export."""

from .exporter import BaseExporter, FileExporter, FileRecord, render_headers
from .fetcher import FetchOutcome, FetchSuccess, Fetcher, RequestSpec, TransportFailure
from .filters import SaveDecision, SaveReason, is_empty, is_html, should_save
from .hasher import content_digest, filename_for, headers_filename_for, url_slug

__all__ = [
    "BaseExporter",
    "FetchOutcome",
    "FetchSuccess",
    "Fetcher",
    "FileExporter",
    "FileRecord",
    "RequestSpec",
    "SaveDecision",
    "SaveReason",
    "TransportFailure",
    "content_digest",
    "filename_for",
    "headers_filename_for",
    "is_empty",
    "is_html",
    "render_headers",
    "should_save",
    "url_slug",
]
