"""Write saved responses as content-addressed files."""

from __future__ import annotations

import os
import tempfile
from http import HTTPStatus
from pathlib import Path

from ..fetcher import FetchSuccess, RequestSpec
from ..hasher import HEADERS_SUFFIX, filename_for
from ...errors import OutputDirectoryError
from .base import BaseExporter, FileRecord


def _reason_phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


def render_headers(spec: RequestSpec, outcome: FetchSuccess) -> str:
    """Describe the request and the response headers as plain text."""

    lines = [f"{spec.method} {spec.url}", ""]
    lines.extend(f"> {name}: {value}" for name, value in spec.headers)
    lines.append("")
    if spec.body is not None:
        lines.append(spec.body.decode("utf-8", errors="replace"))
        lines.append("")
    version = outcome.http_version.removeprefix("HTTP/")
    lines.append(f"< HTTP/{version} {outcome.status} {_reason_phrase(outcome.status)}".rstrip())
    lines.extend(f"< {name}: {value}" for name, value in outcome.headers)
    return "\n".join(lines) + "\n"


def _write_temp(directory: Path, data: bytes) -> Path:
    """Write ``data`` to a fresh hidden temp file in ``directory``."""

    fd, name = tempfile.mkstemp(prefix=".fff-", suffix=".tmp", dir=directory)
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as stream:
            stream.write(data)
    except BaseException:
        path.unlink(missing_ok=True)
        raise
    return path


class FileExporter(BaseExporter):
    """Store each body under its content-derived name inside ``output_dir``."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    def prepare(self) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputDirectoryError(
                f"Cannot create output directory {self.output_dir}: {exc}"
            ) from exc
        if not self.output_dir.is_dir() or not os.access(self.output_dir, os.W_OK | os.X_OK):
            raise OutputDirectoryError(f"Output directory is not writable: {self.output_dir}")

    def record_for(self, url: str, body: bytes, headers_text: str | None = None) -> FileRecord:
        return FileRecord(
            path=self.output_dir / filename_for(url, body),
            url=url,
            body=body,
            headers_text=headers_text,
        )

    def export(self, record: FileRecord) -> bool:
        # Only complete files ever appear under their final names: both files are
        # written to temps first, the body is published with link() (fails if the
        # name exists) and the headers companion with an atomic replace.
        temps: list[Path] = []
        try:
            body_tmp = _write_temp(self.output_dir, record.body)
            temps.append(body_tmp)
            headers_tmp = None
            if record.headers_text is not None:
                headers_tmp = _write_temp(self.output_dir, record.headers_text.encode("utf-8"))
                temps.append(headers_tmp)
            try:
                os.link(body_tmp, record.path)
            except FileExistsError:
                return False
            if headers_tmp is not None:
                try:
                    os.replace(headers_tmp, record.path.with_suffix(HEADERS_SUFFIX))
                except OSError:
                    record.path.unlink(missing_ok=True)
                    raise
            return True
        finally:
            for temp in temps:
                temp.unlink(missing_ok=True)


__all__ = ["FileExporter", "render_headers"]
