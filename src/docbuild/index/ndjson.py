"""Newline-delimited JSON output for the search index."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional

from docbuild.errors import OutputWriteError
from docbuild.models import Context, LexemeRecord

LOGGER = logging.getLogger(__name__)

VALID_CONTEXT_VALUES = frozenset(context.value for context in Context)


class NdjsonWriter:
    """Streams lexeme records to an NDJSON file, one JSON object per line.

    Records go to a temporary file next to the target; ``close()`` moves it
    into place, so readers never observe a half-written index.
    """

    def __init__(self) -> None:
        self.path: Optional[Path] = None
        self.count = 0
        self._handle: Optional[IO[str]] = None
        self._tmp_path: Optional[Path] = None

    def open(self, path: Path) -> None:
        self.path = Path(path)
        self.count = 0
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            self._tmp_path = Path(tmp_name)
            self._handle = os.fdopen(fd, "w", encoding="utf-8", newline="\n")
        except OSError as exc:
            raise OutputWriteError(self.path, str(exc)) from exc

    def write(self, record: LexemeRecord) -> None:
        if self._handle is None:
            raise RuntimeError("NDJSON writer not opened. Call open() first.")
        try:
            line = json.dumps(record.to_dict(), ensure_ascii=False)
            self._handle.write(line + "\n")
        except (OSError, TypeError, ValueError) as exc:
            raise OutputWriteError(self.path, str(exc)) from exc
        self.count += 1

    def write_all(self, records: Iterable[LexemeRecord]) -> None:
        for record in records:
            self.write(record)

    def close(self) -> None:
        """Flush and move the finished file into place."""
        if self._handle is None:
            return
        handle, tmp_path = self._handle, self._tmp_path
        self._handle = self._tmp_path = None
        try:
            handle.close()
            os.replace(tmp_path, self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise OutputWriteError(self.path, str(exc)) from exc
        LOGGER.debug("Wrote %d records to %s", self.count, self.path)

    def abort(self) -> None:
        """Discard everything written since ``open()``."""
        if self._handle is None:
            return
        handle, tmp_path = self._handle, self._tmp_path
        self._handle = self._tmp_path = None
        handle.close()
        tmp_path.unlink(missing_ok=True)

    def __enter__(self) -> "NdjsonWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self.abort()


def iter_lexemes_from_ndjson(path: Path) -> Iterator[LexemeRecord]:
    """Read records back from an NDJSON index, skipping blank lines."""
    with Path(path).open("r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path}:{line_number}: invalid JSON ({exc})") from exc
            context = data.get("context")
            if context in VALID_CONTEXT_VALUES:
                context = Context(context)
            yield LexemeRecord(
                version=data.get("version", ""),
                context=context,
                link=data.get("link", ""),
                html_element_type=data.get("html_element_type", ""),
                inner_text=data.get("inner_text", ""),
                h1_inner_text=data.get("h1_inner_text") or "",
                h2_inner_text=data.get("h2_inner_text"),
                h3_inner_text=data.get("h3_inner_text"),
                h4_inner_text=data.get("h4_inner_text"),
                h5_inner_text=data.get("h5_inner_text"),
            )


def write_lexemes_to_ndjson(records: Iterable[LexemeRecord], path: Path) -> int:
    """Write ``records`` to ``path`` and return how many were written."""
    with NdjsonWriter() as writer:
        writer.open(path)
        writer.write_all(records)
    return writer.count
