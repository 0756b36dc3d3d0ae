"""Utility helpers for working with files."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterable, Iterator

from docbuild.errors import OutputWriteError


def iter_markdown_paths(inputs: Iterable[Path]) -> Iterator[Path]:
    """Yield Markdown paths from input paths, listing directories one level deep."""
    for item in inputs:
        if item.is_dir():
            yield from iter_markdown_paths(sorted(child for child in item.glob("*.md")))
        elif item.is_file() and item.suffix.lower() == ".md":
            yield item


def slug_for(path: Path) -> str:
    """Page slug for a Markdown file: its name without the extension."""
    return path.stem


def atomic_write_text(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` through a temporary sibling file and a rename."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    except OSError as exc:
        raise OutputWriteError(path, str(exc)) from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise OutputWriteError(path, str(exc)) from exc
