"""Markdown source loading."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Sequence

from docbuild.errors import SourceReadError
from docbuild.models import DocumentSource
from docbuild.utils.files import iter_markdown_paths, slug_for

LOGGER = logging.getLogger(__name__)


def load_document(path: Path, version: str) -> DocumentSource:
    """Read one Markdown file into a :class:`DocumentSource`."""
    try:
        markdown = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(path, str(exc)) from exc
    return DocumentSource(slug=slug_for(path), version=version, markdown=markdown, path=path)


def iter_documents(paths: Sequence[Path], version: str) -> Iterator[DocumentSource]:
    """Yield a source per Markdown file under ``paths``, in name order."""
    for path in iter_markdown_paths(paths):
        LOGGER.debug("Loading %s", path)
        yield load_document(path, version)
