"""Page metadata (``meta.json``) generation."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence, Tuple, Union

from docbuild.models import DocMeta
from docbuild.utils.files import atomic_write_text
from docbuild.utils.html import parse_html

LOGGER = logging.getLogger(__name__)

DocumentInput = Union[Mapping[str, str], Tuple[str, str, str]]


def extract_doc_title(html: str) -> str:
    """Text of the first ``h1#doc-title``; empty when the page has none."""
    title = parse_html(html).select_one("h1#doc-title")
    if title is None:
        return ""
    return title.get_text().strip()


def generate_doc_meta(html: str, version: str, slug: str) -> DocMeta:
    title = extract_doc_title(html)
    if not title:
        LOGGER.warning("No h1#doc-title found for %s/%s", version, slug)
    return DocMeta(version=version, slug=slug, title=title)


def generate_meta_json(documents: Iterable[DocumentInput]) -> List[DocMeta]:
    """Build metadata for ``(html, version, slug)`` tuples or equivalent mappings."""
    metas: List[DocMeta] = []
    for document in documents:
        if isinstance(document, Mapping):
            html, version, slug = document["html"], document["version"], document["slug"]
        else:
            html, version, slug = document
        metas.append(generate_doc_meta(html, version, slug))
    return metas


def write_meta_json(metas: Sequence[DocMeta], path: Path) -> None:
    payload = json.dumps([meta.to_dict() for meta in metas], indent=2, ensure_ascii=False)
    atomic_write_text(Path(path), payload + "\n")
    LOGGER.debug("Wrote %d page entries to %s", len(metas), path)
