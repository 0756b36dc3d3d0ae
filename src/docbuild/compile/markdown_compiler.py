"""Markdown to HTML fragment compilation.

Uses Python-Markdown with the ``tables``, ``fenced_code`` and ``md_in_html``
extensions plus :class:`DocsExtension`, which adds GitHub-style heading IDs,
rewrites links between ``.md`` sources to their extension-less routes and lets
Markdown inside raw container blocks (context ``<div>``s, ``<nav>``,
``<section>``, ``<details>`` ...) compile normally.
"""

from __future__ import annotations

import html
import logging
import re
import xml.etree.ElementTree as etree
from typing import Dict, List

import markdown
from markdown.extensions import Extension
from markdown.extensions.toc import render_inner_html, strip_tags
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor

from docbuild.config import MarkdownConfig
from docbuild.errors import MarkdownParseError

LOGGER = logging.getLogger(__name__)

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

# Flow-content containers whose blank-line separated body is Markdown.
# Structural tags (table, ul, dl, ...) keep their raw HTML.
MARKDOWN_CONTAINER_TAGS = (
    "address",
    "article",
    "aside",
    "blockquote",
    "details",
    "div",
    "fieldset",
    "figure",
    "footer",
    "header",
    "main",
    "nav",
    "section",
)

# Opening container tags alone on their line, not already carrying markdown="..."
_CONTAINER_OPEN_RE = re.compile(
    r"^(?P<indent> {0,3})<(?P<tag>" + "|".join(MARKDOWN_CONTAINER_TAGS) + r")\b"
    r"(?P<attrs>(?![^>]*\bmarkdown\s*=)[^>]*?)(?P<close>/?)>\s*$",
    re.IGNORECASE,
)
_SLUG_STRIP_RE = re.compile(r"[^\w\- ]", re.UNICODE)


def github_slug(text: str) -> str:
    """Slugify heading text the way GitHub renders anchors."""
    return _SLUG_STRIP_RE.sub("", text.strip().lower()).replace(" ", "-")


def rewrite_md_link(href: str) -> str:
    """Drop the ``.md`` extension from a link target, keeping any anchor."""
    if href.endswith(".md"):
        return href[: -len(".md")]
    if ".md#" in href:
        return href.replace(".md#", "#", 1)
    return href


class HeadingSlugger:
    """Collision-free slug generator; one instance per compiled document."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix
        self._occurrences: Dict[str, int] = {}

    def slug(self, text: str) -> str:
        base = self.prefix + github_slug(text)
        result = base
        while result in self._occurrences:
            self._occurrences[base] += 1
            result = f"{base}-{self._occurrences[base]}"
        self._occurrences[result] = 0
        return result

    def reset(self) -> None:
        self._occurrences.clear()


class MarkdownContainerPreprocessor(Preprocessor):
    """Mark raw container blocks so ``md_in_html`` compiles their contents."""

    def run(self, lines: List[str]) -> List[str]:
        return [_CONTAINER_OPEN_RE.sub(self._mark, line) for line in lines]

    @staticmethod
    def _mark(match: re.Match) -> str:
        if match.group("close"):
            return match.group(0)
        return f'{match.group("indent")}<{match.group("tag")}{match.group("attrs")} markdown="1">'


class HeadingIdTreeprocessor(Treeprocessor):
    def __init__(self, md: markdown.Markdown, slugger: HeadingSlugger) -> None:
        super().__init__(md)
        self.slugger = slugger

    def run(self, root: etree.Element) -> None:
        for element in root.iter():
            if element.tag not in HEADING_TAGS or "id" in element.attrib:
                continue
            # Inline code is stored entity-escaped; slug the text a reader sees
            text = html.unescape(strip_tags(render_inner_html(element, self.md)))
            slug = self.slugger.slug(text)
            if slug:
                element.set("id", slug)
            else:
                LOGGER.debug("Heading %r produced an empty id", text)


class MarkdownLinkTreeprocessor(Treeprocessor):
    def run(self, root: etree.Element) -> None:
        for anchor in root.iter("a"):
            href = anchor.get("href")
            if href:
                anchor.set("href", rewrite_md_link(href))


class DocsExtension(Extension):
    """Heading IDs, ``.md`` link rewriting and Markdown inside raw container blocks."""

    def __init__(self, config: MarkdownConfig) -> None:
        super().__init__()
        self.docs_config = config
        self.slugger = HeadingSlugger(prefix=config.heading_id_prefix)

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        md.registerExtension(self)
        # After fenced_code (25) stashes code blocks, before html_block (20) reads raw HTML
        md.preprocessors.register(MarkdownContainerPreprocessor(md), "docs_container_markdown", 22)
        # Inline processing (20) must be done so heading text is final
        md.treeprocessors.register(HeadingIdTreeprocessor(md, self.slugger), "docs_heading_ids", 6)
        if self.docs_config.rewrite_md_links:
            md.treeprocessors.register(MarkdownLinkTreeprocessor(md), "docs_md_links", 4)

    def reset(self) -> None:
        self.slugger.reset()


class MarkdownCompiler:
    """Compiles Markdown sources to HTML fragments.

    One instance is created per build run; its configuration is fixed at
    construction and the parser is reset before every document.
    """

    def __init__(self, config: MarkdownConfig | None = None) -> None:
        self.config = config or MarkdownConfig()
        self._md = markdown.Markdown(
            extensions=[*self.config.extensions, DocsExtension(self.config)],
            output_format="html",
        )

    def compile(self, text: str) -> str:
        """Compile Markdown to an HTML fragment (no ``<html>``/``<body>``)."""
        try:
            return self._md.reset().convert(text)
        except Exception as exc:
            raise MarkdownParseError(f"Failed to compile Markdown: {exc}") from exc


def compile_markdown(text: str, config: MarkdownConfig | None = None) -> str:
    return MarkdownCompiler(config).compile(text)
