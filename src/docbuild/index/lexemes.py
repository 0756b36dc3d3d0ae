"""Search lexeme extraction from compiled documentation HTML.

The extractor walks the ``body > main > article`` subtree of a wrapped
document depth-first, tracking the most recent ``h1``..``h5`` headings, and
emits one :class:`~docbuild.models.LexemeRecord` per indexable element. Each
record carries the text of its enclosing headings, the audience context of
its nearest ``context-*`` ancestor and a link anchored to the closest heading.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from bs4 import Tag

from docbuild.models import Context, LexemeRecord
from docbuild.utils.html import class_list, has_class, inner_text, parse_html

LOGGER = logging.getLogger(__name__)

HEADING_LEVELS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5}
INDEXABLE_ELEMENTS = frozenset(["h1", "h2", "h3", "h4", "h5", "p", "li", "blockquote"])
TOC_NAV_CLASS = "toc-nav"


@dataclass(slots=True)
class TrackedHeading:
    text: str
    id: Optional[str] = None


@dataclass(slots=True)
class HeadingState:
    """Most recent heading seen at each level during one document walk."""

    h1: Optional[TrackedHeading] = None
    h2: Optional[TrackedHeading] = None
    h3: Optional[TrackedHeading] = None
    h4: Optional[TrackedHeading] = None
    h5: Optional[TrackedHeading] = None

    def enter(self, level: int, heading: TrackedHeading) -> None:
        """Track ``heading`` at ``level`` and forget every deeper level."""
        if not 1 <= level <= 5:
            raise ValueError(f"Heading level must be between 1 and 5, got {level}")
        setattr(self, f"h{level}", heading)
        for deeper in range(level + 1, 6):
            setattr(self, f"h{deeper}", None)

    def get(self, level: int) -> Optional[TrackedHeading]:
        return getattr(self, f"h{level}")

    def text_at(self, level: int) -> Optional[str]:
        heading = self.get(level)
        return heading.text if heading is not None else None

    def nearest(self) -> Optional[TrackedHeading]:
        """Deepest heading currently tracked (h5 first, h1 last)."""
        for level in range(5, 0, -1):
            heading = self.get(level)
            if heading is not None:
                return heading
        return None


class LexemeExtractor:
    """Builds lexeme records from wrapped documentation HTML."""

    def __init__(self, *, warn_missing_ids: bool = True) -> None:
        self.warn_missing_ids = warn_missing_ids

    def extract(self, html: str, version: str, slug: str) -> List[LexemeRecord]:
        soup = parse_html(html)
        article = soup.select_one("body > main > article")
        if article is None:
            LOGGER.debug("No body > main > article in %s/%s, nothing to extract", version, slug)
            return []

        base_link = f"/docs/{version}/{slug}"
        state = HeadingState()
        lexemes: List[LexemeRecord] = []

        stack: List[Tag] = [article]
        while stack:
            element = stack.pop()
            if _is_toc_nav(element):
                continue

            name = element.name.lower()
            level = HEADING_LEVELS.get(name)
            if level is not None:
                state.enter(level, TrackedHeading(text=inner_text(element), id=element.get("id")))
                if level > 1 and not element.get("id") and self.warn_missing_ids:
                    LOGGER.warning(
                        "%s heading %r in %s has no id; linking to the page instead",
                        name,
                        inner_text(element).strip(),
                        base_link,
                    )

            if name in INDEXABLE_ELEMENTS:
                lexemes.append(
                    LexemeRecord(
                        version=version,
                        context=resolve_context(element, article),
                        link=build_link(name, element, state, base_link),
                        html_element_type=name,
                        inner_text=inner_text(element),
                        h1_inner_text=state.text_at(1) or "",
                        h2_inner_text=state.text_at(2),
                        h3_inner_text=state.text_at(3),
                        h4_inner_text=state.text_at(4),
                        h5_inner_text=state.text_at(5),
                    )
                )

            stack.extend(reversed([child for child in element.children if isinstance(child, Tag)]))

        LOGGER.debug("Extracted %d lexemes from %s", len(lexemes), base_link)
        return lexemes


def build_link(name: str, element: Tag, state: HeadingState, base_link: str) -> str:
    if name == "h1":
        return base_link
    if name in HEADING_LEVELS:
        element_id = element.get("id")
        return f"{base_link}#{element_id}" if element_id else base_link

    heading = state.nearest()
    if heading is not None and heading.id:
        return f"{base_link}#{heading.id}"
    return base_link


def resolve_context(element: Tag, root: Tag) -> Context:
    """Context of the nearest ``context-*`` element from ``element`` up to ``root``."""
    current: Optional[Tag] = element
    while current is not None:
        context = Context.from_class_list(class_list(current))
        if context is not None:
            return context
        if current is root:
            break
        current = current.parent
    return Context.GLOBAL


def _is_toc_nav(element: Tag) -> bool:
    return element.name.lower() == "nav" and has_class(element, TOC_NAV_CLASS)


def extract_lexemes(html: str, version: str, slug: str) -> List[LexemeRecord]:
    return LexemeExtractor().extract(html, version, slug)
