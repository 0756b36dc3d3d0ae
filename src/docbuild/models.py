"""Core docbuild data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional


class Context(str, Enum):
    """Audience variant a passage of documentation belongs to."""

    FRAMEWORK = "framework"
    LIBRARY = "library"
    GLOBAL = "global"

    @classmethod
    def from_class_list(cls, classes: Iterable[str]) -> Optional["Context"]:
        """Return the scoping context named by ``context-*`` CSS classes, if any.

        Only ``context-framework`` and ``context-library`` scope a subtree;
        ``global`` is what remains when no ancestor declares either.
        """
        classes = set(classes)
        if "context-framework" in classes:
            return cls.FRAMEWORK
        if "context-library" in classes:
            return cls.LIBRARY
        return None


@dataclass(frozen=True, slots=True)
class DocumentSource:
    """Markdown source for one documentation page."""

    slug: str
    version: str
    markdown: str
    path: Optional[Path] = None


@dataclass(frozen=True, slots=True)
class LexemeRecord:
    """One search-indexable unit of text plus its position in the document."""

    version: str
    context: Context
    link: str
    html_element_type: str
    inner_text: str
    h1_inner_text: str
    h2_inner_text: Optional[str] = None
    h3_inner_text: Optional[str] = None
    h4_inner_text: Optional[str] = None
    h5_inner_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        context = self.context.value if isinstance(self.context, Context) else self.context
        return {
            "version": self.version,
            "context": context,
            "link": self.link,
            "html_element_type": self.html_element_type,
            "inner_text": self.inner_text,
            "h1_inner_text": self.h1_inner_text,
            "h2_inner_text": self.h2_inner_text,
            "h3_inner_text": self.h3_inner_text,
            "h4_inner_text": self.h4_inner_text,
            "h5_inner_text": self.h5_inner_text,
        }


@dataclass(frozen=True, slots=True)
class DocMeta:
    """Page index entry written to ``meta.json``."""

    version: str
    slug: str
    title: str

    def to_dict(self) -> Dict[str, str]:
        return {"version": self.version, "slug": self.slug, "title": self.title}


@dataclass(slots=True)
class BuildResult:
    documents_processed: int = 0
    lexemes_generated: int = 0
    rendered_files: List[Path] = field(default_factory=list)
    lexemes_path: Optional[Path] = None
    meta_path: Optional[Path] = None
