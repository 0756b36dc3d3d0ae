"""Small helpers over BeautifulSoup trees shared by the highlighter and indexers."""

from __future__ import annotations

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

PARSER = "html.parser"

_NON_TEXT = (Comment, Declaration, Doctype, ProcessingInstruction)


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, PARSER)


def wrap_fragment(fragment: str) -> str:
    """Wrap a compiled fragment in the canonical document shell."""
    return f"<body><main><article>{fragment}</article></main></body>"


def inner_text(element: Tag) -> str:
    """Concatenate every descendant text node, ignoring element boundaries."""
    return "".join(
        str(node)
        for node in element.descendants
        if isinstance(node, NavigableString) and not isinstance(node, _NON_TEXT)
    )


def has_class(element: Tag, css_class: str) -> bool:
    return css_class in class_list(element)


def class_list(element: Tag) -> list[str]:
    classes = element.get("class") or []
    if isinstance(classes, str):
        return classes.split()
    return list(classes)
