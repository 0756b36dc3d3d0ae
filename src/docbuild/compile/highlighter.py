"""Server-side syntax highlighting of compiled HTML fragments.

Code blocks carrying a ``language-<name>`` class are tokenized with Pygments.
Token spans use Prism-compatible class names (``token keyword``) so the web
front end's existing theme applies unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from bs4 import Tag
from pygments import highlight as pygments_highlight
from pygments import token as T
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from docbuild.config import HighlightConfig
from docbuild.utils.html import class_list, has_class, parse_html

LOGGER = logging.getLogger(__name__)

LANGUAGE_CLASS_PREFIX = "language-"
NO_COPY_CLASS = "no-copy"

COPY_BUTTON_HTML = (
    '<div class="button-wrapper">'
    '<button class="copy-button" title="Copy to clipboard">'
    '<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16" fill="currentColor" '
    'class="bi bi-copy" viewBox="0 0 16 16"><path fill-rule="evenodd" d="M4 2a2 2 0 0 1 2-2h8a2 '
    "2 0 0 1 2 2v8a2 2 0 0 1-2 2H6a2 2 0 0 1-2-2zm2-1a1 1 0 0 0-1 1v8a1 1 0 0 0 1 1h8a1 1 0 0 0 "
    "1-1V2a1 1 0 0 0-1-1zM2 5a1 1 0 0 0-1 1v8a1 1 0 0 0 1 1h8a1 1 0 0 0 1-1v-1h1v1a2 2 0 0 1-2 "
    '2H2a2 2 0 0 1-2-2V6a2 2 0 0 1 2-2h1v1z"></path></svg>'
    "</button></div>"
)

_TOKEN_MAP = {
    T.Comment: "comment",
    T.Keyword: "keyword",
    T.Keyword.Constant: "constant",
    T.Keyword.Type: "class-name",
    T.Name.Attribute: "attr-name",
    T.Name.Builtin: "builtin",
    T.Name.Class: "class-name",
    T.Name.Constant: "constant",
    T.Name.Decorator: "decorator",
    T.Name.Function: "function",
    T.Name.Namespace: "package",
    T.Name.Tag: "tag",
    T.Name.Variable: "variable",
    T.String: "string",
    T.Number: "number",
    T.Operator: "operator",
    T.Operator.Word: "keyword",
    T.Punctuation: "punctuation",
    T.Generic.Deleted: "deleted",
    T.Generic.Inserted: "inserted",
    T.Generic.Prompt: "prompt",
}


def _token_class(ttype) -> str:
    """Map a Pygments token type to a Prism ``token <kind>`` class string."""
    while ttype:
        if ttype in _TOKEN_MAP:
            return f"token {_TOKEN_MAP[ttype]}"
        ttype = ttype.parent
    return ""


class PrismHtmlFormatter(HtmlFormatter):
    """HtmlFormatter that emits Prism token classes instead of Pygments short names."""

    def __init__(self, **options: Any) -> None:
        options.setdefault("nowrap", True)
        super().__init__(**options)

    def _get_css_class(self, ttype):
        return _token_class(ttype)

    def _get_css_classes(self, ttype):
        return _token_class(ttype)


class SyntaxHighlighter:
    """Tokenizes every ``language-*`` code block of an HTML fragment."""

    def __init__(self, config: HighlightConfig | None = None) -> None:
        self.config = config or HighlightConfig()
        self.formatter = PrismHtmlFormatter()
        self._lexers: Dict[str, Optional[Lexer]] = {}

    def get_lexer(self, language: str) -> Optional[Lexer]:
        """Return the lexer registered for ``language``, or None."""
        if language not in self._lexers:
            self._lexers[language] = self._load_lexer(language)
        return self._lexers[language]

    def _load_lexer(self, language: str) -> Optional[Lexer]:
        entry: Optional[Tuple[str, Dict[str, Any]]] = self.config.languages.get(language)
        if entry is None:
            return None
        name, options = entry
        try:
            return get_lexer_by_name(name, stripnl=False, ensurenl=False, **options)
        except ClassNotFound:
            LOGGER.debug("Pygments has no lexer named %s", name)
            return None

    def highlight(self, html: str) -> str:
        soup = parse_html(html)

        if self.config.default_language:
            for code in soup.select("pre > code"):
                if _language_of(code) is None:
                    code["class"] = class_list(code) + [
                        LANGUAGE_CLASS_PREFIX + self.config.default_language
                    ]

        for code in soup.find_all("code"):
            language = _language_of(code)
            if language is None:
                continue
            try:
                self._highlight_block(code, language)
            except Exception as exc:
                LOGGER.error("Failed to highlight code for language %s: %s", language, exc)

        return str(soup)

    def _highlight_block(self, code: Tag, language: str) -> None:
        lexer = self.get_lexer(language)
        if lexer is None:
            LOGGER.warning("No grammar registered for language: %s", language)
            return

        highlighted = pygments_highlight(code.get_text(), lexer, self.formatter)
        code.clear()
        code.append(parse_html(highlighted))

        pre = code.parent
        if not isinstance(pre, Tag) or pre.name != "pre":
            return

        language_class = LANGUAGE_CLASS_PREFIX + language
        if not has_class(pre, language_class):
            pre["class"] = class_list(pre) + [language_class]

        if self.config.copy_button and not has_class(pre, NO_COPY_CLASS):
            pre.insert(0, parse_html(COPY_BUTTON_HTML))


def _language_of(code: Tag) -> Optional[str]:
    for css_class in class_list(code):
        if css_class.startswith(LANGUAGE_CLASS_PREFIX) and len(css_class) > len(LANGUAGE_CLASS_PREFIX):
            return css_class[len(LANGUAGE_CLASS_PREFIX) :]
    return None


def highlight_code(html: str, config: HighlightConfig | None = None) -> str:
    return SyntaxHighlighter(config).highlight(html)
