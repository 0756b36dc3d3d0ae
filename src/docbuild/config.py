"""Build configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

DEFAULT_VERSION = "1.x"
DEFAULT_INPUT_DIR = Path("docs")
DEFAULT_OUTPUT_DIR = Path("dist") / "docs"

# Language name (as written in ``language-<name>``) -> (Pygments lexer, lexer options)
DEFAULT_LANGUAGES: Dict[str, Tuple[str, Dict[str, Any]]] = {
    "apacheconf": ("apacheconf", {}),
    "bash": ("bash", {}),
    "sh": ("bash", {}),
    "shell": ("bash", {}),
    "http": ("http", {}),
    "json": ("json", {}),
    "markup": ("html", {}),
    "html": ("html", {}),
    "nginx": ("nginx", {}),
    "php": ("php", {"startinline": True}),
    "xml": ("xml", {}),
    "yaml": ("yaml", {}),
    "yml": ("yaml", {}),
}


@dataclass(slots=True)
class MarkdownConfig:
    heading_id_prefix: str = ""
    rewrite_md_links: bool = True
    extensions: Tuple[str, ...] = ("tables", "fenced_code", "md_in_html")


@dataclass(slots=True)
class HighlightConfig:
    languages: Mapping[str, Tuple[str, Dict[str, Any]]] = field(
        default_factory=lambda: dict(DEFAULT_LANGUAGES)
    )
    default_language: str | None = "php"
    copy_button: bool = True


@dataclass(slots=True)
class BuildConfig:
    input_dir: Path | None = None
    output_dir: Path | None = None
    version: str = DEFAULT_VERSION
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.input_dir is None:
            self.input_dir = DEFAULT_INPUT_DIR
        if self.output_dir is None:
            self.output_dir = DEFAULT_OUTPUT_DIR

    def resolve_input_dir(self, base_dir: Path | None = None) -> Path:
        return _resolve(Path(self.input_dir or DEFAULT_INPUT_DIR), base_dir)

    def resolve_output_dir(self, base_dir: Path | None = None) -> Path:
        return _resolve(Path(self.output_dir or DEFAULT_OUTPUT_DIR), base_dir)

    def rendered_dir(self, base_dir: Path | None = None) -> Path:
        return self.resolve_output_dir(base_dir) / "rendered"

    def search_dir(self, base_dir: Path | None = None) -> Path:
        return self.resolve_output_dir(base_dir) / "search"

    def lexemes_path(self, base_dir: Path | None = None) -> Path:
        return self.search_dir(base_dir) / "lexemes.ndjson"

    def meta_path(self, base_dir: Path | None = None) -> Path:
        return self.resolve_output_dir(base_dir) / "meta.json"


def _resolve(path: Path, base_dir: Path | None) -> Path:
    if path.is_absolute() or base_dir is None:
        return path
    return base_dir / path
