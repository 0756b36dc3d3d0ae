"""Fatal errors raised by the documentation build."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional


class DocBuildError(Exception):
    """Base class for errors that abort a build."""


class MarkdownParseError(DocBuildError):
    """Markdown source could not be compiled."""

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(f"{message} ({path})" if path is not None else message)
        self.path = path


class SourceReadError(DocBuildError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to read {path}: {reason}")
        self.path = path


class OutputWriteError(DocBuildError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path


class LexemeValidationError(DocBuildError):
    """Aggregated violations found while validating extracted lexemes."""

    def __init__(self, errors: List[str]) -> None:
        super().__init__("Lexeme validation failed:\n" + "\n".join(errors))
        self.errors = list(errors)
