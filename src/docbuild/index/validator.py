"""Structural checks run over the full lexeme set before anything is persisted."""

from __future__ import annotations

import logging
from typing import List, Sequence

from docbuild.errors import LexemeValidationError
from docbuild.models import Context, LexemeRecord

LOGGER = logging.getLogger(__name__)

LINK_PREFIX = "/docs/"
VALID_CONTEXTS = tuple(context.value for context in Context)


def record_violations(index: int, record: LexemeRecord) -> List[str]:
    """List every invariant ``record`` breaks, formatted for the aggregate error."""
    errors: List[str] = []
    link = record.link or ""

    if not record.h1_inner_text:
        errors.append(f"Lexeme {index}: Missing h1_inner_text (link: {link})")

    if not link.startswith(LINK_PREFIX):
        errors.append(f"Lexeme {index}: Link must start with {LINK_PREFIX} (got: {link})")

    context = record.context.value if isinstance(record.context, Context) else record.context
    if context not in VALID_CONTEXTS:
        errors.append(
            f"Lexeme {index}: Invalid context value (got: {context}, "
            f"expected one of: {', '.join(VALID_CONTEXTS)}) (link: {link})"
        )
    return errors


def validate_lexemes(records: Sequence[LexemeRecord]) -> None:
    """Raise :class:`LexemeValidationError` listing all violations, if any."""
    errors: List[str] = []
    for index, record in enumerate(records):
        errors.extend(record_violations(index, record))

    if errors:
        LOGGER.error("Lexeme validation found %d problem(s) in %d records", len(errors), len(records))
        raise LexemeValidationError(errors)

    LOGGER.debug("Validated %d lexemes", len(records))
