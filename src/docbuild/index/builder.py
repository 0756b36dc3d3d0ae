"""Documentation build pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from docbuild.compile.highlighter import SyntaxHighlighter
from docbuild.compile.markdown_compiler import MarkdownCompiler
from docbuild.config import BuildConfig
from docbuild.errors import MarkdownParseError
from docbuild.index.lexemes import LexemeExtractor
from docbuild.index.meta import generate_doc_meta, write_meta_json
from docbuild.index.ndjson import write_lexemes_to_ndjson
from docbuild.index.validator import validate_lexemes
from docbuild.ingestion.loader import iter_documents
from docbuild.models import BuildResult, DocMeta, DocumentSource, LexemeRecord
from docbuild.utils.files import atomic_write_text
from docbuild.utils.html import wrap_fragment

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ProcessedDocument:
    source: DocumentSource
    fragment: str
    lexemes: List[LexemeRecord] = field(default_factory=list)
    meta: DocMeta | None = None


class DocumentationBuilder:
    """Coordinates compilation, highlighting, extraction and persistence.

    Every document is processed in memory first; outputs are written only
    after the combined lexeme set validates, so a failed run publishes nothing.
    """

    def __init__(
        self,
        compiler: MarkdownCompiler | None = None,
        highlighter: SyntaxHighlighter | None = None,
        extractor: LexemeExtractor | None = None,
    ) -> None:
        self.compiler = compiler or MarkdownCompiler()
        self.highlighter = highlighter or SyntaxHighlighter()
        self.extractor = extractor or LexemeExtractor()

    def process(self, source: DocumentSource) -> ProcessedDocument:
        """Compile, highlight and index a single document."""
        try:
            fragment = self.compiler.compile(source.markdown)
        except MarkdownParseError as exc:
            raise MarkdownParseError(str(exc), path=source.path) from exc

        fragment = self.highlighter.highlight(fragment)
        wrapped = wrap_fragment(fragment)
        lexemes = self.extractor.extract(wrapped, source.version, source.slug)
        meta = generate_doc_meta(wrapped, source.version, source.slug)
        return ProcessedDocument(source=source, fragment=fragment, lexemes=lexemes, meta=meta)

    def build(self, config: BuildConfig, base_dir: Path | None = None) -> BuildResult:
        input_dir = config.resolve_input_dir(base_dir)
        LOGGER.info("Building %s documentation from %s", config.version, input_dir)

        processed: List[ProcessedDocument] = []
        for source in iter_documents([input_dir], config.version):
            LOGGER.info("Processing: %s", source.path)
            processed.append(self.process(source))

        if not processed:
            LOGGER.warning("No Markdown files found in %s", input_dir)

        all_lexemes = [lexeme for document in processed for lexeme in document.lexemes]
        validate_lexemes(all_lexemes)

        rendered_dir = config.rendered_dir(base_dir)
        result = BuildResult(
            documents_processed=len(processed),
            lexemes_generated=len(all_lexemes),
            lexemes_path=config.lexemes_path(base_dir),
            meta_path=config.meta_path(base_dir),
        )

        # Each file is replaced atomically on its own; index and meta precede any page.
        write_lexemes_to_ndjson(all_lexemes, result.lexemes_path)
        write_meta_json([document.meta for document in processed], result.meta_path)

        for document in processed:
            output_path = rendered_dir / f"{document.source.slug}.html"
            atomic_write_text(output_path, document.fragment)
            result.rendered_files.append(output_path)

        LOGGER.info(
            "Built %d documents, %d lexemes", result.documents_processed, result.lexemes_generated
        )
        return result
