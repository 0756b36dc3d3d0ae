"""Tests for core data models."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from docbuild.models import BuildResult, Context, DocMeta, DocumentSource, LexemeRecord


class TestContext:
    """Test the Context enum."""

    def test_values(self) -> None:
        assert [c.value for c in Context] == ["framework", "library", "global"]

    def test_is_string(self) -> None:
        """Members compare equal to their string values."""
        assert Context.FRAMEWORK == "framework"

    @pytest.mark.parametrize(
        ("classes", "expected"),
        [
            (["context-framework"], Context.FRAMEWORK),
            (["wrapper", "context-library"], Context.LIBRARY),
            (["context-global"], None),
            ([], None),
        ],
    )
    def test_from_class_list(self, classes: list[str], expected: Context | None) -> None:
        assert Context.from_class_list(classes) is expected


class TestLexemeRecord:
    """Test LexemeRecord."""

    def test_to_dict(self) -> None:
        """Serialization keeps field order and uses the context value."""
        record = LexemeRecord(
            version="1.x",
            context=Context.FRAMEWORK,
            link="/docs/1.x/routing#basics",
            html_element_type="p",
            inner_text="Body",
            h1_inner_text="Routing",
            h2_inner_text="Basics",
        )

        data = record.to_dict()

        assert list(data) == [
            "version",
            "context",
            "link",
            "html_element_type",
            "inner_text",
            "h1_inner_text",
            "h2_inner_text",
            "h3_inner_text",
            "h4_inner_text",
            "h5_inner_text",
        ]
        assert data["context"] == "framework"
        assert data["h2_inner_text"] == "Basics"
        assert data["h3_inner_text"] is None

    def test_immutable(self) -> None:
        """Records cannot be changed once created."""
        record = LexemeRecord("1.x", Context.GLOBAL, "/docs/1.x/a", "p", "x", "A")

        with pytest.raises(dataclasses.FrozenInstanceError):
            record.link = "/elsewhere"  # type: ignore[misc]

    def test_equality(self) -> None:
        first = LexemeRecord("1.x", Context.GLOBAL, "/docs/1.x/a", "p", "x", "A")
        second = LexemeRecord("1.x", Context.GLOBAL, "/docs/1.x/a", "p", "x", "A")

        assert first == second


class TestOtherModels:
    """Test DocMeta, DocumentSource and BuildResult."""

    def test_doc_meta_to_dict(self) -> None:
        assert DocMeta("1.x", "routing", "Routing").to_dict() == {
            "version": "1.x",
            "slug": "routing",
            "title": "Routing",
        }

    def test_document_source_defaults(self) -> None:
        source = DocumentSource(slug="routing", version="1.x", markdown="# Routing")

        assert source.path is None

    def test_document_source_with_path(self) -> None:
        source = DocumentSource("routing", "1.x", "", path=Path("docs/routing.md"))

        assert source.path == Path("docs/routing.md")

    def test_build_result_defaults(self) -> None:
        result = BuildResult()

        assert result.documents_processed == 0
        assert result.lexemes_generated == 0
        assert result.rendered_files == []
        assert result.lexemes_path is None
