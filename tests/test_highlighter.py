"""Tests for server-side syntax highlighting."""

from __future__ import annotations

import logging
import re
from unittest.mock import patch

import pytest

from docbuild.compile.highlighter import SyntaxHighlighter, highlight_code
from docbuild.config import HighlightConfig


class TestHighlighting:
    """Test token markup and class propagation."""

    def test_highlights_php(self) -> None:
        """PHP blocks get token spans."""
        html = '<pre><code class="language-php">&lt;?php\nfunction test() {\n    return true;\n}</code></pre>'

        highlighted = highlight_code(html)

        assert '<span class="token' in highlighted
        assert 'class="language-php"' in highlighted

    def test_php_without_open_tag(self) -> None:
        """PHP snippets without <?php are still tokenized."""
        highlighted = highlight_code('<pre><code class="language-php">$router->get("/users");</code></pre>')

        assert '<span class="token variable">$router</span>' in highlighted

    @pytest.mark.parametrize(
        ("lang", "code"),
        [
            ("bash", "echo &quot;test&quot;"),
            ("json", "{&quot;key&quot;: &quot;value&quot;}"),
            ("yaml", "key: value"),
            ("xml", "&lt;tag&gt;content&lt;/tag&gt;"),
        ],
    )
    def test_highlights_supported_languages(self, lang: str, code: str) -> None:
        """Every registered language is tokenized."""
        highlighted = highlight_code(f'<pre><code class="language-{lang}">{code}</code></pre>')

        assert f'class="language-{lang}"' in highlighted
        assert '<span class="token' in highlighted

    def test_adds_language_class_to_pre(self) -> None:
        """The parent <pre> carries the language class too."""
        highlighted = highlight_code('<pre><code class="language-php">function test() {}</code></pre>')

        assert re.search(r'<pre[^>]*class="[^"]*language-php[^"]*"', highlighted)

    def test_existing_pre_classes_kept(self) -> None:
        """Classes already on <pre> are preserved."""
        highlighted = highlight_code('<pre class="wide"><code class="language-bash">ls</code></pre>')

        assert re.search(r'<pre class="wide language-bash">', highlighted)

    def test_code_text_preserved(self) -> None:
        """Tokenizing does not lose characters."""
        highlighted = highlight_code('<pre><code class="language-bash">echo hello &amp;&amp; ls</code></pre>')

        assert "echo" in highlighted
        assert "hello" in highlighted
        assert "&amp;&amp;" in highlighted

    def test_empty_code_block(self) -> None:
        """Empty blocks survive."""
        highlighted = highlight_code('<pre><code class="language-php"></code></pre>')

        assert "<pre" in highlighted
        assert "<code" in highlighted

    def test_preserves_surrounding_html(self) -> None:
        """Markup outside code blocks is untouched."""
        html = (
            '<h1 id="title">Title</h1>\n<p>Paragraph</p>\n'
            '<pre><code class="language-php">function test() {}</code></pre>\n'
            '<div class="custom">Content</div>\n'
        )

        highlighted = highlight_code(html)

        assert '<h1 id="title">Title</h1>' in highlighted
        assert "<p>Paragraph</p>" in highlighted
        assert '<div class="custom">Content</div>' in highlighted

    def test_defaults_to_php(self) -> None:
        """Code without a language class is highlighted as PHP by default."""
        highlighted = highlight_code("<pre><code>function test() {}</code></pre>")

        assert '<pre class="language-php">' in highlighted
        assert 'class="language-php"' in highlighted.split("<code", 1)[1]
        assert '<span class="token keyword">function</span>' in highlighted
        assert "copy-button" in highlighted

    def test_inline_code_has_no_default(self) -> None:
        """The default language applies to pre > code only."""
        html = "<p>Call <code>route()</code></p>"

        assert highlight_code(html) == html

    def test_default_language_configurable(self) -> None:
        """Another default can be configured, or none at all."""
        bash_config = HighlightConfig(default_language="bash")
        bash = SyntaxHighlighter(bash_config).highlight("<pre><code>echo hi</code></pre>")
        plain_html = "<pre><code>plain text</code></pre>"
        plain = SyntaxHighlighter(HighlightConfig(default_language=None)).highlight(plain_html)

        assert 'class="language-bash"' in bash
        assert plain == plain_html


class TestUnknownLanguages:
    """Test degradation for unsupported grammars."""

    def test_unknown_language_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        """An unregistered language logs a warning and leaves the text alone."""
        with caplog.at_level(logging.WARNING, logger="docbuild.compile.highlighter"):
            highlighted = highlight_code('<code class="language-unknown">text</code>')

        assert "unknown" in caplog.text
        assert "text" in highlighted
        assert "token" not in highlighted
        assert highlighted == '<code class="language-unknown">text</code>'

    def test_unknown_language_does_not_affect_others(self) -> None:
        """Other blocks in the fragment are still highlighted."""
        html = (
            '<pre><code class="language-cobol">DISPLAY "HI".</code></pre>'
            '<pre><code class="language-bash">echo hi</code></pre>'
        )

        highlighted = highlight_code(html)

        assert 'DISPLAY "HI".' in highlighted
        assert '<span class="token builtin">echo</span>' in highlighted
        assert highlighted.count('class="button-wrapper"') == 1

    def test_tokenizer_failure_is_isolated(self, caplog: pytest.LogCaptureFixture) -> None:
        """A failing block is logged and skipped; siblings continue."""
        calls = []

        def fake_highlight(code, lexer, formatter):
            calls.append(code)
            if len(calls) == 1:
                raise RuntimeError("tokenizer exploded")
            return '<span class="token keyword">ok</span>'

        html = (
            '<pre><code class="language-php">first()</code></pre>'
            '<pre><code class="language-php">second()</code></pre>'
        )
        with patch("docbuild.compile.highlighter.pygments_highlight", side_effect=fake_highlight):
            with caplog.at_level(logging.ERROR, logger="docbuild.compile.highlighter"):
                highlighted = highlight_code(html)

        assert '<pre><code class="language-php">first()</code></pre>' in highlighted
        assert '<span class="token keyword">ok</span>' in highlighted
        assert "tokenizer exploded" in caplog.text


class TestCopyButton:
    """Test copy affordance injection."""

    def test_adds_copy_button(self) -> None:
        """Highlighted <pre> blocks get a copy button."""
        highlighted = highlight_code('<pre><code class="language-php">function test() {}</code></pre>')

        assert '<div class="button-wrapper">' in highlighted
        assert 'class="copy-button"' in highlighted
        assert 'title="Copy to clipboard"' in highlighted
        assert "<svg" in highlighted
        assert 'class="bi bi-copy"' in highlighted

    def test_no_copy_class(self) -> None:
        """<pre class="no-copy"> blocks get no button."""
        highlighted = highlight_code('<pre class="no-copy"><code class="language-php">function test() {}</code></pre>')

        assert 'class="button-wrapper"' not in highlighted
        assert 'class="copy-button"' not in highlighted

    def test_button_precedes_code(self) -> None:
        """The button is the first child of <pre>."""
        highlighted = highlight_code('<pre><code class="language-php">function test() {}</code></pre>')

        assert highlighted.startswith('<pre class="language-php"><div class="button-wrapper">')
        assert highlighted.index('class="button-wrapper"') < highlighted.index("<code")

    def test_code_without_pre(self) -> None:
        """Inline code is highlighted but gets no button."""
        highlighted = highlight_code('<code class="language-php">function test() {}</code>')

        assert "<code" in highlighted
        assert "button-wrapper" not in highlighted

    def test_every_block_gets_a_button(self) -> None:
        """Each highlighted block is handled independently."""
        html = (
            "<h1>Documentation</h1>\n"
            '<pre><code class="language-php">echo "test";</code></pre>\n'
            "<p>Some text</p>\n"
            '<pre><code class="language-bash">npm install</code></pre>\n'
            '<pre><code class="language-json">{"key": "value"}</code></pre>\n'
        )

        highlighted = highlight_code(html)

        assert highlighted.count('class="button-wrapper"') == 3
        assert highlighted.count('<span class="token') > 0

    def test_copy_button_can_be_disabled(self) -> None:
        """copy_button=False suppresses the affordance."""
        highlighter = SyntaxHighlighter(HighlightConfig(copy_button=False))

        highlighted = highlighter.highlight('<pre><code class="language-bash">ls</code></pre>')

        assert "button-wrapper" not in highlighted
