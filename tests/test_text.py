"""Tests for HTML escaping and entity conversion."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from sabores.utils.text import (
    EntityConverter,
    decode_entities,
    decode_reference,
    escape_html,
    strip_backslash_escapes,
)


class TestEscapeHtml:
    def test_specials(self) -> None:
        assert escape_html('<a href="x">&') == "&lt;a href=&quot;x&quot;&gt;&amp;"

    def test_single_quote_untouched(self) -> None:
        assert escape_html("it's") == "it's"

    def test_empty(self) -> None:
        assert escape_html("") == ""


class TestDecodeReference:
    @pytest.mark.parametrize(
        ("ref", "expected"),
        [
            ("amp", "&"),
            ("copy", "©"),
            ("#35", "#"),
            ("#x41", "A"),
            ("#X41", "A"),
            ("#0", "\ufffd"),
            ("#xD800", "\ufffd"),
            ("#1114112", "\ufffd"),
        ],
    )
    def test_known(self, ref: str, expected: str) -> None:
        assert decode_reference(ref) == expected

    @pytest.mark.parametrize("ref", ["bogus", "#xZZ", "#", "notit", "copyx"])
    def test_unknown(self, ref: str) -> None:
        assert decode_reference(ref) is None


class TestDecodeEntities:
    def test_complete_references_decoded(self) -> None:
        assert decode_entities("&lt;&#35;&copy;") == "<#\u00a9"

    def test_incomplete_references_kept(self) -> None:
        assert decode_entities("?q=1&copy=2&not=3") == "?q=1&copy=2&not=3"

    def test_unknown_names_kept(self) -> None:
        assert decode_entities("&notit; &bogus;") == "&notit; &bogus;"


class TestStripBackslashEscapes:
    def test_punctuation_only(self) -> None:
        assert strip_backslash_escapes("\\*a\\b\\\\") == "*a\\b\\"


class TestReplaceEntities:
    def test_mixed(self) -> None:
        assert EntityConverter.replace_entities("a &amp; b & \\* &copy;") == "a &amp; b &amp; * ©"

    def test_unknown_entity_escaped(self) -> None:
        assert EntityConverter.replace_entities("&bogus;") == "&amp;bogus;"

    def test_legacy_prefix_is_not_a_reference(self) -> None:
        assert EntityConverter.replace_entities("&notit;") == "&amp;notit;"

    def test_entities_not_processed(self) -> None:
        assert EntityConverter.replace_entities("&copy; &amp;", False) == "&amp;copy; &amp;amp;"

    def test_escapes_not_processed(self) -> None:
        assert EntityConverter.replace_entities("\\* \\<", True, False) == "\\* \\&lt;"

    def test_escaped_specials(self) -> None:
        assert EntityConverter.replace_entities('\\< \\& \\"') == "&lt; &amp; &quot;"

    def test_decoded_specials_escaped(self) -> None:
        assert EntityConverter.replace_entities("&lt;b&gt; &quot;") == "&lt;b&gt; &quot;"

    def test_empty(self) -> None:
        assert EntityConverter.replace_entities("") == ""

    @given(st.text())
    def test_output_has_no_raw_specials(self, text: str) -> None:
        result = EntityConverter.replace_entities(text)
        assert "<" not in result
        assert ">" not in result
        assert '"' not in result

    @given(st.text(alphabet=st.characters(exclude_characters="&<>\"\\")))
    def test_plain_text_unchanged(self, text: str) -> None:
        assert EntityConverter.replace_entities(text) == text
