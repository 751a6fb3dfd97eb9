"""Tests for text and vector helpers."""

import math

import pytest

from minirag.textutils import (
    cosine_similarity,
    normalize_text,
    normalize_vector,
    sentence_spans,
    split_sentences,
    truncate_text,
)


class TestNormalizeText:
    """Tests for normalize_text."""

    def test_collapses_whitespace(self) -> None:
        """Runs of spaces, tabs and newlines become one space."""
        assert normalize_text("a  \n\t b\n\nc") == "a b c"

    def test_strips_ends(self) -> None:
        """Leading and trailing whitespace is removed."""
        assert normalize_text("  hello  ") == "hello"

    def test_removes_control_characters(self) -> None:
        """Control characters are dropped."""
        assert normalize_text("x\x00y\x07z") == "xyz"

    def test_information_separators_are_dropped(self) -> None:
        """U+001C..U+001F are removed, not treated as word breaks."""
        assert normalize_text("a\x1cb\x1dc\x1ed\x1fe") == "abcde"

    def test_unicode_spaces_collapse(self) -> None:
        """Non-ASCII spaces separate words like ASCII ones."""
        assert normalize_text("退款　流程\xa0说明") == "退款 流程 说明"

    def test_keeps_cjk(self) -> None:
        """CJK text and punctuation survive."""
        assert normalize_text("退款  流程。") == "退款 流程。"

    def test_empty(self) -> None:
        """Empty input stays empty."""
        assert normalize_text("") == ""


class TestSplitSentences:
    """Tests for split_sentences and sentence_spans."""

    def test_english_sentences(self) -> None:
        """Sentences end at . ! and ?."""
        assert split_sentences("Hello world. How are you? Fine!") == [
            "Hello world.",
            "How are you?",
            "Fine!",
        ]

    def test_chinese_sentences(self) -> None:
        """Full-width terminators split sentences."""
        text = "退款需要在7天内申请。退款审核需要3个工作日。"
        assert split_sentences(text) == ["退款需要在7天内申请。", "退款审核需要3个工作日。"]

    def test_decimal_point_is_a_boundary(self) -> None:
        """No decimal handling: 3.14 splits after the point."""
        assert split_sentences("3.14") == ["3.", "14"]

    def test_single_terminator_is_not_a_sentence(self) -> None:
        """A lone terminator keeps accumulating."""
        assert split_sentences("..") == [".."]
        assert split_sentences(".") == ["."]

    def test_remainder_is_emitted(self) -> None:
        """Text after the last terminator is a final sentence."""
        assert split_sentences("One. two") == ["One.", "two"]

    def test_whitespace_only_remainder_dropped(self) -> None:
        """Trailing whitespace does not produce an empty sentence."""
        assert split_sentences("One.   ") == ["One."]

    def test_empty(self) -> None:
        """Empty text has no sentences."""
        assert split_sentences("") == []
        assert split_sentences("   \n ") == []

    def test_spans_point_into_text(self) -> None:
        """Spans are trimmed code-point offsets."""
        text = "  Hi. Yo"
        spans = sentence_spans(text)
        assert spans == [(2, 5), (6, 8)]
        assert [text[s:e] for s, e in spans] == split_sentences(text)


class TestTruncateText:
    """Tests for truncate_text."""

    def test_short_text_unchanged(self) -> None:
        """Text within the limit is returned as is."""
        assert truncate_text("abc", 3) == "abc"

    def test_long_text_cut(self) -> None:
        """Longer text is cut by code points and marked."""
        assert truncate_text("退款需要在7天内申请", 4) == "退款需要..."


class TestCosineSimilarity:
    """Tests for cosine_similarity."""

    def test_identical_vectors(self) -> None:
        """A vector is fully similar to itself."""
        v = [0.3, 1.2, -0.5]
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_orthogonal_vectors(self) -> None:
        """Vectors with disjoint support score 0."""
        assert cosine_similarity([1.0, 0.0, 2.0], [0.0, 3.0, 0.0]) == 0.0

    def test_length_mismatch(self) -> None:
        """Different lengths score 0 instead of failing."""
        assert cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0.0

    def test_zero_vector(self) -> None:
        """A zero vector scores 0, not NaN."""
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0

    def test_scale_invariant(self) -> None:
        """Scaling does not change the score."""
        assert cosine_similarity([1.0, 2.0], [2.0, 4.0]) == pytest.approx(1.0)


class TestNormalizeVector:
    """Tests for normalize_vector."""

    def test_unit_length(self) -> None:
        """Vector is scaled to unit length in place."""
        v = [3.0, 4.0]
        normalize_vector(v)
        assert v == pytest.approx([0.6, 0.8])
        assert math.sqrt(sum(x * x for x in v)) == pytest.approx(1.0)

    def test_zero_vector_untouched(self) -> None:
        """Zero vector is left as is."""
        v = [0.0, 0.0, 0.0]
        normalize_vector(v)
        assert v == [0.0, 0.0, 0.0]
