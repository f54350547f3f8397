import re

import pytest

from baakh.text.normalizer import (
    distinct_words, first_line, normalize_whitespace, replace_word, slugify, tokenize, word_spans,
)

SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")

SAMPLES = [
    "",
    "   ",
    "سلام   سلام",
    "  پهرين  سٽ \n\n  ٻي\t\tسٽ  ",
    "line one\r\nline   two",
    "\n\n\n",
    "a \t b   c",
]


@pytest.mark.parametrize("text", SAMPLES)
def test_normalize_whitespace_collapses_runs_and_keeps_line_breaks(text):
    result = normalize_whitespace(text)
    for line in result.split("\n"):
        assert "  " not in line
        assert line == line.strip()
    if text:
        assert result.count("\n") == text.count("\n")
    assert normalize_whitespace(result) == result


def test_double_space_between_words():
    assert normalize_whitespace("سلام   سلام") == "سلام سلام"


def test_tokenize_keeps_marks_with_letters():
    # zabar (U+064E) stays attached to its letter
    assert tokenize("دِل، سَنڌ!") == ["دِل", "سَنڌ"]


def test_word_spans_report_offsets_and_index():
    spans = list(word_spans("ab  cd"))
    assert [(s.word, s.start, s.end, s.index) for s in spans] == [("ab", 0, 2, 0), ("cd", 4, 6, 1)]


def test_distinct_words_keeps_first_appearance_order():
    assert distinct_words("دل سنڌ دل ڪتاب سنڌ") == ["دل", "سنڌ", "ڪتاب"]


def test_first_line_skips_blank_lines():
    assert first_line("\n   \n  پهرين سٽ  \nٻي") == "پهرين سٽ"
    assert first_line("  \n ") == ""
    assert first_line(None) == ""


def test_replace_word_only_touches_whole_tokens():
    text = "ڪتاب ڪتابن ۾ ڪتاب،"
    assert replace_word(text, "ڪتاب", "kitab") == "kitab ڪتابن ۾ kitab،"


def test_replace_word_preserves_surrounding_whitespace():
    assert replace_word("  dil\n dil  ", "dil", "heart") == "  heart\n heart  "


@pytest.mark.parametrize("text,expected", [
    ("Hello World", "hello-world"),
    ("  Jani  Jani!  ", "jani-jani"),
    ("a--b", "a-b"),
    ("-leading and trailing-", "leading-and-trailing"),
    ("sha'ir kalam", "shair-kalam"),
    ("سلام", ""),
    ("", ""),
])
def test_slugify(text, expected):
    assert slugify(text) == expected


@pytest.mark.parametrize("text", [
    "Shah Latif ji Risalo", "dil -- dil", "ĀÄ accents", "123 go", "!!!", "mixed سنڌ text",
])
def test_slugify_output_shape_and_idempotence(text):
    slug = slugify(text)
    assert slug == "" or SLUG_RE.match(slug)
    assert slugify(slug) == slug
