"""
Text normalization helpers shared by the correction, romanization and
couplet-authoring code.

All functions are pure. Word tokens are runs of Unicode letters, marks and
numbers, which keeps Sindhi combining marks attached to their base letters.
"""

import unicodedata
from collections import namedtuple
from typing import Iterator, List

import regex

WORD_RE = regex.compile(r'[\p{L}\p{M}\p{N}]+')

_WHITESPACE_RE = regex.compile(r'\s+')
_SLUG_STRIP_RE = regex.compile(r'[^a-z0-9\s-]')
_HYPHEN_RUN_RE = regex.compile(r'-+')

WordSpan = namedtuple('WordSpan', ['word', 'start', 'end', 'index'])


def nfc(text: str) -> str:
    """Normalize to NFC so lookups match regardless of how marks were typed."""
    return unicodedata.normalize('NFC', text or '')


def normalize_whitespace(text: str) -> str:
    """
    Collapse whitespace runs to a single space on every line and trim each line.

    Line breaks are preserved in number and order, so the result can be
    compared line-by-line with the input.
    """
    if not text:
        return ''
    return '\n'.join(_WHITESPACE_RE.sub(' ', line).strip() for line in text.split('\n'))


def word_spans(text: str, pattern=WORD_RE) -> Iterator[WordSpan]:
    """Yield each word token with its character span and token index."""
    for index, match in enumerate(pattern.finditer(text or '')):
        yield WordSpan(match.group(0), match.start(), match.end(), index)


def tokenize(text: str, pattern=WORD_RE) -> List[str]:
    return [span.word for span in word_spans(text, pattern)]


def distinct_words(text: str) -> List[str]:
    """Distinct tokens in order of first appearance."""
    seen = set()
    words = []
    for word in tokenize(text):
        if word not in seen:
            seen.add(word)
            words.append(word)
    return words


def first_line(text: str) -> str:
    """First non-empty line, trimmed. Empty string when there is none."""
    for line in (text or '').split('\n'):
        line = line.strip()
        if line:
            return line
    return ''


def replace_word(text: str, word: str, replacement: str) -> str:
    """
    Replace every whole-token occurrence of ``word`` with ``replacement``.

    Only complete tokens are substituted; a word that appears inside a
    longer token is left alone.
    """
    if not text or not word:
        return text or ''

    parts = []
    cursor = 0
    for span in word_spans(text):
        if span.word == word:
            parts.append(text[cursor:span.start])
            parts.append(replacement)
            cursor = span.end
    parts.append(text[cursor:])
    return ''.join(parts)


def slugify(text: str) -> str:
    """
    Build a URL slug: lowercase ASCII letters, digits and single hyphens.

    Returns an empty string when nothing usable is left, e.g. for text in a
    non-Latin script.
    """
    slug = (text or '').lower()
    slug = _SLUG_STRIP_RE.sub('', slug)
    slug = _WHITESPACE_RE.sub('-', slug)
    slug = _HYPHEN_RUN_RE.sub('-', slug)
    return slug.strip('-')
