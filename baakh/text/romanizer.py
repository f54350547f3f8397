"""
Sindhi to Roman transliteration.

``Romanizer`` replaces whole words using the curated romanization dictionary
and then maps Sindhi punctuation to ASCII. ``transliterate`` is the cruder
letter-by-letter fallback used when a word has no dictionary entry.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import regex

from baakh.text.hesudhar import apply_hesudhar_mode
from baakh.text.normalizer import first_line, nfc, slugify, word_spans

# Letters, marks, numbers and symbols (some Sindhi letters such as ۾ are symbols)
ROMAN_WORD_RE = regex.compile(r'[\p{L}\p{M}\p{N}\p{S}]+')

PUNCTUATION_MAP = {
    '،': ',',
    '؛': ';',
    '؟': '?',
    '“': '"',
    '”': '"',
    '۔': '.',
    '…': '...',
    '–': '-',
    '—': '--',
}

_PUNCTUATION_RE = regex.compile('[' + ''.join(regex.escape(ch) for ch in PUNCTUATION_MAP) + ']')

CHAR_MAP = {
    'ا': 'a', 'آ': 'aa', 'ب': 'b', 'پ': 'p', 'ت': 't', 'ٹ': 'ṭ', 'ث': 's',
    'ج': 'j', 'چ': 'ch', 'ح': 'h', 'خ': 'kh', 'د': 'd', 'ڊ': 'ḍ', 'ذ': 'z',
    'ر': 'r', 'ڙ': 'ṛ', 'ز': 'z', 'ژ': 'zh', 'س': 's', 'ش': 'sh', 'ص': 's',
    'ض': 'z', 'ط': 't', 'ظ': 'z', 'ع': "'", 'غ': 'gh', 'ف': 'f', 'ق': 'q',
    'ڪ': 'k', 'ک': 'kh', 'گ': 'g', 'ڳ': 'gʻ', 'ل': 'l', 'م': 'm', 'ن': 'n',
    'ڻ': 'ṇ', 'و': 'w', 'ؤ': 'o', 'ه': 'h', 'ھ': 'h', 'ء': 'ʼ', 'ي': 'y',
    'ئ': 'i', 'ۀ': 'e', 'ۆ': 'o', 'ۇ': 'u', 'ی': 'y', 'ٔ': '',
}

# Common words used when the dictionary has not been synced yet
DEFAULT_DICTIONARY = {
    'ڀٽائي': 'Bhittai',
    'سنڌ': 'Sindh',
    'دل': 'dil',
    'محبت': 'mohabbat',
    'شاعر': "sha'ir",
    'ڪلام': 'kalam',
    'نظم': 'nazm',
    'غزل': 'ghazal',
    'حمد': 'hamd',
    'نعت': 'naat',
    'سلام': 'salam',
    'دعا': 'dua',
}


@dataclass
class RomanMapping:
    sindhi_word: str
    roman_word: str
    position: int = 0

    def to_dict(self):
        return {
            'sindhiWord': self.sindhi_word,
            'romanWord': self.roman_word,
            'position': self.position,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            sindhi_word=data.get('sindhiWord') or '',
            roman_word=data.get('romanWord') or '',
            position=int(data.get('position') or 0),
        )


@dataclass
class RomanizationResult:
    original_text: str
    romanized_text: str
    mappings: List[RomanMapping] = field(default_factory=list)

    @property
    def message(self):
        if self.mappings:
            return f"Applied {len(self.mappings)} romanizations"
        return "No romanizations found"

    def to_dict(self):
        return {
            'romanizedText': self.romanized_text,
            'mappings': [m.to_dict() for m in self.mappings],
            'originalText': self.original_text,
            'message': self.message,
        }


def replace_punctuation(text: str) -> str:
    return _PUNCTUATION_RE.sub(lambda m: PUNCTUATION_MAP[m.group(0)], text or '')


class Romanizer:
    """Dictionary-driven word romanizer."""

    def __init__(self, mappings: Optional[Dict[str, str]] = None):
        self.mappings = {nfc(k): v for k, v in (mappings or {}).items() if k and v}

    def __len__(self):
        return len(self.mappings)

    def romanize(self, text: str) -> RomanizationResult:
        normalized = nfc(text)
        applied = []
        parts = []
        cursor = 0
        for span in word_spans(normalized, ROMAN_WORD_RE):
            roman = self.mappings.get(span.word)
            if roman is None:
                continue
            applied.append(RomanMapping(span.word, roman, span.index))
            parts.append(normalized[cursor:span.start])
            parts.append(roman)
            cursor = span.end
        parts.append(normalized[cursor:])
        return RomanizationResult(text, replace_punctuation(''.join(parts)), applied)

    def romanize_to_slug(self, text: str) -> str:
        """Slug of the romanized first non-empty line."""
        line = first_line(text)
        if not line:
            return ''
        return slugify(self.romanize(line).romanized_text)


def transliterate_word(word: str, dictionary: Optional[Dict[str, str]] = None):
    """Return ``(roman, found)``; ``found`` is False for letter-by-letter output."""
    lookup = dictionary if dictionary is not None else DEFAULT_DICTIONARY
    if word in lookup:
        return lookup[word], True
    return ''.join(CHAR_MAP.get(ch, ch) for ch in word), False


def transliterate(text: str, mode: str = 'smart', dictionary: Optional[Dict[str, str]] = None) -> str:
    """Apply hesudhar in the given mode, then romanize every word token."""
    corrected, _ = apply_hesudhar_mode(nfc(text), mode)
    parts = []
    cursor = 0
    for span in word_spans(corrected, ROMAN_WORD_RE):
        roman, _ = transliterate_word(span.word, dictionary)
        parts.append(corrected[cursor:span.start])
        parts.append(roman)
        cursor = span.end
    parts.append(corrected[cursor:])
    return ''.join(parts)
