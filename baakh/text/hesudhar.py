"""
Hesudhar: Sindhi spelling correction.

Two flavours are provided. ``HesudharCorrector`` replaces whole words using a
dictionary of known misspellings. ``smart_hesudhar`` and ``global_hesudhar``
apply the heh-letter rule on its own, converting ``ه`` (Arabic heh) into
``ھ`` (heh doachashmee).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import regex

from baakh.text.normalizer import nfc, word_spans

# Letters, marks, numbers, underscore, apostrophes and dashes
HESUDHAR_WORD_RE = regex.compile(r"[\p{L}\p{M}\p{N}_'\-]+")

HEH = 'ه'
HEH_DOACHASHMEE = 'ھ'
_ARABIC_BLOCK_RE = regex.compile(r"[\u0600-\u06FF]")


@dataclass
class HesudharCorrection:
    original_word: str
    corrected_word: str
    position: int

    def to_dict(self):
        return {
            'originalWord': self.original_word,
            'correctedWord': self.corrected_word,
            'position': self.position,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            original_word=data.get('originalWord') or data.get('incorrectWord') or '',
            corrected_word=data.get('correctedWord') or '',
            position=int(data.get('position') or 0),
        )


@dataclass
class CorrectionResult:
    original_text: str
    corrected_text: str
    corrections: List[HesudharCorrection] = field(default_factory=list)

    @property
    def message(self):
        if self.corrections:
            return f"Applied {len(self.corrections)} corrections"
        return "No corrections needed"

    def to_dict(self):
        return {
            'correctedText': self.corrected_text,
            'corrections': [c.to_dict() for c in self.corrections],
            'originalText': self.original_text,
            'message': self.message,
        }


class HesudharCorrector:
    """Dictionary-driven whole-word corrector."""

    def __init__(self, corrections: Optional[Dict[str, str]] = None):
        self.corrections = {nfc(k): v for k, v in (corrections or {}).items() if k and v}

    def __len__(self):
        return len(self.corrections)

    def correct(self, text: str) -> CorrectionResult:
        normalized = nfc(text)
        applied = []
        parts = []
        cursor = 0
        for span in word_spans(normalized, HESUDHAR_WORD_RE):
            replacement = self.corrections.get(span.word)
            if replacement is None:
                continue
            applied.append(HesudharCorrection(span.word, replacement, span.index))
            parts.append(normalized[cursor:span.start])
            parts.append(replacement)
            cursor = span.end
        parts.append(normalized[cursor:])
        return CorrectionResult(text, ''.join(parts), applied)


def smart_hesudhar(text: str):
    """
    Replace ``ه`` only where it sits between two Arabic-script characters.

    Returns a ``(output, replacements)`` tuple.
    """
    chars = list(text or '')
    replacements = 0
    for i, char in enumerate(chars):
        if char != HEH:
            continue
        prev_char = chars[i - 1] if i > 0 else ' '
        next_char = chars[i + 1] if i + 1 < len(chars) else ' '
        if _ARABIC_BLOCK_RE.match(prev_char) and _ARABIC_BLOCK_RE.match(next_char):
            chars[i] = HEH_DOACHASHMEE
            replacements += 1
    return ''.join(chars), replacements


def global_hesudhar(text: str):
    """Replace every ``ه``. Returns a ``(output, replacements)`` tuple."""
    text = text or ''
    return text.replace(HEH, HEH_DOACHASHMEE), text.count(HEH)


def apply_hesudhar_mode(text: str, mode: str = 'smart'):
    if mode == 'global':
        return global_hesudhar(text)
    return smart_hesudhar(text)
