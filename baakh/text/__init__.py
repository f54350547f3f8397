"""
Sindhi text processing: normalization, hesudhar correction, romanization
and the lexicon files both engines read.
"""

from .normalizer import normalize_whitespace, slugify, tokenize, replace_word
from .hesudhar import HesudharCorrector, HesudharCorrection
from .romanizer import Romanizer, RomanMapping, transliterate

__all__ = [
    'normalize_whitespace',
    'slugify',
    'tokenize',
    'replace_word',
    'HesudharCorrector',
    'HesudharCorrection',
    'Romanizer',
    'RomanMapping',
    'transliterate',
]
