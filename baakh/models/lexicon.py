"""
Dictionary tables behind the romanizer and hesudhar lexicon files.
"""

from baakh.database import db
from .mixins.basic_columns import BasicColumnsMixin, SoftDeleteMixin


class RomanWord(db.Model, BasicColumnsMixin, SoftDeleteMixin):
    """A Sindhi word and its curated roman spelling."""
    __tablename__ = 'baakh_roman_words'

    id = db.Column(db.Integer, primary_key=True)
    word_sd = db.Column(db.String(255), nullable=False, index=True)
    word_roman = db.Column(db.String(255), nullable=False)
    user_id = db.Column(db.String(64))

    def to_dict(self):
        return {
            'id': self.id,
            'word_sd': self.word_sd,
            'word_roman': self.word_roman,
            'user_id': self.user_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class HesudharEntry(db.Model, BasicColumnsMixin, SoftDeleteMixin):
    """A misspelled word and its corrected form."""
    __tablename__ = 'baakh_hesudhars'

    id = db.Column(db.Integer, primary_key=True)
    word = db.Column(db.String(255), nullable=False, index=True)
    correct = db.Column(db.String(255), nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'word': self.word,
            'correct': self.correct,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
