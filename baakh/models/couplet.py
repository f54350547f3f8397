"""
Couplet model.

A couplet authored in both languages is stored as two rows that share
couplet_slug, poet_id and couplet_tags and differ in lang.
"""

from baakh.database import db
from .mixins.basic_columns import BasicColumnsMixin
from .poetry import SYSTEM_POETRY_ID

LANGUAGES = ('sd', 'en')


def split_tags(value):
    return [t.strip() for t in (value or '').split(',') if t.strip()]


def join_tags(tags):
    """Tags arrive as a list or a comma-separated string; store ", "-joined."""
    if tags is None:
        return ''
    if isinstance(tags, str):
        return ', '.join(split_tags(tags))
    return ', '.join(str(t).strip() for t in tags if str(t).strip())


class Couplet(db.Model, BasicColumnsMixin):
    __tablename__ = 'poetry_couplets'

    id = db.Column(db.Integer, primary_key=True)
    poetry_id = db.Column(db.Integer, db.ForeignKey('poetry_main.id'), nullable=False,
                          default=SYSTEM_POETRY_ID, index=True)
    poet_id = db.Column(db.Integer, db.ForeignKey('poets.id', ondelete='CASCADE'), nullable=False, index=True)
    couplet_slug = db.Column(db.String(255), nullable=False, index=True)
    couplet_tags = db.Column(db.Text, default='')
    couplet_text = db.Column(db.Text, nullable=False)
    lang = db.Column(db.String(2), nullable=False, default='sd', index=True)

    poet = db.relationship('Poet', back_populates='couplets', lazy='joined')
    poetry = db.relationship('Poetry', back_populates='couplets', lazy='joined')

    __table_args__ = (
        db.UniqueConstraint('couplet_slug', 'lang', name='poetry_couplets_slug_lang_key'),
        db.CheckConstraint("lang IN ('sd', 'en')", name='poetry_couplets_lang_check'),
    )

    def __repr__(self):
        return f'<Couplet {self.id}: {self.couplet_slug} [{self.lang}]>'

    @property
    def lines(self):
        return [line for line in (self.couplet_text or '').split('\n') if line.strip()]

    @property
    def tags(self):
        return split_tags(self.couplet_tags)

    def to_dict(self, include_poet=True):
        data = {
            'id': self.id,
            'poetry_id': self.poetry_id,
            'poet_id': self.poet_id,
            'couplet_text': self.couplet_text,
            'couplet_slug': self.couplet_slug,
            'couplet_tags': self.couplet_tags,
            'lang': self.lang,
            'lines': self.lines,
            'tags': self.tags,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_poet:
            data['poet'] = self.poet.to_summary() if self.poet else None
            data['poetry'] = (
                self.poetry.to_summary()
                if self.poetry is not None and not self.poetry.is_system_record
                else None
            )
        return data
