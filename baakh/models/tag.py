"""
Tag and tag translation models.
"""

from baakh.database import db
from .mixins.basic_columns import BasicColumnsMixin

# Tag types that describe poets rather than poems or couplets
POET_TAG_TYPES = (
    'Era / Tradition',
    'Language',
    'Identity / Group',
    'Form / Style',
    'Theme / Subject',
    'Region / Locale',
    'Stage / Career',
    'Influence / Aesthetic',
    'Genre / Output',
    'Script / Metadata',
)


class Tag(db.Model, BasicColumnsMixin):
    __tablename__ = 'tags'

    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(255), nullable=False, unique=True, index=True)
    label = db.Column(db.String(255), nullable=False)
    tag_type = db.Column(db.String(64), nullable=False, default='Topic')

    translations = db.relationship('TagTranslation', back_populates='tag', lazy='selectin',
                                   cascade='all, delete-orphan')

    def translation(self, lang_code):
        for translation in self.translations:
            if translation.lang_code == lang_code:
                return translation
        return None

    def _translated(self, lang_code):
        translation = self.translation(lang_code)
        if translation is None:
            return {'title': self.label, 'details': self.label}
        return {
            'title': translation.title or self.label,
            'details': translation.detail or self.label,
        }

    def to_dict(self):
        return {
            'id': self.id,
            'slug': self.slug,
            'label': self.label,
            'tag_type': self.tag_type,
            'english': self._translated('en'),
            'sindhi': self._translated('sd'),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class TagTranslation(db.Model, BasicColumnsMixin):
    __tablename__ = 'tags_translations'

    tag_id = db.Column(db.Integer, db.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True)
    lang_code = db.Column(db.String(2), primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    detail = db.Column(db.Text)

    tag = db.relationship('Tag', back_populates='translations')
