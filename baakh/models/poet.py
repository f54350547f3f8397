"""
Poet model.
"""

from sqlalchemy.orm import validates

from baakh.database import db
from baakh.text.normalizer import slugify
from .mixins.basic_columns import BasicColumnsMixin


class Poet(db.Model, BasicColumnsMixin):
    """A poet with bilingual names and biography."""
    __tablename__ = 'poets'

    id = db.Column(db.Integer, primary_key=True)
    poet_slug = db.Column(db.String(255), nullable=False, unique=True, index=True)
    sindhi_name = db.Column(db.String(255), nullable=False)
    english_name = db.Column(db.String(255), nullable=False)
    sindhi_laqab = db.Column(db.String(255))
    english_laqab = db.Column(db.String(255))
    sindhi_takhalus = db.Column(db.String(255))
    english_takhalus = db.Column(db.String(255))
    sindhi_tagline = db.Column(db.Text)
    english_tagline = db.Column(db.Text)
    sindhi_details = db.Column(db.Text)
    english_details = db.Column(db.Text)
    birth_date = db.Column(db.String(32))
    death_date = db.Column(db.String(32))
    birth_place = db.Column(db.String(255))
    death_place = db.Column(db.String(255))
    tags = db.Column(db.Text)
    file_url = db.Column(db.String(1024))
    is_featured = db.Column(db.Boolean, default=False, nullable=False)
    is_hidden = db.Column(db.Boolean, default=False, nullable=False)

    couplets = db.relationship('Couplet', back_populates='poet', lazy='dynamic')
    poetry = db.relationship('Poetry', back_populates='poet', lazy='dynamic')

    @validates('poet_slug')
    def validate_poet_slug(self, key, value):
        slug = slugify(value or '')
        if not slug:
            raise ValueError("Poet slug must contain latin letters or digits")
        return slug

    def __repr__(self):
        return f'<Poet {self.id}: {self.poet_slug}>'

    @property
    def tag_list(self):
        return [t.strip() for t in (self.tags or '').split(',') if t.strip()]

    def display_name(self, lang='en'):
        if lang == 'sd':
            return self.sindhi_laqab or self.sindhi_name or self.english_name
        return self.english_laqab or self.english_name or self.sindhi_name

    def to_summary(self):
        """Compact shape embedded in couplet responses."""
        return {
            'id': self.id,
            'slug': self.poet_slug,
            'name': self.english_name or self.sindhi_name or 'Unknown',
            'photo': self.file_url,
            'sindhiName': self.sindhi_name,
            'englishName': self.english_name,
            'sindhi_laqab': self.sindhi_laqab,
            'english_laqab': self.english_laqab,
        }

    def to_dict(self, lang=None):
        data = {
            'id': self.id,
            'poet_id': self.id,
            'poet_slug': self.poet_slug,
            'sindhi_name': self.sindhi_name,
            'english_name': self.english_name,
            'sindhi_laqab': self.sindhi_laqab,
            'english_laqab': self.english_laqab,
            'sindhi_takhalus': self.sindhi_takhalus,
            'english_takhalus': self.english_takhalus,
            'sindhi_tagline': self.sindhi_tagline,
            'english_tagline': self.english_tagline,
            'sindhi_details': self.sindhi_details,
            'english_details': self.english_details,
            'birth_date': self.birth_date,
            'death_date': self.death_date,
            'birth_place': self.birth_place,
            'death_place': self.death_place,
            'tags': self.tag_list,
            'file_url': self.file_url,
            'is_featured': self.is_featured,
            'is_hidden': self.is_hidden,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if lang:
            data['display_name'] = self.display_name(lang)
        return data
