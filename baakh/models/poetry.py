"""
Poetry (poem) and category models.
"""

import logging

from baakh.database import db
from .mixins.basic_columns import BasicColumnsMixin

logger = logging.getLogger(__name__)

# Parent record for couplets that do not belong to any poem
SYSTEM_POETRY_ID = 0
SYSTEM_POETRY_SLUG = 'system-standalone-couplets'
SYSTEM_POETRY_TAGS = 'system,standalone,couplets'


class Category(db.Model, BasicColumnsMixin):
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(255), nullable=False, unique=True)

    poetry = db.relationship('Poetry', back_populates='category', lazy='dynamic')

    def to_dict(self):
        return {'id': self.id, 'slug': self.slug}


class Poetry(db.Model, BasicColumnsMixin):
    """A poem; its couplets hang off it through poetry_couplets.poetry_id."""
    __tablename__ = 'poetry_main'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    poetry_slug = db.Column(db.String(255), nullable=False, index=True)
    poetry_tags = db.Column(db.Text)
    poet_id = db.Column(db.Integer, db.ForeignKey('poets.id', ondelete='SET NULL'), nullable=True, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True)
    visibility = db.Column(db.Boolean, default=True, nullable=False)
    is_featured = db.Column(db.Boolean, default=False, nullable=False)

    poet = db.relationship('Poet', back_populates='poetry')
    category = db.relationship('Category', back_populates='poetry')
    couplets = db.relationship('Couplet', back_populates='poetry', lazy='dynamic')

    @property
    def is_system_record(self):
        return self.id == SYSTEM_POETRY_ID

    @classmethod
    def ensure_system_record(cls):
        """
        Create the standalone-couplets parent row if it is missing.

        The row is added to the current session; the caller commits.
        """
        record = db.session.get(cls, SYSTEM_POETRY_ID)
        if record is None:
            logger.info("Creating system poetry record for standalone couplets")
            record = cls(
                id=SYSTEM_POETRY_ID,
                poetry_slug=SYSTEM_POETRY_SLUG,
                poetry_tags=SYSTEM_POETRY_TAGS,
                visibility=False,
                is_featured=False,
            )
            db.session.add(record)
            db.session.flush()
        return record

    def to_summary(self):
        return {'id': self.id, 'slug': self.poetry_slug, 'tags': self.poetry_tags}

    def to_dict(self):
        return {
            'id': self.id,
            'poetry_slug': self.poetry_slug,
            'poetry_tags': self.poetry_tags,
            'poet_id': self.poet_id,
            'category_id': self.category_id,
            'category': self.category.to_dict() if self.category else None,
            'visibility': self.visibility,
            'is_featured': self.is_featured,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
