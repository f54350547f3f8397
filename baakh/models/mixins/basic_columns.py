"""
Basic columns mixin for models.
Provides the timestamp columns every table carries, plus soft deletion for
the dictionary tables.
"""

from datetime import datetime, timezone

from baakh.database import db


def utcnow():
    """Naive UTC timestamp, comparable across SQLite and Postgres."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BasicColumnsMixin:
    """Mixin to add only essential columns to models."""
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class SoftDeleteMixin:
    """Rows are hidden by setting deleted_at instead of being removed."""
    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def soft_delete(self):
        self.deleted_at = utcnow()
        self.updated_at = self.deleted_at

    @classmethod
    def active(cls):
        return cls.query.filter(cls.deleted_at.is_(None))
