"""
Literary timeline: periods and the events placed within them.
"""

from baakh.database import db
from .mixins.basic_columns import BasicColumnsMixin


def _pick(lang, sindhi, english):
    return sindhi if lang == 'sd' else english


class TimelinePeriod(db.Model, BasicColumnsMixin):
    __tablename__ = 'timeline_periods'

    id = db.Column(db.Integer, primary_key=True)
    period_slug = db.Column(db.String(255), nullable=False, unique=True, index=True)
    start_year = db.Column(db.Integer, nullable=False)
    end_year = db.Column(db.Integer)
    is_ongoing = db.Column(db.Boolean, default=False, nullable=False)
    sindhi_name = db.Column(db.String(255), nullable=False)
    english_name = db.Column(db.String(255), nullable=False)
    sindhi_description = db.Column(db.Text)
    english_description = db.Column(db.Text)
    sindhi_characteristics = db.Column(db.JSON, default=list)
    english_characteristics = db.Column(db.JSON, default=list)
    color_code = db.Column(db.String(16), default='#3B82F6')
    icon_name = db.Column(db.String(64))
    is_featured = db.Column(db.Boolean, default=False, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)

    events = db.relationship('TimelineEvent', back_populates='period', lazy='dynamic')

    def to_summary(self, lang='en'):
        return {
            'id': self.id,
            'slug': self.period_slug,
            'name': _pick(lang, self.sindhi_name, self.english_name),
            'color_code': self.color_code,
        }

    def to_dict(self, lang='en'):
        return {
            'id': self.id,
            'period_slug': self.period_slug,
            'start_year': self.start_year,
            'end_year': self.end_year,
            'is_ongoing': self.is_ongoing,
            'name': _pick(lang, self.sindhi_name, self.english_name),
            'description': _pick(lang, self.sindhi_description, self.english_description),
            'characteristics': _pick(lang, self.sindhi_characteristics, self.english_characteristics) or [],
            'color_code': self.color_code,
            'icon_name': self.icon_name,
            'is_featured': self.is_featured,
            'sort_order': self.sort_order,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class TimelineEvent(db.Model, BasicColumnsMixin):
    __tablename__ = 'timeline_events'

    id = db.Column(db.Integer, primary_key=True)
    event_slug = db.Column(db.String(255), nullable=False, unique=True, index=True)
    event_date = db.Column(db.String(32))
    event_year = db.Column(db.Integer, nullable=False, index=True)
    is_approximate = db.Column(db.Boolean, default=False, nullable=False)
    period_id = db.Column(db.Integer, db.ForeignKey('timeline_periods.id', ondelete='SET NULL'), index=True)
    poet_id = db.Column(db.Integer, db.ForeignKey('poets.id', ondelete='SET NULL'), index=True)
    sindhi_title = db.Column(db.String(255), nullable=False)
    english_title = db.Column(db.String(255), nullable=False)
    sindhi_description = db.Column(db.Text)
    english_description = db.Column(db.Text)
    sindhi_location = db.Column(db.String(255))
    english_location = db.Column(db.String(255))
    event_type = db.Column(db.String(64), default='historical', nullable=False)
    importance_level = db.Column(db.Integer, default=1, nullable=False)
    is_featured = db.Column(db.Boolean, default=False, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)

    period = db.relationship('TimelinePeriod', back_populates='events', lazy='joined')
    poet = db.relationship('Poet', lazy='joined')

    def to_dict(self, lang='en'):
        return {
            'id': self.id,
            'event_slug': self.event_slug,
            'event_date': self.event_date,
            'event_year': self.event_year,
            'is_approximate': self.is_approximate,
            'title': _pick(lang, self.sindhi_title, self.english_title),
            'description': _pick(lang, self.sindhi_description, self.english_description),
            'location': _pick(lang, self.sindhi_location, self.english_location),
            'event_type': self.event_type,
            'importance_level': self.importance_level,
            'is_featured': self.is_featured,
            'sort_order': self.sort_order,
            'period': self.period.to_summary(lang) if self.period else None,
            'poet': {
                'id': self.poet.id,
                'slug': self.poet.poet_slug,
                'name': _pick(lang, self.poet.sindhi_name, self.poet.english_name),
                'photo': self.poet.file_url,
            } if self.poet else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
