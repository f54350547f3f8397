"""
Models package initialization.
"""

from baakh.database import db
from .mixins import BasicColumnsMixin, SoftDeleteMixin
from .poet import Poet
from .poetry import Poetry, Category, SYSTEM_POETRY_ID
from .couplet import Couplet, LANGUAGES, join_tags, split_tags
from .tag import Tag, TagTranslation, POET_TAG_TYPES
from .lexicon import RomanWord, HesudharEntry
from .timeline import TimelinePeriod, TimelineEvent

__all__ = [
    'db',
    'BasicColumnsMixin',
    'SoftDeleteMixin',
    'Poet',
    'Poetry',
    'Category',
    'SYSTEM_POETRY_ID',
    'Couplet',
    'LANGUAGES',
    'join_tags',
    'split_tags',
    'Tag',
    'TagTranslation',
    'POET_TAG_TYPES',
    'RomanWord',
    'HesudharEntry',
    'TimelinePeriod',
    'TimelineEvent',
]
