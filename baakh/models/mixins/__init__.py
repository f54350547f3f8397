"""
Model mixins for common functionality.
"""

from .basic_columns import BasicColumnsMixin, SoftDeleteMixin, utcnow

__all__ = [
    'BasicColumnsMixin',
    'SoftDeleteMixin',
    'utcnow',
]
