"""
Search, sort and pagination helpers shared by every list endpoint.
"""

import math
from dataclasses import dataclass
from typing import List

from sqlalchemy import asc, desc, or_


@dataclass
class Page:
    items: List
    total: int
    page: int
    limit: int

    @property
    def total_pages(self):
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_more(self):
        return self.page * self.limit < self.total

    def meta(self):
        return {
            'total': self.total,
            'page': self.page,
            'limit': self.limit,
            'totalPages': self.total_pages,
            'hasMore': self.has_more,
        }


def _escape_like(term):
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def apply_search(query, term, columns):
    """Case-insensitive substring match of ``term`` against any of ``columns``."""
    term = (term or '').strip()
    if not term or not columns:
        return query
    pattern = f"%{_escape_like(term)}%"
    return query.filter(or_(*[column.ilike(pattern, escape="\\") for column in columns]))


def apply_sort(query, model, sort_by, sort_order, allowed, default):
    """Order by a whitelisted column; unknown names fall back to ``default``."""
    column_name = sort_by if sort_by in allowed else default
    column = getattr(model, column_name)
    direction = asc if (sort_order or '').lower() == 'asc' else desc
    # id breaks ties so pages never overlap
    return query.order_by(direction(column), direction(model.id))


def paginate(query, page, limit):
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return Page(items=items, total=total, page=page, limit=limit)
