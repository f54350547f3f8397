"""
Public read API: poets, couplets, tags and the literary timeline.
"""

import structlog
from flask import Blueprint, request
from sqlalchemy import func, or_

from baakh.caching import cached_response
from baakh.database import db
from baakh.errors import NotFoundError
from baakh.models import (
    Category, Couplet, Poet, Poetry, Tag, TimelineEvent, TimelinePeriod,
    POET_TAG_TYPES, SYSTEM_POETRY_ID,
)
from baakh.schemas import (
    CoupletListQuerySchema, LangQuerySchema, ListQuerySchema, PoetListQuerySchema,
    TimelineQuerySchema, validate_request,
)
from baakh.utils.query import apply_search, apply_sort, paginate

bp = Blueprint("api", __name__, url_prefix="/api")

logger = structlog.get_logger(__name__)

POET_SORT_COLUMNS = ('created_at', 'english_name', 'sindhi_name', 'poet_slug', 'birth_date')
COUPLET_SORT_COLUMNS = ('created_at', 'couplet_slug', 'id', 'updated_at')


def poet_search_columns(lang):
    if lang == 'sd':
        return [Poet.sindhi_name, Poet.sindhi_laqab, Poet.sindhi_tagline]
    return [Poet.english_name, Poet.english_laqab, Poet.english_tagline]


def find_poet(identifier):
    """Look a poet up by numeric id or, failing that, by slug (case-insensitive)."""
    identifier = str(identifier).strip()
    poet = None
    if identifier.isdigit():
        poet = db.session.get(Poet, int(identifier))
    if poet is None:
        poet = Poet.query.filter(func.lower(Poet.poet_slug) == identifier.lower()).first()
    return poet


# Poets

@bp.route("/poets", methods=["GET"])
@validate_request(PoetListQuerySchema)
@cached_response("poets")
def list_poets(params):
    query = Poet.query.filter(Poet.is_hidden.is_(False))
    if params['featured'] is not None:
        query = query.filter(Poet.is_featured.is_(params['featured']))
    query = apply_search(query, params['search'], poet_search_columns(params['lang']))

    if params['count_only']:
        return {"success": True, "total": query.count()}

    query = apply_sort(query, Poet, params['sort_by'], params['sort_order'], POET_SORT_COLUMNS, 'created_at')
    page = paginate(query, params['page'], params['limit'])
    return {
        "success": True,
        "poets": [poet.to_dict(lang=params['lang']) for poet in page.items],
        **page.meta(),
    }


@bp.route("/poets/<identifier>", methods=["GET"])
@validate_request(LangQuerySchema)
def get_poet(identifier, params):
    poet = find_poet(identifier)
    if poet is None or poet.is_hidden:
        raise NotFoundError("Poet not found")

    categories = (
        Category.query.join(Poetry, Poetry.category_id == Category.id)
        .filter(Poetry.poet_id == poet.id)
        .distinct()
        .order_by(Category.slug)
        .all()
    )
    couplet_counts = dict(
        db.session.query(Couplet.lang, func.count(Couplet.id))
        .filter(Couplet.poet_id == poet.id)
        .group_by(Couplet.lang)
        .all()
    )
    poetry_count = Poetry.query.filter(
        Poetry.poet_id == poet.id, Poetry.id != SYSTEM_POETRY_ID
    ).count()

    data = poet.to_dict(lang=params['lang'])
    data['categories'] = [category.to_dict() for category in categories]
    data['stats'] = {
        'couplets': couplet_counts.get(params['lang'], 0),
        'coupletsByLang': couplet_counts,
        'poetry': poetry_count,
    }
    return {"success": True, "poet": data}


# Couplets

def filtered_couplets(params, poet_id=None):
    query = Couplet.query.filter(Couplet.lang == params['lang'])
    query = apply_search(query, params['search'], [Couplet.couplet_text])

    poet_id = poet_id or params.get('poet_id') or params.get('poet_id_alias')
    if poet_id:
        query = query.filter(Couplet.poet_id == poet_id)
    if params.get('poetry_id') is not None:
        query = query.filter(Couplet.poetry_id == params['poetry_id'])
    if params.get('standalone') == '1':
        query = query.filter(or_(Couplet.poetry_id.is_(None), Couplet.poetry_id == SYSTEM_POETRY_ID))

    return apply_sort(query, Couplet, params['sort_by'], params['sort_order'], COUPLET_SORT_COLUMNS, 'created_at')


@bp.route("/couplets", methods=["GET"])
@validate_request(CoupletListQuerySchema)
def list_couplets(params):
    page = paginate(filtered_couplets(params), params['page'], params['limit'])
    return {
        "success": True,
        "couplets": [couplet.to_dict() for couplet in page.items],
        **page.meta(),
    }


@bp.route("/couplets/by-poet/<int:poet_id>", methods=["GET"])
@validate_request(CoupletListQuerySchema)
def list_couplets_by_poet(poet_id, params):
    poet = db.session.get(Poet, poet_id)
    if poet is None:
        raise NotFoundError("Poet not found")

    page = paginate(filtered_couplets(params, poet_id=poet.id), params['page'], params['limit'])
    return {
        "success": True,
        "couplets": [couplet.to_dict() for couplet in page.items],
        "poet": poet.to_summary(),
        "pagination": page.meta(),
    }


@bp.route("/couplets/<int:couplet_id>", methods=["GET"])
def get_couplet(couplet_id):
    couplet = db.session.get(Couplet, couplet_id)
    if couplet is None:
        raise NotFoundError("Couplet not found")

    data = couplet.to_dict()
    # The other-language row of the same couplet, when authored
    counterpart = Couplet.query.filter(
        Couplet.couplet_slug == couplet.couplet_slug,
        Couplet.poet_id == couplet.poet_id,
        Couplet.id != couplet.id,
    ).first()
    data['translation'] = counterpart.to_dict(include_poet=False) if counterpart else None
    return {"success": True, "couplet": data}


# Tags

@bp.route("/tags", methods=["GET"])
@validate_request(ListQuerySchema)
@cached_response("tags")
def list_tags(params):
    """Tags usable on couplets; poet-descriptor tag types are left out."""
    query = Tag.query.filter(Tag.tag_type.notin_(POET_TAG_TYPES))
    query = apply_search(query, params['search'], [Tag.label, Tag.slug])
    tags = query.order_by(Tag.label.asc()).all()
    return {"success": True, "tags": [tag.to_dict() for tag in tags], "total": len(tags)}


# Timeline

def _find_period(identifier):
    identifier = str(identifier).strip()
    if identifier.isdigit():
        period = db.session.get(TimelinePeriod, int(identifier))
        if period is not None:
            return period
    return TimelinePeriod.query.filter_by(period_slug=identifier).first()


def _window(query, params):
    total = query.order_by(None).count()
    items = query.offset(params['offset']).limit(params['limit']).all()
    meta = {
        "total": total,
        "limit": params['limit'],
        "offset": params['offset'],
        "hasMore": params['offset'] + len(items) < total,
    }
    return items, meta


@bp.route("/timeline/periods", methods=["GET"])
@validate_request(TimelineQuerySchema)
def list_periods(params):
    lang = params['lang']
    query = TimelinePeriod.query
    if params['featured'] is not None:
        query = query.filter(TimelinePeriod.is_featured.is_(params['featured']))
    columns = ([TimelinePeriod.sindhi_name, TimelinePeriod.sindhi_description] if lang == 'sd'
               else [TimelinePeriod.english_name, TimelinePeriod.english_description])
    query = apply_search(query, params['search'], columns)
    query = query.order_by(TimelinePeriod.start_year.asc(), TimelinePeriod.sort_order.asc())

    periods, meta = _window(query, params)
    return {"success": True, "periods": [p.to_dict(lang) for p in periods], **meta}


@bp.route("/timeline/periods/<identifier>", methods=["GET"])
@validate_request(LangQuerySchema)
def get_period(identifier, params):
    period = _find_period(identifier)
    if period is None:
        raise NotFoundError("Timeline period not found")

    data = period.to_dict(params['lang'])
    events = period.events.order_by(TimelineEvent.event_year.asc()).all()
    data['events'] = [event.to_dict(params['lang']) for event in events]
    return {"success": True, "period": data}


@bp.route("/timeline/events", methods=["GET"])
@validate_request(TimelineQuerySchema)
def list_events(params):
    lang = params['lang']
    query = TimelineEvent.query
    for name in ('period_id', 'poet_id', 'event_type'):
        if params.get(name) is not None:
            query = query.filter(getattr(TimelineEvent, name) == params[name])
    if params['featured'] is not None:
        query = query.filter(TimelineEvent.is_featured.is_(params['featured']))
    columns = ([TimelineEvent.sindhi_title, TimelineEvent.sindhi_description] if lang == 'sd'
               else [TimelineEvent.english_title, TimelineEvent.english_description])
    query = apply_search(query, params['search'], columns)
    query = query.order_by(TimelineEvent.event_year.asc(), TimelineEvent.sort_order.asc())

    events, meta = _window(query, params)
    return {"success": True, "events": [e.to_dict(lang) for e in events], **meta}


@bp.before_request
def log_request():
    logger.debug("api_request", path=request.path, args=dict(request.args))
