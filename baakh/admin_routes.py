"""
Admin API: content management plus the text services used by the couplet
authoring workflow (hesudhar correction, romanization, dictionary upkeep).
"""

import structlog
from flask import Blueprint, current_app, request
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from baakh.caching import clear_cache
from baakh.database import db
from baakh.errors import ConflictError, InputError, NotFoundError
from baakh.extensions import limiter
from baakh.lexicon import (
    get_corrector, get_romanizer, hesudhar_file, romanizer_file, sync_hesudhar, sync_roman_words,
)
from baakh.models import (
    Couplet, HesudharEntry, Poet, Poetry, RomanWord, Tag, TagTranslation, TimelineEvent,
    TimelinePeriod, SYSTEM_POETRY_ID, join_tags,
)
from baakh.models.mixins import utcnow
from baakh.schemas import (
    AdminCoupletListQuerySchema, CoupletCreateSchema, CoupletUpdateSchema, DictionaryListQuerySchema,
    HesudharEntrySchema, HesudharEntryUpdateSchema, IdQuerySchema, ListQuerySchema, PoetCreateSchema,
    RomanWordSchema, RomanWordUpdateSchema, RomanizerOperationSchema, SyncRequestSchema, TagCreateSchema,
    TextSchema, TimelineEventSchema, TimelinePeriodSchema, load_json, validate_request,
)
from baakh.text.hesudhar import apply_hesudhar_mode
from baakh.text.romanizer import DEFAULT_DICTIONARY, transliterate
from baakh.utils.query import apply_search, apply_sort, paginate

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")

logger = structlog.get_logger(__name__)

DUPLICATE_COUPLET_MESSAGE = "Duplicate key violation. Please use a unique couplet slug."
MISSING_REFERENCE_MESSAGE = "Foreign key constraint violation. Please ensure all referenced records exist."


def text_tools_limit():
    return current_app.config.get('TEXT_TOOLS_RATE_LIMIT', '120 per minute')


def commit_or_conflict(message):
    """Commit the session; a uniqueness violation becomes a 409."""
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.warning("integrity_error", error=str(e.orig))
        raise ConflictError(message) from e
    clear_cache()


# Poets

@admin_bp.route("/poets", methods=["GET"])
@validate_request(ListQuerySchema)
def list_poets(params):
    query = apply_search(Poet.query, params['search'], [
        Poet.english_name, Poet.english_laqab, Poet.poet_slug, Poet.sindhi_name,
    ])
    query = apply_sort(query, Poet, params['sort_by'], params['sort_order'],
                       ('created_at', 'english_name', 'sindhi_name', 'poet_slug'), 'created_at')
    page = paginate(query, params['page'], params['limit'])
    return {"poets": [poet.to_dict() for poet in page.items], **page.meta()}


@admin_bp.route("/poets", methods=["POST"])
def create_poet():
    data = load_json(PoetCreateSchema)
    data['tags'] = join_tags(data.get('tags'))
    try:
        poet = Poet(**data)
    except ValueError as e:
        raise InputError(str(e)) from e

    if Poet.query.filter_by(poet_slug=poet.poet_slug).first() is not None:
        raise ConflictError("A poet with this slug already exists")

    db.session.add(poet)
    commit_or_conflict("A poet with this slug already exists")
    logger.info("poet_created", poet_id=poet.id, slug=poet.poet_slug)
    return {"success": True, "poet": poet.to_dict()}, 201


# Couplets

@admin_bp.route("/poetry/couplets", methods=["GET"])
@validate_request(AdminCoupletListQuerySchema)
def list_couplets(params):
    """Sindhi couplets, each with its English counterpart attached when one exists."""
    query = Couplet.query.filter(Couplet.lang == 'sd')
    query = apply_search(query, params['search'], [
        Couplet.couplet_text, Couplet.couplet_slug, Couplet.couplet_tags,
    ])
    query = apply_sort(query, Couplet, params['sort_by'], params['sort_order'],
                       ('created_at', 'couplet_slug', 'lang'), 'created_at')
    page = paginate(query, params['page'], params['limit'])

    slugs = [c.couplet_slug for c in page.items]
    english = {}
    if slugs:
        for row in Couplet.query.filter(Couplet.lang == 'en', Couplet.couplet_slug.in_(slugs)).all():
            english[(row.couplet_slug, row.poet_id)] = row

    couplets = []
    for couplet in page.items:
        data = couplet.to_dict()
        counterpart = english.get((couplet.couplet_slug, couplet.poet_id))
        data['english_couplet'] = counterpart.to_dict(include_poet=False) if counterpart else None
        couplets.append(data)

    meta = page.meta()
    return {
        "couplets": couplets,
        "pagination": {key: meta[key] for key in ('page', 'limit', 'total', 'totalPages')},
    }


@admin_bp.route("/poetry/couplets", methods=["POST"])
def create_couplets():
    """
    Create one couplet or a batch.

    Accepts a single object or an array. Rows with ``poetry_id`` 0 are
    standalone and hang off the system poetry record, which is created on
    first use. The batch is written in one transaction.
    """
    payload = request.get_json(silent=True)
    if payload is None:
        raise InputError("Request body must be JSON")
    items = payload if isinstance(payload, list) else [payload]
    if not items:
        raise InputError("No couplets supplied")
    records = CoupletCreateSchema().load(items, many=True)

    poet_ids = {r['poet_id'] for r in records}
    found = {pid for (pid,) in db.session.query(Poet.id).filter(Poet.id.in_(poet_ids)).all()}
    if found != poet_ids:
        raise InputError(MISSING_REFERENCE_MESSAGE, {"poet_id": sorted(poet_ids - found)})

    poetry_ids = {r['poetry_id'] for r in records}
    if SYSTEM_POETRY_ID in poetry_ids:
        Poetry.ensure_system_record()
    other_ids = poetry_ids - {SYSTEM_POETRY_ID}
    if other_ids:
        existing = {pid for (pid,) in db.session.query(Poetry.id).filter(Poetry.id.in_(other_ids)).all()}
        if existing != other_ids:
            raise InputError(MISSING_REFERENCE_MESSAGE, {"poetry_id": sorted(other_ids - existing)})

    couplets = []
    for record in records:
        couplet = Couplet(
            poetry_id=record['poetry_id'],
            poet_id=record['poet_id'],
            couplet_slug=record['couplet_slug'],
            couplet_tags=join_tags(record['couplet_tags']),
            couplet_text=record['couplet_text'],
            lang=record['lang'],
        )
        db.session.add(couplet)
        couplets.append(couplet)

    commit_or_conflict(DUPLICATE_COUPLET_MESSAGE)
    logger.info("couplets_created", count=len(couplets), slugs=[c.couplet_slug for c in couplets])
    return {"success": True, "couplets": [c.to_dict() for c in couplets]}, 201


@admin_bp.route("/poetry/couplets/by-slug/<slug>", methods=["GET"])
def get_couplet_by_slug(slug):
    rows = Couplet.query.filter(Couplet.couplet_slug == slug).order_by(Couplet.lang.desc()).all()
    if not rows:
        raise NotFoundError("Couplet not found")
    return {
        "success": True,
        "slug": slug,
        "couplets": {row.lang: row.to_dict() for row in rows},
    }


def _get_couplet(couplet_id):
    couplet = db.session.get(Couplet, couplet_id)
    if couplet is None:
        raise NotFoundError("Couplet not found")
    return couplet


@admin_bp.route("/poetry/couplets/<int:couplet_id>", methods=["PUT"])
def update_couplet(couplet_id):
    couplet = _get_couplet(couplet_id)
    data = load_json(CoupletUpdateSchema)

    if 'poet_id' in data and db.session.get(Poet, data['poet_id']) is None:
        raise InputError(MISSING_REFERENCE_MESSAGE, {"poet_id": [data['poet_id']]})
    if 'poetry_id' in data and data['poetry_id'] is None:
        data['poetry_id'] = SYSTEM_POETRY_ID
    if data.get('poetry_id') == SYSTEM_POETRY_ID:
        Poetry.ensure_system_record()
    if 'couplet_tags' in data:
        data['couplet_tags'] = join_tags(data['couplet_tags'])
    for key, value in data.items():
        setattr(couplet, key, value)

    commit_or_conflict(DUPLICATE_COUPLET_MESSAGE)
    return {"success": True, "couplet": couplet.to_dict()}


@admin_bp.route("/poetry/couplets/<int:couplet_id>", methods=["DELETE"])
def delete_couplet(couplet_id):
    couplet = _get_couplet(couplet_id)
    db.session.delete(couplet)
    db.session.commit()
    clear_cache()
    logger.info("couplet_deleted", couplet_id=couplet_id)
    return {"success": True}


# Tags

@admin_bp.route("/tags", methods=["GET"])
@validate_request(ListQuerySchema)
def list_tags(params):
    query = apply_search(Tag.query, params['search'], [Tag.label, Tag.slug, Tag.tag_type])
    tag_type = request.args.get('type')
    if tag_type:
        query = query.filter(Tag.tag_type == tag_type)
    tags = query.order_by(Tag.tag_type.asc(), Tag.label.asc()).all()
    return {"tags": [tag.to_dict() for tag in tags], "total": len(tags)}


@admin_bp.route("/tags", methods=["POST"])
def create_tag():
    data = load_json(TagCreateSchema)
    if Tag.query.filter_by(slug=data['slug']).first() is not None:
        raise ConflictError("A tag with this slug already exists")

    tag = Tag(slug=data['slug'], label=data['label'], tag_type=data['tag_type'])
    for lang_code, key in (('en', 'english'), ('sd', 'sindhi')):
        translation = data.get(key)
        if translation:
            tag.translations.append(TagTranslation(
                lang_code=lang_code, title=translation['title'], detail=translation.get('details'),
            ))
    db.session.add(tag)
    commit_or_conflict("A tag with this slug already exists")
    return {"success": True, "tag": tag.to_dict()}, 201


# Hesudhar

@admin_bp.route("/hesudhar/correct", methods=["POST"])
@limiter.limit(text_tools_limit)
def correct_hesudhar():
    data = load_json(TextSchema)
    result = get_corrector().correct(data['text'])
    return result.to_dict()


def _dictionary_page(model, params, columns):
    query = apply_search(model.active(), params['search'], columns)
    query = query.order_by(model.created_at.desc(), model.id.desc())
    return paginate(query, params['page'], params['limit'])


def _get_active(model, entry_id, label):
    entry = db.session.get(model, entry_id)
    if entry is None or entry.is_deleted:
        raise NotFoundError(f"{label} not found")
    return entry


@admin_bp.route("/romanizer/hesudhar", methods=["GET"])
@validate_request(DictionaryListQuerySchema)
def list_hesudhar_entries(params):
    page = _dictionary_page(HesudharEntry, params, [HesudharEntry.word, HesudharEntry.correct])
    meta = page.meta()
    return {
        "hesudhars": [entry.to_dict() for entry in page.items],
        **{key: meta[key] for key in ('total', 'page', 'limit', 'hasMore')},
    }


@admin_bp.route("/romanizer/hesudhar", methods=["POST"])
def create_hesudhar_entry():
    data = load_json(HesudharEntrySchema)
    entry = HesudharEntry(word=data['word'].strip(), correct=data['correct'].strip())
    db.session.add(entry)
    db.session.commit()
    return {"message": "Hesudhar entry created successfully", "hesudhar": entry.to_dict()}, 201


@admin_bp.route("/romanizer/hesudhar", methods=["PUT"])
def update_hesudhar_entry():
    data = load_json(HesudharEntryUpdateSchema)
    entry = _get_active(HesudharEntry, data['id'], "Hesudhar entry")
    entry.word = data['word'].strip()
    entry.correct = data['correct'].strip()
    db.session.commit()
    return {"message": "Hesudhar entry updated successfully", "hesudhar": entry.to_dict()}


@admin_bp.route("/romanizer/hesudhar", methods=["DELETE"])
@validate_request(IdQuerySchema)
def delete_hesudhar_entry(params):
    entry = _get_active(HesudharEntry, params['id'], "Hesudhar entry")
    entry.soft_delete()
    db.session.commit()
    return {"success": True, "message": "Hesudhar entry deleted successfully"}


def _sync_body():
    payload = request.get_json(silent=True) or {}
    return SyncRequestSchema().load(payload)


@admin_bp.route("/hesudhar/sync", methods=["GET"])
def hesudhar_sync_status():
    lexicon = hesudhar_file()
    return {"success": lexicon.exists(), **lexicon.stats(), "sync": lexicon.read_metadata()}


@admin_bp.route("/hesudhar/sync", methods=["POST"])
def run_hesudhar_sync():
    options = _sync_body()
    return sync_hesudhar(full=options['full']).to_dict()


# Romanizer

@admin_bp.route("/romanizer", methods=["GET"])
def romanizer_info():
    return {
        "message": "Romanizer API endpoint",
        "operations": ["hesudhar", "romanize"],
        "modes": ["smart", "global"],
    }


@admin_bp.route("/romanizer", methods=["POST"])
@limiter.limit(text_tools_limit)
def romanizer_operation():
    data = load_json(RomanizerOperationSchema)
    text, mode = data['text'], data['mode']

    if data['operation'] == 'hesudhar':
        output, replacements = apply_hesudhar_mode(text, mode)
        return {"original": text, "hesudhar": output, "replacements": replacements, "mode": mode}

    dictionary = {**DEFAULT_DICTIONARY, **romanizer_file().load()}
    return {"original": text, "romanized": transliterate(text, mode, dictionary), "mode": mode}


@admin_bp.route("/romanizer/fast", methods=["POST"])
@limiter.limit(text_tools_limit)
def romanize_fast():
    data = load_json(TextSchema)
    return get_romanizer().romanize(data['text']).to_dict()


@admin_bp.route("/romanizer/roman-words", methods=["GET"])
@validate_request(DictionaryListQuerySchema)
def list_roman_words(params):
    page = _dictionary_page(RomanWord, params, [RomanWord.word_sd, RomanWord.word_roman])
    meta = page.meta()
    return {
        "romanWords": [word.to_dict() for word in page.items],
        **{key: meta[key] for key in ('total', 'page', 'limit', 'hasMore')},
    }


@admin_bp.route("/romanizer/roman-words", methods=["POST"])
def create_roman_word():
    data = load_json(RomanWordSchema)
    word = RomanWord(word_sd=data['word_sd'].strip(), word_roman=data['word_roman'].strip(),
                     user_id=data.get('user_id'))
    db.session.add(word)
    db.session.commit()
    logger.info("roman_word_created", word_id=word.id)
    return word.to_dict(), 201


@admin_bp.route("/romanizer/roman-words", methods=["PUT"])
def update_roman_word():
    data = load_json(RomanWordUpdateSchema)
    word = _get_active(RomanWord, data['id'], "Roman word")
    word.word_sd = data['word_sd'].strip()
    word.word_roman = data['word_roman'].strip()
    if data.get('user_id') is not None:
        word.user_id = data['user_id']
    word.updated_at = utcnow()
    db.session.commit()
    return word.to_dict()


@admin_bp.route("/romanizer/roman-words", methods=["DELETE"])
@validate_request(IdQuerySchema)
def delete_roman_word(params):
    word = _get_active(RomanWord, params['id'], "Roman word")
    word.soft_delete()
    db.session.commit()
    return {"success": True}


@admin_bp.route("/romanizer/sync", methods=["GET"])
def romanizer_sync_status():
    lexicon = romanizer_file()
    pending = db.session.query(func.count(RomanWord.id)).filter(RomanWord.deleted_at.is_(None)).scalar()
    return {
        "success": lexicon.exists(),
        **lexicon.stats(),
        "databaseEntries": pending,
        "sync": lexicon.read_metadata(),
    }


@admin_bp.route("/romanizer/sync", methods=["POST"])
def run_romanizer_sync():
    options = _sync_body()
    return sync_roman_words(full=options['full']).to_dict()


# Timeline

@admin_bp.route("/timeline/periods", methods=["POST"])
def create_period():
    data = load_json(TimelinePeriodSchema)
    if TimelinePeriod.query.filter_by(period_slug=data['period_slug']).first() is not None:
        raise ConflictError("A timeline period with this slug already exists")
    period = TimelinePeriod(**data)
    db.session.add(period)
    commit_or_conflict("A timeline period with this slug already exists")
    return {"success": True, "period": period.to_dict()}, 201


@admin_bp.route("/timeline/periods/<int:period_id>", methods=["DELETE"])
def delete_period(period_id):
    period = db.session.get(TimelinePeriod, period_id)
    if period is None:
        raise NotFoundError("Timeline period not found")
    # Events outlive their period
    TimelineEvent.query.filter_by(period_id=period.id).update({'period_id': None})
    db.session.delete(period)
    db.session.commit()
    clear_cache()
    return {"success": True}


@admin_bp.route("/timeline/events", methods=["POST"])
def create_event():
    data = load_json(TimelineEventSchema)
    if data.get('period_id') is not None and db.session.get(TimelinePeriod, data['period_id']) is None:
        raise InputError(MISSING_REFERENCE_MESSAGE, {"period_id": [data['period_id']]})
    if data.get('poet_id') is not None and db.session.get(Poet, data['poet_id']) is None:
        raise InputError(MISSING_REFERENCE_MESSAGE, {"poet_id": [data['poet_id']]})
    if TimelineEvent.query.filter_by(event_slug=data['event_slug']).first() is not None:
        raise ConflictError("A timeline event with this slug already exists")

    event = TimelineEvent(**data)
    db.session.add(event)
    commit_or_conflict("A timeline event with this slug already exists")
    return {"success": True, "event": event.to_dict()}, 201


@admin_bp.route("/timeline/events/<int:event_id>", methods=["DELETE"])
def delete_event(event_id):
    event = db.session.get(TimelineEvent, event_id)
    if event is None:
        raise NotFoundError("Timeline event not found")
    db.session.delete(event)
    db.session.commit()
    clear_cache()
    return {"success": True}
