"""
Request schemas and the decorator that applies them.
"""

from functools import wraps

from flask import request
from marshmallow import (
    EXCLUDE, Schema, ValidationError, fields, pre_load, validate, validates_schema
)

from baakh.errors import InputError
from baakh.models.couplet import LANGUAGES

LANG = validate.OneOf(LANGUAGES)
SORT_ORDER = validate.OneOf(['asc', 'desc'])


class BaseSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class TagsField(fields.Field):
    """Accept tags as a list of strings or a comma-separated string."""

    def _deserialize(self, value, attr, data, **kwargs):
        if value is None:
            return []
        if isinstance(value, str):
            return [t.strip() for t in value.split(',') if t.strip()]
        if isinstance(value, (list, tuple)):
            return [str(t).strip() for t in value if str(t).strip()]
        raise ValidationError("Tags must be a list or a comma-separated string.")


# List query parameters

class ListQuerySchema(BaseSchema):
    page = fields.Int(load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(load_default=20, validate=validate.Range(min=1, max=100))
    search = fields.Str(load_default='')
    sort_by = fields.Str(data_key='sortBy', load_default=None)
    sort_order = fields.Str(data_key='sortOrder', load_default='desc', validate=SORT_ORDER)


class PoetListQuerySchema(ListQuerySchema):
    lang = fields.Str(load_default='en', validate=LANG)
    count_only = fields.Bool(data_key='countOnly', load_default=False)
    featured = fields.Bool(load_default=None, allow_none=True)


class CoupletListQuerySchema(ListQuerySchema):
    lang = fields.Str(load_default='en', validate=LANG)
    poet_id = fields.Int(load_default=None, allow_none=True)
    poet_id_alias = fields.Int(data_key='poetId', load_default=None, allow_none=True)
    poetry_id = fields.Int(load_default=None, allow_none=True)
    standalone = fields.Str(load_default='')


class AdminCoupletListQuerySchema(ListQuerySchema):
    limit = fields.Int(load_default=10, validate=validate.Range(min=1, max=100))
    sort_by = fields.Str(data_key='sortBy', load_default='created_at',
                         validate=validate.OneOf(['created_at', 'couplet_slug', 'lang']))


class DictionaryListQuerySchema(ListQuerySchema):
    limit = fields.Int(load_default=50, validate=validate.Range(min=1, max=1000))


class TimelineQuerySchema(BaseSchema):
    limit = fields.Int(load_default=20, validate=validate.Range(min=1, max=100))
    offset = fields.Int(load_default=0, validate=validate.Range(min=0))
    search = fields.Str(load_default='')
    lang = fields.Str(load_default='en', validate=LANG)
    featured = fields.Bool(load_default=None, allow_none=True)
    period_id = fields.Int(load_default=None, allow_none=True)
    poet_id = fields.Int(load_default=None, allow_none=True)
    event_type = fields.Str(load_default=None, allow_none=True)


class LangQuerySchema(BaseSchema):
    lang = fields.Str(load_default='en', validate=LANG)


# Request bodies

class CoupletCreateSchema(BaseSchema):
    poetry_id = fields.Int(load_default=0, allow_none=True)
    poet_id = fields.Int(required=True, validate=validate.Range(min=1))
    couplet_slug = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    couplet_tags = TagsField(load_default=list)
    couplet_text = fields.Str(required=True, validate=validate.Length(min=1))
    lang = fields.Str(required=True, validate=LANG)

    @pre_load
    def strip_strings(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for key in ('couplet_slug', 'couplet_text', 'lang'):
            if isinstance(cleaned.get(key), str):
                cleaned[key] = cleaned[key].strip()
        if cleaned.get('poetry_id') in ('', None):
            cleaned['poetry_id'] = 0
        return cleaned


class CoupletUpdateSchema(BaseSchema):
    poet_id = fields.Int(validate=validate.Range(min=1))
    poetry_id = fields.Int(allow_none=True)
    couplet_slug = fields.Str(validate=validate.Length(min=1, max=255))
    couplet_tags = TagsField()
    couplet_text = fields.Str(validate=validate.Length(min=1))
    lang = fields.Str(validate=LANG)


class PoetCreateSchema(BaseSchema):
    poet_slug = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    sindhi_name = fields.Str(required=True, validate=validate.Length(min=1))
    english_name = fields.Str(required=True, validate=validate.Length(min=1))
    sindhi_laqab = fields.Str(allow_none=True)
    english_laqab = fields.Str(allow_none=True)
    sindhi_takhalus = fields.Str(allow_none=True)
    english_takhalus = fields.Str(allow_none=True)
    sindhi_tagline = fields.Str(allow_none=True)
    english_tagline = fields.Str(allow_none=True)
    sindhi_details = fields.Str(allow_none=True)
    english_details = fields.Str(allow_none=True)
    birth_date = fields.Str(allow_none=True)
    death_date = fields.Str(allow_none=True)
    birth_place = fields.Str(allow_none=True)
    death_place = fields.Str(allow_none=True)
    tags = TagsField(load_default=list)
    file_url = fields.Str(allow_none=True)
    is_featured = fields.Bool(load_default=False)
    is_hidden = fields.Bool(load_default=False)


class TranslationSchema(BaseSchema):
    title = fields.Str(required=True, validate=validate.Length(min=1))
    details = fields.Str(load_default=None, allow_none=True)


class TagCreateSchema(BaseSchema):
    slug = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    label = fields.Str(required=True, validate=validate.Length(min=1))
    tag_type = fields.Str(load_default='Topic')
    english = fields.Nested(TranslationSchema, load_default=None, allow_none=True)
    sindhi = fields.Nested(TranslationSchema, load_default=None, allow_none=True)


class TextSchema(BaseSchema):
    text = fields.Str(required=True)

    @validates_schema
    def validate_text(self, data, **kwargs):
        if not (data.get('text') or '').strip():
            raise ValidationError("Text is required", field_name='text')


class RomanizerOperationSchema(TextSchema):
    operation = fields.Str(load_default='romanize', validate=validate.OneOf(['hesudhar', 'romanize']))
    mode = fields.Str(load_default='smart', validate=validate.OneOf(['smart', 'global']))


class RomanWordSchema(BaseSchema):
    word_sd = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    word_roman = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    user_id = fields.Str(load_default=None, allow_none=True)


class RomanWordUpdateSchema(RomanWordSchema):
    id = fields.Int(required=True)


class HesudharEntrySchema(BaseSchema):
    word = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    correct = fields.Str(required=True, validate=validate.Length(min=1, max=255))


class HesudharEntryUpdateSchema(HesudharEntrySchema):
    id = fields.Int(required=True)


class IdQuerySchema(BaseSchema):
    id = fields.Int(required=True)


class SyncRequestSchema(BaseSchema):
    full = fields.Bool(load_default=False)


class TimelinePeriodSchema(BaseSchema):
    period_slug = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    start_year = fields.Int(required=True)
    end_year = fields.Int(load_default=None, allow_none=True)
    is_ongoing = fields.Bool(load_default=False)
    sindhi_name = fields.Str(required=True, validate=validate.Length(min=1))
    english_name = fields.Str(required=True, validate=validate.Length(min=1))
    sindhi_description = fields.Str(load_default=None, allow_none=True)
    english_description = fields.Str(load_default=None, allow_none=True)
    sindhi_characteristics = fields.List(fields.Str(), load_default=list)
    english_characteristics = fields.List(fields.Str(), load_default=list)
    color_code = fields.Str(load_default='#3B82F6')
    icon_name = fields.Str(load_default=None, allow_none=True)
    is_featured = fields.Bool(load_default=False)
    sort_order = fields.Int(load_default=0)

    @validates_schema
    def validate_years(self, data, **kwargs):
        end_year = data.get('end_year')
        if end_year is not None and end_year < data['start_year']:
            raise ValidationError("End year cannot be before start year", field_name='end_year')


class TimelineEventSchema(BaseSchema):
    event_slug = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    event_date = fields.Str(load_default=None, allow_none=True)
    event_year = fields.Int(required=True)
    is_approximate = fields.Bool(load_default=False)
    period_id = fields.Int(load_default=None, allow_none=True)
    poet_id = fields.Int(load_default=None, allow_none=True)
    sindhi_title = fields.Str(required=True, validate=validate.Length(min=1))
    english_title = fields.Str(required=True, validate=validate.Length(min=1))
    sindhi_description = fields.Str(load_default=None, allow_none=True)
    english_description = fields.Str(load_default=None, allow_none=True)
    sindhi_location = fields.Str(load_default=None, allow_none=True)
    english_location = fields.Str(load_default=None, allow_none=True)
    event_type = fields.Str(load_default='historical')
    importance_level = fields.Int(load_default=1, validate=validate.Range(min=1, max=5))
    is_featured = fields.Bool(load_default=False)
    sort_order = fields.Int(load_default=0)


def load_json(schema_cls, many=False, partial=False):
    """Validate the JSON body; marshmallow errors surface as 400 responses."""
    payload = request.get_json(silent=True)
    if payload is None:
        raise InputError("Request body must be JSON")
    return schema_cls().load(payload, many=many, partial=partial)


def validate_request(schema_class, location='args'):
    """
    Decorator for request validation.

    The loaded data is passed to the view as the ``params`` keyword argument.
    """
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            schema = schema_class()
            if location == 'json':
                payload = request.get_json(silent=True)
                if payload is None:
                    raise InputError("Request body must be JSON")
            else:
                payload = request.args
            params = schema.load(payload)
            return f(*args, params=params, **kwargs)
        return wrapper
    return decorator
