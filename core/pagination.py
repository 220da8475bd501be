"""
Keyset Pagination

Stable, resumable listings for collections that change while a client pages
through them. Pages are bounded by the (sort value, id) of the last row
returned instead of an offset, so rows inserted or deleted elsewhere in the
ordering never shift a page.

Pieces:
- encode_cursor / decode_cursor: opaque, URL-safe, tamper-evident tokens
- KeysetQueryPlanner: allow-listed sort field + (field, id) keyset filter
- KeysetPagination: request parsing and the response envelope
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Optional, Tuple

from django.conf import settings
from django.core import signing
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q, Value
from django.db.models.functions import Coalesce
from django.utils.dateparse import parse_date, parse_datetime

logger = logging.getLogger(__name__)

CURSOR_SALT = 'herdbook.pagination.cursor'

ASC = 'asc'
DESC = 'desc'

# Annotation the planner sorts on when a sort field needs a null fallback
KEYSET_ANNOTATION = '_keyset_value'


# =============================================================================
# CURSOR CODEC
# =============================================================================

@dataclass(frozen=True)
class Cursor:
    """Position after which the next page starts."""
    sort_value: Any
    record_id: str


def _jsonable(value):
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (Decimal, uuid.UUID)):
        return str(value)
    return str(value)


def encode_cursor(sort_value, record_id) -> str:
    """Serialize a (sort value, id) pair into an opaque URL-safe token."""
    payload = [_jsonable(sort_value), str(record_id)]
    return signing.dumps(payload, salt=CURSOR_SALT, compress=True)


def decode_cursor(token) -> Optional[Cursor]:
    """
    Parse a token produced by encode_cursor.

    Returns None for anything malformed, truncated or tampered with. Callers
    treat None as "start from the first page".
    """
    if not token or not isinstance(token, str):
        return None

    try:
        payload = signing.loads(token, salt=CURSOR_SALT)
    except (signing.BadSignature, ValueError, TypeError):
        return None

    if not isinstance(payload, list) or len(payload) != 2:
        return None

    sort_value, record_id = payload
    if not isinstance(record_id, str) or not record_id:
        return None
    if isinstance(sort_value, (list, dict)):
        return None
    return Cursor(sort_value=sort_value, record_id=record_id)


# =============================================================================
# KEYSET QUERY PLANNER
# =============================================================================

class InvalidCursorValue(ValueError):
    """A decoded cursor's value does not fit the active sort field."""


def normalize_sort_value(field: models.Field, raw):
    """Convert a raw cursor value back to the Python type of ``field``."""
    if raw is None:
        return None

    if isinstance(field, models.DateTimeField):
        parsed = parse_datetime(str(raw))
        if parsed is None:
            raise InvalidCursorValue(f"'{raw}' is not a datetime")
        return parsed
    if isinstance(field, models.DateField):
        parsed = parse_date(str(raw))
        if parsed is None:
            raise InvalidCursorValue(f"'{raw}' is not a date")
        return parsed
    if isinstance(field, models.DecimalField):
        try:
            return Decimal(str(raw))
        except InvalidOperation:
            raise InvalidCursorValue(f"'{raw}' is not a decimal")
    if isinstance(field, (models.IntegerField, models.FloatField)):
        try:
            return field.to_python(raw)
        except ValidationError:
            raise InvalidCursorValue(f"'{raw}' is not a number")
    return str(raw)


@dataclass
class KeysetPlan:
    queryset: Any
    sort_field: str
    sort_direction: str
    sort_key: str
    limit: int


class KeysetQueryPlanner:
    """
    Builds a filtered, ordered queryset for one page of a keyset walk.

    Rows are ordered by (sort field, id), both in the requested direction,
    so ties on the sort field are broken deterministically by id.

    Example Usage:
        planner = KeysetQueryPlanner(
            sortable_fields=['created_at', 'tag_id'],
            aliases={'createdAt': 'created_at', 'tagId': 'tag_id'},
        )
        plan = planner.plan(Animal.objects.all(), sort_by='tagId', sort_dir='asc',
                            cursor=decode_cursor(token), limit=20)
        rows = list(plan.queryset)   # limit + 1 rows at most
    """

    def __init__(self, sortable_fields, default_field='created_at', default_direction=DESC,
                 aliases=None, null_fallbacks=None):
        self.sortable_fields = tuple(sortable_fields)
        if default_field not in self.sortable_fields:
            raise ValueError(f"Default sort field '{default_field}' must be sortable")
        self.default_field = default_field
        self.default_direction = default_direction
        self.aliases = dict(aliases or {})
        self.null_fallbacks = dict(null_fallbacks or {})

    def resolve(self, sort_by=None, sort_dir=None) -> Tuple[str, str]:
        """Map request parameters onto an allow-listed field and a direction."""
        field = self.aliases.get(sort_by, sort_by)
        if field not in self.sortable_fields:
            field = self.default_field

        direction = (sort_dir or '').lower()
        if direction not in (ASC, DESC):
            direction = self.default_direction
        return field, direction

    def sort_key_for(self, field: str) -> str:
        return KEYSET_ANNOTATION if field in self.null_fallbacks else field

    def plan(self, queryset, sort_by=None, sort_dir=None, cursor: Optional[Cursor] = None,
             limit=20) -> KeysetPlan:
        field, direction = self.resolve(sort_by, sort_dir)
        model = queryset.model
        sort_key = self.sort_key_for(field)

        if sort_key == KEYSET_ANNOTATION:
            queryset = queryset.annotate(**{
                KEYSET_ANNOTATION: Coalesce(
                    F(field),
                    Value(self.null_fallbacks[field]),
                    output_field=model._meta.get_field(field),
                )
            })

        if cursor is not None:
            boundary = self._boundary(model, field, cursor)
            if boundary is not None:
                value, record_id = boundary
                op = 'lt' if direction == DESC else 'gt'
                queryset = queryset.filter(
                    Q(**{f'{sort_key}__{op}': value})
                    | Q(**{sort_key: value, f'pk__{op}': record_id})
                )

        if direction == DESC:
            ordering = [f'-{sort_key}', '-pk']
        else:
            ordering = [sort_key, 'pk']

        queryset = queryset.order_by(*ordering)[:limit + 1]
        return KeysetPlan(queryset, field, direction, sort_key, limit)

    def _boundary(self, model, field, cursor):
        model_field = model._meta.get_field(field)
        try:
            value = normalize_sort_value(model_field, cursor.sort_value)
            record_id = model._meta.pk.to_python(cursor.record_id)
        except (InvalidCursorValue, ValidationError) as e:
            logger.debug(f"Ignoring cursor for {model.__name__}.{field}: {e}")
            return None

        if value is None:
            if field not in self.null_fallbacks:
                return None
            value = self.null_fallbacks[field]
        return value, record_id

    def cursor_for(self, obj, sort_key: str) -> str:
        return encode_cursor(getattr(obj, sort_key), obj.pk)


# =============================================================================
# PAGINATION ENVELOPE
# =============================================================================

class KeysetPagination:
    """
    Request/response side of keyset pagination.

    Reads ``sortBy``, ``sortDir``, ``cursor``, ``limit`` and ``includeTotal``
    from query params (snake_case spellings are accepted too) and returns
    ``{items, limit, sortBy, sortDir, nextCursor, hasMore[, total]}``.
    """

    def __init__(self, planner: KeysetQueryPlanner, default_limit=None, max_limit=None):
        self.planner = planner
        self.default_limit = default_limit or getattr(settings, 'PAGINATION_DEFAULT_LIMIT', 20)
        self.max_limit = max_limit or getattr(settings, 'PAGINATION_MAX_LIMIT', 100)

    def parse_limit(self, raw) -> int:
        try:
            limit = int(raw)
        except (TypeError, ValueError):
            return self.default_limit
        if limit < 1:
            return self.default_limit
        return min(limit, self.max_limit)

    @staticmethod
    def _param(params, *names):
        for name in names:
            value = params.get(name)
            if value not in (None, ''):
                return value
        return None

    def paginate(self, queryset, params, serialize: Callable, count: Optional[Callable] = None) -> Dict:
        limit = self.parse_limit(self._param(params, 'limit', 'page_size'))
        cursor = decode_cursor(self._param(params, 'cursor'))

        plan = self.planner.plan(
            queryset,
            sort_by=self._param(params, 'sortBy', 'sort_by'),
            sort_dir=self._param(params, 'sortDir', 'sort_dir'),
            cursor=cursor,
            limit=limit,
        )

        rows = list(plan.queryset)
        has_more = len(rows) > limit
        page = rows[:limit]

        next_cursor = None
        if has_more and page:
            next_cursor = self.planner.cursor_for(page[-1], plan.sort_key)

        data = {
            'items': [serialize(obj) for obj in page],
            'limit': limit,
            'sortBy': plan.sort_field,
            'sortDir': plan.sort_direction,
            'nextCursor': next_cursor,
            'hasMore': has_more,
        }

        include_total = str(self._param(params, 'includeTotal', 'include_total') or '').lower()
        if include_total in ('1', 'true', 'yes'):
            data['total'] = count() if count is not None else queryset.count()
        return data
