"""
Unit tests for the keyset pagination building blocks.
"""

from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

import pytest
from django.core import signing

from core.pagination import (
    CURSOR_SALT,
    InvalidCursorValue,
    KeysetPagination,
    KeysetQueryPlanner,
    decode_cursor,
    encode_cursor,
    normalize_sort_value,
)


@pytest.fixture
def planner():
    return KeysetQueryPlanner(
        sortable_fields=['created_at', 'tag_id', 'current_weight'],
        aliases={'tagId': 'tag_id'},
        null_fallbacks={'current_weight': 0},
    )


# =============================================================================
# CURSOR CODEC
# =============================================================================

class TestCursorCodec:

    def test_round_trip(self):
        moment = datetime(2024, 3, 1, 8, 30, tzinfo=dt_timezone.utc)

        cursor = decode_cursor(encode_cursor(moment, 'abc-123'))

        assert cursor.sort_value == moment.isoformat()
        assert cursor.record_id == 'abc-123'

    def test_token_is_url_safe(self):
        token = encode_cursor('Ewe/"quoted" & more', 'id-1')

        assert all(ch.isalnum() or ch in '-_:.' for ch in token)

    def test_decimal_and_null_values(self):
        assert decode_cursor(encode_cursor(Decimal('12.50'), 'x')).sort_value == '12.50'
        assert decode_cursor(encode_cursor(None, 'x')).sort_value is None

    @pytest.mark.parametrize('token', [None, '', 'garbage', 'a:b:c', 12])
    def test_garbage_is_ignored(self, token):
        assert decode_cursor(token) is None

    def test_truncated_token_is_ignored(self):
        token = encode_cursor('TAG-1', 'id-1')

        assert decode_cursor(token[:-3]) is None

    def test_token_signed_for_something_else_is_ignored(self):
        token = signing.dumps(['TAG-1', 'id-1'], salt='some.other.salt')

        assert decode_cursor(token) is None

    @pytest.mark.parametrize('payload', [
        {'value': 1},
        ['only-one'],
        [1, 2],
        [['nested'], 'id-1'],
        ['TAG-1', ''],
    ])
    def test_wrong_shape_is_ignored(self, payload):
        assert decode_cursor(signing.dumps(payload, salt=CURSOR_SALT)) is None


# =============================================================================
# PLANNER
# =============================================================================

class TestKeysetQueryPlanner:

    def test_alias_and_direction(self, planner):
        assert planner.resolve('tagId', 'ASC') == ('tag_id', 'asc')

    @pytest.mark.parametrize('sort_by,sort_dir', [
        ('password', 'desc'),
        (None, None),
        ('tag_id; DROP TABLE animals', 'asc'),
    ])
    def test_unknown_values_fall_back(self, planner, sort_by, sort_dir):
        field, _direction = planner.resolve(sort_by, sort_dir)

        assert field == 'created_at'

    def test_bad_direction_uses_default(self, planner):
        assert planner.resolve('tag_id', 'sideways') == ('tag_id', 'desc')

    def test_nullable_fields_sort_on_annotation(self, planner):
        assert planner.sort_key_for('current_weight') == '_keyset_value'
        assert planner.sort_key_for('tag_id') == 'tag_id'

    def test_default_must_be_sortable(self):
        with pytest.raises(ValueError):
            KeysetQueryPlanner(sortable_fields=['tag_id'])


class TestNormalizeSortValue:

    def field(self, name):
        from livestock.models import Animal
        return Animal._meta.get_field(name)

    def test_datetime(self):
        value = normalize_sort_value(self.field('created_at'), '2024-03-01T08:30:00+00:00')

        assert value == datetime(2024, 3, 1, 8, 30, tzinfo=dt_timezone.utc)

    def test_decimal(self):
        assert normalize_sort_value(self.field('current_weight'), '41.25') == Decimal('41.25')

    def test_text(self):
        assert normalize_sort_value(self.field('tag_id'), 'TAG-9') == 'TAG-9'

    def test_none_passes_through(self):
        assert normalize_sort_value(self.field('current_weight'), None) is None

    @pytest.mark.parametrize('name,raw', [
        ('created_at', 'yesterday'),
        ('current_weight', 'heavy'),
        ('date_of_birth', '2024-13-45x'),
    ])
    def test_mismatched_values_raise(self, name, raw):
        with pytest.raises(InvalidCursorValue):
            normalize_sort_value(self.field(name), raw)


# =============================================================================
# LIMITS
# =============================================================================

class TestParseLimit:

    @pytest.fixture
    def pagination(self, planner):
        return KeysetPagination(planner, default_limit=20, max_limit=100)

    @pytest.mark.parametrize('raw,expected', [
        (None, 20),
        ('', 20),
        ('abc', 20),
        ('0', 20),
        ('-5', 20),
        ('7', 7),
        ('100', 100),
        ('500', 100),
    ])
    def test_parse_limit(self, pagination, raw, expected):
        assert pagination.parse_limit(raw) == expected
