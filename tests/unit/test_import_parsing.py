"""
Unit tests for import parsing, row normalization and the target registry.
"""

from datetime import date
from decimal import Decimal

import pytest

from imports.exceptions import ImportPayloadError, RowValidationError, UnknownImportTarget
from imports.parsers import parse_delimited
from imports.registry import ImportTargets, header_key
from imports.services import BatchMode, ImportResult, RowStatus, normalize_row


# =============================================================================
# DELIMITED TEXT
# =============================================================================

class TestParseDelimited:

    def test_comma_rows(self):
        rows = parse_delimited('name,quantity\nHay,40\nSalt,6')

        assert rows == [{'name': 'Hay', 'quantity': '40'}, {'name': 'Salt', 'quantity': '6'}]

    @pytest.mark.parametrize('delimiter', [';', '\t', '|'])
    def test_delimiter_is_sniffed(self, delimiter):
        text = delimiter.join(['name', 'unit', 'quantity']) + '\n' + delimiter.join(['Hay', 'bale', '40'])

        assert parse_delimited(text) == [{'name': 'Hay', 'unit': 'bale', 'quantity': '40'}]

    def test_explicit_delimiter(self):
        assert parse_delimited('name;qty\nHay;4', delimiter=';') == [{'name': 'Hay', 'qty': '4'}]

    def test_quoted_values_keep_delimiters(self):
        rows = parse_delimited('name,notes\n"Hay, meadow","first cut, dry"')

        assert rows == [{'name': 'Hay, meadow', 'notes': 'first cut, dry'}]

    def test_byte_order_mark_and_blank_lines(self):
        rows = parse_delimited('\ufeffname,unit\n\nHay,bale\n,\n')

        assert rows == [{'name': 'Hay', 'unit': 'bale'}]

    def test_header_only(self):
        assert parse_delimited('name,unit') == []

    @pytest.mark.parametrize('text', ['', '   \n', None, ['name']])
    def test_empty_payload(self, text):
        with pytest.raises(ImportPayloadError):
            parse_delimited(text)

    def test_multi_character_delimiter(self):
        with pytest.raises(ImportPayloadError):
            parse_delimited('name::qty\nHay::4', delimiter='::')


# =============================================================================
# ROW NORMALIZATION
# =============================================================================

def test_normalize_row_trims_and_drops_blank_headers():
    row = normalize_row({' Name ': '  Hay ', '': 'orphan', None: ['extra'], 'Qty': 4})

    assert row == {'Name': 'Hay', 'Qty': 4}


def test_header_key_is_loose():
    assert header_key('Tag ID') == header_key('tag_id') == header_key('tagId') == 'tagid'


# =============================================================================
# REGISTRY
# =============================================================================

class TestImportTargets:

    @pytest.mark.parametrize('name,expected', [
        ('Inventory', 'inventory'),
        ('STOCK', 'inventory'),
        ('Medication', 'inventory'),
        (' livestock ', 'animals'),
        ('Animals', 'animals'),
        ('transactions', 'finance'),
        ('locations', 'locations'),
    ])
    def test_lookup(self, name, expected):
        assert ImportTargets.lookup(name).name == expected

    @pytest.mark.parametrize('name', ['poultry', '', None])
    def test_unknown_target(self, name):
        with pytest.raises(UnknownImportTarget):
            ImportTargets.lookup(name)

    def test_shape_animal_row(self):
        target = ImportTargets.lookup('animals')

        values = target.shape_row({
            'Tag': 1001.0,
            'Sex': 'female',
            'DOB': '2023-05-04',
            'Weight': '310.5',
            'Unrelated': 'ignored',
            'Breed': '',
        })

        assert values == {
            'tag_id': '1001',
            'gender': 'Female',
            'date_of_birth': date(2023, 5, 4),
            'current_weight': Decimal('310.5'),
        }

    def test_shape_finance_row_applies_defaults(self):
        target = ImportTargets.lookup('finance')

        values = target.shape_row({'Title': 'Hay', 'Total': '1,200.00', 'Date': '2024-02-01'})

        assert values['type'] == 'Expense'
        assert values['amount'] == Decimal('1200.00')
        assert values['date'].year == 2024

    def test_missing_required_value(self):
        target = ImportTargets.lookup('finance')

        with pytest.raises(RowValidationError, match='amount'):
            target.shape_row({'Title': 'Hay'})

    @pytest.mark.parametrize('row,message', [
        ({'tag_id': 'A-1', 'gender': 'unknown'}, 'gender'),
        ({'tag_id': 'A-1', 'purchase_cost': 'cheap'}, 'purchase_cost'),
        ({'tag_id': 'A-1', 'date_of_birth': 'spring'}, 'date_of_birth'),
        ({'tag_id': 'A' * 60}, 'tag_id'),
        ({'tag_id': 'A-1', 'current_weight': 'NaN'}, 'current_weight'),
        ({'tag_id': 'A-1', 'current_weight': '12345678901'}, 'current_weight'),
    ])
    def test_invalid_values(self, row, message):
        with pytest.raises(RowValidationError, match=message):
            ImportTargets.lookup('animals').shape_row(row)

    def test_key_from_uses_any_header_spelling(self):
        target = ImportTargets.lookup('animals')

        assert target.key_from({'Ear Tag': 'E-7', 'species': 'Goat'}) == 'E-7'
        assert target.key_from({'species': 'Goat'}) is None


# =============================================================================
# RESULTS
# =============================================================================

def test_result_reports_batch_errors_before_row_errors():
    result = ImportResult(target='animals', batch_errors=['Batch insert rejected'])
    result.record(1, RowStatus.INSERTED, key='A-1')
    result.record(2, RowStatus.SKIPPED, key='A-2')
    result.record(3, RowStatus.FAILED, key='A-3', error='bad')

    assert result.to_dict() == {
        'target': 'animals',
        'imported': 1,
        'skipped': 1,
        'errors': [
            {'row': None, 'key': None, 'error': 'Batch insert rejected'},
            {'row': 3, 'key': 'A-3', 'error': 'bad'},
        ],
    }


def test_batch_mode_setting_is_validated(settings):
    from django.core.exceptions import ImproperlyConfigured

    from imports.services import configured_batch_mode

    settings.IMPORT_BATCH_MODE = 'ABORT'
    assert configured_batch_mode() == BatchMode.ABORT

    settings.IMPORT_BATCH_MODE = 'retry-forever'
    with pytest.raises(ImproperlyConfigured):
        configured_batch_mode()


def test_decimals_are_rounded_to_column_places():
    values = ImportTargets.lookup('animals').shape_row({'tag_id': 'A-1', 'weight': 310.456})

    assert values['current_weight'] == Decimal('310.46')
