"""
Import Registry

The closed set of collections bulk imports can write to. Each target names
its model, the field existing rows are matched on, and how a raw row is
shaped into model field values.

Column headers are matched loosely: case, spaces, underscores and dashes are
ignored, so "Tag ID", "tag_id" and "tagId" all land on Animal.tag_id.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Dict, Tuple

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from finance.models import FinanceRecord, FinanceType
from inventory.models import InventoryItem
from livestock.models import Animal, Location
from .exceptions import RowValidationError, UnknownImportTarget


def header_key(header) -> str:
    return re.sub(r'[^a-z0-9]', '', str(header).lower())


# =============================================================================
# VALUE COERCION
# =============================================================================

def _coerce_decimal(value, decimal_places):
    if isinstance(value, bool):
        raise InvalidOperation
    if isinstance(value, (int, float, Decimal)):
        number = Decimal(str(value))
    else:
        number = Decimal(str(value).replace(',', '').strip())
    if not number.is_finite():
        raise InvalidOperation
    # Spreadsheet floats carry more places than the column stores
    return number.quantize(Decimal(1).scaleb(-decimal_places), rounding=ROUND_HALF_UP)


def _coerce_datetime(value):
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        text = str(value).strip()
        parsed = parse_datetime(text)
        if parsed is None:
            day = parse_date(text)
            parsed = datetime.combine(day, time.min) if day else None
    if parsed is None:
        raise ValueError
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def _coerce_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    parsed = parse_date(text)
    if parsed is None:
        moment = parse_datetime(text)
        parsed = moment.date() if moment else None
    if parsed is None:
        raise ValueError
    return parsed


def _coerce_text(value):
    # Spreadsheet cells holding tag numbers come back as floats
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _validated(model_field, value):
    """Run the field's own validators (max_digits, minimum values)."""
    try:
        model_field.run_validators(value)
    except ValidationError as e:
        raise RowValidationError(f"{model_field.name}: {'; '.join(e.messages)}")
    return value


def coerce_value(model_field: models.Field, value):
    """Convert a cell value to what ``model_field`` stores, or raise RowValidationError."""
    name = model_field.name
    try:
        if isinstance(model_field, models.DecimalField):
            number = _coerce_decimal(value, model_field.decimal_places)
            return _validated(model_field, number)
        if isinstance(model_field, models.DateTimeField):
            return _coerce_datetime(value)
        if isinstance(model_field, models.DateField):
            return _coerce_date(value)
    except RowValidationError:
        raise
    except (InvalidOperation, ValueError):
        raise RowValidationError(f"{name}: '{value}' is not a valid {model_field.get_internal_type()}")

    text = _coerce_text(value)
    if model_field.choices:
        for choice, _label in model_field.choices:
            if choice.lower() == text.lower():
                return choice
        allowed = ', '.join(choice for choice, _label in model_field.choices)
        raise RowValidationError(f"{name}: '{text}' is not one of {allowed}")

    max_length = getattr(model_field, 'max_length', None)
    if max_length and len(text) > max_length:
        raise RowValidationError(f"{name}: longer than {max_length} characters")
    return text


# =============================================================================
# TARGETS
# =============================================================================

@dataclass(frozen=True, eq=False)
class ImportTarget:
    name: str
    model: type
    unique_field: str
    columns: Dict[str, Tuple[str, ...]]
    required: Tuple[str, ...] = ()
    defaults: Dict[str, object] = field(default_factory=dict)
    aliases: Tuple[str, ...] = ()

    def column_map(self):
        mapping = {}
        for field_name, headers in self.columns.items():
            mapping[header_key(field_name)] = field_name
            for header in headers:
                mapping[header_key(header)] = field_name
        return mapping

    def key_from(self, row):
        """Raw unique-key value of a row, whatever its header is called."""
        mapping = self.column_map()
        for header, raw in row.items():
            if mapping.get(header_key(header)) == self.unique_field:
                return raw
        return None

    def shape_row(self, row) -> dict:
        """
        Map a normalized row onto model field values.

        Unknown columns are ignored; blank cells leave the model default.
        """
        mapping = self.column_map()
        values = dict(self.defaults)
        for header, raw in row.items():
            field_name = mapping.get(header_key(header))
            if field_name is None or raw is None or raw == '':
                continue
            values[field_name] = coerce_value(self.model._meta.get_field(field_name), raw)

        missing = [name for name in self.required if values.get(name) in (None, '')]
        if missing:
            raise RowValidationError(f"Missing required value(s): {', '.join(missing)}")
        return values


ANIMALS = ImportTarget(
    name='animals',
    model=Animal,
    unique_field='tag_id',
    columns={
        'tag_id': ('tag', 'tag number', 'tag no', 'ear tag'),
        'name': (),
        'species': (),
        'breed': (),
        'animal_class': ('class',),
        'gender': ('sex',),
        'date_of_birth': ('dob', 'birth date'),
        'color': ('colour',),
        'acquisition_type': ('acquisition',),
        'acquisition_date': ('date acquired',),
        'status': (),
        'current_weight': ('weight', 'weight kg'),
        'purchase_cost': ('cost', 'purchase price'),
        'margin_percent': ('margin',),
        'projected_sales_price': ('sales price', 'projected price'),
        'total_feed_cost': ('feed cost',),
        'total_medication_cost': ('medication cost',),
        'notes': (),
    },
    required=('tag_id',),
    aliases=('livestock',),
)

INVENTORY = ImportTarget(
    name='inventory',
    model=InventoryItem,
    unique_field='name',
    columns={
        'name': ('item', 'item name', 'product'),
        'category': (),
        'quantity': ('qty', 'stock'),
        'unit': (),
        'cost_price': ('unit cost', 'cost'),
        'price': ('selling price', 'sale price'),
        'min_stock': ('reorder level', 'minimum stock'),
        'notes': (),
    },
    required=('name',),
    aliases=('stock', 'medication', 'medications'),
)

FINANCE = ImportTarget(
    name='finance',
    model=FinanceRecord,
    unique_field='invoice_number',
    columns={
        'date': (),
        'type': (),
        'category': (),
        'title': ('item',),
        'description': (),
        'amount': ('total',),
        'payment_method': ('payment',),
        'vendor': ('payee', 'customer'),
        'invoice_number': ('invoice', 'invoice no', 'reference'),
        'status': (),
        'recorded_by': (),
        'notes': (),
    },
    required=('title', 'amount'),
    defaults={'type': FinanceType.EXPENSE},
    aliases=('transactions',),
)

LOCATIONS = ImportTarget(
    name='locations',
    model=Location,
    unique_field='name',
    columns={
        'name': ('location',),
        'description': (),
    },
    required=('name',),
)


class ImportTargets(Enum):
    ANIMALS = ANIMALS
    INVENTORY = INVENTORY
    FINANCE = FINANCE
    LOCATIONS = LOCATIONS

    @classmethod
    def lookup(cls, name) -> ImportTarget:
        """Resolve a sheet or category name (case-insensitive, aliases included)."""
        wanted = (name or '').strip().lower()
        for member in cls:
            target = member.value
            if wanted == target.name or wanted in target.aliases:
                return target
        raise UnknownImportTarget(name)
