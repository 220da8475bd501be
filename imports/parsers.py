"""
Import Parsers

Turn uploads into ``{sheet name: [row dict, ...]}`` (workbooks) or
``[row dict, ...]`` (delimited text). The first row of every sheet or text
block is the header row.
"""

import csv
import io
import logging
import zipfile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .exceptions import ImportPayloadError

logger = logging.getLogger(__name__)

SNIFF_DELIMITERS = ',;\t|'


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _rows_from_matrix(matrix):
    """Pair a header row with the data rows under it, dropping blank rows."""
    iterator = iter(matrix)
    try:
        header = next(iterator)
    except StopIteration:
        return []

    columns = [str(cell).strip() if cell is not None else '' for cell in header]
    rows = []
    for values in iterator:
        if all(_is_blank(value) for value in values):
            continue
        rows.append({
            column: value
            for column, value in zip(columns, values)
            if column
        })
    return rows


def parse_workbook(fileobj):
    """
    Read every worksheet of an .xlsx workbook.

    Returns:
        Dict mapping sheet title to its list of row dicts, in workbook order
    """
    try:
        workbook = load_workbook(fileobj, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise ImportPayloadError(f"Could not read workbook: {e}")

    try:
        sheets = {}
        for worksheet in workbook.worksheets:
            sheets[worksheet.title] = _rows_from_matrix(worksheet.iter_rows(values_only=True))
            logger.debug(f"Parsed sheet '{worksheet.title}': {len(sheets[worksheet.title])} rows")
        return sheets
    finally:
        workbook.close()


def parse_delimited(text, delimiter=None):
    """
    Read a delimited text block with a header row.

    The delimiter is sniffed from the header when not given.
    """
    if not isinstance(text, str) or not text.strip():
        raise ImportPayloadError("Import data is empty")

    text = text.lstrip('\ufeff')
    if not delimiter:
        first_line = text.splitlines()[0]
        try:
            delimiter = csv.Sniffer().sniff(first_line, delimiters=SNIFF_DELIMITERS).delimiter
        except csv.Error:
            delimiter = ','

    if len(delimiter) != 1:
        raise ImportPayloadError(f"Delimiter must be a single character, got '{delimiter}'")

    reader = csv.reader(io.StringIO(text), delimiter=delimiter)
    try:
        return _rows_from_matrix(reader)
    except csv.Error as e:
        raise ImportPayloadError(f"Could not parse delimited data: {e}")
