"""
Bulk Import API

POST /api/import/

Two payload shapes:
- multipart/form-data with an .xlsx workbook under ``file``; each sheet name
  picks the collection its rows go to
- JSON ``{"category": "...", "data": "<delimited text>", "delimiter": ","}``
  (``data`` may also be a list of row objects)

Response: {imported, skipped, sheets?, errors[]}
"""

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from livestock.views import animal_count_cache
from .exceptions import ImportPayloadError, PayloadTooLarge, UnknownImportTarget
from .parsers import parse_delimited, parse_workbook
from .registry import ImportTargets
from .services import BulkReconciler

logger = logging.getLogger(__name__)


class ImportView(APIView):
    """Import spreadsheet or delimited-text rows, skipping keys that already exist."""
    permission_classes = [IsAdminUser]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def post(self, request):
        limit = settings.IMPORT_MAX_PAYLOAD_BYTES

        try:
            self._check_content_length(request, limit)

            upload = request.FILES.get('file')
            if upload is not None:
                if upload.size > limit:
                    raise PayloadTooLarge(upload.size, limit)
                data = self._import_workbook(parse_workbook(upload))
            else:
                data = self._import_category(request.data)
        except PayloadTooLarge as e:
            logger.warning(f"Rejected import from {request.user}: {str(e)}")
            return Response({'error': str(e)}, status=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)
        except ImportPayloadError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(
            f"Import by {request.user}: {data['imported']} imported, {data['skipped']} skipped, "
            f"{len(data['errors'])} error(s)"
        )
        return Response(data, status=status.HTTP_200_OK)

    @staticmethod
    def _check_content_length(request, limit):
        try:
            length = int(request.META.get('CONTENT_LENGTH') or 0)
        except ValueError:
            length = 0
        if length > limit:
            raise PayloadTooLarge(length, limit)

    @staticmethod
    def _invalidate_counts(target, result):
        if target is ImportTargets.ANIMALS.value and result.imported:
            animal_count_cache.clear()

    def _import_category(self, payload):
        category = payload.get('category')
        if not category:
            raise ImportPayloadError("'category' is required when no file is uploaded")

        target = ImportTargets.lookup(category)
        rows = payload.get('data')
        if isinstance(rows, list):
            if not all(isinstance(row, dict) for row in rows):
                raise ImportPayloadError("'data' rows must be objects")
        else:
            rows = parse_delimited(rows, payload.get('delimiter'))

        result = BulkReconciler().reconcile(target, rows)
        self._invalidate_counts(target, result)
        return {
            'imported': result.imported,
            'skipped': result.skipped,
            'errors': result.errors,
        }

    def _import_workbook(self, sheets):
        if not sheets:
            raise ImportPayloadError("Workbook has no sheets")

        reconciler = BulkReconciler()
        data = {'imported': 0, 'skipped': 0, 'sheets': {}, 'errors': []}

        for sheet_name, rows in sheets.items():
            try:
                target = ImportTargets.lookup(sheet_name)
            except UnknownImportTarget as e:
                data['errors'].append({'sheet': sheet_name, 'row': None, 'key': None, 'error': str(e)})
                continue

            result = reconciler.reconcile(target, rows)
            self._invalidate_counts(target, result)
            data['sheets'][sheet_name] = result.to_dict()
            data['imported'] += result.imported
            data['skipped'] += result.skipped
            data['errors'].extend({'sheet': sheet_name, **entry} for entry in result.errors)

        return data
