"""
Tests for the animals API.

Covers create/update/archive and the keyset-paginated list: walking every
page via nextCursor must reproduce the unpaginated ordering exactly.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.db.models import DecimalField, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

pytestmark = pytest.mark.django_db


# =============================================================================
# HELPERS
# =============================================================================

def walk(client, **params):
    """Follow nextCursor until hasMore is false; return ids in page order."""
    ids = []
    cursor = None
    for _ in range(100):
        query = dict(params)
        if cursor:
            query['cursor'] = cursor
        response = client.get('/api/animals/', query)
        assert response.status_code == 200
        ids.extend(item['id'] for item in response.data['items'])
        if not response.data['hasMore']:
            assert response.data['nextCursor'] is None
            return ids
        cursor = response.data['nextCursor']
    raise AssertionError('pagination did not terminate')


@pytest.fixture
def herd(make_animal):
    """Nine animals, four sharing one creation time, two without a weight."""
    base = timezone.now() - timedelta(days=10)
    animals = []
    for n in range(9):
        created = base if n < 4 else base + timedelta(hours=n)
        animals.append(make_animal(
            tag_id=f'H-{9 - n:02d}',
            species='Sheep' if n % 2 else 'Goat',
            created_at=created,
            current_weight=None if n in (2, 5) else Decimal(20 + (n % 3)),
            purchase_cost=Decimal(100 * (n % 4)),
        ))
    return animals


# =============================================================================
# CREATE / UPDATE / ARCHIVE
# =============================================================================

class TestAnimalWrites:
    """Tests for animal create, update and archive."""

    def test_create_animal(self, api_client):
        response = api_client.post('/api/animals/', {
            'tag_id': 'KID-100',
            'name': 'Bucky',
            'species': 'Goat',
            'gender': 'Male',
            'purchase_cost': '350.00',
        }, format='json')

        assert response.status_code == 201
        assert response.data['status'] == 'Alive'
        assert response.data['total_investment'] == '350.00'

    def test_duplicate_tag_is_conflict(self, api_client, animal):
        response = api_client.post('/api/animals/', {'tag_id': animal.tag_id}, format='json')

        assert response.status_code == 409
        assert 'error' in response.data

    def test_patch_updates_fields(self, api_client, animal):
        response = api_client.patch(f'/api/animals/{animal.id}/', {'breed': 'Boer'}, format='json')

        assert response.status_code == 200
        animal.refresh_from_db()
        assert animal.breed == 'Boer'

    def test_delete_archives(self, api_client, animal):
        from livestock.models import Animal

        response = api_client.delete(f'/api/animals/{animal.id}/', {'reason': 'Sold at market'}, format='json')

        assert response.status_code == 200
        animal.refresh_from_db()
        assert animal.is_archived is True
        assert animal.status == 'Archived'
        assert animal.archived_reason == 'Sold at market'
        assert Animal.objects.filter(pk=animal.pk).exists()

        listed = api_client.get('/api/animals/').data['items']
        assert animal.tag_id not in [item['tag_id'] for item in listed]

        archived = api_client.get('/api/animals/', {'archived': 'true'}).data['items']
        assert [item['tag_id'] for item in archived] == [animal.tag_id]

    def test_archiving_twice_is_rejected(self, api_client, animal):
        animal.archive('Culled')

        response = api_client.delete(f'/api/animals/{animal.id}/')

        assert response.status_code == 400

    def test_requires_authentication(self, animal):
        from rest_framework.test import APIClient

        response = APIClient().get('/api/animals/')

        assert response.status_code == 401


# =============================================================================
# KEYSET PAGINATION
# =============================================================================

class TestAnimalKeysetPagination:
    """Tests for the keyset-paginated animal list."""

    def test_default_walk_matches_unpaginated_order(self, api_client, herd):
        from livestock.models import Animal

        expected = [str(pk) for pk in Animal.objects.order_by('-created_at', '-pk').values_list('pk', flat=True)]

        assert walk(api_client, limit=2) == expected

    def test_ascending_tag_walk(self, api_client, herd):
        from livestock.models import Animal

        expected = [str(pk) for pk in Animal.objects.order_by('tag_id', 'pk').values_list('pk', flat=True)]

        assert walk(api_client, sortBy='tagId', sortDir='asc', limit=4) == expected

    def test_walk_on_duplicated_values_breaks_ties_by_id(self, api_client, herd):
        from livestock.models import Animal

        expected = [str(pk) for pk in Animal.objects.order_by('-purchase_cost', '-pk').values_list('pk', flat=True)]

        assert walk(api_client, sortBy='purchaseCost', sortDir='desc', limit=3) == expected

    def test_walk_over_nullable_weight(self, api_client, herd):
        from livestock.models import Animal

        weight = Coalesce('current_weight', Value(0), output_field=DecimalField(max_digits=8, decimal_places=2))
        expected = [
            str(pk) for pk in
            Animal.objects.annotate(w=weight).order_by('w', 'pk').values_list('pk', flat=True)
        ]

        assert walk(api_client, sortBy='currentWeight', sortDir='asc', limit=2) == expected

    def test_no_duplicates_when_rows_inserted_mid_walk(self, api_client, herd, make_animal):
        first = api_client.get('/api/animals/', {'limit': 3}).data

        # Newer than everything already returned: belongs before the cursor
        make_animal(tag_id='LATE-1')

        rest = walk_from(api_client, first['nextCursor'], limit=3)
        ids = [item['id'] for item in first['items']] + rest

        assert len(ids) == len(set(ids)) == len(herd)

    def test_unknown_sort_falls_back_to_created_at_desc(self, api_client, herd):
        from livestock.models import Animal

        response = api_client.get('/api/animals/', {'sortBy': 'password', 'sortDir': 'sideways', 'limit': 100})

        assert response.data['sortBy'] == 'created_at'
        assert response.data['sortDir'] == 'desc'
        expected = [str(pk) for pk in Animal.objects.order_by('-created_at', '-pk').values_list('pk', flat=True)]
        assert [item['id'] for item in response.data['items']] == expected

    def test_limit_is_capped(self, api_client, herd):
        response = api_client.get('/api/animals/', {'limit': 500})

        assert response.data['limit'] == 100
        assert response.data['hasMore'] is False

    def test_invalid_limit_uses_default(self, api_client, herd):
        response = api_client.get('/api/animals/', {'limit': 'lots'})

        assert response.data['limit'] == 20

    def test_tampered_cursor_restarts_from_first_page(self, api_client, herd):
        first = api_client.get('/api/animals/', {'limit': 3}).data
        token = first['nextCursor']
        tampered = token[:4] + ('A' if token[4] != 'A' else 'B') + token[5:]

        response = api_client.get('/api/animals/', {'limit': 3, 'cursor': tampered})

        assert response.status_code == 200
        assert response.data['items'] == first['items']

    def test_total_only_when_requested(self, api_client, herd):
        plain = api_client.get('/api/animals/').data
        assert 'total' not in plain

        counted = api_client.get('/api/animals/', {'includeTotal': 'true', 'species': 'goat'}).data
        assert counted['total'] == 5

    def test_cached_total_refreshes_after_create(self, api_client, herd):
        before = api_client.get('/api/animals/', {'includeTotal': 'true'}).data['total']

        api_client.post('/api/animals/', {'tag_id': 'NEW-1'}, format='json')
        after = api_client.get('/api/animals/', {'includeTotal': 'true'}).data['total']

        assert after == before + 1


def walk_from(client, cursor, **params):
    ids = []
    while cursor:
        data = client.get('/api/animals/', {**params, 'cursor': cursor}).data
        ids.extend(item['id'] for item in data['items'])
        cursor = data['nextCursor']
    return ids
