import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.audit.models import AuditLog, AuditAction
from apps.clients.models import Client, Prepaid, PrepaidStatus


# =============================================================================
# Clients
# =============================================================================

@pytest.mark.django_db
class TestClientList:
    """Tests for GET /api/clients/"""

    def test_list_includes_prepaids_and_total(self, authenticated_client, client_obj, make_prepaid):
        make_prepaid(client_obj, '30.00')
        make_prepaid(client_obj, '20.00')
        make_prepaid(client_obj, '5.00', status=PrepaidStatus.CONSUMED)

        response = authenticated_client.get(reverse('clients:client-list'))

        assert response.status_code == status.HTTP_200_OK
        row = response.data['data'][0]
        assert row['id'] == str(client_obj.id)
        assert len(row['prepaids']) == 3
        assert row['total_pending'] == '50.00'

    def test_search(self, authenticated_client, client_obj, other_client_obj):
        response = authenticated_client.get(reverse('clients:client-all'), {'search': 'joaquin@'})

        assert [c['id'] for c in response.data] == [str(other_client_obj.id)]

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('clients:client-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestClientCreate:
    """Tests for POST /api/clients/"""

    def test_create_with_prepaids(self, authenticated_client, django_capture_on_commit_callbacks):
        data = {
            'full_name': 'Martina López',
            'email': 'MARTINA@example.com',
            'prepaids': [{'amount': '40.00'}, {'amount': '10.00', 'notes': 'Promo'}],
        }
        with django_capture_on_commit_callbacks(execute=True):
            response = authenticated_client.post(reverse('clients:client-list'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['email'] == 'martina@example.com'
        assert response.data['total_pending'] == '50.00'
        assert AuditLog.objects.filter(entity='Client', action=AuditAction.CREATE).count() == 1

    def test_name_too_short(self, authenticated_client):
        response = authenticated_client.post(reverse('clients:client-list'), {'full_name': 'A'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_duplicate_cuit(self, authenticated_client, client_obj):
        data = {'full_name': 'Copycat', 'cuit': client_obj.cuit}
        response = authenticated_client.post(reverse('clients:client-list'), data, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT


@pytest.mark.django_db
class TestClientDetail:

    def test_patch(self, authenticated_client, client_obj):
        url = reverse('clients:client-detail', args=[client_obj.id])
        response = authenticated_client.patch(url, {'notes': 'Prefers oat milk'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['notes'] == 'Prefers oat milk'

    def test_delete_cascades(self, authenticated_client, client_obj, make_prepaid):
        prepaid = make_prepaid(client_obj, '10.00')
        url = reverse('clients:client-detail', args=[client_obj.id])

        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert Prepaid.objects.get(id=prepaid.id).deleted_at is not None
        assert authenticated_client.get(url).status_code == status.HTTP_404_NOT_FOUND

    def test_client_prepaid_routes(self, authenticated_client, client_obj, make_prepaid):
        make_prepaid(client_obj, '10.00')
        make_prepaid(client_obj, '20.00', status=PrepaidStatus.CONSUMED)

        all_response = authenticated_client.get(reverse('clients:client-prepaids', args=[client_obj.id]))
        pending_response = authenticated_client.get(
            reverse('clients:client-pending-prepaids', args=[client_obj.id])
        )

        assert len(all_response.data) == 2
        assert [p['amount'] for p in pending_response.data] == ['10.00']


# =============================================================================
# Prepaids
# =============================================================================

@pytest.mark.django_db
class TestPrepaidEndpoints:
    """Tests for /api/prepaids/"""

    def test_list_filters_by_status(self, authenticated_client, client_obj, make_prepaid):
        make_prepaid(client_obj, '10.00')
        make_prepaid(client_obj, '20.00', status=PrepaidStatus.CONSUMED)

        response = authenticated_client.get(reverse('prepaids:prepaid-list'), {'status': 'CONSUMED'})

        assert response.status_code == status.HTTP_200_OK
        assert [p['amount'] for p in response.data['data']] == ['20.00']

    def test_list_search_by_client(self, authenticated_client, client_obj, other_client_obj, make_prepaid):
        make_prepaid(client_obj, '10.00')
        make_prepaid(other_client_obj, '20.00')

        response = authenticated_client.get(reverse('prepaids:prepaid-all'), {'search': 'valentina'})

        assert [p['client'] for p in response.data] == [client_obj.id]

    def test_by_status_requires_status(self, authenticated_client):
        response = authenticated_client.get(reverse('prepaids:prepaid-by-status'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_by_status(self, authenticated_client, client_obj, make_prepaid):
        make_prepaid(client_obj, '10.00')

        response = authenticated_client.get(reverse('prepaids:prepaid-by-status'), {'status': 'PENDING'})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1

    def test_add_prepaid_to_client(self, authenticated_client, client_obj, django_capture_on_commit_callbacks):
        url = reverse('prepaids:prepaid-for-client', kwargs={'client_id': client_obj.id})
        with django_capture_on_commit_callbacks(execute=True):
            response = authenticated_client.post(url, {'amount': '25.50'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == PrepaidStatus.PENDING
        assert AuditLog.objects.get(entity='Prepaid').entity_id == response.data['id']

    def test_add_prepaid_below_minimum(self, authenticated_client, client_obj):
        url = reverse('prepaids:prepaid-for-client', kwargs={'client_id': client_obj.id})
        response = authenticated_client.post(url, {'amount': '0.00'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_add_prepaid_unknown_client(self, authenticated_client):
        url = reverse('prepaids:prepaid-for-client', kwargs={'client_id': '00000000-0000-0000-0000-000000000000'})
        response = authenticated_client.post(url, {'amount': '10.00'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_total_for_client(self, authenticated_client, client_obj, make_prepaid):
        make_prepaid(client_obj, '10.00')
        make_prepaid(client_obj, '15.25')
        make_prepaid(client_obj, '99.00', status=PrepaidStatus.CONSUMED)

        url = reverse('prepaids:prepaid-total-for-client', kwargs={'client_id': client_obj.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_pending'] == '25.25'

    def test_pending_for_client(self, authenticated_client, client_obj, make_prepaid):
        make_prepaid(client_obj, '10.00')
        make_prepaid(client_obj, '99.00', status=PrepaidStatus.CONSUMED)

        url = reverse('prepaids:prepaid-pending-for-client', kwargs={'client_id': client_obj.id})
        response = authenticated_client.get(url)

        assert [p['amount'] for p in response.data] == ['10.00']

    def test_retrieve(self, authenticated_client, client_obj, make_prepaid):
        prepaid = make_prepaid(client_obj, '10.00')

        response = authenticated_client.get(reverse('prepaids:prepaid-detail', args=[prepaid.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['amount'] == '10.00'
