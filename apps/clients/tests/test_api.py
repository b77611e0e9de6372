import pytest
from django.urls import reverse
from rest_framework import status

from apps.clients.models import Client


@pytest.mark.django_db
class TestClientCreate:
    """Tests for POST /api/clients/"""

    def test_seller_registers_person(self, seller_client):
        url = reverse('clients:client-list')
        data = {'first_name': 'Luis', 'last_name': 'Mamani', 'document_number': '40111222'}
        response = seller_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['display_name'] == 'Luis Mamani'

    def test_register_company(self, seller_client):
        url = reverse('clients:client-list')
        response = seller_client.post(url, {'company_name': 'Grifo Norte EIRL'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['display_name'] == 'Grifo Norte EIRL'

    def test_name_required(self, seller_client):
        url = reverse('clients:client-list')
        response = seller_client.post(url, {'phone': '999111222'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Client.objects.count() == 0

    def test_unauthenticated(self, api_client):
        url = reverse('clients:client-list')
        response = api_client.post(url, {'company_name': 'X'}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestClientList:
    """Tests for GET /api/clients/"""

    def test_list(self, seller_client, customer, company_customer):
        url = reverse('clients:client-list')
        response = seller_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2

    @pytest.mark.parametrize('term', ['quis', '45678912', 'ROSA'])
    def test_search(self, seller_client, customer, company_customer, term):
        url = reverse('clients:client-list')
        response = seller_client.get(url, {'search': term})

        assert [c['client_id'] for c in response.data['results']] == [customer.pk]

    def test_search_company(self, seller_client, customer, company_customer):
        url = reverse('clients:client-list')
        response = seller_client.get(url, {'search': 'andinos'})

        assert [c['client_id'] for c in response.data['results']] == [company_customer.pk]


@pytest.mark.django_db
class TestClientUpdateDelete:

    def test_admin_updates_phone(self, admin_client, customer):
        url = reverse('clients:client-detail', kwargs={'pk': customer.pk})
        response = admin_client.patch(url, {'phone': '911000111'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        customer.refresh_from_db()
        assert customer.phone == '911000111'

    def test_seller_cannot_update(self, seller_client, customer):
        url = reverse('clients:client-detail', kwargs={'pk': customer.pk})
        response = seller_client.patch(url, {'phone': '911000111'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_deletes_client_without_credits(self, admin_client, company_customer):
        url = reverse('clients:client-detail', kwargs={'pk': company_customer.pk})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Client.objects.filter(pk=company_customer.pk).exists()

    def test_client_with_credits_cannot_be_deleted(self, admin_client, customer, make_credit):
        make_credit()
        url = reverse('clients:client-detail', kwargs={'pk': customer.pk})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert Client.objects.filter(pk=customer.pk).exists()

    def test_seller_cannot_delete(self, seller_client, company_customer):
        url = reverse('clients:client-detail', kwargs={'pk': company_customer.pk})
        response = seller_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
