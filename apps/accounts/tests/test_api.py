import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIRequestFactory

from apps.accounts.models import User, UserRole
from apps.accounts.permissions import IsLedgerAdmin, IsLedgerAdminOrReadOnly


# =============================================================================
# Token Tests
# =============================================================================

@pytest.mark.django_db
class TestTokens:
    """Tests for /api/auth/token/"""

    def test_obtain_token(self, api_client, seller):
        url = reverse('accounts:token-obtain')
        response = api_client.post(url, {'username': 'seller', 'password': 'TestPass123!'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data
        assert 'refresh' in response.data

    def test_wrong_password(self, api_client, seller):
        url = reverse('accounts:token-obtain')
        response = api_client.post(url, {'username': 'seller', 'password': 'nope'}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_inactive_user(self, api_client, seller):
        seller.is_active = False
        seller.save()
        url = reverse('accounts:token-obtain')
        response = api_client.post(url, {'username': 'seller', 'password': 'TestPass123!'}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_token(self, api_client, seller):
        tokens = api_client.post(
            reverse('accounts:token-obtain'),
            {'username': 'seller', 'password': 'TestPass123!'},
            format='json',
        ).data
        response = api_client.post(reverse('accounts:token-refresh'), {'refresh': tokens['refresh']}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data


@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/auth/me/"""

    def test_me(self, seller_client):
        response = seller_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['username'] == 'seller'
        assert response.data['display_name'] == 'Sam Seller'
        assert response.data['role'] == 'seller'

    def test_me_unauthenticated(self, api_client):
        response = api_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Role Tests
# =============================================================================

@pytest.mark.django_db
class TestLedgerRoles:

    def test_display_name_falls_back_to_username(self, db):
        user = User.objects.create_user(username='night-shift', password='x')

        assert user.get_display_name() == 'night-shift'
        assert user.role == UserRole.SELLER

    def test_superuser_defaults(self, db):
        user = User.objects.create_superuser(username='root', password='x')

        assert user.role == UserRole.SUPERADMIN
        assert user.is_ledger_admin is True

    def test_username_required(self, db):
        with pytest.raises(ValueError):
            User.objects.create_user(username='', password='x')

    @pytest.mark.parametrize('role, expected', [
        (UserRole.SELLER, False),
        (UserRole.ADMIN, True),
        (UserRole.SUPERADMIN, True),
    ])
    def test_is_ledger_admin(self, db, role, expected):
        user = User.objects.create_user(username=f'user-{role}', password='x', role=role)

        assert user.is_ledger_admin is expected

    def test_permissions(self, seller, admin_user):
        factory = APIRequestFactory()
        get_request = factory.get('/')
        post_request = factory.post('/')

        get_request.user = seller
        post_request.user = seller
        assert IsLedgerAdmin().has_permission(get_request, None) is False
        assert IsLedgerAdminOrReadOnly().has_permission(get_request, None) is True
        assert IsLedgerAdminOrReadOnly().has_permission(post_request, None) is False

        post_request.user = admin_user
        assert IsLedgerAdminOrReadOnly().has_permission(post_request, None) is True


# =============================================================================
# Health Check Tests
# =============================================================================

@pytest.mark.django_db
class TestHealthCheck:

    def test_health_check_is_public(self, api_client):
        response = api_client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'status': 'healthy', 'database': 'ok'}
