import pytest
from django.contrib.auth.models import User
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def settings_cashier(db):
    return User.objects.create_user(username='settings_cashier', password='TestPass123!')


@pytest.fixture
def settings_owner(db):
    return User.objects.create_user(username='settings_owner', password='TestPass123!', is_staff=True)


@pytest.fixture
def settings_cashier_client(api_client, settings_cashier):
    """Return API client authenticated as a non-staff user."""
    refresh = RefreshToken.for_user(settings_cashier)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def settings_owner_client(api_client, settings_owner):
    """Return API client authenticated as a staff user."""
    refresh = RefreshToken.for_user(settings_owner)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client
