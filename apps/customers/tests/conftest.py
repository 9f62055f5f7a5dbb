import pytest
from datetime import date
from decimal import Decimal
from django.contrib.auth.models import User
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.invoices.services import create_invoice
from apps.store_settings.services import InvoiceConfig


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def customer_cashier(db):
    return User.objects.create_user(username='customer_cashier', password='TestPass123!')


@pytest.fixture
def customer_owner(db):
    return User.objects.create_user(username='customer_owner', password='TestPass123!', is_staff=True)


@pytest.fixture
def customer_cashier_client(api_client, customer_cashier):
    """Return API client authenticated as a non-staff user."""
    refresh = RefreshToken.for_user(customer_cashier)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def customer_owner_client(api_client, customer_owner):
    """Return API client authenticated as a staff user."""
    refresh = RefreshToken.for_user(customer_owner)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def make_sale(db):
    """Factory creating a cash invoice for a customer."""

    def _make_sale(name, phone, rate):
        return create_invoice(
            customer_name=name,
            customer_phone=phone,
            payment_mode='Cash',
            items=[{
                'item_name': 'Dress Material',
                'hsn_code': '5208',
                'rate': Decimal(rate),
                'quantity': 1,
                'gst_percentage': Decimal('0'),
            }],
            config=InvoiceConfig(),
            today=date(2025, 9, 1),
        )

    return _make_sale
