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
def cashier_user(db):
    """Create and return a counter (non-staff) user."""
    return User.objects.create_user(username='cashier', password='TestPass123!')


@pytest.fixture
def owner_user(db):
    """Create and return a staff user."""
    return User.objects.create_user(username='owner', password='TestPass123!', is_staff=True)


@pytest.fixture
def cashier_client(api_client, cashier_user):
    """Return API client authenticated as cashier."""
    refresh = RefreshToken.for_user(cashier_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def owner_client(api_client, owner_user):
    """Return API client authenticated as staff owner."""
    refresh = RefreshToken.for_user(owner_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def fy_day():
    """A day inside FY25-26."""
    return date(2025, 6, 15)


@pytest.fixture
def default_config():
    return InvoiceConfig()


@pytest.fixture
def shirt_item():
    """Rs 100 x 2 at 18% GST."""
    return {
        'item_name': 'Cotton Shirt',
        'description': 'Blue, size M',
        'hsn_code': '6205',
        'rate': Decimal('100.00'),
        'quantity': 2,
        'gst_percentage': Decimal('18'),
    }


@pytest.fixture
def saree_item():
    """Rs 1,050 x 1 at 5% GST."""
    return {
        'item_name': 'Silk Saree',
        'hsn_code': '5007',
        'rate': Decimal('1050.00'),
        'quantity': 1,
        'gst_percentage': Decimal('5'),
    }


@pytest.fixture
def cash_invoice(db, shirt_item, default_config, fy_day):
    """Inclusive cash invoice for Rs 200."""
    return create_invoice(
        customer_name='Asha Verma',
        customer_phone='9876543210',
        payment_mode='Cash',
        items=[shirt_item],
        config=default_config,
        today=fy_day,
    )


@pytest.fixture
def split_invoice(db, shirt_item, saree_item, default_config, fy_day):
    """Cash+Card invoice for Rs 1,250 paid 500 cash / 750 card."""
    return create_invoice(
        customer_name='Ravi Kumar',
        payment_mode='Cash+Card',
        items=[shirt_item, saree_item],
        cash_amount=Decimal('500'),
        card_amount=Decimal('750'),
        config=default_config,
        today=fy_day,
    )
