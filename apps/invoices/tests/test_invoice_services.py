"""
Service layer tests for the invoice lifecycle.

Tests:
- Invoice creation (totals, GST mode defaults, payment split, customers)
- Number conflicts and retries
- Editing (GST mode immutability, item replacement, split re-normalization)
- Soft delete and lookups
"""

import pytest
from decimal import Decimal
from unittest import mock

from django.db import IntegrityError

from apps.customers.models import Customer
from apps.invoices.models import Invoice, InvoiceItem
from apps.invoices.services import (
    build_line_items,
    compute_invoice_totals,
    create_invoice,
    get_invoice_by_id,
    list_invoices,
    soft_delete_invoice,
    update_invoice,
)
from apps.invoices.services.exceptions import (
    ComputationPreconditionError,
    InvoiceNotFoundError,
    InvoiceNumberConflictError,
    InvoiceValidationError,
)
from apps.store_settings.services import InvoiceConfig, set_setting


ALLOCATOR = 'apps.invoices.services.invoice_management.allocate_invoice_number'


# ============================================================================
# TOTALS
# ============================================================================

class TestInvoiceTotals:
    """Test line building and aggregation without the database."""

    def test_build_line_items_computes_breakup(self, shirt_item):
        [line] = build_line_items([shirt_item], 'inclusive')

        assert line['taxable_value'] == Decimal('169.49')
        assert line['cgst_percentage'] == Decimal('9.00')
        assert line['sgst_percentage'] == Decimal('9.00')
        assert line['cgst_amount'] == Decimal('15.25')
        assert line['total'] == Decimal('200.00')

    def test_client_computed_amounts_ignored(self, shirt_item):
        shirt_item['total'] = Decimal('1.00')
        shirt_item['taxable_value'] = Decimal('1.00')

        [line] = build_line_items([shirt_item], 'exclusive')

        assert line['total'] == Decimal('236.00')

    def test_totals_round_grand_total_to_rupee(self, shirt_item, saree_item):
        totals = compute_invoice_totals(build_line_items([shirt_item, saree_item], 'inclusive'))

        assert totals.subtotal == Decimal('1169.49')
        assert totals.gst_amount == Decimal('80.50')
        assert totals.grand_total == Decimal('1250.00')

    def test_empty_items_rejected(self):
        with pytest.raises(InvoiceValidationError):
            build_line_items([], 'inclusive')

    def test_missing_hsn_rejected(self, shirt_item):
        shirt_item['hsn_code'] = '  '

        with pytest.raises(InvoiceValidationError, match='hsn_code'):
            build_line_items([shirt_item], 'inclusive')


# ============================================================================
# CREATE
# ============================================================================

@pytest.mark.django_db
class TestCreateInvoice:
    """Test invoice creation."""

    def test_create_cash_invoice(self, cash_invoice):
        """Cash invoices default to inclusive pricing."""
        assert cash_invoice.invoice_number == 'FY25-26/001'
        assert cash_invoice.gst_mode == 'inclusive'
        assert cash_invoice.subtotal == Decimal('169.49')
        assert cash_invoice.gst_amount == Decimal('30.50')
        assert cash_invoice.grand_total == Decimal('200.00')
        assert cash_invoice.cash_amount == Decimal('200.00')
        assert cash_invoice.card_amount == Decimal('0.00')
        assert cash_invoice.is_edited is False
        assert cash_invoice.items.count() == 1

    def test_online_invoice_defaults_to_exclusive(self, shirt_item, default_config, fy_day):
        invoice = create_invoice(
            customer_name='Meena',
            payment_mode='Online',
            items=[shirt_item],
            config=default_config,
            today=fy_day,
        )

        assert invoice.gst_mode == 'exclusive'
        assert invoice.grand_total == Decimal('236.00')
        assert invoice.cash_amount == Decimal('0.00')
        assert invoice.card_amount == Decimal('236.00')

    def test_cash_plus_card_uses_cash_default(self, split_invoice):
        assert split_invoice.gst_mode == 'inclusive'
        assert split_invoice.grand_total == Decimal('1250.00')
        assert split_invoice.cash_amount == Decimal('500.00')
        assert split_invoice.card_amount == Decimal('750.00')

    def test_explicit_gst_mode_wins(self, shirt_item, default_config, fy_day):
        invoice = create_invoice(
            customer_name='Meena',
            payment_mode='Cash',
            gst_mode='exclusive',
            items=[shirt_item],
            config=default_config,
            today=fy_day,
        )

        assert invoice.gst_mode == 'exclusive'
        assert invoice.grand_total == Decimal('236.00')

    def test_defaults_read_from_settings_store(self, shirt_item, fy_day):
        set_setting(key='cash_gst_mode', value='exclusive')
        set_setting(key='invoice_series_start', value='25')

        invoice = create_invoice(
            customer_name='Meena',
            payment_mode='Cash',
            items=[shirt_item],
            today=fy_day,
        )

        assert invoice.gst_mode == 'exclusive'
        assert invoice.invoice_number == 'FY25-26/025'

    def test_far_off_split_falls_back_to_cash(self, shirt_item, default_config, fy_day):
        invoice = create_invoice(
            customer_name='Meena',
            payment_mode='Cash+Card',
            items=[shirt_item],
            cash_amount=Decimal('50'),
            card_amount=Decimal('50'),
            config=default_config,
            today=fy_day,
        )

        assert invoice.cash_amount == Decimal('200.00')
        assert invoice.card_amount == Decimal('0.00')

    def test_numbers_increase(self, cash_invoice, split_invoice):
        assert cash_invoice.invoice_number == 'FY25-26/001'
        assert split_invoice.invoice_number == 'FY25-26/002'

    def test_customer_created_and_reused(self, cash_invoice, shirt_item, default_config, fy_day):
        again = create_invoice(
            customer_name='Asha Verma',
            customer_phone='9876543210',
            payment_mode='Cash',
            items=[shirt_item],
            config=default_config,
            today=fy_day,
        )

        assert cash_invoice.customer is not None
        assert cash_invoice.customer.customer_code == 'CUST-0001'
        assert again.customer_id == cash_invoice.customer_id
        assert Customer.objects.count() == 1

    def test_no_phone_no_customer_record(self, split_invoice):
        assert split_invoice.customer is None
        assert split_invoice.customer_name == 'Ravi Kumar'

    @pytest.mark.parametrize('overrides,error', [
        ({'customer_name': '  '}, InvoiceValidationError),
        ({'payment_mode': 'Cheque'}, InvoiceValidationError),
        ({'invoice_type': 'B2G'}, InvoiceValidationError),
        ({'gst_mode': 'compound'}, InvoiceValidationError),
        ({'items': []}, InvoiceValidationError),
    ])
    def test_invalid_header_rejected(self, overrides, error, shirt_item, default_config, fy_day):
        kwargs = {
            'customer_name': 'Meena',
            'payment_mode': 'Cash',
            'items': [shirt_item],
            'config': default_config,
            'today': fy_day,
        }
        kwargs.update(overrides)

        with pytest.raises(error):
            create_invoice(**kwargs)

        assert not Invoice.all_objects.exists()

    def test_invalid_item_saves_nothing(self, shirt_item, default_config, fy_day):
        bad_item = dict(shirt_item, rate=Decimal('-5'))

        with pytest.raises(ComputationPreconditionError):
            create_invoice(
                customer_name='Meena',
                payment_mode='Cash',
                items=[shirt_item, bad_item],
                config=default_config,
                today=fy_day,
            )

        assert not Invoice.all_objects.exists()
        assert not InvoiceItem.objects.exists()

    def test_sub_paisa_rate_saves_nothing(self, shirt_item, default_config, fy_day):
        bad_item = dict(shirt_item, rate=Decimal('10.005'))

        with pytest.raises(ComputationPreconditionError, match='rate'):
            create_invoice(
                customer_name='Meena',
                payment_mode='Cash',
                items=[bad_item],
                config=default_config,
                today=fy_day,
            )

        assert not Invoice.all_objects.exists()

    @pytest.mark.parametrize('gst_mode', ['inclusive', 'exclusive'])
    def test_stored_items_within_a_paisa(self, gst_mode, shirt_item, default_config, fy_day):
        items = [
            shirt_item,
            dict(shirt_item, item_name='Dupatta', rate=Decimal('33.33'), quantity=3, gst_percentage=Decimal('28')),
            dict(shirt_item, item_name='Socks', rate=Decimal('19.99'), quantity=13, gst_percentage=Decimal('12')),
        ]
        invoice = create_invoice(
            customer_name='Meena',
            payment_mode='Online',
            gst_mode=gst_mode,
            items=items,
            config=default_config,
            today=fy_day,
        )

        stored = InvoiceItem.objects.filter(invoice=invoice)
        assert stored.count() == 3
        for item in stored:
            assert abs(item.cgst_amount + item.sgst_amount - item.gst_amount) <= Decimal('0.01')
            assert abs(item.taxable_value + item.cgst_amount + item.sgst_amount - item.total) <= Decimal('0.01')

    def test_failed_create_does_not_consume_number(self, shirt_item, default_config, fy_day):
        with pytest.raises(ComputationPreconditionError):
            create_invoice(
                customer_name='Meena',
                payment_mode='Cash',
                items=[dict(shirt_item, quantity=0)],
                config=default_config,
                today=fy_day,
            )

        invoice = create_invoice(
            customer_name='Meena',
            payment_mode='Cash',
            items=[shirt_item],
            config=default_config,
            today=fy_day,
        )
        assert invoice.invoice_number == 'FY25-26/001'


@pytest.mark.django_db
class TestInvoiceNumberConflicts:
    """Test retries when the allocated number is already stored."""

    def test_conflict_is_retried(self, cash_invoice, shirt_item, default_config, fy_day):
        with mock.patch(ALLOCATOR, side_effect=[cash_invoice.invoice_number, 'FY25-26/009']) as allocator:
            invoice = create_invoice(
                customer_name='Meena',
                payment_mode='Cash',
                items=[shirt_item],
                config=default_config,
                today=fy_day,
            )

        assert allocator.call_count == 2
        assert invoice.invoice_number == 'FY25-26/009'
        assert Invoice.objects.filter(invoice_number=cash_invoice.invoice_number).count() == 1

    def test_conflict_surfaces_after_max_attempts(self, settings, cash_invoice, shirt_item, default_config, fy_day):
        settings.INVOICE_NUMBER_MAX_ATTEMPTS = 3

        with mock.patch(ALLOCATOR, return_value=cash_invoice.invoice_number) as allocator:
            with pytest.raises(InvoiceNumberConflictError) as exc_info:
                create_invoice(
                    customer_name='Meena',
                    payment_mode='Cash',
                    items=[shirt_item],
                    config=default_config,
                    today=fy_day,
                )

        assert allocator.call_count == 3
        assert exc_info.value.invoice_number == cash_invoice.invoice_number
        assert Invoice.all_objects.count() == 1

    def test_other_integrity_errors_are_not_retried(self, shirt_item, default_config, fy_day):
        error = IntegrityError('NOT NULL constraint failed: invoices_invoice.customer_name')

        with mock.patch.object(Invoice.objects, 'create', side_effect=error) as create:
            with pytest.raises(IntegrityError):
                create_invoice(
                    customer_name='Meena',
                    payment_mode='Cash',
                    items=[shirt_item],
                    config=default_config,
                    today=fy_day,
                )

        assert create.call_count == 1
        assert not Invoice.all_objects.exists()


# ============================================================================
# UPDATE
# ============================================================================

@pytest.mark.django_db
class TestUpdateInvoice:
    """Test invoice editing."""

    def test_gst_mode_cannot_change(self, cash_invoice, shirt_item):
        invoice = update_invoice(
            invoice_id=cash_invoice.id,
            gst_mode='exclusive',
            items=[shirt_item],
        )

        assert invoice.gst_mode == 'inclusive'
        assert invoice.grand_total == Decimal('200.00')
        assert invoice.is_edited is True

    def test_items_are_replaced(self, cash_invoice, saree_item):
        old_item_ids = list(cash_invoice.items.values_list('id', flat=True))

        invoice = update_invoice(invoice_id=cash_invoice.id, items=[saree_item])

        assert invoice.items.count() == 1
        assert invoice.items.get().item_name == 'Silk Saree'
        assert not InvoiceItem.objects.filter(id__in=old_item_ids).exists()
        assert invoice.subtotal == Decimal('1000.00')
        assert invoice.gst_amount == Decimal('50.00')
        assert invoice.grand_total == Decimal('1050.00')
        assert invoice.cash_amount == Decimal('1050.00')

    def test_header_only_edit_keeps_totals(self, cash_invoice):
        invoice = update_invoice(invoice_id=cash_invoice.id, customer_gst='27AAPFU0939F1ZV')

        assert invoice.customer_gst == '27AAPFU0939F1ZV'
        assert invoice.grand_total == Decimal('200.00')
        assert invoice.items.count() == 1
        assert invoice.invoice_number == cash_invoice.invoice_number

    def test_switch_to_cash_plus_card(self, cash_invoice):
        invoice = update_invoice(
            invoice_id=cash_invoice.id,
            payment_mode='Cash+Card',
            cash_amount=Decimal('80'),
            card_amount=Decimal('120'),
        )

        assert invoice.payment_mode == 'Cash+Card'
        assert invoice.cash_amount == Decimal('80.00')
        assert invoice.card_amount == Decimal('120.00')

    def test_new_total_renormalizes_stored_split(self, split_invoice, shirt_item):
        """Stored 500/750 no longer fits a Rs 200 total, so cash takes it all."""
        invoice = update_invoice(invoice_id=split_invoice.id, items=[shirt_item])

        assert invoice.grand_total == Decimal('200.00')
        assert invoice.cash_amount == Decimal('200.00')
        assert invoice.card_amount == Decimal('0.00')

    def test_switch_to_online_moves_everything_to_card(self, split_invoice):
        invoice = update_invoice(invoice_id=split_invoice.id, payment_mode='Online')

        assert invoice.cash_amount == Decimal('0.00')
        assert invoice.card_amount == Decimal('1250.00')
        assert invoice.gst_mode == 'inclusive'

    def test_empty_items_rejected(self, cash_invoice):
        with pytest.raises(InvoiceValidationError):
            update_invoice(invoice_id=cash_invoice.id, items=[])

    def test_invalid_item_leaves_invoice_untouched(self, cash_invoice, shirt_item):
        with pytest.raises(ComputationPreconditionError):
            update_invoice(
                invoice_id=cash_invoice.id,
                items=[dict(shirt_item, gst_percentage=Decimal('120'))],
            )

        cash_invoice.refresh_from_db()
        assert cash_invoice.is_edited is False
        assert cash_invoice.items.count() == 1

    def test_adding_phone_links_customer(self, split_invoice):
        invoice = update_invoice(invoice_id=split_invoice.id, customer_phone='9000000001')

        assert invoice.customer is not None
        assert invoice.customer.name == 'Ravi Kumar'

    def test_missing_invoice(self):
        with pytest.raises(InvoiceNotFoundError):
            update_invoice(invoice_id=9999, customer_name='Nobody')

    def test_deleted_invoice_cannot_be_edited(self, cash_invoice):
        soft_delete_invoice(invoice_id=cash_invoice.id)

        with pytest.raises(InvoiceNotFoundError):
            update_invoice(invoice_id=cash_invoice.id, customer_name='Changed')


# ============================================================================
# DELETE / LOOKUP
# ============================================================================

@pytest.mark.django_db
class TestSoftDeleteInvoice:

    def test_soft_delete_hides_invoice(self, cash_invoice):
        deleted = soft_delete_invoice(invoice_id=cash_invoice.id)

        assert deleted.deleted_at is not None
        assert deleted.is_deleted
        assert not Invoice.objects.filter(id=cash_invoice.id).exists()
        assert Invoice.all_objects.filter(id=cash_invoice.id).exists()

    def test_items_are_kept(self, cash_invoice):
        soft_delete_invoice(invoice_id=cash_invoice.id)

        assert InvoiceItem.objects.filter(invoice_id=cash_invoice.id).count() == 1

    def test_delete_twice_fails(self, cash_invoice):
        soft_delete_invoice(invoice_id=cash_invoice.id)

        with pytest.raises(InvoiceNotFoundError):
            soft_delete_invoice(invoice_id=cash_invoice.id)

    def test_deleted_number_not_reused(self, cash_invoice, shirt_item, default_config, fy_day):
        soft_delete_invoice(invoice_id=cash_invoice.id)

        invoice = create_invoice(
            customer_name='Meena',
            payment_mode='Cash',
            items=[shirt_item],
            config=default_config,
            today=fy_day,
        )

        assert invoice.invoice_number == 'FY25-26/002'


@pytest.mark.django_db
class TestInvoiceLookup:

    def test_get_by_id(self, cash_invoice):
        invoice = get_invoice_by_id(invoice_id=cash_invoice.id)

        assert invoice.invoice_number == cash_invoice.invoice_number

    def test_deleted_only_with_flag(self, cash_invoice):
        soft_delete_invoice(invoice_id=cash_invoice.id)

        with pytest.raises(InvoiceNotFoundError):
            get_invoice_by_id(invoice_id=cash_invoice.id)
        assert get_invoice_by_id(invoice_id=cash_invoice.id, include_deleted=True).is_deleted

    def test_list_excludes_deleted(self, cash_invoice, split_invoice):
        soft_delete_invoice(invoice_id=cash_invoice.id)

        assert list(list_invoices()) == [split_invoice]
        assert list_invoices(include_deleted=True).count() == 2
