import pytest
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from django.db import DatabaseError

from apps.clients.models import Prepaid, PrepaidStatus
from apps.clients.services import ClientNotFound, PrepaidAlreadyConsumed, total_pending_for_client
from apps.common.exceptions import ConcurrentModification, InvalidInputError, OperationFailed
from apps.products.services import InsufficientStockInSale, ProductNotFound
from apps.sales.models import Sale, SaleItem, SaleStatus, PaymentMethod
from apps.sales.services import (
    create_sale,
    get_sale,
    get_daily_sales,
    update_sale,
    remove_sale,
    next_sale_number,
    SaleNotFound,
    SaleAlreadyCompleted,
    SaleAlreadyCancelled,
    InvalidPrepaidAmount,
)


def _refresh(*objs):
    for obj in objs:
        obj.refresh_from_db()


@pytest.mark.django_db
class TestSaleNumbering:

    def test_first_and_next_number_of_the_day(self):
        # 15:00 UTC is 12:00 in Buenos Aires
        moment = datetime(2025, 9, 1, 15, 0, tzinfo=dt_timezone.utc)

        first = next_sale_number(now=moment)
        Sale.objects.create(sale_number=first, payment_method=PaymentMethod.CASH)

        assert first == 'V-2025-0901-001'
        assert next_sale_number(now=moment) == 'V-2025-0901-002'

    def test_uses_business_day_not_utc_day(self):
        # 01:30 UTC on Sep 2 is still Sep 1 in Buenos Aires
        moment = datetime(2025, 9, 2, 1, 30, tzinfo=dt_timezone.utc)

        assert next_sale_number(now=moment) == 'V-2025-0901-001'

    def test_deleted_sales_still_count(self):
        moment = datetime(2025, 9, 1, 15, 0, tzinfo=dt_timezone.utc)
        sale = Sale.objects.create(sale_number='V-2025-0901-007', payment_method=PaymentMethod.CARD)
        sale.soft_delete()

        assert next_sale_number(now=moment) == 'V-2025-0901-008'


@pytest.mark.django_db
class TestCreateSale:

    def test_totals(self, user, product, line):
        sale = create_sale(
            actor=user,
            items=[line(product)],
            payment_method=PaymentMethod.CARD,
            tax=10,
            discount=5,
            prepaid_used=20,
        )

        assert sale.subtotal == Decimal('100.00')
        assert sale.total == Decimal('85.00')
        assert sale.status == SaleStatus.COMPLETED
        product.refresh_from_db()
        assert product.stock == 19

    def test_items_snapshot_name_and_caller_price(self, user, product, line):
        sale = create_sale(
            actor=user,
            items=[line(product, quantity=3, unit_price='90.00')],
            payment_method=PaymentMethod.TRANSFER,
        )

        item = SaleItem.objects.get(sale=sale)
        assert item.product_name == 'Espresso Blend 1kg'
        assert item.subtotal == Decimal('270.00')
        assert sale.total == Decimal('270.00')

    def test_customer_email_is_lowercased(self, user, product, line):
        sale = create_sale(
            actor=user,
            items=[line(product)],
            payment_method=PaymentMethod.CASH,
            customer_email='Walk.In@Example.com',
        )

        assert sale.customer_email == 'walk.in@example.com'

    def test_cash_sale_draws_prepaid_fifo(self, user, product, client_obj, make_prepaid, line):
        prepaid = make_prepaid(client_obj, '50.00')

        sale = create_sale(
            actor=user,
            client_id=client_obj.id,
            items=[line(product, unit_price='80.00')],
            payment_method=PaymentMethod.CASH,
        )

        prepaid.refresh_from_db()
        assert sale.prepaid_used == Decimal('50.00')
        assert sale.total == Decimal('30.00')
        assert sale.prepaid_id is None
        assert prepaid.status == PrepaidStatus.CONSUMED

    def test_fifo_never_exceeds_amount_due(self, user, product, client_obj, make_prepaid, line):
        make_prepaid(client_obj, '500.00')

        sale = create_sale(
            actor=user,
            client_id=client_obj.id,
            items=[line(product)],
            payment_method=PaymentMethod.CASH,
        )

        assert sale.prepaid_used == Decimal('100.00')
        assert sale.total == Decimal('0.00')
        assert total_pending_for_client(client_id=client_obj.id) == Decimal('400.00')

    def test_card_sale_does_not_touch_prepaids(self, user, product, client_obj, make_prepaid, line):
        make_prepaid(client_obj, '50.00')

        sale = create_sale(
            actor=user,
            client_id=client_obj.id,
            items=[line(product)],
            payment_method=PaymentMethod.CARD,
        )

        assert sale.prepaid_used == Decimal('0.00')
        assert total_pending_for_client(client_id=client_obj.id) == Decimal('50.00')

    def test_targeted_prepaid_is_consumed_once(self, user, product, client_obj, make_prepaid, line):
        prepaid = make_prepaid(client_obj, '30.00')

        sale = create_sale(
            actor=user,
            client_id=client_obj.id,
            items=[line(product)],
            payment_method=PaymentMethod.CARD,
            prepaid_id=prepaid.id,
            consumed_prepaid=True,
        )

        prepaid.refresh_from_db()
        assert sale.prepaid_id == prepaid.id
        assert sale.prepaid_used == Decimal('30.00')
        assert sale.total == Decimal('70.00')
        assert prepaid.status == PrepaidStatus.CONSUMED

        with pytest.raises(PrepaidAlreadyConsumed):
            create_sale(
                actor=user,
                client_id=client_obj.id,
                items=[line(product)],
                payment_method=PaymentMethod.CARD,
                prepaid_id=prepaid.id,
                consumed_prepaid=True,
            )

        product.refresh_from_db()
        assert product.stock == 19
        assert Sale.objects.count() == 1

    def test_prepaid_above_amount_due_rolls_back(self, user, product, client_obj, make_prepaid, line):
        prepaid = make_prepaid(client_obj, '150.00')

        with pytest.raises(InvalidPrepaidAmount):
            create_sale(
                actor=user,
                client_id=client_obj.id,
                items=[line(product)],
                payment_method=PaymentMethod.CARD,
                prepaid_id=prepaid.id,
                consumed_prepaid=True,
            )

        prepaid.refresh_from_db()
        product.refresh_from_db()
        assert prepaid.status == PrepaidStatus.PENDING
        assert product.stock == 20
        assert not Sale.objects.exists()

    def test_explicit_prepaid_above_ceiling(self, user, product, line):
        with pytest.raises(InvalidPrepaidAmount):
            create_sale(
                actor=user,
                items=[line(product)],
                payment_method=PaymentMethod.CARD,
                prepaid_used='100.01',
            )

    def test_insufficient_stock_leaves_everything_untouched(
        self, user, product, cookie, client_obj, make_prepaid, line
    ):
        prepaid = make_prepaid(client_obj, '20.00')

        with pytest.raises(InsufficientStockInSale):
            create_sale(
                actor=user,
                client_id=client_obj.id,
                items=[line(product), line(cookie, quantity=3)],
                payment_method=PaymentMethod.CASH,
            )

        _refresh(product, cookie, prepaid)
        assert product.stock == 20
        assert cookie.stock == 2
        assert prepaid.status == PrepaidStatus.PENDING
        assert not Sale.objects.exists()

    def test_same_product_on_two_lines_counts_together(self, user, cookie, line):
        with pytest.raises(InsufficientStockInSale):
            create_sale(
                actor=user,
                items=[line(cookie, quantity=2), line(cookie, quantity=1)],
                payment_method=PaymentMethod.CASH,
            )

    def test_unknown_product(self, user, line, product):
        item = line(product)
        item['product_id'] = '00000000-0000-0000-0000-000000000000'

        with pytest.raises(ProductNotFound):
            create_sale(actor=user, items=[item], payment_method=PaymentMethod.CASH)

    def test_deleted_client(self, user, product, client_obj, line):
        client_obj.soft_delete()

        with pytest.raises(ClientNotFound):
            create_sale(
                actor=user,
                client_id=client_obj.id,
                items=[line(product)],
                payment_method=PaymentMethod.CASH,
            )

    def test_database_error_becomes_operation_failed(self, user, product, line, monkeypatch):
        def broken(**kwargs):
            raise DatabaseError('disk full')

        monkeypatch.setattr('apps.sales.services.settlement.debit_stock', broken)

        with pytest.raises(OperationFailed) as exc_info:
            create_sale(actor=user, items=[line(product)], payment_method=PaymentMethod.CASH)

        assert isinstance(exc_info.value.__cause__, DatabaseError)
        assert not Sale.objects.exists()


@pytest.mark.django_db
class TestCancelAndDelete:

    def test_cancel_restores_targeted_prepaid_in_place(self, user, product, client_obj, make_prepaid, line):
        prepaid = make_prepaid(client_obj, '30.00')
        sale = create_sale(
            actor=user,
            client_id=client_obj.id,
            items=[line(product, quantity=2)],
            payment_method=PaymentMethod.CARD,
            prepaid_id=prepaid.id,
            consumed_prepaid=True,
        )

        update_sale(sale_id=sale.id, actor=user, status=SaleStatus.CANCELLED)

        _refresh(sale, prepaid, product)
        assert sale.status == SaleStatus.CANCELLED
        assert prepaid.status == PrepaidStatus.PENDING
        assert prepaid.consumed_at is None
        assert product.stock == 20
        assert Prepaid.objects.filter(client=client_obj).count() == 1

    def test_cancel_fifo_sale_restores_new_record(self, user, product, client_obj, make_prepaid, line):
        original = make_prepaid(client_obj, '100.00')
        sale = create_sale(
            actor=user,
            client_id=client_obj.id,
            items=[line(product, unit_price='80.00')],
            payment_method=PaymentMethod.CASH,
        )
        original.refresh_from_db()
        assert original.amount == Decimal('20.00')

        update_sale(sale_id=sale.id, actor=user, status=SaleStatus.CANCELLED)

        restored = Prepaid.objects.get(client=client_obj, status=PrepaidStatus.PENDING, amount=Decimal('80.00'))
        assert restored.id != original.id
        assert total_pending_for_client(client_id=client_obj.id) == Decimal('100.00')

    def test_cancelled_sale_is_frozen(self, user, product, line):
        sale = create_sale(actor=user, items=[line(product)], payment_method=PaymentMethod.CASH)
        update_sale(sale_id=sale.id, actor=user, status=SaleStatus.CANCELLED)

        with pytest.raises(SaleAlreadyCancelled):
            update_sale(sale_id=sale.id, actor=user, status=SaleStatus.CANCELLED)
        with pytest.raises(SaleAlreadyCancelled):
            update_sale(sale_id=sale.id, actor=user, notes='late note')

        product.refresh_from_db()
        assert product.stock == 20

    def test_completed_sale_rejects_changes(self, user, product, line):
        sale = create_sale(actor=user, items=[line(product)], payment_method=PaymentMethod.CASH)

        with pytest.raises(SaleAlreadyCompleted):
            update_sale(sale_id=sale.id, actor=user, discount=10)

    def test_remove_reverses_and_hides(self, user, product, client_obj, make_prepaid, line):
        make_prepaid(client_obj, '40.00')
        sale = create_sale(
            actor=user,
            client_id=client_obj.id,
            items=[line(product, quantity=4)],
            payment_method=PaymentMethod.CASH,
        )

        remove_sale(sale_id=sale.id, actor=user)

        product.refresh_from_db()
        assert product.stock == 20
        assert total_pending_for_client(client_id=client_obj.id) == Decimal('40.00')
        with pytest.raises(SaleNotFound):
            get_sale(sale_id=sale.id)

    def test_remove_cancelled_sale_does_not_reverse_twice(self, user, product, line):
        sale = create_sale(actor=user, items=[line(product, quantity=4)], payment_method=PaymentMethod.CASH)
        update_sale(sale_id=sale.id, actor=user, status=SaleStatus.CANCELLED)

        remove_sale(sale_id=sale.id, actor=user)

        product.refresh_from_db()
        assert product.stock == 20

    def test_cancel_manual_prepaid_restores_nothing(self, user, product, client_obj, line):
        sale = create_sale(
            actor=user,
            client_id=client_obj.id,
            items=[line(product)],
            payment_method=PaymentMethod.CARD,
            prepaid_used='20.00',
        )
        assert sale.fifo_consumed == Decimal('0.00')

        update_sale(sale_id=sale.id, actor=user, status=SaleStatus.CANCELLED)

        assert total_pending_for_client(client_id=client_obj.id) == Decimal('0.00')
        assert not Prepaid.objects.filter(client=client_obj).exists()

    def test_remove_manual_cash_prepaid_restores_nothing(self, user, product, client_obj, make_prepaid, line):
        make_prepaid(client_obj, '15.00')
        sale = create_sale(
            actor=user,
            client_id=client_obj.id,
            items=[line(product)],
            payment_method=PaymentMethod.CASH,
            prepaid_used='30.00',
        )

        remove_sale(sale_id=sale.id, actor=user)

        assert total_pending_for_client(client_id=client_obj.id) == Decimal('15.00')
        assert Prepaid.objects.filter(client=client_obj).count() == 1

    def test_fifo_restore_gives_back_only_what_was_taken(self, user, product, client_obj, make_prepaid, line):
        make_prepaid(client_obj, '25.00')
        sale = create_sale(
            actor=user,
            client_id=client_obj.id,
            items=[line(product)],
            payment_method=PaymentMethod.CASH,
        )
        assert sale.fifo_consumed == Decimal('25.00')

        remove_sale(sale_id=sale.id, actor=user)

        assert total_pending_for_client(client_id=client_obj.id) == Decimal('25.00')


@pytest.mark.django_db
class TestSaleNumberCollision:

    def test_taken_number_is_concurrent_modification(
        self, user, product, client_obj, make_prepaid, line, monkeypatch
    ):
        Sale.objects.create(sale_number='V-2025-0901-001', payment_method=PaymentMethod.CASH)
        prepaid = make_prepaid(client_obj, '40.00')
        monkeypatch.setattr(
            'apps.sales.services.settlement.next_sale_number', lambda: 'V-2025-0901-001'
        )

        with pytest.raises(ConcurrentModification):
            create_sale(
                actor=user,
                client_id=client_obj.id,
                items=[line(product, quantity=3)],
                payment_method=PaymentMethod.CASH,
            )

        _refresh(product, prepaid)
        assert product.stock == 20
        assert prepaid.status == PrepaidStatus.PENDING
        assert prepaid.amount == Decimal('40.00')
        assert Prepaid.objects.filter(client=client_obj).count() == 1
        assert Sale.objects.count() == 1


@pytest.fixture
def pending_sale(product):
    """A PENDING sale of two units whose stock is already debited."""
    sale = Sale.objects.create(
        sale_number='V-2025-0901-001',
        subtotal=Decimal('200.00'),
        total=Decimal('200.00'),
        payment_method=PaymentMethod.CASH,
        status=SaleStatus.PENDING,
    )
    SaleItem.objects.create(
        sale=sale,
        product=product,
        product_name=product.name,
        quantity=2,
        unit_price=Decimal('100.00'),
        subtotal=Decimal('200.00'),
    )
    return sale


@pytest.mark.django_db
class TestUpdatePendingSale:

    def test_recompute_totals(self, user, pending_sale):
        sale = update_sale(sale_id=pending_sale.id, actor=user, tax=21, discount=10, prepaid_used='11')

        assert sale.total == Decimal('211.00')

    def test_replace_items_moves_stock(self, user, product, pending_sale, line):
        sale = update_sale(sale_id=pending_sale.id, actor=user, items=[line(product, quantity=5)])

        product.refresh_from_db()
        assert product.stock == 17
        assert sale.subtotal == Decimal('500.00')
        assert sale.items.get().quantity == 5

    def test_prepaid_above_new_ceiling(self, user, pending_sale):
        with pytest.raises(InvalidPrepaidAmount):
            update_sale(sale_id=pending_sale.id, actor=user, prepaid_used='250.00')

    def test_attach_prepaid(self, user, pending_sale, client_obj, make_prepaid):
        prepaid = make_prepaid(client_obj, '50.00')

        sale = update_sale(sale_id=pending_sale.id, actor=user, prepaid_id=prepaid.id, consumed_prepaid=True)

        prepaid.refresh_from_db()
        assert sale.prepaid_used == Decimal('50.00')
        assert sale.total == Decimal('150.00')
        assert prepaid.status == PrepaidStatus.CONSUMED

    def test_complete_and_customer_fields(self, user, pending_sale):
        sale = update_sale(
            sale_id=pending_sale.id,
            actor=user,
            status=SaleStatus.COMPLETED,
            customer_name='Walk-in',
            customer_email='WALK@EXAMPLE.COM',
        )

        assert sale.status == SaleStatus.COMPLETED
        assert sale.customer_email == 'walk@example.com'

    def test_missing_sale(self, user):
        with pytest.raises(SaleNotFound):
            update_sale(sale_id='00000000-0000-0000-0000-000000000000', actor=user, notes='x')


@pytest.mark.django_db
class TestDailySales:

    def test_today_summary(self, user, product, line):
        create_sale(actor=user, items=[line(product)], payment_method=PaymentMethod.CASH)
        create_sale(actor=user, items=[line(product, quantity=2)], payment_method=PaymentMethod.CARD)

        report = get_daily_sales()

        summary = report['summary']
        assert summary['total_sales'] == 2
        assert summary['total_amount'] == Decimal('300.00')
        assert summary['by_payment_method']['CASH'] == Decimal('100.00')
        assert summary['by_payment_method']['TRANSFER'] == Decimal('0.00')
        assert summary['by_status']['COMPLETED'] == 2

    def test_local_day_boundaries(self):
        # 02:00 UTC on Sep 1 is 23:00 on Aug 31 in Buenos Aires
        Sale.objects.create(
            sale_number='V-2025-0831-001',
            payment_method=PaymentMethod.CASH,
            status=SaleStatus.COMPLETED,
            total=Decimal('10.00'),
            created_at=datetime(2025, 9, 1, 2, 0, tzinfo=dt_timezone.utc),
        )

        assert get_daily_sales(date='2025-09-01')['summary']['total_sales'] == 0
        assert get_daily_sales(date='2025-08-31')['summary']['total_sales'] == 1
        assert get_daily_sales(date='2025-09-01', timezone='UTC')['summary']['total_sales'] == 1

    def test_invalid_timezone(self):
        with pytest.raises(InvalidInputError):
            get_daily_sales(timezone='Mars/Olympus_Mons')

    def test_invalid_date(self):
        with pytest.raises(InvalidInputError):
            get_daily_sales(date='2025-13-45')
