"""
Tests for stock adjustments, processing pools and processing transactions
"""
from decimal import Decimal
from django.db import transaction
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from inventory_admin.core.exceptions import DomainError, InsufficientPoolStock
from inventory_admin.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventory_admin.catalog.models import Item
from inventory_admin.inventory import services
from inventory_admin.inventory.models import (
    StockAdjustment, ProcessingPool, ProcessingRecipe, ProcessingTransaction,
)


class ChangeItemStockTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.item = TestDataFactory.create_item(quantity=Decimal('20'), low_stock_alert_level=Decimal('5'))

    def test_increase_records_adjustment(self):
        with transaction.atomic():
            adjustment = services.change_item_stock(self.item, Decimal('7.5'), 'manual', user=self.user)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('27.5'))
        self.assertEqual(adjustment.adjustment_type, 'increase')
        self.assertEqual(adjustment.previous_quantity, Decimal('20'))
        self.assertEqual(adjustment.new_quantity, Decimal('27.5'))
        self.assertEqual(adjustment.created_by, self.user)

    def test_decrease_floors_at_zero(self):
        with transaction.atomic():
            adjustment = services.change_item_stock(self.item, Decimal('-50'), 'adjustment')
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('0'))
        self.assertEqual(self.item.status, Item.OUT_OF_STOCK)
        self.assertEqual(adjustment.quantity, Decimal('20'))

    def test_no_change_records_nothing(self):
        self.item.quantity = Decimal('0')
        self.item.save()
        with transaction.atomic():
            self.assertIsNone(services.change_item_stock(self.item, Decimal('-3'), 'manual'))
        self.assertFalse(StockAdjustment.objects.filter(item=self.item).exists())


class ProcessingPoolServiceTests(TestCase):

    def setUp(self):
        self.warehouse = TestDataFactory.create_warehouse()
        self.item = TestDataFactory.create_item(item_type=Item.PROCESSING, warehouse=self.warehouse)

    def test_weighted_average_price(self):
        with transaction.atomic():
            services.add_to_pool(self.item, self.warehouse, Decimal('100'), Decimal('40'))
            pool = services.add_to_pool(self.item, self.warehouse, Decimal('50'), Decimal('70'))
        self.assertEqual(pool.current_stock, Decimal('150'))
        self.assertEqual(pool.total_value, Decimal('7500.00'))
        self.assertEqual(pool.avg_purchase_price, Decimal('50'))
        self.assertEqual(pool.total_purchased, Decimal('150'))

    def test_remove_from_pool(self):
        with transaction.atomic():
            services.add_to_pool(self.item, self.warehouse, Decimal('100'), Decimal('40'))
            services.add_to_pool(self.item, self.warehouse, Decimal('50'), Decimal('70'))
            pool = services.remove_from_pool(self.item, self.warehouse, Decimal('50'), Decimal('70'))
        self.assertEqual(pool.current_stock, Decimal('100'))
        self.assertEqual(pool.avg_purchase_price, Decimal('40'))

    def test_adjust_pool_by_difference(self):
        with transaction.atomic():
            services.add_to_pool(self.item, self.warehouse, Decimal('40'), Decimal('25'))
            pool = services.adjust_pool(self.item, self.warehouse, Decimal('10'), Decimal('250'))
        self.assertEqual(pool.current_stock, Decimal('50'))
        self.assertEqual(pool.avg_purchase_price, Decimal('25'))

        with transaction.atomic():
            pool = services.adjust_pool(self.item, self.warehouse, Decimal('-80'), Decimal('-2000'))
        self.assertEqual(pool.current_stock, Decimal('0'))
        self.assertEqual(pool.total_value, Decimal('0'))

    def test_regular_item_cannot_enter_pool(self):
        regular = TestDataFactory.create_item()
        with self.assertRaises(DomainError):
            with transaction.atomic():
                services.add_to_pool(regular, self.warehouse, Decimal('1'), Decimal('1'))


class ProcessPoolStockTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.warehouse = TestDataFactory.create_warehouse()
        self.raw = TestDataFactory.create_item(name='Raw Peanuts', item_type=Item.PROCESSING,
                                               warehouse=self.warehouse)
        self.pool = TestDataFactory.create_pool(self.raw, current_stock=Decimal('100'),
                                                avg_purchase_price=Decimal('50'))
        self.roasted = TestDataFactory.create_item(name='Roasted Peanuts', quantity=Decimal('0'),
                                                   warehouse=self.warehouse)
        self.butter = TestDataFactory.create_item(name='Peanut Butter', quantity=Decimal('2'),
                                                  warehouse=self.warehouse)

    def test_process_moves_stock_and_costs(self):
        record = services.process_pool_stock(
            self.pool, Decimal('20'),
            [{'item': self.roasted, 'quantity': Decimal('15')}, {'item': self.butter, 'quantity': Decimal('3')}],
            wastage_percent=Decimal('10'), processing_cost=Decimal('150'), user=self.user,
        )
        self.assertEqual(record.transaction_number, f'PT-{timezone.now().year}-001')
        self.assertEqual(record.input_total_cost, Decimal('1000.00'))
        self.assertEqual(record.total_cost, Decimal('1150.00'))
        self.assertEqual(record.wastage_quantity, Decimal('2.000'))

        self.pool.refresh_from_db()
        self.assertEqual(self.pool.current_stock, Decimal('80'))
        self.assertEqual(self.pool.total_processed, Decimal('20'))
        self.assertEqual(self.pool.total_value, Decimal('4000.00'))

        self.roasted.refresh_from_db()
        self.butter.refresh_from_db()
        self.assertEqual(self.roasted.quantity, Decimal('15'))
        self.assertEqual(self.butter.quantity, Decimal('5'))
        self.assertEqual(
            StockAdjustment.objects.filter(adjustment_method='processing', reason='processing').count(), 2
        )

    def test_recipe_accumulates(self):
        for _ in range(2):
            services.process_pool_stock(self.pool, Decimal('10'), [{'item': self.roasted, 'quantity': Decimal('8')}])
        recipe = ProcessingRecipe.objects.get(pool=self.pool, output_item=self.roasted)
        self.assertEqual(recipe.times_created, 2)
        self.assertEqual(recipe.total_quantity, Decimal('16'))

    def test_insufficient_pool_stock(self):
        with self.assertRaises(InsufficientPoolStock) as ctx:
            services.process_pool_stock(self.pool, Decimal('150'), [{'item': self.roasted, 'quantity': Decimal('1')}])
        self.assertEqual(str(ctx.exception.detail), 'Insufficient stock in processing pool. Available: 100 kg')
        self.pool.refresh_from_db()
        self.assertEqual(self.pool.current_stock, Decimal('100'))
        self.assertFalse(ProcessingTransaction.objects.exists())

    def test_processing_item_cannot_be_an_output(self):
        other_raw = TestDataFactory.create_item(name='Raw Cashews', item_type=Item.PROCESSING, warehouse=self.warehouse)
        with self.assertRaises(DomainError):
            services.process_pool_stock(self.pool, Decimal('5'), [{'item': other_raw, 'quantity': Decimal('4')}])
        other_raw.refresh_from_db()
        self.assertEqual(other_raw.quantity, Decimal('0'))
        self.pool.refresh_from_db()
        self.assertEqual(self.pool.current_stock, Decimal('100'))
        self.assertFalse(ProcessingTransaction.objects.exists())


class StockAdjustmentAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.item = TestDataFactory.create_item(quantity=Decimal('10'), low_stock_alert_level=Decimal('3'))

    def test_manual_increase(self):
        response = self.client.post('/api/inventory/stock-adjustments', {
            'item': self.item.id, 'adjustment_type': 'increase', 'quantity': '5', 'reason': 'found',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Stock adjusted successfully')
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('15'))

    def test_decrease_beyond_stock_rejected(self):
        response = self.client.post('/api/inventory/stock-adjustments', {
            'item': self.item.id, 'adjustment_type': 'decrease', 'quantity': '11',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data['errors'])

    def test_processing_item_rejected(self):
        raw = TestDataFactory.create_item(item_type=Item.PROCESSING)
        response = self.client.post('/api/inventory/stock-adjustments', {
            'item': raw.id, 'adjustment_type': 'increase', 'quantity': '1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('item', response.data['errors'])

    def test_list_filtered_by_item(self):
        other = TestDataFactory.create_item()
        for item in (self.item, other):
            self.client.post('/api/inventory/stock-adjustments', {
                'item': item.id, 'adjustment_type': 'decrease', 'quantity': '1', 'reason': 'damaged',
            }, format='json')
        response = self.client.get(f'/api/inventory/stock-adjustments?item={self.item.id}&type=decrease')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['data'][0]['reason'], 'damaged')


class ProcessingAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.warehouse = TestDataFactory.create_warehouse()
        self.raw = TestDataFactory.create_item(item_type=Item.PROCESSING, warehouse=self.warehouse)
        self.pool = TestDataFactory.create_pool(self.raw, current_stock=Decimal('25'))
        self.output = TestDataFactory.create_item(quantity=Decimal('0'), warehouse=self.warehouse)

    def test_pool_list_and_detail(self):
        response = self.client.get(f'/api/inventory/processing-pool?warehouse={self.warehouse.id}')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['data'][0]['item_name'], self.raw.item_name)

        response = self.client.get(f'/api/inventory/processing-pool/{self.pool.id}')
        self.assertEqual(Decimal(response.data['data']['current_stock']), Decimal('25'))

    def test_process_and_recipe(self):
        response = self.client.post('/api/inventory/processing-transactions', {
            'pool': self.pool.id,
            'input_quantity': '10',
            'outputs': [{'item': self.output.id, 'quantity': '9'}],
            'wastage_percent': '10',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Processing completed successfully')
        self.assertEqual(response.data['data']['outputs'][0]['item_id'], self.output.id)

        response = self.client.get(f'/api/inventory/processing-pool/{self.pool.id}/recipe')
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(Decimal(response.data['data'][0]['current_stock']), Decimal('9'))

        response = self.client.get(f'/api/inventory/processing-transactions?pool={self.pool.id}')
        self.assertEqual(response.data['count'], 1)

    def test_insufficient_stock_is_enveloped(self):
        response = self.client.post('/api/inventory/processing-transactions', {
            'pool': self.pool.id,
            'input_quantity': '30',
            'outputs': [{'item': self.output.id, 'quantity': '1'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Insufficient stock')
        self.assertEqual(response.data['message'], 'Insufficient stock in processing pool. Available: 25 kg')

    def test_outputs_required(self):
        response = self.client.post('/api/inventory/processing-transactions', {
            'pool': self.pool.id, 'input_quantity': '1', 'outputs': [],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Missing required fields')

    def test_pool_item_cannot_be_an_output(self):
        response = self.client.post('/api/inventory/processing-transactions', {
            'pool': self.pool.id, 'input_quantity': '1',
            'outputs': [{'item': self.raw.id, 'quantity': '1'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('outputs', response.data['errors'])
        self.assertEqual(ProcessingPool.objects.get(id=self.pool.id).current_stock, Decimal('25'))

    def test_other_processing_item_cannot_be_an_output(self):
        other_raw = TestDataFactory.create_item(item_type=Item.PROCESSING, warehouse=self.warehouse)
        response = self.client.post('/api/inventory/processing-transactions', {
            'pool': self.pool.id, 'input_quantity': '5',
            'outputs': [{'item': other_raw.id, 'quantity': '4'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('outputs', response.data['errors'])
        other_raw.refresh_from_db()
        self.assertEqual(other_raw.quantity, Decimal('0'))
        self.assertEqual(ProcessingPool.objects.get(id=self.pool.id).current_stock, Decimal('25'))
