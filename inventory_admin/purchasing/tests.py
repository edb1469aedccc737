"""
Comprehensive test suite for Purchasing module
Tests: purchase orders, bills/GRN, server-side totals, stock receipt and reversal
"""
import json
import shutil
import tempfile
from decimal import Decimal
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status
from inventory_admin.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventory_admin.catalog.models import Item
from inventory_admin.finance.gst import MISSING_STATE_WARNING
from inventory_admin.inventory.models import ProcessingPool, StockAdjustment
from inventory_admin.purchasing.models import PurchaseOrder, Bill, BillItem

TOTAL_FIELDS = ['sub_total', 'total_quantity', 'total_discount', 'total_cgst', 'total_sgst',
                'total_igst', 'total_gst', 'grand_total']


class PurchaseOrderAPITests(TestCase):
    """Test purchase order endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(state='Karnataka')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier(state='Karnataka')
        self.warehouse = TestDataFactory.create_warehouse()
        self.gst_rate = TestDataFactory.create_gst_rate(Decimal('18.00'))
        self.item = TestDataFactory.create_item(purchase_price=Decimal('100.00'), gst_percentage=Decimal('18.00'))

    def _payload(self, **overrides):
        data = {
            'supplier': self.supplier.id,
            'warehouse': self.warehouse.id,
            'po_date': timezone.now().date().isoformat(),
            'status': 'completed',
            'items': [
                {'item': self.item.id, 'quantity': '2', 'price': '100.00', 'gst_rate': self.gst_rate.id},
            ],
        }
        data.update(overrides)
        return data

    def test_create_same_state_order(self):
        response = self.client.post('/api/purchase/purchase-orders', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Purchase order created and marked as completed')

        data = response.data['data']
        self.assertEqual(data['po_number'], f'PO-{timezone.now().year}-001')
        self.assertEqual(data['gst_type'], 'cgst_sgst')
        self.assertEqual(Decimal(data['sub_total']), Decimal('200'))
        self.assertEqual(Decimal(data['total_cgst']), Decimal('18'))
        self.assertEqual(Decimal(data['total_sgst']), Decimal('18'))
        self.assertEqual(Decimal(data['total_igst']), Decimal('0'))
        self.assertEqual(Decimal(data['grand_total']), Decimal('236'))
        self.assertEqual(data['supplier_name'], self.supplier.name)
        self.assertEqual(data['warehouse_name'], self.warehouse.name)

        line = data['items'][0]
        self.assertEqual(line['product_name'], self.item.item_name)
        self.assertEqual(Decimal(line['cgst_percentage']), Decimal('9'))
        self.assertIsNone(response.data['warning'])

    def test_other_state_supplier_uses_igst(self):
        supplier = TestDataFactory.create_supplier(state='Maharashtra')
        response = self.client.post('/api/purchase/purchase-orders', self._payload(supplier=supplier.id), format='json')
        order = PurchaseOrder.objects.get(id=response.data['data']['id'])
        self.assertEqual(order.gst_type, 'igst')
        self.assertEqual(order.total_igst, Decimal('36.00'))
        self.assertEqual(order.grand_total, Decimal('236.00'))

    def test_missing_state_warns(self):
        supplier = TestDataFactory.create_supplier(state='')
        response = self.client.post('/api/purchase/purchase-orders', self._payload(supplier=supplier.id), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['warning'], MISSING_STATE_WARNING)

    def test_client_totals_are_ignored(self):
        response = self.client.post('/api/purchase/purchase-orders',
                                    self._payload(grand_total='1.00', discount='10', discount_type='percentage'),
                                    format='json')
        order = PurchaseOrder.objects.get(id=response.data['data']['id'])
        self.assertEqual(order.total_discount, Decimal('20.00'))
        self.assertEqual(order.grand_total, Decimal('216.00'))

    def test_draft_message(self):
        response = self.client.post('/api/purchase/purchase-orders', self._payload(status='draft'), format='json')
        self.assertEqual(response.data['message'], 'Purchase order saved as draft')

    def test_missing_required_fields(self):
        payload = self._payload()
        del payload['items']
        response = self.client.post('/api/purchase/purchase-orders', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Missing required fields')
        self.assertEqual(response.data['message'], 'Required: items')

    def test_round_trip_keeps_totals(self):
        payload = self._payload(discount='15', other_charges='40.50', rounding_adjustment='0.50', items=[
            {'item': self.item.id, 'quantity': '3.5', 'price': '99.99', 'gst_rate': self.gst_rate.id},
            {'product_name': 'Packing material', 'quantity': '1', 'price': '12.35', 'gst_percentage': '5'},
        ])
        created = self.client.post('/api/purchase/purchase-orders', payload, format='json').data['data']

        loaded = self.client.get(f"/api/purchase/purchase-orders/{created['id']}").data['data']
        response = self.client.put(f"/api/purchase/purchase-orders/{created['id']}", loaded, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        saved = response.data['data']
        for field in TOTAL_FIELDS:
            self.assertEqual(saved[field], created[field], field)
        self.assertEqual(len(saved['items']), 2)
        for before, after in zip(created['items'], saved['items']):
            self.assertEqual(before['total_price'], after['total_price'])

    def test_update_replaces_lines(self):
        created = self.client.post('/api/purchase/purchase-orders', self._payload(status='draft'), format='json').data['data']
        response = self.client.patch(f"/api/purchase/purchase-orders/{created['id']}", {
            'items': [{'item': self.item.id, 'quantity': '5', 'price': '10.00', 'gst_percentage': '0'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']['items']), 1)
        self.assertEqual(Decimal(response.data['data']['grand_total']), Decimal('50'))

    def test_stored_split_keeps_half_of_fractional_rate(self):
        response = self.client.post('/api/purchase/purchase-orders', self._payload(items=[
            {'item': self.item.id, 'quantity': '10', 'price': '100.00', 'gst_percentage': '0.25'},
        ]), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        line = PurchaseOrder.objects.get(id=response.data['data']['id']).items.get()
        self.assertEqual(line.cgst_percentage, Decimal('0.125'))
        self.assertEqual(line.sgst_percentage, Decimal('0.125'))
        self.assertEqual(line.cgst_percentage + line.sgst_percentage, line.gst_percentage)
        self.assertEqual(Decimal(response.data['data']['items'][0]['sgst_percentage']), Decimal('0.125'))

    def test_discount_and_charges_bounds(self):
        cases = [
            ({'discount': '-5'}, 'discount'),
            ({'discount': '101', 'discount_type': 'percentage'}, 'discount'),
            ({'discount': '250'}, 'discount'),
            ({'other_charges': '-1'}, 'other_charges'),
            ({'rounding_adjustment': '-3'}, 'rounding_adjustment'),
        ]
        for overrides, field in cases:
            response = self.client.post('/api/purchase/purchase-orders', self._payload(**overrides), format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, overrides)
            self.assertIn(field, response.data['errors'])
        self.assertFalse(PurchaseOrder.objects.exists())

        response = self.client.post('/api/purchase/purchase-orders',
                                    self._payload(discount='100', discount_type='percentage'), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['data']['grand_total']), Decimal('36'))

    def test_draft_can_be_completed(self):
        created = self.client.post('/api/purchase/purchase-orders', self._payload(status='draft'), format='json').data['data']
        response = self.client.patch(f"/api/purchase/purchase-orders/{created['id']}", {'status': 'completed'},
                                     format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Purchase order marked as completed')

    def test_completed_cannot_go_back_to_draft(self):
        created = self.client.post('/api/purchase/purchase-orders', self._payload(), format='json').data['data']
        response = self.client.patch(f"/api/purchase/purchase-orders/{created['id']}", {'status': 'draft'},
                                     format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid status transition')
        self.assertEqual(response.data['message'],
                         'Cannot change status from "completed" to "draft". Valid transitions: completed')

    def test_delete_not_allowed(self):
        order = TestDataFactory.create_purchase_order(self.user, supplier=self.supplier, warehouse=self.warehouse)
        response = self.client.delete(f'/api/purchase/purchase-orders/{order.id}')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Delete operation not allowed')
        self.assertTrue(PurchaseOrder.objects.filter(id=order.id).exists())

    def test_next_number_and_stats(self):
        TestDataFactory.create_purchase_order(self.user, po_number=f'PO-{timezone.now().year}-007')
        response = self.client.get('/api/purchase/purchase-orders/next-number')
        self.assertEqual(response.data['data']['po_number'], f'PO-{timezone.now().year}-008')

        TestDataFactory.create_purchase_order(self.user, status=PurchaseOrder.DRAFT)
        stats = self.client.get('/api/purchase/purchase-orders/stats').data['data']
        self.assertEqual(stats['total'], 2)
        self.assertEqual(stats['draft'], 1)
        self.assertEqual(stats['completed'], 1)

    def test_available_for_bill_filter(self):
        billed = TestDataFactory.create_purchase_order(self.user, supplier=self.supplier, warehouse=self.warehouse)
        open_order = TestDataFactory.create_purchase_order(self.user, supplier=self.supplier, warehouse=self.warehouse)
        TestDataFactory.create_purchase_order(self.user, status=PurchaseOrder.DRAFT)
        Bill.objects.create(grn_number='GRN-TEST-1', purchase_order=billed, supplier=self.supplier,
                            supplier_invoice_no='INV-1', bill_date=timezone.now().date(), warehouse=self.warehouse)

        response = self.client.get('/api/purchase/purchase-orders?available_for_bill=true')
        self.assertEqual([row['id'] for row in response.data['data']], [open_order.id])


class BillAPITests(TestCase):
    """Test bills and the stock they receive"""

    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)
        self.user = TestDataFactory.create_user(state='Karnataka')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier(state='Karnataka')
        self.warehouse = TestDataFactory.create_warehouse()
        self.item = TestDataFactory.create_item(quantity=Decimal('10'), warehouse=self.warehouse)
        self.raw = TestDataFactory.create_item(item_type=Item.PROCESSING, warehouse=self.warehouse)

    def _payload(self, **overrides):
        data = {
            'supplier': self.supplier.id,
            'warehouse': self.warehouse.id,
            'supplier_invoice_no': 'SUP-INV-42',
            'bill_date': timezone.now().date().isoformat(),
            'items': [
                {'item': self.item.id, 'quantity_received': '10', 'quantity_accepted': '8',
                 'price': '100.00', 'gst_percentage': '18'},
            ],
        }
        data.update(overrides)
        return data

    def _create(self, **overrides):
        response = self.client.post('/api/purchase/bills', self._payload(**overrides), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data['data']

    def test_create_receives_accepted_quantity(self):
        data = self._create()
        self.assertEqual(data['grn_number'], f'GRN-{timezone.now().year}-001')
        self.assertEqual(data['bill_number'], data['grn_number'])
        self.assertEqual(Decimal(data['grand_total']), Decimal('1180'))
        self.assertEqual(Decimal(data['items'][0]['quantity_rejected']), Decimal('2'))

        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('18'))
        adjustment = StockAdjustment.objects.get(item=self.item, adjustment_method='purchase_order')
        self.assertEqual(adjustment.grn_number, data['grn_number'])
        self.assertEqual(adjustment.reason, 'purchase')

    def test_processing_item_goes_to_pool(self):
        self._create(items=[
            {'item': self.raw.id, 'quantity_received': '40', 'price': '25.00', 'gst_percentage': '5'},
        ])
        self.raw.refresh_from_db()
        self.assertEqual(self.raw.quantity, Decimal('0'))
        pool = ProcessingPool.objects.get(item=self.raw, warehouse=self.warehouse)
        self.assertEqual(pool.current_stock, Decimal('40'))
        self.assertEqual(pool.avg_purchase_price, Decimal('25'))

    def test_bill_against_purchase_order(self):
        order = TestDataFactory.create_purchase_order(self.user, supplier=self.supplier, warehouse=self.warehouse)
        data = self._create(purchase_order=order.id)
        self.assertEqual(data['po_number'], order.po_number)

    def test_purchase_order_of_another_supplier(self):
        order = TestDataFactory.create_purchase_order(self.user)
        response = self.client.post('/api/purchase/bills', self._payload(purchase_order=order.id), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('purchase_order', response.data['errors'])

    def test_accepted_cannot_exceed_received(self):
        response = self.client.post('/api/purchase/bills', self._payload(items=[
            {'item': self.item.id, 'quantity_received': '5', 'quantity_accepted': '6', 'price': '1.00'},
        ]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('10'))

    def test_duplicate_grn_number(self):
        self._create(grn_number='GRN-MANUAL-1')
        response = self.client.post('/api/purchase/bills', self._payload(grn_number='GRN-MANUAL-1'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('grn_number', response.data['errors'])

    def test_missing_invoice_number(self):
        response = self.client.post('/api/purchase/bills', self._payload(supplier_invoice_no=''), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Missing required fields')

    def test_update_moves_stock_by_difference(self):
        data = self._create()
        response = self.client.patch(f"/api/purchase/bills/{data['id']}", {
            'items': [{'item': self.item.id, 'quantity_received': '3', 'price': '100.00', 'gst_percentage': '18'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']['items']), 1)
        self.assertEqual(Decimal(response.data['data']['grand_total']), Decimal('354'))

        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('13'))

    def test_round_trip_keeps_totals_and_stock(self):
        created = self._create(discount='5', discount_type='percentage', other_charges='12.25')
        loaded = self.client.get(f"/api/purchase/bills/{created['id']}").data['data']
        response = self.client.put(f"/api/purchase/bills/{created['id']}", loaded, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

        saved = response.data['data']
        for field in TOTAL_FIELDS:
            self.assertEqual(saved[field], created[field], field)
        self.assertEqual(saved['grn_number'], created['grn_number'])
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('18'))

    def test_unchanged_resave_after_stock_was_used(self):
        created = self._create()
        Item.objects.filter(id=self.item.id).update(quantity=Decimal('3'))
        loaded = self.client.get(f"/api/purchase/bills/{created['id']}").data['data']
        response = self.client.put(f"/api/purchase/bills/{created['id']}", loaded, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('3'))
        self.assertEqual(StockAdjustment.objects.filter(item=self.item).count(), 1)

    def test_update_after_stock_was_used_moves_only_the_difference(self):
        created = self._create()
        Item.objects.filter(id=self.item.id).update(quantity=Decimal('3'))
        self.client.patch(f"/api/purchase/bills/{created['id']}", {
            'items': [{'item': self.item.id, 'quantity_received': '10', 'quantity_accepted': '10',
                       'price': '100.00', 'gst_percentage': '18'}],
        }, format='json')
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('5'))

    def test_update_moves_pool_by_difference(self):
        created = self._create(items=[
            {'item': self.raw.id, 'quantity_received': '40', 'price': '25.00', 'gst_percentage': '5'},
        ])
        pool = ProcessingPool.objects.get(item=self.raw, warehouse=self.warehouse)
        ProcessingPool.objects.filter(id=pool.id).update(current_stock=Decimal('15'), total_value=Decimal('375.00'))

        loaded = self.client.get(f"/api/purchase/bills/{created['id']}").data['data']
        self.client.put(f"/api/purchase/bills/{created['id']}", loaded, format='json')
        pool.refresh_from_db()
        self.assertEqual(pool.current_stock, Decimal('15'))

        self.client.patch(f"/api/purchase/bills/{created['id']}", {
            'items': [{'item': self.raw.id, 'quantity_received': '50', 'price': '25.00', 'gst_percentage': '5'}],
        }, format='json')
        pool.refresh_from_db()
        self.assertEqual(pool.current_stock, Decimal('25'))
        self.assertEqual(pool.total_purchased, Decimal('50'))
        self.assertEqual(pool.avg_purchase_price, Decimal('25'))

    def test_delete_reverses_stock(self):
        data = self._create()
        response = self.client.delete(f"/api/purchase/bills/{data['id']}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Bill deleted and stock reversed successfully')
        self.assertFalse(BillItem.objects.filter(bill_id=data['id']).exists())
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('10'))

    def test_delete_never_drives_stock_negative(self):
        data = self._create()
        Item.objects.filter(id=self.item.id).update(quantity=Decimal('3'))
        self.client.delete(f"/api/purchase/bills/{data['id']}")
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal('0'))

    def test_payment_updates(self):
        data = self._create()
        url = f"/api/purchase/bills/{data['id']}/payment"

        response = self.client.patch(url, {'payment_status': 'partial'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.patch(url, {'payment_status': 'partial', 'paid_amount': '500.00'}, format='json')
        self.assertEqual(Decimal(response.data['data']['balance_due']), Decimal('680'))

        response = self.client.patch(url, {'payment_status': 'paid'}, format='json')
        self.assertEqual(Decimal(response.data['data']['paid_amount']), Decimal('1180'))
        self.assertEqual(Decimal(response.data['data']['balance_due']), Decimal('0'))

        response = self.client.patch(url, {'payment_status': 'partial', 'paid_amount': '5000'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_multipart_with_invoice_copy(self):
        payload = self._payload()
        payload['items'] = json.dumps(payload['items'])
        payload['invoice_copy'] = SimpleUploadedFile('invoice.pdf', b'%PDF-1.4 test', content_type='application/pdf')
        with override_settings(MEDIA_ROOT=self.media_root):
            response = self.client.post('/api/purchase/bills', payload, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        bill = Bill.objects.get(id=response.data['data']['id'])
        self.assertTrue(bill.invoice_copy.name.startswith('bill-invoices/'))
        self.assertEqual(bill.items.count(), 1)

    def test_multipart_with_invalid_items_json(self):
        payload = self._payload()
        payload['items'] = '[{not json'
        response = self.client.post('/api/purchase/bills', payload, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'items: Invalid JSON.')

    def test_stats_and_supplier_bills(self):
        self._create()
        self._create(supplier_invoice_no='SUP-INV-43', payment_status='paid')
        stats = self.client.get('/api/purchase/bills/stats').data['data']
        self.assertEqual(stats['total'], 2)
        self.assertEqual(stats['unpaid'], 1)
        self.assertEqual(stats['paid'], 1)

        response = self.client.get(f'/api/purchase/suppliers/{self.supplier.id}/bills')
        self.assertEqual(response.data['count'], 2)
