from django.test import TestCase
from rest_framework import status
from inventory_admin.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventory_admin.parties.models import Supplier


class SupplierAPITests(TestCase):
    """Test supplier endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_supplier(self):
        response = self.client.post('/api/purchase/suppliers', {
            'name': 'Fresh Farms',
            'code': 'ff01',
            'phone': '9876543210',
            'email': 'sales@freshfarms.test',
            'tax_id': '29abcde1234f1z5',
            'billing_address_line1': '12 Market Road',
            'city': 'Hubli',
            'state': 'Karnataka',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data['data']
        self.assertEqual(data['code'], 'FF01')
        self.assertEqual(data['tax_id'], '29ABCDE1234F1Z5')
        self.assertEqual(data['billing_address'], '12 Market Road, Hubli, Karnataka, India')
        self.assertEqual(data['shipping_address'], data['billing_address'])

    def test_missing_fields(self):
        response = self.client.post('/api/purchase/suppliers', {'name': 'No Contact'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Missing required fields')
        self.assertIn('phone', response.data['errors'])

    def test_blank_codes_do_not_collide(self):
        for name in ('One', 'Two'):
            response = self.client.post('/api/purchase/suppliers', {
                'name': name, 'code': '', 'phone': '9000000000', 'email': f'{name.lower()}@test.com',
            }, format='json')
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Supplier.objects.filter(code__isnull=True).count(), 2)

    def test_list_search_and_active(self):
        TestDataFactory.create_supplier(name='Spice Route')
        inactive = TestDataFactory.create_supplier(name='Old Mill')
        inactive.is_active = False
        inactive.save()

        response = self.client.get('/api/purchase/suppliers?search=spice')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/purchase/suppliers?is_active=false')
        self.assertEqual([supplier['name'] for supplier in response.data['data']], ['Old Mill'])

    def test_separate_shipping_address(self):
        supplier = TestDataFactory.create_supplier()
        response = self.client.patch(f'/api/purchase/suppliers/{supplier.id}', {
            'shipping_same_as_billing': False,
            'shipping_address_line1': 'Dock 4',
            'shipping_city': 'Mangaluru',
        }, format='json')
        self.assertEqual(response.data['message'], 'Supplier updated successfully')
        self.assertEqual(response.data['data']['shipping_address'], 'Dock 4, Mangaluru')

    def test_delete_with_documents_refused(self):
        supplier = TestDataFactory.create_supplier()
        TestDataFactory.create_purchase_order(self.user, supplier=supplier)
        response = self.client.delete(f'/api/purchase/suppliers/{supplier.id}')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Supplier in use')

        other = TestDataFactory.create_supplier()
        response = self.client.delete(f'/api/purchase/suppliers/{other.id}')
        self.assertEqual(response.data['message'], 'Supplier deleted successfully')
