from django.test import TestCase
from rest_framework import status
from inventory_admin.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventory_admin.locations.models import Warehouse


class WarehouseAPITests(TestCase):
    """Test warehouse endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_normalizes_code(self):
        response = self.client.post('/api/inventory/warehouses', {
            'name': 'Main Godown', 'code': ' wh-main ', 'state': 'Karnataka',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Warehouse created successfully')
        self.assertEqual(response.data['data']['code'], 'WH-MAIN')
        self.assertEqual(response.data['data']['item_count'], 0)

    def test_duplicate_code(self):
        TestDataFactory.create_warehouse(code='WH-1')
        response = self.client.post('/api/inventory/warehouses', {'name': 'Other', 'code': 'wh-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('code', response.data['errors'])

    def test_list_filters(self):
        TestDataFactory.create_warehouse(name='North Store')
        closed = TestDataFactory.create_warehouse(name='South Store')
        closed.is_active = False
        closed.save()

        response = self.client.get('/api/inventory/warehouses?active=true')
        self.assertEqual([warehouse['name'] for warehouse in response.data['data']], ['North Store'])
        response = self.client.get('/api/inventory/warehouses?search=south')
        self.assertEqual(len(response.data['data']), 1)

    def test_update(self):
        warehouse = TestDataFactory.create_warehouse()
        response = self.client.patch(f'/api/inventory/warehouses/{warehouse.id}', {'city': 'Mysuru'}, format='json')
        self.assertEqual(response.data['message'], 'Warehouse updated successfully')
        warehouse.refresh_from_db()
        self.assertEqual(warehouse.city, 'Mysuru')

    def test_delete_unused(self):
        warehouse = TestDataFactory.create_warehouse()
        response = self.client.delete(f'/api/inventory/warehouses/{warehouse.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Warehouse.objects.filter(id=warehouse.id).exists())

    def test_delete_in_use_refused(self):
        warehouse = TestDataFactory.create_warehouse()
        TestDataFactory.create_item(warehouse=warehouse)
        response = self.client.delete(f'/api/inventory/warehouses/{warehouse.id}')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Warehouse in use')
        self.assertTrue(Warehouse.objects.filter(id=warehouse.id).exists())

    def test_missing_warehouse(self):
        response = self.client.get('/api/inventory/warehouses/9999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Not found')
