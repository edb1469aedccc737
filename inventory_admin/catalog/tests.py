"""
Tests for categories, items and online products
"""
from decimal import Decimal
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from rest_framework import status
from inventory_admin.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from inventory_admin.catalog.models import Category, Item, OnlineProduct
from inventory_admin.inventory.models import ProcessingPool


class ItemModelTests(TestCase):

    def test_status_from_quantity(self):
        item = TestDataFactory.create_item(quantity=Decimal('50'), low_stock_alert_level=Decimal('10'))
        self.assertEqual(item.status, Item.IN_STOCK)

        item.quantity = Decimal('10')
        self.assertEqual(item.refresh_status(), Item.LOW_STOCK)
        item.quantity = Decimal('0')
        self.assertEqual(item.refresh_status(), Item.OUT_OF_STOCK)

    def test_processing_item_always_in_stock(self):
        item = TestDataFactory.create_item(item_type=Item.PROCESSING)
        self.assertEqual(item.quantity, Decimal('0'))
        self.assertEqual(item.status, Item.IN_STOCK)

    def test_online_product_slug_is_unique(self):
        first = TestDataFactory.create_online_product(name='Basmati Rice')
        second = TestDataFactory.create_online_product(name='Basmati Rice')
        self.assertEqual(first.slug, 'basmati-rice')
        self.assertEqual(second.slug, 'basmati-rice-2')

    def test_discount_percentage(self):
        product = TestDataFactory.create_online_product(selling_price=Decimal('75'), mrp=Decimal('100'))
        self.assertEqual(product.discount_percentage, 25)
        product.mrp = None
        self.assertEqual(product.discount_percentage, 0)


class CategoryAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_subcategory(self):
        parent = TestDataFactory.create_category(name='Grains')
        response = self.client.post('/api/inventory/categories', {'name': 'Rice', 'parent': parent.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['parent_name'], 'Grains')

        response = self.client.get('/api/inventory/categories?top_level=true')
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['children'][0]['name'], 'Rice')

    def test_category_cannot_be_its_own_ancestor(self):
        parent = TestDataFactory.create_category()
        child = TestDataFactory.create_category(parent=parent)
        response = self.client.patch(f'/api/inventory/categories/{parent.id}', {'parent': child.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('parent', response.data['errors'])

    def test_delete_category_in_use(self):
        item = TestDataFactory.create_item()
        response = self.client.delete(f'/api/inventory/categories/{item.category_id}')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Category in use')
        self.assertTrue(Category.objects.filter(id=item.category_id).exists())

    def test_delete_empty_category(self):
        category = TestDataFactory.create_category()
        response = self.client.delete(f'/api/inventory/categories/{category.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Category.objects.filter(id=category.id).exists())


class ItemAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.category = TestDataFactory.create_category()
        self.warehouse = TestDataFactory.create_warehouse()
        self.gst_rate = TestDataFactory.create_gst_rate(Decimal('12.00'))

    def _payload(self, **overrides):
        data = {
            'item_name': 'Toor Dal',
            'category': self.category.id,
            'item_code': 'DAL-001',
            'uom': 'kg',
            'purchase_price': '120.00',
            'gst_rate': self.gst_rate.id,
            'warehouse': self.warehouse.id,
            'opening_stock': '5',
            'low_stock_alert_level': '10',
        }
        data.update(overrides)
        return data

    def test_create_regular_item(self):
        response = self.client.post('/api/inventory/items', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Item created successfully')

        item = Item.objects.get(item_code='DAL-001')
        self.assertEqual(item.quantity, Decimal('5'))
        self.assertEqual(item.status, Item.LOW_STOCK)
        self.assertEqual(item.gst_percentage, Decimal('12.00'))

    def test_regular_item_requires_alert_level(self):
        payload = self._payload()
        del payload['low_stock_alert_level']
        response = self.client.post('/api/inventory/items', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('low_stock_alert_level', response.data['errors'])

    def test_create_processing_item_seeds_pool(self):
        payload = self._payload(item_type='processing', opening_stock='40', purchase_price='50.00')
        del payload['low_stock_alert_level']
        response = self.client.post('/api/inventory/items', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        item = Item.objects.get(item_code='DAL-001')
        self.assertEqual(item.quantity, Decimal('0'))
        self.assertTrue(item.requires_processing)
        pool = ProcessingPool.objects.get(item=item, warehouse=self.warehouse)
        self.assertEqual(pool.current_stock, Decimal('40'))
        self.assertEqual(pool.avg_purchase_price, Decimal('50'))
        self.assertEqual(pool.total_value, Decimal('2000.00'))

    def test_duplicate_sku_is_case_insensitive(self):
        TestDataFactory.create_item(sku='DAL-001')
        response = self.client.post('/api/inventory/items', self._payload(item_code='dal-001'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Duplicate SKU/Item Code')
        self.assertEqual(response.data['message'], 'An item with SKU/Item Code "dal-001" already exists.')

    def test_check_sku(self):
        item = TestDataFactory.create_item(sku='RICE-1')
        response = self.client.get('/api/inventory/items/check-sku?sku=rice-1')
        self.assertFalse(response.data['data']['available'])
        response = self.client.get(f'/api/inventory/items/check-sku?sku=RICE-1&exclude={item.id}')
        self.assertTrue(response.data['data']['available'])
        response = self.client.get('/api/inventory/items/check-sku')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_does_not_touch_quantity(self):
        item = TestDataFactory.create_item(quantity=Decimal('30'))
        response = self.client.patch(f'/api/inventory/items/{item.id}',
                                     {'item_name': 'Renamed', 'quantity': '999'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        item.refresh_from_db()
        self.assertEqual(item.item_name, 'Renamed')
        self.assertEqual(item.quantity, Decimal('30'))

    def test_raising_alert_level_updates_status(self):
        item = TestDataFactory.create_item(quantity=Decimal('30'), low_stock_alert_level=Decimal('10'))
        self.client.patch(f'/api/inventory/items/{item.id}', {'low_stock_alert_level': '50'}, format='json')
        item.refresh_from_db()
        self.assertEqual(item.status, Item.LOW_STOCK)

    def test_item_type_cannot_change(self):
        item = TestDataFactory.create_item()
        response = self.client.patch(f'/api/inventory/items/{item.id}', {'item_type': 'processing'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('item_type', response.data['errors'])

    def test_non_image_upload_rejected(self):
        payload = self._payload()
        payload['image'] = SimpleUploadedFile('photo.png', b'not really an image', content_type='image/png')
        response = self.client.post('/api/inventory/items', payload, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('image', response.data['errors'])
        self.assertFalse(Item.objects.filter(item_code='DAL-001').exists())

    def test_list_filters_and_pagination(self):
        TestDataFactory.create_item(name='Red Chilli Powder', sku='SP-1', category=self.category)
        TestDataFactory.create_item(name='Chilli Flakes', sku='SP-2', quantity=Decimal('0'))
        TestDataFactory.create_item(name='Turmeric', sku='SP-3', category=self.category)

        response = self.client.get('/api/inventory/items?search=chilli red')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['data'][0]['item_code'], 'SP-1')

        response = self.client.get('/api/inventory/items?status=out_of_stock')
        self.assertEqual([row['item_code'] for row in response.data['data']], ['SP-2'])

        response = self.client.get(f'/api/inventory/items?category={self.category.id}&limit=1')
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['pagination']['total_pages'], 2)

    def test_invalid_status_filter(self):
        response = self.client.get('/api/inventory/items?status=bogus')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid filters')

    def test_delete_item(self):
        item = TestDataFactory.create_item()
        response = self.client.delete(f'/api/inventory/items/{item.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Item.objects.filter(id=item.id).exists())

    def test_missing_item_is_enveloped_404(self):
        response = self.client.get('/api/inventory/items/999999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['error'], 'Not found')


class OnlineProductAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.item = TestDataFactory.create_item()

    def test_create_generates_slug(self):
        response = self.client.post('/api/online/online-products', {
            'item': self.item.id,
            'name': 'Organic Jaggery',
            'selling_price': '90.00',
            'mrp': '100.00',
            'images': ['https://cdn.example.com/jaggery.jpg'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['slug'], 'organic-jaggery')
        self.assertEqual(response.data['data']['discount_percentage'], 10)

    def test_selling_price_above_mrp(self):
        response = self.client.post('/api/online/online-products', {
            'item': self.item.id, 'name': 'Too Pricey', 'selling_price': '120.00', 'mrp': '100.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('selling_price', response.data['errors'])

    def test_duplicate_slug(self):
        TestDataFactory.create_online_product(name='Ghee')
        response = self.client.post('/api/online/online-products', {
            'item': self.item.id, 'name': 'Cow Ghee', 'slug': 'ghee', 'selling_price': '500.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('slug', response.data['errors'])

    def test_filter_published(self):
        TestDataFactory.create_online_product(is_published=True)
        TestDataFactory.create_online_product(is_published=False)
        response = self.client.get('/api/online/online-products?is_published=true')
        self.assertEqual(response.data['count'], 1)


class PublicProductTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.category = TestDataFactory.create_category()
        self.item = TestDataFactory.create_item(category=self.category, quantity=Decimal('5'))

    def test_published_product_with_related(self):
        product = TestDataFactory.create_online_product(item=self.item, name='Honey')
        for index in range(5):
            other = TestDataFactory.create_item(category=self.category)
            TestDataFactory.create_online_product(item=other, name=f'Honey {index}')
        TestDataFactory.create_online_product(
            item=TestDataFactory.create_item(category=self.category), name='Hidden', is_published=False,
        )

        response = self.client.get(f'/api/online/frontend/products/{product.slug}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertTrue(data['in_stock'])
        self.assertEqual(data['category'], self.category.name)
        self.assertEqual(len(data['related_products']), 4)
        self.assertNotIn(product.slug, [related['slug'] for related in data['related_products']])
        self.assertNotIn('hidden', [related['slug'] for related in data['related_products']])

    def test_unpublished_product_not_found(self):
        product = TestDataFactory.create_online_product(item=self.item, is_published=False)
        response = self.client.get(f'/api/online/frontend/products/{product.slug}')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(OnlineProduct.objects.filter(id=product.id).exists())
