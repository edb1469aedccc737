"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from inventory_admin.locations.models import Warehouse
from inventory_admin.parties.models import Supplier
from inventory_admin.finance.models import GSTRate, PaymentGateway
from inventory_admin.catalog.models import Category, Item, OnlineProduct
from inventory_admin.inventory.models import ProcessingPool
from inventory_admin.purchasing.models import PurchaseOrder, PurchaseOrderItem
from decimal import Decimal
from io import BytesIO
from PIL import Image
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', state='Karnataka',
                    is_staff=False, is_superuser=False):
        """Create a test admin user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            state=state,
            is_staff=is_staff,
            is_superuser=is_superuser,
        )

    @staticmethod
    def create_warehouse(name=None, code=None, state='Karnataka'):
        if not name:
            name = f'Warehouse_{TestDataFactory.random_string(6)}'
        if not code:
            code = f'WH_{TestDataFactory.random_string(6).upper()}'
        return Warehouse.objects.create(
            name=name,
            code=code,
            address=f'Test Address {name}',
            state=state,
            phone='1234567890',
        )

    @staticmethod
    def create_supplier(name=None, state='Karnataka', phone=None, email=None):
        """Create a test supplier; `state` drives the GST split"""
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        if not phone:
            phone = f'9{random.randint(100000000, 999999999)}'
        if not email:
            email = f'{name.lower()}@test.com'
        return Supplier.objects.create(
            name=name,
            contact_person='Test Contact',
            phone=phone,
            email=email,
            tax_id='29ABCDE1234F1Z5',
            billing_address_line1='1 Test Street',
            city='Test City',
            state=state,
        )

    @staticmethod
    def create_gst_rate(rate=None, name=None, is_active=True):
        if rate is None:
            rate = Decimal('18.00')
        if not name:
            name = f'GST {rate}%'
        return GSTRate.objects.create(name=name, rate=rate, is_active=is_active)

    @staticmethod
    def create_category(name=None, parent=None):
        """Create a test category"""
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        return Category.objects.create(name=name, parent=parent, description=f'Test category {name}')

    @staticmethod
    def create_item(name=None, sku=None, category=None, warehouse=None, quantity=None,
                    purchase_price=None, gst_percentage=None, low_stock_alert_level=None,
                    item_type=Item.REGULAR):
        """Create a test item; processing items keep zero inventory quantity"""
        if not name:
            name = f'Item_{TestDataFactory.random_string(6)}'
        if not sku:
            sku = f'SKU_{TestDataFactory.random_string(8)}'
        if not category:
            category = TestDataFactory.create_category()
        if not warehouse:
            warehouse = TestDataFactory.create_warehouse()
        if quantity is None:
            quantity = Decimal('100')
        is_processing = item_type == Item.PROCESSING
        item = Item(
            item_name=name,
            item_code=sku,
            category=category,
            warehouse=warehouse,
            uom='kg' if is_processing else 'pcs',
            purchase_price=purchase_price if purchase_price is not None else Decimal('100.00'),
            gst_percentage=gst_percentage if gst_percentage is not None else Decimal('18.00'),
            opening_stock=quantity,
            quantity=Decimal('0') if is_processing else quantity,
            low_stock_alert_level=low_stock_alert_level if low_stock_alert_level is not None else Decimal('10'),
            item_type=item_type,
            requires_processing=is_processing,
        )
        item.refresh_status()
        item.save()
        return item

    @staticmethod
    def create_pool(item, current_stock=None, avg_purchase_price=None, warehouse=None):
        """Create a processing pool for a processing item"""
        if current_stock is None:
            current_stock = Decimal('100')
        if avg_purchase_price is None:
            avg_purchase_price = Decimal('50')
        return ProcessingPool.objects.create(
            item=item,
            warehouse=warehouse or item.warehouse,
            current_stock=current_stock,
            uom=item.uom,
            avg_purchase_price=avg_purchase_price,
            total_value=(current_stock * avg_purchase_price).quantize(Decimal('0.01')),
            total_purchased=current_stock,
        )

    @staticmethod
    def create_online_product(item=None, name=None, selling_price=None, mrp=None,
                              is_published=True, is_featured=False):
        if not item:
            item = TestDataFactory.create_item()
        if not name:
            name = f'Product {TestDataFactory.random_string(6)}'
        return OnlineProduct.objects.create(
            item=item,
            name=name,
            selling_price=selling_price if selling_price is not None else Decimal('150.00'),
            mrp=mrp,
            is_published=is_published,
            is_featured=is_featured,
        )

    @staticmethod
    def create_purchase_order(user, supplier=None, warehouse=None, status=PurchaseOrder.COMPLETED,
                              po_number=None, items=None):
        """Create a purchase order directly, bypassing total computation"""
        if not supplier:
            supplier = TestDataFactory.create_supplier()
        if not warehouse:
            warehouse = TestDataFactory.create_warehouse()
        if not po_number:
            po_number = f'PO-{timezone.now().year}-{TestDataFactory.random_string(5).upper()}'
        order = PurchaseOrder.objects.create(
            po_number=po_number,
            supplier=supplier,
            supplier_name=supplier.name,
            supplier_state=supplier.state,
            warehouse=warehouse,
            warehouse_name=warehouse.name,
            po_date=timezone.now().date(),
            status=status,
            created_by=user,
        )
        for item in items or []:
            PurchaseOrderItem.objects.create(
                purchase_order=order,
                item=item,
                product_name=item.item_name,
                sku=item.item_code or '',
                quantity=Decimal('10'),
                uom=item.uom,
                price=item.purchase_price,
            )
        return order

    @staticmethod
    def create_payment_gateway(name=PaymentGateway.RAZORPAY, is_active=False, **fields):
        return PaymentGateway.objects.create(name=name, is_active=is_active, **fields)

    @staticmethod
    def image_upload(name='test.png', image_format='PNG', size=(10, 10)):
        """A small valid image as an uploaded file"""
        buffer = BytesIO()
        Image.new('RGB', size, color=(200, 30, 30)).save(buffer, format=image_format)
        content_type = 'image/png' if image_format == 'PNG' else f'image/{image_format.lower()}'
        return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
