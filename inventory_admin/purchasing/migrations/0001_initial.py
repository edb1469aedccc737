import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


def totals_fields():
    return [
        ('gst_type', models.CharField(choices=[('cgst_sgst', 'CGST + SGST'), ('igst', 'IGST')], default='igst', max_length=20)),
        ('discount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
        ('discount_type', models.CharField(choices=[('flat', 'Flat'), ('percentage', 'Percentage')], default='flat', max_length=20)),
        ('other_charges', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
        ('rounding_adjustment', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
        ('sub_total', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
        ('total_quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=14)),
        ('total_discount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
        ('total_cgst', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
        ('total_sgst', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
        ('total_igst', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
        ('total_gst', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
        ('grand_total', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
    ]


def line_gst_fields():
    return [
        ('gst_percentage', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5)),
        ('gst_type', models.CharField(default='igst', max_length=20)),
        ('cgst_percentage', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5)),
        ('sgst_percentage', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5)),
        ('igst_percentage', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5)),
        ('cgst_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
        ('sgst_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
        ('igst_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
        ('total_gst_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
        ('item_total', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
        ('total_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
        ('gst_rate', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='finance.gstrate')),
    ]


def supplier_snapshot_fields():
    return [
        ('supplier_name', models.CharField(blank=True, max_length=200)),
        ('contact_person_name', models.CharField(blank=True, max_length=200)),
        ('supplier_phone', models.CharField(blank=True, max_length=20)),
        ('supplier_email', models.EmailField(blank=True, max_length=254)),
        ('supplier_gstin', models.CharField(blank=True, max_length=20)),
        ('supplier_state', models.CharField(blank=True, max_length=100)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('finance', '0001_initial'),
        ('locations', '0001_initial'),
        ('parties', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PurchaseOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *totals_fields(),
                ('po_number', models.CharField(max_length=50, unique=True)),
                *supplier_snapshot_fields(),
                ('billing_address', models.TextField(blank=True)),
                ('shipping_address', models.TextField(blank=True)),
                ('warehouse_name', models.CharField(blank=True, max_length=200)),
                ('po_date', models.DateField()),
                ('expected_delivery_date', models.DateField(blank=True, null=True)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('completed', 'Completed')], default='draft', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('currency', models.CharField(default='INR', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='purchase_orders', to=settings.AUTH_USER_MODEL)),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchase_orders', to='parties.supplier')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchase_orders', to='locations.warehouse')),
            ],
            options={
                'db_table': 'purchase_orders',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['status'], name='po_status_idx'),
                    models.Index(fields=['supplier', 'status'], name='po_supplier_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PurchaseOrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *line_gst_fields(),
                ('category', models.CharField(blank=True, max_length=200)),
                ('product_name', models.CharField(max_length=255)),
                ('sku', models.CharField(blank=True, max_length=100)),
                ('hsn_code', models.CharField(blank=True, max_length=20)),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12)),
                ('uom', models.CharField(blank=True, max_length=20)),
                ('price', models.DecimalField(decimal_places=2, max_digits=12)),
                ('mrp', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='purchase_order_lines', to='catalog.item')),
                ('purchase_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='purchasing.purchaseorder')),
            ],
            options={
                'db_table': 'purchase_order_items',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='Bill',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *totals_fields(),
                ('grn_number', models.CharField(max_length=50, unique=True)),
                ('po_number', models.CharField(blank=True, max_length=50)),
                *supplier_snapshot_fields(),
                ('supplier_invoice_no', models.CharField(max_length=100)),
                ('supplier_invoice_date', models.DateField(blank=True, null=True)),
                ('bill_date', models.DateField()),
                ('due_date', models.DateField(blank=True, null=True)),
                ('received_date', models.DateField(blank=True, null=True)),
                ('billing_address', models.TextField(blank=True)),
                ('shipping_address', models.TextField(blank=True)),
                ('warehouse_name', models.CharField(blank=True, max_length=200)),
                ('transporter_name', models.CharField(blank=True, max_length=200)),
                ('delivery_challan_number', models.CharField(blank=True, max_length=100)),
                ('eway_bill_number', models.CharField(blank=True, max_length=100)),
                ('payment_status', models.CharField(choices=[('unpaid', 'Unpaid'), ('partial', 'Partially Paid'), ('paid', 'Paid')], default='unpaid', max_length=20)),
                ('payment_date', models.DateField(blank=True, null=True)),
                ('paid_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
                ('invoice_copy', models.FileField(blank=True, null=True, upload_to='bill-invoices/')),
                ('remarks', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='bills', to=settings.AUTH_USER_MODEL)),
                ('purchase_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='bills', to='purchasing.purchaseorder')),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bills', to='parties.supplier')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bills', to='locations.warehouse')),
            ],
            options={
                'db_table': 'bills',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['payment_status'], name='bill_payment_status_idx'),
                    models.Index(fields=['supplier', 'payment_status'], name='bill_supplier_payment_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='BillItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *line_gst_fields(),
                ('category', models.CharField(blank=True, max_length=200)),
                ('product_name', models.CharField(max_length=255)),
                ('sku', models.CharField(blank=True, max_length=100)),
                ('hsn_code', models.CharField(blank=True, max_length=20)),
                ('quantity_ordered', models.DecimalField(blank=True, decimal_places=3, max_digits=12, null=True)),
                ('quantity_received', models.DecimalField(decimal_places=3, max_digits=12)),
                ('quantity_accepted', models.DecimalField(blank=True, decimal_places=3, max_digits=12, null=True)),
                ('quantity_rejected', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12)),
                ('uom', models.CharField(blank=True, max_length=20)),
                ('price', models.DecimalField(decimal_places=2, max_digits=12)),
                ('mrp', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('batch_number', models.CharField(blank=True, max_length=100)),
                ('expiry_date', models.DateField(blank=True, null=True)),
                ('manufacturing_date', models.DateField(blank=True, null=True)),
                ('bill', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='purchasing.bill')),
                ('item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='bill_lines', to='catalog.item')),
            ],
            options={
                'db_table': 'bill_items',
                'ordering': ['id'],
            },
        ),
    ]
