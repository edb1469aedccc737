import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('locations', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='StockAdjustment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('adjustment_method', models.CharField(choices=[('purchase_order', 'Purchase Order / Bill'), ('processing', 'Processing'), ('manual', 'Manual'), ('adjustment', 'Adjustment')], default='manual', max_length=20)),
                ('adjustment_type', models.CharField(choices=[('increase', 'Increase'), ('decrease', 'Decrease')], max_length=10)),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12)),
                ('previous_quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12)),
                ('new_quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12)),
                ('reason', models.CharField(choices=[('purchase', 'Purchase'), ('purchase_reversal', 'Purchase Reversal'), ('processing', 'Processing'), ('damaged', 'Damaged'), ('expired', 'Expired'), ('found', 'Found'), ('theft', 'Theft'), ('correction', 'Correction'), ('other', 'Other')], default='other', max_length=30)),
                ('reason_details', models.CharField(blank=True, max_length=255)),
                ('grn_number', models.CharField(blank=True, max_length=50)),
                ('po_number', models.CharField(blank=True, max_length=50)),
                ('batch_number', models.CharField(blank=True, max_length=100)),
                ('expiry_date', models.DateField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stock_adjustments', to=settings.AUTH_USER_MODEL)),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='adjustments', to='catalog.item')),
                ('warehouse', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='adjustments', to='locations.warehouse')),
            ],
            options={
                'db_table': 'stock_adjustments',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='ProcessingPool',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('current_stock', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12)),
                ('uom', models.CharField(max_length=20)),
                ('avg_purchase_price', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=14)),
                ('total_value', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
                ('total_purchased', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12)),
                ('total_processed', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12)),
                ('total_wastage', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='processing_pools', to='catalog.item')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='processing_pools', to='locations.warehouse')),
            ],
            options={
                'db_table': 'processing_pools',
                'ordering': ['-created_at'],
                'unique_together': {('item', 'warehouse')},
            },
        ),
        migrations.CreateModel(
            name='ProcessingRecipe',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('output_uom', models.CharField(blank=True, max_length=20)),
                ('times_created', models.PositiveIntegerField(default=0)),
                ('total_quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12)),
                ('first_created_at', models.DateTimeField(auto_now_add=True)),
                ('last_created_at', models.DateTimeField()),
                ('input_item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='recipes_as_input', to='catalog.item')),
                ('output_item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='recipes_as_output', to='catalog.item')),
                ('pool', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='recipes', to='inventory.processingpool')),
            ],
            options={
                'db_table': 'processing_recipes',
                'ordering': ['-last_created_at'],
                'unique_together': {('pool', 'output_item')},
            },
        ),
        migrations.CreateModel(
            name='ProcessingTransaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('transaction_number', models.CharField(max_length=50, unique=True)),
                ('input_quantity', models.DecimalField(decimal_places=3, max_digits=12)),
                ('input_uom', models.CharField(blank=True, max_length=20)),
                ('input_unit_cost', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=14)),
                ('input_total_cost', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
                ('outputs', models.JSONField(default=list)),
                ('wastage_percent', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5)),
                ('wastage_quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12)),
                ('processing_cost', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('total_cost', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
                ('notes', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('completed', 'Completed'), ('cancelled', 'Cancelled')], default='completed', max_length=20)),
                ('processed_at', models.DateTimeField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='processing_transactions', to=settings.AUTH_USER_MODEL)),
                ('input_item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='processing_inputs', to='catalog.item')),
                ('pool', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transactions', to='inventory.processingpool')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='processing_transactions', to='locations.warehouse')),
            ],
            options={
                'db_table': 'processing_transactions',
                'ordering': ['-processed_at'],
            },
        ),
    ]
