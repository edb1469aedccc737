from decimal import Decimal
from django.db import migrations, models


def split_field():
    return models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=6)


class Migration(migrations.Migration):

    dependencies = [
        ('purchasing', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(model_name=model_name, name=field_name, field=split_field())
        for model_name in ('purchaseorderitem', 'billitem')
        for field_name in ('cgst_percentage', 'sgst_percentage', 'igst_percentage')
    ]
