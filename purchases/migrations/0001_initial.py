import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Purchase',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('buyer_email', models.EmailField(db_index=True, max_length=254)),
                ('buyer_name', models.CharField(max_length=200)),
                ('buyer_identification_number', models.CharField(max_length=50)),
                ('buyer_contact_number', models.CharField(max_length=50)),
                ('shipping_address', models.TextField(blank=True, null=True)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('APPROVED', 'Approved'), ('COMPLETED', 'Completed'), ('REJECTED', 'Rejected'), ('FAILED', 'Failed'), ('CANCELLED', 'Cancelled')], default='PENDING', max_length=20)),
                ('order_status', models.CharField(choices=[('PENDING', 'Pending'), ('PROCESSING', 'Processing'), ('SHIPPED', 'Shipped'), ('DELIVERED', 'Delivered'), ('CANCELLED', 'Cancelled')], default='PENDING', max_length=20)),
                ('amount', models.PositiveIntegerField()),
                ('currency', models.CharField(default='COP', max_length=3)),
                ('payment_provider', models.CharField(max_length=30)),
                ('external_reference', models.CharField(max_length=64, unique=True)),
                ('preference_id', models.CharField(blank=True, default='', max_length=100)),
                ('wompi_transaction_id', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('mercadopago_payment_id', models.CharField(blank=True, max_length=100, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'purchases',
                'ordering': ['-updated_at'],
            },
        ),
        migrations.CreateModel(
            name='OrderDetail',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_name', models.CharField(max_length=200)),
                ('quantity', models.PositiveIntegerField()),
                ('unit_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('total_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('selected_color', models.CharField(blank=True, max_length=100, null=True)),
                ('purchase', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='order_details', to='purchases.purchase')),
            ],
            options={
                'db_table': 'order_details',
                'ordering': ['id'],
            },
        ),
    ]
