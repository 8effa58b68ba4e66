from django.db import migrations, models

import rides.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='RidePosting',
            fields=[
                ('id', models.CharField(default=rides.models.generate_ride_id, editable=False, max_length=32, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('contact_number', models.CharField(blank=True, default='', max_length=15)),
                ('gender', models.CharField(choices=[('male', 'Male'), ('female', 'Female'), ('other', 'Other')], max_length=10)),
                ('origin', models.CharField(max_length=255)),
                ('destination', models.CharField(max_length=255)),
                ('time_to_go', models.CharField(max_length=5)),
                ('vehicle', models.CharField(choices=[('bike', 'Bike'), ('car', 'Car'), ('auto', 'Auto')], db_index=True, max_length=10)),
                ('vehicle_number', models.CharField(blank=True, default='', max_length=20)),
                ('seating_capacity', models.PositiveSmallIntegerField()),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                'db_table': 'ride_postings',
                'ordering': ['-created_at'],
            },
        ),
    ]
