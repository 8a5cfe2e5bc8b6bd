import uuid

import django.db.models.deletion
from django.db import migrations, models

import accounts.models
import core.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Identity',
            fields=[
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier for this record', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('name', models.CharField(max_length=256)),
                ('email', models.EmailField(db_index=True, max_length=254, unique=True)),
                ('phone', core.models.PossiblePhoneNumberField(blank=True, default='', max_length=128, region=None)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'verbose_name': 'Identity',
                'verbose_name_plural': 'Identities',
                'db_table': 'identities',
                'ordering': ['-created_at'],
            },
            managers=[
                ('objects', accounts.models.IdentityManager()),
            ],
        ),
        migrations.CreateModel(
            name='Credential',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier for this record', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('password_hash', models.CharField(max_length=256)),
                ('identity', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='credential', to='accounts.identity')),
            ],
            options={
                'db_table': 'credentials',
            },
        ),
    ]
