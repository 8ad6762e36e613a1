from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import registry.malawi_data


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Profile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('full_name', models.CharField(blank=True, default='', max_length=200)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['full_name'],
            },
        ),
        migrations.CreateModel(
            name='UserRole',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(choices=[('user', 'General User'), ('landowner', 'Land Owner'), ('admin', 'Administrator')], default='user', max_length=20)),
                ('assigned_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='role_assignment', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='LandRegistration',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title_deed_number', models.CharField(max_length=100)),
                ('land_size', models.DecimalField(decimal_places=2, help_text='In hectares', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('land_use', models.CharField(choices=registry.malawi_data.LAND_USE_CHOICES, max_length=30)),
                ('location_name', models.CharField(max_length=200)),
                ('latitude', models.DecimalField(decimal_places=6, help_text='Latitude (e.g. -13.962634 for Lilongwe)', max_digits=9, validators=[django.core.validators.MinValueValidator(-90), django.core.validators.MaxValueValidator(90)])),
                ('longitude', models.DecimalField(decimal_places=6, help_text='Longitude (e.g. 33.774119 for Lilongwe)', max_digits=9, validators=[django.core.validators.MinValueValidator(-180), django.core.validators.MaxValueValidator(180)])),
                ('district', models.CharField(choices=registry.malawi_data.DISTRICT_CHOICES, max_length=50)),
                ('boundaries', models.TextField(blank=True, default='')),
                ('document', models.FileField(blank=True, help_text='Title deed or survey plan (optional)', max_length=255, null=True, upload_to='registration_documents/')),
                ('status', models.CharField(choices=[('pending', 'Pending Review'), ('approved', 'Approved'), ('rejected', 'Rejected')], default='pending', max_length=10)),
                ('submitted_at', models.DateTimeField(auto_now_add=True)),
                ('reviewed_at', models.DateTimeField(blank=True, null=True)),
                ('admin_notes', models.TextField(blank=True, default='')),
                ('applicant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='land_registrations', to=settings.AUTH_USER_MODEL)),
                ('reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_registrations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-submitted_at'],
                'indexes': [
                    models.Index(fields=['status', 'submitted_at'], name='registration_status_idx'),
                    models.Index(fields=['applicant', 'status'], name='registration_applicant_idx'),
                    models.Index(fields=['district'], name='registration_district_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Land',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title_deed_number', models.CharField(max_length=100)),
                ('land_size', models.DecimalField(decimal_places=2, help_text='In hectares', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('land_use', models.CharField(choices=registry.malawi_data.LAND_USE_CHOICES, max_length=30)),
                ('location_name', models.CharField(max_length=200)),
                ('latitude', models.DecimalField(decimal_places=6, help_text='Latitude (e.g. -13.962634 for Lilongwe)', max_digits=9, validators=[django.core.validators.MinValueValidator(-90), django.core.validators.MaxValueValidator(90)])),
                ('longitude', models.DecimalField(decimal_places=6, help_text='Longitude (e.g. 33.774119 for Lilongwe)', max_digits=9, validators=[django.core.validators.MinValueValidator(-180), django.core.validators.MaxValueValidator(180)])),
                ('district', models.CharField(choices=registry.malawi_data.DISTRICT_CHOICES, max_length=50)),
                ('boundaries', models.TextField(blank=True, default='')),
                ('status', models.CharField(choices=[('active', 'Active')], default='active', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lands', to=settings.AUTH_USER_MODEL)),
                ('registration', models.OneToOneField(blank=True, help_text='The approved registration this record was created from', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='land', to='registry.landregistration')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['district'], name='land_district_idx'),
                    models.Index(fields=['land_use'], name='land_land_use_idx'),
                    models.Index(fields=['latitude', 'longitude'], name='land_coordinates_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('sign_up', 'Sign Up'), ('sign_in', 'Sign In'), ('failed_sign_in', 'Failed Sign In'), ('sign_out', 'Sign Out'), ('submit_registration', 'Submit Registration'), ('approve_registration', 'Approve Registration'), ('reject_registration', 'Reject Registration'), ('change_role', 'Change Role')], max_length=50)),
                ('object_type', models.CharField(blank=True, max_length=50)),
                ('object_id', models.PositiveIntegerField(blank=True, null=True)),
                ('extra', models.JSONField(blank=True, default=dict)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.CharField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['-created_at'], name='auditlog_created_idx'),
                    models.Index(fields=['user', 'action'], name='auditlog_user_action_idx'),
                ],
            },
        ),
    ]
