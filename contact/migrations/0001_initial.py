# Generated manually for the contact submission and rate limit tables
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ContactSubmission',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('name', models.CharField(max_length=50, help_text='Name of the person contacting us (2-50 characters)')),
                ('company', models.TextField(help_text='Company the person represents')),
                ('email', models.TextField(help_text='Email address for follow-up')),
                ('phone', models.TextField(help_text='Phone number as typed by the submitter')),
                ('message', models.TextField(help_text='The message content (10-1000 characters)')),
                ('status', models.CharField(choices=[('new', 'New'), ('contacted', 'Contacted'), ('closed', 'Closed')], db_index=True, default='new', help_text='Follow-up status of the submission', max_length=20)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True, help_text='IP address of the submitter')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='When the submission was received')),
            ],
            options={
                'db_table': 'contact_submissions',
                'ordering': ['-created_at'],
                'verbose_name': 'Contact Submission',
                'verbose_name_plural': 'Contact Submissions',
            },
        ),
        migrations.AddIndex(
            model_name='contactsubmission',
            index=models.Index(fields=['status', 'created_at'], name='contact_sub_status_created_idx'),
        ),
        migrations.AddConstraint(
            model_name='contactsubmission',
            constraint=models.CheckConstraint(condition=models.Q(status__in=['new', 'contacted', 'closed']), name='contact_submission_status_valid'),
        ),
        migrations.CreateModel(
            name='ContactFormRateLimit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('identifier', models.CharField(help_text='Client IP address', max_length=255, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'contact_form_rate_limits',
                'verbose_name': 'Contact Form Rate Limit',
                'verbose_name_plural': 'Contact Form Rate Limits',
            },
        ),
        migrations.CreateModel(
            name='ContactFormRateLimitHit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('bucket', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='hits', to='contact.contactformratelimit')),
            ],
            options={
                'db_table': 'contact_form_rate_limit_hits',
                'ordering': ['created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='contactformratelimithit',
            index=models.Index(fields=['bucket', 'created_at'], name='contact_hit_bucket_created_idx'),
        ),
    ]
