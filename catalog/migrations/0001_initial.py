# Initial catalog schema: grades / subjects / mediums and the pdfs that hang off them

import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


def named_entity_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('name', models.CharField(max_length=100, unique=True)),
        ('normalized_name', models.CharField(max_length=100, unique=True)),
        ('description', models.CharField(blank=True, max_length=255, null=True)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Grade',
            fields=named_entity_fields(),
            options={
                'db_table': 'grades',
                'ordering': ['name'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Subject',
            fields=named_entity_fields(),
            options={
                'db_table': 'subjects',
                'ordering': ['name'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Medium',
            fields=named_entity_fields(),
            options={
                'db_table': 'mediums',
                'ordering': ['name'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Pdf',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('filename', models.CharField(max_length=255)),
                ('file_path', models.CharField(max_length=500)),
                ('type', models.CharField(
                    choices=[('syllabus', 'Syllabus'), ('past-papers', 'Past papers')],
                    max_length=20,
                )),
                ('file_size', models.BigIntegerField()),
                ('mime_type', models.CharField(default='application/pdf', max_length=100)),
                ('description', models.TextField(blank=True, null=True)),
                ('year', models.PositiveIntegerField(
                    blank=True,
                    null=True,
                    validators=[
                        django.core.validators.MinValueValidator(1900),
                        django.core.validators.MaxValueValidator(2100),
                    ],
                )),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('grade', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='pdfs',
                    to='catalog.grade',
                )),
                ('subject', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='pdfs',
                    to='catalog.subject',
                )),
            ],
            options={
                'db_table': 'pdfs',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['type', 'grade', 'subject'], name='pdfs_type_grade_subject_idx'),
                ],
            },
        ),
    ]
