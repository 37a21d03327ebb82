import uuid

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class NamedEntity(models.Model):
    """
    Grade / Subject / Medium share one shape: a display name and the folder
    slug derived from it (see catalog.normalization). Both are unique.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)  # "Grade 01", "Advance Level"
    normalized_name = models.CharField(max_length=100, unique=True)  # "grade-01", "advance-level"
    description = models.CharField(max_length=255, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return self.name


class Grade(NamedEntity):
    class Meta(NamedEntity.Meta):
        db_table = 'grades'


class Subject(NamedEntity):
    class Meta(NamedEntity.Meta):
        db_table = 'subjects'


class Medium(NamedEntity):
    # Not a foreign key on Pdf: a medium only exists as a folder level.
    class Meta(NamedEntity.Meta):
        db_table = 'mediums'


class Pdf(models.Model):
    SYLLABUS = 'syllabus'
    PAST_PAPERS = 'past-papers'
    TYPE_CHOICES = [
        (SYLLABUS, 'Syllabus'),
        (PAST_PAPERS, 'Past papers'),
    ]
    TYPES = [SYLLABUS, PAST_PAPERS]
    MIME_TYPE = 'application/pdf'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)  # display name set by the uploader
    filename = models.CharField(max_length=255)  # "<ms>-<sanitized original>" on disk
    file_path = models.CharField(max_length=500)  # relative to CATALOG_STORAGE_ROOT
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    file_size = models.BigIntegerField()
    mime_type = models.CharField(max_length=100, default=MIME_TYPE)
    grade = models.ForeignKey(Grade, on_delete=models.PROTECT, related_name='pdfs')
    subject = models.ForeignKey(Subject, on_delete=models.PROTECT, related_name='pdfs')
    description = models.TextField(blank=True, null=True)
    year = models.PositiveIntegerField(
        blank=True,
        null=True,
        validators=[MinValueValidator(1900), MaxValueValidator(2100)],
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'pdfs'
        ordering = ['name']
        indexes = [
            models.Index(fields=['type', 'grade', 'subject'], name='pdfs_type_grade_subject_idx'),
        ]

    def __str__(self):
        if self.year:
            return f"{self.name} ({self.year})"
        return self.name
