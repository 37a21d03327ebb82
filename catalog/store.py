# catalog/store.py - CATALOG RECORDS (grades, subjects, mediums, pdfs)

import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q

from .exceptions import BadRequest, Conflict, Internal, NotFound
from .folders import FolderTree
from .models import Grade, Medium, Pdf, Subject
from .normalization import is_safe_segment, normalize_grade, normalize_medium, normalize_subject

logger = logging.getLogger(__name__)


def sort_by_name(items):
    """Case-aware name order: 'art' and 'Art' sit together, ties broken by case."""
    return sorted(items, key=lambda item: (item.name.casefold(), item.name))


class NamedEntityStore:
    """find / create / delete for one of Grade, Subject, Medium."""
    model = None
    normalize = None
    label = None

    def __init__(self, folders=None):
        self.folders = folders or FolderTree()

    def slug_for(self, name):
        return self.normalize(name)

    def check_name(self, name, exclude_id=None):
        """
        (stripped name, slug) for a new or renamed entity. BadRequest for an
        empty or unsafe slug, Conflict when another row has the name or slug.
        """
        name = (name or '').strip()
        normalized_name = self.slug_for(name)
        if not name or not normalized_name:
            raise BadRequest(f"{self.label} name is required")
        if not is_safe_segment(normalized_name):
            raise BadRequest(f'Invalid {self.label.lower()} name "{name}"')

        others = self.model.objects.filter(Q(name=name) | Q(normalized_name=normalized_name))
        if exclude_id is not None:
            others = others.exclude(pk=exclude_id)
        if others.exists():
            raise Conflict(f'{self.label} "{name}" already exists')
        return name, normalized_name

    def create(self, name, description=None):
        name, normalized_name = self.check_name(name)

        try:
            with transaction.atomic():
                entity = self.model.objects.create(
                    name=name,
                    normalized_name=normalized_name,
                    description=description or None,
                )
        except IntegrityError:
            raise Conflict(f'{self.label} "{name}" already exists')

        logger.info('Created %s "%s" (%s)', self.label.lower(), entity.name, normalized_name)
        return entity

    def find_by_id(self, entity_id):
        try:
            return self.model.objects.get(pk=entity_id)
        except (self.model.DoesNotExist, ValidationError, ValueError):
            raise NotFound(f"{self.label} with ID {entity_id} not found")

    def find_by_name(self, name):
        """Exact display name or same slug; None when neither matches."""
        name = (name or '').strip()
        if not name:
            return None
        return self.model.objects.filter(
            Q(name=name) | Q(normalized_name=self.slug_for(name))
        ).order_by('created_at').first()

    def find_or_create(self, name, description=None):
        existing = self.find_by_name(name)
        if existing:
            return existing
        try:
            return self.create(name, description)
        except Conflict:
            # lost a race with a concurrent create of the same name
            existing = self.find_by_name(name)
            if existing:
                return existing
            raise

    def list(self):
        return sort_by_name(self.model.objects.all())

    def dependents_count(self, entity):
        return entity.pdfs.count()

    def delete(self, entity_id):
        entity = self.find_by_id(entity_id)

        pdf_count = self.dependents_count(entity)
        if pdf_count > 0:
            raise Conflict(
                f"Cannot delete {self.label.lower()}: it has {pdf_count} PDF(s). Delete PDFs first."
            )

        entity.delete()
        logger.info('Deleted %s "%s"', self.label.lower(), entity.name)


class GradeStore(NamedEntityStore):
    model = Grade
    normalize = staticmethod(normalize_grade)
    label = 'Grade'


class SubjectStore(NamedEntityStore):
    model = Subject
    normalize = staticmethod(normalize_subject)
    label = 'Subject'


class MediumStore(NamedEntityStore):
    model = Medium
    normalize = staticmethod(normalize_medium)
    label = 'Medium'

    def dependents_count(self, entity):
        # no FK from Pdf: a medium is in use while one of its folders holds files
        return 1 if self.folders.medium_folder_in_use(entity.normalized_name) else 0

    def delete(self, entity_id):
        entity = self.find_by_id(entity_id)
        if self.dependents_count(entity):
            raise Conflict('Cannot delete medium: its folders still contain PDFs. Delete PDFs first.')
        entity.delete()
        logger.info('Deleted medium "%s"', entity.name)

    def seed(self, names):
        """Idempotent: create each default medium unless its slug already exists."""
        created = []
        for name in names:
            if self.find_by_name(name):
                continue
            created.append(self.find_or_create(name))
        return created


class PdfStore:

    UPDATABLE_FIELDS = ('name', 'description', 'year')

    def create(self, **fields):
        try:
            with transaction.atomic():
                pdf = Pdf.objects.create(**fields)
        except IntegrityError as e:
            raise Conflict(f"Failed to save PDF record: {e}")
        except DatabaseError as e:
            raise Internal(f"Failed to save PDF record: {e}")
        return pdf

    def find_by_id(self, pdf_id):
        try:
            return Pdf.objects.select_related('grade', 'subject').get(pk=pdf_id)
        except (Pdf.DoesNotExist, ValidationError, ValueError):
            raise NotFound(f"PDF with ID {pdf_id} not found")

    def find_many(self, type=None, grade_id=None, subject_id=None):
        qs = Pdf.objects.select_related('grade', 'subject')
        if type:
            qs = qs.filter(type=type)
        if grade_id:
            qs = qs.filter(grade_id=grade_id)
        if subject_id:
            qs = qs.filter(subject_id=subject_id)
        return sort_by_name(qs)

    def referenced_ids(self, field, **filters):
        """Distinct grade_id / subject_id values of the Pdf rows matching filters."""
        return list(
            Pdf.objects.filter(**filters).order_by().values_list(field, flat=True).distinct()
        )

    def delete(self, pdf_id):
        pdf = self.find_by_id(pdf_id)
        pdf.delete()
        return pdf

    def update(self, pdf_id, **fields):
        pdf = self.find_by_id(pdf_id)
        unknown = set(fields) - set(self.UPDATABLE_FIELDS)
        if unknown:
            raise BadRequest(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        for field, value in fields.items():
            setattr(pdf, field, value)
        pdf.save()
        return pdf
