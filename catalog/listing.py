"""
Browsing listings that merge the catalog with the storage folders.

Neither source is complete on its own: admins create folders before anything
is uploaded, and files get copied straight into storage without a Pdf row.
Every listing therefore unions the catalog rows referenced by Pdf records with
whatever the folder tree holds, de-duplicated by entity identity (never by raw
folder name) and sorted by display name.

Results are tagged: Persisted wraps a catalog row, Discovered is a folder with
no row behind it, DiscoveredFile is a PDF on disk with no Pdf row.
"""
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import PurePosixPath

from .exceptions import NotFound
from .folders import FolderTree
from .models import Pdf
from .normalization import is_safe_segment
from .store import GradeStore, MediumStore, PdfStore, SubjectStore, sort_by_name

logger = logging.getLogger(__name__)

TIMESTAMP_PREFIX = re.compile(r'^\d+-')


@dataclass(frozen=True)
class Persisted:
    entity: object

    persisted = True

    @property
    def id(self):
        return self.entity.pk

    @property
    def name(self):
        return self.entity.name

    @property
    def slug(self):
        return getattr(self.entity, 'normalized_name', None)


@dataclass(frozen=True)
class Discovered:
    slug: str

    persisted = False
    id = None

    @property
    def name(self):
        return self.slug


@dataclass(frozen=True)
class DiscoveredFile:
    filename: str
    path: str
    size: int
    created_at: datetime
    updated_at: datetime

    persisted = False
    id = None

    @property
    def name(self):
        return display_name_from_filename(self.filename)


def display_name_from_filename(filename):
    """'1712345678901-Term Test 2023.pdf' -> 'Term Test 2023'"""
    stem = filename[:-4] if filename.lower().endswith('.pdf') else filename
    return TIMESTAMP_PREFIX.sub('', stem, count=1)


class CatalogListing:

    def __init__(self, folders=None):
        self.folders = folders or FolderTree()
        self.grades = GradeStore(self.folders)
        self.subjects = SubjectStore(self.folders)
        self.mediums = MediumStore(self.folders)
        self.pdfs = PdfStore()

    # ----------------------------------------
    # merge helpers
    # ----------------------------------------

    def _merge(self, store, referenced, folder_slugs):
        """
        referenced: catalog rows pointed at by Pdf records.
        folder_slugs: directory names found on disk, resolved via find_by_name.
        """
        results = []
        seen_ids = set()
        seen_slugs = set()

        def add(entity):
            seen_slugs.add(entity.normalized_name)
            if entity.pk not in seen_ids:
                seen_ids.add(entity.pk)
                results.append(Persisted(entity))

        for entity in referenced:
            add(entity)

        for slug in folder_slugs:
            entity = store.find_by_name(slug)
            if entity is not None:
                add(entity)
                continue
            key = store.slug_for(slug)
            if key and key not in seen_slugs:
                seen_slugs.add(key)
                results.append(Discovered(slug))

        return sort_by_name(results)

    def _resolve(self, store, name, *folder_paths):
        """
        A name given by a client: the catalog row it names, else a folder with
        that slug in one of folder_paths, else NotFound.
        """
        entity = store.find_by_name(name)
        if entity is not None:
            return Persisted(entity)
        slug = store.slug_for(name)
        if is_safe_segment(slug):
            for parent in folder_paths:
                if (parent / slug).is_dir():
                    return Discovered(slug)
        raise NotFound(f'{store.label} "{name}" not found')

    # ----------------------------------------
    # types
    # ----------------------------------------

    def list_types(self):
        return [
            {'name': pdf_type, 'item_count': self.folders.count_entries(self.folders.type_path(pdf_type))}
            for pdf_type in Pdf.TYPES
        ]

    # ----------------------------------------
    # grades
    # ----------------------------------------

    def list_grades(self, pdf_type):
        type_dir = self.folders.type_path(pdf_type)
        grade_ids = self.pdfs.referenced_ids('grade_id', type=pdf_type)
        referenced = self.grades.model.objects.filter(pk__in=grade_ids)
        return self._merge(self.grades, referenced, self.folders.list_directories(type_dir))

    def resolve_grade(self, grade, pdf_type=None):
        types = [pdf_type] if pdf_type else Pdf.TYPES
        return self._resolve(
            self.grades, grade, *[self.folders.type_path(t) for t in types]
        )

    # ----------------------------------------
    # subjects
    # ----------------------------------------

    def _subjects_for(self, pdf_type, grade_ref):
        grade_dir = self.folders.type_path(pdf_type, grade_ref.slug)
        referenced = []
        if grade_ref.persisted:
            subject_ids = self.pdfs.referenced_ids('subject_id', type=pdf_type, grade_id=grade_ref.id)
            referenced = self.subjects.model.objects.filter(pk__in=subject_ids)
        return self._merge(self.subjects, referenced, self.folders.list_directories(grade_dir))

    def list_subjects(self, pdf_type, grade):
        return self._subjects_for(pdf_type, self.resolve_grade(grade, pdf_type))

    def list_subjects_by_grade_id(self, pdf_type, grade_id):
        self.folders.check_type(pdf_type)
        return self._subjects_for(pdf_type, Persisted(self.grades.find_by_id(grade_id)))

    def list_subject_folders(self, grade):
        """Admin view: subject folder names for a grade across both type trees."""
        grade_ref = self.resolve_grade(grade)
        names = set()
        for pdf_type in Pdf.TYPES:
            names.update(self.folders.list_directories(self.folders.type_path(pdf_type, grade_ref.slug)))
        return sorted(names)

    def resolve_subject(self, pdf_type, grade_ref, subject):
        return self._resolve(
            self.subjects, subject, self.folders.type_path(pdf_type, grade_ref.slug)
        )

    # ----------------------------------------
    # mediums
    # ----------------------------------------

    def _rows_for(self, grade_ref, subject_ref, pdf_type):
        if not (grade_ref.persisted and subject_ref.persisted):
            return []
        return self.pdfs.find_many(type=pdf_type, grade_id=grade_ref.id, subject_id=subject_ref.id)

    def _mediums_for(self, pdf_type, grade_ref, subject_ref):
        subject_dir = self.folders.type_path(pdf_type, grade_ref.slug, subject_ref.slug)
        slugs = list(self.folders.list_directories(subject_dir))
        for pdf in self._rows_for(grade_ref, subject_ref, pdf_type):
            parts = PurePosixPath(pdf.file_path).parts
            # <type>/<grade>/<subject>/<medium>/<file>
            if len(parts) == 5 and parts[3] not in slugs:
                slugs.append(parts[3])
        return self._merge(self.mediums, [], slugs)

    def list_mediums(self, pdf_type, grade, subject):
        grade_ref = self.resolve_grade(grade, pdf_type)
        subject_ref = self.resolve_subject(pdf_type, grade_ref, subject)
        return self._mediums_for(pdf_type, grade_ref, subject_ref)

    def list_mediums_by_ids(self, pdf_type, grade_id, subject_id):
        self.folders.check_type(pdf_type)
        grade_ref = Persisted(self.grades.find_by_id(grade_id))
        subject_ref = Persisted(self.subjects.find_by_id(subject_id))
        return self._mediums_for(pdf_type, grade_ref, subject_ref)

    def medium_slug(self, medium):
        entity = self.mediums.find_by_name(medium)
        if entity is not None:
            return entity.normalized_name
        return self.mediums.slug_for(medium)

    # ----------------------------------------
    # pdfs
    # ----------------------------------------

    def _discovered_file(self, entry):
        stat = entry.stat()
        return DiscoveredFile(
            filename=entry.name,
            path=self.folders.relative_path(entry.path),
            size=stat.st_size,
            created_at=datetime.fromtimestamp(stat.st_ctime, tz=timezone.utc),
            updated_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )

    def _pdfs_for(self, pdf_type, grade_ref, subject_ref, medium=None):
        subject_dir = self.folders.type_path(pdf_type, grade_ref.slug, subject_ref.slug)
        rows = self._rows_for(grade_ref, subject_ref, pdf_type)

        if medium:
            scan_dirs = [self.folders.type_path(
                pdf_type, grade_ref.slug, subject_ref.slug, self.medium_slug(medium)
            )]
            wanted = {self.folders.relative_path(scan_dirs[0])}
            rows = [pdf for pdf in rows if str(PurePosixPath(pdf.file_path).parent) in wanted]
        else:
            scan_dirs = [subject_dir] + [
                subject_dir / name for name in self.folders.list_directories(subject_dir)
            ]

        results = [Persisted(pdf) for pdf in rows]
        known_paths = {pdf.file_path for pdf in rows}
        for scan_dir in scan_dirs:
            for entry in self.folders.list_pdf_files(scan_dir):
                discovered = self._discovered_file(entry)
                if discovered.path not in known_paths:
                    known_paths.add(discovered.path)
                    results.append(discovered)

        return sort_by_name(results)

    def list_pdfs(self, pdf_type, grade, subject, medium=None):
        grade_ref = self.resolve_grade(grade, pdf_type)
        subject_ref = self.resolve_subject(pdf_type, grade_ref, subject)
        return self._pdfs_for(pdf_type, grade_ref, subject_ref, medium)

    def list_pdfs_by_ids(self, pdf_type, grade_id, subject_id, medium=None):
        self.folders.check_type(pdf_type)
        grade_ref = Persisted(self.grades.find_by_id(grade_id))
        subject_ref = Persisted(self.subjects.find_by_id(subject_id))
        return self._pdfs_for(pdf_type, grade_ref, subject_ref, medium)
