# catalog/services.py - UPLOAD / DOWNLOAD / FOLDER PROVISIONING

import logging
import time
from dataclasses import dataclass

from django.conf import settings

from .exceptions import BadRequest, CatalogError, Internal, NotFound
from .folders import FolderTree
from .listing import CatalogListing
from .models import Pdf
from .normalization import sanitize_filename, truncate_filename

logger = logging.getLogger(__name__)

MAX_FILENAME_BYTES = 255
# "<13 digit ms>-" plus room for bumping the stamp
STAMP_PREFIX_BYTES = 20


@dataclass
class PdfStream:
    stream: object
    size: int
    filename: str


@dataclass
class UploadedPdf:
    """One file handed over by the transport layer."""
    content: bytes
    filename: str
    mime_type: str

    @classmethod
    def from_django(cls, uploaded_file):
        return cls(
            content=uploaded_file.read(),
            filename=uploaded_file.name,
            mime_type=uploaded_file.content_type,
        )


def batch_result(results, total, message):
    success_count = sum(1 for result in results if result['success'])
    return {
        'success': success_count > 0,
        'message': message.format(success=success_count, total=total),
        'success_count': success_count,
        'results': results,
    }


class PdfService:

    def __init__(self, folders=None):
        self.folders = folders or FolderTree()
        self.listing = CatalogListing(self.folders)
        self.grades = self.listing.grades
        self.subjects = self.listing.subjects
        self.mediums = self.listing.mediums
        self.pdfs = self.listing.pdfs

    # ============================================
    # FOLDERS
    # ============================================

    def create_grade_folder(self, pdf_type, grade):
        self.folders.check_type(pdf_type)
        grade_entity = self.grades.find_or_create(grade)
        created = self.folders.ensure_grade_folder(pdf_type, grade_entity.normalized_name)
        return grade_entity, created

    def create_grade_folders(self, pdf_type, grades):
        self.folders.check_type(pdf_type)
        results = []
        for grade in grades:
            try:
                grade_entity, created = self.create_grade_folder(pdf_type, grade)
                results.append({
                    'grade': grade,
                    'success': True,
                    'message': f'{pdf_type} folder created successfully for grade "{grade}"',
                    'folders': [self.folders.relative_path(path) for path in created],
                })
            except CatalogError as e:
                results.append({'grade': grade, 'success': False, 'message': e.message})
        return batch_result(
            results, len(grades), '{success} out of {total} grade(s) created ' + pdf_type + ' folders'
        )

    def create_subject_folder(self, grade, subject, medium=None):
        grade_entity = self.grades.find_or_create(grade)
        subject_entity = self.subjects.find_or_create(subject)
        medium_entity = self.mediums.find_or_create(medium) if medium else None
        created = self.folders.ensure_subject_folder(
            grade_entity.normalized_name,
            subject_entity.normalized_name,
            medium_entity.normalized_name if medium_entity else None,
        )
        return grade_entity, subject_entity, medium_entity, created

    def create_subject_folders(self, grade, subjects, medium=None):
        self.grades.find_or_create(grade)
        results = []
        for subject in subjects:
            try:
                created = self.create_subject_folder(grade, subject, medium)[-1]
                results.append({
                    'subject': subject,
                    'success': True,
                    'message': f'Subject "{subject}" saved and folders created for grade "{grade}"',
                    'folders': [self.folders.relative_path(path) for path in created],
                })
            except CatalogError as e:
                results.append({'subject': subject, 'success': False, 'message': e.message})
        return batch_result(
            results, len(subjects), 'Saved {success} out of {total} subject(s) and created folders'
        )

    def delete_grade_folders(self, grade):
        grade_entity = self.grades.find_by_name(grade)
        if grade_entity is None:
            raise NotFound(f'Grade "{grade}" not found')
        removed = self.folders.delete_grade_folders(grade_entity.normalized_name)
        return [self.folders.relative_path(path) for path in removed]

    def delete_subject_folders(self, grade, subject):
        grade_entity = self.grades.find_by_name(grade)
        subject_entity = self.subjects.find_by_name(subject)
        if grade_entity is None or subject_entity is None:
            raise NotFound('Grade or subject not found')
        removed = self.folders.delete_subject_folders(
            grade_entity.normalized_name, subject_entity.normalized_name
        )
        return [self.folders.relative_path(path) for path in removed]

    # ============================================
    # UPLOAD
    # ============================================

    def _validate_upload(self, pdf_type, upload, name):
        self.folders.check_type(pdf_type)
        if upload is None:
            raise BadRequest('PDF file is required')
        if upload.mime_type != Pdf.MIME_TYPE:
            raise BadRequest('Only PDF files are allowed')
        max_size = getattr(settings, 'CATALOG_MAX_UPLOAD_SIZE', None)
        if max_size and len(upload.content) > max_size:
            raise BadRequest(f"File {upload.filename} exceeds the {max_size} byte upload limit")
        if not (name or '').strip():
            raise BadRequest('PDF name is required')
        filename = sanitize_filename(upload.filename)
        if not filename:
            raise BadRequest('Invalid file name')
        return truncate_filename(filename, MAX_FILENAME_BYTES - STAMP_PREFIX_BYTES)

    def upload_pdf(self, pdf_type, grade, subject, medium, upload, name, description=None, year=None):
        """
        Store one PDF at <type>/<grade>/<subject>/[<medium>/]<ms>-<name> and
        record it. The Pdf row is only created once the file is on disk;
        grades/subjects created on the way are left in place on failure.
        """
        sanitized = self._validate_upload(pdf_type, upload, name)

        grade_entity, subject_entity, medium_entity, _ = self.create_subject_folder(grade, subject, medium)

        segments = [grade_entity.normalized_name, subject_entity.normalized_name]
        if medium_entity:
            segments.append(medium_entity.normalized_name)
        stamp = int(time.time() * 1000)
        target = self.folders.type_path(pdf_type, *segments, f"{stamp}-{sanitized}")
        try:
            while target.exists():
                # same name uploaded twice within one millisecond
                stamp += 1
                target = target.with_name(f"{stamp}-{sanitized}")
            self.folders.write_file(target, upload.content)
        except OSError as e:
            raise Internal(f"Failed to upload PDF {sanitized}: {e}")

        try:
            pdf = self.pdfs.create(
                name=name.strip(),
                filename=target.name,
                file_path=self.folders.relative_path(target),
                type=pdf_type,
                file_size=len(upload.content),
                mime_type=upload.mime_type,
                grade=grade_entity,
                subject=subject_entity,
                description=description or None,
                year=year,
            )
        except CatalogError:
            # no row, so the file would only show up as untracked
            self.folders.remove_file(target)
            raise
        logger.info('Uploaded PDF "%s" to %s', pdf.name, pdf.file_path)
        return pdf

    def upload_many(self, pdf_type, grade, subject, medium, uploads, names, description=None, year=None):
        self.folders.check_type(pdf_type)
        if not uploads:
            raise BadRequest('At least one PDF file is required')
        if len(names) != len(uploads):
            raise BadRequest(
                f"Number of names ({len(names)}) must match number of files ({len(uploads)})"
            )

        results = []
        for upload, name in zip(uploads, names):
            try:
                pdf = self.upload_pdf(pdf_type, grade, subject, medium, upload, name, description, year)
                results.append({
                    'name': name,
                    'filename': upload.filename,
                    'success': True,
                    'message': 'PDF uploaded successfully',
                    'pdf': pdf,
                })
            except CatalogError as e:
                logger.warning('Upload of %s failed: %s', upload.filename, e.message)
                results.append({
                    'name': name,
                    'filename': upload.filename,
                    'success': False,
                    'message': e.message,
                })
        return batch_result(results, len(uploads), '{success} out of {total} PDF(s) uploaded successfully')

    # ============================================
    # RETRIEVAL / DELETE
    # ============================================

    def stream_by_id(self, pdf_id):
        pdf = self.pdfs.find_by_id(pdf_id)
        path = self.folders.absolute_path(pdf.file_path)
        if not path.is_file():
            logger.warning('PDF %s points at missing file %s', pdf.pk, pdf.file_path)
            raise NotFound(f"PDF file not found at path: {pdf.file_path} (record exists, file is missing)")
        stream, size = self.folders.open_file(path)
        return PdfStream(stream=stream, size=size, filename=pdf.filename)

    def stream_by_path(self, relative_path):
        path = self.folders.resolve_safe_path(relative_path)
        stream, size = self.folders.open_file(path)
        return PdfStream(stream=stream, size=size, filename=path.name)

    def delete_pdf(self, pdf_id):
        """
        Delete the Pdf row, then its file. A file that is already gone is only
        logged. A medium folder left empty by the delete is removed as well.
        """
        pdf = self.pdfs.delete(pdf_id)
        path = self.folders.absolute_path(pdf.file_path)
        if not self.folders.remove_file(path):
            logger.warning('Deleted PDF "%s" had no file at %s', pdf.name, pdf.file_path)
        # <type>/<grade>/<subject>/<medium>/<file>
        if len(pdf.file_path.split('/')) == 5:
            self.folders.remove_if_empty(path.parent)
        return pdf

    def update_pdf(self, pdf_id, **fields):
        return self.pdfs.update(pdf_id, **fields)
