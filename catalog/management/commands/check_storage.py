"""
Compare Pdf rows with the files under CATALOG_STORAGE_ROOT.

Run: python manage.py check_storage
     python manage.py check_storage --type past-papers --delete-orphans

Reports:
- orphaned rows: a Pdf record whose file is missing
- untracked files: a *.pdf on disk with no Pdf record (still listed to users)
"""

from django.core.management.base import BaseCommand

from catalog.folders import FolderTree
from catalog.models import Pdf
from catalog.services import PdfService


def stored_pdf_paths(folders, pdf_type):
    """Relative paths of every *.pdf in <type>/<grade>/<subject>/[<medium>/]."""
    type_dir = folders.type_path(pdf_type)
    for grade_slug in folders.list_directories(type_dir):
        grade_dir = type_dir / grade_slug
        for subject_slug in folders.list_directories(grade_dir):
            subject_dir = grade_dir / subject_slug
            scan_dirs = [subject_dir] + [subject_dir / name for name in folders.list_directories(subject_dir)]
            for scan_dir in scan_dirs:
                for entry in folders.list_pdf_files(scan_dir):
                    yield folders.relative_path(entry.path)


class Command(BaseCommand):
    help = 'Report Pdf records without a file and PDF files without a record'

    def add_arguments(self, parser):
        parser.add_argument(
            '--type',
            choices=Pdf.TYPES,
            help='Only check one type folder (default: all)',
        )
        parser.add_argument(
            '--delete-orphans',
            action='store_true',
            help='Delete Pdf records whose file is missing',
        )

    def handle(self, *args, **options):
        folders = FolderTree()
        types = [options['type']] if options['type'] else Pdf.TYPES

        rows = Pdf.objects.filter(type__in=types).order_by('file_path')
        orphaned = [pdf for pdf in rows if not folders.absolute_path(pdf.file_path).is_file()]
        tracked = {pdf.file_path for pdf in rows}

        untracked = []
        for pdf_type in types:
            untracked.extend(path for path in stored_pdf_paths(folders, pdf_type) if path not in tracked)

        self.stdout.write(f'Storage root: {folders.root}')

        for pdf in orphaned:
            self.stdout.write(self.style.WARNING(f'  Orphaned record: {pdf.name} (id={pdf.id}) -> {pdf.file_path}'))
        for path in untracked:
            self.stdout.write(f'  Untracked file: {path}')

        if options['delete_orphans'] and orphaned:
            service = PdfService(folders)
            for pdf in orphaned:
                service.delete_pdf(pdf.pk)
            self.stdout.write(self.style.SUCCESS(f'\nDeleted {len(orphaned)} orphaned record(s).'))

        summary = f'\n{len(orphaned)} orphaned record(s), {len(untracked)} untracked file(s).'
        if orphaned or untracked:
            self.stdout.write(self.style.WARNING(summary))
        else:
            self.stdout.write(self.style.SUCCESS(summary))
