import pytest

from catalog.folders import FolderTree
from catalog.models import Pdf
from catalog.services import PdfService, UploadedPdf

PDF_BYTES = b'%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n'


@pytest.fixture
def storage_root(settings, tmp_path):
    root = tmp_path / 'storage'
    root.mkdir()
    settings.CATALOG_STORAGE_ROOT = str(root)
    return root


@pytest.fixture
def folders(storage_root):
    return FolderTree(storage_root)


@pytest.fixture
def service(folders):
    return PdfService(folders)


@pytest.fixture
def make_upload():
    def _make(filename='paper.pdf', content=PDF_BYTES, mime_type='application/pdf'):
        return UploadedPdf(content=content, filename=filename, mime_type=mime_type)
    return _make


def write_pdf(path, content=PDF_BYTES):
    """Drop a file straight into storage, bypassing the API."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def make_pdf(grade, subject, name='Paper', pdf_type=Pdf.PAST_PAPERS, medium=None, filename=None):
    """A Pdf row; the file itself is not written."""
    segments = [pdf_type, grade.normalized_name, subject.normalized_name]
    if medium:
        segments.append(medium)
    filename = filename or f'1700000000000-{name}.pdf'
    return Pdf.objects.create(
        name=name,
        filename=filename,
        file_path='/'.join(segments + [filename]),
        type=pdf_type,
        file_size=10,
        grade=grade,
        subject=subject,
    )
