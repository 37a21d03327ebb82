"""
Storage folder tree: <root>/<type>/<grade>/<subject>/[<medium>/]<file>.pdf

Every directory here mirrors a catalog entity by its slug. Creation is
idempotent, deletion only ever removes empty directories, and any path that
comes from a request goes through resolve_safe_path() first.
"""
import logging
import os
from pathlib import Path, PurePosixPath

from django.conf import settings

from .exceptions import BadRequest, Conflict, Internal, NotFound
from .models import Pdf
from .normalization import is_safe_segment

logger = logging.getLogger(__name__)


def default_storage_root():
    return Path(settings.CATALOG_STORAGE_ROOT)


class FolderTree:

    def __init__(self, root=None):
        self.root = Path(root) if root is not None else default_storage_root()

    # ----------------------------------------
    # paths
    # ----------------------------------------

    def check_type(self, pdf_type):
        if pdf_type not in Pdf.TYPES:
            raise BadRequest(f"Invalid type '{pdf_type}'. Must be one of: {', '.join(Pdf.TYPES)}")
        return pdf_type

    def type_path(self, pdf_type, *segments):
        self.check_type(pdf_type)
        for segment in segments:
            if not is_safe_segment(segment):
                raise BadRequest(f"Invalid folder name '{segment}'")
        return self.root.joinpath(pdf_type, *segments)

    def relative_path(self, path):
        """Storage-root relative path with '/' separators (what Pdf.file_path stores)."""
        path = Path(path)
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.relative_to(self.root.resolve()).as_posix()

    def absolute_path(self, relative_path):
        return self.root.joinpath(*PurePosixPath(relative_path).parts)

    def resolve_safe_path(self, relative_path):
        """
        Turn an untrusted "type/grade/subject/.../file.pdf" into an absolute
        path under the storage root. Raises BadRequest on anything that could
        escape it.
        """
        cleaned = str(relative_path or '').replace('\\', '/').lstrip('/')
        parts = [part for part in cleaned.split('/') if part not in ('', '.')]
        if not parts or '..' in parts:
            raise BadRequest('Invalid file path')

        root = self.root.resolve()
        candidate = root.joinpath(*parts).resolve()
        if candidate == root or root not in candidate.parents:
            raise BadRequest('Invalid file path')
        return candidate

    # ----------------------------------------
    # filesystem capability
    # ----------------------------------------

    def has_entries(self, path):
        path = Path(path)
        if not path.is_dir():
            return False
        with os.scandir(path) as entries:
            return any(True for _ in entries)

    def count_entries(self, path):
        path = Path(path)
        if not path.is_dir():
            return 0
        with os.scandir(path) as entries:
            return sum(1 for _ in entries)

    def list_directories(self, path):
        """Names of sub-directories of path; a missing path lists as empty."""
        path = Path(path)
        if not path.is_dir():
            return []
        with os.scandir(path) as entries:
            return sorted(entry.name for entry in entries if entry.is_dir())

    def list_pdf_files(self, path):
        """os.DirEntry for every *.pdf file directly in path."""
        path = Path(path)
        if not path.is_dir():
            return []
        with os.scandir(path) as entries:
            files = [
                entry for entry in entries
                if entry.is_file() and entry.name.lower().endswith('.pdf')
            ]
        return sorted(files, key=lambda entry: entry.name)

    def _mkdir(self, path, created):
        if path.is_dir():
            return
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise Internal(f"Failed to create folder {self.relative_path(path)}: {e}")
        created.append(path)
        logger.info("Created folder %s", path)

    def write_file(self, path, content):
        path = Path(path)
        if path.exists():
            raise Conflict(f"File {path.name} already exists")
        self._mkdir(path.parent, [])
        try:
            with open(path, 'xb') as fh:
                fh.write(content)
        except FileExistsError:
            raise Conflict(f"File {path.name} already exists")
        except OSError as e:
            raise Internal(f"Failed to upload PDF {path.name}: {e}")
        return path

    def remove_file(self, path):
        """Delete a stored file. Returns False when it was already gone."""
        try:
            Path(path).unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise Internal(f"Failed to delete {Path(path).name}: {e}")
        return True

    def open_file(self, path):
        """(open binary handle, size). NotFound when path is not a file."""
        path = Path(path)
        if not path.is_file():
            raise NotFound(f"PDF file not found: {self.relative_path(path)}")
        size = path.stat().st_size
        return open(path, 'rb'), size

    # ----------------------------------------
    # folder lifecycle
    # ----------------------------------------

    def ensure_grade_folder(self, pdf_type, grade_slug):
        """Create <type>/<grade>. Returns the folders that did not exist yet."""
        created = []
        self._mkdir(self.type_path(pdf_type, grade_slug), created)
        return created

    def ensure_subject_folder(self, grade_slug, subject_slug, medium_slug=None):
        """
        Create the subject folder (and medium folder, if given) under BOTH
        syllabus and past-papers; a subject declared for a grade always gets
        both trees.
        """
        created = []
        for pdf_type in Pdf.TYPES:
            self._mkdir(self.type_path(pdf_type, grade_slug), created)
            self._mkdir(self.type_path(pdf_type, grade_slug, subject_slug), created)
            if medium_slug:
                self._mkdir(self.type_path(pdf_type, grade_slug, subject_slug, medium_slug), created)
        return created

    def _remove_empty(self, folder_paths, conflict_message):
        if any(self.has_entries(path) for path in folder_paths):
            raise Conflict(conflict_message)

        removed = []
        for path in folder_paths:
            if not path.is_dir():
                continue
            try:
                path.rmdir()
            except OSError as e:
                # rmdir refuses non-empty folders: something landed since the check
                raise Conflict(f"{conflict_message} ({e.strerror})")
            removed.append(path)
            logger.info("Removed folder %s", path)
        return removed

    def remove_if_empty(self, path):
        """rmdir path when it is an empty folder. Returns True if it was removed."""
        path = Path(path)
        if not path.is_dir() or self.has_entries(path):
            return False
        try:
            path.rmdir()
        except OSError as e:
            logger.warning("Could not remove empty folder %s: %s", path, e)
            return False
        logger.info("Removed folder %s", path)
        return True

    def delete_grade_folders(self, grade_slug):
        folder_paths = [self.type_path(pdf_type, grade_slug) for pdf_type in Pdf.TYPES]
        return self._remove_empty(
            folder_paths,
            'Cannot delete grade folders: folders contain subjects or files',
        )

    def delete_subject_folders(self, grade_slug, subject_slug):
        folder_paths = [
            self.type_path(pdf_type, grade_slug, subject_slug) for pdf_type in Pdf.TYPES
        ]
        return self._remove_empty(
            folder_paths,
            'Cannot delete subject folders: folders contain PDF files',
        )

    def medium_folder_in_use(self, medium_slug):
        """True if any <type>/<grade>/<subject>/<medium> folder holds something."""
        for pdf_type in Pdf.TYPES:
            type_dir = self.type_path(pdf_type)
            for grade_slug in self.list_directories(type_dir):
                for subject_slug in self.list_directories(type_dir / grade_slug):
                    if self.has_entries(type_dir / grade_slug / subject_slug / medium_slug):
                        return True
        return False
