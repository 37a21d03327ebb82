import pytest

from catalog.exceptions import BadRequest, NotFound
from catalog.listing import CatalogListing, Discovered, DiscoveredFile, Persisted, display_name_from_filename
from catalog.models import Grade, Medium, Subject

from .conftest import make_pdf, write_pdf

pytestmark = pytest.mark.django_db


@pytest.fixture
def listing(folders):
    return CatalogListing(folders)


def names(entries):
    return [entry.name for entry in entries]


def grade(name, slug):
    return Grade.objects.create(name=name, normalized_name=slug)


def subject(name, slug):
    return Subject.objects.create(name=name, normalized_name=slug)


def test_display_name_from_filename():
    assert display_name_from_filename('1712345678901-Term Test 2023.pdf') == 'Term Test 2023'
    assert display_name_from_filename('Model Paper.PDF') == 'Model Paper'
    assert display_name_from_filename('2023-2024 paper.pdf') == '2024 paper'


def test_list_types_counts_entries(listing, storage_root):
    (storage_root / 'syllabus' / 'grade-01').mkdir(parents=True)
    (storage_root / 'syllabus' / 'grade-02').mkdir()
    assert listing.list_types() == [
        {'name': 'syllabus', 'item_count': 2},
        {'name': 'past-papers', 'item_count': 0},
    ]


# ============================================
# GRADES
# ============================================

def test_list_grades_merges_rows_and_folders(listing, storage_root):
    maths = subject('Mathematics', 'mathematics')

    # row only: referenced by a Pdf, no folder on disk
    grade_one = grade('Grade 1', 'grade-01')
    make_pdf(grade_one, maths)

    # folder only, but "grade-2" resolves to the existing "Grade 02" row
    grade_two = grade('Grade 02', 'grade-02')
    (storage_root / 'past-papers' / 'grade-2').mkdir(parents=True)

    # folder with no row at all
    (storage_root / 'past-papers' / 'scholarship').mkdir()

    # row that only has syllabus PDFs stays out of past-papers
    make_pdf(grade('Grade 3', 'grade-03'), maths, pdf_type='syllabus')

    entries = listing.list_grades('past-papers')

    assert names(entries) == ['Grade 02', 'Grade 1', 'scholarship']
    assert entries[0] == Persisted(grade_two)
    assert entries[1] == Persisted(grade_one)
    assert entries[2] == Discovered('scholarship')
    assert entries[2].id is None


def test_list_grades_has_no_duplicates(listing, storage_root):
    grade_one = grade('Grade 1', 'grade-01')
    make_pdf(grade_one, subject('Science', 'science'))
    for folder in ['grade-01', 'grade-1', 'Grade-7', 'grade-07']:
        (storage_root / 'past-papers' / folder).mkdir(parents=True)

    entries = listing.list_grades('past-papers')

    assert [entry.persisted for entry in entries] == [True, False]
    assert names(entries) == ['Grade 1', 'Grade-7']


def test_list_grades_empty_and_invalid_type(listing):
    assert listing.list_grades('syllabus') == []
    with pytest.raises(BadRequest):
        listing.list_grades('notes')


# ============================================
# SUBJECTS
# ============================================

def test_list_subjects_for_persisted_grade(listing, storage_root):
    grade_one = grade('Grade 1', 'grade-01')
    science = subject('Science', 'science')
    make_pdf(grade_one, science)
    subject('Mathematics', 'mathematics')
    (storage_root / 'past-papers' / 'grade-01' / 'maths').mkdir(parents=True)
    (storage_root / 'past-papers' / 'grade-01' / 'robotics').mkdir()

    entries = listing.list_subjects('past-papers', 'grade 1')

    assert names(entries) == ['Mathematics', 'robotics', 'Science']
    assert [entry.persisted for entry in entries] == [True, False, True]
    assert listing.list_subjects_by_grade_id('past-papers', grade_one.id) == entries


def test_list_subjects_for_folder_only_grade(listing, storage_root):
    (storage_root / 'syllabus' / 'scholarship' / 'mathematics').mkdir(parents=True)
    entries = listing.list_subjects('syllabus', 'scholarship')
    assert entries == [Discovered('mathematics')]


def test_list_subjects_unknown_grade(listing):
    with pytest.raises(NotFound):
        listing.list_subjects('syllabus', 'Grade 9')


def test_list_subject_folders_spans_both_types(listing, storage_root):
    grade('Grade 1', 'grade-01')
    (storage_root / 'syllabus' / 'grade-01' / 'science').mkdir(parents=True)
    (storage_root / 'past-papers' / 'grade-01' / 'art').mkdir(parents=True)
    (storage_root / 'past-papers' / 'grade-01' / 'science').mkdir()
    assert listing.list_subject_folders('Grade 1') == ['art', 'science']


# ============================================
# MEDIUMS
# ============================================

def test_list_mediums_from_folders_and_file_paths(listing, storage_root):
    grade_one = grade('Grade 1', 'grade-01')
    maths = subject('Mathematics', 'mathematics')
    english = Medium.objects.create(name='English', normalized_name='english')
    subject_dir = storage_root / 'past-papers' / 'grade-01' / 'mathematics'
    (subject_dir / 'english').mkdir(parents=True)
    (subject_dir / 'en').mkdir()
    # the tamil folder is gone but a row still points into it
    make_pdf(grade_one, maths, medium='tamil')

    entries = listing.list_mediums('past-papers', 'Grade 1', 'Mathematics')

    assert entries == [Persisted(english), Discovered('tamil')]
    assert listing.list_mediums_by_ids('past-papers', grade_one.id, maths.id) == entries


# ============================================
# PDFS
# ============================================

def test_list_pdfs_merges_rows_and_loose_files(listing, storage_root):
    grade_one = grade('Grade 1', 'grade-01')
    maths = subject('Mathematics', 'mathematics')
    stored = make_pdf(grade_one, maths, name='Term Test')
    write_pdf(storage_root / stored.file_path)
    loose = write_pdf(storage_root / 'past-papers' / 'grade-01' / 'mathematics' / 'english' / '1700000000001-Model Paper.pdf')
    (loose.parent / 'readme.txt').write_text('not a pdf')

    entries = listing.list_pdfs('past-papers', 'Grade 1', 'Mathematics')

    assert names(entries) == ['Model Paper', 'Term Test']
    discovered, persisted = entries
    assert isinstance(discovered, DiscoveredFile)
    assert discovered.path == 'past-papers/grade-01/mathematics/english/1700000000001-Model Paper.pdf'
    assert discovered.size == loose.stat().st_size
    assert persisted == Persisted(stored)


def test_list_pdfs_filters_by_medium(listing, storage_root):
    grade_one = grade('Grade 1', 'grade-01')
    maths = subject('Mathematics', 'mathematics')
    english_pdf = make_pdf(grade_one, maths, name='English paper', medium='english')
    make_pdf(grade_one, maths, name='Sinhala paper', medium='sinhala')
    make_pdf(grade_one, maths, name='No medium')
    write_pdf(storage_root / 'past-papers' / 'grade-01' / 'mathematics' / 'english' / 'extra.pdf')

    entries = listing.list_pdfs_by_ids('past-papers', grade_one.id, maths.id, medium='EN')

    assert names(entries) == ['English paper', 'extra']
    assert entries[0] == Persisted(english_pdf)


def test_list_pdfs_for_folder_only_subject(listing, storage_root):
    write_pdf(storage_root / 'syllabus' / 'grade-05' / 'robotics' / 'intro.pdf')
    entries = listing.list_pdfs('syllabus', 'grade-05', 'robotics')
    assert len(entries) == 1
    assert entries[0].name == 'intro'
    assert entries[0].persisted is False
