import uuid

import pytest

from catalog.exceptions import BadRequest, Conflict, NotFound
from catalog.models import Grade, Medium, Pdf, Subject
from catalog.store import GradeStore, MediumStore, PdfStore, SubjectStore

from .conftest import make_pdf, write_pdf

pytestmark = pytest.mark.django_db


@pytest.fixture
def grades(folders):
    return GradeStore(folders)


@pytest.fixture
def subjects(folders):
    return SubjectStore(folders)


@pytest.fixture
def mediums(folders):
    return MediumStore(folders)


# ============================================
# CREATE / FIND
# ============================================

def test_create_stores_slug(grades):
    grade = grades.create('Grade 1', description='Primary')
    assert grade.name == 'Grade 1'
    assert grade.normalized_name == 'grade-01'
    assert grade.description == 'Primary'


def test_create_rejects_duplicate_name(subjects):
    subjects.create('Mathematics')
    with pytest.raises(Conflict):
        subjects.create('Mathematics')


def test_create_rejects_duplicate_slug(subjects):
    subjects.create('Mathematics')
    with pytest.raises(Conflict):
        subjects.create('Maths')
    assert Subject.objects.count() == 1


@pytest.mark.parametrize('name', ['', '   ', '..', '/'])
def test_create_rejects_empty_or_unsafe_names(subjects, name):
    with pytest.raises(BadRequest):
        subjects.create(name)
    assert not Subject.objects.exists()


def test_find_by_id(grades):
    grade = grades.create('Grade 5')
    assert grades.find_by_id(grade.id) == grade
    with pytest.raises(NotFound):
        grades.find_by_id(uuid.uuid4())
    with pytest.raises(NotFound):
        grades.find_by_id('not-a-uuid')


def test_find_by_name_matches_display_name_or_slug(subjects):
    maths = subjects.create('Mathematics')
    assert subjects.find_by_name('Mathematics') == maths
    assert subjects.find_by_name('maths') == maths
    assert subjects.find_by_name('mathematics') == maths
    assert subjects.find_by_name('Physics') is None
    assert subjects.find_by_name('') is None


def test_find_or_create_twice_returns_same_row(subjects):
    first = subjects.find_or_create('Mathematics')
    second = subjects.find_or_create('Mathematics')
    assert first.id == second.id
    assert Subject.objects.count() == 1


def test_find_or_create_resolves_aliases(grades):
    first = grades.find_or_create('Grade 01')
    assert grades.find_or_create('grade-1').id == first.id
    assert Grade.objects.count() == 1


def test_find_or_create_retries_lookup_after_conflict(subjects, monkeypatch):
    # another request created the row between our lookup and our insert
    existing = Subject.objects.create(name='Science', normalized_name='science')
    real_find = subjects.find_by_name
    calls = []

    def racing_find(name):
        calls.append(name)
        return None if len(calls) == 1 else real_find(name)

    monkeypatch.setattr(subjects, 'find_by_name', racing_find)
    assert subjects.find_or_create('Science').id == existing.id
    assert Subject.objects.count() == 1


def test_list_is_sorted_by_display_name(subjects):
    for name in ['biology', 'Chemistry', 'Art', 'art history']:
        subjects.create(name)
    assert [s.name for s in subjects.list()] == ['Art', 'art history', 'biology', 'Chemistry']


# ============================================
# DELETE GUARDS
# ============================================

def test_delete_grade_without_pdfs(grades):
    grade = grades.create('Grade 2')
    grades.delete(grade.id)
    assert not Grade.objects.filter(pk=grade.pk).exists()


def test_delete_grade_with_pdfs_conflicts(grades, subjects):
    grade = grades.create('Grade 3')
    subject = subjects.create('Science')
    pdf = make_pdf(grade, subject)

    with pytest.raises(Conflict) as excinfo:
        grades.delete(grade.id)

    assert '1 PDF(s)' in excinfo.value.message
    assert Grade.objects.filter(pk=grade.pk).exists()
    assert Pdf.objects.filter(pk=pdf.pk).exists()


def test_delete_subject_with_pdfs_conflicts(grades, subjects):
    subject = subjects.create('History')
    make_pdf(grades.create('Grade 9'), subject)
    with pytest.raises(Conflict):
        subjects.delete(subject.id)
    assert Subject.objects.filter(pk=subject.pk).exists()


def test_delete_missing_entity(subjects):
    with pytest.raises(NotFound):
        subjects.delete(uuid.uuid4())


def test_medium_delete_blocked_while_folder_holds_files(mediums, storage_root):
    english = mediums.create('English')
    write_pdf(storage_root / 'past-papers' / 'grade-01' / 'mathematics' / 'english' / 'a.pdf')

    with pytest.raises(Conflict):
        mediums.delete(english.id)
    assert Medium.objects.filter(pk=english.pk).exists()


def test_medium_delete_with_empty_folders(mediums, storage_root):
    tamil = mediums.create('Tamil')
    (storage_root / 'syllabus' / 'grade-01' / 'science' / 'tamil').mkdir(parents=True)
    mediums.delete(tamil.id)
    assert not Medium.objects.filter(pk=tamil.pk).exists()


def test_seed_mediums_is_idempotent(mediums):
    created = mediums.seed(['Sinhala', 'English', 'Tamil'])
    assert sorted(m.normalized_name for m in created) == ['english', 'sinhala', 'tamil']
    assert mediums.seed(['Sinhala', 'english', 'TA']) == []
    assert Medium.objects.count() == 3


# ============================================
# PDF ROWS
# ============================================

def test_pdf_find_many_filters(grades, subjects):
    g1, g2 = grades.create('Grade 1'), grades.create('Grade 2')
    maths = subjects.create('Mathematics')
    make_pdf(g1, maths, name='B paper')
    make_pdf(g1, maths, name='a paper')
    make_pdf(g2, maths, name='other grade')
    make_pdf(g1, maths, name='syllabus', pdf_type=Pdf.SYLLABUS)

    store = PdfStore()
    found = store.find_many(type=Pdf.PAST_PAPERS, grade_id=g1.id, subject_id=maths.id)
    assert [p.name for p in found] == ['a paper', 'B paper']
    assert len(store.find_many()) == 4


def test_pdf_referenced_ids_are_distinct(grades, subjects):
    grade = grades.create('Grade 4')
    subject = subjects.create('Music')
    make_pdf(grade, subject, name='one')
    make_pdf(grade, subject, name='two')
    assert PdfStore().referenced_ids('grade_id', type=Pdf.PAST_PAPERS) == [grade.id]


def test_pdf_update_only_touches_editable_fields(grades, subjects):
    pdf = make_pdf(grades.create('Grade 6'), subjects.create('Art'))
    store = PdfStore()

    updated = store.update(pdf.id, name='Renamed', year=2020)
    assert updated.name == 'Renamed'
    assert updated.year == 2020

    with pytest.raises(BadRequest):
        store.update(pdf.id, file_path='../elsewhere.pdf')
    pdf.refresh_from_db()
    assert pdf.file_path.startswith('past-papers/')


def test_pdf_delete_removes_row_only(grades, subjects, storage_root):
    pdf = make_pdf(grades.create('Grade 7'), subjects.create('Drama'))
    on_disk = write_pdf(storage_root / pdf.file_path)

    PdfStore().delete(pdf.id)

    assert not Pdf.objects.filter(pk=pdf.pk).exists()
    assert on_disk.exists()
    with pytest.raises(NotFound):
        PdfStore().find_by_id(pdf.id)
