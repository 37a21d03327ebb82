import pytest

from catalog.normalization import (
    is_safe_segment,
    normalize_grade,
    normalize_medium,
    normalize_subject,
    sanitize_filename,
    truncate_filename,
    valid_mediums,
    valid_subjects,
)


@pytest.mark.parametrize('value', [str(n) for n in range(1, 14)])
def test_numeric_grades_pass_through(value):
    assert normalize_grade(value) == value


def test_numeric_grade_drops_leading_zero_and_accepts_int():
    assert normalize_grade('07') == '7'
    assert normalize_grade(12) == '12'


def test_out_of_range_numbers_are_not_grades():
    assert normalize_grade('14') == '14'
    assert normalize_grade('0') == '0'
    assert normalize_grade('20 (Extra)') == '20-extra'


@pytest.mark.parametrize('value, expected', [
    ('11 (O/L)', '11'),
    ('13 A/L', '13'),
    ('1st term', '1'),
    (' 05 Special', '5'),
])
def test_leading_grade_number_wins(value, expected):
    assert normalize_grade(value) == expected


@pytest.mark.parametrize('value', ['grade-1', 'grade-01', 'Grade 1', 'GRADE 01', '  grade   1 '])
def test_grade_aliases(value):
    assert normalize_grade(value) == 'grade-01'


@pytest.mark.parametrize('value, expected', [
    ('A/L', 'advance-level'),
    ('Advanced Level', 'advance-level'),
    ('O-Level', 'ordinary-level'),
    ('Grade 11 (O/L)', 'grade-11-ol'),
    ('Grade 13 (A/L)', 'grade-13-al'),
    ('Scholarship!!', 'scholarship'),
    ('11 (O/L)', '11'),
    ('13 A/L', '13'),
])
def test_grade_cleanup(value, expected):
    assert normalize_grade(value) == expected


@pytest.mark.parametrize('value', [
    '1', '07', 'Grade 1', 'grade-11-o-l', 'A/L', '11 (O/L)',
    'Year 5 (Special)', '--weird--name--', '',
])
def test_grade_normalization_is_idempotent(value):
    once = normalize_grade(value)
    assert normalize_grade(once) == once


@pytest.mark.parametrize('value, expected', [
    ('Mathematics', 'mathematics'),
    ('Maths', 'mathematics'),
    ('ICT', 'information-technology'),
    ('Computer Science', 'information-technology'),
    ('Art and Design', 'art'),
    ('Buddhism', 'religion'),
    ('Combined Maths', 'combined-maths'),
])
def test_subject_aliases(value, expected):
    assert normalize_subject(value) == expected


@pytest.mark.parametrize('value', ['Maths', 'Art  and Design', 'Combined Maths', 'Physics'])
def test_subject_normalization_is_idempotent(value):
    once = normalize_subject(value)
    assert normalize_subject(once) == once


def test_medium_aliases():
    assert normalize_medium('Sinhalese') == 'sinhala'
    assert normalize_medium('EN') == 'english'
    assert normalize_medium('Tamil Medium') == 'tamil'
    assert normalize_medium('French') == 'french'


def test_configured_medium_aliases(settings):
    settings.CATALOG_MEDIUM_ALIASES = {'Sinhala Madyaya': 'sinhala', 'Hindi': 'hindi'}
    assert normalize_medium('sinhala madyaya') == 'sinhala'
    assert 'hindi' in valid_mediums()


def test_valid_lists_are_canonical_slugs():
    assert 'mathematics' in valid_subjects()
    assert 'maths' not in valid_subjects()
    assert valid_mediums() == ['english', 'sinhala', 'tamil']


def test_sanitize_filename_blocks_traversal():
    cleaned = sanitize_filename('../../etc/passwd')
    assert '/' not in cleaned
    assert '..' not in cleaned
    assert cleaned == 'etcpasswd'


def test_sanitize_filename_strips_illegal_characters():
    assert sanitize_filename('  Term<1>: "final"?|*.pdf ') == 'Term1 final.pdf'
    assert sanitize_filename('C:\\docs\\paper.pdf') == 'Cdocspaper.pdf'
    assert sanitize_filename('....pdf') == 'pdf'


def test_is_safe_segment():
    assert is_safe_segment('grade-01')
    assert not is_safe_segment('')
    assert not is_safe_segment('.')
    assert not is_safe_segment('..')
    assert not is_safe_segment('a/b')
    assert not is_safe_segment('a\\b')


def test_truncate_filename_keeps_extension():
    long_name = 'x' * 300 + '.pdf'
    truncated = truncate_filename(long_name, 235)
    assert len(truncated.encode('utf-8')) == 235
    assert truncated.endswith('.pdf')
    assert truncate_filename('paper.pdf', 235) == 'paper.pdf'


def test_truncate_filename_cuts_on_character_boundary():
    truncated = truncate_filename('ගණිතය' * 40 + '.pdf', 100)
    assert len(truncated.encode('utf-8')) <= 100
    assert truncated.endswith('.pdf')
    assert truncated.startswith('ගණිතය')
