# catalog/normalization.py - NAME → FOLDER SLUG HELPERS

import re

from django.conf import settings

# ============================================
# GRADES
# ============================================

VALID_NUMERIC_GRADES = range(1, 14)

GRADE_ALIASES = {
    'grade-01': 'grade-01',
    'grade-1': 'grade-01',
    'grade-02': 'grade-02',
    'grade-2': 'grade-02',
    'grade-03': 'grade-03',
    'grade-3': 'grade-03',
    'grade-04': 'grade-04',
    'grade-4': 'grade-04',
    'grade-05': 'grade-05',
    'grade-5': 'grade-05',
    'grade-06': 'grade-06',
    'grade-6': 'grade-06',
    'grade-07': 'grade-07',
    'grade-7': 'grade-07',
    'grade-08': 'grade-08',
    'grade-8': 'grade-08',
    'grade-09': 'grade-09',
    'grade-9': 'grade-09',
    'grade-10': 'grade-10',
    'grade-11': 'grade-11',
    'grade-11-ol': 'grade-11-ol',
    'grade-11-o-l': 'grade-11-ol',
    'grade-12': 'grade-12',
    'grade-12-al': 'grade-12-al',
    'grade-12-a-l': 'grade-12-al',
    'grade-13': 'grade-13',
    'grade-13-al': 'grade-13-al',
    'grade-13-a-l': 'grade-13-al',

    'advance-level': 'advance-level',
    'advanced-level': 'advance-level',
    'a-level': 'advance-level',
    'al': 'advance-level',
    'a-l': 'advance-level',

    'ordinary-level': 'ordinary-level',
    'o-level': 'ordinary-level',
    'ol': 'ordinary-level',
    'o-l': 'ordinary-level',
}

# ============================================
# SUBJECTS
# ============================================

SUBJECT_ALIASES = {
    'mathematics': 'mathematics',
    'maths': 'mathematics',
    'math': 'mathematics',

    'science': 'science',

    'english': 'english',
    'english-language': 'english',
    'english-language-arts': 'english',

    'sinhala': 'sinhala',
    'tamil': 'tamil',
    'history': 'history',
    'geography': 'geography',
    'civics': 'civics',
    'citizenship-education': 'civics',

    'information-technology': 'information-technology',
    'it': 'information-technology',
    'ict': 'information-technology',
    'computer-science': 'information-technology',

    'art': 'art',
    'arts': 'art',
    'art-and-design': 'art',

    'music': 'music',
    'physical-education': 'physical-education',
    'pe': 'physical-education',
    'health': 'health',
    'health-and-physical-education': 'physical-education',

    'religion': 'religion',
    'buddhism': 'religion',
    'christianity': 'religion',
    'islam': 'religion',
    'hinduism': 'religion',

    'commerce': 'commerce',
    'accounting': 'commerce',
    'business-studies': 'commerce',

    'agriculture': 'agriculture',
    'agri': 'agriculture',

    'drama': 'drama',
    'theatre': 'drama',

    'dance': 'dance',

    'western-music': 'western-music',
    'eastern-music': 'eastern-music',
}

# ============================================
# MEDIUMS (language of the paper)
# ============================================

MEDIUM_ALIASES = {
    'sinhala': 'sinhala',
    'sinhalese': 'sinhala',
    'sinhala-medium': 'sinhala',
    'si': 'sinhala',

    'english': 'english',
    'english-medium': 'english',
    'en': 'english',

    'tamil': 'tamil',
    'tamil-medium': 'tamil',
    'ta': 'tamil',
}

_WHITESPACE = re.compile(r'\s+')
_ILLEGAL_FILENAME_CHARS = re.compile(r'[<>:"|?*]')
_LEADING_INTEGER = re.compile(r'[+-]?\d+')


def _slugify(value):
    return _WHITESPACE.sub('-', str(value).strip().lower())


def normalize_grade(grade):
    """
    Map a grade as typed by an admin ("Grade 1", "11 (O/L)", "A/L", 7) to its
    folder name. Anything starting with a number 1-13 becomes that number
    ("11 (O/L)" -> "11"); everything else is cleaned up and run through
    GRADE_ALIASES.
    """
    grade_str = str(grade).strip()
    leading = _LEADING_INTEGER.match(grade_str)
    if leading and int(leading.group()) in VALID_NUMERIC_GRADES:
        return str(int(leading.group()))

    normalized = grade_str.lower()
    normalized = _WHITESPACE.sub('-', normalized)
    normalized = re.sub(r'[()]', '', normalized)
    normalized = re.sub(r'[/\\]', '-', normalized)
    normalized = re.sub(r'[^\w-]', '', normalized)
    normalized = re.sub(r'-+', '-', normalized)
    normalized = normalized.strip('-')

    return GRADE_ALIASES.get(normalized, normalized)


def normalize_subject(subject):
    normalized = _slugify(subject)
    return SUBJECT_ALIASES.get(normalized, normalized)


def medium_aliases():
    """Built-in medium aliases plus CATALOG_MEDIUM_ALIASES from settings."""
    aliases = dict(MEDIUM_ALIASES)
    for alias, slug in getattr(settings, 'CATALOG_MEDIUM_ALIASES', {}).items():
        aliases[_slugify(alias)] = _slugify(slug)
    return aliases


def normalize_medium(medium):
    normalized = _slugify(medium)
    return medium_aliases().get(normalized, normalized)


def valid_subjects():
    return sorted(set(SUBJECT_ALIASES.values()))


def valid_mediums():
    return sorted(set(medium_aliases().values()))


def sanitize_filename(filename):
    """
    Make a user supplied filename safe to join onto a storage folder:
    no path separators, no "..", none of <>:"|?*.
    """
    cleaned = re.sub(r'[/\\]', '', str(filename))
    cleaned = _ILLEGAL_FILENAME_CHARS.sub('', cleaned)
    while '..' in cleaned:
        cleaned = cleaned.replace('..', '')
    return cleaned.strip()


def truncate_filename(filename, max_bytes):
    """Shorten filename to at most max_bytes of UTF-8, keeping a short extension."""
    if len(filename.encode('utf-8')) <= max_bytes:
        return filename
    stem, dot, ext = filename.rpartition('.')
    if not dot or not stem or len(ext) > 10:
        stem, ext = filename, ''
    else:
        ext = '.' + ext
    budget = max_bytes - len(ext.encode('utf-8'))
    stem = stem.encode('utf-8')[:budget].decode('utf-8', 'ignore').rstrip()
    return stem + ext


def is_safe_segment(slug):
    """A slug that can be used as one folder name: no separators, not '.' or '..'."""
    return bool(slug) and slug not in ('.', '..') and not re.search(r'[/\\\x00]', slug)
