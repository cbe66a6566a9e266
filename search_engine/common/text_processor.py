"""
Text processing for the search engine.
Cleans, splits and stems lines of text into normalized tokens.
"""
import re
import unicodedata

from nltk.stem.snowball import SnowballStemmer

# Default stemmer language
STEMMER_LANGUAGE = 'english'

# Anything that is neither an ASCII letter nor whitespace is dropped
CLEAN_REGEX = re.compile(r'[^A-Za-z\s]+')
SPLIT_REGEX = re.compile(r'\s+')


def new_stemmer():
    """Create a fresh Snowball stemmer; instances are not shared between tasks."""
    return SnowballStemmer(STEMMER_LANGUAGE)


def clean(text):
    """Decompose accents, drop non-letters and lowercase the text."""
    cleaned = unicodedata.normalize('NFD', text)
    cleaned = CLEAN_REGEX.sub('', cleaned)
    return cleaned.lower()


def split(text):
    """Split text on runs of whitespace, discarding empty tokens."""
    stripped = text.strip()
    if not stripped:
        return []
    return SPLIT_REGEX.split(stripped)


def parse(text):
    """Clean and split text into lowercase words."""
    return split(clean(text))


def _stem_into(line, stemmer, add):
    for word in parse(line):
        stemmed = stemmer.stem(word)
        if stemmed:
            add(stemmed)


def list_stems(line, stemmer=None):
    """
    Return the stems of a line in order of appearance.

    Args:
        line: The line of text to clean, split and stem
        stemmer: Optional stemmer to reuse

    Returns:
        List of stems, duplicates included
    """
    stemmer = stemmer or new_stemmer()
    stems = []
    _stem_into(line, stemmer, stems.append)
    return stems


def unique_stems(line, stemmer=None):
    """Return the sorted unique stems of a line."""
    stemmer = stemmer or new_stemmer()
    stems = set()
    _stem_into(line, stemmer, stems.add)
    return sorted(stems)


def list_file_stems(path):
    """Read a UTF-8 file line by line and return every stem in order."""
    stemmer = new_stemmer()
    stems = []
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            _stem_into(line, stemmer, stems.append)
    return stems
