"""Citation Key Generator Module.

Derives short, human-readable citation keys such as "Kohn1965" from the
first author's surname and the publication year. Keys that collide with
previously issued ones get a letter suffix ("Kohn1965a", "Kohn1965b", ...).
"""

import string
from typing import Iterable, Sequence

from loguru import logger

from .exceptions import DegenerateKeyError, InvalidYearError, MissingAuthorError
from .isi_record import next_author, year

KEY_CHARACTERS = frozenset(string.digits + string.ascii_letters)

# surname needs to keep at least one character next to the 4 digit year
MIN_KEY_LENGTH = 5

# one base key plus suffixes "a" to "z"
MAX_SUFFIXES = 26


def first_author_surname(record: Sequence[str]) -> str:
    """Surname of the first author, i.e. everything before the first comma."""
    author, _ = next_author(record, 0)
    return author.split(',', 1)[0].strip()


def clean_key(candidate: str) -> str:
    """Drop every character that is not an ASCII letter or digit."""
    return ''.join(char for char in candidate if char in KEY_CHARACTERS)


def count_prefix_matches(candidate: str, existing_keys: Iterable[str]) -> int:
    """Count existing keys whose leading characters equal the candidate, ignoring case."""
    length = len(candidate)
    folded = candidate.upper()
    return sum(1 for key in existing_keys if key[:length].upper() == folded)


def generate_citation_key(record: Sequence[str], existing_keys: Iterable[str]) -> str:
    """
    Generate a unique citation key for a record.

    Args:
        record: Tagged record lines
        existing_keys: Keys already issued by the registry

    Returns:
        Citation key, e.g. "Smith2001" or "Smith2001a"

    Raises:
        MissingAuthorError: The record has no first author
        InvalidYearError: The year is not exactly 4 characters
        DegenerateKeyError: Fewer than 5 characters remain after cleaning,
            or 26 suffixed keys ("a" to "z") are already taken
    """
    surname = first_author_surname(record)
    if not surname:
        raise MissingAuthorError("Record has no first author", record)

    pub_year = year(record).strip()
    if len(pub_year) != 4:
        raise InvalidYearError(pub_year, record)

    candidate = clean_key(surname + pub_year)
    if len(candidate) < MIN_KEY_LENGTH:
        raise DegenerateKeyError(candidate, record)

    # Suffixed keys are not re-checked, so "Smith2001a" may still clash with
    # a longer base key issued earlier.
    matches = count_prefix_matches(candidate, existing_keys)
    if matches > MAX_SUFFIXES:
        raise DegenerateKeyError(
            candidate,
            record,
            message=f"Citation key {candidate!r} is taken {matches} times, no suffix letter left",
        )
    if matches > 0:
        suffixed = candidate + chr(ord('a') + matches - 1)
        logger.debug(f"Citation key {candidate} taken {matches}x, using {suffixed}")
        return suffixed
    return candidate
