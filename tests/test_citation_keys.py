"""
Tests for the citation key generator.
"""

import re
import string

import pytest
from citeregistry.citation_keys import (
    clean_key,
    count_prefix_matches,
    first_author_surname,
    generate_citation_key,
)
from citeregistry.exceptions import (
    DegenerateKeyError,
    InvalidYearError,
    KeyDerivationError,
    MissingAuthorError,
)
from citeregistry.isi_record import make_record

KEY_PATTERN = re.compile(r'^[A-Za-z]+[0-9]{4}[a-z]?$')


def record_for(author: str, year: str = "2001"):
    return make_record([f"AU {author}", "TI Some title", f"PY {year}"])


class TestKeyDerivation:
    """Test key derivation from a single record."""

    def test_surname_and_year(self):
        """Key is the surname followed by the year."""
        assert generate_citation_key(record_for("Smith, J"), []) == "Smith2001"

    def test_key_shape(self):
        """Keys are letters, a 4 digit year and at most one suffix letter."""
        for author in ["Kohn, W", "VandeVondele, J", "O'Neil, A", "Muller-Plathe, F"]:
            key = generate_citation_key(record_for(author), [])
            assert KEY_PATTERN.match(key), key
            assert len(key) >= 5

    def test_special_characters_removed(self):
        """Apostrophes, hyphens and blanks are dropped."""
        assert generate_citation_key(record_for("O'Neil, A"), []) == "ONeil2001"
        assert generate_citation_key(record_for("Muller-Plathe, F"), []) == "MullerPlathe2001"
        assert generate_citation_key(record_for("van der Waals, J"), []) == "vanderWaals2001"

    def test_accents_dropped_not_replaced(self):
        """Non-ASCII letters are removed, not transliterated."""
        assert generate_citation_key(record_for("Schrödinger, E", "1926"), []) == "Schrdinger1926"

    def test_author_without_comma(self):
        """A corporate author without a comma is used whole."""
        assert generate_citation_key(record_for("CP2K Developers"), []) == "CP2KDevelopers2001"

    def test_first_author_surname(self):
        """Only the first author's surname is taken."""
        record = make_record(["AU Kohn, W", "   Sham, LJ"])
        assert first_author_surname(record) == "Kohn"


class TestKeyErrors:
    """Test the failure modes of key derivation."""

    def test_missing_author(self):
        """A record without AU line has no key."""
        record = make_record(["TI Anonymous", "PY 2001"])
        with pytest.raises(MissingAuthorError):
            generate_citation_key(record, [])

    def test_blank_surname(self):
        """An author with an empty surname counts as missing."""
        with pytest.raises(MissingAuthorError):
            generate_citation_key(record_for(", J"), [])

    @pytest.mark.parametrize("year", ["", "01", "20011", "2001a"])
    def test_invalid_year(self, year):
        """Years that are not 4 characters are rejected."""
        with pytest.raises(InvalidYearError) as exc_info:
            generate_citation_key(record_for("Smith, J", year), [])
        assert exc_info.value.year == year

    def test_degenerate_key(self):
        """A surname with no ASCII letters leaves a key that is too short."""
        with pytest.raises(DegenerateKeyError) as exc_info:
            generate_citation_key(record_for("Ølæ, J"), [])
        assert exc_info.value.candidate == "2001"

    def test_errors_share_base_class(self):
        """Every derivation failure is a KeyDerivationError."""
        with pytest.raises(KeyDerivationError):
            generate_citation_key(make_record(["PY 2001"]), [])


class TestDisambiguation:
    """Test suffixing of colliding keys."""

    def test_second_key_gets_a(self):
        """The first collision gets suffix a."""
        first = generate_citation_key(record_for("Smith, J"), [])
        second = generate_citation_key(record_for("Smith, K"), [first])
        assert (first, second) == ("Smith2001", "Smith2001a")

    def test_third_key_gets_b(self):
        """The second collision gets suffix b."""
        keys = ["Smith2001", "Smith2001a"]
        assert generate_citation_key(record_for("Smith, J"), keys) == "Smith2001b"

    def test_case_insensitive(self):
        """Keys differing only in case collide."""
        assert generate_citation_key(record_for("SMITH, J"), ["Smith2001"]) == "SMITH2001a"

    def test_other_year_does_not_collide(self):
        """Same surname with another year keeps the plain key."""
        assert generate_citation_key(record_for("Smith, J", "2002"), ["Smith2001"]) == "Smith2002"

    def test_prefix_comparison_only(self):
        """Existing keys are compared truncated to the candidate's length."""
        assert count_prefix_matches("Smith2001", ["Smith2001", "smith2001a", "Smithson2001"]) == 2

    def test_shorter_existing_key_does_not_match(self):
        """An existing key shorter than the candidate never matches."""
        assert count_prefix_matches("Smith2001", ["Smith"]) == 0

    def test_suffixed_keys_count_as_matches(self):
        """Suffixed keys add to the collision count."""
        existing = ["Li2001", "Li2001a"]
        assert generate_citation_key(record_for("Li, X"), existing) == "Li2001b"

    def test_different_base_does_not_match(self):
        """A longer surname with the same start does not collide."""
        assert generate_citation_key(record_for("Li, X"), ["Lia2001"]) == "Li2001"

    def test_last_suffix_is_z(self):
        """The 26th collision gets suffix z."""
        existing = ["Smith2001"] + [f"Smith2001{letter}" for letter in string.ascii_lowercase[:25]]
        assert generate_citation_key(record_for("Smith, J"), existing) == "Smith2001z"

    def test_suffixes_exhausted(self):
        """A 27th collision has no letter left and is rejected."""
        existing = ["Smith2001"] + [f"Smith2001{letter}" for letter in string.ascii_lowercase]
        with pytest.raises(DegenerateKeyError) as exc_info:
            generate_citation_key(record_for("Smith, J"), existing)
        assert exc_info.value.candidate == "Smith2001"
        assert "no suffix letter left" in exc_info.value.message

    def test_clean_key(self):
        """clean_key keeps ASCII letters and digits only."""
        assert clean_key("a b-c_d'e2001") == "abcde2001"
