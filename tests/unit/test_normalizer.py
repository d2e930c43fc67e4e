"""Unit tests for key normalization."""

import pytest
from quiksearch.core.exceptions import InvalidQuery
from quiksearch.core.normalizer import KeyNormalizer


class TestKeyNormalizer:
    """Test cases for the KeyNormalizer class."""

    @pytest.fixture
    def normalizer(self):
        """Create a normalizer instance for testing."""
        return KeyNormalizer()

    def test_spaced_and_spaceless_keys(self, normalizer):
        """Test the two keys of a multi-word term."""
        spaced, spaceless = normalizer.normalize("Adobe Photoshop")

        assert spaced == "adobe photoshop"
        assert spaceless == "adobephotoshop"

    def test_whitespace_runs_collapse(self, normalizer):
        """Test that any whitespace run becomes one boundary character."""
        spaced, spaceless = normalizer.normalize("  Here \t Comes\n\nMr. Umbrella ")

        assert spaced == "here comes mr. umbrella"
        assert spaceless == "herecomesmr.umbrella"

    def test_outer_boundaries_trimmed(self, normalizer):
        """Test that padding around a term does not change its keys."""
        assert normalizer.normalize("\t Photo Booth  ") == normalizer.normalize("Photo Booth")
        assert normalizer.split_words("photo booth") == ["photo", "booth"]

    def test_punctuation_passes_through(self, normalizer):
        """Test that non-whitespace characters are kept."""
        spaced, _ = normalizer.normalize("Solitude's End -extend edition-")
        assert spaced == "solitude's end -extend edition-"

    def test_empty_input(self, normalizer):
        """Test empty and whitespace-only input."""
        assert normalizer.normalize("") == ("", "")
        assert normalizer.normalize("   ") == ("", "")
        assert normalizer.normalize(None) == ("", "")

    def test_word_keys(self, normalizer):
        """Test splitting a term into distinct words."""
        words = normalizer.word_keys("Miku miku ni shite ageru")
        assert words == ["miku", "ni", "shite", "ageru"]

    def test_normalize_query_folds_case(self, normalizer):
        """Test that queries are only case-folded."""
        assert normalizer.normalize_query("PhoSH") == "phosh"
        assert normalizer.normalize_query("Mr.U") == "mr.u"

    def test_empty_query_is_legal(self, normalizer):
        """Test that an empty query gives an empty key."""
        assert normalizer.normalize_query("") == ""
        assert normalizer.normalize_query(None) == ""

    @pytest.mark.parametrize("query", ["pho sh", " phosh", "phosh\n", "a\tb"])
    def test_query_with_whitespace_rejected(self, normalizer, query):
        """Test that whitespace in a query raises InvalidQuery."""
        with pytest.raises(InvalidQuery) as exc_info:
            normalizer.normalize_query(query)
        assert exc_info.value.query == query
