"""Unit tests for the trie index and indexer."""

import pytest
from quiksearch.core.exceptions import InvalidTerm
from quiksearch.core.index import Indexer, Term, TrieIndex
from quiksearch.core.normalizer import KeyNormalizer


class TestIndexer:
    """Test cases for the Indexer class."""

    @pytest.fixture
    def indexer(self):
        """Create an indexer instance for testing."""
        return Indexer()

    def test_empty_build(self, indexer):
        """Test building an index from no terms."""
        index = indexer.build([])

        assert len(index) == 0
        assert index.node_count == 1
        assert index.rejected == []
        assert index.frozen is True

    def test_term_ids_follow_input_order(self, indexer):
        """Test that accepted terms get dense ids in input order."""
        index = indexer.build(["Photo Booth", "Adobe Photoshop"])

        assert index.get_term(0) == Term(0, "Photo Booth")
        assert index.get_term(1) == Term(1, "Adobe Photoshop")
        assert index.get_all_terms() == [Term(0, "Photo Booth"), Term(1, "Adobe Photoshop")]

    def test_spaced_and_spaceless_keys_inserted(self, indexer):
        """Test that both keys of a term end at a node holding its id."""
        index = indexer.build(["Photo Booth"])

        assert index.terminals(index.walk("photo booth")) == (0,)
        assert index.terminals(index.walk("photobooth")) == (0,)

    def test_word_keys_inserted(self, indexer):
        """Test that each word of a multi-word term is a key."""
        index = indexer.build(["Photo Booth"])

        assert index.terminals(index.walk("photo")) == (0,)
        assert index.terminals(index.walk("booth")) == (0,)

    def test_word_keys_disabled(self):
        """Test indexing with only the spaced and spaceless keys."""
        index = Indexer(index_words=False).build(["Photo Booth"])

        assert index.walk("booth") is None
        assert index.terminals(index.walk("photo")) == ()
        assert index.terminals(index.walk("photobooth")) == (0,)

    def test_keys_for(self, indexer):
        """Test the keys of a term, with and without a precomputed pair."""
        expected = ["photo booth", "photobooth", "photo", "booth"]

        assert indexer.keys_for(" Photo  Booth ") == expected
        assert indexer.keys_for(" Photo  Booth ", ("photo booth", "photobooth")) == expected

    def test_each_term_normalized_once(self):
        """Test that building folds every term a single time."""
        calls = []

        class CountingNormalizer(KeyNormalizer):
            def normalize(self, raw):
                calls.append(raw)
                return super().normalize(raw)

        Indexer(CountingNormalizer()).build(["Photo Booth", "  ", "Ghost Rule"])

        assert calls == ["Photo Booth", "  ", "Ghost Rule"]

    def test_single_word_term_has_one_terminal(self, indexer):
        """Test that identical keys do not duplicate the id."""
        index = indexer.build(["hello"])

        assert index.terminals(index.walk("hello")) == (0,)
        assert index.get_stats()["total_keys"] == 2

    def test_shared_prefixes_share_nodes(self, indexer):
        """Test trie determinism: one path per character sequence."""
        index = indexer.build(["hell", "hello"])

        # root + h, e, l, l, o
        assert index.node_count == 6
        assert index.terminals(index.walk("hell")) == (0,)
        assert index.terminals(index.walk("hello")) == (1,)

    def test_terminal_set_keeps_insertion_order(self, indexer):
        """Test that several terms ending at one node keep id order."""
        index = indexer.build(["Solitude's End", "WORLD'S END UMBRELLA"])

        assert index.terminals(index.walk("end")) == (0, 1)

    def test_display_preserved(self, indexer):
        """Test that the original casing and spacing are kept."""
        index = indexer.build(["  WORLD'S   END  "])
        assert index.get_term(0).display == "  WORLD'S   END  "

    def test_empty_terms_rejected(self, indexer):
        """Test that empty terms are recorded and skipped."""
        index = indexer.build(["Ghost Rule", "", "   ", None, "Photo Booth"])

        assert len(index) == 2
        assert [term.display for term in index.get_all_terms()] == ["Ghost Rule", "Photo Booth"]
        assert [error.position for error in index.rejected] == [1, 2, 3]
        assert all(isinstance(error, InvalidTerm) for error in index.rejected)
        assert index.rejected[1].raw == "   "
        assert index.get_stats()["rejected_terms"] == 3

    def test_stats(self, indexer):
        """Test index statistics."""
        index = indexer.build(["Photo Booth"])
        stats = index.get_stats()

        assert stats["total_terms"] == 1
        assert stats["total_keys"] == 4
        assert stats["total_nodes"] == index.node_count
        assert stats["build_time_ms"] is not None
        assert stats["built_at"] is not None


class TestTrieIndex:
    """Test cases for the TrieIndex class."""

    @pytest.fixture
    def index(self):
        """Create a built index for testing."""
        return Indexer().build(["hell", "hello"])

    def test_walk_missing_edge(self, index):
        """Test walking a key that leaves the trie."""
        assert index.walk("help") is None

    def test_walk_empty_key_is_root(self, index):
        """Test that the empty key is the root."""
        assert index.walk("") == index.root

    def test_child(self, index):
        """Test following single edges."""
        h = index.child(index.root, "h")
        assert h is not None
        assert index.child(h, "x") is None
        assert list(index.children(h)) == ["e"]

    def test_frozen_index_rejects_mutation(self, index):
        """Test that a built index cannot be modified."""
        with pytest.raises(RuntimeError):
            index._insert("help", 0)
        with pytest.raises(RuntimeError):
            index._add_term("help")

    def test_children_are_read_only(self, index):
        """Test that edge mappings of a frozen index cannot be changed."""
        with pytest.raises(TypeError):
            index.children(index.root)["x"] = 1

    def test_unfrozen_index(self):
        """Test a fresh index before building."""
        index = TrieIndex()
        assert index.frozen is False
        assert index.node_count == 1
        assert len(index) == 0
