"""Unit tests for the term source and the terminal mode."""

import io

import pytest
from quiksearch import cli
from quiksearch.config import Settings
from quiksearch.core.engine import SearchEngine
from quiksearch.sources import load_terms


@pytest.fixture
def terms_file(tmp_path):
    """Write a small term list to disk."""
    path = tmp_path / "terms.txt"
    path.write_text("Photo Booth\n\nAdobe Photoshop\r\n   \nGhost Rule", encoding="utf-8")
    return path


class TestLoadTerms:
    """Test cases for load_terms."""

    def test_reads_non_blank_lines(self, terms_file):
        """Test that blank lines are skipped and line endings removed."""
        assert list(load_terms(terms_file)) == ["Photo Booth", "Adobe Photoshop", "Ghost Rule"]

    def test_keeps_inner_spacing(self, tmp_path):
        """Test that terms are not trimmed beyond the line ending."""
        path = tmp_path / "terms.txt"
        path.write_text("  Photo  Booth \n", encoding="utf-8")
        assert list(load_terms(path)) == ["  Photo  Booth "]

    def test_missing_file(self, tmp_path):
        """Test reading a file that does not exist."""
        with pytest.raises(OSError):
            list(load_terms(tmp_path / "missing.txt"))


class TestRepl:
    """Test cases for the query loop."""

    @pytest.fixture
    def engine(self):
        return SearchEngine(Settings())

    @pytest.fixture
    def index(self, engine, terms_file):
        return engine.build_index(load_terms(terms_file))

    @pytest.fixture
    def args(self, terms_file):
        return cli.build_parser().parse_args([str(terms_file), "--fuzz", "2", "--depth", "1"])

    def test_answers_queries(self, engine, index, args):
        """Test printing ranked results for each line."""
        out = io.StringIO()

        answered = cli.repl(engine, index, args, ["phosh", "", "ghorul"], out=out)

        text = out.getvalue()
        assert answered == 2
        assert "You might have meant:" in text
        assert "Adobe Photoshop" in text
        assert "Ghost Rule" in text
        assert text.count("Search took") == 2

    def test_no_result(self, engine, index, args):
        """Test the message for a query without results."""
        out = io.StringIO()
        cli.repl(engine, index, args, ["zzz"], out=out)
        assert "No result for zzz" in out.getvalue()

    def test_invalid_query_reported(self, engine, index, args):
        """Test that a query with whitespace is reported and skipped."""
        out = io.StringIO()

        answered = cli.repl(engine, index, args, ["pho sh"], out=out)

        assert answered == 0
        assert "whitespace" in out.getvalue()


class TestMain:
    """Test cases for the command line entry point."""

    def test_parser_defaults(self, terms_file):
        """Test default options."""
        args = cli.build_parser().parse_args([str(terms_file)])

        assert args.mode == "fuzzy"
        assert args.no_restart is False

    def test_main_runs_until_eof(self, terms_file, monkeypatch, capsys):
        """Test a full session that ends at end of input."""
        queries = iter(["phobo"])

        def fake_input(prompt):
            try:
                return next(queries)
            except StopIteration:
                raise EOFError

        monkeypatch.setattr("builtins.input", fake_input)

        assert cli.main([str(terms_file), "--fuzz", "2", "--depth", "1"]) == 0

        captured = capsys.readouterr()
        assert "loaded 3 terms" in captured.out
        assert "Photo Booth" in captured.out

    def test_main_missing_file(self, tmp_path):
        """Test that a missing term file is an error exit."""
        assert cli.main([str(tmp_path / "missing.txt")]) == 1

    def test_negative_fuzz_rejected(self, terms_file):
        """Test that argument errors exit."""
        with pytest.raises(SystemExit):
            cli.main([str(terms_file), "--fuzz", "-1"])
