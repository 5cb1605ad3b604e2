"""
Tests for the markov-text command line.
"""
import pytest

from markov_service.cli import main, parse_args, parse_word_count


class TestParseWordCount:
    """Test suite for parse_word_count."""

    @pytest.mark.parametrize(
        "value,expected",
        [("10", 10), ("  7", 7), ("12abc", 12), ("-3", -3), ("abc", 0), ("", 0)],
    )
    def test_leading_integer(self, value, expected):
        """Test only the leading integer counts."""
        assert parse_word_count(value) == expected


class TestParseArgs:
    """Test suite for parse_args."""

    def test_defaults(self):
        """Test defaults for optional arguments."""
        args = parse_args(["corpus.txt"])

        assert args.file == "corpus.txt"
        assert args.nwords == 100
        assert args.order == 2

    def test_missing_file_argument(self):
        """Test usage error without a file."""
        with pytest.raises(SystemExit) as exc:
            parse_args([])

        assert exc.value.code == 2

    def test_invalid_order(self):
        """Test order below 1 is a usage error."""
        with pytest.raises(SystemExit) as exc:
            parse_args(["corpus.txt", "--order", "0"])

        assert exc.value.code == 2


class TestMain:
    """Test suite for main."""

    def test_generates_text(self, corpus_file, capsys):
        """Test golden corpus is printed with a trailing newline."""
        code = main([str(corpus_file), "10", "--seed", "3"])

        assert code == 0
        assert capsys.readouterr().out == "the quick fox the lazy fox\n"

    def test_word_limit(self, corpus_file, capsys):
        """Test NWORDS caps the output."""
        main([str(corpus_file), "2", "--seed", "3"])

        assert capsys.readouterr().out == "the quick\n"

    def test_non_numeric_count(self, corpus_file, capsys):
        """Test a non-numeric count generates nothing."""
        code = main([str(corpus_file), "many"])

        assert code == 0
        assert capsys.readouterr().out == "\n"

    def test_missing_file(self, tmp_path, capsys):
        """Test unreadable input exits with status 1."""
        missing = tmp_path / "missing.txt"

        code = main([str(missing)])

        assert code == 1
        assert str(missing) in capsys.readouterr().err

    def test_empty_file(self, tmp_path, capsys):
        """Test an empty corpus prints an empty line."""
        empty = tmp_path / "empty.txt"
        empty.write_text("", encoding="utf-8")

        assert main([str(empty), "50"]) == 0
        assert capsys.readouterr().out == "\n"
