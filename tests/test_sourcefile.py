import os

import pytest

from idlmeta.sourcefile import SourceFile


@pytest.fixture
def make_file(tmp_path):
    def _make(text):
        path = tmp_path / "input.idl"
        path.write_text(text, encoding="utf-8", newline="")
        return path
    return _make


def test_reads_all_characters(make_file):
    text = "interface Foo {}\nvoid bar();\n"
    with SourceFile(make_file(text)) as source:
        chars = []
        while not source.is_eof():
            chars.append(source.get_char())
    assert "".join(chars) == text


def test_peek_does_not_consume(make_file):
    with SourceFile(make_file("xy")) as source:
        assert source.peek_char() == "x"
        assert source.peek_char() == "x"
        assert source.get_char() == "x"
        assert source.get_char() == "y"


def test_end_of_file_returns_empty(make_file):
    with SourceFile(make_file("")) as source:
        assert source.is_eof()
        assert source.get_char() == ""
        assert source.peek_char() == ""


def test_position_starts_at_line_one_column_one(make_file):
    with SourceFile(make_file("abc")) as source:
        assert source.line() == 1
        assert source.column() == 1


def test_column_advances_per_character(make_file):
    with SourceFile(make_file("abc")) as source:
        start = source.column()
        source.get_char()
        source.get_char()
        assert source.column() == start + 2
        assert source.line() == 1


def test_newline_moves_to_next_line_and_resets_column(make_file):
    with SourceFile(make_file("ab\ncd")) as source:
        line_before = source.line()
        for _ in range(3):
            source.get_char()
        assert source.line() == line_before + 1
        assert source.column() == 0


def test_position_unchanged_at_eof(make_file):
    with SourceFile(make_file("a")) as source:
        source.get_char()
        line, column = source.line(), source.column()
        source.get_char()
        assert (source.line(), source.column()) == (line, column)


def test_path_is_absolute(make_file, tmp_path, monkeypatch):
    make_file("x")
    monkeypatch.chdir(tmp_path)
    with SourceFile("input.idl") as source:
        assert source.path == os.path.realpath(tmp_path / "input.idl")


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        SourceFile(tmp_path / "missing.idl")


def test_close_releases_file(make_file):
    source = SourceFile(make_file("abc"))
    source.close()
    with pytest.raises(ValueError):
        source.get_char()