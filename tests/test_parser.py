"""Tests for movie_grid.parser."""

import pytest
from pathlib import Path

from movie_grid.parser import (
    find_vault_root,
    parse_frontmatter,
    is_set,
    has_isbn,
    first_date,
    poster_path,
)


# ── find_vault_root ──────────────────────────────────────────────────────

class TestFindVaultRoot:
    def test_finds_obsidian_folder(self, tmp_path):
        vault = tmp_path / "my_vault"
        vault.mkdir()
        (vault / ".obsidian").mkdir()
        sub = vault / "notes"
        sub.mkdir()

        assert find_vault_root(sub) == vault

    def test_vault_root_itself(self, tmp_path):
        vault = tmp_path / "vault"
        vault.mkdir()
        (vault / ".obsidian").mkdir()

        assert find_vault_root(vault) == vault

    def test_from_a_file(self, tmp_path):
        vault = tmp_path / "vault"
        vault.mkdir()
        (vault / ".obsidian").mkdir()
        deep = vault / "a" / "b"
        deep.mkdir(parents=True)
        md = deep / "note.md"
        md.write_text("hi")

        assert find_vault_root(md) == vault

    def test_fallback_when_no_obsidian(self, tmp_path):
        folder = tmp_path / "plain"
        folder.mkdir()

        assert find_vault_root(folder) == folder.resolve()

    def test_returns_path_object(self, tmp_path):
        assert isinstance(find_vault_root(tmp_path), Path)


# ── parse_frontmatter ────────────────────────────────────────────────────

class TestParseFrontmatter:
    def test_simple_fields(self):
        md = "---\nisbn: 978-3-16\nposter: assets/a.jpg\n---\n\nBody\n"
        meta = parse_frontmatter(md)
        assert meta["isbn"] == "978-3-16"
        assert meta["poster"] == "assets/a.jpg"

    def test_no_frontmatter(self):
        assert parse_frontmatter("# Just a heading\n") == {}

    def test_empty_content(self):
        assert parse_frontmatter("") == {}

    def test_dates_become_strings(self):
        meta = parse_frontmatter("---\ndates: 1975-06-20\n---\n")
        assert meta["dates"] == "1975-06-20"

    def test_date_list(self):
        md = "---\ndates:\n  - 2001-01-01\n  - 2002-02-02\n---\n"
        meta = parse_frontmatter(md)
        assert meta["dates"] == ["2001-01-01", "2002-02-02"]

    def test_datetime_keeps_written_form(self):
        meta = parse_frontmatter("---\ndates: 1995-12-15 20:00:00\n---\n")
        assert meta["dates"] == "1995-12-15 20:00:00"

    def test_numeric_isbn_kept(self):
        meta = parse_frontmatter("---\nisbn: 0000\n---\n")
        assert meta["isbn"] == 0

    def test_invalid_yaml_raises(self):
        with pytest.raises(ValueError):
            parse_frontmatter("---\nisbn: [unclosed\n---\n")


# ── is_set / has_isbn ────────────────────────────────────────────────────

class TestIsSet:
    @pytest.mark.parametrize("value", ["x", 0, 1234, ["a"], "0000"])
    def test_set_values(self, value):
        assert is_set(value) is True

    @pytest.mark.parametrize("value", [None, "", "   ", []])
    def test_unset_values(self, value):
        assert is_set(value) is False


class TestHasIsbn:
    def test_present(self):
        assert has_isbn({"isbn": "123"}) is True

    def test_zero_counts(self):
        assert has_isbn({"isbn": 0}) is True

    def test_missing(self):
        assert has_isbn({"poster": "a.jpg"}) is False

    def test_blank(self):
        assert has_isbn({"isbn": None}) is False


# ── first_date ───────────────────────────────────────────────────────────

class TestFirstDate:
    def test_single_string(self):
        assert first_date({"dates": "1975-06-20"}) == "1975-06-20"

    def test_list_takes_first(self):
        assert first_date({"dates": ["2001-01-01", "2002-02-02"]}) == "2001-01-01"

    def test_empty_list(self):
        assert first_date({"dates": []}) == ""

    def test_missing(self):
        assert first_date({}) == ""

    def test_null(self):
        assert first_date({"dates": None}) == ""


# ── poster_path ──────────────────────────────────────────────────────────

class TestPosterPath:
    def test_present(self):
        assert poster_path({"poster": "assets/jaws.jpg"}) == "assets/jaws.jpg"

    def test_missing(self):
        assert poster_path({}) == ""

    def test_blank(self):
        assert poster_path({"poster": ""}) == ""

    def test_non_text_ignored(self):
        assert poster_path({"poster": ["a.jpg", "b.jpg"]}) == ""
