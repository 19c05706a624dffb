"""Tests for movie_grid.config."""

import json
import pytest
from pathlib import Path

import movie_grid.config as config_mod
from movie_grid.config import GridSettings


# ── load ─────────────────────────────────────────────────────────────────

class TestLoad:
    def test_returns_empty_when_missing(self):
        assert config_mod.load() == {}

    def test_loads_existing_config(self):
        config_mod.CONFIG_FILE.write_text('{"index_note": "Films"}', encoding="utf-8")
        assert config_mod.load()["index_note"] == "Films"


# ── save ─────────────────────────────────────────────────────────────────

class TestSave:
    def test_creates_file(self):
        config_mod.save({"key": "value"})
        assert config_mod.CONFIG_FILE.exists()

    def test_round_trip(self):
        data = {"posters_dir": "site/posters", "extra": 42}
        config_mod.save(data)
        assert config_mod.load() == data

    def test_overwrites_existing(self):
        config_mod.save({"a": 1})
        config_mod.save({"b": 2})
        assert config_mod.load() == {"b": 2}

    def test_keeps_non_ascii(self):
        config_mod.save({"index_note": "liste des films é"})
        raw = config_mod.CONFIG_FILE.read_text(encoding="utf-8")
        assert "é" in raw


# ── individual settings ──────────────────────────────────────────────────

class TestGetIndexNote:
    def test_default(self):
        assert config_mod.get_index_note() == "list of all movies"

    def test_cli_override_is_saved(self):
        assert config_mod.get_index_note("Films") == "Films"
        assert config_mod.load()["index_note"] == "Films"

    def test_from_saved_config(self):
        config_mod.save({"index_note": "Saved"})
        assert config_mod.get_index_note() == "Saved"

    def test_cli_beats_saved(self):
        config_mod.save({"index_note": "Saved"})
        assert config_mod.get_index_note("CLI") == "CLI"

    def test_empty_saved_value_uses_default(self):
        config_mod.save({"index_note": ""})
        assert config_mod.get_index_note() == "list of all movies"


class TestGetPostersDir:
    def test_default(self):
        assert config_mod.get_posters_dir() == "olabola-site/content/posters"

    def test_trailing_slash_dropped(self):
        assert config_mod.get_posters_dir("site/posters/") == "site/posters"


class TestGetPosterPrefix:
    def test_default(self):
        assert config_mod.get_poster_prefix() == "posters"


class TestGetFenceTag:
    def test_default(self):
        assert config_mod.get_fence_tag() == "grid"

    def test_saved(self):
        config_mod.save({"fence_tag": "movies"})
        assert config_mod.get_fence_tag() == "movies"


class TestGetGridSettings:
    def test_all_defaults(self):
        assert config_mod.get_grid_settings() == GridSettings()

    def test_mixed_sources(self):
        config_mod.save({"fence_tag": "films"})
        settings = config_mod.get_grid_settings(index_note="Index")
        assert settings.index_note == "Index"
        assert settings.fence_tag == "films"
        assert settings.posters_dir == "olabola-site/content/posters"


# ── discover_md_files ────────────────────────────────────────────────────

class TestDiscoverMdFiles:
    def test_recursive_skips_special_folders(self, tmp_path):
        (tmp_path / "a.md").write_text("x")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b.md").write_text("x")
        for skipped in (".obsidian", ".trash", "Templates", "Scripts"):
            (tmp_path / skipped).mkdir()
            (tmp_path / skipped / "c.md").write_text("x")

        found = config_mod.discover_md_files(tmp_path, recursive=True)
        names = [f.relative_to(tmp_path).as_posix() for f in found]
        assert names == ["a.md", "sub/b.md"]

    def test_non_recursive(self, tmp_path):
        (tmp_path / "a.md").write_text("x")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b.md").write_text("x")

        found = config_mod.discover_md_files(tmp_path, recursive=False)
        assert [f.name for f in found] == ["a.md"]

    def test_ignores_other_extensions(self, tmp_path):
        (tmp_path / "a.md").write_text("x")
        (tmp_path / "poster.jpg").write_bytes(b"img")
        assert len(config_mod.discover_md_files(tmp_path)) == 1
