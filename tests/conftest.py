"""Shared fixtures for movie_grid tests."""

import os

# Run Qt headless so GUI tests work without a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from pathlib import Path
from unittest.mock import MagicMock

import movie_grid.config as config_mod
from movie_grid.config import GridSettings
from movie_grid.vault import FileSystemVault, NoteFile, VaultStorage


@pytest.fixture(autouse=True)
def _patch_config_file(tmp_path, monkeypatch):
    """Redirect CONFIG_FILE to a temp directory for every test."""
    cfg = tmp_path / "config.json"
    monkeypatch.setattr(config_mod, "CONFIG_FILE", cfg)
    return cfg


# ---------------------------------------------------------------------------
# Markdown content
# ---------------------------------------------------------------------------

JAWS_MD = (
    "---\n"
    "isbn: 0000\n"
    "poster: assets/jaws.jpg\n"
    "dates: 1975-06-20\n"
    "---\n\n"
    "# Jaws\n\nShark movie.\n"
)

INDEX_MD = (
    "# All movies\n\n"
    "```grid\n"
    "```\n\n"
    "Footer text.\n"
)


# ---------------------------------------------------------------------------
# Vault / filesystem fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_vault(tmp_path):
    """
    A vault with one movie note ("Jaws"), its poster in assets/, and an
    index note with an empty grid block.
    """
    vault = tmp_path / "vault"
    vault.mkdir()
    (vault / ".obsidian").mkdir()
    (vault / "movies").mkdir()
    (vault / "assets").mkdir()

    (vault / "assets" / "jaws.jpg").write_bytes(b"\xff\xd8 fake jpeg data")
    (vault / "movies" / "Jaws.md").write_text(JAWS_MD, encoding="utf-8")
    (vault / "list of all movies.md").write_text(INDEX_MD, encoding="utf-8")

    return vault


@pytest.fixture
def storage(tmp_vault):
    return FileSystemVault(tmp_vault)


@pytest.fixture
def settings():
    return GridSettings()


@pytest.fixture
def write_note(tmp_vault):
    """Factory to add a note to the vault: write_note("movies/Alien.md", text)."""

    def _write(rel_path: str, content: str) -> Path:
        path = tmp_vault / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def vault_snapshot(tmp_vault):
    """Returns a callable listing every vault file with its bytes."""

    def _snapshot() -> dict[str, bytes]:
        return {
            p.relative_to(tmp_vault).as_posix(): p.read_bytes()
            for p in sorted(tmp_vault.rglob("*"))
            if p.is_file()
        }

    return _snapshot


# ---------------------------------------------------------------------------
# Mock storage
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_storage():
    """A MagicMock VaultStorage with one movie note and no index note."""
    storage = MagicMock(spec=VaultStorage)
    jaws = NoteFile("movies/Jaws.md")
    storage.list_notes.return_value = [jaws]
    storage.read_metadata.return_value = {
        "isbn": 0,
        "poster": "assets/jaws.jpg",
        "dates": "1975-06-20",
    }
    storage.find_note.return_value = None
    return storage
