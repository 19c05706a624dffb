"""
Configuration management.

Handles loading/saving the config.json file and resolving the grid
settings (index note, posters folder, poster prefix, fence tag).
"""

import json
from dataclasses import dataclass
from pathlib import Path

# Config lives next to the package (in Scripts/)
CONFIG_FILE = Path(__file__).resolve().parent.parent / "config.json"

DEFAULT_INDEX_NOTE = "list of all movies"
DEFAULT_POSTERS_DIR = "olabola-site/content/posters"
DEFAULT_POSTER_PREFIX = "posters"
DEFAULT_FENCE_TAG = "grid"


@dataclass(frozen=True)
class GridSettings:
    """Fixed values the synchronizer runs with."""
    index_note: str = DEFAULT_INDEX_NOTE
    posters_dir: str = DEFAULT_POSTERS_DIR
    poster_prefix: str = DEFAULT_POSTER_PREFIX
    fence_tag: str = DEFAULT_FENCE_TAG


def load() -> dict:
    """Load config from config.json. Returns empty dict if not found."""
    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            return json.load(f)
    return {}


def save(config: dict) -> None:
    """Save config to config.json."""
    with open(CONFIG_FILE, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2, ensure_ascii=False)


def _get_setting(key: str, default: str, cli_override: str = None) -> str:
    """
    Resolve one setting.

    Priority:
    1. CLI argument (saved to config.json for future runs)
    2. Saved config
    3. Built-in default
    """
    config = load()

    if cli_override:
        config[key] = cli_override
        save(config)
        print(f"[config] {key} set via CLI: {cli_override}")
        return cli_override

    if config.get(key):
        value = config[key]
        print(f"[config] Loaded {key}: {value}")
        return value

    print(f"[config] Using default {key}: {default}")
    return default


def get_index_note(cli_override: str = None) -> str:
    """Title of the note holding the grid block."""
    return _get_setting("index_note", DEFAULT_INDEX_NOTE, cli_override)


def get_posters_dir(cli_override: str = None) -> str:
    """Vault-relative folder posters are moved into."""
    return _get_setting("posters_dir", DEFAULT_POSTERS_DIR, cli_override).rstrip("/")


def get_poster_prefix(cli_override: str = None) -> str:
    """Prefix used for poster references written into the grid."""
    return _get_setting("poster_prefix", DEFAULT_POSTER_PREFIX, cli_override).rstrip("/")


def get_fence_tag(cli_override: str = None) -> str:
    return _get_setting("fence_tag", DEFAULT_FENCE_TAG, cli_override)


def get_grid_settings(
    index_note: str = None,
    posters_dir: str = None,
    poster_prefix: str = None,
    fence_tag: str = None,
) -> GridSettings:
    """Resolve every grid setting at once (CLI values may be None)."""
    return GridSettings(
        index_note=get_index_note(index_note),
        posters_dir=get_posters_dir(posters_dir),
        poster_prefix=get_poster_prefix(poster_prefix),
        fence_tag=get_fence_tag(fence_tag),
    )


# ---------------------------------------------------------------------------
# Shared folder-discovery helpers
# ---------------------------------------------------------------------------

SKIP_FOLDERS = {".obsidian", ".trash", ".git", "Scripts", "Templates"}


def discover_md_files(folder: Path, recursive: bool = True) -> list[Path]:
    """Find markdown files in *folder*, skipping non-note directories."""
    if recursive:
        all_md = sorted(folder.rglob("*.md"))
        return [
            f for f in all_md
            if not any(part in SKIP_FOLDERS for part in f.relative_to(folder).parts)
        ]
    return sorted(folder.glob("*.md"))
