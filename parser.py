"""
Markdown and frontmatter parsing.

Handles reading YAML frontmatter from Obsidian notes, pulling the movie
fields (isbn, poster, dates) out of it, and finding the vault root.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Any

import frontmatter
import yaml


def find_vault_root(path: Path) -> Path:
    """
    Walk up from *path* to find the vault root.
    The vault root is the folder containing .obsidian/.
    Falls back to *path* itself (or its parent, for a file) if not found.
    """
    start = path.resolve()
    if start.is_file():
        start = start.parent

    current = start
    while current != current.parent:
        if (current / ".obsidian").exists():
            print(f"[parser] Vault root found: {current}")
            return current
        current = current.parent

    print(f"[parser] No .obsidian folder found, using fallback: {start}")
    return start


def _normalize(value: Any) -> Any:
    """Convert YAML-native values into plain strings/lists/dicts."""
    if isinstance(value, Mapping):
        return {k: _normalize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize(item) for item in value]
    if isinstance(value, (datetime, date)):
        # "1995-12-15 20:00:00", as written in the note
        return str(value)
    return value


def parse_frontmatter(md_content: str) -> dict[str, Any]:
    """
    Parse the YAML frontmatter of a note into a dict.

    Returns an empty dict when the note has no frontmatter.

    Raises:
        ValueError: If the frontmatter block exists but is not valid YAML.
    """
    if not md_content:
        return {}

    try:
        post = frontmatter.loads(md_content)
    except yaml.YAMLError as e:
        raise ValueError(f"Frontmatter contains invalid YAML: {e}") from e

    metadata = post.metadata or {}
    if not isinstance(metadata, Mapping):
        raise ValueError("Frontmatter must be a mapping of key/value pairs")
    return {str(key): _normalize(value) for key, value in metadata.items()}


def is_set(value: Any) -> bool:
    """A frontmatter field counts as set when it isn't null or blank."""
    if value is None:
        return False
    if isinstance(value, (list, dict)):
        return bool(value)
    return str(value).strip() != ""


def has_isbn(metadata: dict[str, Any]) -> bool:
    return is_set(metadata.get("isbn"))


def first_date(metadata: dict[str, Any]) -> str:
    """
    Return the first entry of the `dates` field.

    `dates` may be a single value or a list; missing or empty gives "".
    """
    dates = metadata.get("dates")
    if isinstance(dates, list):
        dates = dates[0] if dates else ""
    if dates is None:
        return ""
    return str(dates)


def poster_path(metadata: dict[str, Any]) -> str:
    """Return the `poster` field as a string, or "" when absent."""
    poster = metadata.get("poster")
    if not is_set(poster):
        return ""
    if not isinstance(poster, str):
        print(f"[parser] WARNING: Ignoring non-text poster field: {poster!r}")
        return ""
    return poster.strip()
