"""
Poster handling.

Resolves a note's `poster:` path inside the vault, moves the image into the
site's posters folder (once), rewrites the note's frontmatter line to the
new location, and builds the short reference stored in the grid.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath

from .config import GridSettings
from .vault import NoteFile, VaultStorage


@dataclass
class PosterMove:
    """What happened to one note's poster during a sync."""
    source: str
    destination: str
    reference: str        # value written into the grid
    title: str = ""
    moved: bool = False
    skipped_reason: str = ""


def destination_for(poster_path: str, posters_dir: str) -> str:
    """posters_dir + basename of the poster path."""
    return f"{posters_dir.rstrip('/')}/{PurePosixPath(poster_path).name}"


def grid_reference(poster_path: str, prefix: str = "posters") -> str:
    """posters/<basename>, the form the site generator expects."""
    return f"{prefix.rstrip('/')}/{PurePosixPath(poster_path).name}"


def rewrite_poster_reference(md_content: str, old_path: str, new_path: str) -> str:
    """
    Replace the first `poster: <old_path>` with `poster: <new_path>`.

    The old path is escaped before use as a pattern; the replacement is
    inserted literally. Content without a match is returned unchanged.
    """
    pattern = re.compile("poster: " + re.escape(old_path))
    return pattern.sub(lambda _m: f"poster: {new_path}", md_content, count=1)


def relocate_poster(
    storage: VaultStorage,
    note: NoteFile,
    poster_path: str,
    settings: GridSettings,
    dry_run: bool = False,
) -> PosterMove | None:
    """
    Move one poster into the posters folder and repoint its note.

    Returns None when the poster file does not exist (nothing to reference).
    When a file already sits at the destination the move is skipped, but
    the returned reference still points at the canonical location.
    """
    source = storage.resolve_file(poster_path)
    if source is None:
        print(f"[posters] WARNING: Could not find poster '{poster_path}' for '{note.title}'")
        return None

    # Named after the poster field, not whatever a symlink points at
    dest = destination_for(poster_path, settings.posters_dir)
    result = PosterMove(
        source=source,
        destination=dest,
        reference=grid_reference(poster_path, settings.poster_prefix),
        title=note.title,
    )

    if storage.path_exists(dest):
        result.skipped_reason = "destination exists"
        print(f"[posters] Skipped: {dest} already exists")
        return result

    if dry_run:
        result.moved = True
        print(f"[posters]   [DRY RUN] Would move: {source} → {dest}")
        return result

    dest_dir = dest.rsplit("/", 1)[0]
    if not storage.path_exists(dest_dir):
        storage.make_directory(dest_dir)
        print(f"[posters] Created folder: {dest_dir}")

    storage.move_file(source, dest)
    result.moved = True
    print(f"[posters]   Moved: {source} → {dest}")

    content = storage.read_content(note)
    updated = rewrite_poster_reference(content, poster_path, dest)
    if updated != content:
        storage.write_content(note, updated)
    else:
        print(f"[posters] WARNING: No 'poster: {poster_path}' line found in {note.path}")

    return result
