"""
Grid synchronizer.

Scans the vault for movie notes (notes with an `isbn` field), appends the
ones missing from the index note's grid block, and moves their posters
into the site's posters folder.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from . import grid, posters
from .config import GridSettings
from .parser import first_date, has_isbn, poster_path
from .vault import NoteFile, VaultStorage


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

class SyncStatus(Enum):
    SYNCED = "synced"
    UP_TO_DATE = "up_to_date"
    INDEX_NOT_FOUND = "index_not_found"
    BLOCK_NOT_FOUND = "block_not_found"


@dataclass
class MovieCandidate:
    title: str
    date: str
    note: NoteFile
    metadata: dict[str, Any]


@dataclass
class SyncResult:
    status: SyncStatus
    added: int = 0
    moved: int = 0
    message: str = ""
    records: list[grid.MovieRecord] = field(default_factory=list)
    moves: list[posters.PosterMove] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


STEP_NAMES = ["Scan", "Index", "Posters", "Write grid"]


def _print_notice(message: str) -> None:
    print(f"[notice] {message}")


# ---------------------------------------------------------------------------
# Scan
# ---------------------------------------------------------------------------

def collect_movies(storage: VaultStorage, errors: list[str] | None = None) -> list[MovieCandidate]:
    """
    Every note whose frontmatter has a non-empty `isbn`, in vault order.

    Notes whose frontmatter can't be parsed are reported and skipped; the
    messages are appended to *errors* when given.
    """
    movies = []
    for note in storage.list_notes():
        try:
            metadata = storage.read_metadata(note)
        except ValueError as e:
            print(f"[sync] WARNING: Skipping {note.path}: {e}")
            if errors is not None:
                errors.append(f"{note.path}: {e}")
            continue
        if has_isbn(metadata):
            movies.append(MovieCandidate(
                title=note.title,
                date=first_date(metadata),
                note=note,
                metadata=metadata,
            ))
    print(f"[sync] Found {len(movies)} note(s) with an isbn")
    return movies


def select_new_movies(movies: list[MovieCandidate], titles: set[str]) -> list[MovieCandidate]:
    """
    Movies whose title isn't in the grid yet, first occurrence of each title only.

    Titles are compared by their first comma-separated field, since that is all
    that can be read back from a grid line.
    """
    seen = set(titles)
    new_movies = []
    for movie in movies:
        key = grid.title_key(movie.title)
        if key in seen:
            continue
        seen.add(key)
        new_movies.append(movie)
    return new_movies


# ---------------------------------------------------------------------------
# Core sync
# ---------------------------------------------------------------------------

class GridSynchronizer:
    """
    Appends new movies to the index note's grid block.

    Steps:
    1. Scan the vault for notes with an isbn
    2. Locate the index note and its grid block
    3. Move posters of movies not yet in the grid
    4. Append one line per new movie and write the index note

    A missing index note or grid block is reported through *notify* and
    leaves the vault untouched.
    """

    def __init__(
        self,
        storage: VaultStorage,
        settings: GridSettings | None = None,
        notify: Callable[[str], None] | None = None,
        on_step: Callable[[str, str, str], None] | None = None,
        dry_run: bool = False,
    ):
        self.storage = storage
        self.settings = settings or GridSettings()
        self.notify = notify or _print_notice
        self.on_step = on_step
        self.dry_run = dry_run

    def _step(self, name: str, status: str, detail: str = "") -> None:
        if self.on_step:
            self.on_step(name, status, detail)

    def _skip_rest(self, after: str) -> None:
        for name in STEP_NAMES[STEP_NAMES.index(after) + 1:]:
            self._step(name, "skip")

    def _abort(self, status: SyncStatus, message: str, step: str, errors: list[str]) -> SyncResult:
        self.notify(message)
        self._skip_rest(step)
        return SyncResult(status=status, message=message, errors=errors)

    def sync(self) -> SyncResult:
        settings = self.settings
        errors: list[str] = []

        # Step 1: Scan
        self._step("Scan", "running")
        movies = collect_movies(self.storage, errors)
        self._step("Scan", "done", f"{len(movies)} movies")

        # Step 2: Index note + grid block
        self._step("Index", "running")
        index_note = self.storage.find_note(settings.index_note)
        if index_note is None:
            self._step("Index", "error", "index note not found")
            return self._abort(
                SyncStatus.INDEX_NOT_FOUND,
                f'Could not find "{settings.index_note}" file',
                "Index",
                errors,
            )

        content = self.storage.read_content(index_note)
        block = grid.find_grid_block(content, settings.fence_tag)
        if block is None:
            self._step("Index", "error", "grid block not found")
            return self._abort(
                SyncStatus.BLOCK_NOT_FOUND,
                f"Could not find {settings.fence_tag} codeblock in file",
                "Index",
                errors,
            )

        titles = grid.existing_titles(block.body)
        new_movies = select_new_movies(movies, titles)
        self._step("Index", "done", f"{len(titles)} in grid, {len(new_movies)} new")

        if not new_movies:
            return self._abort(
                SyncStatus.UP_TO_DATE,
                f"All movies already in {settings.fence_tag}",
                "Index",
                errors,
            )

        # Step 3: Posters
        self._step("Posters", "running")
        result = SyncResult(status=SyncStatus.SYNCED, errors=errors)

        for movie in new_movies:
            reference = ""
            path = poster_path(movie.metadata)
            if path:
                move = posters.relocate_poster(
                    self.storage, movie.note, path, settings, dry_run=self.dry_run,
                )
                if move is not None:
                    reference = move.reference
                    result.moves.append(move)
                    if move.moved:
                        result.moved += 1
            record = grid.MovieRecord(title=movie.title, poster=reference, date=movie.date)
            result.records.append(record)
            print(f"[sync] NEW: {record.to_line()}")

        self._step("Posters", "done", f"{result.moved} moved")

        # Step 4: Write grid
        self._step("Write grid", "running")
        updated = grid.append_records(content, block, result.records, settings.fence_tag)
        result.added = len(result.records)

        if self.dry_run:
            print(f"[sync] [DRY RUN] Would add {result.added} line(s) to {index_note.path}")
            self._step("Write grid", "skip", "dry run")
            result.message = (
                f"Would add {result.added} movies to {settings.fence_tag}, "
                f"move {result.moved} posters"
            )
        else:
            self.storage.write_content(index_note, updated)
            self._step("Write grid", "done", f"{result.added} lines")
            result.message = (
                f"Added {result.added} movies to {settings.fence_tag}, "
                f"moved {result.moved} posters"
            )

        self.notify(result.message)
        return result


def sync_vault(
    storage: VaultStorage,
    settings: GridSettings | None = None,
    dry_run: bool = False,
    notify: Callable[[str], None] | None = None,
    on_step: Callable[[str, str, str], None] | None = None,
) -> SyncResult:
    """Run one synchronization pass over *storage*."""
    synchronizer = GridSynchronizer(
        storage, settings, notify=notify, on_step=on_step, dry_run=dry_run,
    )
    return synchronizer.sync()
