"""
Vault storage.

The synchronizer never touches the filesystem directly; it talks to a
VaultStorage. FileSystemVault implements it over a plain folder of
markdown notes, with vault-relative, "/"-separated paths (the way Obsidian
addresses files).
"""

from __future__ import annotations

import os
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

from . import config
from .parser import parse_frontmatter


@dataclass(frozen=True)
class NoteFile:
    """A markdown note, addressed by its vault-relative path."""
    path: str

    @property
    def title(self) -> str:
        """File name without extension."""
        return PurePosixPath(self.path).stem


class VaultStorage(ABC):
    """Everything the grid synchronizer needs from the vault."""

    @abstractmethod
    def list_notes(self) -> list[NoteFile]:
        """All markdown notes, in a stable order."""

    @abstractmethod
    def read_metadata(self, note: NoteFile) -> dict[str, Any]:
        """Parsed frontmatter of *note* (empty dict when none)."""

    @abstractmethod
    def read_content(self, note: NoteFile) -> str:
        ...

    @abstractmethod
    def write_content(self, note: NoteFile, content: str) -> None:
        ...

    @abstractmethod
    def resolve_file(self, path: str) -> str | None:
        """Normalized path of an existing file, or None if there is no such file."""

    @abstractmethod
    def path_exists(self, path: str) -> bool:
        ...

    @abstractmethod
    def make_directory(self, path: str) -> None:
        ...

    @abstractmethod
    def move_file(self, src: str, dest: str) -> None:
        ...

    def find_note(self, title: str) -> NoteFile | None:
        """First note whose title matches exactly (case-sensitive)."""
        for note in self.list_notes():
            if note.title == title:
                return note
        return None


class FileSystemVault(VaultStorage):
    """VaultStorage backed by a folder on disk."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def _abs(self, path: str) -> Path:
        """Map a vault-relative path to disk, refusing anything outside the vault."""
        candidate = Path(os.path.normpath(self.root / path))
        try:
            candidate.relative_to(self.root)
        except ValueError:
            raise ValueError(f"Path escapes the vault: {path}") from None
        return candidate

    def _rel(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    # -- notes --------------------------------------------------------------

    def list_notes(self) -> list[NoteFile]:
        md_files = config.discover_md_files(self.root, recursive=True)
        return [NoteFile(self._rel(f)) for f in md_files]

    def read_metadata(self, note: NoteFile) -> dict[str, Any]:
        return parse_frontmatter(self.read_content(note))

    def read_content(self, note: NoteFile) -> str:
        with open(self._abs(note.path), "r", encoding="utf-8") as f:
            return f.read()

    def write_content(self, note: NoteFile, content: str) -> None:
        with open(self._abs(note.path), "w", encoding="utf-8") as f:
            f.write(content)
        print(f"[vault] Wrote {note.path}")

    # -- files --------------------------------------------------------------

    def resolve_file(self, path: str) -> str | None:
        try:
            target = self._abs(path)
        except ValueError:
            print(f"[vault] WARNING: '{path}' is outside the vault")
            return None
        if not target.is_file():
            return None
        return self._rel(target)

    def path_exists(self, path: str) -> bool:
        return self._abs(path).exists()

    def make_directory(self, path: str) -> None:
        self._abs(path).mkdir(parents=True, exist_ok=True)

    def move_file(self, src: str, dest: str) -> None:
        source = self._abs(src)
        target = self._abs(dest)
        if target.exists():
            raise FileExistsError(f"Destination already exists: {dest}")
        if source.is_symlink():
            # Move the linked file itself and drop the link
            real = source.resolve()
            try:
                real.relative_to(self.root)
            except ValueError:
                raise ValueError(f"Link points outside the vault: {src}") from None
            shutil.move(str(real), str(target))
            source.unlink()
        else:
            shutil.move(str(source), str(target))
        print(f"[vault] Moved {src} → {dest}")
