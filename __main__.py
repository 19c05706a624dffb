"""
CLI entry point.

Usage:
    python -m movie_grid <vault>                 (sync the grid)
    python -m movie_grid <vault> --dry-run       (preview, no files touched)
    python -m movie_grid <vault> --index-note "list of all movies"
    python -m movie_grid <vault> --posters-dir olabola-site/content/posters
    python -m movie_grid --gui
"""

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import GridSettings, get_grid_settings
from .parser import find_vault_root
from .sync import SyncResult, SyncStatus, sync_vault
from .vault import FileSystemVault


def _print_banner(vault: Path, settings: GridSettings, dry_run: bool) -> None:
    """Print a startup banner with run configuration."""
    print()
    print("=" * 60)
    print(f"  Movie Grid Sync v{__version__}")
    print("=" * 60)
    print(f"  Vault:       {vault}")
    print(f"  Index note:  {settings.index_note}")
    print(f"  Posters dir: {settings.posters_dir}")
    print(f"  Fence tag:   {settings.fence_tag}")
    if dry_run:
        print(f"  Dry run:     YES (no files will be moved or written)")
    print("=" * 60)
    print()


def _print_sync_summary(result: SyncResult) -> None:
    """Print a summary of sync results."""
    print()
    print("--- Sync Summary ---")
    print(f"  Status:  {result.status.value}")
    print(f"  Added:   {result.added}")
    print(f"  Moved:   {result.moved}")
    for record in result.records:
        print(f"  + {record.to_line()}")
    if result.errors:
        for err in result.errors:
            print(f"  [error] {err}")
    print()


def run_sync(vault_path: str, settings: GridSettings, dry_run: bool) -> SyncResult:
    """Sync the grid of the vault containing *vault_path*."""
    vault_root = find_vault_root(Path(vault_path))
    _print_banner(vault_root, settings, dry_run)

    storage = FileSystemVault(vault_root)
    result = sync_vault(storage, settings, dry_run=dry_run)
    _print_sync_summary(result)

    print("=" * 60)
    if result.status in (SyncStatus.SYNCED, SyncStatus.UP_TO_DATE):
        print("  Sync complete!")
    else:
        print("  Nothing synced.")
    print("=" * 60)
    return result


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    if "--gui" in sys.argv:
        from .gui import main as gui_main
        gui_main()
        return

    parser = argparse.ArgumentParser(
        prog="movie_grid",
        description="Append new movie notes to the grid block of your movie index note",
    )
    parser.add_argument(
        "path",
        help="Path to the vault (or any folder inside it)",
    )
    parser.add_argument(
        "--index-note",
        help='Title of the note holding the grid (default: from config or "list of all movies")',
        default=None,
    )
    parser.add_argument(
        "--posters-dir",
        help="Vault folder posters are moved into (saved after first use)",
        default=None,
    )
    parser.add_argument(
        "--poster-prefix",
        help="Prefix of poster references written to the grid (default: posters)",
        default=None,
    )
    parser.add_argument(
        "--fence-tag",
        help="Tag of the fenced code block holding the grid (default: grid)",
        default=None,
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview what would be done without moving posters or writing notes",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args()
    target = Path(args.path)

    if not target.is_dir():
        print(f"[error] '{args.path}' is not a valid folder.")
        sys.exit(1)

    settings = get_grid_settings(
        index_note=args.index_note,
        posters_dir=args.posters_dir,
        poster_prefix=args.poster_prefix,
        fence_tag=args.fence_tag,
    )
    run_sync(args.path, settings, dry_run=args.dry_run)


if __name__ == "__main__":
    main()
