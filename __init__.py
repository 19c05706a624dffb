"""
Movie Grid Sync
===============
Scans your Obsidian vault for movie notes (notes with an `isbn` field in
their frontmatter), appends the new ones to the ```grid block of the
"list of all movies" note, and moves their posters into the site's
posters folder.

No plugins required, only Obsidian and Python.
"""

__version__ = "1.0.0"
