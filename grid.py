"""
Grid block handling.

The index note carries one fenced code block tagged `grid`:

    ```grid
    Jaws,posters/jaws.jpg,1975-06-20
    ```

Each line is one movie record (title,poster,date). Only the first such
block in a note is read or rewritten.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

FENCE = "```"


@dataclass
class GridBlock:
    """The body of a grid block and the span it occupies in the note."""
    body: str
    start: int
    end: int


@dataclass
class MovieRecord:
    """One line of the grid."""
    title: str
    poster: str = ""
    date: str = ""

    def to_line(self) -> str:
        # No escaping: a comma inside a title shifts the remaining fields.
        return f"{self.title},{self.poster},{self.date}"


def block_pattern(tag: str) -> re.Pattern:
    """Non-greedy match from the opening ```<tag> line to the next fence."""
    return re.compile(FENCE + re.escape(tag) + r"\n(.*?)" + FENCE, re.DOTALL)


def find_grid_block(md_content: str, tag: str = "grid") -> GridBlock | None:
    """Locate the first grid block in the note, or None."""
    match = block_pattern(tag).search(md_content)
    if not match:
        return None
    return GridBlock(body=match.group(1), start=match.start(), end=match.end())


def title_key(text: str) -> str:
    """The part of a title (or grid line) that survives a round trip through the grid."""
    return text.split(",")[0]


def existing_titles(body: str) -> set[str]:
    """First comma-separated field of every non-blank line."""
    return {
        title_key(line)
        for line in body.split("\n")
        if line.strip()
    }


def render_block(body: str, tag: str = "grid") -> str:
    return f"{FENCE}{tag}\n{body}\n{FENCE}"


def append_records(
    md_content: str,
    block: GridBlock,
    records: list[MovieRecord],
    tag: str = "grid",
) -> str:
    """
    Append *records* to *block* and return the updated note content.

    The existing body is trimmed; new lines follow it on their own lines.
    Everything outside the block's span is left untouched.
    """
    new_lines = "\n".join(r.to_line() for r in records)
    existing = block.body.strip()
    body = f"{existing}\n{new_lines}" if existing else new_lines
    return md_content[:block.start] + render_block(body, tag) + md_content[block.end:]
