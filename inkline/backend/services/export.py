"""
Note Export.

Bundles notes into a zip archive of plain-text files, one per note.
"""

import io
import re
import zipfile
from collections.abc import Iterable
from typing import Protocol

from inkline.backend.core.utils import display_title

DEFAULT_ARCHIVE_NAME = "notes.zip"
ARCHIVED_ARCHIVE_NAME = "archived_notes.zip"

_UNSAFE_CHARS = re.compile(r"[\\/\x00]")


class ExportableNote(Protocol):
    title: str
    body: str


def export_filename(title: str) -> str:
    """File name for a note inside the archive."""
    return f"{_UNSAFE_CHARS.sub('_', display_title(title))}.txt"


def export_content(title: str, body: str) -> str:
    return f"Title: {title or 'Untitled'}\n\n{body}"


def _unique(name: str, used: set[str]) -> str:
    if name not in used:
        return name
    stem = name[: -len(".txt")]
    n = 2
    while f"{stem} ({n}).txt" in used:
        n += 1
    return f"{stem} ({n}).txt"


def build_export_archive(notes: Iterable[ExportableNote]) -> bytes:
    """
    Build a zip archive in memory.

    Notes with the same display title get " (2)", " (3)" ... suffixes so
    no entry overwrites another.

    Returns:
        Archive bytes
    """
    buffer = io.BytesIO()
    used: set[str] = set()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for note in notes:
            name = _unique(export_filename(note.title), used)
            used.add(name)
            archive.writestr(name, export_content(note.title, note.body))
    return buffer.getvalue()
