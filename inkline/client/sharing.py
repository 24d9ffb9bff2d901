"""
Sharing links.
"""

from inkline.backend.schemas.note import NoteResponse


def share_url(origin: str, note: NoteResponse) -> str | None:
    """
    Public URL for a note, ``<origin>/share/<share_id>``.

    Returns None while the note is private or has never been shared.
    """
    if not note.is_public or not note.share_id:
        return None
    return f"{origin.rstrip('/')}/share/{note.share_id}"
