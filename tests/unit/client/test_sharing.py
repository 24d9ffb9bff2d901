"""
Unit Tests for share links.
"""

from inkline.client.sharing import share_url


def test_public_note_has_url(note_factory):
    note = note_factory("n1", is_public=True, share_id="abc123")
    assert share_url("https://ink.example/", note) == "https://ink.example/share/abc123"


def test_private_note_has_no_url(note_factory):
    note = note_factory("n1", is_public=False, share_id="abc123")
    assert share_url("https://ink.example", note) is None


def test_public_without_share_id(note_factory):
    assert share_url("https://ink.example", note_factory("n1", is_public=True)) is None
