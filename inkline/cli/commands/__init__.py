"""
CLI Commands.

Organized by domain/feature area.
"""

from inkline.cli.commands.categories import app as categories_app
from inkline.cli.commands.notes import app as notes_app
from inkline.cli.commands.prefs import app as prefs_app
from inkline.cli.commands.profile import app as profile_app
from inkline.cli.commands.session import app as session_app

__all__ = [
    "categories_app",
    "notes_app",
    "prefs_app",
    "profile_app",
    "session_app",
]
