"""
Theme preference stored in the user's session.

Themes are UI preferences, not library data, so they live in the
server-side session instead of the graph database.
"""

from flask import session

LIGHT = 'light'
DARK = 'dark'

ENABLE_DARK_MODE = "Enable dark mode"
DISABLE_DARK_MODE = "Disable dark mode"


def current_theme() -> str:
    theme = session.get('theme', LIGHT)
    return theme if theme in (LIGHT, DARK) else LIGHT


def is_dark_mode() -> bool:
    return current_theme() == DARK


def set_dark_mode(on: bool) -> None:
    session['theme'] = DARK if on else LIGHT


def dark_mode_label(on: bool) -> str:
    return DISABLE_DARK_MODE if on else ENABLE_DARK_MODE


def inject_theme_preference():
    """Make theme preference available in all templates."""
    return dict(current_theme=current_theme())
