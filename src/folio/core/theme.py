"""Light/dark theme preference.

The only persisted viewer state is the `theme` key. It lives in a small
JSON file; an absent or unrecognised value falls back to the operating
system's preference.
"""

import json
import logging
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

THEME_KEY = "theme"


class Theme(Enum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def parse(cls, value: object) -> "Theme | None":
        """Return the theme for a stored value, None when unrecognised."""
        if isinstance(value, cls):
            return value
        for theme in cls:
            if value == theme.value:
                return theme
        return None


def resolve_theme(stored: object, *, prefers_dark: bool) -> Theme:
    """Pick the theme for a page view.

    Args:
        stored: Value of the persisted `theme` key (None when absent)
        prefers_dark: Operating system dark-mode signal

    Returns:
        Stored theme when valid, otherwise the system preference
    """
    theme = Theme.parse(stored)
    if theme is not None:
        return theme
    return Theme.DARK if prefers_dark else Theme.LIGHT


class PreferenceStore:
    """JSON file holding the persisted theme preference."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def get_theme(self) -> Theme | None:
        """Read the stored theme.

        Returns:
            Stored Theme, or None when the file or key is missing or invalid
        """
        if not self._path.exists():
            return None

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self._path}: {e}")
            return None

        if not isinstance(data, dict):
            return None
        return Theme.parse(data.get(THEME_KEY))

    def set_theme(self, theme: Theme) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({THEME_KEY: theme.value}), encoding="utf-8")

    def clear(self) -> None:
        """Remove the stored preference."""
        if self._path.exists():
            self._path.unlink()
