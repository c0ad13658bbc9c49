"""Theme utilities for teamflow.

Centralizes the light/dark choice shared by the settings layer and the
terminal front-end, so neither has to import the other.
"""

from __future__ import annotations

from enum import Enum


class ThemeMode(str, Enum):
    """Supported colour schemes for terminal output."""

    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def default(cls) -> "ThemeMode":
        return cls.LIGHT

    @classmethod
    def from_bool(cls, dark: bool) -> "ThemeMode":
        """Derive a theme from a boolean flag."""

        return cls.DARK if dark else cls.LIGHT

    def label(self) -> str:
        return "Dark" if self is ThemeMode.DARK else "Light"
