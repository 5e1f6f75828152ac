"""Color palette for the QuizLock client, with light and dark variants."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """A color with one value per theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the learner client."""

    TEXT_PRIMARY = ThemeColors(light="#000000", dark="#F5F5F5")
    TEXT_SECONDARY = ThemeColors(light="#666666", dark="#AAAAAA")
    TEXT_DISABLED = ThemeColors(light="#CCCCCC", dark="#555555")

    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#1E1E1E")
    BACKGROUND_SECONDARY = ThemeColors(light="#F5F5F5", dark="#2D2D2D")
    BACKGROUND_TERTIARY = ThemeColors(light="#E8E8E8", dark="#3A3A3A")

    SUCCESS = ThemeColors(light="#107C10", dark="#6FCF6F")
    WARNING = ThemeColors(light="#FFB900", dark="#FFC83D")
    ERROR = ThemeColors(light="#D13438", dark="#FF6B6B")

    BORDER_PRIMARY = ThemeColors(light="#D1D1D1", dark="#555555")

    BUTTON_PRIMARY_BG = ThemeColors(light="#0078D4", dark="#4A9EFF")
    BUTTON_PRIMARY_TEXT = ThemeColors(light="#FFFFFF", dark="#000000")
    BUTTON_SECONDARY_BG = ThemeColors(light="#F5F5F5", dark="#3A3A3A")
    BUTTON_HOVER_BG = ThemeColors(light="#E8E8E8", dark="#505050")

    # Violation overlay, drawn over the question view
    OVERLAY_BG = ThemeColors(light="#FDECEC", dark="#3B1212")
