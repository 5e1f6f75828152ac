"""Styling module for the QuizLock client."""

from .color_palette import ColorPalette, Theme
from .styles import Styles

__all__ = ["ColorPalette", "Styles", "Theme"]
