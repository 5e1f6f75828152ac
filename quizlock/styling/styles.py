"""Centralized styles and font definitions for the application."""

from .color_palette import ColorPalette, Theme

class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.DARK) -> str:
        return f"""
            QMainWindow {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
            }}
            QWidget {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QPushButton:checked {{
                background-color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};
                color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)};
                border: 1px solid {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};
            }}
            QPushButton:disabled {{
                color: {ColorPalette.TEXT_DISABLED.get(theme)};
            }}
            QListWidget {{
                background-color: {ColorPalette.BACKGROUND_SECONDARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
            }}
            QProgressBar {{
                background-color: {ColorPalette.BACKGROUND_TERTIARY.get(theme)};
                border: none;
                border-radius: 4px;
                max-height: 10px;
            }}
            QProgressBar::chunk {{
                background-color: {ColorPalette.WARNING.get(theme)};
                border-radius: 4px;
            }}
        """

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"

    @staticmethod
    def get_overlay_style(theme: Theme = Theme.DARK) -> str:
        return (
            f"background-color: {ColorPalette.OVERLAY_BG.get(theme)};"
            f" color: {ColorPalette.TEXT_PRIMARY.get(theme)};"
            f" border: 2px solid {ColorPalette.ERROR.get(theme)};"
            " border-radius: 12px; padding: 24px; font-size: 18pt;"
        )

    @staticmethod
    def get_countdown_style(font_size: int, emphasized: bool, blink_state: bool = False) -> str:
        base_style = f"padding: 2px 6px; border-radius: 4px; font-size: {font_size}pt;"
        if not emphasized:
            return base_style
        background = "#b91c1c" if blink_state else "#ef4444"
        return base_style + f" color: #fff; background-color: {background};"

    @staticmethod
    def get_status_style(success: bool, theme: Theme = Theme.DARK) -> str:
        color = ColorPalette.SUCCESS.get(theme) if success else ColorPalette.ERROR.get(theme)
        return f"color: {color}; font-size: 16pt; font-weight: bold;"
