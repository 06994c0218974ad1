"""Stylesheet snippets shared by the main window widgets."""

from config.constants import UIConstants


class StyleManager:
    """Build small Qt stylesheets from the palette in UIConstants."""

    @staticmethod
    def status_color(status_key: str) -> str:
        return UIConstants.STATUS_COLORS.get(status_key, UIConstants.STATUS_COLORS['idle'])

    @classmethod
    def get_status_dot_style(cls, status_key: str, diameter: int = 14) -> str:
        return (
            f"background-color: {cls.status_color(status_key)};"
            f"border-radius: {diameter // 2}px;"
            f"min-width: {diameter}px; max-width: {diameter}px;"
            f"min-height: {diameter}px; max-height: {diameter}px;"
        )

    @staticmethod
    def get_badge_style(success: bool) -> str:
        color = UIConstants.STATUS_COLORS['ok'] if success else UIConstants.STATUS_COLORS['bad']
        return (
            f"color: white; background-color: {color};"
            "border-radius: 8px; padding: 2px 10px; font-weight: bold;"
        )

    @staticmethod
    def get_drop_area_style(active: bool, valid: bool) -> str:
        if not active:
            return ""
        border, background = UIConstants.DROP_VALID_COLORS if valid else UIConstants.DROP_INVALID_COLORS
        return (
            f"QGroupBox {{ border: 2px solid {border}; background-color: {background}; }}"
        )

    @staticmethod
    def get_log_style() -> str:
        return (
            "QPlainTextEdit { font-family: Menlo, Consolas, monospace;"
            f" font-size: {UIConstants.LOG_FONT_SIZE}pt; }}"
        )


__all__ = ["StyleManager"]
