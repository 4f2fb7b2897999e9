"""Settings editor package."""

from pennylog.editor.settings_editor import SettingsEditor, parse_reset_date

__all__ = ["SettingsEditor", "parse_reset_date"]
