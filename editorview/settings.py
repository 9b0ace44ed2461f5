"""User settings for the editor.

Settings are read from a JSON file in the user's config directory. Each key is
validated on load; anything missing or invalid falls back to
``EditorConstants``.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants
from .markup import Style

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"[0-9A-Fa-f]{6}")


@dataclass
class EditorSettings:
    tab_width: int = EditorConstants.TAB_WIDTH
    undo_limit: int = EditorConstants.UNDO_LIMIT
    foreground: str = f"{EditorConstants.DEFAULT_FOREGROUND:06x}"
    background: str = f"{EditorConstants.DEFAULT_BACKGROUND:06x}"

    @property
    def default_style(self) -> Style:
        return Style.from_hex(self.foreground, self.background)


def validate_setting(key: str, value: Any) -> bool:
    """Validate a setting value.

    Args:
        key: Setting key name.
        value: Setting value to validate.

    Returns:
        True if setting is valid, False otherwise.
    """
    if key == 'tab_width':
        return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 16
    if key == 'undo_limit':
        return isinstance(value, int) and not isinstance(value, bool) and value >= 1
    if key in ('foreground', 'background'):
        return isinstance(value, str) and _HEX_COLOR.fullmatch(value) is not None
    return False


class SettingsStore:
    """Loads ``EditorSettings`` as JSON in the user config directory."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = config_dir or Path(platformdirs.user_config_dir("editorview"))
        self._settings_file = self._config_dir / "settings.json"
        self._settings_cache: Optional[EditorSettings] = None

    def _read_file(self) -> Dict[str, Any]:
        if not self._settings_file.exists():
            return {}
        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            return {}
        return data

    def load(self) -> EditorSettings:
        """Return the validated settings, reading the file once."""
        if self._settings_cache is not None:
            return self._settings_cache
        settings = EditorSettings()
        for key, value in self._read_file().items():
            if not hasattr(settings, key):
                logger.warning(f"Ignoring unknown setting {key!r}")
            elif not validate_setting(key, value):
                logger.warning(f"Ignoring invalid value {value!r} for setting {key!r}")
            else:
                setattr(settings, key, value)
        self._settings_cache = settings
        return settings


# Global instance
_store: Optional[SettingsStore] = None


def get_settings() -> EditorSettings:
    """Get the settings of this process, loading them on first use."""
    global _store
    if _store is None:
        _store = SettingsStore()
    return _store.load()
