"""
Keyboard layout settings with Pydantic validation

Tunables for keyboard frame filtering and scroll behavior, persisted as YAML.
"""
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, PrivateAttr

logger = logging.getLogger(__name__)


class KeyboardDismissMode(str, Enum):
    """How the keyboard is dismissed when the user drags the scroll area"""
    NONE = "none"
    ON_DRAG = "on_drag"
    INTERACTIVE = "interactive"


class KeyboardLayoutSettings(BaseModel):
    """Settings for keyboard-aware scrolling content"""

    # Slightly longer than the gap between keyboard notifications posted
    # during a rotation. Much shorter values make the view resize erratically.
    debounce_delay: float = Field(default=0.1, gt=0.0, le=2.0)

    # Navigation transitions last ~0.35s, keyboard transitions ~0.25s.
    # Empirically tuned; may need adjusting for other platform versions.
    navigation_transition_threshold: float = Field(default=0.3, ge=0.0)

    # Duration reported for keyboard changes from QInputMethod, which has none
    keyboard_animation_duration: float = Field(default=0.25, ge=0.0)

    visibility_scroll_margin: int = Field(default=0, ge=0)
    scroll_animation_duration_ms: int = Field(default=250, ge=0, le=5000)

    should_adjust_margins_for_keyboard: bool = Field(default=True)
    should_resize_content_for_keyboard: bool = Field(default=False)
    keyboard_dismiss_mode: KeyboardDismissMode = Field(default=KeyboardDismissMode.NONE)

    # Delay before checking focus after a text widget loses it
    panel_focus_check_delay_ms: int = Field(default=200, ge=0)

    # Diagnostic log under ~/.config/scrollingcontent/logs, off by default
    log_to_file: bool = Field(default=False)
    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR)$")

    _dirty: bool = PrivateAttr(default=False)

    def mark_dirty(self):
        """Mark settings as modified (need to save)"""
        self._dirty = True

    def is_dirty(self) -> bool:
        """Check if settings have unsaved changes"""
        return self._dirty

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the configuration file path"""
        config_dir = Path.home() / ".config" / "scrollingcontent"
        config_dir.mkdir(parents=True, exist_ok=True)
        return config_dir / "settings.yaml"

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'KeyboardLayoutSettings':
        """Load settings from file, falling back to defaults"""
        if config_path is None:
            config_path = cls.get_config_path()

        if config_path.exists():
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f) or {}
            logger.debug("Loaded keyboard layout settings from %s", config_path)
            return cls(**data)

        return cls()

    def save(self, config_path: Optional[Path] = None, force: bool = False):
        """
        Save settings to file (only if dirty or forced).

        Args:
            config_path: Destination file (defaults to get_config_path())
            force: Force save even if not dirty
        """
        if not force and not self.is_dirty():
            return

        if config_path is None:
            config_path = self.get_config_path()

        with open(config_path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

        self._dirty = False
        logger.debug("Saved keyboard layout settings to %s", config_path)

    def to_dict(self) -> dict:
        """Convert settings to a plain dictionary"""
        return self.model_dump(mode='json')

    def load_from_dict(self, data: dict):
        """Replace settings from a dictionary, validating every field"""
        validated = type(self)(**data)
        for name in type(self).model_fields:
            setattr(self, name, getattr(validated, name))
        self.mark_dirty()
