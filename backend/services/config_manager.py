"""
Configuration Manager - Handle backend settings persistence
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "CONTEXTUAL_DIFF_CONFIG_DIR"


class ConfigManager:
    """Manage configuration persistence"""

    _instance = None
    _config_file = None

    def __init__(self, config_dir: str | os.PathLike | None = None):
        self.last_loaded: float | None = None
        try:
            # 1. explicit argument, then environment variable
            config_dir = config_dir or os.environ.get(CONFIG_DIR_ENV)

            # 2. home directory ~/.contextual_diff
            if not config_dir:
                config_dir = os.path.expanduser("~/.contextual_diff")

            config_path = Path(config_dir)
            try:
                config_path.mkdir(parents=True, exist_ok=True)
                self._config_file = config_path / "config.json"
            except OSError as e:
                logger.warning(f"Cannot write to {config_dir}: {e}")
                self._config_file = None

            # 3. fallback: temp directory
            if not self._config_file:
                tmp_dir = Path(tempfile.gettempdir()) / "contextual_diff"
                tmp_dir.mkdir(parents=True, exist_ok=True)
                self._config_file = tmp_dir / "config.json"
                logger.info(f"Using temporary config path: {self._config_file}")

        except OSError as e:
            logger.error(f"Critical error in ConfigManager init: {e}")
            self._config_file = Path(tempfile.gettempdir()) / "contextual_diff_config_fallback.json"

        self._config = self._load_config()

    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = ConfigManager()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Drop the singleton so the next get_instance() re-reads the environment"""
        cls._instance = None

    @property
    def config_file(self) -> Path:
        return self._config_file

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from file"""
        self.last_loaded = time.time()
        if not self._config_file.exists():
            return self._default_config()

        try:
            with open(self._config_file) as f:
                loaded = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Error loading config: {e}")
            return self._default_config()

        config = self._default_config()
        for key, value in loaded.items():
            if isinstance(value, dict) and isinstance(config.get(key), dict):
                config[key] = {**config[key], **value}
            else:
                config[key] = value
        return config

    def _default_config(self) -> dict[str, Any]:
        """Get default configuration"""
        return {
            "diff": {
                "unchangedContextLimit": None,  # None = show all unchanged text
                "emitNavigation": True,
            },
            "server": {"host": "0.0.0.0", "port": 8000},
        }

    def get_config(self) -> dict[str, Any]:
        """Get current configuration"""
        # Reload config from file to ensure we have the latest
        self._config = self._load_config()
        return self._config.copy()

    def save_config(self, config: dict[str, Any]):
        """Save configuration to file"""
        # Merge with existing config
        self._config.update(config)

        # Ensure config directory exists
        self._config_file.parent.mkdir(parents=True, exist_ok=True)

        # Write to file
        try:
            with open(self._config_file, "w") as f:
                json.dump(self._config, f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}")

    def get(self, key: str, default=None):
        """Get specific config value"""
        return self._config.get(key, default)

    def set(self, key: str, value: Any):
        """Set specific config value"""
        self._config[key] = value
        self.save_config(self._config)

    # ========== Diff Settings ==========

    def get_context_limit(self) -> int | None:
        """Configured unchanged-context limit, None when unbounded or invalid"""
        configured = self.get_config().get("diff", {}).get("unchangedContextLimit")
        if configured is None or configured == "":
            return None

        try:
            fractional = isinstance(configured, float) and not configured.is_integer()
            if isinstance(configured, bool) or fractional:
                raise ValueError(f"not a whole number: {configured!r}")
            limit = int(configured)
        except (TypeError, ValueError):
            logger.warning(
                f"Failed to parse diff.unchangedContextLimit={configured!r}, "
                "showing all unchanged context"
            )
            return None

        if limit < 0:
            logger.warning(f"Negative diff.unchangedContextLimit={limit}, showing all unchanged context")
            return None
        return limit

    def get_navigation(self) -> bool:
        """Whether renderers should link consecutive changes"""
        return bool(self.get_config().get("diff", {}).get("emitNavigation", True))
