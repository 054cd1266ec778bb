"""Configuration management for family-tree-core."""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional


class ConfigManager:
    """Manages behaviour switches and storage location for a family tree."""

    # Default config location
    DEFAULT_CONFIG_DIR = Path.home() / ".config" / "family-tree"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"

    VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    # Default configuration
    DEFAULT_CONFIG = {
        # None = ~/.family-tree/family_tree.db
        "database_path": None,
        # Run the full teardown before deleting a member so no peer keeps its id
        "teardown_on_delete": True,
        # Write resolved relationship labels back onto connected members
        "apply_relationship_labels": False,
        "log_level": "WARNING",
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            config_path: Optional custom config file path
        """
        self.config_path = config_path or self.DEFAULT_CONFIG_FILE
        self.config = self._load_or_create()

    @classmethod
    def defaults(cls) -> "ConfigManager":
        """Config holding the defaults only, never touching the filesystem."""
        manager = cls.__new__(cls)
        manager.config_path = None
        manager.config = cls.DEFAULT_CONFIG.copy()
        return manager

    def _load_or_create(self) -> Dict[str, Any]:
        """Load existing config or create default."""
        if self.config_path.exists():
            return self._load()
        else:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            self._save(self.DEFAULT_CONFIG)
            return self.DEFAULT_CONFIG.copy()

    def _load(self) -> Dict[str, Any]:
        """Load config from file."""
        try:
            with open(self.config_path, 'r') as f:
                config = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise ValueError(f"Failed to load config from {self.config_path}: {e}")
        if not isinstance(config, dict):
            raise ValueError(f"Failed to load config from {self.config_path}: not a JSON object")
        # Merge with defaults (in case new keys were added)
        merged = self.DEFAULT_CONFIG.copy()
        merged.update(config)
        return merged

    def _save(self, config: Dict[str, Any]) -> None:
        """Save config to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(config, f, indent=2)
        except IOError as e:
            raise ValueError(f"Failed to save config to {self.config_path}: {e}")

    def save(self) -> None:
        """Save current config to file (no-op for defaults-only configs)."""
        if self.config_path is not None:
            self._save(self.config)

    # Storage

    def get_database_path(self) -> Optional[Path]:
        """Custom database path, or None for the default location."""
        path = self.config.get("database_path")
        return Path(path).expanduser() if path else None

    def set_database_path(self, path: Optional[str]) -> None:
        self.config["database_path"] = str(path) if path else None
        self.save()

    # Graph behaviour

    @property
    def teardown_on_delete(self) -> bool:
        return bool(self.config.get("teardown_on_delete", True))

    def set_teardown_on_delete(self, enabled: bool) -> None:
        """
        Choose what deleting a member does to its peers.

        Args:
            enabled: True removes the deleted id from every peer first;
                     False only drops the member, leaving peers untouched
        """
        if not isinstance(enabled, bool):
            raise ValueError(f"Invalid teardown_on_delete: {enabled!r}. Must be true or false")
        self.config["teardown_on_delete"] = enabled
        self.save()

    @property
    def apply_relationship_labels(self) -> bool:
        return bool(self.config.get("apply_relationship_labels", False))

    def set_apply_relationship_labels(self, enabled: bool) -> None:
        if not isinstance(enabled, bool):
            raise ValueError(f"Invalid apply_relationship_labels: {enabled!r}. Must be true or false")
        self.config["apply_relationship_labels"] = enabled
        self.save()

    # Logging

    def get_log_level(self) -> str:
        return self.config.get("log_level", "WARNING")

    def set_log_level(self, level: str) -> None:
        level = level.upper()
        if level not in self.VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {level}. Valid: {self.VALID_LOG_LEVELS}")
        self.config["log_level"] = level
        self.save()

    def apply_log_level(self) -> None:
        """Apply the configured level to the package logger."""
        logging.getLogger("family_tree").setLevel(self.get_log_level())

    def get_config_status(self) -> Dict[str, Any]:
        """Get configuration status for display."""
        db_path = self.get_database_path()
        return {
            "database_path": str(db_path) if db_path else None,
            "teardown_on_delete": self.teardown_on_delete,
            "apply_relationship_labels": self.apply_relationship_labels,
            "log_level": self.get_log_level(),
            "config_path": str(self.config_path) if self.config_path else None,
        }
