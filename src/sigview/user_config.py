"""
sigview User Configuration

Hierarchical config system with global defaults + local overrides:
- Global: ~/.sigview/config.json (cross-project settings)
- Local: .sigview/config.json (project-specific overrides)

Config structure:
{
  "loader": {
    "libraries": ["set"],       // Named libraries loaded by every command
    "paths": ["sig"],           // Signature files or directories
    "no_stdlib": false          // Skip the bundled core signatures
  }
}

Relative paths are resolved against the directory holding ``.sigview/``
(the project root for the local file, the home directory for the global
one). Set SIGVIEW_NO_USER_CONFIG=1 to ignore both files.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from sigview.logging_config import logger
from sigview.loader import LoaderOptions

CONFIG_DIR = ".sigview"
CONFIG_NAME = "config.json"

# Default configuration
DEFAULT_CONFIG = {
    "loader": {
        "libraries": [],
        "paths": [],
        "no_stdlib": False,
    }
}


class UserConfig:
    """
    Manages hierarchical user configuration.

    Load order (with override):
    1. Default config (hardcoded)
    2. Global config (~/.sigview/config.json)
    3. Local config (.sigview/config.json)
    """

    def __init__(self, project_root: Optional[Path] = None, home: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            project_root: Project root directory (defaults to CWD)
            home: Home directory (defaults to the user's home)
        """
        self.project_root = project_root or Path.cwd()
        self.home = home or Path.home()
        self.global_config_path = self.home / CONFIG_DIR / CONFIG_NAME
        self.local_config_path = self.project_root / CONFIG_DIR / CONFIG_NAME

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration with hierarchical override.

        Returns:
            Merged configuration dictionary
        """
        config = self._deep_merge({}, DEFAULT_CONFIG)

        if os.getenv("SIGVIEW_NO_USER_CONFIG", "").lower() in ("1", "true", "yes"):
            logger.debug("User config disabled by SIGVIEW_NO_USER_CONFIG")
            return config

        for label, path, base in (
            ("global", self.global_config_path, self.home),
            ("local", self.local_config_path, self.project_root),
        ):
            if not path.exists():
                continue
            try:
                with open(path, 'r') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load {label} config: {e}")
                continue
            if not isinstance(data, dict):
                logger.warning(f"Ignoring {label} config {path}: expected a JSON object")
                continue
            config = self._deep_merge(config, self._anchor_paths(data, base))
            logger.debug(f"Loaded {label} config from {path}")

        return config

    @staticmethod
    def _anchor_paths(data: Dict[str, Any], base: Path) -> Dict[str, Any]:
        loader = data.get("loader")
        if not isinstance(loader, dict) or not isinstance(loader.get("paths"), list):
            return data
        anchored = [str(base / p) if isinstance(p, str) else p for p in loader["paths"]]
        return {**data, "loader": {**loader, "paths": anchored}}

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """
        Deep merge two dictionaries, with override taking precedence.

        Args:
            base: Base dictionary
            override: Override dictionary

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value by dot-separated key.

        Examples:
            config.get("loader.libraries")  # []
            config.get("loader.no_stdlib")  # False
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def loader_options(self) -> LoaderOptions:
        """
        The configured sources as a LoaderOptions value.

        An invalid ``loader`` section is logged and replaced by the defaults.
        """
        try:
            return LoaderOptions.model_validate(self.get("loader", {}))
        except ValidationError as e:
            logger.warning(f"Ignoring invalid loader config: {e}")
            return LoaderOptions()


# Global singleton
_config: Optional[UserConfig] = None


def get_user_config(project_root: Optional[Path] = None) -> UserConfig:
    """
    Get the user configuration singleton.

    Args:
        project_root: Optional project root override

    Returns:
        UserConfig instance
    """
    global _config
    if project_root is not None:
        return UserConfig(project_root)
    if _config is None:
        _config = UserConfig()
    return _config


def reset_user_config() -> None:
    """Reset the global config singleton (for testing)."""
    global _config
    _config = None
