"""Layered settings for brcheck.

Defaults are overlaid by the workspace file, the user file (or an explicit
``--config`` file) and finally ``BRCHECK_*`` environment variables.
"""

import copy
import os
import sys
from pathlib import Path
from typing import Dict, Any, Optional

try:
    import tomllib  # Available in Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python versions < 3.11

import tomli_w

USER_CONFIG_PATH = Path.home() / ".config" / "brcheck" / "config.toml"

WORKSPACE_CONFIG_NAME = "brcheck-workspace.toml"

ENV_KEYS = {
    "BRCHECK_DISABLE_VALIDATORS": "disable_validators",
    "BRCHECK_ENABLE_VALIDATORS": "enable_validators",
    "BRCHECK_COLORS": "colors",
    "BRCHECK_VERBOSE": "verbose",
    "BRCHECK_MAX_WORKERS": "max_workers",
    "BRCHECK_MAX_ATTEMPTS": "generation.max_attempts",
    "BRCHECK_SERVICE_DOMAIN": "service.domain",
    "BRCHECK_PASSWORD_MIN_LENGTH": "validators.Password.min_length",
    "BRCHECK_PASSWORD_MAX_LENGTH": "validators.Password.max_length",
}

BOOLEAN_KEYS = ("colors", "verbose")
INTEGER_KEYS = ("max_workers", "max_attempts", "min_length", "max_length")
LIST_KEYS = ("disable_validators", "enable_validators")


class Config:
    """brcheck settings, read once at construction.

    Precedence, lowest first: ``DEFAULT_CONFIG``, ``brcheck-workspace.toml``
    in the working directory, ``~/.config/brcheck/config.toml``, then the
    ``BRCHECK_*`` environment. An explicit ``config_path`` replaces both
    files.
    """

    DEFAULT_CONFIG = {
        "disable_validators": [],
        "enable_validators": [],  # If specified, only these validators run.
        "colors": True,
        "verbose": False,
        "max_workers": 4,
        "generation": {
            "max_attempts": 1000,
        },
        "service": {
            "domain": "empresa.com",
        },
        "validators": {
            "Password": {
                "min_length": 8,
                "max_length": 128,
            },
        },
    }

    def __init__(self, config_path: Optional[Path] = None) -> None:
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        if config_path:
            self._load_file_config(Path(config_path))
        else:
            workspace_config = Path.cwd() / WORKSPACE_CONFIG_NAME
            for path in (workspace_config, USER_CONFIG_PATH):
                if path.exists():
                    self._load_file_config(path)
        self._load_env_config()

    @classmethod
    def defaults(cls) -> "Config":
        """Returns a configuration holding only the default values.

        Files and environment variables are ignored, so library callers get
        the same behaviour wherever they run.
        """
        instance = cls.__new__(cls)
        instance.config = copy.deepcopy(cls.DEFAULT_CONFIG)
        return instance

    def _merge_configs(self, base: Dict[str, Any], new: Dict[str, Any]) -> None:
        for key, value in new.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                self._merge_configs(base[key], value)
            else:
                base[key] = value

    def _load_file_config(self, config_path: Path) -> None:
        try:
            with open(config_path, "rb") as f:
                self._merge_configs(self.config, tomllib.load(f))
        except (OSError, tomllib.TOMLDecodeError) as e:
            print(f"Warning: Could not load config from {config_path}: {e}", file=sys.stderr)

    def _load_env_config(self) -> None:
        for env_var, config_key in ENV_KEYS.items():
            value = os.getenv(env_var)
            if value is not None:
                self._set_nested_key(config_key, value)

    def _set_nested_key(self, key_path: str, value: str) -> None:
        """Stores an environment string under ``key_path``, cast by key name.

        Unparseable integers are reported and leave the current value alone.
        """
        *parents, leaf_key = key_path.split('.')
        target_config = self.config
        for key in parents:
            if not isinstance(target_config.get(key), dict):
                target_config[key] = {}
            target_config = target_config[key]

        if leaf_key in BOOLEAN_KEYS:
            target_config[leaf_key] = value.lower() in ("true", "1", "yes", "on")
        elif leaf_key in INTEGER_KEYS:
            try:
                target_config[leaf_key] = int(value)
            except ValueError:
                print(f"Warning: Invalid integer value for {leaf_key}: {value}", file=sys.stderr)
        elif leaf_key in LIST_KEYS:
            target_config[leaf_key] = [v.strip() for v in value.split(",") if v.strip()]
        else:
            target_config[leaf_key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Looks up a dotted key such as ``"service.domain"``."""
        value = self.config
        try:
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Sets a dotted key in memory; see `save_user_config` to persist it."""
        *parents, leaf_key = key.split('.')
        target_config = self.config
        for k in parents:
            target_config = target_config.setdefault(k, {})
        target_config[leaf_key] = value

    def is_validator_enabled(self, validator_name: str) -> bool:
        """A non-empty ``enable_validators`` is an allow-list; otherwise
        ``disable_validators`` is a deny-list."""
        enabled_list = self.get("enable_validators", [])
        if enabled_list:
            return validator_name in enabled_list
        return validator_name not in self.get("disable_validators", [])

    def save_user_config(self) -> None:
        """Writes the non-default top-level settings to the user config file.

        Keys already in that file are kept unless overridden here.

        Raises:
            IOError: If the file cannot be written.
        """
        user_config: Dict[str, Any] = {}
        if USER_CONFIG_PATH.exists():
            try:
                with open(USER_CONFIG_PATH, "rb") as f:
                    user_config = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError):
                user_config = {}

        for key, value in self.config.items():
            if value != self.DEFAULT_CONFIG.get(key):
                user_config[key] = value

        try:
            USER_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
            with open(USER_CONFIG_PATH, "wb") as f:
                tomli_w.dump(user_config, f)
        except OSError as e:
            raise IOError(f"Failed to save configuration to {USER_CONFIG_PATH}: {e}")

    @staticmethod
    def reset_user_config() -> bool:
        """Deletes the user config file. Returns False if there was none."""
        if USER_CONFIG_PATH.exists():
            USER_CONFIG_PATH.unlink()
            return True
        return False

    def __str__(self) -> str:
        return f"Config({self.config})"
