"""Configuration management for cove."""

import os
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

# Override with COVE_HOME environment variable
DATA_DIR = Path(os.environ.get("COVE_HOME", Path.home() / ".cove"))
CONFIG_FILE = DATA_DIR / "config.toml"
CONTAINERS_FILE = DATA_DIR / "ContainersConfig.json"

DEFAULT_CONFIG = {
    "store": {
        "file": "",
    },
    "logging": {
        "level": "WARNING",
        "file": "",
    },
}


def ensure_dirs():
    """Create the data directory if it doesn't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def load_config() -> dict:
    """Load config, creating default if it doesn't exist."""
    ensure_dirs()
    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, "rb") as f:
            user_config = tomllib.load(f)
        # Merge with defaults (user overrides)
        config = _deep_merge(DEFAULT_CONFIG, user_config)
    else:
        config = _deep_merge(DEFAULT_CONFIG, {})
        save_config(config)
    return config


def save_config(config: dict):
    """Save config to disk."""
    ensure_dirs()
    with open(CONFIG_FILE, "wb") as f:
        tomli_w.dump(config, f)


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    for key, value in result.items():
        if isinstance(value, dict) and key not in override:
            result[key] = value.copy()
    return result


class ContainersConfig:
    """Tells the store where the containers file lives.

    An explicit path wins; otherwise the ``[store] file`` setting is used,
    falling back to ``ContainersConfig.json`` in the data directory.
    """

    def __init__(self, path: Path | str | None = None, config: dict | None = None):
        if path is None and config is not None:
            path = config.get("store", {}).get("file") or None
        self._path = Path(path).expanduser() if path else None

    def containers_config_file_name(self) -> Path:
        return self._path or CONTAINERS_FILE
