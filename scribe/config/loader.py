"""Layered TOML configuration files.

``config/default.toml`` is required; ``config/{env}.toml`` is merged over it
when present. The directory comes from ``SCRIBE_CONFIG_DIR`` or the nearest
``config/`` above the working directory; the environment from ``SCRIBE_ENV``.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

DEFAULT_ENV = "development"
SEARCH_DEPTH = 5


def get_config_dir() -> Path:
    """Resolve the configuration directory."""
    override = os.environ.get("SCRIBE_CONFIG_DIR")
    if override:
        path = Path(override)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {override}")
        return path

    here = Path.cwd()
    for candidate in [here, *here.parents][:SEARCH_DEPTH]:
        if (candidate / "config").is_dir():
            return candidate / "config"
    return Path("config")


def get_environment() -> str:
    return os.environ.get("SCRIBE_ENV", DEFAULT_ENV)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file; FileNotFoundError if it is missing."""
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")
    return tomllib.loads(file_path.read_text())


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated with ``override``; tables merge, other values replace."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def config_layers(config_dir: Path, env: str) -> list[Path]:
    """TOML files to merge, lowest priority first."""
    default_path = config_dir / "default.toml"
    if not default_path.exists():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            "Create config/default.toml or set SCRIBE_CONFIG_DIR."
        )
    env_path = config_dir / f"{env}.toml"
    return [default_path, env_path] if env_path.exists() else [default_path]


def load_config(env: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """Load and merge the configuration layers."""
    layers = config_layers(config_dir or get_config_dir(), env or get_environment())
    config: dict[str, Any] = {}
    for path in layers:
        config = deep_merge(config, load_toml(path))
    return config
