"""
View Configuration

Resolves View settings from environment variables (optionally loaded from a .env
file) and an optional YAML file. YAML values override environment defaults.

Environment:
    VIEWS_PATH           Views root (default: views)
    COMPILED_VIEWS_PATH  Compiled views root (default: the views root)
    VIEW_CACHE_ENABLED   Reuse compiled artifacts (default: true)
    VIEW_AUTOESCAPE      HTML-escape variable output (default: false)
    VIEW_CONFIG_PATH     YAML file read when no path is passed explicitly
    LOGS_PATH            Root for session log directories (default: outs/logs)

YAML:
    views_dir: app/views
    compiled_dir: var/cache/views
    enable_cache: true
    autoescape: false
    params:
      site_name: Lazy
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

CONFIG_KEYS = ("views_dir", "compiled_dir", "enable_cache", "autoescape", "params")


@dataclass
class ViewConfig:
    """
    Resolved View settings.

    Attributes:
        views_dir: Views root directory
        compiled_dir: Compiled views root (None means same as views_dir)
        enable_cache: Reuse existing compiled artifacts
        autoescape: HTML-escape variable output in compiled views
        params: Initial shared parameters
    """

    views_dir: Path
    compiled_dir: Optional[Path] = None
    enable_cache: bool = True
    autoescape: bool = False
    params: Dict[str, Any] = field(default_factory=dict)


def _as_flag(value: Any) -> bool:
    """Booleans pass through; strings such as "false" or "0" are parsed, not truth-tested."""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _env_flag(name: str, default: str) -> bool:
    return _as_flag(os.getenv(name, default))


def get_env_defaults() -> Dict[str, Any]:
    """Read View settings from the environment."""
    return {
        "views_dir": os.getenv("VIEWS_PATH", "views"),
        "compiled_dir": os.getenv("COMPILED_VIEWS_PATH") or None,
        "enable_cache": _env_flag("VIEW_CACHE_ENABLED", "true"),
        "autoescape": _env_flag("VIEW_AUTOESCAPE", "false"),
        "params": {},
    }


def load_view_config(config_path: Optional[Path] = None) -> ViewConfig:
    """
    Load View settings.

    Args:
        config_path: Optional YAML file (defaults to VIEW_CONFIG_PATH env variable;
                     environment defaults alone are used when neither is set)

    Returns:
        ViewConfig

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config file has unknown keys or is not a mapping
    """
    if config_path is None and os.getenv("VIEW_CONFIG_PATH"):
        config_path = Path(os.getenv("VIEW_CONFIG_PATH"))

    settings = OmegaConf.create(get_env_defaults())

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"View config not found at {config_path}")

        overrides = OmegaConf.load(config_path)
        if not OmegaConf.is_dict(overrides):
            raise ValueError(f"View config must be a mapping: {config_path}")

        unknown = [key for key in overrides.keys() if key not in CONFIG_KEYS]
        if unknown:
            raise ValueError(f"Unknown view config keys {unknown}. Valid keys: {list(CONFIG_KEYS)}")

        settings = OmegaConf.merge(settings, overrides)

    resolved = OmegaConf.to_container(settings, resolve=True)

    return ViewConfig(
        views_dir=Path(resolved["views_dir"]),
        compiled_dir=Path(resolved["compiled_dir"]) if resolved["compiled_dir"] else None,
        enable_cache=_as_flag(resolved["enable_cache"]),
        autoescape=_as_flag(resolved["autoescape"]),
        params=dict(resolved["params"] or {}),
    )
