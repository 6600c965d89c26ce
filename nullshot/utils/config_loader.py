"""
Centralized configuration loading utility.
"""

import os
from pathlib import Path
from typing import Any

import yaml

CONFIG_ENV = "NULLSHOT_CONFIG"


def _read(path: Path) -> dict[str, Any]:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load configuration from YAML file.

    Priority order:
    1. Explicitly provided config_path
    2. NULLSHOT_CONFIG environment variable
    3. config.yaml in current directory
    4. config.yaml in the project root
    5. config.example.yaml in the project root
    6. Empty dict as fallback
    """
    if config_path and config_path.exists():
        return _read(config_path)

    if os.environ.get(CONFIG_ENV):
        env_config = Path(os.environ[CONFIG_ENV])
        if env_config.exists():
            return _read(env_config)

    cwd_config = Path.cwd() / "config.yaml"
    if cwd_config.exists():
        return _read(cwd_config)

    # Project root (one level above the nullshot package)
    root_dir = Path(__file__).resolve().parent.parent.parent

    root_config = root_dir / "config.yaml"
    if root_config.exists():
        return _read(root_config)

    example_config = root_dir / "config.example.yaml"
    if example_config.exists():
        return _read(example_config)

    # Commands still run with defaults
    return {}
