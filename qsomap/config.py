"""Configuration loader for the QSO map tools."""

import logging
from pathlib import Path
from typing import Any

import yaml

from .basemap import DEFAULT_GEOMETRY_URL


logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "callsign": None,
    "home_grid": None,          # used only for QSOs with no MY_LAT/MY_LON/MY_GRIDSQUARE
    "geometry_url": DEFAULT_GEOMETRY_URL,
    "geometry_file": None,      # local GeoJSON, takes priority over the URL
    "projection": "equal_earth",
    "width": 800,
    "height": 500,
    "zoom_min": 0.5,
    "zoom_max": 5.0,
    "hit_tolerance": 4.0,
    "normalize_tags": False,
    "log_level": "INFO",
}


def default_config_path() -> Path:
    repo_root = Path(__file__).parent.parent
    return repo_root / "local" / "config" / "config.yaml"


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from YAML file with defaults.

    Searches for config in:
    1. Provided path
    2. local/config/config.yaml (user config, gitignored)
    3. ~/.config/qsomap/config.yaml (XDG standard)
    4. Falls back to defaults

    Args:
        config_path: Optional path to config file

    Returns:
        Dict with configuration values
    """
    config = DEFAULT_CONFIG.copy()

    search_paths = []
    if config_path:
        search_paths.append(Path(config_path))
    search_paths.append(default_config_path())
    search_paths.append(Path.home() / ".config" / "qsomap" / "config.yaml")

    for path in search_paths:
        if path.exists():
            try:
                with open(path) as f:
                    user_config = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Could not load config from %s: %s", path, e)
                continue
            if isinstance(user_config, dict):
                config.update(user_config)
            logger.debug("Loaded config from %s", path)
            return config

    return config


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to YAML file.

    Args:
        config: Configuration dict to save
        config_path: Optional path to save to (defaults to local/config/config.yaml)
    """
    if config_path is None:
        config_path = default_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
