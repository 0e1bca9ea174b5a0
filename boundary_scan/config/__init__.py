"""
Boundary Scan Configuration Module

Provides centralized configuration loading for the scan engine,
the colour naming client and the name service.
"""

from pathlib import Path
from typing import Dict, Any, Optional

import yaml


_config_cache: Optional[Dict[str, Any]] = None
CONFIG_DIR = Path(__file__).parent


def get_config() -> Dict[str, Any]:
    """
    Load boundary scan configuration (cached).

    Returns:
        Dict containing the engine, color_api, palette and service sections.

    Raises:
        FileNotFoundError: If the YAML file is missing
    """
    global _config_cache
    if _config_cache is not None:
        return _config_cache

    config_path = CONFIG_DIR / "boundary_scan_config.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        _config_cache = yaml.safe_load(f)

    return _config_cache


def get_section(name: str) -> Dict[str, Any]:
    """Return one top-level section of the config (empty dict if absent)."""
    return dict(get_config().get(name) or {})


def clear_config_cache() -> None:
    """Clear the config cache (useful for testing)."""
    global _config_cache
    _config_cache = None
