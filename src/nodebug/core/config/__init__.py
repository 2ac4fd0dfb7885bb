"""
Configuration models and loading.

This module provides Pydantic models for nodebug configuration
with multi-layer merging: defaults < user < project < env vars.
"""

from .env import load_layered_env
from .loader import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import NodebugConfig, PhpConfig, RestartConfig

__all__ = [
    # Models
    "NodebugConfig",
    "PhpConfig",
    "RestartConfig",
    # Loader functions
    "clear_cache",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "load_layered_env",
]
