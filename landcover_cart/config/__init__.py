"""
Configuration management for landcover_cart library.
"""

from .config_manager import ConfigManager
from .default_config import DEFAULT_CONFIG

__all__ = ['ConfigManager', 'DEFAULT_CONFIG']
