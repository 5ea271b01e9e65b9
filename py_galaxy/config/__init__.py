"""
Configuration modules for galaxy generation.
"""

from .config import Settings, settings
from .presets import PRESETS, default_galaxy_config, get_preset, list_presets

__all__ = ['Settings', 'settings', 'PRESETS', 'get_preset', 'list_presets',
           'default_galaxy_config']
