"""
Fixed-system presets.

A preset is an ordered list of fixed systems that every galaxy built from it
contains. Real stars carry absolute coordinates in light years with Sol at
the world origin; fictional systems carry a target distance and tolerance.
"""

from typing import Any, Dict, List

from ..core.models import FixedSystemSpec, GalaxyConfig
from .config import settings

PRESETS: Dict[str, List[Dict[str, Any]]] = {
    "sol": [
        {"id": "sol", "name": "Sol System", "x": 0.0, "y": 0.0, "tier": "origin"},
        {"id": "alpha-centauri", "name": "Alpha Centauri", "x": 4.37, "y": 0.0, "tier": "core"},
        {"id": "tau-ceti", "name": "Tau Ceti", "x": -7.8, "y": 9.1, "tier": "core"},
        {"id": "barnards-star", "name": "Barnard's Star", "x": 2.1, "y": -5.6, "tier": "core"},
        {"id": "bellatrix", "name": "Bellatrix", "x": 180.0, "y": 165.0, "tier": "rim"},
        {
            "id": "lumiere",
            "name": "Lumière",
            "tier": "rim",
            "target_distance": 250.0,
            "distance_tolerance": 20.0,
        },
        {
            "id": "aspida",
            "name": "Aspida",
            "tier": "rim",
            "target_distance": 350.0,
            "distance_tolerance": 20.0,
        },
    ],
    "empty": [],
}

DEFAULT_PRESET = "sol"


def list_presets() -> List[str]:
    """Names of all available presets."""
    return sorted(PRESETS.keys())


def get_preset(name: str) -> List[FixedSystemSpec]:
    """
    Fixed systems of a preset.

    Args:
        name: Preset name

    Returns:
        Fresh list of fixed-system specs, in placement order

    Raises:
        ValueError: if the preset does not exist
    """
    if name not in PRESETS:
        raise ValueError(f"Unknown preset '{name}'. Available: {', '.join(list_presets())}")
    return [FixedSystemSpec(**entry) for entry in PRESETS[name]]


def default_galaxy_config(preset: str = DEFAULT_PRESET, **overrides: Any) -> GalaxyConfig:
    """
    Galaxy configuration built from application defaults.

    Keyword overrides replace top-level GalaxyConfig fields; an explicit
    ``fixed_systems`` override wins over the preset.
    """
    values: Dict[str, Any] = {
        "seed": settings.default_seed,
        "radius": settings.default_radius,
        "star_system_count": settings.default_system_count,
        "anomaly_count": settings.default_anomaly_count,
        "fixed_systems": get_preset(preset),
    }
    values.update(overrides)
    return GalaxyConfig(**values)
