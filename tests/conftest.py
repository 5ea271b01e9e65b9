"""Shared fixtures for galaxy tests."""

import pytest

from py_galaxy.core.models import Resources, StarSystem, SystemInfo, SystemTier


@pytest.fixture
def make_system():
    """Factory for bare star systems at given coordinates."""

    def _make(system_id, x, y, tier=SystemTier.RIM, explored=False):
        return StarSystem(
            id=system_id,
            name=system_id.title(),
            x=x,
            y=y,
            tier=tier,
            explored=explored,
            resources=Resources(minerals=10, energy=10, research=10),
            system_info=SystemInfo(star_type="G-class", planet_count=4, moon_count=0, asteroid_count=0),
        )

    return _make
