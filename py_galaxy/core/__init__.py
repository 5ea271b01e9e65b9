"""
Core galaxy generation functionality.
"""

from .exceptions import GalaxyConfigError, GalaxyGenerationError
from .galaxy_generator import GalaxyGenerator, generate_galaxy
from .lane_graph import LaneGraph
from .models import (
    Anomaly,
    AnomalyType,
    ConnectivityOptions,
    FixedSystemSpec,
    Galaxy,
    GalaxyConfig,
    LanePhase,
    StarSystem,
    SystemTier,
    WarpLane,
)
from .seeded_random import SeededRandom
from .union_find import UnionFind

__all__ = ['GalaxyGenerator', 'generate_galaxy', 'GalaxyConfig', 'ConnectivityOptions',
           'FixedSystemSpec', 'Galaxy', 'StarSystem', 'WarpLane', 'Anomaly',
           'AnomalyType', 'SystemTier', 'LanePhase', 'LaneGraph', 'UnionFind',
           'SeededRandom', 'GalaxyConfigError', 'GalaxyGenerationError']
