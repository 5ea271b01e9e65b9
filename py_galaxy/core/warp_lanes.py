"""
Warp lane generation strategies.

Two interchangeable builders share one contract: read the systems (and the
Voronoi sites they were bound to) and add lanes to a shared LaneGraph.

- TieredNeighborLaneBuilder walks the site neighbor graph and admits edges
  under a per-pair distance cap that favours origin and core systems.
- ClassicLaneBuilder ignores the neighbor graph and links each system to
  nearby systems with a distance-decaying probability.
"""

import math
from abc import ABC, abstractmethod
from typing import Dict, List

import numpy as np
import structlog

from .lane_graph import LaneGraph
from .models import GalaxyConfig, LanePhase, StarSystem, SystemTier
from .seeded_random import SeededRandom
from .voronoi_sites import VoronoiSite

logger = structlog.get_logger()

# Reach of each tier relative to the shared base distance
TIER_DISTANCE_MULTIPLIERS: Dict[SystemTier, float] = {
    SystemTier.ORIGIN: 2.5,
    SystemTier.CORE: 2.0,
    SystemTier.RIM: 0.4,
}


def base_max_distance(config: GalaxyConfig) -> float:
    """Shared base lane length for the tiered builder."""
    return max(config.connectivity.max_distance * 1.5, config.radius * 0.25)


def tiered_max_distance(first: StarSystem, second: StarSystem, base_distance: float) -> float:
    """
    Longest admissible lane between two systems.

    Mixed pairs use the more generous of the two multipliers, so a rim
    system can still be reached from a core system far away.
    """
    multiplier = max(
        TIER_DISTANCE_MULTIPLIERS[first.tier],
        TIER_DISTANCE_MULTIPLIERS[second.tier],
    )
    return base_distance * multiplier


class LaneBuilder(ABC):
    """Common interface of the lane generation strategies."""

    name = "base"

    def __init__(self, config: GalaxyConfig):
        self.config = config

    @abstractmethod
    def build(
        self, systems: List[StarSystem], sites: List[VoronoiSite], lanes: LaneGraph
    ) -> int:
        """Add lanes to ``lanes``.

        Returns:
            Number of lanes created
        """


class TieredNeighborLaneBuilder(LaneBuilder):
    """Lanes along Voronoi neighbor edges, capped by tiered distance."""

    name = "tiered"

    def build(
        self, systems: List[StarSystem], sites: List[VoronoiSite], lanes: LaneGraph
    ) -> int:
        logger.info("Generating warp lanes from Voronoi neighbors")

        base_distance = base_max_distance(self.config)
        potential = 0
        created = 0

        for i, site in enumerate(sites):
            if not site.has_system:
                continue

            for j in site.neighbors:
                # Each unordered edge once
                if j <= i or not sites[j].has_system:
                    continue
                potential += 1

                first = lanes.system(site.system_id)
                second = lanes.system(sites[j].system_id)
                limit = tiered_max_distance(first, second, base_distance)

                if first.distance_to(second) <= limit:
                    if lanes.add_lane(first, second, LanePhase.PRIMARY) is not None:
                        created += 1

        logger.info(
            f"Evaluated {potential} potential lanes, created {created}",
            base_distance=base_distance,
        )
        return created


class ClassicLaneBuilder(LaneBuilder):
    """Probabilistic lanes with distance decay and a diversity bonus."""

    name = "classic"

    # Systems within this fraction of the radius may take extra lanes
    CENTRAL_FRACTION = 0.3
    CENTRAL_BONUS = 2
    GUARANTEED_NEAREST = 2
    DIVERSITY_BONUS = 1.5

    def __init__(self, config: GalaxyConfig, rng: SeededRandom):
        super().__init__(config)
        self.rng = rng

    def build(
        self, systems: List[StarSystem], sites: List[VoronoiSite], lanes: LaneGraph
    ) -> int:
        logger.info("Generating warp lanes with distance-based probability")

        options = self.config.connectivity
        n = len(systems)
        if n < 2:
            return 0

        coords = np.array([(s.x, s.y) for s in systems], dtype=np.float64)
        created = 0

        for i, system in enumerate(systems):
            dists = np.hypot(coords[:, 0] - system.x, coords[:, 1] - system.y)
            mask = dists <= options.max_distance
            mask[i] = False
            candidates = np.nonzero(mask)[0]
            candidates = candidates[np.argsort(dists[candidates], kind="stable")]

            max_connections = options.max_connections
            if math.hypot(system.x, system.y) / self.config.radius < self.CENTRAL_FRACTION:
                max_connections += self.CENTRAL_BONUS
            target = self.rng.int_range(options.min_connections, max_connections)

            for j in candidates[: self.GUARANTEED_NEAREST]:
                if lanes.add_lane(system, systems[j], LanePhase.PRIMARY) is not None:
                    created += 1

            for j in candidates:
                if lanes.degree(system.id) >= target:
                    break
                other = systems[j]
                if lanes.has_lane(system.id, other.id):
                    continue

                normalized = dists[j] / options.max_distance
                probability = math.exp(-normalized * options.distance_decay_factor)
                if lanes.degree(other.id) < 2:
                    probability *= self.DIVERSITY_BONUS

                if self.rng.random() < probability:
                    if lanes.add_lane(system, other, LanePhase.PRIMARY) is not None:
                        created += 1

        logger.info(f"Created {created} classic warp lanes", systems=n)
        return created


def select_lane_builder(config: GalaxyConfig, rng: SeededRandom) -> LaneBuilder:
    """Pick the lane strategy the configuration asks for.

    The classic builder draws from ``rng``, which must be the engine the rest
    of the run uses.
    """
    if config.connectivity.use_tiered_voronoi_mode:
        return TieredNeighborLaneBuilder(config)
    return ClassicLaneBuilder(config, rng)
