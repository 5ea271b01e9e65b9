"""
System assignment for galaxy generation.

Binds configured (fixed) systems to the nearest free Voronoi site, turns the
remaining sites into procedural systems and classifies every system into a
connectivity tier.
"""

import math
from typing import Dict, List, Optional, Tuple

import numpy as np
import structlog

from .exceptions import GalaxyConfigError
from .models import (
    FixedSystemSpec,
    GalaxyConfig,
    Resources,
    StarSystem,
    SystemInfo,
    SystemTier,
)
from .names import system_name
from .seeded_random import SeededRandom
from .voronoi_sites import VoronoiSite

logger = structlog.get_logger()

STAR_CLASSES = ["G-class", "K-class", "M-class", "F-class", "A-class"]

ORIGIN_POPULATION = 1_000_000

# Inclusive resource ranges per tier for procedural systems
RESOURCE_RANGES: Dict[SystemTier, Tuple[int, int]] = {
    SystemTier.ORIGIN: (50, 200),
    SystemTier.CORE: (25, 175),
    SystemTier.RIM: (10, 150),
}
FIXED_RESOURCE_RANGE = (50, 200)


class _Placement:
    """Position and identity of a system before it is materialised."""

    __slots__ = ("id", "name", "x", "y", "tier", "is_fixed")

    def __init__(self, id: str, name: str, x: float, y: float,
                 tier: SystemTier, is_fixed: bool):
        self.id = id
        self.name = name
        self.x = x
        self.y = y
        self.tier = tier
        self.is_fixed = is_fixed


class SystemAssigner:
    """Turns sampled sites plus fixed-system specs into star systems."""

    def __init__(self, config: GalaxyConfig, rng: SeededRandom):
        """
        Initialize system assigner.

        Args:
            config: Galaxy configuration
            rng: Shared random engine
        """
        self.config = config
        self.rng = rng
        self.discarded_sites = 0

    def classify(self, x: float, y: float) -> SystemTier:
        """Tier from distance to the world origin."""
        if math.hypot(x, y) <= self.config.core_radius:
            return SystemTier.CORE
        return SystemTier.RIM

    def assign(self, sites: List[VoronoiSite]) -> List[StarSystem]:
        """
        Create all star systems for this galaxy.

        Fixed systems come first, in configuration order, followed by
        procedural systems in site order. Each site is consumed at most once.

        Args:
            sites: Sampled sites; ``system_id`` is set on every bound site

        Returns:
            Star systems, at most ``star_system_count`` of them

        Raises:
            GalaxyConfigError: when a fixed system cannot be placed or bound
        """
        logger.info("Assigning systems to Voronoi sites", sites=len(sites))

        taken = np.zeros(len(sites), dtype=bool)
        coords = np.array([(s.x, s.y) for s in sites], dtype=np.float64).reshape(-1, 2)

        placements = self._place_fixed_systems(sites, coords, taken)
        placements.extend(self._place_procedural_systems(sites, coords, taken, placements))

        if placements and not any(p.tier == SystemTier.ORIGIN for p in placements):
            self._promote_origin(placements)

        systems = [self._materialise(p) for p in placements]

        tiers = {tier.value: sum(1 for s in systems if s.tier == tier) for tier in SystemTier}
        logger.info(
            f"Assigned {len(systems)} star systems",
            requested=self.config.star_system_count,
            fixed=len(self.config.fixed_systems),
            discarded_sites=self.discarded_sites,
            **tiers,
        )
        return systems

    def _fixed_position(
        self, spec: FixedSystemSpec, occupied: List[Tuple[float, float]]
    ) -> Tuple[float, float]:
        """Resolve where a fixed system sits."""
        if spec.has_fixed_position:
            return spec.x, spec.y

        low = spec.target_distance - spec.distance_tolerance
        high = spec.target_distance + spec.distance_tolerance
        min_distance = self.config.min_distance

        for _ in range(self.config.max_sampling_attempts):
            distance = self.rng.range(low, high)
            angle = self.rng.angle()
            x = distance * math.cos(angle)
            y = distance * math.sin(angle)
            if all(math.hypot(x - ox, y - oy) >= min_distance for ox, oy in occupied):
                logger.debug(
                    f"Placed {spec.name} at distance {distance:.1f} LY",
                    target=spec.target_distance,
                    tolerance=spec.distance_tolerance,
                )
                return x, y

        raise GalaxyConfigError(
            "could not place distance-constrained system away from other fixed systems",
            system_id=spec.id,
        )

    def _place_fixed_systems(
        self, sites: List[VoronoiSite], coords: np.ndarray, taken: np.ndarray
    ) -> List[_Placement]:
        occupied = [
            (spec.x, spec.y) for spec in self.config.fixed_systems if spec.has_fixed_position
        ]
        placements = []

        for spec in self.config.fixed_systems:
            x, y = self._fixed_position(spec, occupied)
            if not spec.has_fixed_position:
                occupied.append((x, y))

            tier = spec.tier if spec.tier is not None else self.classify(x, y)
            placements.append(_Placement(spec.id, spec.name, x, y, tier, True))

        # Absolute systems bind first so they get the sites sampled at their
        # own coordinates
        absolute = [p for p, s in zip(placements, self.config.fixed_systems) if s.has_fixed_position]
        constrained = [p for p, s in zip(placements, self.config.fixed_systems) if not s.has_fixed_position]
        for placement in absolute + constrained:
            site_index = self._nearest_free_site(coords, taken, placement.x, placement.y)
            if site_index is None:
                raise GalaxyConfigError(
                    f"no free Voronoi site left for fixed system "
                    f"({len(sites)} sites for {len(self.config.fixed_systems)} fixed systems)",
                    system_id=placement.id,
                )

            # The system keeps its own coordinates; the site only maps back to it
            taken[site_index] = True
            sites[site_index].system_id = placement.id

        return placements

    @staticmethod
    def _nearest_free_site(
        coords: np.ndarray, taken: np.ndarray, x: float, y: float
    ) -> Optional[int]:
        if len(coords) == 0 or taken.all():
            return None
        dists = np.hypot(coords[:, 0] - x, coords[:, 1] - y)
        dists[taken] = np.inf
        return int(np.argmin(dists))

    def _place_procedural_systems(
        self,
        sites: List[VoronoiSite],
        coords: np.ndarray,
        taken: np.ndarray,
        fixed: List[_Placement],
    ) -> List[_Placement]:
        # Free sites too close to a fixed system would break minimum separation
        if fixed and len(coords):
            fixed_xy = np.array([(p.x, p.y) for p in fixed], dtype=np.float64)
            for fx, fy in fixed_xy:
                near = np.hypot(coords[:, 0] - fx, coords[:, 1] - fy) < self.config.min_distance
                shadowed = near & ~taken
                self.discarded_sites += int(shadowed.sum())
                taken |= near

        remaining = self.config.star_system_count - len(fixed)
        fixed_ids = {p.id for p in fixed}
        placements = []
        index = 1
        for site_index, site in enumerate(sites):
            if len(placements) >= remaining:
                break
            if taken[site_index]:
                continue

            # Fixed systems may already use a procedural-looking id
            while f"system-{index}" in fixed_ids:
                index += 1
            system_id = f"system-{index}"
            taken[site_index] = True
            site.system_id = system_id
            placements.append(
                _Placement(
                    system_id,
                    system_name(index),
                    site.x,
                    site.y,
                    self.classify(site.x, site.y),
                    False,
                )
            )
            index += 1

        if self.discarded_sites:
            logger.warning(
                "Discarded sites too close to fixed systems", count=self.discarded_sites
            )
        return placements

    @staticmethod
    def _promote_origin(placements: List[_Placement]) -> None:
        """Make the system nearest the world origin the origin system."""
        nearest = min(placements, key=lambda p: math.hypot(p.x, p.y))
        nearest.tier = SystemTier.ORIGIN
        logger.info("No origin configured, promoted nearest system", system_id=nearest.id)

    def _materialise(self, placement: _Placement) -> StarSystem:
        """Create the StarSystem, drawing its economy, resources and flavor."""
        is_origin = placement.tier == SystemTier.ORIGIN
        population = ORIGIN_POPULATION if is_origin else 0
        gdp = population * self.rng.range(0.8, 1.5)

        if placement.is_fixed:
            low, high = FIXED_RESOURCE_RANGE
        else:
            low, high = RESOURCE_RANGES[placement.tier]
        resources = Resources(
            minerals=self.rng.int_range(low, high),
            energy=self.rng.int_range(low, high),
            research=self.rng.int_range(low, high),
        )

        star_type = self.rng.choice(STAR_CLASSES)
        planet_count = self.rng.int_range(4, 10)
        system_info = SystemInfo(
            star_type=star_type,
            planet_count=planet_count,
            moon_count=self.rng.int_range(0, planet_count // 2),
            asteroid_count=self.rng.int_range(0, 5),
        )

        return StarSystem(
            id=placement.id,
            name=placement.name,
            x=placement.x,
            y=placement.y,
            tier=placement.tier,
            is_fixed=placement.is_fixed,
            explored=is_origin,
            population=population,
            gdp=gdp,
            resources=resources,
            system_info=system_info,
        )
