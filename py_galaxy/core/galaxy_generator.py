"""
Galaxy generation pipeline.

Wires the stages together in a fixed order so that one seed always yields
the same galaxy:

    sites -> neighbors -> systems -> lanes -> rescue -> bridges
          -> redundant lanes -> anomalies -> assembly

Each call owns its random engine, so separate calls may run concurrently.
"""

from typing import List, Optional

import structlog

from .anomalies import AnomalyPlacer
from .connectivity import ConnectivityGuarantor
from .lane_graph import LaneGraph
from .models import Anomaly, Bounds, Galaxy, GalaxyConfig, GalaxyStatistics, StarSystem
from .resilience import ResilienceAugmenter
from .seeded_random import SeededRandom
from .system_assigner import SystemAssigner
from .voronoi_sites import VoronoiSite, compute_site_neighbors, sample_sites
from .warp_lanes import select_lane_builder

logger = structlog.get_logger()

# Neighbor cutoff for the classic mode, as a fraction of the radius
CLASSIC_NEIGHBOR_CUTOFF = 0.5


class GalaxyGenerator:
    """Generates one galaxy from a configuration."""

    def __init__(self, config: GalaxyConfig, rng: Optional[SeededRandom] = None):
        """
        Initialize galaxy generator.

        Args:
            config: Validated galaxy configuration
            rng: Random engine; a fresh one seeded from ``config.seed`` by default.
                Never share one engine between concurrent generations.
        """
        self.config = config
        self.rng = rng or SeededRandom(config.seed)

        self.sites: List[VoronoiSite] = []
        self.systems: List[StarSystem] = []
        self.anomalies: List[Anomaly] = []
        self.lanes: Optional[LaneGraph] = None
        self.resilience_lanes = 0

    def generate(self) -> Galaxy:
        """
        Run the full pipeline.

        Returns:
            The assembled galaxy

        Raises:
            GalaxyConfigError: if fixed systems cannot be placed
        """
        config = self.config
        mode = "tiered" if config.connectivity.use_tiered_voronoi_mode else "classic"
        logger.info(
            "Generating galaxy",
            seed=config.seed,
            radius=config.radius,
            systems=config.star_system_count,
            anomalies=config.anomaly_count,
            mode=mode,
        )

        # Stage 1: Voronoi sites, seeded with the absolute fixed positions
        reserved = [(s.x, s.y) for s in config.fixed_systems if s.has_fixed_position]
        self.sites = sample_sites(
            self.rng,
            config.star_system_count,
            config.radius,
            config.min_distance,
            config.max_sampling_attempts,
            reserved=reserved,
        )

        # Stage 2: neighbor graph
        if config.connectivity.use_tiered_voronoi_mode:
            cutoff = config.radius * 2.0
        else:
            cutoff = config.radius * CLASSIC_NEIGHBOR_CUTOFF
        compute_site_neighbors(self.rng, self.sites, cutoff)

        # Stage 3: systems
        self.systems = SystemAssigner(config, self.rng).assign(self.sites)

        # Stage 4: lanes
        self.lanes = LaneGraph(self.systems)
        select_lane_builder(config, self.rng).build(self.systems, self.sites, self.lanes)

        # Stage 5: connectivity repair
        ConnectivityGuarantor(config, self.lanes).guarantee()

        # Stage 6: redundant lanes
        self.resilience_lanes = ResilienceAugmenter(config, self.lanes).augment()

        # Stage 7: anomalies
        self.anomalies = AnomalyPlacer(config, self.rng).place(self.systems)

        return self._assemble()

    def _assemble(self) -> Galaxy:
        config = self.config
        bounds = Bounds(
            min_x=-config.radius,
            max_x=config.radius,
            min_y=-config.radius,
            max_y=config.radius,
            radius=config.radius,
        )
        statistics = compute_statistics(config, self.systems, self.anomalies, self.lanes)

        logger.info(
            f"Generated galaxy: {statistics.system_count} systems, "
            f"{statistics.anomaly_count} anomalies, {statistics.lane_count} warp lanes",
            avg_connections=round(statistics.average_connections, 1),
            max_distance=round(statistics.max_lane_distance, 1),
            avg_distance=round(statistics.average_lane_distance, 1),
            random_draws=self.rng.call_count,
        )

        return Galaxy(
            config=config,
            systems=self.systems,
            anomalies=self.anomalies,
            warp_lanes=list(self.lanes.lanes),
            bounds=bounds,
            statistics=statistics,
        )


def compute_statistics(
    config: GalaxyConfig,
    systems: List[StarSystem],
    anomalies: List[Anomaly],
    lanes: LaneGraph,
) -> GalaxyStatistics:
    """Summary figures for diagnostics and shortfall detection."""
    distances = [lane.distance for lane in lanes.lanes]
    average_connections = (
        sum(len(s.connections) for s in systems) / len(systems) if systems else 0.0
    )
    return GalaxyStatistics(
        system_count=len(systems),
        requested_system_count=config.star_system_count,
        anomaly_count=len(anomalies),
        requested_anomaly_count=config.anomaly_count,
        lane_count=len(distances),
        lanes_by_phase=lanes.count_by_phase(),
        average_connections=average_connections,
        max_lane_distance=max(distances) if distances else 0.0,
        average_lane_distance=sum(distances) / len(distances) if distances else 0.0,
        component_count=lanes.component_count() if systems else 0,
    )


def generate_galaxy(config: GalaxyConfig) -> Galaxy:
    """Generate a galaxy with a fresh random engine."""
    return GalaxyGenerator(config).generate()
