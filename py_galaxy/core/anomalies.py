"""
Anomaly placement.

Anomalies are rejection-sampled in the galaxy disk away from systems and
from each other, then given a weighted-random type. The gameplay effect of
an anomaly depends only on its type.
"""

from typing import List, Tuple, Union

import numpy as np
import structlog

from .models import Anomaly, AnomalyEffect, AnomalyType, GalaxyConfig, StarSystem
from .names import anomaly_name
from .seeded_random import SeededRandom
from .voronoi_sites import random_position_in_disk

logger = structlog.get_logger()

ANOMALY_TYPES: List[AnomalyType] = [
    AnomalyType.NEBULA,
    AnomalyType.BLACKHOLE,
    AnomalyType.WORMHOLE,
    AnomalyType.ARTIFACT,
    AnomalyType.RESOURCE,
]
ANOMALY_WEIGHTS: List[float] = [0.4, 0.1, 0.1, 0.2, 0.2]

_EFFECTS = {
    AnomalyType.NEBULA: ("sensor_interference", -0.5),
    AnomalyType.BLACKHOLE: ("gravity_well", 2.0),
    AnomalyType.WORMHOLE: ("fast_travel", 0.1),
    AnomalyType.ARTIFACT: ("research_bonus", 1.5),
    AnomalyType.RESOURCE: ("mining_bonus", 2.0),
}


def anomaly_effect(anomaly_type: Union[AnomalyType, str]) -> AnomalyEffect:
    """Effect for an anomaly type; unknown types have no effect."""
    try:
        kind, value = _EFFECTS[AnomalyType(anomaly_type)]
    except ValueError:
        kind, value = "none", 0.0
    return AnomalyEffect(type=kind, value=value)


class AnomalyPlacer:
    """Places anomalies around already generated systems."""

    def __init__(self, config: GalaxyConfig, rng: SeededRandom):
        self.config = config
        self.rng = rng

    def _position_is_clear(
        self,
        x: float,
        y: float,
        system_xy: np.ndarray,
        anomaly_xy: List[Tuple[float, float]],
    ) -> bool:
        if len(system_xy):
            dists = np.hypot(system_xy[:, 0] - x, system_xy[:, 1] - y)
            if dists.min() < self.config.anomaly_system_distance:
                return False
        if anomaly_xy:
            placed = np.asarray(anomaly_xy)
            dists = np.hypot(placed[:, 0] - x, placed[:, 1] - y)
            if dists.min() < self.config.anomaly_distance:
                return False
        return True

    def place(self, systems: List[StarSystem]) -> List[Anomaly]:
        """
        Generate the configured number of anomalies.

        Each anomaly gets up to ``max_sampling_attempts`` position draws; one
        that finds no clear spot is dropped, so fewer anomalies than requested
        may come back.

        Args:
            systems: Systems to keep clear of

        Returns:
            Placed anomalies
        """
        system_xy = np.array([(s.x, s.y) for s in systems], dtype=np.float64).reshape(-1, 2)
        anomaly_xy: List[Tuple[float, float]] = []
        anomalies: List[Anomaly] = []
        dropped = 0

        for _ in range(self.config.anomaly_count):
            for _attempt in range(self.config.max_sampling_attempts):
                x, y = random_position_in_disk(self.rng, self.config.radius)
                if self._position_is_clear(x, y, system_xy, anomaly_xy):
                    break
            else:
                dropped += 1
                continue

            anomaly_type = self.rng.weighted_choice(ANOMALY_TYPES, ANOMALY_WEIGHTS)
            index = len(anomalies) + 1
            anomalies.append(
                Anomaly(
                    id=f"anomaly-{index}",
                    name=anomaly_name(anomaly_type, index),
                    x=x,
                    y=y,
                    type=anomaly_type,
                    discovered=False,
                    effect=anomaly_effect(anomaly_type),
                )
            )
            anomaly_xy.append((x, y))

        if dropped:
            logger.warning(
                "Anomaly placement under-delivered",
                requested=self.config.anomaly_count,
                placed=len(anomalies),
            )
        logger.info(f"Placed {len(anomalies)} anomalies")
        return anomalies
