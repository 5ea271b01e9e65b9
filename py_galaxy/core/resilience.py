"""Redundant lanes for weakly connected systems."""

import math
from typing import List, Tuple

import structlog

from .lane_graph import LaneGraph
from .models import GalaxyConfig, LanePhase, StarSystem

logger = structlog.get_logger()

MAX_EXTRA_LANES = 40
OUTLYING_RADIUS_FRACTION = 0.6
MAX_LINK_RADIUS_FRACTION = 0.4
DEGREE_DISCOUNT = 0.2


def resilience_cap(system_count: int) -> int:
    """Upper bound on lanes the augmenter may add."""
    return min(system_count // 4, MAX_EXTRA_LANES)


class ResilienceAugmenter:
    """
    Adds a bounded number of extra lanes to low-degree or outlying systems.

    Connectivity is already guaranteed before this runs; the pass only makes
    the network less dependent on single lanes.
    """

    def __init__(self, config: GalaxyConfig, lanes: LaneGraph):
        self.config = config
        self.lanes = lanes

    def find_vulnerable(self) -> List[StarSystem]:
        """Systems with <= 2 lanes, or far from the centroid with < 4."""
        systems = self.lanes.systems
        if not systems:
            return []
        center_x = sum(s.x for s in systems) / len(systems)
        center_y = sum(s.y for s in systems) / len(systems)
        outlying = self.config.radius * OUTLYING_RADIUS_FRACTION

        vulnerable = []
        for system in systems:
            degree = self.lanes.degree(system.id)
            distance = math.hypot(system.x - center_x, system.y - center_y)
            if degree <= 2 or (distance > outlying and degree < 4):
                vulnerable.append(system)
        return vulnerable

    def _ranked_targets(self, system: StarSystem) -> List[Tuple[float, int, StarSystem]]:
        """Unlinked systems, best first: distance discounted by their degree."""
        ranked = []
        for index, other in enumerate(self.lanes.systems):
            if other.id == system.id or self.lanes.has_lane(system.id, other.id):
                continue
            score = system.distance_to(other) / (1.0 + self.lanes.degree(other.id) * DEGREE_DISCOUNT)
            ranked.append((score, index, other))
        ranked.sort(key=lambda item: (item[0], item[1]))
        return ranked

    def augment(self) -> int:
        """
        Add redundant lanes.

        Returns:
            Number of lanes added, never more than ``resilience_cap``
        """
        systems = self.lanes.systems
        if len(systems) < 3:
            logger.info("Not enough systems for redundant connections")
            return 0

        cap = resilience_cap(len(systems))
        max_link = self.config.radius * MAX_LINK_RADIUS_FRACTION
        vulnerable = self.find_vulnerable()
        logger.info(f"Found {len(vulnerable)} vulnerable/outlying systems", cap=cap)

        added = 0
        for system in vulnerable:
            if added >= cap:
                break

            to_consider = 2 if self.lanes.degree(system.id) == 1 else 1
            for _score, _index, target in self._ranked_targets(system)[:to_consider]:
                if added >= cap:
                    break
                distance = system.distance_to(target)
                if distance < max_link:
                    if self.lanes.add_lane(system, target, LanePhase.RESILIENCE) is not None:
                        added += 1
                        logger.debug(
                            f"Added redundant lane {system.name} <-> {target.name}",
                            distance=round(distance, 2),
                        )

        if added:
            logger.info(f"Added {added} redundant lanes for network resilience")
        else:
            logger.info("No suitable redundant connections found within distance limits")
        return added
