"""
Connectivity repair for the warp lane network.

Runs after the lane builder in two phases:

1. Isolated rescue: every system without lanes is linked to its nearest
   neighbor when that neighbor is within a generous cap.
2. Global connectivity: components are found with union-find and merged by
   repeatedly adding the shortest cross-component lanes, found with KD-tree
   queries, until a single connected network remains.
"""

from typing import Dict, List, Tuple

import numpy as np
import structlog
from scipy.spatial import cKDTree

from .lane_graph import LaneGraph
from .models import GalaxyConfig, LanePhase, StarSystem

logger = structlog.get_logger()

# Rescue links may be up to this fraction of the galaxy radius
RESCUE_RADIUS_FRACTION = 0.3

# Components up to this size find their exit with one kNN query on the shared
# tree; larger ones query a tree built over the other components
NEAREST_QUERY_LIMIT = 64


class ConnectivityGuarantor:
    """Makes the lane graph connected."""

    def __init__(self, config: GalaxyConfig, lanes: LaneGraph):
        self.config = config
        self.lanes = lanes

    @property
    def systems(self) -> List[StarSystem]:
        return self.lanes.systems

    def rescue_isolated(self) -> int:
        """
        Link each lane-less system to its nearest other system.

        Systems whose nearest neighbor is beyond the rescue cap stay isolated
        here; ``ensure_connected`` picks them up.

        Returns:
            Number of lanes added
        """
        systems = self.systems
        if len(systems) < 2:
            return 0

        max_rescue = self.config.radius * RESCUE_RADIUS_FRACTION
        coords = np.array([(s.x, s.y) for s in systems], dtype=np.float64)
        added = 0

        for system in self.lanes.isolated():
            # Earlier rescues in this loop may already have linked it
            if self.lanes.degree(system.id):
                continue

            i = self.lanes.index_of(system.id)
            dists = np.hypot(coords[:, 0] - system.x, coords[:, 1] - system.y)
            dists[i] = np.inf
            nearest = int(np.argmin(dists))
            distance = float(dists[nearest])

            if distance <= max_rescue:
                self.lanes.add_lane(system, systems[nearest], LanePhase.RESCUE)
                added += 1
                logger.debug(
                    f"Connected isolated system {system.name} to {systems[nearest].name}",
                    distance=round(distance, 2),
                )
            else:
                logger.warning(
                    "Isolated system has no neighbor within rescue range",
                    system_id=system.id,
                    nearest_distance=round(distance, 2),
                    max_distance=max_rescue,
                )

        if added:
            logger.info(f"Rescued {added} isolated systems")
        return added

    def ensure_connected(self) -> int:
        """
        Bridge all components into one using the shortest available lanes.

        Works in rounds. Each round finds, for every component except the
        largest, its shortest lane to any other component, then adds those
        lanes shortest first while they still join different components.
        Every such lane is a minimum-spanning-tree edge of the component
        graph. Each added lane merges two components, so the pass ends after
        exactly ``components - 1`` bridges.

        Returns:
            Number of bridge lanes added
        """
        systems = self.systems
        n = len(systems)
        if n < 2:
            return 0

        uf = self.lanes.union_find()
        if uf.components == 1:
            logger.info("Lane network already connected")
            return 0

        logger.info("Bridging disconnected components", components=uf.components)

        coords = np.array([(s.x, s.y) for s in systems], dtype=np.float64)
        tree = cKDTree(coords)
        bridges = 0

        while uf.components > 1:
            labels = np.array(uf.labels())
            groups: Dict[int, List[int]] = {}
            for index, label in enumerate(labels):
                groups.setdefault(int(label), []).append(index)
            components = sorted(groups.values(), key=lambda members: (-len(members), members[0]))

            candidates = [
                self._shortest_exit(tree, coords, labels, np.array(members))
                for members in components[1:]
            ]
            candidates.sort()

            for distance, u, v in candidates:
                if uf.union(u, v):
                    self.lanes.add_lane(systems[u], systems[v], LanePhase.BRIDGE)
                    bridges += 1
                    logger.debug(
                        f"Added bridge lane {systems[u].name} <-> {systems[v].name}",
                        distance=round(distance, 2),
                    )

        logger.info(f"Added {bridges} bridge lanes to ensure full connectivity")
        return bridges

    @staticmethod
    def _shortest_exit(
        tree: cKDTree, coords: np.ndarray, labels: np.ndarray, members: np.ndarray
    ) -> Tuple[float, int, int]:
        """Shortest (distance, member, outsider) pair leaving one component."""
        label = labels[members[0]]

        if len(members) <= NEAREST_QUERY_LIMIT:
            # Among size + 1 nearest points at least one lies outside
            k = min(len(members) + 1, len(coords))
            dists, idxs = tree.query(coords[members], k=k)
            dists = np.where(labels[idxs] != label, dists, np.inf)
            row, col = np.unravel_index(int(np.argmin(dists)), dists.shape)
            return float(dists[row, col]), int(members[row]), int(idxs[row, col])

        outside = np.flatnonzero(labels != label)
        dists, idxs = cKDTree(coords[outside]).query(coords[members], k=1)
        row = int(np.argmin(dists))
        return float(dists[row]), int(members[row]), int(outside[idxs[row]])

    def verify(self) -> bool:
        """Log loudly if the network is still split."""
        components = self.lanes.component_count()
        if len(self.systems) and components != 1:
            logger.error(
                "Lane network is disconnected after connectivity repair",
                components=components,
                systems=len(self.systems),
            )
            return False
        return True

    def guarantee(self) -> int:
        """Run both phases and verify.

        Returns:
            Total lanes added
        """
        added = self.rescue_isolated()
        added += self.ensure_connected()
        self.verify()
        return added
