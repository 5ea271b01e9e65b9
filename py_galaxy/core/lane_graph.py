"""
Shared warp lane accumulator.

Lane builders, the connectivity guarantor and the resilience pass all write
into one LaneGraph. It is the only place lanes are created, which keeps the
no-duplicate and exact-distance invariants in one spot.
"""

from typing import Dict, List, Optional, Set, Tuple

from .exceptions import GalaxyGenerationError
from .models import LanePhase, StarSystem, WarpLane
from .union_find import UnionFind


class LaneGraph:
    """Undirected, simple graph of warp lanes over a fixed system list."""

    def __init__(self, systems: List[StarSystem]):
        self.systems = systems
        self.lanes: List[WarpLane] = []
        self._index: Dict[str, int] = {s.id: i for i, s in enumerate(systems)}
        if len(self._index) != len(systems):
            raise GalaxyGenerationError("system ids must be unique within a galaxy")
        # Ordered neighbor lists keep iteration deterministic across processes
        self._adjacency: Dict[str, List[str]] = {s.id: [] for s in systems}
        self._pairs: Set[Tuple[str, str]] = set()

    def __len__(self) -> int:
        return len(self.lanes)

    @staticmethod
    def _key(a: str, b: str) -> Tuple[str, str]:
        return (a, b) if a < b else (b, a)

    def index_of(self, system_id: str) -> int:
        return self._index[system_id]

    def system(self, system_id: str) -> StarSystem:
        return self.systems[self._index[system_id]]

    def has_lane(self, a: str, b: str) -> bool:
        return self._key(a, b) in self._pairs

    def neighbors(self, system_id: str) -> List[str]:
        return self._adjacency[system_id]

    def degree(self, system_id: str) -> int:
        return len(self._adjacency[system_id])

    def add_lane(
        self,
        first: StarSystem,
        second: StarSystem,
        phase: LanePhase = LanePhase.PRIMARY,
    ) -> Optional[WarpLane]:
        """Create a lane unless the pair is already linked.

        Args:
            first: Lane start (kept as ``from``)
            second: Lane end (kept as ``to``)
            phase: Stage creating the lane

        Returns:
            The new lane, or None when the request was a no-op
        """
        if first.id == second.id:
            return None

        key = self._key(first.id, second.id)
        if key in self._pairs:
            return None

        distance = first.distance_to(second)
        lane = WarpLane(
            id=WarpLane.lane_id(first.id, second.id),
            from_id=first.id,
            to_id=second.id,
            distance=distance,
            travel_time=WarpLane.travel_time_for(distance),
            # Frozen at creation; later exploration does not update it
            discovered=first.explored and second.explored,
            phase=phase,
        )

        self._pairs.add(key)
        self.lanes.append(lane)
        self._adjacency[first.id].append(second.id)
        self._adjacency[second.id].append(first.id)
        first.connections.append(second.id)
        second.connections.append(first.id)
        return lane

    def isolated(self) -> List[StarSystem]:
        """Systems without any lane, in system order."""
        return [s for s in self.systems if not self._adjacency[s.id]]

    def union_find(self) -> UnionFind:
        """Disjoint sets of system indexes joined by the current lanes."""
        uf = UnionFind(len(self.systems))
        for lane in self.lanes:
            uf.union(self._index[lane.from_id], self._index[lane.to_id])
        return uf

    def component_count(self) -> int:
        return self.union_find().components

    def is_connected(self) -> bool:
        return self.component_count() <= 1

    def count_by_phase(self) -> Dict[str, int]:
        counts = {phase.value: 0 for phase in LanePhase}
        for lane in self.lanes:
            counts[lane.phase.value] += 1
        return counts
