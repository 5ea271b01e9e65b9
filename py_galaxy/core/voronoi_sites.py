"""Voronoi site sampling and approximate neighbor graph for galaxy generation."""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
import structlog
from scipy.spatial import cKDTree

from .seeded_random import SeededRandom

logger = structlog.get_logger()

# Neighbor list size per site is drawn from this range
MIN_SITE_NEIGHBORS = 4
MAX_SITE_NEIGHBORS = 8


@dataclass
class VoronoiSite:
    """Sampled location waiting for a system identity.

    Sites only live for the duration of one generation run.
    """

    x: float
    y: float
    neighbors: List[int] = field(default_factory=list)
    system_id: Optional[str] = None

    @property
    def has_system(self) -> bool:
        return self.system_id is not None


def random_position_in_disk(rng: SeededRandom, radius: float) -> Tuple[float, float]:
    """
    Draw a point uniformly inside a disk centred on the world origin.

    The radial coordinate is ``radius * sqrt(u)`` so density does not pile up
    at the centre. Consumes exactly two draws: angle, then u.

    Args:
        rng: Shared random engine
        radius: Disk radius

    Returns:
        (x, y) coordinates
    """
    angle = rng.angle()
    r = math.sqrt(rng.random()) * radius
    return r * math.cos(angle), r * math.sin(angle)


def sample_sites(
    rng: SeededRandom,
    count: int,
    radius: float,
    min_distance: float,
    max_attempts: int = 500,
    reserved: Optional[Sequence[Tuple[float, float]]] = None,
) -> List[VoronoiSite]:
    """
    Rejection-sample up to ``count`` sites with a minimum pairwise separation.

    A site that cannot be placed within ``max_attempts`` draws is dropped, so
    dense requests return fewer sites than asked for. That is a best-effort
    outcome, not an error.

    Args:
        rng: Shared random engine
        count: Number of sites wanted, reserved ones included
        radius: Disk radius
        min_distance: Minimum distance between any two sites
        max_attempts: Draws per site before giving up on it
        reserved: Points accepted up front without drawing, e.g. the
            positions of fixed systems

    Returns:
        Accepted sites in acceptance order, reserved points first
    """
    reserved = list(reserved or [])[: max(count, 0)]
    points = np.empty((max(count, 0), 2), dtype=np.float64)
    accepted = len(reserved)
    if reserved:
        points[:accepted] = reserved
    dropped = 0

    for _ in range(count - accepted):
        for _attempt in range(max_attempts):
            x, y = random_position_in_disk(rng, radius)
            if accepted == 0:
                break
            dists = np.hypot(points[:accepted, 0] - x, points[:accepted, 1] - y)
            if dists.min() >= min_distance:
                break
        else:
            dropped += 1
            continue

        points[accepted] = (x, y)
        accepted += 1

    if dropped:
        logger.warning(
            "Site sampling under-delivered",
            requested=count,
            accepted=accepted,
            dropped=dropped,
        )
    logger.info(
        f"Sampled {accepted} Voronoi sites",
        requested=count,
        reserved=len(reserved),
        radius=radius,
    )

    return [VoronoiSite(x=float(px), y=float(py)) for px, py in points[:accepted]]


def compute_site_neighbors(
    rng: SeededRandom,
    sites: List[VoronoiSite],
    cutoff: float,
    min_k: int = MIN_SITE_NEIGHBORS,
    max_k: int = MAX_SITE_NEIGHBORS,
) -> None:
    """
    Build a symmetric, bounded-degree proximity graph over the sites.

    Each site keeps its k nearest sites within ``cutoff``, with k drawn per
    site from [min_k, max_k]. Back-references are then added so that the
    relation is symmetric. This stands in for the Delaunay neighbor relation;
    it only needs to give good local connectivity for lane building.

    Args:
        rng: Shared random engine (one draw per site)
        sites: Sites to link; their ``neighbors`` lists are replaced
        cutoff: Maximum neighbor distance
        min_k: Smallest neighbor list size
        max_k: Largest neighbor list size
    """
    n = len(sites)
    for site in sites:
        site.neighbors = []

    k_per_site = [rng.int_range(min_k, max_k) for _ in range(n)]
    if n < 2:
        return

    points = np.array([(s.x, s.y) for s in sites], dtype=np.float64)
    tree = cKDTree(points)
    k_query = min(max_k + 1, n)
    dists, idxs = tree.query(points, k=k_query, distance_upper_bound=cutoff)

    for i in range(n):
        chosen = sites[i].neighbors
        for dist, j in zip(dists[i], idxs[i]):
            if len(chosen) >= k_per_site[i]:
                break
            # Missing neighbors come back as inf distance and index n
            if not np.isfinite(dist) or j >= n or j == i:
                continue
            chosen.append(int(j))

    member_sets = [set(s.neighbors) for s in sites]
    for i in range(n):
        for j in list(sites[i].neighbors):
            if i not in member_sets[j]:
                sites[j].neighbors.append(i)
                member_sets[j].add(i)

    edge_count = sum(len(s.neighbors) for s in sites) // 2
    logger.info("Computed site neighbors", sites=n, edges=edge_count, cutoff=cutoff)
