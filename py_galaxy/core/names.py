"""
Deterministic naming for procedural systems and anomalies.

Names are pure functions of an index (and anomaly type), so they never
consume random draws and stay stable when other tuning changes.
"""

from typing import Dict, List, Union

from .models import AnomalyType

SYSTEM_PREFIXES: List[str] = [
    "Alpha", "Beta", "Gamma", "Delta", "Epsilon", "Zeta", "Eta", "Theta",
]
SYSTEM_SUFFIXES: List[str] = [
    "Centauri", "Draconis", "Leonis", "Aquarii", "Orionis", "Cygni", "Lyrae",
]

ANOMALY_NAMES: Dict[AnomalyType, List[str]] = {
    AnomalyType.NEBULA: ["Crimson Nebula", "Azure Cloud", "Stellar Nursery", "Dark Nebula"],
    AnomalyType.BLACKHOLE: ["Void Maw", "Event Horizon", "Singularity", "Dark Star"],
    AnomalyType.WORMHOLE: ["Quantum Gate", "Space Fold", "Dimensional Rift", "Warp Tunnel"],
    AnomalyType.ARTIFACT: ["Ancient Relic", "Precursor Site", "Mysterious Structure", "Alien Beacon"],
    AnomalyType.RESOURCE: ["Asteroid Field", "Resource Cluster", "Mining Zone", "Rare Elements"],
}


def system_name(index: int) -> str:
    """Name for the procedural system with the given 1-based index.

    Prefix cycles fastest, suffix next. Once every prefix/suffix pair has
    been used, a cycle number is appended to keep names distinct.
    """
    n_prefix = len(SYSTEM_PREFIXES)
    combos = n_prefix * len(SYSTEM_SUFFIXES)

    prefix = SYSTEM_PREFIXES[index % n_prefix]
    suffix = SYSTEM_SUFFIXES[(index // n_prefix) % len(SYSTEM_SUFFIXES)]
    name = f"{prefix} {suffix}"

    cycle = index // combos
    if cycle:
        name = f"{name} {cycle + 1}"
    return name


def anomaly_name(anomaly_type: Union[AnomalyType, str], index: int) -> str:
    """Name for the anomaly with the given 1-based index."""
    try:
        names = ANOMALY_NAMES[AnomalyType(anomaly_type)]
    except ValueError:
        return f"Unknown Anomaly {index}"
    return f"{names[index % len(names)]} {index // len(names) + 1}"
