"""
Data model for galaxy generation.

Configuration models are validated up front so that malformed requests are
rejected before any random draws happen. Output models serialise to the
camelCase JSON shape used by galaxy consumers via ``model_dump(by_alias=True)``.
"""

import math
from enum import Enum
from typing import Dict, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)
from pydantic.alias_generators import to_camel


class SystemTier(str, Enum):
    """Connectivity tier of a star system."""

    ORIGIN = "origin"
    CORE = "core"
    RIM = "rim"


class AnomalyType(str, Enum):
    """Kinds of anomaly scattered between systems."""

    NEBULA = "nebula"
    BLACKHOLE = "blackhole"
    WORMHOLE = "wormhole"
    ARTIFACT = "artifact"
    RESOURCE = "resource"


class LanePhase(str, Enum):
    """Pipeline stage that created a warp lane."""

    PRIMARY = "primary"
    RESCUE = "rescue"
    BRIDGE = "bridge"
    RESILIENCE = "resilience"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _FrozenCamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class FixedSystemSpec(_FrozenCamelModel):
    """A named system placed by configuration rather than by sampling.

    Real stars carry absolute coordinates. Fictional systems carry a target
    distance from the world origin plus a tolerance; their angle is random.
    """

    id: str = Field(min_length=1, description="Stable system id")
    name: str = Field(description="Display name")
    tier: Optional[SystemTier] = Field(
        default=None,
        validation_alias=AliasChoices("tier", "type"),
        description="Explicit tier; derived from distance when omitted",
    )
    x: Optional[float] = Field(default=None, description="Absolute x (light years)")
    y: Optional[float] = Field(default=None, description="Absolute y (light years)")
    target_distance: Optional[float] = Field(
        default=None, ge=0, description="Target distance from origin (light years)"
    )
    distance_tolerance: float = Field(
        default=0.0, ge=0, description="Allowed deviation from target distance"
    )

    @property
    def has_fixed_position(self) -> bool:
        return self.x is not None and self.y is not None

    @model_validator(mode="after")
    def _check_placement(self) -> "FixedSystemSpec":
        has_coordinate = self.x is not None or self.y is not None
        if has_coordinate and not self.has_fixed_position:
            raise ValueError(f"fixed system '{self.id}' needs both x and y")
        if self.has_fixed_position and self.target_distance is not None:
            raise ValueError(
                f"fixed system '{self.id}' has both coordinates and a target distance"
            )
        if not self.has_fixed_position and self.target_distance is None:
            raise ValueError(
                f"fixed system '{self.id}' needs coordinates or a target distance"
            )
        if (
            self.target_distance is not None
            and self.target_distance - self.distance_tolerance < 0
        ):
            raise ValueError(
                f"fixed system '{self.id}' tolerance exceeds its target distance"
            )
        return self


class ConnectivityOptions(_FrozenCamelModel):
    """Warp lane tuning."""

    min_connections: int = Field(default=1, ge=0, description="Minimum lanes per system")
    max_connections: int = Field(default=8, ge=0, description="Maximum lanes per system")
    max_distance: float = Field(
        default=10.0, gt=0, description="Maximum lane length (light years)"
    )
    distance_decay_factor: float = Field(
        default=0.8, ge=0, description="How fast lane probability falls with distance"
    )
    use_tiered_voronoi_mode: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "use_tiered_voronoi_mode", "useTieredVoronoiMode", "useVoronoiConnectivity"
        ),
        description="Use neighbor-graph lanes with tiered reach instead of classic",
    )

    @model_validator(mode="after")
    def _check_bounds(self) -> "ConnectivityOptions":
        if self.min_connections > self.max_connections:
            raise ValueError("min_connections cannot exceed max_connections")
        return self


class VisualizationHints(_FrozenCamelModel):
    """Rendering hints passed through untouched."""

    width: int = Field(default=2000, description="Canvas width")
    height: int = Field(default=2000, description="Canvas height")
    scale: float = Field(default=6.0, description="Pixels per light year")


class GalaxyConfig(_FrozenCamelModel):
    """Complete, immutable input to the generator."""

    seed: int = Field(description="Random seed")
    radius: float = Field(gt=0, description="Disk radius (light years)")
    star_system_count: int = Field(gt=0, description="Target number of systems")
    anomaly_count: int = Field(default=0, ge=0, description="Target number of anomalies")
    min_distance: float = Field(
        default=2.0, ge=0, description="Minimum separation between systems"
    )
    core_radius: float = Field(
        default=300.0, ge=0, description="Systems within this distance are core"
    )
    anomaly_system_distance: float = Field(
        default=3.0, ge=0, description="Minimum anomaly-to-system separation"
    )
    anomaly_distance: float = Field(
        default=2.0, ge=0, description="Minimum anomaly-to-anomaly separation"
    )
    max_sampling_attempts: int = Field(
        default=500, ge=1, description="Rejection sampling attempts per point"
    )
    connectivity: ConnectivityOptions = Field(default_factory=ConnectivityOptions)
    fixed_systems: List[FixedSystemSpec] = Field(default_factory=list)
    visualization: VisualizationHints = Field(default_factory=VisualizationHints)

    @model_validator(mode="after")
    def _check_fixed_systems(self) -> "GalaxyConfig":
        if self.star_system_count < len(self.fixed_systems):
            raise ValueError(
                f"star_system_count ({self.star_system_count}) is below the number "
                f"of fixed systems ({len(self.fixed_systems)})"
            )

        seen = set()
        for spec in self.fixed_systems:
            if spec.id in seen:
                raise ValueError(f"duplicate fixed system id '{spec.id}'")
            seen.add(spec.id)

        origins = [s.id for s in self.fixed_systems if s.tier == SystemTier.ORIGIN]
        if len(origins) > 1:
            raise ValueError(f"only one origin system allowed, got {origins}")

        for spec in self.fixed_systems:
            if spec.has_fixed_position:
                reach = math.hypot(spec.x, spec.y)
            else:
                reach = spec.target_distance + spec.distance_tolerance
            if reach > self.radius:
                raise ValueError(
                    f"fixed system '{spec.id}' lies outside the galaxy radius"
                )

        placed = [s for s in self.fixed_systems if s.has_fixed_position]
        for i, a in enumerate(placed):
            for b in placed[i + 1 :]:
                if math.hypot(a.x - b.x, a.y - b.y) < self.min_distance:
                    raise ValueError(
                        f"fixed systems '{a.id}' and '{b.id}' are closer than "
                        f"min_distance ({self.min_distance})"
                    )
        return self


# ---------------------------------------------------------------------------
# Generated entities
# ---------------------------------------------------------------------------


class Resources(_CamelModel):
    """Resource yields of a system."""

    minerals: int
    energy: int
    research: int


class SystemInfo(_CamelModel):
    """Descriptive counts used for flavor only."""

    star_type: str
    planet_count: int
    moon_count: int
    asteroid_count: int


class StarSystem(_CamelModel):
    """A generated star system."""

    id: str
    name: str
    x: float
    y: float
    tier: SystemTier
    is_fixed: bool = False
    connections: List[str] = Field(default_factory=list)
    explored: bool = False
    population: int = 0
    gdp: float = 0.0
    resources: Resources
    system_info: SystemInfo

    @computed_field
    @property
    def type(self) -> str:
        """Legacy name for the tier."""
        return self.tier.value

    def distance_to(self, other: "StarSystem") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


class WarpLane(_CamelModel):
    """Undirected travel connection between two systems."""

    id: str
    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    distance: float
    travel_time: int
    discovered: bool = False
    phase: LanePhase = LanePhase.PRIMARY

    @staticmethod
    def lane_id(a: str, b: str) -> str:
        """Id derived from the unordered endpoint pair."""
        low, high = sorted((a, b))
        return f"{low}__{high}"

    @staticmethod
    def travel_time_for(distance: float) -> int:
        """Turns needed to cross a lane at 5 light years per turn."""
        return int(math.ceil(distance / 5.0))


class AnomalyEffect(_CamelModel):
    """Gameplay effect of an anomaly."""

    type: str
    value: float


class Anomaly(_CamelModel):
    """A point of interest between systems."""

    id: str
    name: str
    x: float
    y: float
    type: AnomalyType
    discovered: bool = False
    effect: AnomalyEffect


class Bounds(_CamelModel):
    """Bounding box of the galaxy disk."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float
    radius: float


class GalaxyStatistics(_CamelModel):
    """Diagnostics; shortfalls against the request are visible here."""

    system_count: int
    requested_system_count: int
    anomaly_count: int
    requested_anomaly_count: int
    lane_count: int
    lanes_by_phase: Dict[str, int] = Field(default_factory=dict)
    average_connections: float = 0.0
    max_lane_distance: float = 0.0
    average_lane_distance: float = 0.0
    component_count: int = 0


class Galaxy(_CamelModel):
    """Result of one generation run."""

    config: GalaxyConfig
    systems: List[StarSystem]
    anomalies: List[Anomaly]
    warp_lanes: List[WarpLane]
    bounds: Bounds
    statistics: Optional[GalaxyStatistics] = None

    def get_system(self, system_id: str) -> Optional[StarSystem]:
        for system in self.systems:
            if system.id == system_id:
                return system
        return None

    def lanes_for(self, system_id: str) -> List[WarpLane]:
        return [
            lane
            for lane in self.warp_lanes
            if lane.from_id == system_id or lane.to_id == system_id
        ]

    @property
    def origin(self) -> Optional[StarSystem]:
        for system in self.systems:
            if system.tier == SystemTier.ORIGIN:
                return system
        return None
