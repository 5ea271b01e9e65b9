"""End-to-end tests for the galaxy generation pipeline."""

import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from py_galaxy.config.presets import default_galaxy_config
from py_galaxy.core.exceptions import GalaxyConfigError
from py_galaxy.core.galaxy_generator import GalaxyGenerator, generate_galaxy
from py_galaxy.core.models import GalaxyConfig, LanePhase, SystemTier
from py_galaxy.core.resilience import resilience_cap


def _origin_config(seed, **overrides):
    values = dict(
        seed=seed,
        radius=20,
        min_distance=2,
        star_system_count=6,
        anomaly_count=0,
        fixed_systems=[{"id": "origin", "name": "Origin", "x": 0, "y": 0, "tier": "origin"}],
    )
    values.update(overrides)
    return GalaxyConfig(**values)


def _components(galaxy):
    index = {s.id: i for i, s in enumerate(galaxy.systems)}
    parent = list(range(len(galaxy.systems)))

    def find(x):
        while parent[x] != x:
            x = parent[x]
        return x

    for lane in galaxy.warp_lanes:
        a, b = find(index[lane.from_id]), find(index[lane.to_id])
        if a != b:
            parent[a] = b
    return len({find(i) for i in range(len(parent))})


def _positions(galaxy):
    return [(s.id, s.x, s.y) for s in galaxy.systems]


def _lane_set(galaxy):
    return {lane.id for lane in galaxy.warp_lanes}


class TestEndToEnd:
    """Small seeded galaxy with a single fixed origin."""

    @pytest.fixture
    def galaxy(self):
        return generate_galaxy(_origin_config(7))

    def test_six_systems(self, galaxy):
        assert len(galaxy.systems) == 6
        assert galaxy.anomalies == []

    def test_origin(self, galaxy):
        origin = galaxy.origin
        assert origin.id == "origin"
        assert (origin.x, origin.y) == (0, 0)
        assert origin.explored
        assert sum(1 for s in galaxy.systems if s.tier == SystemTier.ORIGIN) == 1

    def test_connected(self, galaxy):
        assert _components(galaxy) == 1
        assert galaxy.statistics.component_count == 1

    def test_same_seed_reproduces(self, galaxy):
        again = generate_galaxy(_origin_config(7))
        assert _positions(again) == _positions(galaxy)
        assert _lane_set(again) == _lane_set(galaxy)
        assert again.model_dump() == galaxy.model_dump()

    def test_other_seed_differs(self, galaxy):
        other = generate_galaxy(_origin_config(8))
        assert _positions(other) != _positions(galaxy)

    def test_bounds(self, galaxy):
        bounds = galaxy.bounds
        assert (bounds.min_x, bounds.max_x, bounds.min_y, bounds.max_y) == (-20, 20, -20, 20)
        assert bounds.radius == 20


class TestInvariants:
    """Properties that hold for every generated galaxy."""

    @pytest.fixture(
        params=[
            dict(seed=1, radius=100, star_system_count=80, anomaly_count=10),
            dict(seed=2, radius=60, star_system_count=120, anomaly_count=20, core_radius=20),
            dict(
                seed=3,
                radius=100,
                star_system_count=80,
                anomaly_count=10,
                connectivity={"use_tiered_voronoi_mode": False},
            ),
            dict(
                seed=4,
                radius=400,
                star_system_count=150,
                anomaly_count=30,
                core_radius=100,
                fixed_systems=[
                    {"id": "sol", "name": "Sol", "x": 0, "y": 0, "tier": "origin"},
                    {"id": "edge", "name": "Edge", "target_distance": 350, "distance_tolerance": 20},
                ],
            ),
        ],
        ids=["tiered", "dense-core", "classic", "fixed"],
    )
    def galaxy(self, request):
        return generate_galaxy(GalaxyConfig(**request.param))

    def test_system_separation(self, galaxy):
        points = np.array([(s.x, s.y) for s in galaxy.systems])
        diff = points[:, None, :] - points[None, :, :]
        dists = np.hypot(diff[..., 0], diff[..., 1])
        np.fill_diagonal(dists, np.inf)
        assert dists.min() >= galaxy.config.min_distance

    def test_count_never_exceeds_request(self, galaxy):
        assert len(galaxy.systems) <= galaxy.config.star_system_count
        assert len(galaxy.anomalies) <= galaxy.config.anomaly_count

    def test_single_origin(self, galaxy):
        origins = [s for s in galaxy.systems if s.tier == SystemTier.ORIGIN]
        assert len(origins) == 1
        assert [s.id for s in galaxy.systems if s.explored] == [origins[0].id]

    def test_connected(self, galaxy):
        assert _components(galaxy) == 1

    def test_no_self_or_duplicate_lanes(self, galaxy):
        pairs = [tuple(sorted((lane.from_id, lane.to_id))) for lane in galaxy.warp_lanes]
        assert all(a != b for a, b in pairs)
        assert len(pairs) == len(set(pairs))

    def test_lane_distance_and_travel_time(self, galaxy):
        for lane in galaxy.warp_lanes:
            a = galaxy.get_system(lane.from_id)
            b = galaxy.get_system(lane.to_id)
            assert lane.distance == pytest.approx(math.hypot(a.x - b.x, a.y - b.y))
            assert lane.travel_time == math.ceil(lane.distance / 5)

    def test_connections_match_lanes(self, galaxy):
        for lane in galaxy.warp_lanes:
            assert lane.to_id in galaxy.get_system(lane.from_id).connections
            assert lane.from_id in galaxy.get_system(lane.to_id).connections
        assert sum(len(s.connections) for s in galaxy.systems) == 2 * len(galaxy.warp_lanes)

    def test_resilience_bounded(self, galaxy):
        extra = [lane for lane in galaxy.warp_lanes if lane.phase == LanePhase.RESILIENCE]
        assert len(extra) <= resilience_cap(len(galaxy.systems))

    def test_anomaly_separation(self, galaxy):
        for anomaly in galaxy.anomalies:
            for system in galaxy.systems:
                assert math.hypot(anomaly.x - system.x, anomaly.y - system.y) >= 3.0

    def test_statistics(self, galaxy):
        stats = galaxy.statistics
        assert stats.system_count == len(galaxy.systems)
        assert stats.lane_count == len(galaxy.warp_lanes)
        assert sum(stats.lanes_by_phase.values()) == stats.lane_count
        assert stats.component_count == 1
        assert stats.requested_system_count == galaxy.config.star_system_count


class TestEdgeCases:
    """Tiny, huge and over-dense requests."""

    @pytest.mark.parametrize("count", [1, 2, 3, 25, 500])
    def test_connected_for_any_size(self, count):
        config = GalaxyConfig(seed=count, radius=max(20.0, 3.0 * math.sqrt(count) * 2), star_system_count=count)
        galaxy = generate_galaxy(config)
        assert len(galaxy.systems) == count
        assert _components(galaxy) == 1

    def test_single_system_has_no_lanes(self):
        galaxy = generate_galaxy(GalaxyConfig(seed=1, radius=10, star_system_count=1))
        assert len(galaxy.systems) == 1
        assert galaxy.warp_lanes == []
        assert galaxy.systems[0].tier == SystemTier.ORIGIN

    def test_over_dense_request(self):
        config = GalaxyConfig(
            seed=1, radius=5, min_distance=2, star_system_count=1000, anomaly_count=20
        )
        assert config.max_sampling_attempts == 500
        galaxy = generate_galaxy(config)
        assert 0 < len(galaxy.systems) < 1000
        assert galaxy.statistics.system_count < galaxy.statistics.requested_system_count
        assert len(galaxy.anomalies) <= 20
        assert _components(galaxy) == 1

        systems = np.array([(s.x, s.y) for s in galaxy.systems])
        gaps = np.hypot(*(systems[:, None, :] - systems[None, :, :]).transpose(2, 0, 1))
        np.fill_diagonal(gaps, np.inf)
        assert gaps.min() >= 2 - 1e-9

        for anomaly in galaxy.anomalies:
            nearest = np.hypot(systems[:, 0] - anomaly.x, systems[:, 1] - anomaly.y).min()
            assert nearest >= config.anomaly_system_distance
        for i, first in enumerate(galaxy.anomalies):
            for second in galaxy.anomalies[i + 1 :]:
                assert math.hypot(first.x - second.x, first.y - second.y) >= config.anomaly_distance

    def test_fixed_id_in_procedural_namespace(self):
        config = _origin_config(
            7, fixed_systems=[{"id": "system-1", "name": "Home", "x": 0, "y": 0, "tier": "origin"}]
        )
        galaxy = generate_galaxy(config)
        ids = [s.id for s in galaxy.systems]
        assert len(ids) == 6
        assert len(set(ids)) == len(ids)
        assert galaxy.get_system("system-1").is_fixed
        assert _components(galaxy) == 1
        assert galaxy.statistics.component_count == 1

    def test_unplaceable_fixed_system_raises(self):
        config = GalaxyConfig(
            seed=1,
            radius=50,
            star_system_count=5,
            max_sampling_attempts=10,
            fixed_systems=[
                {"id": "a", "name": "A", "target_distance": 0, "distance_tolerance": 0},
                {"id": "b", "name": "B", "target_distance": 0, "distance_tolerance": 0},
            ],
        )
        with pytest.raises(GalaxyConfigError):
            generate_galaxy(config)


class TestGenerator:
    """Generator object and serialisation."""

    def test_stage_state_kept(self):
        generator = GalaxyGenerator(GalaxyConfig(seed=5, radius=50, star_system_count=30))
        galaxy = generator.generate()
        assert len(generator.sites) == 30
        assert all(site.has_system for site in generator.sites)
        assert generator.lanes.is_connected()
        assert galaxy.statistics.lanes_by_phase["resilience"] == generator.resilience_lanes

    def test_concurrent_runs_are_independent(self):
        config = GalaxyConfig(seed=11, radius=80, star_system_count=100, anomaly_count=10)
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(generate_galaxy, [config] * 4))
        dumps = [g.model_dump() for g in results]
        assert all(d == dumps[0] for d in dumps)

    def test_camel_case_output(self):
        galaxy = generate_galaxy(GalaxyConfig(seed=5, radius=50, star_system_count=10, anomaly_count=2))
        data = galaxy.model_dump(mode="json", by_alias=True)
        assert set(data) >= {"config", "systems", "anomalies", "warpLanes", "bounds"}
        system = data["systems"][0]
        assert {"id", "name", "x", "y", "type", "isFixed", "explored", "connections", "systemInfo"} <= set(system)
        lane = data["warpLanes"][0]
        assert {"id", "from", "to", "distance", "travelTime", "discovered"} <= set(lane)
        assert data["config"]["starSystemCount"] == 10
        assert data["bounds"]["minX"] == -50

    def test_sol_preset(self):
        galaxy = generate_galaxy(default_galaxy_config("sol", star_system_count=150, anomaly_count=5))
        sol = galaxy.get_system("sol")
        assert sol.tier == SystemTier.ORIGIN
        assert (sol.x, sol.y) == (0.0, 0.0)
        for system_id in ("alpha-centauri", "tau-ceti", "barnards-star", "bellatrix"):
            assert galaxy.get_system(system_id).is_fixed
        lumiere = galaxy.get_system("lumiere")
        assert 230.0 <= math.hypot(lumiere.x, lumiere.y) <= 270.0
        assert _components(galaxy) == 1
