"""Tests for the redundant lane pass."""

import pytest

from py_galaxy.core.lane_graph import LaneGraph
from py_galaxy.core.models import GalaxyConfig, LanePhase
from py_galaxy.core.resilience import MAX_EXTRA_LANES, ResilienceAugmenter, resilience_cap


def _path(make_system, count, spacing):
    """Systems on a line, each linked to the next."""
    systems = [make_system(f"s{i}", spacing * i, 0.0) for i in range(count)]
    lanes = LaneGraph(systems)
    for first, second in zip(systems, systems[1:]):
        lanes.add_lane(first, second)
    return systems, lanes


class TestResilienceCap:
    @pytest.mark.parametrize(
        "count,cap",
        [(0, 0), (3, 0), (10, 2), (100, 25), (160, 40), (1000, MAX_EXTRA_LANES)],
    )
    def test_cap(self, count, cap):
        assert resilience_cap(count) == cap


class TestResilienceAugmenter:
    """Vulnerable-system detection and bounded augmentation."""

    def test_path_systems_all_vulnerable(self, make_system):
        _, lanes = _path(make_system, 8, 1.0)
        config = GalaxyConfig(seed=1, radius=100, star_system_count=8)
        assert len(ResilienceAugmenter(config, lanes).find_vulnerable()) == 8

    def test_well_connected_center_not_vulnerable(self, make_system):
        hub = make_system("hub", 0.0, 0.0)
        spokes = [make_system(f"s{i}", float(i + 1), 1.0) for i in range(4)]
        lanes = LaneGraph([hub] + spokes)
        for spoke in spokes:
            lanes.add_lane(hub, spoke)
        config = GalaxyConfig(seed=1, radius=100, star_system_count=5)
        vulnerable = ResilienceAugmenter(config, lanes).find_vulnerable()
        assert hub not in vulnerable
        assert len(vulnerable) == 4

    def test_augment_stops_at_cap(self, make_system):
        systems, lanes = _path(make_system, 20, 1.0)
        config = GalaxyConfig(seed=1, radius=100, star_system_count=20)
        before = len(lanes)

        added = ResilienceAugmenter(config, lanes).augment()
        assert added == resilience_cap(len(systems)) == 5
        assert len(lanes) == before + added
        extra = [lane for lane in lanes.lanes if lane.phase == LanePhase.RESILIENCE]
        assert len(extra) == added
        assert all(lane.distance < 40.0 for lane in extra)

    def test_no_lanes_beyond_link_limit(self, make_system):
        # Link limit is 4 for radius 10; unlinked pairs are at least 10 apart
        _, lanes = _path(make_system, 4, 5.0)
        config = GalaxyConfig(seed=1, radius=10, star_system_count=4)
        assert ResilienceAugmenter(config, lanes).augment() == 0

    def test_empty_graph(self):
        config = GalaxyConfig(seed=1, radius=100, star_system_count=1)
        augmenter = ResilienceAugmenter(config, LaneGraph([]))
        assert augmenter.find_vulnerable() == []
        assert augmenter.augment() == 0

    def test_too_few_systems(self, make_system):
        _, lanes = _path(make_system, 2, 1.0)
        config = GalaxyConfig(seed=1, radius=100, star_system_count=2)
        assert ResilienceAugmenter(config, lanes).augment() == 0

    def test_no_duplicate_lanes(self, make_system):
        systems, lanes = _path(make_system, 40, 1.0)
        config = GalaxyConfig(seed=1, radius=100, star_system_count=40)
        ResilienceAugmenter(config, lanes).augment()
        pairs = [tuple(sorted((lane.from_id, lane.to_id))) for lane in lanes.lanes]
        assert len(pairs) == len(set(pairs))
