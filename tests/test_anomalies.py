"""Tests for anomaly placement and effects."""

import math

import pytest

from py_galaxy.core.anomalies import ANOMALY_TYPES, AnomalyPlacer, anomaly_effect
from py_galaxy.core.models import AnomalyType, GalaxyConfig
from py_galaxy.core.names import anomaly_name, system_name
from py_galaxy.core.seeded_random import SeededRandom


class TestAnomalyEffect:
    @pytest.mark.parametrize(
        "anomaly_type,kind,value",
        [
            (AnomalyType.NEBULA, "sensor_interference", -0.5),
            (AnomalyType.BLACKHOLE, "gravity_well", 2.0),
            (AnomalyType.WORMHOLE, "fast_travel", 0.1),
            (AnomalyType.ARTIFACT, "research_bonus", 1.5),
            (AnomalyType.RESOURCE, "mining_bonus", 2.0),
            ("resource", "mining_bonus", 2.0),
            ("quasar", "none", 0.0),
        ],
    )
    def test_effect_by_type(self, anomaly_type, kind, value):
        effect = anomaly_effect(anomaly_type)
        assert effect.type == kind
        assert effect.value == value


class TestAnomalyPlacer:
    """Separation and bookkeeping."""

    @pytest.fixture
    def systems(self, make_system):
        return [
            make_system(f"s{i}", 10.0 * math.cos(i), 10.0 * math.sin(i))
            for i in range(12)
        ]

    def test_separation(self, systems):
        config = GalaxyConfig(seed=4, radius=60, star_system_count=12, anomaly_count=40)
        anomalies = AnomalyPlacer(config, SeededRandom(4)).place(systems)
        assert 0 < len(anomalies) <= 40

        for anomaly in anomalies:
            assert math.hypot(anomaly.x, anomaly.y) <= 60
            for system in systems:
                assert math.hypot(anomaly.x - system.x, anomaly.y - system.y) >= 3.0
        for i, a in enumerate(anomalies):
            for b in anomalies[i + 1:]:
                assert math.hypot(a.x - b.x, a.y - b.y) >= 2.0

    def test_ids_names_and_effects(self, systems):
        config = GalaxyConfig(seed=4, radius=60, star_system_count=12, anomaly_count=20)
        anomalies = AnomalyPlacer(config, SeededRandom(4)).place(systems)
        assert [a.id for a in anomalies] == [f"anomaly-{n}" for n in range(1, len(anomalies) + 1)]
        for n, anomaly in enumerate(anomalies, start=1):
            assert anomaly.type in ANOMALY_TYPES
            assert anomaly.name == anomaly_name(anomaly.type, n)
            assert anomaly.effect == anomaly_effect(anomaly.type)
            assert not anomaly.discovered

    def test_zero_anomalies_draw_nothing(self, systems):
        config = GalaxyConfig(seed=4, radius=60, star_system_count=12)
        rng = SeededRandom(4)
        assert AnomalyPlacer(config, rng).place(systems) == []
        assert rng.call_count == 0

    def test_crowded_disk_drops_anomalies(self, make_system):
        """No point in the disk is far enough from a central system."""
        config = GalaxyConfig(
            seed=1, radius=3, star_system_count=1, anomaly_count=5, max_sampling_attempts=20
        )
        anomalies = AnomalyPlacer(config, SeededRandom(1)).place([make_system("s", 0.0, 0.0)])
        assert anomalies == []

    def test_deterministic(self, systems):
        config = GalaxyConfig(seed=4, radius=60, star_system_count=12, anomaly_count=10)
        first = AnomalyPlacer(config, SeededRandom(4)).place(systems)
        second = AnomalyPlacer(config, SeededRandom(4)).place(systems)
        assert first == second


class TestNames:
    def test_system_names_cycle(self):
        assert system_name(1) == "Beta Centauri"
        assert system_name(8) == "Alpha Draconis"
        assert system_name(56) == "Alpha Centauri 2"

    def test_anomaly_names(self):
        assert anomaly_name(AnomalyType.NEBULA, 1) == "Azure Cloud 1"
        assert anomaly_name("wormhole", 4) == "Quantum Gate 2"
        assert anomaly_name("quasar", 3) == "Unknown Anomaly 3"
