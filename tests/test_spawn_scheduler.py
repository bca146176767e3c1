"""
Tests for the difficulty curve and spawn scheduling.
"""

import dataclasses
from collections import Counter

import pytest

from catch_gifts.gifts_core.config_loader import load_config
from catch_gifts.gifts_core.entities import ObjectKind
from catch_gifts.gifts_core.rules import SpawnRules
from catch_gifts.gifts_core.spawner import SpawnScheduler, spawn_interval


@pytest.fixture
def config():
    return load_config()


class TestSpawnInterval:
    """Linear ramp from base to min interval."""

    def test_starts_at_base(self, config):
        assert spawn_interval(0, config.spawn) == 900

    def test_halfway(self, config):
        assert spawn_interval(30000, config.spawn) == pytest.approx(575)

    def test_exactly_min_at_and_after_ramp(self, config):
        assert spawn_interval(60000, config.spawn) == 250
        assert spawn_interval(60001, config.spawn) == 250
        assert spawn_interval(10 ** 9, config.spawn) == 250

    def test_negative_elapsed_treated_as_zero(self, config):
        assert spawn_interval(-500, config.spawn) == 900

    def test_bounded_and_non_increasing(self, config):
        previous = None
        for elapsed in range(0, 80000, 250):
            value = spawn_interval(elapsed, config.spawn)
            assert 250 <= value <= 900
            if previous is not None:
                assert value <= previous
            previous = value


class TestSpawnScheduler:
    """Spawn clock and object rolls."""

    def test_deterministic_with_seed(self, config):
        s1 = SpawnScheduler(config, seed=42)
        s2 = SpawnScheduler(config, seed=42)

        objs1 = [s1.roll_object((0, 344), -56) for _ in range(30)]
        objs2 = [s2.roll_object((0, 344), -56) for _ in range(30)]

        assert [(o.kind, o.x, o.speed) for o in objs1] == [(o.kind, o.x, o.speed) for o in objs2]

    def test_different_seeds_differ(self, config):
        s1 = SpawnScheduler(config, seed=42)
        s2 = SpawnScheduler(config, seed=123)

        xs1 = [s1.roll_object((0, 344), -56).x for _ in range(20)]
        xs2 = [s2.roll_object((0, 344), -56).x for _ in range(20)]

        assert xs1 != xs2

    def test_opening_spawn_then_one_interval(self, config):
        scheduler = SpawnScheduler(config, seed=0)
        step = config.timing.fixed_step
        assert scheduler.update(step) is True

        fired_at = None
        for i in range(1, 200):
            if scheduler.update(step):
                fired_at = i * step
                break

        assert fired_at is not None
        assert 880 <= fired_at <= 900 + step

    def test_first_spawn_after_one_interval_without_opening(self, config):
        spawn = dataclasses.replace(config.spawn, spawn_on_start=False)
        scheduler = SpawnScheduler(dataclasses.replace(config, spawn=spawn), seed=0)
        step = config.timing.fixed_step

        fired_at = None
        for i in range(1, 200):
            if scheduler.update(step):
                fired_at = i * step
                break

        assert fired_at is not None
        assert 880 <= fired_at <= 900 + step

    def test_restart_rearms_opening_spawn(self, config):
        scheduler = SpawnScheduler(config, seed=0)
        scheduler.update(1)
        assert scheduler.update(1) is False
        scheduler.restart_clocks()
        assert scheduler.update(1) is True

    def test_at_most_one_spawn_per_update(self, config):
        scheduler = SpawnScheduler(config, seed=0)
        assert scheduler.update(5000) is True
        assert scheduler.since_last_spawn == 0
        assert scheduler.update(1) is False

    def test_spawn_gap_shrinks_with_difficulty(self, config):
        scheduler = SpawnScheduler(config, seed=0)
        scheduler.update(70000)
        assert scheduler.current_interval == 250

        steps = 0
        while not scheduler.update(config.timing.fixed_step):
            steps += 1
        assert steps * config.timing.fixed_step <= 250 + config.timing.fixed_step

    def test_roll_within_ranges(self, config):
        scheduler = SpawnScheduler(config, seed=7)
        for _ in range(200):
            obj = scheduler.roll_object((0, 344), -56)
            assert 0 <= obj.x <= 344
            assert obj.y == -56
            assert 2 <= obj.speed <= 4
            assert obj.width == obj.height == 56

    def test_kind_mix(self, config):
        scheduler = SpawnScheduler(config, seed=3)
        counts = Counter(scheduler.choose_kind() for _ in range(5000))
        ratio = counts[ObjectKind.GIFT] / 5000
        assert 0.65 < ratio < 0.75

    def test_uids_increment(self, config):
        scheduler = SpawnScheduler(config, seed=1)
        uids = [scheduler.make_object(ObjectKind.GIFT, 0, 0, 3).uid for _ in range(5)]
        assert uids == [0, 1, 2, 3, 4]

    def test_reset_restarts_sequence(self, config):
        scheduler = SpawnScheduler(config, seed=9)
        first = [scheduler.roll_object((0, 344), -56).x for _ in range(10)]
        scheduler.update(12345)

        scheduler.reset(seed=9)
        second = [scheduler.roll_object((0, 344), -56).x for _ in range(10)]

        assert first == second
        assert scheduler.elapsed == 0


class TestSpawnRules:
    """Horizontal spawn range."""

    def test_range_fits_object(self, config):
        rules = SpawnRules(config)
        assert rules.get_spawn_x_range(400, 800) == (0.0, 344)
        assert rules.spawn_y == -56

    def test_degenerate_viewport(self, config):
        rules = SpawnRules(config)
        assert rules.get_spawn_x_range(0, 800) is None
        assert rules.get_spawn_x_range(400, 0) is None
        assert rules.get_spawn_x_range(40, 800) is None

    def test_exact_fit(self, config):
        rules = SpawnRules(config)
        assert rules.get_spawn_x_range(56, 800) == (0.0, 0.0)
