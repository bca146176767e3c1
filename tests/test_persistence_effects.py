"""
Tests for best score storage and cosmetic effects.
"""

import json
import random
from pathlib import Path

import pytest

from catch_gifts.gifts_core.config_loader import load_config
from catch_gifts.gifts_core.effects import ParticleSystem, ScreenShake
from catch_gifts.gifts_core.persistence import BestScoreStore

KEY = "catch_the_gifts_best_score"


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def path(tmp_path):
    return tmp_path / "best.json"


class TestBestScoreStore:
    """Best-effort JSON persistence."""

    def test_missing_file_is_zero(self, path):
        assert BestScoreStore(path, KEY).best == 0

    def test_record_writes_file(self, path):
        store = BestScoreStore(path, KEY)
        assert store.record(12) is True
        assert json.loads(path.read_text())[KEY] == 12

    def test_value_survives_reload(self, path):
        BestScoreStore(path, KEY).record(7)
        assert BestScoreStore(path, KEY).best == 7

    def test_lower_score_ignored(self, path):
        store = BestScoreStore(path, KEY)
        store.record(10)
        assert store.record(4) is False
        assert store.record(10) is False
        assert store.best == 10
        assert json.loads(path.read_text())[KEY] == 10

    @pytest.mark.parametrize("content", [
        "not json",
        json.dumps({KEY: "abc"}),
        json.dumps({KEY: -5}),
        json.dumps({"other": 3}),
        json.dumps([1, 2, 3]),
        '{"%s": 1e999}' % KEY,
        '{"%s": Infinity}' % KEY,
    ])
    def test_invalid_content_is_zero(self, path, content):
        path.write_text(content)
        assert BestScoreStore(path, KEY).best == 0

    def test_unreadable_location_is_zero(self, path, monkeypatch):
        def denied(self):
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "exists", denied)
        assert BestScoreStore(path, KEY).best == 0

    def test_memory_only(self):
        store = BestScoreStore(None, KEY)
        assert store.path is None
        assert store.record(3) is True
        assert store.best == 3

    def test_unwritable_location_is_silent(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = BestScoreStore(blocker / "best.json", KEY)
        assert store.record(5) is True
        assert store.best == 5

    def test_from_config(self, config):
        store = BestScoreStore.from_config(config)
        assert store.path is not None
        assert store.path.name == "best_score.json"


class TestParticles:
    """Particle bursts."""

    def test_burst_size(self, config):
        particles = ParticleSystem(config, seed=1)
        particles.burst(100, 100, (255, 215, 0))
        assert len(particles) == config.effects.burst_count

    def test_capacity_respected(self, config):
        particles = ParticleSystem(config, seed=1)
        for _ in range(100):
            particles.burst(100, 100, (80, 80, 80))
        assert len(particles) == config.effects.max_particles

    def test_particles_fade_and_expire(self, config):
        particles = ParticleSystem(config, seed=1)
        particles.burst(100, 100, (255, 215, 0))

        particles.update(100, 1.0)
        assert all(0 < p.alpha < 1 for p in particles.particles)

        particles.update(config.effects.particle_life, 1.0)
        assert len(particles) == 0

    def test_particles_move_outward(self, config):
        particles = ParticleSystem(config, seed=2)
        particles.burst(100, 100, (255, 215, 0))
        particles.update(16, 1.0)
        for p in particles.particles:
            assert (p.x, p.y) != (100, 100)

    def test_clear(self, config):
        particles = ParticleSystem(config, seed=1)
        particles.burst(0, 0, (1, 2, 3))
        particles.clear()
        assert len(particles) == 0


class TestScreenShake:
    """Linearly decaying shake."""

    def test_idle(self, config):
        shake = ScreenShake(config)
        assert not shake.active
        assert shake.amount == 0
        assert shake.offset(random.Random(0)) == (0.0, 0.0)

    def test_decays_linearly(self, config):
        shake = ScreenShake(config)
        shake.trigger()
        assert shake.remaining == config.effects.shake_duration
        assert shake.amount == pytest.approx(4.0)

        shake.update(100)
        assert shake.amount == pytest.approx(2.0)

        shake.update(150)
        assert shake.amount == 0
        assert not shake.active

    def test_offset_within_half_amount(self, config):
        shake = ScreenShake(config)
        shake.trigger()
        rng = random.Random(5)
        for _ in range(100):
            dx, dy = shake.offset(rng)
            assert abs(dx) <= 2.0
            assert abs(dy) <= 2.0
