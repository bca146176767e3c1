"""
Tests for hitbox collision and score/lives bookkeeping.
"""

import pytest

from catch_gifts.gifts_core.collision import Box, hitbox, hitboxes_overlap, overlap_area, overlaps
from catch_gifts.gifts_core.config_loader import load_config
from catch_gifts.gifts_core.entities import ObjectKind
from catch_gifts.gifts_core.scoring import ScoreTracker


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def scorer(config):
    return ScoreTracker(config)


class TestCollision:
    """Axis-aligned overlap with shrunk hitboxes."""

    def test_hitbox_insets_symmetrically(self):
        box = hitbox(Box(100, 200, 50, 100), 0.2)
        assert box.x == pytest.approx(105)
        assert box.y == pytest.approx(210)
        assert box.width == pytest.approx(40)
        assert box.height == pytest.approx(80)

    def test_overlap_is_symmetric(self):
        pairs = [
            (Box(0, 0, 10, 10), Box(5, 5, 10, 10)),
            (Box(0, 0, 10, 10), Box(20, 0, 10, 10)),
            (Box(0, 0, 10, 10), Box(10, 0, 10, 10)),
            (Box(3, 3, 2, 2), Box(0, 0, 10, 10)),
        ]
        for a, b in pairs:
            assert overlaps(a, b) == overlaps(b, a)

    def test_touching_edges_do_not_overlap(self):
        assert not overlaps(Box(0, 0, 10, 10), Box(10, 0, 10, 10))
        assert not overlaps(Box(0, 0, 10, 10), Box(0, 10, 10, 10))

    def test_contained_box_overlaps(self):
        assert overlaps(Box(0, 0, 100, 100), Box(40, 40, 5, 5))

    def test_shrink_strictly_reduces_overlap_area(self):
        a = Box(0, 0, 96, 96)
        b = Box(50, 60, 56, 56)
        raw = overlap_area(a, b)
        shrunk = overlap_area(hitbox(a, 0.2), hitbox(b, 0.2))
        assert raw > 0
        assert shrunk < raw

    def test_near_miss_forgiven_by_shrink(self):
        a = Box(0, 0, 96, 96)
        b = Box(90, 0, 56, 56)
        assert overlaps(a, b)
        assert not hitboxes_overlap(a, b, 0.2, 0.2)


class TestScoreTracker:
    """Score, lives, invulnerability and milestone."""

    def test_initial_state(self, scorer):
        assert scorer.score == 0
        assert scorer.lives == 3
        assert scorer.last_hit is None
        assert not scorer.milestone_reached

    def test_catch_adds_point_without_life_loss(self, scorer):
        event = scorer.apply_catch()
        assert event.kind is ObjectKind.GIFT
        assert event.points == 1
        assert scorer.score == 1
        assert scorer.lives == 3

    def test_first_hit_costs_life(self, scorer):
        event = scorer.apply_hit(now=5000)
        assert event.lives_lost == 1
        assert scorer.lives == 2
        assert scorer.last_hit == 5000

    def test_hit_inside_window_absorbed(self, scorer):
        scorer.apply_hit(now=5000)
        event = scorer.apply_hit(now=5999)
        assert event.invulnerable
        assert event.lives_lost == 0
        assert scorer.lives == 2
        assert scorer.last_hit == 5000

    def test_hit_after_window_costs_life(self, scorer):
        scorer.apply_hit(now=5000)
        event = scorer.apply_hit(now=6000)
        assert event.lives_lost == 1
        assert scorer.lives == 1

    def test_lives_never_negative(self, scorer):
        for i in range(10):
            scorer.apply_hit(now=i * 2000)
        assert scorer.lives == 0

    def test_milestone_is_one_shot(self, scorer):
        flags = [scorer.apply_catch().milestone_reached for _ in range(150)]
        assert flags.count(True) == 1
        assert flags.index(True) == 99
        assert scorer.milestone_reached

    def test_reset(self, scorer):
        for _ in range(100):
            scorer.apply_catch()
        scorer.apply_hit(now=100)

        scorer.reset()

        assert scorer.score == 0
        assert scorer.lives == 3
        assert scorer.catches == 0
        assert scorer.last_hit is None
        assert not scorer.milestone_reached
