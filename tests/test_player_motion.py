"""
Tests for keyboard and pointer movement.
"""

import pytest

from catch_gifts.gifts_core.config_loader import load_config
from catch_gifts.gifts_core.entities import Player
from catch_gifts.gifts_core.player_motion import PlayerController


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def player(config):
    p = Player(0, 0, config.player.width, config.player.height, config.player.max_speed)
    p.layout(400, 800, config.viewport.ground_fraction)
    return p


@pytest.fixture
def controller(config):
    return PlayerController(config)


class TestLayout:
    """Player placement on the ground band."""

    def test_centered_on_ground(self, player):
        assert player.x == pytest.approx(152)
        assert player.y == pytest.approx(544)

    def test_clamp_degenerate_viewport(self, player):
        player.clamp_to(0)
        assert player.x == 0


class TestKeyboard:
    """Held direction keys."""

    def test_right_moves_max_speed(self, controller, player):
        controller.set_keys(False, True)
        controller.apply(player, 1.0, 400)
        assert player.x == pytest.approx(160)

    def test_left_moves_max_speed(self, controller, player):
        controller.set_keys(True, False)
        controller.apply(player, 1.0, 400)
        assert player.x == pytest.approx(144)

    def test_both_keys_cancel(self, controller, player):
        controller.set_keys(True, True)
        assert controller.direction == 0
        controller.apply(player, 1.0, 400)
        assert player.x == pytest.approx(152)

    def test_ratio_scales_motion(self, controller, player):
        controller.set_keys(False, True)
        controller.apply(player, 0.5, 400)
        assert player.x == pytest.approx(156)

    def test_clamped_at_edges(self, controller, player):
        controller.set_keys(True, False)
        for _ in range(100):
            controller.apply(player, 1.0, 400)
        assert player.x == 0

        controller.set_keys(False, True)
        for _ in range(100):
            controller.apply(player, 1.0, 400)
        assert player.x == pytest.approx(304)


class TestPointer:
    """Eased movement toward a pointer target."""

    def test_target_centers_player_on_pointer(self, controller, player):
        controller.press_pointer(300, player)
        assert controller.target_x == pytest.approx(252)

    def test_far_target_capped_at_max_speed(self, controller, player):
        controller.press_pointer(400, player)
        controller.apply(player, 1.0, 400)
        assert player.x == pytest.approx(160)

    def test_near_target_eases_proportionally(self, controller, player):
        controller.press_pointer(200 + 10, player)   # target 162, distance 10
        controller.apply(player, 1.0, 400)
        assert player.x == pytest.approx(154)

    def test_snaps_and_clears_target(self, controller, player):
        controller.press_pointer(200 + 0.5, player)
        controller.apply(player, 1.0, 400)
        assert player.x == pytest.approx(152.5)
        assert controller.target_x is None

    def test_converges(self, controller, player):
        controller.press_pointer(100, player)
        for _ in range(200):
            controller.apply(player, 1.0, 400)
        assert player.x == pytest.approx(52)
        assert controller.target_x is None

    def test_release_clears_target(self, controller, player):
        controller.press_pointer(100, player)
        controller.release_pointer()
        controller.apply(player, 1.0, 400)
        assert player.x == pytest.approx(152)

    def test_keyboard_applied_after_pointer(self, controller, player):
        controller.press_pointer(400, player)
        controller.set_keys(True, False)
        controller.apply(player, 1.0, 400)
        assert player.x == pytest.approx(152)

    def test_clear(self, controller, player):
        controller.press_pointer(100, player)
        controller.set_keys(True, False)
        controller.clear()
        assert controller.target_x is None
        assert controller.direction == 0
