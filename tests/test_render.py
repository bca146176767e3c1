"""
Tests for the renderers and the asset provider.
"""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest

from catch_gifts.gifts_core.assets import SilentAssets
from catch_gifts.gifts_core.config_loader import load_config
from catch_gifts.gifts_core.entities import ObjectKind
from catch_gifts.gifts_core.game import CoreGame
from catch_gifts.gifts_core.render_solid import SolidRenderer


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    return CoreGame(config=config, seed=0, assets=SilentAssets())


class TestSolidRenderer:
    """Numpy hitbox renderer."""

    def test_output_shape(self, config, game):
        img = SolidRenderer(config).render(game.get_render_data(), 200, 400)
        assert img.shape == (400, 200, 3)
        assert img.dtype == np.uint8

    def test_ground_and_player_colors(self, config, game):
        game.start()
        img = SolidRenderer(config).render(game.get_render_data(), 400, 800)

        assert tuple(img[790, 10]) == tuple(config.colors.ground)
        assert tuple(img[592, 200]) == tuple(config.colors.player)
        assert tuple(img[300, 200]) == tuple(config.colors.background)

    def test_object_drawn_with_kind_color(self, config, game):
        game.start()
        game.spawn_object(kind=ObjectKind.CHARCOAL, x=10, y=100, speed=0)
        img = SolidRenderer(config).render(game.get_render_data(), 400, 800)
        assert tuple(img[128, 38]) == tuple(config.colors.charcoal)

    def test_dimmed_outside_playing(self, config, game):
        renderer = SolidRenderer(config)
        idle = renderer.render(game.get_render_data(), 400, 800)
        game.start()
        playing = renderer.render(game.get_render_data(), 400, 800)

        np.testing.assert_array_equal(idle, playing // 2)

    def test_scaled_output(self, config, game):
        game.start()
        img = SolidRenderer(config).render(game.get_render_data(), 200, 400)
        assert tuple(img[395, 5]) == tuple(config.colors.ground)
        assert tuple(img[296, 100]) == tuple(config.colors.player)


class TestPygameRenderer:
    """Full renderer with placeholder sprites."""

    @pytest.fixture
    def renderer(self, config):
        pytest.importorskip("pygame")
        from catch_gifts.gifts_core.render_pygame import PygameRenderer
        renderer = PygameRenderer(config, assets=SilentAssets(), seed=0)
        yield renderer
        renderer.close()

    def test_output_shape(self, renderer, game):
        img = renderer.render(game.get_render_data(), 200, 400)
        assert img.shape == (400, 200, 3)

    def test_placeholders_while_playing(self, renderer, game, config):
        game.start()
        img = renderer.render(game.get_render_data(), 400, 800)

        assert tuple(img[790, 200]) == tuple(config.colors.ground)
        assert tuple(img[592, 200]) == tuple(config.colors.player)

    def test_start_overlay_shades_scene(self, renderer, game):
        img = renderer.render(game.get_render_data(), 400, 800)
        assert img[790, 200].max() < 255

    def test_renders_every_phase_and_effect(self, renderer, config):
        game = CoreGame(config=config, seed=0, assets=SilentAssets())
        game.start()
        player = game.player
        game.spawn_object(kind=ObjectKind.GIFT, x=player.x + 20, y=player.y, speed=0)
        game.spawn_object(kind=ObjectKind.CHARCOAL, x=player.x + 20, y=player.y, speed=0)
        game.step()

        data = game.get_render_data()
        assert data["particles"]
        assert data["shake_amount"] > 0
        data["milestone_reached"] = True
        assert renderer.render(data, 400, 800).shape == (800, 400, 3)

        data["phase"] = "game_over"
        data["loading"] = True
        assert renderer.render(data, 400, 800).shape == (800, 400, 3)

    def test_shake_offset_bounds(self, renderer):
        assert renderer.shake_offset(0) == (0.0, 0.0)
        for _ in range(50):
            dx, dy = renderer.shake_offset(4.0)
            assert abs(dx) <= 2.0
            assert abs(dy) <= 2.0


class TestAssetProvider:
    """Background loading with graceful fallbacks."""

    @pytest.fixture
    def pygame(self):
        return pytest.importorskip("pygame")

    def test_missing_files_still_become_ready(self, pygame, config, tmp_path):
        from catch_gifts.gifts_core.assets import AssetProvider
        provider = AssetProvider(config, assets_dir=tmp_path)
        try:
            assert provider.wait(timeout=10) is True
            assert provider.ready
            assert not provider.has_image("player")
            assert provider.get_image("player", (96, 96)) is None
            provider.play("catch", 0.7)
            provider.stop("gameover")
        finally:
            provider.shutdown()

    def test_loaded_image_scaled_and_cached(self, pygame, config, tmp_path):
        from catch_gifts.gifts_core.assets import AssetProvider
        surface = pygame.Surface((20, 20))
        surface.fill((0, 255, 0))
        pygame.image.save(surface, str(tmp_path / config.assets.images["gift"]))

        provider = AssetProvider(config, assets_dir=tmp_path)
        try:
            provider.wait(timeout=10)
            assert provider.has_image("gift")
            image = provider.get_image("gift", (56, 56))
            assert image.get_size() == (56, 56)
            assert provider.get_image("gift", (56, 56)) is image
            assert provider.get_image("player", (96, 96)) is None
        finally:
            provider.shutdown()

    def test_audio_unlock_is_process_wide(self, pygame, config, tmp_path, monkeypatch):
        from catch_gifts.gifts_core import assets
        monkeypatch.setattr(assets, "_audio_unlocked", False)

        first = assets.AssetProvider(config, assets_dir=tmp_path)
        second = assets.AssetProvider(config, assets_dir=tmp_path)
        try:
            assert not first.audio_unlocked
            first.unlock_audio()
            assert first.audio_unlocked
            assert second.audio_unlocked
        finally:
            first.shutdown()
            second.shutdown()

    def test_provider_drives_loading_gate(self, pygame, config, tmp_path):
        from catch_gifts.gifts_core.assets import AssetProvider
        provider = AssetProvider(config, assets_dir=tmp_path)
        try:
            provider.wait(timeout=10)
            game = CoreGame(config=config, assets=provider)
            assert not game.is_loading
            assert game.start() is True
        finally:
            provider.shutdown()
