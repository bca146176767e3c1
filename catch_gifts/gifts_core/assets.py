"""
Asset Provider
==============

Loads the game's images and sounds in the background and hands them out by
logical name. Missing or broken files never stop the game: the renderer falls
back to placeholder shapes and sound calls become no-ops.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from catch_gifts.gifts_core.config_loader import GameConfig, get_config

ASSETS_ROOT = Path(__file__).parent.parent

# Audio may only be started after an explicit player action; the unlock is
# shared by every provider in the process.
_audio_unlocked: bool = False


class AssetProvider:
    """
    Background loader for images and sounds.

    Each file is submitted to a thread pool on construction; `ready` turns
    True once every load has finished, whether it succeeded or not.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        assets_dir: Optional[Path] = None,
        max_workers: int = 4
    ):
        """
        Start loading assets.

        Args:
            config: Game configuration. Uses default if None.
            assets_dir: Folder holding the files. Defaults to the configured
                directory inside the catch_gifts package.
            max_workers: Loader thread count.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required for asset loading")

        if config is None:
            config = get_config()

        self._config = config
        self._assets_dir = Path(assets_dir) if assets_dir else ASSETS_ROOT / config.assets.directory
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._images: Dict[str, Future] = {}
        self._sounds: Dict[str, Future] = {}
        self._scaled_cache: Dict[Tuple[str, int, int], "pygame.Surface"] = {}

        self._mixer_ok = self._init_mixer()

        for name, filename in config.assets.images.items():
            self._images[name] = self._submit(self._load_image, name, filename)
        for name, filename in config.assets.sounds.items():
            self._sounds[name] = self._submit(self._load_sound, name, filename)

    def _init_mixer(self) -> bool:
        if pygame.mixer.get_init():
            return True
        try:
            pygame.mixer.init()
            return True
        except pygame.error as e:
            print(f"[WARN] Audio disabled: {e}")
            return False

    def _submit(self, loader, name: str, filename: str) -> Future:
        future = self._executor.submit(loader, self._assets_dir / filename)
        future.add_done_callback(lambda f, n=name, p=filename: self._report(f, n, p))
        return future

    @staticmethod
    def _report(future: Future, name: str, filename: str) -> None:
        error = future.exception()
        if error is not None:
            print(f"[WARN] Failed to load asset '{name}' ({filename}): {error}")

    @staticmethod
    def _load_image(path: Path) -> "pygame.Surface":
        return pygame.image.load(str(path))

    def _load_sound(self, path: Path) -> "pygame.mixer.Sound":
        if not self._mixer_ok:
            raise RuntimeError("mixer unavailable")
        return pygame.mixer.Sound(str(path))

    @staticmethod
    def _result(future: Optional[Future]) -> Optional[Any]:
        if future is None or not future.done() or future.exception() is not None:
            return None
        return future.result()

    @property
    def ready(self) -> bool:
        """True once every image and sound load has completed."""
        return all(f.done() for f in self._pending())

    @property
    def audio_unlocked(self) -> bool:
        return _audio_unlocked

    def _pending(self) -> List[Future]:
        return list(self._images.values()) + list(self._sounds.values())

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until loading finishes. Returns the final `ready` state."""
        wait(self._pending(), timeout=timeout)
        return self.ready

    def has_image(self, name: str) -> bool:
        return self._result(self._images.get(name)) is not None

    def get_image(self, name: str, size: Tuple[int, int]) -> Optional["pygame.Surface"]:
        """
        Get an image scaled to `size`.

        Args:
            name: Logical image name ("player", "gift", "charcoal").
            size: (width, height) in pixels.

        Returns:
            Scaled surface, or None if the image is not loaded.
        """
        base = self._result(self._images.get(name))
        if base is None:
            return None

        width, height = max(1, int(size[0])), max(1, int(size[1]))
        cache_key = (name, width, height)
        if cache_key in self._scaled_cache:
            return self._scaled_cache[cache_key]

        if pygame.display.get_surface() is not None:
            base = base.convert_alpha()
        scaled = pygame.transform.smoothscale(base, (width, height))
        self._scaled_cache[cache_key] = scaled
        return scaled

    def unlock_audio(self) -> None:
        """Allow sound playback from now on."""
        global _audio_unlocked
        _audio_unlocked = True

    def play(self, name: str, volume: float = 1.0) -> None:
        """Restart a sound from the beginning. No-op before the unlock or if missing."""
        if not _audio_unlocked:
            return
        sound = self._result(self._sounds.get(name))
        if sound is None:
            return
        try:
            sound.stop()
            sound.set_volume(volume)
            sound.play()
        except pygame.error:
            # Playback failures never reach the player
            pass

    def stop(self, name: str) -> None:
        sound = self._result(self._sounds.get(name))
        if sound is None:
            return
        try:
            sound.stop()
        except pygame.error:
            pass

    def shutdown(self) -> None:
        """Stop the loader threads."""
        self._executor.shutdown(wait=False)


class SilentAssets:
    """
    Asset provider without media, for headless runs and tests.

    Records every unlock, play and stop call so they can be inspected.
    """

    def __init__(self, ready: bool = True):
        self.ready = ready
        self.audio_unlocked = False
        self.unlock_calls: int = 0
        self.played: List[Tuple[str, float]] = []
        self.stopped: List[str] = []

    def unlock_audio(self) -> None:
        self.unlock_calls += 1
        self.audio_unlocked = True

    def play(self, name: str, volume: float = 1.0) -> None:
        if self.audio_unlocked:
            self.played.append((name, volume))

    def stop(self, name: str) -> None:
        self.stopped.append(name)

    def get_image(self, name: str, size: Tuple[int, int]) -> None:
        return None

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self.ready

    def shutdown(self) -> None:
        pass
