"""Decorative emoji spawns on keystrokes: fish by the sea, birds in the mountains.

Rendering is left to the UI layer. This module decides whether a key spawns
anything, which emoji, where, how large and for how long, and tracks live
spawns against the concurrency cap.
"""
import dataclasses
import itertools
import random
import time
from dataclasses import dataclass
from typing import Callable

from calmtype.client.events import KeyEvent


@dataclass(frozen=True)
class EffectsConfig:
    min_interval_ms: float = 90
    max_concurrency: int = 20
    fish_emojis: tuple[str, ...] = ("🐠", "🐡", "🐟")
    bird_emojis: tuple[str, ...] = ("🐦", "🦜", "🕊️")
    shark_emoji: str = "🦈"
    eagle_emoji: str = "🦅"


@dataclass(frozen=True)
class SceneStyle:
    """Computed style and layout of the scene background element."""

    display: str = "block"
    visibility: str = "visible"
    opacity: str = "1"
    width: float = 0
    height: float = 0
    attached: bool = True


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float


@dataclass
class Spawn:
    id: int
    emoji: str
    x: float
    y: float
    is_boss: bool = False
    font_size_rem: float | None = None
    duration_s: float | None = None


def is_scene_visible(style: SceneStyle | None, strict: bool = False) -> bool:
    if style is None:
        return False
    if style.display == "none" or style.visibility == "hidden":
        return False
    try:
        opacity = float(style.opacity or "1")
    except ValueError:
        return False
    if not opacity > 0.05:
        return False
    if strict:
        if style.width == 0 and style.height == 0:
            return False
        if not style.attached:
            return False
    return True


class FishEffects:
    """Throttled spawner driven by key events.

    `clock` returns seconds (monotonic); `scene_probe` returns the mountain
    background's style, or None when that element does not exist.
    """

    def __init__(
        self,
        config: EffectsConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
        scene_probe: Callable[[], SceneStyle | None] | None = None,
    ):
        self.config = config or EffectsConfig()
        self.enabled = True
        self.active: dict[int, Spawn] = {}
        self._clock = clock
        self._rng = rng or random.Random()
        self._scene_probe = scene_probe
        self._last_accepted_ms: float | None = None
        self._ids = itertools.count(1)

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def configure(self, **patch) -> EffectsConfig:
        self.config = dataclasses.replace(self.config, **patch)
        return self.config

    def mountain_active(self) -> bool:
        if self._scene_probe is None:
            return False
        return is_scene_visible(self._scene_probe())

    def random_position(self, viewport: Viewport) -> tuple[float, float]:
        margin_x = max(20, viewport.width * 0.05)
        margin_y = max(20, viewport.height * 0.05)
        x = margin_x + self._rng.random() * (viewport.width - margin_x * 2)
        y = margin_y + self._rng.random() * (viewport.height - margin_y * 2)
        return x, y

    def choose_normal_emoji(self) -> str:
        pool = self.config.bird_emojis if self.mountain_active() else self.config.fish_emojis
        return pool[int(self._rng.random() * len(pool))]

    def spawn_at(self, x: float, y: float, emoji: str, is_boss: bool = False) -> Spawn | None:
        """Place one emoji. Non-boss spawns are refused at the concurrency cap."""
        if not self.enabled:
            return None
        if len(self.active) >= self.config.max_concurrency and not is_boss:
            return None

        spawn = Spawn(id=next(self._ids), emoji=emoji, x=x, y=y, is_boss=is_boss)
        if not is_boss:
            spawn.font_size_rem = 1.6 + self._rng.random() * 1.0
            spawn.duration_s = 1.5 + self._rng.random() * 0.8
        self.active[spawn.id] = spawn
        return spawn

    def spawn_normal(self, viewport: Viewport) -> Spawn | None:
        x, y = self.random_position(viewport)
        return self.spawn_at(x, y, self.choose_normal_emoji())

    def spawn_boss(self, viewport: Viewport) -> Spawn | None:
        # the eagle is drawn like a normal spawn, so it counts against the cap
        x, y = self.random_position(viewport)
        if self.mountain_active():
            return self.spawn_at(x, y, self.config.eagle_emoji, is_boss=False)
        return self.spawn_at(x, y, self.config.shark_emoji, is_boss=True)

    def on_keydown(self, event: KeyEvent, viewport: Viewport) -> Spawn | None:
        if not self.enabled:
            return None
        if event.repeat or event.has_modifier:
            return None

        now_ms = self._clock() * 1000
        if self._last_accepted_ms is not None and now_ms - self._last_accepted_ms < self.config.min_interval_ms:
            return None
        self._last_accepted_ms = now_ms

        if event.key == "Enter":
            return self.spawn_boss(viewport)
        return self.spawn_normal(viewport)

    def on_animation_end(self, spawn_id: int) -> bool:
        return self.active.pop(spawn_id, None) is not None
