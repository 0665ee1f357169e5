"""Animated scene state: the car, the walking figure, the road and the camera.

The scene holds everything that changes between frames. ``heartbeat`` advances
the animation by one tick; the ``*_transform`` methods give the model matrices
each object is drawn with. Delayed steps are handed to a scheduler callable
``schedule(delay_ms, callback)``; without one they are queued in ``pending``.
"""

from __future__ import annotations

import math
from enum import Enum, auto
from typing import Callable, Sequence

import numpy as np

from cupra_scene.camera import Camera
from cupra_scene.geometry import identity, rotate, scale, translate

Callback = Callable[[], None]
Scheduler = Callable[[int, Callback], None]

HEARTBEAT_MS = 10
STEP_DELAY_MS = 2000
TIME_STEP = 0.025


class HouseScene:
    """The basic scene: a little house that grows and shrinks with the S and D keys."""

    SCALE_STEP = 0.05

    def __init__(self) -> None:
        self.scale = 1.0

    def key_press(self, key: str) -> bool:
        """Handle a key; return False if the key is ignored."""
        match key.upper():
            case "S":
                self.scale += self.SCALE_STEP
            case "D":
                self.scale -= self.SCALE_STEP
            case _:
                return False
        return True

    def model_matrix(self) -> np.ndarray:
        """Uniform scaling by the current scale factor."""
        return scale(identity(), self.scale)


class WalkPhase(Enum):
    """Stages of the figure's walk."""

    ARRIVE = auto()
    BACK_OFF = auto()
    RETURN = auto()
    ENTER_CAR = auto()


class Scene:
    """Animation state of the car scene."""

    def __init__(self, schedule: Scheduler | None = None) -> None:
        self.camera = Camera()
        self.time = 0.0

        self.light_position = np.array([0.0, 10.0, 0.0])
        self.light_color = np.array([1.0, 1.0, 1.0])
        self.ambient_light = np.array([0.05, 0.05, 0.05])

        self.cupra_position = np.zeros(3)
        self.cupra_rotation_y = 0.0
        self.cupra_scale = 1.0

        self.background_position = np.array([0.0, 2.0, 0.0])
        self.background_scale = np.array([1.0, 1.0, 1.0])
        self.background2_position = np.array([0.0, 2.0, 0.0])
        self.background2_scale = np.array([1.1, 2.0, 1.1])

        self.road_position = np.array([0.0, 0.01, 0.0])
        self.road_speed = -0.1
        self.road_moving = False

        self.legoman_position = np.array([10.0, 0.0, 0.0])
        self.legoman_rotation_y = -90.0
        self.legoman_speed = 0.04
        self.legoman_scale = 0.0
        self.walking: set[WalkPhase] = set()

        self.signals_received = 0
        self.next_listeners: list[Callback] = []
        self.pending: list[tuple[int, Callback]] = []
        self._schedule: Scheduler = schedule or self._queue

    def _queue(self, delay_ms: int, callback: Callback) -> None:
        self.pending.append((delay_ms, callback))

    def _emit_next(self) -> None:
        for listener in list(self.next_listeners):
            listener()

    def start_widget(self) -> None:
        """Advance the story by one step; later steps start after a delay."""
        step = self.signals_received
        if step == 0:
            self.legoman_position = np.array([10.0, 0.0, 0.0])
            self.legoman_scale = 1.0
            self.camera.test_active = True
            self.walking.add(WalkPhase.ARRIVE)
            self.camera.expected_x = -173 + 180
            self.camera.expected_y = 256
        elif step == 1:
            self._schedule(STEP_DELAY_MS, self.legoman_walk2)
        elif step == 2:
            self._schedule(STEP_DELAY_MS, self.legoman_walk3)
        elif step == 3:
            self._schedule(STEP_DELAY_MS, self.car_move)
        self.signals_received += 1

    def legoman_walk2(self) -> None:
        """Turn the figure around and let it walk away from the car."""
        self.legoman_rotation_y = 180.0
        self.camera.expected_x = -173 + 180
        self.camera.expected_y = 346 + 180
        self.walking.add(WalkPhase.BACK_OFF)

    def legoman_walk3(self) -> None:
        """Let the figure walk back towards the car."""
        self.legoman_rotation_y = 0.0
        self.camera.expected_x = 11
        self.camera.expected_y = 329
        self.walking.add(WalkPhase.RETURN)

    def car_move(self) -> None:
        """Start the road moving under the car."""
        self.camera.expected_x = 14
        self.camera.expected_y = 145
        self.road_moving = True

    def heartbeat(self) -> None:
        """Advance the animation by one tick."""
        self.time += TIME_STEP
        if self.camera.test_active:
            self.camera.approach_expected()

        if self.road_moving:
            self.road_position[2] = math.fmod(self.road_position[2] + self.road_speed, 4)

        pos = self.legoman_position
        speed = self.legoman_speed

        if WalkPhase.ARRIVE in self.walking:
            pos[0] -= speed
            if abs(pos[0]) < 2.5:
                self.walking.discard(WalkPhase.ARRIVE)
                self._emit_next()

        if WalkPhase.BACK_OFF in self.walking:
            pos[2] -= speed
            if abs(pos[2]) > 4:
                self.walking.discard(WalkPhase.BACK_OFF)
                self.legoman_rotation_y = -90.0
                self._emit_next()

        if WalkPhase.RETURN in self.walking:
            pos[2] += speed
            if pos[2] > 0.5:
                self.walking.discard(WalkPhase.RETURN)
                self.walking.add(WalkPhase.ENTER_CAR)
                self.legoman_rotation_y = -90.0

        if WalkPhase.ENTER_CAR in self.walking:
            pos[0] -= speed
            pos[1] += speed * 2
            self.legoman_scale -= 0.03
            if abs(pos[0]) < 1.1:
                self.walking.discard(WalkPhase.ENTER_CAR)
                self._emit_next()
                self.legoman_position = np.array([100.0, 100.0, 100.0])

        self.camera.update()

    def cupra_transform(self) -> np.ndarray:
        """Model matrix of the car."""
        transform = rotate(identity(), self.cupra_rotation_y, (0, 1, 0))
        transform = translate(transform, self.cupra_position)
        return scale(transform, self.cupra_scale)

    def legoman_transform(self) -> np.ndarray:
        """Model matrix of the walking figure."""
        transform = translate(identity(), self.legoman_position)
        transform = rotate(transform, math.radians(self.legoman_rotation_y), (0, 1, 0))
        return scale(transform, self.legoman_scale)

    def road_transform(self) -> np.ndarray:
        """Model matrix of the road."""
        return translate(identity(), self.road_position)

    def terrain_transform(self) -> np.ndarray:
        """Model matrix of the ground."""
        return identity()

    def background_transform(
        self, position: Sequence[float] | np.ndarray, factors: Sequence[float] | np.ndarray
    ) -> np.ndarray:
        """Model matrix of a background line placed at ``position`` and scaled by ``factors``."""
        return scale(translate(identity(), position), factors)