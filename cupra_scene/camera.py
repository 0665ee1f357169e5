"""Orbiting camera that looks at a fixed centre from a fixed distance."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from cupra_scene.geometry import identity, perspective, rotate, translate

_SNAP_EPSILON = 0.1


def _approach(current: float, expected: float, speed: float) -> float:
    diff = math.fmod(expected - current + 540.0, 360.0) - 180.0
    if abs(diff) <= speed + _SNAP_EPSILON:
        return expected
    step = speed if diff > 0 else -speed
    return math.fmod(current + step + 360.0, 360.0)


@dataclass
class Camera:
    """Camera described by Euler angles in degrees around a centre point."""

    centre: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.5, 0.0]))
    distance: float = 12.0
    ra: float = 1.0
    fov_original: float = -1.0
    fov: float = 0.0
    znear: float = 5.0
    zfar: float = 100.0
    rot_x: float = 20.0
    rot_y: float = 25.0
    rot_z: float = 0.0
    expected_x: float = 0.0
    expected_y: float = 0.0
    expected_z: float = 0.0
    rotation_speed: float = 2.0
    mouse_x: int = 0
    mouse_y: int = 0
    test_active: bool = False
    vrp: np.ndarray = field(default_factory=lambda: np.zeros(3))
    obs: np.ndarray = field(default_factory=lambda: np.zeros(3))
    view_distance: float = 0.0
    radius: float = 0.0

    def __post_init__(self) -> None:
        self.centre = np.asarray(self.centre, dtype=np.float64)
        self.update()

    def update(self) -> None:
        """Recompute the reference point, observer position and field of view."""
        self.vrp = self.centre.copy()
        self.obs = self.centre + np.array([0.0, 0.0, self.distance])
        self.view_distance = float(np.linalg.norm(self.vrp - self.obs))
        self.radius = self.view_distance / 2
        if self.ra > 1:
            self.fov = 2 * math.asin(self.radius / self.view_distance)
        else:
            self.fov = 2 * math.atan(math.tan(self.fov_original / 2) / self.ra)
        if self.fov_original == -1:
            self.fov_original = self.fov

    def approach_expected(self) -> None:
        """Turn each angle one step towards its expected value, taking the short way round."""
        self.rot_x = _approach(self.rot_x, self.expected_x, self.rotation_speed)
        self.rot_y = _approach(self.rot_y, self.expected_y, self.rotation_speed)
        self.rot_z = _approach(self.rot_z, self.expected_z, self.rotation_speed)

    def view_matrix(self) -> np.ndarray:
        """View transform: back off along z, then rotate about z, x and y around the centre."""
        view = translate(identity(), (0.0, 0.0, -float(np.linalg.norm(self.vrp - self.obs))))
        view = rotate(view, math.radians(self.rot_z), (0, 0, 1))
        view = rotate(view, math.radians(self.rot_x), (1, 0, 0))
        view = rotate(view, math.radians(self.rot_y), (0, 1, 0))
        return translate(view, -self.vrp)

    def projection_matrix(self) -> np.ndarray:
        """Perspective projection for the current field of view and aspect ratio."""
        return perspective(self.fov, self.ra, self.znear, self.zfar)

    def resize(self, width: int, height: int) -> None:
        """Adapt the aspect ratio to a viewport of the given size."""
        if height <= 0:
            raise ValueError(f"viewport height must be positive, got {height}")
        self.ra = float(width) / float(height)
        self.update()

    def press(self, x: int, y: int) -> None:
        """Remember where a drag starts."""
        self.mouse_x = x
        self.mouse_y = y
        self.update()

    def drag(self, x: int, y: int) -> None:
        """Orbit by the mouse movement since the last position, unless a test is running.

        The pitch only changes while it stays strictly between 0 and 90 degrees.
        """
        if self.test_active:
            return
        self.rot_y += x - self.mouse_x
        next_x = self.rot_x + y - self.mouse_y
        if 0 < next_x < 90:
            self.rot_x = next_x
        self.mouse_x = x
        self.mouse_y = y
        self.rot_x = math.fmod(self.rot_x, 360)
        self.rot_y = math.fmod(self.rot_y, 360)
        self.rot_z = math.fmod(self.rot_z, 360)
        self.update()