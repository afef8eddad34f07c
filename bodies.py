# bodies.py
from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Iterator, List, Optional, Tuple

import numpy as np

from config import WORLD_CENTER, SimConfig
from errors import InvalidBody

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]

ASTEROID_COLOR = (160, 160, 160)
SUN_COLOR = (255, 255, 0)
EARTH_COLOR = (0, 128, 255)

ASTEROID_DISTANCE = (150.0, 350.0)
ASTEROID_MASS = (1.0, 5.0)
ASTEROID_SPEED = (10.0, 30.0)

PLANET_AREA = (800.0, 600.0)
PLANET_MASS = (1500.0, 2200.0)


def radius_for_mass(mass: float) -> float:
    """Collision radius of a disc of the given mass."""
    return math.sqrt(mass / math.pi) / 2.0


def _as_vector(value, label: str) -> np.ndarray:
    vec = np.array(value, dtype=float)
    if vec.shape != (2,):
        raise InvalidBody(f"{label} must be a 2D vector, got shape {vec.shape}")
    if not np.all(np.isfinite(vec)):
        raise InvalidBody(f"{label} must be finite, got {vec.tolist()}")
    return vec


class Body:
    """Representing body and its properties"""

    def __init__(self,
                 mass: float,
                 position: List[float] | np.ndarray,
                 velocity: List[float] | np.ndarray | None = None,
                 color: Color = ASTEROID_COLOR,
                 name: str = ""):
        """Creates body with initial property; radius is derived from mass"""
        if not np.isfinite(mass) or mass <= 0:
            raise InvalidBody(f"mass must be a positive finite number, got {mass!r}")
        self._mass = float(mass)
        self._radius = radius_for_mass(self._mass)
        self.position = _as_vector(position, "position")
        self.velocity = _as_vector(velocity if velocity is not None else (0.0, 0.0), "velocity")
        self.color = color
        self.name = name

    @property
    def mass(self) -> float:
        return self._mass

    @property
    def radius(self) -> float:
        return self._radius

    def __repr__(self) -> str:
        return (f"Body(mass={self._mass}, position={self.position.tolist()}, "
                f"velocity={self.velocity.tolist()}, radius={self._radius:.3f})")


class BodyStore:
    """
    Ordered, append-only collection of bodies.

    Bodies are only ever added (``add_body``) or replaced wholesale
    (``reset``); nothing is removed, so the store grows without bound as
    the host keeps spawning planets. The store keeps the random generator
    and config it was seeded with so resets and spawns draw from the same
    source.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, config: Optional[SimConfig] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.config = config if config is not None else SimConfig()
        self.bodies: List[Body] = []

    def __len__(self) -> int:
        return len(self.bodies)

    def __iter__(self) -> Iterator[Body]:
        return iter(self.bodies)

    def __getitem__(self, index: int) -> Body:
        return self.bodies[index]

    def add_body(self, position, mass: float, color: Color, name: str = "") -> Body:
        body = Body(mass, position, color=color, name=name)
        self.bodies.append(body)
        logger.debug("added body #%d mass=%.2f at %s", len(self.bodies) - 1, body.mass, body.position.tolist())
        return body

    def spawn_planet(self) -> Body:
        """Adds a planet-sized body at a random spot with a random color."""
        pos = (self.rng.uniform(0.0, PLANET_AREA[0]), self.rng.uniform(0.0, PLANET_AREA[1]))
        mass = self.rng.uniform(*PLANET_MASS)
        color = tuple(int(c) for c in self.rng.integers(0, 255, size=3))
        body = self.add_body(pos, mass, color, name="Planet")
        logger.info("spawned planet mass=%.1f, %d bodies total", mass, len(self.bodies))
        return body

    def reset(self) -> None:
        self.bodies.clear()
        self._populate()
        logger.info("store reset to %r preset (%d bodies)", self.config.preset, len(self.bodies))

    def _populate(self) -> None:
        preset = self.config.preset
        if preset.startswith("sun-earth"):
            self.bodies.extend(sun_earth_bodies())
        if preset in ("ring", "sun-earth+ring"):
            self.bodies.extend(asteroid_ring(self.rng, self.config.asteroid_count))

    def snapshot(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Copies of positions, velocities, masses and radii as arrays."""
        n = len(self.bodies)
        positions = np.empty((n, 2), dtype=float)
        velocities = np.empty((n, 2), dtype=float)
        masses = np.empty(n, dtype=float)
        radii = np.empty(n, dtype=float)
        for k, body in enumerate(self.bodies):
            positions[k] = body.position
            velocities[k] = body.velocity
            masses[k] = body.mass
            radii[k] = body.radius
        return positions, velocities, masses, radii

    def write_back(self, positions: np.ndarray, velocities: np.ndarray) -> None:
        for body, pos, vel in zip(self.bodies, positions, velocities):
            body.position = pos.copy()
            body.velocity = vel.copy()


def asteroid_ring(rng: np.random.Generator, count: int,
                  center: Tuple[float, float] = WORLD_CENTER) -> List[Body]:
    """Asteroids scattered around ``center`` drifting tangentially."""
    center_vec = np.array(center, dtype=float)
    asteroids = []
    for _ in range(count):
        angle = rng.uniform(0.0, 2 * np.pi)
        distance = rng.uniform(*ASTEROID_DISTANCE)
        pos = center_vec + distance * np.array([np.cos(angle), np.sin(angle)])
        mass = rng.uniform(*ASTEROID_MASS)
        asteroid = Body(mass, pos, color=ASTEROID_COLOR)

        to_center = center_vec - pos
        tangential = np.array([-to_center[1], to_center[0]]) / np.linalg.norm(to_center)
        asteroid.velocity = tangential * rng.uniform(*ASTEROID_SPEED)
        asteroids.append(asteroid)
    return asteroids


def sun_earth_bodies() -> List[Body]:
    sun = Body(10000.0, [400.0, 300.0], color=SUN_COLOR, name="Sun")
    earth = Body(100.0, [500.0, 300.0], [0.0, 80.0], color=EARTH_COLOR, name="Earth")
    return [sun, earth]


def create_default(rng: Optional[np.random.Generator] = None, config: Optional[SimConfig] = None) -> BodyStore:
    """
    Builds the starting population.

    With the default config this is the asteroid ring only; the Sun/Earth
    pair is added only when ``config.preset`` asks for it.
    """
    if rng is None and config is not None and config.seed is not None:
        rng = np.random.default_rng(config.seed)
    store = BodyStore(rng, config)
    store._populate()
    logger.info("created %r population with %d bodies", store.config.preset, len(store))
    return store


def create_sun_earth(config: Optional[SimConfig] = None) -> BodyStore:
    store = BodyStore(config=replace(config or SimConfig(), preset="sun-earth"))
    store.bodies.extend(sun_earth_bodies())
    return store


def add_body(store: BodyStore, position, mass: float, color: Color) -> Body:
    return store.add_body(position, mass, color)


def reset(store: BodyStore) -> None:
    store.reset()
