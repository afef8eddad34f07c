# physics.py
"""
Physics stepper: pairwise gravity, orbit assist and integration.

A step reads one snapshot of the store (positions, masses, radii), sums
every ordered pair's velocity increment from that snapshot, and only then
moves the bodies. Because no pair contribution depends on another pair's
result, the whole pass is computed as (n, n) numpy arrays instead of a
Python double loop; the outcome matches the sequential pair loop up to
floating-point summation order.
"""
from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from bodies import BodyStore
from config import ASSIST_KICK, ASSIST_MASS_RATIO, ASSIST_RANGE, G, SimConfig
from errors import DegenerateStep, InvalidTimestep


def _pair_geometry(positions: np.ndarray, radii: np.ndarray):
    # dirs[i, j] points from body i to body j
    dirs = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
    dist_sq = np.einsum("ijk,ijk->ij", dirs, dirs)
    reach_sq = (radii[:, np.newaxis] + radii[np.newaxis, :]) ** 2
    # Touching or overlapping pairs are inert; the diagonal always is.
    active = dist_sq > reach_sq
    np.fill_diagonal(active, False)
    safe_sq = np.where(active, dist_sq, 1.0)
    return dirs, safe_sq, np.sqrt(safe_sq), active


def pair_force_magnitudes(positions: np.ndarray, masses: np.ndarray, radii: np.ndarray,
                          g: float = G) -> np.ndarray:
    """(n, n) matrix of G*m_i*m_j/d^2, zero for gated pairs and the diagonal."""
    _, safe_sq, _, active = _pair_geometry(positions, radii)
    return np.where(active, g * np.outer(masses, masses) / safe_sq, 0.0)


def pairwise_accelerations(positions: np.ndarray,
                           masses: np.ndarray,
                           radii: np.ndarray,
                           g: float = G,
                           assist_range: float = ASSIST_RANGE,
                           assist_mass_ratio: float = ASSIST_MASS_RATIO,
                           assist_kick: float = ASSIST_KICK) -> Tuple[np.ndarray, np.ndarray]:
    """
    Per-body velocity increments for one step.

    Returns ``(gravity, assist)``, both shaped (n, 2). ``gravity`` is the
    sum over j of normalize(p_j - p_i) * force_mag / m_i. ``assist`` is the
    orbit-assist kick: for each j closer than ``assist_range`` and heavier
    than ``assist_mass_ratio`` times m_i, a push of ``assist_kick`` along
    the direction to j rotated by 90 degrees. The assist is evaluated from
    i's side only, so a heavy body never gets kicked by a light one.
    """
    positions = np.asarray(positions, dtype=float).reshape(-1, 2)
    masses = np.asarray(masses, dtype=float)
    radii = np.asarray(radii, dtype=float)

    dirs, safe_sq, dist, active = _pair_geometry(positions, radii)
    units = dirs / dist[..., np.newaxis]

    force_mag = np.where(active, g * np.outer(masses, masses) / safe_sq, 0.0)
    gravity = np.sum(units * (force_mag / masses[:, np.newaxis])[..., np.newaxis], axis=1)

    dominant = masses[np.newaxis, :] > assist_mass_ratio * masses[:, np.newaxis]
    kicked = active & (dist < assist_range) & dominant
    tangents = np.stack([-units[..., 1], units[..., 0]], axis=-1)
    assist = assist_kick * np.sum(tangents * kicked[..., np.newaxis], axis=1)

    return gravity, assist


def step(store: BodyStore, dt: float, config: Optional[SimConfig] = None) -> None:
    """
    Advances every body in ``store`` by one step of ``dt`` seconds.

    Velocity increments from gravity and the orbit assist are not scaled by
    ``dt`` unless ``config.scale_velocity_by_dt`` is set; positions always
    move by ``velocity * dt`` using the velocities after the full pair pass.
    ``dt`` is neither clamped nor subdivided.
    """
    if not np.isfinite(dt):
        raise InvalidTimestep(f"dt must be finite, got {dt!r}")
    if config is None:
        config = store.config
    if len(store) == 0:
        return

    positions, velocities, masses, radii = store.snapshot()

    with np.errstate(over="ignore", invalid="ignore"):
        gravity, assist = pairwise_accelerations(
            positions, masses, radii,
            g=config.g,
            assist_range=config.assist_range,
            assist_mass_ratio=config.assist_mass_ratio,
            assist_kick=config.assist_kick,
        )
        delta_v = gravity + assist
        if config.scale_velocity_by_dt:
            delta_v = delta_v * dt
        velocities = velocities + delta_v
        positions = positions + velocities * dt

    if not (np.all(np.isfinite(velocities)) and np.all(np.isfinite(positions))):
        bad = np.flatnonzero(~(np.isfinite(velocities).all(axis=1) & np.isfinite(positions).all(axis=1)))
        raise DegenerateStep(f"non-finite state for bodies {bad.tolist()} after step (dt={dt!r})")

    store.write_back(positions, velocities)
