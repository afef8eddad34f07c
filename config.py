# config.py
from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, Optional

# Gravitational constant, scaled for screen units rather than SI
G = 6.67430e-5

ASSIST_RANGE = 150.0
ASSIST_MASS_RATIO = 5.0
ASSIST_KICK = 0.05

WORLD_CENTER = (400.0, 300.0)

PRESETS = ("ring", "sun-earth", "sun-earth+ring")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class SimConfig:
    # Window / host
    width: int = 1500
    height: int = 1200
    fps: int = 60

    # Population
    seed: Optional[int] = None
    asteroid_count: int = 200
    preset: str = "ring"

    # Physics
    g: float = G
    assist_range: float = ASSIST_RANGE
    assist_mass_ratio: float = ASSIST_MASS_RATIO
    assist_kick: float = ASSIST_KICK
    scale_velocity_by_dt: bool = False

    # Logging / misc
    log_level: str = "WARNING"

    # Extra / unknown fields
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def add_cli_args(cls, parser: argparse.ArgumentParser, include: Optional[Iterable[str]] = None) -> None:
        include_set = set(include) if include is not None else None

        def want(key: str) -> bool:
            return include_set is None or key in include_set

        add = parser.add_argument

        if want("window"):
            add("--width", type=int, default=cls.width, help="window width in pixels")
            add("--height", type=int, default=cls.height, help="window height in pixels")
            add("--fps", type=int, default=cls.fps, help="frame rate cap")

        if want("population"):
            add("--seed", type=int, default=cls.seed, help="random seed for the initial population")
            add("--asteroids", dest="asteroid_count", type=int, default=cls.asteroid_count,
                help="number of asteroids in the ring")
            add("--preset", type=str, choices=PRESETS, default=cls.preset, help="initial population")

        if want("physics"):
            add("--g", type=float, default=cls.g, help="gravitational constant (screen units)")
            add("--assist-range", type=float, default=cls.assist_range,
                help="distance below which the orbit assist kicks in")
            add("--assist-mass-ratio", type=float, default=cls.assist_mass_ratio,
                help="mass ratio a neighbour needs to trigger the orbit assist")
            add("--assist-kick", type=float, default=cls.assist_kick, help="tangential kick per step")
            add("--scale-velocity-by-dt", action="store_true",
                help="multiply gravity and assist velocity increments by dt")

        if want("logging"):
            add("--log-level", type=str.upper, choices=LOG_LEVELS, default=cls.log_level, help="logging level")

    @classmethod
    def from_cli(
        cls,
        parser_or_args: argparse.ArgumentParser | argparse.Namespace,
        *,
        include: Optional[Iterable[str]] = None,
        argv: Optional[Iterable[str]] = None,
    ) -> "SimConfig":
        if isinstance(parser_or_args, argparse.ArgumentParser):
            parser = parser_or_args
            cls.add_cli_args(parser, include=include)
            args = parser.parse_args(argv)
        else:
            args = parser_or_args
        return cls.from_dict(vars(args))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimConfig":
        payload = dict(data) if data is not None else {}
        field_names = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in payload.items():
            if key in field_names and key != "extra":
                kwargs[key] = value
            else:
                extra[key] = value
        kwargs["extra"] = extra
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def summary(self) -> str:
        return (
            f"preset={self.preset} asteroids={self.asteroid_count} seed={self.seed} "
            f"G={self.g} assist=({self.assist_range},{self.assist_mass_ratio},{self.assist_kick}) "
            f"scale_velocity_by_dt={self.scale_velocity_by_dt}"
        )

    def validate(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("window width and height must be > 0")
        if self.fps <= 0:
            raise ValueError("fps must be > 0")
        if self.asteroid_count < 0:
            raise ValueError("asteroid_count must be >= 0")
        if self.preset not in PRESETS:
            raise ValueError(f"unknown preset: {self.preset!r}")
        if self.assist_range < 0:
            raise ValueError("assist_range must be >= 0")
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {self.log_level!r}")

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=getattr(logging, str(self.log_level).upper()),
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )
