# main.py
import argparse
import logging

import numpy as np

import physics
from bodies import create_default
from config import SimConfig

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Toy interplanetary N-body simulator")
    SimConfig.add_cli_args(parser)
    parser.add_argument("--headless-steps", type=int, default=0,
                        help="run this many steps without a window and exit")
    parser.add_argument("--dt", type=float, default=1 / 60, help="step size for --headless-steps")
    return parser


def run_headless(config: SimConfig, steps: int, dt: float):
    """Steps the default population without opening a window."""
    store = create_default(config=config)
    for _ in range(steps):
        physics.step(store, dt, config)
    positions, velocities, _, _ = store.snapshot()
    speeds = np.linalg.norm(velocities, axis=1) if len(store) else np.zeros(0)
    logger.info("ran %d steps of dt=%g on %d bodies", steps, dt, len(store))
    if len(store):
        logger.info("centroid=%s mean speed=%.3f max speed=%.3f",
                    positions.mean(axis=0).round(3).tolist(), speeds.mean(), speeds.max())
    return store


def main(argv=None):
    """Main function to run the simulation."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = SimConfig.from_cli(args)
    config.validate()
    config.configure_logging()

    if args.headless_steps > 0:
        run_headless(config, args.headless_steps, args.dt)
        return

    import pygame
    from simulation import Simulation

    pygame.init()
    try:
        # Create a simulation instance and start the main loop
        Simulation(config).run()
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
