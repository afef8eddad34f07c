# errors.py


class SimulationError(Exception):
    """Base class for errors raised by the simulation core."""


class InvalidBody(SimulationError, ValueError):
    """A body was created with a mass or vector the physics cannot use."""


class InvalidTimestep(SimulationError, ValueError):
    """The elapsed time handed to the stepper is not a finite number."""


class DegenerateStep(SimulationError, ArithmeticError):
    """A step produced non-finite velocities or positions."""
