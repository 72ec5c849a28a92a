"""
Error taxonomy for the AIMS engine.

Every failure is a local, deterministic computation error raised
synchronously to the caller. The engine never retries: identical inputs
always reproduce the same divergence or domain failure.
"""


class AimsError(Exception):
    """Base class for every error raised by the engine."""


class InvalidOrbitalElements(AimsError, ValueError):
    """Non-finite or domain-violating orbital elements (``a``, ``e``, ...)."""


class UnsupportedOrbitType(AimsError, ValueError):
    """Orbit family the engine cannot evaluate (parabolic, ``e == 1``)."""


class NumericalDivergence(AimsError, RuntimeError):
    """An iterative solver exceeded its iteration cap or left the reals.

    Attributes
    ----------
    iterations : int
        Number of iterations performed before giving up.
    last_step : float
        Magnitude of the final Newton step.
    """

    def __init__(self, message: str, iterations: int = 0, last_step: float = float("nan")):
        super().__init__(message)
        self.iterations = iterations
        self.last_step = last_step


class InvalidMissionConfig(AimsError, ValueError):
    """Unknown propulsion type, malformed payload, or bad mission numbers."""
