"""
===============================================================================
AIMS - Position Service
===============================================================================
Evaluates the state-vector computer for every body in the registry at one
instant, producing the ``name -> position`` map broadcast by the simulator.

Time scales:
    epoch milliseconds (Unix)  ->  Julian date
    JD = ms / 86 400 000 + 2440587.5

The service is a pure function of time and the static registry; it keeps
no cache. When a live-ephemeris collaborator supplies fresher positions,
``merge_live_positions`` lets those values take precedence while the
computed positions remain the fallback.
===============================================================================
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Sequence, Tuple

import numpy as np

from aims.core.constants import JD_UNIX_EPOCH, MS_PER_DAY
from aims.dynamics.orbital_elements import OrbitalElements, StateVector
from aims.dynamics.orbital_mechanics import StateVectorComputer

logger = logging.getLogger(__name__)

Position = Tuple[float, float, float]


def julian_date_from_unix_ms(epoch_ms: float) -> float:
    """Julian date of a Unix timestamp given in milliseconds."""
    return epoch_ms / MS_PER_DAY + JD_UNIX_EPOCH


def unix_ms_from_julian_date(julian_date: float) -> float:
    """Unix timestamp (ms) of a Julian date."""
    return (julian_date - JD_UNIX_EPOCH) * MS_PER_DAY


class PositionService:
    """
    Positions of all registered bodies at a given instant.

    Parameters
    ----------
    registry : Mapping[str, OrbitalElements]
        Static element registry, e.g. ``default_config().bodies``.
    computer : StateVectorComputer, optional
        State-vector computer. Defaults to a Sun-centred one.
    """

    def __init__(
        self,
        registry: Mapping[str, OrbitalElements],
        computer: Optional[StateVectorComputer] = None,
    ) -> None:
        self.registry = registry
        self.computer = computer if computer is not None else StateVectorComputer()

    @classmethod
    def from_config(cls, config) -> 'PositionService':
        """Build a service from an :class:`aims.core.config.AimsConfig`."""
        computer = StateVectorComputer(mu=config.mu, central_mass=config.central_mass)
        return cls(config.bodies, computer)

    @property
    def body_names(self) -> Sequence[str]:
        return list(self.registry)

    def state_of(self, name: str, epoch_ms: float) -> StateVector:
        """State vector of a single registered body."""
        if name not in self.registry:
            raise KeyError(f"Unknown body: {name}. Valid: {list(self.registry)}")
        jd = julian_date_from_unix_ms(epoch_ms)
        return self.computer.position_and_velocity_at_time(self.registry[name], jd)

    def current_states(self, epoch_ms: float) -> Dict[str, StateVector]:
        """State vectors of every registered body at *epoch_ms*."""
        jd = julian_date_from_unix_ms(epoch_ms)
        states = {}
        for name, elements in self.registry.items():
            states[name] = self.computer.position_and_velocity_at_time(elements, jd)
        logger.debug("Computed %d body states at JD %.5f", len(states), jd)
        return states

    def current_positions(self, epoch_ms: float) -> Dict[str, Position]:
        """
        Heliocentric ecliptic positions (AU) of every registered body.

        Args:
            epoch_ms: Evaluation instant as a Unix timestamp in milliseconds.

        Returns:
            Mapping ``name -> (x, y, z)`` in AU, including the hyperbolic
            interstellar object.
        """
        return {
            name: tuple(float(c) for c in state.position)
            for name, state in self.current_states(epoch_ms).items()
        }


def merge_live_positions(
    calculated: Mapping[str, Position],
    live: Optional[Mapping[str, Sequence[float]]],
) -> Dict[str, Position]:
    """
    Overlay live-ephemeris positions on engine-computed ones.

    A live value for a body replaces the computed value; bodies without a
    usable live value keep the computed position. Live entries that are
    not finite 3-vectors are skipped with a warning. Live-only bodies are
    added to the result.

    Args:
        calculated: Engine output of :meth:`PositionService.current_positions`.
        live: Positions (AU) fetched by a live-ephemeris collaborator, or None.

    Returns:
        Merged ``name -> (x, y, z)`` mapping.
    """
    merged = dict(calculated)
    if not live:
        return merged

    overrides = 0
    for name, position in live.items():
        try:
            vec = np.asarray(position, dtype=np.float64)
        except (TypeError, ValueError):
            vec = None
        if vec is None or vec.shape != (3,) or not np.all(np.isfinite(vec)):
            logger.warning("Ignoring malformed live position for %s: %r", name, position)
            continue
        merged[name] = tuple(float(c) for c in vec)
        overrides += 1

    logger.debug("Merged %d live positions over %d calculated", overrides, len(calculated))
    return merged
