"""
===============================================================================
AIMS - Orbital Element and State Representations
===============================================================================
Immutable value types exchanged between the engine's components:

    OrbitalElements -- classical Keplerian element set of one tracked body
    StateVector     -- position (AU) / velocity (km/s) snapshot at an instant

The sign of the semi-major axis encodes the orbit family:

    a > 0  <=>  0 <= e < 1     (elliptical)
    a < 0  <=>  e >= 1         (hyperbolic; e == 1 is rejected at evaluation)
===============================================================================
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any, Dict

import numpy as np

from aims.core.exceptions import InvalidOrbitalElements


# =============================================================================
# ORBITAL ELEMENTS
# =============================================================================

@dataclass(frozen=True)
class OrbitalElements:
    """
    Keplerian orbital elements of a body orbiting the Sun.

    Attributes
    ----------
    a : float
        Semi-major axis (AU). Negative for hyperbolic orbits.
    e : float
        Eccentricity (dimensionless).
    i : float
        Inclination to the ecliptic (deg).
    omega : float
        Argument of periapsis (deg).
    Omega : float
        Longitude of the ascending node (deg).
    M : float
        Mean anomaly at epoch (deg). No default: every element set must
        state it explicitly.
    epoch : float
        Julian date at which ``M`` is valid.

    Raises
    ------
    InvalidOrbitalElements
        If any field is non-finite, ``a == 0``, ``e < 0``, or the sign of
        ``a`` disagrees with the orbit family implied by ``e``.
    """
    a: float
    e: float
    i: float
    omega: float
    Omega: float
    M: float
    epoch: float

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise InvalidOrbitalElements(
                    f"Orbital element '{f.name}' must be a number, got {value!r}"
                ) from None
            if not math.isfinite(value):
                raise InvalidOrbitalElements(
                    f"Orbital element '{f.name}' must be finite, got {value}"
                )
            object.__setattr__(self, f.name, value)

        if self.a == 0.0:
            raise InvalidOrbitalElements("Semi-major axis must be non-zero.")
        if self.e < 0.0:
            raise InvalidOrbitalElements(f"Eccentricity must be >= 0, got {self.e}")
        if (self.a < 0.0) != (self.e >= 1.0):
            raise InvalidOrbitalElements(
                f"Sign of a ({self.a}) is inconsistent with e ({self.e}): "
                "a < 0 is required exactly when e >= 1."
            )

    @property
    def is_hyperbolic(self) -> bool:
        """True for open (e >= 1) orbits."""
        return self.e >= 1.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrbitalElements':
        """
        Build an element set from a mapping such as a YAML body entry.

        All seven keys (a, e, i, omega, Omega, M, epoch) are required.
        """
        required = [f.name for f in fields(cls)]
        missing = [key for key in required if key not in data]
        if missing:
            raise InvalidOrbitalElements(f"Missing orbital elements: {missing}")
        unknown = sorted(set(data) - set(required))
        if unknown:
            raise InvalidOrbitalElements(f"Unknown orbital element keys: {unknown}")
        return cls(**{key: data[key] for key in required})

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# =============================================================================
# STATE VECTOR
# =============================================================================

@dataclass(frozen=True)
class StateVector:
    """
    Heliocentric ecliptic state of a body at one instant.

    Transient: recomputed on every query and never persisted.

    Attributes
    ----------
    position : np.ndarray
        3-element position vector (AU).
    velocity : np.ndarray
        3-element velocity vector (km/s).
    """
    position: np.ndarray
    velocity: np.ndarray

    def __post_init__(self):
        for name in ('position', 'velocity'):
            vec = np.array(getattr(self, name), dtype=np.float64)
            if vec.shape != (3,):
                raise ValueError(f"{name} must be a 3-vector, got shape {vec.shape}")
            vec.setflags(write=False)
            object.__setattr__(self, name, vec)

    @property
    def r_mag(self) -> float:
        """Heliocentric distance (AU)."""
        return float(np.linalg.norm(self.position))

    @property
    def v_mag(self) -> float:
        """Speed (km/s)."""
        return float(np.linalg.norm(self.velocity))
