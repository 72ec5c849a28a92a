"""
===============================================================================
AIMS - Interceptor Trajectory Estimator
===============================================================================
Delta-V, propellant and success-likelihood estimates for an interceptor
flying between two heliocentric positions in a given time.

This is a simulation-grade estimator, not a transfer solver:

    - delta-V uses an average-radius vis-viva heuristic. It ignores the
      orientation and phasing of the transfer, i.e. it is *not* a Lambert
      solution.
    - the sampled path is a straight-line interpolation between the two
      positions at constant velocity, not gravitational motion.
    - acceleration is reported as zero at every sample.

Sign conventions and units:
    - Positions in AU at the interface, meters internally
    - Velocities in km/s on trajectory points, m/s for delta-V
    - Masses in kg, Isp in seconds, time stamps in Unix milliseconds
    - Rocket-equation gravity g0 = 9.81 m/s^2
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from aims.core.constants import AU, G0, SUN_MU, YEAR
from aims.core.exceptions import InvalidMissionConfig
from aims.guidance.mission_config import MissionConfig, PropulsionType, parse_propulsion_type

logger = logging.getLogger(__name__)

# Number of interpolation intervals; the trajectory carries N_STEPS + 1 points.
N_STEPS = 100

# Intercept-probability model
BASE_PROBABILITY = 0.85
PROBABILITY_FLOOR = 0.10
PROBABILITY_CEILING = 0.99

# Default propulsion catalogue: Isp (s) and probability factor.
DEFAULT_ISP = {
    PropulsionType.CHEMICAL: 450.0,
    PropulsionType.ION: 3000.0,
    PropulsionType.NUCLEAR: 900.0,
}
DEFAULT_RELIABILITY = {
    PropulsionType.CHEMICAL: 0.90,
    PropulsionType.ION: 0.95,
    PropulsionType.NUCLEAR: 0.85,
}


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass(frozen=True)
class TrajectoryPoint:
    """
    One sample of the interceptor path.

    Attributes
    ----------
    time : float
        Unix timestamp (ms).
    position : tuple of float
        Heliocentric position (AU).
    velocity : tuple of float
        Velocity (km/s).
    fuel_mass : float
        Propellant remaining (kg).
    acceleration : tuple of float
        Acceleration (m/s^2).
    """
    time: float
    position: Tuple[float, float, float]
    velocity: Tuple[float, float, float]
    fuel_mass: float
    acceleration: Tuple[float, float, float]


@dataclass(frozen=True)
class InterceptorTrajectory:
    """
    Complete interceptor estimate, produced atomically by one call to
    :meth:`TrajectoryEstimator.build_trajectory`.

    Attributes
    ----------
    points : tuple of TrajectoryPoint
        Exactly N_STEPS + 1 samples, ordered in time.
    total_delta_v : float
        m/s.
    total_fuel_used : float
        kg.
    flight_time : float
        s.
    intercept_probability : float
        In [0.10, 0.99].
    """
    points: Tuple[TrajectoryPoint, ...]
    total_delta_v: float
    total_fuel_used: float
    flight_time: float
    intercept_probability: float

    def positions(self) -> np.ndarray:
        """(N, 3) array of sample positions (AU)."""
        return np.array([p.position for p in self.points])

    def to_dataframe(self) -> pd.DataFrame:
        """One row per trajectory point."""
        return pd.DataFrame({
            'time_ms': [p.time for p in self.points],
            'x_au': [p.position[0] for p in self.points],
            'y_au': [p.position[1] for p in self.points],
            'z_au': [p.position[2] for p in self.points],
            'vx_kms': [p.velocity[0] for p in self.points],
            'vy_kms': [p.velocity[1] for p in self.points],
            'vz_kms': [p.velocity[2] for p in self.points],
            'fuel_mass_kg': [p.fuel_mass for p in self.points],
            'ax_ms2': [p.acceleration[0] for p in self.points],
            'ay_ms2': [p.acceleration[1] for p in self.points],
            'az_ms2': [p.acceleration[2] for p in self.points],
        })


def _as_position(vec: Sequence[float], name: str) -> np.ndarray:
    arr = np.asarray(vec, dtype=np.float64)
    if arr.shape != (3,) or not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} must be a finite 3-vector, got {vec!r}")
    return arr


# =============================================================================
# ESTIMATOR
# =============================================================================

class TrajectoryEstimator:
    """
    Computes delta-V, propellant and intercept-likelihood estimates.

    The estimator is stateless apart from its read-only tables.

    Typical usage:
        estimator = TrajectoryEstimator()
        traj = estimator.build_trajectory(
            [1.0, 0.0, 0.0], [1.524, 0.0, 0.0], 200 * 86400.0,
            MissionConfig(PropulsionType.CHEMICAL, {PayloadItem.CAMERA}),
            reference_instant=1_700_000_000_000,
        )
    """

    def __init__(
        self,
        mu: float = SUN_MU,
        dry_mass: float = 1000.0,
        isp: Optional[Mapping[str, float]] = None,
        reliability: Optional[Mapping[str, float]] = None,
    ) -> None:
        """
        Parameters
        ----------
        mu : float
            Gravitational parameter of the central body (m^3/s^2).
        dry_mass : float
            Interceptor dry mass (kg).
        isp : mapping, optional
            Propulsion type -> specific impulse (s).
        reliability : mapping, optional
            Propulsion type -> intercept-probability factor.
        """
        if dry_mass <= 0.0:
            raise ValueError(f"Dry mass must be positive, got {dry_mass}")
        self.mu = mu
        self.dry_mass = dry_mass
        self.isp = self._keyed(isp, DEFAULT_ISP)
        self.reliability = self._keyed(reliability, DEFAULT_RELIABILITY)

    @staticmethod
    def _keyed(table, default):
        if table is None:
            return dict(default)
        return {parse_propulsion_type(key): float(value) for key, value in table.items()}

    @classmethod
    def from_config(cls, config) -> 'TrajectoryEstimator':
        """Build an estimator from an :class:`aims.core.config.AimsConfig`."""
        return cls(
            mu=config.mu,
            dry_mass=config.dry_mass,
            isp={name: p.isp for name, p in config.propulsion.items()},
            reliability={name: p.reliability for name, p in config.propulsion.items()},
        )

    # -------------------------------------------------------------------------
    # Delta-V
    # -------------------------------------------------------------------------

    def estimate_delta_v(self, r1: Sequence[float], r2: Sequence[float]) -> float:
        """
        Average-radius vis-viva delta-V estimate between two positions.

        Equations:
            Transfer semi-major axis:
                a_t = (|r1| + |r2|) / 2

            Transfer-orbit speeds:
                v1 = sqrt(mu * (2/|r1| - 1/a_t))
                v2 = sqrt(mu * (2/|r2| - 1/a_t))

            Circular reference speeds:
                v_c1 = sqrt(mu / |r1|)
                v_c2 = sqrt(mu / |r2|)

            dV = |v1 - v_c1| + |v2 - v_c2|

        The transfer geometry (angle between r1 and r2, flight time) is not
        considered.

        Args:
            r1: Departure position (m).
            r2: Arrival position (m).

        Returns:
            Total delta-V (m/s).
        """
        r1_mag = float(np.linalg.norm(_as_position(r1, 'r1')))
        r2_mag = float(np.linalg.norm(_as_position(r2, 'r2')))
        if r1_mag == 0.0 or r2_mag == 0.0:
            raise ValueError("Position is at the origin; delta-V is undefined.")

        a_transfer = (r1_mag + r2_mag) / 2.0

        v1 = np.sqrt(self.mu * (2.0 / r1_mag - 1.0 / a_transfer))
        v2 = np.sqrt(self.mu * (2.0 / r2_mag - 1.0 / a_transfer))

        v_circ_1 = np.sqrt(self.mu / r1_mag)
        v_circ_2 = np.sqrt(self.mu / r2_mag)

        dv1 = abs(v1 - v_circ_1)
        dv2 = abs(v2 - v_circ_2)

        logger.debug(
            "Delta-V estimate: r1=%.4e m, r2=%.4e m, dv1=%.1f m/s, dv2=%.1f m/s",
            r1_mag, r2_mag, dv1, dv2,
        )
        return float(dv1 + dv2)

    # -------------------------------------------------------------------------
    # Propellant
    # -------------------------------------------------------------------------

    @staticmethod
    def fuel_mass(delta_v: float, isp: float, dry_mass: float) -> float:
        """
        Propellant mass from the Tsiolkovsky rocket equation.

            v_e = Isp * g0
            m_prop = m_dry * (exp(dV / v_e) - 1)

        Args:
            delta_v: Required delta-V (m/s), >= 0.
            isp: Specific impulse (s), > 0.
            dry_mass: Dry mass (kg), > 0.

        Returns:
            Propellant mass (kg).
        """
        if delta_v < 0.0:
            raise ValueError(f"Delta-V must be non-negative, got {delta_v}")
        if isp <= 0.0 or dry_mass <= 0.0:
            raise ValueError("Isp and dry mass must both be positive.")
        ve = isp * G0
        mass_ratio = np.exp(delta_v / ve)
        return float(dry_mass * (mass_ratio - 1.0))

    # -------------------------------------------------------------------------
    # Intercept probability
    # -------------------------------------------------------------------------

    def intercept_probability(
        self,
        delta_v: float,
        flight_time: float,
        propulsion_type: PropulsionType,
    ) -> float:
        """
        Heuristic likelihood that the intercept succeeds.

        Starting from 0.85:
            x 0.7   if dV > 15 km/s,  else x 0.85 if dV > 10 km/s
            x 0.8   if flight > 2 yr, else x 0.9  if flight > 1 yr
            x propulsion factor (chemical 0.9, ion 0.95, nuclear 0.85)
        clamped to [0.10, 0.99].

        Raises:
            InvalidMissionConfig: For an unknown propulsion type.
        """
        propulsion_type = parse_propulsion_type(propulsion_type)
        if propulsion_type not in self.reliability:
            raise InvalidMissionConfig(
                f"No reliability factor configured for propulsion '{propulsion_type.value}'"
            )

        probability = BASE_PROBABILITY

        if delta_v > 15000.0:
            probability *= 0.7
        elif delta_v > 10000.0:
            probability *= 0.85

        flight_time_years = flight_time / YEAR
        if flight_time_years > 2.0:
            probability *= 0.8
        elif flight_time_years > 1.0:
            probability *= 0.9

        probability *= self.reliability[propulsion_type]

        return float(max(PROBABILITY_FLOOR, min(PROBABILITY_CEILING, probability)))

    # -------------------------------------------------------------------------
    # Full trajectory
    # -------------------------------------------------------------------------

    def build_trajectory(
        self,
        start_position: Sequence[float],
        target_position: Sequence[float],
        flight_time: float,
        config: MissionConfig,
        reference_instant: float,
    ) -> InterceptorTrajectory:
        """
        Estimate the interceptor trajectory between two positions.

        Args:
            start_position: Departure position (AU).
            target_position: Arrival position (AU).
            flight_time: Time of flight (s), > 0.
            config: Mission configuration; selects the propulsion system.
            reference_instant: Departure time stamp (Unix ms). Sample i is
                stamped reference_instant + (i / N) * flight_time * 1000.

        Returns:
            InterceptorTrajectory with N_STEPS + 1 points.

        Raises:
            InvalidMissionConfig: If the propulsion type has no catalogue entry.
            ValueError: For non-finite positions or a non-positive flight time.
        """
        try:
            if not np.isfinite(flight_time) or flight_time <= 0.0:
                raise ValueError(f"Time of flight must be positive, got {flight_time}")
            if not np.isfinite(reference_instant):
                raise ValueError(f"Reference instant must be finite, got {reference_instant}")

            propulsion_type = parse_propulsion_type(config.propulsion_type)
            if propulsion_type not in self.isp:
                raise InvalidMissionConfig(
                    f"No specific impulse configured for propulsion '{propulsion_type.value}'"
                )

            logger.info(
                "Calculating intercept trajectory: start=%s AU, target=%s AU, "
                "tof=%.1f days, propulsion=%s",
                list(start_position), list(target_position),
                flight_time / 86400.0, propulsion_type.value,
            )

            r1 = _as_position(start_position, 'start_position') * AU
            r2 = _as_position(target_position, 'target_position') * AU

            total_delta_v = self.estimate_delta_v(r1, r2)
            total_fuel = self.fuel_mass(total_delta_v, self.isp[propulsion_type], self.dry_mass)

            velocity = tuple(float(c) for c in (r2 - r1) / flight_time / 1000.0)
            acceleration = (0.0, 0.0, 0.0)

            points = []
            for i in range(N_STEPS + 1):
                t = i / N_STEPS
                position = (r1 + t * (r2 - r1)) / AU
                points.append(TrajectoryPoint(
                    time=float(reference_instant + t * flight_time * 1000.0),
                    position=tuple(float(c) for c in position),
                    velocity=velocity,
                    fuel_mass=float(total_fuel * (1.0 - t)),
                    acceleration=acceleration,
                ))

            probability = self.intercept_probability(total_delta_v, flight_time, propulsion_type)
        except Exception:
            logger.error("Error calculating intercept trajectory", exc_info=True)
            raise

        logger.info(
            "Intercept estimate: dV=%.1f m/s, fuel=%.1f kg, P(intercept)=%.3f",
            total_delta_v, total_fuel, probability,
        )
        return InterceptorTrajectory(
            points=tuple(points),
            total_delta_v=total_delta_v,
            total_fuel_used=total_fuel,
            flight_time=float(flight_time),
            intercept_probability=probability,
        )
