"""
===============================================================================
AIMS - Mission Planner
===============================================================================
End-to-end interceptor mission calculation:

    1. Positions of the departure and target bodies at launch
    2. Flight time from the straight-line distance and the propulsion
       system's mean cruise speed
    3. Interceptor trajectory estimate
    4. Advisory warnings on the result

Also validates a mission configuration against operational rules of thumb
(launch timing, payload / propulsion compatibility, fuel capacity) without
running the estimator.
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

import numpy as np

from aims.core.config import PropulsionSystem
from aims.core.constants import AU_KM, DAY
from aims.core.exceptions import InvalidMissionConfig
from aims.dynamics.ephemeris import PositionService, merge_live_positions
from aims.guidance.intercept_planner import InterceptorTrajectory, TrajectoryEstimator
from aims.guidance.mission_config import (
    MissionConfig,
    PayloadItem,
    PropulsionType,
    parse_propulsion_type,
)

logger = logging.getLogger(__name__)

DEFAULT_ORIGIN = 'Earth'
DEFAULT_TARGET = '3I/ATLAS'

# Mean transfer speeds (km/s) used when no catalogue is supplied.
DEFAULT_CRUISE_SPEED = {
    PropulsionType.CHEMICAL: 15.0,
    PropulsionType.ION: 8.0,
    PropulsionType.NUCLEAR: 25.0,
}

# Result warning thresholds
LOW_PROBABILITY_THRESHOLD = 0.5
HIGH_DELTA_V_THRESHOLD = 12000.0             # m/s
LONG_FLIGHT_THRESHOLD = 3 * 365 * DAY        # s

# Validation thresholds
FAR_FUTURE_LAUNCH_MS = 5 * 365 * DAY * 1000.0
LOW_CHEMICAL_FUEL_CAPACITY = 1000.0          # kg


@dataclass(frozen=True)
class MissionValidation:
    """Outcome of :meth:`MissionPlanner.validate`."""
    valid: bool
    warnings: Tuple[str, ...]


@dataclass(frozen=True)
class MissionCalculation:
    """
    Result of a full mission calculation.

    Attributes
    ----------
    trajectory : InterceptorTrajectory
    estimated_fuel_usage : float
        kg (same as trajectory.total_fuel_used).
    intercept_probability : float
        0-1.
    time_to_target : float
        s.
    warnings : tuple of str
    """
    trajectory: InterceptorTrajectory
    estimated_fuel_usage: float
    intercept_probability: float
    time_to_target: float
    warnings: Tuple[str, ...]


class MissionPlanner:
    """
    Composes the position service and the trajectory estimator.

    Parameters
    ----------
    positions : PositionService
    estimator : TrajectoryEstimator
    cruise_speeds : mapping, optional
        Propulsion type -> mean transfer speed (km/s).
    """

    def __init__(
        self,
        positions: PositionService,
        estimator: Optional[TrajectoryEstimator] = None,
        cruise_speeds: Optional[Mapping[str, float]] = None,
    ) -> None:
        self.positions = positions
        self.estimator = estimator if estimator is not None else TrajectoryEstimator()
        if cruise_speeds is None:
            self.cruise_speeds = dict(DEFAULT_CRUISE_SPEED)
        else:
            self.cruise_speeds = {
                parse_propulsion_type(key): float(value) for key, value in cruise_speeds.items()
            }

    @classmethod
    def from_config(cls, config) -> 'MissionPlanner':
        """Build a planner from an :class:`aims.core.config.AimsConfig`."""
        catalogue: Mapping[str, PropulsionSystem] = config.propulsion
        return cls(
            PositionService.from_config(config),
            TrajectoryEstimator.from_config(config),
            cruise_speeds={name: p.cruise_speed for name, p in catalogue.items()},
        )

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def validate(config: MissionConfig, now_ms: float) -> MissionValidation:
        """
        Advisory checks on a (structurally valid) mission configuration.

        Args:
            config: Mission configuration.
            now_ms: Current time (Unix ms) used for launch-window checks.

        Returns:
            MissionValidation with ``valid=True`` and any warnings.
        """
        warnings: List[str] = []

        if config.launch_window is not None:
            launch_ms = config.launch_window.timestamp() * 1000.0
            if launch_ms < now_ms:
                warnings.append('Launch window is in the past')
            if launch_ms > now_ms + FAR_FUTURE_LAUNCH_MS:
                warnings.append(
                    'Launch window is very far in the future - '
                    'orbital predictions may be inaccurate'
                )

        if PayloadItem.PROBE in config.payload and config.propulsion_type is PropulsionType.ION:
            warnings.append('Ion propulsion may not provide sufficient thrust for probe deployment')

        if (config.fuel_capacity is not None
                and config.fuel_capacity < LOW_CHEMICAL_FUEL_CAPACITY
                and config.propulsion_type is PropulsionType.CHEMICAL):
            warnings.append('Low fuel capacity for chemical propulsion system')

        for message in warnings:
            logger.warning("Mission validation: %s", message)
        return MissionValidation(valid=True, warnings=tuple(warnings))

    # -------------------------------------------------------------------------
    # Flight time
    # -------------------------------------------------------------------------

    def estimate_flight_time(
        self,
        start_position,
        target_position,
        propulsion_type: PropulsionType,
    ) -> float:
        """
        Straight-line flight time at the propulsion system's cruise speed.

            tof = |r2 - r1| [AU] * AU_KM / v_cruise [km/s]

        Returns:
            Flight time (s).
        """
        propulsion_type = parse_propulsion_type(propulsion_type)
        if propulsion_type not in self.cruise_speeds:
            raise InvalidMissionConfig(
                f"No cruise speed configured for propulsion '{propulsion_type.value}'"
            )
        distance = float(np.linalg.norm(
            np.asarray(target_position, dtype=np.float64)
            - np.asarray(start_position, dtype=np.float64)
        ))
        return distance * AU_KM / self.cruise_speeds[propulsion_type]

    # -------------------------------------------------------------------------
    # Full calculation
    # -------------------------------------------------------------------------

    def plan_intercept(
        self,
        config: MissionConfig,
        launch_ms: Optional[float] = None,
        origin: str = DEFAULT_ORIGIN,
        target: str = DEFAULT_TARGET,
        live_positions: Optional[Mapping[str, Tuple[float, float, float]]] = None,
    ) -> MissionCalculation:
        """
        Compute an intercept from *origin* to *target* launched at *launch_ms*.

        Args:
            config: Mission configuration.
            launch_ms: Launch instant (Unix ms). Falls back to
                ``config.launch_window``.
            origin: Departure body name.
            target: Target body name.
            live_positions: Optional live-ephemeris positions (AU) that
                override the computed ones.

        Returns:
            MissionCalculation including advisory warnings.

        Raises:
            InvalidMissionConfig: If no launch instant is available.
            KeyError: If origin or target is not a known body.
        """
        if launch_ms is None:
            if config.launch_window is None:
                raise InvalidMissionConfig(
                    "A launch instant is required: pass launch_ms or set launch_window"
                )
            launch_ms = config.launch_window.timestamp() * 1000.0

        logger.info(
            "Mission calculation requested: %s -> %s, propulsion=%s, payload=%s",
            origin, target, config.propulsion_type.value,
            sorted(item.value for item in config.payload),
        )

        positions = merge_live_positions(self.positions.current_positions(launch_ms), live_positions)
        for name in (origin, target):
            if name not in positions:
                raise KeyError(f"Unknown body: {name}. Valid: {sorted(positions)}")

        start = positions[origin]
        goal = positions[target]
        time_of_flight = self.estimate_flight_time(start, goal, config.propulsion_type)

        trajectory = self.estimator.build_trajectory(
            start, goal, time_of_flight, config, reference_instant=launch_ms,
        )

        warnings: List[str] = []
        if trajectory.intercept_probability < LOW_PROBABILITY_THRESHOLD:
            warnings.append('Low intercept probability - consider adjusting mission parameters')
        if trajectory.total_delta_v > HIGH_DELTA_V_THRESHOLD:
            warnings.append('High delta-V requirement - may exceed fuel capacity')
        if trajectory.flight_time > LONG_FLIGHT_THRESHOLD:
            warnings.append('Extended mission duration - consider reliability factors')

        for message in warnings:
            logger.warning("Mission calculation: %s", message)
        logger.info(
            "Mission calculation completed: P(intercept)=%.3f, flight time=%.1f days, "
            "%d warnings",
            trajectory.intercept_probability, trajectory.flight_time / DAY, len(warnings),
        )

        return MissionCalculation(
            trajectory=trajectory,
            estimated_fuel_usage=trajectory.total_fuel_used,
            intercept_probability=trajectory.intercept_probability,
            time_to_target=trajectory.flight_time,
            warnings=tuple(warnings),
        )
