"""
AIMS - Atlas Interceptor Mission Simulator engine.

Computes heliocentric positions of the planets and the interstellar object
3I/ATLAS from Keplerian elements, and estimates simplified interceptor
trajectories between them.
"""

from aims.core.exceptions import (
    AimsError,
    InvalidMissionConfig,
    InvalidOrbitalElements,
    NumericalDivergence,
    UnsupportedOrbitType,
)
from aims.core.config import AimsConfig, PropulsionSystem, default_config, load_config
from aims.dynamics.orbital_elements import OrbitalElements, StateVector
from aims.dynamics.kepler import AnomalyConverter, KeplerSolver
from aims.dynamics.orbital_mechanics import StateVectorComputer
from aims.dynamics.ephemeris import (
    PositionService,
    julian_date_from_unix_ms,
    merge_live_positions,
    unix_ms_from_julian_date,
)
from aims.guidance.mission_config import (
    MissionConfig,
    PayloadItem,
    PropulsionType,
    TrajectoryType,
)
from aims.guidance.intercept_planner import (
    InterceptorTrajectory,
    TrajectoryEstimator,
    TrajectoryPoint,
)
from aims.guidance.mission_planner import (
    MissionCalculation,
    MissionPlanner,
    MissionValidation,
)

__version__ = "1.0.0"

__all__ = [
    # Errors
    "AimsError",
    "InvalidMissionConfig",
    "InvalidOrbitalElements",
    "NumericalDivergence",
    "UnsupportedOrbitType",

    # Configuration
    "AimsConfig",
    "PropulsionSystem",
    "default_config",
    "load_config",

    # Dynamics
    "OrbitalElements",
    "StateVector",
    "KeplerSolver",
    "AnomalyConverter",
    "StateVectorComputer",
    "PositionService",
    "julian_date_from_unix_ms",
    "unix_ms_from_julian_date",
    "merge_live_positions",

    # Guidance
    "MissionConfig",
    "PayloadItem",
    "PropulsionType",
    "TrajectoryType",
    "TrajectoryEstimator",
    "TrajectoryPoint",
    "InterceptorTrajectory",
    "MissionPlanner",
    "MissionCalculation",
    "MissionValidation",
]
