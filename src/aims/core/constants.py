"""
===============================================================================
AIMS - Physical and Astronomical Constants
===============================================================================
Central repository for the physical constants used by the orbital mechanics
engine and the interceptor estimator.

Units follow the conventions of the engine's public interface:
    - positions are reported in AU, velocities in km/s
    - internal computations run in SI (m, m/s, s, kg)
    - orbital angles are stored in degrees and converted to radians at use
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = np.pi
TWO_PI = 2.0 * np.pi
DEG2RAD = PI / 180.0
RAD2DEG = 180.0 / PI

# =============================================================================
# FUNDAMENTAL PHYSICAL CONSTANTS
# =============================================================================
GRAVITATIONAL_CONSTANT = 6.67430e-11   # m^3 / (kg * s^2)
SPEED_OF_LIGHT = 299792458.0           # m/s
AU_KM = 149597870.7                    # Astronomical Unit in km
AU = AU_KM * 1000.0                    # Astronomical Unit in meters

# Rocket-equation gravity. The estimator uses the rounded 9.81 m/s^2.
G0 = 9.81                              # m/s^2

# =============================================================================
# SUN PARAMETERS
# =============================================================================
SOLAR_MASS = 1.989e30                  # kg
SUN_MU = 1.327e20                      # m^3/s^2 (GM_sun as used by the engine)

# =============================================================================
# EARTH PARAMETERS
# =============================================================================
EARTH_MASS = 5.972e24                  # kg
EARTH_MU = 3.986e14                    # m^3/s^2

# =============================================================================
# TIME
# =============================================================================
DAY = 86400.0                          # s
YEAR = 365.25 * DAY                    # s (Julian year)
MS_PER_DAY = 86_400_000.0              # ms
JD_UNIX_EPOCH = 2440587.5              # Julian date of 1970-01-01T00:00:00Z
JD_J2000 = 2451545.0                   # Julian date of J2000.0

# =============================================================================
# SOLVER DEFAULTS
# =============================================================================
KEPLER_TOLERANCE = 1e-8                # rad, Newton-Raphson step tolerance
KEPLER_MAX_ITER = 100                  # Newton-Raphson iteration cap
