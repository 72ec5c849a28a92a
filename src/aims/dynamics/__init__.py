"""
===============================================================================
AIMS - Dynamics Package
===============================================================================
Keplerian motion of the tracked bodies.

Submodules:
    orbital_elements  -- OrbitalElements / StateVector value types
    kepler            -- Kepler equation solvers, anomaly conversions
    orbital_mechanics -- Perifocal state and ecliptic rotation
    ephemeris         -- Positions of every registered body at an instant
===============================================================================
"""
