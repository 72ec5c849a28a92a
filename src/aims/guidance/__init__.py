"""
===============================================================================
AIMS - Guidance Package
===============================================================================
Interceptor mission estimation.

Modules:
    mission_config    : Mission request parameters and their validation
    intercept_planner : Delta-V, propellant and intercept-probability estimates
    mission_planner   : End-to-end mission calculation with warnings
===============================================================================
"""
