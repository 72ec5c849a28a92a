"""
===============================================================================
AIMS - Core Package
===============================================================================
Shared foundations of the engine.

Modules:
    constants   : Physical constants and unit conversions
    exceptions  : Error taxonomy raised by every component
    config      : YAML configuration (body registry, propulsion catalogue)
===============================================================================
"""
