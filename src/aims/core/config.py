"""
===============================================================================
AIMS - Configuration Loading
===============================================================================
Loads the engine's static tables from YAML:

    central_body  -- mass and gravitational parameter of the Sun
    bodies        -- orbital element registry, keyed by body name
    propulsion    -- propulsion catalogue (Isp, thrust, cruise speed, factor)
    spacecraft    -- interceptor dry mass

The packaged defaults live in ``aims/config/solar_system.yaml``. The loaded
configuration is immutable: registries are exposed as read-only mappings so
the tables can be shared across threads without locking.

Usage
-----
    config = default_config()              # cached packaged file
    config = load_config("my_system.yaml")
    earth = config.bodies["Earth"]
===============================================================================
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from aims.core.constants import SOLAR_MASS, SUN_MU
from aims.core.exceptions import InvalidMissionConfig, InvalidOrbitalElements
from aims.dynamics.orbital_elements import OrbitalElements

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / 'config' / 'solar_system.yaml'

DEFAULT_DRY_MASS = 1000.0  # kg


# =============================================================================
# PROPULSION
# =============================================================================

@dataclass(frozen=True)
class PropulsionSystem:
    """
    One entry of the propulsion catalogue.

    Attributes
    ----------
    name : str
        Propulsion type key ('chemical', 'ion', 'nuclear').
    isp : float
        Specific impulse (s).
    thrust : float
        Nominal thrust (N).
    cruise_speed : float
        Mean transfer speed used for flight-time estimates (km/s).
    reliability : float
        Multiplicative factor applied to the intercept probability.
    """
    name: str
    isp: float
    thrust: float
    cruise_speed: float
    reliability: float

    def __post_init__(self):
        for field_name in ('isp', 'thrust', 'cruise_speed', 'reliability'):
            value = getattr(self, field_name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
                raise InvalidMissionConfig(
                    f"Propulsion '{self.name}': {field_name} must be a positive number, "
                    f"got {value!r}"
                )
            object.__setattr__(self, field_name, float(value))


# =============================================================================
# CONFIGURATION CONTAINER
# =============================================================================

@dataclass(frozen=True)
class AimsConfig:
    """Immutable engine configuration."""
    bodies: Mapping[str, OrbitalElements]
    propulsion: Mapping[str, PropulsionSystem]
    central_mass: float = SOLAR_MASS
    mu: float = SUN_MU
    dry_mass: float = DEFAULT_DRY_MASS
    central_body: str = 'Sun'


def _as_mapping(value: Any, section: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"Configuration section '{section}' must be a mapping")
    return value


def _positive_float(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{name}' must be a number, got {value!r}") from None
    if not math.isfinite(number) or number <= 0.0:
        raise ValueError(f"'{name}' must be positive and finite, got {value!r}")
    return number


def parse_config(raw: Dict[str, Any]) -> AimsConfig:
    """
    Validate a configuration dictionary (as produced by ``yaml.safe_load``).

    Raises
    ------
    InvalidOrbitalElements
        If a body entry is missing an element or violates the element
        invariants.
    InvalidMissionConfig
        If a propulsion entry is malformed.
    ValueError
        For structural problems (missing sections, non-numeric values).
    """
    raw = _as_mapping(raw, '<root>')

    central = _as_mapping(raw.get('central_body', {}), 'central_body')
    central_mass = _positive_float(central.get('mass', SOLAR_MASS), 'central_body.mass')
    mu = _positive_float(central.get('mu', SUN_MU), 'central_body.mu')

    bodies_raw = _as_mapping(raw.get('bodies'), 'bodies')
    if not bodies_raw:
        raise ValueError("Configuration must define at least one body")
    bodies = {}
    for name, entry in bodies_raw.items():
        try:
            bodies[str(name)] = OrbitalElements.from_dict(_as_mapping(entry, f'bodies.{name}'))
        except InvalidOrbitalElements as exc:
            raise InvalidOrbitalElements(f"Body '{name}': {exc}") from exc

    propulsion_raw = _as_mapping(raw.get('propulsion'), 'propulsion')
    propulsion = {}
    for name, entry in propulsion_raw.items():
        entry = _as_mapping(entry, f'propulsion.{name}')
        propulsion[str(name)] = PropulsionSystem(
            name=str(name),
            isp=entry.get('isp'),
            thrust=entry.get('thrust'),
            cruise_speed=entry.get('cruise_speed'),
            reliability=entry.get('reliability'),
        )

    spacecraft = _as_mapping(raw.get('spacecraft', {}), 'spacecraft')
    dry_mass = _positive_float(spacecraft.get('dry_mass', DEFAULT_DRY_MASS), 'spacecraft.dry_mass')

    return AimsConfig(
        bodies=MappingProxyType(bodies),
        propulsion=MappingProxyType(propulsion),
        central_mass=central_mass,
        mu=mu,
        dry_mass=dry_mass,
        central_body=str(central.get('name', 'Sun')),
    )


def load_config(config_path: Optional[Union[str, Path]] = None) -> AimsConfig:
    """
    Load engine configuration from a YAML file.

    Args:
        config_path: Path to YAML config. Defaults to the packaged
            ``solar_system.yaml``.

    Returns:
        Validated, immutable AimsConfig.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    logger.info("Loading configuration from: %s", config_path)
    with open(config_path, 'r') as f:
        raw = yaml.safe_load(f)
    config = parse_config(raw)
    logger.info(
        "Loaded %d bodies and %d propulsion systems",
        len(config.bodies), len(config.propulsion),
    )
    return config


@lru_cache(maxsize=1)
def default_config() -> AimsConfig:
    """Packaged configuration, loaded once per process."""
    return load_config(DEFAULT_CONFIG_PATH)
