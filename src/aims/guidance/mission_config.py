"""
===============================================================================
AIMS - Mission Configuration
===============================================================================
Read-only description of an interceptor mission request:

    propulsion_type  : chemical | ion | nuclear
    payload          : non-empty set of camera | spectrometer | probe
    trajectory_type  : hohmann | bi-elliptic | gravity-assist   (optional)
    fuel_capacity    : kg, > 0                                  (optional)
    mission_duration : days, > 0                                (optional)
    launch_window    : timezone-aware datetime                  (optional)

``MissionConfig.from_dict`` accepts the plain-dict form used by transport
layers and raises InvalidMissionConfig on the first violation.
===============================================================================
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional

from aims.core.exceptions import InvalidMissionConfig


class PropulsionType(str, Enum):
    CHEMICAL = 'chemical'
    ION = 'ion'
    NUCLEAR = 'nuclear'


class PayloadItem(str, Enum):
    CAMERA = 'camera'
    SPECTROMETER = 'spectrometer'
    PROBE = 'probe'


class TrajectoryType(str, Enum):
    HOHMANN = 'hohmann'
    BI_ELLIPTIC = 'bi-elliptic'
    GRAVITY_ASSIST = 'gravity-assist'


def _coerce_enum(enum_cls, value, field_name):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        valid = [member.value for member in enum_cls]
        raise InvalidMissionConfig(
            f"Invalid {field_name}: {value!r}. Valid: {valid}"
        ) from None


def parse_propulsion_type(value: Any) -> PropulsionType:
    """Coerce a string or PropulsionType, raising InvalidMissionConfig."""
    return _coerce_enum(PropulsionType, value, 'propulsion type')


def parse_launch_window(value: Any) -> datetime:
    """
    Parse an ISO-8601 launch window. Naive datetimes are taken as UTC.
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            moment = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidMissionConfig(
                f"Launch window must be an ISO-8601 datetime, got {value!r}"
            ) from None
    else:
        raise InvalidMissionConfig(
            f"Launch window must be an ISO-8601 datetime, got {value!r}"
        )
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


@dataclass(frozen=True)
class MissionConfig:
    """
    Mission parameters supplied with each trajectory request.

    Attributes
    ----------
    propulsion_type : PropulsionType
    payload : frozenset of PayloadItem
        At least one item.
    trajectory_type : TrajectoryType, optional
        Recorded with the request; the estimator does not vary with it.
    fuel_capacity : float, optional
        Tank capacity (kg).
    mission_duration : float, optional
        Requested mission duration (days).
    launch_window : datetime, optional
        Planned launch instant.
    """
    propulsion_type: PropulsionType
    payload: FrozenSet[PayloadItem]
    trajectory_type: Optional[TrajectoryType] = None
    fuel_capacity: Optional[float] = None
    mission_duration: Optional[float] = None
    launch_window: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, 'propulsion_type', parse_propulsion_type(self.propulsion_type))
        object.__setattr__(self, 'payload', self._parse_payload(self.payload))

        if self.trajectory_type is not None:
            object.__setattr__(
                self, 'trajectory_type',
                _coerce_enum(TrajectoryType, self.trajectory_type, 'trajectory type'),
            )

        for field_name in ('fuel_capacity', 'mission_duration'):
            value = getattr(self, field_name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)) \
                    or not math.isfinite(value) or value <= 0:
                raise InvalidMissionConfig(
                    f"{field_name} must be a positive number, got {value!r}"
                )
            object.__setattr__(self, field_name, float(value))

        if self.launch_window is not None:
            object.__setattr__(self, 'launch_window', parse_launch_window(self.launch_window))

    @staticmethod
    def _parse_payload(payload: Iterable[Any]) -> FrozenSet[PayloadItem]:
        if payload is None or isinstance(payload, (str, bytes)):
            raise InvalidMissionConfig(
                f"Payload must be a collection of items, got {payload!r}"
            )
        try:
            items = list(payload)
        except TypeError:
            raise InvalidMissionConfig(
                f"Payload must be a collection of items, got {payload!r}"
            ) from None
        if not items:
            raise InvalidMissionConfig("Payload must contain at least one item")
        return frozenset(_coerce_enum(PayloadItem, item, 'payload item') for item in items)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MissionConfig':
        """
        Build a config from the camelCase or snake_case dict form.

        Example::

            MissionConfig.from_dict({
                'launchWindow': '2026-03-01T00:00:00Z',
                'propulsionType': 'nuclear',
                'payload': ['camera', 'probe'],
            })
        """
        if not isinstance(data, dict):
            raise InvalidMissionConfig(f"Mission config must be a mapping, got {data!r}")

        aliases = {
            'propulsionType': 'propulsion_type',
            'trajectoryType': 'trajectory_type',
            'fuelCapacity': 'fuel_capacity',
            'missionDuration': 'mission_duration',
            'launchWindow': 'launch_window',
        }
        normalised = {aliases.get(key, key): value for key, value in data.items()}

        known = {'propulsion_type', 'payload', 'trajectory_type', 'fuel_capacity',
                 'mission_duration', 'launch_window'}
        unknown = sorted(set(normalised) - known)
        if unknown:
            raise InvalidMissionConfig(f"Unknown mission config keys: {unknown}")
        for required in ('propulsion_type', 'payload'):
            if required not in normalised:
                raise InvalidMissionConfig(f"Missing required mission config key: {required}")
        return cls(**normalised)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'propulsion_type': self.propulsion_type.value,
            'payload': sorted(item.value for item in self.payload),
            'trajectory_type': self.trajectory_type.value if self.trajectory_type else None,
            'fuel_capacity': self.fuel_capacity,
            'mission_duration': self.mission_duration,
            'launch_window': self.launch_window.isoformat() if self.launch_window else None,
        }
