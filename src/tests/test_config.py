"""
===============================================================================
AIMS - Configuration Test Suite
===============================================================================
Tests for loading and validating the YAML engine configuration.
===============================================================================
"""

import pytest
import yaml

from aims.core.config import (
    DEFAULT_CONFIG_PATH,
    AimsConfig,
    PropulsionSystem,
    default_config,
    load_config,
    parse_config,
)
from aims.core.constants import SOLAR_MASS, SUN_MU
from aims.core.exceptions import InvalidMissionConfig, InvalidOrbitalElements


@pytest.fixture
def raw_config():
    with open(DEFAULT_CONFIG_PATH, 'r') as f:
        return yaml.safe_load(f)


def write_yaml(tmp_path, data):
    path = tmp_path / 'system.yaml'
    path.write_text(yaml.safe_dump(data))
    return path


# =============================================================================
# Test: packaged defaults
# =============================================================================

class TestDefaultConfig:

    def test_packaged_file_exists(self):
        assert DEFAULT_CONFIG_PATH.is_file()

    def test_registry(self):
        config = default_config()
        assert isinstance(config, AimsConfig)
        assert set(config.bodies) == {'3I/ATLAS', 'Mercury', 'Venus', 'Earth', 'Mars', 'Jupiter'}

    def test_interstellar_object_is_hyperbolic(self):
        atlas = default_config().bodies['3I/ATLAS']
        assert atlas.a == -2.1
        assert atlas.e == 6.141
        assert atlas.is_hyperbolic

    def test_central_body(self):
        config = default_config()
        assert config.central_mass == SOLAR_MASS
        assert config.mu == SUN_MU
        assert config.dry_mass == 1000.0

    def test_propulsion_catalogue(self):
        catalogue = default_config().propulsion
        assert {name: p.isp for name, p in catalogue.items()} == \
            {'chemical': 450.0, 'ion': 3000.0, 'nuclear': 900.0}
        assert catalogue['ion'].thrust == 100.0

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            default_config().bodies['Pluto'] = None

    def test_cached(self):
        assert default_config() is default_config()


# =============================================================================
# Test: custom files
# =============================================================================

class TestLoadConfig:

    def test_round_trip_through_file(self, tmp_path, raw_config):
        config = load_config(write_yaml(tmp_path, raw_config))
        assert dict(config.bodies) == dict(default_config().bodies)

    def test_missing_mean_anomaly(self, tmp_path, raw_config):
        del raw_config['bodies']['Mars']['M']
        with pytest.raises(InvalidOrbitalElements, match="Mars"):
            load_config(write_yaml(tmp_path, raw_config))

    def test_inconsistent_body(self, tmp_path, raw_config):
        raw_config['bodies']['Earth']['a'] = -1.0
        with pytest.raises(InvalidOrbitalElements):
            load_config(write_yaml(tmp_path, raw_config))

    def test_bad_propulsion(self, raw_config):
        raw_config['propulsion']['ion']['isp'] = 0
        with pytest.raises(InvalidMissionConfig):
            parse_config(raw_config)

    def test_missing_bodies_section(self, raw_config):
        del raw_config['bodies']
        with pytest.raises(ValueError):
            parse_config(raw_config)

    def test_defaults_for_optional_sections(self, raw_config):
        del raw_config['central_body']
        del raw_config['spacecraft']
        config = parse_config(raw_config)
        assert config.mu == SUN_MU
        assert config.dry_mass == 1000.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'nope.yaml')


class TestPropulsionSystem:

    def test_valid(self):
        p = PropulsionSystem('chemical', 450, 1e5, 15, 0.9)
        assert p.isp == 450.0

    def test_non_numeric(self):
        with pytest.raises(InvalidMissionConfig):
            PropulsionSystem('chemical', 'high', 1e5, 15.0, 0.9)
