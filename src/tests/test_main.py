"""
===============================================================================
AIMS - Command Line Test Suite
===============================================================================
Smoke tests for the ``aims`` command: positions, intercept and validate.
===============================================================================
"""

import pandas as pd
import pytest

from aims.main import build_parser, main

EPOCH_MS = '1760745600000'


class TestPositionsCommand:

    def test_lists_every_body(self, capsys):
        assert main(['positions', '--time', EPOCH_MS]) == 0
        out = capsys.readouterr().out
        for name in ('3I/ATLAS', 'Mercury', 'Venus', 'Earth', 'Mars', 'Jupiter'):
            assert name in out

    def test_velocities(self, capsys):
        assert main(['positions', '--time', EPOCH_MS, '--velocities']) == 0
        assert 'km/s' in capsys.readouterr().out

    def test_plot(self, tmp_path):
        assert main(['positions', '--time', EPOCH_MS, '--plot', str(tmp_path)]) == 0
        assert (tmp_path / 'positions.png').is_file()


class TestInterceptCommand:

    def test_summary(self, capsys):
        code = main(['intercept', '--propulsion', 'nuclear', '--payload', 'camera', 'probe',
                     '--launch', '2026-03-01T00:00:00Z'])
        assert code == 0
        out = capsys.readouterr().out
        assert 'INTERCEPT ESTIMATE: Earth -> 3I/ATLAS' in out
        assert 'Intercept probability' in out

    def test_csv_and_plots(self, tmp_path):
        csv_path = tmp_path / 'out' / 'trajectory.csv'
        code = main(['intercept', '--propulsion', 'chemical', '--payload', 'spectrometer',
                     '--launch', '2026-03-01T00:00:00Z',
                     '--csv', str(csv_path), '--plot', str(tmp_path / 'plots')])
        assert code == 0
        df = pd.read_csv(csv_path)
        assert len(df) == 101
        assert df['fuel_mass_kg'].iloc[-1] == 0.0
        assert (tmp_path / 'plots' / 'trajectory.png').is_file()
        assert (tmp_path / 'plots' / 'fuel.png').is_file()

    def test_invalid_propulsion_exit_code(self, capsys):
        code = main(['intercept', '--propulsion', 'warp', '--payload', 'camera'])
        assert code == 2
        assert 'warp' in capsys.readouterr().err

    def test_unknown_target_exit_code(self):
        code = main(['intercept', '--propulsion', 'ion', '--payload', 'camera',
                     '--launch', '2026-03-01', '--target', 'Vulcan'])
        assert code == 2


class TestValidateCommand:

    def test_warnings_printed(self, capsys):
        code = main(['validate', '--propulsion', 'ion', '--payload', 'probe',
                     '--launch', '2020-01-01T00:00:00Z'])
        assert code == 0
        out = capsys.readouterr().out
        assert 'Valid: True' in out
        assert 'past' in out
        assert 'Ion propulsion' in out


def test_subcommand_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
