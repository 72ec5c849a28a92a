"""
===============================================================================
AIMS - State Vector Test Suite
===============================================================================
Tests for OrbitalElements / StateVector validation and for the state-vector
computer: perifocal state, the perifocal -> ecliptic rotation, and full
position/velocity evaluation for elliptical and hyperbolic bodies.
===============================================================================
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from aims.core.constants import AU, DAY, DEG2RAD, SUN_MU
from aims.core.exceptions import (
    InvalidOrbitalElements,
    NumericalDivergence,
    UnsupportedOrbitType,
)
from aims.dynamics.kepler import KeplerSolver
from aims.dynamics.orbital_elements import OrbitalElements, StateVector
from aims.dynamics.orbital_mechanics import StateVectorComputer

J2000 = 2451545.0


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def computer():
    return StateVectorComputer()


@pytest.fixture
def earth():
    return OrbitalElements(a=1.0, e=0.017, i=0.0, omega=114.2, Omega=0.0, M=0.0, epoch=J2000)


@pytest.fixture
def mars():
    return OrbitalElements(a=1.524, e=0.093, i=1.9, omega=286.5, Omega=49.6, M=0.0, epoch=J2000)


@pytest.fixture
def atlas():
    return OrbitalElements(a=-2.1, e=6.141, i=175.1, omega=310.4, Omega=87.2, M=0.0,
                           epoch=2460146.5)


def rotation_matrix(elements):
    """Reference R = Rz(Omega) Rx(i) Rz(omega) built with matrix products."""
    def rz(angle):
        c, s = np.cos(angle), np.sin(angle)
        return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])

    def rx(angle):
        c, s = np.cos(angle), np.sin(angle)
        return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])

    return (rz(np.radians(elements.Omega)) @ rx(np.radians(elements.i))
            @ rz(np.radians(elements.omega)))


# =============================================================================
# Test: OrbitalElements validation
# =============================================================================

class TestOrbitalElements:

    def test_valid_sets(self, earth, atlas):
        assert not earth.is_hyperbolic
        assert atlas.is_hyperbolic

    def test_values_coerced_to_float(self):
        el = OrbitalElements(a=1, e=0, i=0, omega=0, Omega=0, M=0, epoch=2451545)
        assert isinstance(el.a, float)
        assert isinstance(el.epoch, float)

    @pytest.mark.parametrize("a, e", [
        (-1.0, 0.5),    # negative axis for an ellipse
        (2.0, 1.5),     # positive axis for a hyperbola
        (2.0, 1.0),     # parabola needs a < 0
        (0.0, 0.1),     # zero axis
        (1.0, -0.1),    # negative eccentricity
    ])
    def test_inconsistent_sets_rejected(self, a, e):
        with pytest.raises(InvalidOrbitalElements):
            OrbitalElements(a=a, e=e, i=0.0, omega=0.0, Omega=0.0, M=0.0, epoch=J2000)

    def test_non_finite_rejected(self):
        with pytest.raises(InvalidOrbitalElements):
            OrbitalElements(a=1.0, e=0.1, i=np.nan, omega=0.0, Omega=0.0, M=0.0, epoch=J2000)

    def test_non_numeric_rejected(self):
        with pytest.raises(InvalidOrbitalElements):
            OrbitalElements(a='far', e=0.1, i=0.0, omega=0.0, Omega=0.0, M=0.0, epoch=J2000)

    def test_mean_anomaly_is_required(self):
        with pytest.raises(TypeError):
            OrbitalElements(a=1.0, e=0.1, i=0.0, omega=0.0, Omega=0.0, epoch=J2000)

    def test_from_dict_round_trip(self, mars):
        assert OrbitalElements.from_dict(mars.to_dict()) == mars

    def test_from_dict_missing_key(self):
        data = {'a': 1.0, 'e': 0.1, 'i': 0.0, 'omega': 0.0, 'Omega': 0.0, 'epoch': J2000}
        with pytest.raises(InvalidOrbitalElements, match="M"):
            OrbitalElements.from_dict(data)

    def test_from_dict_unknown_key(self, mars):
        data = dict(mars.to_dict(), mass=6.4e23)
        with pytest.raises(InvalidOrbitalElements, match="mass"):
            OrbitalElements.from_dict(data)

    def test_immutable(self, earth):
        with pytest.raises(AttributeError):
            earth.a = 2.0


class TestStateVector:

    def test_magnitudes(self):
        sv = StateVector(position=[3.0, 4.0, 0.0], velocity=[0.0, 0.0, 2.0])
        assert sv.r_mag == pytest.approx(5.0)
        assert sv.v_mag == pytest.approx(2.0)

    def test_arrays_are_read_only(self):
        sv = StateVector(position=[1.0, 0.0, 0.0], velocity=[0.0, 1.0, 0.0])
        with pytest.raises(ValueError):
            sv.position[0] = 5.0

    def test_bad_shape(self):
        with pytest.raises(ValueError):
            StateVector(position=[1.0, 0.0], velocity=[0.0, 1.0, 0.0])


# =============================================================================
# Test: Perifocal state
# =============================================================================

class TestOrbitalPlaneState:

    def test_periapsis_of_ellipse(self, computer, mars):
        x, y, vx, vy = computer.orbital_plane_state(mars, 0.0)
        rp = mars.a * AU * (1.0 - mars.e)
        assert_allclose(x, rp, rtol=1e-12)
        assert y == pytest.approx(0.0, abs=1e-3)
        assert vx == pytest.approx(0.0, abs=1e-9)
        h = np.sqrt(SUN_MU * mars.a * AU * (1.0 - mars.e ** 2))
        v_expected = h * (1.0 + mars.e) / rp
        assert_allclose(vy, v_expected, rtol=1e-10)

    def test_speed_scales_with_h_over_r(self, computer, mars):
        """|v| = h sqrt(1 + 2e cos nu + e^2) / r at every true anomaly."""
        h = np.sqrt(SUN_MU * mars.a * AU * (1.0 - mars.e ** 2))
        for nu in np.linspace(-np.pi + 0.1, np.pi - 0.1, 13):
            x, y, vx, vy = computer.orbital_plane_state(mars, nu)
            r = np.hypot(x, y)
            expected = h * np.sqrt(1.0 + 2.0 * mars.e * np.cos(nu) + mars.e ** 2) / r
            assert_allclose(np.hypot(vx, vy), expected, rtol=1e-12)

    def test_hyperbolic_velocity_is_finite(self, computer, atlas):
        x, y, vx, vy = computer.orbital_plane_state(atlas, 0.3)
        assert np.all(np.isfinite([x, y, vx, vy]))

    def test_hyperbolic_radius_is_reflected(self, computer, atlas):
        """Elliptical radius formula gives a negative r for e > 1."""
        x, y, _, _ = computer.orbital_plane_state(atlas, 0.0)
        assert x < 0.0
        expected = abs(atlas.a) * AU * (1.0 - atlas.e ** 2) / (1.0 + atlas.e)
        assert_allclose(x, expected, rtol=1e-12)


# =============================================================================
# Test: Perifocal -> ecliptic rotation
# =============================================================================

class TestEclipticTransform:

    def test_identity_for_zero_angles(self):
        el = OrbitalElements(a=1.0, e=0.0, i=0.0, omega=0.0, Omega=0.0, M=0.0, epoch=J2000)
        assert StateVectorComputer.ecliptic_transform(1.5, -2.0, 0.0, el) == \
            pytest.approx((1.5, -2.0, 0.0))

    def test_argument_of_periapsis_rotates_in_plane(self):
        el = OrbitalElements(a=1.0, e=0.0, i=0.0, omega=90.0, Omega=0.0, M=0.0, epoch=J2000)
        X, Y, Z = StateVectorComputer.ecliptic_transform(1.0, 0.0, 0.0, el)
        assert_allclose([X, Y, Z], [0.0, 1.0, 0.0], atol=1e-15)

    def test_inclination_lifts_out_of_plane(self):
        el = OrbitalElements(a=1.0, e=0.0, i=90.0, omega=0.0, Omega=0.0, M=0.0, epoch=J2000)
        X, Y, Z = StateVectorComputer.ecliptic_transform(0.0, 1.0, 0.0, el)
        assert_allclose([X, Y, Z], [0.0, 0.0, 1.0], atol=1e-15)

    @pytest.mark.parametrize("i, omega, Omega", [
        (1.9, 286.5, 49.6),
        (175.1, 310.4, 87.2),
        (45.0, 30.0, 200.0),
        (0.0, 114.2, 0.0),
    ])
    def test_matches_rotation_matrix(self, i, omega, Omega):
        el = OrbitalElements(a=1.0, e=0.1, i=i, omega=omega, Omega=Omega, M=0.0, epoch=J2000)
        R = rotation_matrix(el)
        for vec in ([1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.3, -0.7, 0.2], [2.0e11, 1.0e11, 0.0]):
            result = StateVectorComputer.ecliptic_transform(*vec, el)
            assert_allclose(result, R @ np.array(vec), rtol=1e-12, atol=1e-12 * np.linalg.norm(vec))

    def test_preserves_length(self, mars):
        vec = np.array([1.2e11, -0.4e11, 0.0])
        result = StateVectorComputer.ecliptic_transform(*vec, mars)
        assert_allclose(np.linalg.norm(result), np.linalg.norm(vec), rtol=1e-14)

    def test_in_plane_expansion_reproducible(self, mars):
        """In-plane vectors follow the expanded term order exactly."""
        x, y = 1.23456789e11, -9.87654321e10
        i_rad = mars.i * DEG2RAD
        w = mars.omega * DEG2RAD
        O = mars.Omega * DEG2RAD
        cw, sw, ci, si, cO, sO = np.cos(w), np.sin(w), np.cos(i_rad), np.sin(i_rad), \
            np.cos(O), np.sin(O)
        X = (cO * cw - sO * sw * ci) * x + (-cO * sw - sO * cw * ci) * y
        Y = (sO * cw + cO * sw * ci) * x + (-sO * sw + cO * cw * ci) * y
        Z = (sw * si) * x + (cw * si) * y
        assert StateVectorComputer.ecliptic_transform(x, y, 0.0, mars) == \
            (float(X), float(Y), float(Z))


# =============================================================================
# Test: Position and velocity at time
# =============================================================================

class TestPositionAndVelocity:

    def test_earth_at_epoch_is_perihelion(self, computer, earth):
        state = computer.position_and_velocity_at_time(earth, J2000)
        assert_allclose(state.r_mag, 1.0 - earth.e, rtol=1e-12)
        assert state.position[2] == pytest.approx(0.0, abs=1e-15)

    @pytest.mark.parametrize("days", [0.0, 45.0, 91.3, 182.6, 300.0, 9000.0])
    def test_earth_distance_and_speed(self, computer, earth, days):
        state = computer.position_and_velocity_at_time(earth, J2000 + days)
        assert 0.98 <= state.r_mag <= 1.02
        assert 28.0 < state.v_mag < 32.0  # km/s

    def test_earth_returns_after_one_period(self, computer, earth):
        period_days = 2.0 * np.pi / KeplerSolver.mean_motion(1.0) / DAY
        start = computer.position_and_velocity_at_time(earth, J2000)
        later = computer.position_and_velocity_at_time(earth, J2000 + period_days)
        assert_allclose(later.position, start.position, atol=1e-8)

    def test_inclined_orbit_leaves_ecliptic(self, computer, mars):
        zs = [computer.position_and_velocity_at_time(mars, J2000 + d).position[2]
              for d in range(0, 687, 60)]
        assert max(zs) > 0.0 > min(zs)

    @pytest.mark.parametrize("days", [-400.0, 0.0, 100.0, 474.0, 2000.0])
    def test_hyperbolic_body_is_finite(self, computer, atlas, days):
        state = computer.position_and_velocity_at_time(atlas, atlas.epoch + days)
        assert np.all(np.isfinite(state.position))
        assert np.all(np.isfinite(state.velocity))

    def test_hyperbolic_true_anomaly_within_asymptotes(self, computer, atlas):
        nu = computer.true_anomaly_at_time(atlas, atlas.epoch + 474.0)
        assert abs(nu) < np.arccos(-1.0 / atlas.e)

    def test_mean_anomaly_offset_is_applied(self, computer):
        el = OrbitalElements(a=1.0, e=0.0, i=0.0, omega=0.0, Omega=0.0, M=90.0, epoch=J2000)
        state = computer.position_and_velocity_at_time(el, J2000)
        assert_allclose(state.position, [0.0, 1.0, 0.0], atol=1e-12)

    def test_parabolic_orbit_unsupported(self, computer):
        el = OrbitalElements(a=-1.0, e=1.0, i=0.0, omega=0.0, Omega=0.0, M=0.0, epoch=J2000)
        with pytest.raises(UnsupportedOrbitType):
            computer.position_and_velocity_at_time(el, J2000 + 10.0)

    def test_divergence_propagates(self, mars):
        stingy = StateVectorComputer(solver=KeplerSolver(tol=1e-300, max_iter=1))
        el = OrbitalElements(a=1.0, e=0.9, i=0.0, omega=0.0, Omega=0.0, M=115.0, epoch=J2000)
        with pytest.raises(NumericalDivergence):
            stingy.position_and_velocity_at_time(el, J2000)
