"""
===============================================================================
AIMS - Orbital State Vector Computation
===============================================================================
Keplerian element set + instant  ->  heliocentric ecliptic state vector.

The procedure is:

    1. dt = (JD - epoch) * 86400 s
    2. Mean anomaly M(t) = M0 + n * dt
    3. Solve Kepler's equation (elliptical or hyperbolic branch)
    4. Convert to true anomaly nu
    5. Position / velocity in the perifocal (orbital-plane) frame
    6. Rotate perifocal -> ecliptic with the 3-1-3 sequence (Omega, i, omega)
    7. Report position in AU and velocity in km/s

Known approximation
-------------------
The perifocal state uses the *elliptical* formulas for every body:

    r = |a| (1 - e^2) / (1 + e cos nu)
    h = sqrt(mu |a| (1 - e^2))

For a hyperbolic body (e > 1) the factor (1 - e^2) is negative, so the
computed radius is negative and the position lands on the opposite side of
the focus from the true hyperbolic arc (and the geometry is only defined
while 1 + e cos nu != 0). The angular momentum is taken from the magnitude
|1 - e^2| so that the velocity stays finite; its direction inherits the same
reflection. Positions of 3I/ATLAS are therefore simulation-quality only and
should be overridden by live ephemeris data whenever available.
===============================================================================
"""

import logging
from typing import Tuple

import numpy as np

from aims.core.constants import (
    AU,
    DAY,
    DEG2RAD,
    SOLAR_MASS,
    SUN_MU,
)
from aims.core.exceptions import UnsupportedOrbitType
from aims.dynamics.kepler import AnomalyConverter, KeplerSolver
from aims.dynamics.orbital_elements import OrbitalElements, StateVector

logger = logging.getLogger(__name__)


class StateVectorComputer:
    """
    Evaluates heliocentric state vectors from Keplerian elements.

    All methods are pure; the instance only carries the solver settings and
    the central-body parameters, so one computer may be shared freely.
    """

    def __init__(
        self,
        solver: KeplerSolver = None,
        mu: float = SUN_MU,
        central_mass: float = SOLAR_MASS,
    ) -> None:
        """
        Parameters
        ----------
        solver : KeplerSolver, optional
            Kepler equation solver. A default-configured one is created if
            omitted.
        mu : float
            Gravitational parameter of the central body (m^3/s^2), used for
            angular momentum and the hyperbolic mean motion.
        central_mass : float
            Mass of the central body (kg), used for the elliptical mean
            motion n = sqrt(G M / a^3).
        """
        self.solver = solver if solver is not None else KeplerSolver()
        self.mu = mu
        self.central_mass = central_mass

    # =====================================================================
    # PERIFOCAL FRAME
    # =====================================================================

    def orbital_plane_state(
        self, elements: OrbitalElements, nu: float
    ) -> Tuple[float, float, float, float]:
        """
        Position and velocity in the perifocal frame (x toward periapsis).

            r  = |a| (1 - e^2) / (1 + e cos nu)
            x  = r cos nu,  y = r sin nu
            h  = sqrt(mu |a| |1 - e^2|)
            vx = -h sin nu / r
            vy =  h (e + cos nu) / r

        See the module docstring for the consequences of applying these
        elliptical formulas to hyperbolic bodies.

        Parameters
        ----------
        elements : OrbitalElements
            Element set; ``a`` in AU.
        nu : float
            True anomaly (rad).

        Returns
        -------
        (x, y, vx, vy) : tuple of float
            Position (m) and velocity (m/s) in the orbital plane.
        """
        a_m = abs(elements.a) * AU
        e = elements.e
        cos_nu = np.cos(nu)
        sin_nu = np.sin(nu)

        r = a_m * (1.0 - e * e) / (1.0 + e * cos_nu)

        x = r * cos_nu
        y = r * sin_nu

        h = np.sqrt(self.mu * a_m * abs(1.0 - e * e))
        vx = -h * sin_nu / r
        vy = h * (e + cos_nu) / r

        return float(x), float(y), float(vx), float(vy)

    # =====================================================================
    # PERIFOCAL -> ECLIPTIC
    # =====================================================================

    @staticmethod
    def ecliptic_transform(
        x: float, y: float, z: float, elements: OrbitalElements
    ) -> Tuple[float, float, float]:
        """
        Rotate a perifocal vector into the heliocentric ecliptic frame.

        R = Rz(Omega) * Rx(i) * Rz(omega):

            | cO cw - sO sw ci   -cO sw - sO cw ci    sO si |
            | sO cw + cO sw ci   -sO sw + cO cw ci   -cO si |
            | sw si               cw si                ci   |

        The trig products are expanded term by term, in this order, so that
        results are reproducible to the last bit.
        """
        i_rad = elements.i * DEG2RAD
        omega_rad = elements.omega * DEG2RAD
        Omega_rad = elements.Omega * DEG2RAD

        cos_w = np.cos(omega_rad)
        sin_w = np.sin(omega_rad)
        cos_i = np.cos(i_rad)
        sin_i = np.sin(i_rad)
        cos_O = np.cos(Omega_rad)
        sin_O = np.sin(Omega_rad)

        X = (cos_O * cos_w - sin_O * sin_w * cos_i) * x + \
            (-cos_O * sin_w - sin_O * cos_w * cos_i) * y
        Y = (sin_O * cos_w + cos_O * sin_w * cos_i) * x + \
            (-sin_O * sin_w + cos_O * cos_w * cos_i) * y
        Z = (sin_w * sin_i) * x + (cos_w * sin_i) * y

        # Out-of-plane component; zero for every perifocal vector the engine
        # produces, so the in-plane sums above are left untouched.
        if z != 0.0:
            X += (sin_O * sin_i) * z
            Y += (-cos_O * sin_i) * z
            Z += cos_i * z

        return float(X), float(Y), float(Z)

    # =====================================================================
    # STATE AT TIME
    # =====================================================================

    def true_anomaly_at_time(self, elements: OrbitalElements, julian_date: float) -> float:
        """True anomaly (rad) of the body at *julian_date*."""
        dt = (julian_date - elements.epoch) * DAY
        e = elements.e
        M0 = elements.M * DEG2RAD

        if e < 1.0:
            n = self.solver.mean_motion(abs(elements.a), self.central_mass)
            M = M0 + n * dt
            E = self.solver.solve_elliptical(M, e)
            return AnomalyConverter.true_anomaly_from_eccentric(E, e)

        if e == 1.0:
            raise UnsupportedOrbitType("Parabolic orbits (e = 1) are not supported.")

        a_m = abs(elements.a) * AU
        n = np.sqrt(self.mu / a_m ** 3)
        M = M0 + n * dt
        H = self.solver.solve_hyperbolic(M, e)
        return AnomalyConverter.true_anomaly_from_hyperbolic(H, e)

    def position_and_velocity_at_time(
        self, elements: OrbitalElements, julian_date: float
    ) -> StateVector:
        """
        Heliocentric ecliptic state of a body at a Julian date.

        Parameters
        ----------
        elements : OrbitalElements
            Element set of the body.
        julian_date : float
            Evaluation instant (JD).

        Returns
        -------
        StateVector
            Position in AU, velocity in km/s.

        Raises
        ------
        UnsupportedOrbitType
            For parabolic element sets.
        NumericalDivergence
            If Kepler's equation cannot be solved within the iteration cap.
        """
        nu = self.true_anomaly_at_time(elements, julian_date)

        x, y, vx, vy = self.orbital_plane_state(elements, nu)
        X, Y, Z = self.ecliptic_transform(x, y, 0.0, elements)
        VX, VY, VZ = self.ecliptic_transform(vx, vy, 0.0, elements)

        return StateVector(
            position=np.array([X, Y, Z]) / AU,
            velocity=np.array([VX, VY, VZ]) / 1000.0,
        )
