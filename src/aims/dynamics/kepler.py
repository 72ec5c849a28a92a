"""
===============================================================================
AIMS - Kepler Equation Solvers and Anomaly Conversions
===============================================================================
Root-finding for Kepler's equation on elliptical and hyperbolic orbits, and
conversion of the resulting eccentric / hyperbolic anomaly into true anomaly.

Elliptical (0 <= e < 1):

    M = E - e*sin(E)

Hyperbolic (e > 1):

    M = e*sinh(H) - H

Both are solved by Newton-Raphson with a hard iteration cap. A solver that
does not converge within the cap raises NumericalDivergence; it never loops
indefinitely.

References
----------
    [1] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.,
        Algorithms 2 and 4.
    [2] Curtis, "Orbital Mechanics for Engineering Students", 4th ed.,
        Sections 3.4 and 3.5.
===============================================================================
"""

import logging

import numpy as np

from aims.core.constants import (
    AU,
    GRAVITATIONAL_CONSTANT,
    KEPLER_MAX_ITER,
    KEPLER_TOLERANCE,
    PI,
    SOLAR_MASS,
    TWO_PI,
)
from aims.core.exceptions import (
    InvalidOrbitalElements,
    NumericalDivergence,
    UnsupportedOrbitType,
)

logger = logging.getLogger(__name__)

# Above this eccentricity Newton-Raphson seeded at E0 = M can wander before
# settling; a seed of +/-pi converges monotonically on the wrapped anomaly.
HIGH_ECCENTRICITY = 0.8

# Beyond this |M| the hyperbolic solver is seeded at asinh(M/e) instead of M.
LARGE_HYPERBOLIC_ANOMALY = 5.0


class KeplerSolver:
    """
    Newton-Raphson solver for Kepler's equation.

    The solver is stateless apart from its convergence settings and can be
    shared between threads.

    Typical usage:
        solver = KeplerSolver()
        E = solver.solve_elliptical(M, 0.017)
        H = solver.solve_hyperbolic(M, 6.141)
    """

    def __init__(self, tol: float = KEPLER_TOLERANCE, max_iter: int = KEPLER_MAX_ITER) -> None:
        """
        Parameters
        ----------
        tol : float
            Convergence threshold on the Newton step |dE| (rad).
        max_iter : int
            Maximum number of Newton iterations before NumericalDivergence.
        """
        if tol <= 0.0:
            raise ValueError(f"Tolerance must be positive, got {tol}")
        if max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {max_iter}")
        self.tol = tol
        self.max_iter = max_iter

    # -------------------------------------------------------------------------
    # Elliptical
    # -------------------------------------------------------------------------

    def solve_elliptical(self, M: float, e: float) -> float:
        """
        Solve Kepler's equation for the eccentric anomaly E.

        Newton-Raphson on

            f(E)  = E - e*sin(E) - M
            f'(E) = 1 - e*cos(E)
            E_{k+1} = E_k - f(E_k) / f'(E_k)

        iterated until |E_{k+1} - E_k| < tol.

        The iteration runs on M wrapped into [-pi, pi]; the whole number
        of revolutions removed is added back, so the returned E satisfies
        the equation for the M given. The seed is E0 = M, or +/-pi for
        e >= 0.8.

        Args:
            M: Mean anomaly (rad), any finite value.
            e: Eccentricity, 0 <= e < 1.

        Returns:
            Eccentric anomaly E (rad).

        Raises:
            InvalidOrbitalElements: If e is outside [0, 1) or M is not finite.
            NumericalDivergence: If the iteration cap is exceeded.
        """
        if not np.isfinite(M):
            raise InvalidOrbitalElements(f"Mean anomaly must be finite, got {M}")
        if not (0.0 <= e < 1.0):
            raise InvalidOrbitalElements(
                f"Elliptical Kepler solver requires 0 <= e < 1, got e={e}"
            )

        revolutions = np.floor((M + PI) / TWO_PI)
        M_wrapped = M - revolutions * TWO_PI

        if e < HIGH_ECCENTRICITY:
            E = M_wrapped
        else:
            E = PI if M_wrapped >= 0.0 else -PI

        delta = np.inf
        for iteration in range(self.max_iter):
            f = E - e * np.sin(E) - M_wrapped
            fp = 1.0 - e * np.cos(E)
            delta = f / fp
            E = E - delta
            if abs(delta) < self.tol:
                break
        else:
            raise NumericalDivergence(
                f"Elliptical Kepler solver did not converge in {self.max_iter} "
                f"iterations (M={M:.6e}, e={e:.6f}, last step={abs(delta):.3e})",
                iterations=self.max_iter,
                last_step=float(abs(delta)),
            )

        logger.debug(
            "Elliptical Kepler converged in %d iterations: M=%.6f, e=%.4f, E=%.6f",
            iteration + 1, M, e, E,
        )
        return float(E + revolutions * TWO_PI)

    # -------------------------------------------------------------------------
    # Hyperbolic
    # -------------------------------------------------------------------------

    def solve_hyperbolic(self, M: float, e: float) -> float:
        """
        Solve the hyperbolic Kepler equation for the hyperbolic anomaly H.

        Newton-Raphson on

            f(H)  = e*sinh(H) - H - M
            f'(H) = e*cosh(H) - 1

        with the same tolerance and iteration cap as the elliptical solver.
        f is strictly increasing for e > 1, so the root is unique. The seed
        is H0 = M, or asinh(M/e) once |M| exceeds 5 rad so that sinh does
        not overflow on far-from-periapsis arcs.

        Args:
            M: Hyperbolic mean anomaly (rad).
            e: Eccentricity, e > 1.

        Returns:
            Hyperbolic anomaly H (rad).

        Raises:
            UnsupportedOrbitType: If e == 1 (parabolic).
            InvalidOrbitalElements: If e < 1 or M is not finite.
            NumericalDivergence: If the iteration cap is exceeded or an
                iterate becomes non-finite.
        """
        if not np.isfinite(M):
            raise InvalidOrbitalElements(f"Mean anomaly must be finite, got {M}")
        if e == 1.0:
            raise UnsupportedOrbitType("Parabolic orbits (e = 1) are not supported.")
        if not (e > 1.0) or not np.isfinite(e):
            raise InvalidOrbitalElements(
                f"Hyperbolic Kepler solver requires e > 1, got e={e}"
            )

        if abs(M) > LARGE_HYPERBOLIC_ANOMALY:
            H = np.arcsinh(M / e)
        else:
            H = M

        delta = np.inf
        with np.errstate(over='ignore', invalid='ignore'):
            for iteration in range(self.max_iter):
                f = e * np.sinh(H) - H - M
                fp = e * np.cosh(H) - 1.0
                delta = f / fp
                H = H - delta
                if not np.isfinite(H):
                    raise NumericalDivergence(
                        f"Hyperbolic Kepler solver left the reals after "
                        f"{iteration + 1} iterations (M={M:.6e}, e={e:.6f})",
                        iterations=iteration + 1,
                    )
                if abs(delta) < self.tol:
                    break
            else:
                raise NumericalDivergence(
                    f"Hyperbolic Kepler solver did not converge in {self.max_iter} "
                    f"iterations (M={M:.6e}, e={e:.6f}, last step={abs(delta):.3e})",
                    iterations=self.max_iter,
                    last_step=float(abs(delta)),
                )

        logger.debug(
            "Hyperbolic Kepler converged in %d iterations: M=%.6f, e=%.4f, H=%.6f",
            iteration + 1, M, e, H,
        )
        return float(H)

    # -------------------------------------------------------------------------
    # Mean motion
    # -------------------------------------------------------------------------

    @staticmethod
    def mean_motion(a: float, central_mass: float = SOLAR_MASS) -> float:
        """
        Mean motion of an orbit around a central mass.

            n = sqrt(G * M_central / a^3)

        Args:
            a: Semi-major axis (AU). Must be positive; pass |a| for
               hyperbolic orbits.
            central_mass: Mass of the central body (kg).

        Returns:
            Mean motion n (rad/s).
        """
        if not np.isfinite(a) or a <= 0.0:
            raise InvalidOrbitalElements(f"Mean motion requires a > 0 (AU), got {a}")
        a_m = a * AU
        return float(np.sqrt(GRAVITATIONAL_CONSTANT * central_mass / a_m ** 3))


class AnomalyConverter:
    """Conversions from eccentric / hyperbolic anomaly to true anomaly."""

    @staticmethod
    def true_anomaly_from_eccentric(E: float, e: float) -> float:
        """
        True anomaly from eccentric anomaly (elliptical orbits).

            nu = 2 * atan2( sqrt(1+e) * sin(E/2), sqrt(1-e) * cos(E/2) )

        The result lies in (-pi, pi].
        """
        if not (0.0 <= e < 1.0):
            raise InvalidOrbitalElements(
                f"Eccentric anomaly conversion requires 0 <= e < 1, got e={e}"
            )
        return float(2.0 * np.arctan2(
            np.sqrt(1.0 + e) * np.sin(E / 2.0),
            np.sqrt(1.0 - e) * np.cos(E / 2.0),
        ))

    @staticmethod
    def true_anomaly_from_hyperbolic(H: float, e: float) -> float:
        """
        True anomaly from hyperbolic anomaly (e > 1).

            nu = 2 * atan( sqrt((e+1)/(e-1)) * tanh(H/2) )

        Raises:
            UnsupportedOrbitType: For e == 1, where the ratio is infinite.
            InvalidOrbitalElements: For e < 1.
        """
        if e == 1.0:
            raise UnsupportedOrbitType("Parabolic orbits (e = 1) are not supported.")
        if not (e > 1.0):
            raise InvalidOrbitalElements(
                f"Hyperbolic anomaly conversion requires e > 1, got e={e}"
            )
        return float(2.0 * np.arctan(np.sqrt((e + 1.0) / (e - 1.0)) * np.tanh(H / 2.0)))
