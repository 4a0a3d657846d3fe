"""Boundary condition functions for asteroid_tpm.

Upper boundary (surface node) conditions:

- radiation: energy balance between absorbed flux, conduction and
  thermal emission, solved by Newton's method for every facet
- insulation: zero temperature gradient
- isothermal: fixed prescribed temperature

Lower boundary (bottom node) conditions: insulation and isothermal.

Each function acts on the temperature field of one time step, an array
of shape (Nz, Ns), and dispatch goes through the ``UPPER_BOUNDARY``
and ``LOWER_BOUNDARY`` tables keyed by :class:`BoundaryCondition`.
"""
from enum import Enum

import numba
import numpy as np

from .constants import SIGMA_SB


class BoundaryCondition(Enum):
    RADIATION = "radiation"
    INSULATION = "insulation"
    ISOTHERMAL = "isothermal"


class ConvergenceWarning(RuntimeWarning):
    """Newton's method did not reach the tolerance for some facets."""


@numba.njit(cache=True)
def _newton_surface(T, F_total, coef, eps_sigma, max_iter, tol):
    """Newton solver for the surface energy balance of every facet.

    Returns the number of facets that did not converge; for those the
    last iterate is kept.
    """
    n_unconverged = 0
    for i in range(T.shape[1]):
        converged = False
        for _ in range(max_iter):
            T_pri = T[0, i]
            f = F_total[i] + coef[i] * (T[1, i] - T_pri) - eps_sigma[i] * T_pri ** 4
            df = -coef[i] - 4 * eps_sigma[i] * T_pri ** 3
            if df == 0.0:
                break
            T[0, i] = T_pri - f / df
            # |1 - T_pri/T_new| < tol, without dividing by T_new = 0
            if abs(T[0, i] - T_pri) <= tol * abs(T[0, i]):
                converged = True
                break
        if not converged:
            n_unconverged += 1
    return n_unconverged


def conduction_coefficient(Gamma, P, dz_bar):
    """Coefficient of ``T[1] - T[0]`` in the surface conductive flux [W m-2 K-1]."""
    return Gamma / np.sqrt(4 * np.pi * P) / dz_bar


def _column_view(T):
    """View a single column (Nz,) as an (Nz, 1) field."""
    T = np.asarray(T)
    return T[:, np.newaxis] if T.ndim == 1 else T


def update_surface_temperature(T, F_total, P, dz_bar, Gamma, eps, max_iter=20, tol=1e-10):
    """Surface temperature under the radiation boundary condition.

    Solves, for each facet independently,

        F_total + Gamma / sqrt(4*pi*P) * (T[1] - T[0]) / dz_bar - eps*sigma*T[0]^4 = 0

    for ``T[0]`` with Newton's method, starting from the current
    ``T[0]``.  ``T[0]`` is updated in place.

    Parameters
    ----------
    T : np.ndarray, shape (Nz, Ns) or (Nz,)
        Temperatures [K] of one time step
    F_total : float or np.ndarray
        Total energy absorbed by each facet [W m-2]
    P : float
        Period of thermal cycle [s]
    dz_bar : float or np.ndarray
        Depth step normalized by thermal skin depth
    Gamma : float or np.ndarray
        Thermal inertia [tiu]
    eps : float or np.ndarray
        Emissivity
    max_iter : int
        Maximum number of Newton iterations (default: 20)
    tol : float
        Convergence criterion on the relative change of ``T[0]``

    Returns
    -------
    int
        Number of facets for which the iteration did not converge.
    """
    T = _column_view(T)
    coef = conduction_coefficient(np.asarray(Gamma, dtype=float), P, dz_bar)
    return radiation_kernel(T, F_total, coef, eps, max_iter, tol)


def radiation_kernel(T, F_total, coef, eps, max_iter, tol):
    """Broadcast per-facet inputs and run the Newton solver on ``T``."""
    n = T.shape[1]
    F_total = np.array(np.broadcast_to(F_total, (n,)), dtype=float)
    coef = np.array(np.broadcast_to(coef, (n,)), dtype=float)
    eps_sigma = np.array(np.broadcast_to(eps, (n,)), dtype=float) * SIGMA_SB
    return _newton_surface(T, F_total, coef, eps_sigma, int(max_iter), float(tol))


def insulation_surface(T):
    """Zero-flux upper boundary: surface equals the node below."""
    T[0] = T[1]


def insulation_bottom(T):
    """Zero-flux lower boundary: bottom equals the node above."""
    T[-1] = T[-2]


def isothermal_surface(T, T_upper):
    T[0] = T_upper


def isothermal_bottom(T, T_lower):
    T[-1] = T_lower


# ---------------------------------------------------------------------------
# Dispatch tables used by the body models.  Each entry takes the
# temperature field of one time step and the body model, and returns the
# number of non-converged facets.
# ---------------------------------------------------------------------------

def _radiation_upper(T, body):
    config = body.config
    return radiation_kernel(T, body.absorbed_flux(), body.conduction_coef, body.eps,
                            config.newton_max_iter, config.newton_tol)


def _insulation_upper(T, body):
    insulation_surface(T)
    return 0


def _isothermal_upper(T, body):
    isothermal_surface(T, body.config.T_upper)
    return 0


def _insulation_lower(T, body):
    insulation_bottom(T)
    return 0


def _isothermal_lower(T, body):
    isothermal_bottom(T, body.config.T_lower)
    return 0


UPPER_BOUNDARY = {
    BoundaryCondition.RADIATION: _radiation_upper,
    BoundaryCondition.INSULATION: _insulation_upper,
    BoundaryCondition.ISOTHERMAL: _isothermal_upper,
}

LOWER_BOUNDARY = {
    BoundaryCondition.INSULATION: _insulation_lower,
    BoundaryCondition.ISOTHERMAL: _isothermal_lower,
}
