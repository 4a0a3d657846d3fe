"""Numerical solver for 1-D heat conduction in every facet column.

Explicit (forward-time, centred-space) finite differences on the
uniform depth grid, applied to all facets at once.
"""
import numpy as np

from .config import ConfigurationError


def solve_explicit(T, T_next, lam):
    """Explicit (forward Euler) interior temperature update.

        T_next[z] = (1 - 2*lam) * T[z] + lam * (T[z+1] + T[z-1])

    Parameters
    ----------
    T : np.ndarray, shape (Nz, Ns)
        Temperatures at the current time step.
    T_next : np.ndarray, shape (Nz, Ns)
        Temperatures at the next time step. Interior nodes ``T_next[1:-1]``
        are updated in-place; the boundary nodes are left to the
        boundary conditions.
    lam : float or np.ndarray, shape (Ns,)
        Diffusion number of each facet.
    """
    T_next[1:-1] = (1 - 2 * lam) * T[1:-1] + lam * (T[2:] + T[:-2])


def check_stability(lam, lambda_max=0.5):
    """Raise ConfigurationError if any diffusion number exceeds ``lambda_max``.

    Parameters
    ----------
    lam : float or np.ndarray
        Diffusion number, scalar or per facet.
    lambda_max : float
        Stability limit; 0.5 for the explicit scheme.
    """
    lam_arr = np.atleast_1d(lam)
    worst = int(np.argmax(np.where(np.isfinite(lam_arr), lam_arr, np.inf)))
    if not lam_arr[worst] <= lambda_max:
        where = f" (facet {worst})" if np.ndim(lam) == 1 else ""
        raise ConfigurationError(
            f"Diffusion number lambda'={lam_arr[worst]:.4g}{where} exceeds the "
            f"stability limit {lambda_max}. Use a smaller time step or "
            f"fewer depth nodes."
        )
