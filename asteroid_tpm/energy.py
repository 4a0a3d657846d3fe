"""Energy bookkeeping for convergence diagnostics.

The ratio of emitted to absorbed energy approaches 1 once the
temperature field has reached a periodic steady state.
"""
import numpy as np

from .constants import SIGMA_SB
from .flux import F_RAD, F_SCAT, F_SUN
from .properties import flux_total


def absorbed_energy(flux, A_B, A_TH):
    """Absorbed flux of each facet [W m-2]."""
    return flux_total(A_B, A_TH, flux[:, F_SUN], flux[:, F_SCAT], flux[:, F_RAD])


def emitted_energy(T_surf, eps):
    """Thermal emission of each facet [W m-2]."""
    return eps * SIGMA_SB * T_surf ** 4


def energy_io(flux, T_surf, A_B, A_TH, eps, areas):
    """Total energy input and output of a body at one time step.

    Parameters
    ----------
    flux : np.ndarray, shape (Ns, 3)
        Flux of direct sunlight, scattered light and thermal radiation
    T_surf : np.ndarray, shape (Ns,)
        Surface temperature [K]
    A_B, A_TH, eps : float or np.ndarray
        Bond albedo, thermal infrared albedo and emissivity
    areas : np.ndarray, shape (Ns,)
        Facet areas [m2]

    Returns
    -------
    E_in : float
        Absorbed power [W]
    E_out : float
        Emitted power [W]
    E_cons : float
        ``E_out / E_in``; nan when nothing is absorbed
    """
    E_in = float(np.sum(absorbed_energy(flux, A_B, A_TH) * areas))
    E_out = float(np.sum(emitted_energy(T_surf, eps) * areas))
    E_cons = E_out / E_in if E_in > 0 else np.nan
    return E_in, E_out, E_cons


def rotation_energy_ratio(E_in, E_out, n_steps):
    """Emitted/absorbed energy integrated over the last ``n_steps`` steps.

    With ``n_steps`` covering one rotation this is the energy
    conservation ratio of that rotation.
    """
    E_in = np.asarray(E_in)[-n_steps:]
    E_out = np.asarray(E_out)[-n_steps:]
    total_in = np.sum(E_in)
    return float(np.sum(E_out) / total_in) if total_in > 0 else np.nan
