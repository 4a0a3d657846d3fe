"""Depth grid construction for asteroid_tpm.

Each facet carries the same uniform column of ``Nz`` depth nodes.
Conduction uses depth in units of the facet's thermal skin depth,
so the grid is uniform in metres but non-uniform in skin depths
when properties vary from facet to facet.
"""
import numpy as np


def depth_grid(z_max, Nz):
    """Node depths [m], from the surface (z=0) down to ``z_max``."""
    return np.linspace(0.0, z_max, Nz)


def depth_step(z_max, Nz):
    """Depth step [m] between neighbouring nodes."""
    return z_max / (Nz - 1)


def nondimensional_depth_step(dz, l):
    """Depth step normalized by the thermal skin depth ``l``."""
    return dz / l


def diffusion_number(dt, P, dz, l):
    """Dimensionless coefficient of the explicit finite-difference update.

    Parameters
    ----------
    dt : float
        Time step [s]
    P : float
        Period of thermal cycle [s]
    dz : float
        Depth step [m]
    l : float or np.ndarray
        Thermal skin depth [m]

    Returns
    -------
    float or np.ndarray
        Diffusion number lambda'; must be <= 0.5 for stability.
    """
    return (dt / P) / nondimensional_depth_step(dz, l) ** 2 / (4 * np.pi)
