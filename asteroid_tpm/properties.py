"""Thermophysical property functions for asteroid_tpm.

All functions accept scalars or per-facet arrays and broadcast with numpy.
"""
import numpy as np

from .constants import AU, SIGMA_SB, SOLAR_CONST


def thermal_skin_depth(P, k, rho, Cp):
    """Calculate thermal skin depth.

    The skin depth is the penetration depth of a periodic thermal wave
    scaled so that the conductive surface flux reads
    ``Gamma / sqrt(4*pi*P) * dT/dz_bar`` with ``z_bar = z / l``.

    Parameters
    ----------
    P : float
        Period of thermal cycle (e.g., rotation period) [s]
    k : float or np.ndarray
        Thermal conductivity [W m-1 K-1]
    rho : float or np.ndarray
        Density [kg m-3]
    Cp : float or np.ndarray
        Heat capacity [J kg-1 K-1]

    Returns
    -------
    float or np.ndarray
        Thermal skin depth [m]
    """
    return np.sqrt(4 * np.pi * P * k / (rho * Cp))


def thermal_inertia(k, rho, Cp):
    """Calculate thermal inertia [tiu = J m-2 K-1 s-1/2]."""
    return np.sqrt(k * rho * Cp)


def thermal_conductivity(Gamma, rho, Cp):
    """Thermal conductivity [W m-1 K-1] from thermal inertia ``Gamma``."""
    return Gamma ** 2 / (rho * Cp)


def flux_total(A_B, A_TH, F_sun, F_scat, F_rad):
    """Total energy flux absorbed by a facet.

    Parameters
    ----------
    A_B : float or np.ndarray
        Bond albedo
    A_TH : float or np.ndarray
        Albedo at thermal infrared wavelength
    F_sun : float or np.ndarray
        Flux of direct sunlight [W m-2]
    F_scat : float or np.ndarray
        Flux of scattered light from other facets [W m-2]
    F_rad : float or np.ndarray
        Flux of thermal radiation from other facets [W m-2]

    Returns
    -------
    float or np.ndarray
        Absorbed flux [W m-2]
    """
    return (1 - A_B) * (F_sun + F_scat) + (1 - A_TH) * F_rad


def radiative_equilibrium_temperature(F, eps):
    """Temperature [K] of a non-conducting surface absorbing flux ``F``."""
    return (F / (eps * SIGMA_SB)) ** 0.25


def subsolar_temperature(r_sun, A_B, eps):
    """Subsolar temperature on an asteroid.

    Assumes radiative equilibrium with zero conductivity.

    Parameters
    ----------
    r_sun : array_like, length 3
        Position of the sun relative to the body [m]
    A_B : float
        Bond albedo
    eps : float
        Emissivity

    Returns
    -------
    float
        Temperature [K]
    """
    F = SOLAR_CONST / (np.linalg.norm(r_sun) / AU) ** 2
    return radiative_equilibrium_temperature((1 - A_B) * F, eps)
