"""Energy flux onto the facets of a body.

Each body keeps a flux array of shape (Ns, 3) whose columns are

    0: F_sun   direct sunlight [W m-2]
    1: F_scat  sunlight scattered by other facets [W m-2]
    2: F_rad   thermal radiation from other facets [W m-2]

This module only provides direct, unshadowed sunlight.  Flux computed
elsewhere (shadowing, scattering, self-heating) is passed to the drivers
as a precomputed history of shape (Nt, Ns, 3).
"""
import numpy as np

from .constants import AU, SOLAR_CONST

F_SUN, F_SCAT, F_RAD = 0, 1, 2


def solar_flux(r_sun):
    """Solar energy flux [W m-2] at distance ``|r_sun|`` [m] from the sun."""
    return SOLAR_CONST / (np.linalg.norm(r_sun) / AU) ** 2


def direct_flux(shape, r_sun):
    """Direct sunlight on each facet, ignoring shadows.

    Parameters
    ----------
    shape : ShapeModel
        Facet geometry in the body-fixed frame
    r_sun : array_like, length 3
        Position of the sun in the body-fixed frame [m] (not normalized)

    Returns
    -------
    np.ndarray, shape (Ns,)
        Flux of direct sunlight [W m-2]
    """
    r_sun = np.asarray(r_sun, dtype=float)
    r_hat = r_sun / np.linalg.norm(r_sun)
    cos_i = shape.normals @ r_hat
    return solar_flux(r_sun) * np.maximum(cos_i, 0.0)


def update_flux_sun(body, r_sun):
    """Set the flux of ``body`` to direct sunlight only."""
    body.flux[:, F_SUN] = direct_flux(body.shape, r_sun)
    body.flux[:, F_SCAT] = 0.0
    body.flux[:, F_RAD] = 0.0


def check_flux_history(flux, Nt, n_facets):
    """Return ``flux`` as an (Nt, Ns, 3) array, or raise ValueError."""
    flux = np.asarray(flux, dtype=float)
    if flux.shape != (Nt, n_facets, 3):
        raise ValueError(
            f"Flux history has shape {flux.shape}, expected {(Nt, n_facets, 3)}"
        )
    if np.any(flux < 0) or not np.all(np.isfinite(flux)):
        raise ValueError("Flux history must be finite and non-negative")
    return flux
