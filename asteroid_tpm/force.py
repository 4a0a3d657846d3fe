"""Photon recoil force and torque from reflected and emitted radiation.

Each facet scatters sunlight and emits thermal radiation as a Lambertian
surface, which pushes it along its inward normal:

    dF = -2/3 * E * A / c * n

with ``E`` the radiant exitance of the facet.  Forces and torques are
given in the body-fixed frame.
"""
import numpy as np

from .constants import C0, SIGMA_SB
from .flux import F_RAD, F_SCAT, F_SUN


def radiant_exitance(flux, T_surf, A_B, A_TH, eps):
    """Energy leaving each facet per unit area [W m-2].

    Sum of reflected sunlight, reflected thermal radiation and thermal
    emission at the surface temperature ``T_surf``.
    """
    reflected = A_B * (flux[:, F_SUN] + flux[:, F_SCAT]) + A_TH * flux[:, F_RAD]
    return reflected + eps * SIGMA_SB * T_surf ** 4


def facet_forces(normals, areas, exitance):
    """Recoil force on each facet [N], shape (Ns, 3)."""
    return -2 / 3 * (exitance * areas / C0)[:, np.newaxis] * normals


def sum_force_torque(centers, forces):
    """Total force [N] and torque [N m] about the body origin."""
    return forces.sum(axis=0), np.cross(centers, forces).sum(axis=0)


def update_thermal_force(body, nt):
    """Update ``face_forces``, ``force`` and ``torque`` of ``body`` at step ``nt``."""
    shape = body.shape
    E = radiant_exitance(body.flux, body.surface_temperature(nt),
                         body.A_B, body.A_TH, body.eps)
    body.face_forces[:] = facet_forces(shape.normals, shape.areas, E)
    body.force[:], body.torque[:] = sum_force_torque(shape.centers, body.face_forces)
