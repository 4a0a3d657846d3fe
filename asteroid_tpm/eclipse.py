"""Mutual eclipses in a binary asteroid.

A facet is eclipsed when the ray from its center toward the sun hits a
triangle of the other body.  Eclipsed facets receive no direct
sunlight; scattered and thermal flux are left untouched, and heating of
one body by the other is not modelled.

Geometry of the pair at each time step is given in the primary's
body-fixed frame:

- ``r_sun``: position of the sun relative to the primary [m]
- ``sec_from_pri``: position of the secondary relative to the primary [m]
- ``R_sec_to_pri``: rotation matrix from the secondary's frame to the
  primary's frame
"""

import numba
import numpy as np

from .flux import F_SUN


# ---------------------------------------------------------------------------
# Ray casting
# ---------------------------------------------------------------------------

@numba.njit(cache=True)
def _rays_hit_triangles(origins, direction, vertices):
    """Möller–Trumbore test of parallel rays against a set of triangles.

    Returns a boolean array, True where the ray from ``origins[i]`` along
    ``direction`` hits any triangle in front of its origin.
    """
    n = origins.shape[0]
    hit = np.zeros(n, dtype=np.bool_)
    dx, dy, dz = direction[0], direction[1], direction[2]
    for i in range(n):
        ox, oy, oz = origins[i, 0], origins[i, 1], origins[i, 2]
        for j in range(vertices.shape[0]):
            ax, ay, az = vertices[j, 0, 0], vertices[j, 0, 1], vertices[j, 0, 2]
            e1x = vertices[j, 1, 0] - ax
            e1y = vertices[j, 1, 1] - ay
            e1z = vertices[j, 1, 2] - az
            e2x = vertices[j, 2, 0] - ax
            e2y = vertices[j, 2, 1] - ay
            e2z = vertices[j, 2, 2] - az

            px = dy * e2z - dz * e2y
            py = dz * e2x - dx * e2z
            pz = dx * e2y - dy * e2x
            det = e1x * px + e1y * py + e1z * pz
            if det == 0.0:
                continue  # ray parallel to the triangle
            inv_det = 1.0 / det

            tx, ty, tz = ox - ax, oy - ay, oz - az
            u = (tx * px + ty * py + tz * pz) * inv_det
            if u < 0.0 or u > 1.0:
                continue

            qx = ty * e1z - tz * e1y
            qy = tz * e1x - tx * e1z
            qz = tx * e1y - ty * e1x
            v = (dx * qx + dy * qy + dz * qz) * inv_det
            if v < 0.0 or u + v > 1.0:
                continue

            t = (e2x * qx + e2y * qy + e2z * qz) * inv_det
            if t > 0.0:
                hit[i] = True
                break
    return hit


def rays_hit_sphere(origins, direction, center, radius):
    """True where the ray from each origin along ``direction`` meets the sphere.

    Origins inside the sphere always count as hits.
    """
    v = center - origins
    t = v @ direction
    r2 = np.sum(v * v, axis=1)
    d2 = r2 - t ** 2
    return (r2 <= radius ** 2) | ((t > 0) & (d2 <= radius ** 2))


def eclipsed_facets(origins, r_hat, occluder_vertices, occluder_center, occluder_radius,
                    lit=None):
    """Facets whose view of the sun is blocked by an occluding body.

    Parameters
    ----------
    origins : np.ndarray, shape (N, 3)
        Facet centers
    r_hat : np.ndarray, length 3
        Unit vector toward the sun
    occluder_vertices : np.ndarray, shape (M, 3, 3)
        Triangles of the occluding body, in the same frame as ``origins``
    occluder_center : np.ndarray, length 3
        Origin of the occluding body
    occluder_radius : float
        Bounding radius of the occluding body
    lit : np.ndarray of bool, shape (N,), optional
        Only these facets are tested (e.g. those with direct sunlight)

    Returns
    -------
    np.ndarray of bool, shape (N,)
    """
    candidates = rays_hit_sphere(origins, r_hat, occluder_center, occluder_radius)
    if lit is not None:
        candidates &= lit
    eclipsed = np.zeros(len(origins), dtype=bool)
    idx = np.flatnonzero(candidates)
    if idx.size:
        eclipsed[idx] = _rays_hit_triangles(
            np.ascontiguousarray(origins[idx]), np.ascontiguousarray(r_hat),
            np.ascontiguousarray(occluder_vertices),
        )
    return eclipsed


# ---------------------------------------------------------------------------
# Binary pair
# ---------------------------------------------------------------------------

def find_eclipse(pri, sec, r_sun, sec_from_pri, R_sec_to_pri):
    """Zero the direct sunlight of mutually eclipsed facets.

    Parameters
    ----------
    pri, sec : SingleTPM
        Primary and secondary; their ``flux`` arrays are updated in place.
    r_sun : array_like, length 3
        Sun position in the primary's frame [m]
    sec_from_pri : array_like, length 3
        Secondary position in the primary's frame [m]
    R_sec_to_pri : array_like, shape (3, 3)
        Rotation from the secondary's frame to the primary's frame

    Returns
    -------
    tuple of np.ndarray of bool
        Eclipse flags of the primary's and the secondary's facets.
    """
    r_sun = np.asarray(r_sun, dtype=float)
    r_hat = r_sun / np.linalg.norm(r_sun)
    d = np.asarray(sec_from_pri, dtype=float)
    R = np.asarray(R_sec_to_pri, dtype=float)

    # Secondary geometry expressed in the primary's frame
    sec_vertices = sec.shape.vertices @ R.T + d
    sec_centers = sec.shape.centers @ R.T + d

    # Primary shadowed by the secondary
    eclipsed_pri = eclipsed_facets(
        pri.shape.centers, r_hat, sec_vertices, d, sec.shape.bounding_radius,
        lit=pri.flux[:, F_SUN] > 0,
    )
    # Secondary shadowed by the primary
    eclipsed_sec = eclipsed_facets(
        sec_centers, r_hat, pri.shape.vertices, np.zeros(3), pri.shape.bounding_radius,
        lit=sec.flux[:, F_SUN] > 0,
    )

    pri.flux[eclipsed_pri, F_SUN] = 0.0
    sec.flux[eclipsed_sec, F_SUN] = 0.0
    return eclipsed_pri, eclipsed_sec
