"""Tests for mutual eclipses in a binary."""

import numpy as np

from asteroid_tpm.constants import AU
from asteroid_tpm.eclipse import (_rays_hit_triangles, eclipsed_facets, find_eclipse,
                                  rays_hit_sphere)
from asteroid_tpm.flux import F_SUN
from asteroid_tpm.model import SingleTPM

from conftest import make_params, octahedron


TRIANGLE = np.array([[[0.0, -1.0, -1.0], [0.0, 1.0, -1.0], [0.0, 0.0, 1.0]]])


class TestRayCasting:

    def test_hit_in_front(self):
        origins = np.array([[-5.0, 0.0, 0.0], [5.0, 0.0, 0.0], [-5.0, 3.0, 0.0]])
        hit = _rays_hit_triangles(origins, np.array([1.0, 0.0, 0.0]), TRIANGLE)
        np.testing.assert_array_equal(hit, [True, False, False])

    def test_parallel_ray(self):
        hit = _rays_hit_triangles(np.array([[0.0, -5.0, 0.0]]), np.array([0.0, 1.0, 0.0]),
                                  TRIANGLE)
        assert not hit[0]

    def test_sphere(self):
        origins = np.array([[-5.0, 0.0, 0.0], [-5.0, 2.0, 0.0], [5.0, 0.0, 0.0]])
        hit = rays_hit_sphere(origins, np.array([1.0, 0.0, 0.0]), np.zeros(3), 1.5)
        np.testing.assert_array_equal(hit, [True, False, False])

    def test_only_lit_facets_are_tested(self):
        origins = np.array([[-5.0, 0.0, 0.0], [-5.0, 0.1, 0.0]])
        eclipsed = eclipsed_facets(origins, np.array([1.0, 0.0, 0.0]), TRIANGLE,
                                   np.zeros(3), 1.5, lit=np.array([True, False]))
        np.testing.assert_array_equal(eclipsed, [True, False])

    def test_origin_inside_sphere(self):
        """The occluder's center may lie behind a facet that sits inside its sphere."""
        origins = np.array([[0.5, 0.0, 0.0], [5.0, 0.0, 0.0]])
        hit = rays_hit_sphere(origins, np.array([1.0, 0.0, 0.0]), np.zeros(3), 1.5)
        np.testing.assert_array_equal(hit, [True, False])

    def test_elongated_occluder_close_by(self):
        """A long, thin occluder overhead shadows a facet within its bounding sphere."""
        nodes, faces = octahedron(1.0)
        d = np.array([500.0, 0.0, 30.0])
        vertices = (nodes * [1000.0, 10.0, 10.0])[faces] + d
        origins = np.array([[3.0, 3.0, 3.0]])
        r_hat = np.array([-0.1, 0.0, 1.0]) / np.linalg.norm([-0.1, 0.0, 1.0])
        assert _rays_hit_triangles(origins, r_hat, vertices)[0]
        eclipsed = eclipsed_facets(origins, r_hat, vertices, d, 1000.0)
        np.testing.assert_array_equal(eclipsed, [True])


class TestFindEclipse:

    def _pair(self, octa):
        params = make_params()
        return SingleTPM(octa, params), SingleTPM(octa, params)

    def test_primary_behind_secondary(self, octa):
        """The secondary between primary and sun shadows the primary's day side."""
        pri, sec = self._pair(octa)
        d = np.array([3000.0, 0.0, 0.0])
        r_sun = np.array([AU, 0.0, 0.0])
        pri.update_flux(r_sun)
        sec.update_flux(r_sun - d)
        lit_pri = pri.flux[:, F_SUN] > 0
        lit_sec = sec.flux[:, F_SUN].copy()

        eclipsed_pri, eclipsed_sec = find_eclipse(pri, sec, r_sun, d, np.eye(3))

        np.testing.assert_array_equal(eclipsed_pri, lit_pri)
        assert not eclipsed_sec.any()
        np.testing.assert_array_equal(pri.flux[:, F_SUN], 0.0)
        np.testing.assert_array_equal(sec.flux[:, F_SUN], lit_sec)

    def test_secondary_behind_primary(self, octa):
        pri, sec = self._pair(octa)
        d = np.array([-3000.0, 0.0, 0.0])
        r_sun = np.array([AU, 0.0, 0.0])
        pri.update_flux(r_sun)
        sec.update_flux(r_sun - d)
        _, eclipsed_sec = find_eclipse(pri, sec, r_sun, d, np.eye(3))
        assert eclipsed_sec.sum() == 4
        np.testing.assert_array_equal(sec.flux[:, F_SUN], 0.0)

    def test_rotated_secondary(self, octa):
        """Secondary frame rotated 90 deg about z; the sun lies along its -y axis."""
        pri, sec = self._pair(octa)
        d = np.array([-3000.0, 0.0, 0.0])
        R = np.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
        r_sun = np.array([AU, 0.0, 0.0])
        pri.update_flux(r_sun)
        sec.update_flux(R.T @ (r_sun - d))
        _, eclipsed_sec = find_eclipse(pri, sec, r_sun, d, R)
        assert eclipsed_sec.sum() == 4

    def test_no_eclipse_side_by_side(self, octa):
        pri, sec = self._pair(octa)
        d = np.array([0.0, 5000.0, 0.0])
        r_sun = np.array([AU, 0.0, 0.0])
        pri.update_flux(r_sun)
        sec.update_flux(r_sun - d)
        eclipsed_pri, eclipsed_sec = find_eclipse(pri, sec, r_sun, d, np.eye(3))
        assert not eclipsed_pri.any()
        assert not eclipsed_sec.any()
