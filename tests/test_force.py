"""Tests for the photon recoil force."""

import numpy as np

from asteroid_tpm.constants import C0, SIGMA_SB
from asteroid_tpm.force import (facet_forces, radiant_exitance, sum_force_torque,
                                update_thermal_force)


class TestRadiantExitance:

    def test_value(self):
        flux = np.array([[1000.0, 10.0, 20.0]])
        E = radiant_exitance(flux, np.array([300.0]), 0.1, 0.2, 0.9)
        np.testing.assert_allclose(E, 0.1 * 1010.0 + 0.2 * 20.0 + 0.9 * SIGMA_SB * 300.0 ** 4)


class TestFacetForces:

    def test_along_inward_normal(self):
        normals = np.array([[0.0, 0.0, 1.0]])
        F = facet_forces(normals, np.array([2.0]), np.array([300.0]))
        np.testing.assert_allclose(F, [[0.0, 0.0, -2 / 3 * 300.0 * 2.0 / C0]])

    def test_torque(self):
        centers = np.array([[1.0, 0.0, 0.0], [-1.0, 0.0, 0.0]])
        forces = np.array([[0.0, 1.0, 0.0], [0.0, -1.0, 0.0]])
        force, torque = sum_force_torque(centers, forces)
        np.testing.assert_allclose(force, 0.0)
        np.testing.assert_allclose(torque, [0.0, 0.0, 2.0])


class TestThermalForce:

    def test_symmetric_body(self, octa, quiet_config):
        """Uniform emission from a symmetric body gives no net force or torque."""
        from asteroid_tpm.model import SingleTPM
        from conftest import make_params

        stpm = SingleTPM(octa, make_params(), quiet_config)
        stpm.init_temperature(250.0)
        update_thermal_force(stpm, 0)
        scale = np.abs(stpm.face_forces).max()
        assert scale > 0
        np.testing.assert_allclose(stpm.force, 0.0, atol=1e-12 * scale)
        np.testing.assert_allclose(stpm.torque, 0.0, atol=1e-9 * scale)

    def test_sunlit_plate(self, plate_model, sun_1au):
        """A hot sunlit plate is pushed away from the sun."""
        plate_model.init_temperature(300.0)
        plate_model.update_flux(sun_1au)
        plate_model.update_thermal_force(0)
        assert plate_model.force[2] < 0
        np.testing.assert_allclose(plate_model.force[:2], 0.0, atol=1e-20)
        E = 0.1 * 1366.0 + 0.9 * SIGMA_SB * 300.0 ** 4
        np.testing.assert_allclose(plate_model.force[2], -2 / 3 * E * 1.0 / C0)
