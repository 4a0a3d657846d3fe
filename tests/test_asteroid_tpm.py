"""Tests for the `asteroid_tpm` package."""

import asteroid_tpm


def test_version():
    assert asteroid_tpm.__version__ == "0.1.0"


def test_public_api():
    for name in ("Configurator", "ConfigurationError", "ThermoParams", "ShapeModel",
                 "SingleTPM", "BinaryTPM", "ConvergenceWarning", "save_tpm", "load_tpm"):
        assert hasattr(asteroid_tpm, name)
