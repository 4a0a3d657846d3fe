"""Tests for the CLI module."""

import numpy as np
import pytest
from click.testing import CliRunner

from asteroid_tpm.cli import main
from asteroid_tpm.constants import AU
from asteroid_tpm.output import load_tpm

from conftest import octahedron


CONFIG = """\
thermo_params:
  A_B: 0.1
  A_TH: 0.0
  rho: 1000.0
  Cp: 500.0
  eps: 0.9
  Gamma: 200.0
  P: 3600.0
  Nz: 11
  n_skin: 2.0
boundary:
  upper: radiation
  lower: insulation
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def inputs(tmp_path):
    """Config, shape and two rotations of ephemeris, 64 steps per rotation."""
    config = tmp_path / "config.yaml"
    config.write_text(CONFIG)

    shape = tmp_path / "shape.npz"
    nodes, faces = octahedron(1000.0)
    np.savez(shape, nodes=nodes, faces=faces)

    P, Nt = 3600.0, 129
    et = np.linspace(0.0, 2 * P, Nt)
    phase = 2 * np.pi * et / P
    sun = AU * np.column_stack([np.cos(phase), np.sin(phase), np.zeros(Nt)])
    ephem = tmp_path / "ephem.npz"
    np.savez(ephem, et=et, sun=sun)
    return tmp_path, [str(config), "--shape", str(shape), "--ephemeris", str(ephem)]


class TestCLIHelp:

    def test_help(self, runner):
        """CLI --help returns 0 and shows usage."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "asteroid-tpm" in result.output.lower()
        assert "--ephemeris" in result.output

    def test_short_help(self, runner):
        result = runner.invoke(main, ["-h"])
        assert result.exit_code == 0


class TestCLIRun:

    def test_summary(self, runner, inputs):
        _, args = inputs
        result = runner.invoke(main, args + ["--T0", "250"])
        assert result.exit_code == 0, result.output
        assert "E_cons=" in result.output
        assert "T_surf=" in result.output

    def test_quiet_mode(self, runner, inputs):
        """Quiet mode suppresses output."""
        _, args = inputs
        result = runner.invoke(main, args + ["--T0", "250", "--quiet"])
        assert result.exit_code == 0
        assert result.output.strip() == ""

    def test_output_file(self, runner, inputs):
        tmp_path, args = inputs
        out = tmp_path / "out.h5"
        result = runner.invoke(main, args + ["--T0", "250", "--save-last", "64",
                                             "-o", str(out), "--quiet"])
        assert result.exit_code == 0
        data = load_tpm(out)
        assert data["surf_temps"].shape == (8, 64)
        assert data["E_in"].shape == (129,)
        assert data["thermo_params"]["Nt"] == 129


class TestCLIErrors:

    def test_missing_thermo_params(self, runner, inputs):
        tmp_path, args = inputs
        (tmp_path / "config.yaml").write_text("boundary:\n  upper: radiation\n")
        result = runner.invoke(main, args)
        assert result.exit_code == 2
        assert "thermo_params" in result.output

    def test_invalid_boundary(self, runner, inputs):
        tmp_path, args = inputs
        (tmp_path / "config.yaml").write_text(CONFIG.replace("lower: insulation",
                                                             "lower: radiation"))
        result = runner.invoke(main, args)
        assert result.exit_code == 2

    def test_unstable_grid(self, runner, inputs):
        tmp_path, args = inputs
        (tmp_path / "config.yaml").write_text(CONFIG.replace("Nz: 11", "Nz: 101"))
        result = runner.invoke(main, args + ["--quiet"])
        assert result.exit_code == 2
        assert "stability" in result.output

    def test_missing_shape(self, runner, inputs):
        _, args = inputs
        result = runner.invoke(main, args[:2] + ["missing.npz"] + args[3:])
        assert result.exit_code == 2
