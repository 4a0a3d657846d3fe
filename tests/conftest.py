"""Shared pytest fixtures for asteroid_tpm tests."""

import itertools

import numpy as np
import pytest

from asteroid_tpm.config import Configurator
from asteroid_tpm.constants import AU
from asteroid_tpm.model import SingleTPM
from asteroid_tpm.params import ThermoParams
from asteroid_tpm.shape import ShapeModel


def octahedron(radius=1.0):
    """Regular octahedron with outward-facing triangles."""
    nodes = radius * np.array([
        [1, 0, 0], [-1, 0, 0],
        [0, 1, 0], [0, -1, 0],
        [0, 0, 1], [0, 0, -1],
    ], dtype=float)
    faces = []
    for sx, sy, sz in itertools.product((1, -1), repeat=3):
        a = 0 if sx > 0 else 1
        b = 2 if sy > 0 else 3
        c = 4 if sz > 0 else 5
        faces.append([a, b, c] if sx * sy * sz > 0 else [a, c, b])
    return nodes, np.array(faces)


@pytest.fixture
def plate():
    """Unit square in the x-y plane, two facets facing +z."""
    nodes = [[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]]
    faces = [[0, 1, 2], [0, 2, 3]]
    return ShapeModel(nodes, faces)


@pytest.fixture
def octa():
    """Octahedron of 1 km radius."""
    return ShapeModel(*octahedron(1000.0))


@pytest.fixture
def quiet_config():
    """Default configuration without a progress bar."""
    return Configurator(show_progress=False)


@pytest.fixture
def sun_1au():
    """Sun at 1 AU along +z."""
    return np.array([0.0, 0.0, AU])


def make_params(Nt=11, Nz=11, P=3600.0, Gamma=200.0, n_skin=2.0, **kwargs):
    """Thermophysical parameters spanning one period, stable by default."""
    defaults = dict(A_B=0.1, A_TH=0.0, rho=1000.0, Cp=500.0, eps=0.9)
    defaults.update(kwargs)
    return ThermoParams(P=P, Nt=Nt, Nz=Nz, Gamma=Gamma, n_skin=n_skin, **defaults)


@pytest.fixture
def plate_model(plate, quiet_config):
    """Two-facet plate model, 11 steps over one hour."""
    return SingleTPM(plate, make_params(), quiet_config)
