# -*- coding: utf-8 -*-

"""Top-level package for asteroid_tpm."""

__author__ = """Paul O. Hayne"""
__email__ = "paul.hayne@lasp.colorado.edu"
__version__ = "0.1.0"

from .config import Configurator, ConfigurationError
from .boundary import BoundaryCondition, ConvergenceWarning, update_surface_temperature
from .properties import (thermal_skin_depth, thermal_inertia, thermal_conductivity,
                         flux_total, subsolar_temperature)
from .grid import depth_grid, diffusion_number
from .solvers import solve_explicit, check_stability
from .energy import energy_io, rotation_energy_ratio
from .params import ThermoParams
from .shape import ShapeModel
from .model import SingleTPM, BinaryTPM, TPMResult, BinaryTPMResult
from .output import save_tpm, save_binary_tpm, load_tpm
