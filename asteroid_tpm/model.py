"""Thermophysical models of single and binary asteroids.

A body model owns the full temperature history of its shape, an array of
shape (Nz, Ns, Nt), and advances it one time step at a time:

    update flux -> (in save window) force, torque and outputs
                -> energy ledger -> temperature of the next step

No temperature update follows the final ephemeris step.
"""
import warnings
from dataclasses import dataclass, field

import numpy as np
from tqdm import tqdm

from .boundary import (LOWER_BOUNDARY, UPPER_BOUNDARY, BoundaryCondition,
                       ConvergenceWarning, conduction_coefficient)
from .config import ConfigurationError, Configurator
from .eclipse import find_eclipse
from .energy import absorbed_energy, energy_io, rotation_energy_ratio
from .flux import check_flux_history, update_flux_sun
from .force import update_thermal_force
from .solvers import check_stability, solve_explicit


@dataclass
class TPMResult:
    """Outputs of a single-body run.

    ``surf_temps``, ``forces`` and ``torques`` cover the saved steps;
    the energy ledger covers every step.
    """

    et_range: np.ndarray  # ephemeris times of the saved steps [s]
    sun: np.ndarray  # sun positions of the saved steps [m]
    surf_temps: np.ndarray  # (Ns, n_saved) [K]
    forces: np.ndarray  # (n_saved, 3) body-fixed [N]
    torques: np.ndarray  # (n_saved, 3) body-fixed [N m]
    E_in: np.ndarray  # (Nt,) absorbed power [W]
    E_out: np.ndarray  # (Nt,) emitted power [W]
    E_cons: np.ndarray  # (Nt,) E_out / E_in
    n_unconverged: int = 0  # facet-steps where Newton's method did not converge
    steps_per_rotation: int = field(default=None, repr=False)

    def energy_conservation(self):
        """Emitted/absorbed energy over the last simulated rotation."""
        n = self.steps_per_rotation or len(self.E_in)
        return rotation_energy_ratio(self.E_in, self.E_out, n)


@dataclass
class BinaryTPMResult:
    """Outputs of a binary run, one TPMResult per body."""

    pri: TPMResult
    sec: TPMResult


def _save_indices(save_range, Nt):
    """Validate the save window and return it as an index array."""
    if save_range is None:
        return np.arange(Nt)
    idx = np.asarray(save_range, dtype=np.int64).ravel()
    if idx.size == 0:
        raise ConfigurationError("save_range is empty")
    if idx.min() < 0 or idx.max() >= Nt:
        raise ConfigurationError(f"save_range must lie within [0, {Nt - 1}]")
    if np.any(np.diff(idx) <= 0):
        raise ConfigurationError("save_range must be strictly increasing")
    return idx


def _check_ephemeris(et_range, Nt, name="et_range"):
    et_range = np.asarray(et_range, dtype=float)
    if et_range.shape != (Nt,):
        raise ConfigurationError(
            f"{name} has {et_range.size} samples, but the model has Nt={Nt} time steps"
        )
    return et_range


def _sun_array(sun, Nt, name="sun"):
    if sun is None:
        return None
    sun = np.asarray(sun, dtype=float)
    if sun.shape != (Nt, 3):
        raise ConfigurationError(f"{name} must have shape {(Nt, 3)}, got {sun.shape}")
    return sun


class SingleTPM(object):
    """Thermophysical model of a single asteroid.

    Parameters
    ----------
    shape : ShapeModel
        Facet geometry
    thermo_params : ThermoParams
        Thermophysical parameters (scalar or per facet)
    config : Configurator, optional
        Boundary conditions and numerical options
    temperature : np.ndarray, optional
        Preallocated temperature array; must have shape (Nz, Ns, Nt).
    """

    def __init__(self, shape, thermo_params, config=None, temperature=None):

        self.shape = shape
        self.thermo_params = thermo_params
        self.config = config if config is not None else Configurator()

        Ns = len(shape)
        Nz = thermo_params.Nz
        Nt = thermo_params.Nt

        # Fatal configuration checks, done once before any stepping
        thermo_params.validate(Ns)
        check_stability(thermo_params.lam, self.config.lambda_max)

        # Per-facet lookup tables
        self.A_B = thermo_params.per_facet("A_B", Ns)
        self.A_TH = thermo_params.per_facet("A_TH", Ns)
        self.eps = thermo_params.per_facet("eps", Ns)
        self.Gamma = thermo_params.per_facet("Gamma", Ns)
        self.lam = thermo_params.per_facet("lam", Ns)
        self.dz_bar = thermo_params.per_facet("dz_bar", Ns)
        self.conduction_coef = conduction_coefficient(self.Gamma, thermo_params.P,
                                                      self.dz_bar)

        self.upper_bc = BoundaryCondition(self.config.upper_bc)
        self.lower_bc = BoundaryCondition(self.config.lower_bc)

        if temperature is None:
            self.temperature = np.zeros((Nz, Ns, Nt))
        else:
            if np.shape(temperature) != (Nz, Ns, Nt):
                raise ConfigurationError(
                    f"Temperature array has shape {np.shape(temperature)}, "
                    f"expected (Nz, Ns, Nt) = {(Nz, Ns, Nt)}"
                )
            self.temperature = temperature

        self.flux = np.zeros((Ns, 3))  # F_sun, F_scat, F_rad [W m-2]
        self.face_forces = np.zeros((Ns, 3))
        self.force = np.zeros(3)
        self.torque = np.zeros(3)
        self.n_unconverged = 0

    @property
    def Nt(self):
        return self.thermo_params.Nt

    def init_temperature(self, T0=0.0):
        """Initialize all temperature cells at ``T0`` [K]."""
        if T0 < 0:
            raise ConfigurationError(f"Initial temperature must be >= 0 K, got {T0}")
        self.temperature[...] = T0
        self.n_unconverged = 0

    def surface_temperature(self, nt):
        """Surface temperature of every facet at step ``nt`` (a view)."""
        return self.temperature[0, :, nt]

    def absorbed_flux(self):
        """Total absorbed flux of every facet [W m-2], from the current flux."""
        return absorbed_energy(self.flux, self.A_B, self.A_TH)

    def update_flux(self, r_sun):
        """Direct sunlight from a sun at ``r_sun`` (body-fixed frame, [m])."""
        update_flux_sun(self, r_sun)

    def update_thermal_force(self, nt):
        update_thermal_force(self, nt)

    def energy_io(self, nt):
        """Energy input, output and their ratio at step ``nt``."""
        return energy_io(self.flux, self.surface_temperature(nt),
                         self.A_B, self.A_TH, self.eps, self.shape.areas)

    def update_temperature(self, nt):
        """Calculate the temperature of step ``nt + 1`` from step ``nt``.

        Only ``temperature[:, :, nt+1]`` is written.  Returns the number
        of facets for which the surface energy balance did not converge.
        """
        T = self.temperature[:, :, nt]
        T_next = self.temperature[:, :, nt + 1]

        solve_explicit(T, T_next, self.lam)

        # Newton's method starts from the latest surface temperature
        T_next[0] = T[0]
        n_fail = UPPER_BOUNDARY[self.upper_bc](T_next, self)
        LOWER_BOUNDARY[self.lower_bc](T_next, self)

        self.n_unconverged += n_fail
        return n_fail

    def _set_flux(self, nt, r_sun, flux):
        if flux is not None:
            self.flux[:] = flux[nt]
        else:
            self.update_flux(r_sun)

    def _prepare_run(self, et_range, sun, flux, save_range):
        Nt = self.Nt
        et_range = _check_ephemeris(et_range, Nt)
        sun = _sun_array(sun, Nt)
        if flux is None and sun is None:
            raise ConfigurationError("Either sun positions or a flux history is required")
        if flux is not None:
            flux = check_flux_history(flux, Nt, len(self.shape))
        return et_range, sun, flux, _save_indices(save_range, Nt)

    def _steps_per_rotation(self):
        return max(1, int(round(self.thermo_params.P / self.thermo_params.dt)))

    def run(self, et_range, sun=None, savepath=None, save_range=None, flux=None):
        """Run the thermophysical model.

        Parameters
        ----------
        et_range : array_like, shape (Nt,)
            Ephemeris times [s]
        sun : array_like, shape (Nt, 3), optional
            Sun position in the body-fixed frame at each time [m]
            (not normalized). Drives the direct-sunlight flux.
        savepath : str or Path, optional
            HDF5 file to write the result to
        save_range : array_like of int, optional
            Strictly increasing step indices whose force, torque and
            surface temperature are kept. Default: every step.
        flux : array_like, shape (Nt, Ns, 3), optional
            Precomputed flux history, used instead of ``sun``

        Returns
        -------
        TPMResult
        """
        et_range, sun, flux, save_idx = self._prepare_run(et_range, sun, flux, save_range)
        Nt = self.Nt
        save_set = set(save_idx.tolist())

        surf_temps = np.zeros((len(self.shape), len(save_idx)))
        forces = np.zeros((len(save_idx), 3))
        torques = np.zeros((len(save_idx), 3))
        E_in, E_out, E_cons = np.zeros(Nt), np.zeros(Nt), np.zeros(Nt)

        self.n_unconverged = 0
        idx = 0  # Index to save data

        with tqdm(total=Nt, desc="Running TPM...", disable=not self.config.show_progress) as pbar:
            for nt in range(Nt):
                self._set_flux(nt, None if sun is None else sun[nt], flux)

                if nt in save_set:
                    self.update_thermal_force(nt)
                    surf_temps[:, idx] = self.surface_temperature(nt)
                    forces[idx] = self.force  # Body-fixed frame
                    torques[idx] = self.torque  # Body-fixed frame
                    idx += 1

                E_in[nt], E_out[nt], E_cons[nt] = self.energy_io(nt)

                pbar.set_postfix(Timestep=nt, E_cons=E_cons[nt],
                                 unconverged=self.n_unconverged, refresh=False)
                pbar.update()

                if nt == Nt - 1:
                    break  # Stop to update the temperature at the final step
                self.update_temperature(nt)

        if self.n_unconverged:
            warnings.warn(
                f"Surface temperature did not converge for {self.n_unconverged} "
                f"facet-steps within {self.config.newton_max_iter} Newton iterations",
                ConvergenceWarning,
                stacklevel=2,
            )

        result = TPMResult(
            et_range=et_range[save_idx],
            sun=sun[save_idx] if sun is not None else np.zeros((len(save_idx), 3)),
            surf_temps=surf_temps,
            forces=forces,
            torques=torques,
            E_in=E_in,
            E_out=E_out,
            E_cons=E_cons,
            n_unconverged=self.n_unconverged,
            steps_per_rotation=self._steps_per_rotation(),
        )

        if savepath is not None:
            from .output import save_tpm
            save_tpm(savepath, self, result)

        return result


class BinaryTPM(object):
    """Thermophysical model of a binary asteroid.

    Both bodies share the time grid (``Nt``) and are advanced in lockstep.
    Direct sunlight of mutually eclipsed facets is removed before the
    forces and temperatures are updated.  Heating of one body by the
    other's radiation is not modelled.

    Parameters
    ----------
    pri, sec : SingleTPM
        Models of the primary and the secondary
    """

    def __init__(self, pri, sec):
        if pri.Nt != sec.Nt:
            raise ConfigurationError(
                f"Primary and secondary must share Nt, got {pri.Nt} and {sec.Nt}"
            )
        self.pri = pri
        self.sec = sec

    @property
    def Nt(self):
        return self.pri.Nt

    @property
    def show_progress(self):
        return self.pri.config.show_progress

    def init_temperature(self, T0=0.0):
        self.pri.init_temperature(T0)
        self.sec.init_temperature(T0)

    def update_flux(self, r_sun_pri, r_sun_sec, sec_from_pri, R_sec_to_pri):
        """Direct sunlight on both bodies, then mutual shadowing."""
        self.pri.update_flux(r_sun_pri)
        self.sec.update_flux(r_sun_sec)
        return find_eclipse(self.pri, self.sec, r_sun_pri, sec_from_pri, R_sec_to_pri)

    def update_temperature(self, nt):
        return self.pri.update_temperature(nt) + self.sec.update_temperature(nt)

    def run(self, et_range, suns, sec_from_pri, R_sec_to_pri, savepath=None,
            save_range=None):
        """Run the thermophysical model of the pair.

        Parameters
        ----------
        et_range : array_like, shape (Nt,)
            Ephemeris times [s]
        suns : tuple of array_like, each of shape (Nt, 3)
            Sun position in the primary's and the secondary's frame [m]
        sec_from_pri : array_like, shape (Nt, 3)
            Position of the secondary in the primary's frame [m]
        R_sec_to_pri : array_like, shape (Nt, 3, 3)
            Rotation matrices from the secondary's to the primary's frame
        savepath : str or Path, optional
            HDF5 file to write the result to
        save_range : array_like of int, optional
            Strictly increasing step indices to keep. Default: every step.

        Returns
        -------
        BinaryTPMResult
        """
        Nt = self.Nt
        et_range = _check_ephemeris(et_range, Nt)
        sun_pri = _sun_array(suns[0], Nt, "suns[0]")
        sun_sec = _sun_array(suns[1], Nt, "suns[1]")
        if sun_pri is None or sun_sec is None:
            raise ConfigurationError("Binary runs need the sun position in both body frames")
        sec_from_pri = _sun_array(sec_from_pri, Nt, "sec_from_pri")
        R_sec_to_pri = np.asarray(R_sec_to_pri, dtype=float)
        if R_sec_to_pri.shape != (Nt, 3, 3):
            raise ConfigurationError(
                f"R_sec_to_pri must have shape {(Nt, 3, 3)}, got {R_sec_to_pri.shape}"
            )
        save_idx = _save_indices(save_range, Nt)
        save_set = set(save_idx.tolist())

        bodies = (self.pri, self.sec)
        n_saved = len(save_idx)
        surf_temps = [np.zeros((len(b.shape), n_saved)) for b in bodies]
        forces = [np.zeros((n_saved, 3)) for _ in bodies]
        torques = [np.zeros((n_saved, 3)) for _ in bodies]
        ledgers = [np.zeros((3, Nt)) for _ in bodies]

        for body in bodies:
            body.n_unconverged = 0
        idx = 0

        with tqdm(total=Nt, desc="Running TPM...", disable=not self.show_progress) as pbar:
            for nt in range(Nt):
                ## Update energy flux and mutual shadowing
                self.update_flux(sun_pri[nt], sun_sec[nt], sec_from_pri[nt], R_sec_to_pri[nt])

                if nt in save_set:
                    for i, body in enumerate(bodies):
                        body.update_thermal_force(nt)
                        surf_temps[i][:, idx] = body.surface_temperature(nt)
                        forces[i][idx] = body.force  # Body-fixed frame
                        torques[i][idx] = body.torque  # Body-fixed frame
                    idx += 1

                ## Energy input/output
                for i, body in enumerate(bodies):
                    ledgers[i][:, nt] = body.energy_io(nt)

                pbar.set_postfix(Timestep=nt, E_cons_pri=ledgers[0][2, nt],
                                 E_cons_sec=ledgers[1][2, nt],
                                 unconverged=self.pri.n_unconverged + self.sec.n_unconverged,
                                 refresh=False)
                pbar.update()

                if nt == Nt - 1:
                    break  # Stop to update the temperature at the final step
                self.update_temperature(nt)

        n_unconverged = self.pri.n_unconverged + self.sec.n_unconverged
        if n_unconverged:
            warnings.warn(
                f"Surface temperature did not converge for {n_unconverged} "
                f"facet-steps (primary: {self.pri.n_unconverged}, "
                f"secondary: {self.sec.n_unconverged})",
                ConvergenceWarning,
                stacklevel=2,
            )

        results = []
        for i, (body, sun) in enumerate(zip(bodies, (sun_pri, sun_sec))):
            results.append(TPMResult(
                et_range=et_range[save_idx],
                sun=sun[save_idx],
                surf_temps=surf_temps[i],
                forces=forces[i],
                torques=torques[i],
                E_in=ledgers[i][0],
                E_out=ledgers[i][1],
                E_cons=ledgers[i][2],
                n_unconverged=body.n_unconverged,
                steps_per_rotation=body._steps_per_rotation(),
            ))
        result = BinaryTPMResult(*results)

        if savepath is not None:
            from .output import save_binary_tpm
            save_binary_tpm(savepath, self, result)

        return result
