"""Thermophysical parameter set for asteroid_tpm.

Every physical property may be given either as one value shared by all
facets or as a sequence with one value per facet.  Derived quantities
(skin depth, thermal inertia, diffusion number) inherit that shape.
"""
import numpy as np

from .config import ConfigurationError
from .grid import depth_step, diffusion_number, nondimensional_depth_step
from .properties import thermal_conductivity, thermal_inertia, thermal_skin_depth

# Fields that may be scalar or per-facet
FACET_FIELDS = ("A_B", "A_TH", "k", "rho", "Cp", "eps", "Gamma", "l", "lam")


def _as_field(value):
    """Return a float for scalars, a 1-D float array otherwise."""
    arr = np.asarray(value, dtype=float)
    if arr.ndim == 0:
        return float(arr)
    if arr.ndim != 1:
        raise ConfigurationError(
            f"Per-facet parameters must be 1-D, got shape {arr.shape}"
        )
    return arr


class ThermoParams(object):
    """Thermophysical parameters of one body.

    Parameters
    ----------
    A_B : float or array_like
        Bond albedo
    A_TH : float or array_like
        Albedo at thermal infrared wavelength
    rho : float or array_like
        Density [kg m-3]
    Cp : float or array_like
        Heat capacity [J kg-1 K-1]
    eps : float or array_like
        Emissivity
    P : float
        Period of thermal cycle (rotation period) [s]
    Nt : int
        Number of time steps of the driving ephemeris
    Nz : int
        Number of depth nodes
    t_begin, t_end : float
        First and last ephemeris times [s]. ``t_end`` defaults to one
        period after ``t_begin``.
    k : float or array_like, optional
        Thermal conductivity [W m-1 K-1]
    Gamma : float or array_like, optional
        Thermal inertia [tiu]. Give exactly one of ``k`` and ``Gamma``.
    z_max : float, optional
        Depth of the bottom node [m]
    n_skin : float, optional
        Depth of the bottom node in units of the (largest) skin depth.
        Give exactly one of ``z_max`` and ``n_skin``.
    """

    def __init__(self, A_B, A_TH, rho, Cp, eps, P, Nt, Nz, t_begin=0.0, t_end=None,
                 k=None, Gamma=None, z_max=None, n_skin=None):

        if (k is None) == (Gamma is None):
            raise ConfigurationError("Give exactly one of thermal conductivity `k` "
                                     "and thermal inertia `Gamma`")
        if (z_max is None) == (n_skin is None):
            raise ConfigurationError("Give exactly one of `z_max` and `n_skin`")

        self.A_B = _as_field(A_B)
        self.A_TH = _as_field(A_TH)
        self.rho = _as_field(rho)
        self.Cp = _as_field(Cp)
        self.eps = _as_field(eps)
        self.P = float(P)
        self.Nt = int(Nt)
        self.Nz = int(Nz)

        if self.P <= 0:
            raise ConfigurationError(f"Period must be positive, got {self.P}")
        if self.Nt < 2:
            raise ConfigurationError(f"Nt must be >= 2, got {self.Nt}")
        if self.Nz < 3:
            raise ConfigurationError(f"Nz must be >= 3, got {self.Nz}")
        for name in ("rho", "Cp"):
            if np.any(np.asarray(getattr(self, name)) <= 0):
                raise ConfigurationError(f"{name} must be positive")

        # Time step
        self.t_begin = float(t_begin)
        self.t_end = float(t_end) if t_end is not None else self.t_begin + self.P
        if self.t_end <= self.t_begin:
            raise ConfigurationError("t_end must be greater than t_begin")
        self.dt = (self.t_end - self.t_begin) / (self.Nt - 1)

        # Conductivity and thermal inertia, whichever was given
        if k is not None:
            self.k = _as_field(k)
            self.Gamma = _as_field(thermal_inertia(self.k, self.rho, self.Cp))
        else:
            self.Gamma = _as_field(Gamma)
            self.k = _as_field(thermal_conductivity(self.Gamma, self.rho, self.Cp))
        if np.any(np.asarray(self.k) <= 0):
            raise ConfigurationError("Thermal conductivity must be positive")

        self.l = _as_field(thermal_skin_depth(self.P, self.k, self.rho, self.Cp))

        # Depth grid
        if z_max is None:
            z_max = n_skin * np.max(self.l)
        self.z_max = float(z_max)
        if self.z_max <= 0:
            raise ConfigurationError(f"z_max must be positive, got {self.z_max}")
        self.dz = depth_step(self.z_max, self.Nz)

        self.lam = _as_field(diffusion_number(self.dt, self.P, self.dz, self.l))

    @property
    def dz_bar(self):
        """Depth step normalized by skin depth (scalar or per facet)."""
        return nondimensional_depth_step(self.dz, self.l)

    def validate(self, n_facets):
        """Raise ConfigurationError if the parameters do not fit ``n_facets``."""
        for name in FACET_FIELDS:
            value = getattr(self, name)
            if np.ndim(value) == 1 and len(value) != n_facets:
                raise ConfigurationError(
                    f"`{name}` has {len(value)} values, but the shape has "
                    f"{n_facets} facets"
                )
        for name in ("A_B", "A_TH"):
            value = np.asarray(getattr(self, name))
            if np.any((value < 0) | (value > 1)):
                raise ConfigurationError(f"{name} must be within [0, 1]")
        eps = np.asarray(self.eps)
        if np.any((eps <= 0) | (eps > 1)):
            raise ConfigurationError("Emissivity must be within (0, 1]")

    def per_facet(self, name, n_facets):
        """Return field ``name`` as a read-only array with one value per facet.

        Scalars are broadcast, so the caller never needs to know how the
        value was given.  Indexing the result is O(1).
        """
        value = getattr(self, name)
        if np.ndim(value) == 0:
            arr = np.full(n_facets, value, dtype=float)
        else:
            if len(value) != n_facets:
                raise ConfigurationError(
                    f"`{name}` has {len(value)} values, expected {n_facets}"
                )
            arr = np.array(value, dtype=float)
        arr.setflags(write=False)
        return arr

    def to_dict(self):
        """Serialize inputs and derived quantities to a plain dict."""
        d = {name: getattr(self, name) for name in FACET_FIELDS}
        d.update(P=self.P, Nt=self.Nt, Nz=self.Nz, t_begin=self.t_begin,
                 t_end=self.t_end, dt=self.dt, z_max=self.z_max, dz=self.dz)
        return d

    @classmethod
    def from_dict(cls, d, **overrides):
        """Build parameters from a plain dict (e.g. a YAML section).

        ``overrides`` take precedence over keys in ``d``; derived keys
        (``dt``, ``dz``, ``l``, ``lam``) are ignored.
        """
        accepted = ("A_B", "A_TH", "rho", "Cp", "eps", "P", "Nt", "Nz", "t_begin",
                    "t_end", "k", "Gamma", "z_max", "n_skin")
        kwargs = {key: value for key, value in d.items() if key in accepted}
        kwargs.update(overrides)
        # A dict produced by `to_dict` carries both k and Gamma
        if kwargs.get("k") is not None and kwargs.get("Gamma") is not None:
            kwargs.pop("Gamma")
        missing = [key for key in ("A_B", "A_TH", "rho", "Cp", "eps", "P", "Nt", "Nz")
                   if key not in kwargs]
        if missing:
            raise ConfigurationError(f"Missing thermophysical parameters: {missing}")
        return cls(**kwargs)

    def __repr__(self):
        return (f"ThermoParams(P={self.P}, Nt={self.Nt}, Nz={self.Nz}, "
                f"dt={self.dt:.4g}, z_max={self.z_max:.4g})")
