"""Configuration for asteroid_tpm model runs."""
import warnings
from dataclasses import dataclass


class ConfigurationError(ValueError):
    """Raised for fatal, non-recoverable configuration problems."""


UPPER_BOUNDARIES = ("radiation", "insulation", "isothermal")
LOWER_BOUNDARIES = ("insulation", "isothermal")


@dataclass
class Configurator:
    """Configuration class for model runs.

    Numerical and run options only; thermophysical parameters live in
    :class:`asteroid_tpm.params.ThermoParams`.
    """

    # Boundary conditions
    upper_bc: str = "radiation"  # "radiation", "insulation" or "isothermal"
    lower_bc: str = "insulation"  # "insulation" or "isothermal"
    T_upper: float = None  # prescribed surface temperature [K] (isothermal only)
    T_lower: float = None  # prescribed bottom temperature [K] (isothermal only)
    # Surface energy balance (Newton's method)
    newton_max_iter: int = 20
    newton_tol: float = 1e-10  # relative change |1 - T_old/T_new|
    # Diffusion number limit, must be <= 0.5 for stability
    lambda_max: float = 0.5
    # Output
    show_progress: bool = True
    save_temperature: bool = False  # persist the full (Nz, Ns, Nt) array

    def __post_init__(self):
        if self.upper_bc not in UPPER_BOUNDARIES:
            raise ConfigurationError(
                f"Invalid upper boundary '{self.upper_bc}'. Must be one of {UPPER_BOUNDARIES}"
            )
        if self.lower_bc not in LOWER_BOUNDARIES:
            raise ConfigurationError(
                f"Invalid lower boundary '{self.lower_bc}'. Must be one of {LOWER_BOUNDARIES}"
            )
        for side, bc, T in (("upper", self.upper_bc, self.T_upper),
                            ("lower", self.lower_bc, self.T_lower)):
            if bc == "isothermal" and T is None:
                raise ConfigurationError(
                    f"Isothermal {side} boundary requires T_{side} to be set"
                )
            if T is not None and T < 0:
                raise ConfigurationError(f"T_{side} must be non-negative, got {T}")
        if self.newton_max_iter < 1:
            raise ConfigurationError(
                f"newton_max_iter must be >= 1, got {self.newton_max_iter}"
            )
        if self.newton_tol <= 0:
            raise ConfigurationError(f"newton_tol must be positive, got {self.newton_tol}")
        if not 0 < self.lambda_max <= 0.5:
            raise ConfigurationError(
                f"lambda_max={self.lambda_max} must be in (0, 0.5] for stability"
            )

    @classmethod
    def from_yaml(cls, path):
        """Load configuration from a YAML file.

        Parameters
        ----------
        path : str or Path
            Path to the YAML configuration file.

        Returns
        -------
        config : Configurator
            Configurator instance with values from the YAML file.
        data : dict
            Full parsed YAML data (includes the ``thermo_params`` section).
        """
        import yaml

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        # Map YAML keys to dataclass fields, per section
        field_map = {
            "boundary": {
                "upper": "upper_bc",
                "lower": "lower_bc",
                "upper_temperature": "T_upper",
                "lower_temperature": "T_lower",
            },
            "numerical": {
                "newton_max_iterations": "newton_max_iter",
                "newton_tolerance": "newton_tol",
                "stability_limit": "lambda_max",
            },
            "output": {
                "progress": "show_progress",
                "save_temperature": "save_temperature",
            },
        }

        kwargs = {}
        for section, keys in field_map.items():
            values = data.get(section) or {}
            for yaml_key, value in values.items():
                if yaml_key in keys:
                    kwargs[keys[yaml_key]] = value
                else:
                    warnings.warn(
                        f"Unknown key '{yaml_key}' in section '{section}' is ignored.",
                        stacklevel=2,
                    )

        return cls(**kwargs), data
