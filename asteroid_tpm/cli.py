"""Console script for asteroid_tpm."""
import dataclasses
import sys

import click
import numpy as np

from .config import ConfigurationError, Configurator
from .model import SingleTPM
from .output import load_ephemeris_npz, load_shape_npz
from .params import ThermoParams


def _build_model(config_path, shape_path, ephem_path, quiet):
    config, data = Configurator.from_yaml(config_path)
    if quiet:
        config = dataclasses.replace(config, show_progress=False)
    if not data.get("thermo_params"):
        raise ConfigurationError(f"{config_path} has no `thermo_params` section")

    shape = load_shape_npz(shape_path)
    et, sun = load_ephemeris_npz(ephem_path)
    # The time grid follows the ephemeris
    params = ThermoParams.from_dict(data["thermo_params"], Nt=len(et),
                                    t_begin=et[0], t_end=et[-1])
    return SingleTPM(shape, params, config), et, sun


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("config_path", metavar="CONFIG", type=click.Path(exists=True, dir_okay=False))
@click.option("--shape", "shape_path", required=True,
              type=click.Path(exists=True, dir_okay=False),
              help="Shape model (.npz with `nodes` and `faces`).")
@click.option("--ephemeris", "ephem_path", required=True,
              type=click.Path(exists=True, dir_okay=False),
              help="Ephemeris (.npz with `et` and `sun`).")
@click.option("-o", "--output", "output_path", default=None, type=click.Path(dir_okay=False),
              help="Write results to this HDF5 file.")
@click.option("--T0", "T0", default=0.0, show_default=True, type=float,
              help="Initial temperature of every cell [K].")
@click.option("--save-last", default=None, type=click.IntRange(min=1),
              help="Keep forces and surface temperatures of the last N steps only.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress and summary output.")
def main(config_path, shape_path, ephem_path, output_path, T0, save_last, quiet):
    """asteroid-tpm: thermophysical model of a single asteroid.

    Runs the model defined in CONFIG (YAML) over the ephemeris and
    prints a one-line summary.
    """
    try:
        stpm, et, sun = _build_model(config_path, shape_path, ephem_path, quiet)
        Nt = len(et)
        save_range = None if save_last is None else np.arange(max(0, Nt - save_last), Nt)
        stpm.init_temperature(T0)
        result = stpm.run(et, sun, savepath=output_path, save_range=save_range)
    except ConfigurationError as err:
        raise click.UsageError(str(err)) from err

    if not quiet:
        T_surf = result.surf_temps
        click.echo(
            f"E_cons={result.energy_conservation():.4f}  "
            f"T_surf=[{T_surf.min():.2f}, {T_surf.max():.2f}] K  "
            f"unconverged={result.n_unconverged}"
        )
        if output_path:
            click.echo(f"Results saved to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())  # pragma: no cover
