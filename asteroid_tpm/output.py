"""Input and output of asteroid_tpm runs.

Run results are written to HDF5 with h5py.  Shape models and ephemerides
for the command line are read from ``.npz`` archives.
"""
import h5py
import numpy as np

from .config import ConfigurationError
from .shape import ShapeModel


# ---------------------------------------------------------------------------
# HDF5 results
# ---------------------------------------------------------------------------

def _write_body(grp, tpm, result):
    """Write one body's shape, parameters and outputs into group ``grp``."""
    shape_grp = grp.create_group("shape")
    shape_grp.create_dataset("nodes", data=tpm.shape.nodes)
    shape_grp.create_dataset("faces", data=tpm.shape.faces)

    param_grp = grp.create_group("thermo_params")
    for name, value in tpm.thermo_params.to_dict().items():
        param_grp.create_dataset(name, data=value)

    grp.create_dataset("sun", data=result.sun)
    grp.create_dataset("surf_temps", data=result.surf_temps)
    grp.create_dataset("forces", data=result.forces)
    grp.create_dataset("torques", data=result.torques)
    grp.create_dataset("E_in", data=result.E_in)
    grp.create_dataset("E_out", data=result.E_out)
    grp.create_dataset("E_cons", data=result.E_cons)
    grp.attrs["n_unconverged"] = int(result.n_unconverged)

    if tpm.config.save_temperature:
        grp.create_dataset("temperature", data=tpm.temperature, compression="gzip")


def save_tpm(path, stpm, result):
    """Save a single-body run to HDF5.

    Parameters
    ----------
    path : str or Path
        Output file, overwritten if it exists
    stpm : SingleTPM
        Model that produced ``result``
    result : TPMResult
    """
    with h5py.File(path, "w") as f:
        f.create_dataset("et_range", data=result.et_range)
        _write_body(f, stpm, result)


def save_binary_tpm(path, btpm, result):
    """Save a binary run to HDF5, one group per body."""
    with h5py.File(path, "w") as f:
        f.create_dataset("et_range", data=result.pri.et_range)
        _write_body(f.create_group("primary"), btpm.pri, result.pri)
        _write_body(f.create_group("secondary"), btpm.sec, result.sec)


def _read_group(grp):
    data = {}
    for key, item in grp.items():
        if isinstance(item, h5py.Group):
            data[key] = _read_group(item)
        else:
            data[key] = item[()]
    for key, value in grp.attrs.items():
        data[key] = value
    return data


def load_tpm(path):
    """Load a file written by :func:`save_tpm` or :func:`save_binary_tpm`.

    Returns
    -------
    dict
        Nested dict of numpy arrays mirroring the groups of the file;
        attributes appear as plain keys.
    """
    with h5py.File(path, "r") as f:
        return _read_group(f)


# ---------------------------------------------------------------------------
# Command-line inputs
# ---------------------------------------------------------------------------

def _load_npz(path, keys):
    with np.load(path) as data:
        missing = [key for key in keys if key not in data.files]
        if missing:
            raise ConfigurationError(f"{path} is missing arrays: {missing}")
        return {key: data[key] for key in keys}


def load_shape_npz(path):
    """ShapeModel from an archive holding ``nodes`` [m] and zero-based ``faces``."""
    data = _load_npz(path, ("nodes", "faces"))
    try:
        return ShapeModel(data["nodes"], data["faces"])
    except ValueError as err:
        raise ConfigurationError(f"Invalid shape model in {path}: {err}") from err


def load_ephemeris_npz(path):
    """Ephemeris times ``et`` [s] and body-fixed sun positions ``sun`` [m]."""
    data = _load_npz(path, ("et", "sun"))
    et = np.asarray(data["et"], dtype=float)
    sun = np.asarray(data["sun"], dtype=float)
    if et.ndim != 1 or len(et) < 2:
        raise ConfigurationError(f"`et` must be 1-D with at least 2 samples, got {et.shape}")
    if sun.shape != (len(et), 3):
        raise ConfigurationError(f"`sun` must have shape {(len(et), 3)}, got {sun.shape}")
    return et, sun
