"""
File I/O for tabular and array data.

CSV goes through pandas, MATLAB .mat files through scipy.io and HDF5
through h5py. Writers log the destination at INFO.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
import logging

import h5py
import numpy as np
import pandas as pd
import scipy.io

from openeng.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

PathLike = str | Path


# ═══════════════════════════════════════════════════════════════════════
# CSV
# ═══════════════════════════════════════════════════════════════════════

def read_csv(filename: PathLike, **kwargs: Any) -> pd.DataFrame:
    """Read a CSV file into a DataFrame. kwargs go to pandas.read_csv."""
    return pd.read_csv(filename, **kwargs)


def write_csv(filename: PathLike, data: Any, **kwargs: Any) -> None:
    """
    Write a DataFrame, array or dict of columns to CSV.

    Arrays are wrapped in a DataFrame with columns x1, x2, ...; the index
    is not written unless index=True is passed.
    """
    if not isinstance(data, pd.DataFrame):
        if isinstance(data, dict):
            data = pd.DataFrame(data)
        else:
            arr = np.asarray(data)
            if arr.ndim == 1:
                arr = arr.reshape(-1, 1)
            if arr.ndim != 2:
                raise ValidationError(f"data: expected 1D or 2D array, got {arr.ndim}D")
            data = pd.DataFrame(arr, columns=[f'x{j + 1}' for j in range(arr.shape[1])])

    kwargs.setdefault('index', False)
    data.to_csv(filename, **kwargs)
    logger.info("Data written to %s", filename)


# ═══════════════════════════════════════════════════════════════════════
# MATLAB
# ═══════════════════════════════════════════════════════════════════════

def _squeeze_mat_value(value: Any) -> Any:
    if not isinstance(value, np.ndarray) or value.dtype.kind not in 'biufc':
        return value
    if value.ndim == 2 and 1 in value.shape:
        value = value.reshape(-1)
        if value.shape[0] == 1:
            return value[0].item()
    return value


def read_mat(filename: PathLike) -> dict[str, Any]:
    """
    Read variables from a MATLAB .mat file.

    MATLAB header entries (__header__, __version__, __globals__) are
    dropped, row/column vectors come back 1D and 1x1 arrays as scalars.
    """
    raw = scipy.io.loadmat(filename)
    return {
        key: _squeeze_mat_value(value)
        for key, value in raw.items()
        if not key.startswith('__')
    }


def write_mat(filename: PathLike, data: dict[str, Any]) -> None:
    """Write a dict of variables to a MATLAB .mat file."""
    if not isinstance(data, dict):
        raise ValidationError(f"data: expected dict of variables, got {type(data).__name__}")
    scipy.io.savemat(filename, data)
    logger.info("Data written to %s", filename)


# ═══════════════════════════════════════════════════════════════════════
# HDF5
# ═══════════════════════════════════════════════════════════════════════

def _dataset_names(h5: h5py.File) -> list[str]:
    names: list[str] = []
    h5.visititems(lambda name, obj: names.append(name) if isinstance(obj, h5py.Dataset) else None)
    return names


def read_hdf5(filename: PathLike, dataset: str) -> np.ndarray:
    """
    Read one dataset from an HDF5 file.

    Raises:
        KeyError: If the dataset does not exist; the message lists the
                  datasets that do
    """
    with h5py.File(filename, 'r') as f:
        if dataset not in f or not isinstance(f[dataset], h5py.Dataset):
            raise KeyError(
                f"Dataset {dataset!r} not found in {filename}. "
                f"Available datasets: {_dataset_names(f)}"
            )
        return f[dataset][()]


def write_hdf5(filename: PathLike, dataset: str, data: Any) -> None:
    """Write a dataset, creating the file if needed and replacing an existing dataset."""
    with h5py.File(filename, 'a') as f:
        if dataset in f:
            logger.debug("Overwriting dataset %s in %s", dataset, filename)
            del f[dataset]
        f.create_dataset(dataset, data=np.asarray(data))
    logger.info("Data written to %s:%s", filename, dataset)
