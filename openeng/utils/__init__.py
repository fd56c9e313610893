"""
Utilities: file I/O, units, physical constants and timing.

Public API:
    read_csv, write_csv          - pandas
    read_mat, write_mat          - scipy.io
    read_hdf5, write_hdf5        - h5py
    parse_unit, convert_units, Unit
    PhysicalConstants
    Timer, timer, timed_section
"""

from openeng.utils.io import (
    read_csv,
    write_csv,
    read_mat,
    write_mat,
    read_hdf5,
    write_hdf5,
)
from openeng.utils.units import Unit, parse_unit, convert_units
from openeng.utils.constants import PhysicalConstants
from openeng.utils.timing import Timer, timer, timed_section

__all__ = [
    "read_csv",
    "write_csv",
    "read_mat",
    "write_mat",
    "read_hdf5",
    "write_hdf5",
    "Unit",
    "parse_unit",
    "convert_units",
    "PhysicalConstants",
    "Timer",
    "timer",
    "timed_section",
]
