"""
Unit parsing and conversion.

A Unit is an affine map to SI: si_value = value * scale + offset, tagged
with its dimension as exponents over the SI base quantities. The offset
is non-zero only for Celsius and Fahrenheit temperatures. Scale factors
come from scipy.constants.

Compound units are written with '/' and '*', e.g. 'km/h', 'N*m', 'm/s/s'.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

import numpy as np
import scipy.constants as sc
from numpy.typing import ArrayLike

from openeng.core.exceptions import UnitError

# Exponents over (length, mass, time, current, temperature, amount, luminosity)
Dimension = tuple[int, int, int, int, int, int, int]

DIMENSIONLESS: Dimension = (0, 0, 0, 0, 0, 0, 0)
LENGTH: Dimension = (1, 0, 0, 0, 0, 0, 0)
MASS: Dimension = (0, 1, 0, 0, 0, 0, 0)
TIME: Dimension = (0, 0, 1, 0, 0, 0, 0)
CURRENT: Dimension = (0, 0, 0, 1, 0, 0, 0)
TEMPERATURE: Dimension = (0, 0, 0, 0, 1, 0, 0)
AMOUNT: Dimension = (0, 0, 0, 0, 0, 1, 0)

_DIMENSION_NAMES = {
    DIMENSIONLESS: 'dimensionless',
    LENGTH: 'length',
    MASS: 'mass',
    TIME: 'time',
    CURRENT: 'current',
    TEMPERATURE: 'temperature',
    AMOUNT: 'amount',
    (0, 0, -1, 0, 0, 0, 0): 'frequency',
    (1, 0, -1, 0, 0, 0, 0): 'velocity',
    (1, 1, -2, 0, 0, 0, 0): 'force',
    (2, 1, -2, 0, 0, 0, 0): 'energy',
    (2, 1, -3, 0, 0, 0, 0): 'power',
    (-1, 1, -2, 0, 0, 0, 0): 'pressure',
    (2, 1, -3, -1, 0, 0, 0): 'voltage',
    (2, 1, -3, -2, 0, 0, 0): 'resistance',
    (3, 0, 0, 0, 0, 0, 0): 'volume',
}


def _combine(a: Dimension, b: Dimension, sign: int) -> Dimension:
    return tuple(x + sign * y for x, y in zip(a, b))  # type: ignore[return-value]


@dataclass(frozen=True)
class Unit:
    """
    A parsed unit.

    Attributes:
        symbol: Text the unit was parsed from
        scale: Multiplier to the SI unit of the same dimension
        dimension: Exponents over the SI base quantities
        offset: Additive term to SI (temperatures only)
    """
    symbol: str
    scale: float
    dimension: Dimension
    offset: float = 0.0

    @property
    def dimension_name(self) -> str:
        return _DIMENSION_NAMES.get(self.dimension, str(self.dimension))

    @property
    def is_affine(self) -> bool:
        return self.offset != 0.0

    def to_si(self, value: ArrayLike) -> ArrayLike:
        return np.asarray(value, dtype=np.float64) * self.scale + self.offset

    def from_si(self, value: ArrayLike) -> ArrayLike:
        return (np.asarray(value, dtype=np.float64) - self.offset) / self.scale

    def _compound(self, other: Unit, sign: int, op: str) -> Unit:
        if self.is_affine or other.is_affine:
            raise UnitError(
                f"Cannot combine offset temperature units in '{self.symbol}{op}{other.symbol}'; use K",
                unit=f"{self.symbol}{op}{other.symbol}",
            )
        scale = self.scale * other.scale if sign > 0 else self.scale / other.scale
        return Unit(
            symbol=f"{self.symbol}{op}{other.symbol}",
            scale=scale,
            dimension=_combine(self.dimension, other.dimension, sign),
        )

    def __mul__(self, other: Unit) -> Unit:
        return self._compound(other, +1, '*')

    def __truediv__(self, other: Unit) -> Unit:
        return self._compound(other, -1, '/')


def _u(scale: float, dimension: Dimension, offset: float = 0.0) -> tuple[float, Dimension, float]:
    return (scale, dimension, offset)


_VELOCITY = (1, 0, -1, 0, 0, 0, 0)
_FREQUENCY = (0, 0, -1, 0, 0, 0, 0)
_FORCE = (1, 1, -2, 0, 0, 0, 0)
_ENERGY = (2, 1, -2, 0, 0, 0, 0)
_POWER = (2, 1, -3, 0, 0, 0, 0)
_PRESSURE = (-1, 1, -2, 0, 0, 0, 0)
_VOLTAGE = (2, 1, -3, -1, 0, 0, 0)
_RESISTANCE = (2, 1, -3, -2, 0, 0, 0)
_VOLUME = (3, 0, 0, 0, 0, 0, 0)

_UNITS: dict[str, tuple[float, Dimension, float]] = {
    # length
    'm': _u(1.0, LENGTH),
    'km': _u(sc.kilo, LENGTH),
    'cm': _u(sc.centi, LENGTH),
    'mm': _u(sc.milli, LENGTH),
    'um': _u(sc.micro, LENGTH),
    'μm': _u(sc.micro, LENGTH),
    'nm': _u(sc.nano, LENGTH),
    'inch': _u(sc.inch, LENGTH),
    'in': _u(sc.inch, LENGTH),
    'ft': _u(sc.foot, LENGTH),
    'mi': _u(sc.mile, LENGTH),
    # mass
    'kg': _u(1.0, MASS),
    'g': _u(sc.gram, MASS),
    'mg': _u(sc.milli * sc.gram, MASS),
    'lb': _u(sc.pound, MASS),
    # time
    's': _u(1.0, TIME),
    'ms': _u(sc.milli, TIME),
    'us': _u(sc.micro, TIME),
    'μs': _u(sc.micro, TIME),
    'ns': _u(sc.nano, TIME),
    'min': _u(sc.minute, TIME),
    'h': _u(sc.hour, TIME),
    # frequency
    'Hz': _u(1.0, _FREQUENCY),
    'kHz': _u(sc.kilo, _FREQUENCY),
    'MHz': _u(sc.mega, _FREQUENCY),
    'GHz': _u(sc.giga, _FREQUENCY),
    # derived
    'N': _u(1.0, _FORCE),
    'kN': _u(sc.kilo, _FORCE),
    'J': _u(1.0, _ENERGY),
    'kJ': _u(sc.kilo, _ENERGY),
    'eV': _u(sc.electron_volt, _ENERGY),
    'cal': _u(sc.calorie, _ENERGY),
    'W': _u(1.0, _POWER),
    'kW': _u(sc.kilo, _POWER),
    'Pa': _u(1.0, _PRESSURE),
    'kPa': _u(sc.kilo, _PRESSURE),
    'bar': _u(sc.bar, _PRESSURE),
    'atm': _u(sc.atm, _PRESSURE),
    'psi': _u(sc.psi, _PRESSURE),
    'L': _u(sc.liter, _VOLUME),
    'A': _u(1.0, CURRENT),
    'mA': _u(sc.milli, CURRENT),
    'V': _u(1.0, _VOLTAGE),
    'mV': _u(sc.milli, _VOLTAGE),
    'kV': _u(sc.kilo, _VOLTAGE),
    'Ω': _u(1.0, _RESISTANCE),
    'ohm': _u(1.0, _RESISTANCE),
    'kΩ': _u(sc.kilo, _RESISTANCE),
    'mol': _u(1.0, AMOUNT),
    # temperature
    'K': _u(1.0, TEMPERATURE),
    '°C': _u(1.0, TEMPERATURE, sc.zero_Celsius),
    'degC': _u(1.0, TEMPERATURE, sc.zero_Celsius),
    '°F': _u(5.0 / 9.0, TEMPERATURE, sc.zero_Celsius - 32.0 * 5.0 / 9.0),
    'degF': _u(5.0 / 9.0, TEMPERATURE, sc.zero_Celsius - 32.0 * 5.0 / 9.0),
    # angle
    'rad': _u(1.0, DIMENSIONLESS),
    '°': _u(sc.degree, DIMENSIONLESS),
    'deg': _u(sc.degree, DIMENSIONLESS),
}

_COMPOUND = re.compile(r'\s*([*/])\s*')


def _lookup(symbol: str) -> Unit:
    try:
        scale, dimension, offset = _UNITS[symbol]
    except KeyError:
        raise UnitError(f"Unknown unit: {symbol!r}", unit=symbol) from None
    return Unit(symbol=symbol, scale=scale, dimension=dimension, offset=offset)


def parse_unit(symbol: str) -> Unit:
    """
    Parse a unit symbol such as 'km', 'degC' or 'km/h'.

    Raises:
        UnitError: If any component is unknown
    """
    if not isinstance(symbol, str) or not symbol.strip():
        raise UnitError(f"Unit must be a non-empty string, got {symbol!r}", unit=str(symbol))

    parts = _COMPOUND.split(symbol.strip())
    unit = _lookup(parts[0])
    for op, name in zip(parts[1::2], parts[2::2]):
        unit = unit * _lookup(name) if op == '*' else unit / _lookup(name)
    return unit


def convert_units(value: ArrayLike, from_unit: str | Unit, to_unit: str | Unit) -> float | np.ndarray:
    """
    Convert a value (scalar or array) between units of the same dimension.

    Example:
        >>> convert_units(5.0, 'km', 'm')
        5000.0
        >>> convert_units(100.0, 'degC', 'degF')
        212.0

    Raises:
        UnitError: If a unit is unknown or the dimensions differ
    """
    src = from_unit if isinstance(from_unit, Unit) else parse_unit(from_unit)
    dst = to_unit if isinstance(to_unit, Unit) else parse_unit(to_unit)
    if src.dimension != dst.dimension:
        raise UnitError(
            f"Cannot convert {src.symbol} ({src.dimension_name}) to "
            f"{dst.symbol} ({dst.dimension_name})",
            unit=dst.symbol,
        )
    out = dst.from_si(src.to_si(value))
    return float(out) if np.ndim(out) == 0 else out
