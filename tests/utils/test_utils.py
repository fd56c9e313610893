"""
Tests for file I/O, unit conversion, constants and timing helpers.
"""

import logging
import time

import numpy as np
import pandas as pd
import pytest

from openeng.core.exceptions import UnitError, ValidationError
from openeng.utils import (
    PhysicalConstants,
    Timer,
    Unit,
    convert_units,
    parse_unit,
    read_csv,
    read_hdf5,
    read_mat,
    timed_section,
    timer,
    write_csv,
    write_hdf5,
    write_mat,
)


# ═══════════════════════════════════════════════════════════════════════
# File I/O
# ═══════════════════════════════════════════════════════════════════════


class TestCSV:

    def test_dataframe_round_trip(self, tmp_path):
        df = pd.DataFrame({'time': [0.0, 0.1, 0.2], 'value': [1.0, 2.0, 3.0]})
        path = tmp_path / 'data.csv'
        write_csv(path, df)
        pd.testing.assert_frame_equal(read_csv(path), df)

    def test_array_gets_named_columns(self, tmp_path):
        path = tmp_path / 'arr.csv'
        write_csv(path, np.arange(6.0).reshape(3, 2))
        df = read_csv(path)
        assert list(df.columns) == ['x1', 'x2']
        np.testing.assert_array_equal(df['x2'].to_numpy(), [1.0, 3.0, 5.0])

    def test_dict_of_columns(self, tmp_path):
        path = tmp_path / 'dict.csv'
        write_csv(path, {'a': [1, 2], 'b': [3, 4]})
        assert read_csv(path)['b'].tolist() == [3, 4]

    def test_rejects_3d(self, tmp_path):
        with pytest.raises(ValidationError, match="1D or 2D"):
            write_csv(tmp_path / 'bad.csv', np.zeros((2, 2, 2)))

    def test_write_logs_destination(self, tmp_path, caplog):
        path = tmp_path / 'log.csv'
        with caplog.at_level(logging.INFO, logger='openeng.utils.io'):
            write_csv(path, [1.0, 2.0])
        assert "Data written to" in caplog.text


class TestMAT:

    def test_round_trip_squeezes(self, tmp_path):
        path = tmp_path / 'vars.mat'
        write_mat(path, {'v': np.array([1.0, 2.0, 3.0]), 's': 5.0, 'M': np.eye(2)})
        data = read_mat(path)
        assert set(data) == {'v', 's', 'M'}
        assert data['v'].shape == (3,)
        assert data['s'] == 5.0
        assert isinstance(data['s'], float)
        np.testing.assert_array_equal(data['M'], np.eye(2))

    def test_requires_dict(self, tmp_path):
        with pytest.raises(ValidationError, match="dict"):
            write_mat(tmp_path / 'x.mat', np.eye(2))


class TestHDF5:

    def test_write_and_read(self, tmp_path):
        path = tmp_path / 'data.h5'
        write_hdf5(path, 'signals/raw', np.arange(10.0))
        np.testing.assert_array_equal(read_hdf5(path, 'signals/raw'), np.arange(10.0))

    def test_overwrite_and_multiple_datasets(self, tmp_path):
        path = tmp_path / 'data.h5'
        write_hdf5(path, 'a', np.zeros(3))
        write_hdf5(path, 'b', np.ones(2))
        write_hdf5(path, 'a', np.full(5, 7.0))
        np.testing.assert_array_equal(read_hdf5(path, 'a'), np.full(5, 7.0))
        np.testing.assert_array_equal(read_hdf5(path, 'b'), np.ones(2))

    def test_missing_dataset_lists_available(self, tmp_path):
        path = tmp_path / 'data.h5'
        write_hdf5(path, 'present', np.zeros(2))
        with pytest.raises(KeyError, match="present"):
            read_hdf5(path, 'absent')


# ═══════════════════════════════════════════════════════════════════════
# Units
# ═══════════════════════════════════════════════════════════════════════


class TestUnits:

    @pytest.mark.parametrize("value,src,dst,expected", [
        (5.0, 'km', 'm', 5000.0),
        (250.0, 'ms', 's', 0.25),
        (2.0, 'kHz', 'Hz', 2000.0),
        (12.0, 'inch', 'ft', 1.0),
        (36.0, 'km/h', 'm/s', 10.0),
        (1.0, 'kN*m', 'J', 1000.0),
        (1.0, 'atm', 'kPa', 101.325),
        (180.0, 'deg', 'rad', np.pi),
    ])
    def test_linear_conversions(self, value, src, dst, expected):
        assert convert_units(value, src, dst) == pytest.approx(expected)

    def test_temperatures(self):
        assert convert_units(100.0, 'degC', 'degF') == pytest.approx(212.0)
        assert convert_units(0.0, '°C', 'K') == pytest.approx(273.15)
        assert convert_units(32.0, 'degF', 'degC') == pytest.approx(0.0, abs=1e-12)

    def test_array_input(self):
        out = convert_units(np.array([1.0, 2.0]), 'm', 'mm')
        assert isinstance(out, np.ndarray)
        np.testing.assert_allclose(out, [1000.0, 2000.0])

    def test_scalar_returns_float(self):
        assert isinstance(convert_units(1, 'h', 'min'), float)

    def test_dimension_mismatch(self):
        with pytest.raises(UnitError, match="Cannot convert") as exc_info:
            convert_units(1.0, 'm', 's')
        assert exc_info.value.unit == 's'

    def test_unknown_unit(self):
        with pytest.raises(UnitError, match="Unknown unit") as exc_info:
            convert_units(1.0, 'furlong', 'm')
        assert exc_info.value.unit == 'furlong'

    def test_empty_unit(self):
        with pytest.raises(UnitError):
            parse_unit('  ')

    def test_parse_compound(self):
        u = parse_unit('m/s/s')
        assert isinstance(u, Unit)
        assert u.dimension == (1, 0, -2, 0, 0, 0, 0)
        assert parse_unit('N').dimension_name == 'force'

    def test_offset_units_do_not_compound(self):
        with pytest.raises(UnitError, match="offset temperature"):
            parse_unit('degC/s')


class TestPhysicalConstants:

    def test_exact_values(self):
        assert PhysicalConstants.SPEED_OF_LIGHT == 299792458.0
        assert PhysicalConstants.GRAVITY == 9.80665
        assert PhysicalConstants.ELEMENTARY_CHARGE == pytest.approx(1.602176634e-19)
        assert PhysicalConstants.GAS_CONSTANT == pytest.approx(
            PhysicalConstants.AVOGADRO * PhysicalConstants.BOLTZMANN
        )

    def test_not_instantiable(self):
        with pytest.raises(TypeError):
            PhysicalConstants()


# ═══════════════════════════════════════════════════════════════════════
# Timing
# ═══════════════════════════════════════════════════════════════════════


class TestTiming:

    def test_timer_runs_on_creation(self):
        t = timer()
        assert isinstance(t, Timer)
        time.sleep(0.01)
        assert t.elapsed() >= 0.005

    def test_reset(self):
        t = Timer()
        time.sleep(0.02)
        t.reset()
        assert t.elapsed() < 0.02

    def test_timed_section_logs(self, caplog):
        with caplog.at_level(logging.INFO, logger='openeng.utils.timing'):
            with timed_section("Matrix multiplication") as t:
                np.ones((10, 10)) @ np.ones((10, 10))
        assert "Matrix multiplication completed in" in caplog.text
        assert t.result()['total_seconds'] >= 0.0
