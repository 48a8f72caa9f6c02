import numpy as np
import pytest

from bhmerger.units import UnitConversion


def test_solar_mass_scales():
    u = UnitConversion.from_solar_masses(1.0)
    assert abs(u.length_m - 1477.0) < 2.0
    assert abs(u.time_s - 4.927e-6) < 1e-8
    assert np.isclose(u.to_hertz(1.0) * u.to_seconds(1.0), 1.0)


def test_scales_linearly_with_mass():
    u1 = UnitConversion.from_solar_masses(1.0)
    u60 = UnitConversion.from_solar_masses(60.0)
    assert np.isclose(u60.to_meters(1.0), 60.0 * u1.to_meters(1.0))


def test_rejects_non_positive_mass():
    with pytest.raises(ValueError):
        UnitConversion.from_solar_masses(0.0)
