import numpy as np
import pytest

from bhmerger.black_hole import BlackHole
from bhmerger.config import BinaryParams
from bhmerger.ic import make_initial_binary
from bhmerger.orbit import (compute_orbital_params, energy_loss_rate, angular_momentum_loss_rate,
                            kepler_frequency, time_to_merger_estimate)


def test_circular_start_is_keplerian():
    bh1, bh2 = make_initial_binary(BinaryParams(m1=0.3, m2=0.7, initial_separation=20.0))
    orb = compute_orbital_params(bh1, bh2)
    assert abs(orb.separation - 20.0) < 1e-12
    assert abs(orb.orbital_frequency - kepler_frequency(1.0, 20.0)) < 1e-12
    assert abs(orb.radial_velocity) < 1e-15
    assert np.isclose(orb.symmetric_mass_ratio, 0.21)
    assert np.isclose(orb.energy, -0.21 / 40.0)


def test_centre_of_mass_at_rest():
    bh1, bh2 = make_initial_binary(BinaryParams(m1=0.25, m2=0.75, initial_separation=12.0, eccentricity=0.3))
    assert np.allclose(bh1.mass * bh1.position + bh2.mass * bh2.position, 0.0, atol=1e-14)
    assert np.allclose(bh1.mass * bh1.velocity + bh2.mass * bh2.velocity, 0.0, atol=1e-16)


def test_eccentric_start_at_periapsis():
    bh1, bh2 = make_initial_binary(BinaryParams(initial_separation=10.0, eccentricity=0.5))
    v_rel = np.linalg.norm(bh1.velocity - bh2.velocity)
    assert np.isclose(v_rel, np.sqrt(0.1) * np.sqrt(3.0))


def test_zero_separation_only_masses():
    bh = BlackHole(mass=0.5)
    orb = compute_orbital_params(bh, BlackHole(mass=0.5))
    assert orb.separation == 0.0 and orb.orbital_frequency == 0.0
    assert orb.total_mass == 1.0 and orb.symmetric_mass_ratio == 0.25


@pytest.mark.parametrize("M, r", [(1.0, 20.0), (0.3, 5.0), (2.5, 150.0), (40.0, 7.5), (1e-3, 0.02)])
def test_kepler_frequency(M, r):
    omega = kepler_frequency(M, r)
    assert abs(omega - np.sqrt(M / r**3)) <= 1e-12 * omega
    assert abs(omega * omega * r**3 / M - 1.0) < 1e-12


def test_kepler_frequency_zero_separation():
    assert kepler_frequency(1.0, 0.0) == 0.0


def test_peters_rates():
    assert energy_loss_rate(0.25, 1.0, 20.0) < 0.0
    assert angular_momentum_loss_rate(0.25, 1.0, 20.0) < 0.0
    assert energy_loss_rate(0.25, 1.0, 10.0) < energy_loss_rate(0.25, 1.0, 20.0)
    assert abs(time_to_merger_estimate(0.25, 1.0, 20.0) - 12500.0) < 1.0
