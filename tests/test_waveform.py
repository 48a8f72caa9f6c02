import numpy as np

from bhmerger.config import BinaryParams
from bhmerger.ic import make_initial_binary
from bhmerger.merger import QNMParams
from bhmerger.orbit import OrbitalParams, compute_orbital_params
from bhmerger.waveform import compute_gw_strain, inspiral_strain, ringdown_series, ringdown_strain


def test_degenerate_inputs_give_zero_strain():
    h = inspiral_strain(OrbitalParams(total_mass=1.0, reduced_mass=0.25), 1e6, 0.0)
    assert h.h_plus == 0.0 and h.h_cross == 0.0 and h.amplitude == 0.0

    bh1, bh2 = make_initial_binary(BinaryParams())
    assert compute_gw_strain(bh1, bh2, 0.0, 0.0).amplitude == 0.0


def test_face_on_amplitude():
    bh1, bh2 = make_initial_binary(BinaryParams(initial_separation=20.0))
    orb = compute_orbital_params(bh1, bh2)
    D = 1e6
    h = inspiral_strain(orb, D, 0.0)
    v2 = (orb.total_mass * orb.orbital_frequency) ** (2.0 / 3.0)
    assert np.isclose(h.amplitude, 2.0 * 0.25 * v2 / D, rtol=1e-12)
    # GW frequency is twice the orbital frequency (omega / pi)
    assert np.isclose(h.frequency, orb.orbital_frequency / np.pi)


def test_edge_on_has_no_cross_polarization():
    bh1, bh2 = make_initial_binary(BinaryParams())
    h = compute_gw_strain(bh1, bh2, 1e3, np.pi / 2.0)
    assert abs(h.h_cross) < 1e-20
    assert h.h_plus != 0.0


def test_amplitude_falls_off_with_distance():
    bh1, bh2 = make_initial_binary(BinaryParams())
    near = compute_gw_strain(bh1, bh2, 1e3, 0.3).amplitude
    far = compute_gw_strain(bh1, bh2, 1e4, 0.3).amplitude
    assert np.isclose(near / far, 10.0)


def test_ringdown_before_merger_is_zero():
    qnm = QNMParams(frequency=0.087, damping_time=11.7, amplitude=0.5)
    h = ringdown_strain(qnm, -1.0, 100.0, 0.0)
    assert h.amplitude == 0.0 and h.frequency == 0.0
    assert ringdown_strain(qnm, 0.0, 100.0, 0.0).frequency == 0.087


def test_ringdown_series_matches_pointwise():
    qnm = QNMParams(frequency=0.087, damping_time=11.7, amplitude=0.5, phase=0.3)
    t = np.array([-5.0, 0.0, 1.5, 10.0, 40.0])
    hp, hx = ringdown_series(qnm, t, 100.0, 0.7)
    for k, tk in enumerate(t):
        h = ringdown_strain(qnm, float(tk), 100.0, 0.7)
        assert np.isclose(hp[k], h.h_plus, rtol=1e-12, atol=1e-30)
        assert np.isclose(hx[k], h.h_cross, rtol=1e-12, atol=1e-30)
