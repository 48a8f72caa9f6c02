import numpy as np
from scipy.integrate import solve_ivp

from bhmerger.config import BinaryParams, IntegratorParams
from bhmerger.ic import make_initial_binary
from bhmerger.integrate import BinaryState, adaptive_timestep, integrate_fixed, make_derivative, rk4_step
from bhmerger.orbit import compute_orbital_params


def start(r0=20.0, m1=0.5, m2=0.5):
    bh1, bh2 = make_initial_binary(BinaryParams(m1=m1, m2=m2, initial_separation=r0))
    return bh1, bh2, BinaryState.from_black_holes(bh1, bh2)


def energy(bh1, bh2, state):
    return compute_orbital_params(bh1.with_state(state.pos1, state.vel1),
                                  bh2.with_state(state.pos2, state.vel2)).energy


def test_newtonian_energy_conserved_over_one_orbit():
    bh1, bh2, s0 = start(20.0)
    deriv = make_derivative(0.5, 0.5, False, False, False)
    period = 2.0 * np.pi * np.sqrt(20.0**3)
    dt = 0.1
    s1 = integrate_fixed(s0, dt, int(period / dt), deriv)
    E0, E1 = energy(bh1, bh2, s0), energy(bh1, bh2, s1)
    assert abs((E1 - E0) / E0) < 1e-6, f"dE/E = {(E1 - E0) / E0:.3e}"
    assert abs(s1.separation - 20.0) < 1e-6


def test_rk4_step_is_pure():
    _, _, s0 = start(20.0)
    before = s0.to_vector().copy()
    s1 = rk4_step(s0, 0.5, make_derivative(0.5, 0.5))
    assert np.array_equal(s0.to_vector(), before)
    assert s1.time == 0.5 and s0.time == 0.0


def test_radiation_reaction_shrinks_orbit():
    bh1, bh2, s0 = start(20.0)
    deriv = make_derivative(0.5, 0.5, False, False, True)
    s1 = integrate_fixed(s0, 0.5, 2000, deriv)
    assert s1.separation < s0.separation - 0.1, f"r: {s0.separation} -> {s1.separation}"
    assert energy(bh1, bh2, s1) < energy(bh1, bh2, s0)


def test_matches_reference_integrator():
    _, _, s0 = start(20.0, 0.3, 0.7)
    deriv = make_derivative(0.3, 0.7, True, True, True)

    def rhs(t, y):
        s = BinaryState(pos1=y[0:3], vel1=y[3:6], pos2=y[6:9], vel2=y[9:12], time=t)
        d = deriv(s)
        return np.hstack([d.dpos1, d.dvel1, d.dpos2, d.dvel2])

    T = 200.0
    ref = solve_ivp(rhs, (0.0, T), s0.to_vector(), method="DOP853", rtol=1e-11, atol=1e-13)
    assert ref.success
    ours = integrate_fixed(s0, 0.1, 2000, deriv)
    assert np.allclose(ours.to_vector(), ref.y[:, -1], rtol=0, atol=1e-7)
    assert abs(ours.time - T) < 1e-9


def test_adaptive_timestep_rules():
    _, _, wide = start(20.0)
    _, _, close = start(6.0)
    p = IntegratorParams(dt_max=100.0)

    expected_wide = 0.1 * 2.0 * np.pi * np.sqrt(20.0**3)
    assert np.isclose(adaptive_timestep(wide, p, 1.0), expected_wide)

    # inside 2 r_ISCO the step shrinks by (r / 12M)^2
    expected_close = 0.1 * 2.0 * np.pi * np.sqrt(6.0**3) * 0.25
    assert np.isclose(adaptive_timestep(close, p, 1.0), expected_close)


def test_adaptive_timestep_clamps():
    _, _, wide = start(20.0)
    p = IntegratorParams(dt_min=1e-3, dt_max=1.0)
    assert adaptive_timestep(wide, p, 1.0) == 1.0

    z = np.zeros(3)
    merged = BinaryState(pos1=z, vel1=z, pos2=z, vel2=z)
    assert adaptive_timestep(merged, p, 1.0) == 1e-3

    fixed = IntegratorParams(dt_initial=0.25, adaptive=False)
    assert adaptive_timestep(wide, fixed, 1.0) == 0.25
