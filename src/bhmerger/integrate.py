from __future__ import annotations

from dataclasses import dataclass
from typing import Callable
import numpy as np
from numpy.typing import NDArray

from .black_hole import BlackHole
from .config import IntegratorParams
from .pn import relative_acceleration, body_accelerations


@dataclass(frozen=True, eq=False)
class BinaryState:
    """ODE state (pos1, vel1, pos2, vel2, time). Never mutated; every step builds a new one."""
    pos1: NDArray[np.float64]
    vel1: NDArray[np.float64]
    pos2: NDArray[np.float64]
    vel2: NDArray[np.float64]
    time: float = 0.0

    @classmethod
    def from_black_holes(cls, bh1: BlackHole, bh2: BlackHole, time: float = 0.0) -> "BinaryState":
        return cls(pos1=bh1.position.copy(), vel1=bh1.velocity.copy(),
                   pos2=bh2.position.copy(), vel2=bh2.velocity.copy(),
                   time=float(time))

    @property
    def separation(self) -> float:
        return float(np.linalg.norm(self.pos1 - self.pos2))

    def to_vector(self) -> NDArray[np.float64]:
        return np.hstack([self.pos1, self.vel1, self.pos2, self.vel2])


@dataclass(frozen=True, eq=False)
class StateDerivative:
    dpos1: NDArray[np.float64]
    dvel1: NDArray[np.float64]
    dpos2: NDArray[np.float64]
    dvel2: NDArray[np.float64]


DerivativeFunc = Callable[[BinaryState], StateDerivative]


def state_add(s: BinaryState, d: StateDerivative, dt: float) -> BinaryState:
    return BinaryState(
        pos1=s.pos1 + d.dpos1 * dt,
        vel1=s.vel1 + d.dvel1 * dt,
        pos2=s.pos2 + d.dpos2 * dt,
        vel2=s.vel2 + d.dvel2 * dt,
        time=s.time + dt,
    )


def make_derivative(m1: float,
                    m2: float,
                    enable_1pn: bool = True,
                    enable_2pn: bool = True,
                    enable_25pn: bool = True) -> DerivativeFunc:
    """(vel1, a1, vel2, a2) from the PN relative acceleration."""

    def deriv(state: BinaryState) -> StateDerivative:
        r = state.pos1 - state.pos2
        v = state.vel1 - state.vel2
        a_rel = relative_acceleration(r, v, m1, m2, enable_1pn, enable_2pn, enable_25pn).total()
        a1, a2 = body_accelerations(a_rel, m1, m2)
        return StateDerivative(dpos1=state.vel1, dvel1=a1, dpos2=state.vel2, dvel2=a2)

    return deriv


def rk4_step(state: BinaryState, dt: float, deriv: DerivativeFunc) -> BinaryState:
    """Classical 4th-order Runge-Kutta; every stage reads the unmodified base state."""
    k1 = deriv(state)
    k2 = deriv(state_add(state, k1, 0.5 * dt))
    k3 = deriv(state_add(state, k2, 0.5 * dt))
    k4 = deriv(state_add(state, k3, dt))

    h6 = dt / 6.0
    return BinaryState(
        pos1=state.pos1 + h6 * (k1.dpos1 + 2.0*k2.dpos1 + 2.0*k3.dpos1 + k4.dpos1),
        vel1=state.vel1 + h6 * (k1.dvel1 + 2.0*k2.dvel1 + 2.0*k3.dvel1 + k4.dvel1),
        pos2=state.pos2 + h6 * (k1.dpos2 + 2.0*k2.dpos2 + 2.0*k3.dpos2 + k4.dpos2),
        vel2=state.vel2 + h6 * (k1.dvel2 + 2.0*k2.dvel2 + 2.0*k3.dvel2 + k4.dvel2),
        time=state.time + dt,
    )


def adaptive_timestep(state: BinaryState, params: IntegratorParams, total_mass: float) -> float:
    """Step size as a fraction of the local orbital period, shrunk quadratically inside 2 r_ISCO.

    Always finite: clamped to [dt_min, dt_max].
    """
    if not params.adaptive:
        return float(params.dt_initial)

    sep = state.separation
    if sep < 1e-10:
        return float(params.dt_min)

    # T = 2 pi sqrt(r^3 / M)
    period = 2.0 * np.pi * np.sqrt(sep * sep * sep / total_mass)
    dt = params.safety_factor * period

    r_isco = 6.0 * total_mass
    if sep < 2.0 * r_isco:
        scale = sep / (2.0 * r_isco)
        dt *= scale * scale

    return float(np.clip(dt, params.dt_min, params.dt_max))


def integrate_fixed(state: BinaryState, dt: float, n_steps: int, deriv: DerivativeFunc) -> BinaryState:
    for _ in range(int(n_steps)):
        state = rk4_step(state, dt, deriv)
    return state

