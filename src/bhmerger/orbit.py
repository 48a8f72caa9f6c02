from __future__ import annotations

from dataclasses import dataclass
import numpy as np

from .black_hole import BlackHole


@dataclass(frozen=True)
class OrbitalParams:
    separation: float = 0.0
    orbital_frequency: float = 0.0     # omega
    orbital_phase: float = 0.0         # Phi, in the x-z orbital plane
    radial_velocity: float = 0.0       # dr/dt
    velocity_param: float = 0.0        # v = (M omega)^(1/3)
    reduced_mass: float = 0.0          # mu
    total_mass: float = 0.0            # M
    symmetric_mass_ratio: float = 0.0  # eta = mu/M
    chirp_mass: float = 0.0            # M eta^(3/5)
    energy: float = 0.0                # Newtonian binding energy
    angular_momentum: float = 0.0      # |L|


def compute_orbital_params(bh1: BlackHole, bh2: BlackHole) -> OrbitalParams:
    """Derived orbital quantities of the relative orbit r = x1 - x2.

    At zero separation only the mass combinations are filled in; callers
    should check ``separation > 0`` before trusting the rest.
    """
    M = bh1.mass + bh2.mass
    mu = bh1.mass * bh2.mass / M
    eta = mu / M
    chirp = M * eta**0.6

    r = bh1.position - bh2.position
    v = bh1.velocity - bh2.velocity
    sep = float(np.linalg.norm(r))
    if sep < 1e-10:
        return OrbitalParams(reduced_mass=mu, total_mass=M, symmetric_mass_ratio=eta, chirp_mass=chirp)

    n = r / sep
    rdot = float(np.dot(v, n))

    L = float(np.linalg.norm(mu * np.cross(r, v)))
    # omega = L / (mu r^2)
    omega = L / (mu * sep * sep) if mu > 0.0 else 0.0
    v_param = float(np.cbrt(M * omega)) if omega > 0.0 else 0.0

    v2 = float(np.dot(v, v))
    energy = 0.5 * mu * v2 - mu * M / sep

    return OrbitalParams(
        separation=sep,
        orbital_frequency=float(omega),
        orbital_phase=float(np.arctan2(r[2], r[0])),
        radial_velocity=rdot,
        velocity_param=v_param,
        reduced_mass=mu,
        total_mass=M,
        symmetric_mass_ratio=eta,
        chirp_mass=chirp,
        energy=float(energy),
        angular_momentum=L,
    )


def kepler_frequency(total_mass: float, separation: float) -> float:
    """omega = sqrt(M / r^3)."""
    if separation < 1e-10:
        return 0.0
    return float(np.sqrt(total_mass / (separation * separation * separation)))


def energy_loss_rate(eta: float, total_mass: float, separation: float) -> float:
    """Peters: dE/dt = -(32/5) eta^2 M^5 / r^5."""
    if separation < 1e-10:
        return 0.0
    return -(32.0 / 5.0) * eta * eta * total_mass**5 / separation**5


def angular_momentum_loss_rate(eta: float, total_mass: float, separation: float) -> float:
    """dL/dt = -(32/5) eta^2 M^(9/2) / r^(7/2)."""
    if separation < 1e-10:
        return 0.0
    return -(32.0 / 5.0) * eta * eta * total_mass**4.5 / separation**3.5


def time_to_merger_estimate(eta: float, total_mass: float, separation: float) -> float:
    """Leading-order Peters estimate T = (5/256) r^4 / (eta M^3)."""
    return (5.0 / 256.0) * separation**4 / (eta * total_mass**3)
