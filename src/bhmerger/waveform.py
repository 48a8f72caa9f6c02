from __future__ import annotations

from dataclasses import dataclass
import numpy as np

from .black_hole import BlackHole
from .merger import QNMParams
from .orbit import OrbitalParams, compute_orbital_params


@dataclass(frozen=True)
class GWStrain:
    h_plus: float = 0.0
    h_cross: float = 0.0
    amplitude: float = 0.0   # sqrt(h+^2 + hx^2)
    frequency: float = 0.0   # omega / pi during inspiral, QNM f during ringdown


def _angular_factors(inclination: float) -> tuple[float, float]:
    """(1 + cos^2 i)/2 for h+, cos i for hx."""
    c = float(np.cos(inclination))
    return 0.5 * (1.0 + c*c), c


def inspiral_strain(orb: OrbitalParams, observer_distance: float, observer_inclination: float) -> GWStrain:
    """Quadrupole strain of the orbit.

    h+ = -(2 mu v^2 / D) (1 + cos^2 i)/2 cos(2 Phi)
    hx = -(2 mu v^2 / D) cos i sin(2 Phi),    v = (M omega)^(1/3)
    """
    if orb.separation < 1e-10 or observer_distance < 1e-10:
        return GWStrain()

    v = np.cbrt(orb.total_mass * orb.orbital_frequency)
    pref = 2.0 * orb.reduced_mass * v * v / observer_distance
    fp, fx = _angular_factors(observer_inclination)

    two_phi = 2.0 * orb.orbital_phase
    hp = -pref * fp * np.cos(two_phi)
    hx = -pref * fx * np.sin(two_phi)
    return GWStrain(
        h_plus=float(hp),
        h_cross=float(hx),
        amplitude=float(np.hypot(hp, hx)),
        frequency=float(orb.orbital_frequency / np.pi),
    )


def compute_gw_strain(bh1: BlackHole, bh2: BlackHole, observer_distance: float, observer_inclination: float) -> GWStrain:
    return inspiral_strain(compute_orbital_params(bh1, bh2), observer_distance, observer_inclination)


def ringdown_strain(qnm: QNMParams, t_after_merger: float, observer_distance: float, observer_inclination: float) -> GWStrain:
    """Damped sinusoid h = A exp(-t/tau) cos(2 pi f t + phi0) / D; zero for t < 0."""
    if t_after_merger < 0.0 or observer_distance < 1e-10:
        return GWStrain()

    envelope = qnm.amplitude * np.exp(-t_after_merger / qnm.damping_time)
    phase = 2.0 * np.pi * qnm.frequency * t_after_merger + qnm.phase
    fp, fx = _angular_factors(observer_inclination)

    hp = envelope * fp * np.cos(phase) / observer_distance
    hx = envelope * fx * np.sin(phase) / observer_distance
    return GWStrain(
        h_plus=float(hp),
        h_cross=float(hx),
        amplitude=float(np.hypot(hp, hx)),
        frequency=float(qnm.frequency),
    )


def ringdown_series(qnm: QNMParams, t: np.ndarray, observer_distance: float, observer_inclination: float) -> tuple[np.ndarray, np.ndarray]:
    """Vectorized (h+, hx) over a time grid; zero before merger."""
    t = np.asarray(t, dtype=float)
    fp, fx = _angular_factors(observer_inclination)
    tt = np.maximum(t, 0.0)
    env = qnm.amplitude * np.exp(-tt / qnm.damping_time) / observer_distance
    phase = 2.0 * np.pi * qnm.frequency * tt + qnm.phase
    mask = t >= 0.0
    hp = np.where(mask, env * fp * np.cos(phase), 0.0)
    hx = np.where(mask, env * fx * np.sin(phase), 0.0)
    return hp, hx
