from __future__ import annotations

from dataclasses import dataclass, field, replace
import numpy as np
from numpy.typing import NDArray


def vec3(x=None) -> NDArray[np.float64]:
    if x is None:
        return np.zeros(3, dtype=np.float64)
    return np.array(x, dtype=np.float64).reshape(3)


def unit(x) -> NDArray[np.float64]:
    v = vec3(x)
    n = float(np.linalg.norm(v))
    if n == 0.0:
        return v
    return v / n


@dataclass(frozen=True, eq=False)
class BlackHole:
    """One body of the binary in geometrized units (G = c = 1).

    Mass is a fraction of the total system mass M; positions are in M,
    velocities in units of c.
    """
    mass: float
    spin: float = 0.0
    position: NDArray[np.float64] = field(default_factory=vec3)
    velocity: NDArray[np.float64] = field(default_factory=vec3)
    spin_axis: NDArray[np.float64] = field(default_factory=lambda: vec3((0.0, 1.0, 0.0)))

    def __post_init__(self):
        object.__setattr__(self, "position", vec3(self.position))
        object.__setattr__(self, "velocity", vec3(self.velocity))
        object.__setattr__(self, "spin_axis", vec3(self.spin_axis))

    @property
    def schwarzschild_radius(self) -> float:
        return 2.0 * self.mass

    @property
    def gravitational_radius(self) -> float:
        return self.mass

    @property
    def isco_radius(self) -> float:
        """Prograde ISCO radius (Bardeen, Press & Teukolsky 1972); 6m for chi=0."""
        a = self.spin
        if a < 1e-10:
            return 6.0 * self.mass
        z1 = 1.0 + np.cbrt(1.0 - a*a) * (np.cbrt(1.0 + a) + np.cbrt(1.0 - a))
        z2 = np.sqrt(3.0*a*a + z1*z1)
        return float(self.mass * (3.0 + z2 - np.sqrt((3.0 - z1) * (3.0 + z1 + 2.0*z2))))

    def with_state(self, position, velocity) -> "BlackHole":
        return replace(self, position=position, velocity=velocity)


def empty_black_hole() -> BlackHole:
    """Placeholder for the absorbed secondary after merger (mass 0)."""
    return BlackHole(mass=0.0, spin=0.0, spin_axis=vec3())
