from __future__ import annotations

from dataclasses import dataclass
from scipy import constants

# solar mass, kg
M_SUN_KG = 1.98892e30


@dataclass(frozen=True)
class UnitConversion:
    """Geometrized (G = c = 1) units of a total mass M expressed in SI.

    Reporting only; nothing in the simulation depends on it.
    """
    total_mass_kg: float
    length_m: float   # G M / c^2
    time_s: float     # G M / c^3

    @classmethod
    def from_solar_masses(cls, solar_masses: float) -> "UnitConversion":
        if solar_masses <= 0.0:
            raise ValueError(f"total mass must be positive, got {solar_masses}")
        m = solar_masses * M_SUN_KG
        length = constants.G * m / constants.c**2
        return cls(total_mass_kg=m, length_m=length, time_s=length / constants.c)

    def to_seconds(self, t_geom: float) -> float:
        return t_geom * self.time_s

    def to_meters(self, l_geom: float) -> float:
        return l_geom * self.length_m

    def to_hertz(self, f_geom: float) -> float:
        return f_geom / self.time_s
