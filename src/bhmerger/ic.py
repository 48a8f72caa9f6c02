from __future__ import annotations

import numpy as np

from .black_hole import BlackHole, unit
from .config import BinaryParams


def make_initial_binary(binary: BinaryParams) -> tuple[BlackHole, BlackHole]:
    """Place the binary about its centre of mass.

    Bodies start on the x-axis and orbit in the x-z plane (orbital angular
    momentum along -y). For e > 0 the bodies start at periapsis:
      v_rel = sqrt(M/r0) * sqrt((1+e)/(1-e))
    """
    m1, m2 = binary.m1, binary.m2
    M = m1 + m2
    r0 = binary.initial_separation
    e = binary.eccentricity

    v_rel = np.sqrt(M / r0) * np.sqrt((1.0 + e) / (1.0 - e))

    bh1 = BlackHole(
        mass=m1,
        spin=binary.chi1,
        position=(r0 * m2 / M, 0.0, 0.0),
        velocity=(0.0, 0.0, v_rel * m2 / M),
        spin_axis=unit(binary.spin_axis1),
    )
    bh2 = BlackHole(
        mass=m2,
        spin=binary.chi2,
        position=(-r0 * m1 / M, 0.0, 0.0),
        velocity=(0.0, 0.0, -v_rel * m1 / M),
        spin_axis=unit(binary.spin_axis2),
    )
    return bh1, bh2
