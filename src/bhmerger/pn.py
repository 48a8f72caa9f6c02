"""Post-Newtonian relative acceleration of a compact binary.

Harmonic-gauge expansion for non-spinning point masses in geometrized units,
written for the relative coordinate r = x1 - x2 (Blanchet, Living Rev.
Relativity 17 (2014) 2; Iyer & Will 1995 for the radiation reaction):

  - Newtonian:  a_N = -M n / r^2
  - 1PN:        O(v^2), conservative
  - 2PN:        O(v^4), conservative
  - 2.5PN:      O(v^5), Burke-Thorne radiation reaction (dissipative)

Every term has the form -(M/r^2) [A n + B v] with scalar coefficients in
eta, M/r, v^2 and rdot = n.v, so each is returned separately and the
caller sums whichever orders it wants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import numpy as np
from numpy.typing import NDArray

from .black_hole import BlackHole, vec3


@dataclass(frozen=True, eq=False)
class AccelerationTerms:
    newtonian: NDArray[np.float64] = field(default_factory=vec3)
    pn1: NDArray[np.float64] = field(default_factory=vec3)
    pn2: NDArray[np.float64] = field(default_factory=vec3)
    pn25: NDArray[np.float64] = field(default_factory=vec3)

    def total(self) -> NDArray[np.float64]:
        return self.newtonian + self.pn1 + self.pn2 + self.pn25

    def scaled(self, factor: float) -> "AccelerationTerms":
        return AccelerationTerms(
            newtonian=factor * self.newtonian,
            pn1=factor * self.pn1,
            pn2=factor * self.pn2,
            pn25=factor * self.pn25,
        )


def relative_acceleration(r: NDArray[np.float64],
                          v: NDArray[np.float64],
                          m1: float,
                          m2: float,
                          enable_1pn: bool = True,
                          enable_2pn: bool = True,
                          enable_25pn: bool = True) -> AccelerationTerms:
    """d^2 r/dt^2 for r = x1 - x2, split by PN order.

    Returns all-zero terms at |r| < 1e-10 instead of diverging.
    """
    M = m1 + m2
    eta = m1 * m2 / (M * M)

    r2 = float(np.dot(r, r))
    r_mag = np.sqrt(r2)
    if r_mag < 1e-10:
        return AccelerationTerms()

    n = r / r_mag
    v2 = float(np.dot(v, v))
    rdot = float(np.dot(n, v))
    Mr = M / r_mag

    a_n = -(M / r2) * n
    a_1 = vec3()
    a_2 = vec3()
    a_25 = vec3()

    if enable_1pn:
        # A = (1+3 eta) v^2 - (3/2) eta rdot^2 - 2(2+eta) M/r,  B = -2(2-eta) rdot
        A = (1.0 + 3.0*eta)*v2 - 1.5*eta*rdot*rdot - 2.0*(2.0 + eta)*Mr
        B = -2.0*(2.0 - eta)*rdot
        a_1 = -Mr / r_mag * (A*n + B*v)

    if enable_2pn:
        Mr2 = Mr * Mr
        rdot2 = rdot * rdot
        v4 = v2 * v2
        A = (0.375*eta*(5.0 - 15.0*eta)*rdot2*rdot2
             - 1.5*eta*(3.0 - 4.0*eta)*v2*rdot2
             + eta*(3.0 - 4.0*eta)*v4
             - Mr*((2.0 + 25.0*eta + 2.0*eta*eta)*rdot2 + 0.5*eta*(13.0 - 4.0*eta)*v2)
             + (9.0 + 87.0*eta/4.0)*Mr2)
        B = (1.5*eta*(3.0 + 2.0*eta)*rdot*rdot2
             - 0.5*eta*(15.0 + 4.0*eta)*v2*rdot
             + (2.0 + 41.0*eta/2.0 + 4.0*eta*eta)*Mr*rdot)
        a_2 = -Mr / r_mag * (A*n + B*v)

    if enable_25pn:
        # (8/5) eta M^2/r^3 { rdot n [18 v^2 + (2/3) M/r - 25 rdot^2] - v [6 v^2 - 2 M/r - 15 rdot^2] }
        rdot2 = rdot * rdot
        pref = 8.0 / 5.0 * eta * M * Mr / r2
        A = rdot * (18.0*v2 + (2.0/3.0)*Mr - 25.0*rdot2)
        B = -(6.0*v2 - 2.0*Mr - 15.0*rdot2)
        a_25 = pref * (A*n + B*v)

    return AccelerationTerms(newtonian=a_n, pn1=a_1, pn2=a_2, pn25=a_25)


def body_accelerations(a_rel: NDArray[np.float64], m1: float, m2: float) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """COM-frame split: a1 = +(m2/M) a_rel, a2 = -(m1/M) a_rel."""
    M = m1 + m2
    return (m2 / M) * a_rel, -(m1 / M) * a_rel


def compute_acceleration(bh1: BlackHole,
                         bh2: BlackHole,
                         enable_1pn: bool = True,
                         enable_2pn: bool = True,
                         enable_25pn: bool = True) -> AccelerationTerms:
    """PN acceleration terms acting on body 1."""
    r = bh1.position - bh2.position
    v = bh1.velocity - bh2.velocity
    rel = relative_acceleration(r, v, bh1.mass, bh2.mass, enable_1pn, enable_2pn, enable_25pn)
    return rel.scaled(bh2.mass / (bh1.mass + bh2.mass))
