from __future__ import annotations

from dataclasses import dataclass, field
from typing import List
import numpy as np
from numpy.typing import NDArray

from .black_hole import BlackHole, vec3
from .simulation import Phase, SimulationResult


@dataclass(frozen=True, eq=False)
class BodyRenderState:
    position: NDArray[np.float64] = field(default_factory=vec3)
    mass: float = 0.0
    schwarzschild_radius: float = 0.0
    spin: float = 0.0
    spin_axis: NDArray[np.float64] = field(default_factory=lambda: vec3((0.0, 1.0, 0.0)))
    isco_radius: float = 0.0

    @classmethod
    def from_black_hole(cls, bh: BlackHole) -> "BodyRenderState":
        return cls(
            position=bh.position.copy(),
            mass=float(bh.mass),
            schwarzschild_radius=float(bh.schwarzschild_radius),
            spin=float(bh.spin),
            spin_axis=bh.spin_axis.copy(),
            isco_radius=float(bh.isco_radius),
        )


@dataclass(frozen=True, eq=False)
class RenderFrame:
    time: float
    phase: Phase
    bodies: tuple[BodyRenderState, ...]
    gw_strain_plus: float = 0.0
    gw_strain_cross: float = 0.0
    gw_amplitude: float = 0.0
    gw_frequency: float = 0.0
    orbital_phase: float = 0.0

    @property
    def num_black_holes(self) -> int:
        return len(self.bodies)


def _lerp(a: float, b: float, alpha: float) -> float:
    return float(a * (1.0 - alpha) + b * alpha)


def _lerp_body(a: BodyRenderState, b: BodyRenderState, alpha: float) -> BodyRenderState:
    axis = a.spin_axis * (1.0 - alpha) + b.spin_axis * alpha
    n = float(np.linalg.norm(axis))
    return BodyRenderState(
        position=a.position * (1.0 - alpha) + b.position * alpha,
        mass=_lerp(a.mass, b.mass, alpha),
        schwarzschild_radius=_lerp(a.schwarzschild_radius, b.schwarzschild_radius, alpha),
        spin=_lerp(a.spin, b.spin, alpha),
        spin_axis=axis / n if n > 0.0 else a.spin_axis,
        isco_radius=_lerp(a.isco_radius, b.isco_radius, alpha),
    )


@dataclass
class CollisionTimeline:
    """Playback view of a finished run for renderers (one body after merger, two before)."""
    frames: List[RenderFrame] = field(default_factory=list)
    total_duration: float = 0.0
    merger_time: float = 0.0
    merger_frame_index: int = -1

    @classmethod
    def build(cls, result: SimulationResult) -> "CollisionTimeline":
        tl = cls()
        if not result.frames:
            return tl

        tl.merger_time = float(result.merger_time)
        tl.total_duration = float(result.frames[-1].time)

        for i, f in enumerate(result.frames):
            if f.phase <= Phase.MERGER:
                bodies = (BodyRenderState.from_black_hole(f.bh1), BodyRenderState.from_black_hole(f.bh2))
                if f.phase == Phase.MERGER and tl.merger_frame_index < 0:
                    tl.merger_frame_index = i
            else:
                bodies = (BodyRenderState.from_black_hole(f.bh1),)
            tl.frames.append(RenderFrame(
                time=float(f.time),
                phase=f.phase,
                bodies=bodies,
                gw_strain_plus=f.gw.h_plus,
                gw_strain_cross=f.gw.h_cross,
                gw_amplitude=f.gw.amplitude,
                gw_frequency=f.gw.frequency,
                orbital_phase=f.orbital.orbital_phase,
            ))
        return tl

    def interpolate(self, t: float) -> RenderFrame:
        """Linear interpolation between the frames bracketing t (clamped to the run)."""
        if not self.frames:
            raise ValueError("empty timeline")

        t = float(np.clip(t, 0.0, self.total_duration))
        times = np.array([f.time for f in self.frames], dtype=float)
        hi = int(np.searchsorted(times, t, side="right"))
        if hi == 0:
            return self.frames[0]
        if hi >= len(self.frames):
            return self.frames[-1]
        lo = hi - 1
        a, b = self.frames[lo], self.frames[hi]
        if t <= a.time or b.time <= a.time:
            return a

        alpha = float(np.clip((t - a.time) / (b.time - a.time), 0.0, 1.0))
        # discrete fields come from the nearer frame
        near = a if alpha < 0.5 else b
        n = near.num_black_holes
        bodies = tuple(_lerp_body(a.bodies[k], b.bodies[k], alpha)
                       if k < a.num_black_holes and k < b.num_black_holes else near.bodies[k]
                       for k in range(n))
        return RenderFrame(
            time=t,
            phase=near.phase,
            bodies=bodies,
            gw_strain_plus=_lerp(a.gw_strain_plus, b.gw_strain_plus, alpha),
            gw_strain_cross=_lerp(a.gw_strain_cross, b.gw_strain_cross, alpha),
            gw_amplitude=_lerp(a.gw_amplitude, b.gw_amplitude, alpha),
            gw_frequency=_lerp(a.gw_frequency, b.gw_frequency, alpha),
            orbital_phase=_lerp(a.orbital_phase, b.orbital_phase, alpha),
        )
