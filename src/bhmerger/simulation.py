from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
import logging
from typing import List, Optional
import time
import numpy as np

from .black_hole import BlackHole, empty_black_hole, vec3
from .config import BinaryParams, SimulationConfig
from .ic import make_initial_binary
from .integrate import BinaryState, adaptive_timestep, make_derivative, rk4_step
from .merger import QNMParams, RemnantProperties, compute_qnm_222, compute_remnant, should_merge
from .orbit import OrbitalParams, compute_orbital_params, time_to_merger_estimate
from .waveform import GWStrain, inspiral_strain, ringdown_strain

logger = logging.getLogger(__name__)

# below this ringdown amplitude the waveform is numerical noise
RINGDOWN_FLOOR = 1e-30


class Phase(IntEnum):
    INSPIRAL = 0
    MERGER = 1
    RINGDOWN = 2
    POST_RINGDOWN = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, eq=False)
class SimulationFrame:
    time: float
    bh1: BlackHole
    bh2: BlackHole
    orbital: OrbitalParams
    gw: GWStrain
    phase: Phase


@dataclass
class SimulationResult:
    binary: BinaryParams
    frames: List[SimulationFrame] = field(default_factory=list)
    remnant: Optional[RemnantProperties] = None
    qnm: Optional[QNMParams] = None
    merger_occurred: bool = False
    merger_time: float = 0.0
    total_gw_cycles: float = 0.0
    total_energy_radiated: float = 0.0
    num_inspiral_frames: int = 0
    num_ringdown_frames: int = 0
    estimated_merger_time: float = 0.0
    n_steps: int = 0
    stop_reason: str = ""
    runtime_sec: float = 0.0

    def frames_in_phase(self, phase: Phase) -> List[SimulationFrame]:
        return [f for f in self.frames if f.phase == phase]

    def times(self) -> np.ndarray:
        return np.array([f.time for f in self.frames], dtype=float)


def _make_frame(t: float, bh1: BlackHole, bh2: BlackHole, cfg: SimulationConfig, phase: Phase) -> SimulationFrame:
    orb = compute_orbital_params(bh1, bh2)
    gw = inspiral_strain(orb, cfg.observer_distance, cfg.observer_inclination)
    return SimulationFrame(time=float(t), bh1=bh1, bh2=bh2, orbital=orb, gw=gw, phase=phase)


def _wrap_phase(dphi: float) -> float:
    if dphi < -np.pi:
        dphi += 2.0 * np.pi
    if dphi > np.pi:
        dphi -= 2.0 * np.pi
    return dphi


def _notify(cfg: SimulationConfig, t: float, frac: float, phase: Phase) -> None:
    if cfg.progress_callback is not None:
        cfg.progress_callback(float(t), float(min(1.0, max(0.0, frac))), phase.label)


def _ringdown(result: SimulationResult, cfg: SimulationConfig) -> None:
    sim = cfg.sim
    rem = result.remnant
    qnm = result.qnm
    assert rem is not None and qnm is not None

    dt_ring = sim.ringdown_duration / sim.ringdown_samples
    spin_axis = vec3((0.0, 1.0, 0.0))
    orb = OrbitalParams(separation=0.0, orbital_frequency=qnm.frequency, total_mass=rem.mass)

    for i in range(sim.ringdown_samples):
        t_ring = i * dt_ring
        gw = ringdown_strain(qnm, t_ring, cfg.observer_distance, cfg.observer_inclination)

        remnant_bh = BlackHole(
            mass=rem.mass,
            spin=rem.spin,
            position=rem.position + rem.velocity * t_ring,
            velocity=rem.velocity,
            spin_axis=spin_axis,
        )
        # the envelope is monotone; |h| itself oscillates with inclination
        envelope = qnm.amplitude * np.exp(-t_ring / qnm.damping_time) / cfg.observer_distance
        phase = Phase.RINGDOWN if envelope > RINGDOWN_FLOOR else Phase.POST_RINGDOWN
        result.frames.append(SimulationFrame(
            time=result.merger_time + t_ring,
            bh1=remnant_bh,
            bh2=empty_black_hole(),
            orbital=orb,
            gw=gw,
            phase=phase,
        ))

        if i % sim.ringdown_progress_every == 0:
            _notify(cfg, result.merger_time + t_ring, i / sim.ringdown_samples, Phase.RINGDOWN)

    result.num_ringdown_frames = sim.ringdown_samples


def run_simulation(config: SimulationConfig) -> SimulationResult:
    """Inspiral -> merger -> ringdown for one binary.

    Masses are rescaled to m1 + m2 = 1 before anything else. A run that hits
    ``max_time`` or ``max_steps`` without merging is returned as a valid
    non-merger result (``merger_occurred=False``).
    """
    start = time.time()
    binary = config.binary.normalized()
    sim = config.sim
    cfg = SimulationConfig(binary=binary, integrator=config.integrator, sim=sim,
                           progress_callback=config.progress_callback)

    bh1, bh2 = make_initial_binary(binary)
    orb0 = compute_orbital_params(bh1, bh2)
    t_est = time_to_merger_estimate(orb0.symmetric_mass_ratio, orb0.total_mass, orb0.separation)

    result = SimulationResult(binary=binary, estimated_merger_time=float(t_est))
    logger.info("Starting %s run: m1=%.4f m2=%.4f r0=%.2f M (Peters estimate %.1f M)",
                cfg.pn_order, binary.m1, binary.m2, binary.initial_separation, t_est)

    state = BinaryState.from_black_holes(bh1, bh2)
    deriv = make_derivative(bh1.mass, bh2.mass, sim.enable_1pn, sim.enable_2pn, sim.enable_25pn)
    total_mass = bh1.mass + bh2.mass

    last_record_time = -sim.record_interval
    last_phase = 0.0
    n_steps = 0
    stop_reason = ""

    # inspiral
    while state.time < sim.max_time:
        bh1 = bh1.with_state(state.pos1, state.vel1)
        bh2 = bh2.with_state(state.pos2, state.vel2)

        if should_merge(bh1, bh2, sim.critical_factor, sim.merger_speed):
            result.merger_occurred = True
            result.merger_time = float(state.time)
            result.frames.append(_make_frame(state.time, bh1, bh2, cfg, Phase.MERGER))
            stop_reason = "merged"
            break

        interval = sim.record_interval
        if state.separation < sim.plunge_separation * total_mass:
            interval = sim.record_interval / sim.plunge_refinement

        if state.time - last_record_time >= interval:
            frame = _make_frame(state.time, bh1, bh2, cfg, Phase.INSPIRAL)
            result.frames.append(frame)
            last_record_time = state.time

            # GW cycles: the GW phase runs at twice the orbital phase
            dphi = _wrap_phase(frame.orbital.orbital_phase - last_phase)
            result.total_gw_cycles += abs(dphi) / np.pi
            last_phase = frame.orbital.orbital_phase

        if n_steps % sim.progress_every == 0:
            _notify(cfg, state.time, state.time / t_est, Phase.INSPIRAL)

        dt = adaptive_timestep(state, cfg.integrator, total_mass)
        state = rk4_step(state, dt, deriv)
        n_steps += 1

        if n_steps >= sim.max_steps:
            stop_reason = "max_steps"
            logger.warning("Step cap (%d) reached at t=%.3f M without merger", sim.max_steps, state.time)
            break

    if not stop_reason:
        stop_reason = "max_time"
        logger.info("No merger before max_time=%.1f M (separation %.3f M)", sim.max_time, state.separation)

    result.num_inspiral_frames = len(result.frames)
    result.n_steps = n_steps
    result.stop_reason = stop_reason

    if result.merger_occurred:
        result.remnant = compute_remnant(bh1, bh2)
        result.total_energy_radiated = result.remnant.energy_radiated

        merger_gw = inspiral_strain(compute_orbital_params(bh1, bh2), cfg.observer_distance, cfg.observer_inclination)
        result.qnm = compute_qnm_222(result.remnant.mass, result.remnant.spin,
                                     merger_gw.amplitude * cfg.observer_distance)
        logger.info("Merger at t=%.3f M after %d steps: M_f=%.5f a_f=%.4f kick=%.3e c",
                    result.merger_time, n_steps, result.remnant.mass, result.remnant.spin,
                    result.remnant.kick_velocity)

        _ringdown(result, cfg)
        logger.debug("Ringdown: %d samples, tau=%.3f M", result.num_ringdown_frames, result.qnm.damping_time)

    result.runtime_sec = float(time.time() - start)
    return result
