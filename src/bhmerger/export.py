from __future__ import annotations

import json
import os
from dataclasses import asdict
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from .merger import C_KMS
from .simulation import SimulationFrame, SimulationResult
from .units import UnitConversion


def _vec(x) -> list[float]:
    return [float(c) for c in np.asarray(x, dtype=float)]


def _body_dict(bh) -> Dict[str, Any]:
    return {
        "mass": float(bh.mass),
        "spin": float(bh.spin),
        "position": _vec(bh.position),
        "velocity": _vec(bh.velocity),
    }


def frame_to_dict(f: SimulationFrame) -> Dict[str, Any]:
    return {
        "time": float(f.time),
        "phase": int(f.phase),
        "bh1": _body_dict(f.bh1),
        "bh2": _body_dict(f.bh2),
        "orbital": {
            "separation": float(f.orbital.separation),
            "frequency": float(f.orbital.orbital_frequency),
            "phase": float(f.orbital.orbital_phase),
            "energy": float(f.orbital.energy),
        },
        "gw": asdict(f.gw),
    }


def result_to_dict(result: SimulationResult) -> Dict[str, Any]:
    """Interchange structure: geometrized units throughout (mass in M, length and time in M)."""
    b = result.binary
    out: Dict[str, Any] = {
        "metadata": {
            "units": "geometrized (G=c=1)",
            "mass_unit": "total_mass_M",
            "length_unit": "M",
            "time_unit": "M",
            "num_frames": len(result.frames),
            "num_inspiral_frames": int(result.num_inspiral_frames),
            "num_ringdown_frames": int(result.num_ringdown_frames),
            "merger_occurred": bool(result.merger_occurred),
            "merger_time": float(result.merger_time),
            "total_gw_cycles": float(result.total_gw_cycles),
            "energy_radiated_fraction": float(result.total_energy_radiated),
            "stop_reason": result.stop_reason,
            "n_steps": int(result.n_steps),
        },
        "config": {
            "m1": b.m1,
            "m2": b.m2,
            "chi1": b.chi1,
            "chi2": b.chi2,
            "initial_separation": b.initial_separation,
            "eccentricity": b.eccentricity,
            "inclination": b.inclination,
            "distance": b.distance,
        },
    }
    if result.merger_occurred and result.remnant is not None and result.qnm is not None:
        rem = result.remnant
        out["remnant"] = {
            "mass": rem.mass,
            "spin": rem.spin,
            "kick_velocity": rem.kick_velocity,
            "energy_radiated": rem.energy_radiated,
            "position": _vec(rem.position),
            "velocity": _vec(rem.velocity),
            "qnm_frequency": result.qnm.frequency,
            "qnm_damping_time": result.qnm.damping_time,
            "qnm_amplitude": result.qnm.amplitude,
        }
    out["frames"] = [frame_to_dict(f) for f in result.frames]
    return out


def export_to_json(result: SimulationResult, path: str) -> None:
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result_to_dict(result), f, indent=2)


def frames_to_dataframe(result: SimulationResult) -> pd.DataFrame:
    """One row per frame with flattened body, orbital and GW columns."""
    rows = []
    for f in result.frames:
        row = {"time": f.time, "phase": int(f.phase)}
        for name, bh in (("bh1", f.bh1), ("bh2", f.bh2)):
            row[f"{name}_mass"] = bh.mass
            for k, axis in enumerate("xyz"):
                row[f"{name}_{axis}"] = bh.position[k]
                row[f"{name}_v{axis}"] = bh.velocity[k]
        row.update({
            "separation": f.orbital.separation,
            "orbital_frequency": f.orbital.orbital_frequency,
            "orbital_phase": f.orbital.orbital_phase,
            "energy": f.orbital.energy,
            "h_plus": f.gw.h_plus,
            "h_cross": f.gw.h_cross,
            "gw_amplitude": f.gw.amplitude,
            "gw_frequency": f.gw.frequency,
        })
        rows.append(row)
    return pd.DataFrame(rows)


def export_frames_csv(result: SimulationResult, path: str) -> None:
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    frames_to_dataframe(result).to_csv(path, index=False)


def summary_row(result: SimulationResult) -> Dict[str, Any]:
    """Flat dict of scalar results for tabular storage."""
    b = result.binary
    row: Dict[str, Any] = {
        "merged": bool(result.merger_occurred),
        "stop_reason": result.stop_reason,
        "merger_time": float(result.merger_time),
        "estimated_merger_time": float(result.estimated_merger_time),
        "gw_cycles": float(result.total_gw_cycles),
        "energy_radiated": float(result.total_energy_radiated),
        "n_frames": len(result.frames),
        "n_steps": int(result.n_steps),
        "runtime_sec": float(result.runtime_sec),
        "remnant_mass": np.nan,
        "remnant_spin": np.nan,
        "kick_velocity": np.nan,
        "qnm_frequency": np.nan,
        "qnm_damping_time": np.nan,
    }
    if result.remnant is not None and result.qnm is not None:
        row.update({
            "remnant_mass": result.remnant.mass,
            "remnant_spin": result.remnant.spin,
            "kick_velocity": result.remnant.kick_velocity,
            "qnm_frequency": result.qnm.frequency,
            "qnm_damping_time": result.qnm.damping_time,
        })
    for k, v in asdict(b).items():
        if not k.startswith("spin_axis"):
            row[f"binary_{k}"] = v
    return row


def format_summary(result: SimulationResult, units: Optional[UnitConversion] = None) -> str:
    b = result.binary
    lines = [
        "",
        "=" * 64,
        "  BINARY BLACK HOLE MERGER SIMULATION - RESULTS",
        "=" * 64,
        "",
        "Initial Conditions:",
        f"  m1 = {b.m1:.4f} M, m2 = {b.m2:.4f} M (q = {b.mass_ratio:.2f})",
        f"  chi1 = {b.chi1:.3f}, chi2 = {b.chi2:.3f}",
        f"  Initial separation = {b.initial_separation:.2f} M",
        f"  Eccentricity = {b.eccentricity:.4f}",
        "",
        f"  Symmetric mass ratio eta = {b.eta:.4f}",
        f"  Chirp mass M_c = {b.total_mass * b.eta**0.6:.4f} M",
        "",
        "Simulation Statistics:",
        f"  Total frames recorded: {len(result.frames)}",
        f"  Inspiral frames: {result.num_inspiral_frames}",
        f"  Ringdown frames: {result.num_ringdown_frames}",
        f"  Integration steps: {result.n_steps}",
        f"  Total GW cycles: {result.total_gw_cycles:.1f}",
        "",
    ]
    if result.merger_occurred and result.remnant is not None and result.qnm is not None:
        rem, qnm = result.remnant, result.qnm
        lines += [
            "Merger:",
            f"  Merger time = {result.merger_time:.2f} M",
            f"  Energy radiated = {result.total_energy_radiated:.4f} M ({100.0 * result.total_energy_radiated:.2f}%)",
        ]
        if units is not None:
            lines.append(f"  Merger time = {units.to_seconds(result.merger_time):.4f} s")
        lines += [
            "",
            "Remnant Black Hole:",
            f"  Mass = {rem.mass:.6f} M",
            f"  Spin = {rem.spin:.6f}",
            f"  Kick velocity = {rem.kick_velocity:.6f} c ({rem.kick_velocity * C_KMS:.1f} km/s)",
            "  Position = ({:.4f}, {:.4f}, {:.4f})".format(*_vec(rem.position)),
            "",
            "Quasinormal Mode (l=2, m=2, n=0):",
            f"  Frequency = {qnm.frequency:.6f} / M",
            f"  Damping time = {qnm.damping_time:.4f} M",
            f"  Amplitude = {qnm.amplitude:.6e}",
        ]
        if units is not None:
            lines.append(f"  Frequency = {units.to_hertz(qnm.frequency):.2f} Hz")
    else:
        lines.append(f"  No merger occurred within simulation time ({result.stop_reason}).")
    lines += ["", "=" * 64, ""]
    return "\n".join(lines)
