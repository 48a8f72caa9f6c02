from __future__ import annotations

from dataclasses import dataclass, asdict, field, replace
from typing import Any, Callable, Dict, Optional, Tuple
import json
import logging
import sys
import numpy as np


# (current_time, fraction_complete, phase_name)
ProgressCallback = Callable[[float, float, str], None]


def _check_positive(name: str, value: float) -> None:
    if not np.isfinite(value) or value <= 0.0:
        raise ValueError(f"{name} must be positive and finite, got {value}")


def _check_unit_interval(name: str, value: float) -> None:
    if not np.isfinite(value) or value < 0.0 or value >= 1.0:
        raise ValueError(f"{name} must lie in [0, 1), got {value}")


@dataclass(frozen=True)
class BinaryParams:
    # masses as fractions of the total mass M (rescaled to m1+m2=1 at setup)
    m1: float = 0.5
    m2: float = 0.5

    # dimensionless spins and spin directions (aligned-spin systems)
    chi1: float = 0.0
    chi2: float = 0.0
    spin_axis1: Tuple[float, float, float] = (0.0, 1.0, 0.0)
    spin_axis2: Tuple[float, float, float] = (0.0, 1.0, 0.0)

    # orbit, in units of M
    initial_separation: float = 20.0
    eccentricity: float = 0.0

    # observer
    inclination: float = 0.0
    distance: float = 1e6

    def __post_init__(self):
        _check_positive("m1", self.m1)
        _check_positive("m2", self.m2)
        _check_unit_interval("chi1", self.chi1)
        _check_unit_interval("chi2", self.chi2)
        _check_unit_interval("eccentricity", self.eccentricity)
        _check_positive("initial_separation", self.initial_separation)
        _check_positive("distance", self.distance)
        if not np.isfinite(self.inclination):
            raise ValueError(f"inclination must be finite, got {self.inclination}")
        for name in ("spin_axis1", "spin_axis2"):
            axis = np.asarray(getattr(self, name), dtype=float)
            if axis.shape != (3,) or not np.all(np.isfinite(axis)) or np.linalg.norm(axis) == 0.0:
                raise ValueError(f"{name} must be a non-zero 3-vector, got {getattr(self, name)}")

    @property
    def total_mass(self) -> float:
        return float(self.m1 + self.m2)

    @property
    def mass_ratio(self) -> float:
        return float(self.m1 / self.m2)

    @property
    def eta(self) -> float:
        M = self.total_mass
        return float(self.m1 * self.m2 / (M * M))

    def normalized(self) -> "BinaryParams":
        """Copy with the masses rescaled so that m1 + m2 = 1."""
        M = self.total_mass
        return replace(self, m1=self.m1 / M, m2=self.m2 / M)

    def describe(self) -> str:
        return (
            "Binary Config:\n"
            f"  m1 = {self.m1:.4f}, m2 = {self.m2:.4f} (q = {self.mass_ratio:.2f})\n"
            f"  chi1 = {self.chi1:.3f}, chi2 = {self.chi2:.3f}\n"
            f"  separation = {self.initial_separation:.2f} M\n"
            f"  eccentricity = {self.eccentricity:.4f}\n"
            f"  inclination = {self.inclination:.4f} rad\n"
            f"  distance = {self.distance:.2e} M\n"
        )


@dataclass(frozen=True)
class IntegratorParams:
    dt_initial: float = 0.1
    dt_min: float = 1e-6
    dt_max: float = 1.0
    # fraction of the local orbital period used as the step
    safety_factor: float = 0.1
    adaptive: bool = True

    def __post_init__(self):
        _check_positive("dt_initial", self.dt_initial)
        _check_positive("dt_min", self.dt_min)
        _check_positive("dt_max", self.dt_max)
        _check_positive("safety_factor", self.safety_factor)
        if self.dt_min > self.dt_max:
            raise ValueError(f"dt_min ({self.dt_min}) must not exceed dt_max ({self.dt_max})")


@dataclass(frozen=True)
class SimParams:
    # time control, in units of M
    max_time: float = 1e6
    record_interval: float = 10.0
    ringdown_duration: float = 100.0
    ringdown_samples: int = 500

    # PN toggles; 2.5PN is needed for a decaying orbit
    enable_1pn: bool = True
    enable_2pn: bool = True
    enable_25pn: bool = True

    # merger detection: r <= critical_factor * (r_s1 + r_s2)/2, or |v| > merger_speed
    critical_factor: float = 3.0
    merger_speed: float = 2.0

    # hard cap on integration steps
    max_steps: int = 2_000_000_000

    # below plunge_separation (units of M) the recording interval is divided by plunge_refinement
    plunge_separation: float = 10.0
    plunge_refinement: float = 4000.0

    # progress callback cadence
    progress_every: int = 10000
    ringdown_progress_every: int = 50

    def __post_init__(self):
        _check_positive("max_time", self.max_time)
        _check_positive("record_interval", self.record_interval)
        _check_positive("ringdown_duration", self.ringdown_duration)
        _check_positive("critical_factor", self.critical_factor)
        _check_positive("merger_speed", self.merger_speed)
        _check_positive("plunge_refinement", self.plunge_refinement)
        if self.plunge_separation < 0.0:
            raise ValueError(f"plunge_separation must be >= 0, got {self.plunge_separation}")
        for name in ("ringdown_samples", "max_steps", "progress_every", "ringdown_progress_every"):
            if int(getattr(self, name)) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")


@dataclass(frozen=True)
class SimulationConfig:
    binary: BinaryParams = field(default_factory=BinaryParams)
    integrator: IntegratorParams = field(default_factory=IntegratorParams)
    sim: SimParams = field(default_factory=SimParams)

    # observer only: must not touch simulation state
    progress_callback: Optional[ProgressCallback] = None

    @property
    def observer_distance(self) -> float:
        return self.binary.distance

    @property
    def observer_inclination(self) -> float:
        return self.binary.inclination

    @property
    def pn_order(self) -> str:
        if self.sim.enable_25pn:
            return "2.5PN"
        if self.sim.enable_2pn:
            return "2PN"
        if self.sim.enable_1pn:
            return "1PN"
        return "Newtonian"


def _dataclass_from_dict(cls, d: Dict[str, Any]):
    # unknown keys are ignored, missing keys fall back to defaults
    kwargs = {}
    for f in cls.__dataclass_fields__.values():  # type: ignore
        if f.name not in d:
            continue
        val = d[f.name]
        if f.name.startswith("spin_axis") and val is not None:
            val = tuple(float(x) for x in val)
        kwargs[f.name] = val
    return cls(**kwargs)  # type: ignore


def config_from_dict(d: Dict[str, Any]) -> SimulationConfig:
    return SimulationConfig(
        binary=_dataclass_from_dict(BinaryParams, d.get("binary", {})),
        integrator=_dataclass_from_dict(IntegratorParams, d.get("integrator", {})),
        sim=_dataclass_from_dict(SimParams, d.get("sim", {})),
    )


def load_simulation_config(path: str) -> SimulationConfig:
    with open(path, "r", encoding="utf-8") as f:
        d = json.load(f)
    return config_from_dict(d)


def config_to_dict(cfg: SimulationConfig) -> Dict[str, Any]:
    return {
        "binary": asdict(cfg.binary),
        "integrator": asdict(cfg.integrator),
        "sim": asdict(cfg.sim),
    }


def to_json(obj: Any, path: str) -> None:
    if isinstance(obj, SimulationConfig):
        d = config_to_dict(obj)
    else:
        d = asdict(obj)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(d, f, indent=2)


def setup_logging(level: str = "INFO") -> None:
    """Configure a stdout handler for the package loggers (scripts only)."""
    lvl = getattr(logging, str(level).upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logging.basicConfig(level=lvl, handlers=[handler], force=True)
    logging.getLogger("bhmerger").setLevel(lvl)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
