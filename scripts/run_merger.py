#!/usr/bin/env python
from __future__ import annotations

import os
import argparse
import logging
from dataclasses import replace

from bhmerger.config import (BinaryParams, IntegratorParams, SimParams, SimulationConfig,
                             load_simulation_config, setup_logging, to_json)
from bhmerger.simulation import run_simulation
from bhmerger.progress import PhaseProgressBar
from bhmerger.export import export_to_json, export_frames_csv, format_summary
from bhmerger.timeline import CollisionTimeline
from bhmerger.units import UnitConversion

logger = logging.getLogger("bhmerger.run_merger")


def _config_from_args(args) -> SimulationConfig:
    if args.config:
        cfg = load_simulation_config(args.config)
    else:
        cfg = SimulationConfig(binary=BinaryParams(), integrator=IntegratorParams(), sim=SimParams())

    b = cfg.binary
    binary = replace(
        b,
        m1=args.m1 if args.m1 is not None else b.m1,
        m2=args.m2 if args.m2 is not None else b.m2,
        chi1=args.chi1 if args.chi1 is not None else b.chi1,
        chi2=args.chi2 if args.chi2 is not None else b.chi2,
        initial_separation=args.sep if args.sep is not None else b.initial_separation,
        eccentricity=args.ecc if args.ecc is not None else b.eccentricity,
        inclination=args.inclination if args.inclination is not None else b.inclination,
    )
    s = cfg.sim
    sim = replace(
        s,
        enable_1pn=s.enable_1pn and not args.no_1pn,
        enable_2pn=s.enable_2pn and not args.no_2pn,
        enable_25pn=s.enable_25pn and not args.no_25pn,
        record_interval=args.record_interval if args.record_interval is not None else s.record_interval,
        max_time=args.max_time if args.max_time is not None else s.max_time,
    )
    return replace(cfg, binary=binary, sim=sim)


def main():
    ap = argparse.ArgumentParser(description="Simulate one binary black hole inspiral, merger and ringdown.")
    ap.add_argument("--config", default=None, help="Optional JSON config (binary/integrator/sim sections)")
    ap.add_argument("--m1", type=float, default=None)
    ap.add_argument("--m2", type=float, default=None)
    ap.add_argument("--chi1", type=float, default=None)
    ap.add_argument("--chi2", type=float, default=None)
    ap.add_argument("--sep", type=float, default=None, help="Initial separation [M]")
    ap.add_argument("--ecc", type=float, default=None, help="Initial eccentricity (start at periapsis)")
    ap.add_argument("--inclination", type=float, default=None, help="Observer inclination [rad]")
    ap.add_argument("--max-time", type=float, default=None, help="Inspiral time limit [M]")
    ap.add_argument("--record-interval", type=float, default=None, help="Frame interval outside the plunge [M]")
    ap.add_argument("--no-1pn", action="store_true")
    ap.add_argument("--no-2pn", action="store_true")
    ap.add_argument("--no-25pn", action="store_true", help="Disable radiation reaction (orbit will not decay)")
    ap.add_argument("--solar-mass", type=float, default=None, help="Total mass in M_sun, for SI output in the summary")
    ap.add_argument("--out_dir", default="runs/merger")
    ap.add_argument("--csv", action="store_true", help="Also write frames.csv")
    ap.add_argument("--log-level", default="INFO")
    args = ap.parse_args()

    setup_logging(args.log_level)
    cfg = _config_from_args(args)
    os.makedirs(args.out_dir, exist_ok=True)
    to_json(cfg, os.path.join(args.out_dir, "config_used.json"))
    print(cfg.binary.describe())

    pbar = PhaseProgressBar(desc="inspiral")
    cfg = replace(cfg, progress_callback=pbar)
    try:
        result = run_simulation(cfg)
    finally:
        pbar.close()

    units = UnitConversion.from_solar_masses(args.solar_mass) if args.solar_mass else None
    print(format_summary(result, units))

    out_json = os.path.join(args.out_dir, "merger.json")
    export_to_json(result, out_json)
    print("Saved:", out_json)
    if args.csv:
        out_csv = os.path.join(args.out_dir, "frames.csv")
        export_frames_csv(result, out_csv)
        print("Saved:", out_csv)

    tl = CollisionTimeline.build(result)
    logger.info("Timeline: %d frames over %.1f M (merger frame %d)",
                len(tl.frames), tl.total_duration, tl.merger_frame_index)


if __name__ == "__main__":
    main()
