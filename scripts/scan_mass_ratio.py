#!/usr/bin/env python
from __future__ import annotations

import os
import argparse
from concurrent.futures import ProcessPoolExecutor
from typing import Any, Dict

import numpy as np
import pandas as pd
from tqdm import tqdm

from bhmerger.config import BinaryParams, IntegratorParams, SimParams, SimulationConfig, setup_logging, to_json
from bhmerger.simulation import run_simulation
from bhmerger.export import summary_row


def _set_thread_env():
    # one BLAS thread per worker process
    os.environ.setdefault("OMP_NUM_THREADS", "1")
    os.environ.setdefault("OPENBLAS_NUM_THREADS", "1")
    os.environ.setdefault("MKL_NUM_THREADS", "1")


def build_tasks(q_list, chi_list, sep: float, ringdown_samples: int) -> list[SimulationConfig]:
    tasks = []
    for q in q_list:
        for chi in chi_list:
            binary = BinaryParams(m1=float(q) / (1.0 + q), m2=1.0 / (1.0 + q),
                                  chi1=float(chi), chi2=float(chi), initial_separation=sep)
            sim = SimParams(record_interval=50.0, ringdown_samples=ringdown_samples)
            tasks.append(SimulationConfig(binary=binary, integrator=IntegratorParams(), sim=sim))
    return tasks


def _worker(cfg: SimulationConfig) -> Dict[str, Any]:
    res = run_simulation(cfg)
    row = summary_row(res)
    row["q"] = cfg.binary.mass_ratio
    return row


def main():
    _set_thread_env()

    ap = argparse.ArgumentParser(description="Remnant and ringdown properties over a grid of mass ratios and spins.")
    ap.add_argument("--q_min", type=float, default=1.0)
    ap.add_argument("--q_max", type=float, default=4.0)
    ap.add_argument("--n_q", type=int, default=7)
    ap.add_argument("--chi", type=float, nargs="*", default=[0.0])
    ap.add_argument("--sep", type=float, default=12.0)
    ap.add_argument("--ringdown_samples", type=int, default=200)
    ap.add_argument("--workers", type=int, default=0)
    ap.add_argument("--out_dir", default="runs/scan_q")
    ap.add_argument("--log-level", default="WARNING")
    args = ap.parse_args()

    setup_logging(args.log_level)
    os.makedirs(args.out_dir, exist_ok=True)

    q_list = np.linspace(args.q_min, args.q_max, args.n_q)
    tasks = build_tasks(q_list, args.chi, args.sep, args.ringdown_samples)
    to_json(tasks[0], os.path.join(args.out_dir, "config_first.json"))

    workers = args.workers or (os.cpu_count() or 4)
    rows = []
    with ProcessPoolExecutor(max_workers=workers) as ex:
        for row in tqdm(ex.map(_worker, tasks), total=len(tasks)):
            rows.append(row)

    df = pd.DataFrame(rows).sort_values(["binary_chi1", "q"])
    out_csv = os.path.join(args.out_dir, "scan.csv")
    df.to_csv(out_csv, index=False)
    print("Saved:", out_csv)

    cols = ["q", "binary_chi1", "merged", "merger_time", "remnant_mass", "remnant_spin", "kick_velocity", "qnm_frequency"]
    print(df[cols].to_string(index=False))


if __name__ == "__main__":
    main()
