#!/usr/bin/env python
from __future__ import annotations

import os
import json
import argparse

import pandas as pd

from bhmerger.merger import QNMParams
from bhmerger.plotting import FigureConfig, set_paper_style, plot_all, plot_ringdown


def main():
    ap = argparse.ArgumentParser(description="Paper figures from a run_merger.py output directory.")
    ap.add_argument("--run_dir", required=True, help="Directory with frames.csv (and merger.json)")
    ap.add_argument("--out_dir", default=None)
    ap.add_argument("--fmt", default="pdf")
    ap.add_argument("--dpi", type=int, default=300)
    ap.add_argument("--use_tex", action="store_true")
    args = ap.parse_args()

    cfg = FigureConfig(fmt=args.fmt, dpi=args.dpi, use_tex=args.use_tex)
    set_paper_style(cfg)
    out_dir = args.out_dir or os.path.join(args.run_dir, "figures")

    df = pd.read_csv(os.path.join(args.run_dir, "frames.csv"))

    distance, inclination, qnm = 1.0, 0.0, None
    meta_path = os.path.join(args.run_dir, "merger.json")
    if os.path.exists(meta_path):
        with open(meta_path, "r", encoding="utf-8") as f:
            meta = json.load(f)
        distance = float(meta["config"]["distance"])
        inclination = float(meta["config"]["inclination"])
        rem = meta.get("remnant")
        if rem is not None:
            qnm = QNMParams(frequency=float(rem["qnm_frequency"]), damping_time=float(rem["qnm_damping_time"]),
                            amplitude=float(rem["qnm_amplitude"]))

    for p in plot_all(df, out_dir, cfg, distance=distance):
        print("Saved:", p)
    if qnm is not None:
        p = os.path.join(out_dir, f"ringdown.{cfg.fmt}")
        plot_ringdown(df, qnm, p, cfg, distance=distance, inclination=inclination)
        print("Saved:", p)


if __name__ == "__main__":
    main()
