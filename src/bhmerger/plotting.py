from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd

from .merger import QNMParams
from .simulation import Phase
from .waveform import ringdown_series

import matplotlib
matplotlib.use("Agg", force=True)  # headless
import matplotlib.pyplot as plt

PHASE_COLORS = {Phase.INSPIRAL: "C0", Phase.MERGER: "C3", Phase.RINGDOWN: "C1", Phase.POST_RINGDOWN: "0.6"}


@dataclass(frozen=True)
class FigureConfig:
    fmt: str = "pdf"          # "pdf", "png", "svg"
    dpi: int = 300            # raster formats only
    fontsize: float = 10.0
    linewidth: float = 1.0
    use_tex: bool = False
    tight: bool = True
    pad_inches: float = 0.02
    figsize: Tuple[float, float] = (3.4, 2.6)

    # dashed vertical line at the merger frame
    mark_merger: bool = True
    # strain curves thinner than this many points are drawn with markers
    min_line_points: int = 8


def set_paper_style(cfg: FigureConfig) -> None:
    plt.rcParams.update({
        "figure.figsize": cfg.figsize,
        "figure.dpi": 120,
        "savefig.dpi": cfg.dpi,
        "font.size": cfg.fontsize,
        "axes.labelsize": cfg.fontsize,
        "axes.titlesize": cfg.fontsize,
        "legend.fontsize": max(6.0, cfg.fontsize - 2.0),
        "xtick.labelsize": max(6.0, cfg.fontsize - 2.0),
        "ytick.labelsize": max(6.0, cfg.fontsize - 2.0),
        "axes.linewidth": 0.8,
        "xtick.direction": "in",
        "ytick.direction": "in",
        "xtick.minor.visible": True,
        "ytick.minor.visible": True,
        "legend.frameon": False,
        "lines.linewidth": cfg.linewidth,
        "pdf.fonttype": 42,
        "ps.fonttype": 42,
    })
    if cfg.use_tex:
        plt.rcParams.update({
            "text.usetex": True,
            "font.family": "serif",
            "font.serif": ["Computer Modern Roman"],
        })


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def savefig(fig: plt.Figure, path: str, cfg: FigureConfig) -> None:
    kwargs = {}
    if cfg.tight:
        kwargs["bbox_inches"] = "tight"
        kwargs["pad_inches"] = cfg.pad_inches
    if path.lower().endswith((".png", ".jpg", ".jpeg", ".tif", ".tiff")):
        kwargs["dpi"] = cfg.dpi
    fig.savefig(path, **kwargs)


def _mark_merger(ax, df: pd.DataFrame, cfg: FigureConfig) -> None:
    if not cfg.mark_merger:
        return
    merged = df[df["phase"] == Phase.MERGER]
    if len(merged):
        ax.axvline(float(merged["time"].iloc[0]), linestyle="--", linewidth=0.8, color="k")


def plot_waveform(df: pd.DataFrame, out_path: str, cfg: FigureConfig, scale_by_distance: float = 1.0) -> None:
    """h+ and hx against time, coloured by phase; the merger time is marked."""
    fig, ax = plt.subplots()
    for ph, grp in df.groupby("phase"):
        style = "-" if len(grp) >= cfg.min_line_points else "."
        ax.plot(grp["time"], grp["h_plus"] * scale_by_distance, style, color=PHASE_COLORS.get(int(ph), "k"),
                label=Phase(int(ph)).label)
    ax.plot(df["time"], df["h_cross"] * scale_by_distance, color="k", alpha=0.3, linewidth=0.6, label=r"$h_\times$")
    _mark_merger(ax, df, cfg)
    ax.set_xlabel(r"$t\,[M]$")
    ax.set_ylabel(r"$D\,h_+ \,[M]$" if scale_by_distance != 1.0 else r"$h_+$")
    ax.legend(loc="upper left")
    savefig(fig, out_path, cfg)
    plt.close(fig)


def plot_separation(df: pd.DataFrame, out_path: str, cfg: FigureConfig) -> None:
    d = df[df["phase"] <= Phase.MERGER]
    fig, ax = plt.subplots()
    ax.plot(d["time"], d["separation"])
    _mark_merger(ax, df, cfg)
    ax.set_xlabel(r"$t\,[M]$")
    ax.set_ylabel(r"$r\,[M]$")
    ax.set_yscale("log")
    savefig(fig, out_path, cfg)
    plt.close(fig)


def plot_frequency_chirp(df: pd.DataFrame, out_path: str, cfg: FigureConfig) -> None:
    d = df[(df["phase"] <= Phase.MERGER) & (df["gw_frequency"] > 0)]
    fig, ax = plt.subplots()
    ax.plot(d["time"], d["gw_frequency"], label="inspiral")
    ring = df[df["phase"] >= Phase.RINGDOWN]
    if len(ring):
        ax.axhline(float(ring["gw_frequency"].iloc[0]), linestyle=":", color="C1", label="QNM")
    ax.set_xlabel(r"$t\,[M]$")
    ax.set_ylabel(r"$f_{\rm GW}\,[1/M]$")
    ax.set_yscale("log")
    ax.legend(loc="best")
    savefig(fig, out_path, cfg)
    plt.close(fig)


def plot_orbit_tracks(df: pd.DataFrame, out_path: str, cfg: FigureConfig) -> None:
    """Body tracks in the x-z orbital plane; the remnant continues from bh1's columns."""
    ins = df[df["phase"] <= Phase.MERGER]
    ring = df[df["phase"] >= Phase.RINGDOWN]
    fig, ax = plt.subplots()
    ax.plot(ins["bh1_x"], ins["bh1_z"], label="BH 1")
    ax.plot(ins["bh2_x"], ins["bh2_z"], label="BH 2")
    if len(ring):
        ax.plot(ring["bh1_x"], ring["bh1_z"], color="k", label="remnant")
        ax.plot([ring["bh1_x"].iloc[0]], [ring["bh1_z"].iloc[0]], marker="x", color="k")
    ax.set_aspect("equal", adjustable="datalim")
    ax.set_xlabel(r"$x\,[M]$")
    ax.set_ylabel(r"$z\,[M]$")
    ax.legend(loc="best")
    savefig(fig, out_path, cfg)
    plt.close(fig)


def plot_energy(df: pd.DataFrame, out_path: str, cfg: FigureConfig) -> None:
    d = df[df["phase"] <= Phase.MERGER]
    E = d["energy"].to_numpy(dtype=float)
    if len(E) == 0:
        return
    fig, ax = plt.subplots()
    ax.plot(d["time"], (E - E[0]) / (abs(E[0]) + 1e-30))
    ax.set_xlabel(r"$t\,[M]$")
    ax.set_ylabel(r"$(E(t)-E_0)/|E_0|$")
    ax.set_yscale("symlog", linthresh=1e-6)
    savefig(fig, out_path, cfg)
    plt.close(fig)


def plot_all(df: pd.DataFrame, out_dir: str, cfg: FigureConfig, distance: float = 1.0) -> list[str]:
    ensure_dir(out_dir)
    paths = []
    for name, fn in (("separation", plot_separation),
                     ("chirp", plot_frequency_chirp),
                     ("orbit", plot_orbit_tracks),
                     ("energy", plot_energy)):
        p = os.path.join(out_dir, f"{name}.{cfg.fmt}")
        fn(df, p, cfg)
        paths.append(p)
    p = os.path.join(out_dir, f"waveform.{cfg.fmt}")
    plot_waveform(df, p, cfg, scale_by_distance=distance)
    paths.append(p)
    return [q for q in paths if os.path.exists(q)]


def plot_ringdown(df: pd.DataFrame, qnm: QNMParams, out_path: str, cfg: FigureConfig,
                  distance: float, inclination: float = 0.0) -> None:
    """Recorded ringdown samples against the analytic damped sinusoid and its envelope."""
    ring = df[df["phase"] >= Phase.RINGDOWN]
    if len(ring) == 0:
        return
    t0 = float(ring["time"].iloc[0])
    t = np.linspace(0.0, float(ring["time"].iloc[-1]) - t0, 2000)
    hp, _ = ringdown_series(qnm, t, distance, inclination)
    env = qnm.amplitude * np.exp(-t / qnm.damping_time) / distance

    fig, ax = plt.subplots()
    ax.plot(t, hp * distance, color="C1", label="QNM")
    ax.plot(t, env * distance, color="k", linestyle=":", linewidth=0.8)
    ax.plot(ring["time"] - t0, ring["h_plus"] * distance, linestyle="none", marker=".", markersize=1.5,
            color="C0", label="frames")
    ax.set_xlabel(r"$t - t_{\rm merger}\,[M]$")
    ax.set_ylabel(r"$D\,h_+\,[M]$")
    ax.legend(loc="upper right")
    savefig(fig, out_path, cfg)
    plt.close(fig)
