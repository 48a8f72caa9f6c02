import json

import numpy as np

from bhmerger.config import BinaryParams, SimParams, SimulationConfig
from bhmerger.export import (export_frames_csv, export_to_json, format_summary, frames_to_dataframe,
                             result_to_dict, summary_row)
from bhmerger.simulation import run_simulation
from bhmerger.units import UnitConversion


def short_non_merger():
    return run_simulation(SimulationConfig(binary=BinaryParams(m1=0.6, m2=0.4), sim=SimParams(max_time=30.0)))


def test_result_dict_structure(merged_result):
    d = result_to_dict(merged_result)
    assert set(d) == {"metadata", "config", "remnant", "frames"}
    assert d["metadata"]["units"].startswith("geometrized")
    assert d["metadata"]["num_frames"] == len(merged_result.frames)
    assert d["remnant"]["qnm_frequency"] == merged_result.qnm.frequency
    f0 = d["frames"][0]
    assert set(f0) == {"time", "phase", "bh1", "bh2", "orbital", "gw"}
    assert len(f0["bh1"]["position"]) == 3


def test_non_merger_has_no_remnant_section():
    d = result_to_dict(short_non_merger())
    assert "remnant" not in d
    assert d["metadata"]["merger_occurred"] is False


def test_export_files(merged_result, tmp_path):
    out_json = tmp_path / "out" / "merger.json"
    export_to_json(merged_result, str(out_json))
    with open(out_json, "r", encoding="utf-8") as f:
        d = json.load(f)
    assert d["metadata"]["stop_reason"] == "merged"

    out_csv = tmp_path / "frames.csv"
    export_frames_csv(merged_result, str(out_csv))
    assert out_csv.read_text().splitlines()[0].startswith("time,phase,")


def test_dataframe_columns(merged_result):
    df = frames_to_dataframe(merged_result)
    assert len(df) == len(merged_result.frames)
    for col in ("time", "phase", "bh1_x", "bh2_vz", "separation", "orbital_frequency",
                "h_plus", "h_cross", "gw_amplitude", "gw_frequency"):
        assert col in df.columns, col
    assert (df["phase"].diff().dropna() >= 0).all()


def test_summary_row():
    row = summary_row(short_non_merger())
    assert row["merged"] is False
    assert np.isnan(row["remnant_mass"])
    assert row["binary_m1"] == 0.6
    assert "binary_spin_axis1" not in row


def test_format_summary(merged_result):
    text = format_summary(merged_result, UnitConversion.from_solar_masses(60.0))
    assert "Remnant Black Hole" in text
    assert "Hz" in text
    assert "No merger occurred" in format_summary(short_non_merger())
