import json

import pytest

from bhmerger.config import (BinaryParams, IntegratorParams, SimParams, SimulationConfig,
                             config_from_dict, load_simulation_config, to_json)


def test_defaults():
    cfg = SimulationConfig()
    assert cfg.binary.total_mass == 1.0
    assert cfg.binary.eta == 0.25
    assert cfg.sim.critical_factor == 3.0
    assert cfg.pn_order == "2.5PN"
    assert cfg.observer_distance == cfg.binary.distance


def test_normalized():
    b = BinaryParams(m1=3.0, m2=1.0).normalized()
    assert b.m1 == 0.75 and b.m2 == 0.25
    assert b.mass_ratio == 3.0


@pytest.mark.parametrize("kwargs", [
    dict(chi1=1.0),
    dict(chi2=-0.1),
    dict(eccentricity=1.0),
    dict(initial_separation=0.0),
    dict(distance=float("inf")),
    dict(spin_axis1=(0.0, 0.0, 0.0)),
])
def test_binary_validation(kwargs):
    with pytest.raises(ValueError):
        BinaryParams(**kwargs)


def test_integrator_and_sim_validation():
    with pytest.raises(ValueError):
        IntegratorParams(dt_min=2.0, dt_max=1.0)
    with pytest.raises(ValueError):
        SimParams(ringdown_samples=0)
    with pytest.raises(ValueError):
        SimParams(max_time=-1.0)


def test_pn_order_label():
    cfg = SimulationConfig(sim=SimParams(enable_25pn=False, enable_2pn=False))
    assert cfg.pn_order == "1PN"
    cfg = SimulationConfig(sim=SimParams(enable_1pn=False, enable_2pn=False, enable_25pn=False))
    assert cfg.pn_order == "Newtonian"


def test_json_round_trip(tmp_path):
    cfg = SimulationConfig(binary=BinaryParams(m1=0.6, m2=0.4, chi1=0.3, spin_axis2=(0.0, 0.0, 1.0)),
                           sim=SimParams(record_interval=5.0, enable_2pn=False))
    path = tmp_path / "cfg.json"
    to_json(cfg, str(path))
    back = load_simulation_config(str(path))
    assert back.binary == cfg.binary
    assert back.sim == cfg.sim
    assert back.integrator == cfg.integrator


def test_from_dict_ignores_unknown_keys(tmp_path):
    d = {"binary": {"m1": 0.7, "m2": 0.3, "colour": "red"}, "sim": {"max_time": 100.0}}
    cfg = config_from_dict(d)
    assert cfg.binary.m1 == 0.7 and cfg.sim.max_time == 100.0
    assert cfg.integrator == IntegratorParams()

    path = tmp_path / "partial.json"
    path.write_text(json.dumps({"binary": {"chi1": 2.0}}))
    with pytest.raises(ValueError):
        load_simulation_config(str(path))
