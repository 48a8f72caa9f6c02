import pytest

from bhmerger.config import BinaryParams, IntegratorParams, SimParams, SimulationConfig
from bhmerger.simulation import run_simulation


def short_config(**sim_overrides) -> SimulationConfig:
    sim = dict(max_time=50000.0, ringdown_samples=100)
    sim.update(sim_overrides)
    return SimulationConfig(
        binary=BinaryParams(m1=1.0, m2=1.0, initial_separation=15.0),
        integrator=IntegratorParams(),
        sim=SimParams(**sim),
    )


@pytest.fixture(scope="session")
def merged_result():
    """Equal-mass, non-spinning 2.5PN run from r0 = 15M through ringdown."""
    res = run_simulation(short_config())
    assert res.merger_occurred, f"reference run did not merge: {res.stop_reason}"
    return res
