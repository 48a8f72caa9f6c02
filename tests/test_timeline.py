import numpy as np
import pytest

from bhmerger.simulation import Phase, SimulationResult
from bhmerger.config import BinaryParams
from bhmerger.timeline import CollisionTimeline


def test_build(merged_result):
    tl = CollisionTimeline.build(merged_result)
    assert len(tl.frames) == len(merged_result.frames)
    assert tl.merger_time == merged_result.merger_time
    assert tl.total_duration == merged_result.frames[-1].time
    assert tl.frames[tl.merger_frame_index].phase == Phase.MERGER
    assert all(f.num_black_holes == 2 for f in tl.frames[:tl.merger_frame_index + 1])
    assert all(f.num_black_holes == 1 for f in tl.frames[tl.merger_frame_index + 1:])


def test_interpolate_between_frames(merged_result):
    tl = CollisionTimeline.build(merged_result)
    a, b = tl.frames[0], tl.frames[1]
    t = 0.5 * (a.time + b.time)
    f = tl.interpolate(t)
    assert f.time == t
    assert f.num_black_holes == 2
    expected = 0.5 * (a.bodies[0].position + b.bodies[0].position)
    assert np.allclose(f.bodies[0].position, expected)
    assert np.isclose(np.linalg.norm(f.bodies[0].spin_axis), 1.0)


def test_interpolate_clamps(merged_result):
    tl = CollisionTimeline.build(merged_result)
    assert tl.interpolate(-10.0).time == tl.frames[0].time
    last = tl.interpolate(tl.total_duration + 1e3)
    assert last.num_black_holes == 1
    assert last.time == tl.frames[-1].time


def test_empty_timeline():
    tl = CollisionTimeline.build(SimulationResult(binary=BinaryParams()))
    assert tl.frames == [] and tl.merger_frame_index == -1
    with pytest.raises(ValueError):
        tl.interpolate(0.0)
