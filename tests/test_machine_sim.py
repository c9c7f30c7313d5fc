import pytest

from core.config import SAFE_Z, HOME_X, HOME_Y
from core.types import Axes, TrajectoryPhase
from sim.machine_sim import MachineSim


@pytest.fixture
def sim(small_cloud, silent_log):
    logger_func, sink, _ = silent_log
    return MachineSim(small_cloud, logger_func=logger_func, log_file=sink)


def test_starts_idle_at_home(sim):
    assert sim.axes == Axes.home()
    assert sim.phase is TrajectoryPhase.IDLE
    assert not sim.is_scanning
    assert not sim.trajectory_active


def test_no_acquisition_while_not_scanning(sim):
    res = sim.tick(0.0)
    assert res.changed is False
    assert res.scanned == 0
    assert len(sim.scan_state) == 0


def test_manual_scan_from_home_acquires_points(sim):
    sim.start_scanning()
    res = sim.tick(0.0)
    assert res.changed is True
    assert res.scanned == len(sim.scan_state) > 0
    sim.stop_scanning()
    before = sim.scan_state.snapshot()
    sim.set_axes(x=10.0)
    sim.tick(0.1)
    assert sim.scan_state.snapshot() == before


def test_set_axes_clamps_out_of_range(sim, silent_log):
    _, _, lines = silent_log
    ax = sim.set_axes(x=140.0, a=-120.0)
    assert ax.x == 100.0
    assert ax.a == -90.0
    assert sim.axes.x == 100.0
    assert any("[MANUAL]" in ln for ln in lines)


def test_set_axes_rejects_unknown_axis(sim):
    with pytest.raises(ValueError):
        sim.set_axes(w=1.0)


def test_trajectory_first_tick(sim):
    sim.start_trajectory(100.0)
    assert sim.trajectory_active
    assert sim.is_scanning
    res = sim.tick(100.0)
    assert res.phase is TrajectoryPhase.APPROACH
    assert res.changed is True
    assert res.done is False
    assert res.axes.as_tuple() == pytest.approx(Axes.home().as_tuple(), abs=1e-9)


def test_manual_input_ignored_while_trajectory_active(sim, silent_log):
    _, _, lines = silent_log
    sim.start_trajectory(0.0)
    sim.tick(1.0)
    held = sim.axes.copy()
    returned = sim.set_axes(x=0.0, y=0.0)
    assert returned == held
    assert sim.axes == held
    assert any("ignored" in ln for ln in lines)


def test_abort_freezes_axes_and_scan_state(sim):
    sim.start_trajectory(0.0)
    sim.tick(0.0)
    sim.tick(5.0)
    axes = sim.axes.copy()
    scanned = sim.scan_state.snapshot()
    sim.abort_trajectory()
    assert not sim.trajectory_active
    assert not sim.is_scanning
    assert sim.phase is TrajectoryPhase.IDLE
    res = sim.tick(9.0)
    assert res.axes == axes
    assert sim.scan_state.snapshot() == scanned


def test_restart_uses_fresh_time_origin(sim):
    sim.start_trajectory(0.0)
    sim.tick(10.0)
    sim.start_trajectory(50.0)
    res = sim.tick(50.0)
    assert res.phase is TrajectoryPhase.APPROACH
    assert res.axes.as_tuple() == pytest.approx(Axes.home().as_tuple(), abs=1e-9)


def test_completion_parks_and_stops(sim):
    sim.start_trajectory(0.0)
    sim.tick(0.0)
    res = sim.tick(26.0)
    assert res.done is True
    assert res.phase is TrajectoryPhase.IDLE
    assert res.axes.a == 0.0 and res.axes.b == 0.0
    assert res.axes.z == SAFE_Z
    assert (res.axes.x, res.axes.y) == (HOME_X, HOME_Y)
    assert not sim.trajectory_active
    assert not sim.is_scanning
    after = sim.scan_state.snapshot()
    assert sim.tick(27.0).done is False
    assert sim.scan_state.snapshot() == after


def test_scan_state_grows_monotonically_over_run(sim):
    sim.start_trajectory(0.0)
    prev = sim.scan_state.snapshot()
    t = 0.0
    while t <= 26.0:
        res = sim.tick(t)
        cur = sim.scan_state.snapshot()
        assert prev <= cur
        assert res.scanned == len(cur)
        prev = cur
        t += 0.5
    assert not sim.trajectory_active
    assert len(prev) > 0


def test_reset_clears_everything(sim):
    sim.start_trajectory(0.0)
    sim.tick(0.0)
    sim.tick(3.0)
    assert len(sim.scan_state) > 0
    sim.reset()
    assert len(sim.scan_state) == 0
    assert sim.axes == Axes.home()
    assert not sim.trajectory_active
    assert not sim.is_scanning


def test_status_reports_head_risk_and_mode(sim):
    st = sim.status()
    assert st['mode'] == "MANUAL"
    assert st['z_head'] == "SAFE"
    assert st['total'] == len(sim.cloud)
    sim.set_axes(z=80.0)
    assert sim.status()['z_head'] == "COLLISION RISK"
    sim.start_scanning()
    assert sim.status()['mode'] == "SCANNING"
    sim.start_trajectory(0.0)
    assert sim.status()['mode'] == "AUTO-SCAN"


def test_pose_matches_forward_kinematics(sim):
    sim.set_axes(x=30.0, b=45.0)
    pose = sim.pose()
    ref = sim.fk.solve(sim.axes)
    assert pose.position == pytest.approx(ref.position)
    assert pose.direction == pytest.approx(ref.direction)
