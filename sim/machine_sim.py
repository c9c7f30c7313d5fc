# ================================
# file: sim/machine_sim.py
# ================================
from __future__ import annotations
from typing import Dict, Optional
import time

from core.types import Axes, AxisLimits, PointCloud, SensorPose, TrajectoryPhase, DEFAULT_LIMITS
from core.config import Z_COLLISION_WARN, LOG_EVERY_N_TICKS
from scan.scan_state import ScanState
from scan.visibility import VisibilityEngine
from .kinematics import ForwardKinematicsSolver
from .trajectory import TrajectoryGenerator


class TickResult:
    """What one simulation tick exposes to the renderer."""
    __slots__ = ("axes", "pose", "phase", "changed", "scanned", "done")

    def __init__(self, axes: Axes, pose: SensorPose, phase: TrajectoryPhase,
                 changed: bool, scanned: int, done: bool = False) -> None:
        self.axes = axes
        self.pose = pose
        self.phase = phase
        self.changed = changed
        self.scanned = scanned
        self.done = done


class MachineSim:
    """5-axis scan head session: axes, trajectory, visibility, scan state.

    Per tick: trajectory (if active) -> axes -> forward kinematics -> sensor pose
    -> visibility (if scanning) -> scan state. The renderer only reads the
    returned TickResult and ScanState.positions(cloud).
    Thread-safety: assume single-threaded calls from main loop.
    """

    def __init__(self, cloud: PointCloud,
                 fk: Optional[ForwardKinematicsSolver] = None,
                 trajectory: Optional[TrajectoryGenerator] = None,
                 visibility: Optional[VisibilityEngine] = None,
                 limits: AxisLimits = DEFAULT_LIMITS,
                 logger_func=None, log_file=None) -> None:
        self.cloud = cloud
        self.limits = limits
        self.fk = fk or ForwardKinematicsSolver(limits=limits)
        self.trajectory = trajectory or TrajectoryGenerator(limits=limits)
        self.visibility = visibility or VisibilityEngine()
        self.scan_state = ScanState()
        self.logger_func = logger_func
        self.log_file = log_file

        self.axes = Axes.home()
        self.phase = TrajectoryPhase.IDLE
        self.is_scanning = False
        self._traj_t0: Optional[float] = None
        self._tick_count = 0

    def _log(self, message: str, module: str = "SIM") -> None:
        if self.logger_func and self.log_file:
            self.logger_func(self.log_file, message, module)
        else:
            print(f"[{module}] {message}")

    # ---- operator input -------------------------------------------------

    @property
    def trajectory_active(self) -> bool:
        return self._traj_t0 is not None

    def set_axes(self, **values: float) -> Axes:
        """Manual axis override, clamped into range. Ignored while auto-scanning."""
        if self.trajectory_active:
            self._log("manual input ignored while trajectory is running", "MANUAL")
            return self.axes.copy()
        requested = self.axes.with_values(**values)
        accepted = requested.clamped(self.limits)
        if accepted != requested:
            self._log(f"clamped {requested} -> {accepted}", "MANUAL")
        self.axes = accepted
        return self.axes.copy()

    def start_scanning(self) -> None:
        self.is_scanning = True

    def stop_scanning(self) -> None:
        self.is_scanning = False

    # ---- trajectory control ---------------------------------------------

    def start_trajectory(self, now: Optional[float] = None) -> None:
        """Start the scripted run; a fresh elapsed-time origin every call."""
        self._traj_t0 = time.time() if now is None else float(now)
        self.trajectory.solver.reset()
        self.is_scanning = True
        self._log(f"trajectory started ({self.trajectory.duration:.1f}s)", "TRAJ")

    def abort_trajectory(self) -> None:
        """Operator abort: axes stay where they are, scan state untouched."""
        if self._traj_t0 is None:
            return
        self._traj_t0 = None
        self.phase = TrajectoryPhase.IDLE
        self.is_scanning = False
        self._log(f"trajectory aborted at {self.axes}", "TRAJ")

    def reset(self) -> None:
        """Clear scan state and return to home in one step (full restart)."""
        self._traj_t0 = None
        self.phase = TrajectoryPhase.IDLE
        self.is_scanning = False
        self.axes = Axes.home()
        self.scan_state.reset()
        self.visibility.reset()
        self.trajectory.solver.reset()
        self._tick_count = 0
        self._log("scan reset, axes at home", "SIM")

    # ---- main loop ------------------------------------------------------

    def pose(self) -> SensorPose:
        return self.fk.solve(self.axes)

    def tick(self, now: Optional[float] = None) -> TickResult:
        """Advance one frame. `now` is wall-clock seconds (time.time() if None)."""
        self._tick_count += 1
        done = False

        if self._traj_t0 is not None:
            t = time.time() if now is None else float(now)
            step = self.trajectory.step(t - self._traj_t0)
            self.axes = step.axes
            self.phase = step.phase
            if step.done:
                done = True
                self._traj_t0 = None
                self.is_scanning = False
                self._log(f"trajectory complete, scanned {len(self.scan_state)} points "
                          f"({100.0 * self.scan_state.coverage(len(self.cloud)):.1f}%)", "TRAJ")

        pose = self.fk.solve(self.axes)
        changed = False
        if self.is_scanning:
            changed = self.visibility.tick(pose, self.cloud, self.scan_state)

        if self._tick_count % LOG_EVERY_N_TICKS == 1 and self.is_scanning:
            self._log(f"tick {self._tick_count} phase={self.phase.name} {self.axes} "
                      f"scanned={len(self.scan_state)}", "SCAN")

        return TickResult(self.axes.copy(), pose, self.phase, changed, len(self.scan_state), done)

    def status(self) -> Dict:
        n = len(self.cloud)
        return {
            'mode': "AUTO-SCAN" if self.trajectory_active else ("SCANNING" if self.is_scanning else "MANUAL"),
            'phase': self.phase.name,
            'axes': self.axes.as_tuple(),
            'z_head': "COLLISION RISK" if self.axes.z > Z_COLLISION_WARN else "SAFE",
            'scanned': len(self.scan_state),
            'total': n,
            'coverage': self.scan_state.coverage(n),
        }
