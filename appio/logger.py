# ================================
# file: appio/logger.py
# ================================
from __future__ import annotations
from datetime import datetime
import time
import numpy as np
from core import Axes, SensorPose


def log_to_file(log_file, message, module="MAIN"):
    """Write message to log file with timestamp and module"""
    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    log_entry = f"[{timestamp}] [{module}] {message}\n"
    log_file.write(log_entry)
    log_file.flush()
    print(log_entry.strip())


class DataLogger:
    """Simple NPZ recorder for axes, sensor poses and scan progress per tick."""
    def __init__(self) -> None:
        self.t0 = time.time()
        self.axes = []
        self.poses = []
        self.scanned = []
        self.phases = []

    def log_axes(self, axes: Axes, t: float = None) -> None:
        self.axes.append((self._t(t),) + axes.as_tuple())

    def log_pose(self, pose: SensorPose, t: float = None) -> None:
        self.poses.append((self._t(t),) + tuple(pose.position.tolist()) + tuple(pose.direction.tolist()))

    def log_scan(self, scanned: int, t: float = None) -> None:
        self.scanned.append((self._t(t), int(scanned)))

    def log_phase(self, phase_name: str, t: float = None) -> None:
        self.phases.append((self._t(t), phase_name))

    def _t(self, t) -> float:
        return float(t) if t is not None else time.time() - self.t0

    def save(self, path: str, scanned_indices=None) -> None:
        np.savez_compressed(path,
                            axes=np.asarray(self.axes, dtype=float).reshape(-1, 6),
                            poses=np.asarray(self.poses, dtype=float).reshape(-1, 7),
                            scanned=np.asarray(self.scanned, dtype=float).reshape(-1, 2),
                            phases=np.array(self.phases, dtype=object),
                            scanned_indices=np.asarray([] if scanned_indices is None else scanned_indices,
                                                       dtype=np.int64))
