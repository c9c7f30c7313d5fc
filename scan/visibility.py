# ================================
# file: scan/visibility.py
# ================================
from __future__ import annotations
from typing import Optional
import math
import numpy as np

from core.types import PointCloud, SensorPose
from core.config import SENSOR_FOV_DEG, SENSOR_MAX_RANGE, SENSOR_MIN_RANGE, SENSOR_STRIDE
from scan.scan_state import ScanState


class VisibilityEngine:
    """Per-tick acquisition test of the point cloud against the sensing cone.

    A point is acquired when all hold:
      1. MIN_RANGE < |p - s| < MAX_RANGE
      2. angle(p - s, dir) <= FOV / 2          (inside the cone)
      3. dot(normalize(s - p), n) > 0          (surface faces the sensor)
    Points already in the ScanState are never re-evaluated.

    With stride s > 1, tick k only evaluates indices i with i % s == k % s, so
    full coverage takes more ticks but every index is eventually visited.
    Thread-safety: assume single-threaded calls from main loop.
    """

    def __init__(self, fov_deg: float = SENSOR_FOV_DEG, max_range: float = SENSOR_MAX_RANGE,
                 min_range: float = SENSOR_MIN_RANGE, stride: int = SENSOR_STRIDE):
        if not (0.0 < fov_deg < 360.0):
            raise ValueError(f"fov must be in (0, 360) degrees, got {fov_deg}")
        if not (0.0 <= min_range < max_range):
            raise ValueError(f"range guard must satisfy 0 <= min < max, got ({min_range}, {max_range})")
        if int(stride) < 1:
            raise ValueError(f"stride must be >= 1, got {stride}")
        self.fov_deg = float(fov_deg)
        self.max_range = float(max_range)
        self.min_range = float(min_range)
        self.stride = int(stride)
        self._half_fov = math.radians(self.fov_deg) / 2.0
        self._phase = 0
        self.tick_count = 0
        self.last_added = 0

    def reset(self) -> None:
        self._phase = 0
        self.tick_count = 0
        self.last_added = 0

    def visible(self, pose: SensorPose, positions: np.ndarray, normals: np.ndarray) -> np.ndarray:
        """Boolean mask of which of the given points pass all three tests."""
        positions = np.asarray(positions, dtype=float).reshape(-1, 3)
        normals = np.asarray(normals, dtype=float).reshape(-1, 3)
        if positions.shape[0] == 0:
            return np.zeros(0, dtype=bool)

        to_point = positions - pose.position
        dist = np.linalg.norm(to_point, axis=1)
        ok = (dist < self.max_range) & (dist > self.min_range)

        safe = np.where(ok, dist, 1.0)
        cos_angle = np.clip((to_point @ pose.direction) / safe, -1.0, 1.0)
        ok &= np.arccos(cos_angle) <= self._half_fov

        # view = (s - p) / |s - p|; sign of dot only depends on -(to_point . n)
        facing = -np.einsum("ij,ij->i", to_point, normals) / safe
        ok &= facing > 0.0
        return ok

    def evaluate(self, pose: SensorPose, cloud: PointCloud,
                 candidates: Optional[np.ndarray] = None) -> np.ndarray:
        """Visibility of cloud points (all, or the given index array); no mutation."""
        if candidates is None:
            return self.visible(pose, cloud.positions, cloud.normals)
        candidates = np.asarray(candidates, dtype=np.int64)
        return self.visible(pose, cloud.positions[candidates], cloud.normals[candidates])

    def _candidates(self, n: int) -> np.ndarray:
        if self.stride == 1:
            return np.arange(n, dtype=np.int64)
        cand = np.arange(self._phase, n, self.stride, dtype=np.int64)
        self._phase = (self._phase + 1) % self.stride
        return cand

    def tick(self, pose: SensorPose, cloud: PointCloud, scan_state: ScanState) -> bool:
        """Acquire newly visible points; return True if any were inserted."""
        self.tick_count += 1
        n = len(cloud)
        if n == 0:
            self.last_added = 0
            return False

        cand = self._candidates(n)
        pending = cand[~scan_state.mask(n)[cand]]
        if pending.size == 0:
            self.last_added = 0
            return False

        hits = pending[self.evaluate(pose, cloud, pending)]
        self.last_added = scan_state.add_many(hits.tolist()) if hits.size else 0
        return self.last_added > 0
