# ================================
# file: gui/scan_visualizer.py
# ================================
"""
Scan visualizer: 3D view of the target cloud, acquired points and sensor pose.
Renderer only; it reads values handed to it each frame and keeps no reference
into the simulation.
"""

from __future__ import annotations
from typing import Optional, Sequence
import numpy as np

try:
    import matplotlib.pyplot as plt
except ImportError:
    plt = None

from core.types import PointCloud, SensorPose, Axes
from core.config import GUI_TARGET_POINTS, GUI_VIEW_LIMITS, SENSOR_MAX_RANGE, SENSOR_FOV_DEG, SENSOR_LOCAL_DIR


def _to_plot(xyz: np.ndarray) -> np.ndarray:
    """World (x, y-up, z-depth) -> matplotlib (x, depth, up)."""
    xyz = np.asarray(xyz, dtype=float).reshape(-1, 3)
    return xyz[:, [0, 2, 1]]


def cone_edges(pose: SensorPose, fov_deg: float = SENSOR_FOV_DEG,
               length: float = SENSOR_MAX_RANGE) -> np.ndarray:
    """World end points of four rays on the sensing cone boundary, (4, 3).
    Uses pose.matrix when present, else a frame built around pose.direction.
    """
    h = np.radians(fov_deg) / 2.0
    s, c = float(np.sin(h)), float(np.cos(h))
    if pose.matrix is not None:
        R = np.asarray(pose.matrix, dtype=float)[:3, :3]
        fwd = R @ np.asarray(SENSOR_LOCAL_DIR, dtype=float)
        u, v = R[:, 0], R[:, 2]
    else:
        fwd = pose.direction
        helper = np.array([1.0, 0.0, 0.0]) if abs(fwd[0]) < 0.9 else np.array([0.0, 0.0, 1.0])
        u = np.cross(fwd, helper)
        u = u / np.linalg.norm(u)
        v = np.cross(fwd, u)
    dirs = [c * fwd + s * u, c * fwd - s * u, c * fwd + s * v, c * fwd - s * v]
    return np.array([pose.position + length * d for d in dirs])


class ScanVisualizer:
    """Minimal matplotlib 3D renderer for the scan session."""

    def __init__(self, cloud: PointCloud, max_target_points: int = GUI_TARGET_POINTS,
                 ray_length: float = SENSOR_MAX_RANGE, fov_deg: float = SENSOR_FOV_DEG, seed: int = 0):
        if plt is None:
            raise RuntimeError("matplotlib not available")

        self.ray_length = float(ray_length)
        self.fov_deg = float(fov_deg)
        self.fig = plt.figure(figsize=(8, 7))
        self.ax = self.fig.add_subplot(111, projection='3d')

        # Subsampled target outline
        n = len(cloud)
        if n > max_target_points:
            idx = np.random.default_rng(seed).choice(n, size=max_target_points, replace=False)
        else:
            idx = np.arange(n)
        tgt = _to_plot(cloud.positions[idx])
        self.ax.scatter(tgt[:, 0], tgt[:, 1], tgt[:, 2], s=1, c='#777777', alpha=0.25)

        self._scanned_sc = self.ax.scatter([], [], [], s=2, c='#FFD700', alpha=0.8)
        self._sensor_pt, = self.ax.plot([], [], [], 'r^', markersize=8)
        self._ray_ln, = self.ax.plot([], [], [], '-', color='cyan', lw=1.5)
        self._cone_ln, = self.ax.plot([], [], [], '-', color='cyan', lw=0.8, alpha=0.5)
        self._chain_ln, = self.ax.plot([], [], [], 'o-', color='#718096', lw=2, markersize=3)
        self._status_txt = self.ax.text2D(0.02, 0.97, "", transform=self.ax.transAxes, fontsize=9,
                                          verticalalignment='top')

        (x0, x1), (d0, d1), (h0, h1) = GUI_VIEW_LIMITS
        self.ax.set_xlim(x0, x1)
        self.ax.set_ylim(d0, d1)
        self.ax.set_zlim(h0, h1)
        self.ax.set_xlabel("X")
        self.ax.set_ylabel("Depth")
        self.ax.set_zlabel("Height")
        self.ax.set_title("5-Axis Scan Simulation")
        self.fig.tight_layout()
        plt.ion()
        plt.show(block=False)

    def update(self, pose: SensorPose, scanned_positions: np.ndarray, axes: Optional[Axes] = None,
               chain_points: Optional[Sequence[np.ndarray]] = None, status: str = ""):
        """Redraw sensor, ray, sensing cone and acquired points."""
        try:
            p = _to_plot(pose.position)[0]
            tip = _to_plot(pose.position + pose.direction * self.ray_length)[0]
            self._sensor_pt.set_data_3d([p[0]], [p[1]], [p[2]])
            self._ray_ln.set_data_3d([p[0], tip[0]], [p[1], tip[1]], [p[2], tip[2]])

            # Spokes and rim of the sensing cone
            e = cone_edges(pose, self.fov_deg, self.ray_length)
            cone = _to_plot(np.array([pose.position, e[0], e[2], e[1], e[3], e[0],
                                      pose.position, e[2], pose.position, e[1], pose.position, e[3]]))
            self._cone_ln.set_data_3d(cone[:, 0], cone[:, 1], cone[:, 2])

            if chain_points is not None and len(chain_points) > 0:
                c = _to_plot(np.asarray(chain_points))
                self._chain_ln.set_data_3d(c[:, 0], c[:, 1], c[:, 2])

            pts = _to_plot(scanned_positions)
            self._scanned_sc._offsets3d = (pts[:, 0], pts[:, 1], pts[:, 2])

            text = status
            if axes is not None:
                text = f"{axes}\n{status}" if status else repr(axes)
            self._status_txt.set_text(text)

            self.fig.canvas.draw_idle()
            self.fig.canvas.flush_events()

        except Exception as e:
            print(f"[GUI_ERROR] GUI update failed: {e}")

    def close(self):
        """Close the visualizer"""
        try:
            if self.fig:
                plt.close(self.fig)
        except Exception:
            pass
