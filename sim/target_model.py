# ================================
# file: sim/target_model.py
# ================================
"""Target object model: a composite of boxes and cylinders, sampled once into
a point cloud with outward normals.
NOTE: index order is insertion order across primitives and never changes
after generation; ScanState refers to points by index.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import math
import numpy as np

from core.types import PointCloud
from core.transforms import euler_xyz
from core.config import TARGET_SCALE, TABLE_HEIGHT, POINTS_PER_AREA

PRIMITIVE_KINDS = ("box", "cylinder")


@dataclass(frozen=True)
class Primitive:
    """One geometric part of the target.

    box:      size = (width, height, depth)
    cylinder: size = (radius, radius, height), axis along local Y
    rotation is Euler XYZ in radians, position in world units.
    """
    kind: str
    size: Tuple[float, float, float]
    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    name: str = ""

    def __post_init__(self) -> None:
        if self.kind not in PRIMITIVE_KINDS:
            raise ValueError(f"unsupported primitive kind: {self.kind}")
        if any(s <= 0 for s in self.size):
            raise ValueError(f"primitive '{self.name}' has non-positive size {self.size}")

    @property
    def rotation_matrix(self) -> np.ndarray:
        return euler_xyz(*self.rotation)

    def surface_area(self) -> float:
        if self.kind == "box":
            w, h, d = self.size
            return 2.0 * (w * h + w * d + h * d)
        r, _, h = self.size
        return 2.0 * math.pi * r * h

    def half_extents(self) -> np.ndarray:
        """Local-frame half extents (bounding box of the primitive)."""
        if self.kind == "box":
            return 0.5 * np.asarray(self.size, dtype=float)
        r, _, h = self.size
        return np.array([r, 0.5 * h, r], dtype=float)


def lion_parts(sc: float = TARGET_SCALE, base_y: float = TABLE_HEIGHT) -> List[Primitive]:
    """Geometric lion on the inspection table."""
    def P(kind, size, pos, rot=(0.0, 0.0, 0.0), name=""):
        return Primitive(kind,
                         tuple(float(s) * sc for s in size),
                         (pos[0] * sc, pos[1] * sc + base_y, pos[2] * sc),
                         tuple(float(r) for r in rot), name)
    return [
        P("box", (0.8, 0.9, 1.6), (0.0, 0.8, 0.0), name="body"),
        P("box", (0.9, 0.9, 1.0), (0.0, 1.4, 1.1), name="head"),
        P("box", (0.5, 0.4, 0.4), (0.0, 1.3, 1.7), name="snout"),
        P("box", (1.1, 1.1, 0.6), (0.0, 1.4, 0.8), (0.1, 0.0, 0.0), name="mane"),
        P("box", (0.25, 1.2, 0.3), (-0.3, 0.6, 1.1), name="front_leg_l"),
        P("box", (0.25, 1.2, 0.3), (0.3, 0.6, 1.1), name="front_leg_r"),
        P("box", (0.3, 1.0, 0.4), (-0.35, 0.5, -0.6), (-0.2, 0.0, 0.0), name="back_leg_l"),
        P("box", (0.3, 1.0, 0.4), (0.35, 0.5, -0.6), (-0.2, 0.0, 0.0), name="back_leg_r"),
        P("cylinder", (0.05, 0.05, 1.0), (0.0, 0.8, -1.0), (math.pi / 3, 0.0, 0.0), name="tail"),
    ]


LION_PARTS: List[Primitive] = lion_parts()

# Box faces: (fixed axis, sign); the other two axes are sampled uniformly.
_BOX_FACES = ((0, 1.0), (0, -1.0), (1, 1.0), (1, -1.0), (2, 1.0), (2, -1.0))


class SurfacePointSampler:
    """Area-proportional random surface sampling of a primitive list."""

    def __init__(self, primitives: Optional[Sequence[Primitive]] = None,
                 density: float = POINTS_PER_AREA, logger_func=None, log_file=None):
        if density <= 0:
            raise ValueError("sampling density must be positive")
        self.primitives = list(LION_PARTS if primitives is None else primitives)
        self.density = float(density)
        self.logger_func = logger_func
        self.log_file = log_file

    def _log(self, message: str, module: str = "SAMPLER") -> None:
        if self.logger_func and self.log_file:
            self.logger_func(self.log_file, message, module)
        else:
            print(f"[{module}] {message}")

    def count_for(self, prim: Primitive) -> int:
        return int(math.ceil(prim.surface_area() * self.density))

    @staticmethod
    def sample_box(size: Sequence[float], n: int, rng: np.random.Generator) -> Tuple[np.ndarray, np.ndarray]:
        """Uniform face choice, then a uniform point on that face."""
        half = 0.5 * np.asarray(size, dtype=float)
        faces = rng.integers(0, 6, size=n)
        uv = rng.random((n, 3)) - 0.5
        pts = uv * (2.0 * half)
        nrm = np.zeros((n, 3), dtype=float)
        for f, (axis, sign) in enumerate(_BOX_FACES):
            m = faces == f
            pts[m, axis] = sign * half[axis]
            nrm[m, axis] = sign
        return pts, nrm

    @staticmethod
    def sample_cylinder(size: Sequence[float], n: int, rng: np.random.Generator) -> Tuple[np.ndarray, np.ndarray]:
        """Uniform angle and height on the lateral surface, radial normals."""
        r, _, h = size
        theta = rng.random(n) * 2.0 * math.pi
        y = (rng.random(n) - 0.5) * h
        c, s = np.cos(theta), np.sin(theta)
        pts = np.stack([c * r, y, s * r], axis=-1)
        nrm = np.stack([c, np.zeros(n), s], axis=-1)
        return pts, nrm

    def sample_primitive(self, prim: Primitive, rng: np.random.Generator) -> Tuple[np.ndarray, np.ndarray]:
        n = self.count_for(prim)
        if prim.kind == "box":
            pts, nrm = self.sample_box(prim.size, n, rng)
        else:
            pts, nrm = self.sample_cylinder(prim.size, n, rng)
        R = prim.rotation_matrix
        # Normals rotate only; points rotate then translate.
        pts = pts @ R.T + np.asarray(prim.position, dtype=float)
        nrm = nrm @ R.T
        return pts, nrm

    def generate(self, seed: Optional[int] = None) -> PointCloud:
        rng = np.random.default_rng(seed)
        all_pts, all_nrm, slices = [], [], []
        start = 0
        for prim in self.primitives:
            pts, nrm = self.sample_primitive(prim, rng)
            all_pts.append(pts)
            all_nrm.append(nrm)
            slices.append((start, start + len(pts)))
            start += len(pts)
            if prim.name:
                self._log(f"{prim.name}: {len(pts)} points", "SAMPLER")

        if not all_pts:
            return PointCloud(np.zeros((0, 3)), np.zeros((0, 3)), [])
        cloud = PointCloud(np.concatenate(all_pts), np.concatenate(all_nrm), slices)
        self._log(f"point cloud ready: {len(cloud)} points from {len(self.primitives)} primitives"
                  f"{'' if seed is None else f' (seed={seed})'}")
        return cloud
