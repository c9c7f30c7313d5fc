import math

import numpy as np
import pytest

pytest.importorskip("matplotlib")

from core.types import Axes, SensorPose
from gui.scan_visualizer import cone_edges
from sim.kinematics import ForwardKinematicsSolver


def _half_angles(pose, edges):
    rays = edges - pose.position
    cos = rays @ pose.direction / np.linalg.norm(rays, axis=1)
    return np.degrees(np.arccos(np.clip(cos, -1.0, 1.0)))


@pytest.mark.parametrize("axes", [Axes.home(), Axes(20.0, 70.0, 40.0, 35.0, -60.0)])
def test_cone_from_pose_matrix(axes):
    pose = ForwardKinematicsSolver().solve(axes)
    assert pose.matrix is not None
    edges = cone_edges(pose, fov_deg=75.0, length=2.0)
    assert edges.shape == (4, 3)
    np.testing.assert_allclose(np.linalg.norm(edges - pose.position, axis=1), 2.0)
    np.testing.assert_allclose(_half_angles(pose, edges), 37.5, atol=1e-9)


def test_cone_without_matrix_uses_direction():
    pose = SensorPose([0.0, 3.0, 0.0], [1.0, -1.0, 0.0])
    edges = cone_edges(pose, fov_deg=60.0, length=1.0)
    np.testing.assert_allclose(_half_angles(pose, edges), 30.0, atol=1e-9)
    # Opposite spokes are symmetric about the axis
    mid = (edges[0] + edges[1]) / 2.0 - pose.position
    np.testing.assert_allclose(mid / np.linalg.norm(mid), pose.direction, atol=1e-12)
    assert math.isclose(float(np.linalg.norm(edges[2] - edges[3])), 2.0 * math.sin(math.radians(30.0)))
