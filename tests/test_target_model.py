import math

import numpy as np
import pytest

from sim.target_model import LION_PARTS, Primitive, SurfacePointSampler


@pytest.fixture
def sampler(silent_log):
    logger_func, sink, _ = silent_log
    return SurfacePointSampler(density=300.0, logger_func=logger_func, log_file=sink)


def _local(cloud, prim, sl):
    start, end = sl
    R = prim.rotation_matrix
    # p = R @ l + t  ->  l = R.T @ (p - t); row-vector form (p - t) @ R
    pts = (cloud.positions[start:end] - np.asarray(prim.position)) @ R
    nrm = cloud.normals[start:end] @ R
    return pts, nrm


def test_lion_model_layout():
    assert len(LION_PARTS) == 9
    assert [p.kind for p in LION_PARTS].count("box") == 8
    tail = LION_PARTS[-1]
    assert tail.kind == "cylinder"
    assert tail.rotation[0] == pytest.approx(math.pi / 3)
    # Body sits on the 1.3 table, scaled by 1.3
    assert LION_PARTS[0].position[1] == pytest.approx(0.8 * 1.3 + 1.3)


def test_counts_are_area_proportional_and_indexing_is_stable(sampler):
    cloud = sampler.generate(seed=1)
    expected = [sampler.count_for(p) for p in sampler.primitives]
    assert len(cloud) == sum(expected)
    start = 0
    for (s, e), n in zip(cloud.primitive_slices, expected):
        assert s == start and e - s == n
        start = e
    body, snout = sampler.primitives[0], sampler.primitives[2]
    assert sampler.count_for(body) > sampler.count_for(snout)


def test_points_inside_each_primitive_extent(sampler):
    cloud = sampler.generate(seed=2)
    for prim, sl in zip(sampler.primitives, cloud.primitive_slices):
        pts, _ = _local(cloud, prim, sl)
        assert np.all(np.abs(pts) <= prim.half_extents() + 1e-9)


def test_points_on_surface_with_outward_normals(sampler):
    cloud = sampler.generate(seed=3)
    np.testing.assert_allclose(np.linalg.norm(cloud.normals, axis=1), 1.0, atol=1e-12)
    for prim, sl in zip(sampler.primitives, cloud.primitive_slices):
        pts, nrm = _local(cloud, prim, sl)
        assert np.all(np.einsum("ij,ij->i", pts, nrm) > 0.0)
        if prim.kind == "box":
            half = prim.half_extents()
            on_face = np.isclose(np.abs(pts), half, atol=1e-9).any(axis=1)
            assert on_face.all()
        else:
            r = prim.size[0]
            np.testing.assert_allclose(np.hypot(pts[:, 0], pts[:, 2]), r, atol=1e-9)


def test_seeded_generation_is_reproducible(sampler):
    a = sampler.generate(seed=11)
    b = sampler.generate(seed=11)
    c = sampler.generate(seed=12)
    np.testing.assert_array_equal(a.positions, b.positions)
    np.testing.assert_array_equal(a.normals, b.normals)
    assert not np.array_equal(a.positions, c.positions)


def test_cloud_is_read_only(sampler):
    cloud = sampler.generate(seed=4)
    with pytest.raises(ValueError):
        cloud.positions[0, 0] = 99.0


def test_custom_primitive_translation_and_rotation(silent_log):
    logger_func, sink, _ = silent_log
    box = Primitive("box", (2.0, 2.0, 2.0), (5.0, 0.0, 0.0), (0.0, 0.0, math.pi / 2))
    cloud = SurfacePointSampler([box], density=50.0,
                                logger_func=logger_func, log_file=sink).generate(seed=0)
    lo, hi = cloud.bounds()
    np.testing.assert_allclose(lo, [4.0, -1.0, -1.0], atol=1e-9)
    np.testing.assert_allclose(hi, [6.0, 1.0, 1.0], atol=1e-9)


def test_invalid_primitives_rejected():
    with pytest.raises(ValueError):
        Primitive("sphere", (1.0, 1.0, 1.0), (0.0, 0.0, 0.0))
    with pytest.raises(ValueError):
        Primitive("box", (1.0, 0.0, 1.0), (0.0, 0.0, 0.0))
    with pytest.raises(ValueError):
        SurfacePointSampler(density=0.0)
