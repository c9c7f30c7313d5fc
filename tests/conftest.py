import pytest

from core.types import SensorPose
from sim.target_model import SurfacePointSampler


@pytest.fixture
def silent_log():
    """logger_func/log_file pair collecting messages instead of printing."""
    lines = []

    class _Sink:
        def write(self, s):
            lines.append(s)

        def flush(self):
            pass

    def logger_func(log_file, message, module="TEST"):
        log_file.write(f"[{module}] {message}\n")

    return logger_func, _Sink(), lines


@pytest.fixture
def small_cloud(silent_log):
    logger_func, sink, _ = silent_log
    sampler = SurfacePointSampler(density=300.0, logger_func=logger_func, log_file=sink)
    return sampler.generate(seed=7)


@pytest.fixture
def down_pose():
    return SensorPose([0.0, 2.0, 0.0], [0.0, -1.0, 0.0])
