# ================================
# file: core/__init__.py
# ================================
"""
Core Package

Exports fundamental types, configurations, and transform utilities.
"""
from core.types import (
    AXIS_NAMES, AxisLimits, Axes, SensorPose, PointCloud,
    TrajectoryPhase, TrajectoryStep,
)
from core.transforms import machine_frame, MachineFrame
from core.config import (
    # Axis configuration
    AXIS_LIMITS, HOME_X, HOME_Y, HOME_Z,

    # Machine geometry
    SPAN_X, SPAN_Y, SPAN_Z,

    # Trajectory configuration
    TRAJ_DURATION_S, TRAJ_APPROACH_END_S, TRAJ_ORBIT_END_S, SCAN_Z, SAFE_Z,
    LOOK_AT_TARGET,

    # Sensor configuration
    SENSOR_FOV_DEG, SENSOR_MAX_RANGE, SENSOR_MIN_RANGE,

    # Loop configuration
    TICK_HZ,
)

__all__ = [
    # Types
    'AXIS_NAMES', 'AxisLimits', 'Axes', 'SensorPose', 'PointCloud',
    'TrajectoryPhase', 'TrajectoryStep',

    # Transforms
    'machine_frame', 'MachineFrame',

    # Configuration
    'AXIS_LIMITS', 'HOME_X', 'HOME_Y', 'HOME_Z',
    'SPAN_X', 'SPAN_Y', 'SPAN_Z',
    'TRAJ_DURATION_S', 'TRAJ_APPROACH_END_S', 'TRAJ_ORBIT_END_S', 'SCAN_Z', 'SAFE_Z',
    'LOOK_AT_TARGET',
    'SENSOR_FOV_DEG', 'SENSOR_MAX_RANGE', 'SENSOR_MIN_RANGE',
    'TICK_HZ',
]
