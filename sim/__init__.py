# ================================
# file: sim/__init__.py
# ================================
"""Simulation: machine kinematics, scripted trajectory, target model and the
tick-driven scan session.
"""
from .kinematics import ForwardKinematicsSolver
from .look_at import InverseOrientationSolver
from .trajectory import TrajectoryGenerator, TrajectoryParams
from .target_model import Primitive, LION_PARTS, SurfacePointSampler
from .machine_sim import MachineSim, TickResult


__all__ = [
    "ForwardKinematicsSolver", "InverseOrientationSolver",
    "TrajectoryGenerator", "TrajectoryParams",
    "Primitive", "LION_PARTS", "SurfacePointSampler",
    "MachineSim", "TickResult",
]
