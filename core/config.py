# ================================
# file: core/config.py
# ================================
"""
Global configuration for the 5-axis scan head simulator.
Linear axes are machine-normalized (0..100), rotary axes in degrees,
world coordinates in scene units (Y up), time in seconds.

Organization:
1. Axis Ranges & Home Pose
2. Machine Geometry (kinematic chain)
3. Scan Trajectory
4. Sensor Configuration
5. Target Model & Sampling
6. Tick, GUI & Logging
"""
from __future__ import annotations
import math

# ================================
# 1. AXIS RANGES & HOME POSE
# ================================
AXIS_LIMITS: dict = {
    'x': (0.0, 100.0),      # Carriage travel (normalized)
    'y': (0.0, 100.0),      # Bridge travel (normalized)
    'z': (0.0, 100.0),      # Ram extension: 0 = retracted (high), 100 = extended (low)
    'a': (-90.0, 90.0),     # Tilt (deg)
    'b': (-180.0, 180.0),   # Rotation (deg)
}

HOME_X: float = 50.0
HOME_Y: float = 50.0
HOME_Z: float = 10.0
HOME_A: float = 0.0
HOME_B: float = 0.0

# Z-head status flag (operator display only, no collision model)
Z_COLLISION_WARN: float = 70.0

# ================================
# 2. MACHINE GEOMETRY
# ================================
# Normalized axis -> world translation spans
SPAN_X: float = 6.0             # Lateral span of carriage travel
SPAN_Y: float = 6.0             # Depth span of bridge travel
SPAN_Z: float = 2.5             # Ram stroke
AXIS_CENTER: float = 50.0       # Normalized value mapping to world 0

# Chain offsets (parent frame, world units)
WRIST_OFFSET: tuple = (0.0, 7.5, 1.3)     # Ram -> wrist origin (B pivot)
FORK_OFFSET: tuple = (0.0, -0.6, 0.0)     # B module -> A hinge
SENSOR_OFFSET: tuple = (0.4, -1.25, 0.0)  # A hinge -> camera origin (head + bracket + lens)
SENSOR_LOCAL_DIR: tuple = (0.0, -1.0, 0.0)  # Sensing direction in the A frame ("down")

# ================================
# 3. SCAN TRAJECTORY
# ================================
TRAJ_DURATION_S: float = 25.0       # Total scripted run
TRAJ_APPROACH_END_S: float = 2.0    # t1: approach -> orbit
TRAJ_ORBIT_END_S: float = 22.0      # t2: orbit -> return

ORBIT_CENTER_X: float = 50.0
ORBIT_CENTER_Y: float = 50.0
ORBIT_RADIUS_X: float = 60.0        # ~45 deg view tilt at scan height
ORBIT_RADIUS_Y: float = 75.0        # Elongated to reach the tail end
ORBIT_THETA_START: float = math.pi  # Sweep pi -> 3pi (full turn)
SCAN_Z: float = 50.0                # Ram extension held during the orbit
SAFE_Z: float = 20.0                # Raised ram after completion

# Look-at geometry
TOOL_HEIGHT_BASE: float = 5.8       # Approx. tool height at z = 0
LOOK_AT_TARGET: tuple = (0.0, 1.3, 0.0)  # Object centroid (world)
LOOK_AT_EPS: float = 1e-9           # Degenerate look vector threshold

# ================================
# 4. SENSOR CONFIGURATION
# ================================
SENSOR_FOV_DEG: float = 75.0        # Full cone angle
SENSOR_MAX_RANGE: float = 2.3       # Max acquisition distance (matches drawn frustum)
SENSOR_MIN_RANGE: float = 0.1       # Near-field guard
SENSOR_STRIDE: int = 1              # Visibility subsampling (1 = every point every tick)

# ================================
# 5. TARGET MODEL & SAMPLING
# ================================
TARGET_SCALE: float = 1.3           # Lion model scale factor
TABLE_HEIGHT: float = 1.3           # Model base lifted onto the table
POINTS_PER_AREA: float = 20000.0    # Samples per unit surface area

# ================================
# 6. TICK, GUI & LOGGING
# ================================
TICK_HZ: float = 30.0               # Simulation loop frequency (Hz)
GUI_UPDATE_RATE_HZ: float = 10.0    # GUI redraw frequency (Hz)
GUI_TARGET_POINTS: int = 4000       # Subsampled target outline drawn by the GUI
GUI_VIEW_LIMITS: tuple = ((-4.0, 4.0), (-4.0, 4.0), (0.0, 8.0))  # (x, depth, height)

LOG_EVERY_N_TICKS: int = 30         # Progress line throttle

# ================================
# ADVISORY SERVICE
# ================================
ADVISOR_MODEL: str = "gemini-2.5-flash"
ADVISOR_ENDPOINT: str = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
ADVISOR_API_KEY_ENV: tuple = ("GEMINI_API_KEY", "API_KEY")
ADVISOR_TIMEOUT_S: float = 30.0
ADVISOR_THINKING_BUDGET: int = 1024
