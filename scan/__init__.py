# ================================
# file: scan/__init__.py
# ================================
"""
Scan Package

Exports:
- VisibilityEngine: per-tick sensing-cone + backface acquisition test
- ScanState: monotonically growing set of acquired point indices
"""
from scan.scan_state import ScanState
from scan.visibility import VisibilityEngine

__all__ = [
    'ScanState',
    'VisibilityEngine',
]
