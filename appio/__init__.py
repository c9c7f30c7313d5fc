# ================================
# file: appio/__init__.py
# ================================
from appio.logger import DataLogger, log_to_file
from appio.advisor import AdvisoryClient

__all__ = ["DataLogger", "log_to_file", "AdvisoryClient"]
