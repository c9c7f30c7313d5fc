from .scan_visualizer import ScanVisualizer

__all__ = ["ScanVisualizer"]
