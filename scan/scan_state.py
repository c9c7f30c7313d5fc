# ================================
# file: scan/scan_state.py
# ================================
from __future__ import annotations
from typing import Iterable, Optional, Set
import numpy as np

from core.types import PointCloud


class ScanState:
    """Monotonically growing set of acquired point-cloud indices.
    Indices are only added; reset() clears everything (equivalent to a restart).
    A boolean mask is kept alongside the set once a cloud size is known so the
    per-tick pending filter stays O(N) in numpy.
    """

    def __init__(self) -> None:
        self._indices: Set[int] = set()
        self._mask: Optional[np.ndarray] = None

    def __contains__(self, index: int) -> bool:
        return int(index) in self._indices

    def __len__(self) -> int:
        return len(self._indices)

    def __iter__(self):
        return iter(self._indices)

    def add(self, index: int) -> bool:
        return self.add_many([index]) == 1

    def add_many(self, indices: Iterable[int]) -> int:
        """Insert indices, return how many were new."""
        idx = [int(i) for i in indices]
        before = len(self._indices)
        self._indices.update(idx)
        if self._mask is not None and idx:
            arr = np.asarray(idx, dtype=np.int64)
            arr = arr[(arr >= 0) & (arr < len(self._mask))]
            self._mask[arr] = True
        return len(self._indices) - before

    def indices(self) -> np.ndarray:
        return np.fromiter(sorted(self._indices), dtype=np.int64, count=len(self._indices))

    def mask(self, n: int) -> np.ndarray:
        """Boolean membership mask of length n (a copy)."""
        n = int(n)
        if self._mask is None or len(self._mask) != n:
            m = np.zeros(n, dtype=bool)
            if self._indices:
                idx = self.indices()
                m[idx[idx < n]] = True
            self._mask = m
        return self._mask.copy()

    def positions(self, cloud: PointCloud) -> np.ndarray:
        """Positions of acquired points, (M, 3); what the renderer draws."""
        if not self._indices:
            return np.zeros((0, 3), dtype=float)
        return cloud.positions[self.indices()]

    def coverage(self, n: int) -> float:
        return 0.0 if n <= 0 else len(self._indices) / float(n)

    def snapshot(self) -> frozenset:
        return frozenset(self._indices)

    def reset(self) -> None:
        self._indices.clear()
        if self._mask is not None:
            self._mask[:] = False
