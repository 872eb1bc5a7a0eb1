"""
Pairwise distances between clusters and between sequence payloads.

DistanceTable holds the symmetric distances between the clusters that are
still alive during agglomeration. The metric functions compute distances
between raw sequences and are the default distance functions for items
loaded from FASTA files.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator

import numpy as np

from phylocluster.core.exceptions import SequenceLengthMismatchError
from phylocluster.models.config import DistanceMetric

DistanceFunction = Callable[[object, object], float]


class DistanceTable:
    """
    Symmetric distance table keyed by cluster label.

    Stored as a row per label so that removing a label drops its row and
    its column in time proportional to the number of surviving labels.
    Self-distances are never stored.
    """

    def __init__(self) -> None:
        self._rows: dict[str, dict[str, float]] = {}

    def add_label(self, label: str) -> None:
        self._rows.setdefault(label, {})

    def set(self, label_a: str, label_b: str, distance: float) -> None:
        """Record d(a, b) = d(b, a) = distance."""
        if label_a == label_b:
            msg = f"Self-distance for {label_a!r} cannot be stored"
            raise ValueError(msg)
        self._rows.setdefault(label_a, {})[label_b] = distance
        self._rows.setdefault(label_b, {})[label_a] = distance

    def get(self, label_a: str, label_b: str) -> float:
        """Return d(a, b); raises KeyError if either label is not present."""
        return self._rows[label_a][label_b]

    def remove(self, label: str) -> None:
        """Drop a label's row and column."""
        row = self._rows.pop(label)
        for other in row:
            del self._rows[other][label]

    def neighbours(self, label: str) -> dict[str, float]:
        """Copy of the distances from one label to every other label."""
        return dict(self._rows[label])

    def labels(self) -> list[str]:
        return list(self._rows)

    def pairs(self) -> Iterator[tuple[str, str, float]]:
        """Yield each unordered pair once as (smaller, larger, distance)."""
        for label_a, row in self._rows.items():
            for label_b, distance in row.items():
                if label_a < label_b:
                    yield label_a, label_b, distance

    def __contains__(self, label: object) -> bool:
        return label in self._rows

    def __len__(self) -> int:
        return len(self._rows)


def _as_array(sequence: object) -> np.ndarray:
    return np.frombuffer(str(sequence).upper().encode("ascii", "replace"), dtype=np.uint8)


def _mismatches(seq_a: object, seq_b: object) -> tuple[int, int]:
    a = _as_array(seq_a)
    b = _as_array(seq_b)
    if len(a) != len(b):
        raise SequenceLengthMismatchError(len(a), len(b))
    return int(np.count_nonzero(a != b)), len(a)


def hamming_distance(seq_a: object, seq_b: object) -> float:
    """Number of sites at which two sequences differ (case-insensitive)."""
    mismatches, _ = _mismatches(seq_a, seq_b)
    return float(mismatches)


def p_distance(seq_a: object, seq_b: object) -> float:
    """Proportion of differing sites; 0.0 for two empty sequences."""
    mismatches, length = _mismatches(seq_a, seq_b)
    if length == 0:
        return 0.0
    return mismatches / length


def jukes_cantor_distance(seq_a: object, seq_b: object) -> float:
    """
    Jukes-Cantor corrected distance, -3/4 * ln(1 - 4/3 * p).

    Saturated pairs (p >= 0.75) have no finite estimate and return inf.
    """
    p = p_distance(seq_a, seq_b)
    if p >= 0.75:
        return math.inf
    return -0.75 * math.log(1.0 - (4.0 / 3.0) * p)


_METRICS: dict[DistanceMetric, DistanceFunction] = {
    DistanceMetric.HAMMING: hamming_distance,
    DistanceMetric.P_DISTANCE: p_distance,
    DistanceMetric.JUKES_CANTOR: jukes_cantor_distance,
}


def get_distance_function(metric: DistanceMetric | str) -> DistanceFunction:
    """Look up the distance function for a metric name."""
    return _METRICS[DistanceMetric(metric)]
