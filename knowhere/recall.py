"""Recall, hit and accuracy measures of search results against ground truth."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import numpy as np

DISTANCE_TOLERANCE = np.float32(0.00001)
"""Largest difference allowed between a result distance and its ground truth."""


def _flat(values: Any, dtype: Any) -> np.ndarray:
    return np.asarray(values, dtype=dtype).reshape(-1)


def _spans(lims: np.ndarray, start: int, count: int) -> Iterator[tuple[int, int]]:
    return zip(lims[start : start + count].tolist(), lims[start + 1 : start + count + 1].tolist())


@dataclass(eq=False)
class GroundTruth:
    """Expected neighbours of a set of queries.

    For k-nearest-neighbour data ``ids`` holds ``k`` ids per query, either as
    a matrix or flattened row by row with ``k`` given. For range data ``lims``
    delimits each query's ids and distances.
    """

    ids: Any
    distances: Any = None
    lims: Any = None
    k: int | None = None
    radius: Any = None

    def __post_init__(self) -> None:
        ids = np.asarray(self.ids, dtype=np.int64)
        if ids.ndim == 2 and self.k is None:
            self.k = int(ids.shape[1])
        self.ids = ids.reshape(-1)
        if self.distances is not None:
            self.distances = _flat(self.distances, np.float32)
            if len(self.distances) != len(self.ids):
                raise ValueError("ground truth ids and distances differ in length")
        if self.lims is not None:
            self.lims = _flat(self.lims, np.int64)
            if len(self.lims) == 0 or int(self.lims[-1]) > len(self.ids):
                raise ValueError("ground truth lims do not match its ids")
        if self.k is not None and (self.k <= 0 or len(self.ids) % self.k):
            raise ValueError(f"ground truth of {len(self.ids)} ids cannot hold {self.k} per query")

    def _knn_rows(self, start: int, count: int, width: int) -> np.ndarray:
        if self.k is None:
            raise ValueError("ground truth has no per-query k")
        rows = self.ids.reshape(-1, self.k)
        if start < 0 or start + count > len(rows):
            raise ValueError(f"queries {start}..{start + count} exceed the {len(rows)} in ground truth")
        return rows[start : start + count, :width]

    def _recall(self, ids: Any, start: int, count: int, k: int) -> float:
        if self.k is None:
            raise ValueError("ground truth has no per-query k")
        min_k = min(self.k, k)
        if count * min_k <= 0:
            raise ValueError("no results to measure recall on")
        truth = self._knn_rows(start, count, min_k)
        flat = _flat(ids, np.int64)
        if len(flat) < count * k:
            raise ValueError(f"expected {count * k} result ids, got {len(flat)}")
        found = flat[: count * k].reshape(count, k)[:, :min_k]
        hits = sum(int(np.isin(row, gt).sum()) for row, gt in zip(found, truth))
        return hits / (count * min_k)

    def calc_recall(self, ids: Any, nq: int, k: int) -> float:
        """Share of the top ``min(gt_k, k)`` results that are true neighbours."""
        return self._recall(ids, 0, nq, k)

    def calc_recall_slice(self, ids: Any, nq_start: int, step: int, k: int) -> float:
        """Recall of results for the ``step`` queries starting at ``nq_start``."""
        return self._recall(ids, nq_start, step, k)

    def _require_lims(self) -> np.ndarray:
        if self.lims is None:
            raise ValueError("ground truth has no range lims")
        return self.lims

    def _range_hits(self, ids: Any, lims: Any, start: int, num: int) -> int:
        gt_lims = self._require_lims()
        if start < 0 or start + num > len(gt_lims) - 1:
            raise ValueError(f"queries {start}..{start + num} exceed the {len(gt_lims) - 1} in ground truth")
        res_ids = _flat(ids, np.int64)
        res_lims = _flat(lims, np.int64)
        if len(res_lims) < num + 1:
            raise ValueError(f"result lims must hold {num + 1} entries")
        hits = 0
        for (gs, ge), (rs, re) in zip(_spans(gt_lims, start, num), _spans(res_lims, 0, num)):
            hits += int(np.isin(res_ids[rs:re], self.ids[gs:ge]).sum())
        return hits

    def calc_hits(self, ids: Any, lims: Any, nq: int) -> int:
        """Number of range results that are in the ground truth."""
        return self._range_hits(ids, lims, 0, nq)

    def calc_hits_slice(self, ids: Any, lims: Any, start: int, num: int) -> int:
        """Hits of results for ``num`` queries matched from ground-truth query ``start``."""
        return self._range_hits(ids, lims, start, num)

    def calc_range_recall(self, ids: Any, lims: Any, nq: int) -> float:
        """Share of the ground-truth range results that were found."""
        hits = self.calc_hits(ids, lims, nq)
        total = int(self._require_lims()[nq])
        if total == 0:
            raise ValueError("ground truth holds no results")
        return hits / total

    def calc_accuracy(self, ids: Any, lims: Any, nq: int) -> float:
        """Share of the found range results that are in the ground truth."""
        hits = self.calc_hits(ids, lims, nq)
        total = int(_flat(lims, np.int64)[nq])
        if total == 0:
            raise ValueError("no results were found")
        return hits / total

    def check_distance(self, ids: Any, distances: Any, lims: Any, nq: int) -> int:
        """Check the distance of every result that is a true neighbour.

        Returns how many distances were compared; raises ValueError on the
        first one that differs from the ground truth.
        """
        gt_lims = self._require_lims()
        if self.distances is None:
            raise ValueError("ground truth has no distances")
        res_ids = _flat(ids, np.int64)
        res_dist = _flat(distances, np.float32)
        res_lims = _flat(lims, np.int64)
        checked = 0
        for query, ((gs, ge), (rs, re)) in enumerate(zip(_spans(gt_lims, 0, nq), _spans(res_lims, 0, nq))):
            expected = dict(zip(self.ids[gs:ge].tolist(), self.distances[gs:ge]))
            for label, dist in zip(res_ids[rs:re].tolist(), res_dist[rs:re]):
                if label not in expected:
                    continue
                if not abs(dist - expected[label]) < DISTANCE_TOLERANCE:
                    raise ValueError(
                        f"query {query}, id {label}: distance {dist} differs from {expected[label]}"
                    )
                checked += 1
        return checked


def normalize(vectors: Any) -> np.ndarray:
    """Return ``vectors`` with every row scaled to unit length."""
    arr = np.asarray(vectors, dtype=np.float32)
    if arr.ndim != 2:
        raise ValueError("vectors must be a two-dimensional array")
    lengths = np.sqrt(np.square(arr.astype(np.float64)).sum(axis=1))
    with np.errstate(divide="ignore", invalid="ignore"):
        inverse = 1.0 / lengths
        return (arr.astype(np.float64) * inverse[:, None]).astype(np.float32)