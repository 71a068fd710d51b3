"""Filtering and merging of range-search results."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from knowhere.errors import KnowhereError, Status

logger = logging.getLogger("knowhere")


def _in_range_mask(distances: Any, radius: float, range_filter: float, is_ip: bool) -> np.ndarray:
    d = np.asarray(distances, dtype=np.float32)
    r = np.float32(radius)
    f = np.float32(range_filter)
    if is_ip:
        return (r < d) & (d <= f)
    return (f <= d) & (d < r)


def distance_in_range(dist: float, radius: float, range_filter: float, is_ip: bool) -> bool:
    """Whether ``dist`` lies in the range given by ``radius`` and ``range_filter``.

    For inner product the range is ``(radius, range_filter]``, otherwise
    ``[range_filter, radius)``.
    """
    return bool(_in_range_mask(dist, radius, range_filter, is_ip))


@dataclass(eq=False)
class RangeSearchResult:
    """Results of a range search: ``lims[i]:lims[i+1]`` holds query ``i``'s hits."""

    lims: np.ndarray
    labels: np.ndarray
    distances: np.ndarray

    def __post_init__(self) -> None:
        self.lims = np.asarray(self.lims, dtype=np.int64)
        self.labels = np.asarray(self.labels, dtype=np.int64)
        self.distances = np.asarray(self.distances, dtype=np.float32)
        if self.lims.ndim != 1 or len(self.lims) == 0 or self.lims[0] != 0:
            raise KnowhereError("lims must start with 0", Status.INVALID_ARGS)
        if np.any(np.diff(self.lims) < 0):
            raise KnowhereError("lims must not decrease", Status.INVALID_ARGS)
        total = int(self.lims[-1])
        if len(self.labels) != total or len(self.distances) != total:
            raise KnowhereError(
                f"labels ({len(self.labels)}) and distances ({len(self.distances)}) "
                f"must both hold {total} entries",
                Status.INVALID_ARGS,
            )

    @property
    def nq(self) -> int:
        """Number of queries."""
        return len(self.lims) - 1

    @property
    def total(self) -> int:
        """Number of hits over all queries."""
        return int(self.lims[-1])

    def query(self, i: int) -> tuple[np.ndarray, np.ndarray]:
        """Distances and labels found for query ``i``."""
        start, end = self.lims[i], self.lims[i + 1]
        return self.distances[start:end], self.labels[start:end]

    def __iter__(self) -> Iterator[tuple[np.ndarray, np.ndarray]]:
        for start, end in zip(self.lims[:-1], self.lims[1:]):
            yield self.distances[start:end], self.labels[start:end]


def _lims_from_counts(counts: Sequence[int]) -> np.ndarray:
    return np.concatenate(([0], np.cumsum(counts, dtype=np.int64))).astype(np.int64)


def count_valid(result: RangeSearchResult, is_ip: bool, radius: float, range_filter: float) -> np.ndarray:
    """Lims of the hits of ``result`` that lie in range; the last entry is their total."""
    counts = [int(_in_range_mask(d, radius, range_filter, is_ip).sum()) for d, _ in result]
    return _lims_from_counts(counts)


def _is_filtered(bitset: Any, label: int) -> bool:
    return 0 <= label < len(bitset) and bool(bitset[label])


def filter_range_result(
    result: RangeSearchResult,
    is_ip: bool,
    radius: float,
    range_filter: float,
    bitset: Any = None,
) -> RangeSearchResult:
    """Keep only the hits of ``result`` in range, query by query, in order.

    ``bitset`` marks filtered-out ids; a hit on such an id is an error.
    """
    if bitset is not None and len(bitset) > 0:
        if any(_is_filtered(bitset, int(label)) for label in result.labels):
            raise KnowhereError("bitset invalid", Status.INVALID_ARGS)
    lims = count_valid(result, is_ip, radius, range_filter)
    mask = _in_range_mask(result.distances, radius, range_filter, is_ip)
    logger.debug(
        "Range search metric type: %s, radius %s, range_filter %s, total result num %d",
        "IP" if is_ip else "L2",
        radius,
        range_filter,
        int(lims[-1]),
    )
    return RangeSearchResult(lims, result.labels[mask], result.distances[mask])


def filter_one_query(
    distances: Sequence[float],
    labels: Sequence[int],
    is_ip: bool,
    radius: float,
    range_filter: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Keep the hits of one query that lie in range, in order."""
    if len(distances) != len(labels):
        raise KnowhereError(
            f"distances' size {len(distances)} not equal to labels' size {len(labels)}",
            Status.INVALID_ARGS,
        )
    dist = np.asarray(distances, dtype=np.float32)
    lab = np.asarray(labels, dtype=np.int64)
    mask = _in_range_mask(dist, radius, range_filter, is_ip)
    return dist[mask], lab[mask]


def merge_range_results(
    distances_per_query: Sequence[Sequence[float]],
    labels_per_query: Sequence[Sequence[int]],
    nq: int,
) -> RangeSearchResult:
    """Join per-query hits, all assumed in range, into one result."""
    if len(distances_per_query) != nq:
        raise KnowhereError(
            f"result distances size {len(distances_per_query)} not equal to {nq}", Status.INVALID_ARGS
        )
    if len(labels_per_query) != nq:
        raise KnowhereError(
            f"result labels size {len(labels_per_query)} not equal to {nq}", Status.INVALID_ARGS
        )
    for dist, lab in zip(distances_per_query, labels_per_query):
        if len(dist) != len(lab):
            raise KnowhereError(
                f"distances' size {len(dist)} not equal to labels' size {len(lab)}", Status.INVALID_ARGS
            )
    lims = _lims_from_counts([len(d) for d in distances_per_query])
    distances = np.concatenate(
        [np.empty(0, dtype=np.float32), *(np.asarray(d, dtype=np.float32) for d in distances_per_query)]
    )
    labels = np.concatenate(
        [np.empty(0, dtype=np.int64), *(np.asarray(lab, dtype=np.int64) for lab in labels_per_query)]
    )
    logger.debug("Range search merged %d results for %d queries", int(lims[-1]), nq)
    return RangeSearchResult(lims, labels, distances)