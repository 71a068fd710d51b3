"""Parsing of benchmark dataset names such as ``sift-128-euclidean``.

A name holds a dataset, a dimension and a metric separated by dashes. A
range-search dataset adds ``-range``. A dataset with one radius per query
adds ``-range-multi``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from knowhere.errors import KnowhereError, Status
from knowhere.metric import MetricType

HDF5_POSTFIX = ".hdf5"

DATASET_TRAIN = "train"
DATASET_TEST = "test"
DATASET_NEIGHBORS = "neighbors"
DATASET_DISTANCES = "distances"
DATASET_LIMS = "lims"
DATASET_RADIUS = "radius"

METRIC_IP_STR = "angular"
METRIC_L2_STR = "euclidean"
METRIC_HAM_STR = "hamming"
METRIC_JAC_STR = "jaccard"
METRIC_TAN_STR = "tanimoto"

_METRICS = {
    METRIC_IP_STR: MetricType.IP,
    METRIC_L2_STR: MetricType.L2,
    METRIC_HAM_STR: MetricType.HAMMING,
    METRIC_JAC_STR: MetricType.JACCARD,
    METRIC_TAN_STR: MetricType.TANIMOTO,
}

_INT_PREFIX = re.compile(r"\s*[+-]?\d+")


@dataclass(frozen=True)
class AnnTestName:
    """A parsed dataset name."""

    name: str
    dim: int
    metric: str

    @property
    def dataset(self) -> str:
        """The part of the name before the dimension."""
        return self.name.split("-", 1)[0]

    @property
    def file_name(self) -> str:
        """Name of the HDF5 file holding the dataset."""
        return self.name + HDF5_POSTFIX

    @property
    def needs_normalization(self) -> bool:
        """True when vectors must be scaled to unit length before use."""
        return self.metric == METRIC_IP_STR

    @property
    def metric_type(self) -> MetricType:
        """The search metric the name's metric word stands for."""
        try:
            return _METRICS[self.metric]
        except KeyError:
            raise KnowhereError(
                f"unknown dataset metric: {self.metric}", Status.INVALID_METRIC_TYPE
            ) from None


def _parse_dim(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"dimension is not a number: {text!r}")
    return int(match.group())


def _split_name_and_dim(name: str) -> tuple[int, str]:
    """Return the dimension and the text after it."""
    if not name:
        raise ValueError("dataset name not set")
    first = name.find("-")
    if first < 0:
        raise ValueError(f"dataset name {name!r} has no dimension")
    second = name.find("-", first + 1)
    if second < 0:
        raise ValueError(f"dataset name {name!r} has no metric")
    return _parse_dim(name[first + 1 : second]), name[second + 1 :]


def parse_test_name(name: str) -> AnnTestName:
    """Parse ``<dataset>-<dim>-<metric>``; the metric is everything after the dimension."""
    dim, rest = _split_name_and_dim(name)
    return AnnTestName(name, dim, rest)


def _parse_with_suffix(name: str, suffix: str) -> AnnTestName:
    dim, rest = _split_name_and_dim(name)
    dash = rest.find("-")
    if dash < 0:
        raise ValueError(f"dataset name {name!r} lacks the '-{suffix}' suffix")
    metric, tail = rest[:dash], rest[dash + 1 :]
    if tail != suffix:
        raise ValueError(f"dataset name {name!r} must end in '-{suffix}', not '-{tail}'")
    return AnnTestName(name, dim, metric)


def parse_range_test_name(name: str) -> AnnTestName:
    """Parse ``<dataset>-<dim>-<metric>-range``."""
    return _parse_with_suffix(name, "range")


def parse_range_multi_test_name(name: str) -> AnnTestName:
    """Parse ``<dataset>-<dim>-<metric>-range-multi``."""
    return _parse_with_suffix(name, "range-multi")