"""Names of the distance metrics and their parsing."""

from __future__ import annotations

import enum

from knowhere.errors import KnowhereError, Status


class MetricType(enum.Enum):
    """Distance metric, valued by its canonical upper-case name."""

    L2 = "L2"
    IP = "IP"
    HAMMING = "HAMMING"
    JACCARD = "JACCARD"
    TANIMOTO = "TANIMOTO"
    SUBSTRUCTURE = "SUBSTRUCTURE"
    SUPERSTRUCTURE = "SUPERSTRUCTURE"

    @property
    def is_binary(self) -> bool:
        """True for the metrics that work on bit vectors."""
        return self not in (MetricType.L2, MetricType.IP)


def parse_metric(name: str) -> MetricType:
    """Return the metric named ``name``, ignoring case."""
    try:
        return MetricType(name.upper())
    except ValueError:
        raise KnowhereError(f"invalid metric type: {name}", Status.INVALID_METRIC_TYPE) from None