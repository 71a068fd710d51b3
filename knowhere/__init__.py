"""Vector search support: metrics, range-result filtering, index registry, recall measures and binary-set files."""

__version__ = "0.1.0"