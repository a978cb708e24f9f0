"""Administrative TCP console for a metrics-aggregation daemon."""

__version__ = "0.1.0"
