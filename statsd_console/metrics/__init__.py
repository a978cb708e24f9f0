from .aggregator import MetricAggregator

__all__ = ["MetricAggregator"]
