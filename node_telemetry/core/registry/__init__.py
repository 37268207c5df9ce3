"""
Registry System

Producer registry exposed to the metrics collector.
"""

from .producer_registry import MetricProducer, ProducerRegistry

__all__ = [
    "MetricProducer",
    "ProducerRegistry",
]
