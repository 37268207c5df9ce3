"""
Kstat System

Kernel statistics sampling for datalinks.
"""

from .sampler import KstatSampler, SampledTarget, read_link_counters

__all__ = [
    "KstatSampler",
    "SampledTarget",
    "read_link_counters",
]
