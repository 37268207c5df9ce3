"""
Telemetry Core

Registry, sampler and link tracking components.
"""
