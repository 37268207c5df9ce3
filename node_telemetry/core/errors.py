"""
Errors raised while producing node telemetry.

`MetricsError` and its subclasses are what callers of the metrics manager
see. `SamplerError` and `ProducerRegistryError` are raised by the kstat
sampler and the producer registry; the manager chains them as the cause of
a `KstatError` or `RegistryError`.
"""

from typing import Optional


class MetricsError(Exception):
    """Base class for failures during node metric production."""

    message = "Metric production failure"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class KstatError(MetricsError):
    """The kernel statistics subsystem failed, or is unavailable here."""

    message = "Kstat-based metric failure"


class RegistryError(MetricsError):
    """The metric producer could not be inserted into the registry."""

    message = "Failed to insert metric producer into registry"


class HostnameError(MetricsError):
    """The local hostname could not be fetched."""

    message = "Failed to fetch hostname"


class NonUtf8HostnameError(HostnameError):
    message = "Non-UTF8 hostname"


class HostnameMissingNullError(HostnameError):
    message = "Missing NULL byte in hostname"


class SamplerError(Exception):
    """Raised by the kstat sampler when a target cannot be added or removed."""


class ProducerRegistryError(Exception):
    """Raised by the producer registry when a producer is rejected."""
