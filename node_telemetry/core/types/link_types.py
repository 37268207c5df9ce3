"""Types for datalink targets and their collection policy."""

from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import timedelta
from enum import Enum
from typing import Dict, NewType, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Opaque handle returned by the sampler when a target is added
TargetId = NewType("TargetId", UUID)


class LinkKind(Enum):
    """Kinds of datalink that can be sampled."""

    PHYSICAL = "physical"
    VIRTUAL = "virtual"

    def __str__(self):
        return self.value


class DataLink(BaseModel, ABC):
    """Abstract base holding the fields common to every datalink target."""

    model_config = ConfigDict(frozen=True)

    cluster_id: UUID
    node_id: UUID
    serial: str
    hostname: str
    link_name: str = Field(..., min_length=1)

    @property
    @abstractmethod
    def kind(self) -> LinkKind:
        """Kind label of the link."""

    def labels(self) -> Dict[str, str]:
        """Label values attached to every sample of this link."""
        return {
            "kind": str(self.kind),
            "cluster_id": str(self.cluster_id),
            "node_id": str(self.node_id),
            "serial": self.serial,
            "hostname": self.hostname,
            "link_name": self.link_name,
        }


class PhysicalDataLink(DataLink):
    """A physical NIC port on the node."""

    @property
    def kind(self) -> LinkKind:
        return LinkKind.PHYSICAL


class VirtualDataLink(DataLink):
    """A virtual link, e.g. a guest VNIC, named after its owner's hostname."""

    @property
    def kind(self) -> LinkKind:
        return LinkKind.VIRTUAL


LinkTarget = Union[PhysicalDataLink, VirtualDataLink]

LINK_LABEL_NAMES = ("kind", "cluster_id", "node_id", "serial", "hostname", "link_name")


class CollectionDetails(BaseModel):
    """How often a target is sampled and when it is given up on."""

    model_config = ConfigDict(frozen=True)

    interval: timedelta
    # None means the target never expires
    expiration: Optional[timedelta] = None

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, v: timedelta) -> timedelta:
        if v <= timedelta(0):
            raise ValueError("sampling interval must be positive")
        return v

    @classmethod
    def never(cls, interval: Union[timedelta, float]) -> "CollectionDetails":
        """Sample every `interval`, and never expire the target."""
        return cls(interval=_as_timedelta(interval))

    @classmethod
    def duration(
        cls, interval: Union[timedelta, float], expire_after: Union[timedelta, float]
    ) -> "CollectionDetails":
        """Sample every `interval`, dropping the target after failing for `expire_after`."""
        return cls(
            interval=_as_timedelta(interval), expiration=_as_timedelta(expire_after)
        )


def _as_timedelta(value: Union[timedelta, float]) -> timedelta:
    if isinstance(value, timedelta):
        return value
    return timedelta(seconds=value)
