"""Identity types describing the node that produces telemetry."""

from __future__ import annotations
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_SERIAL = "unknown"


class ServerBaseboard(BaseModel):
    """Baseboard of an identified server node."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["server"] = "server"
    identifier: str
    model: str
    revision: int = 0


class UnknownBaseboard(BaseModel):
    """Baseboard whose identity could not be determined."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unknown"] = "unknown"


class PcBaseboard(BaseModel):
    """Baseboard of commodity hardware, e.g. a development machine."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pc"] = "pc"
    identifier: str
    model: str


Baseboard = Annotated[
    Union[ServerBaseboard, UnknownBaseboard, PcBaseboard],
    Field(discriminator="kind"),
]


def baseboard_serial(baseboard: Baseboard) -> str:
    """Return the serial number of a baseboard, or "unknown" if it has none."""
    if isinstance(baseboard, (ServerBaseboard, PcBaseboard)):
        return baseboard.identifier
    return UNKNOWN_SERIAL


class NodeIdentifiers(BaseModel):
    """Basic metadata about the node, attached to every link it publishes."""

    model_config = ConfigDict(frozen=True)

    node_id: UUID
    cluster_id: UUID
    baseboard: Baseboard = Field(default_factory=UnknownBaseboard)

    @property
    def serial(self) -> str:
        return baseboard_serial(self.baseboard)
