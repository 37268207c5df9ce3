"""Types module for core functionality."""

from node_telemetry.core.types.identity_types import *
from node_telemetry.core.types.link_types import *
