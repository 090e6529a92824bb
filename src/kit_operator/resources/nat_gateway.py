"""NatGateway child object of a control plane."""

from __future__ import annotations

from typing import Any

from ..constants import ResourceKind
from ..objects import DesiredObject
from .base import Projection


class NatGatewayProjection(Projection):
    """Existence-only projection: a found NatGateway object is left as is."""

    kind = ResourceKind.NAT_GATEWAY

    def desired_spec(self, control_plane: DesiredObject) -> dict[str, Any]:
        return {}
