"""Context object shared across worker threads."""

from dataclasses import dataclass, field
from typing import Mapping, Optional

from wire_oracle.bootstrap.config import ServerConfig
from wire_oracle.lifecycle.state import ServerLifecycle
from wire_oracle.pipeline.router import ROUTE_INDEX, RouteDescriptor


@dataclass(frozen=True)
class WorkerContext:
    """Read-only dependencies handed to every connection worker."""

    routes: Mapping[tuple[str, str], RouteDescriptor] = field(
        default_factory=lambda: ROUTE_INDEX
    )
    lifecycle: Optional[ServerLifecycle] = None
    config: Optional[ServerConfig] = None
