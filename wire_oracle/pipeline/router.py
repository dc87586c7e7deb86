"""Fixed route table and exact (method, path) dispatch."""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from wire_oracle.domain.correlation_id import CorrelationLoggerAdapter
from wire_oracle.domain.framing import FramingStrategy

ROUTER_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("wire_oracle.pipeline.router"), {}
)


@dataclass(frozen=True)
class RouteDescriptor:
    method: str
    path: str
    strategy: FramingStrategy


ROUTE_TABLE: tuple[RouteDescriptor, ...] = (
    RouteDescriptor("GET", "/get", FramingStrategy.FIXED_BODY),
    RouteDescriptor("POST", "/post-length", FramingStrategy.ECHO_LENGTH),
    RouteDescriptor("POST", "/post-chunked", FramingStrategy.ECHO_CHUNKED),
    RouteDescriptor("GET", "/get-chunked-lf-only", FramingStrategy.CHUNKED_LF_ONLY),
    RouteDescriptor(
        "GET", "/get-chunked-wo-trailer", FramingStrategy.CHUNKED_WITHOUT_TRAILER
    ),
    RouteDescriptor("POST", "/post", FramingStrategy.DRIP_ECHO),
)


def build_route_index(
    table: tuple[RouteDescriptor, ...],
) -> Mapping[tuple[str, str], RouteDescriptor]:
    """Index routes by (method, path), rejecting duplicate keys."""
    index: dict[tuple[str, str], RouteDescriptor] = {}
    for route in table:
        key = (route.method, route.path)
        if key in index:
            raise ValueError(f"duplicate route {route.method} {route.path}")
        index[key] = route
    return MappingProxyType(index)


ROUTE_INDEX = build_route_index(ROUTE_TABLE)


def match_route(
    method: str,
    path: str,
    index: Mapping[tuple[str, str], RouteDescriptor] = ROUTE_INDEX,
) -> Optional[RouteDescriptor]:
    route = index.get((method, path))
    if route is None:
        ROUTER_LOGGER.info(
            "No matching route found",
            extra={"event": "route_not_found", "route": path, "method": method},
        )
    elif ROUTER_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ROUTER_LOGGER.debug(
            "Route matched",
            extra={
                "event": "route_matched",
                "route": path,
                "strategy": route.strategy.value,
            },
        )
    return route


def allowed_methods(
    path: str, index: Mapping[tuple[str, str], RouteDescriptor] = ROUTE_INDEX
) -> set[str]:
    """Methods the table accepts for ``path``; empty when the path is unknown."""
    return {method for method, route_path in index if route_path == path}
