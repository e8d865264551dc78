"""
Implicit port inference.

A binding only requires that two ports share a bound identity; the modules
between the two port owners need not expose anything. Block diagrams only
draw wires between a component and its direct child, or between two children
of the same parent, so a binding that crosses several hierarchy levels would
be invisible. This module adds pass-through ports on every component between
the two ends so that each binding becomes a chain of level-local wires.

For a driver below ``A`` and a receiver below ``B``::

    root                       root
    ├── A                      ├── A  [x]  <- synthesized output
    │   └── A1 [x] -->         │   └── A1 [x]
    └── B [y]                  └── B  [y]

The common ancestor (``root``) needs no port: the wire is drawn there as a
child-to-child edge.
"""

from __future__ import annotations
import logging
from typing import Hashable, Optional

from .graph_manager import HierarchyGraph
from .models import Component, Direction, Port

logger = logging.getLogger(__name__)

# (component, reached by an upward step)
Breadcrumb = tuple[Component, bool]


def build_registry(graph: HierarchyGraph) -> dict[Hashable, list[Port]]:
    """Group all bound ports by identity, in pre-order."""
    registry: dict[Hashable, list[Port]] = {}
    for port in graph.ports():
        if port.is_bound:
            registry.setdefault(port.identity, []).append(port)
    return registry


def tree_path(graph: HierarchyGraph, start: Component, end: Component) -> Optional[list[Breadcrumb]]:
    """Find the path ``start`` -> ``end`` as a list of breadcrumbs.

    Depth-first: children are tried first, the parent only while no downward
    step has been taken yet, which yields the unique "up, then down" tree
    path. Returns None if ``end`` is not reachable.
    """
    trail: list[Breadcrumb] = [(start, True)]
    visited: set[int] = set()
    if _search(graph, end, trail, visited):
        return trail
    return None


def _search(graph: HierarchyGraph, end: Component, trail: list[Breadcrumb], visited: set[int]) -> bool:
    current, upwards = trail[-1]
    if current is end:
        return True
    if current.node_id in visited:
        return False
    visited.add(current.node_id)
    for child in current.children:
        trail.append((child, False))
        if _search(graph, end, trail, visited):
            return True
        trail.pop()
    if upwards:
        parent = graph.parent(current)
        if parent is not None:
            trail.append((parent, True))
            if _search(graph, end, trail, visited):
                return True
            trail.pop()
    return False


def _bridge(graph: HierarchyGraph, driver: Port, receiver: Port) -> int:
    start = graph.owner(driver)
    end = graph.owner(receiver)
    if start is end:
        return 0
    path = tree_path(graph, start, end)
    if path is None:
        logger.debug("No tree path from %s to %s, binding not bridged", driver.name, receiver.name)
        return 0
    created = 0
    # intermediates only, receiver side first
    for index in range(len(path) - 2, 0, -1):
        component, upwards = path[index]
        if upwards and not path[index + 1][1]:
            continue  # turning point
        if component.port_for(receiver.identity) is not None:
            continue
        ref = driver if upwards else receiver
        direction = Direction.OUTPUT if upwards else Direction.INPUT
        port = graph.add_port(
            component, f"{component.name}.{ref.basename}", ref.basename, direction,
            ref.type_name, identity=receiver.identity, synthesized=True,
        )
        logger.debug("Synthesized %s port %s for %s -> %s",
                     direction.value, port.name, driver.name, receiver.name)
        created += 1
    return created


def infer_implicit_ports(graph: HierarchyGraph) -> int:
    """Add pass-through ports for multi-level bindings; return how many were added."""
    created = 0
    for identity, ports in build_registry(graph).items():
        if len(ports) < 2:
            continue
        drivers = [p for p in ports if not p.is_input]
        receivers = [p for p in ports if p.is_input]
        for driver in drivers:
            for receiver in receivers:
                created += _bridge(graph, driver, receiver)
    logger.info("Inferred %d implicit ports", created)
    return created
