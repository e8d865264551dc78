"""Level-local edge derivation for one component."""

from __future__ import annotations

from .models import Component, Edge, EdgeKind


def derive_edges(component: Component) -> list[Edge]:
    """Edges drawn inside ``component``: its own ports to its children's
    ports, then child outputs to the inputs of other children.

    Only one level is examined; deeper bindings must already have been
    bridged by infer_implicit_ports().
    """
    edges: list[Edge] = []
    # component <-> child
    for src in component.ports:
        if not src.is_bound:
            continue
        for child in component.children:
            for tgt in child.ports:
                if src.connects_to(tgt):
                    edges.append(Edge(component, src, child, tgt, EdgeKind.PARENT_CHILD))
    # child -> child
    for src_child in component.children:
        for src in src_child.ports:
            if src.is_input or not src.is_bound:
                continue
            for tgt_child in component.children:
                if tgt_child is src_child:
                    continue
                for tgt in tgt_child.ports:
                    if tgt.is_input and src.connects_to(tgt) and tgt is not src:
                        edges.append(Edge(src_child, src, tgt_child, tgt, EdgeKind.CHILD_CHILD))
    return edges
