"""
Document writers for the structure renderer.

The renderer walks the component tree once (children before their parent's
edges) and hands every port, edge and component to a DocumentWriter. Each
writer turns those into its own document syntax:

  - ElkJsonWriter   : ELK JSON graph (elkjs / ELK JSON importers)
  - DebugJsonWriter : ELK JSON plus types and raw bound identities
  - D3JsonWriter    : d3-hwschematic node-link document
  - ElkTextWriter   : ELK text format (.elkt)
"""

from __future__ import annotations
import json
from typing import Any, Hashable, Optional

from .models import Component, Edge, Port

INDENT = "    "
NODE_WIDTH = 50
NODE_MIN_HEIGHT = 80
PORT_PITCH = 20
PORT_SIZE = 6


class IdAllocator:
    """Hands out string ids continuing after ``start``."""

    def __init__(self, start: int = 0):
        self._last = start

    def next(self) -> str:
        self._last += 1
        return str(self._last)

    @property
    def current(self) -> int:
        return self._last


def node_height(component: Component) -> int:
    num_in, num_out = component.port_counts()
    return max(NODE_MIN_HEIGHT, max(num_in, num_out) * PORT_PITCH)


def port_side(port: Port) -> str:
    return "WEST" if port.is_input else "EAST"


def identity_value(identity: Optional[Hashable]) -> Any:
    """JSON-representable form of a bound identity."""
    if identity is None or isinstance(identity, (int, str, bool, float)):
        return identity
    return repr(identity)


class DocumentWriter:
    """One output syntax. Subclasses build nodes bottom-up."""

    def __init__(self, title: str, ids: IdAllocator):
        self.title = title
        self.ids = ids

    def port(self, component: Component, port: Port) -> Any:
        raise NotImplementedError

    def edge(self, edge: Edge) -> Any:
        raise NotImplementedError

    def component(self, component: Component, ports: list, children: list, edges: list,
                  level: int) -> Optional[Any]:
        """Assemble a component node; None drops it from the document."""
        raise NotImplementedError

    def document(self, root: Optional[Any]) -> str:
        raise NotImplementedError


# ====================================================================== #
#  JSON writers                                                            #
# ====================================================================== #

class ElkJsonWriter(DocumentWriter):

    def port(self, component: Component, port: Port) -> dict:
        return {
            "id": str(port.port_id),
            "labels": [{"text": port.basename}],
            "width": PORT_SIZE,
            "height": PORT_SIZE,
            "layoutOptions": {"port.side": port_side(port)},
        }

    def edge(self, edge: Edge) -> dict:
        return {
            "id": self.ids.next(),
            "sources": [str(edge.source_port.port_id)],
            "targets": [str(edge.target_port.port_id)],
        }

    def component(self, component, ports, children, edges, level) -> dict:
        return {
            "id": str(component.node_id),
            "ports": ports,
            "children": children,
            "edges": edges,
            "labels": [{"text": component.basename}],
            "width": NODE_WIDTH,
            "height": node_height(component),
        }

    def document(self, root: Optional[dict]) -> str:
        doc = {
            "id": "0",
            "labels": [{"text": self.title}],
            "layoutOptions": {"algorithm": "layered"},
            "children": [root] if root is not None else [],
            "edges": [],
        }
        self.finish(doc)
        return json.dumps(doc, indent=4) + "\n"

    def finish(self, doc: dict) -> None:
        pass


class DebugJsonWriter(ElkJsonWriter):

    def port(self, component: Component, port: Port) -> dict:
        node = super().port(component, port)
        node.update(
            type=port.type_name,
            input=port.is_input,
            interface=identity_value(port.identity),
            synthesized=port.synthesized,
        )
        return node

    def component(self, component, ports, children, edges, level) -> dict:
        node = super().component(component, ports, children, edges, level)
        node.update(
            name=component.basename,
            type=component.type_name,
            topmodule=component.is_root,
        )
        return node


class D3JsonWriter(ElkJsonWriter):
    """d3-hwschematic input; nested nodes start collapsed."""

    def port(self, component: Component, port: Port) -> dict:
        return {
            "id": str(port.port_id),
            "direction": "INPUT" if port.is_input else "OUTPUT",
            "hwMeta": {"name": port.basename, "connectedAsParent": False},
            "properties": {"side": port_side(port)},
            "children": [],
        }

    def edge(self, edge: Edge) -> dict:
        return {
            "id": self.ids.next(),
            "source": str(edge.source.node_id),
            "sourcePort": str(edge.source_port.port_id),
            "target": str(edge.target.node_id),
            "targetPort": str(edge.target_port.port_id),
            "hwMeta": {"name": edge.label},
        }

    def component(self, component, ports, children, edges, level) -> dict:
        prefix = "" if component.is_root else "_"
        return {
            "id": str(component.node_id),
            "ports": ports,
            f"{prefix}children": children,
            f"{prefix}edges": edges,
            "hwMeta": {
                "name": component.basename,
                "cls": component.type_name,
                "maxId": self.ids.current,
                "isExternalPort": False,
            },
            "properties": {
                "org.eclipse.elk.layered.mergeEdges": 1,
                "org.eclipse.elk.portConstraints": "FIXED_SIDE",
            },
        }

    def finish(self, doc: dict) -> None:
        doc["hwMeta"] = {"cls": None, "maxId": 65536, "name": self.title}
        doc["properties"] = {
            "org.eclipse.elk.layered.mergeEdges": 1,
            "org.eclipse.elk.portConstraints": "FIXED_ORDER",
        }


# ====================================================================== #
#  ELK text writer                                                         #
# ====================================================================== #

class ElkTextWriter(DocumentWriter):
    """ELK text format; components without ports or children are not drawn."""

    def port(self, component: Component, port: Port) -> str:
        return f"port {port.basename} {{ ^port.side: {port_side(port)} label '{port.basename}' }}"

    def edge(self, edge: Edge) -> str:
        return f"edge {edge.source_port.name} -> {edge.target_port.name}"

    def component(self, component, ports, children, edges, level) -> Optional[list[str]]:
        if component.is_empty:
            return None
        outer = INDENT * level
        inner = INDENT * (level + 1)
        lines = [
            f"{outer}node {component.basename} {{",
            f"{inner}layout [ size: {NODE_WIDTH}, {node_height(component)} ]",
            f"{inner}portConstraints: FIXED_SIDE",
            f'{inner}label "{component.basename}"',
        ]
        lines.extend(inner + p for p in ports)
        for child_lines in children:
            lines.extend(child_lines)
        lines.extend(inner + e for e in edges)
        lines.append(f"{outer}}}")
        lines.append("")
        return lines

    def document(self, root: Optional[list[str]]) -> str:
        lines = ["algorithm: org.eclipse.elk.layered", "edgeRouting: ORTHOGONAL"]
        lines.extend(root or [])
        return "\n".join(lines) + "\n"
