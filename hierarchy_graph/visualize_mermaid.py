"""
Mermaid Diagram Writer for Simulation Hierarchies.

Produces Mermaid-syntax flowcharts that can be rendered in GitHub/GitLab
markdown or pasted into mermaid.live:

  - one subgraph per component (empty components become plain nodes)
  - one node per port, shaped by direction
  - parent/child wires dotted, child/child wires solid
  - pass-through ports created by inference highlighted
"""

from __future__ import annotations
import logging
from typing import Optional

from .models import Component, Direction, Edge, EdgeKind, Port
from .writers import INDENT, DocumentWriter

logger = logging.getLogger(__name__)

MERMAID_SHAPES = {
    Direction.INPUT: ("([", "])"),
    Direction.OUTPUT: ("[[", "]]"),
}

EDGE_STYLE_MAP = {
    EdgeKind.PARENT_CHILD: "-.->",
    EdgeKind.CHILD_CHILD: "-->",
}

SYNTHESIZED_STYLE = "fill:#F39C12,stroke:#E67E22,color:#fff,stroke-dasharray:5"


def _sanitise(text: str) -> str:
    """Sanitise text for Mermaid labels."""
    return text.replace('"', "'").replace("\n", " ")


class MermaidWriter(DocumentWriter):

    def __init__(self, title, ids, direction: str = "LR"):
        super().__init__(title, ids)
        self.direction = direction
        self._edges: list[str] = []
        self._synthesized: list[str] = []

    def port(self, component: Component, port: Port) -> str:
        left, right = MERMAID_SHAPES[port.direction]
        if port.synthesized:
            self._synthesized.append(f"p{port.port_id}")
        return f'p{port.port_id}{left}"{_sanitise(port.basename)}"{right}'

    def edge(self, edge: Edge) -> str:
        arrow = EDGE_STYLE_MAP[edge.kind]
        line = f"p{edge.source_port.port_id} {arrow}|{_sanitise(edge.label)}| p{edge.target_port.port_id}"
        self._edges.append(line)
        return line

    def component(self, component, ports, children, edges, level) -> list[str]:
        label = _sanitise(component.basename)
        if component.is_empty:
            return [f'{INDENT * (level + 1)}c{component.node_id}["{label}"]']
        outer = INDENT * (level + 1)
        inner = INDENT * (level + 2)
        lines = [f'{outer}subgraph c{component.node_id}["{label}"]',
                 f"{inner}direction {self.direction}"]
        lines.extend(inner + p for p in ports)
        for child_lines in children:
            lines.extend(child_lines)
        lines.append(f"{outer}end")
        return lines

    def document(self, root: Optional[list[str]]) -> str:
        lines: list[str] = []
        lines.append("---")
        lines.append(f"title: {self.title}")
        lines.append("---")
        lines.append(f"graph {self.direction}")
        lines.append("")
        lines.extend(root or [])
        lines.append("")
        for line in self._edges:
            lines.append(f"{INDENT}{line}")
        if self._synthesized:
            lines.append("")
            lines.append(f"{INDENT}%% Styling")
            lines.append(f"{INDENT}classDef synthesized {SYNTHESIZED_STYLE}")
            lines.append(f"{INDENT}class {','.join(self._synthesized)} synthesized")
        logger.debug("Mermaid document: %d edges, %d pass-through ports",
                     len(self._edges), len(self._synthesized))
        return "\n".join(lines) + "\n"
