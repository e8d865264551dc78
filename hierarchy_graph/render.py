"""Structure renderer: one tree walk, one writer per output format."""

from __future__ import annotations
import logging
from typing import Optional

from .edges import derive_edges
from .graph_manager import HierarchyGraph
from .models import Component, DumpFormat
from .visualize_mermaid import MermaidWriter
from .writers import (
    DebugJsonWriter, D3JsonWriter, DocumentWriter, ElkJsonWriter, ElkTextWriter, IdAllocator,
)

logger = logging.getLogger(__name__)

WRITERS: dict[DumpFormat, type[DocumentWriter]] = {
    DumpFormat.DBGJSON: DebugJsonWriter,
    DumpFormat.ELKJSON: ElkJsonWriter,
    DumpFormat.D3JSON: D3JsonWriter,
    DumpFormat.ELKT: ElkTextWriter,
    DumpFormat.MERMAID: MermaidWriter,
}


def _walk(component: Component, writer: DocumentWriter, level: int) -> Optional[object]:
    ports = [writer.port(component, p) for p in component.ports]
    children = []
    for child in component.children:
        node = _walk(child, writer, level + 1)
        if node is not None:
            children.append(node)
    edges = [writer.edge(e) for e in derive_edges(component)]
    return writer.component(component, ports, children, edges, level)


def render(graph: HierarchyGraph, fmt: DumpFormat | str, title: str = "sc_main") -> str:
    """Serialize ``graph`` into the document for ``fmt``.

    Edge ids continue after the graph's last component/port id, so the
    output depends only on the graph.
    """
    fmt = DumpFormat.parse(fmt)
    writer = WRITERS[fmt](title, IdAllocator(graph.last_id))
    text = writer.document(_walk(graph.root, writer, 0))
    logger.debug("Rendered %s document (%d bytes)", fmt.value, len(text))
    return text
