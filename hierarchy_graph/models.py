"""
Data Models for Simulation Hierarchy Graphs.

A simulation model is a tree of components (modules) that own ports. Ports
are connected by being bound to the same channel, which the introspection
layer reports as an opaque *bound identity*. This module defines:

  - Component / Port  : the normalized forest built by the collector
  - Edge              : a level-local connection derived for rendering
  - NodeClass         : closed classification of introspected object kinds
  - DumpFormat        : the output documents the renderer can produce

and the plain data tables that drive kind classification.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable, Optional


# ====================================================================== #
#  Enumerations                                                            #
# ====================================================================== #

class Direction(str, Enum):
    INPUT = "input"
    OUTPUT = "output"


class NodeClass(Enum):
    """What the collector does with an introspected object."""
    COMPOSITE = "composite"
    IMPLICIT_PORT_LEAF = "implicit_port_leaf"
    PORT_LEAF = "port_leaf"
    COMPOSITE_PORT_PAIR = "composite_port_pair"
    IGNORED = "ignored"
    UNKNOWN = "unknown"


class EdgeKind(Enum):
    PARENT_CHILD = "parent_child"
    CHILD_CHILD = "child_child"


class DumpFormat(Enum):
    DBGJSON = "dbgjson"
    ELKJSON = "elkjson"
    D3JSON = "d3json"
    ELKT = "elkt"
    MERMAID = "mermaid"

    @classmethod
    def parse(cls, value: "str | DumpFormat") -> "DumpFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown dump format '{value}' (expected one of: {choices})") from None


# ====================================================================== #
#  Kind tables                                                             #
# ====================================================================== #
# Kind strings as reported by the introspection layer. Classification is a
# lookup in these tables, see collector.classify().

INTERNAL_PREFIX = "$$$"

MODULE_KINDS: frozenset[str] = frozenset({
    "sc_module",
    "uvm::uvm_root",
    "uvm::uvm_test",
    "uvm::uvm_env",
    "uvm::uvm_component",
    "uvm::uvm_agent",
    "uvm::uvm_monitor",
    "uvm::uvm_scoreboard",
    "uvm::uvm_driver",
    "uvm::uvm_sequencer",
})

IMPLICIT_PORT_KINDS: frozenset[str] = frozenset({
    "sc_clock",
})

PORT_KINDS: frozenset[str] = frozenset({
    "sc_in",
    "sc_out",
    "sc_inout",
    "sc_port",
    "sc_fifo_in",
    "sc_fifo_out",
    "sc_export",
    "tlm_analysis_port",
})

# Socket kind -> suffixes of the sibling objects that implement the socket.
# Siblings named <basename><suffix>... are skipped once the socket is scanned.
PORT_PAIR_KINDS: dict[str, tuple[str, ...]] = {
    "tlm_target_socket": ("_port", "_port_0"),
    "tlm_initiator_socket": ("_export", "_export_0"),
    "multi_passthrough_target_socket": ("_port", "_port_0"),
    "multi_passthrough_initiator_socket": ("_export", "_export_0"),
}

IGNORED_KINDS: frozenset[str] = frozenset({
    "sc_thread_process",
    "sc_method_process",
    "sc_signal",
    "sc_object",
    "sc_fifo",
    "sc_mutex",
    "sc_vector",
    "sc_semaphore_ordered",
    "sc_variable",
    "sc_prim_channel",
    "tlm_signal",
    "tlm_fifo",
    "sc_register",
    "sc_buffer",
})


# ====================================================================== #
#  Data classes                                                            #
# ====================================================================== #

@dataclass(eq=False)
class Port:
    """A directional attachment point owned by exactly one Component."""
    port_id: int
    name: str                     # qualified, e.g. "top.cpu.irq_o"
    basename: str
    direction: Direction
    type_name: str
    owner_id: int
    identity: Optional[Hashable] = None   # None = unbound
    alias: Optional[str] = None           # name of the bound signal, if any
    synthesized: bool = False

    @property
    def is_input(self) -> bool:
        return self.direction is Direction.INPUT

    @property
    def is_bound(self) -> bool:
        return self.identity is not None

    def connects_to(self, other: "Port") -> bool:
        return self.is_bound and other.is_bound and self.identity == other.identity


@dataclass(eq=False)
class Component:
    """A structural unit of the inspected model.

    ``parent_id`` is a key into the owning HierarchyGraph, not a reference;
    the graph resolves it.
    """
    node_id: int
    name: str
    basename: str
    type_name: str
    parent_id: Optional[int] = None
    children: list[Component] = field(default_factory=list)
    ports: list[Port] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def is_empty(self) -> bool:
        return not self.ports and not self.children

    def port_for(self, identity: Hashable) -> Optional[Port]:
        """Return the first port bound to ``identity``, if any."""
        if identity is None:
            return None
        return next((p for p in self.ports if p.identity == identity), None)

    def port_counts(self) -> tuple[int, int]:
        num_in = sum(1 for p in self.ports if p.is_input)
        return num_in, len(self.ports) - num_in


@dataclass(frozen=True, eq=False)
class Edge:
    """A level-local connection between two ports."""
    source: Component
    source_port: Port
    target: Component
    target_port: Port
    kind: EdgeKind

    @property
    def label(self) -> str:
        if self.source_port.alias:
            return self.source_port.alias
        if self.target_port.alias:
            return self.target_port.alias
        return f"{self.source_port.basename}_to_{self.target_port.basename}"
