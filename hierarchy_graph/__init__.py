"""Simulation Hierarchy Graph – Public API."""

from .models import (
    Component, Port, Edge, Direction, EdgeKind, NodeClass, DumpFormat,
    INTERNAL_PREFIX, MODULE_KINDS, PORT_KINDS, PORT_PAIR_KINDS, IGNORED_KINDS,
)
from .errors import HierarchyGraphError, DumpError, ConfigError
from .graph_manager import HierarchyGraph
from .adapter import IntrospectionAdapter, SimObject, SnapshotAdapter
from .collector import Collector, classify, scan
from .inference import infer_implicit_ports, tree_path
from .edges import derive_edges
from .render import render
from .visualize_mermaid import MermaidWriter
from .structure_validator import StructureValidator, ValidationReport
from .config import DumperConfig, load_config
from .dumper import HierarchyDumper, dump_structure, extract

__all__ = [
    "Component", "Port", "Edge", "Direction", "EdgeKind", "NodeClass", "DumpFormat",
    "INTERNAL_PREFIX", "MODULE_KINDS", "PORT_KINDS", "PORT_PAIR_KINDS", "IGNORED_KINDS",
    "HierarchyGraphError", "DumpError", "ConfigError",
    "HierarchyGraph",
    "IntrospectionAdapter", "SimObject", "SnapshotAdapter",
    "Collector", "classify", "scan",
    "infer_implicit_ports", "tree_path",
    "derive_edges",
    "render", "MermaidWriter",
    "StructureValidator", "ValidationReport",
    "DumperConfig", "load_config",
    "HierarchyDumper", "dump_structure", "extract",
]
