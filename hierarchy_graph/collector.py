"""
Object-tree collector.

Walks the introspection adapter once and builds a HierarchyGraph:

  - modules become Components and are descended into
  - clocks become Components with one output Port for the generated signal
  - ports and exports become Ports of the enclosing Component
  - sockets become two Ports (one per face) of the enclosing Component; the
    sibling objects that implement a socket are skipped
  - bookkeeping objects (processes, channels, ...) are ignored
  - anything else is reported and skipped

Objects whose basename starts with the internal marker are never looked at,
which keeps helper modules (the dumper itself) out of the picture.
"""

from __future__ import annotations
import logging
from typing import Any, Hashable, Iterable, Optional

from .adapter import IntrospectionAdapter
from .graph_manager import HierarchyGraph
from .models import (
    Component, Direction, NodeClass,
    INTERNAL_PREFIX, MODULE_KINDS, IMPLICIT_PORT_KINDS, PORT_KINDS,
    PORT_PAIR_KINDS, IGNORED_KINDS,
)

logger = logging.getLogger(__name__)

INDENT = "    "
ROOT_NAME = "sc_main"
ROOT_TYPE = "sc_main()"


def classify(kind: str, ignored_kinds: Iterable[str] = IGNORED_KINDS) -> NodeClass:
    if kind in MODULE_KINDS:
        return NodeClass.COMPOSITE
    if kind in IMPLICIT_PORT_KINDS:
        return NodeClass.IMPLICIT_PORT_LEAF
    if kind in PORT_PAIR_KINDS:
        return NodeClass.COMPOSITE_PORT_PAIR
    if kind in PORT_KINDS:
        return NodeClass.PORT_LEAF
    if kind in ignored_kinds:
        return NodeClass.IGNORED
    return NodeClass.UNKNOWN


def _parse_direction(value: Any) -> Optional[Direction]:
    if isinstance(value, Direction):
        return value
    try:
        return Direction(str(value).lower())
    except ValueError:
        return None


class Collector:
    """Builds the component/port forest of one extraction run."""

    def __init__(
        self,
        adapter: IntrospectionAdapter,
        internal_prefix: str = INTERNAL_PREFIX,
        ignored_kinds: Iterable[str] = (),
    ):
        self._adapter = adapter
        self._prefix = internal_prefix
        self._ignored = frozenset(IGNORED_KINDS) | frozenset(ignored_kinds)
        self._graph = HierarchyGraph()
        self.warnings: list[str] = []

    def scan(self) -> HierarchyGraph:
        """Scan the adapter's object tree into a fresh HierarchyGraph."""
        self._graph = HierarchyGraph()
        self.warnings = []
        adapter = self._adapter
        tops = list(adapter.top_level_objects())
        if (len(tops) == 1 and adapter.kind(tops[0]) in MODULE_KINDS
                and not self._is_internal(tops[0])):
            top = tops[0]
            logger.debug("%s(%s)", adapter.name(top), adapter.kind(top))
            root = self._graph.add_component(
                adapter.name(top), adapter.basename(top), adapter.type_name(top))
            self._scan_children(adapter.children(top), root, 1)
        else:
            logger.debug("%s ( function %s() )", ROOT_NAME, ROOT_NAME)
            root = self._graph.add_component(ROOT_NAME, ROOT_NAME, ROOT_TYPE)
            self._scan_children(tops, root, 1)
        logger.info("Scanned %d components, %d ports",
                    len(self._graph), sum(1 for _ in self._graph.ports()))
        return self._graph

    # ------------------------------------------------------------------ #
    #  Traversal                                                           #
    # ------------------------------------------------------------------ #
    def _is_internal(self, handle: Any) -> bool:
        return self._adapter.basename(handle).startswith(self._prefix)

    def _scan_children(self, children: Iterable[Any], current: Component, level: int) -> None:
        keep_outs: set[str] = set()
        for child in children:
            if self._is_internal(child):
                continue
            basename = self._adapter.basename(child)
            if any(len(basename) > len(stem) and basename.startswith(stem)
                   for stem in keep_outs):
                continue
            keep_outs.update(self._scan_object(child, current, level))

    def _scan_object(self, handle: Any, current: Component, level: int) -> list[str]:
        """Scan one object into ``current``; return name stems to skip among its siblings."""
        adapter = self._adapter
        kind = adapter.kind(handle)
        name = adapter.name(handle)
        basename = adapter.basename(handle)
        logger.debug("%s%s(%s), id=%d", INDENT * level, name, kind, self._graph.last_id + 1)
        node_class = classify(kind, self._ignored)

        if node_class is NodeClass.COMPOSITE:
            component = self._graph.add_component(name, basename, adapter.type_name(handle), current)
            self._scan_children(adapter.children(handle), component, level + 1)
        elif node_class is NodeClass.IMPLICIT_PORT_LEAF:
            component = self._graph.add_component(name, basename, adapter.type_name(handle), current)
            self._graph.add_port(
                component, f"{name}.{basename}", basename, Direction.OUTPUT, kind,
                identity=self._identity(handle, name), alias=basename,
            )
        elif node_class is NodeClass.PORT_LEAF:
            self._add_port(handle, current, kind)
        elif node_class is NodeClass.COMPOSITE_PORT_PAIR:
            faces = list(adapter.ports(handle))
            if not faces:
                self._warn(f"socket without faces ({name})")
            for face in faces:
                self._add_port(face, current, kind)
            return [basename + suffix for suffix in PORT_PAIR_KINDS[kind]]
        elif node_class is NodeClass.UNKNOWN:
            self._warn(f"object not known ({kind})")
        return []

    def _add_port(self, handle: Any, current: Component, kind: str) -> None:
        adapter = self._adapter
        direction = _parse_direction(adapter.direction(handle))
        if direction is None:
            self._warn(f"port {adapter.name(handle)} has invalid direction "
                       f"'{adapter.direction(handle)}', skipped")
            return
        self._graph.add_port(
            current, adapter.name(handle), adapter.basename(handle), direction, kind,
            identity=self._identity(handle, adapter.name(handle)),
            alias=adapter.alias_name(handle),
        )

    def _identity(self, handle: Any, name: str) -> Optional[Hashable]:
        identity = self._adapter.bound_identity(handle)
        if identity is None:
            return None
        try:
            hashable = isinstance(identity, Hashable) and hash(identity) is not None
        except TypeError:
            hashable = False
        if not hashable:
            self._warn(f"port {name} has unhashable bound identity, treated as unbound")
            return None
        return identity

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        logger.warning(message)


def scan(adapter: IntrospectionAdapter, **kwargs) -> HierarchyGraph:
    """Convenience wrapper: ``Collector(adapter, **kwargs).scan()``."""
    return Collector(adapter, **kwargs).scan()
