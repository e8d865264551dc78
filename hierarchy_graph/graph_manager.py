"""
Hierarchy graph container built on NetworkX.

Holds the Component/Port forest of one extraction run. Components and ports
are stored in id-keyed tables and the containment relation is a NetworkX
``DiGraph`` (parent -> child), so back-references (port owner, component
parent) are resolved by key instead of being stored as object references.
The graph also owns the id allocator: ids are unique within one graph and
mean nothing outside it.
"""

from __future__ import annotations
import logging
from typing import Hashable, Iterator, Optional

import networkx as nx

from .models import Component, Direction, Port

logger = logging.getLogger(__name__)


class HierarchyGraph:
    """Arena for the components and ports of one extraction run."""

    def __init__(self) -> None:
        self._graph = nx.DiGraph()
        self._components: dict[int, Component] = {}
        self._ports: dict[int, Port] = {}
        self._root: Optional[Component] = None
        self._last_id = 0

    # ------------------------------------------------------------------ #
    #  Id allocation                                                       #
    # ------------------------------------------------------------------ #
    def next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    @property
    def last_id(self) -> int:
        return self._last_id

    # ------------------------------------------------------------------ #
    #  Construction                                                        #
    # ------------------------------------------------------------------ #
    def add_component(
        self,
        name: str,
        basename: str,
        type_name: str,
        parent: Optional[Component] = None,
    ) -> Component:
        if parent is None and self._root is not None:
            raise ValueError(f"Graph already has a root '{self._root.name}'; cannot add '{name}'.")
        if parent is not None and self._components.get(parent.node_id) is not parent:
            raise KeyError(f"Parent component '{parent.name}' is not part of this graph.")
        component = Component(
            node_id=self.next_id(),
            name=name,
            basename=basename,
            type_name=type_name,
            parent_id=parent.node_id if parent is not None else None,
        )
        self._components[component.node_id] = component
        logger.debug("Added component: %s (id=%d)", name, component.node_id)
        self._graph.add_node(component.node_id, name=name)
        if parent is None:
            self._root = component
        else:
            parent.children.append(component)
            self._graph.add_edge(parent.node_id, component.node_id)
        return component

    def add_port(
        self,
        owner: Component,
        name: str,
        basename: str,
        direction: Direction,
        type_name: str,
        identity: Optional[Hashable] = None,
        alias: Optional[str] = None,
        synthesized: bool = False,
    ) -> Port:
        if self._components.get(owner.node_id) is not owner:
            raise KeyError(f"Owner component '{owner.name}' is not part of this graph.")
        port = Port(
            port_id=self.next_id(),
            name=name,
            basename=basename,
            direction=direction,
            type_name=type_name,
            owner_id=owner.node_id,
            identity=identity,
            alias=alias or None,
            synthesized=synthesized,
        )
        owner.ports.append(port)
        self._ports[port.port_id] = port
        return port

    # ------------------------------------------------------------------ #
    #  Lookups                                                             #
    # ------------------------------------------------------------------ #
    @property
    def root(self) -> Component:
        if self._root is None:
            raise RuntimeError("Hierarchy graph is empty – no root component.")
        return self._root

    def get_component(self, node_id: int) -> Component:
        if node_id not in self._components:
            raise KeyError(f"Component '{node_id}' not found.")
        return self._components[node_id]

    def get_port(self, port_id: int) -> Port:
        if port_id not in self._ports:
            raise KeyError(f"Port '{port_id}' not found.")
        return self._ports[port_id]

    def parent(self, component: Component) -> Optional[Component]:
        preds = list(self._graph.predecessors(component.node_id))
        return self._components[preds[0]] if preds else None

    def owner(self, port: Port) -> Component:
        return self._components[port.owner_id]

    def find(self, name: str) -> Component:
        """Look up a component by qualified name."""
        for component in self.components():
            if component.name == name:
                return component
        raise KeyError(f"Component '{name}' not found.")

    def components(self) -> Iterator[Component]:
        """All components in pre-order, children in introspection order."""
        if self._root is None:
            return
        stack = [self._root]
        while stack:
            component = stack.pop()
            yield component
            stack.extend(reversed(component.children))

    def ports(self) -> Iterator[Port]:
        for component in self.components():
            yield from component.ports

    def __len__(self) -> int:
        return len(self._components)

    # ------------------------------------------------------------------ #
    #  Graph queries                                                       #
    # ------------------------------------------------------------------ #
    @property
    def nx_graph(self) -> nx.DiGraph:
        return self._graph

    def is_tree(self) -> bool:
        if not self._components:
            return False
        return nx.is_arborescence(self._graph)

    def depth(self, component: Component) -> int:
        return nx.shortest_path_length(self._graph, self.root.node_id, component.node_id)

    def tree_path(self, source: Component, target: Component) -> list[Component]:
        """Components on the unique tree path from ``source`` to ``target``."""
        try:
            ids = nx.shortest_path(self._graph.to_undirected(as_view=True),
                                   source.node_id, target.node_id)
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return []
        return [self._components[i] for i in ids]

    def summary(self) -> dict:
        ports = list(self.ports())
        identities = {p.identity for p in ports if p.is_bound}
        return {
            "total_components": len(self._components),
            "total_ports": len(ports),
            "bound_ports": sum(1 for p in ports if p.is_bound),
            "synthesized_ports": sum(1 for p in ports if p.synthesized),
            "bound_identities": len(identities),
            "is_tree": self.is_tree(),
            "max_depth": max(
                nx.single_source_shortest_path_length(self._graph, self._root.node_id).values()
            ) if self._root is not None else 0,
        }
