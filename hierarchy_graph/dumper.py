"""
Structure dump entry points.

``dump_structure`` runs the whole pipeline once: scan the adapter, infer
pass-through ports, render the requested document and write it out.
``HierarchyDumper`` is the lifecycle glue a simulation host calls once
elaboration is complete.
"""

from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, TextIO, Union

from .adapter import IntrospectionAdapter
from .collector import Collector
from .config import DumperConfig
from .errors import DumpError
from .graph_manager import HierarchyGraph
from .inference import infer_implicit_ports
from .models import INTERNAL_PREFIX, DumpFormat
from .render import render

logger = logging.getLogger(__name__)

DUMPER_NAME = f"{INTERNAL_PREFIX}hierarchy_dumper{INTERNAL_PREFIX}"

Destination = Union[str, Path, TextIO]


def default_title() -> str:
    return Path(sys.argv[0]).name if sys.argv and sys.argv[0] else "sc_main"


def extract(
    adapter: IntrospectionAdapter,
    internal_prefix: str = INTERNAL_PREFIX,
    ignored_kinds: Iterable[str] = (),
) -> HierarchyGraph:
    """Scan and infer: the finished forest, ready for rendering."""
    graph = Collector(adapter, internal_prefix=internal_prefix, ignored_kinds=ignored_kinds).scan()
    infer_implicit_ports(graph)
    return graph


def dump_structure(
    destination: Destination,
    fmt: DumpFormat | str,
    adapter: IntrospectionAdapter,
    title: Optional[str] = None,
    internal_prefix: str = INTERNAL_PREFIX,
    ignored_kinds: Iterable[str] = (),
) -> HierarchyGraph:
    """Write the structure document of ``adapter``'s object tree to ``destination``.

    The document is rendered completely before the destination is touched.

    Raises:
        DumpError: If the destination cannot be written
        ValueError: If ``fmt`` is not a known format
    """
    fmt = DumpFormat.parse(fmt)
    graph = extract(adapter, internal_prefix=internal_prefix, ignored_kinds=ignored_kinds)
    text = render(graph, fmt, title or default_title())
    if isinstance(destination, (str, Path)):
        path = Path(destination)
        try:
            path.write_text(text)
        except OSError as e:
            raise DumpError(f"Cannot write structure to {path}: {e}") from e
        target = str(path)
    else:
        try:
            destination.write(text)
        except (OSError, ValueError) as e:
            raise DumpError(f"Cannot write structure to stream: {e}") from e
        target = getattr(destination, "name", "<stream>")
    logger.info("Simulation structure dumped to %s (%s, %d components)",
                target, fmt.value, len(graph))
    return graph


class HierarchyDumper:
    """Dumps the structure once, at start of simulation."""

    basename = DUMPER_NAME

    def __init__(
        self,
        filename: str | Path,
        fmt: DumpFormat | str,
        adapter: IntrospectionAdapter,
        title: Optional[str] = None,
        internal_prefix: str = INTERNAL_PREFIX,
        ignored_kinds: Iterable[str] = (),
    ):
        self.filename = str(filename)
        self.format = DumpFormat.parse(fmt)
        self.title = title
        self._adapter = adapter
        self._internal_prefix = internal_prefix
        self._ignored_kinds = list(ignored_kinds)
        self.graph: Optional[HierarchyGraph] = None
        self._dumped = False

    @classmethod
    def from_config(cls, config: DumperConfig, adapter: IntrospectionAdapter) -> "HierarchyDumper":
        return cls(config.file, config.format, adapter, title=config.title,
                   internal_prefix=config.internal_prefix, ignored_kinds=config.ignored_kinds)

    def start_of_simulation(self) -> bool:
        """Lifecycle hook; returns False if the dump could not be written.

        The dump runs at most once per dumper; later calls do nothing.
        """
        if not self.filename:
            return False
        if self._dumped:
            logger.debug("Structure already dumped to %s", self.filename)
            return False
        try:
            self.graph = dump_structure(
                self.filename, self.format, self._adapter, title=self.title,
                internal_prefix=self._internal_prefix, ignored_kinds=self._ignored_kinds,
            )
        except DumpError as e:
            logger.error("Structure dump abandoned: %s", e)
            return False
        self._dumped = True
        return True
