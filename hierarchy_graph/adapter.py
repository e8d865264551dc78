"""
Introspection adapter interface and an in-memory snapshot implementation.

The collector never talks to a simulator directly; it queries an object that
satisfies :class:`IntrospectionAdapter`. Handles are opaque to the collector.

:class:`SnapshotAdapter` implements the protocol over a tree of
:class:`SimObject` records, which can be built in code or loaded from a
YAML/JSON snapshot file::

    objects:
      - name: top
        kind: sc_module
        type: Top
        children:
          - {name: clk, kind: sc_clock, bound: clk}
          - name: cpu
            kind: sc_module
            children:
              - {name: clk_i, kind: sc_in, bound: clk, alias: clk}
              - name: isock
                kind: tlm_initiator_socket
                faces:
                  - {name: isock, direction: output, bound: bus_fw}
                  - {name: isock_export, direction: input, bound: bus_bw}
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Hashable, Optional, Protocol, Sequence

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

# Direction assumed by the snapshot loader when a port entry omits it.
_INPUT_PORT_KINDS = {"sc_in", "sc_fifo_in", "sc_export"}


class IntrospectionAdapter(Protocol):
    """Read-only view of a live simulation object tree."""

    def top_level_objects(self) -> Sequence[Any]: ...

    def children(self, handle: Any) -> Sequence[Any]: ...

    def kind(self, handle: Any) -> str: ...

    def basename(self, handle: Any) -> str: ...

    def name(self, handle: Any) -> str: ...

    def type_name(self, handle: Any) -> str: ...

    def ports(self, handle: Any) -> Sequence[Any]: ...

    def direction(self, handle: Any) -> Optional[str]: ...

    def bound_identity(self, handle: Any) -> Optional[Hashable]: ...

    def alias_name(self, handle: Any) -> Optional[str]: ...


@dataclass(eq=False)
class SimObject:
    """One object of a captured simulation hierarchy."""
    basename: str
    kind: str
    type_name: str = ""
    name: str = ""
    children: list[SimObject] = field(default_factory=list)
    faces: list[SimObject] = field(default_factory=list)
    direction: Optional[str] = None
    identity: Optional[Hashable] = None
    alias: Optional[str] = None


# ---------------------------------------------------------------------- #
#  Builders                                                                #
# ---------------------------------------------------------------------- #

def module(basename: str, *children: SimObject, type_name: str = "", kind: str = "sc_module") -> SimObject:
    return SimObject(basename, kind, type_name=type_name or basename, children=list(children))


def port(basename: str, kind: str, direction: Optional[str], bound: Optional[Hashable] = None,
         alias: Optional[str] = None) -> SimObject:
    return SimObject(basename, kind, type_name=kind, direction=direction, identity=bound, alias=alias)


def clock(basename: str, bound: Optional[Hashable] = None) -> SimObject:
    return SimObject(basename, "sc_clock", type_name="sc_core::sc_clock",
                     identity=bound if bound is not None else basename)


def socket(basename: str, kind: str, forward: Optional[Hashable], backward: Optional[Hashable]) -> SimObject:
    """A TLM socket with its forward and backward faces."""
    target = "target" in kind
    fw_dir, bw_dir = ("input", "output") if target else ("output", "input")
    bw_name = f"{basename}_port" if target else f"{basename}_export"
    return SimObject(basename, kind, type_name=kind, faces=[
        SimObject(basename, kind, type_name=kind, direction=fw_dir, identity=forward),
        SimObject(bw_name, kind, type_name=kind, direction=bw_dir, identity=backward),
    ])


def leaf(basename: str, kind: str) -> SimObject:
    return SimObject(basename, kind, type_name=kind)


# ---------------------------------------------------------------------- #
#  Adapter                                                                 #
# ---------------------------------------------------------------------- #

class SnapshotAdapter:
    """Introspection adapter over an in-memory SimObject tree."""

    def __init__(self, objects: Sequence[SimObject]):
        self._objects = list(objects)
        for obj in self._objects:
            self._assign_names(obj, "")

    def _assign_names(self, obj: SimObject, prefix: str) -> None:
        if not obj.name:
            obj.name = f"{prefix}.{obj.basename}" if prefix else obj.basename
        for face in obj.faces:
            if not face.name:
                face.name = f"{prefix}.{face.basename}" if prefix else face.basename
        for child in obj.children:
            self._assign_names(child, obj.name)

    # IntrospectionAdapter
    def top_level_objects(self) -> list[SimObject]:
        return list(self._objects)

    def children(self, handle: SimObject) -> list[SimObject]:
        return list(handle.children)

    def kind(self, handle: SimObject) -> str:
        return handle.kind

    def basename(self, handle: SimObject) -> str:
        return handle.basename

    def name(self, handle: SimObject) -> str:
        return handle.name

    def type_name(self, handle: SimObject) -> str:
        return handle.type_name or handle.kind

    def ports(self, handle: SimObject) -> list[SimObject]:
        return list(handle.faces)

    def direction(self, handle: SimObject) -> Optional[str]:
        return handle.direction

    def bound_identity(self, handle: SimObject) -> Optional[Hashable]:
        return handle.identity

    def alias_name(self, handle: SimObject) -> Optional[str]:
        return handle.alias

    # ------------------------------------------------------------------ #
    #  Loading                                                             #
    # ------------------------------------------------------------------ #
    @classmethod
    def from_dict(cls, data: dict) -> "SnapshotAdapter":
        if not isinstance(data, dict) or not isinstance(data.get("objects"), list):
            raise ConfigError("Snapshot must be a mapping with an 'objects' list.")
        return cls([_object_from_dict(entry) for entry in data["objects"]])

    @classmethod
    def from_file(cls, path: str | Path) -> "SnapshotAdapter":
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Snapshot file not found: {path}")
        text = path.read_text()
        try:
            if path.suffix == ".json":
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot parse {path}: {e}") from e
        adapter = cls.from_dict(data)
        logger.info("Snapshot loaded from %s (%d top-level objects)", path, len(adapter._objects))
        return adapter


def _object_from_dict(entry: dict) -> SimObject:
    if not isinstance(entry, dict) or "name" not in entry or "kind" not in entry:
        raise ConfigError(f"Snapshot object needs 'name' and 'kind': {entry!r}")
    kind = entry["kind"]
    direction = entry.get("direction")
    if direction is None and "bound" in entry and not entry.get("faces"):
        direction = "input" if kind in _INPUT_PORT_KINDS else "output"
    obj = SimObject(
        basename=entry["name"],
        kind=kind,
        type_name=entry.get("type", kind),
        name=entry.get("path", ""),
        direction=direction,
        identity=entry.get("bound"),
        alias=entry.get("alias"),
    )
    if kind == "sc_clock" and obj.identity is None:
        obj.identity = obj.basename
    children = _entry_list(entry, "children")
    faces = _entry_list(entry, "faces")
    for face in faces:
        if not isinstance(face, dict):
            raise ConfigError(f"Socket face of '{entry['name']}' must be a mapping: {face!r}")
    obj.children = [_object_from_dict(c) for c in children]
    obj.faces = [_object_from_dict({"kind": kind, **f}) for f in faces]
    return obj


def _entry_list(entry: dict, key: str) -> list:
    # an empty YAML key loads as None
    value = entry.get(key) or []
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' of '{entry['name']}' must be a list, got {type(value).__name__}")
    return value
