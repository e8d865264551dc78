"""
Structure Validator for Extracted Hierarchy Graphs.

Checks that a finished (scanned + inferred) graph is fit for block-diagram
rendering:

Check 1 – TREE:
  "Is the containment a single-rooted tree?" Exactly one component without
  a parent, every other component listed exactly once as somebody's child.

Check 2 – IDS:
  "Are component and port ids unique within the run?"

Check 3 – PATH COVERAGE:
  "Can every binding be drawn with level-local wires?" For every driver /
  receiver pair sharing a bound identity, each component strictly between
  the two owners, except the common ancestor where the wire turns, must own
  a port with that identity.

Check 4 – EDGES:
  "Does any derived edge connect a port to itself?"

Bindings with only drivers or only receivers are reported as warnings.
"""

from __future__ import annotations
import json
import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from .edges import derive_edges
from .graph_manager import HierarchyGraph
from .inference import build_registry

logger = logging.getLogger(__name__)


class Severity(str):
    PASS = "PASS"
    WARNING = "WARNING"
    FAIL = "FAIL"


@dataclass
class ValidationItem:
    severity: str           # PASS, WARNING, FAIL
    category: str           # "tree", "ids", "path_coverage", "edges", "binding"
    subject: str            # qualified name of the component/port checked
    message: str = ""
    details: dict = field(default_factory=dict)


@dataclass
class ValidationReport:
    timestamp: float = field(default_factory=time.time)
    items: list[ValidationItem] = field(default_factory=list)

    @property
    def passes(self) -> list[ValidationItem]:
        return [i for i in self.items if i.severity == Severity.PASS]

    @property
    def warnings(self) -> list[ValidationItem]:
        return [i for i in self.items if i.severity == Severity.WARNING]

    @property
    def failures(self) -> list[ValidationItem]:
        return [i for i in self.items if i.severity == Severity.FAIL]

    @property
    def is_valid(self) -> bool:
        return len(self.failures) == 0

    def summary(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "overall_valid": self.is_valid,
            "total_checks": len(self.items),
            "passes": len(self.passes),
            "warnings": len(self.warnings),
            "failures": len(self.failures),
            "failure_details": [
                {"category": f.category, "subject": f.subject, "message": f.message}
                for f in self.failures
            ],
        }

    def save(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps(self.summary(), indent=2))

    def print_report(self) -> None:
        s = self.summary()
        print("\n" + "=" * 72)
        print("  STRUCTURE VALIDATION REPORT")
        print("=" * 72)
        print(f"  Status:   {'VALID' if s['overall_valid'] else 'INVALID'}")
        print(f"  Checks:   {s['total_checks']} total | "
              f"{s['passes']} pass | {s['warnings']} warn | {s['failures']} fail")
        for fd in s["failure_details"]:
            print(f"    FAIL [{fd['category']}] {fd['subject']}")
            print(f"      {fd['message']}")
        for w in self.warnings:
            print(f"    WARN [{w.category}] {w.subject}")
            print(f"      {w.message}")
        print("=" * 72 + "\n")


class StructureValidator:
    """Validates a hierarchy graph after implicit port inference."""

    def __init__(self, graph: HierarchyGraph):
        self._graph = graph

    def validate(self) -> ValidationReport:
        report = ValidationReport()
        self._check_tree(report)
        self._check_ids(report)
        self._check_path_coverage(report)
        self._check_edges(report)
        logger.info("Structure validation complete: %d checks, %d failures",
                    len(report.items), len(report.failures))
        return report

    # ------------------------------------------------------------------ #
    #  Check 1: tree                                                       #
    # ------------------------------------------------------------------ #
    def _check_tree(self, report: ValidationReport) -> None:
        components = list(self._graph.components())
        roots = [c for c in components if c.is_root]
        listed = Counter(child.node_id for c in components for child in c.children)
        problems = []
        if len(roots) != 1:
            problems.append(f"{len(roots)} root components")
        for c in components:
            if not c.is_root and listed[c.node_id] != 1:
                problems.append(f"'{c.name}' listed {listed[c.node_id]} times as a child")
        if not self._graph.is_tree():
            problems.append("containment graph is not an arborescence")
        root_name = self._graph.root.name
        if problems:
            report.items.append(ValidationItem(
                severity=Severity.FAIL, category="tree", subject=root_name,
                message="; ".join(problems),
            ))
        else:
            report.items.append(ValidationItem(
                severity=Severity.PASS, category="tree", subject=root_name,
                message=f"{len(components)} components form a tree",
            ))

    # ------------------------------------------------------------------ #
    #  Check 2: ids                                                        #
    # ------------------------------------------------------------------ #
    def _check_ids(self, report: ValidationReport) -> None:
        ids = Counter(c.node_id for c in self._graph.components())
        ids.update(p.port_id for p in self._graph.ports())
        duplicates = sorted(i for i, n in ids.items() if n > 1)
        report.items.append(ValidationItem(
            severity=Severity.FAIL if duplicates else Severity.PASS,
            category="ids",
            subject=self._graph.root.name,
            message=(f"Duplicate ids: {duplicates}" if duplicates
                     else f"{len(ids)} unique ids"),
        ))

    # ------------------------------------------------------------------ #
    #  Check 3: path coverage                                              #
    # ------------------------------------------------------------------ #
    def _check_path_coverage(self, report: ValidationReport) -> None:
        graph = self._graph
        for identity, ports in build_registry(graph).items():
            drivers = [p for p in ports if not p.is_input]
            receivers = [p for p in ports if p.is_input]
            if len(ports) > 1 and (not drivers or not receivers):
                report.items.append(ValidationItem(
                    severity=Severity.WARNING, category="binding", subject=ports[0].name,
                    message=(f"Binding {identity!r} has {len(drivers)} drivers and "
                             f"{len(receivers)} receivers; nothing will be drawn for it."),
                ))
            for driver in drivers:
                for receiver in receivers:
                    path = graph.tree_path(graph.owner(driver), graph.owner(receiver))
                    if not path:
                        continue
                    depths = [graph.depth(c) for c in path]
                    turning = path[depths.index(min(depths))]
                    missing = [c.name for c in path[1:-1]
                               if c is not turning and c.port_for(identity) is None]
                    subject = f"{driver.name} -> {receiver.name}"
                    if missing:
                        report.items.append(ValidationItem(
                            severity=Severity.FAIL, category="path_coverage", subject=subject,
                            message=f"No port for the binding on: {', '.join(missing)}",
                            details={"missing": missing},
                        ))
                    else:
                        report.items.append(ValidationItem(
                            severity=Severity.PASS, category="path_coverage", subject=subject,
                            message=f"Covered over {len(path)} components",
                        ))

    # ------------------------------------------------------------------ #
    #  Check 4: edges                                                      #
    # ------------------------------------------------------------------ #
    def _check_edges(self, report: ValidationReport) -> None:
        for component in self._graph.components():
            self_edges = [e for e in derive_edges(component) if e.source_port is e.target_port]
            if self_edges:
                report.items.append(ValidationItem(
                    severity=Severity.FAIL, category="edges", subject=component.name,
                    message=f"{len(self_edges)} edges connect a port to itself",
                ))
