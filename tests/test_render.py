import json

import pytest

from hierarchy_graph import DumpFormat, extract, render
from hierarchy_graph.adapter import SnapshotAdapter, module, port
from hierarchy_graph.writers import node_height


@pytest.fixture
def with_empty():
    """The two-level scenario plus an empty component E."""
    return SnapshotAdapter([
        module(
            "R",
            module("A", module("A1", port("x", "sc_out", "output", bound="I"))),
            module("B", port("y", "sc_in", "input", bound="I")),
            module("E"),
        )
    ])


def _child(node, name, key="children"):
    return next(c for c in node[key] if c["labels"][0]["text"] == name)


@pytest.mark.parametrize("fmt", [f for f in DumpFormat if f is not DumpFormat.DBGJSON])
def test_output_is_deterministic(platform, fmt):
    first = render(extract(platform), fmt, "demo")
    second = render(extract(platform), fmt, "demo")

    assert first == second


def test_elk_json_document(with_empty):
    graph = extract(with_empty)

    doc = json.loads(render(graph, DumpFormat.ELKJSON, "sim"))

    assert doc["id"] == "0"
    assert doc["labels"] == [{"text": "sim"}]
    assert doc["layoutOptions"] == {"algorithm": "layered"}
    assert doc["edges"] == []
    root = doc["children"][0]
    assert root["id"] == "1"
    assert (root["width"], root["height"]) == (50, 80)
    assert [c["labels"][0]["text"] for c in root["children"]] == ["A", "B", "E"]

    a = _child(root, "A")
    assert a["ports"] == [{
        "id": "8",
        "labels": [{"text": "x"}],
        "width": 6,
        "height": 6,
        "layoutOptions": {"port.side": "EAST"},
    }]
    # A's edge is generated before R's: ids continue after the last port id
    assert a["edges"] == [{"id": "9", "sources": ["8"], "targets": ["4"]}]
    assert root["edges"] == [{"id": "10", "sources": ["8"], "targets": ["6"]}]

    b = _child(root, "B")
    assert b["ports"][0]["layoutOptions"] == {"port.side": "WEST"}
    assert "type" not in b["ports"][0]
    assert "interface" not in b["ports"][0]

    empty = _child(root, "E")
    assert empty["ports"] == [] and empty["children"] == [] and empty["edges"] == []


def test_debug_json_exposes_types_and_identities(two_level):
    doc = json.loads(render(extract(two_level), DumpFormat.DBGJSON))

    root = doc["children"][0]
    assert root["topmodule"] is True
    assert root["name"] == "R"
    a = root["children"][0]
    assert a["topmodule"] is False
    port = a["ports"][0]
    assert port["type"] == "sc_out"
    assert port["input"] is False
    assert port["interface"] == "I"
    assert port["synthesized"] is True


def test_d3_json_document(two_level):
    doc = json.loads(render(extract(two_level), DumpFormat.D3JSON, "sim"))

    assert doc["hwMeta"] == {"cls": None, "maxId": 65536, "name": "sim"}
    assert doc["properties"]["org.eclipse.elk.portConstraints"] == "FIXED_ORDER"
    root = doc["children"][0]
    assert "children" in root and "edges" in root
    assert root["hwMeta"]["name"] == "R"
    assert root["hwMeta"]["maxId"] == 9
    a = root["children"][0]
    assert "_children" in a and "_edges" in a
    assert a["hwMeta"]["cls"] == "A"
    assert a["ports"][0]["direction"] == "OUTPUT"
    assert a["ports"][0]["properties"] == {"side": "EAST"}
    assert root["edges"] == [{
        "id": "9",
        "source": "2",
        "sourcePort": "7",
        "target": "5",
        "targetPort": "6",
        "hwMeta": {"name": "x_to_y"},
    }]


def test_elk_text_document(with_empty):
    text = render(extract(with_empty), DumpFormat.ELKT)
    lines = text.splitlines()

    assert lines[:2] == ["algorithm: org.eclipse.elk.layered", "edgeRouting: ORTHOGONAL"]
    assert "node R {" in lines
    assert "    layout [ size: 50, 80 ]" in lines
    assert "        port x { ^port.side: EAST label 'x' }" in lines
    assert "        edge R.A.x -> R.A.A1.x" in lines
    assert "    edge R.A.x -> R.B.y" in lines
    assert not any("node E" in line for line in lines)


def test_empty_component_stays_in_json(with_empty):
    for fmt in (DumpFormat.ELKJSON, DumpFormat.DBGJSON):
        root = json.loads(render(extract(with_empty), fmt))["children"][0]
        assert "E" in [c["labels"][0]["text"] for c in root["children"]]


def test_mermaid_document(with_empty):
    text = render(extract(with_empty), DumpFormat.MERMAID, "sim")

    assert text.startswith("---\ntitle: sim\n---\ngraph LR\n")
    assert 'subgraph c1["R"]' in text
    assert 'p8[["x"]]' in text
    assert 'p6(["y"])' in text
    assert 'c7["E"]' in text
    assert "p8 -.->|x_to_x| p4" in text
    assert "p8 -->|x_to_y| p6" in text
    assert "class p8 synthesized" in text


def test_render_accepts_format_names(two_level):
    graph = extract(two_level)

    assert render(graph, "elkt") == render(graph, DumpFormat.ELKT)
    with pytest.raises(ValueError, match="Unknown dump format"):
        render(graph, "svg")


def test_node_height_grows_with_ports():
    adapter = SnapshotAdapter([module("R", *[port(f"i{n}", "sc_in", "input") for n in range(5)])])
    graph = extract(adapter)

    assert node_height(graph.root) == 100
