from hierarchy_graph import EdgeKind, derive_edges, extract, scan
from hierarchy_graph.adapter import SnapshotAdapter, module, port


def test_two_level_scenario_edges(two_level):
    graph = extract(two_level)
    a = graph.find("R.A")
    synth = a.ports[0]

    root_edges = derive_edges(graph.root)
    assert len(root_edges) == 1
    edge = root_edges[0]
    assert edge.kind is EdgeKind.CHILD_CHILD
    assert (edge.source.basename, edge.target.basename) == ("A", "B")
    assert edge.source_port is synth
    assert edge.target_port.name == "R.B.y"

    a_edges = derive_edges(a)
    assert len(a_edges) == 1
    assert a_edges[0].kind is EdgeKind.PARENT_CHILD
    assert a_edges[0].source_port is synth
    assert a_edges[0].target_port.name == "R.A.A1.x"


def test_without_inference_cross_level_binding_is_invisible(two_level):
    graph = scan(two_level)

    assert all(derive_edges(c) == [] for c in graph.components())


def test_self_loop_on_one_component_draws_nothing():
    adapter = SnapshotAdapter([module(
        "R",
        module("A", port("o", "sc_out", "output", bound="L"), port("i", "sc_in", "input", bound="L")),
    )])
    graph = extract(adapter)

    assert derive_edges(graph.root) == []
    assert derive_edges(graph.find("R.A")) == []


def test_no_self_edges(platform):
    graph = extract(platform)

    for component in graph.components():
        for edge in derive_edges(component):
            assert edge.source_port is not edge.target_port


def test_child_to_child_edges_only_from_outputs_to_inputs(platform):
    graph = extract(platform)

    pairs = [(e.source_port.name, e.target_port.name) for e in derive_edges(graph.root)]

    assert pairs == [
        ("top.clk.clk", "top.cpu.clk_i"),
        ("top.clk.clk", "top.periph.clk_i"),
        ("top.cpu.isock", "top.periph.tsock"),
        ("top.periph.tsock_port", "top.cpu.isock_export"),
        ("top.periph.irq_o", "top.cpu.irq_i"),
    ]


def test_parent_to_child_edges_use_any_direction(platform):
    graph = extract(platform)

    edges = derive_edges(graph.find("top.periph"))

    assert [(e.source_port.name, e.target_port.name, e.kind) for e in edges] == [
        ("top.periph.clk_i", "top.periph.uart.clk_i", EdgeKind.PARENT_CHILD),
        ("top.periph.irq_o", "top.periph.uart.irq_o", EdgeKind.PARENT_CHILD),
    ]


def test_fan_out_produces_one_edge_per_receiver():
    adapter = SnapshotAdapter([module(
        "R",
        module("A", port("x", "sc_out", "output", bound="I")),
        module("B", port("y", "sc_in", "input", bound="I")),
        module("C", port("z", "sc_in", "input", bound="I")),
    )])
    graph = extract(adapter)

    targets = [e.target.basename for e in derive_edges(graph.root)]

    assert targets == ["B", "C"]


def test_edge_label_prefers_aliases():
    adapter = SnapshotAdapter([module(
        "R",
        module("A", port("x", "sc_out", "output", bound="I", alias="data")),
        module("B", port("y", "sc_in", "input", bound="I")),
        module("C", port("u", "sc_out", "output", bound="J")),
        module("D", port("v", "sc_in", "input", bound="J", alias="ctrl")),
        module("E", port("s", "sc_out", "output", bound="K")),
        module("F", port("t", "sc_in", "input", bound="K")),
    )])
    graph = extract(adapter)

    assert [e.label for e in derive_edges(graph.root)] == ["data", "ctrl", "s_to_t"]
