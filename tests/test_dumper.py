import io
import json
import logging

import pytest

from hierarchy_graph import (
    ConfigError, DumpError, DumpFormat, DumperConfig, HierarchyDumper, SnapshotAdapter,
    dump_structure, load_config,
)


def test_dump_to_file(tmp_path, two_level):
    out = tmp_path / "structure.json"

    graph = dump_structure(out, DumpFormat.ELKJSON, two_level, title="sim")

    doc = json.loads(out.read_text())
    assert doc["labels"] == [{"text": "sim"}]
    assert graph.summary()["synthesized_ports"] == 1


def test_dump_to_stream(two_level):
    buffer = io.StringIO()

    dump_structure(buffer, "elkt", two_level)

    assert buffer.getvalue().startswith("algorithm: org.eclipse.elk.layered\n")


def test_unwritable_destination_raises_dump_error(tmp_path, two_level):
    with pytest.raises(DumpError):
        dump_structure(tmp_path / "missing" / "out.json", DumpFormat.D3JSON, two_level)
    assert not (tmp_path / "missing").exists()


def test_closed_stream_raises_dump_error(two_level):
    buffer = io.StringIO()
    buffer.close()

    with pytest.raises(DumpError):
        dump_structure(buffer, DumpFormat.ELKJSON, two_level)


def test_dumper_hook_writes_once(tmp_path, platform):
    out = tmp_path / "top.elkt"
    dumper = HierarchyDumper(out, "elkt", platform, title="top")

    assert dumper.start_of_simulation() is True
    assert "node top {" in out.read_text()
    assert dumper.graph is not None
    assert dumper.basename.startswith("$$$")

    first_graph = dumper.graph
    out.unlink()
    assert dumper.start_of_simulation() is False
    assert not out.exists()
    assert dumper.graph is first_graph


def test_dumper_hook_reports_failure(tmp_path, platform, caplog):
    dumper = HierarchyDumper(tmp_path / "missing" / "out.json", "elkjson", platform)

    with caplog.at_level(logging.ERROR):
        assert dumper.start_of_simulation() is False
    assert "Structure dump abandoned" in caplog.text


def test_dumper_without_filename_does_nothing(platform):
    assert HierarchyDumper("", "elkjson", platform).start_of_simulation() is False


def test_load_config(tmp_path):
    cfg = tmp_path / "dump.yaml"
    cfg.write_text(
        "hierarchy_dump:\n"
        "  file: out.json\n"
        "  format: D3JSON\n"
        "  title: board\n"
        "  ignored_kinds: [my_channel]\n"
    )

    config = load_config(cfg)

    assert config == DumperConfig(file="out.json", format=DumpFormat.D3JSON, title="board",
                                  ignored_kinds=["my_channel"])


@pytest.mark.parametrize("body", [
    "other: {}\n",
    "hierarchy_dump:\n  format: elkt\n",
    "hierarchy_dump:\n  file: x.json\n  format: svg\n",
    "hierarchy_dump:\n  file: x.json\n  ignored_kinds: sc_fifo\n",
    "hierarchy_dump:\n  file: x.json\n  internal_prefix: ''\n",
    "hierarchy_dump: [\n",
])
def test_invalid_config(tmp_path, body):
    cfg = tmp_path / "dump.yaml"
    cfg.write_text(body)

    with pytest.raises(ConfigError):
        load_config(cfg)


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_dumper_from_config_applies_ignored_kinds(tmp_path, caplog):
    adapter = SnapshotAdapter.from_dict({"objects": [{
        "name": "top", "kind": "sc_module",
        "children": [{"name": "q", "kind": "my_channel"}],
    }]})
    config = DumperConfig(file=str(tmp_path / "out.json"), ignored_kinds=["my_channel"])

    with caplog.at_level(logging.WARNING):
        assert HierarchyDumper.from_config(config, adapter).start_of_simulation()
    assert "object not known" not in caplog.text


def test_snapshot_file(tmp_path):
    snap = tmp_path / "snap.yaml"
    snap.write_text(
        "objects:\n"
        "  - name: top\n"
        "    kind: sc_module\n"
        "    type: vp::top\n"
        "    children:\n"
        "      - {name: clk, kind: sc_clock}\n"
        "      - name: core\n"
        "        kind: sc_module\n"
        "        children:\n"
        "          - {name: clk_i, kind: sc_in, bound: clk}\n"
        "          - name: isock\n"
        "            kind: tlm_initiator_socket\n"
        "            faces:\n"
        "              - {name: isock, direction: output, bound: fw}\n"
        "              - {name: isock_export, direction: input, bound: bw}\n"
    )

    adapter = SnapshotAdapter.from_file(snap)
    buffer = io.StringIO()
    graph = dump_structure(buffer, DumpFormat.DBGJSON, adapter)

    assert graph.root.type_name == "vp::top"
    core = graph.find("top.core")
    assert [(p.name, p.direction.value, p.identity) for p in core.ports] == [
        ("top.core.clk_i", "input", "clk"),
        ("top.core.isock", "output", "fw"),
        ("top.core.isock_export", "input", "bw"),
    ]
    assert graph.find("top.clk").ports[0].identity == "clk"


def test_bad_snapshot():
    with pytest.raises(ConfigError):
        SnapshotAdapter.from_dict({"objects": [{"kind": "sc_module"}]})


@pytest.mark.parametrize("objects", [
    [{"name": "top", "kind": "sc_module", "children": "core"}],
    [{"name": "top", "kind": "sc_module", "children": [
        {"name": "s", "kind": "tlm_target_socket", "faces": ["s"]}]}],
    [{"name": "top", "kind": "sc_module", "children": [
        {"name": "s", "kind": "tlm_target_socket", "faces": {"name": "s"}}]}],
])
def test_bad_snapshot_structure(objects):
    with pytest.raises(ConfigError):
        SnapshotAdapter.from_dict({"objects": objects})


def test_snapshot_with_empty_keys(tmp_path):
    snap = tmp_path / "snap.yaml"
    snap.write_text(
        "objects:\n"
        "  - name: top\n"
        "    kind: sc_module\n"
        "    children:\n"
        "      - name: s\n"
        "        kind: tlm_target_socket\n"
        "        faces:\n"
    )

    graph = dump_structure(io.StringIO(), DumpFormat.ELKJSON, SnapshotAdapter.from_file(snap))

    assert graph.root.name == "top"
    assert graph.root.ports == []


@pytest.mark.parametrize("filename, text", [
    ("snap.json", '{"objects": ['),
    ("snap.yaml", "objects: [unclosed\n"),
])
def test_unparsable_snapshot_file(tmp_path, filename, text):
    snap = tmp_path / filename
    snap.write_text(text)

    with pytest.raises(ConfigError, match="Cannot parse"):
        SnapshotAdapter.from_file(snap)
