import pytest

from hierarchy_graph.adapter import SnapshotAdapter, clock, leaf, module, port, socket


@pytest.fixture
def two_level():
    """R has children A (child A1) and B; A1.x drives B.y over binding I."""
    return SnapshotAdapter([
        module(
            "R",
            module("A", module("A1", port("x", "sc_out", "output", bound="I"))),
            module("B", port("y", "sc_in", "input", bound="I")),
        )
    ])


@pytest.fixture
def deep():
    """A2.x (three levels below R) drives B1.y (two levels below R)."""
    return SnapshotAdapter([
        module(
            "R",
            module("A", module("A1", module("A2", port("x", "sc_out", "output", bound="I")))),
            module("B", module("B1", port("y", "sc_in", "input", bound="I"))),
        )
    ])


@pytest.fixture
def platform():
    return SnapshotAdapter([
        module(
            "top",
            clock("clk"),
            module(
                "cpu",
                port("clk_i", "sc_in", "input", bound="clk", alias="clk"),
                port("irq_i", "sc_in", "input", bound="irq"),
                socket("isock", "tlm_initiator_socket", forward="fw", backward="bw"),
                leaf("isock_export_0", "sc_export"),
                leaf("run", "sc_thread_process"),
            ),
            module(
                "periph",
                socket("tsock", "tlm_target_socket", forward="fw", backward="bw"),
                leaf("tsock_port_0", "sc_port"),
                module(
                    "uart",
                    port("clk_i", "sc_in", "input", bound="clk"),
                    port("irq_o", "sc_out", "output", bound="irq", alias="uart_irq"),
                ),
            ),
        )
    ])
