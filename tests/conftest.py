"""Pytest configuration and fixtures."""

import matplotlib

matplotlib.use("Agg")

import pytest

from storyforge_layout.model import Edge, Node, NodeType


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep engine settings independent of the developer's shell."""
    for name in (
        "STORYFORGE_LAYOUT_DEFAULT_KIND",
        "STORYFORGE_LAYOUT_SEED",
        "STORYFORGE_LAYOUT_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def events():
    """Collecting emitter: returns (emit, list_of_payloads)."""
    seen = []

    def emit(kind, payload):
        seen.append((kind, payload))

    return emit, seen


@pytest.fixture
def star_graph():
    """A center puzzle with a mix of related entities around it."""
    nodes = [
        Node(id="p1", type=NodeType.PUZZLE, is_center=True, label="Locked Safe"),
        Node(id="c1", type=NodeType.CHARACTER, label="Alex"),
        Node(id="c2", type=NodeType.CHARACTER, label="Sam"),
        Node(id="e1", type=NodeType.ELEMENT, label="Key"),
        Node(id="e2", type=NodeType.ELEMENT, label="Letter"),
        Node(id="e3", type=NodeType.ELEMENT, label="Photo"),
        Node(id="t1", type=NodeType.TIMELINE, label="The Party"),
        Node(id="p2", type=NodeType.PUZZLE, label="Cipher"),
    ]
    edges = [
        Edge(id="x1", source="p1", target="c1"),
        Edge(id="x2", source="p1", target="c2"),
        Edge(id="x3", source="p1", target="e1"),
        Edge(id="x4", source="p1", target="e2"),
        Edge(id="x5", source="e3", target="p1"),
        Edge(id="x6", source="t1", target="p1"),
        Edge(id="x7", source="p1", target="p2"),
    ]
    return nodes, edges


@pytest.fixture
def hub_graph():
    """Puzzle hub with four required elements orbiting it, plus a reward chain."""
    nodes = [
        Node(id="P", type=NodeType.PUZZLE, label="Vault"),
        Node(id="a", type=NodeType.ELEMENT, parent_id="P"),
        Node(id="b", type=NodeType.ELEMENT, parent_id="P"),
        Node(id="c", type=NodeType.ELEMENT, parent_id="P"),
        Node(id="d", type=NodeType.ELEMENT, parent_id="P"),
        Node(id="pre", type=NodeType.CHARACTER),
        Node(id="reward", type=NodeType.ELEMENT),
    ]
    edges = [
        Edge(id="e1", source="pre", target="P"),
        Edge(id="e2", source="P", target="reward"),
        Edge(id="e3", source="a", target="P"),
        Edge(id="e4", source="b", target="P"),
    ]
    return nodes, edges

