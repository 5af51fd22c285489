"""Tests for the layout selector and the properties every strategy shares."""

import math

import pytest

from storyforge_layout import compute_layout
from storyforge_layout.layout.force import compute_layout_force
from storyforge_layout.model import Edge, Node, NodeType
from storyforge_layout.presets import LayoutConfig
from storyforge_layout.selector import LAYOUTS, LayoutKind, get_layout

ALL_KINDS = [k.value for k in LayoutKind]


class TestLayoutKind:
    def test_values(self):
        assert LayoutKind.coerce("radial") is LayoutKind.RADIAL
        assert LayoutKind.coerce("FORCE_DIRECTED") is LayoutKind.FORCE_DIRECTED
        assert LayoutKind.coerce("hierarchical-orbit") is LayoutKind.HIERARCHICAL_ORBIT
        assert LayoutKind.coerce(LayoutKind.RADIAL) is LayoutKind.RADIAL

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError, match="Unknown layout kind"):
            LayoutKind.coerce("spiral")

    def test_registry_covers_every_kind(self):
        assert set(LAYOUTS) == set(LayoutKind)
        assert get_layout("force") is compute_layout_force


class TestComputeLayout:
    def test_default_kind_is_hierarchical(self, star_graph):
        nodes, edges = star_graph
        assert compute_layout(nodes, edges).kind == "hierarchical"

    def test_default_kind_from_environment(self, monkeypatch, star_graph):
        monkeypatch.setenv("STORYFORGE_LAYOUT_DEFAULT_KIND", "radial")
        nodes, edges = star_graph
        assert compute_layout(nodes, edges).kind == "radial"

    def test_unknown_kind_raises(self, star_graph):
        nodes, edges = star_graph
        with pytest.raises(ValueError):
            compute_layout(nodes, edges, kind="spiral")

    def test_options_reach_strategy(self):
        nodes = [Node(id="hub", type=NodeType.PUZZLE, is_center=True), Node(id="c", type=NodeType.CHARACTER)]
        result = compute_layout(nodes, [], kind="radial", baseRadius=400)
        p = result.position_of("c")
        assert math.hypot(p.x, p.y) == pytest.approx(400.0)

    def test_config_object(self):
        nodes = [Node(id="hub", type=NodeType.PUZZLE, is_center=True), Node(id="c", type=NodeType.CHARACTER)]
        cfg = LayoutConfig().with_overrides(base_radius=320)
        result = compute_layout(nodes, [], kind=LayoutKind.RADIAL, config=cfg)
        p = result.position_of("c")
        assert math.hypot(p.x, p.y) == pytest.approx(320.0)

    def test_accepts_plain_dicts(self):
        nodes = [{"id": "a", "type": "Puzzle", "isCenter": True}, {"id": "b", "type": "Character"}]
        edges = [{"id": "e", "source": "a", "target": "b"}]
        result = compute_layout(nodes, edges, kind="radial")
        assert result.position_of("a").x == 0.0
        assert result.nodes[1].type is NodeType.CHARACTER

    def test_debug_events(self, events, star_graph):
        emit, seen = events
        nodes, edges = star_graph
        compute_layout(nodes, edges, kind="radial", emit=emit, debug=True)
        assert any(p["level"] == "debug" for _, p in seen)

    def test_no_debug_events_by_default(self, events, star_graph):
        emit, seen = events
        nodes, edges = star_graph
        compute_layout(nodes, edges, kind="radial", emit=emit)
        assert not any(p["level"] == "debug" for _, p in seen)


@pytest.mark.parametrize("kind", ALL_KINDS)
class TestSharedProperties:
    def test_node_count_preserved(self, kind, star_graph):
        nodes, edges = star_graph
        assert len(compute_layout(nodes, edges, kind=kind).nodes) == len(nodes)

    def test_no_nan(self, kind, star_graph, hub_graph):
        for nodes, edges in (star_graph, hub_graph):
            for n in compute_layout(nodes, edges, kind=kind).nodes:
                assert math.isfinite(n.position.x) and math.isfinite(n.position.y)
                assert math.isfinite(n.visual_size.width) and math.isfinite(n.visual_size.height)

    def test_center_at_origin(self, kind, star_graph):
        nodes, edges = star_graph
        p = compute_layout(nodes, edges, kind=kind).position_of("p1")
        assert (p.x, p.y) == pytest.approx((0.0, 0.0))

    def test_empty_graph(self, kind):
        result = compute_layout([], [], kind=kind)
        assert result.nodes == [] and result.edges == []

    def test_dangling_edge(self, kind):
        nodes = [Node(id="A"), Node(id="B")]
        result = compute_layout(nodes, [Edge(id="e", source="A", target="ghost")], kind=kind)
        assert result.edges == []
        assert all(n.position is not None for n in result.nodes)

    def test_inputs_not_mutated(self, kind, star_graph):
        nodes, edges = star_graph
        compute_layout(nodes, edges, kind=kind)
        assert all(n.position is None and n.visual_size is None for n in nodes)

    def test_deterministic(self, kind, star_graph):
        nodes, edges = star_graph
        first = compute_layout(nodes, edges, kind=kind).positions()
        assert compute_layout(nodes, edges, kind=kind).positions() == first
