"""Tests for the hierarchical orbit layout."""

import math

import pytest

from storyforge_layout.layout import hierarchical as hierarchical_module
from storyforge_layout.layout.hierarchical import (
    compute_layout_hierarchical,
    find_satellites,
    orbit_angles,
    orbit_footprint,
    orbit_radius,
)
from storyforge_layout.model import Edge, Node, NodeType
from storyforge_layout.presets import HierarchicalConfig


def _dist(p, q):
    return math.hypot(p.x - q.x, p.y - q.y)


def _angle(origin, p):
    return math.degrees(math.atan2(p.y - origin.y, p.x - origin.x)) % 360.0


class TestOrbitGeometry:
    def test_angle_table(self):
        assert orbit_angles(1) == [90.0]
        assert orbit_angles(2) == [45.0, 135.0]
        assert orbit_angles(3) == [90.0, 210.0, 330.0]
        assert orbit_angles(4) == [45.0, 135.0, 225.0, 315.0]
        assert orbit_angles(5) == pytest.approx([-90.0, -18.0, 54.0, 126.0, 198.0])

    def test_radius_grows_per_child(self):
        cfg = HierarchicalConfig()
        assert orbit_radius(170.0, 1, cfg) == pytest.approx(85 + 85 + 40)
        assert orbit_radius(170.0, 4, cfg) == pytest.approx(85 + 85 + 40 + 45)

    def test_footprint_is_square_and_capped(self):
        cfg = HierarchicalConfig()
        fp = orbit_footprint(170.0, 4, cfg)
        assert fp.width == fp.height == pytest.approx(2 * (255.0 + 85.0))
        capped = orbit_footprint(170.0, 20, cfg)
        assert capped.width == pytest.approx(2 * (85 + 85 + 40 + 15 * 7 + 85))


class TestSatellites:
    def test_parent_must_be_hub_type(self):
        nodes = [Node(id="c", type=NodeType.CHARACTER), Node(id="s", parent_id="c")]
        assert find_satellites(nodes) == {}

    def test_unknown_parent_is_ignored(self):
        assert find_satellites([Node(id="s", parent_id="missing")]) == {}

    def test_parent_cycle_is_ignored(self):
        nodes = [
            Node(id="x", type=NodeType.ELEMENT, parent_id="y"),
            Node(id="y", type=NodeType.ELEMENT, parent_id="x"),
            Node(id="z", type=NodeType.PUZZLE),
            Node(id="s", parent_id="z"),
        ]
        assert find_satellites(nodes) == {"z": ["s"]}


class TestHierarchicalLayout:
    def test_four_satellites_equidistant_and_square(self, hub_graph):
        nodes, edges = hub_graph
        result = compute_layout_hierarchical(nodes, edges)
        hub = result.position_of("P")
        sats = [result.position_of(s) for s in "abcd"]

        dists = [_dist(hub, s) for s in sats]
        for d in dists:
            assert d == pytest.approx(255.0)

        angles = sorted(_angle(hub, s) for s in sats)
        assert angles == pytest.approx([45.0, 135.0, 225.0, 315.0])
        gaps = [b - a for a, b in zip(angles, angles[1:])]
        assert gaps == pytest.approx([90.0, 90.0, 90.0])

    def test_two_satellites_in_lower_hemisphere(self):
        nodes = [
            Node(id="P", type=NodeType.PUZZLE),
            Node(id="a", parent_id="P"),
            Node(id="b", parent_id="P"),
        ]
        result = compute_layout_hierarchical(nodes, [])
        hub = result.position_of("P")
        for s in ("a", "b"):
            assert result.position_of(s).y > hub.y

    def test_single_satellite_directly_below(self):
        nodes = [Node(id="E", type=NodeType.ELEMENT), Node(id="s", parent_id="E")]
        result = compute_layout_hierarchical(nodes, [])
        hub, sat = result.position_of("E"), result.position_of("s")
        assert sat.x == pytest.approx(hub.x)
        assert sat.y - hub.y == pytest.approx(85 + 85 + 40)

    def test_center_is_anchored_at_origin(self, hub_graph):
        nodes, edges = hub_graph
        nodes = [Node(id="P", type=NodeType.PUZZLE, is_center=True)] + nodes[1:]
        result = compute_layout_hierarchical(nodes, edges)
        hub = result.position_of("P")
        assert (hub.x, hub.y) == pytest.approx((0.0, 0.0))
        # center hub is wider, so its orbit is too
        assert _dist(hub, result.position_of("a")) == pytest.approx(95 + 85 + 40 + 45)

    def test_anchor_can_be_disabled(self, hub_graph):
        nodes, edges = hub_graph
        nodes = [Node(id="P", type=NodeType.PUZZLE, is_center=True)] + nodes[1:]
        result = compute_layout_hierarchical(nodes, edges, HierarchicalConfig(anchor_center=False))
        hub = result.position_of("P")
        assert (hub.x, hub.y) != (0.0, 0.0)

    def test_backbone_follows_edge_direction(self, hub_graph):
        nodes, edges = hub_graph
        result = compute_layout_hierarchical(nodes, edges)
        assert result.position_of("pre").y < result.position_of("P").y < result.position_of("reward").y

    def test_visual_sizes_are_restored(self, hub_graph):
        nodes, edges = hub_graph
        result = compute_layout_hierarchical(nodes, edges)
        for n in result.nodes:
            assert (n.visual_size.width, n.visual_size.height) == (170.0, 60.0)

    def test_nested_hub_orbits_after_parent(self):
        nodes = [
            Node(id="P", type=NodeType.PUZZLE),
            Node(id="E", type=NodeType.ELEMENT, parent_id="P"),
            Node(id="s", type=NodeType.CHARACTER, parent_id="E"),
        ]
        result = compute_layout_hierarchical(nodes, [])
        p, e, s = (result.position_of(i) for i in "PEs")
        assert e.y - p.y == pytest.approx(210.0)
        assert s.x == pytest.approx(e.x)
        assert s.y - e.y == pytest.approx(210.0)

    def test_non_hub_parent_is_warned_and_kept_on_backbone(self):
        nodes = [Node(id="c", type=NodeType.CHARACTER), Node(id="s", parent_id="c")]
        result = compute_layout_hierarchical(nodes, [Edge(id="e", source="c", target="s")])
        assert any("not a hub type" in w for w in result.warnings)
        assert result.position_of("s").y > result.position_of("c").y

    def test_left_right_direction(self):
        nodes = [Node(id="a"), Node(id="b")]
        cfg = HierarchicalConfig(direction="LR")
        result = compute_layout_hierarchical(nodes, [Edge(id="e", source="a", target="b")], cfg)
        assert result.position_of("a").x < result.position_of("b").x

    def test_deterministic(self, hub_graph, star_graph):
        for nodes, edges in (hub_graph, star_graph):
            first = compute_layout_hierarchical(nodes, edges).positions()
            assert compute_layout_hierarchical(nodes, edges).positions() == first


class TestHierarchicalEdgeCases:
    def test_empty_graph(self):
        result = compute_layout_hierarchical([], [])
        assert result.nodes == [] and result.edges == []

    def test_dangling_edge(self):
        nodes = [Node(id="A"), Node(id="B")]
        result = compute_layout_hierarchical(nodes, [Edge(id="e", source="A", target="ghost")])
        assert result.edges == []
        assert all(n.position is not None for n in result.nodes)

    def test_cyclic_edges(self):
        nodes = [Node(id=i) for i in "abc"]
        edges = [Edge(id=f"{u}{v}", source=u, target=v) for u, v in ("ab", "bc", "ca")]
        result = compute_layout_hierarchical(nodes, edges)
        assert result.fallback is False
        assert len(result.positions()) == 3

    def test_layered_failure_falls_back_to_grid(self, monkeypatch, hub_graph):
        def boom(*args, **kwargs):
            raise RuntimeError("ranker crashed")

        monkeypatch.setattr(hierarchical_module, "layered_layout", boom)
        nodes, edges = hub_graph
        result = compute_layout_hierarchical(nodes, edges)
        assert result.fallback is True
        assert result.position_of("P").x == 0.0
        assert len(result.nodes) == len(nodes)
        assert any("ranker crashed" in w for w in result.warnings)


class TestNumericIds:
    def test_integer_parent_id_orbits_its_hub(self):
        nodes = [{"id": 1, "type": "Puzzle"}, {"id": 2, "type": "Element", "parentId": 1}]
        result = compute_layout_hierarchical(nodes, [])
        hub, sat = result.position_of("1"), result.position_of("2")
        assert not any("unknown parent" in w for w in result.warnings)
        assert sat.x == pytest.approx(hub.x)
        assert sat.y - hub.y == pytest.approx(85 + 85 + 40)
