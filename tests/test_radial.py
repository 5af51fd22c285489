"""Tests for the grid fallback and the radial sector layout."""

import math

import pytest

from storyforge_layout.layout import radial as radial_module
from storyforge_layout.layout.grid import grid_layout
from storyforge_layout.layout.radial import compute_layout_radial, sector_angles
from storyforge_layout.model import Edge, Node, NodeType
from storyforge_layout.presets import GridConfig, RadialConfig


def _angle(p):
    return math.degrees(math.atan2(p.y, p.x)) % 360.0


class TestGrid:
    def test_row_major_positions(self):
        nodes = [Node(id=f"n{i}") for i in range(8)]
        placed = grid_layout(nodes)
        assert (placed[0].position.x, placed[0].position.y) == (0.0, 0.0)
        assert (placed[5].position.x, placed[5].position.y) == (1000.0, 0.0)
        assert (placed[7].position.x, placed[7].position.y) == (200.0, 150.0)

    def test_custom_cells(self):
        placed = grid_layout([Node(id="a"), Node(id="b"), Node(id="c")], GridConfig(columns=2, cell_width=10, cell_height=20))
        assert (placed[2].position.x, placed[2].position.y) == (0.0, 20.0)


class TestSectorAngles:
    def test_single_node_sits_on_base_angle(self):
        assert sector_angles(1, 90.0, 300.0, 170.0, 60.0) == [90.0]

    def test_spread_is_capped(self):
        angles = sector_angles(5, 270.0, 250.0, 170.0, 60.0)
        assert angles[0] == pytest.approx(240.0)
        assert angles[-1] == pytest.approx(300.0)

    def test_spread_bounded_by_node_width_at_large_radius(self):
        angles = sector_angles(2, 0.0, 2000.0, 170.0, 60.0)
        per_node = math.degrees(math.atan2(170.0, 2000.0))
        assert angles[1] - angles[0] == pytest.approx(per_node)


class TestRadialLayout:
    def test_center_at_origin(self, star_graph):
        nodes, edges = star_graph
        result = compute_layout_radial(nodes, edges)
        center = result.position_of("p1")
        assert (center.x, center.y) == (0.0, 0.0)
        assert result.fallback is False

    def test_node_count_preserved(self, star_graph):
        nodes, edges = star_graph
        result = compute_layout_radial(nodes, edges)
        assert len(result.nodes) == len(nodes)
        assert [n.id for n in result.nodes] == [n.id for n in nodes]

    def test_single_member_group_on_base_angle(self, star_graph):
        nodes, edges = star_graph
        result = compute_layout_radial(nodes, edges)
        t1 = result.position_of("t1")
        assert _angle(t1) == pytest.approx(180.0)
        assert math.hypot(t1.x, t1.y) == pytest.approx(250.0 * 1.45)

    def test_group_angles_within_spread(self):
        nodes = [Node(id="hub", type=NodeType.PUZZLE, is_center=True)]
        nodes += [Node(id=f"c{i}", type=NodeType.CHARACTER) for i in range(5)]
        result = compute_layout_radial(nodes, [])
        angles = [_angle(result.position_of(f"c{i}")) for i in range(5)]
        for a in angles:
            assert 240.0 - 1e-6 <= a <= 300.0 + 1e-6
        assert len({round(a, 6) for a in angles}) == 5

    def test_overflow_wraps_onto_outer_ring(self):
        nodes = [Node(id="hub", type=NodeType.CHARACTER, is_center=True)]
        nodes += [Node(id=f"e{i}", type=NodeType.ELEMENT) for i in range(7)]
        result = compute_layout_radial(nodes, [])
        radii = sorted(
            round(math.hypot(p.x, p.y), 6)
            for p in (result.position_of(f"e{i}") for i in range(7))
        )
        assert radii[:5] == [pytest.approx(325.0)] * 5
        assert radii[5:] == [pytest.approx(445.0)] * 2

    def test_unknown_type_uses_default_sector(self):
        nodes = [Node(id="hub", is_center=True, type=NodeType.PUZZLE), Node(id="u", type="Vehicle")]
        result = compute_layout_radial(nodes, [])
        assert _angle(result.position_of("u")) == pytest.approx(45.0)

    def test_deterministic(self, star_graph):
        nodes, edges = star_graph
        first = compute_layout_radial(nodes, edges).positions()
        second = compute_layout_radial(nodes, edges).positions()
        assert first == second

    def test_group_order_does_not_depend_on_input_order(self, star_graph):
        nodes, edges = star_graph
        forward = compute_layout_radial(nodes, edges).positions()
        mixed = [nodes[0], nodes[6], nodes[3], nodes[1], nodes[4], nodes[7], nodes[2], nodes[5]]
        assert compute_layout_radial(mixed, edges).positions() == forward

    def test_config_changes_radius(self):
        nodes = [Node(id="hub", is_center=True, type=NodeType.PUZZLE), Node(id="c", type=NodeType.CHARACTER)]
        result = compute_layout_radial(nodes, [], RadialConfig(base_radius=400))
        p = result.position_of("c")
        assert math.hypot(p.x, p.y) == pytest.approx(400.0)

    def test_sizes_are_resolved(self, star_graph):
        nodes, edges = star_graph
        result = compute_layout_radial(nodes, edges)
        sizes = {n.id: (n.visual_size.width, n.visual_size.height) for n in result.nodes}
        assert sizes["p1"] == (190.0, 70.0)
        assert sizes["c1"] == (170.0, 60.0)

    def test_inputs_not_mutated(self, star_graph):
        nodes, edges = star_graph
        compute_layout_radial(nodes, edges)
        assert all(n.position is None for n in nodes)


class TestRadialEdgeCases:
    def test_empty_graph(self):
        result = compute_layout_radial([], [])
        assert result.nodes == []
        assert result.edges == []

    def test_missing_center_uses_grid(self):
        nodes = [Node(id=f"n{i}", type=NodeType.ELEMENT) for i in range(5)]
        result = compute_layout_radial(nodes, [])
        assert result.fallback is True
        coords = [(n.position.x, n.position.y) for n in result.nodes]
        assert coords == [(0.0, 0.0), (200.0, 0.0), (400.0, 0.0), (600.0, 0.0), (800.0, 0.0)]
        assert len(set(coords)) == 5

    def test_dangling_edge(self, events):
        emit, seen = events
        nodes = [Node(id="A", is_center=True), Node(id="B")]
        edges = [Edge(id="e", source="A", target="ghost")]
        result = compute_layout_radial(nodes, edges, emit=emit)
        assert result.edges == []
        assert all(n.position is not None for n in result.nodes)
        assert any(p["level"] == "warning" and "ghost" in p["message"] for _, p in seen)

    def test_internal_failure_falls_back_to_grid(self, monkeypatch, star_graph):
        def boom(*args, **kwargs):
            raise RuntimeError("sector math exploded")

        monkeypatch.setattr(radial_module, "sector_slots", boom)
        nodes, edges = star_graph
        result = compute_layout_radial(nodes, edges)
        assert result.fallback is True
        assert len(result.nodes) == len(nodes)
        assert any("sector math exploded" in w for w in result.warnings)

    def test_broken_emitter_does_not_break_layout(self, star_graph):
        def emit(kind, payload):
            raise RuntimeError("sink down")

        nodes, edges = star_graph
        result = compute_layout_radial(nodes, edges + [Edge(id="bad", source="p1", target="nope")], emit=emit)
        assert len(result.nodes) == len(nodes)
