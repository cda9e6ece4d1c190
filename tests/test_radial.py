from __future__ import annotations

import math

import pytest

from echofield.forest import build_forest
from echofield.radial import VIRTUAL_ROOT_ID, RadialParams, layout, layout_forest

from conftest import make_note


def _tree(*notes):
    return build_forest(list(notes))[0]


def test_root_and_ring_in_wide_viewport() -> None:
    tree = _tree(make_note("A"), make_note("B", parent="A"), make_note("C", parent="A"))
    result = layout(tree, 800, 250)
    a, b, c = (result.node(i) for i in "ABC")
    assert (a.x, a.y) == (400, 125)
    assert a.depth == 0
    assert b.x == pytest.approx(462.5)
    assert b.y == pytest.approx(125)
    assert c.x == pytest.approx(337.5)
    assert c.y == pytest.approx(125)
    assert math.hypot(b.x - a.x, b.y - a.y) == pytest.approx(62.5)


def test_links_follow_tree_edges() -> None:
    tree = _tree(make_note("A"), make_note("B", parent="A"), make_note("C", parent="B"))
    result = layout(tree, 600, 600)
    assert [(l.source_id, l.target_id) for l in result.links] == [("A", "B"), ("B", "C")]
    segments = result.segments()
    assert segments[0] == ((300, 300), (result.node("B").x, result.node("B").y))


def test_depth_two_fans_around_parent_spoke() -> None:
    notes = [make_note("R"), make_note("P", parent="R")]
    notes += [make_note(f"c{j}", parent="P") for j in range(3)]
    params = RadialParams(fan_radius=60.0, fan_step=0.2)
    result = layout(_tree(*notes), 400, 400, params)
    p = result.node("P")
    # Single depth-1 child sits at angle 0
    assert (p.x, p.y) == pytest.approx((300, 200))
    for j in range(3):
        c = result.node(f"c{j}")
        theta = 0 + (j - 3 / 2) * 0.2
        assert c.depth == 2
        assert c.x == pytest.approx(p.x + 60 * math.cos(theta))
        assert c.y == pytest.approx(p.y + 60 * math.sin(theta))


def test_depth_cap_drops_deeper_replies() -> None:
    tree = _tree(make_note("A"), make_note("B", parent="A"), make_note("C", parent="B"), make_note("D", parent="C"))
    result = layout(tree, 500, 500)
    assert [n.id for n in result.nodes] == ["A", "B", "C"]
    assert all(l.target_id != "D" for l in result.links)

    uncapped = layout(tree, 500, 500, RadialParams(max_depth=None))
    assert uncapped.node("D").depth == 3


def test_node_radius_and_label_per_depth() -> None:
    tree = _tree(make_note("A", content="x" * 30), make_note("B", parent="A"), make_note("C", parent="B"))
    result = layout(tree, 500, 500)
    assert [n.radius for n in result.nodes] == [40.0, 10.0, 6.0]
    assert result.node("A").label == "x" * 20 + "..."


def test_layout_is_deterministic() -> None:
    notes = [make_note("R")] + [make_note(f"k{i}", parent="R") for i in range(7)]
    notes += [make_note(f"g{i}", parent=f"k{i % 7}") for i in range(12)]
    tree = _tree(*notes)
    first = layout(tree, 1024, 768)
    second = layout(tree, 1024, 768)
    assert first == second


def test_degenerate_viewport_is_clamped() -> None:
    tree = _tree(make_note("A"), make_note("B", parent="A"))
    result = layout(tree, 0, -10)
    a, b = result.node("A"), result.node("B")
    assert (a.x, a.y) == (25.0, 25.0)
    assert math.isfinite(b.x) and math.isfinite(b.y)
    assert b.x - a.x == pytest.approx(50.0 * 0.25)


def test_empty_forest_gives_empty_layout() -> None:
    result = layout_forest([], 800, 600)
    assert result.nodes == [] and result.links == []
    assert layout(None, 800, 600).nodes == []


def test_single_root_forest_is_laid_out_directly() -> None:
    forest = build_forest([make_note("A"), make_note("B", parent="A")])
    result = layout_forest(forest, 800, 600)
    assert result.nodes[0].id == "A"
    assert result.node(VIRTUAL_ROOT_ID) is None


def test_many_roots_hang_off_virtual_centre() -> None:
    forest = build_forest([make_note("A"), make_note("B"), make_note("C", parent="A")])
    result = layout_forest(forest, 800, 600, root_label="All threads")
    centre = result.nodes[0]
    assert centre.id == VIRTUAL_ROOT_ID and centre.virtual
    assert centre.label == "All threads"
    assert result.node("A").depth == 1 and not result.node("A").virtual
    assert result.node("C").depth == 2
    assert (VIRTUAL_ROOT_ID, "B") in [(l.source_id, l.target_id) for l in result.links]


def test_custom_ring_rule_can_replace_per_depth_radius() -> None:
    class Concentric(RadialParams):
        def radius_at(self, depth, width, height):
            return 100.0 * depth

        def angles_at(self, depth, parent_angle, count):
            return [parent_angle] * count

    tree = _tree(make_note("A"), make_note("B", parent="A"), make_note("C", parent="B"))
    result = layout(tree, 400, 400, Concentric())
    assert result.node("B").x == pytest.approx(300)
    assert result.node("C").x == pytest.approx(500)


def test_uncapped_layout_handles_very_long_chains() -> None:
    notes = [make_note("n0")] + [make_note(f"n{i}", parent=f"n{i - 1}") for i in range(1, 1600)]
    result = layout(_tree(*notes), 600, 600, RadialParams(max_depth=None))
    assert len(result.nodes) == 1600
    assert len(result.links) == 1599
    assert [n.id for n in result.nodes[:3]] == ["n0", "n1", "n2"]
    assert result.nodes[-1].depth == 1599
    assert (result.links[-1].source_id, result.links[-1].target_id) == ("n1598", "n1599")
