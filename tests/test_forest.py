from __future__ import annotations

import random

from echofield.forest import (
    build_forest,
    count_nodes,
    find_path,
    forest_to_dicts,
    iter_forest,
    search_roots,
)

from conftest import make_note


def _ids(nodes) -> list:
    return [n.id for n in nodes]


def _sample():
    return [
        make_note("A"),
        make_note("B", parent="A"),
        make_note("C", parent="B"),
        make_note("D", parent="Z"),
    ]


def test_builds_roots_children_and_orphans() -> None:
    roots = build_forest(_sample())
    assert _ids(roots) == ["A", "D"]
    assert _ids(roots[0].children) == ["B"]
    assert _ids(roots[0].children[0].children) == ["C"]
    assert roots[1].children == []


def test_promote_moves_root_to_front() -> None:
    assert _ids(build_forest(_sample(), promote_id="D")) == ["D", "A"]


def test_promote_is_noop_when_first_absent_or_not_a_root() -> None:
    assert _ids(build_forest(_sample(), promote_id="A")) == ["A", "D"]
    assert _ids(build_forest(_sample(), promote_id="nope")) == ["A", "D"]
    assert _ids(build_forest(_sample(), promote_id="C")) == ["A", "D"]


def test_children_keep_input_order() -> None:
    notes = [make_note("R"), make_note("b", parent="R"), make_note("a", parent="R"), make_note("c", parent="R")]
    assert _ids(build_forest(notes)[0].children) == ["b", "a", "c"]


def test_child_before_parent_in_input_is_still_attached() -> None:
    notes = [make_note("C", parent="P"), make_note("P")]
    roots = build_forest(notes)
    assert _ids(roots) == ["P"]
    assert _ids(roots[0].children) == ["C"]


def test_self_reply_is_root() -> None:
    roots = build_forest([make_note("S", parent="S")])
    assert _ids(roots) == ["S"]


def test_preresolved_parents_take_precedence() -> None:
    notes = [make_note("A"), make_note("B"), make_note("C", parent="A")]
    roots = build_forest(notes, parents={"B": "A", "C": None})
    assert _ids(roots) == ["A", "C"]
    assert _ids(roots[0].children) == ["B"]


def test_duplicate_ids_appear_once() -> None:
    notes = [make_note("A"), make_note("B", parent="A"), make_note("B")]
    roots = build_forest(notes)
    assert count_nodes(roots) == 2
    assert _ids(roots[0].children) == ["B"]


def test_reply_cycle_does_not_lose_notes() -> None:
    notes = [make_note("A", parent="B"), make_note("B", parent="A"), make_note("C", parent="B")]
    roots = build_forest(notes)
    # Earliest member of the cycle becomes the root
    assert _ids(roots) == ["A"]
    assert _ids(roots[0].children) == ["B"]
    assert _ids(roots[0].children[0].children) == ["C"]


def test_every_note_appears_exactly_once() -> None:
    rng = random.Random(7)
    ids = [f"n{i}" for i in range(200)]
    notes = []
    for note_id in ids:
        parent = rng.choice(ids + ["missing", None, None])
        notes.append(make_note(note_id, parent=parent))
    roots = build_forest(notes)
    seen = [node.id for node, _depth in iter_forest(roots)]
    assert sorted(seen) == sorted(ids)


def test_find_path_returns_root_to_target() -> None:
    roots = build_forest(_sample())
    assert find_path(roots, "C") == ["A", "B", "C"]
    assert find_path(roots, "A") == ["A"]
    assert find_path(roots, "D") == ["D"]


def test_find_path_unknown_id() -> None:
    assert find_path(build_forest(_sample()), "Z") is None
    assert find_path([], "A") is None


def test_find_path_ends_at_target_and_starts_at_root() -> None:
    roots = build_forest(_sample())
    root_ids = set(_ids(roots))
    for node, depth in iter_forest(roots):
        path = find_path(roots, node.id)
        assert path[-1] == node.id
        assert path[0] in root_ids
        assert len(path) == depth + 1


def test_search_roots() -> None:
    notes = [make_note("A", content="Hello World"), make_note("B", content="another thread")]
    roots = build_forest(notes)
    assert search_roots(roots, "") is roots
    assert _ids(search_roots(roots, "WORLD")) == ["A"]
    assert search_roots(roots, "absent") == []


def test_forest_to_dicts_nests_children() -> None:
    data = forest_to_dicts(build_forest(_sample()), render=str.upper)
    assert [d["id"] for d in data] == ["A", "D"]
    assert data[0]["children"][0]["children"][0]["id"] == "C"
    assert data[0]["html"] == "NOTE A"


def test_forest_to_dicts_handles_very_long_chains() -> None:
    notes = [make_note("n0")] + [make_note(f"n{i}", parent=f"n{i - 1}") for i in range(1, 1600)]
    data = forest_to_dicts(build_forest(notes))
    depth = 0
    item = data[0]
    while item["children"]:
        assert len(item["children"]) == 1
        item = item["children"][0]
        depth += 1
    assert depth == 1599
    assert item["id"] == "n1599"


def test_forest_to_dicts_keeps_sibling_order() -> None:
    notes = [make_note("A"), make_note("B", parent="A"), make_note("C", parent="B"), make_note("D", parent="A")]
    data = forest_to_dicts(build_forest(notes))
    assert [c["id"] for c in data[0]["children"]] == ["B", "D"]
    assert data[0]["children"][0]["children"][0]["id"] == "C"
    assert "html" not in data[0]
