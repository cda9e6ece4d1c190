from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Mapping, Optional

from .notes import Note, resolve_parent

logger = logging.getLogger(__name__)


@dataclass
class TreeNode:
    note: Note
    children: list = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.note.id


def _break_cycles(order: list, parent_of: dict) -> None:
    # parent_of is a functional graph over ids present in the set; any cycle
    # would leave its members unreachable from the root list.
    position = {note_id: i for i, note_id in enumerate(order)}
    state: dict[str, int] = {}
    for start in order:
        path = []
        cur = start
        while cur is not None and cur not in state:
            state[cur] = 1
            path.append(cur)
            cur = parent_of.get(cur)
        if cur is not None and state[cur] == 1:
            cycle = path[path.index(cur):]
            first = min(cycle, key=position.__getitem__)
            logger.warning("Reply cycle through %d notes, promoting %s to root", len(cycle), first)
            parent_of[first] = None
        for note_id in path:
            state[note_id] = 2


def build_forest(
    notes: Iterable[Note],
    promote_id: Optional[str] = None,
    parents: Optional[Mapping[str, Optional[str]]] = None,
) -> list:
    """Assemble reply trees from a flat list of notes.

    Children keep the order in which notes were supplied, so callers wanting
    chronological threads should sort by ``created_at`` first. ``parents`` may
    carry pre-resolved parent ids; notes missing from it are resolved from
    their reference tags. Every distinct note id appears exactly once in the
    result: unknown or self parents make a root, never a dropped note.
    """
    lookup: dict[str, TreeNode] = {}
    order: list[str] = []
    for note in notes:
        if note.id in lookup:
            logger.debug("Duplicate note id %s ignored", note.id)
            continue
        lookup[note.id] = TreeNode(note)
        order.append(note.id)

    parent_of: dict[str, Optional[str]] = {}
    for note_id in order:
        note = lookup[note_id].note
        if parents is not None and note_id in parents:
            parent_id = parents[note_id]
        else:
            parent_id = resolve_parent(note)
        if parent_id == note_id:
            parent_id = None
        if parent_id is not None and parent_id not in lookup:
            logger.debug("Parent %s of %s not in set, treating as root", parent_id, note_id)
            parent_id = None
        parent_of[note_id] = parent_id

    _break_cycles(order, parent_of)

    roots: list[TreeNode] = []
    for note_id in order:
        parent_id = parent_of[note_id]
        if parent_id is None:
            roots.append(lookup[note_id])
        else:
            lookup[parent_id].children.append(lookup[note_id])

    if promote_id is not None:
        promote_root(roots, promote_id)
    return roots


def promote_root(roots: list, note_id: str) -> None:
    for index, node in enumerate(roots):
        if node.id == note_id:
            if index > 0:
                roots.insert(0, roots.pop(index))
            return


def find_path(forest: Iterable[TreeNode], target_id: str) -> Optional[list]:
    """Ids from a root down to ``target_id`` inclusive, or None."""
    stack = [(root, (root.id,)) for root in reversed(list(forest))]
    while stack:
        node, path = stack.pop()
        if node.id == target_id:
            return list(path)
        for child in reversed(node.children):
            stack.append((child, path + (child.id,)))
    return None


def iter_forest(forest: Iterable[TreeNode]) -> Iterator[tuple]:
    """Preorder walk yielding ``(node, depth)``."""
    stack = [(root, 0) for root in reversed(list(forest))]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        for child in reversed(node.children):
            stack.append((child, depth + 1))


def count_nodes(forest: Iterable[TreeNode]) -> int:
    return sum(1 for _ in iter_forest(forest))


def search_roots(forest: list, query: str) -> list:
    query = (query or "").strip().lower()
    if not query:
        return forest
    for root in forest:
        if query in root.note.content.lower():
            return [root]
    return []


def forest_to_dicts(forest: Iterable[TreeNode], render: Optional[Callable[[str], str]] = None) -> list:
    result: list = []
    stack = [(root, result) for root in reversed(list(forest))]
    while stack:
        node, siblings = stack.pop()
        note = node.note
        item = {
            "id": note.id,
            "content": note.content,
            "author": note.author_name or note.author_id,
            "created_at": note.created_at,
            "children": [],
        }
        if render is not None:
            item["html"] = render(note.content)
        siblings.append(item)
        for child in reversed(node.children):
            stack.append((child, item["children"]))
    return result
