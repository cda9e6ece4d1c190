from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .forest import find_path
from .viewport import ViewTransform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FocusRequest:
    """Ask the renderer to scroll ``target_id`` into view; nothing here scrolls."""
    target_id: str
    path: tuple


def hit_test(nodes: Iterable, screen_point: tuple, transform: ViewTransform) -> Optional[str]:
    """Id of the node under ``screen_point``; the deepest one wins on overlap."""
    mx, my = transform.invert(screen_point)
    best = None
    for n in nodes:
        dx, dy = mx - n.x, my - n.y
        if dx * dx + dy * dy > n.radius * n.radius:
            continue
        if best is None or n.depth > best.depth:
            best = n
    return best.id if best is not None else None


class ExpansionState:
    """Expanded note ids. Activation only adds; toggling affects one node."""

    def __init__(self, expanded: Iterable[str] = ()) -> None:
        self._expanded = set(expanded)

    def is_expanded(self, note_id: str) -> bool:
        return note_id in self._expanded

    def expand_path(self, ids: Iterable[str]) -> None:
        self._expanded.update(ids)

    def toggle(self, note_id: str) -> bool:
        if note_id in self._expanded:
            self._expanded.discard(note_id)
            return False
        self._expanded.add(note_id)
        return True

    def ids(self) -> list:
        return sorted(self._expanded)


class Interaction:
    def __init__(
        self,
        forest: list,
        expansion: Optional[ExpansionState] = None,
        on_focus: Optional[Callable[[FocusRequest], None]] = None,
    ) -> None:
        self.forest = forest
        self.expansion = expansion if expansion is not None else ExpansionState()
        self.on_focus = on_focus
        self.hovered_id: Optional[str] = None

    def hover(self, nodes: list, screen_point: tuple, transform: ViewTransform) -> Optional[str]:
        self.hovered_id = hit_test(nodes, screen_point, transform)
        return self.hovered_id

    def highlighted_links(self, links: Iterable) -> list:
        if self.hovered_id is None:
            return []
        return [l for l in links if self.hovered_id in (l.source_id, l.target_id)]

    def on_node_activate(self, node_id: str) -> Optional[FocusRequest]:
        path = find_path(self.forest, node_id)
        if path is None:
            logger.debug("Activated id %s is not in the forest", node_id)
            return None
        self.expansion.expand_path(path)
        request = FocusRequest(node_id, tuple(path))
        if self.on_focus is not None:
            self.on_focus(request)
        return request

    def click(self, nodes: list, screen_point: tuple, transform: ViewTransform) -> Optional[FocusRequest]:
        node_id = hit_test(nodes, screen_point, transform)
        if node_id is None:
            return None
        return self.on_node_activate(node_id)
