"""Radial placement of a reply tree.

The root sits at the viewport centre, its direct replies on a ring around it,
and replies to those fan outward from their parent along the parent's spoke.
Ring radius and child angles are looked up per depth through ``RadialParams``
so a different per-depth rule can be swapped in by subclassing.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from .forest import TreeNode
from .notes import Note

logger = logging.getLogger(__name__)

VIRTUAL_ROOT_ID = "root-virtual"


@dataclass(frozen=True)
class LayoutNode:
    id: str
    x: float
    y: float
    radius: float
    depth: int
    label: str = ""
    virtual: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id, "x": self.x, "y": self.y, "radius": self.radius,
            "depth": self.depth, "label": self.label, "virtual": self.virtual,
        }


@dataclass(frozen=True)
class LayoutLink:
    source_id: str
    target_id: str

    def to_dict(self) -> dict:
        return {"source": self.source_id, "target": self.target_id}


@dataclass(frozen=True)
class Layout:
    nodes: list = field(default_factory=list)
    links: list = field(default_factory=list)

    def node(self, node_id: str) -> Optional[LayoutNode]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def segments(self) -> list:
        """Links resolved to ``((x1, y1), (x2, y2))`` from current node positions."""
        pos = {n.id: (n.x, n.y) for n in self.nodes}
        return [
            (pos[l.source_id], pos[l.target_id])
            for l in self.links
            if l.source_id in pos and l.target_id in pos
        ]

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [l.to_dict() for l in self.links],
        }


@dataclass(frozen=True)
class RadialParams:
    ring_ratio: float = 0.25
    fan_radius: float = 60.0
    fan_step: float = 0.2
    node_radii: tuple = (40.0, 10.0, 6.0)
    max_depth: Optional[int] = 2
    min_viewport: float = 50.0
    label_length: int = 20

    def radius_at(self, depth: int, width: float, height: float) -> float:
        """Distance from a depth ``depth - 1`` parent to its children."""
        if depth == 1:
            return min(width, height) * self.ring_ratio
        return self.fan_radius

    def angles_at(self, depth: int, parent_angle: float, count: int) -> list:
        if depth == 1:
            return [2 * math.pi * i / count for i in range(count)]
        return [parent_angle + (j - count / 2) * self.fan_step for j in range(count)]

    def node_radius(self, depth: int) -> float:
        return self.node_radii[min(depth, len(self.node_radii) - 1)]


def layout(
    tree: Optional[TreeNode],
    width: float,
    height: float,
    params: Optional[RadialParams] = None,
    virtual_ids: frozenset = frozenset(),
) -> Layout:
    """Compute node positions and parent-to-child links for one tree."""
    params = params or RadialParams()
    if tree is None:
        return Layout()
    if not (width >= params.min_viewport and height >= params.min_viewport):
        logger.debug("Viewport %sx%s clamped to %s", width, height, params.min_viewport)
        width = width if width >= params.min_viewport else params.min_viewport
        height = height if height >= params.min_viewport else params.min_viewport

    nodes: list[LayoutNode] = []
    links: list[LayoutLink] = []

    # Preorder walk; a link is recorded when its child is placed
    stack = [(tree, None, width / 2, height / 2, 0.0, 0)]
    while stack:
        node, parent_id, x, y, angle, depth = stack.pop()
        if parent_id is not None:
            links.append(LayoutLink(parent_id, node.id))
        nodes.append(LayoutNode(
            id=node.id,
            x=x,
            y=y,
            radius=params.node_radius(depth),
            depth=depth,
            label=node.note.label(params.label_length),
            virtual=node.id in virtual_ids,
        ))
        if not node.children:
            continue
        if params.max_depth is not None and depth >= params.max_depth:
            continue
        child_depth = depth + 1
        r = params.radius_at(child_depth, width, height)
        angles = params.angles_at(child_depth, angle, len(node.children))
        placed = [
            (child, node.id, x + r * math.cos(theta), y + r * math.sin(theta), theta, child_depth)
            for child, theta in zip(node.children, angles)
        ]
        stack.extend(reversed(placed))

    return Layout(nodes, links)


def layout_forest(
    forest: list,
    width: float,
    height: float,
    params: Optional[RadialParams] = None,
    root_label: str = "Hello Nostr World",
) -> Layout:
    """Lay out a whole forest; several roots hang off a synthesized centre node."""
    if not forest:
        return Layout()
    if len(forest) == 1:
        return layout(forest[0], width, height, params)
    virtual = TreeNode(Note(id=VIRTUAL_ROOT_ID, content=root_label), children=list(forest))
    return layout(virtual, width, height, params, virtual_ids=frozenset({VIRTUAL_ROOT_ID}))
