"""Reply-thread reconstruction and radial layout for Echo Field."""

from .forest import TreeNode, build_forest, find_path
from .interaction import ExpansionState, FocusRequest, Interaction, hit_test
from .notes import Note, ReferenceTag, note_from_record, resolve_parent
from .radial import Layout, LayoutLink, LayoutNode, RadialParams, layout, layout_forest
from .viewport import ViewTransform

__all__ = [
    "ExpansionState",
    "FocusRequest",
    "Interaction",
    "Layout",
    "LayoutLink",
    "LayoutNode",
    "Note",
    "RadialParams",
    "ReferenceTag",
    "TreeNode",
    "ViewTransform",
    "build_forest",
    "find_path",
    "hit_test",
    "layout",
    "layout_forest",
    "note_from_record",
    "resolve_parent",
]
