from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

NOTE_REF = "e"
REPLY_MARKER = "reply"
ROOT_MARKER = "root"


@dataclass(frozen=True)
class ReferenceTag:
    kind: str
    target_id: str
    relay: str = ""
    marker: Optional[str] = None

    @classmethod
    def from_list(cls, raw) -> Optional["ReferenceTag"]:
        """Decode a ``["e", id, relay, marker]`` style tag, or None if unusable."""
        if not isinstance(raw, (list, tuple)) or len(raw) < 2:
            return None
        kind, target = raw[0], raw[1]
        if not isinstance(kind, str) or not isinstance(target, str):
            return None
        relay = raw[2] if len(raw) > 2 and isinstance(raw[2], str) else ""
        marker = raw[3] if len(raw) > 3 and isinstance(raw[3], str) and raw[3] else None
        return cls(kind, target, relay, marker)

    def to_list(self) -> list:
        out = [self.kind, self.target_id]
        if self.marker:
            out += [self.relay, self.marker]
        elif self.relay:
            out.append(self.relay)
        return out

    @property
    def is_note_ref(self) -> bool:
        return self.kind == NOTE_REF and bool(self.target_id)


@dataclass(frozen=True)
class Note:
    id: str
    content: str = ""
    author_id: str = ""
    created_at: int = 0
    reference_tags: tuple = field(default_factory=tuple)
    author_name: Optional[str] = None

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "pubkey": self.author_id,
            "created_at": self.created_at,
            "tags": [t.to_list() for t in self.reference_tags],
        }

    def label(self, length: int = 20) -> str:
        if len(self.content) > length:
            return self.content[:length] + "..."
        return self.content


def note_from_record(record: dict) -> Optional[Note]:
    """Build a Note from a stored record.

    Accepts the event shape (``id, content, pubkey, created_at, tags``) and the
    older flat shape that only carries ``parent_id``. Returns None when the
    record has no usable id.
    """
    if not isinstance(record, dict):
        return None
    note_id = record.get("id")
    if not isinstance(note_id, str) or not note_id:
        return None

    raw_tags = record.get("tags") or []
    if not isinstance(raw_tags, list):
        logger.warning("Note %s has non-list tags, ignoring them", note_id)
        raw_tags = []
    tags = [t for t in (ReferenceTag.from_list(r) for r in raw_tags) if t is not None]

    parent_id = record.get("parent_id")
    if not tags and isinstance(parent_id, str) and parent_id:
        tags = [ReferenceTag(NOTE_REF, parent_id, "", REPLY_MARKER)]

    try:
        created_at = int(record.get("created_at") or 0)
    except (TypeError, ValueError):
        created_at = 0

    return Note(
        id=note_id,
        content=str(record.get("content") or ""),
        author_id=str(record.get("pubkey") or record.get("author_id") or ""),
        created_at=created_at,
        reference_tags=tuple(tags),
        author_name=record.get("author_name"),
    )


def resolve_parent(note: Note) -> Optional[str]:
    """Return the id of the note this one replies to, or None for a root.

    A reference explicitly marked as a reply wins. Otherwise the last note
    reference in the list is taken as the parent. References pointing back at
    the note itself are discarded before either rule applies.
    """
    refs = [
        t for t in note.reference_tags
        if t.is_note_ref and t.target_id != note.id
    ]
    if len(refs) != sum(1 for t in note.reference_tags if t.is_note_ref):
        logger.debug("Dropped self reference on note %s", note.id)
    for tag in refs:
        if tag.marker == REPLY_MARKER:
            return tag.target_id
    if refs:
        return refs[-1].target_id
    return None
