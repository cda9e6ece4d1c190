from __future__ import annotations

from echofield.notes import Note, ReferenceTag


def make_note(note_id: str, parent: str | None = None, content: str = "", created_at: int = 0, tags=None) -> Note:
    if tags is None:
        tags = [["e", parent, "", "reply"]] if parent else []
    refs = tuple(r for r in (ReferenceTag.from_list(t) for t in tags) if r is not None)
    return Note(id=note_id, content=content or f"note {note_id}", created_at=created_at, reference_tags=refs)
