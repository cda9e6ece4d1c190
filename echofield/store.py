"""Local JSON note store.

Stands where a relay or database client would: it hands the core a snapshot
of notes and accepts new ones. The file holds either a bare list of records
or ``{"notes": [...], "profiles": {pubkey: name}}``.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import threading
import time
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .notes import NOTE_REF, REPLY_MARKER, Note, ReferenceTag, note_from_record

logger = logging.getLogger(__name__)

TEXT_NOTE_KIND = 1


def event_id(author_id: str, created_at: int, tags: list, content: str) -> str:
    payload = json.dumps(
        [0, author_id, created_at, TEXT_NOTE_KIND, tags, content],
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class NoteStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> tuple:
        if not self.path.is_file():
            return [], {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("could not read %s: %s", self.path, e)
            return [], {}
        if isinstance(data, list):
            return data, {}
        if isinstance(data, dict):
            records = data.get("notes") or []
            profiles = data.get("profiles") or {}
            return (records if isinstance(records, list) else []), (profiles if isinstance(profiles, dict) else {})
        return [], {}

    def _write(self, records: list, profiles: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps({"notes": records, "profiles": profiles}, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)

    def load(self) -> list:
        records, profiles = self._read()
        notes = []
        for record in records:
            note = note_from_record(record)
            if note is None:
                logger.warning("Skipping malformed note record: %r", record)
                continue
            name = profiles.get(note.author_id)
            if name and not note.author_name:
                note = replace(note, author_name=name)
            notes.append(note)
        return notes

    def get(self, note_id: str) -> Optional[Note]:
        for note in self.load():
            if note.id == note_id:
                return note
        return None

    def fetch_posts(self, limit: int = 50) -> list:
        notes = sorted(self.load(), key=lambda n: n.created_at, reverse=True)
        return notes[:limit]

    def fetch_thread(self, root_id: str) -> list:
        """The root plus every note that transitively references it, oldest first."""
        notes = self.load()
        by_ref: dict[str, list] = {}
        by_id: dict[str, Note] = {}
        for note in notes:
            by_id.setdefault(note.id, note)
            for tag in note.reference_tags:
                if tag.is_note_ref and tag.target_id != note.id:
                    by_ref.setdefault(tag.target_id, []).append(note)

        found: dict[str, Note] = {}
        if root_id in by_id:
            found[root_id] = by_id[root_id]
        frontier = [root_id]
        while frontier:
            ref = frontier.pop()
            for note in by_ref.get(ref, []):
                if note.id not in found:
                    found[note.id] = note
                    frontier.append(note.id)
        return sorted(found.values(), key=lambda n: n.created_at)

    def state_hash(self) -> str:
        h = hashlib.md5()
        try:
            st = self.path.stat()
            h.update(f"{st.st_size}:{st.st_mtime_ns}".encode())
        except OSError:
            pass
        return h.hexdigest()

    def publish(self, content: str, parent_id: Optional[str] = None, author_id: str = "anonymous") -> Note:
        if not isinstance(content, str) or not content.strip():
            raise ValueError("Post cannot be empty")
        with self._lock:
            records, profiles = self._read()
            if parent_id:
                known = {r.get("id") for r in records if isinstance(r, dict)}
                if parent_id not in known:
                    raise LookupError(f"Unknown parent note {parent_id}")
                tags = [ReferenceTag(NOTE_REF, parent_id, "", REPLY_MARKER).to_list()]
            else:
                tags = []
            created_at = int(time.time())
            record = {
                "id": event_id(author_id, created_at, tags, content),
                "content": content,
                "pubkey": author_id,
                "created_at": created_at,
                "tags": tags,
            }
            records.append(record)
            self._write(records, profiles)
        logger.info("Published note %s (reply to %s)", record["id"], parent_id)
        return note_from_record(record)
