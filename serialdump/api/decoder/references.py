"""
Reference table: every registered value in pre-order, numbered from 1.

Lookups are purely positional. The structural path stored with each entry
(`#`, `#/key`, `#/key/sub`, ...) is diagnostic only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .export import Scalar


@dataclass(frozen=True)
class ReferenceEntry:
    line: int
    value: Scalar
    path: str


# Slot 0 is never a valid target; real ids start at 1.
PLACEHOLDER = ReferenceEntry(line=-1, value=b"<placeholder>", path="")


class ReferenceTable:
    def __init__(self) -> None:
        self._entries: List[ReferenceEntry] = [PLACEHOLDER]

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def registered(self) -> int:
        return len(self._entries) - 1

    def register(self, line: int, value: Scalar, path: str) -> int:
        """Append an entry and return its id."""
        self._entries.append(ReferenceEntry(line=line, value=value, path=path))
        return len(self._entries) - 1

    def is_valid(self, ref_id: int) -> bool:
        return 1 <= ref_id < len(self._entries)

    def get(self, ref_id: int) -> Optional[ReferenceEntry]:
        if not self.is_valid(ref_id):
            return None
        return self._entries[ref_id]

    def entries(self) -> List[ReferenceEntry]:
        return list(self._entries[1:])
