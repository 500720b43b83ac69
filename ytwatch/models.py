# ytwatch/models.py
# Candidate items fetched from the API and the per-cycle result built from them.

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .utils.timeutil import isoformat

# Payload keys used for the count and the full list, per watcher kind
_PAYLOAD_KEYS = {
    "comments": ("newCommentsCount", "allNewComments"),
    "videos": ("newVideosCount", "allNewVideos"),
}


@dataclass(frozen=True)
class CandidateItem:
    """One remote record. Detection only looks at `id` and `created_at`."""

    id: str
    created_at: Optional[datetime]
    source: str = ""
    fields: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Read-only view so a CycleResult cannot be changed through its items
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.fields)
        out["publishedAt"] = isoformat(self.created_at)
        return out


@dataclass(frozen=True)
class CycleResult:
    """Everything found new in one cycle. Only exists when something was found."""

    representative: CandidateItem
    new_items: Tuple[CandidateItem, ...]
    count: int

    def __post_init__(self) -> None:
        if not self.new_items:
            raise ValueError("CycleResult needs at least one new item")
        if self.count != len(self.new_items):
            raise ValueError(f"count {self.count} != {len(self.new_items)} new items")
        if self.representative is not self.new_items[0]:
            raise ValueError("representative must be the first new item")

    @classmethod
    def of(cls, items: List[CandidateItem]) -> "CycleResult":
        items = tuple(items)
        return cls(representative=items[0] if items else None, new_items=items, count=len(items))

    def to_payload(self, kind: str) -> Dict[str, Any]:
        """Flatten into the dict handed to emitters (representative fields on top)."""
        count_key, list_key = _PAYLOAD_KEYS.get(kind, ("newItemsCount", "allNewItems"))
        payload = self.representative.to_dict()
        payload[count_key] = self.count
        payload[list_key] = [it.to_dict() for it in self.new_items]
        return payload
