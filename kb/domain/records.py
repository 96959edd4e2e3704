"""
Immutable records held by a loaded snapshot.

A ``RecordSet`` is what the record store hands out and takes back. Topic records
are append-only: an update produces a new ``TopicRecord`` with a higher version
(see ``dataclasses.replace``), never an edit of an existing one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class TopicRecord:
    id: int
    version: int
    name: str
    content: str
    description: str = ""
    parent_topic_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "version": self.version,
            "name": self.name,
            "content": self.content,
            "description": self.description,
            "parent_topic_id": self.parent_topic_id,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass(frozen=True)
class UserRecord:
    id: int
    name: str
    email: str
    role: str = "Viewer"
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "created_at": _iso(self.created_at),
        }


@dataclass(frozen=True)
class ResourceRecord:
    id: int
    url: str
    type: str
    title: str = ""
    description: str = ""
    topic_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "topic_id": self.topic_id,
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "type": self.type,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass
class RecordSet:
    """Full snapshot of the store. The lists are replaced wholesale on save."""

    topics: List[TopicRecord] = field(default_factory=list)
    users: List[UserRecord] = field(default_factory=list)
    resources: List[ResourceRecord] = field(default_factory=list)


def next_id(records) -> int:
    """Smallest id above every id present; 1 for an empty collection."""
    return max((r.id for r in records), default=0) + 1
