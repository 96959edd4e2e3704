from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from kb.domain.records import TopicRecord


def resolve_latest(records: Iterable[TopicRecord], topic_id: int) -> Optional[TopicRecord]:
    """
    Current state of ``topic_id``: the record with the highest version for that id.

    Returns None when no record carries the id. If two records share the maximum
    version, the first one in snapshot order wins; that choice is not a contract.
    """
    latest: Optional[TopicRecord] = None
    for record in records:
        if record.id != topic_id:
            continue
        if latest is None or record.version > latest.version:
            latest = record
    return latest


def latest_by_id(records: Iterable[TopicRecord]) -> Dict[int, TopicRecord]:
    """Single-pass resolution of every id, with the same tie rule as ``resolve_latest``."""
    latest: Dict[int, TopicRecord] = {}
    for record in records:
        current = latest.get(record.id)
        if current is None or record.version > current.version:
            latest[record.id] = record
    return latest


def latest_topics(records: Iterable[TopicRecord]) -> List[TopicRecord]:
    return [topic for _, topic in sorted(latest_by_id(records).items())]


def version_history(records: Iterable[TopicRecord], topic_id: int) -> List[TopicRecord]:
    return sorted((r for r in records if r.id == topic_id), key=lambda r: r.version)


def max_version(records: Iterable[TopicRecord], topic_id: int) -> Optional[int]:
    versions = [r.version for r in records if r.id == topic_id]
    return max(versions) if versions else None
