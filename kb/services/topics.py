from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, List, Mapping, Optional

from kb.core.errors import NotFoundError, ValidationError
from kb.domain.records import TopicRecord, next_id
from kb.models.common import utcnow
from kb.services.record_store import RecordStore
from kb.services.topic_path import find_shortest_path
from kb.services.topic_tree import TopicTreeNode, build_topic_tree
from kb.services.topic_versions import latest_by_id, latest_topics, max_version, resolve_latest, version_history

logger = logging.getLogger(__name__)

TOPIC_NOT_FOUND = "Topic not found"
EDITABLE_FIELDS = ("name", "content", "description", "parent_topic_id")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return not str(value).strip()


def list_topics(store: RecordStore) -> List[TopicRecord]:
    return latest_topics(store.load().topics)


def get_topic(store: RecordStore, topic_id: int) -> TopicRecord:
    topic = resolve_latest(store.load().topics, topic_id)
    if topic is None:
        raise NotFoundError(TOPIC_NOT_FOUND)
    return topic


def get_topic_history(store: RecordStore, topic_id: int) -> List[TopicRecord]:
    history = version_history(store.load().topics, topic_id)
    if not history:
        raise NotFoundError(TOPIC_NOT_FOUND)
    return history


def create_topic(
    store: RecordStore,
    name: str | None,
    content: str | None,
    description: str | None = "",
    parent_topic_id: int | None = None,
) -> TopicRecord:
    if _is_blank(name) or _is_blank(content):
        raise ValidationError("Name and content are required")

    with store.writing():
        snapshot = store.load()
        now = utcnow()
        topic = TopicRecord(
            id=next_id(snapshot.topics),
            version=0,
            name=str(name),
            content=str(content),
            description=str(description or ""),
            parent_topic_id=parent_topic_id,
            created_at=now,
            updated_at=now,
        )
        snapshot.topics.append(topic)
        store.save(snapshot)

    logger.info("topic created id=%s parent=%s", topic.id, topic.parent_topic_id)
    return topic


def update_topic(store: RecordStore, topic_id: int, changes: Mapping[str, Any]) -> TopicRecord:
    """
    Append a new version of ``topic_id`` with ``changes`` merged over the current one.

    Only name, content, description and parent_topic_id are taken from
    ``changes``; an explicit ``parent_topic_id=None`` detaches the topic.
    """
    updates = {key: changes[key] for key in EDITABLE_FIELDS if key in changes}
    for key in ("name", "content"):
        if key in updates and _is_blank(updates[key]):
            raise ValidationError(f"Topic {key} cannot be empty")
    if "description" in updates and updates["description"] is None:
        updates["description"] = ""

    with store.writing():
        snapshot = store.load()
        current = resolve_latest(snapshot.topics, topic_id)
        if current is None:
            raise NotFoundError(TOPIC_NOT_FOUND)
        next_version = max_version(snapshot.topics, topic_id) + 1
        topic = replace(current, **updates, version=next_version, updated_at=utcnow())
        snapshot.topics.append(topic)
        store.save(snapshot)

    logger.info("topic updated id=%s version=%s", topic.id, topic.version)
    return topic


def delete_topic(store: RecordStore, topic_id: int) -> None:
    with store.writing():
        snapshot = store.load()
        remaining = [t for t in snapshot.topics if t.id != topic_id]
        removed = len(snapshot.topics) - len(remaining)
        if not removed:
            raise NotFoundError(TOPIC_NOT_FOUND)
        snapshot.topics = remaining
        store.save(snapshot)

    logger.info("topic deleted id=%s versions=%s", topic_id, removed)


def get_topic_tree(store: RecordStore, root_id: int) -> Optional[TopicTreeNode]:
    return build_topic_tree(store.load().topics, root_id)


def get_shortest_path(store: RecordStore, start_id: int, end_id: int) -> Optional[List[int]]:
    return find_shortest_path(store.load().topics, start_id, end_id)


def get_expanded_path(store: RecordStore, start_id: int, end_id: int) -> Optional[List[TopicRecord]]:
    """Same search as ``get_shortest_path``, returning the current topics along the path."""
    topics = store.load().topics
    path = find_shortest_path(topics, start_id, end_id)
    if path is None:
        return None
    latest = latest_by_id(topics)
    return [latest[topic_id] for topic_id in path]
