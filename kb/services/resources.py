from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, List, Mapping

from kb.core.config import settings
from kb.core.errors import NotFoundError, ValidationError
from kb.domain.records import ResourceRecord, next_id
from kb.models.common import utcnow
from kb.services.record_store import RecordStore

logger = logging.getLogger(__name__)

RESOURCE_NOT_FOUND = "Resource not found"
EDITABLE_FIELDS = ("title", "url", "type", "topic_id", "description")


def _with_title(resource: ResourceRecord) -> ResourceRecord:
    if resource.title:
        return resource
    return replace(resource, title=settings.UNTITLED_RESOURCE_TITLE)


def list_resources(store: RecordStore) -> List[ResourceRecord]:
    return [_with_title(r) for r in store.load().resources]


def create_resource(
    store: RecordStore,
    title: str | None,
    url: str | None,
    type: str | None,
    topic_id: int | None = None,
    description: str | None = "",
) -> ResourceRecord:
    if not str(title or "").strip() or not str(url or "").strip() or not str(type or "").strip():
        raise ValidationError("Title, URL, and type are required")

    with store.writing():
        snapshot = store.load()
        now = utcnow()
        resource = ResourceRecord(
            id=next_id(snapshot.resources),
            topic_id=topic_id,
            url=str(url),
            title=str(title),
            description=str(description or ""),
            type=str(type),
            created_at=now,
            updated_at=now,
        )
        snapshot.resources.append(resource)
        store.save(snapshot)

    logger.info("resource created id=%s topic=%s type=%s", resource.id, resource.topic_id, resource.type)
    return resource


def update_resource(store: RecordStore, resource_id: int, changes: Mapping[str, Any]) -> ResourceRecord:
    updates = {key: changes[key] for key in EDITABLE_FIELDS if key in changes}
    if "title" in updates and not str(updates["title"] or "").strip():
        raise ValidationError("Title cannot be empty")
    for key in ("url", "type"):
        if key in updates and not str(updates[key] or "").strip():
            raise ValidationError(f"Resource {key} cannot be empty")
    if "description" in updates and updates["description"] is None:
        updates["description"] = ""

    with store.writing():
        snapshot = store.load()
        index = next((i for i, r in enumerate(snapshot.resources) if r.id == resource_id), None)
        if index is None:
            raise NotFoundError(RESOURCE_NOT_FOUND)
        resource = _with_title(replace(snapshot.resources[index], **updates, updated_at=utcnow()))
        snapshot.resources[index] = resource
        store.save(snapshot)

    logger.info("resource updated id=%s", resource.id)
    return resource


def delete_resource(store: RecordStore, resource_id: int) -> None:
    with store.writing():
        snapshot = store.load()
        remaining = [r for r in snapshot.resources if r.id != resource_id]
        if len(remaining) == len(snapshot.resources):
            raise NotFoundError(RESOURCE_NOT_FOUND)
        snapshot.resources = remaining
        store.save(snapshot)

    logger.info("resource deleted id=%s", resource_id)
