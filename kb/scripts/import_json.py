"""
Import a legacy JSON database file into the record store.

The file holds the whole record set with camelCase keys::

    {"topics": [{"id": 1, "version": 0, "parentTopicId": null, ...}],
     "users": [...], "resources": [...]}

The imported snapshot replaces everything currently stored. Missing optional
fields get the same defaults the API applies (empty description, version 0,
no parent, "Viewer" role).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from kb.core.config import settings
from kb.core.errors import KnowledgeBaseError, StoreWriteError, ValidationError
from kb.core.log_config import configure_logging
from kb.db.session import SessionLocal, ensure_sqlite_directory, init_db
from kb.domain.records import RecordSet, ResourceRecord, TopicRecord, UserRecord
from kb.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def _parse_timestamp(raw: Any) -> datetime:
    text = str(raw or "").strip()
    if not text:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {text}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_int(raw: Any) -> int | None:
    if raw is None or raw == "":
        return None
    return int(raw)


def _topic_from_json(item: dict) -> TopicRecord:
    return TopicRecord(
        id=int(item["id"]),
        version=int(item.get("version") or 0),
        name=str(item.get("name") or ""),
        content=str(item.get("content") or ""),
        description=str(item.get("description") or ""),
        parent_topic_id=_optional_int(item.get("parentTopicId")),
        created_at=_parse_timestamp(item.get("createdAt")),
        updated_at=_parse_timestamp(item.get("updatedAt")),
    )


def _user_from_json(item: dict) -> UserRecord:
    return UserRecord(
        id=int(item["id"]),
        name=str(item.get("name") or ""),
        email=str(item.get("email") or ""),
        role=str(item.get("role") or settings.DEFAULT_USER_ROLE),
        created_at=_parse_timestamp(item.get("createdAt")),
    )


def _resource_from_json(item: dict) -> ResourceRecord:
    return ResourceRecord(
        id=int(item["id"]),
        topic_id=_optional_int(item.get("topicId")),
        url=str(item.get("url") or ""),
        title=str(item.get("title") or ""),
        description=str(item.get("description") or ""),
        type=str(item.get("type") or ""),
        created_at=_parse_timestamp(item.get("createdAt")),
        updated_at=_parse_timestamp(item.get("updatedAt")),
    )


def snapshot_from_legacy(data: dict) -> RecordSet:
    if not isinstance(data, dict):
        raise ValidationError("Legacy database must be a JSON object")
    try:
        return RecordSet(
            topics=[_topic_from_json(item) for item in data.get("topics") or []],
            users=[_user_from_json(item) for item in data.get("users") or []],
            resources=[_resource_from_json(item) for item in data.get("resources") or []],
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed legacy record: {exc}")


def import_legacy_database(store: RecordStore, data: dict) -> RecordSet:
    snapshot = snapshot_from_legacy(data)
    with store.writing():
        if not store.save(snapshot):
            raise StoreWriteError("Legacy import was not persisted; stored records are unchanged")
    logger.info(
        "legacy import topics=%s users=%s resources=%s",
        len(snapshot.topics),
        len(snapshot.users),
        len(snapshot.resources),
    )
    return snapshot


def main() -> None:
    parser = argparse.ArgumentParser(description="Import a legacy JSON database into the knowledge base")
    parser.add_argument("path", type=Path, help="path to database.json")
    args = parser.parse_args()

    configure_logging()
    data = json.loads(args.path.read_text(encoding="utf-8"))
    if settings.DB_AUTO_CREATE:
        ensure_sqlite_directory(settings.DATABASE_URL)
        init_db()
    db = SessionLocal()
    try:
        snapshot = import_legacy_database(RecordStore(db), data)
    except KnowledgeBaseError as exc:
        print(f"import failed: {exc.detail}", file=sys.stderr)
        raise SystemExit(1)
    finally:
        db.close()
    print(
        f"import done: topics={len(snapshot.topics)}, users={len(snapshot.users)}, "
        f"resources={len(snapshot.resources)}"
    )


if __name__ == "__main__":
    main()
