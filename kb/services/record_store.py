from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from threading import RLock
from typing import Iterator

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kb.core.errors import FatalStoreError
from kb.domain.records import RecordSet, ResourceRecord, TopicRecord, UserRecord
from kb.models.resource import Resource
from kb.models.topic_version import TopicVersion
from kb.models.user import User

logger = logging.getLogger(__name__)

# Serializes load-mutate-save for every writer in this process.
_WRITE_LOCK = RLock()


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _topic_record(row: TopicVersion) -> TopicRecord:
    return TopicRecord(
        id=int(row.topic_id),
        version=int(row.version or 0),
        name=str(row.name or ""),
        content=str(row.content or ""),
        description=str(row.description or ""),
        parent_topic_id=int(row.parent_topic_id) if row.parent_topic_id is not None else None,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


def _user_record(row: User) -> UserRecord:
    return UserRecord(
        id=int(row.id),
        name=str(row.name or ""),
        email=str(row.email or ""),
        role=str(row.role or ""),
        created_at=_as_utc(row.created_at),
    )


def _resource_record(row: Resource) -> ResourceRecord:
    return ResourceRecord(
        id=int(row.id),
        topic_id=int(row.topic_id) if row.topic_id is not None else None,
        url=str(row.url or ""),
        title=str(row.title or ""),
        description=str(row.description or ""),
        type=str(row.type or ""),
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class RecordStore:
    """
    Snapshot access to the persisted record set.

    ``load`` reads every topic version, user and resource; ``save`` replaces the
    stored set with the given snapshot in one transaction. There is no partial
    write and no merge with rows written by other processes since the load.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def writing(self) -> Iterator["RecordStore"]:
        with _WRITE_LOCK:
            yield self

    def load(self) -> RecordSet:
        try:
            topics = [
                _topic_record(row)
                for row in self.db.query(TopicVersion).order_by(TopicVersion.row_id.asc()).all()
            ]
            users = [_user_record(row) for row in self.db.query(User).order_by(User.id.asc()).all()]
            resources = [
                _resource_record(row) for row in self.db.query(Resource).order_by(Resource.id.asc()).all()
            ]
        except SQLAlchemyError as exc:
            logger.error("record store load failed", exc_info=True)
            raise FatalStoreError(f"Record store is unreadable: {exc.__class__.__name__}") from exc
        logger.debug(
            "record store loaded topics=%s users=%s resources=%s",
            len(topics),
            len(users),
            len(resources),
        )
        return RecordSet(topics=topics, users=users, resources=resources)

    def save(self, snapshot: RecordSet) -> bool:
        """Replace the stored set with ``snapshot``. Returns False when nothing was written."""
        try:
            self.db.execute(delete(TopicVersion))
            self.db.execute(delete(User))
            self.db.execute(delete(Resource))
            self.db.add_all(
                TopicVersion(
                    topic_id=t.id,
                    version=t.version,
                    name=t.name,
                    content=t.content,
                    description=t.description,
                    parent_topic_id=t.parent_topic_id,
                    created_at=t.created_at,
                    updated_at=t.updated_at,
                )
                for t in snapshot.topics
            )
            self.db.add_all(
                User(id=u.id, name=u.name, email=u.email, role=u.role, created_at=u.created_at)
                for u in snapshot.users
            )
            self.db.add_all(
                Resource(
                    id=r.id,
                    topic_id=r.topic_id,
                    url=r.url,
                    title=r.title,
                    description=r.description,
                    type=r.type,
                    created_at=r.created_at,
                    updated_at=r.updated_at,
                )
                for r in snapshot.resources
            )
            self.db.commit()
        except SQLAlchemyError:
            logger.error("record store save failed, snapshot not persisted", exc_info=True)
            try:
                self.db.rollback()
            except SQLAlchemyError:
                logger.debug("record_store_rollback_failed", exc_info=True)
            return False
        logger.debug(
            "record store saved topics=%s users=%s resources=%s",
            len(snapshot.topics),
            len(snapshot.users),
            len(snapshot.resources),
        )
        return True
