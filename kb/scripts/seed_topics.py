from __future__ import annotations

import argparse
from datetime import datetime, timedelta, timezone

from kb.core.config import settings
from kb.core.log_config import configure_logging
from kb.db.session import SessionLocal, ensure_sqlite_directory, init_db
from kb.domain.records import RecordSet, ResourceRecord, TopicRecord, UserRecord
from kb.services.record_store import RecordStore

SAMPLE_SIZE = 40


def _days_ago(now: datetime, days: int) -> datetime:
    return now - timedelta(days=days)


def _sample_parent(index: int) -> int | None:
    # Three levels: 11-20 under 1-10, 21-30 under 1-10, 31-40 under 21-30.
    if index > 30:
        return index - 10
    if index > 20:
        return index - 20
    if index > 10:
        return index - 10
    return None


def build_sample_snapshot(size: int = SAMPLE_SIZE, now: datetime | None = None) -> RecordSet:
    now = now or datetime.now(timezone.utc)
    topics = []
    for index in range(1, size + 1):
        created_at = _days_ago(now, size - index + 1)
        topics.append(
            TopicRecord(
                id=index,
                version=0,
                name=f"Topic {index}",
                content=f"Detailed content for Topic {index}",
                description="",
                parent_topic_id=_sample_parent(index),
                created_at=created_at,
                updated_at=created_at,
            )
        )

    users = [UserRecord(id=1, name="Admin User", email="admin@example.com", role="Admin", created_at=_days_ago(now, size))]
    users.extend(
        UserRecord(
            id=index + 1,
            name=f"User {index}",
            email=f"user{index}@example.com",
            role="Viewer",
            created_at=_days_ago(now, size - index),
        )
        for index in range(1, size + 1)
    )

    resources = []
    for index in range(1, size + 1):
        offset = index - 1
        kind = "pdf" if offset % 3 == 0 else "video" if offset % 2 == 0 else "article"
        created_at = _days_ago(now, size - index)
        resources.append(
            ResourceRecord(
                id=index,
                topic_id=index,
                url=f"http://example.com/resource{index}",
                title=f"Resource {index}",
                description=f"Description for Resource {index}",
                type=kind,
                created_at=created_at,
                updated_at=created_at,
            )
        )
    return RecordSet(topics=topics, users=users, resources=resources)


def seed_sample(store: RecordStore, *, size: int = SAMPLE_SIZE, reset: bool = False) -> bool:
    """Write the sample snapshot. Without ``reset`` a store that already has topics is left alone."""
    with store.writing():
        if not reset and store.load().topics:
            return False
        return store.save(build_sample_snapshot(size))


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the knowledge base with a sample topic hierarchy")
    parser.add_argument("--size", type=int, default=SAMPLE_SIZE, help="number of topics, users and resources")
    parser.add_argument("--reset", action="store_true", help="replace existing records")
    args = parser.parse_args()

    configure_logging()
    if settings.DB_AUTO_CREATE:
        ensure_sqlite_directory(settings.DATABASE_URL)
        init_db()
    db = SessionLocal()
    try:
        written = seed_sample(RecordStore(db), size=args.size, reset=args.reset)
    finally:
        db.close()
    print(f"seed done: written={written}, size={args.size}")


if __name__ == "__main__":
    main()
