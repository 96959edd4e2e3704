from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, List, Mapping

from kb.core.config import settings
from kb.core.errors import ConflictError, NotFoundError, ValidationError
from kb.domain.records import UserRecord, next_id
from kb.models.common import utcnow
from kb.services.record_store import RecordStore

logger = logging.getLogger(__name__)

USER_ROLES = ("Admin", "Editor", "Viewer")
USER_NOT_FOUND = "User not found"


def normalize_email(raw: str | None) -> str:
    return str(raw or "").strip()


def _validate_email(email: str) -> None:
    if "@" not in email:
        raise ValidationError("Invalid email format")


def _validate_role(role: str) -> None:
    if role not in USER_ROLES:
        raise ValidationError("Role must be one of: " + ", ".join(USER_ROLES))


def _email_taken(users: List[UserRecord], email: str, *, exclude_id: int | None = None) -> bool:
    return any(u.email == email and u.id != exclude_id for u in users)


def list_users(store: RecordStore) -> List[UserRecord]:
    return list(store.load().users)


def create_user(store: RecordStore, name: str | None, email: str | None, role: str | None = None) -> UserRecord:
    name = str(name or "").strip()
    email = normalize_email(email)
    if not name or not email:
        raise ValidationError("Name and email are required")
    _validate_email(email)
    role = str(role or settings.DEFAULT_USER_ROLE)
    _validate_role(role)

    with store.writing():
        snapshot = store.load()
        if _email_taken(snapshot.users, email):
            raise ConflictError("Email already exists")
        user = UserRecord(id=next_id(snapshot.users), name=name, email=email, role=role, created_at=utcnow())
        snapshot.users.append(user)
        store.save(snapshot)

    logger.info("user created id=%s role=%s", user.id, user.role)
    return user


def update_user(store: RecordStore, user_id: int, changes: Mapping[str, Any]) -> UserRecord:
    updates = {key: changes[key] for key in ("name", "email", "role") if changes.get(key) is not None}
    if "name" in updates and not str(updates["name"]).strip():
        raise ValidationError("Name cannot be empty")
    if "email" in updates:
        updates["email"] = normalize_email(updates["email"])
        _validate_email(updates["email"])
    if "role" in updates:
        _validate_role(updates["role"])

    with store.writing():
        snapshot = store.load()
        index = next((i for i, u in enumerate(snapshot.users) if u.id == user_id), None)
        if index is None:
            raise NotFoundError(USER_NOT_FOUND)
        if "email" in updates and _email_taken(snapshot.users, updates["email"], exclude_id=user_id):
            raise ConflictError("Email already exists")
        user = replace(snapshot.users[index], **updates)
        snapshot.users[index] = user
        store.save(snapshot)

    logger.info("user updated id=%s", user.id)
    return user


def delete_user(store: RecordStore, user_id: int) -> None:
    with store.writing():
        snapshot = store.load()
        remaining = [u for u in snapshot.users if u.id != user_id]
        if len(remaining) == len(snapshot.users):
            raise NotFoundError(USER_NOT_FOUND)
        snapshot.users = remaining
        store.save(snapshot)

    logger.info("user deleted id=%s", user_id)
