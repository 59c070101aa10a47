"""User entities, in-memory storage and the user service."""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from .errors import EmptyIDError, InvalidInputError, NoFieldsToUpdateError, NotFoundError

_LETTERS = re.compile(r"[A-Za-z]+")


def _is_letters(value: str) -> bool:
    return _LETTERS.fullmatch(value) is not None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class UserStatus(str, Enum):
    """Lifecycle state of a user; deletion is logical."""

    ACTIVE = "active"
    DELETED = "deleted"


@dataclass
class User:
    """A system user with auditing and versioning metadata."""

    name: str = ""
    address: str = ""
    nickname: str = ""
    id: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 0
    status: UserStatus | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation of the user."""
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "nickname": self.nickname,
            "created_at": _timestamp(self.created_at),
            "updated_at": _timestamp(self.updated_at),
            "version": self.version,
            "status": self.status.value if self.status is not None else "",
        }


@dataclass
class UserUpdate:
    """Optional fields for a partial update; None means no change."""

    name: str | None = None
    address: str | None = None
    nickname: str | None = None


class UserStorage:
    """In-memory store of users keyed by identifier."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def set(self, user: User) -> None:
        """Store or replace a user."""
        if not user.id:
            raise EmptyIDError()
        self._users[user.id] = user

    def read(self, user_id: str) -> User:
        """Return the user with the given identifier."""
        try:
            return self._users[user_id]
        except KeyError:
            raise NotFoundError() from None

    def delete(self, user_id: str) -> None:
        """Remove the user with the given identifier."""
        self.read(user_id)
        del self._users[user_id]


class UserService:
    """User management operations on top of a storage backend."""

    def __init__(
        self,
        storage: UserStorage | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.storage = storage if storage is not None else UserStorage()
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def create(self, user: User) -> User:
        """Validate and store a new user, filling in its metadata."""
        if not user.name or not user.address:
            raise InvalidInputError()
        if not _is_letters(user.name):
            raise InvalidInputError()
        if user.nickname and not _is_letters(user.nickname):
            raise InvalidInputError()

        user.id = str(uuid.uuid4())
        now = _now()
        user.created_at = now
        user.updated_at = now
        user.version = 1
        user.status = UserStatus.ACTIVE

        try:
            self.storage.set(user)
        except Exception as exc:
            self.logger.error("failed to set user: %s (%r)", exc, user)
            raise
        return user

    def get(self, user_id: str) -> User:
        """Return an active user; deleted users are reported as missing."""
        user = self.storage.read(user_id)
        if user.status == UserStatus.DELETED:
            raise NotFoundError()
        return user

    def update(self, user_id: str, updates: UserUpdate | None) -> User:
        """Apply a partial update and bump the version."""
        existing = self.storage.read(user_id)
        updates = updates if updates is not None else UserUpdate()
        updated = False

        if updates.name is not None:
            if not _is_letters(updates.name):
                raise InvalidInputError()
            existing.name = updates.name
            updated = True

        if updates.address is not None:
            existing.address = updates.address
            updated = True

        if updates.nickname is not None:
            if not _is_letters(updates.nickname):
                raise InvalidInputError()
            existing.nickname = updates.nickname
            updated = True

        if not updated:
            raise NoFieldsToUpdateError()

        existing.updated_at = _now()
        existing.version += 1
        self.storage.set(existing)
        return existing

    def delete(self, user_id: str) -> None:
        """Mark a user as deleted without removing it from storage."""
        user = self.storage.read(user_id)
        user.status = UserStatus.DELETED
        user.updated_at = _now()
        user.version += 1
        try:
            self.storage.set(user)
        except Exception as exc:
            self.logger.error("failed to set user as deleted: %s (id=%s)", exc, user_id)
            raise