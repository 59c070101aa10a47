"""Sale entities, in-memory storage, reporting and the sale service."""

from __future__ import annotations

import dataclasses
import logging
import random
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from .errors import (
    EmptyIDError,
    InvalidInputError,
    SaleNotFoundError,
    ServiceError,
    TransactionInvalidError,
)
from .users import UserService


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class SaleStatus(str, Enum):
    """State of a sale."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class Sale:
    """A sale made by a user, with auditing and versioning metadata."""

    user_id: str = ""
    amount: float = 0.0
    id: str = ""
    status: SaleStatus | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation of the sale."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "amount": self.amount,
            "status": self.status.value if self.status is not None else "",
            "created_at": _timestamp(self.created_at),
            "updated_at": _timestamp(self.updated_at),
            "version": self.version,
        }


@dataclass
class SaleUpdate:
    """Requested change to a sale."""

    status: str = ""


@dataclass
class SaleSummary:
    """Counts and total amount over a set of sales."""

    quantity: int = 0
    approved: int = 0
    rejected: int = 0
    pending: int = 0
    total_amount: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation of the summary."""
        return {
            "quantity": self.quantity,
            "approved": self.approved,
            "rejected": self.rejected,
            "pending": self.pending,
            "total_amount": self.total_amount,
        }


@dataclass
class SaleReport:
    """Sales matching a query together with their summary."""

    metadata: SaleSummary = field(default_factory=SaleSummary)
    results: list[Sale] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation of the report."""
        return {
            "metadata": self.metadata.to_dict(),
            "results": [sale.to_dict() for sale in self.results],
        }


class SaleStorage:
    """In-memory store of sales keyed by identifier."""

    def __init__(self) -> None:
        self._sales: dict[str, Sale] = {}

    def set(self, sale: Sale) -> None:
        """Store or replace a sale."""
        if not sale.id:
            raise EmptyIDError()
        self._sales[sale.id] = sale

    def read(self, sale_id: str) -> Sale:
        """Return the sale with the given identifier."""
        try:
            return self._sales[sale_id]
        except KeyError:
            raise SaleNotFoundError() from None

    def read_all(self) -> dict[str, Sale]:
        """Return every stored sale; an empty store is an error."""
        if not self._sales:
            raise SaleNotFoundError()
        return dict(self._sales)


_VALID_STATUSES = frozenset(status.value for status in SaleStatus)


class SaleService:
    """Sale operations on top of a storage backend and a user service."""

    def __init__(
        self,
        user_service: UserService,
        storage: SaleStorage | None = None,
        logger: logging.Logger | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.user_service = user_service
        self.storage = storage if storage is not None else SaleStorage()
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self._rng = rng if rng is not None else random.Random()

    def create(self, sale: Sale) -> Sale:
        """Validate and store a new sale with a randomly assigned status."""
        try:
            user = self.user_service.get(sale.user_id)
        except ServiceError:
            raise SaleNotFoundError() from None
        if sale.amount <= 0.0:
            raise InvalidInputError()

        sale.id = str(uuid.uuid4())
        sale.user_id = user.id
        sale.status = self._rng.choice(
            [SaleStatus.PENDING, SaleStatus.APPROVED, SaleStatus.REJECTED]
        )
        now = _now()
        sale.created_at = now
        sale.updated_at = now
        sale.version = 1

        try:
            self.storage.set(sale)
        except Exception as exc:
            self.logger.error("failed to set sale: %s (%r)", exc, sale)
            raise
        return sale

    def get(self, sale_id: str) -> Sale:
        """Return the sale with the given identifier."""
        return self.storage.read(sale_id)

    def report(self, user_id: str, status: str = "") -> SaleReport:
        """Return a user's sales, optionally filtered by status, with a summary."""
        if status and status not in _VALID_STATUSES:
            raise InvalidInputError()

        results = [
            dataclasses.replace(sale)
            for sale in self.storage.read_all().values()
            if sale.user_id == user_id and (not status or sale.status == status)
        ]

        summary = SaleSummary(quantity=len(results))
        for sale in results:
            if sale.status == SaleStatus.APPROVED:
                summary.approved += 1
            elif sale.status == SaleStatus.REJECTED:
                summary.rejected += 1
            elif sale.status == SaleStatus.PENDING:
                summary.pending += 1
            summary.total_amount += sale.amount

        return SaleReport(metadata=summary, results=results)

    def update(self, sale_id: str, updates: SaleUpdate | None) -> Sale:
        """Move a pending sale to approved or rejected."""
        existing = self.storage.read(sale_id)
        if existing.status != SaleStatus.PENDING:
            raise TransactionInvalidError()

        requested = updates.status if updates is not None else ""
        if requested not in (SaleStatus.APPROVED.value, SaleStatus.REJECTED.value):
            raise InvalidInputError()
        existing.status = SaleStatus(requested)

        existing.updated_at = _now()
        existing.version += 1
        self.storage.set(existing)
        return existing