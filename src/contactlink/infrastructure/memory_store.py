"""In-memory implementation of ContactStore (no DB)."""

import threading
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from contactlink.application.errors import StoreError
from contactlink.domain import ContactRecord, Link, creation_order
from contactlink.infrastructure.locks import KeyedLocks


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryContactStore:
    """Stores contact records in memory. Ids are assigned sequentially from 1.

    A transaction works on a private copy of the records and publishes its
    inserts and updates when it exits cleanly; ids taken by a rolled back
    transaction are not reused.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._records: dict[int, ContactRecord] = {}
        self._next_id = 1
        self._mutex = threading.Lock()
        self._key_locks = KeyedLocks()
        self._clock = clock

    @contextmanager
    def transaction(self, keys: Iterable[str]) -> Iterator["_MemoryTransaction"]:
        with self._key_locks.hold(keys):
            with self._mutex:
                working = dict(self._records)
            tx = _MemoryTransaction(self, working)
            yield tx
            with self._mutex:
                self._records.update(tx.changes)

    def list_all(self) -> list[ContactRecord]:
        with self._mutex:
            return sorted(self._records.values(), key=creation_order)

    def _allocate_id(self) -> int:
        with self._mutex:
            record_id = self._next_id
            self._next_id += 1
            return record_id

    def _now(self) -> datetime:
        return self._clock()


class _MemoryTransaction:
    def __init__(self, store: InMemoryContactStore, records: dict[int, ContactRecord]) -> None:
        self._store = store
        self._records = records
        self.changes: dict[int, ContactRecord] = {}

    def insert(
        self, email: str | None, phone_number: str | None, link: Link
    ) -> ContactRecord:
        now = self._store._now()
        record = ContactRecord(
            id=self._store._allocate_id(),
            email=email,
            phone_number=phone_number,
            link=link,
            created_at=now,
            updated_at=now,
        )
        self._records[record.id] = record
        self.changes[record.id] = record
        return record

    def update_to_secondary(self, record_id: int, linked_id: int) -> None:
        record = self._records.get(record_id)
        if record is None:
            raise StoreError(f"No contact with id {record_id}")
        updated = record.linked_to(linked_id, self._store._now())
        self._records[record_id] = updated
        self.changes[record_id] = updated

    def list_all(self) -> list[ContactRecord]:
        return sorted(self._records.values(), key=creation_order)
