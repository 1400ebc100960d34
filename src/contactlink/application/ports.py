"""Application ports (interfaces). Implemented by infrastructure adapters."""

from collections.abc import Iterable
from contextlib import AbstractContextManager
from typing import Protocol

from contactlink.domain import ContactRecord, Link


class ContactTransaction(Protocol):
    """Reads and writes made on behalf of one request. Committed together."""

    def insert(
        self, email: str | None, phone_number: str | None, link: Link
    ) -> ContactRecord:
        """Create a record; the store assigns id and timestamps. Raises StoreError."""
        ...

    def update_to_secondary(self, record_id: int, linked_id: int) -> None:
        """Make the record a secondary of `linked_id` and bump updated_at. Raises StoreError."""
        ...

    def list_all(self) -> list[ContactRecord]:
        """Return every record in creation order. Raises StoreError."""
        ...


class ContactStore(Protocol):
    """Durable storage of contact records."""

    def transaction(
        self, keys: Iterable[str]
    ) -> AbstractContextManager[ContactTransaction]:
        """Open a transaction serialized against others holding any of `keys`.

        Writes are applied when the block exits normally and discarded when it
        raises.
        """
        ...

    def list_all(self) -> list[ContactRecord]:
        """Return every record in creation order, outside any transaction."""
        ...
