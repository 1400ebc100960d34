"""Neo4j implementation of ContactStore.
Graph: one (:Contact) node per record with flat properties (id, email, phone_number,
linked_id, link_precedence, created_at, updated_at, deleted_at). Integer ids come from a
(:ContactSequence) counter node. A request serializes on (:IdentityLock {key}) nodes that
it writes at the start of its transaction; the write locks are held until commit.
"""

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from neo4j.exceptions import DriverError, Neo4jError

from contactlink.application.errors import StoreError
from contactlink.domain import ContactRecord, Link, LinkPrecedence, link_from

logger = logging.getLogger(__name__)

_DRIVER_ERRORS = (Neo4jError, DriverError)

CONTACT_SEQUENCE = "contact"

_CONSTRAINT_QUERIES = (
    """
    CREATE CONSTRAINT contact_id_unique IF NOT EXISTS
    FOR (c:Contact) REQUIRE c.id IS UNIQUE
    """,
    """
    CREATE CONSTRAINT identity_lock_key_unique IF NOT EXISTS
    FOR (l:IdentityLock) REQUIRE l.key IS UNIQUE
    """,
    """
    CREATE CONSTRAINT contact_sequence_name_unique IF NOT EXISTS
    FOR (s:ContactSequence) REQUIRE s.name IS UNIQUE
    """,
)

_LOCK_QUERY = """
MERGE (l:IdentityLock { key: $key })
SET l.locked_at = $now
"""

_INSERT_QUERY = """
MERGE (seq:ContactSequence { name: $sequence })
ON CREATE SET seq.value = 0
SET seq.value = seq.value + 1
WITH seq.value AS next_id
CREATE (c:Contact {
    id: next_id,
    email: $email,
    phone_number: $phone_number,
    linked_id: $linked_id,
    link_precedence: $link_precedence,
    created_at: $now,
    updated_at: $now
})
RETURN c
"""

_UPDATE_TO_SECONDARY_QUERY = """
MATCH (c:Contact { id: $id })
SET c.link_precedence = $secondary,
    c.linked_id = $linked_id,
    c.updated_at = $now
RETURN c.id AS id
"""

_LIST_ALL_QUERY = """
MATCH (c:Contact)
RETURN c
ORDER BY c.created_at, c.id
"""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _iso_to_datetime(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def ensure_contact_constraints(driver, database: str | None = None) -> None:
    """Create unique constraints for contacts, identity locks and the id sequence if missing."""
    with driver.session(database=database) as session:
        for query in _CONSTRAINT_QUERIES:
            session.run(query)


class Neo4jContactStore:
    """Stores contact records in Neo4j. Each transaction is one driver transaction."""

    def __init__(self, driver: object, database: str | None = None) -> None:
        self._driver = driver
        self._database = database

    @contextmanager
    def transaction(self, keys: Iterable[str]) -> Iterator["_Neo4jTransaction"]:
        with self._driver.session(database=self._database) as session:
            try:
                tx = session.begin_transaction()
                now = _now_iso()
                for key in sorted(set(keys)):
                    tx.run(_LOCK_QUERY, key=key, now=now)
            except _DRIVER_ERRORS as exc:
                raise StoreError("Could not open contact transaction") from exc
            try:
                yield _Neo4jTransaction(tx)
            except Exception:
                _rollback(tx)
                raise
            try:
                tx.commit()
            except _DRIVER_ERRORS as exc:
                raise StoreError("Could not commit contact transaction") from exc

    def list_all(self) -> list[ContactRecord]:
        try:
            with self._driver.session(database=self._database) as session:
                result = session.run(_LIST_ALL_QUERY)
                return [_node_to_record(rec["c"]) for rec in result]
        except _DRIVER_ERRORS as exc:
            raise StoreError("Could not read contacts") from exc


class _Neo4jTransaction:
    def __init__(self, tx) -> None:
        self._tx = tx

    def insert(
        self, email: str | None, phone_number: str | None, link: Link
    ) -> ContactRecord:
        try:
            result = self._tx.run(
                _INSERT_QUERY,
                sequence=CONTACT_SEQUENCE,
                email=email,
                phone_number=phone_number,
                linked_id=link.linked_id,
                link_precedence=link.precedence.value,
                now=_now_iso(),
            )
            record = result.single()
        except _DRIVER_ERRORS as exc:
            raise StoreError("Failed to create contact") from exc
        if not record:
            raise StoreError("No data returned from contact insert")
        return _node_to_record(record["c"])

    def update_to_secondary(self, record_id: int, linked_id: int) -> None:
        try:
            result = self._tx.run(
                _UPDATE_TO_SECONDARY_QUERY,
                id=record_id,
                linked_id=linked_id,
                secondary=LinkPrecedence.SECONDARY.value,
                now=_now_iso(),
            )
            record = result.single()
        except _DRIVER_ERRORS as exc:
            raise StoreError(f"Failed to link contact {record_id}") from exc
        if not record:
            raise StoreError(f"No contact with id {record_id}")

    def list_all(self) -> list[ContactRecord]:
        try:
            result = self._tx.run(_LIST_ALL_QUERY)
            return [_node_to_record(rec["c"]) for rec in result]
        except _DRIVER_ERRORS as exc:
            raise StoreError("Could not read contacts") from exc


def _rollback(tx) -> None:
    try:
        tx.rollback()
    except _DRIVER_ERRORS:
        logger.exception("Rollback of contact transaction failed")


def _node_to_record(node) -> ContactRecord:
    deleted_at = node.get("deleted_at")
    return ContactRecord(
        id=node["id"],
        email=node.get("email") or None,
        phone_number=node.get("phone_number") or None,
        link=link_from(node["link_precedence"], node.get("linked_id")),
        created_at=_iso_to_datetime(node["created_at"]),
        updated_at=_iso_to_datetime(node["updated_at"]),
        deleted_at=_iso_to_datetime(deleted_at) if deleted_at else None,
    )
