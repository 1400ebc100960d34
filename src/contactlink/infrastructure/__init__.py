"""Infrastructure layer: concrete implementations of application ports."""

from contactlink.infrastructure.locks import KeyedLocks
from contactlink.infrastructure.memory_store import InMemoryContactStore
from contactlink.infrastructure.persistence.neo4j_store import (
    Neo4jContactStore,
    ensure_contact_constraints,
)
from contactlink.infrastructure.phone import normalize_phone, phone_normalizer

__all__ = [
    "InMemoryContactStore",
    "KeyedLocks",
    "Neo4jContactStore",
    "ensure_contact_constraints",
    "normalize_phone",
    "phone_normalizer",
]
