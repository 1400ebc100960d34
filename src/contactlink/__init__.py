"""
contactlink core: clean-architecture layout.

- domain: ContactRecord, link precedence, identity groups and their invariants.
- application: identify use case (IdentityService), matcher, consolidator, ports, DTOs.
- infrastructure: adapters (InMemoryContactStore, Neo4jContactStore), phone normalization.
"""

from contactlink.application import (
    ContactStore,
    IdentityService,
    IdentityView,
    Inconsistent,
    Invalid,
    StoreError,
)
from contactlink.domain import ContactRecord, LinkPrecedence, Primary, Secondary
from contactlink.infrastructure import InMemoryContactStore, Neo4jContactStore

__all__ = [
    "ContactRecord",
    "ContactStore",
    "IdentityService",
    "IdentityView",
    "InMemoryContactStore",
    "Inconsistent",
    "Invalid",
    "LinkPrecedence",
    "Neo4jContactStore",
    "Primary",
    "Secondary",
    "StoreError",
]
