"""Domain layer: entities and identity-graph rules. No dependencies on outer layers."""

from contactlink.domain.entities import (
    ContactRecord,
    Link,
    LinkPrecedence,
    Primary,
    Secondary,
    creation_order,
    link_from,
)
from contactlink.domain.graph import group_of, identity_groups
from contactlink.domain.invariants import Violation, find_violations

__all__ = [
    "ContactRecord",
    "Link",
    "LinkPrecedence",
    "Primary",
    "Secondary",
    "Violation",
    "creation_order",
    "find_violations",
    "group_of",
    "identity_groups",
    "link_from",
]
