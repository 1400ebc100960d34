"""Domain entities: ContactRecord and its link precedence."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import ClassVar


class LinkPrecedence(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class Primary:
    """Link of the canonical record of an identity. Never points anywhere."""

    precedence: ClassVar[LinkPrecedence] = LinkPrecedence.PRIMARY

    @property
    def linked_id(self) -> None:
        return None


@dataclass(frozen=True)
class Secondary:
    """Link of a record subsumed into the identity of primary `linked_id`."""

    linked_id: int
    precedence: ClassVar[LinkPrecedence] = LinkPrecedence.SECONDARY

    def __post_init__(self):
        if not isinstance(self.linked_id, int) or isinstance(self.linked_id, bool):
            raise ValueError("Secondary link requires an integer linked_id.")


Link = Primary | Secondary


def link_from(precedence: str | LinkPrecedence, linked_id: int | None) -> Link:
    """Build a Link from the flat (link_precedence, linked_id) storage shape."""
    precedence = LinkPrecedence(precedence)
    if precedence is LinkPrecedence.PRIMARY:
        if linked_id is not None:
            raise ValueError("Primary contact must not have a linked_id.")
        return Primary()
    if linked_id is None:
        raise ValueError("Secondary contact must have a linked_id.")
    return Secondary(linked_id=int(linked_id))


@dataclass(frozen=True)
class ContactRecord:
    """
    One contact submission as stored: an email and/or a phone number, linked
    into an identity as its primary or as one of its secondaries.
    """

    id: int
    email: str | None
    phone_number: str | None
    link: Link
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    def __post_init__(self):
        if not self.email and not self.phone_number:
            raise ValueError("ContactRecord needs an email or a phone number.")

    @property
    def link_precedence(self) -> LinkPrecedence:
        return self.link.precedence

    @property
    def linked_id(self) -> int | None:
        return self.link.linked_id

    @property
    def is_primary(self) -> bool:
        return isinstance(self.link, Primary)

    def linked_to(self, primary_id: int, at: datetime) -> "ContactRecord":
        """Return this record as a secondary of `primary_id`, updated at `at`."""
        return replace(self, link=Secondary(linked_id=primary_id), updated_at=at)


def creation_order(record: ContactRecord) -> tuple[datetime, int]:
    """Sort key: oldest first, ties broken by id."""
    return (record.created_at, record.id)
