"""Data transfer objects for the identify use case."""

from dataclasses import dataclass, field

from contactlink.domain import ContactRecord


@dataclass(frozen=True)
class MatchResult:
    """Records matched for one request, oldest first."""

    matched: list[ContactRecord] = field(default_factory=list)
    email_known: bool = False
    phone_known: bool = False


@dataclass(frozen=True)
class IdentityView:
    """Aggregated identity returned to the caller. Primary's attributes come first.

    primary_confirmed is False when the matched records had no discoverable
    primary; primary_contact_id is then the oldest matched record, itself a
    secondary, and stays so until the data is repaired.
    """

    primary_contact_id: int
    emails: list[str] = field(default_factory=list)
    phone_numbers: list[str] = field(default_factory=list)
    secondary_contact_ids: list[int] = field(default_factory=list)
    primary_confirmed: bool = True

    def as_dict(self) -> dict:
        return {
            "primaryContactId": self.primary_contact_id,
            "emails": list(self.emails),
            "phoneNumbers": list(self.phone_numbers),
            "secondaryContactIds": list(self.secondary_contact_ids),
        }


@dataclass(frozen=True)
class Invalid:
    reason: str


@dataclass(frozen=True)
class Inconsistent:
    """Matched records have no discoverable primary."""

    record_ids: tuple[int, ...]
    reason: str
