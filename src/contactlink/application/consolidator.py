"""Consolidation of matched records into one identity, and the view built from it.

After a run the identity has exactly one primary among the records it touched:
a novel email or phone is stored as a new record, surplus primaries are demoted
to secondaries of the oldest one, and records linked to a demoted primary are
re-pointed so no secondary ever links to another secondary.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone

from contactlink.application.dto import IdentityView, MatchResult
from contactlink.application.ports import ContactTransaction
from contactlink.domain import ContactRecord, Primary, Secondary, creation_order

logger = logging.getLogger(__name__)


@dataclass
class Consolidation:
    primary: ContactRecord | None
    members: list[ContactRecord] = field(default_factory=list)
    created: ContactRecord | None = None
    relinked_ids: list[int] = field(default_factory=list)


def needs_new_record(
    match: MatchResult, email: str | None, phone_number: str | None
) -> bool:
    """True when the request carries an email or phone no matched record has."""
    return bool(email and not match.email_known) or bool(
        phone_number and not match.phone_known
    )


def candidate_primaries(
    matched: Iterable[ContactRecord], by_id: Mapping[int, ContactRecord]
) -> list[ContactRecord]:
    """Primaries among the matches plus the primaries matched secondaries link to."""
    found: dict[int, ContactRecord] = {}
    for record in matched:
        if record.is_primary:
            found[record.id] = record
            continue
        target = by_id.get(record.linked_id)
        if target is not None and target.is_primary:
            found.setdefault(target.id, target)
    return sorted(found.values(), key=creation_order)


def consolidate(
    tx: ContactTransaction,
    match: MatchResult,
    email: str | None,
    phone_number: str | None,
    snapshot: Iterable[ContactRecord],
    *,
    now: datetime | None = None,
) -> Consolidation:
    """Apply the writes one request needs and return the resulting identity.

    `snapshot` is the full record set read in the same transaction; it resolves
    links that point outside the matched set.
    """
    now = now or datetime.now(timezone.utc)
    snapshot = sorted(snapshot, key=creation_order)
    by_id = {r.id: r for r in snapshot}

    members: dict[int, ContactRecord] = {r.id: r for r in match.matched}
    primaries = candidate_primaries(match.matched, by_id)
    primary = primaries[0] if primaries else None
    if primary is not None:
        members.setdefault(primary.id, primary)
    elif match.matched:
        logger.warning(
            "No primary found for matched contacts %s; leaving them as they are",
            [r.id for r in match.matched],
        )

    created = None
    if needs_new_record(match, email, phone_number):
        link = Secondary(linked_id=primary.id) if primary is not None else Primary()
        created = tx.insert(email, phone_number, link)
        logger.debug(
            "Created %s contact %s", created.link_precedence.value, created.id
        )
        members[created.id] = created
        if primary is None:
            primary = created

    relinked: list[int] = []
    if len(primaries) > 1:
        demoted = {p.id for p in primaries[1:]}
        for record in snapshot:
            if record.id in demoted or record.linked_id in demoted:
                tx.update_to_secondary(record.id, primary.id)
                relinked.append(record.id)
                # view stays the matched set; a resubmission must see the same one
                if record.id in members:
                    members[record.id] = record.linked_to(primary.id, now)
        logger.info(
            "Demoted primaries %s under %s; re-linked contacts %s",
            sorted(demoted),
            primary.id,
            relinked,
        )

    return Consolidation(
        primary=primary,
        members=list(members.values()),
        created=created,
        relinked_ids=relinked,
    )


def assemble_view(consolidation: Consolidation) -> IdentityView:
    """Flatten a consolidation into ordered, duplicate-free lists, primary first."""
    if not consolidation.members:
        raise ValueError("Cannot build an identity view without records.")
    rest = sorted(consolidation.members, key=creation_order)
    primary = consolidation.primary or rest[0]
    ordered = [primary] + [r for r in rest if r.id != primary.id]
    return IdentityView(
        primary_contact_id=primary.id,
        primary_confirmed=consolidation.primary is not None,
        emails=list(dict.fromkeys(r.email for r in ordered if r.email)),
        phone_numbers=list(
            dict.fromkeys(r.phone_number for r in ordered if r.phone_number)
        ),
        secondary_contact_ids=[r.id for r in ordered[1:]],
    )
