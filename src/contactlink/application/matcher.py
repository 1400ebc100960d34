"""Select the stored records an incoming email/phone refers to."""

from collections.abc import Iterable

from contactlink.application.dto import MatchResult
from contactlink.domain import ContactRecord, creation_order, group_of


def match_contacts(
    records: Iterable[ContactRecord],
    email: str | None,
    phone_number: str | None,
    *,
    transitive: bool = False,
) -> MatchResult:
    """Return records whose email or phone equals the input, oldest first.

    Matching is by equality on the supplied attributes only. With `transitive`
    the result is widened to the whole identity group of the direct matches.
    """
    records = list(records)
    matched: list[ContactRecord] = []
    email_known = False
    phone_known = False
    for record in records:
        email_match = bool(email) and record.email == email
        phone_match = bool(phone_number) and record.phone_number == phone_number
        if email_match or phone_match:
            email_known = email_known or email_match
            phone_known = phone_known or phone_match
            matched.append(record)

    if transitive and matched:
        matched = group_of(matched, records)
    else:
        matched.sort(key=creation_order)
    return MatchResult(matched=matched, email_known=email_known, phone_known=phone_known)


def identity_keys(email: str | None, phone_number: str | None) -> list[str]:
    """Keys a request is serialized on."""
    keys = []
    if email:
        keys.append(f"email:{email}")
    if phone_number:
        keys.append(f"phone:{phone_number}")
    return keys


def primary_keys(primaries: Iterable[ContactRecord]) -> list[str]:
    """Keys of identities a request links to or demotes."""
    return [f"primary:{p.id}" for p in primaries]
