"""Tests for match_contacts and the consolidation helpers. No store involved."""

from datetime import datetime, timedelta, timezone

from contactlink.application import (
    MatchResult,
    assemble_view,
    candidate_primaries,
    identity_keys,
    match_contacts,
    needs_new_record,
)
from contactlink.application.consolidator import Consolidation
from contactlink.domain import ContactRecord, Primary, Secondary

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _record(record_id, email, phone_number, link=None, minutes=None):
    at = T0 + timedelta(minutes=record_id if minutes is None else minutes)
    return ContactRecord(
        id=record_id,
        email=email,
        phone_number=phone_number,
        link=link or Primary(),
        created_at=at,
        updated_at=at,
    )


def test_match_by_email_or_phone_reports_known_attributes() -> None:
    records = [
        _record(1, "a@x.com", "1"),
        _record(2, "b@x.com", "2"),
        _record(3, "c@x.com", "1", Secondary(linked_id=1)),
    ]

    result = match_contacts(records, "b@x.com", "1")

    assert [r.id for r in result.matched] == [1, 2, 3]
    assert result.email_known
    assert result.phone_known


def test_absent_attributes_never_match_null_fields() -> None:
    records = [_record(1, None, "1"), _record(2, "b@x.com", None)]

    result = match_contacts(records, None, "9")

    assert result.matched == []
    assert not result.email_known
    assert not result.phone_known


def test_matches_sorted_by_creation_then_id() -> None:
    records = [
        _record(3, "a@x.com", None, minutes=0),
        _record(2, "a@x.com", None, minutes=0),
        _record(1, "a@x.com", None, minutes=5),
    ]

    result = match_contacts(records, "a@x.com", None)

    assert [r.id for r in result.matched] == [2, 3, 1]


def test_transitive_match_follows_shared_attributes_and_links() -> None:
    records = [
        _record(1, "a@x.com", "1"),
        _record(2, "b@x.com", "1", Secondary(linked_id=1)),
        _record(3, "b@x.com", "3", Secondary(linked_id=1)),
        _record(4, "z@x.com", "9"),
    ]

    direct = match_contacts(records, "a@x.com", None)
    widened = match_contacts(records, "a@x.com", None, transitive=True)

    assert [r.id for r in direct.matched] == [1]
    assert [r.id for r in widened.matched] == [1, 2, 3]
    assert widened.email_known
    assert not widened.phone_known


def test_needs_new_record() -> None:
    known = MatchResult(matched=[], email_known=True, phone_known=True)
    email_only = MatchResult(matched=[], email_known=True, phone_known=False)

    assert not needs_new_record(known, "a@x.com", "1")
    assert not needs_new_record(email_only, "a@x.com", None)
    assert needs_new_record(email_only, "a@x.com", "2")


def test_candidate_primaries_include_link_targets() -> None:
    p1 = _record(1, "a@x.com", "1")
    p2 = _record(2, "b@x.com", "2")
    s3 = _record(3, "c@x.com", "2", Secondary(linked_id=1))
    by_id = {r.id: r for r in (p1, p2, s3)}

    assert candidate_primaries([p2, s3], by_id) == [p1, p2]
    assert candidate_primaries([_record(4, "d@x.com", None, Secondary(linked_id=9))], by_id) == []


def test_identity_keys() -> None:
    assert identity_keys("a@x.com", "1") == ["email:a@x.com", "phone:1"]
    assert identity_keys(None, "1") == ["phone:1"]


def test_view_lists_primary_attributes_first_without_duplicates() -> None:
    primary = _record(2, "p@x.com", "2")
    older_secondary = _record(1, "s@x.com", "2", Secondary(linked_id=2), minutes=0)
    newer = _record(3, "p@x.com", "3", Secondary(linked_id=2))

    view = assemble_view(
        Consolidation(primary=primary, members=[newer, older_secondary, primary])
    )

    assert view.primary_contact_id == 2
    assert view.emails == ["p@x.com", "s@x.com"]
    assert view.phone_numbers == ["2", "3"]
    assert view.secondary_contact_ids == [1, 3]
