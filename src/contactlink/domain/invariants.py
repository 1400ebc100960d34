"""Audit of stored identities: dangling links, chained links, and groups with
more than one primary."""

from collections.abc import Iterable
from dataclasses import dataclass

from contactlink.domain.entities import ContactRecord
from contactlink.domain.graph import identity_groups

DANGLING_LINK = "dangling_link"
CHAINED_LINK = "chained_link"
MULTIPLE_PRIMARIES = "multiple_primaries"


@dataclass(frozen=True)
class Violation:
    kind: str
    record_ids: tuple[int, ...]
    detail: str


def find_violations(records: Iterable[ContactRecord]) -> list[Violation]:
    records = list(records)
    by_id = {r.id: r for r in records}
    out: list[Violation] = []

    for record in records:
        if record.linked_id is None:
            continue
        target = by_id.get(record.linked_id)
        if target is None:
            out.append(
                Violation(
                    kind=DANGLING_LINK,
                    record_ids=(record.id,),
                    detail=f"contact {record.id} links to missing contact {record.linked_id}",
                )
            )
        elif not target.is_primary:
            out.append(
                Violation(
                    kind=CHAINED_LINK,
                    record_ids=(record.id, target.id),
                    detail=f"contact {record.id} links to secondary contact {target.id}",
                )
            )

    for group in identity_groups(records):
        primaries = tuple(r.id for r in group if r.is_primary)
        if len(primaries) > 1:
            out.append(
                Violation(
                    kind=MULTIPLE_PRIMARIES,
                    record_ids=primaries,
                    detail=f"identity group has {len(primaries)} primaries: {list(primaries)}",
                )
            )
    return out
