"""Identity groups: records connected by a shared email, a shared phone number
or a link to another record."""

from collections.abc import Iterable

from contactlink.domain.entities import ContactRecord, creation_order


def identity_groups(records: Iterable[ContactRecord]) -> list[list[ContactRecord]]:
    """Partition records into connected identity groups.

    Each group is in creation order; groups are ordered by their oldest record.
    """
    records = list(records)
    parent: dict[int, int] = {r.id: r.id for r in records}

    def find(record_id: int) -> int:
        while parent[record_id] != record_id:
            parent[record_id] = parent[parent[record_id]]
            record_id = parent[record_id]
        return record_id

    def union(a: int, b: int) -> None:
        root_a, root_b = find(a), find(b)
        if root_a != root_b:
            parent[max(root_a, root_b)] = min(root_a, root_b)

    first_by_email: dict[str, int] = {}
    first_by_phone: dict[str, int] = {}
    for record in records:
        if record.email:
            union(record.id, first_by_email.setdefault(record.email, record.id))
        if record.phone_number:
            union(record.id, first_by_phone.setdefault(record.phone_number, record.id))
        if record.linked_id is not None and record.linked_id in parent:
            union(record.id, record.linked_id)

    groups: dict[int, list[ContactRecord]] = {}
    for record in records:
        groups.setdefault(find(record.id), []).append(record)
    out = [sorted(group, key=creation_order) for group in groups.values()]
    out.sort(key=lambda group: creation_order(group[0]))
    return out


def group_of(
    seeds: Iterable[ContactRecord], records: Iterable[ContactRecord]
) -> list[ContactRecord]:
    """Return every record sharing an identity group with any of `seeds`."""
    seed_ids = {r.id for r in seeds}
    if not seed_ids:
        return []
    out: list[ContactRecord] = []
    for group in identity_groups(records):
        if any(r.id in seed_ids for r in group):
            out.extend(group)
    return sorted(out, key=creation_order)
