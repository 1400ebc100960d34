"""Identify use case: resolve an email/phone pair to one consolidated identity."""

import logging
from collections.abc import Callable

from contactlink.application.consolidator import (
    assemble_view,
    candidate_primaries,
    consolidate,
)
from contactlink.application.dto import IdentityView, Inconsistent, Invalid
from contactlink.application.errors import StoreError
from contactlink.application.matcher import identity_keys, match_contacts, primary_keys
from contactlink.application.ports import ContactStore

logger = logging.getLogger(__name__)

MAX_LOCK_ROUNDS = 8


class IdentityService:
    """Core flow: normalize input -> lock keys -> match -> consolidate -> view."""

    def __init__(
        self,
        store: ContactStore,
        *,
        normalize_phone: Callable[[str], str | None] | None = None,
        transitive: bool = False,
        strict_consistency: bool = False,
    ) -> None:
        self._store = store
        self._normalize_phone = normalize_phone
        self._transitive = transitive
        self._strict = strict_consistency

    def identify(
        self, email: str | None, phone_number: str | int | None
    ) -> IdentityView | Invalid | Inconsistent:
        """Return the identity the email/phone belong to, creating or linking records as needed.

        Raises StoreError when the store fails; nothing written by this call persists then.
        """
        email = (email or "").strip() or None
        phone = self._clean_phone(phone_number)
        if email is None and phone is None:
            return Invalid(reason="At least one of email or phoneNumber must be provided.")

        keys = identity_keys(email, phone)
        try:
            for _ in range(MAX_LOCK_ROUNDS):
                with self._store.transaction(keys) as tx:
                    records = tx.list_all()
                    match = match_contacts(records, email, phone, transitive=self._transitive)
                    by_id = {r.id: r for r in records}
                    primaries = candidate_primaries(match.matched, by_id)
                    missing = [k for k in primary_keys(primaries) if k not in keys]
                    if missing:
                        # re-read under the locks of every primary this request may touch
                        keys = keys + missing
                        continue
                    if self._strict and match.matched and not primaries:
                        ids = tuple(r.id for r in match.matched)
                        logger.warning("Refusing to identify: contacts %s have no primary", ids)
                        return Inconsistent(
                            record_ids=ids,
                            reason="Matched contacts have no primary contact.",
                        )
                    result = consolidate(tx, match, email, phone, records)
                return assemble_view(result)
            raise StoreError(f"Primaries kept changing while locking {keys}")
        except StoreError:
            logger.exception("Contact store failed while identifying")
            raise

    def _clean_phone(self, phone_number: str | int | None) -> str | None:
        if phone_number is None or isinstance(phone_number, bool):
            return None
        raw = str(phone_number).strip()
        if not raw:
            return None
        if self._normalize_phone is None:
            return raw
        return self._normalize_phone(raw) or raw
