"""Application layer: use case, matching and consolidation, ports, DTOs. Depends only on domain."""

from contactlink.application.consolidator import (
    Consolidation,
    assemble_view,
    candidate_primaries,
    consolidate,
    needs_new_record,
)
from contactlink.application.dto import IdentityView, Inconsistent, Invalid, MatchResult
from contactlink.application.errors import StoreError
from contactlink.application.identity_service import IdentityService
from contactlink.application.matcher import identity_keys, match_contacts, primary_keys
from contactlink.application.ports import ContactStore, ContactTransaction

__all__ = [
    "Consolidation",
    "ContactStore",
    "ContactTransaction",
    "IdentityService",
    "IdentityView",
    "Inconsistent",
    "Invalid",
    "MatchResult",
    "StoreError",
    "assemble_view",
    "candidate_primaries",
    "consolidate",
    "identity_keys",
    "match_contacts",
    "needs_new_record",
    "primary_keys",
]
