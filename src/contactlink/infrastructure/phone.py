"""Canonical phone keys, so differently formatted submissions match one contact.

"(202) 555-1234" and "+1 202 555 1234" are the same contact attribute once
both are reduced to E.164. Numbers that cannot be resolved are left to the
caller, which stores and matches them verbatim.
"""

from collections.abc import Callable

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumberFormat


def normalize_phone(raw: str, default_region: str | None = None) -> str | None:
    """Return the E.164 matching key for `raw`, or None if it does not resolve.

    default_region applies only to national numbers (no leading +).
    """
    text = str(raw).strip() if raw is not None else ""
    if not text:
        return None
    try:
        number = phonenumbers.parse(text, default_region)
    except NumberParseException:
        return None
    if not (phonenumbers.is_possible_number(number) and phonenumbers.is_valid_number(number)):
        return None
    return phonenumbers.format_number(number, PhoneNumberFormat.E164)


def phone_normalizer(default_region: str | None = None) -> Callable[[str], str | None]:
    """Matching-key function for IdentityService, bound to a region."""
    region = (default_region or "").strip().upper() or None
    return lambda raw: normalize_phone(raw, default_region=region)
