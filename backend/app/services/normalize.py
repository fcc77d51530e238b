from __future__ import annotations

import re
from typing import Optional

# Webmail providers that ignore dots and "+tag" suffixes in the local part.
ALIASING_EMAIL_DOMAINS = frozenset({"gmail.com", "googlemail.com"})

_NON_DIGIT = re.compile(r"[^0-9]")
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_phone(phone: Optional[str]) -> str:
    """Digits only, UK numbers in local 0-prefixed form.

    +44 7123 456789, 07123-456-789 and 7123456789 all become 07123456789.
    """
    if not phone:
        return ""
    digits = _NON_DIGIT.sub("", phone)
    if digits.startswith("44") and len(digits) >= 11:
        digits = "0" + digits[2:]
    if len(digits) == 10 and digits.startswith("7"):
        digits = "0" + digits
    return digits


def normalize_name(name: Optional[str]) -> str:
    if not name:
        return ""
    return _NON_ALNUM.sub("", name.strip().lower())


def normalize_email(email: Optional[str]) -> str:
    if not email:
        return ""
    normalized = email.strip().lower()
    local, at, domain = normalized.partition("@")
    if at and domain in ALIASING_EMAIL_DOMAINS:
        local = local.split("+", 1)[0].replace(".", "")
        normalized = f"{local}@{domain}"
    return normalized
