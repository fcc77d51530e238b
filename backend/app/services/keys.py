from __future__ import annotations

from backend.app.services.normalize import normalize_name, normalize_phone

# Key of a record with no name and no phone; signals missing data, never identity.
EMPTY_DUPLICATE_KEY = "||"


def generate_duplicate_key(first_name: str, last_name: str, phone: str) -> str:
    return "|".join(
        (normalize_name(first_name), normalize_name(last_name), normalize_phone(phone))
    )


def is_empty_key(key: str) -> bool:
    return not key or key == EMPTY_DUPLICATE_KEY
