from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Optional

from backend.app.models import (
    DuplicateCheckInput,
    DuplicateCheckResponse,
    ExistingCandidateRecord,
)
from backend.app.services.keys import generate_duplicate_key
from backend.app.services.matching import check_duplicate_match
from backend.app.services.normalize import normalize_email
from backend.app.services.policy import determine_recommended_action, match_sort_key

logger = logging.getLogger("candidate_dedupe")

LIKELY_DUPLICATE_MIN_CONFIDENCE = 70


class CandidateLimitExceededError(Exception):
    pass


def ensure_within_limit(existing_candidates: Sequence[ExistingCandidateRecord], limit: int) -> None:
    if len(existing_candidates) > limit:
        raise CandidateLimitExceededError(
            f"{len(existing_candidates)} existing candidates supplied, at most {limit} allowed"
        )


def find_duplicates(
    candidate: DuplicateCheckInput,
    existing_candidates: Sequence[ExistingCandidateRecord],
    *,
    now: Optional[datetime] = None,
) -> DuplicateCheckResponse:
    matches = []
    for existing in existing_candidates:
        match = check_duplicate_match(candidate, existing, now=now)
        if match is None:
            logger.debug("duplicate_check_no_match existing_id=%s", existing.id)
            continue
        matches.append(match)

    matches.sort(key=match_sort_key)
    response = DuplicateCheckResponse(
        has_duplicates=bool(matches),
        matches=matches,
        highest_severity=matches[0].severity if matches else None,
        recommended_action=determine_recommended_action(matches),
    )
    logger.info(
        "duplicate_check_complete records=%s matches=%s highest_severity=%s action=%s",
        len(existing_candidates),
        len(matches),
        response.highest_severity.value if response.highest_severity else "none",
        response.recommended_action.value,
    )
    return response


def is_likely_duplicate(
    candidate: DuplicateCheckInput,
    existing_candidates: Sequence[ExistingCandidateRecord],
    *,
    min_confidence: int = LIKELY_DUPLICATE_MIN_CONFIDENCE,
) -> bool:
    for existing in existing_candidates:
        match = check_duplicate_match(candidate, existing)
        if match is not None and match.confidence >= min_confidence:
            return True
    return False


def generate_duplicate_check_id(candidate: DuplicateCheckInput) -> str:
    key = generate_duplicate_key(candidate.first_name, candidate.last_name, candidate.phone)
    return f"{key}|{normalize_email(candidate.email)}"
