"""Single-pair duplicate evaluation.

Evidence about one (input, existing) pair is computed once and folded through
``EVIDENCE_RULES`` in order. The rules are order dependent: each one reads the
match type and confidence left by the previous ones, so the tuple order is the
precedence order.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from functools import reduce
from typing import Callable, Optional

from backend.app.models import (
    DuplicateCheckInput,
    DuplicateMatchResult,
    DuplicateMatchType,
    ExistingCandidateRecord,
    ExistingCandidateSnapshot,
    utc_now,
)
from backend.app.services.keys import generate_duplicate_key, is_empty_key
from backend.app.services.normalize import normalize_email, normalize_phone
from backend.app.services.policy import determine_scenario, determine_severity, scenario_message
from backend.app.services.similarity import calculate_name_similarity

STRONG_NAME_SIMILARITY = 85
SUPPORTING_NAME_SIMILARITY = 70
MIN_CONFIDENCE = 50
MIN_NAME_ONLY_CONFIDENCE = 90

NAME_FIELDS = ("first_name", "last_name")
KEY_FIELDS = ("first_name", "last_name", "phone")


@dataclass(frozen=True)
class MatchEvidence:
    key_match: bool
    phone_match: bool
    email_match: bool
    name_similarity: int


@dataclass(frozen=True)
class MatchState:
    match_type: DuplicateMatchType = DuplicateMatchType.partial
    confidence: int = 0
    matched_fields: tuple[str, ...] = ()

    def with_fields(self, *fields: str) -> "MatchState":
        merged = self.matched_fields + tuple(f for f in fields if f not in self.matched_fields)
        return replace(self, matched_fields=merged)

    @property
    def is_default(self) -> bool:
        return self.match_type == DuplicateMatchType.partial


EvidenceRule = Callable[[MatchState, MatchEvidence], MatchState]


def collect_evidence(
    candidate: DuplicateCheckInput,
    existing: ExistingCandidateRecord,
) -> MatchEvidence:
    input_key = generate_duplicate_key(candidate.first_name, candidate.last_name, candidate.phone)
    existing_key = existing.duplicate_key or generate_duplicate_key(
        existing.first_name, existing.last_name, existing.phone
    )
    input_phone = normalize_phone(candidate.phone)
    existing_phone = existing.phone_normalized or normalize_phone(existing.phone)
    input_email = normalize_email(candidate.email)
    existing_email = normalize_email(existing.email)

    return MatchEvidence(
        key_match=input_key == existing_key and not is_empty_key(input_key),
        phone_match=bool(input_phone) and input_phone == existing_phone,
        email_match=bool(input_email) and input_email == existing_email,
        name_similarity=calculate_name_similarity(
            candidate.first_name,
            candidate.last_name,
            existing.first_name,
            existing.last_name,
        ),
    )


def apply_key_rule(state: MatchState, evidence: MatchEvidence) -> MatchState:
    if not evidence.key_match:
        return state
    return replace(
        state.with_fields(*KEY_FIELDS),
        match_type=DuplicateMatchType.name_phone,
        confidence=100,
    )


def apply_phone_rule(state: MatchState, evidence: MatchEvidence) -> MatchState:
    if not evidence.phone_match:
        return state
    state = state.with_fields("phone")
    if state.is_default:
        state = replace(
            state,
            match_type=DuplicateMatchType.phone,
            confidence=max(state.confidence, 75),
        )
    return state


def apply_email_rule(state: MatchState, evidence: MatchEvidence) -> MatchState:
    if not evidence.email_match:
        return state
    state = state.with_fields("email")
    if state.is_default:
        return replace(state, match_type=DuplicateMatchType.email, confidence=85)
    if state.match_type == DuplicateMatchType.name_phone:
        return replace(state, match_type=DuplicateMatchType.exact, confidence=100)
    return replace(state, confidence=max(state.confidence, 90))


def apply_name_rule(state: MatchState, evidence: MatchEvidence) -> MatchState:
    similarity = evidence.name_similarity
    if similarity >= STRONG_NAME_SIMILARITY:
        state = state.with_fields(*NAME_FIELDS)
        if state.is_default:
            return replace(state, match_type=DuplicateMatchType.name_fuzzy, confidence=similarity)
        return replace(state, confidence=min(100, state.confidence + 10))
    # A plausible name only corroborates a field that already matched.
    if similarity >= SUPPORTING_NAME_SIMILARITY and state.matched_fields:
        state = state.with_fields(*NAME_FIELDS)
        return replace(state, confidence=min(100, state.confidence + 5))
    return state


EVIDENCE_RULES: tuple[EvidenceRule, ...] = (
    apply_key_rule,
    apply_phone_rule,
    apply_email_rule,
    apply_name_rule,
)


def evaluate_evidence(evidence: MatchEvidence) -> MatchState:
    return reduce(lambda state, rule: rule(state, evidence), EVIDENCE_RULES, MatchState())


def passes_evidence_gates(state: MatchState) -> bool:
    if not state.matched_fields or state.confidence < MIN_CONFIDENCE:
        return False
    name_only = "phone" not in state.matched_fields and "email" not in state.matched_fields
    if state.match_type == DuplicateMatchType.name_fuzzy and name_only:
        return state.confidence >= MIN_NAME_ONLY_CONFIDENCE
    return True


def days_since(created_at: Optional[datetime], now: Optional[datetime] = None) -> int:
    if created_at is None:
        return 0
    now = now or utc_now()
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    return (now - created_at).days


def snapshot_existing(existing: ExistingCandidateRecord) -> ExistingCandidateSnapshot:
    return ExistingCandidateSnapshot(
        id=existing.id,
        first_name=existing.first_name,
        last_name=existing.last_name,
        email=existing.email,
        phone=existing.phone,
        status=existing.status,
        job_title=existing.job_title,
        branch_name=existing.branch_name,
        created_at=existing.created_at,
        duplicate_status=existing.duplicate_status,
    )


def check_duplicate_match(
    candidate: DuplicateCheckInput,
    existing: ExistingCandidateRecord,
    *,
    now: Optional[datetime] = None,
) -> Optional[DuplicateMatchResult]:
    if candidate.id and candidate.id == existing.id:
        return None

    state = evaluate_evidence(collect_evidence(candidate, existing))
    if not passes_evidence_gates(state):
        return None

    scenario = determine_scenario(candidate, existing)
    return DuplicateMatchResult(
        candidate_id=existing.id,
        match_type=state.match_type,
        confidence=state.confidence,
        severity=determine_severity(state.match_type, scenario, state.confidence),
        matched_fields=list(state.matched_fields),
        scenario=scenario,
        message=scenario_message(scenario, existing),
        days_since_application=days_since(existing.created_at, now),
        existing_candidate=snapshot_existing(existing),
    )
