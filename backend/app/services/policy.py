from __future__ import annotations

from collections.abc import Sequence

from backend.app.models import (
    CandidateStatus,
    DuplicateCheckInput,
    DuplicateMatchResult,
    DuplicateMatchType,
    DuplicateScenario,
    DuplicateSeverity,
    ExistingCandidateRecord,
    RecommendedAction,
)

SEVERITY_RANK = {
    DuplicateSeverity.high: 0,
    DuplicateSeverity.medium: 1,
    DuplicateSeverity.low: 2,
}

SCENARIO_MESSAGES = {
    DuplicateScenario.same_job_same_location: (
        "{name} has already applied for this exact role and location"
    ),
    DuplicateScenario.same_job_diff_location: (
        "{name} has applied for the same role at {branch_name}"
    ),
    DuplicateScenario.different_job: (
        "{name} has a previous application on file for {job_title}"
    ),
    DuplicateScenario.previously_rejected: (
        "{name} was previously rejected. Review history before proceeding."
    ),
    DuplicateScenario.previously_hired: (
        "{name} is already employed at {employer_branch}. This may be an internal transfer."
    ),
    DuplicateScenario.general_duplicate: (
        "{name} may have applied before. Check existing record."
    ),
}


def determine_scenario(
    candidate: DuplicateCheckInput,
    existing: ExistingCandidateRecord,
) -> DuplicateScenario:
    if candidate.job_id and candidate.branch_id:
        if candidate.job_id == existing.job_id and candidate.branch_id == existing.branch_id:
            return DuplicateScenario.same_job_same_location
        if candidate.job_id == existing.job_id:
            return DuplicateScenario.same_job_diff_location

    if existing.status == CandidateStatus.rejected:
        return DuplicateScenario.previously_rejected
    if existing.status == CandidateStatus.approved:
        return DuplicateScenario.previously_hired

    if candidate.job_id and existing.job_id and candidate.job_id != existing.job_id:
        return DuplicateScenario.different_job
    return DuplicateScenario.general_duplicate


def scenario_message(scenario: DuplicateScenario, existing: ExistingCandidateRecord) -> str:
    template = SCENARIO_MESSAGES[scenario]
    return template.format(
        name=f"{existing.first_name} {existing.last_name}".strip(),
        branch_name=existing.branch_name or "another location",
        employer_branch=existing.branch_name or "a branch",
        job_title=existing.job_title or "a different role",
    )


def determine_severity(
    match_type: DuplicateMatchType,
    scenario: DuplicateScenario,
    confidence: int,
) -> DuplicateSeverity:
    if scenario in {DuplicateScenario.same_job_same_location, DuplicateScenario.previously_hired}:
        return DuplicateSeverity.high
    if match_type == DuplicateMatchType.exact and confidence >= 90:
        return DuplicateSeverity.high

    if scenario in {DuplicateScenario.same_job_diff_location, DuplicateScenario.previously_rejected}:
        return DuplicateSeverity.medium
    if match_type == DuplicateMatchType.name_phone and confidence >= 80:
        return DuplicateSeverity.medium
    if match_type == DuplicateMatchType.email and confidence >= 85:
        return DuplicateSeverity.medium
    return DuplicateSeverity.low


def determine_recommended_action(matches: Sequence[DuplicateMatchResult]) -> RecommendedAction:
    if any(
        match.severity == DuplicateSeverity.high
        and match.scenario == DuplicateScenario.same_job_same_location
        for match in matches
    ):
        return RecommendedAction.block
    if any(match.severity != DuplicateSeverity.low for match in matches):
        return RecommendedAction.warn
    return RecommendedAction.allow


def match_sort_key(match: DuplicateMatchResult) -> tuple[int, int]:
    return SEVERITY_RANK[match.severity], -match.confidence
