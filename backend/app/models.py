from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CandidateStatus(str, Enum):
    new = "new"
    screening = "screening"
    interview_scheduled = "interview_scheduled"
    interview_complete = "interview_complete"
    trial_scheduled = "trial_scheduled"
    trial_complete = "trial_complete"
    approved = "approved"
    rejected = "rejected"
    withdrawn = "withdrawn"


class DuplicateStatus(str, Enum):
    pending_review = "pending_review"
    linked = "linked"
    merged = "merged"
    not_duplicate = "not_duplicate"
    dismissed = "dismissed"


class DuplicateMatchType(str, Enum):
    exact = "exact"
    name_phone = "name_phone"
    email = "email"
    phone = "phone"
    name_fuzzy = "name_fuzzy"
    partial = "partial"


class DuplicateSeverity(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class DuplicateScenario(str, Enum):
    same_job_same_location = "same_job_same_location"
    same_job_diff_location = "same_job_diff_location"
    different_job = "different_job"
    previously_rejected = "previously_rejected"
    previously_hired = "previously_hired"
    general_duplicate = "general_duplicate"


class RecommendedAction(str, Enum):
    block = "block"
    warn = "warn"
    allow = "allow"


class DuplicateCheckInput(BaseModel):
    """The applicant being submitted now."""

    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    email: str = ""
    job_id: Optional[str] = None
    branch_id: Optional[str] = None
    id: Optional[str] = Field(default=None, description="Own id, excluded from matches on edit")

    @field_validator("first_name", "last_name", "phone", "email", mode="before")
    @classmethod
    def none_as_empty(cls, value: object) -> object:
        return "" if value is None else value


class ExistingCandidateRecord(BaseModel):
    """A previously stored applicant, supplied by the candidate store."""

    id: str
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    email: str = ""
    phone_normalized: Optional[str] = None
    duplicate_key: Optional[str] = None
    status: CandidateStatus = CandidateStatus.new
    job_id: Optional[str] = None
    job_title: Optional[str] = None
    branch_id: Optional[str] = None
    branch_name: Optional[str] = None
    created_at: Optional[datetime] = None
    duplicate_status: Optional[DuplicateStatus] = None

    @field_validator("first_name", "last_name", "phone", "email", mode="before")
    @classmethod
    def none_as_empty(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("created_at")
    @classmethod
    def as_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None or value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)


class ExistingCandidateSnapshot(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    status: CandidateStatus
    job_title: Optional[str] = None
    branch_name: Optional[str] = None
    created_at: Optional[datetime] = None
    duplicate_status: Optional[DuplicateStatus] = None


class DuplicateMatchResult(BaseModel):
    candidate_id: str
    match_type: DuplicateMatchType
    confidence: int = Field(ge=0, le=100)
    severity: DuplicateSeverity
    matched_fields: list[str] = Field(min_length=1)
    scenario: DuplicateScenario
    message: str
    days_since_application: int
    existing_candidate: ExistingCandidateSnapshot


class DuplicateCheckResponse(BaseModel):
    has_duplicates: bool
    matches: list[DuplicateMatchResult] = Field(default_factory=list)
    highest_severity: Optional[DuplicateSeverity] = None
    recommended_action: RecommendedAction = RecommendedAction.allow


class DuplicateCheckRequest(BaseModel):
    candidate: DuplicateCheckInput
    existing_candidates: list[ExistingCandidateRecord] = Field(default_factory=list)


class LikelyDuplicateResponse(BaseModel):
    likely_duplicate: bool
    min_confidence: int


class DuplicateCheckIdResponse(BaseModel):
    check_id: str
