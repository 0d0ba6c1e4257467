"""Domain types shared by the scorers, the ranker and the storage boundary."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from jobrank.core.errors import ValidationError

PLATFORM_SOURCE = "platform"


class WorkMode(str, Enum):
    REMOTE = "remote"
    HYBRID = "hybrid"
    ONSITE = "onsite"

    @classmethod
    def parse(cls, value: object) -> "WorkMode | None":
        """Parse loose work-mode labels (``on-site``, ``Remote``...) or return ``None``."""

        if value is None or isinstance(value, WorkMode):
            return value
        text = str(value).strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        if not text:
            return None
        if text in {"onsite", "office", "inoffice", "inperson"}:
            return cls.ONSITE
        if text in {"remote", "fullyremote", "wfh"}:
            return cls.REMOTE
        if text in {"hybrid", "flexible"}:
            return cls.HYBRID
        raise ValidationError(f"unknown work mode: {value!r}")


class LivenessStatus(str, Enum):
    ACTIVE = "active"
    STALE = "stale"
    UNKNOWN = "unknown"


class JobStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    PAUSED = "paused"


@dataclass(slots=True)
class CandidateProfile:
    """Candidate attributes read by the matching core."""

    id: int
    skills: list[str]
    experience: str = ""
    industry: str | None = None
    work_mode: WorkMode | None = None
    salary_min: int | None = None
    salary_max: int | None = None
    location: str | None = None
    title: str | None = None

    def __post_init__(self) -> None:
        if self.skills is None:
            raise ValidationError(f"candidate {self.id} has no skill list")
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            raise ValidationError(f"candidate {self.id} salary floor exceeds ceiling")


@dataclass(slots=True)
class JobPosting:
    """A job posting, internally authored or ingested from an external feed."""

    title: str
    company: str
    source: str
    description: str = ""
    skills: list[str] = field(default_factory=list)
    requirements: list[str] = field(default_factory=list)
    work_mode: WorkMode | None = None
    salary_min: int | None = None
    salary_max: int | None = None
    location: str | None = None
    industry: str | None = None
    external_id: str | None = None
    external_url: str | None = None
    trust_score: int = 50
    liveness_status: LivenessStatus = LivenessStatus.UNKNOWN
    last_liveness_check: datetime | None = None
    expires_at: datetime | None = None
    status: JobStatus = JobStatus.ACTIVE
    posted_at: datetime | None = None
    id: uuid.UUID | None = None

    def __post_init__(self) -> None:
        if not 0 <= int(self.trust_score) <= 100:
            raise ValidationError(f"trust score {self.trust_score} outside 0-100")
        if self.skills is None:
            raise ValidationError(f"job {self.title!r} has no skill list")
        if not self.is_platform and not self.external_id:
            raise ValidationError(f"external job {self.title!r} from {self.source!r} has no external id")

    @property
    def is_platform(self) -> bool:
        return self.source == PLATFORM_SOURCE

    @property
    def requirements_text(self) -> str:
        return " ".join(self.requirements)

    @property
    def full_text(self) -> str:
        """Title, description and requirements joined for free-text extraction."""

        return " ".join(part for part in (self.title, self.description, self.requirements_text) if part)


@dataclass(frozen=True, slots=True)
class MatchResult:
    """One scored candidate/job pair. Ephemeral, never persisted."""

    candidate_id: int
    job_id: uuid.UUID
    skill_score: float
    experience_score: float
    context_score: float
    semantic_score: float
    recency_score: float
    liveness_score: float
    personalization_score: float
    final_score: float
    matched_skills: tuple[str, ...]
    explanation: str
    is_verified_active: bool
    is_direct_from_company: bool
    trust_score: int
    posted_at: datetime | None = None
    title: str = ""
    company: str = ""

    def as_dict(self) -> dict[str, Any]:
        """Return the result as a JSON-serialisable dictionary."""

        return {
            "candidate_id": self.candidate_id,
            "job_id": str(self.job_id),
            "title": self.title,
            "company": self.company,
            "final_score": round(self.final_score, 4),
            "semantic_score": round(self.semantic_score, 4),
            "skill_score": round(self.skill_score, 2),
            "experience_score": round(self.experience_score, 2),
            "context_score": round(self.context_score, 2),
            "recency_score": round(self.recency_score, 4),
            "liveness_score": round(self.liveness_score, 4),
            "personalization_score": round(self.personalization_score, 4),
            "matched_skills": list(self.matched_skills),
            "explanation": self.explanation,
            "is_verified_active": self.is_verified_active,
            "is_direct_from_company": self.is_direct_from_company,
            "trust_score": self.trust_score,
            "posted_at": self.posted_at.isoformat() if self.posted_at else None,
        }
