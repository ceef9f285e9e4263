"""Read-only view of a job application owned by the surrounding platform."""

from __future__ import annotations

from dataclasses import dataclass

APPLICATION_STATUS_PENDING = "pending"
APPLICATION_STATUS_REVIEWED = "reviewed"
APPLICATION_STATUS_SHORTLISTED = "shortlisted"
APPLICATION_STATUS_REJECTED = "rejected"
APPLICATION_STATUS_HIRED = "hired"


@dataclass(frozen=True)
class JobRecord:
    id: int
    employer_id: int
    title: str
    company: str | None


@dataclass(frozen=True)
class ApplicationRecord:
    """An application joined with its job and participants."""

    id: int
    job: JobRecord
    applicant_id: int
    applicant_name: str
    status: str

    @property
    def employer_id(self) -> int:
        return self.job.employer_id

    def is_owned_by(self, employer_id: int) -> bool:
        return self.job.employer_id == employer_id


__all__ = [
    "APPLICATION_STATUS_HIRED",
    "APPLICATION_STATUS_PENDING",
    "APPLICATION_STATUS_REJECTED",
    "APPLICATION_STATUS_REVIEWED",
    "APPLICATION_STATUS_SHORTLISTED",
    "ApplicationRecord",
    "JobRecord",
]
