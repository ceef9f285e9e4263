"""Read access to the identities, jobs and applications of the platform."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from jobchat.domain.entities import (
    ApplicationRecord,
    Identity,
    JobRecord,
    ParticipantKind,
    ParticipantRef,
)
from jobchat.infrastructure.models import (
    ApplicantModel,
    EmployerModel,
    JobApplicationModel,
    JobModel,
)


class DirectoryRepository:
    """Resolve participant references into :class:`Identity` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_identity(self, ref: ParticipantRef) -> Identity | None:
        if ref.kind is ParticipantKind.EMPLOYER:
            employer = self.session.get(EmployerModel, ref.id)
            return self._employer_to_identity(employer) if employer else None
        applicant = self.session.get(ApplicantModel, ref.id)
        return self._applicant_to_identity(applicant) if applicant else None

    def get_identities(
        self, kind: ParticipantKind, ids: Iterable[int]
    ) -> dict[int, Identity]:
        unique_ids = {identifier for identifier in ids if identifier is not None}
        if not unique_ids:
            return {}
        if kind is ParticipantKind.EMPLOYER:
            rows = (
                self.session.query(EmployerModel)
                .filter(EmployerModel.id.in_(unique_ids))
                .all()
            )
            return {row.id: self._employer_to_identity(row) for row in rows}
        rows = (
            self.session.query(ApplicantModel)
            .filter(ApplicantModel.id.in_(unique_ids))
            .all()
        )
        return {row.id: self._applicant_to_identity(row) for row in rows}

    def get_jobs(self, ids: Iterable[int]) -> dict[int, JobRecord]:
        unique_ids = {identifier for identifier in ids if identifier is not None}
        if not unique_ids:
            return {}
        rows = self.session.query(JobModel).filter(JobModel.id.in_(unique_ids)).all()
        return {row.id: self._job_to_record(row) for row in rows}

    def get_application(self, application_id: int) -> ApplicationRecord | None:
        row = (
            self.session.query(JobApplicationModel, JobModel, ApplicantModel)
            .join(JobModel, JobModel.id == JobApplicationModel.job_id)
            .join(ApplicantModel, ApplicantModel.id == JobApplicationModel.applicant_id)
            .filter(JobApplicationModel.id == application_id)
            .one_or_none()
        )
        if row is None:
            return None
        application, job, applicant = row
        return ApplicationRecord(
            id=application.id,
            job=self._job_to_record(job),
            applicant_id=applicant.id,
            applicant_name=applicant.name,
            status=application.status,
        )

    @staticmethod
    def _job_to_record(model: JobModel) -> JobRecord:
        return JobRecord(
            id=model.id,
            employer_id=model.employer_id,
            title=model.title,
            company=model.company,
        )

    @staticmethod
    def _employer_to_identity(model: EmployerModel) -> Identity:
        return Identity(
            ref=ParticipantRef(ParticipantKind.EMPLOYER, model.id),
            name=model.name,
            email=model.email,
            company=model.company,
            avatar_url=model.logo_url,
            is_verified=bool(model.is_verified),
        )

    @staticmethod
    def _applicant_to_identity(model: ApplicantModel) -> Identity:
        return Identity(
            ref=ParticipantRef(ParticipantKind.APPLICANT, model.id),
            name=model.name,
            email=model.email,
            avatar_url=model.avatar_url,
            is_verified=bool(model.is_verified),
        )


__all__ = ["DirectoryRepository"]
