"""Read-only tables owned by the surrounding platform.

Identity, job and application management live outside the messaging core; the
tables below only declare the columns the core reads.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from jobchat.infrastructure.database import Base


class ApplicantModel(Base):
    __tablename__ = "applicant"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=True)


class EmployerModel(Base):
    __tablename__ = "employer"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    company = Column(String(200), nullable=True)
    email = Column(String(255), nullable=True)
    logo_url = Column(String(500), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=True)


class JobModel(Base):
    __tablename__ = "job"

    id = Column(Integer, primary_key=True, index=True)
    employer_id = Column(Integer, ForeignKey("employer.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    company = Column(String(200), nullable=True)


class JobApplicationModel(Base):
    __tablename__ = "job_application"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("job.id"), nullable=False, index=True)
    applicant_id = Column(Integer, ForeignKey("applicant.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")


__all__ = ["ApplicantModel", "EmployerModel", "JobApplicationModel", "JobModel"]
