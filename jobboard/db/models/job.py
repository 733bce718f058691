"""
Job posting model.

A job is owned by its author. Applicants are stored as separate rows keyed by
job id (see applicant.py) so applying and withdrawing are single-row writes.
"""
import enum
from sqlalchemy import (
    Column, String, Text, Float, DateTime, ForeignKey, JSON, Enum, Index, UniqueConstraint,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jobboard.db.base import Base
from jobboard.db.identifiers import new_object_id


class EmploymentType(str, enum.Enum):
    """Kinds of employment a job can offer."""
    FULLTIME = "fulltime"
    FREELANCE = "freelance"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class Job(Base):
    """
    Job posting submitted by an employer.
    
    (title, company_name, author_id) is unique so the same author cannot post
    the same opening twice.
    """
    __tablename__ = "jobs"

    id = Column(String(24), primary_key=True, default=new_object_id)
    author_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)

    # Posting details
    title = Column(String, nullable=False, index=True)
    role = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    company_name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    city = Column(String, nullable=False)
    country = Column(String, nullable=False)
    employment_type = Column(
        Enum(EmploymentType, values_callable=lambda e: [member.value for member in e]),
        nullable=False,
        default=EmploymentType.FULLTIME,
    )
    deadline = Column(DateTime(timezone=True), nullable=True)
    salary_min = Column(Float, nullable=True)
    salary_max = Column(Float, nullable=True)
    skills_required = Column(JSON, nullable=True, default=list)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    author = relationship("User", backref="jobs")
    applicants = relationship(
        "Applicant",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="Applicant.created_at",
    )

    __table_args__ = (
        UniqueConstraint("title", "company_name", "author_id", name="uq_job_title_company_author"),
        Index("idx_job_author_created", "author_id", "created_at"),
    )

    @property
    def salary_range(self):
        if self.salary_min is None and self.salary_max is None:
            return None
        return {"min": self.salary_min, "max": self.salary_max}

    def has_applicant(self, user_id: str) -> bool:
        return any(str(applicant.user_id) == str(user_id) for applicant in self.applicants)

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', company='{self.company_name}')>"
