from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint
from datetime import datetime, timezone
from sqlalchemy.orm import relationship
from jobboard.db.base import Base
from jobboard.db.identifiers import new_object_id


class Applicant(Base):
    """One user's application to a job. A user applies to a job at most once."""
    __tablename__ = "job_applicants"

    id = Column(String(24), primary_key=True, default=new_object_id)
    job_id = Column(String(24), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    resume = Column(String, nullable=False)  # URL of the hosted resume image
    # Client-side default keeps sub-second ordering on SQLite
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    job = relationship("Job", back_populates="applicants")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("job_id", "user_id", name="uq_applicant_job_user"),
    )

    def __repr__(self):
        return f"<Applicant(job_id={self.job_id}, user_id={self.user_id})>"
