"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.
"""
from jobboard.db.models.user import User
from jobboard.db.models.job import Job, EmploymentType
from jobboard.db.models.applicant import Applicant

__all__ = [
    "User",
    "Job",
    "EmploymentType",
    "Applicant",
]
