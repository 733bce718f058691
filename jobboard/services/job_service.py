"""
Job posting and application workflow.

Every function takes the caller's user id explicitly and raises a
JobBoardError subclass when a request is rejected. Writes are committed here;
callers roll back on error.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from jobboard.core import config
from jobboard.core.errors import (
    ConflictError,
    InvalidRequest,
    NotFoundError,
    PermissionDenied,
    UpstreamServiceError,
)
from jobboard.db.identifiers import is_valid_object_id
from jobboard.db.models.applicant import Applicant
from jobboard.db.models.job import Job
from jobboard.schemas.job import JobCreate, JobUpdate
from jobboard.services.media_service import CloudinaryUploader, optimize_resume_image

logger = logging.getLogger(__name__)

JOB_UNIQUE_CONSTRAINT = "uq_job_title_company_author"
JOB_UNIQUE_COLUMNS = ("jobs.title", "jobs.company_name", "jobs.author_id")
APPLICANT_UNIQUE_CONSTRAINT = "uq_applicant_job_user"
APPLICANT_UNIQUE_COLUMNS = ("job_applicants.job_id", "job_applicants.user_id")

DUPLICATE_JOB_MESSAGE = "You have already posted a job with the same title and company"
ALREADY_APPLIED_MESSAGE = "You have already applied to this job"
NOT_APPLIED_MESSAGE = "You have not applied to this job"


@dataclass
class ResumeFile:
    """An uploaded resume as received from the client."""
    content_type: Optional[str]
    data: bytes


def ensure_object_id(value: str, label: str) -> str:
    if not is_valid_object_id(value):
        raise InvalidRequest(f"Invalid {label} ID")
    return value


def _job_query(db: Session):
    return db.query(Job).options(
        selectinload(Job.author),
        selectinload(Job.applicants).selectinload(Applicant.user),
    )


def get_job_or_404(db: Session, job_id: str) -> Job:
    """Load a job by id, rejecting malformed ids before querying."""
    ensure_object_id(job_id, "job")
    job = _job_query(db).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    return job


def _ensure_author(job: Job, user_id: str, action: str) -> None:
    if str(job.author_id) != str(user_id):
        raise PermissionDenied(f"Not authorized to {action} this job")


def is_unique_violation(error: IntegrityError, constraint: str, columns) -> bool:
    """
    Whether an IntegrityError was raised by the named unique constraint.

    PostgreSQL reports the constraint name; SQLite only lists the columns.
    Foreign-key and not-null failures return False.
    """
    detail = str(error.orig)
    if constraint in detail:
        return True
    return "UNIQUE constraint failed" in detail and all(column in detail for column in columns)


def _find_duplicate(db: Session, title: str, company_name: str, author_id: str,
                    exclude_id: Optional[str] = None) -> Optional[Job]:
    query = db.query(Job).filter(
        and_(
            Job.title == title,
            Job.company_name == company_name,
            Job.author_id == author_id,
        )
    )
    if exclude_id:
        query = query.filter(Job.id != exclude_id)
    return query.first()


def create_job(db: Session, payload: JobCreate, author_id: str) -> Job:
    """
    Create a job owned by author_id.

    The duplicate pre-check gives a friendly error in the common case; the
    unique constraint on (title, company_name, author_id) catches concurrent
    duplicates and is reported the same way.
    """
    if _find_duplicate(db, payload.title, payload.company_name, author_id):
        raise ConflictError(DUPLICATE_JOB_MESSAGE)

    salary = payload.salary_range
    job = Job(
        author_id=author_id,
        title=payload.title,
        role=payload.role,
        category=payload.category,
        company_name=payload.company_name,
        description=payload.description,
        city=payload.city or config.DEFAULT_JOB_CITY,
        country=payload.country or config.DEFAULT_JOB_COUNTRY,
        employment_type=payload.employment_type,
        deadline=payload.deadline,
        salary_min=salary.min if salary else None,
        salary_max=salary.max if salary else None,
        skills_required=payload.skills_required,
    )

    db.add(job)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_unique_violation(e, JOB_UNIQUE_CONSTRAINT, JOB_UNIQUE_COLUMNS):
            raise
        logger.warning(f"Duplicate job rejected by constraint: author_id={author_id}, title={payload.title}")
        raise ConflictError(DUPLICATE_JOB_MESSAGE)
    db.refresh(job)

    logger.info(f"Job created: job_id={job.id}, author_id={author_id}, company={job.company_name}")
    return job


def list_jobs(db: Session) -> List[Job]:
    return _job_query(db).order_by(Job.created_at.desc(), Job.id.desc()).all()


def list_jobs_by_author(db: Session, user_id: str) -> List[Job]:
    ensure_object_id(user_id, "user")
    return (
        _job_query(db)
        .filter(Job.author_id == user_id)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .all()
    )


def list_applied_jobs(db: Session, user_id: str) -> List[Job]:
    """Jobs the user has an application for."""
    ensure_object_id(user_id, "user")
    return (
        _job_query(db)
        .join(Applicant, Applicant.job_id == Job.id)
        .filter(Applicant.user_id == user_id)
        .order_by(Applicant.created_at.desc())
        .all()
    )


def apply_to_job(
    db: Session,
    job_id: str,
    user_id: str,
    message: Optional[str],
    resume: Optional[ResumeFile],
    uploader: CloudinaryUploader,
) -> Applicant:
    """
    Attach the caller's application to a job.

    Checks run in order: job id, job existence, duplicate application, resume
    presence, message presence, resume content type. The resume is optimized
    and uploaded before anything is written; no applicant is stored unless
    the upload returned a URL.
    """
    job = get_job_or_404(db, job_id)

    if job.has_applicant(user_id):
        raise ConflictError(ALREADY_APPLIED_MESSAGE)

    if resume is None or not resume.data:
        raise InvalidRequest("Resume image is required")

    if not message or not message.strip():
        raise InvalidRequest("Message is required")

    if not (resume.content_type or "").startswith("image/"):
        raise InvalidRequest("Resume must be an image")

    optimized = optimize_resume_image(resume.data)
    resume_url = uploader.upload_image(optimized, folder=config.RESUME_UPLOAD_FOLDER)
    if not resume_url:
        raise UpstreamServiceError("Failed to upload resume image")

    applicant = Applicant(job_id=job.id, user_id=user_id, message=message.strip(), resume=resume_url)
    db.add(applicant)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_unique_violation(e, APPLICANT_UNIQUE_CONSTRAINT, APPLICANT_UNIQUE_COLUMNS):
            raise
        logger.warning(
            f"Concurrent duplicate application rejected: job_id={job_id}, user_id={user_id}, "
            f"orphaned_resume={resume_url}"
        )
        raise ConflictError(ALREADY_APPLIED_MESSAGE)
    db.refresh(applicant)

    logger.info(f"Application submitted: job_id={job_id}, user_id={user_id}, applicant_id={applicant.id}")
    return applicant


def unapply_from_job(db: Session, job_id: str, user_id: str) -> None:
    """Remove the caller's application; other applicants are untouched."""
    get_job_or_404(db, job_id)

    applicant = db.query(Applicant).filter(
        and_(
            Applicant.job_id == job_id,
            Applicant.user_id == user_id,
        )
    ).first()
    if not applicant:
        raise ConflictError(NOT_APPLIED_MESSAGE)

    db.delete(applicant)
    db.commit()

    logger.info(f"Application withdrawn: job_id={job_id}, user_id={user_id}")


def update_job(db: Session, job_id: str, user_id: str, changes: JobUpdate) -> Job:
    """
    Apply the fields present in changes to a job owned by user_id.

    Every field has been validated by the schema before this runs, so a
    rejected request leaves the job untouched.
    """
    job = get_job_or_404(db, job_id)
    _ensure_author(job, user_id, "update")

    update_data = changes.model_dump(exclude_unset=True)

    title = update_data.get("title", job.title)
    company_name = update_data.get("company_name", job.company_name)
    if (title, company_name) != (job.title, job.company_name):
        if _find_duplicate(db, title, company_name, job.author_id, exclude_id=job.id):
            raise ConflictError(DUPLICATE_JOB_MESSAGE)

    if "salary_range" in update_data:
        salary = update_data.pop("salary_range")
        job.salary_min = salary["min"] if salary else None
        job.salary_max = salary["max"] if salary else None

    for field, value in update_data.items():
        setattr(job, field, value)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_unique_violation(e, JOB_UNIQUE_CONSTRAINT, JOB_UNIQUE_COLUMNS):
            raise
        logger.warning(f"Duplicate job rejected by constraint on update: job_id={job_id}, user_id={user_id}")
        raise ConflictError(DUPLICATE_JOB_MESSAGE)
    db.refresh(job)

    logger.info(f"Job updated: job_id={job.id}, user_id={user_id}, fields={sorted(changes.model_fields_set)}")
    return job


def delete_job(db: Session, job_id: str, user_id: str) -> None:
    """Delete a job owned by user_id together with its applications."""
    job = get_job_or_404(db, job_id)
    _ensure_author(job, user_id, "delete")

    db.delete(job)
    db.commit()

    logger.info(f"Job deleted: job_id={job_id}, user_id={user_id}")
