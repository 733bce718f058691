"""
Job endpoints.

Posting, listing, applying to, updating and deleting jobs. Business rules
live in jobboard.services.job_service; these handlers translate its errors
into HTTP responses.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from jobboard.db.session import get_db
from jobboard.core.auth_dependency import get_current_user
from jobboard.core.errors import JobBoardError
from jobboard.services import job_service
from jobboard.services.job_service import ResumeFile
from jobboard.services.media_service import CloudinaryUploader, get_resume_uploader
from jobboard.schemas.job import (
    AppliedJobListResponse,
    AppliedJobResponse,
    ApplyResponse,
    JobCreate,
    JobDetailResponse,
    JobEnvelope,
    JobListResponse,
    JobResponse,
    JobUpdate,
    MessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def _to_http_error(error: JobBoardError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.detail)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobEnvelope)
def create_job(
    job_data: JobCreate,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Post a new job.

    The authenticated user becomes the job's author. Posting the same title
    and company twice is rejected.
    """
    try:
        job = job_service.create_job(db, job_data, user_id)
        return JobEnvelope(message="Job created successfully", job=JobResponse.model_validate(job))

    except JobBoardError as e:
        db.rollback()
        raise _to_http_error(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while creating job"
        )


@router.get("", status_code=status.HTTP_200_OK, response_model=JobListResponse)
def list_jobs(
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List every job, newest first, with author display details."""
    try:
        jobs = job_service.list_jobs(db)
        logger.debug(f"Jobs listed: user_id={user_id}, total={len(jobs)}")
        return JobListResponse(jobs=[JobResponse.model_validate(job) for job in jobs])

    except Exception as e:
        logger.error(f"Failed to list jobs: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while fetching jobs"
        )


@router.get("/mine", status_code=status.HTTP_200_OK, response_model=JobListResponse)
def list_my_jobs(
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the jobs posted by the authenticated user, with their applicants."""
    try:
        jobs = job_service.list_jobs_by_author(db, user_id)
        return JobListResponse(jobs=[JobResponse.model_validate(job) for job in jobs])

    except JobBoardError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error(f"Failed to list user jobs: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while fetching user jobs"
        )


@router.get("/applied", status_code=status.HTTP_200_OK, response_model=AppliedJobListResponse)
def list_applied_jobs(
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List the jobs the authenticated user has applied to.

    Applicant resumes are not included.
    """
    try:
        jobs = job_service.list_applied_jobs(db, user_id)
        return AppliedJobListResponse(
            message="Jobs applied to by user",
            count=len(jobs),
            jobs=[AppliedJobResponse.model_validate(job) for job in jobs],
        )

    except JobBoardError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error(f"Failed to list applied jobs: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while fetching applied jobs"
        )


@router.get("/{job_id}", status_code=status.HTTP_200_OK, response_model=JobDetailResponse)
def get_job(
    job_id: str,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get a single job with author and applicant details.

    Returns 400 for a malformed id and 404 if the job does not exist.
    """
    try:
        job = job_service.get_job_or_404(db, job_id)
        return JobDetailResponse.model_validate(job)

    except JobBoardError as e:
        raise _to_http_error(e)
    except Exception as e:
        logger.error(f"Failed to get job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while fetching job"
        )


@router.post("/{job_id}/apply", status_code=status.HTTP_200_OK, response_model=ApplyResponse)
def apply_to_job(
    job_id: str,
    message: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
    uploader: CloudinaryUploader = Depends(get_resume_uploader),
):
    """
    Apply to a job with a message and a resume image.

    The image is resized, re-encoded as JPEG and uploaded before the
    application is stored.
    """
    try:
        resume = None
        if image is not None:
            resume = ResumeFile(content_type=image.content_type, data=image.file.read())

        applicant = job_service.apply_to_job(db, job_id, user_id, message, resume, uploader)
        return ApplyResponse(
            message="Application submitted successfully",
            resume_url=applicant.resume,
        )

    except JobBoardError as e:
        db.rollback()
        raise _to_http_error(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to apply to job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while applying to job"
        )


@router.post("/{job_id}/unapply", status_code=status.HTTP_200_OK, response_model=MessageResponse)
def unapply_from_job(
    job_id: str,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Withdraw the authenticated user's application."""
    try:
        job_service.unapply_from_job(db, job_id, user_id)
        return MessageResponse(message="Successfully removed your application from this job")

    except JobBoardError as e:
        db.rollback()
        raise _to_http_error(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to unapply from job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while unapplying from job"
        )


@router.patch("/{job_id}", status_code=status.HTTP_200_OK, response_model=JobEnvelope)
def update_job(
    job_id: str,
    job_data: JobUpdate,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update a job.

    Only the author may update. Only fields present in the body are changed.
    """
    try:
        job = job_service.update_job(db, job_id, user_id, job_data)
        return JobEnvelope(message="Job updated successfully", job=JobResponse.model_validate(job))

    except JobBoardError as e:
        db.rollback()
        raise _to_http_error(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while updating job"
        )


@router.delete("/{job_id}", status_code=status.HTTP_200_OK, response_model=MessageResponse)
def delete_job(
    job_id: str,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a job. Only the author may delete."""
    try:
        job_service.delete_job(db, job_id, user_id)
        return MessageResponse(message="Job deleted successfully")

    except JobBoardError as e:
        db.rollback()
        raise _to_http_error(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while deleting job"
        )
