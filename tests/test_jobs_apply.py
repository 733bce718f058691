"""
Tests for applying to and withdrawing from jobs.
"""
import io

from PIL import Image

from conftest import auth_headers, image_bytes
from jobboard.db.models.applicant import Applicant


def apply(client, job_id, user, message="hi", image=None, content_type="image/png"):
    files = {}
    if image is not False:
        files["image"] = ("resume.png", image or image_bytes(), content_type)
    data = {"message": message} if message is not None else {}
    return client.post(f"/jobs/{job_id}/apply", data=data, files=files or None, headers=auth_headers(user))


def test_apply_success(client, created_job, seeker, uploader, db_session):
    """Test the resume is optimized, uploaded and the applicant stored."""
    response = apply(client, created_job["id"], seeker, image=image_bytes(size=(2400, 1200)))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Application submitted successfully"
    assert body["resumeUrl"] == uploader.url

    assert len(uploader.calls) == 1
    uploaded, folder = uploader.calls[0]
    assert folder == "resumes"
    with Image.open(io.BytesIO(uploaded)) as image:
        assert image.format == "JPEG"
        assert image.size == (1000, 500)

    applicants = db_session.query(Applicant).filter(Applicant.job_id == created_job["id"]).all()
    assert len(applicants) == 1
    assert applicants[0].user_id == seeker.id
    assert applicants[0].message == "hi"
    assert applicants[0].resume == uploader.url


def test_apply_twice_rejected(client, created_job, seeker, uploader, db_session):
    first = apply(client, created_job["id"], seeker)
    second = apply(client, created_job["id"], seeker)

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json()["detail"] == "You have already applied to this job"
    assert len(uploader.calls) == 1
    assert db_session.query(Applicant).filter(Applicant.user_id == seeker.id).count() == 1


def test_apply_non_image_rejected_before_upload(client, created_job, seeker, uploader):
    response = apply(client, created_job["id"], seeker, image=b"%PDF-1.4 resume", content_type="application/pdf")

    assert response.status_code == 400
    assert response.json()["detail"] == "Resume must be an image"
    assert uploader.calls == []


def test_apply_undecodable_image_rejected(client, created_job, seeker, uploader):
    response = apply(client, created_job["id"], seeker, image=b"not really a png", content_type="image/png")

    assert response.status_code == 400
    assert uploader.calls == []


def test_apply_requires_image(client, created_job, seeker):
    response = apply(client, created_job["id"], seeker, image=False)

    assert response.status_code == 400
    assert response.json()["detail"] == "Resume image is required"


def test_apply_requires_message(client, created_job, seeker, uploader):
    response = apply(client, created_job["id"], seeker, message=None)

    assert response.status_code == 400
    assert response.json()["detail"] == "Message is required"
    assert uploader.calls == []


def test_apply_invalid_job_id(client, seeker):
    response = apply(client, "not-an-id", seeker)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid job ID"


def test_apply_missing_job(client, seeker):
    response = apply(client, "0" * 24, seeker)

    assert response.status_code == 404
    assert response.json()["detail"] == "Job not found"


def test_apply_upload_without_url(client, created_job, seeker, uploader, db_session):
    """Test nothing is stored when the image host returns no URL."""
    uploader.url = None
    response = apply(client, created_job["id"], seeker)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to upload resume image"
    assert db_session.query(Applicant).count() == 0


def test_unapply_without_application(client, created_job, seeker):
    response = client.post(f"/jobs/{created_job['id']}/unapply", headers=auth_headers(seeker))

    assert response.status_code == 400
    assert response.json()["detail"] == "You have not applied to this job"


def test_unapply_removes_only_caller(client, created_job, seeker, other_seeker, db_session):
    assert apply(client, created_job["id"], seeker).status_code == 200
    assert apply(client, created_job["id"], other_seeker, message="me too").status_code == 200

    response = client.post(f"/jobs/{created_job['id']}/unapply", headers=auth_headers(seeker))

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Successfully removed your application from this job",
    }
    remaining = db_session.query(Applicant).filter(Applicant.job_id == created_job["id"]).all()
    assert [applicant.user_id for applicant in remaining] == [other_seeker.id]


def test_unapply_invalid_and_missing_job(client, seeker):
    assert client.post("/jobs/xyz/unapply", headers=auth_headers(seeker)).status_code == 400
    assert client.post(f"/jobs/{'a' * 24}/unapply", headers=auth_headers(seeker)).status_code == 404


def test_application_lifecycle(client, employer, seeker, job_payload):
    """Create, apply, reapply, unapply, delete, then the job is gone."""
    created = client.post("/jobs", json=job_payload, headers=auth_headers(employer))
    assert created.status_code == 201
    job = created.json()["job"]
    assert job["author_id"] == employer.id

    applied = apply(client, job["id"], seeker, image=image_bytes(fmt="JPEG"), content_type="image/jpeg")
    assert applied.status_code == 200
    assert applied.json()["resumeUrl"]

    detail = client.get(f"/jobs/{job['id']}", headers=auth_headers(employer)).json()
    assert [applicant["user"]["id"] for applicant in detail["applicants"]] == [seeker.id]

    again = apply(client, job["id"], seeker)
    assert again.status_code == 400
    assert "already applied" in again.json()["detail"]

    unapplied = client.post(f"/jobs/{job['id']}/unapply", headers=auth_headers(seeker))
    assert unapplied.status_code == 200
    detail = client.get(f"/jobs/{job['id']}", headers=auth_headers(employer)).json()
    assert detail["applicants"] == []

    deleted = client.delete(f"/jobs/{job['id']}", headers=auth_headers(employer))
    assert deleted.status_code == 200

    missing = client.get(f"/jobs/{job['id']}", headers=auth_headers(employer))
    assert missing.status_code == 404
