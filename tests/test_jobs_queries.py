"""
Tests for listing and fetching jobs.
"""
from conftest import auth_headers, image_bytes, make_user
from jobboard.core.security import create_access_token


def apply(client, job_id, user, message="hello"):
    return client.post(
        f"/jobs/{job_id}/apply",
        data={"message": message},
        files={"image": ("resume.png", image_bytes(), "image/png")},
        headers=auth_headers(user),
    )


def test_list_all_jobs(client, created_job, seeker):
    response = client.get("/jobs", headers=auth_headers(seeker))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert len(body["jobs"]) == 1
    author = body["jobs"][0]["author"]
    assert author["username"] == "employer"
    assert author["profile_picture"] == "https://example.com/employer.png"
    assert "password_hash" not in author


def test_list_my_jobs_only_returns_own(client, employer, seeker, db_session, job_payload):
    other_employer = make_user(db_session, "other_employer")
    mine = client.post("/jobs", json=job_payload, headers=auth_headers(employer)).json()["job"]
    client.post("/jobs", json=job_payload, headers=auth_headers(other_employer))
    assert apply(client, mine["id"], seeker).status_code == 200

    response = client.get("/jobs/mine", headers=auth_headers(employer))

    assert response.status_code == 200
    jobs = response.json()["jobs"]
    assert [job["id"] for job in jobs] == [mine["id"]]
    applicant = jobs[0]["applicants"][0]
    assert applicant["user"]["username"] == "seeker"
    assert applicant["message"] == "hello"


def test_list_my_jobs_rejects_malformed_user_id(client):
    token = create_access_token({"sub": "user-42"})
    response = client.get("/jobs/mine", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid user ID"


def test_get_single_job_resolves_users(client, created_job, seeker):
    assert apply(client, created_job["id"], seeker).status_code == 200

    response = client.get(f"/jobs/{created_job['id']}", headers=auth_headers(seeker))

    assert response.status_code == 200
    job = response.json()
    assert job["id"] == created_job["id"]
    assert job["author"]["email"] == "employer@example.com"
    assert job["applicants"][0]["user"]["email"] == "seeker@example.com"
    assert job["applicants"][0]["resume"].startswith("https://")


def test_get_single_job_invalid_id(client, seeker):
    response = client.get("/jobs/12345", headers=auth_headers(seeker))

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid job ID"


def test_get_single_job_not_found(client, seeker):
    response = client.get(f"/jobs/{'f' * 24}", headers=auth_headers(seeker))

    assert response.status_code == 404


def test_list_applied_jobs_hides_resumes(client, employer, seeker, other_seeker, job_payload):
    applied_job = client.post("/jobs", json=job_payload, headers=auth_headers(employer)).json()["job"]
    job_payload["title"] = "Frontend Eng"
    other_job = client.post("/jobs", json=job_payload, headers=auth_headers(employer)).json()["job"]
    assert apply(client, applied_job["id"], seeker).status_code == 200
    assert apply(client, applied_job["id"], other_seeker).status_code == 200
    assert apply(client, other_job["id"], other_seeker).status_code == 200

    response = client.get("/jobs/applied", headers=auth_headers(seeker))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 1
    job = body["jobs"][0]
    assert job["id"] == applied_job["id"]
    assert len(job["applicants"]) == 2
    for applicant in job["applicants"]:
        assert "resume" not in applicant
    assert job["author"]["email"] == "employer@example.com"
    assert "password_hash" not in job["author"]


def test_list_applied_jobs_empty(client, created_job, seeker):
    response = client.get("/jobs/applied", headers=auth_headers(seeker))

    assert response.status_code == 200
    assert response.json()["count"] == 0
    assert response.json()["jobs"] == []
