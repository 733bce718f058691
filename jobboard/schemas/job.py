"""
Pydantic schemas for job endpoints.
"""
from typing import List, Optional
from datetime import datetime, timezone
from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from jobboard.db.models.job import EmploymentType


REQUIRED_TEXT_FIELDS = ("title", "role", "category", "company_name", "description")


def _clean_text(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError("must not be blank")
    return value.strip()


def _check_employment_type(value):
    if value is None:
        raise ValueError("Invalid employment type")
    if isinstance(value, EmploymentType):
        return value
    valid = {member.value for member in EmploymentType}
    if not isinstance(value, str) or value not in valid:
        raise ValueError("Invalid employment type")
    return EmploymentType(value)


def _check_deadline(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    if value <= datetime.now(timezone.utc):
        raise ValueError("Deadline must be a valid future date")
    return value


class SalaryRange(BaseModel):
    """Salary bounds. Either bound may be omitted; when both are given min <= max."""
    min: Optional[float] = Field(None, strict=True, allow_inf_nan=False, description="Lower salary bound")
    max: Optional[float] = Field(None, strict=True, allow_inf_nan=False, description="Upper salary bound")

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError("Salary min must not be greater than max")
        return self


class JobCreate(BaseModel):
    """Schema for posting a new job."""
    title: str = Field(..., description="Job title")
    role: str = Field(..., description="Role within the company")
    category: str = Field(..., description="Job category")
    company_name: str = Field(..., description="Company name")
    description: str = Field(..., description="Job description")
    city: Optional[str] = Field(None, description="City (defaults to the configured city)")
    country: Optional[str] = Field(None, description="Country (defaults to the configured country)")
    employment_type: EmploymentType = Field(default=EmploymentType.FULLTIME, description="Employment type")
    deadline: Optional[datetime] = Field(None, description="Application deadline, must be in the future")
    salary_range: Optional[SalaryRange] = Field(
        None, validation_alias=AliasChoices("salary_range", "salary"), description="Salary range"
    )
    skills_required: Optional[List[str]] = Field(
        None, validation_alias=AliasChoices("skills_required", "skills"), description="Required skills"
    )

    @field_validator(*REQUIRED_TEXT_FIELDS)
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please fill in all required fields")
        return v.strip()

    @field_validator("city", "country")
    @classmethod
    def validate_location(cls, v: Optional[str]) -> Optional[str]:
        # Blank falls back to the configured default
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("employment_type", mode="before")
    @classmethod
    def validate_employment_type(cls, v):
        return _check_employment_type(v)

    @field_validator("salary_range")
    @classmethod
    def validate_salary_range(cls, v: Optional[SalaryRange]) -> Optional[SalaryRange]:
        # A new posting states both bounds or no salary at all
        if v is not None and (v.min is None or v.max is None):
            raise ValueError("Salary range must contain valid numbers")
        return v

    @field_validator("deadline")
    @classmethod
    def validate_deadline(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _check_deadline(v)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Backend Engineer",
                "role": "Engineering",
                "category": "Software",
                "company_name": "Acme",
                "description": "Build and run our APIs.",
                "city": "Addis Ababa",
                "country": "Ethiopia",
                "employment_type": "fulltime",
                "deadline": "2030-01-31T00:00:00Z",
                "salary_range": {"min": 1000, "max": 2000},
                "skills_required": ["Python", "SQL"]
            }
        }


class JobUpdate(BaseModel):
    """
    Schema for updating a job.

    Only fields present in the payload are applied. Text fields and the
    employment type cannot be cleared; deadline, salary_range and
    skills_required are cleared by sending null.
    """
    title: Optional[str] = None
    role: Optional[str] = None
    category: Optional[str] = None
    company_name: Optional[str] = None
    description: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    employment_type: Optional[EmploymentType] = None
    deadline: Optional[datetime] = None
    salary_range: Optional[SalaryRange] = Field(
        None, validation_alias=AliasChoices("salary_range", "salary")
    )
    skills_required: Optional[List[str]] = Field(
        None, validation_alias=AliasChoices("skills_required", "skills")
    )

    @field_validator(*REQUIRED_TEXT_FIELDS, "city", "country")
    @classmethod
    def validate_text(cls, v: Optional[str]) -> str:
        return _clean_text(v)

    @field_validator("employment_type", mode="before")
    @classmethod
    def validate_employment_type(cls, v):
        return _check_employment_type(v)

    @field_validator("deadline")
    @classmethod
    def validate_deadline(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _check_deadline(v)


class UserSummary(BaseModel):
    """Display attributes of a user."""
    id: str
    username: str
    profile_picture: Optional[str] = None

    class Config:
        from_attributes = True


class UserProfile(UserSummary):
    """User attributes without credentials."""
    email: str


class ApplicantSummary(BaseModel):
    """Applicant without the resume reference."""
    id: str
    user_id: str
    message: str
    created_at: datetime

    class Config:
        from_attributes = True


class ApplicantResponse(ApplicantSummary):
    resume: str
    user: UserSummary


class ApplicantDetail(ApplicantResponse):
    user: UserProfile


class JobResponse(BaseModel):
    """Schema for job response."""
    id: str
    author_id: str
    title: str
    role: str
    category: str
    company_name: str
    description: str
    city: str
    country: str
    employment_type: EmploymentType
    deadline: Optional[datetime] = None
    salary_range: Optional[SalaryRange] = None
    skills_required: Optional[List[str]] = None
    author: UserSummary
    applicants: List[ApplicantResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class JobDetailResponse(JobResponse):
    """Single job with author and applicant contact details."""
    author: UserProfile
    applicants: List[ApplicantDetail] = []


class AppliedJobResponse(JobResponse):
    """Job as seen by an applicant; resumes are not exposed."""
    author: UserProfile
    applicants: List[ApplicantSummary] = []


class JobEnvelope(BaseModel):
    success: bool = True
    message: str
    job: JobResponse


class JobListResponse(BaseModel):
    success: bool = True
    jobs: List[JobResponse]


class AppliedJobListResponse(BaseModel):
    success: bool = True
    message: str
    count: int
    jobs: List[AppliedJobResponse]


class ApplyResponse(BaseModel):
    success: bool = True
    message: str
    resume_url: str = Field(..., alias="resumeUrl")

    class Config:
        populate_by_name = True


class MessageResponse(BaseModel):
    success: bool = True
    message: str
