"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Field names are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# ENUMS
# ============================================================

class JobStatus(str, Enum):
    applied = "Applied"
    interview = "Interview"
    offer = "Offer"
    rejected = "Rejected"
    saved = "Saved"


class StorageKind(str, Enum):
    filesystem = "filesystem"
    gridfs = "gridfs"


# ============================================================
# RESUME SCHEMAS
# ============================================================

class StoredReference(CamelModel):
    """Where a resume's PDF bytes live: a file under the upload dir, or a GridFS id."""
    kind: StorageKind
    ref: str


class Resume(CamelModel):
    id: str
    owner_id: str
    title: str
    storage: StoredReference
    original_filename: str
    created_at: datetime


class ResumeResponse(CamelModel):
    id: str
    owner_id: str
    title: str
    storage_kind: StorageKind
    stored_reference: StoredReference
    original_filename: str
    created_at: datetime

    @classmethod
    def from_resume(cls, resume: Resume) -> "ResumeResponse":
        return cls(
            id=resume.id, owner_id=resume.owner_id, title=resume.title,
            storage_kind=resume.storage.kind, stored_reference=resume.storage,
            original_filename=resume.original_filename,
            created_at=resume.created_at
        )


# ============================================================
# ANALYSIS SCHEMAS
# ============================================================

class AnalysisRequest(CamelModel):
    resume_id: str = Field(..., min_length=1)
    job_description: str = Field(..., min_length=1)

    @field_validator("resume_id", "job_description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class AnalysisResult(CamelModel):
    matching_keywords: List[str] = []
    missing_keywords: List[str] = []
    suggestions: List[str] = []
    summary: str = ""
    resume_text_excerpt: str = ""


# ============================================================
# JOB APPLICATION SCHEMAS
# ============================================================

class JobCreate(CamelModel):
    company: str = Field(..., min_length=1, max_length=200)
    title: str = Field(..., min_length=1, max_length=200)
    status: JobStatus = JobStatus.applied
    date: Optional[datetime] = None
    resume_used: Optional[str] = None
    notes: Optional[str] = None
    job_description: Optional[str] = None

    @field_validator("company", "title")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class JobUpdate(CamelModel):
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    status: Optional[JobStatus] = None
    date: Optional[datetime] = None
    resume_used: Optional[str] = None
    notes: Optional[str] = None
    job_description: Optional[str] = None

    @field_validator("company", "title")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class JobResponse(CamelModel):
    id: str
    owner_id: str
    company: str
    title: str
    status: JobStatus
    date: datetime
    resume_used: Optional[str] = None
    notes: Optional[str] = None
    job_description: Optional[str] = None
    status_changed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class JobStatusCounts(CamelModel):
    total: int
    counts: dict


# ============================================================
# COMMON
# ============================================================

class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    message: str
    kind: str
    raw: Optional[str] = None
