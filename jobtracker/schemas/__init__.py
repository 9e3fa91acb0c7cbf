"""
Schemas module - Request/Response schemas for API endpoints.
"""

from jobtracker.schemas.schemas import (
    AnalysisRequest, AnalysisResult, JobCreate, JobResponse, JobStatus, JobUpdate,
    Resume, ResumeResponse, StorageKind, StoredReference
)

__all__ = [
    "AnalysisRequest", "AnalysisResult", "JobCreate", "JobResponse", "JobStatus",
    "JobUpdate", "Resume", "ResumeResponse", "StorageKind", "StoredReference"
]
