"""
Job Application Routes

GET /jobs - List my tracked applications (optional ?status= filter)
POST /jobs - Track a new application
GET /jobs/stats - Count of applications per status
GET /jobs/{job_id} - Get one application
PATCH /jobs/{job_id} - Update fields (status change is timestamped)
DELETE /jobs/{job_id} - Stop tracking an application
"""

import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from jobtracker.core.auth import get_current_user
from jobtracker.services.mongo_service import JobApplicationService, get_job_service
from jobtracker.schemas.schemas import (
    ErrorResponse, JobCreate, JobResponse, JobStatus, JobStatusCounts, JobUpdate, MessageResponse
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=List[JobResponse])
async def list_jobs(
    status: Optional[JobStatus] = Query(None, description="Only jobs with this status"),
    user: dict = Depends(get_current_user),
    jobs: JobApplicationService = Depends(get_job_service)
):
    """List tracked applications, most recent first."""
    return await asyncio.to_thread(jobs.list, user["user_id"], status)


@router.post("", response_model=JobResponse, status_code=201, responses={400: {"model": ErrorResponse}})
async def create_job(
    job: JobCreate,
    user: dict = Depends(get_current_user),
    jobs: JobApplicationService = Depends(get_job_service)
):
    """Start tracking an application. Status defaults to Applied, date to now."""
    return await asyncio.to_thread(jobs.create, user["user_id"], job)


@router.get("/stats", response_model=JobStatusCounts)
async def job_stats(
    user: dict = Depends(get_current_user),
    jobs: JobApplicationService = Depends(get_job_service)
):
    """Dashboard counts per status."""
    counts = await asyncio.to_thread(jobs.status_counts, user["user_id"])
    return JobStatusCounts(total=sum(counts.values()), counts=counts)


@router.get("/{job_id}", response_model=JobResponse, responses={404: {"model": ErrorResponse}})
async def get_job(
    job_id: str,
    user: dict = Depends(get_current_user),
    jobs: JobApplicationService = Depends(get_job_service)
):
    return await asyncio.to_thread(jobs.get, user["user_id"], job_id)


@router.patch("/{job_id}", response_model=JobResponse, responses={404: {"model": ErrorResponse}})
async def update_job(
    job_id: str,
    changes: JobUpdate,
    user: dict = Depends(get_current_user),
    jobs: JobApplicationService = Depends(get_job_service)
):
    """Update job. Only provided fields are updated."""
    return await asyncio.to_thread(jobs.update, user["user_id"], job_id, changes)


@router.delete("/{job_id}", response_model=MessageResponse, responses={404: {"model": ErrorResponse}})
async def delete_job(
    job_id: str,
    user: dict = Depends(get_current_user),
    jobs: JobApplicationService = Depends(get_job_service)
):
    await asyncio.to_thread(jobs.delete, user["user_id"], job_id)
    return MessageResponse(message="Job deleted")
