"""
Resume Routes

GET /resumes - List my resumes
POST /resumes - Upload resume (PDF only)
POST /resumes/analyze - Keyword-gap analysis against a job description
GET /resumes/{resume_id} - Get resume metadata
GET /resumes/{resume_id}/file - Download the PDF
DELETE /resumes/{resume_id} - Delete resume and its file
"""

import asyncio
import io
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import StreamingResponse

from jobtracker.core.auth import get_current_user
from jobtracker.core.config import get_settings
from jobtracker.services.resume_analyzer import ResumeAnalyzer, get_resume_analyzer
from jobtracker.services.resume_store import ResumeStore, get_resume_store
from jobtracker.utils.file_upload import PDF_CONTENT_TYPE, read_upload, validate_pdf_upload
from jobtracker.schemas.schemas import (
    AnalysisRequest, AnalysisResult, ErrorResponse, MessageResponse, ResumeResponse
)

router = APIRouter(prefix="/resumes", tags=["Resumes"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get("", response_model=List[ResumeResponse])
async def list_resumes(
    user: dict = Depends(get_current_user),
    store: ResumeStore = Depends(get_resume_store)
):
    """Get all resumes for the current user, newest first."""
    resumes = await asyncio.to_thread(store.list, user["user_id"])
    return [ResumeResponse.from_resume(r) for r in resumes]


@router.post("", response_model=ResumeResponse, status_code=201, responses=ERROR_RESPONSES)
async def upload_resume(
    resume: UploadFile = File(..., description="Resume file (PDF, max size per MAX_UPLOAD_MB)"),
    title: Optional[str] = Form(None),
    user: dict = Depends(get_current_user),
    store: ResumeStore = Depends(get_resume_store)
):
    """
    Upload a resume PDF.

    The file is validated (type, size, PDF header) before anything is
    written; the record is created only after the bytes are stored.
    """
    max_bytes = get_settings().max_upload_bytes
    content = await read_upload(resume, max_bytes)
    validate_pdf_upload(resume.filename, resume.content_type, content, max_bytes)

    saved = await asyncio.to_thread(store.store, user["user_id"], content, title, resume.filename)
    return ResumeResponse.from_resume(saved)


@router.post("/analyze", response_model=AnalysisResult, responses=ERROR_RESPONSES)
async def analyze_resume(
    request: AnalysisRequest,
    user: dict = Depends(get_current_user),
    analyzer: ResumeAnalyzer = Depends(get_resume_analyzer)
):
    """
    Compare a stored resume against a job description using AI.

    Returns matching/missing keywords, suggestions, a summary and the
    first part of the extracted resume text.
    """
    return await analyzer.analyze_async(user["user_id"], request.resume_id, request.job_description)


@router.get("/{resume_id}", response_model=ResumeResponse, responses=ERROR_RESPONSES)
async def get_resume(
    resume_id: str,
    user: dict = Depends(get_current_user),
    store: ResumeStore = Depends(get_resume_store)
):
    """Get a resume's metadata (only if it belongs to the user)."""
    resume = await asyncio.to_thread(store.get, user["user_id"], resume_id)
    return ResumeResponse.from_resume(resume)


@router.get("/{resume_id}/file", responses=ERROR_RESPONSES)
async def download_resume(
    resume_id: str,
    user: dict = Depends(get_current_user),
    store: ResumeStore = Depends(get_resume_store)
):
    """Stream the resume PDF."""
    resume = await asyncio.to_thread(store.get, user["user_id"], resume_id)
    content = await asyncio.to_thread(store.fetch, user["user_id"], resume_id)
    filename = quote(resume.original_filename or f"{resume.id}.pdf")
    return StreamingResponse(
        io.BytesIO(content),
        media_type=PDF_CONTENT_TYPE,
        headers={"Content-Disposition": f"inline; filename*=UTF-8''{filename}"}
    )


@router.delete("/{resume_id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
async def delete_resume(
    resume_id: str,
    user: dict = Depends(get_current_user),
    store: ResumeStore = Depends(get_resume_store)
):
    """Delete a resume and its stored file."""
    await asyncio.to_thread(store.delete, user["user_id"], resume_id)
    return MessageResponse(message="Resume deleted successfully")
