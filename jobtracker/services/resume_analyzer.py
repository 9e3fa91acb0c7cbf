"""
Resume Analyzer - keyword-gap analysis of a stored resume against a job description.

Steps (strictly in order, nothing cached between requests):
1. Load PDF bytes from the resume store
2. Extract text
3. Build the prompt
4. Call the completion API (with model fallback)
5. Parse the JSON reply
6. Attach a bounded excerpt of the resume text
"""

import asyncio
from typing import Callable, Optional

from jobtracker.core.config import get_settings
from jobtracker.core.errors import JobTrackerError
from jobtracker.core.logger import get_logger
from jobtracker.schemas.schemas import AnalysisResult
from jobtracker.services.openai_client import AnalysisClient, get_analysis_client, parse_analysis_reply
from jobtracker.services.prompt_builder import build_analysis_prompt
from jobtracker.services.resume_store import ResumeStore, get_resume_store
from jobtracker.utils.file_upload import extract_text_from_pdf

logger = get_logger(__name__)


class ResumeAnalyzer:

    def __init__(
        self,
        store: ResumeStore,
        client: AnalysisClient,
        extract_text: Callable[[bytes], str] = extract_text_from_pdf,
        excerpt_chars: Optional[int] = None,
    ):
        self.store = store
        self.client = client
        self.extract_text = extract_text
        self.excerpt_chars = get_settings().resume_excerpt_chars if excerpt_chars is None else excerpt_chars

    def analyze(self, owner_id: str, resume_id: str, job_description: str) -> AnalysisResult:
        try:
            pdf_bytes = self.store.fetch(owner_id, resume_id)
            resume_text = self.extract_text(pdf_bytes)
            prompt = build_analysis_prompt(resume_text, job_description)
            raw = self.client.analyze(prompt)
            fields = parse_analysis_reply(raw)
        except JobTrackerError as e:
            logger.warning("Analysis of resume %s failed (%s): %s", resume_id, e.kind, e.message)
            raise

        return AnalysisResult(
            resume_text_excerpt=resume_text[:self.excerpt_chars],
            **fields
        )

    async def analyze_async(self, owner_id: str, resume_id: str, job_description: str) -> AnalysisResult:
        """Same chain, run off the event loop (storage, PDF parsing and HTTP all block)."""
        return await asyncio.to_thread(self.analyze, owner_id, resume_id, job_description)


def get_resume_analyzer() -> ResumeAnalyzer:
    return ResumeAnalyzer(store=get_resume_store(), client=get_analysis_client())
