"""
Job Tracker
Backend for tracking job applications and resumes.

Architecture:
- MongoDB: Job applications and resume metadata
- GridFS / local disk: Resume PDFs
- OpenAI-compatible API: Resume vs. job description analysis only
"""

__version__ = "1.0.0"
