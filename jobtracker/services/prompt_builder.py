"""
Prompt for resume vs. job description keyword-gap analysis.

Both texts are embedded verbatim; nothing is escaped or trimmed.
"""

ANALYSIS_SYSTEM_PROMPT = "You are a helpful assistant for resume analysis."

ANALYSIS_KEYS = ("matchingKeywords", "missingKeywords", "suggestions", "summary")

ANALYSIS_PROMPT_TEMPLATE = """You are a professional resume reviewer. Given the following resume text and job description, do the following:
1. List up to 5 of the most relevant keywords from the resume that match the job description.
2. List up to 5 of the most important keywords missing from the resume that are present in the job description.
3. Provide 3-5 specific, actionable suggestions to improve the resume for this job.
4. Write a 2-3 sentence summary of the resume's strengths and weaknesses for this job.

Return your answer as a JSON object with exactly these keys: {keys}.
Return ONLY the JSON, no explanation.

Resume Text:
\"\"\"{resume_text}\"\"\"

Job Description:
\"\"\"{job_description}\"\"\""""


def build_analysis_prompt(resume_text: str, job_description: str) -> str:
    return ANALYSIS_PROMPT_TEMPLATE.format(
        keys=", ".join(ANALYSIS_KEYS),
        resume_text=resume_text,
        job_description=job_description,
    )
