"""
Candidate-to-job matching: fit scoring, tailored resume and cover letter
drafting, and ATS checks.

Fit, resume and cover letter failures raise ``LLMError`` so the caller can
show a failure state and offer a retry. The ATS check degrades to a fixed
"Analysis failed" report instead.
"""

from typing import List, Optional

from ..models import ATSReport, Experience, FitAnalysisResult
from ..utils import get_logger
from .llm_manager import LLMError, LLMManager, get_llm_manager
from .style import BANNED_WORDS_INSTRUCTION

logger = get_logger(__name__)

FIT_ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "score": {"type": "NUMBER", "description": "Match score between 0 and 100"},
        "gapAnalysis": {
            "type": "ARRAY", "items": {"type": "STRING"},
            "description": "List of missing skills or qualifications",
        },
        "strengths": {
            "type": "ARRAY", "items": {"type": "STRING"},
            "description": "List of matching strong points",
        },
        "summary": {"type": "STRING", "description": "Brief summary of the fit analysis"},
        "recommendedActions": {
            "type": "ARRAY", "items": {"type": "STRING"},
            "description": "Specific actions to close gaps",
        },
    },
    "required": ["score", "gapAnalysis", "strengths", "summary", "recommendedActions"],
}

ATS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "score": {"type": "NUMBER"},
        "issues": {"type": "ARRAY", "items": {"type": "STRING"}},
        "suggestions": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
}


def _role_details(exp: Experience) -> str:
    # STAR bullets first, then legacy bullets, then the raw text
    bullets = exp.star_bullets or exp.professional_bullets
    return "\n".join(bullets) if bullets else exp.raw_description


def _role_skills(exp: Experience, include_legacy: bool = False) -> str:
    skills = [*(exp.hard_skills or []), *(exp.soft_skills or [])]
    if include_legacy and exp.structured_data:
        skills.extend(exp.structured_data.skills)
    return ", ".join(skills)


def build_fit_profile(experiences: List[Experience]) -> str:
    return "\n\n".join(
        f"""Role: {exp.title} at {exp.company}.
Industry: {exp.industry or 'N/A'}. Sector: {exp.sector or 'N/A'}.
Products: {', '.join(exp.products or []) or 'N/A'}.
Description: {_role_details(exp)}.
Skills: {_role_skills(exp, include_legacy=True)}."""
        for exp in experiences
    )


def build_resume_profile(experiences: List[Experience]) -> str:
    return "\n\n".join(
        f"""Role: {exp.title} at {exp.company}. Dates: {exp.start_date} - {exp.end_date}.
Industry: {exp.industry or 'N/A'}. Products: {', '.join(exp.products or [])}.
Details: {_role_details(exp)}
Skills: {_role_skills(exp)}"""
        for exp in experiences
    )


async def calculate_fit(experiences: List[Experience], job_description: str,
                        llm: Optional[LLMManager] = None) -> FitAnalysisResult:
    """
    Score how well the candidate's experiences fit a job description.

    Raises:
        LLMError: If the call fails or any of the five result fields is missing
    """
    llm = llm or get_llm_manager()
    prompt = f"""Compare the following Candidate Profile with the Job Description.
Provide a match score (0-100), analyze gaps, and suggest specific recommended actions to improve fit (e.g., "Add metrics to Project X").

JOB DESCRIPTION:
{job_description}

CANDIDATE PROFILE:
{build_fit_profile(experiences)}"""

    response = await llm.generate_structured_response(
        prompt,
        system_prompt=BANNED_WORDS_INSTRUCTION,
        response_schema=FIT_ANALYSIS_SCHEMA,
        model=llm.pro_model,
    )
    if not response.success:
        logger.error(f"Error calculating fit: {response.error}")
        raise LLMError(response.error or "Fit analysis failed")

    try:
        return FitAnalysisResult.from_dict(response.data)
    except ValueError as e:
        logger.error(f"Error calculating fit: {e}")
        raise LLMError(f"Fit analysis returned an incomplete result: {e}") from e


async def generate_resume(experiences: List[Experience], job_description: str,
                          llm: Optional[LLMManager] = None) -> str:
    """Draft a Markdown resume tailored to ``job_description``. Raises LLMError on failure."""
    llm = llm or get_llm_manager()
    prompt = f"""Write a tailored resume for this candidate specifically for the provided job description.
Focus on relevant skills and achievements. Format in Markdown.
Ensure the layout is ATS-friendly (no tables, standard headings).
Use the STAR method bullets provided in the candidate profile where possible.

JOB DESCRIPTION:
{job_description}

CANDIDATE EXPERIENCE:
{build_resume_profile(experiences)}"""

    response = await llm.generate_text(prompt, system_prompt=BANNED_WORDS_INSTRUCTION, model=llm.pro_model)
    if not response.success:
        logger.error(f"Error generating resume: {response.error}")
        raise LLMError(response.error or "Resume generation failed")
    return response.content


async def generate_cover_letter(experiences: List[Experience], job_description: str,
                                llm: Optional[LLMManager] = None) -> str:
    """Draft a cover letter for ``job_description``. Raises LLMError on failure."""
    llm = llm or get_llm_manager()
    highlights = ", ".join(f"{exp.title} at {exp.company} ({exp.industry or 'N/A'})" for exp in experiences)
    prompt = f"""Write a compelling cover letter for this candidate applying to the job. Match the tone of the job description.

JOB DESCRIPTION:
{job_description}

CANDIDATE HIGHLIGHTS:
{highlights}"""

    response = await llm.generate_text(prompt, system_prompt=BANNED_WORDS_INSTRUCTION, model=llm.pro_model)
    if not response.success:
        logger.error(f"Error generating cover letter: {response.error}")
        raise LLMError(response.error or "Cover letter generation failed")
    return response.content


async def validate_resume_ats(resume_text: str, llm: Optional[LLMManager] = None) -> ATSReport:
    """Check a resume for ATS compatibility; never raises."""
    llm = llm or get_llm_manager()
    prompt = f"""Analyze this resume content for ATS (Applicant Tracking System) compatibility.
Check for: formatting issues, keyword density, clarity, and structure.
Return JSON with a score (0-100), a list of issues, and a list of suggestions.

Resume Content:
{resume_text}"""

    try:
        response = await llm.generate_structured_response(
            prompt,
            system_prompt=BANNED_WORDS_INSTRUCTION,
            response_schema=ATS_SCHEMA,
            model=llm.fast_model,
        )
        response.raise_for_error()
        return ATSReport.from_dict(response.data)
    except Exception as e:
        logger.error(f"ATS validation error: {e}")
        return ATSReport.failed()
