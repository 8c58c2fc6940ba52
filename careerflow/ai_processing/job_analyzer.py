"""
Job description analysis.

Extracts structured requirements from a posting. When only a URL is known
(the pasted text is too short to analyze), the model looks the posting up
with search grounding instead; that path cannot use a response schema, so the
JSON object is cut out of the free-form reply.
"""

import json
import re
from typing import Optional

from ..models import EXPERIENCE_LEVELS, StructuredData
from ..utils import get_logger
from .llm_manager import LLMError, LLMManager, get_llm_manager

logger = get_logger(__name__)

# Shorter pasted text than this plus a URL triggers the search path
MIN_DESCRIPTION_LENGTH = 50

SEARCH_TOOLS = [{"google_search": {}}]

STRUCTURED_DATA_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "skills": {"type": "ARRAY", "items": {"type": "STRING"}},
        "tangibleSkills": {
            "type": "ARRAY", "items": {"type": "STRING"},
            "description": "Concrete, measurable competencies and achievements",
        },
        "competencies": {"type": "ARRAY", "items": {"type": "STRING"}},
        "qualifications": {
            "type": "ARRAY", "items": {"type": "STRING"},
            "description": "Educational credentials, certifications",
        },
        "tools": {"type": "ARRAY", "items": {"type": "STRING"}},
        "experienceLevel": {"type": "STRING", "enum": EXPERIENCE_LEVELS},
        "seniority": {"type": "STRING"},
        "summaryBullets": {
            "type": "ARRAY", "items": {"type": "STRING"},
            "description": "Key responsibilities and requirements summarized as bullet points",
        },
        "industry": {
            "type": "STRING",
            "description": "The primary industry of the job (e.g. Fintech, Healthcare, E-commerce)",
        },
        "jobType": {
            "type": "STRING",
            "description": "Job type (e.g. Full-time, Contract, Remote, Hybrid)",
        },
    },
    "required": ["skills", "competencies", "experienceLevel", "summaryBullets"],
}

_FENCE = re.compile(r"```(?:json)?\s*\n?|\n?```")
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def extract_json_object(text: str) -> str:
    """Strip markdown code fences and surrounding prose, leaving the outermost JSON object."""
    cleaned = _FENCE.sub("", text or "").strip()
    match = _JSON_OBJECT.search(cleaned)
    return match.group(0) if match else cleaned


def uses_search(text: str, url: Optional[str]) -> bool:
    return bool(url) and len(text or "") < MIN_DESCRIPTION_LENGTH


async def analyze_job_description(text: str, url: Optional[str] = None,
                                  llm: Optional[LLMManager] = None) -> StructuredData:
    """
    Extract structured requirements from a job description.

    Args:
        text: Pasted job description (may be empty when only a URL is known)
        url: Posting URL, used for a search-grounded lookup when ``text`` is short

    Raises:
        LLMError: If the call fails or the reply is not a valid StructuredData document
    """
    llm = llm or get_llm_manager()

    try:
        if uses_search(text, url):
            logger.info(f"Analyzing job posting via search: {url}")
            prompt = f"""Find the job description for this URL: {url}. Analyze the content and extract structured requirements, including summary bullets, industry, and job type.
Return the output as valid JSON matching the schema: {{ skills: [], tangibleSkills: [], competencies: [], qualifications: [], tools: [], experienceLevel: "", seniority: "", summaryBullets: [], industry: "", jobType: "" }}
"""
            response = await llm.generate_text(prompt, model=llm.pro_model, tools=SEARCH_TOOLS)
            response.raise_for_error()
            data = json.loads(extract_json_object(response.content))
        else:
            prompt = (
                "Analyze this job description. Extract structured requirements, industry, job type, "
                f"and a summary of key responsibilities as bullet points: {text}"
            )
            response = await llm.generate_structured_response(
                prompt,
                response_schema=STRUCTURED_DATA_SCHEMA,
                model=llm.pro_model,
            )
            response.raise_for_error()
            data = response.data

        return StructuredData.from_dict(data)
    except (ValueError, TypeError) as e:
        logger.error(f"Error analyzing job: {e}")
        raise LLMError(f"Job analysis returned an unusable response: {e}") from e
    except LLMError as e:
        logger.error(f"Error analyzing job: {e}")
        raise
