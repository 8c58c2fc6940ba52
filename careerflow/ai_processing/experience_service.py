"""
Career history parsing and experience enrichment.

All operations here degrade instead of raising: a failed call yields an empty
result (or the unchanged input) so the vault stays usable offline.
"""

from typing import Any, Dict, List, Optional

from ..models import StructuredData
from ..utils import get_logger
from .llm_manager import LLMManager, get_llm_manager
from .style import BANNED_WORDS_INSTRUCTION

logger = get_logger(__name__)

CAREER_HISTORY_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "experiences": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": {"type": "STRING"},
                    "company": {"type": "STRING"},
                    "startDate": {"type": "STRING"},
                    "endDate": {"type": "STRING"},
                    "rawDescription": {"type": "STRING"},
                },
                "required": ["title", "company", "rawDescription"],
            },
        }
    },
}

ENRICHMENT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "industry": {"type": "STRING"},
        "sector": {"type": "STRING"},
        "products": {"type": "ARRAY", "items": {"type": "STRING"}},
        "aboutCompany": {"type": "STRING"},
        "starBullets": {"type": "ARRAY", "items": {"type": "STRING"}},
        "hardSkills": {"type": "ARRAY", "items": {"type": "STRING"}},
        "softSkills": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["starBullets", "hardSkills", "softSkills"],
}


async def parse_career_history(text: str, llm: Optional[LLMManager] = None) -> List[Dict[str, Any]]:
    """
    Split a free-form career document into distinct role records.

    Returns:
        Partial experience documents (title, company, dates, raw description);
        an empty list on any failure
    """
    llm = llm or get_llm_manager()
    prompt = f"""The user has provided a file containing their career history. It may contain multiple roles at different companies, or multiple roles within the same company (promotions/moves).

Please parse this text and split it into distinct professional experiences.
For each experience, extract:
- Title
- Company
- Start Date (Format: YYYY-MM-DD if possible)
- End Date (Format: YYYY-MM-DD or "Present")
- Raw Description: Include the FULL narrative, bullet points, and specific details associated with that role. Do NOT summarize. Preserve the original detail.

Input Text:
{text}"""

    try:
        response = await llm.generate_structured_response(
            prompt,
            response_schema=CAREER_HISTORY_SCHEMA,
            model=llm.fast_model,
        )
        response.raise_for_error()
        experiences = (response.data or {}).get("experiences") or []
        if not isinstance(experiences, list):
            raise ValueError("'experiences' is not a list")
        return [item for item in experiences if isinstance(item, dict)]
    except Exception as e:
        logger.error(f"Error parsing career history: {e}")
        return []


async def enrich_experience(raw_text: str, llm: Optional[LLMManager] = None) -> Dict[str, Any]:
    """
    Derive industry, sector, products, company blurb, STAR bullets and skills from a role description.

    Returns:
        Partial experience document; an empty dict on any failure
    """
    llm = llm or get_llm_manager()
    prompt = f"""Analyze the following career experience. Extract and formulate the following fields:
1. Industry (e.g., Automotive, Fintech)
2. Sector (e.g., Manufacturing, Software Development)
3. Products/Services (List of key products or services worked on)
4. About Company (Brief description of what the company does, based on context or general knowledge)
5. STAR Bullets (Synthetic bullet points using the Situation, Task, Action, Result method. Use strong verbs. Avoid banned words.)
6. Hard Skills (Technical and functional skills)
7. Soft Skills (Interpersonal and leadership skills)

Raw Text:
{raw_text}"""

    try:
        response = await llm.generate_structured_response(
            prompt,
            system_prompt=BANNED_WORDS_INSTRUCTION,
            response_schema=ENRICHMENT_SCHEMA,
            model=llm.fast_model,
        )
        response.raise_for_error()
        if not isinstance(response.data, dict):
            raise ValueError("enrichment is not a JSON object")
        return response.data
    except Exception as e:
        logger.error(f"Error enriching experience: {e}")
        return {}


async def refine_bullet_point(text: str, tone: str = "Professional", length: str = "Concise",
                              llm: Optional[LLMManager] = None) -> str:
    """Rewrite one achievement bullet; returns ``text`` unchanged on failure."""
    llm = llm or get_llm_manager()
    prompt = f"""Rewrite this resume bullet point to be more professional, impactful, and result-oriented using the STAR method.

STRICT STRUCTURE RULE:
The output MUST follow one of these two patterns:
1. Action Verb + Task or Project + Metric or Result
2. Action Verb + Metric or Result + Task or Project

Tone: {tone or "Professional"}.
Length: {length or "Concise"}.
Use strong action verbs. Avoid banned words.

Bullet: "{text}\""""

    try:
        response = await llm.generate_text(
            prompt,
            system_prompt=BANNED_WORDS_INSTRUCTION,
            model=llm.fast_model,
        )
        response.raise_for_error()
        return response.content.strip() or text
    except Exception as e:
        logger.error(f"Error refining bullet: {e}")
        return text


async def reformulate_experience(raw_text: str, llm: Optional[LLMManager] = None) -> List[str]:
    """Deprecated: STAR bullets of :func:`enrich_experience`."""
    result = await enrich_experience(raw_text, llm=llm)
    return result.get("starBullets") or []


async def extract_structured_data(text: str, llm: Optional[LLMManager] = None) -> StructuredData:
    """Deprecated: legacy StructuredData view of :func:`enrich_experience`."""
    result = await enrich_experience(text, llm=llm)
    hard_skills = result.get("hardSkills") or []
    soft_skills = result.get("softSkills") or []
    return StructuredData(
        skills=[*hard_skills, *soft_skills],
        competencies=list(soft_skills),
        tools=list(hard_skills),
        experience_level="Mid-Level",
        seniority="N/A",
        tangible_skills=result.get("products"),
    )
