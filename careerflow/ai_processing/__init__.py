"""
AI Processing module for CareerFlow.

This module provides the Gemini integration and every generation task used by
the application.
"""

from .llm_manager import (
    LLMManager,
    LLMProvider,
    LLMResponse,
    LLMError,
    GeminiProvider,
    get_llm_manager,
)

from .experience_service import (
    parse_career_history,
    enrich_experience,
    refine_bullet_point,
    reformulate_experience,
    extract_structured_data,
)

from .job_analyzer import analyze_job_description, extract_json_object

from .matching_service import (
    calculate_fit,
    generate_resume,
    generate_cover_letter,
    validate_resume_ats,
)

from .chat import stream_chat_message, collect_reply, ChatReply, ERROR_REPLY

from .style import BANNED_WORDS, BANNED_WORDS_INSTRUCTION

__all__ = [
    'LLMManager',
    'LLMProvider',
    'LLMResponse',
    'LLMError',
    'GeminiProvider',
    'get_llm_manager',
    'parse_career_history',
    'enrich_experience',
    'refine_bullet_point',
    'reformulate_experience',
    'extract_structured_data',
    'analyze_job_description',
    'extract_json_object',
    'calculate_fit',
    'generate_resume',
    'generate_cover_letter',
    'validate_resume_ats',
    'stream_chat_message',
    'collect_reply',
    'ChatReply',
    'ERROR_REPLY',
    'BANNED_WORDS',
    'BANNED_WORDS_INSTRUCTION',
]
