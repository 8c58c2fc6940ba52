import asyncio
import json

from careerflow.ai_processing import (
    BANNED_WORDS,
    LLMResponse,
    enrich_experience,
    extract_structured_data,
    parse_career_history,
    reformulate_experience,
    refine_bullet_point,
)
from careerflow.ai_processing.experience_service import CAREER_HISTORY_SCHEMA
from careerflow.models import Experience

from conftest import ScriptedProvider, make_llm, text_reply

ENRICHMENT = {
    "industry": "Fintech",
    "sector": "Payments",
    "products": ["Card issuing API"],
    "aboutCompany": "Issues payment cards for startups.",
    "starBullets": ["Cut settlement time by 40% by rebuilding the ledger service"],
    "hardSkills": ["Python", "PostgreSQL"],
    "softSkills": ["Mentoring"],
}


def failure():
    return LLMResponse(success=False, error="Gemini API error 503: unavailable")


def test_parse_career_history_splits_roles():
    reply = {"experiences": [
        {"title": "Engineer", "company": "Acme", "startDate": "2019-01-01",
         "endDate": "2021-06-01", "rawDescription": "Built things."},
        {"title": "Senior Engineer", "company": "Acme", "startDate": "2021-06-01",
         "endDate": "Present", "rawDescription": "Led things."},
    ]}
    provider = ScriptedProvider(text_reply(json.dumps(reply)))

    roles = asyncio.run(parse_career_history("CV text", llm=make_llm(provider)))

    assert [r["title"] for r in roles] == ["Engineer", "Senior Engineer"]
    call = provider.calls[0]
    assert call["kind"] == "structured"
    assert call["response_schema"] is CAREER_HISTORY_SCHEMA
    assert "CV text" in call["prompt"]


def test_parse_career_history_returns_empty_on_failure():
    provider = ScriptedProvider(failure())

    assert asyncio.run(parse_career_history("CV text", llm=make_llm(provider))) == []


def test_parse_career_history_returns_empty_on_malformed_json():
    provider = ScriptedProvider(text_reply("not json"))

    assert asyncio.run(parse_career_history("CV text", llm=make_llm(provider))) == []


def test_enrich_experience_returns_fields_and_bans_words():
    provider = ScriptedProvider(text_reply(json.dumps(ENRICHMENT)))

    result = asyncio.run(enrich_experience("Rebuilt the ledger.", llm=make_llm(provider)))

    assert result == ENRICHMENT
    assert "delve" in provider.calls[0]["system_prompt"]


def test_enrich_experience_returns_empty_dict_on_failure():
    provider = ScriptedProvider(failure())

    assert asyncio.run(enrich_experience("Rebuilt the ledger.", llm=make_llm(provider))) == {}


def test_enrich_experience_swallows_provider_exceptions():
    provider = ScriptedProvider(RuntimeError("socket closed"))

    assert asyncio.run(enrich_experience("Rebuilt the ledger.", llm=make_llm(provider))) == {}


def test_enrichment_applies_to_experience():
    exp = Experience(id="1", title="Engineer", company="Acme", raw_description="Rebuilt the ledger.")

    enriched = exp.apply_enrichment(ENRICHMENT)

    assert enriched.id == "1"
    assert enriched.industry == "Fintech"
    assert enriched.star_bullets == ENRICHMENT["starBullets"]
    assert enriched.raw_description == "Rebuilt the ledger."


def test_refine_bullet_point_returns_rewrite():
    provider = ScriptedProvider(text_reply("  Cut costs 20% by renegotiating vendor contracts\n"))

    result = asyncio.run(refine_bullet_point("Did vendor stuff", tone="Confident", llm=make_llm(provider)))

    assert result == "Cut costs 20% by renegotiating vendor contracts"
    call = provider.calls[0]
    assert "Tone: Confident." in call["prompt"]
    assert "Length: Concise." in call["prompt"]
    assert all(word in call["system_prompt"] for word in BANNED_WORDS[:5])


def test_refine_bullet_point_returns_original_on_failure():
    provider = ScriptedProvider(failure())

    assert asyncio.run(refine_bullet_point("Did vendor stuff", llm=make_llm(provider))) == "Did vendor stuff"


def test_deprecated_helpers_derive_from_enrichment():
    llm = make_llm(ScriptedProvider(text_reply(json.dumps(ENRICHMENT)), text_reply(json.dumps(ENRICHMENT))))

    bullets = asyncio.run(reformulate_experience("Rebuilt the ledger.", llm=llm))
    structured = asyncio.run(extract_structured_data("Rebuilt the ledger.", llm=llm))

    assert bullets == ENRICHMENT["starBullets"]
    assert structured.skills == ["Python", "PostgreSQL", "Mentoring"]
    assert structured.tools == ["Python", "PostgreSQL"]
