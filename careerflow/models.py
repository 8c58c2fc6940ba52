"""
Domain records for the CareerFlow career manager.

Records are stored as schema-less camelCase JSON documents (the same shape in
local storage and in the remote ``data`` column). The dataclasses below are the
typed in-memory view; ``from_dict`` validates a document at the storage
boundary and ``to_dict`` converts it back. Unknown keys are carried in
``extra`` so a round trip never drops fields written by another client.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

PRESENT = "Present"

EXPERIENCE_LEVELS = ["Junior", "Mid-Level", "Senior", "Lead", "Executive"]


def new_record_id(offset: int = 0) -> str:
    """Timestamp-derived record id, assigned once when a record is created."""
    return str(now_ms() + offset)


def now_ms() -> int:
    return int(time.time() * 1000)


class ApplicationStatus(Enum):
    """Job application pipeline status. Any value may be set directly."""
    BOOKMARKED = "Bookmarked"
    APPLYING = "Applying"
    APPLIED = "Applied"
    INTERVIEWING = "Interviewing"
    NEGOTIATING = "Negotiating"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


def _require_str(data: Dict[str, Any], key: str, default: Optional[str] = None) -> str:
    value = data.get(key)
    if value is None:
        value = default
    if value is None:
        raise ValueError(f"missing required field '{key}'")
    if not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string, got {type(value).__name__}")
    return value


def _optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string, got {type(value).__name__}")
    return value


def _str_list(data: Dict[str, Any], key: str) -> Optional[List[str]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError(f"field '{key}' must be a list, got {type(value).__name__}")
    return [str(item) for item in value]


def _record_id(data: Dict[str, Any]) -> str:
    if not isinstance(data, dict):
        raise ValueError(f"record must be an object, got {type(data).__name__}")
    record_id = data.get("id")
    if record_id is None or record_id == "":
        raise ValueError("record has no id")
    # Numeric ids written by older clients are normalised to strings
    return str(record_id)


def _compact(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in doc.items() if value is not None}


def _extra(data: Dict[str, Any], known: tuple) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if key not in known}


@dataclass
class StructuredData:
    """Normalized extraction of a job description."""
    skills: List[str] = field(default_factory=list)
    competencies: List[str] = field(default_factory=list)
    tools: List[str] = field(default_factory=list)
    experience_level: str = ""
    seniority: str = ""
    tangible_skills: Optional[List[str]] = None
    qualifications: Optional[List[str]] = None
    summary_bullets: Optional[List[str]] = None
    industry: Optional[str] = None
    job_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StructuredData":
        if not isinstance(data, dict):
            raise ValueError(f"structured data must be an object, got {type(data).__name__}")
        return cls(
            skills=_str_list(data, "skills") or [],
            competencies=_str_list(data, "competencies") or [],
            tools=_str_list(data, "tools") or [],
            experience_level=str(data.get("experienceLevel") or ""),
            seniority=str(data.get("seniority") or ""),
            tangible_skills=_str_list(data, "tangibleSkills"),
            qualifications=_str_list(data, "qualifications"),
            summary_bullets=_str_list(data, "summaryBullets"),
            industry=_optional_str(data, "industry"),
            job_type=_optional_str(data, "jobType"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "skills": self.skills,
            "tangibleSkills": self.tangible_skills,
            "competencies": self.competencies,
            "qualifications": self.qualifications,
            "tools": self.tools,
            "experienceLevel": self.experience_level,
            "seniority": self.seniority,
            "summaryBullets": self.summary_bullets,
            "industry": self.industry,
            "jobType": self.job_type,
        })


@dataclass
class FitAnalysisResult:
    """Candidate-to-job fit. Always built from one complete response."""
    score: float
    gap_analysis: List[str]
    strengths: List[str]
    summary: str
    recommended_actions: List[str]

    REQUIRED = ("score", "gapAnalysis", "strengths", "summary", "recommendedActions")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FitAnalysisResult":
        if not isinstance(data, dict):
            raise ValueError(f"fit analysis must be an object, got {type(data).__name__}")
        missing = [key for key in cls.REQUIRED if key not in data]
        if missing:
            raise ValueError(f"fit analysis is missing fields: {', '.join(missing)}")
        try:
            score = float(data["score"])
        except (TypeError, ValueError):
            raise ValueError(f"fit score is not a number: {data['score']!r}")
        return cls(
            score=min(100.0, max(0.0, score)),
            gap_analysis=_str_list(data, "gapAnalysis") or [],
            strengths=_str_list(data, "strengths") or [],
            summary=_require_str(data, "summary"),
            recommended_actions=_str_list(data, "recommendedActions") or [],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "gapAnalysis": self.gap_analysis,
            "strengths": self.strengths,
            "summary": self.summary,
            "recommendedActions": self.recommended_actions,
        }


@dataclass
class ATSReport:
    score: float
    issues: List[str]
    suggestions: List[str]

    @classmethod
    def failed(cls) -> "ATSReport":
        return cls(score=0, issues=["Analysis failed"], suggestions=[])

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ATSReport":
        if not isinstance(data, dict):
            raise ValueError(f"ATS report must be an object, got {type(data).__name__}")
        return cls(
            score=float(data.get("score", 0)),
            issues=_str_list(data, "issues") or [],
            suggestions=_str_list(data, "suggestions") or [],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "issues": self.issues, "suggestions": self.suggestions}


@dataclass
class Experience:
    """A professional role in the user's career vault."""
    id: str
    title: str
    company: str
    start_date: str = ""
    end_date: str = ""
    raw_description: str = ""

    # AI-derived fields
    industry: Optional[str] = None
    sector: Optional[str] = None
    products: Optional[List[str]] = None
    about_company: Optional[str] = None
    star_bullets: Optional[List[str]] = None
    hard_skills: Optional[List[str]] = None
    soft_skills: Optional[List[str]] = None

    # Legacy fields, read for backward compatibility only
    professional_bullets: Optional[List[str]] = None
    professional_description: Optional[str] = None
    structured_data: Optional[StructuredData] = None

    extra: Dict[str, Any] = field(default_factory=dict)

    FIELDS = (
        "id", "title", "company", "startDate", "endDate", "rawDescription",
        "industry", "sector", "products", "aboutCompany", "starBullets",
        "hardSkills", "softSkills", "professionalBullets",
        "professionalDescription", "structuredData",
    )

    @property
    def is_current(self) -> bool:
        return self.end_date == PRESENT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Experience":
        record_id = _record_id(data)
        structured = data.get("structuredData")
        return cls(
            id=record_id,
            title=_require_str(data, "title", ""),
            company=_require_str(data, "company", ""),
            start_date=_require_str(data, "startDate", ""),
            end_date=_require_str(data, "endDate", ""),
            raw_description=_require_str(data, "rawDescription", ""),
            industry=_optional_str(data, "industry"),
            sector=_optional_str(data, "sector"),
            products=_str_list(data, "products"),
            about_company=_optional_str(data, "aboutCompany"),
            star_bullets=_str_list(data, "starBullets"),
            hard_skills=_str_list(data, "hardSkills"),
            soft_skills=_str_list(data, "softSkills"),
            professional_bullets=_str_list(data, "professionalBullets"),
            professional_description=_optional_str(data, "professionalDescription"),
            structured_data=StructuredData.from_dict(structured) if structured else None,
            extra=_extra(data, cls.FIELDS),
        )

    def to_dict(self) -> Dict[str, Any]:
        doc = dict(self.extra)
        doc.update(_compact({
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "rawDescription": self.raw_description,
            "industry": self.industry,
            "sector": self.sector,
            "products": self.products,
            "aboutCompany": self.about_company,
            "starBullets": self.star_bullets,
            "hardSkills": self.hard_skills,
            "softSkills": self.soft_skills,
            "professionalBullets": self.professional_bullets,
            "professionalDescription": self.professional_description,
            "structuredData": self.structured_data.to_dict() if self.structured_data else None,
        }))
        return doc

    def apply_enrichment(self, enrichment: Dict[str, Any]) -> "Experience":
        """Return a copy with AI-derived fields folded in from an enrichment result."""
        doc = self.to_dict()
        for key in ("industry", "sector", "products", "aboutCompany",
                    "starBullets", "hardSkills", "softSkills"):
            if enrichment.get(key) is not None:
                doc[key] = enrichment[key]
        return Experience.from_dict(doc)


@dataclass
class Job:
    """A tracked job application."""
    id: str
    title: str
    company: str
    description: str = ""
    status: ApplicationStatus = ApplicationStatus.BOOKMARKED
    url: Optional[str] = None
    structured_data: Optional[StructuredData] = None
    fit_analysis: Optional[FitAnalysisResult] = None
    tailored_resume: Optional[str] = None
    tailored_cover_letter: Optional[str] = None
    created_at: int = field(default_factory=now_ms)
    industry: Optional[str] = None
    job_type: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    FIELDS = (
        "id", "title", "company", "url", "description", "status",
        "structuredData", "fitAnalysis", "tailoredResume",
        "tailoredCoverLetter", "createdAt", "industry", "jobType",
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Job":
        record_id = _record_id(data)
        status_value = data.get("status", ApplicationStatus.BOOKMARKED.value)
        try:
            status = ApplicationStatus(status_value)
        except ValueError:
            raise ValueError(f"unknown application status: {status_value!r}")
        structured = data.get("structuredData")
        fit = data.get("fitAnalysis")
        created_at = data.get("createdAt")
        return cls(
            id=record_id,
            title=_require_str(data, "title", ""),
            company=_require_str(data, "company", ""),
            description=_require_str(data, "description", ""),
            status=status,
            url=_optional_str(data, "url"),
            structured_data=StructuredData.from_dict(structured) if structured else None,
            fit_analysis=FitAnalysisResult.from_dict(fit) if fit else None,
            tailored_resume=_optional_str(data, "tailoredResume"),
            tailored_cover_letter=_optional_str(data, "tailoredCoverLetter"),
            created_at=int(created_at) if created_at is not None else now_ms(),
            industry=_optional_str(data, "industry"),
            job_type=_optional_str(data, "jobType"),
            extra=_extra(data, cls.FIELDS),
        )

    def to_dict(self) -> Dict[str, Any]:
        doc = dict(self.extra)
        doc.update(_compact({
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "url": self.url,
            "description": self.description,
            "status": self.status.value,
            "structuredData": self.structured_data.to_dict() if self.structured_data else None,
            "fitAnalysis": self.fit_analysis.to_dict() if self.fit_analysis else None,
            "tailoredResume": self.tailored_resume,
            "tailoredCoverLetter": self.tailored_cover_letter,
            "createdAt": self.created_at,
            "industry": self.industry,
            "jobType": self.job_type,
        }))
        return doc


@dataclass
class Message:
    """One chat turn."""
    id: str
    role: str
    content: str
    timestamp: int = field(default_factory=now_ms)

    ROLES = ("user", "model")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        record_id = _record_id(data)
        role = data.get("role")
        if role not in cls.ROLES:
            raise ValueError(f"unknown message role: {role!r}")
        timestamp = data.get("timestamp")
        return cls(
            id=record_id,
            role=role,
            content=_require_str(data, "content", ""),
            timestamp=int(timestamp) if timestamp is not None else now_ms(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp,
        }
