"""
Core data models for the talent search engine.
"""

import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _coerce_text(value: Any) -> Any:
    """Turn scalar or list-valued text from a stored record into a single string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return f"{value:g}" if isinstance(value, float) else str(value)
    if isinstance(value, (list, tuple)):
        parts = [str(item).strip() for item in value if item is not None and str(item).strip()]
        return " ".join(parts) or None
    return value


def _coerce_string_list(value: Any) -> List[str]:
    """Convert a loosely-typed value from a stored record to a clean list of strings."""
    if not value:
        return []
    if isinstance(value, str):
        parts = re.split(r'[;\n,]', value)
        return [part.strip() for part in parts if part.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return []


class ExperienceRequirement(BaseModel):
    """Experience bounds in years."""

    min: Optional[float] = Field(None, description="Minimum years of experience")
    max: Optional[float] = Field(None, description="Maximum years of experience")
    exact: Optional[float] = Field(None, description="Exact years of experience")

    @property
    def is_active(self) -> bool:
        return any(bound is not None for bound in (self.min, self.max, self.exact))

    def describe(self) -> str:
        """Human-readable form used in match messages."""
        if self.exact is not None:
            return f"~{self.exact:g} years"
        if self.min is not None and self.max is not None:
            return f"{self.min:g}-{self.max:g} years"
        if self.min is not None:
            return f"{self.min:g}+ years"
        if self.max is not None:
            return f"up to {self.max:g} years"
        return "any"

    class Config:
        frozen = True


class SearchRequirement(BaseModel):
    """Structured, scoreable form of a recruiter's free-text query."""

    role: Optional[str] = Field(None, description="Target job title")
    experience: Optional[ExperienceRequirement] = Field(None, description="Experience bounds")
    location: Optional[str] = Field(None, description="Required location")
    skills: List[str] = Field(default=[], description="Required skills")
    education: Optional[str] = Field(None, description="Education requirement")
    certifications: List[str] = Field(default=[], description="Required certifications")
    industry: Optional[str] = Field(None, description="Industry type")
    specific_requirements: List[str] = Field(default=[], description="Display-only extras such as salary")
    implied_responsibilities: List[str] = Field(default=[], description="Role-derived daily tasks")

    @field_validator("role", "location", "education", "industry", mode="before")
    @classmethod
    def _strip_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator(
        "skills", "certifications", "specific_requirements", "implied_responsibilities", mode="before"
    )
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def active_skills(self) -> List[str]:
        return [skill for skill in self.skills if skill and skill.strip()]

    @property
    def active_responsibilities(self) -> List[str]:
        return [resp for resp in self.implied_responsibilities if resp and resp.strip()]

    @property
    def has_experience(self) -> bool:
        return self.experience is not None and self.experience.is_active

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True


class WorkEntry(BaseModel):
    """Work history entry."""

    role: Optional[str] = None
    description: Optional[str] = None

    @field_validator("role", "description", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return _coerce_text(value)

    class Config:
        extra = "allow"


class ProjectEntry(BaseModel):
    """Project entry."""

    description: Optional[str] = None

    @field_validator("description", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return _coerce_text(value)

    class Config:
        extra = "allow"


class CandidateProfile(BaseModel):
    """Candidate record as persisted by the platform. Every field is optional."""

    name: Optional[str] = None
    current_role: Optional[str] = None
    desired_role: Optional[str] = None
    location: Optional[str] = None
    total_experience: Optional[str] = None
    technical_skills: List[str] = Field(default=[])
    soft_skills: List[str] = Field(default=[])
    tags: List[str] = Field(default=[])
    highest_qualification: Optional[str] = None
    degree: Optional[str] = None
    resume_text: Optional[str] = None
    summary: Optional[str] = None
    key_achievements: List[str] = Field(default=[])
    work_experience: List[WorkEntry] = Field(default=[])
    projects: List[ProjectEntry] = Field(default=[])

    @field_validator(
        "name", "current_role", "desired_role", "location", "highest_qualification", "degree",
        "resume_text", "summary", mode="before"
    )
    @classmethod
    def _text(cls, value: Any) -> Any:
        # PIN codes, numeric ids and bullet lists show up in stored records
        return _coerce_text(value)

    @field_validator("technical_skills", "soft_skills", "tags", "key_achievements", mode="before")
    @classmethod
    def _clean_list(cls, value: Any) -> List[str]:
        return _coerce_string_list(value)

    @field_validator("total_experience", mode="before")
    @classmethod
    def _numeric_experience(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return f"{value:g} years"
        return value

    @field_validator("work_experience", "projects", mode="before")
    @classmethod
    def _entries(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)):
            return []
        return [entry for entry in value if isinstance(entry, (dict, BaseModel))]

    def all_skills(self) -> List[str]:
        """Technical skills, soft skills and tags, lowercased."""
        return [skill.lower() for skill in (*self.technical_skills, *self.soft_skills, *self.tags)]

    def role_title(self) -> str:
        return (self.current_role or self.desired_role or "").lower()

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "allow"


class MatchCategory(str, Enum):
    ROLE = "Role"
    RESPONSIBILITY = "Responsibility"
    EXPERIENCE = "Experience"
    LOCATION = "Location"
    SKILLS = "Skills"
    EDUCATION = "Education"


class MatchStatus(str, Enum):
    MATCH = "match"
    PARTIAL = "partial"
    MISS = "miss"


class MatchDetail(BaseModel):
    """Per-dimension explanation attached to a scored candidate."""

    category: MatchCategory
    status: MatchStatus
    score: float = Field(..., ge=0.0, le=1.0)
    message: str
    weight: float = Field(..., description="Weighted points earned")
    max_weight: float = Field(..., description="Weight of the dimension")

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ScoreEntry(BaseModel):
    earned: int
    max: float
    percentage: int


class ScoredCandidate(CandidateProfile):
    """Candidate annotated with its relevance to a requirement."""

    relevance_score: float = Field(0.0, ge=0.0, le=0.99)
    match_percentage: int = Field(0, ge=0, le=100)
    match_details: List[MatchDetail] = Field(default=[])
    score_breakdown: Dict[str, ScoreEntry] = Field(default={})
    gap_analysis: List[str] = Field(default=[])


class SearchFilters(BaseModel):
    """Explicit filters supplied alongside a query; they override parsed values."""

    location: Optional[str] = None
    education: Optional[str] = None
    min_experience: Optional[float] = None
    max_experience: Optional[float] = None

    @field_validator("location", "education", mode="before")
    @classmethod
    def _strip_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @property
    def is_empty(self) -> bool:
        return not any([self.location, self.education, self.min_experience, self.max_experience])

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class PaginatedResults(BaseModel):
    """One page of ranked candidates."""

    items: List[ScoredCandidate] = Field(default=[])
    total: int = 0
    page: int = 1
    per_page: int = 25

    class Config:
        alias_generator = to_camel
        populate_by_name = True
