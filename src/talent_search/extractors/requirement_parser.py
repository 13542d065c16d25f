"""
Requirement Parser
Turns a recruiter's free-text query into a SearchRequirement: LLM extraction
first when a text generator is available, deterministic keyword rules otherwise
"""

import json
import re
from typing import Any, Dict, List, Optional, Protocol, Tuple

from pydantic import ValidationError

from ..core.exceptions import RequirementExtractionError, TalentSearchError
from ..core.models import ExperienceRequirement, SearchRequirement
from ..utils.logging import get_logger
from ..utils.tables_config import MatchingTables, matching_tables

logger = get_logger(__name__)


class TextGenerator(Protocol):
    """Anything that turns a prompt into text (e.g. an LLM client)."""

    def generate(self, prompt: str) -> str:
        ...


EXTRACTION_PROMPT = """You are an expert HR recruiter with deep knowledge of the logistics and transportation industry. Parse this job requirement and extract structured information with semantic understanding.

Analyze the job role to understand what this person actually DOES. Generate a list of "impliedResponsibilities" that are standard for this role, even if not explicitly mentioned.

"{query}"

Return ONLY a JSON object with this exact structure:
{{
  "role": "Job title/position (e.g. 'Fleet Manager', 'Truck Driver', 'Warehouse Manager') or null",
  "experience": {{"min": number or null, "max": number or null, "exact": number or null}},
  "location": "Required city/region or null",
  "skills": ["required technical and soft skills"],
  "education": "Education requirement or null",
  "certifications": ["required certifications"],
  "industry": "logistics/transportation/warehousing/supply chain or null",
  "specificRequirements": ["other specific requirements including salary info"],
  "impliedResponsibilities": ["5-7 specific daily tasks and KPIs for this role"]
}}

Rules:
- "5+ years" means min: 5; "2-5 years" means min: 2, max: 5; "Minimum 3 years" means min: 3
- "Up to ₹30,000" goes to specificRequirements, never to experience
- "Lodhwal, Ludhiana" means location: "Ludhiana"
- "SAP software" means skills: ["SAP"]; "LIFO and FEFO" means skills: ["inventory management", "LIFO", "FEFO"]
- "CDL" means certifications: ["Commercial Driver License"]; "Hazmat" means certifications: ["Hazmat Certification"]
- Include both hard skills and soft skills
- Use null or [] for anything not present; do not invent requirements

Return ONLY the JSON object, no additional text."""

_RANGE_PATTERN = re.compile(r'(\d+(?:\.\d+)?)\s*(?:-|–|—|to)\s*(\d+(?:\.\d+)?)\s*(?:years?|yrs?)\b')
_SINGLE_PATTERNS = [
    re.compile(r'(\d+(?:\.\d+)?)\s*\+\s*(?:years?|yrs?)\b'),
    re.compile(r'minimum(?:\s+of)?\s*(\d+(?:\.\d+)?)\s*(?:years?|yrs?)\b'),
    re.compile(r'at\s*least\s*(\d+(?:\.\d+)?)\s*(?:years?|yrs?)\b'),
    re.compile(r'(\d+(?:\.\d+)?)\s*(?:years?|yrs?)\b'),
]
_SALARY_PATTERNS = [
    re.compile(r'(?:₹|\brs\.?|\binr)\s*\d[\d,]*(?:\.\d+)?(?:\s*(?:k|lpa|lakhs?|per month|/month|pm))?', re.IGNORECASE),
    re.compile(r'\d[\d,]*(?:\.\d+)?\s*(?:lpa|lakhs?|inr|rupees|/-)', re.IGNORECASE),
    re.compile(r'\b(?:salary|ctc)\b\D{0,20}?\d[\d,]*(?:\.\d+)?', re.IGNORECASE),
]


def _first_contained(text: str, keywords) -> Optional[str]:
    for keyword in keywords:
        if keyword in text:
            return keyword
    return None


class RequirementParser:
    """Parses natural-language queries into SearchRequirement objects. Never raises."""

    def __init__(self, generator: Optional[TextGenerator] = None, tables: Optional[MatchingTables] = None):
        self.generator = generator
        self.tables = tables or matching_tables

    def parse(self, query: Optional[str]) -> SearchRequirement:
        query = (query or "").strip()
        logger.info(f"Parsing search requirement: {query[:200]}")

        if not query:
            return SearchRequirement()

        if self.generator is not None:
            try:
                requirement = self._llm_parse(query)
                logger.info(f"✅ LLM parsed requirement: {requirement.model_dump(exclude_defaults=True)}")
                return requirement
            except TalentSearchError as e:
                logger.warning(f"LLM requirement extraction failed, using keyword extraction: {e.message}")
            except Exception as e:
                # Injected generators may raise anything; the rule-based path must still run
                logger.warning(f"Unexpected error from text generator, using keyword extraction: {e}")
        else:
            logger.info("No text generator configured, using keyword extraction")

        return self.extract_basic_requirements(query)

    def _llm_parse(self, query: str) -> SearchRequirement:
        raw = self.generator.generate(EXTRACTION_PROMPT.format(query=query))
        payload = self._decode_payload(raw)
        try:
            return SearchRequirement.model_validate(payload)
        except ValidationError as e:
            raise RequirementExtractionError(
                "Generated requirement has an invalid shape", raw_output=raw, cause=e
            ) from e

    @staticmethod
    def _decode_payload(raw: Any) -> Dict[str, Any]:
        if not isinstance(raw, str):
            raise RequirementExtractionError("Text generator returned a non-string response")

        text = raw.strip()
        # Remove any markdown code blocks
        text = re.sub(r'^```(?:json)?\s*', '', text)
        text = re.sub(r'\s*```$', '', text).strip()

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise RequirementExtractionError("Generated requirement is not valid JSON", raw_output=raw, cause=e) from e

        if not isinstance(payload, dict):
            raise RequirementExtractionError("Generated requirement is not a JSON object", raw_output=raw)
        return payload

    def extract_basic_requirements(self, query: str) -> SearchRequirement:
        """Deterministic keyword/regex extraction with no external dependency."""
        query_lower = (query or "").lower()

        requirement = SearchRequirement(
            role=_first_contained(query_lower, self.tables.query_roles),
            experience=self._extract_experience(query_lower),
            location=_first_contained(query_lower, self.tables.query_locations),
            skills=[skill for skill in self.tables.query_skills if skill in query_lower],
            education=_first_contained(query_lower, self.tables.query_education),
            certifications=[cert for cert in self.tables.query_certifications if cert in query_lower],
            industry=_first_contained(query_lower, self.tables.query_industries),
            specific_requirements=self._extract_salary(query or ""),
        )

        logger.info(f"📋 Basic requirement extraction results: {requirement.model_dump(exclude_defaults=True)}")
        return requirement

    def _extract_experience(self, query_lower: str) -> Optional[ExperienceRequirement]:
        min_years, max_years = self._extract_experience_range(query_lower)
        if min_years is None:
            return None
        return ExperienceRequirement(min=min_years, max=max_years)

    @staticmethod
    def _extract_experience_range(query_lower: str) -> Tuple[Optional[float], Optional[float]]:
        """Return (min, max) years; max is only set by an explicit range."""
        plus = _SINGLE_PATTERNS[0].search(query_lower)
        if plus:
            return float(plus.group(1)), None

        match = _RANGE_PATTERN.search(query_lower)
        if match:
            start, end = float(match.group(1)), float(match.group(2))
            if start > end:
                start, end = end, start
            return start, end

        for pattern in _SINGLE_PATTERNS[1:]:
            match = pattern.search(query_lower)
            if match:
                return float(match.group(1)), None

        return None, None

    @staticmethod
    def _extract_salary(query: str) -> List[str]:
        found: List[str] = []
        seen: set = set()
        for pattern in _SALARY_PATTERNS:
            for match in pattern.finditer(query):
                text = match.group(0).strip()
                key = text.lower()
                if any(key in existing or existing in key for existing in seen):
                    continue
                found.append(text)
                seen.add(key)
        return found


def default_generator() -> Optional[TextGenerator]:
    """Return the Azure OpenAI client when it is configured, otherwise None."""
    from ..clients.azure_openai import azure_client

    return azure_client if azure_client.is_configured else None
