"""
Experience matching.

Candidate experience arrives as free text ("5 years", "3 yrs", "2 years 6
months", "18 months"); it is parsed to a number of years and compared with
the requirement's bounds.
"""

import re
from typing import Optional

from ..core.models import ExperienceRequirement

# Missing/unparsable experience is low confidence, not an explicit mismatch
UNKNOWN_EXPERIENCE_SCORE = 0.3

_YEARS_AND_MONTHS = re.compile(r'(\d+(?:\.\d+)?)\s*\+?\s*(?:years?|yrs?)\b\D{0,6}?(\d+(?:\.\d+)?)\s*(?:months?|mos?)\b')
_MONTHS_ONLY = re.compile(r'(\d+(?:\.\d+)?)\s*(?:months?|mos?)\b')
_YEARS_ONLY = re.compile(r'(\d+(?:\.\d+)?)\s*\+?\s*(?:years?|yrs?)\b')
_YEAR_TOKEN = re.compile(r'\b(?:years?|yrs?)\b')


def parse_experience_years(text: Optional[str]) -> Optional[float]:
    """Parse free-text experience into years, or None when no pattern is found."""
    if not text:
        return None
    text_lower = text.lower()

    match = _YEARS_AND_MONTHS.search(text_lower)
    if match:
        return float(match.group(1)) + float(match.group(2)) / 12

    if not _YEAR_TOKEN.search(text_lower):
        match = _MONTHS_ONLY.search(text_lower)
        if match:
            return float(match.group(1)) / 12

    match = _YEARS_ONLY.search(text_lower)
    if match:
        return float(match.group(1))

    return None


def score_experience(requirement: ExperienceRequirement, candidate_experience: Optional[str]) -> float:
    """Score a candidate's experience text against the required bounds."""
    candidate_years = parse_experience_years(candidate_experience)
    if candidate_years is None:
        return UNKNOWN_EXPERIENCE_SCORE

    if requirement.exact is not None:
        return 1.0 if abs(candidate_years - requirement.exact) <= 1 else 0.3

    if requirement.min is not None and candidate_years >= requirement.min:
        if requirement.max is None or candidate_years <= requirement.max:
            return 1.0
        return 0.8

    return 0.5 if candidate_years > 0 else 0.2
