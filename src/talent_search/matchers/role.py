"""
Role matching.

Scores how close a candidate's current (or desired) role is to the required
role with three tiers of strictly decreasing confidence: exact/substring,
curated synonyms, and inference from the candidate's skills.
"""

import re
from typing import Callable, Optional, Tuple

from ..core.models import CandidateProfile
from ..utils.tables_config import MatchingTables, matching_tables

EXACT_SCORE = 1.0
SYNONYM_SCORE = 0.8
SKILL_INFERENCE_SCORE = 0.4
MIN_INDICATIVE_SKILLS = 2


def normalize_role(text: str) -> str:
    """Strip word-final 's' and collapse whitespace ("operations" -> "operation")."""
    return re.sub(r'\s+', ' ', re.sub(r's\b', '', text)).strip()


def _exact_tier(required: str, candidate_role: str, candidate: CandidateProfile,
                tables: MatchingTables) -> Optional[float]:
    norm_required = normalize_role(required)
    norm_candidate = normalize_role(candidate_role)

    if required in candidate_role or candidate_role in required:
        return EXACT_SCORE
    if norm_required and norm_candidate and (
            norm_required in norm_candidate or norm_candidate in norm_required):
        return EXACT_SCORE
    return None


def _synonym_tier(required: str, candidate_role: str, candidate: CandidateProfile,
                  tables: MatchingTables) -> Optional[float]:
    synonyms = tables.role_synonyms.get(required) or tables.role_synonyms.get(normalize_role(required)) or ()
    norm_candidate = normalize_role(candidate_role)

    for synonym in synonyms:
        if synonym in candidate_role or normalize_role(synonym) in norm_candidate:
            return SYNONYM_SCORE
    return None


def _skill_inference_tier(required: str, candidate_role: str, candidate: CandidateProfile,
                          tables: MatchingTables) -> Optional[float]:
    indicators = (tables.role_skill_indicators.get(required)
                  or tables.role_skill_indicators.get(normalize_role(required)) or ())
    if not indicators:
        return None

    skills = candidate.all_skills()
    matched = [indicator for indicator in indicators if any(indicator in skill for skill in skills)]

    # A couple of related skills alone is only weak evidence for the role
    if len(matched) >= MIN_INDICATIVE_SKILLS:
        return SKILL_INFERENCE_SCORE
    return None


RoleTier = Callable[[str, str, CandidateProfile, MatchingTables], Optional[float]]

ROLE_TIERS: Tuple[RoleTier, ...] = (_exact_tier, _synonym_tier, _skill_inference_tier)


def score_role(required_role: str, candidate: CandidateProfile,
               tables: Optional[MatchingTables] = None) -> float:
    """Score role closeness in [0, 1]; the first tier that fires wins."""
    tables = tables or matching_tables
    required = (required_role or "").lower().strip()
    candidate_role = candidate.role_title().strip()

    if not required or not candidate_role:
        return 0.0

    for tier in ROLE_TIERS:
        result = tier(required, candidate_role, candidate, tables)
        if result is not None:
            return result

    return 0.0
