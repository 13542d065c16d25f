"""
Education matching on an ordered qualification ladder.
"""

from typing import Optional

from ..core.models import CandidateProfile
from ..utils.tables_config import MatchingTables, matching_tables


def score_education(required_education: str, candidate: CandidateProfile,
                    tables: Optional[MatchingTables] = None) -> float:
    tables = tables or matching_tables
    candidate_education = (candidate.highest_qualification or candidate.degree or "").lower().strip()
    if not candidate_education:
        return 0.3

    required = (required_education or "").lower().strip()
    if not required:
        return 0.3

    if required in candidate_education or candidate_education in required:
        return 1.0

    candidate_level = tables.education_level(candidate_education)
    required_level = tables.education_level(required)
    if candidate_level >= 0 and required_level >= 0:
        return 0.8 if candidate_level >= required_level else 0.4

    return 0.2
