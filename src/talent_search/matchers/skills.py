"""
Skill matching with a synonym table.
"""

from typing import List, Optional

from ..core.models import CandidateProfile
from ..utils.tables_config import MatchingTables, matching_tables

NO_SKILLS_SCORE = 0.2


def _overlaps(candidate_skill: str, term: str) -> bool:
    if term in candidate_skill:
        return True
    # Reverse containment only for meaningful tokens ("r" must not match "warehouse")
    return len(candidate_skill) > 2 and candidate_skill in term


def score_skills(required_skills: List[str], candidate: CandidateProfile,
                 tables: Optional[MatchingTables] = None) -> float:
    """Fraction of required skills the candidate covers directly or via synonyms."""
    tables = tables or matching_tables
    candidate_skills = [skill for skill in candidate.all_skills() if skill.strip()]
    if not candidate_skills:
        return NO_SKILLS_SCORE

    required = [skill.lower().strip() for skill in required_skills if skill and skill.strip()]
    if not required:
        return 0.0

    matches = 0
    for required_skill in required:
        terms = (required_skill, *tables.skill_synonyms.get(required_skill, ()))
        if any(_overlaps(skill, term) for skill in candidate_skills for term in terms):
            matches += 1

    return matches / len(required)
