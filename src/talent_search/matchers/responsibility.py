"""
Responsibility matching against free resume text.
"""

from typing import List, Optional

from ..core.models import CandidateProfile
from ..utils.tables_config import MatchingTables, matching_tables

EXACT_PHRASE_WEIGHT = 1.5
KEYWORD_MATCH_RATIO = 0.6
# Resumes rarely reuse our phrasing, so full marks need ~70% of the weight
EXPECTED_COVERAGE = 0.7


def build_candidate_text(candidate: CandidateProfile) -> str:
    """Concatenate the free-text parts of a profile into one lowercased haystack."""
    parts = [
        candidate.resume_text or "",
        candidate.summary or "",
        candidate.current_role or "",
        " ".join(candidate.key_achievements),
    ]
    parts.extend(f"{entry.role or ''} {entry.description or ''}" for entry in candidate.work_experience)
    parts.extend(project.description or "" for project in candidate.projects)
    return " ".join(part for part in parts if part).lower()


def score_responsibilities(responsibilities: List[str], candidate: CandidateProfile,
                           tables: Optional[MatchingTables] = None) -> float:
    """Score how many implied responsibilities show up in the candidate's text."""
    tables = tables or matching_tables
    haystack = build_candidate_text(candidate)
    if not haystack.strip():
        return 0.0

    phrases = [resp.lower().strip() for resp in responsibilities if resp and resp.strip()]
    if not phrases:
        return 0.0

    match_count = 0.0
    for phrase in phrases:
        if phrase in haystack:
            match_count += EXACT_PHRASE_WEIGHT
            continue

        keywords = [word for word in phrase.split()
                    if len(word) > 3 and word not in tables.responsibility_stop_words]
        if not keywords:
            continue

        ratio = sum(1 for keyword in keywords if keyword in haystack) / len(keywords)
        if ratio >= KEYWORD_MATCH_RATIO:
            match_count += ratio

    return min(1.0, match_count / max(1.0, len(phrases) * EXPECTED_COVERAGE))
