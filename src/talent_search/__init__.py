"""
Talent Search Package

Ranks candidate profiles against free-text job requirements: requirement
extraction (LLM with a rule-based fallback) followed by weighted,
explainable multi-factor scoring.
"""

__version__ = "1.0.0"
__author__ = "Talent Search Team"

from .core.models import CandidateProfile, ScoredCandidate, SearchRequirement
from .core.ranking import RankingEngine, ScoringWeights
from .core.search_service import IntelligentSearchService, SearchMode
from .extractors.requirement_parser import RequirementParser

__all__ = [
    "CandidateProfile",
    "ScoredCandidate",
    "SearchRequirement",
    "RankingEngine",
    "ScoringWeights",
    "RequirementParser",
    "IntelligentSearchService",
    "SearchMode",
]
