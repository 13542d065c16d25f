"""
Intelligent search service.

Ties query parsing and ranking together for the caller-facing search modes:
free-text ("smart"), job description ("jd") and keyword/filter ("manual")
searches, plus pagination of the ranked list.
"""

import math
from enum import Enum
from typing import Iterable, List, Optional

from .models import ExperienceRequirement, PaginatedResults, ScoredCandidate, SearchFilters, SearchRequirement
from .ranking import CandidateInput, RankingEngine
from ..extractors.requirement_parser import RequirementParser, default_generator
from ..utils.logging import get_logger, setup_logging
from config.settings import settings

logger = get_logger(__name__)


class SearchMode(str, Enum):
    SMART = "smart"
    JD = "jd"
    MANUAL = "manual"


def apply_filters(requirement: SearchRequirement, filters: Optional[SearchFilters]) -> SearchRequirement:
    """Return a copy of the requirement with explicit filters taking precedence over parsed values."""
    if filters is None or filters.is_empty:
        return requirement

    update = {}
    if filters.location:
        update["location"] = filters.location
    if filters.education:
        update["education"] = filters.education
    bounds = {}
    if filters.min_experience:
        bounds["min"] = filters.min_experience
    if filters.max_experience:
        bounds["max"] = filters.max_experience
    if bounds:
        parsed = requirement.experience or ExperienceRequirement()
        update["experience"] = parsed.model_copy(update=bounds)

    return requirement.model_copy(update=update)


class IntelligentSearchService:
    """Processes search queries end to end: parse, override, rank, paginate."""

    def __init__(self, parser: Optional[RequirementParser] = None, engine: Optional[RankingEngine] = None):
        setup_logging()
        self.parser = parser or RequirementParser(generator=default_generator())
        self.engine = engine or RankingEngine.from_settings()

    def build_requirement(
        self,
        query: str,
        mode: SearchMode = SearchMode.SMART,
        filters: Optional[SearchFilters] = None,
    ) -> SearchRequirement:
        mode = SearchMode(mode)
        requirement = self.parser.parse(query)

        if mode == SearchMode.SMART:
            return requirement

        requirement = apply_filters(requirement, filters)

        if mode == SearchMode.MANUAL and not requirement.active_skills and query and query.strip():
            # Comma-separated keyword searches still need a skill signal
            keywords = [keyword.strip() for keyword in query.split(",") if keyword.strip()]
            requirement = requirement.model_copy(update={"skills": keywords})

        logger.info(f"✅ Final {mode.value} search requirement: {requirement.model_dump(exclude_defaults=True)}")
        return requirement

    def search(
        self,
        query: str,
        candidates: Iterable[CandidateInput],
        mode: SearchMode = SearchMode.SMART,
        filters: Optional[SearchFilters] = None,
    ) -> List[ScoredCandidate]:
        requirement = self.build_requirement(query, mode, filters)
        return self.engine.rank(requirement, candidates)

    @staticmethod
    def paginate(results: List[ScoredCandidate], page: int = 1, per_page: Optional[int] = None) -> PaginatedResults:
        """Slice ranked results into a page; out-of-range pages are clamped."""
        if not per_page or per_page < 1:
            per_page = settings.ranking.default_per_page

        total = len(results)
        total_pages = max(1, math.ceil(total / per_page))
        current_page = min(max(page or 1, 1), total_pages)
        start = (current_page - 1) * per_page

        return PaginatedResults(
            items=results[start:start + per_page],
            total=total,
            page=current_page,
            per_page=per_page,
        )
