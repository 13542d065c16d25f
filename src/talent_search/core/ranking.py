"""
Multi-factor candidate ranking.

Scores every candidate in a pool against a SearchRequirement on six weighted
dimensions, explains each dimension, applies the hard filter and sorts the
survivors. Normalization is requirement-shaped: dimensions the requirement
does not mention contribute neither earned nor maximum points.
"""

import math
import os
from concurrent.futures import ProcessPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError

from .models import (
    CandidateProfile,
    MatchCategory,
    MatchDetail,
    MatchStatus,
    ScoreEntry,
    ScoredCandidate,
    SearchRequirement,
)
from ..matchers import (
    score_education,
    score_experience,
    score_location,
    score_responsibilities,
    score_role,
    score_skills,
)
from ..utils.logging import get_logger
from ..utils.tables_config import MatchingTables
from config.settings import settings

logger = get_logger(__name__)

# Empirical cut-offs inherited from production tuning
MIN_RELEVANCE_SCORE = 0.50
ROLE_HARD_FILTER_THRESHOLD = 0.3
# Headroom below 1.0 kept for future exact-match boosting
MAX_RELEVANCE_SCORE = 0.99

CandidateInput = Union[CandidateProfile, Dict[str, Any]]


class ScoringWeights(BaseModel):
    """Per-dimension weights. The defaults sum to 100."""

    role: float = Field(30.0, ge=0)
    responsibility: float = Field(20.0, ge=0)
    experience: float = Field(15.0, ge=0)
    skills: float = Field(15.0, ge=0)
    location: float = Field(15.0, ge=0)
    education: float = Field(5.0, ge=0)

    def weight_for(self, category: MatchCategory) -> float:
        return getattr(self, category.value.lower())

    class Config:
        frozen = True


@dataclass(frozen=True)
class StatusThresholds:
    match: float
    partial: float
    inclusive: bool = False

    def status_for(self, score: float) -> MatchStatus:
        if self.inclusive:
            if score >= self.match:
                return MatchStatus.MATCH
            if score >= self.partial:
                return MatchStatus.PARTIAL
            return MatchStatus.MISS
        if score > self.match:
            return MatchStatus.MATCH
        if score > self.partial:
            return MatchStatus.PARTIAL
        return MatchStatus.MISS


STATUS_THRESHOLDS: Dict[MatchCategory, StatusThresholds] = {
    MatchCategory.ROLE: StatusThresholds(match=0.8, partial=ROLE_HARD_FILTER_THRESHOLD, inclusive=True),
    MatchCategory.RESPONSIBILITY: StatusThresholds(match=0.6, partial=0.2),
    MatchCategory.EXPERIENCE: StatusThresholds(match=0.8, partial=0.2),
    MatchCategory.LOCATION: StatusThresholds(match=0.8, partial=0.2),
    MatchCategory.SKILLS: StatusThresholds(match=0.6, partial=0.1),
    MatchCategory.EDUCATION: StatusThresholds(match=0.6, partial=0.2),
}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _role_message(req: SearchRequirement, candidate: CandidateProfile, status: MatchStatus, score: float) -> str:
    if status == MatchStatus.MATCH:
        return f'Role matches "{req.role}"'
    if status == MatchStatus.PARTIAL:
        return f'Related role "{candidate.current_role or candidate.desired_role}"'
    return f"Role mismatch ({candidate.current_role or 'Not specified'}) - will be filtered out"


def _responsibility_message(req: SearchRequirement, candidate: CandidateProfile, status: MatchStatus, score: float) -> str:
    return f"{round_half_up(score * 100)}% match on key tasks"


def _experience_message(req: SearchRequirement, candidate: CandidateProfile, status: MatchStatus, score: float) -> str:
    stated = candidate.total_experience or "Not specified"
    if status == MatchStatus.MATCH:
        return f"Meets experience ({stated})"
    if status == MatchStatus.PARTIAL:
        return f"Partial experience ({stated})"
    return f"Experience mismatch (Req: {req.experience.describe()})"


def _location_message(req: SearchRequirement, candidate: CandidateProfile, status: MatchStatus, score: float) -> str:
    if status == MatchStatus.MATCH:
        return "Matches location"
    if status == MatchStatus.PARTIAL:
        return f"Nearby ({candidate.location})" if candidate.location else "Location not specified"
    return "Location mismatch"


def _skills_message(req: SearchRequirement, candidate: CandidateProfile, status: MatchStatus, score: float) -> str:
    if status == MatchStatus.MATCH:
        return "Good skills match"
    if status == MatchStatus.PARTIAL:
        return "Some skills match"
    return "Missing skills"


def _education_message(req: SearchRequirement, candidate: CandidateProfile, status: MatchStatus, score: float) -> str:
    return candidate.highest_qualification or candidate.degree or "Not specified"


@dataclass(frozen=True)
class Dimension:
    """One scoring axis: when it applies, how it scores, how it explains itself."""

    category: MatchCategory
    is_active: Callable[[SearchRequirement], bool]
    score: Callable[[SearchRequirement, CandidateProfile, Optional[MatchingTables]], float]
    message: Callable[[SearchRequirement, CandidateProfile, MatchStatus, float], str]
    gap_label: Callable[[SearchRequirement], str]


DIMENSIONS: Tuple[Dimension, ...] = (
    Dimension(
        MatchCategory.ROLE,
        lambda req: bool(req.role and req.role.strip()),
        lambda req, cand, tables: score_role(req.role, cand, tables),
        _role_message,
        lambda req: f"Role: {req.role}",
    ),
    Dimension(
        MatchCategory.RESPONSIBILITY,
        lambda req: bool(req.active_responsibilities),
        lambda req, cand, tables: score_responsibilities(req.active_responsibilities, cand, tables),
        _responsibility_message,
        lambda req: "Responsibility",
    ),
    Dimension(
        MatchCategory.EXPERIENCE,
        lambda req: req.has_experience,
        lambda req, cand, tables: score_experience(req.experience, cand.total_experience),
        _experience_message,
        lambda req: "Experience",
    ),
    Dimension(
        MatchCategory.LOCATION,
        lambda req: bool(req.location and req.location.strip()),
        lambda req, cand, tables: score_location(req.location, cand.location, tables),
        _location_message,
        lambda req: "Location",
    ),
    Dimension(
        MatchCategory.SKILLS,
        lambda req: bool(req.active_skills),
        lambda req, cand, tables: score_skills(req.active_skills, cand, tables),
        _skills_message,
        lambda req: "Skills",
    ),
    Dimension(
        MatchCategory.EDUCATION,
        lambda req: bool(req.education and req.education.strip()),
        lambda req, cand, tables: score_education(req.education, cand, tables),
        _education_message,
        lambda req: "Education",
    ),
)

# Output keys that must not leak in from a re-ranked or pre-annotated input record
_SCORE_KEYS = frozenset({
    "relevance_score", "relevanceScore", "match_percentage", "matchPercentage",
    "match_details", "matchDetails", "score_breakdown", "scoreBreakdown",
    "gap_analysis", "gapAnalysis",
})


class RankingEngine:
    """Scores, filters and orders candidates for a SearchRequirement. Holds no per-query state."""

    def __init__(
        self,
        weights: Optional[ScoringWeights] = None,
        min_relevance_score: float = MIN_RELEVANCE_SCORE,
        role_filter_threshold: float = ROLE_HARD_FILTER_THRESHOLD,
        max_workers: Optional[int] = None,
        parallel_threshold: int = 500,
        tables: Optional[MatchingTables] = None,
    ):
        self.weights = weights or ScoringWeights()
        self.min_relevance_score = min_relevance_score
        self.role_filter_threshold = role_filter_threshold
        self.max_workers = max_workers or os.cpu_count() or 1
        self.parallel_threshold = parallel_threshold
        self.tables = tables

    @classmethod
    def from_settings(cls, weights: Optional[ScoringWeights] = None) -> "RankingEngine":
        ranking = settings.ranking
        return cls(
            weights=weights,
            min_relevance_score=ranking.min_relevance_score,
            role_filter_threshold=ranking.role_filter_threshold,
            max_workers=ranking.worker_count,
            parallel_threshold=ranking.parallel_threshold,
        )

    def active_dimensions(self, requirement: SearchRequirement) -> List[Dimension]:
        return [dimension for dimension in DIMENSIONS if dimension.is_active(requirement)]

    def score_candidate(self, requirement: SearchRequirement, candidate: CandidateInput) -> ScoredCandidate:
        """Score one candidate on every active dimension. Does not filter."""
        profile = candidate if isinstance(candidate, CandidateProfile) else CandidateProfile.model_validate(candidate)

        earned_total = 0.0
        max_total = 0.0
        match_details: List[MatchDetail] = []
        score_breakdown: Dict[str, ScoreEntry] = {}
        gap_analysis: List[str] = []

        for dimension in self.active_dimensions(requirement):
            weight = self.weights.weight_for(dimension.category)
            raw_score = dimension.score(requirement, profile, self.tables)
            earned = raw_score * weight
            earned_total += earned
            max_total += weight

            status = STATUS_THRESHOLDS[dimension.category].status_for(raw_score)
            score_breakdown[dimension.category.value] = ScoreEntry(
                earned=round_half_up(earned), max=weight, percentage=round_half_up(raw_score * 100)
            )
            match_details.append(MatchDetail(
                category=dimension.category,
                status=status,
                score=raw_score,
                message=dimension.message(requirement, profile, status, raw_score),
                weight=earned,
                max_weight=weight,
            ))
            if status == MatchStatus.MISS:
                gap_analysis.append(dimension.gap_label(requirement))

        normalized_score = (earned_total / max_total) * 100 if max_total > 0 else 0.0
        relevance_score = min(MAX_RELEVANCE_SCORE, normalized_score / 100)

        logger.debug(
            f"📊 {profile.name or 'UNKNOWN'}: raw {earned_total:.2f}/{max_total:.0f} -> {normalized_score:.1f}%"
        )

        data = {key: value for key, value in profile.model_dump().items() if key not in _SCORE_KEYS}
        return ScoredCandidate(
            **data,
            relevance_score=relevance_score,
            match_percentage=round_half_up(relevance_score * 100),
            match_details=match_details,
            score_breakdown=score_breakdown,
            gap_analysis=gap_analysis,
        )

    def score_pool(self, requirement: SearchRequirement, candidates: Iterable[CandidateInput]) -> List[ScoredCandidate]:
        """Score every candidate, preserving input order. Large pools are scored across processes."""
        profiles = self._validate_pool(candidates)

        if self.max_workers > 1 and len(profiles) >= self.parallel_threshold:
            try:
                return self._score_parallel(requirement, profiles)
            except (OSError, BrokenProcessPool) as e:
                logger.warning(f"Parallel scoring unavailable, scoring sequentially: {e}")

        return [self.score_candidate(requirement, profile) for profile in profiles]

    def _score_parallel(self, requirement: SearchRequirement, profiles: List[CandidateProfile]) -> List[ScoredCandidate]:
        logger.info(f"Using parallel processing for {len(profiles)} candidates ({self.max_workers} workers)")
        chunksize = max(1, len(profiles) // (self.max_workers * 4))
        with ProcessPoolExecutor(max_workers=self.max_workers) as executor:
            # map() yields in submission order, which keeps the later sort deterministic
            return list(executor.map(partial(self.score_candidate, requirement), profiles, chunksize=chunksize))

    def passes_filter(self, requirement: SearchRequirement, candidate: ScoredCandidate) -> bool:
        """Hard filter: minimum relevance, plus a role gate whenever a role is required."""
        if candidate.relevance_score < self.min_relevance_score:
            return False

        role_detail = next((d for d in candidate.match_details if d.category == MatchCategory.ROLE), None)
        if role_detail is not None and role_detail.score < self.role_filter_threshold:
            logger.info(
                f"❌ Filtering out {candidate.name}: Role mismatch "
                f"({candidate.current_role} vs {requirement.role}, match: {role_detail.score})"
            )
            return False

        return True

    def rank(self, requirement: SearchRequirement, candidates: Iterable[CandidateInput]) -> List[ScoredCandidate]:
        """Score, hard-filter and sort candidates by descending relevance (stable)."""
        logger.info(f"Ranking candidates for requirement: {requirement.model_dump(exclude_defaults=True)}")

        if not self.active_dimensions(requirement):
            # A requirement with no signal must not surface an arbitrary ranking
            logger.info("Requirement has no active dimensions; returning no candidates")
            return []

        scored = self.score_pool(requirement, candidates)
        relevant = [candidate for candidate in scored if self.passes_filter(requirement, candidate)]
        relevant.sort(key=lambda candidate: candidate.relevance_score, reverse=True)

        logger.info(f"Found {len(relevant)} relevant candidates out of {len(scored)}")
        return relevant

    @staticmethod
    def _validate_pool(candidates: Iterable[CandidateInput]) -> List[CandidateProfile]:
        profiles: List[CandidateProfile] = []
        for index, candidate in enumerate(candidates or []):
            if isinstance(candidate, CandidateProfile):
                profiles.append(candidate)
                continue
            try:
                profiles.append(CandidateProfile.model_validate(candidate))
            except ValidationError as e:
                logger.warning(f"Skipping malformed candidate record at position {index}: {e.error_count()} errors")
        return profiles
