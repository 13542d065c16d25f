"""
Per-dimension matchers. Each returns a raw score in [0, 1].
"""

from .education import score_education
from .experience import parse_experience_years, score_experience
from .location import score_location
from .responsibility import score_responsibilities
from .role import score_role
from .skills import score_skills

__all__ = [
    "score_education",
    "score_experience",
    "parse_experience_years",
    "score_location",
    "score_responsibilities",
    "score_role",
    "score_skills",
]
