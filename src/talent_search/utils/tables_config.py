"""
Matching Tables Loader

Loads the fixed lookup tables used by the matchers and the rule-based
requirement parser from a JSON file. Tables are frozen after loading so they
can be shared across scoring workers without copies or locks.
"""

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from ..utils.logging import get_logger
from config.settings import settings

logger = get_logger(__name__)


def _freeze_mapping(raw: Any) -> Mapping[str, Tuple[str, ...]]:
    if not isinstance(raw, dict):
        return MappingProxyType({})
    return MappingProxyType({
        str(key).lower().strip(): tuple(str(v).lower().strip() for v in values if str(v).strip())
        for key, values in raw.items()
        if isinstance(values, list)
    })


def _freeze_list(raw: Any) -> Tuple[str, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(str(item).lower().strip() for item in raw if str(item).strip())


class MatchingTables:
    """Immutable view over the matching tables JSON file."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize matching tables.

        Args:
            config_path: Path to the tables JSON file. If None, uses the
                configured path or ``config/matching_tables.json``.
        """
        if config_path is None:
            config_path = settings.ranking.tables_path
        if config_path is None:
            project_root = Path(__file__).parents[3]
            config_path = project_root / "config" / "matching_tables.json"

        self.config_path = Path(config_path)
        self._build(self._load_config())

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        try:
            if not self.config_path.exists():
                logger.error(f"Matching tables file not found: {self.config_path}")
                return {}

            with open(self.config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
                logger.info(f"Loaded matching tables from: {self.config_path}")
                return config if isinstance(config, dict) else {}

        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading matching tables: {e}")
            return {}

    def _build(self, config: Dict[str, Any]) -> None:
        self.role_synonyms = _freeze_mapping(config.get("role_synonyms"))
        self.role_skill_indicators = _freeze_mapping(config.get("role_skill_indicators"))
        self.skill_synonyms = _freeze_mapping(config.get("skill_synonyms"))
        self.location_clusters: Tuple[Tuple[str, ...], ...] = tuple(
            _freeze_list(cluster) for cluster in config.get("location_clusters", []) if isinstance(cluster, list)
        )
        # Ordered low to high; each level carries the spellings that identify it
        self.education_levels: Tuple[Tuple[str, Tuple[str, ...]], ...] = tuple(
            (str(entry["level"]).lower(), _freeze_list(entry.get("aliases") or [entry["level"]]))
            for entry in config.get("education_levels", [])
            if isinstance(entry, dict) and entry.get("level")
        )
        self.responsibility_stop_words = frozenset(_freeze_list(config.get("responsibility_stop_words")))

        self.query_locations = _freeze_list(config.get("query_locations"))
        # Longest first so "operations executive" is not shadowed by a shorter phrase
        self.query_roles = tuple(sorted(_freeze_list(config.get("query_roles")), key=len, reverse=True))
        self.query_skills = _freeze_list(config.get("query_skills"))
        self.query_certifications = _freeze_list(config.get("query_certifications"))
        self.query_education = _freeze_list(config.get("query_education"))
        self.query_industries = _freeze_list(config.get("query_industries"))

    def __reduce__(self):
        # Mapping proxies don't pickle; scoring workers reload from the same file
        return (self.__class__, (str(self.config_path),))

    def education_level(self, text: str) -> int:
        """Return the highest ladder index mentioned in ``text``, or -1."""
        text_lower = text.lower()
        found = -1
        for index, (_, aliases) in enumerate(self.education_levels):
            if any(alias in text_lower for alias in aliases):
                found = index
        return found


# Global instance
matching_tables = MatchingTables()
