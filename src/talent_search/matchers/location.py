"""
Location matching with metro-area clusters.
"""

from typing import Optional

from ..utils.tables_config import MatchingTables, matching_tables

EXACT_SCORE = 1.0
CLUSTER_SCORE = 0.85
UNKNOWN_LOCATION_SCORE = 0.3
# Populated but unrelated locations keep a residual score so gazetteer gaps don't zero a candidate
MISMATCH_SCORE = 0.1


def _in_cluster(location: str, cluster) -> bool:
    return any(city in location or location in city for city in cluster)


def score_location(required_location: str, candidate_location: Optional[str],
                   tables: Optional[MatchingTables] = None) -> float:
    """Score location closeness in [0, 1]."""
    tables = tables or matching_tables
    candidate = (candidate_location or "").lower().strip()
    if not candidate:
        return UNKNOWN_LOCATION_SCORE

    required = (required_location or "").lower().strip()
    if not required:
        return UNKNOWN_LOCATION_SCORE

    if candidate in required or required in candidate:
        return EXACT_SCORE

    for cluster in tables.location_clusters:
        if _in_cluster(required, cluster) and _in_cluster(candidate, cluster):
            return CLUSTER_SCORE

    return MISMATCH_SCORE
