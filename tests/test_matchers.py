"""
Tests for the per-dimension matchers.
"""

import pytest

from src.talent_search.core.models import CandidateProfile, ExperienceRequirement
from src.talent_search.matchers import (
    parse_experience_years,
    score_education,
    score_experience,
    score_location,
    score_responsibilities,
    score_role,
    score_skills,
)
from src.talent_search.matchers.role import normalize_role


class TestExperienceMatcher:
    """Test cases for experience parsing and scoring."""

    @pytest.mark.parametrize("text", ["3 years", "3 yrs", "36 months", "3+ years"])
    def test_equivalent_formats_parse_to_same_years(self, text):
        """Test that equivalent experience strings parse to the same value."""
        assert parse_experience_years(text) == pytest.approx(3.0)

    def test_years_and_months_combined(self):
        """Test that years and months are added together."""
        assert parse_experience_years("2 years 6 months") == pytest.approx(2.5)

    def test_unparsable_experience(self):
        """Test that text without a duration is not parsed."""
        assert parse_experience_years("Fresher") is None
        assert parse_experience_years(None) is None
        assert score_experience(ExperienceRequirement(min=3), "Fresher") == 0.3

    def test_minimum_met(self):
        """Test that meeting the minimum without a maximum is a full match."""
        assert score_experience(ExperienceRequirement(min=3), "5 years") == 1.0

    def test_above_range(self):
        """Test that exceeding the maximum is a near match."""
        assert score_experience(ExperienceRequirement(min=3, max=4), "5 years") == 0.8

    def test_below_minimum(self):
        """Test that some experience below the minimum is partial."""
        assert score_experience(ExperienceRequirement(min=5), "2 years") == 0.5
        assert score_experience(ExperienceRequirement(min=5), "0 years") == 0.2

    def test_exact_requirement(self):
        """Test exact experience with a one year tolerance."""
        assert score_experience(ExperienceRequirement(exact=4), "5 years") == 1.0
        assert score_experience(ExperienceRequirement(exact=4), "7 years") == 0.3

    def test_equal_bounds_treated_as_range(self):
        """Test that min == max is a range, not an exact requirement."""
        assert score_experience(ExperienceRequirement(min=5, max=5), "5 years") == 1.0


class TestRoleMatcher:
    """Test cases for the role matching tiers."""

    def test_normalize_role(self):
        """Test plural stripping and whitespace collapsing."""
        assert normalize_role("operations   managers") == "operation manager"

    def test_substring_match(self):
        """Test that a containing title is an exact match."""
        candidate = CandidateProfile(current_role="Senior Fleet Manager")
        assert score_role("Fleet Manager", candidate) == 1.0

    def test_normalized_match(self):
        """Test that singular and plural titles match."""
        candidate = CandidateProfile(current_role="Operation Manager")
        assert score_role("Operations Manager", candidate) == 1.0

    def test_synonym_match(self):
        """Test that a curated synonym scores below an exact match."""
        candidate = CandidateProfile(current_role="Delivery Driver")
        assert score_role("Truck Driver", candidate) == 0.8

    def test_desired_role_used_when_current_missing(self):
        """Test that the desired role stands in for a missing current role."""
        candidate = CandidateProfile(desired_role="Warehouse Executive")
        assert score_role("Warehouse Manager", candidate) == 0.8

    def test_skill_inference(self):
        """Test that two indicative skills infer a weak role match."""
        candidate = CandidateProfile(
            current_role="Coordinator",
            technical_skills=["Fleet tracking", "Route planning"],
        )
        assert score_role("Fleet Manager", candidate) == 0.4

    def test_single_indicative_skill_is_not_enough(self):
        """Test that one indicative skill does not infer the role."""
        candidate = CandidateProfile(current_role="Software Developer", technical_skills=["SAP", "Fleet tracking"])
        assert score_role("Fleet Manager", candidate) == 0.0

    def test_missing_roles(self):
        """Test that a missing role on either side scores zero."""
        assert score_role("Fleet Manager", CandidateProfile()) == 0.0
        assert score_role("", CandidateProfile(current_role="Fleet Manager")) == 0.0


class TestLocationMatcher:
    """Test cases for location matching."""

    def test_cluster_symmetry(self):
        """Test that locations in one cluster score 0.85 in both directions."""
        assert score_location("Gurgaon", "Noida") == 0.85
        assert score_location("Noida", "Gurgaon") == 0.85

    def test_containing_location_is_exact(self):
        """Test that a containing location is an exact match."""
        assert score_location("Mumbai", "Navi Mumbai") == 1.0
        assert score_location("Pune", "pune") == 1.0

    def test_missing_candidate_location(self):
        """Test the neutral score for unknown candidate locations."""
        assert score_location("Mumbai", None) == 0.3
        assert score_location("Mumbai", "  ") == 0.3

    def test_unrelated_locations(self):
        """Test that unrelated locations keep a residual score."""
        assert score_location("Pune", "Chennai") == 0.1


class TestSkillsMatcher:
    """Test cases for skill matching."""

    def test_direct_match(self):
        """Test direct skill hits, case insensitive."""
        candidate = CandidateProfile(technical_skills=["SAP", "Excel"])
        assert score_skills(["sap"], candidate) == 1.0

    def test_synonym_match(self):
        """Test skill hits through the synonym table."""
        candidate = CandidateProfile(technical_skills=["ERP systems"], soft_skills=["Stock control"])
        assert score_skills(["SAP", "Inventory Management"], candidate) == 1.0

    def test_partial_coverage(self):
        """Test that the score is the fraction of required skills covered."""
        candidate = CandidateProfile(technical_skills=["SAP"])
        assert score_skills(["SAP", "Leadership"], candidate) == 0.5

    def test_duplicate_required_skills(self):
        """Test that repeated required skills are tolerated and counted per entry."""
        candidate = CandidateProfile(technical_skills=["SAP"])

        assert score_skills(["SAP", "SAP"], candidate) == 1.0
        assert score_skills(["SAP", "sap", "Leadership"], candidate) == pytest.approx(2 / 3)

    def test_tags_count_as_skills(self):
        """Test that profile tags are matched like skills."""
        candidate = CandidateProfile(tags=["leadership"])
        assert score_skills(["Leadership"], candidate) == 1.0

    def test_no_candidate_skills(self):
        """Test the low score for candidates without skills."""
        assert score_skills(["SAP"], CandidateProfile()) == 0.2


class TestResponsibilityMatcher:
    """Test cases for responsibility matching."""

    def test_exact_phrase(self):
        """Test that exact phrases saturate the score."""
        candidate = CandidateProfile(resume_text="Kept inventory levels accurate across three warehouses.")
        assert score_responsibilities(["Inventory levels"], candidate) == 1.0

    def test_keyword_coverage(self):
        """Test keyword matching when the phrase differs."""
        candidate = CandidateProfile(resume_text="Responsible for managing inventory levels across warehouses.")
        score = score_responsibilities(["Manage inventory levels", "Coordinate vehicle dispatch"], candidate)
        assert score == pytest.approx(1.0 / 1.4)

    def test_work_history_is_searched(self):
        """Test that work experience and projects feed the candidate text."""
        candidate = CandidateProfile(
            work_experience=[{"role": "Supervisor", "description": "Planned delivery routes daily"}],
            projects=[{"description": "Reduced fuel costs"}],
        )
        assert score_responsibilities(["delivery routes", "fuel costs"], candidate) == 1.0

    def test_no_candidate_text(self):
        """Test that an empty profile scores zero."""
        assert score_responsibilities(["Manage inventory"], CandidateProfile()) == 0.0


class TestEducationMatcher:
    """Test cases for education matching."""

    def test_containing_qualification(self):
        """Test that a containing qualification is an exact match."""
        candidate = CandidateProfile(highest_qualification="MBA Finance")
        assert score_education("MBA", candidate) == 1.0

    def test_higher_qualification(self):
        """Test that a higher ladder level still matches well."""
        candidate = CandidateProfile(highest_qualification="MBA")
        assert score_education("Bachelor", candidate) == 0.8

    def test_lower_qualification(self):
        """Test that a lower ladder level is partial."""
        candidate = CandidateProfile(degree="Diploma in Logistics")
        assert score_education("Graduate", candidate) == 0.4

    def test_missing_qualification(self):
        """Test the neutral score for missing education."""
        assert score_education("Bachelor", CandidateProfile()) == 0.3

    def test_unrecognized_qualification(self):
        """Test qualifications outside the ladder."""
        candidate = CandidateProfile(highest_qualification="Certificate course")
        assert score_education("Bachelor", candidate) == 0.2
