"""
Tests for requirement extraction.
"""

import json

from src.talent_search.core.exceptions import TextGenerationError
from src.talent_search.core.models import SearchRequirement
from src.talent_search.extractors.requirement_parser import RequirementParser


class FakeGenerator:
    """Text generator returning a canned reply and recording prompts."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


class TestBasicRequirementExtraction:
    """Test cases for the rule-based fallback parser."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = RequirementParser()

    def test_full_query(self):
        """Test extraction of role, experience, location, skills and salary."""
        requirement = self.parser.parse(
            "Need a Warehouse Manager with 5+ years experience in Mumbai, SAP knowledge, salary up to ₹30,000"
        )

        assert requirement.role == "warehouse manager"
        assert requirement.experience.min == 5
        assert requirement.experience.max is None
        assert requirement.location == "mumbai"
        assert "sap" in requirement.skills
        assert requirement.specific_requirements == ["₹30,000"]

    def test_salary_is_not_experience(self):
        """Test that a salary figure never becomes an experience bound."""
        requirement = self.parser.parse("Fleet manager, up to ₹30,000 per month")

        assert requirement.experience is None
        assert requirement.specific_requirements == ["₹30,000 per month"]

    def test_experience_range(self):
        """Test range extraction."""
        requirement = self.parser.parse("Truck driver 2-5 years Delhi")

        assert requirement.role == "truck driver"
        assert requirement.experience.min == 2
        assert requirement.experience.max == 5
        assert requirement.location == "delhi"

    def test_reversed_range_is_swapped(self):
        """Test that a reversed range is normalized."""
        requirement = self.parser.parse("logistics executive 6 to 3 years")

        assert (requirement.experience.min, requirement.experience.max) == (3, 6)

    def test_minimum_experience(self):
        """Test 'minimum N years' phrasing."""
        requirement = self.parser.parse("Operations executive, minimum 3 years")

        assert requirement.experience.min == 3
        assert requirement.experience.max is None

    def test_longest_role_wins(self):
        """Test that the most specific role phrase is chosen."""
        requirement = self.parser.parse("Hiring a warehouse incharge in Pune")

        assert requirement.role == "warehouse incharge"
        assert requirement.location == "pune"

    def test_multi_word_location_preferred(self):
        """Test that 'navi mumbai' is not reduced to 'mumbai'."""
        requirement = self.parser.parse("Store manager for Navi Mumbai")

        assert requirement.location == "navi mumbai"

    def test_certifications_and_education(self):
        """Test certification and education extraction."""
        requirement = self.parser.parse("Truck driver with CDL and hazmat, graduate preferred")

        assert "cdl" in requirement.certifications
        assert "hazmat" in requirement.certifications
        assert requirement.education == "graduate"

    def test_empty_query(self):
        """Test that an empty query yields an empty requirement."""
        assert self.parser.parse("") == SearchRequirement()
        assert self.parser.parse(None) == SearchRequirement()
        assert self.parser.parse("   ") == SearchRequirement()

    def test_no_responsibilities_without_generator(self):
        """Test that the fallback path does not invent responsibilities."""
        requirement = self.parser.parse("Fleet manager in Delhi")

        assert requirement.implied_responsibilities == []


class TestLLMRequirementExtraction:
    """Test cases for generator-backed extraction and its fallback."""

    def test_generated_requirement_used(self):
        """Test that a valid generated payload is returned as-is."""
        payload = {
            "role": "Fleet Manager",
            "experience": {"min": 5, "max": None, "exact": None},
            "location": "Delhi",
            "skills": ["GPS tracking"],
            "education": None,
            "certifications": [],
            "industry": "logistics",
            "specificRequirements": [],
            "impliedResponsibilities": ["Plan vehicle routes", "Monitor fuel usage"],
        }
        generator = FakeGenerator(reply=json.dumps(payload))
        parser = RequirementParser(generator=generator)

        requirement = parser.parse("fleet head for delhi ncr")

        assert requirement.role == "Fleet Manager"
        assert requirement.experience.min == 5
        assert requirement.implied_responsibilities == ["Plan vehicle routes", "Monitor fuel usage"]
        assert "fleet head for delhi ncr" in generator.prompts[0]

    def test_code_fenced_reply(self):
        """Test that markdown fences around the JSON are tolerated."""
        generator = FakeGenerator(reply='```json\n{"role": "Truck Driver", "location": ""}\n```')
        requirement = RequirementParser(generator=generator).parse("driver needed")

        assert requirement.role == "Truck Driver"
        assert requirement.location is None

    def test_invalid_json_falls_back(self):
        """Test fallback when the reply is not JSON."""
        generator = FakeGenerator(reply="Sure! The role is a fleet manager.")
        requirement = RequirementParser(generator=generator).parse("Fleet manager in Delhi")

        assert requirement.role == "fleet manager"
        assert requirement.location == "delhi"

    def test_non_object_json_falls_back(self):
        """Test fallback when the reply is JSON but not an object."""
        generator = FakeGenerator(reply='["fleet manager"]')
        requirement = RequirementParser(generator=generator).parse("Fleet manager in Delhi")

        assert requirement.role == "fleet manager"

    def test_wrong_shape_falls_back(self):
        """Test fallback when the payload has invalid field types."""
        generator = FakeGenerator(reply='{"role": "Fleet Manager", "skills": 5}')
        requirement = RequirementParser(generator=generator).parse("Fleet manager in Delhi")

        assert requirement.role == "fleet manager"
        assert requirement.skills == []

    def test_generator_error_falls_back(self):
        """Test fallback when the generator reports a failure."""
        generator = FakeGenerator(error=TextGenerationError("timed out", provider="fake"))
        requirement = RequirementParser(generator=generator).parse("Truck driver 2-5 years Delhi")

        assert requirement.role == "truck driver"
        assert requirement.experience.max == 5

    def test_unexpected_generator_exception_falls_back(self):
        """Test that arbitrary generator exceptions never escape parse()."""
        generator = FakeGenerator(error=RuntimeError("connection reset"))
        requirement = RequirementParser(generator=generator).parse("Truck driver in Pune")

        assert requirement.role == "truck driver"
        assert requirement.location == "pune"

    def test_empty_query_skips_generator(self):
        """Test that empty queries never reach the generator."""
        generator = FakeGenerator(reply="{}")
        RequirementParser(generator=generator).parse("  ")

        assert generator.prompts == []
