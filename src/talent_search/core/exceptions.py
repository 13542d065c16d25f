"""
Exception classes for the talent search engine.

None of these escape the public search surface: they are raised inside the
LLM extraction path and recovered there by falling back to rule-based parsing.
"""

from typing import Any, Dict, Optional


class TalentSearchError(Exception):
    """Base exception for the talent search engine."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class TextGenerationError(TalentSearchError):
    """Raised when the text-generation service fails or is not configured."""

    def __init__(self, message: str, provider: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if provider:
            details["provider"] = provider
        super().__init__(message, error_code="TEXT_GENERATION_ERROR", details=details, **kwargs)


class RequirementExtractionError(TalentSearchError):
    """Raised when generated output cannot be turned into a SearchRequirement."""

    def __init__(self, message: str, raw_output: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if raw_output is not None:
            details["raw_output"] = raw_output[:500]
        super().__init__(message, error_code="REQUIREMENT_EXTRACTION_ERROR", details=details, **kwargs)
