"""
Custom Exception Hierarchy

The rule engine itself is total over well-formed input, so the only errors
raised by this package come from the boundary: malformed records, threshold
profiles or settings. Each carries a stable code and structured details.
"""
from typing import Optional, Dict, Any, List


class HealthRulesError(Exception):
    """Base exception for all health rules errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class InvalidInputError(HealthRulesError):
    """A record, threshold profile or patient profile failed validation."""

    def __init__(
        self,
        message: str,
        field: str = "unknown",
        errors: Optional[List[Dict[str, Any]]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="INVALID_INPUT",
            details={"field": field, "errors": errors or [], **(details or {})}
        )
        self.field = field
        self.errors = errors or []

    @classmethod
    def from_validation_error(cls, exc, model: str) -> "InvalidInputError":
        """Wrap a pydantic ValidationError raised while building ``model``."""
        errors = [
            {
                "loc": ".".join(str(part) for part in err.get("loc", ())),
                "msg": err.get("msg", ""),
                "type": err.get("type", ""),
            }
            for err in exc.errors()
        ]
        field = errors[0]["loc"] if errors and errors[0]["loc"] else model
        return cls(
            message=f"Invalid {model}: {len(errors)} validation error(s)",
            field=field,
            errors=errors,
            details={"model": model},
        )


class ConfigurationError(HealthRulesError):
    """Settings produced an unusable default threshold profile."""

    def __init__(
        self,
        message: str,
        setting: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details={"setting": setting, **(details or {})}
        )
        self.setting = setting
