"""
Input validation for service operations.

A rule set is a pydantic model.  ``Validator.validate`` checks a raw
mapping against it and, instead of raising, returns a
``ValidationResult`` whose ``errors`` map each failing field to a list
of readable messages, e.g. ``{"company": ["The company field is
required."]}``.
"""

from typing import Any, Dict, List, Mapping, Type

from pydantic import BaseModel, ValidationError


_MESSAGES = {
    "missing": "The {field} field is required.",
    "required": "The {field} field is required.",
    "string_type": "The {field} must be a string.",
    "int_type": "The {field} must be an integer.",
    "int_parsing": "The {field} must be an integer.",
}


class ValidationResult:
    """Outcome of a validation run."""

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors

    def passes(self) -> bool:
        return not self.errors

    def fails(self) -> bool:
        return bool(self.errors)


class Validator:
    def validate(self, data: Mapping[str, Any], rules: Type[BaseModel]) -> ValidationResult:
        try:
            rules.model_validate(dict(data))
        except ValidationError as exc:
            return ValidationResult(self._collect_errors(exc))
        return ValidationResult({})

    @staticmethod
    def _collect_errors(exc: ValidationError) -> Dict[str, List[str]]:
        errors: Dict[str, List[str]] = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "__root__"
            template = _MESSAGES.get(error["type"])
            message = template.format(field=field) if template else f"The {field} is invalid: {error['msg']}"
            errors.setdefault(field, []).append(message)
        return errors
