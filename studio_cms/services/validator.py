"""
Schema validation for request payloads.

Wraps pydantic so callers get either the sanitized payload (defaults applied,
unknown nested keys stripped, camelCase keys) or a ``ValidationError`` whose
details list one entry per violated rule.
"""

from typing import Any, Dict, List, Optional, Type

import pydantic
from pydantic import BaseModel

from studio_cms.utils.exceptions import InvalidIdError, ValidationError


def _field_path(loc) -> str:
    return ".".join(str(part) for part in loc)


def format_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Convert pydantic error dicts to ``{field, message, value?}`` entries"""
    details = []
    for error in errors:
        entry: Dict[str, Any] = {
            "field": _field_path(error.get("loc", ())),
            "message": error.get("msg", "Invalid value"),
        }
        if error.get("type") != "missing" and "input" in error:
            value = error["input"]
            if isinstance(value, (str, int, float, bool)) or value is None:
                entry["value"] = value
        details.append(entry)
    return details


def validate_payload(
    model_cls: Type[BaseModel],
    payload: Any,
    context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Validate ``payload`` against ``model_cls``.

    Returns:
        The sanitized payload as a JSON-ready dict with camelCase keys

    Raises:
        ValidationError: With field-level details
    """
    if not isinstance(payload, dict):
        raise ValidationError(
            "Validation failed",
            details=[{"field": "body", "message": "Request body must be a JSON object"}],
        )
    try:
        model = model_cls.model_validate(payload, context=context)
    except pydantic.ValidationError as e:
        raise ValidationError("Validation failed", details=format_errors(e.errors()))
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def validate_id(value: Any) -> int:
    """Parse a positive integer id from a path parameter"""
    try:
        item_id = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidIdError(f"Invalid ID parameter: {value}")
    if item_id <= 0:
        raise InvalidIdError(f"Invalid ID parameter: {value}")
    return item_id
