"""Bridge between request payloads and Pydantic DTOs.

Views call ``parse_payload`` instead of building DTOs by hand; a Pydantic
``ValidationError`` becomes ``ValidationFailed`` carrying one
``{"field", "message"}`` pair per problem.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from modules.core.exceptions import ValidationFailed

DTO = TypeVar("DTO", bound=BaseModel)


def field_errors(exc: PydanticValidationError) -> List[Dict[str, str]]:
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        errors.append({"field": field, "message": error["msg"]})
    return errors


def parse_payload(dto_class: Type[DTO], data: Any) -> DTO:
    """Validate ``data`` against ``dto_class``.

    Raises:
        ValidationFailed: if ``data`` is not an object or fails validation.
    """
    if not isinstance(data, Mapping):
        raise ValidationFailed(
            errors=[{"field": "body", "message": "Expected a JSON object."}]
        )
    try:
        return dto_class.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationFailed(errors=field_errors(exc)) from exc
