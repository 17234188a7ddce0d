"""Request Validation: raw input → validated contract model, or InputValidationError.

Invariants:
    - validate() is pure: no IO, no logging, same input → same outcome
    - Every pydantic error is translated to exactly one FieldViolation with a ValidationRule
    - Non-strict schemas ignore unknown fields; strict=True rejects them as UNKNOWN_FIELD
    - Field names in violations are the JSON (camelCase) names a client sent

Design Decisions:
    - pydantic does the type work; this module owns the rule vocabulary clients see
    - Strictness is checked here, not via extra="forbid", so one schema can serve
      both strict and lenient routes
"""

from typing import Any, TypeVar

from pydantic import AliasChoices, BaseModel
from pydantic import ValidationError as PydanticValidationError

from reflect_mirror.core.errors import (
    FieldViolation, InputValidationError, ValidationRule,
)

ModelT = TypeVar("ModelT", bound=BaseModel)

_RULES_BY_ERROR_TYPE: dict[str, ValidationRule] = {
    "missing": ValidationRule.MISSING_FIELD,
    "enum": ValidationRule.INVALID_ENUM_VALUE,
    "literal_error": ValidationRule.INVALID_ENUM_VALUE,
    # gt is reserved for positive amounts (schemas/common.py)
    "greater_than": ValidationRule.INVALID_AMOUNT,
    "finite_number": ValidationRule.INVALID_AMOUNT,
    "decimal_max_places": ValidationRule.INVALID_AMOUNT,
    "greater_than_equal": ValidationRule.OUT_OF_RANGE,
    "less_than": ValidationRule.OUT_OF_RANGE,
    "less_than_equal": ValidationRule.OUT_OF_RANGE,
    "too_short": ValidationRule.OUT_OF_RANGE,
    "too_long": ValidationRule.OUT_OF_RANGE,
    "string_pattern_mismatch": ValidationRule.INVALID_FORMAT,
    "string_too_short": ValidationRule.INVALID_FORMAT,
    "string_too_long": ValidationRule.INVALID_FORMAT,
    "extra_forbidden": ValidationRule.UNKNOWN_FIELD,
}


def validate(
    schema: type[ModelT], raw: Any, strict: bool = False,
) -> ModelT:
    """Validate raw input against schema. Raises InputValidationError."""
    if not isinstance(raw, dict):
        raise InputValidationError([
            FieldViolation(
                "body", ValidationRule.INVALID_JSON,
                "request body must be a JSON object",
            ),
        ])

    violations: list[FieldViolation] = []
    if strict:
        violations.extend(_unknown_field_violations(schema, raw))

    try:
        model = schema.model_validate(raw)
    except PydanticValidationError as exc:
        violations.extend(violations_from_errors(exc.errors()))
        raise InputValidationError(violations)

    if violations:
        raise InputValidationError(violations)
    return model


def violations_from_errors(errors: list[dict]) -> list[FieldViolation]:
    """Translate pydantic error dicts into FieldViolations."""
    return [
        FieldViolation(
            field=_field_name(e.get("loc", ())),
            rule=rule_for_error_type(e.get("type", "")),
            message=e.get("msg", "invalid value"),
        )
        for e in errors
    ]


def rule_for_error_type(error_type: str) -> ValidationRule:
    # decimal_parsing, int_parsing, bool_type, ... are all type errors
    return _RULES_BY_ERROR_TYPE.get(error_type, ValidationRule.INVALID_TYPE)


def accepted_input_names(schema: type[BaseModel]) -> set[str]:
    """Every key the schema accepts: field names, aliases and alias choices."""
    names: set[str] = set()
    for name, info in schema.model_fields.items():
        names.add(name)
        if info.alias:
            names.add(info.alias)
        if isinstance(info.validation_alias, AliasChoices):
            names.update(
                c for c in info.validation_alias.choices if isinstance(c, str)
            )
        elif isinstance(info.validation_alias, str):
            names.add(info.validation_alias)
    return names


def _unknown_field_violations(
    schema: type[BaseModel], raw: dict,
) -> list[FieldViolation]:
    accepted = accepted_input_names(schema)
    return [
        FieldViolation(
            str(key), ValidationRule.UNKNOWN_FIELD,
            "field is not accepted by this route",
        )
        for key in raw
        if key not in accepted
    ]


def _field_name(loc: tuple) -> str:
    if not loc:
        return "body"
    return ".".join(str(part) for part in loc)
