"""Error Hierarchy: typed, categorized exceptions for every mirror failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400/404/409) carry the offending field or identifier
    - Internal errors (500) expose a generic message; specifics live in context.debug_info
    - to_response() produces the upstream failure envelope {"success": false, "error": {...}}

Design Decisions:
    - Single hierarchy with ReflectMirrorError base, caught by one FastAPI handler
    - ErrorContext as dataclass so logging can read it without the error knowing the logger
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class ValidationRule(str, Enum):
    """Rule names reported in validation error details."""
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_ENUM_VALUE = "INVALID_ENUM_VALUE"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_TYPE = "INVALID_TYPE"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    UNKNOWN_FIELD = "UNKNOWN_FIELD"
    INVALID_JSON = "INVALID_JSON"


@dataclass(frozen=True)
class FieldViolation:
    """One failed rule on one input field."""
    field: str
    rule: ValidationRule
    message: str

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "rule": self.rule.value,
            "message": self.message,
        }


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    route: str | None = None
    integration_id: str | None = None
    debug_info: dict[str, Any] | None = None


class ReflectMirrorError(Exception):
    """Base exception for all mirror errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the upstream failure envelope."""
        return {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            },
        }


# ─── Client Errors (400 / 404 / 409) ────────────────────────────

class InputValidationError(ReflectMirrorError):
    """Request input failed its schema. Never reaches a handler."""
    def __init__(
        self, violations: list[FieldViolation], context: ErrorContext | None = None,
    ):
        if not violations:
            raise ValueError("InputValidationError requires at least one violation")
        first = violations[0]
        super().__init__(
            f"Invalid request data: {first.field}: {first.message}",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.violations = violations

    @property
    def field(self) -> str:
        return self.violations[0].field

    @property
    def rule(self) -> ValidationRule:
        return self.violations[0].rule

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["details"] = [v.to_dict() for v in self.violations]
        return body


class ResourceNotFoundError(ReflectMirrorError):
    """Requested stablecoin, integration or other resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class RouteNotFoundError(ReflectMirrorError):
    """No route table entry matches the request."""
    def __init__(self, method: str, path: str, context: ErrorContext | None = None):
        super().__init__(
            f"No route for {method} {path}",
            "ROUTE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


class BusinessRuleError(ReflectMirrorError):
    """Well-formed request rejected by a business rule (supply cap, slippage, ...)."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )


class ConcurrencyError(ReflectMirrorError):
    """Concurrent modification detected (expectedVersion mismatch)."""
    def __init__(
        self, integration_id: str, expected: int, actual: int,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.integration_id = integration_id
        super().__init__(
            f"Integration '{integration_id}' is at version {actual}, "
            f"expected {expected}",
            "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.expected = expected
        self.actual = actual


# ─── Internal / Configuration Errors ────────────────────────────

class ResponseContractError(ReflectMirrorError):
    """Handler output does not satisfy its response schema. Always a defect."""
    def __init__(self, route: str, errors: list[dict[str, Any]]):
        super().__init__(
            "An unexpected error occurred",
            "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL,
            ErrorContext(route=route, debug_info={"schema_errors": errors}),
            500,
        )


class RouteConfigurationError(ReflectMirrorError):
    """Route table is inconsistent (duplicate method/path). Raised at startup."""
    def __init__(self, message: str):
        super().__init__(
            message, "ROUTE_CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, None, 500,
        )
