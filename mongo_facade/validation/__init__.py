from mongo_facade.validation.validators import (
    ValidationResult,
    require_valid,
    validate_limit,
    validate_namespace,
    validate_pagination,
)

__all__ = [
    "ValidationResult",
    "require_valid",
    "validate_limit",
    "validate_namespace",
    "validate_pagination",
]
