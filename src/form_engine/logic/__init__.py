"""
Conditional visibility and validation rules for registration form fields.
"""

from .conditional import evaluate_conditional_logic, visible_fields  # noqa: F401
from .validation_rules import (  # noqa: F401
    CompiledRule,
    FieldError,
    RuleSet,
    ValidationResult,
    build_validation_rules,
    validate_fields,
    validate_value,
)
