"""
Schema package for registration form definitions.
"""

from .registration_form import (  # noqa: F401
    ConditionalLogic,
    ConditionalOperator,
    ConditionalRule,
    CustomField,
    FieldType,
    FieldValidation,
    FormDefinition,
    FormHeader,
    FormLayout,
    FormSection,
    FormStatus,
    LogicAction,
    LogicType,
    TermsAndConditions,
)
