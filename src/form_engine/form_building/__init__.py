"""
Field catalog, factories and builder operations for registration forms.
"""

from .catalog import (  # noqa: F401
    CONDITIONAL_OPERATORS,
    FIELD_TYPE_CONFIGS,
    FieldTypeConfig,
    get_field_type_config,
    operator_needs_value,
)
from .factories import create_default_field, create_default_section  # noqa: F401
