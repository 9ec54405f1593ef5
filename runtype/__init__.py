"""
    Runtime validation of data against declarative schemes.
"""

__version__ = "1.0.0"

from .scheme import (
    Number,
    String,
    Boolean,
    Function,
    Object,
    scheme_aliases,
    scheme_kind,
)
from .inspector import SchemeInspector
from .validation import (
    validate,
    is_valid,
    validated_iter,
    can_validate,
    inspect_scheme,
)
from .validation_failure import (
    ValidationError,
    UnsupportedSchemeError,
    ValidationFailure,
    get_validation_failure,
    latest_validation_failure,
)
from .descriptor import Field
from .model import Model

# re-export all markers, classes and functions.
__all__ = [
    "Number",
    "String",
    "Boolean",
    "Function",
    "Object",
    "scheme_aliases",
    "scheme_kind",
    "validate",
    "is_valid",
    "validated_iter",
    "can_validate",
    "inspect_scheme",
    "SchemeInspector",
    "ValidationError",
    "UnsupportedSchemeError",
    "ValidationFailure",
    "get_validation_failure",
    "latest_validation_failure",
    "Field",
    "Model",
]
