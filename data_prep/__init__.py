"""
Data preparation — parsing raw form parameters, validation.
"""

from .loader import parse_parameters, select_fields, to_number
from .validators import ValidationResult, validate_parameters

__all__ = [
    "parse_parameters",
    "select_fields",
    "to_number",
    "ValidationResult",
    "validate_parameters",
]
