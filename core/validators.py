"""
Core Validators

Shared validation functions for all modules.
"""

from typing import Optional


def validate_required_field(
    value: Optional[str],
    field_name: str,
    module_name: str = "Module"
) -> None:
    """
    Validate that a required field is not empty.

    Args:
        value: Value to validate
        field_name: Name of the field for error messages
        module_name: Name of the module for error messages

    Raises:
        ValueError: If value is None or empty
    """
    if not value or not value.strip():
        raise ValueError(
            f"{module_name}: {field_name} is required and cannot be empty."
        )
