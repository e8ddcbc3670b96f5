"""
modules/validation package: data quality guards for venues and programs.
"""
from modules.validation.ingestion_validator import (
    ValidationResult,
    filter_valid,
    validate_program_structure,
    validate_selection,
    validate_venue,
)

__all__ = [
    "ValidationResult",
    "validate_venue",
    "validate_program_structure",
    "validate_selection",
    "filter_valid",
]
