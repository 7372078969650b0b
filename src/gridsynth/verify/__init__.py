from .output_validator import (
    OutputValidator,
    compute_diff,
    format_diff_report,
    validate,
    validate_text,
)

__all__ = [
    "OutputValidator",
    "compute_diff",
    "format_diff_report",
    "validate",
    "validate_text",
]
