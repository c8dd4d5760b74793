"""
Custom validators
"""
import re
from datetime import date
from typing import Iterable, Optional

from legal_estate.utils.exceptions import BadRequestError

CASE_NUMBER_PATTERN = re.compile(r"^[A-Z]{2,10}-\d{4}-\d{3,}$")


def validate_case_number(case_number: str) -> bool:
    """
    Validate case number format
    Examples: LE-2024-001, LE-2015-1042
    """
    return bool(CASE_NUMBER_PATTERN.match(case_number))


def validate_upload(
    filename: Optional[str],
    content_type: Optional[str],
    size: int,
    allowed_types: Iterable[str],
    max_size: int,
) -> None:
    """
    Reject an upload before anything is written to storage.
    """
    if not filename:
        raise BadRequestError("No file provided")
    if content_type not in set(allowed_types):
        raise BadRequestError(f"File type {content_type} is not allowed")
    if size == 0:
        raise BadRequestError("Uploaded file is empty")
    if size > max_size:
        raise BadRequestError(f"File exceeds the maximum size of {max_size // (1024 * 1024)} MB")


def validate_date_range(start: Optional[date], end: Optional[date], label: str = "date") -> None:
    if start and end and end < start:
        raise BadRequestError(f"Invalid {label} range: end is before start")
