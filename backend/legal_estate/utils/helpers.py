"""
Utility helper functions
"""
import math
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, Optional, Tuple


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the TIMESTAMP columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def page_meta(total: int, page: int, limit: int) -> Dict[str, int]:
    """Pagination block shared by every list endpoint"""
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def tally(rows: Iterable[Tuple[Any, Any]], lower: bool = False) -> Dict[str, Any]:
    """Turn ``(key, value)`` rows from a GROUP BY into a dict keyed by enum value."""
    result = {}
    for key, value in rows:
        key = enum_value(key)
        if key is None:
            key = "uncategorized"
        result[key.lower() if lower else key] = value
    return result


def days_between(start: Optional[date], end: Optional[date] = None) -> int:
    """Whole days between two dates, absolute, rounded up; 0 when start is unknown"""
    if start is None:
        return 0
    end = end or date.today()
    if isinstance(start, datetime):
        start = start.date()
    return math.ceil(abs((end - start).days))


def truncate_text(text: str, length: int = 100) -> str:
    """Truncate text to specified length"""
    if text is None or len(text) <= length:
        return text
    return text[:length] + "..."


def like_pattern(term: str) -> str:
    """Substring pattern for ILIKE, escaping the wildcard characters"""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def icontains(column, term: str):
    """Case-insensitive substring filter"""
    return column.ilike(like_pattern(term), escape="\\")
