"""
Request parameter parsing shared by the HTTP, MCP and CLI entry points.
"""
from datetime import date, datetime
from typing import Optional

from ..core.domain import ArchiveSource, CountRequest
from ..core.errors import InvalidInputError

# dd.MM.yyyy as accepted by the upload endpoint, plus ISO dates
DATE_FORMATS = ("%d.%m.%Y", "%Y-%m-%d")


def parse_start_date(value: Optional[str]) -> Optional[date]:
    """Parse 'dd.mm.yyyy' or 'yyyy-mm-dd'; empty means no start date"""
    if value is None or not value.strip():
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).date()
        except ValueError:
            continue
    raise InvalidInputError(f"Invalid date '{value}': expected dd.mm.yyyy or yyyy-mm-dd")


def parse_days(value: Optional[str | int]) -> Optional[int]:
    """Parse the window length; empty means no window"""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        days = int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Invalid number of days '{value}': expected an integer") from None
    if days < 0:
        raise InvalidInputError(f"Number of days must not be negative: {days}")
    return days


def build_request(
    archive: Optional[ArchiveSource],
    text: Optional[str] = None,
    date_value: Optional[str] = None,
    days: Optional[str | int] = None
) -> CountRequest:
    """Build a CountRequest from raw transport values"""
    return CountRequest(
        archive=archive,
        search_text=text,
        start_date=parse_start_date(date_value),
        days=parse_days(days)
    )
