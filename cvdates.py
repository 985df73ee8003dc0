"""
Loose CV date parsing.

Experience entries carry free-text dates such as ``2021/03``, ``2021.3``,
``2021年3月``, ``Mar 2021`` or ``21/03``. Parsing is best-effort: anything
that cannot be read returns ``None`` and the caller drops the fragment.

A three- or four-digit token is always the year. Two short numbers are read
as year/month or month/year depending on which one can be a month
(``25/03`` and ``03/25`` are both March 2025); when both can (``03/05``) or
when a lone short number stands alone (``"25"``) the value is rejected.
"""

import re
from datetime import date
from typing import NamedTuple, Optional

MONTH_MAP = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

PRESENT = "Present"
_PRESENT_RE = re.compile(r"^present$", re.IGNORECASE)


class DateParts(NamedTuple):
    year: int
    month: Optional[int]


def is_present(value: Optional[str]) -> bool:
    return bool(value) and bool(_PRESENT_RE.match(value.strip()))


def expand_year(value: int) -> int:
    """Two-digit years: ``<50`` is 20xx, ``>=50`` is 19xx."""
    if 0 <= value < 100:
        return 2000 + value if value < 50 else 1900 + value
    return value


def _tokens(raw: str):
    cleaned = (
        raw.replace("年", "/")
        .replace("月", "")
        .replace(".", "/")
        .replace("-", "/")
    )
    return [token for token in re.split(r"[/\s,]+", cleaned) if token]


def parse_date_parts(raw: Optional[str]) -> Optional[DateParts]:
    if not raw or not raw.strip():
        return None
    tokens = _tokens(raw.strip())

    month = None
    numbers = []
    for token in tokens:
        lower = token.lower()
        if lower in MONTH_MAP:
            if month is None:
                month = MONTH_MAP[lower]
        elif token.isdigit():
            numbers.append(token)

    if not numbers:
        return None

    long_years = [token for token in numbers if len(token) >= 3]
    if long_years:
        year = expand_year(int(long_years[0]))
        if month is None:
            rest = list(numbers)
            rest.remove(long_years[0])
            month = next((int(token) for token in rest if 1 <= int(token) <= 12), None)
        return DateParts(year, month)

    if month is not None:
        # "Mar 21": the number is the year
        return DateParts(expand_year(int(numbers[0])), month)
    if len(numbers) < 2:
        return None

    first, second = int(numbers[0]), int(numbers[1])
    first_is_month = 1 <= first <= 12
    second_is_month = 1 <= second <= 12
    if first_is_month and second_is_month:
        # "03/05" reads both ways
        return None
    if first_is_month:
        return DateParts(expand_year(second), first)
    if second_is_month:
        return DateParts(expand_year(first), second)
    return DateParts(expand_year(first), None)


def format_date(value: Optional[str]) -> str:
    trimmed = (value or "").strip()
    if not trimmed:
        return ""
    if is_present(trimmed):
        return PRESENT
    parsed = parse_date_parts(trimmed)
    if not parsed:
        return trimmed
    if parsed.month:
        return f"{parsed.year}/{parsed.month:02d}"
    return f"{parsed.year}"


def format_range(begin: Optional[str], end: Optional[str]) -> str:
    begin_text = format_date(begin)
    end_text = format_date(end)

    if begin_text and end_text and end_text != PRESENT:
        if begin_text == end_text:
            return begin_text
        return f"{begin_text} – {end_text}"
    if begin_text:
        return f"{begin_text} – {end_text or PRESENT}"
    return end_text


def compute_duration(begin: Optional[str], end: Optional[str], today: Optional[date] = None) -> Optional[str]:
    """Return ``"03m"`` or ``"1y00m"``; ``None`` if unparseable or negative.

    An empty, unparseable or ``present`` end counts as ongoing.
    """
    start = parse_date_parts(begin)
    if not start:
        return None

    end_parts = None if is_present(end) else parse_date_parts(end)
    if end_parts:
        end_year, end_month = end_parts.year, end_parts.month or 12
    else:
        today = today or date.today()
        end_year, end_month = today.year, today.month

    diff = (end_year * 12 + end_month - 1) - (start.year * 12 + (start.month or 1) - 1)
    if diff < 0:
        return None

    years, months = divmod(diff, 12)
    if years == 0:
        return f"{months:02d}m"
    return f"{years}y{months:02d}m"
