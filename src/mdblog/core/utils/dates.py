"""Frontmatter date parsing and display formatting"""

from datetime import date, datetime, timezone


# tried in order after ISO 8601
DATE_FORMATS = [
    '%Y/%m/%d',
    '%Y/%m/%d %H:%M',
    '%B %d, %Y',
    '%b %d, %Y',
    '%d %B %Y',
    '%d %b %Y',
    '%a, %d %b %Y %H:%M:%S %z',
]


def _parse_text(text: str) -> datetime:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(
        f"unrecognized date {text!r}; use ISO 8601 (2024-01-31) or one of: "
        + ", ".join(DATE_FORMATS)
    )


def parse_date(value) -> datetime:
    """Parse a frontmatter date into a naive UTC datetime.

    ISO 8601 is the canonical form. A few long-hand forms ('January 31, 2024',
    '2024/01/31', RFC 822) are accepted too. Aware values are converted to UTC
    so that every date in a collection compares.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        dt = _parse_text(str(value).strip())
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def ordinal(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return f"{n}th"
    suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(n % 10, 'th')
    return f"{n}{suffix}"


def human_date(dt: datetime) -> str:
    """Long display form, e.g. 'January 1st 2024'."""
    return f"{dt:%B} {ordinal(dt.day)} {dt.year}"


def iso_date(dt: datetime) -> str:
    return dt.isoformat()
