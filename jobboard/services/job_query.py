"""
Job query pipeline.

Pure functions that turn a snapshot of job records into the views the job
board displays: filtered and sorted listings, search suggestions, display
hints and market analytics.

Records may be mappings (decoded JSON) or objects exposing the same
attributes (ORM rows). Salaries may arrive as numbers or numeric strings and
posted dates as ``date`` objects or ISO 8601 strings. Malformed values never
raise: an unparsable salary is simply not a valid salary, an unparsable date
never matches a day. Nothing in this module performs I/O or mutates its input.

Anything that depends on the current day takes an explicit ``today`` so one
request uses one reference date throughout.
"""

import math
import unicodedata
from collections import Counter
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from jobboard.core.logging_config import get_logger
from jobboard.schemas.job import (
    JobAnalytics,
    JobSearchCriteria,
    LocationAverage,
    SalaryBand,
    SortKey,
)

logger = get_logger(__name__)

TREND_WINDOW_DAYS = 30
RECENT_WINDOW_DAYS = 7
SUGGESTION_LIMIT = 5
SEARCH_FIELDS = ("title", "employer", "description")

# (label, inclusive lower bound, exclusive upper bound) in hourly rate units
SALARY_BUCKETS = [
    ("Under $15", None, 15.0),
    ("$15-$18", 15.0, 18.0),
    ("$18-$20", 18.0, 20.0),
    ("$20+", 20.0, None),
]

HIGH_SALARY_THRESHOLD = 20.0
MEDIUM_SALARY_THRESHOLD = 15.0

CENTS = Decimal("0.01")


def get_field(job: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping or an attribute-style record."""
    if isinstance(job, Mapping):
        return job.get(name, default)
    return getattr(job, name, default)


def _text(job: Any, name: str) -> str:
    value = get_field(job, name)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def parse_number(value: Any) -> Optional[float]:
    """
    Coerce a number or numeric string to a finite float.

    Returns None for None, booleans, blank strings, unparsable strings,
    NaN and infinities.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def valid_salary(job: Any) -> Optional[float]:
    """The job's salary if it is a finite, non-negative number, else None."""
    salary = parse_number(get_field(job, "salary"))
    if salary is None or salary < 0:
        return None
    return salary


def parse_date(value: Any) -> Optional[date]:
    """Calendar date from a date, datetime or ISO 8601 string (time part ignored)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def round_money(value: float) -> float:
    """Round half-up to cents. Non-finite values are returned unchanged."""
    if not math.isfinite(value):
        return value
    amount = Decimal(str(value))
    with localcontext() as ctx:
        # Enough digits for every integer place plus the cents
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return float(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


def _mean(values: Sequence[float]) -> float:
    total = sum(values)
    if math.isfinite(total):
        return total / len(values)
    # The sum overflowed; scale each term first
    return sum(value / len(values) for value in values)


def matches_search(job: Any, search: str) -> bool:
    """Case-insensitive substring match on title, employer or description."""
    needle = search.casefold()
    return any(needle in _text(job, field).casefold() for field in SEARCH_FIELDS)


def filter_jobs(jobs: Iterable[Any], criteria: JobSearchCriteria) -> List[Any]:
    """
    Keep the jobs matching every supplied criterion.

    An empty search or location means no filter on that field. A salary bound
    that does not parse as a number is ignored; when a bound is active, jobs
    without a numeric salary do not match.
    """
    search = criteria.search or ""
    location = criteria.location or ""
    minimum = parse_number(criteria.salary_min)
    maximum = parse_number(criteria.salary_max)

    def keep(job: Any) -> bool:
        if search and not matches_search(job, search):
            return False
        if location and get_field(job, "location") != location:
            return False
        if minimum is not None or maximum is not None:
            salary = parse_number(get_field(job, "salary"))
            if salary is None:
                return False
            if minimum is not None and salary < minimum:
                return False
            if maximum is not None and salary > maximum:
                return False
        return True

    return [job for job in jobs if keep(job)]


def _collation_key(title: str) -> tuple:
    # Accent- and case-insensitive primary order, exact text as tie-break
    stripped = "".join(
        c for c in unicodedata.normalize("NFKD", title) if not unicodedata.combining(c)
    )
    return (stripped.casefold(), title)


def sort_jobs(jobs: Iterable[Any], sort_key: SortKey = SortKey.DATE) -> List[Any]:
    """
    Return the jobs in the requested order.

    Sorting is stable: jobs with equal keys keep their input order. Jobs whose
    date or salary cannot be parsed are placed after all the others.
    """
    if sort_key == SortKey.SALARY_HIGH:
        def salary_high(job):
            salary = parse_number(get_field(job, "salary"))
            return (salary is not None, salary or 0.0)
        return sorted(jobs, key=salary_high, reverse=True)

    if sort_key == SortKey.SALARY_LOW:
        def salary_low(job):
            salary = parse_number(get_field(job, "salary"))
            return (salary is None, salary or 0.0)
        return sorted(jobs, key=salary_low)

    if sort_key == SortKey.TITLE:
        return sorted(jobs, key=lambda job: _collation_key(_text(job, "title")))

    def newest(job):
        posted = parse_date(get_field(job, "posted_date"))
        return (posted is not None, posted or date.min)
    return sorted(jobs, key=newest, reverse=True)


def filter_and_sort(jobs: Iterable[Any], criteria: JobSearchCriteria) -> List[Any]:
    """Apply the search criteria, then order the matches by criteria.sort_by."""
    return sort_jobs(filter_jobs(jobs, criteria), criteria.sort_key)


def search_suggestions(jobs: Iterable[Any], term: str, limit: int = SUGGESTION_LIMIT) -> List[Any]:
    """First ``limit`` jobs whose title or employer contains ``term``."""
    if not term:
        return []
    needle = term.casefold()
    matches = [
        job for job in jobs
        if needle in _text(job, "title").casefold() or needle in _text(job, "employer").casefold()
    ]
    return matches[:limit]


def distinct_locations(jobs: Iterable[Any]) -> List[str]:
    """Non-empty locations in order of first appearance."""
    return list(dict.fromkeys(loc for loc in (_text(job, "location") for job in jobs) if loc))


def salary_band(salary: Any) -> SalaryBand:
    """Pay level of an hourly rate; unparsable salaries count as low."""
    value = parse_number(salary)
    if value is None:
        return SalaryBand.LOW
    if value >= HIGH_SALARY_THRESHOLD:
        return SalaryBand.HIGH
    if value >= MEDIUM_SALARY_THRESHOLD:
        return SalaryBand.MEDIUM
    return SalaryBand.LOW


def posted_ago(posted_date: Any, today: date) -> str:
    """Human-friendly age of a posting relative to ``today``."""
    posted = parse_date(posted_date)
    if posted is None:
        return "No date"
    days = (today - posted).days
    if days < 0:
        return posted.isoformat()
    if days == 0:
        return "today"
    if days == 1:
        return "1 day ago"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        weeks = math.ceil(days / 7)
        return "1 week ago" if weeks == 1 else f"{weeks} weeks ago"
    return posted.isoformat()


def salary_bucket(salary: float) -> str:
    """Label of the distribution bucket containing ``salary``."""
    for label, lower, upper in SALARY_BUCKETS:
        if (lower is None or salary >= lower) and (upper is None or salary < upper):
            return label
    # Unreachable for finite input; buckets cover the whole number line
    raise ValueError(f"No salary bucket for {salary}")


def trend_window(today: date, days: int = TREND_WINDOW_DAYS) -> List[date]:
    """The ``days`` consecutive dates ending with ``today``, oldest first."""
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def compute_analytics(jobs: Iterable[Any], today: date) -> JobAnalytics:
    """
    Aggregate a job collection for the analytics dashboard.

    Args:
        jobs: Snapshot of job records
        today: Reference date for the posting trend and recent-job count

    Returns:
        JobAnalytics view; every field degrades to zero/empty for no jobs
    """
    jobs = list(jobs)
    salaries: List[float] = []
    location_counts: Dict[str, int] = {}
    location_salaries: Dict[str, List[float]] = {}
    posted_counts: Counter = Counter()
    recent_start = today - timedelta(days=RECENT_WINDOW_DAYS - 1)
    recent_jobs = 0

    for job in jobs:
        location = _text(job, "location")
        location_counts[location] = location_counts.get(location, 0) + 1

        salary = valid_salary(job)
        if salary is not None:
            salaries.append(salary)
            location_salaries.setdefault(location, []).append(salary)

        posted = parse_date(get_field(job, "posted_date"))
        if posted is not None:
            posted_counts[posted] += 1
            if recent_start <= posted <= today:
                recent_jobs += 1

    distribution = {label: 0 for label, _, _ in SALARY_BUCKETS}
    for salary in salaries:
        distribution[salary_bucket(salary)] += 1

    by_location = [
        LocationAverage(location=location, average=round_money(_mean(location_salaries[location])))
        for location in location_counts
        if location in location_salaries
    ]
    by_location.sort(key=lambda item: item.average, reverse=True)

    dates = trend_window(today)

    logger.debug(f"Aggregated {len(jobs)} jobs ({len(salaries)} with a valid salary)")

    return JobAnalytics(
        reference_date=today,
        total_jobs=len(jobs),
        average_salary=round_money(_mean(salaries)) if salaries else 0.0,
        salary_distribution=distribution,
        job_count_by_location=location_counts,
        average_salary_by_location=by_location,
        postings_by_day=[posted_counts.get(day, 0) for day in dates],
        trend_dates=dates,
        location_count=len(location_counts),
        recent_jobs=recent_jobs,
    )
