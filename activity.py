from collections import Counter
from datetime import date, datetime
import calendar
from typing import Iterable, List, Optional
from process import is_accepted
from structs import (
    AcceptedSubmission,
    ContributionCalendar,
    ContributionMonth,
    Problem,
    RecentSubmission,
    Submission,
)
from utils import one_year_before, to_utc, utc_day, utc_now

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

def contribution_level(count: int) -> int:
    if count == 0:
        return 0
    if count > 10:
        return 4
    if count > 7:
        return 3
    if count > 4:
        return 2
    return 1

def _count_on(freq_days: Counter, year: int, month: int, day: int) -> int:
    try:
        return freq_days[date(year, month, day)]
    except ValueError:
        # Feb 29 has no counterpart in a non-leap year
        return 0

def contribution_calendar(submissions: Iterable[Submission],
                          now: Optional[datetime] = None) -> ContributionCalendar:
    """Activity heatmap for the current UTC year.

    Only the trailing year of submissions is counted. Each cell folds in the
    same day of the previous year so the grid shows a trailing view early in
    the year.
    """
    now = to_utc(now or utc_now())
    since = one_year_before(now)
    recent = [s for s in submissions if s.created_at >= since]
    freq_days = Counter(utc_day(s.created_at) for s in recent)

    year = now.year
    months = []
    for month_index, name in enumerate(MONTHS, start=1):
        days_in_month = calendar.monthrange(year, month_index)[1]
        days = []
        for day in range(1, days_in_month + 1):
            total = _count_on(freq_days, year, month_index, day) + _count_on(freq_days, year - 1, month_index, day)
            days.append(contribution_level(total))
        months.append(ContributionMonth(name=name, days=days))

    return ContributionCalendar(contribution_data=months, total_submissions=len(recent))

def time_ago(created_at: datetime, now: Optional[datetime] = None) -> str:
    now = to_utc(now or utc_now())
    hours_ago = int((now - created_at).total_seconds() // 3600)
    days_ago = hours_ago // 24
    if days_ago > 0:
        return f"{days_ago} day{'s' if days_ago > 1 else ''} ago"
    if hours_ago > 0:
        return f"{hours_ago} hour{'s' if hours_ago > 1 else ''} ago"
    return "Just now"

def _latest(submissions: Iterable[Submission], limit: int) -> List[Submission]:
    return sorted(submissions, key=lambda s: s.created_at, reverse=True)[:limit]

def recent_submissions(submissions: Iterable[Submission], problems: Iterable[Problem],
                       now: Optional[datetime] = None, limit: int = 40) -> List[RecentSubmission]:
    # titles are looked up by problem id only
    titles = {p.id: p.title for p in problems}
    result = []
    for s in _latest(submissions, limit):
        result.append(RecentSubmission(
            problem=titles.get(s.problem_identifier) or s.problem_identifier,
            status=s.verdict,
            time=time_ago(s.created_at, now),
            language=s.language,
        ))
    return result

def accepted_submissions(submissions: Iterable[Submission], problems: Iterable[Problem],
                         now: Optional[datetime] = None, limit: int = 40) -> List[AcceptedSubmission]:
    by_id = {p.id: p for p in problems}
    result = []
    for s in _latest((s for s in submissions if is_accepted(s)), limit):
        problem = by_id.get(s.problem_identifier)
        result.append(AcceptedSubmission(
            problem=(problem.title if problem else None) or s.problem_identifier,
            difficulty=problem.difficulty if problem else "Medium",
            time=time_ago(s.created_at, now),
        ))
    return result
