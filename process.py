from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Set, Tuple
from structs import Submission, Problem, ScoreReport, ACCEPTED_VERDICTS
from utils import ONE_DAY, round_half_up, utc_day, utc_midnight, utc_now

DIFFICULTY_POINTS = {"Easy": 20, "Medium": 50, "Hard": 100}
STREAK_POINTS = 10
IMPROVEMENT_POINTS = 15
WEEK = timedelta(days=7)

def is_accepted(submission: Submission) -> bool:
    return submission.verdict in ACCEPTED_VERDICTS

def build_difficulty_index(problems: Iterable[Problem]) -> Dict[str, str]:
    """Map both the id and the slug of every problem to its difficulty."""
    index = dict()
    for problem in problems:
        index[problem.id] = problem.difficulty
        index[problem.slug] = problem.difficulty
    return index

def solved_identifiers(submissions: Iterable[Submission]) -> Set[str]:
    return {s.problem_identifier for s in submissions if is_accepted(s)}

def classify_solved(solved: Iterable[str], index: Dict[str, str]) -> Tuple[int, int, int]:
    # identifiers missing from the index land in no bucket
    easy = medium = hard = 0
    for identifier in solved:
        difficulty = index.get(identifier)
        if difficulty == "Easy":
            easy += 1
        elif difficulty == "Medium":
            medium += 1
        elif difficulty == "Hard":
            hard += 1
    return easy, medium, hard

def difficulty_score(easy: int, medium: int, hard: int) -> int:
    return (easy * DIFFICULTY_POINTS["Easy"]
            + medium * DIFFICULTY_POINTS["Medium"]
            + hard * DIFFICULTY_POINTS["Hard"])

def compute_accuracy(submissions: List[Submission]) -> int:
    if not submissions:
        return 0
    accepted = sum(1 for s in submissions if is_accepted(s))
    return round_half_up(accepted / len(submissions) * 100)

def active_days(submissions: Iterable[Submission]) -> List[date]:
    """Distinct UTC calendar days with at least one submission, newest first."""
    return sorted({utc_day(s.created_at) for s in submissions}, reverse=True)

def current_streak(days: List[date], today: date) -> int:
    if not days or days[0] not in (today, today - ONE_DAY):
        return 0
    streak = 1
    last = days[0]
    for day in days[1:]:
        if day != last - ONE_DAY:
            break
        streak += 1
        last = day
    return streak

def max_streak(days: List[date]) -> int:
    if not days:
        return 0
    best = run = 1
    for previous, day in zip(days, days[1:]):
        run = run + 1 if day == previous - ONE_DAY else 1
        best = max(best, run)
    return best

def solved_between(submissions: Iterable[Submission], start: datetime,
                   end: Optional[datetime] = None) -> int:
    """Distinct accepted problems with start <= createdAt (< end when given)."""
    solved = set()
    for s in submissions:
        if not is_accepted(s) or s.created_at < start:
            continue
        if end is not None and s.created_at >= end:
            continue
        solved.add(s.problem_identifier)
    return len(solved)

def compute_improvement(submissions: List[Submission], today_start: datetime) -> int:
    week_ago = today_start - WEEK
    two_weeks_ago = today_start - 2 * WEEK
    recent = solved_between(submissions, week_ago)
    previous = solved_between(submissions, two_weeks_ago, week_ago)
    return recent - previous

def score_with_index(submissions: List[Submission], index: Dict[str, str],
                     now: Optional[datetime] = None) -> ScoreReport:
    if not submissions:
        return ScoreReport()
    now = now or utc_now()
    today_start = utc_midnight(now)
    ordered = sorted(submissions, key=lambda s: s.created_at, reverse=True)

    solved = solved_identifiers(ordered)
    easy, medium, hard = classify_solved(solved, index)
    diff_score = difficulty_score(easy, medium, hard)
    accuracy = compute_accuracy(ordered)
    streak = current_streak(active_days(ordered), today_start.date())
    improvement = compute_improvement(ordered, today_start)
    cons_score = streak * STREAK_POINTS
    imp_score = max(0, improvement * IMPROVEMENT_POINTS)

    return ScoreReport(
        easy_count=easy,
        medium_count=medium,
        hard_count=hard,
        solved_count=len(solved),
        accuracy=accuracy,
        streak=streak,
        improvement=improvement,
        diff_score=diff_score,
        cons_score=cons_score,
        imp_score=imp_score,
        total=diff_score + accuracy + cons_score + imp_score,
    )

def score_submissions(submissions: List[Submission], problems: Iterable[Problem],
                      now: Optional[datetime] = None) -> ScoreReport:
    return score_with_index(submissions, build_difficulty_index(problems), now)
