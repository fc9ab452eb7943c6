"""Leaderboard ranking and the per-user dashboard summary.

Every user is scored with the same formula as ``process.score_with_index``;
the difficulty index is built once per call and shared across users.
"""
import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from process import (
    WEEK,
    active_days,
    build_difficulty_index,
    current_streak,
    is_accepted,
    max_streak,
    score_with_index,
)
from structs import (
    DashboardStats,
    DifficultyStats,
    LeaderboardEntry,
    Problem,
    Submission,
    User,
)
from utils import round_half_up, utc_midnight, utc_now

logger = logging.getLogger(__name__)


def signed(value: int) -> str:
    return f"+{value}" if value > 0 else f"{value}"


def group_by_user(submissions: Iterable[Submission]) -> Dict[str, List[Submission]]:
    grouped = defaultdict(list)
    for submission in sorted(submissions, key=lambda s: s.created_at, reverse=True):
        grouped[submission.uid].append(submission)
    return dict(grouped)


def eligible_users(users: Iterable[User]) -> List[User]:
    """Users shown on the leaderboard: not blocked and with a name."""
    return [u for u in users if not u.is_blocked and u.full_name]


def build_leaderboard(
    users: Iterable[User],
    submissions: Iterable[Submission],
    problems: Iterable[Problem],
    now: Optional[datetime] = None,
) -> List[LeaderboardEntry]:
    now = now or utc_now()
    index = build_difficulty_index(problems)
    by_user = group_by_user(submissions)

    entries = []
    for user in eligible_users(users):
        report = score_with_index(by_user.get(user.uid, []), index, now)
        entries.append(LeaderboardEntry(
            uid=user.uid,
            full_name=user.full_name or "Anonymous",
            photo_url=user.photo_url,
            problems_solved=report.solved_count,
            accuracy=report.accuracy,
            streak=report.streak,
            improvement=signed(report.improvement),
            score=report.total,
            stats=DifficultyStats(
                easy=report.easy_count,
                medium=report.medium_count,
                hard=report.hard_count,
            ),
        ))

    # sorted() is stable, ties keep user order
    entries = sorted(entries, key=lambda e: e.score, reverse=True)
    for position, entry in enumerate(entries, start=1):
        entry.rank = position
    logger.debug("Ranked %d users", len(entries))
    return entries


def window_accuracy(submissions: List[Submission]) -> float:
    if not submissions:
        return 0
    accepted = sum(1 for s in submissions if is_accepted(s))
    return accepted / len(submissions) * 100


def dashboard_stats(
    uid: str,
    users: Iterable[User],
    submissions: Iterable[Submission],
    problems: Iterable[Problem],
    now: Optional[datetime] = None,
) -> DashboardStats:
    now = now or utc_now()
    problems = list(problems)
    submissions = list(submissions)
    mine = group_by_user(submissions).get(uid, [])
    logger.info("Found %d submissions for user %s", len(mine), uid)

    report = score_with_index(mine, build_difficulty_index(problems), now)
    accepted = [s for s in mine if is_accepted(s)]

    today_start = utc_midnight(now)
    days = active_days(mine)
    streak = current_streak(days, today_start.date())

    week_ago = today_start - WEEK
    two_weeks_ago = today_start - 2 * WEEK
    recent = [s for s in mine if s.created_at >= week_ago]
    previous = [s for s in mine if two_weeks_ago <= s.created_at < week_ago]
    improvement_rate = round_half_up(window_accuracy(recent) - window_accuracy(previous))

    board = build_leaderboard(users, submissions, problems, now)
    rank = next((e.rank for e in board if e.uid == uid), len(board) + 1)

    weekly_change = report.improvement
    return DashboardStats(
        problems_solved=report.solved_count,
        total_accepted=len(accepted),
        difficulty_breakdown={
            "Easy": report.easy_count,
            "Medium": report.medium_count,
            "Hard": report.hard_count,
        },
        weekly_change=signed(weekly_change),
        current_streak=streak,
        max_streak=max_streak(days),
        improvement_rate=improvement_rate,
        streak_change="+1" if streak > 0 else "0",
        global_rank=f"#{rank:,}",
        rank_change=f"+{abs(weekly_change * 2)}" if weekly_change > 0 else "0",
        total_submissions=len(mine),
    )
