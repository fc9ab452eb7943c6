import pytest
from leaderboard import build_leaderboard, dashboard_stats, eligible_users, group_by_user, signed
from structs import User


@pytest.fixture
def history(make_submission):
    return [
        # alice: easy + medium + hard, active the last three days
        make_submission("p1", uid="alice", days_ago=0),
        make_submission("lru-cache", uid="alice", days_ago=1),
        make_submission("p3", uid="alice", verdict="WA", days_ago=2),
        make_submission("p3", uid="alice", days_ago=2, hours_ago=1),
        make_submission("p1", uid="alice", verdict="WA", days_ago=9),
        # bob: one easy problem two weeks ago
        make_submission("two-sum", uid="bob", days_ago=11),
        # carol is blocked but would otherwise top the board
        make_submission("p3", uid="carol", days_ago=0),
        make_submission("p2", uid="carol", days_ago=0),
    ]


def test_signed():
    assert signed(3) == "+3"
    assert signed(0) == "0"
    assert signed(-2) == "-2"


def test_group_by_user_orders_newest_first(history):
    grouped = group_by_user(history)

    assert set(grouped) == {"alice", "bob", "carol"}
    times = [s.created_at for s in grouped["alice"]]
    assert times == sorted(times, reverse=True)


def test_blocked_and_nameless_users_are_not_eligible(users):
    assert [u.uid for u in eligible_users(users)] == ["alice", "bob", "erin"]


def test_leaderboard_ranks_by_score(users, history, problems, now):
    board = build_leaderboard(users, history, problems, now)

    assert [e.uid for e in board] == ["alice", "bob", "erin"]
    assert [e.rank for e in board] == [1, 2, 3]

    alice = board[0]
    # 170 difficulty + 60 accuracy + 30 streak + 45 improvement
    assert alice.score == 305
    assert alice.problems_solved == 3
    assert alice.stats.model_dump() == {"easy": 1, "medium": 1, "hard": 1}
    assert alice.improvement == "+3"

    bob = board[1]
    assert bob.score == 20 + 100
    assert bob.improvement == "-1"

    erin = board[2]
    assert erin.score == 0
    assert erin.improvement == "0"


def test_leaderboard_serializes_with_aliases(users, history, problems, now):
    entry = build_leaderboard(users, history, problems, now)[0].model_dump(by_alias=True)

    assert entry["fullName"] == "Alice Rao"
    assert entry["problemsSolved"] == 3
    assert entry["rank"] == 1
    assert "photoURL" in entry


def test_ties_keep_user_order(problems, now):
    users = [User(uid="z", full_name="Zed"), User(uid="a", full_name="Amy")]

    board = build_leaderboard(users, [], problems, now)

    assert [e.uid for e in board] == ["z", "a"]
    assert [e.rank for e in board] == [1, 2]


def test_dashboard_stats_for_leader(users, history, problems, now):
    stats = dashboard_stats("alice", users, history, problems, now)

    assert stats.problems_solved == 3
    assert stats.total_accepted == 3
    assert stats.total_submissions == 5
    assert stats.difficulty_breakdown == {"Easy": 1, "Medium": 1, "Hard": 1}
    assert stats.current_streak == 3
    assert stats.max_streak == 3
    assert stats.streak_change == "+1"
    assert stats.weekly_change == "+3"
    assert stats.rank_change == "+6"
    assert stats.global_rank == "#1"
    # 75% accuracy this week against 0% the week before
    assert stats.improvement_rate == 75


def test_dashboard_stats_for_idle_user(users, history, problems, now):
    stats = dashboard_stats("bob", users, history, problems, now).model_dump(by_alias=True)

    assert stats["currentStreak"] == 0
    assert stats["maxStreak"] == 1
    assert stats["streakChange"] == "0"
    assert stats["weeklyChange"] == "-1"
    assert stats["rankChange"] == "0"
    assert stats["improvementRate"] == -100
    assert stats["globalRank"] == "#2"


def test_unranked_user_gets_rank_after_last(users, history, problems, now):
    stats = dashboard_stats("carol", users, history, problems, now)

    assert stats.global_rank == "#4"
    assert stats.problems_solved == 2


def test_global_rank_uses_thousands_separator(problems, now):
    users = [User(uid=f"u{i}", full_name=f"User {i}") for i in range(1200)]

    stats = dashboard_stats("nobody", users, [], problems, now)

    assert stats.global_rank == "#1,201"
    assert stats.total_submissions == 0
