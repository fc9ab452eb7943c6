from datetime import datetime, timedelta
import pytest
import pytz
from structs import Problem, Submission, User

NOW = pytz.utc.localize(datetime(2026, 10, 19, 12, 0, 0))


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_submission():
    def _make(identifier, verdict="AC", days_ago=0, hours_ago=0, uid="u1", language="python"):
        return Submission(
            uid=uid,
            verdict=verdict,
            problem_identifier=identifier,
            created_at=NOW - timedelta(days=days_ago, hours=hours_ago),
            language=language,
        )
    return _make


@pytest.fixture
def problems():
    return [
        Problem(id="p1", slug="two-sum", difficulty="Easy", title="Two Sum"),
        Problem(id="p2", slug="lru-cache", difficulty="Medium", title="LRU Cache"),
        Problem(id="p3", slug="median-of-streams", difficulty="Hard", title="Median of Streams"),
    ]


@pytest.fixture
def users():
    return [
        User(uid="alice", full_name="Alice Rao"),
        User(uid="bob", full_name="Bob Singh"),
        User(uid="carol", full_name="Carol Blocked", is_blocked=True),
        User(uid="dave", full_name=""),
        User(uid="erin", full_name="Erin Idle"),
    ]
