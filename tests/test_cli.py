import json
from datetime import datetime
import os
import pytest
import pytz
import check_user
import export_pdf
from check_user import format_report
from collect import JsonStore
from structs import ScoreReport, User


class MemoryStore:
    def __init__(self, users, submissions, problems):
        self._users = users
        self._submissions = submissions
        self._problems = problems

    def users(self):
        return self._users

    def find_user(self, name_pattern):
        return next((u for u in self._users if u.full_name and name_pattern.lower() in u.full_name.lower()), None)

    def submissions(self, uid=None):
        return [s for s in self._submissions if uid is None or s.uid == uid]

    def problems(self, identifiers=None):
        if identifiers is None:
            return self._problems
        wanted = set(identifiers)
        return [p for p in self._problems if p.id in wanted or p.slug in wanted]


@pytest.fixture
def store(users, problems, make_submission):
    subs = [
        make_submission("p1", uid="alice", days_ago=0),
        make_submission("lru-cache", uid="alice", days_ago=1),
        make_submission("p3", uid="alice", verdict="WA", days_ago=1),
        make_submission("two-sum", uid="bob", days_ago=3),
    ]
    return MemoryStore(users, subs, problems)


def test_format_report():
    user = User(uid="r", full_name="Rohan")
    report = ScoreReport(easy_count=1, accuracy=50, streak=2, diff_score=20, cons_score=20, total=90)

    assert format_report(user, report).splitlines() == [
        "User: Rohan",
        "Easy: 1, Med: 0, Hard: 0",
        "Acc: 50%, Streak: 2, Imp: 0",
        "Scores: Diff=20, Acc=50, Cons=20, Imp=0",
        "Total: 90",
    ]


def test_check_user_scores_found_user(store, now):
    user, report = check_user.check_user(store, "alice", now)

    assert user.uid == "alice"
    assert report.easy_count == 1
    assert report.medium_count == 1
    assert report.accuracy == 67


def test_check_user_unknown_name(store, now):
    assert check_user.check_user(store, "zoe", now) is None


def test_main_prints_text_report(store, capsys):
    assert check_user.main(["Alice"], store=store) == 0

    out = capsys.readouterr().out
    assert out.startswith("User: Alice Rao")
    assert "Easy: 1, Med: 1, Hard: 0" in out


def test_main_prints_json(store, capsys):
    assert check_user.main(["bob", "--json"], store=store) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["uid"] == "bob"
    assert payload["easyCount"] == 1
    assert payload["diffScore"] == 20


def test_main_not_found_exits_1(store, capsys):
    assert check_user.main(["zoe"], store=store) == 1
    assert "zoe not found" in capsys.readouterr().out


def test_main_usage(store, capsys):
    assert check_user.main([], store=store) == 1
    assert "Usage" in capsys.readouterr().out


def test_generate_pdf_report(store, now, tmp_path):
    board, students = export_pdf.collect_report_data(store.users(), store.submissions(), store.problems(), now)
    output = tmp_path / "report.pdf"

    export_pdf.generate_pdf_report(board, students, now, str(output))

    assert [s["entry"]["uid"] for s in students] == ["alice", "bob", "erin"]
    assert output.read_bytes().startswith(b"%PDF")


def test_activity_rows_cover_last_two_weeks(now):
    freq_days = {"2026-10-19": 2, "2026-10-10": 1, "2026-09-01": 4}

    rows = export_pdf.activity_rows(freq_days, now)

    assert rows[0] == ["Date", "Day of Week", "Submissions"]
    assert [r[0] for r in rows[1:]] == ["19 Oct 2026", "10 Oct 2026"]


def test_export_main_writes_dated_file(store, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert export_pdf.main(["19102026"], store=store) == 0
    assert os.path.exists(tmp_path / "readiness_report_19102026.pdf")


def test_export_main_rejects_extra_arguments(store, capsys):
    assert export_pdf.main(["01012026", "02012026"], store=store) == 1
    assert "Usage" in capsys.readouterr().out


def test_dated_report_ignores_later_submissions(users, problems, make_submission):
    as_of = pytz.utc.localize(datetime(2026, 10, 19, 23, 59, 59))
    subs = [
        make_submission("p1", uid="alice", days_ago=0),
        make_submission("lru-cache", uid="alice", days_ago=1),
        make_submission("p3", uid="alice", days_ago=2),
        make_submission("p2", uid="alice", verdict="WA", days_ago=-30),
    ]

    board, students = export_pdf.collect_report_data(users, subs, problems, as_of)

    alice = board[0]
    assert alice.uid == "alice"
    assert alice.streak == 3
    assert alice.accuracy == 100
    assert alice.score == 170 + 100 + 30 + 45
    assert "2026-11-18" not in students[0]["freq_days"]


def test_export_main_rejects_malformed_date(store, capsys):
    assert export_pdf.main(["2026-10-19"], store=store) == 1
    assert "Usage" in capsys.readouterr().out


def test_main_rejects_invalid_name_pattern(tmp_path, capsys):
    (tmp_path / "users.json").write_text('[{"uid": "c", "fullName": "C++ Fan"}]')

    assert check_user.main(["C++"], store=JsonStore(str(tmp_path))) == 1
    out = capsys.readouterr().out
    assert "Invalid name pattern" in out
    assert "regular expression" in out
