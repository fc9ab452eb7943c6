import json
import logging
import re
import sys
from datetime import datetime
from typing import List, Optional

from pymongo.errors import OperationFailure

import config
from collect import open_store
from process import score_submissions, solved_identifiers
from structs import ScoreReport, User

USAGE = "Usage: python check_user.py <name> [--json]\n<name> is a case-insensitive regular expression matched against full names"


def format_report(user: User, report: ScoreReport) -> str:
    return "\n".join([
        f"User: {user.full_name}",
        f"Easy: {report.easy_count}, Med: {report.medium_count}, Hard: {report.hard_count}",
        f"Acc: {report.accuracy}%, Streak: {report.streak}, Imp: {report.improvement}",
        f"Scores: Diff={report.diff_score}, Acc={report.accuracy}, Cons={report.cons_score}, Imp={report.imp_score}",
        f"Total: {report.total}",
    ])


def check_user(store, name: str, now: Optional[datetime] = None) -> Optional[tuple]:
    user = store.find_user(name)
    if user is None:
        return None
    submissions = store.submissions(user.uid)
    problems = store.problems(solved_identifiers(submissions))
    return user, score_submissions(submissions, problems, now)


def main(argv: List[str], store=None) -> int:
    as_json = "--json" in argv
    args = [a for a in argv if a != "--json"]
    if len(args) != 1:
        print(USAGE)
        return 1

    name = args[0]
    store = store or open_store()
    try:
        result = check_user(store, name)
    except (re.error, OperationFailure) as e:
        print(f"Invalid name pattern {name!r}: {e}")
        print(USAGE)
        return 1
    if result is None:
        print(f"{name} not found")
        return 1

    user, report = result
    if as_json:
        print(json.dumps({"uid": user.uid, "fullName": user.full_name, **report.model_dump(by_alias=True)}, indent=4))
    else:
        print(format_report(user, report))
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL)
    sys.exit(main(sys.argv[1:]))
