import logging
import os
import re
from typing import Iterable, List, Optional

from bson import json_util
from pymongo import DESCENDING, MongoClient

import config
from structs import Problem, Submission, User
from utils import dict_to_model

logger = logging.getLogger(__name__)

COLLECTIONS = ("users", "problems", "submissions")

# only what scoring and the activity feeds read; submission code stays in the db
PROJECTIONS = {
    "users": {"_id": 0, "uid": 1, "fullName": 1, "photoURL": 1, "isBlocked": 1},
    "problems": {"_id": 0, "id": 1, "slug": 1, "difficulty": 1, "title": 1},
    "submissions": {"_id": 0, "uid": 1, "verdict": 1, "problemIdentifier": 1, "createdAt": 1, "language": 1},
}


class JsonStore:
    """Reads a snapshot written by ``snapshot`` (MongoDB Extended JSON)."""

    def __init__(self, data_dir: str = config.DATA_DIR):
        self.data_dir = data_dir

    def _load(self, name: str) -> List[dict]:
        path = os.path.join(self.data_dir, f"{name}.json")
        try:
            with open(path, "r") as f:
                documents = json_util.loads(f.read())
        except FileNotFoundError:
            logger.info("Found no %s snapshot in %s", name, self.data_dir)
            return []
        logger.debug("Loaded %d %s from %s", len(documents), name, path)
        return documents

    def users(self) -> List[User]:
        return [dict_to_model(User, d) for d in self._load("users")]

    def find_user(self, name_pattern: str) -> Optional[User]:
        pattern = re.compile(name_pattern, re.IGNORECASE)
        for user in self.users():
            if user.full_name and pattern.search(user.full_name):
                return user
        return None

    def get_user(self, uid: str) -> Optional[User]:
        return next((u for u in self.users() if u.uid == uid), None)

    def submissions(self, uid: Optional[str] = None) -> List[Submission]:
        result = [dict_to_model(Submission, d) for d in self._load("submissions")]
        if uid is not None:
            result = [s for s in result if s.uid == uid]
        return sorted(result, key=lambda s: s.created_at, reverse=True)

    def problems(self, identifiers: Optional[Iterable[str]] = None) -> List[Problem]:
        result = [dict_to_model(Problem, d) for d in self._load("problems")]
        if identifiers is not None:
            wanted = set(identifiers)
            result = [p for p in result if p.id in wanted or p.slug in wanted]
        return result


class MongoStore:
    """Same read operations as JsonStore, answered by a live MongoDB."""

    def __init__(self, db):
        self.db = db

    @classmethod
    def from_uri(cls, uri: str = config.MONGO_URI, db_name: str = config.MONGO_DB) -> "MongoStore":
        client = MongoClient(uri, serverSelectionTimeoutMS=5000)
        logger.info("Connected to MongoDB database %s", db_name)
        return cls(client[db_name])

    def documents(self, name: str, query: Optional[dict] = None) -> List[dict]:
        cursor = self.db[name].find(query or {}, PROJECTIONS[name])
        if name == "submissions":
            cursor = cursor.sort("createdAt", DESCENDING)
        return list(cursor)

    def users(self) -> List[User]:
        return [dict_to_model(User, d) for d in self.documents("users")]

    def find_user(self, name_pattern: str) -> Optional[User]:
        document = self.db["users"].find_one(
            {"fullName": {"$regex": name_pattern, "$options": "i"}},
            PROJECTIONS["users"],
        )
        return dict_to_model(User, document) if document else None

    def get_user(self, uid: str) -> Optional[User]:
        document = self.db["users"].find_one({"uid": uid}, PROJECTIONS["users"])
        return dict_to_model(User, document) if document else None

    def submissions(self, uid: Optional[str] = None) -> List[Submission]:
        query = {"uid": uid} if uid is not None else {}
        return [dict_to_model(Submission, d) for d in self.documents("submissions", query)]

    def problems(self, identifiers: Optional[Iterable[str]] = None) -> List[Problem]:
        query = {}
        if identifiers is not None:
            ids = list(identifiers)
            query = {"$or": [{"id": {"$in": ids}}, {"slug": {"$in": ids}}]}
        return [dict_to_model(Problem, d) for d in self.documents("problems", query)]


def open_store():
    if config.DATA_SOURCE == "json":
        return JsonStore(config.DATA_DIR)
    if config.DATA_SOURCE == "mongo":
        return MongoStore.from_uri(config.MONGO_URI, config.MONGO_DB)
    raise ValueError(f"Unknown DATA_SOURCE {config.DATA_SOURCE!r}, expected 'json' or 'mongo'")


def snapshot(store: MongoStore, data_dir: str = config.DATA_DIR) -> None:
    os.makedirs(data_dir, exist_ok=True)
    for name in COLLECTIONS:
        documents = store.documents(name)
        print(f"Found {len(documents)} {name}")
        with open(os.path.join(data_dir, f"{name}.json"), "w") as f:
            f.write(json_util.dumps(documents, indent=4))


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    store = MongoStore.from_uri(config.MONGO_URI, config.MONGO_DB)
    print(f"Writing snapshot of {config.MONGO_DB} to {config.DATA_DIR}/")
    snapshot(store, config.DATA_DIR)
