from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Dict, Optional, Literal
from datetime import datetime
from utils import to_utc

ACCEPTED_VERDICTS = ("AC", "Accepted")

Difficulty = Literal["Easy", "Medium", "Hard"]

class Problem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    slug: str
    difficulty: Difficulty
    title: Optional[str] = None

class Submission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uid: str
    verdict: str
    problem_identifier: str = Field(alias="problemIdentifier")
    created_at: datetime = Field(alias="createdAt")
    language: Optional[str] = None

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return to_utc(value)

class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uid: str
    full_name: Optional[str] = Field(default=None, alias="fullName")
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    is_blocked: Optional[bool] = Field(default=False, alias="isBlocked")

class ScoreReport(BaseModel):
    """Readiness score of a single user. Defaults form the zero report."""
    model_config = ConfigDict(populate_by_name=True)

    easy_count: int = Field(default=0, alias="easyCount")
    medium_count: int = Field(default=0, alias="mediumCount")
    hard_count: int = Field(default=0, alias="hardCount")
    solved_count: int = Field(default=0, alias="solvedCount")
    accuracy: int = 0
    streak: int = 0
    improvement: int = 0
    diff_score: int = Field(default=0, alias="diffScore")
    cons_score: int = Field(default=0, alias="consScore")
    imp_score: int = Field(default=0, alias="impScore")
    total: int = 0

class DifficultyStats(BaseModel):
    easy: int = 0
    medium: int = 0
    hard: int = 0

class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uid: str
    full_name: str = Field(alias="fullName")
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    problems_solved: int = Field(alias="problemsSolved")
    accuracy: int
    streak: int
    improvement: str
    score: int
    stats: DifficultyStats
    rank: int = 0

class DashboardStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    problems_solved: int = Field(alias="problemsSolved")
    total_accepted: int = Field(alias="totalAccepted")
    difficulty_breakdown: Dict[str, int] = Field(alias="difficultyBreakdown")
    weekly_change: str = Field(alias="weeklyChange")
    current_streak: int = Field(alias="currentStreak")
    max_streak: int = Field(alias="maxStreak")
    improvement_rate: int = Field(alias="improvementRate")
    streak_change: str = Field(alias="streakChange")
    global_rank: str = Field(alias="globalRank")
    rank_change: str = Field(alias="rankChange")
    total_submissions: int = Field(alias="totalSubmissions")

class ContributionMonth(BaseModel):
    name: str
    days: List[int]

class ContributionCalendar(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contribution_data: List[ContributionMonth] = Field(alias="contributionData")
    total_submissions: int = Field(alias="totalSubmissions")

class RecentSubmission(BaseModel):
    problem: str
    status: str
    time: str
    language: Optional[str] = None

class AcceptedSubmission(BaseModel):
    problem: str
    difficulty: str
    time: str
