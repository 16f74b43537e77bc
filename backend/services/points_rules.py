"""
points_rules.py — Points & Rank Engine
Turns a user's daily logs into a points summary: per-day rules (weight, shower,
sleep), per-week rules (skin care, supplement, exercises) and a rank ladder.
Pure module: no database, no network. The only clock read is the
`last_computed_at` stamp.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from numbers import Real
from typing import Callable, Iterable, Optional


class Completion(str, Enum):
    DONE = "done"
    NOT_DONE = "not done"

    @classmethod
    def parse(cls, value) -> Optional["Completion"]:
        """Exact `done` / `not done` only; anything else counts as absent."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class DailyLogEntry:
    """One day of logged metrics. `None` means the field was never filled in."""
    date: date
    weight: Optional[float] = None
    shower: Optional[Completion] = None
    skin_care: Optional[Completion] = None
    supplement: Optional[Completion] = None
    sleep_time: Optional[str] = None  # hours slept, "H:MM"
    exercises: tuple = ()

    @classmethod
    def from_dict(cls, raw: dict) -> "DailyLogEntry":
        """
        Build an entry from a stored document (camelCase or snake_case keys).
        Malformed optional fields are dropped to None; a missing or invalid
        date raises ValueError since the date is the record key.
        """
        day = raw.get("date")
        if isinstance(day, datetime):
            day = day.date()
        elif isinstance(day, str):
            day = date.fromisoformat(day.strip()[:10])
        elif not isinstance(day, date):
            raise ValueError(f"Log entry has no usable date: {day!r}")

        weight = raw.get("weight")
        if isinstance(weight, bool) or not isinstance(weight, Real):
            weight = None

        sleep_time = _pick(raw, "sleepTime", "sleep_time")
        if not isinstance(sleep_time, str):
            sleep_time = None

        exercises = raw.get("exercises")
        if isinstance(exercises, (list, tuple)):
            exercises = tuple(e for e in exercises if isinstance(e, str))
        else:
            exercises = ()

        return cls(
            date=day,
            weight=weight,
            shower=Completion.parse(raw.get("shower")),
            skin_care=Completion.parse(_pick(raw, "skinCare", "skin_care")),
            supplement=Completion.parse(raw.get("supplement")),
            sleep_time=sleep_time,
            exercises=exercises,
        )


def _pick(raw: dict, *keys):
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


@dataclass
class WeekBucket:
    skin_care_done: int = 0
    supplement_done: int = 0
    exercises_count: int = 0


@dataclass(frozen=True)
class PointsSummary:
    daily_points: int
    weekly_points: int
    total_points: int
    rank: str
    last_computed_at: datetime = field(compare=False)

    def to_dict(self) -> dict:
        """Document shape stored in the `points` collection."""
        return {
            "dailyPoints": self.daily_points,
            "weeklyPoints": self.weekly_points,
            "totalPoints": self.total_points,
            "rank": self.rank,
            "lastComputedAt": self.last_computed_at.isoformat(),
        }


# --- Rule tables --------------------------------------------------------------
# Rows are (label, predicate, points), checked top to bottom; first match wins,
# no match scores 0.

Rule = tuple[str, Callable[[float], bool], int]

SLEEP_RULES: list[Rule] = [
    (">= 8h30", lambda h: h >= 8.5, 2),
    ("7h30 - 8h29", lambda h: h >= 7.5, 1),
    ("7h00 - 7h29", lambda h: h >= 7.0, 0),
    ("6h00 - 6h59", lambda h: h >= 6.0, -1),
    ("< 6h", lambda h: h < 6.0, -2),
]
SLEEP_MISSING_POINTS = -1
SLEEP_PATTERN = re.compile(r"(-?\d+):(\d+)", re.ASCII)

SKIN_CARE_RULES: list[Rule] = [
    ("7x", lambda n: n >= 7, 7),
    ("4-6x", lambda n: n >= 4, 4),
    ("0x", lambda n: n <= 0, -6),
    ("1-2x", lambda n: n <= 2, -3),
]

SUPPLEMENT_RULES: list[Rule] = [
    ("5x+", lambda n: n >= 5, 4),
    ("0-2x", lambda n: n <= 2, -4),
]

EXERCISE_RULES: list[Rule] = [
    ("6+", lambda n: n >= 6, 6),
    ("4-5", lambda n: n >= 4, 3),
    ("0-1", lambda n: n <= 1, -6),
    ("2-3", lambda n: n <= 3, -3),
]

# Inclusive upper bounds; None is the open-ended top tier.
RANK_LADDER: list[tuple[Optional[int], str]] = [
    (0, "iron"),
    (20, "bronze"),
    (50, "silver"),
    (100, "gold"),
    (175, "plat"),
    (250, "diam"),
    (350, "asc"),
    (400, "imo"),
    (None, "rad"),
]


def apply_rules(rules: list[Rule], value: float) -> int:
    for _label, matches, points in rules:
        if matches(value):
            return points
    return 0


# --- Daily rules --------------------------------------------------------------

def parse_sleep_to_hours(value: Optional[str]) -> Optional[float]:
    """'7:45' -> 7.75. Returns None for absent or unparseable values."""
    if not isinstance(value, str):
        return None
    match = SLEEP_PATTERN.fullmatch(value.strip())
    if not match:
        return None
    return int(match.group(1)) + int(match.group(2)) / 60


def compute_daily_points(entry: DailyLogEntry) -> int:
    points = 1 if entry.weight is not None else -1
    points += 1 if entry.shower == Completion.DONE else -1

    sleep_hours = parse_sleep_to_hours(entry.sleep_time)
    if sleep_hours is None:
        points += SLEEP_MISSING_POINTS
    else:
        points += apply_rules(SLEEP_RULES, sleep_hours)
    return points


# --- Weekly rules -------------------------------------------------------------

def week_start(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def bucket_by_week(entries: Iterable[DailyLogEntry]) -> dict[date, WeekBucket]:
    buckets: dict[date, WeekBucket] = {}
    for entry in entries:
        bucket = buckets.setdefault(week_start(entry.date), WeekBucket())
        if entry.skin_care == Completion.DONE:
            bucket.skin_care_done += 1
        if entry.supplement == Completion.DONE:
            bucket.supplement_done += 1
        bucket.exercises_count += len(entry.exercises)
    return buckets


def compute_week_points(bucket: WeekBucket) -> int:
    return (
        apply_rules(SKIN_CARE_RULES, bucket.skin_care_done)
        + apply_rules(SUPPLEMENT_RULES, bucket.supplement_done)
        + apply_rules(EXERCISE_RULES, bucket.exercises_count)
    )


def compute_weekly_points(entries: Iterable[DailyLogEntry]) -> int:
    return sum(compute_week_points(b) for b in bucket_by_week(entries).values())


# --- Summary ------------------------------------------------------------------

def rank_for_points(total_points: int) -> str:
    for upper, name in RANK_LADDER:
        if upper is None or total_points <= upper:
            return name
    return RANK_LADDER[-1][1]


def dedupe_by_date(entries: Iterable[DailyLogEntry]) -> list[DailyLogEntry]:
    """Keep one entry per date; a later entry replaces an earlier one."""
    by_date: dict[date, DailyLogEntry] = {}
    for entry in entries:
        by_date[entry.date] = entry
    return [by_date[d] for d in sorted(by_date)]


def compute_points_from_logs(
    logs: Iterable[DailyLogEntry], now: Optional[datetime] = None
) -> PointsSummary:
    """Score a user's full log history. Order of `logs` does not matter."""
    entries = dedupe_by_date(logs)
    daily_points = sum(compute_daily_points(e) for e in entries)
    weekly_points = compute_weekly_points(entries)
    total_points = daily_points + weekly_points

    return PointsSummary(
        daily_points=daily_points,
        weekly_points=weekly_points,
        total_points=total_points,
        rank=rank_for_points(total_points),
        last_computed_at=now or datetime.now(timezone.utc),
    )


def describe_rules() -> dict:
    """Rule tables as plain data for display."""
    def rows(rules):
        return [{"when": label, "points": points} for label, _, points in rules]

    return {
        "daily": {
            "weight": [{"when": "logged", "points": 1}, {"when": "missing", "points": -1}],
            "shower": [{"when": "done", "points": 1}, {"when": "not done", "points": -1}],
            "sleep": rows(SLEEP_RULES) + [{"when": "missing", "points": SLEEP_MISSING_POINTS}],
        },
        "weekly": {
            "skin_care": rows(SKIN_CARE_RULES),
            "supplement": rows(SUPPLEMENT_RULES),
            "exercises": rows(EXERCISE_RULES),
        },
        "ranks": [{"rank": name, "max_points": upper} for upper, name in RANK_LADDER],
    }
