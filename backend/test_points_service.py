from datetime import date, timedelta

from models.daily_log import DailyLog
from models.points import PointsRecord
from services.daily_log_service import DailyLogService
from services.points_service import PointsService

MONDAY = date(2024, 1, 8)


def test_upsert_creates_then_partially_updates(db, user):
    DailyLogService.upsert(db, user.id, {
        "date": MONDAY, "weight": 70.2, "shower": "done", "exercises": ["run"],
    })
    DailyLogService.upsert(db, user.id, {"date": MONDAY, "sleep_time": "8:00"})

    rows = db.query(DailyLog).filter_by(user_id=user.id).all()
    assert len(rows) == 1
    assert DailyLogService.to_dict(rows[0]) == {
        "date": "2024-01-08",
        "weight": 70.2,
        "shower": "done",
        "skin_care": None,
        "supplement": None,
        "sleep_time": "8:00",
        "exercises": ["run"],
    }


def test_upsert_can_clear_a_field(db, user):
    DailyLogService.upsert(db, user.id, {"date": MONDAY, "weight": 70})
    log = DailyLogService.upsert(db, user.id, {"date": MONDAY, "weight": None})
    assert log.weight is None


def test_delete(db, user):
    DailyLogService.upsert(db, user.id, {"date": MONDAY})
    assert DailyLogService.delete(db, user.id, MONDAY) is True
    assert DailyLogService.delete(db, user.id, MONDAY) is False
    assert DailyLogService.get(db, user.id, MONDAY) is None


def test_to_entry_tolerates_bad_exercises_json(db, user):
    log = DailyLogService.upsert(db, user.id, {"date": MONDAY, "shower": "done"})
    log.exercises = "{not json"
    db.commit()
    entry = DailyLogService.to_entry(log)
    assert entry.exercises == ()
    assert entry.date == MONDAY


def test_recompute_with_no_logs(db, user):
    summary = PointsService.recompute(db, user.id)
    assert summary.total_points == 0
    assert summary.rank == "iron"

    record = PointsService.get(db, user.id)
    assert record.total_points == 0
    assert record.last_computed_at is not None


def test_recompute_scores_stored_logs_and_replaces_record(db, user):
    for i in range(7):
        DailyLogService.upsert(db, user.id, {
            "date": MONDAY + timedelta(days=i),
            "weight": 70,
            "shower": "done",
            "sleep_time": "8:30",
            "skin_care": "done",
            "supplement": "done" if i < 5 else "not done",
            "exercises": ["run"] if i < 6 else [],
        })

    first = PointsService.recompute(db, user.id)
    assert (first.daily_points, first.weekly_points, first.total_points) == (28, 17, 45)
    assert first.rank == "silver"

    DailyLogService.upsert(db, user.id, {"date": MONDAY, "sleep_time": "bad"})
    second = PointsService.recompute(db, user.id)
    assert second.daily_points == 25

    records = db.query(PointsRecord).filter_by(user_id=user.id).all()
    assert len(records) == 1
    assert PointsService.to_dict(records[0])["totalPoints"] == 42


def test_recompute_only_reads_own_logs(db, user):
    DailyLogService.upsert(db, user.id, {"date": MONDAY, "weight": 70})
    DailyLogService.upsert(db, user.id + 1, {"date": MONDAY, "weight": 80, "shower": "done"})

    summary = PointsService.recompute(db, user.id)
    assert summary.daily_points == -1
