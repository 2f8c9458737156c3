"""Tests for daily progress recording and the progress read endpoints."""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from lms.domains.progress.aggregation import week_bounds


@pytest.fixture()
def quiz(db_session, school):
    from lms.models.assignment import Assignment

    a = Assignment(title="Daily quiz", type="multiple-choice", course_id=school["algebra"].id)
    hidden = Assignment(title="Hidden", type="writing", course_id=school["algebra"].id, published=False)
    db_session.add_all([a, hidden])
    db_session.commit()
    return {"quiz": a, "hidden": hidden}


def _record(client, headers, assignment_id, **body):
    return client.post(
        "/api/progress/daily",
        json={"assignment_id": assignment_id, **body},
        headers=headers,
    )


# ── Recording ───────────────────────────────────────────────────

def test_record_creates_row_and_weekly_rollup(client, school, quiz, auth):
    headers = auth(school["stu"])
    resp = _record(client, headers, quiz["quiz"].id, score=80, time_spent_minutes=12, completed=True)
    assert resp.status_code == 200, resp.text
    progress = resp.json()["progress"]
    assert progress["attempts"] == 1
    assert progress["score"] == 80
    assert progress["date"] == datetime.now(timezone.utc).date().isoformat()

    data = client.get(f"/api/progress/student/{school['stu'].id}", headers=headers).json()
    assert len(data["weekly_progress"]) == 1
    week = data["weekly_progress"][0]
    start, end = week_bounds(date.fromisoformat(progress["date"]))
    assert week["week_start"] == start.isoformat()
    assert week["week_end"] == end.isoformat()
    assert week["total_score"] == 80
    assert week["assignments_completed"] == 1
    assert week["best_day_of_week"] == week["worst_day_of_week"]

    patterns = data["learning_patterns"]
    assert len(patterns) == 1
    assert patterns[0]["pattern_type"] == "improvement_rate"
    assert patterns[0]["pattern_data"]["trend"] == "insufficient_data"


def test_second_record_same_day_updates_in_place(client, school, quiz, auth):
    headers = auth(school["stu"])
    _record(client, headers, quiz["quiz"].id, score=70, time_spent_minutes=5)
    resp = _record(client, headers, quiz["quiz"].id, completed=True)
    assert resp.status_code == 200

    progress = resp.json()["progress"]
    assert progress["attempts"] == 2
    assert progress["score"] == 70
    assert progress["time_spent_minutes"] == 5
    assert progress["completed"] is True

    data = client.get(f"/api/progress/student/{school['stu'].id}", headers=headers).json()
    assert len(data["daily_progress"]) == 1
    assert len(data["weekly_progress"]) == 1
    assert data["weekly_progress"][0]["assignments_completed"] == 1
    # The learning pattern is upserted per (student, pattern type), not appended
    assert len(data["learning_patterns"]) == 1
    assert data["learning_patterns"][0]["pattern_data"]["trend"] == "insufficient_data"


def test_record_on_hidden_assignment_is_404(client, school, quiz, auth):
    resp = _record(client, auth(school["stu"]), quiz["hidden"].id, score=50)
    assert resp.status_code == 404


def test_record_by_unenrolled_student_is_404(client, school, quiz, auth):
    resp = _record(client, auth(school["other_stu"]), quiz["quiz"].id, score=50)
    assert resp.status_code == 404


@pytest.mark.parametrize("body", [{"score": 101}, {"score": -1}, {"time_spent_minutes": -5}])
def test_record_validates_ranges(client, school, quiz, auth, body):
    resp = _record(client, auth(school["stu"]), quiz["quiz"].id, **body)
    assert resp.status_code == 422


def test_teachers_cannot_record(client, school, quiz, auth):
    resp = _record(client, auth(school["teacher"]), quiz["quiz"].id, score=90)
    assert resp.status_code == 403


def test_recording_is_rate_limited_per_student(client, school, quiz, auth, monkeypatch):
    from lms.core.config import settings

    monkeypatch.setattr(settings, "progress_rate_limit", "3/minute")
    headers = auth(school["stu"])
    codes = [_record(client, headers, quiz["quiz"].id, score=50).status_code for _ in range(4)]
    assert codes == [200, 200, 200, 429]

    # Limits are keyed by user id, so a classmate behind the same address is unaffected
    classmate = auth(school["other_stu"])
    enrolled = client.post("/api/enrollment/enroll", json={"course_id": school["algebra"].id}, headers=classmate)
    assert enrolled.status_code == 201
    assert _record(client, classmate, quiz["quiz"].id, score=90).status_code == 200


def test_concurrent_first_record_falls_back_to_update(db_session, school, quiz):
    from lms.domains.progress.services import ProgressService
    from lms.models.progress import DailyProgress

    now = datetime.now(timezone.utc)
    student_id = school["stu"].id
    assignment_id = quiz["quiz"].id
    # Written by a competing request after this one looked for today's row
    db_session.add(DailyProgress(student_id=student_id, assignment_id=assignment_id,
                                 date=now.date(), score=40, completed=False, attempts=1))
    db_session.commit()

    service = ProgressService(db_session)
    real_find = service._find_daily
    calls = []

    def stale_then_real(*args):
        calls.append(args)
        return None if len(calls) == 1 else real_find(*args)

    with patch.object(service, "_find_daily", side_effect=stale_then_real):
        progress = service.record_daily(
            school["stu"], assignment_id, score=None, time_spent_minutes=7, completed=True, now=now,
        )

    assert len(calls) == 2
    assert progress.attempts == 2
    assert progress.score == 40
    assert progress.time_spent_minutes == 7
    assert progress.completed is True
    assert db_session.query(DailyProgress).count() == 1


# ── Student progress ────────────────────────────────────────────

@pytest.fixture()
def history(db_session, school, quiz):
    """Three past days of progress for the enrolled student."""
    from lms.models.progress import DailyProgress

    today = datetime.now(timezone.utc).date()
    rows = [
        DailyProgress(student_id=school["stu"].id, assignment_id=quiz["quiz"].id,
                      date=today - timedelta(days=d), score=score, completed=done, attempts=1)
        for d, score, done in [(40, 100, True), (3, 60, True), (2, None, False)]
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows


def test_student_progress_summary(client, school, history, auth):
    resp = client.get(f"/api/progress/student/{school['stu'].id}", headers=auth(school["stu"]))
    assert resp.status_code == 200
    data = resp.json()

    assert data["summary"] == {
        "total_score": 160,
        "completed_assignments": 2,
        "average_score": 53.33,
        "total_assignments": 3,
    }
    # Newest first
    dates = [row["date"] for row in data["daily_progress"]]
    assert dates == sorted(dates, reverse=True)
    # The 40-day-old row is outside the daily averages window
    assert [d["average_score"] for d in data["daily_averages"]] == [60, 0]


def test_student_progress_date_range(client, school, history, auth):
    today = datetime.now(timezone.utc).date()
    start = (today - timedelta(days=3)).isoformat()
    end = today.isoformat()
    resp = client.get(
        f"/api/progress/student/{school['stu'].id}?start_date={start}&end_date={end}",
        headers=auth(school["stu"]),
    )
    assert resp.status_code == 200
    assert resp.json()["summary"]["total_assignments"] == 2


def test_inverted_date_range_is_400(client, school, auth):
    resp = client.get(
        f"/api/progress/student/{school['stu'].id}?start_date=2024-10-02&end_date=2024-10-01",
        headers=auth(school["stu"]),
    )
    assert resp.status_code == 400


def test_student_cannot_see_another_student(client, school, auth):
    resp = client.get(f"/api/progress/student/{school['stu'].id}", headers=auth(school["other_stu"]))
    assert resp.status_code == 403


def test_teacher_sees_student_in_same_school(client, school, history, auth):
    resp = client.get(f"/api/progress/student/{school['stu'].id}", headers=auth(school["teacher"]))
    assert resp.status_code == 200
    assert resp.json()["summary"]["total_assignments"] == 3


def test_teacher_from_other_school_is_forbidden(client, school, auth):
    resp = client.get(f"/api/progress/student/{school['stu'].id}", headers=auth(school["outsider_teacher"]))
    assert resp.status_code == 403
    assert resp.json()["code"] == "STUDENT_NOT_IN_ORGANIZATION"


def test_unknown_student_is_404(client, school, auth):
    resp = client.get(f"/api/progress/student/{school['teacher'].id}", headers=auth(school["teacher"]))
    assert resp.status_code == 404


# ── Class progress ──────────────────────────────────────────────

def test_class_progress(client, school, history, auth):
    resp = client.get(f"/api/progress/class/{school['algebra'].id}", headers=auth(school["teacher"]))
    assert resp.status_code == 200
    data = resp.json()

    assert [s["id"] for s in data["students"]] == [school["stu"].id]
    assert data["class_stats"] == {
        "total_students": 1,
        "total_assignments": 3,
        "average_score": 53.33,
        "completion_rate": 67,
    }
    assert len(data["class_progress"]) == 3


def test_class_progress_empty_course(client, school, auth):
    resp = client.get(f"/api/progress/class/{school['geometry'].id}", headers=auth(school["teacher"]))
    assert resp.status_code == 200
    data = resp.json()
    assert data["class_stats"]["total_students"] == 0
    assert data["class_stats"]["average_score"] == 0
    assert data["class_progress"] == []


def test_class_progress_other_school_course_is_404(client, school, auth):
    resp = client.get(f"/api/progress/class/{school['foreign_course'].id}", headers=auth(school["teacher"]))
    assert resp.status_code == 404


def test_students_cannot_view_class_progress(client, school, auth):
    resp = client.get(f"/api/progress/class/{school['algebra'].id}", headers=auth(school["stu"]))
    assert resp.status_code == 403
