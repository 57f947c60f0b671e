from datetime import datetime

import pytest

from dayflow.core.errors import ConflictError, NotFoundError
from dayflow.domains.attendance import service


def test_check_in_then_out_through_api(client, employee):
    checked_in = client.post("/attendance/check-in", headers=employee.headers)
    again = client.post("/attendance/check-in", headers=employee.headers)
    checked_out = client.post("/attendance/check-out", headers=employee.headers)
    out_again = client.post("/attendance/check-out", headers=employee.headers)

    assert checked_in.status_code == 201
    assert checked_in.json()["status"] == "present"
    assert checked_in.json()["check_out"] is None
    assert again.status_code == 409
    assert again.json()["detail"] == "Already checked in today"
    assert checked_out.status_code == 200
    assert checked_out.json()["check_out"] is not None
    assert out_again.status_code == 409
    assert out_again.json()["detail"] == "Already checked out today"


def test_check_out_without_check_in(client, employee):
    response = client.post("/attendance/check-out", headers=employee.headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "No check-in record found for today"


def test_today_record(client, employee):
    before = client.get("/attendance/today", headers=employee.headers)
    client.post("/attendance/check-in", headers=employee.headers)
    after = client.get("/attendance/today", headers=employee.headers)

    assert before.status_code == 200
    assert before.json() is None
    assert after.json()["employee_id"] == employee.employee_id


def test_work_hours_from_check_in_and_out(db, employee):
    service.check_in(db, employee.employee_id, now=datetime(2024, 5, 6, 9, 0))

    record = service.check_out(db, employee.employee_id, now=datetime(2024, 5, 6, 17, 30))

    assert record.work_hours == 8.5
    assert record.work_date.isoformat() == "2024-05-06"


def test_service_conflicts(db, employee):
    with pytest.raises(NotFoundError):
        service.check_out(db, employee.employee_id, now=datetime(2024, 5, 6, 17, 0))

    service.check_in(db, employee.employee_id, now=datetime(2024, 5, 6, 9, 0))

    with pytest.raises(ConflictError):
        service.check_in(db, employee.employee_id, now=datetime(2024, 5, 6, 10, 0))


def test_compute_work_hours_edges():
    start = datetime(2024, 5, 6, 9, 0)

    assert service.compute_work_hours(start, None) == 0
    assert service.compute_work_hours(start, datetime(2024, 5, 6, 8, 0)) == 0
    assert service.compute_work_hours(start, datetime(2024, 5, 6, 9, 20)) == 0.33


def test_mark_attendance_upserts(client, hr, employee):
    payload = {"employee_id": employee.employee_id, "work_date": "2024-03-04", "status": "absent"}

    created = client.post("/attendance/mark", headers=hr.headers, json=payload)
    updated = client.post(
        "/attendance/mark",
        headers=hr.headers,
        json={**payload, "status": "half-day", "remarks": "doctor visit"},
    )
    history = client.get(f"/attendance/employee/{employee.employee_id}", headers=hr.headers)

    assert created.status_code == 201
    assert updated.status_code == 200
    assert updated.json()["id"] == created.json()["id"]
    assert updated.json()["status"] == "half-day"
    assert updated.json()["remarks"] == "doctor visit"
    assert history.json()["total"] == 1


def test_mark_attendance_unknown_employee(client, hr):
    response = client.post(
        "/attendance/mark",
        headers=hr.headers,
        json={"employee_id": 9999, "work_date": "2024-03-04", "status": "present"},
    )

    assert response.status_code == 404


def test_employee_cannot_mark_attendance(client, employee):
    response = client.post(
        "/attendance/mark",
        headers=employee.headers,
        json={"employee_id": employee.employee_id, "work_date": "2024-03-04", "status": "present"},
    )

    assert response.status_code == 403


def test_my_attendance_date_range(client, hr, employee):
    for day, status in (("2024-03-01", "present"), ("2024-03-02", "absent"), ("2024-04-01", "leave")):
        client.post(
            "/attendance/mark",
            headers=hr.headers,
            json={"employee_id": employee.employee_id, "work_date": day, "status": status},
        )

    response = client.get(
        "/attendance/me",
        params={"start_date": "2024-03-01", "end_date": "2024-03-31"},
        headers=employee.headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert [item["work_date"] for item in body["items"]] == ["2024-03-02", "2024-03-01"]


def test_summary_and_day_listing(client, hr, employee, make_account):
    other = make_account(full_name="Alan Turing")
    for account, status in ((employee, "present"), (other, "absent"), (hr, "present")):
        client.post(
            "/attendance/mark",
            headers=hr.headers,
            json={"employee_id": account.employee_id, "work_date": "2024-03-04", "status": status},
        )

    summary = client.get("/attendance/summary", headers=hr.headers)
    on_day = client.get("/attendance", params={"on": "2024-03-04"}, headers=hr.headers)
    other_day = client.get("/attendance", params={"on": "2024-03-05"}, headers=hr.headers)

    assert summary.json() == [{"status": "absent", "count": 1}, {"status": "present", "count": 2}]
    assert on_day.json()["total"] == 3
    assert other_day.json()["total"] == 0
