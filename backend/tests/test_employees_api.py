from datetime import datetime, timedelta

import pytest


def new_employee_payload(**overrides):
    payload = {
        "email": "Margaret@Example.com",
        "password": "supersecure",
        "personal_details": {"full_name": "Margaret Hamilton", "phone": "555-0100"},
        "job_details": {"designation": "Lead", "department": "Apollo", "joining_date": "2023-06-01"},
    }
    payload.update(overrides)
    return payload


def test_create_employee(client, hr):
    response = client.post("/employees", headers=hr.headers, json=new_employee_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "margaret@example.com"
    assert body["role"] == "employee"
    assert body["status"] == "active"
    assert body["login_id"] == "DAMAHA20230001"
    assert body["employee_code"].startswith("EMP")
    assert body["personal_details"]["full_name"] == "Margaret Hamilton"
    assert body["personal_details"]["skills"] == []
    assert body["job_details"]["department"] == "Apollo"
    assert body["salary_info"]["month_wage"] == 0
    assert body["salary_info"]["working_days"] == 5
    assert body["salary_info"]["salary_components"]["standard_allowance"]["amount"] == 4167


def test_create_employee_applies_job_defaults(client, hr):
    payload = new_employee_payload(job_details={})

    response = client.post("/employees", headers=hr.headers, json=payload)

    assert response.status_code == 201
    job = response.json()["job_details"]
    assert job["designation"] == "Not Assigned"
    assert job["department"] == "General"
    assert job["employment_type"] == "full-time"
    assert job["joining_date"] == datetime.utcnow().date().isoformat()


def test_create_employee_duplicate_email(client, hr):
    client.post("/employees", headers=hr.headers, json=new_employee_payload())

    response = client.post(
        "/employees",
        headers=hr.headers,
        json=new_employee_payload(email="margaret@example.com"),
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "User with this email already exists"


@pytest.mark.parametrize(
    "change",
    [
        {"password": "short"},
        {"email": "not-an-email"},
        {"personal_details": {"phone": "1"}},
        {"role": "superuser"},
    ],
)
def test_create_employee_validation(client, hr, change):
    response = client.post("/employees", headers=hr.headers, json=new_employee_payload(**change))

    assert response.status_code == 422


def test_employee_cannot_create_employees(client, employee):
    response = client.post("/employees", headers=employee.headers, json=new_employee_payload())

    assert response.status_code == 403


def test_list_employees_filters_and_paginates(client, hr, employee, make_account):
    make_account(full_name="Katherine Johnson", department="Finance")

    everyone = client.get("/employees", headers=hr.headers)
    finance = client.get("/employees", params={"department": "Finance"}, headers=hr.headers)
    paged = client.get("/employees", params={"limit": 1, "page": 3}, headers=hr.headers)

    assert everyone.json()["total"] == 3
    assert finance.json()["total"] == 1
    assert finance.json()["items"][0]["personal_details"]["full_name"] == "Katherine Johnson"
    assert paged.json()["total_pages"] == 3
    assert len(paged.json()["items"]) == 1


def test_list_employees_rejects_oversized_page(client, hr):
    response = client.get("/employees", params={"limit": 1000}, headers=hr.headers)

    assert response.status_code == 422


def test_get_employee_not_found(client, hr):
    response = client.get("/employees/9999", headers=hr.headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Employee not found"


def test_employee_reads_own_profile(client, employee):
    response = client.get("/employees/me", headers=employee.headers)

    assert response.status_code == 200
    assert response.json()["id"] == employee.employee_id
    assert response.json()["login_id"] == employee.login_id


def test_employee_updates_contact_details(client, employee):
    response = client.put(
        "/employees/me",
        headers=employee.headers,
        json={"personal_details": {"phone": "555-0199", "address": "12 Analytical Row"}},
    )

    assert response.status_code == 200
    personal = response.json()["personal_details"]
    assert personal["phone"] == "555-0199"
    assert personal["address"] == "12 Analytical Row"


def test_employee_cannot_update_job_details(client, employee):
    response = client.put(
        "/employees/me",
        headers=employee.headers,
        json={"personal_details": {"phone": "1"}, "job_details": {"department": "Finance"}},
    )
    profile = client.get("/employees/me", headers=employee.headers).json()

    assert response.status_code == 403
    assert response.json()["detail"] == "Role 'employee' may not update: job_details.department"
    assert profile["job_details"]["department"] == "Engineering"
    assert profile["personal_details"]["phone"] is None


def test_staff_updates_employee(client, hr, employee):
    response = client.put(
        f"/employees/{employee.employee_id}",
        headers=hr.headers,
        json={
            "personal_details": {"skills": ["analysis", "engines"]},
            "job_details": {"department": "Research", "manager": "Charles Babbage"},
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["personal_details"]["skills"] == ["analysis", "engines"]
    assert body["job_details"]["department"] == "Research"
    assert body["job_details"]["manager"] == "Charles Babbage"
    assert body["job_details"]["designation"] == "Engineer"


def test_required_field_cannot_be_cleared(client, hr, employee):
    response = client.put(
        f"/employees/{employee.employee_id}",
        headers=hr.headers,
        json={"personal_details": {"full_name": None}},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "full_name cannot be empty"


def test_unknown_update_field_rejected(client, hr, employee):
    response = client.put(
        f"/employees/{employee.employee_id}",
        headers=hr.headers,
        json={"personal_details": {"salary": 1}},
    )

    assert response.status_code == 422


def test_status_change(client, hr, employee):
    response = client.patch(
        f"/employees/{employee.employee_id}/status",
        headers=hr.headers,
        json={"status": "inactive"},
    )
    invalid = client.patch(
        f"/employees/{employee.employee_id}/status",
        headers=hr.headers,
        json={"status": "retired"},
    )
    filtered = client.get("/employees", params={"status": "inactive"}, headers=hr.headers)

    assert response.status_code == 200
    assert response.json()["status"] == "inactive"
    assert invalid.status_code == 422
    assert filtered.json()["total"] == 1


def test_salary_wage_change_recomputes_components(client, hr, employee):
    response = client.put(
        f"/employees/{employee.employee_id}/salary",
        headers=hr.headers,
        json={"month_wage": 50000},
    )

    assert response.status_code == 200
    salary = response.json()
    assert salary["month_wage"] == 50000
    assert salary["yearly_wage"] == 600000
    components = salary["salary_components"]
    assert components["basic_salary"] == {"amount": 25000, "percentage": 50}
    assert components["hra"]["amount"] == 12500
    assert components["performance_bonus"]["amount"] == 2082.5
    assert components["fixed_allowance"]["amount"] == 4168
    assert salary["pf_employee"]["amount"] == 2500
    assert salary["pf_employer"]["amount"] == 3000
    assert salary["professional_tax"]["amount"] == 200

    stored = client.get(f"/employees/{employee.employee_id}/salary", headers=hr.headers)
    assert stored.json() == salary


def test_salary_override_kept_until_wage_changes(client, hr, employee):
    url = f"/employees/{employee.employee_id}/salary"
    client.put(url, headers=hr.headers, json={"month_wage": 50000})

    overridden = client.put(url, headers=hr.headers, json={"salary_components": {"hra": {"amount": 9000}}})
    days = client.put(url, headers=hr.headers, json={"working_days": 6})
    recomputed = client.put(url, headers=hr.headers, json={"month_wage": 60000})

    assert overridden.json()["salary_components"]["hra"]["amount"] == 9000
    assert overridden.json()["salary_components"]["basic_salary"]["amount"] == 25000
    assert days.json()["salary_components"]["hra"]["amount"] == 9000
    assert days.json()["working_days"] == 6
    assert recomputed.json()["salary_components"]["hra"]["amount"] == 15000
    assert recomputed.json()["working_days"] == 6


def test_salary_wage_with_overrides_rejected(client, hr, employee):
    response = client.put(
        f"/employees/{employee.employee_id}/salary",
        headers=hr.headers,
        json={"month_wage": 50000, "salary_components": {"hra": {"amount": 1}}},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Component overrides cannot be combined with a monthly wage change"


@pytest.mark.parametrize(
    "payload",
    [
        {"working_days": 8},
        {"working_days": 0},
        {"month_wage": -1},
        {"salary_components": {"bonus": {"amount": 1}}},
        {"pf_employee": {"percentage": 120}},
    ],
)
def test_salary_update_validation(client, hr, employee, payload):
    response = client.put(f"/employees/{employee.employee_id}/salary", headers=hr.headers, json=payload)

    assert response.status_code == 422


def test_employee_cannot_touch_salary(client, employee):
    read = client.get(f"/employees/{employee.employee_id}/salary", headers=employee.headers)
    write = client.put(
        f"/employees/{employee.employee_id}/salary",
        headers=employee.headers,
        json={"month_wage": 999999},
    )

    assert read.status_code == 403
    assert write.status_code == 403


def test_only_admin_deletes_employee(client, admin, hr, employee):
    forbidden = client.delete(f"/employees/{employee.employee_id}", headers=hr.headers)

    assert forbidden.status_code == 403


def test_delete_employee_removes_related_records(client, admin, hr, employee):
    client.post("/payroll", headers=hr.headers, json={"employee_id": employee.employee_id, "basic_salary": 1000})
    client.post(
        "/attendance/mark",
        headers=hr.headers,
        json={"employee_id": employee.employee_id, "work_date": "2024-02-01", "status": "present"},
    )
    start = (datetime.utcnow().date() + timedelta(days=3)).isoformat()
    client.post(
        "/leaves",
        headers=employee.headers,
        json={"leave_type": "paid", "start_date": start, "end_date": start, "reason": "rest"},
    )

    response = client.delete(f"/employees/{employee.employee_id}", headers=admin.headers)

    assert response.status_code == 204
    assert client.get(f"/employees/{employee.employee_id}", headers=hr.headers).status_code == 404
    assert client.get("/payroll", headers=hr.headers).json()["total"] == 0
    assert client.get("/attendance", headers=hr.headers).json()["total"] == 0
    assert client.get("/leaves", headers=hr.headers).json()["total"] == 0
    assert client.get("/employees/me", headers=employee.headers).status_code == 401


@pytest.mark.parametrize(
    "body",
    [
        '{"month_wage": Infinity}',
        '{"month_wage": NaN}',
        '{"salary_components": {"hra": {"amount": Infinity}}}',
    ],
)
def test_salary_update_rejects_non_finite_numbers(client, hr, employee, body):
    response = client.put(
        f"/employees/{employee.employee_id}/salary",
        headers={**hr.headers, "Content-Type": "application/json"},
        content=body,
    )

    assert response.status_code == 422
