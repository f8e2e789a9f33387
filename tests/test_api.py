from tests.fakes import make_profile


def test_health_is_public(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok"}


def test_api_requires_a_session(client):
    res = client.get("/api/profile")
    assert res.status_code == 401
    assert res.get_json() == {"error": "Unauthorized"}


def test_login_rejects_bad_password(client):
    res = client.post("/api/auth/login", json={"email": "emp@example.com", "password": "nope"})
    assert res.status_code == 401
    assert res.get_json() == {"error": "Invalid email or password"}


def test_login_then_profile(client, login):
    user = login("emp")
    assert user["role"] == "employee"

    res = client.get("/api/profile")
    assert res.status_code == 200
    body = res.get_json()
    assert body["id"] == "emp"
    assert body["details"] == {}

    client.post("/api/auth/logout")
    assert client.get("/api/profile").status_code == 401


def test_employee_cannot_reach_admin_routes(client, login):
    login("emp")
    res = client.get("/api/admin/settings")
    assert res.status_code == 403
    assert res.get_json() == {"error": "Forbidden"}


def test_hr_reaches_reports_but_not_user_admin(client, login):
    login("hr")
    assert client.get("/api/admin/reports/compliance?month=6&year=2025").status_code == 200
    assert client.get("/api/admin/attendance").status_code == 200
    assert client.get("/api/admin/users?id=emp").status_code == 403


def test_validation_errors_map_to_400(client, login):
    login("emp")
    res = client.post("/api/leaves", json={"type": "Casual"})
    assert res.status_code == 400
    assert res.get_json() == {"error": "Missing required fields"}

    res = client.post("/api/leaves", data="not json", content_type="text/plain")
    assert res.status_code == 400
    assert res.get_json() == {"error": "Invalid request body"}


def test_not_found_maps_to_404(client, login):
    login("root")
    res = client.get("/api/admin/users?id=ghost")
    assert res.status_code == 404


def test_leave_round_trip_through_manager(client, login, container):
    login("emp")
    res = client.post(
        "/api/leaves",
        json={"type": "Casual", "startDate": "2025-06-10", "endDate": "2025-06-11", "approverId": "mgr"},
    )
    assert res.status_code == 200
    leave = res.get_json()
    assert leave["status"] == "pending"
    assert leave["duration"] == 2

    login("mgr")
    pending = client.get("/api/leaves/pending").get_json()
    assert [p["id"] for p in pending] == [leave["id"]]

    res = client.post("/api/leaves/approve", json={"leaveId": leave["id"], "status": "approved"})
    assert res.status_code == 200
    assert container.leaves_repo.get_by_id(leave["id"]).status.value == "approved"

    login("emp")
    res = client.delete(f"/api/leaves?id={leave['id']}")
    assert res.status_code == 400
    assert res.get_json() == {"error": "Only pending leaves can be cancelled"}


def test_remote_check_in_and_today(client, login):
    login("emp")
    res = client.post("/api/attendance/check-in", json={"mode": "remote"})
    assert res.status_code == 200
    assert res.get_json()["data"]["status"] == "remote"

    again = client.post("/api/attendance/check-in", json={"mode": "remote"})
    assert again.status_code == 400
    assert again.get_json() == {"error": "You have already checked in today"}


def test_compliance_csv_download(client, login):
    login("root")
    res = client.get("/api/admin/reports/compliance.csv?month=6&year=2025&type=performers")
    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert "compliance_performers_2025_06.csv" in res.headers["Content-Disposition"]
    header = res.data.decode("utf-8-sig").splitlines()[0]
    assert header.startswith("user_id,full_name,department")


def test_unknown_api_route_is_json_404(client, login):
    login("emp")
    res = client.get("/api/nope")
    assert res.status_code == 404
    assert "error" in res.get_json()


def _new_user(**overrides):
    body = {
        "email": "hire@example.com",
        "password": "welcome1",
        "fullName": "Hire",
        "designation": "Analyst",
        "department": "Engineering",
        "reportingManagers": ["mgr"],
        "workConfig": {"mode": "fixed", "fixed": {"start_time": "09:00", "end_time": "18:00"}},
    }
    body.update(overrides)
    return body


def test_admin_user_form_rejects_unparseable_shift_times(client, login):
    login("root")
    res = client.post(
        "/api/admin/users",
        json=_new_user(workConfig={"mode": "fixed", "fixed": {"start_time": "9am", "end_time": "6pm"}}),
    )
    assert res.status_code == 400
    assert res.get_json() == {"error": "Start Time and End Time must be in HH:MM format"}


def test_admin_user_form_accepts_numeric_phone(client, login):
    login("root")
    res = client.post("/api/admin/users", json=_new_user(phone=9876543210, pincode=560001))
    assert res.status_code == 201

    user_id = res.get_json()["user"]["id"]
    details = client.get(f"/api/admin/users?id={user_id}").get_json()["details"]
    assert details["phone_number"] == "9876543210"


def test_reports_survive_a_legacy_malformed_work_config(client, login, container):
    legacy = make_profile("legacy", work_config={"mode": "fixed", "fixed": {"start_time": "9am", "end_time": "6pm"}})
    container.profiles_repo.create(legacy)

    login("root")
    res = client.get("/api/admin/reports/compliance?month=6&year=2025&limit=50")
    assert res.status_code == 200
    assert "legacy" in [row["user"]["id"] for row in res.get_json()["data"]]
    assert client.get("/api/admin/reports/compliance.csv?month=6&year=2025").status_code == 200


def test_admin_manages_holidays_and_everyone_can_read_them(client, login):
    login("root")
    res = client.post("/api/admin/holidays", json={"name": "Founders Day", "date": "2025-08-01", "departments": ["HR"]})
    assert res.status_code == 201
    holiday = res.get_json()
    assert holiday["departments"] == ["HR"]

    bad = client.post("/api/admin/holidays", json={"name": "Founders Day"})
    assert bad.status_code == 400
    assert bad.get_json() == {"error": "Date is required"}

    login("emp")
    assert client.get("/api/holidays?year=2025&department=Engineering").get_json() == []
    assert [h["name"] for h in client.get("/api/holidays?year=2025&department=HR").get_json()] == ["Founders Day"]
    assert client.get("/api/holidays?year=twenty").status_code == 400
    assert client.post("/api/admin/holidays", json={"name": "X", "date": "2025-08-02"}).status_code == 403

    login("root")
    assert client.delete(f"/api/admin/holidays/{holiday['id']}").get_json() == {"success": True}
    assert client.delete(f"/api/admin/holidays/{holiday['id']}").status_code == 404


def test_team_attendance_routes_follow_role_prefixes(client, login):
    login("emp")
    assert client.get("/api/manager/attendance").status_code == 403
    assert client.get("/api/hr/attendance").status_code == 403

    login("mgr")
    res = client.get("/api/manager/attendance?date=2025-06-02")
    assert res.status_code == 200
    assert [(r["user"]["id"], r["status"]) for r in res.get_json()] == [("emp", None)]
    assert client.get("/api/hr/attendance").status_code == 403

    login("hr")
    ids = {r["user"]["id"] for r in client.get("/api/hr/attendance?date=2025-06-02").get_json()}
    assert ids == {"emp", "mgr", "hr"}
    assert client.get("/api/manager/attendance").status_code == 403
