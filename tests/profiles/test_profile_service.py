import pytest

from src.leavedesk.leavedesk.core.enums import Role
from src.leavedesk.leavedesk.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.leavedesk.leavedesk.profiles.model import UserDetails, WorkConfig
from src.leavedesk.leavedesk.profiles.service import AuthService, ProfileService, UserForm
from tests.fakes import InMemoryProfiles, make_profile


def _payload(**overrides):
    body = {
        "email": "new.hire@example.com",
        "password": "welcome1",
        "fullName": "New Hire",
        "role": "employee",
        "designation": "Analyst",
        "department": "Engineering",
        "phone": "9876543210",
        "pincode": "560001",
        "reportingManagers": ["mgr"],
        "workConfig": {"mode": "flexible", "flexible": {"daily_hours": 8}},
    }
    body.update(overrides)
    return body


def test_work_config_expected_minutes():
    assert WorkConfig.from_json({"mode": "flexible", "flexible": {"daily_hours": 7.5}}).expected_daily_minutes == 450
    fixed = WorkConfig.from_json({"mode": "fixed", "fixed": {"start_time": "10:00", "end_time": "18:30", "work_days": [1, 2, 3]}})
    assert fixed.expected_daily_minutes == 510
    assert fixed.work_days == (1, 2, 3)
    assert WorkConfig.from_json(None).expected_daily_minutes == 540



@pytest.mark.parametrize(
    "stored",
    [
        {"mode": "fixed", "fixed": {"start_time": "9am", "end_time": "6pm"}},
        {"mode": "fixed", "fixed": {"start_time": "18:00", "end_time": "09:00"}},
        {"mode": "flexible", "flexible": {"daily_hours": "lots"}},
        {"mode": "fixed", "fixed": "09:00-18:00"},
        "not a dict",
    ],
)
def test_malformed_stored_work_config_falls_back_to_defaults(stored):
    work = WorkConfig.from_json(stored)
    assert work.expected_daily_minutes == 540
    assert work.work_days == (1, 2, 3, 4, 5)


def test_stored_work_days_outside_the_week_are_dropped():
    work = WorkConfig.from_json({"mode": "flexible", "flexible": {"daily_hours": 6, "work_days": [0, 6, 7, "x"]}})
    assert work.work_days == (0, 6)


def test_authenticate_checks_password_hash():
    repo = InMemoryProfiles(make_profile("emp", password="right-pass"))
    auth = AuthService(repo)

    user = auth.authenticate("EMP@example.com", "right-pass")
    assert user.user_id == "emp"
    assert user.role == Role.EMPLOYEE

    with pytest.raises(AuthenticationError):
        auth.authenticate("emp@example.com", "wrong")
    with pytest.raises(AuthenticationError):
        auth.authenticate("nobody@example.com", "right-pass")


def test_create_user_stores_profile_and_details():
    repo = InMemoryProfiles(make_profile("mgr", role=Role.MANAGER))
    svc = ProfileService(repo)

    new_id = svc.create_user(UserForm.from_payload(_payload()))

    created = repo.get_by_id(new_id)
    assert created.full_name == "New Hire"
    assert created.reporting_managers == ("mgr",)
    assert created.work.expected_daily_minutes == 480
    assert repo.get_details(new_id).phone_number == "9876543210"


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"phone": "12345"}, "Phone number must be exactly 10 digits"),
        ({"pincode": "12"}, "Pincode must be exactly 6 digits"),
        ({"designation": ""}, "Designation is required"),
        ({"reportingManagers": []}, "At least one Reporting Manager is required"),
        ({"workConfig": None}, "Working Time Configuration is required"),
        ({"workConfig": {"mode": "fixed", "fixed": {"start_time": "09:00"}}}, "Start Time and End Time are required"),
        ({"workConfig": {"mode": "flexible", "flexible": {}}}, "Daily Hours are required"),
        ({"workConfig": {"mode": "fixed", "fixed": {"start_time": "9am", "end_time": "6pm"}}}, "HH:MM format"),
        ({"workConfig": {"mode": "fixed", "fixed": {"start_time": "18:00", "end_time": "09:00"}}}, "End Time must be after"),
        ({"workConfig": {"mode": "flexible", "flexible": {"daily_hours": "eight"}}}, "between 0 and 24"),
        ({"workConfig": {"mode": "flexible", "flexible": {"daily_hours": -4}}}, "between 0 and 24"),
        ({"workConfig": {"mode": "flexible", "flexible": {"daily_hours": 8, "work_days": [1, 9]}}}, "Work days must be"),
        ({"workConfig": {"mode": "fixed", "fixed": {"start_time": "09:00", "end_time": "18:00", "work_days": "1-5"}}}, "Work days must be"),
        ({"workConfig": {"mode": "night"}}, "Unknown working time mode"),
        ({"role": "superuser"}, "Invalid role"),
        ({"password": "123"}, "at least 6 characters"),
    ],
)
def test_create_user_validation(overrides, message):
    svc = ProfileService(InMemoryProfiles())
    with pytest.raises(ValidationError, match=message):
        svc.create_user(UserForm.from_payload(_payload(**overrides)))


def test_phone_error_wins_over_missing_designation():
    svc = ProfileService(InMemoryProfiles())
    with pytest.raises(ValidationError, match="Phone number"):
        svc.create_user(UserForm.from_payload(_payload(phone="1", designation="")))


def test_create_user_rejects_duplicate_email():
    repo = InMemoryProfiles(make_profile("taken"))
    svc = ProfileService(repo)
    with pytest.raises(ValidationError, match="already been registered"):
        svc.create_user(UserForm.from_payload(_payload(email="TAKEN@example.com")))


def test_update_user_keeps_password_when_blank():
    original = make_profile("emp")
    repo = InMemoryProfiles(original)
    svc = ProfileService(repo)

    svc.update_user("emp", UserForm.from_payload(_payload(email="emp@example.com", password="", fullName="Renamed")))

    assert repo.get_by_id("emp").full_name == "Renamed"
    assert repo.get_by_id("emp").password_hash == original.password_hash


def test_get_user_view_merges_details():
    repo = InMemoryProfiles(make_profile("emp"))
    svc = ProfileService(repo)
    assert svc.get_user_view("emp")["details"] == {}

    repo.upsert_details(UserDetails(id="emp", city="Pune"))
    assert svc.get_user_view("emp")["details"]["city"] == "Pune"

    with pytest.raises(ValidationError):
        svc.get_user_view(None)
    with pytest.raises(NotFoundError):
        svc.get_user_view("ghost")


def test_delete_user_refuses_self_and_unknown():
    repo = InMemoryProfiles(make_profile("admin", role=Role.ADMIN), make_profile("emp"))
    svc = ProfileService(repo)

    with pytest.raises(ValidationError):
        svc.delete_user(current_user_id="admin", user_id="admin")
    with pytest.raises(NotFoundError):
        svc.delete_user(current_user_id="admin", user_id="ghost")

    svc.delete_user(current_user_id="admin", user_id="emp")
    assert repo.get_by_id("emp") is None


def test_update_managers_replaces_list():
    repo = InMemoryProfiles(make_profile("emp", managers=("old",)))
    svc = ProfileService(repo)

    svc.update_managers("emp", ["m1", "m2"])
    assert repo.get_by_id("emp").reporting_managers == ("m1", "m2")

    with pytest.raises(ValidationError):
        svc.update_managers(None, [])


def test_update_own_profile_merges_details_and_guards_other_users():
    repo = InMemoryProfiles(make_profile("emp"), make_profile("other"))
    repo.upsert_details(UserDetails(id="emp", city="Pune", phone_number="9876543210"))
    svc = ProfileService(repo)

    svc.update_own_profile(current_user_id="emp", current_role=Role.EMPLOYEE, body={"full_name": "Emp Two", "state": "MH"})

    assert repo.get_by_id("emp").full_name == "Emp Two"
    details = repo.get_details("emp")
    assert (details.city, details.state, details.phone_number) == ("Pune", "MH", "9876543210")

    with pytest.raises(AuthorizationError):
        svc.update_own_profile(current_user_id="emp", current_role=Role.EMPLOYEE, body={"userId": "other"})
    with pytest.raises(ValidationError, match="Aadhaar"):
        svc.update_own_profile(current_user_id="emp", current_role=Role.EMPLOYEE, body={"aadhaar_number": "12"})

    svc.update_own_profile(current_user_id="emp", current_role=Role.ADMIN, body={"userId": "other", "avatar_url": "x.png"})
    assert repo.get_by_id("other").avatar_url == "x.png"


def test_numeric_phone_and_pincode_are_accepted_and_stored_as_text():
    repo = InMemoryProfiles(make_profile("mgr", role=Role.MANAGER))
    svc = ProfileService(repo)

    new_id = svc.create_user(UserForm.from_payload(_payload(phone=9876543210, pincode=560001)))

    details = repo.get_details(new_id)
    assert (details.phone_number, details.pincode) == ("9876543210", "560001")

    svc.update_own_profile(current_user_id=new_id, current_role=Role.EMPLOYEE, body={"phone_number": 9123456780})
    assert repo.get_details(new_id).phone_number == "9123456780"
