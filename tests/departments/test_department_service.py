import pytest

from src.leavedesk.leavedesk.core.exceptions import ValidationError
from src.leavedesk.leavedesk.departments.model import DepartmentPolicy, LeaveLimit
from src.leavedesk.leavedesk.departments.service import DepartmentService, dedupe_leave_types
from tests.fakes import InMemoryLimits, InMemoryPolicies, InMemoryProfiles, make_profile


def _service(limits=(), policies=(), profiles=()):
    return DepartmentService(InMemoryLimits(*limits), InMemoryPolicies(*policies), InMemoryProfiles(*profiles))


def test_departments_merge_limits_and_profiles():
    svc = _service(
        limits=[LeaveLimit("Engineering", "Casual", 12), LeaveLimit(" Sales ", "Casual", 10)],
        profiles=[
            make_profile("a", department="Engineering"),
            make_profile("b", department="HR"),
            make_profile("c", department=None),
            make_profile("d", department="   "),
        ],
    )
    assert svc.list_departments() == ["Engineering", "HR", "Sales"]


def test_save_limits_deletes_missing_and_upserts_listed():
    limits = InMemoryLimits(
        LeaveLimit("Engineering", "Casual", 12),
        LeaveLimit("Engineering", "Sick", 10),
        LeaveLimit("HR", "Sick", 8),
    )
    svc = DepartmentService(limits, InMemoryPolicies(), InMemoryProfiles())

    saved = svc.save_limits(
        "Engineering",
        [{"leave_type": "Casual", "limit_days": 15, "color": "#fff"}, {"leave_type": "Earned", "limit_days": 5, "is_paid": False}],
    )

    assert [(l.leave_type, l.limit_days, l.is_paid) for l in saved] == [("Casual", 15.0, True), ("Earned", 5.0, False)]
    assert limits.get_limit("Engineering", "Sick") is None
    assert limits.get_limit("HR", "Sick") is not None


class _FailingLimits(InMemoryLimits):
    def replace_department_limits(self, department, limits):
        raise RuntimeError("write failed")


def test_save_limits_is_a_single_all_or_nothing_write():
    original = [LeaveLimit("Engineering", "Casual", 12), LeaveLimit("Engineering", "Sick", 10)]

    failing = _FailingLimits(*original)
    svc = DepartmentService(failing, InMemoryPolicies(), InMemoryProfiles())
    with pytest.raises(RuntimeError):
        svc.save_limits("Engineering", [{"leave_type": "Casual", "limit_days": 15}])
    assert failing.rows == original

    limits = InMemoryLimits(*original)
    svc = DepartmentService(limits, InMemoryPolicies(), InMemoryProfiles())
    with pytest.raises(ValidationError):
        svc.save_limits("Engineering", [{"leave_type": "Casual", "limit_days": 15}, {"leave_type": "Sick", "limit_days": -1}])
    assert limits.rows == original

@pytest.mark.parametrize(
    "department, payload",
    [(None, []), ("Engineering", None), ("Engineering", [{"limit_days": 3}]), ("Engineering", [{"leave_type": "X", "limit_days": -1}])],
)
def test_save_limits_rejects_bad_input(department, payload):
    with pytest.raises(ValidationError):
        _service().save_limits(department, payload)


def test_get_limits_requires_department():
    with pytest.raises(ValidationError, match="Department is required"):
        _service().get_limits(None)


def test_leave_types_dedupe_keeps_first_order_last_values():
    rows = [
        LeaveLimit("Engineering", "Casual", 12, color="blue"),
        LeaveLimit("Engineering", "Sick", 10),
        LeaveLimit("HR", "Casual", 8, color="red"),
    ]
    deduped = dedupe_leave_types(rows)
    assert [t.leave_type for t in deduped] == ["Casual", "Sick"]
    assert deduped[0].color == "red"

    svc = _service(limits=rows)
    assert len(svc.leave_types("all")) == 2
    assert [t.department for t in svc.leave_types("HR")] == ["HR"]


def test_policies_default_for_departments_without_a_row():
    svc = _service(
        policies=[DepartmentPolicy("Engineering", True, "https://example.com/eng.pdf")],
        profiles=[make_profile("a", department="Engineering"), make_profile("b", department="Sales")],
    )
    policies = svc.list_policies()
    assert [p.to_dict() for p in policies] == [
        {"department": "Engineering", "is_enabled": True, "policy_url": "https://example.com/eng.pdf"},
        {"department": "Sales", "is_enabled": False, "policy_url": ""},
    ]

    svc.save_policy({"department": "Sales", "is_enabled": True, "policy_url": " /sales.pdf "})
    assert svc.list_policies()[1].policy_url == "/sales.pdf"
