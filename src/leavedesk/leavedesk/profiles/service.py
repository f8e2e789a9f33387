from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, fields, replace
from datetime import date
from typing import Any, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import parse_date_field, parse_hhmm
from ..common.validators import identity_errors, raise_first, require_min_length, require_non_empty
from ..core.enums import Role, WorkMode
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import Profile, UserDetails
from .repository import ProfileRepository

logger = logging.getLogger(__name__)

# camelCase request keys of the admin user form -> user_details columns
_ADMIN_DETAIL_KEYS = {
    "personalEmail": "personal_email",
    "phone": "phone_number",
    "salary": "salary",
    "gender": "gender",
    "dob": "dob",
    "address": "address",
    "city": "city",
    "state": "state",
    "pincode": "pincode",
    "pan": "pan_number",
    "aadhaar": "aadhaar_number",
    "bankName": "bank_name",
    "accountNumber": "account_number",
    "ifsc": "ifsc_code",
}

_DETAIL_FIELDS = {f.name for f in fields(UserDetails)} - {"id"}
_DIGIT_FIELDS = {"phone_number", "pincode", "aadhaar_number", "account_number"}


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: str
    full_name: str
    role: Role
    department: Optional[str]


def _clean_details(values: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in values.items():
        if key not in _DETAIL_FIELDS:
            continue
        if key in _DIGIT_FIELDS and isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(int(value))
        if isinstance(value, str):
            value = value.strip() or None
        if key == "dob" and value:
            value = parse_date_field(value, "Date of birth") if isinstance(value, str) else value
        if key == "salary" and value is not None:
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise ValidationError("Salary must be a number")
        out[key] = value
    return out


def _clock_minutes(value: Any) -> Optional[int]:
    if not isinstance(value, str):
        return None
    try:
        clock = parse_hhmm(value)
    except ValueError:
        return None
    return clock.hour * 60 + clock.minute


def _work_days_error(work_days: Any) -> Optional[str]:
    if work_days is None:
        return None
    if not isinstance(work_days, list) or not all(
        isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6 for d in work_days
    ):
        return "Work days must be a list of weekdays between 0 (Sunday) and 6 (Saturday)"
    return None


def work_config_error(work_config: Any) -> Optional[str]:
    if not isinstance(work_config, dict) or not work_config.get("mode"):
        return "Working Time Configuration is required"

    if work_config["mode"] == WorkMode.FIXED.value:
        fixed = work_config.get("fixed") or {}
        if not isinstance(fixed, dict) or not fixed.get("start_time") or not fixed.get("end_time"):
            return "Start Time and End Time are required for Fixed Shift"
        starts, ends = _clock_minutes(fixed["start_time"]), _clock_minutes(fixed["end_time"])
        if starts is None or ends is None:
            return "Start Time and End Time must be in HH:MM format"
        if ends <= starts:
            return "End Time must be after Start Time"
        return _work_days_error(fixed.get("work_days"))

    if work_config["mode"] == WorkMode.FLEXIBLE.value:
        flexible = work_config.get("flexible") or {}
        if not isinstance(flexible, dict) or not flexible.get("daily_hours"):
            return "Daily Hours are required for Flexible/Part-time"
        hours = flexible["daily_hours"]
        try:
            valid = not isinstance(hours, bool) and 0 < float(hours) <= 24
        except (TypeError, ValueError):
            valid = False
        if not valid:
            return "Daily Hours must be a number between 0 and 24"
        return _work_days_error(flexible.get("work_days"))

    return "Unknown working time mode"


@dataclass(frozen=True)
class UserForm:
    """Admin create/update payload."""

    email: str
    full_name: str
    role: str
    password: Optional[str] = None
    username: Optional[str] = None
    employment_type: Optional[str] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    date_of_joining: Optional[str] = None
    reporting_managers: Any = None
    avatar_url: Optional[str] = None
    work_config: Any = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, body: dict[str, Any]) -> "UserForm":
        return cls(
            email=(body.get("email") or "").strip(),
            full_name=(body.get("fullName") or "").strip(),
            role=(body.get("role") or Role.EMPLOYEE.value),
            password=body.get("password") or None,
            username=body.get("username") or None,
            employment_type=body.get("employmentType") or None,
            designation=(body.get("designation") or "").strip() or None,
            department=(body.get("department") or "").strip() or None,
            date_of_joining=body.get("dateOfJoining") or None,
            reporting_managers=body.get("reportingManagers"),
            avatar_url=body.get("avatarUrl") or None,
            work_config=body.get("workConfig"),
            details={column: body.get(key) for key, column in _ADMIN_DETAIL_KEYS.items() if key in body},
        )

    def validate(self) -> None:
        """Raise the first validation error, in the order the form shows them."""

        errors = identity_errors(
            phone=self.details.get("phone_number"),
            pincode=self.details.get("pincode"),
            aadhaar=self.details.get("aadhaar_number"),
            pan=self.details.get("pan_number"),
        )
        if not self.designation:
            errors.append("Designation is required")
        if not isinstance(self.reporting_managers, list) or not self.reporting_managers:
            errors.append("At least one Reporting Manager is required")
        wc_error = work_config_error(self.work_config)
        if wc_error:
            errors.append(wc_error)
        raise_first(errors)

        require_non_empty(self.email, "Email")
        require_non_empty(self.full_name, "Full name")
        try:
            Role(self.role)
        except ValueError:
            raise ValidationError("Invalid role")

    def joining_date(self) -> Optional[date]:
        if not self.date_of_joining:
            return None
        return parse_date_field(self.date_of_joining, "Date of joining")


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def authenticate(self, email: str, password: str) -> SessionUser:
        profile = self._profiles.get_by_email((email or "").strip())
        if not profile:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(profile.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("User %s logged in", profile.id)
        return SessionUser(
            user_id=profile.id,
            full_name=profile.full_name,
            role=profile.role,
            department=profile.department,
        )


class ProfileService:
    """Use cases: manage users (admin) and self-service profile edits."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def get_profile(self, profile_id: str) -> Profile:
        profile = self._profiles.get_by_id(profile_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def get_user_view(self, user_id: Optional[str]) -> dict[str, Any]:
        if not user_id:
            raise ValidationError("User ID is required")
        profile = self._profiles.get_by_id(user_id)
        if not profile:
            raise NotFoundError("User not found")
        details = self._profiles.get_details(user_id)
        data = profile.to_public()
        data["details"] = details.to_dict() if details else {}
        return data

    def create_user(self, form: UserForm) -> str:
        form.validate()
        require_min_length(form.password or "", "Password", 6)

        if self._profiles.get_by_email(form.email):
            raise ValidationError("A user with this email address has already been registered")

        profile = Profile(
            id=str(uuid.uuid4()),
            email=form.email,
            username=form.username,
            password_hash=generate_password_hash(form.password),
            full_name=form.full_name,
            role=Role(form.role),
            department=form.department,
            designation=form.designation,
            employment_type=form.employment_type,
            date_of_joining=form.joining_date(),
            reporting_managers=tuple(str(m) for m in form.reporting_managers),
            avatar_url=form.avatar_url,
            work_config=dict(form.work_config),
        )
        self._profiles.create(profile)
        self._profiles.upsert_details(UserDetails(id=profile.id, **_clean_details(form.details)))
        logger.info("Created user %s (%s)", profile.id, profile.role.value)
        return profile.id

    def update_user(self, user_id: Optional[str], form: UserForm) -> None:
        form.validate()
        if not user_id:
            raise ValidationError("User ID is required")

        existing = self._profiles.get_by_id(user_id)
        if not existing:
            raise NotFoundError("User not found")

        other = self._profiles.get_by_email(form.email)
        if other and other.id != user_id:
            raise ValidationError("A user with this email address has already been registered")

        changes: dict[str, Any] = {
            "email": form.email,
            "username": form.username,
            "full_name": form.full_name,
            "role": Role(form.role),
            "employment_type": form.employment_type,
            "designation": form.designation,
            "department": form.department,
            "date_of_joining": form.joining_date(),
            "reporting_managers": [str(m) for m in form.reporting_managers],
            "avatar_url": form.avatar_url,
            "work_config": dict(form.work_config),
        }
        if form.password:
            require_min_length(form.password, "Password", 6)
            changes["password_hash"] = generate_password_hash(form.password)

        self._profiles.update(user_id, changes)
        self._profiles.upsert_details(UserDetails(id=user_id, **_clean_details(form.details)))
        logger.info("Updated user %s", user_id)

    def delete_user(self, *, current_user_id: str, user_id: Optional[str]) -> None:
        if not user_id:
            raise ValidationError("User ID is required")
        if user_id == current_user_id:
            raise ValidationError("You cannot delete your own account")
        if not self._profiles.delete_by_id(user_id):
            raise NotFoundError("User not found")
        logger.info("Deleted user %s", user_id)

    def update_managers(self, user_id: Optional[str], manager_ids: Any) -> None:
        if not user_id:
            raise ValidationError("User ID is required")
        if manager_ids is None:
            manager_ids = []
        if not isinstance(manager_ids, list):
            raise ValidationError("managerIds must be a list")
        if not self._profiles.update(user_id, {"reporting_managers": [str(m) for m in manager_ids]}):
            raise NotFoundError("User not found")

    def update_own_profile(self, *, current_user_id: str, current_role: Role, body: dict[str, Any]) -> None:
        """Self-service edit of public profile fields and personal details.

        Admins may edit anyone; other roles only themselves.
        """

        target_id = str(body.get("userId") or current_user_id)
        if target_id != current_user_id and current_role != Role.ADMIN:
            raise AuthorizationError("You can only update your own profile")

        raise_first(
            identity_errors(
                phone=body.get("phone_number"),
                pincode=body.get("pincode"),
                aadhaar=body.get("aadhaar_number"),
                pan=body.get("pan_number"),
            )
        )

        self.get_profile(target_id)

        public = {k: body[k] for k in ("full_name", "avatar_url") if k in body}
        if "full_name" in public:
            public["full_name"] = require_non_empty(public["full_name"], "Full name")
        if public:
            self._profiles.update(target_id, public)

        provided = _clean_details({k: v for k, v in body.items() if k in _DETAIL_FIELDS})
        if provided:
            current = self._profiles.get_details(target_id) or UserDetails(id=target_id)
            self._profiles.upsert_details(replace(current, **provided))
