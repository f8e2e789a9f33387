from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_float, db_cursor, dump_json, fetchall, fetchone, load_json
from .model import Profile, UserDetails
from .repository import ProfileRepository

_PROFILE_COLUMNS = """
    id, email, username, password_hash, full_name, role, department, designation,
    employment_type, date_of_joining, reporting_managers, avatar_url, work_config, created_at
"""

_UPDATABLE = {
    "email",
    "username",
    "password_hash",
    "full_name",
    "role",
    "department",
    "designation",
    "employment_type",
    "date_of_joining",
    "reporting_managers",
    "avatar_url",
    "work_config",
}

_JSON_COLUMNS = {"reporting_managers", "work_config"}

_DETAIL_COLUMNS = (
    "personal_email",
    "phone_number",
    "salary",
    "gender",
    "dob",
    "address",
    "city",
    "state",
    "pincode",
    "pan_number",
    "aadhaar_number",
    "bank_name",
    "account_number",
    "ifsc_code",
)


def _to_profile(r: dict) -> Profile:
    return Profile(
        id=str(r["id"]),
        email=r["email"],
        username=r.get("username"),
        password_hash=r.get("password_hash") or "",
        full_name=r["full_name"],
        role=Role(r["role"]),
        department=r.get("department"),
        designation=r.get("designation"),
        employment_type=r.get("employment_type"),
        date_of_joining=as_date(r.get("date_of_joining")),
        reporting_managers=tuple(load_json(r.get("reporting_managers"), []) or ()),
        avatar_url=r.get("avatar_url"),
        work_config=load_json(r.get("work_config"), {}) or {},
        created_at=r.get("created_at"),
    )


def _db_value(column: str, value: Any) -> Any:
    if column in _JSON_COLUMNS:
        return dump_json(list(value) if isinstance(value, tuple) else value)
    if isinstance(value, Role):
        return value.value
    return value


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PROFILE_COLUMNS} FROM profiles WHERE id=%s", (profile_id,))
            r = fetchone(cur)
            return _to_profile(r) if r else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PROFILE_COLUMNS} FROM profiles WHERE LOWER(email)=LOWER(%s)", (email,))
            r = fetchone(cur)
            return _to_profile(r) if r else None

    def list_profiles(
        self,
        *,
        exclude_role: Optional[Role] = None,
        department: Optional[str] = None,
    ) -> Sequence[Profile]:
        clauses = ["1=1"]
        params: list[object] = []
        if exclude_role is not None:
            clauses.append("role<>%s")
            params.append(exclude_role.value)
        if department is not None:
            clauses.append("department=%s")
            params.append(department)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PROFILE_COLUMNS} FROM profiles WHERE {' AND '.join(clauses)} ORDER BY full_name",
                tuple(params),
            )
            return [_to_profile(r) for r in fetchall(cur)]

    def list_department_values(self) -> Sequence[Optional[str]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department FROM profiles")
            return [r.get("department") for r in fetchall(cur)]

    def create(self, profile: Profile) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles(id, email, username, password_hash, full_name, role, department,
                                     designation, employment_type, date_of_joining, reporting_managers,
                                     avatar_url, work_config)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    profile.id,
                    profile.email,
                    profile.username,
                    profile.password_hash,
                    profile.full_name,
                    profile.role.value,
                    profile.department,
                    profile.designation,
                    profile.employment_type,
                    profile.date_of_joining,
                    dump_json(list(profile.reporting_managers)),
                    profile.avatar_url,
                    dump_json(profile.work_config),
                ),
            )
            return profile.id

    def update(self, profile_id: str, fields: dict[str, Any]) -> bool:
        columns = [c for c in fields if c in _UPDATABLE]
        if not columns:
            return False

        assignments = ", ".join(f"{c}=%s" for c in columns)
        params = [_db_value(c, fields[c]) for c in columns]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE profiles SET {assignments} WHERE id=%s", (*params, profile_id))
            # rowcount is 0 when values are unchanged, so check existence instead.
            cur.execute("SELECT 1 AS ok FROM profiles WHERE id=%s", (profile_id,))
            return fetchone(cur) is not None

    def delete_by_id(self, profile_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM profiles WHERE id=%s", (profile_id,))
            return cur.rowcount > 0

    def get_details(self, profile_id: str) -> Optional[UserDetails]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT id, {', '.join(_DETAIL_COLUMNS)} FROM user_details WHERE id=%s", (profile_id,))
            r = fetchone(cur)
            if not r:
                return None
            values = {c: r.get(c) for c in _DETAIL_COLUMNS}
            values["salary"] = as_float(values["salary"])
            values["dob"] = as_date(values["dob"])
            return UserDetails(id=str(r["id"]), **values)

    def upsert_details(self, details: UserDetails) -> None:
        values = [getattr(details, c) for c in _DETAIL_COLUMNS]
        updates = ", ".join(f"{c}=VALUES({c})" for c in _DETAIL_COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO user_details(id, {', '.join(_DETAIL_COLUMNS)})
                VALUES(%s, {', '.join(['%s'] * len(_DETAIL_COLUMNS))})
                ON DUPLICATE KEY UPDATE {updates}
                """,
                (details.id, *values),
            )
