"""Example: use the service layer directly (no Flask).

Prints this month's five worst compliance rows and the demo employee's leave balance.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.leavedesk.leavedesk.container import build_container
from src.leavedesk.leavedesk.core.enums import Role


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    today = date.today()
    page = container.compliance_report_service.page(month=today.month, year=today.year, limit=5)
    for row in page.rows:
        print(row.user["full_name"], row.absent, row.shortfall_minutes, round(row.total_score, 1))

    employee = container.profiles_repo.get_by_email("employee@example.com")
    if employee:
        print(container.leave_service.balance(current_user_id=employee.id, current_role=Role.EMPLOYEE))


if __name__ == "__main__":
    main()
